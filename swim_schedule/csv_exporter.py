"""CSV exporter for projected heat schedules."""

import csv
import logging
from pathlib import Path

from .dtos import ProjectedHeatRow
from .types import ProjectionResult

logger = logging.getLogger(__name__)

FIELDNAMES = list(ProjectedHeatRow.model_fields.keys())


def result_to_rows(result: ProjectionResult) -> list[ProjectedHeatRow]:
    return [ProjectedHeatRow.from_projected(p) for p in result.heats]


def export_schedule_csv(result: ProjectionResult, output_path: str | Path) -> int:
    """
    Write the visible projected heats to a CSV file.

    Args:
        result: The projection to export
        output_path: Path for the output CSV file

    Returns:
        Number of heat rows written
    """
    rows = result_to_rows(result)

    with open(output_path, "w", encoding="utf-8", newline="") as file:
        writer = csv.DictWriter(file, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow(row.to_csv_dict())

    logger.info(f"Schedule CSV exported to {output_path} ({len(rows)} heats)")
    return len(rows)
