"""Consolidated CLI for the swim meet tools."""

import typer

from swim_schedule.cli import app as schedule_app

# Create main application
app = typer.Typer(
    name="swimmeet",
    help="Swim meet heat schedule tools",
    no_args_is_help=True,
)

app.add_typer(schedule_app, name="schedule", help="Project and maintain the heat schedule")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
