"""Consolidated CLI for the schedule solver tools using a plugin architecture."""

import typer

# Import CLI subcommands from plugins
from schedule_viewer.cli import app as viewer_app

# Create main application
app = typer.Typer(
    name="solver",
    help="Schedule solver viewing tools",
    no_args_is_help=True,
)

# Register plugin subcommands
app.add_typer(viewer_app, name="viewer", help="Watch and render solver jobs")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
