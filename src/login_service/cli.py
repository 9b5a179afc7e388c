"""Login service command line interface."""

import typer
from rich.console import Console

from login_service import __version__
from login_service.commands import keys, serve


console = Console()

app = typer.Typer(
    name="login-service",
    help="Manage and run the login service.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="keys")(keys.keys)
app.command(name="serve")(serve.serve)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """Login service CLI - signing keys and server."""
    if version:
        console.print(f"[bold cyan]login-service[/bold cyan] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
