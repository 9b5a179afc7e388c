"""Command: login-service serve - Run the HTTP server."""

import typer
import uvicorn


def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    uvicorn.run(
        "login_service.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )
