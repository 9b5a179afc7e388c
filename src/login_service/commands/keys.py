"""Command: login-service keys - Generate token signing keys."""

from pathlib import Path

import typer
from rich.console import Console

from login_service.core.auth.backend import encode_key, generate_key_pair
from login_service.core.constants import RSA_KEY_SIZE


console = Console()

KEY_VARIABLES = (
    ("ACCESS_TOKEN_PRIVATE_KEY", "ACCESS_TOKEN_PUBLIC_KEY"),
    ("PASSWORD_RESET_PRIVATE_KEY", "PASSWORD_RESET_PUBLIC_KEY"),
)


def render_key_env(key_size: int = RSA_KEY_SIZE) -> str:
    """Generate one key pair per signed token class as .env lines.

    Args:
        key_size: RSA modulus size in bits

    Returns:
        Newline-separated ``NAME=value`` lines with base64-encoded PEM keys
    """
    lines: list[str] = []
    for private_name, public_name in KEY_VARIABLES:
        pair = generate_key_pair(key_size)
        lines.append(f"{private_name}={encode_key(pair.private_key)}")
        lines.append(f"{public_name}={encode_key(pair.public_key)}")
    return "\n".join(lines) + "\n"


def keys(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Append the variables to this file"
    ),
    key_size: int = typer.Option(
        RSA_KEY_SIZE, "--key-size", min=2048, help="RSA key size in bits"
    ),
) -> None:
    """Generate signing keys for access and password-reset tokens.

    Prints base64-encoded PEM keys as environment variable assignments.
    """
    env = render_key_env(key_size)

    if output is None:
        typer.echo(env, nl=False)
        return

    with output.open("a", encoding="utf-8") as f:
        f.write(env)
    console.print(f"[green]✓[/green] Signing keys written to [cyan]{output}[/cyan]")
