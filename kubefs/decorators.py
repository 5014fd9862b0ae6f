"""Decorators for kubefs commands."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console
from rich.markup import escape

from kubefs.errors import FetchError, KubeFSError

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def handle_cluster_errors(func: Callable) -> Callable:
    """
    Decorator to handle common errors of commands that talk to a cluster.

    Centralizes error handling for:
    - FetchError: Cluster unreachable or request refused
    - KubeFSError: Any other kubefs failure
    - FileNotFoundError / PermissionError: Token files, dumps, mountpoints
    - ValueError: Invalid arguments (e.g. unknown resource kinds)
    - General exceptions: Unexpected errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except FetchError as e:
            console.print(f"[bold red]Error:[/bold red] Cannot fetch from cluster: {escape(str(e))}")
            if e.status_code in (401, 403):
                console.print("[yellow]Tip: Check the bearer token (--token, $KUBE_TOKEN or --token-file)[/yellow]")
            raise typer.Exit(code=1)
        except KubeFSError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)
        except FileNotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] File not found: {escape(str(e))}")
            raise typer.Exit(code=1)
        except PermissionError as e:
            console.print(f"[bold red]Error:[/bold red] Permission denied: {escape(str(e))}")
            raise typer.Exit(code=1)
        except ValueError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid input: {escape(str(e))}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

    return wrapper
