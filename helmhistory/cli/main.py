"""Main CLI application for helmhistory."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.helm_adapter import HelmAdapter
from ..config import get_settings
from ..errors import HelmError
from ..logging import get_logger, setup_logging
from ..steps.history_step import DISPLAY_NAME, HelmHistoryStep, check_release_name

app = typer.Typer(
    name="helmhistory",
    help="Helm release history lookup for CI build steps",
    add_completion=False
)

console = Console()
logger = get_logger(__name__)


@app.command()
def run(
    release_name: str = typer.Argument(..., help="Helm release to inspect"),
    revision: Optional[str] = typer.Option(
        None, "--revision", "-r", help="Revision selected as rollback target"
    ),
    kubeconfig: Optional[str] = typer.Option(
        None, "--kubeconfig", "-k", help="Kubeconfig file passed to helm"
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Namespace of the release"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Seconds to wait for helm (0 waits forever)"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Fail when helm fails instead of reporting no revisions"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging"
    ),
) -> None:
    """Run the helm history build step."""
    _require_release_name(release_name)

    if verbose:
        setup_logging("DEBUG", force=True)

    settings = get_settings()
    adapter = _make_adapter(namespace, timeout, strict)
    step = HelmHistoryStep(
        release_name=release_name,
        revision=revision,
        kubeconfig_path=kubeconfig or settings.kubeconfig_path
    )

    console.print(f"[bold blue]helmhistory[/bold blue] - {DISPLAY_NAME}")
    console.print(f"Namespace: {escape(adapter.namespace)}")
    console.print(f"Kubeconfig: {escape(step.kubeconfig_path or 'default')}")
    console.print()

    try:
        step.perform(adapter, listener=_echo)
    except HelmError as e:
        console.print(f"[red]Helm history failed: {escape(str(e))}[/red]")
        logger.error("Build step failed", release_name=release_name, error=str(e))
        raise typer.Exit(1)


@app.command()
def revisions(
    release_name: str = typer.Argument(..., help="Helm release to inspect"),
    kubeconfig: Optional[str] = typer.Option(
        None, "--kubeconfig", "-k", help="Kubeconfig file passed to helm"
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Namespace of the release"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Seconds to wait for helm (0 waits forever)"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Fail when helm fails instead of reporting no revisions"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print revisions as a JSON array"
    ),
) -> None:
    """List the revisions of a release."""
    _require_release_name(release_name)

    settings = get_settings()
    adapter = _make_adapter(namespace, timeout, strict)

    try:
        found = adapter.list_revisions(release_name, kubeconfig or settings.kubeconfig_path)
    except HelmError as e:
        console.print(f"[red]Helm history failed: {escape(str(e))}[/red]")
        logger.error("Revision listing failed", release_name=release_name, error=str(e))
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(found))
        return

    if not found:
        console.print(f"[yellow]No revisions found for release '{escape(release_name)}'.[/yellow]")
        return

    table = Table(title=f"Revisions of {escape(release_name)}")
    table.add_column("#", style="cyan")
    table.add_column("Revision", style="green")

    for position, value in enumerate(found, start=1):
        table.add_row(str(position), escape(value))

    console.print(table)


@app.command()
def check(
    release_name: str = typer.Argument("", help="Release name to validate"),
) -> None:
    """Validate a release name the way the build step form does."""
    result = check_release_name(release_name)

    if result.is_ok:
        console.print("✅ Release name: [green]OK[/green]")
        return

    console.print(f"❌ Release name: [red]{escape(result.message or '')}[/red]")
    raise typer.Exit(1)


@app.command()
def health() -> None:
    """Check that helm is installed and runnable."""
    console.print("[bold blue]helmhistory[/bold blue] - Health Check")
    console.print()

    adapter = HelmAdapter()
    if adapter.health_check():
        console.print(f"✅ Helm ({escape(adapter.helm_path)}): [green]OK[/green]")
    else:
        console.print(f"❌ Helm ({escape(adapter.helm_path)}): [red]FAILED[/red]")
        raise typer.Exit(1)


def _make_adapter(namespace: Optional[str], timeout: Optional[float], strict: bool) -> HelmAdapter:
    """Build an adapter with CLI overrides on top of the settings."""
    return HelmAdapter(
        namespace=namespace,
        timeout=timeout,
        strict=True if strict else None
    )


def _require_release_name(release_name: str) -> None:
    result = check_release_name(release_name)
    if not result.is_ok:
        console.print(f"[red]{escape(result.message or '')}[/red]")
        raise typer.Exit(2)


def _echo(line: str) -> None:
    console.print(line, markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    app()
