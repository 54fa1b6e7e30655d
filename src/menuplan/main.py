"""
Menuplan - CLI Entry Point.

Usage:
    menuplan generate --person Jessica   Generate and save one week
    menuplan couple                      Preview both weeks, synced on shared meals
    menuplan couple --commit             ...and save them together
    menuplan sync-offers                 Refresh store offers (runs in the foreground)
    menuplan status                      Show plans, offers and sync status
    menuplan health                      Check configuration
    menuplan serve                       Start the web API
"""

import asyncio

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

from menuplan.models import DAYS, SLOTS, Person, WeeklyPlan

app = typer.Typer(
    name="menuplan",
    help="Menuplan - weekly meal plans for the household.",
    add_completion=False,
)
console = Console()


def _prepare(log_prompts: bool, verbose: bool) -> None:
    from menuplan.llm.prompt_logger import enable_prompt_logging
    from menuplan.logging_setup import setup_logging

    setup_logging(verbose=verbose)
    if log_prompts:
        enable_prompt_logging(True)
        console.print("[dim]Prompt logging enabled. Check prompt_logs/ afterwards.[/dim]")


def _report_prompt_logs() -> None:
    from menuplan.llm.prompt_logger import get_session_log_dir

    log_dir = get_session_log_dir()
    if log_dir:
        console.print(f"[dim]Prompts logged to: {log_dir}[/dim]")


def _service():
    from menuplan.planning import PlanService
    from menuplan.store import JsonStateStore

    return PlanService(JsonStateStore())


def _plan_table(title: str, plan: WeeklyPlan, service) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Day", style="bold")
    for slot in SLOTS:
        table.add_column(slot.value)
    table.add_column("Training")

    for day in DAYS:
        daily = plan.get(day)
        if daily is None:
            table.add_row(day, *["-"] * len(SLOTS), "")
            continue
        cells = []
        for slot in SLOTS:
            details = daily.get_details(slot)
            option = service.catalog.get(daily.get_slot(slot))
            name = (details.name if details and details.name else None) or (option.name if option else "-")
            cells.append(name)
        table.add_row(day, *cells, "yes" if daily.training else "")
    return table


@app.command()
def generate(
    person: Person = typer.Option(Person.MICHAEL, "--person", "-p", help="Whose week to generate"),
    save: bool = typer.Option(True, "--save/--no-save", help="Persist the generated plan"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all prompts to prompt_logs/"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate one person's week."""
    _prepare(log_prompts, verbose)
    service = _service()

    with Live(Spinner("dots", text=f"Planning {person.value}'s week..."), console=console, transient=True):
        plan = asyncio.run(service.generate_plan(person))

    console.print(_plan_table(f"{person.value}", plan, service))
    _report_prompt_logs()
    if save:
        service.save_plan(person, plan)
        console.print("[green]Plan saved.[/green]")


@app.command()
def couple(
    commit: bool = typer.Option(False, "--commit", "-c", help="Save both plans"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all prompts to prompt_logs/"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate both weeks and align dinners and weekend lunches."""
    _prepare(log_prompts, verbose)
    service = _service()

    with Live(Spinner("dots", text="Planning both weeks..."), console=console, transient=True):
        plan_a, plan_b = asyncio.run(service.generate_couple_preview())

    console.print(_plan_table(service.couple_sync.person_a.value, plan_a, service))
    console.print(_plan_table(service.couple_sync.person_b.value, plan_b, service))
    _report_prompt_logs()

    if commit:
        service.commit_couple_plans(plan_a, plan_b)
        console.print("[green]Both plans saved.[/green]")
    else:
        console.print("[dim]Preview only. Use --commit to save.[/dim]")


@app.command("sync-offers")
def sync_offers(
    force: bool = typer.Option(False, "--force", "-f", help="Run even if another sync looks active"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Refresh the active offers from the store flyers."""
    from menuplan.offers import OfferExtractor, OfferSyncJob

    _prepare(False, verbose)
    service = _service()
    job = OfferSyncJob(service.store, OfferExtractor(service.engine), stale_after=0 if force else None)

    if not job.try_begin():
        console.print("[yellow]A sync is already running.[/yellow] Use --force to take over.")
        raise typer.Exit(1)

    with Live(Spinner("dots", text="Syncing offers..."), console=console, transient=True):
        asyncio.run(job.run())

    status = job.get_status()
    color = "green" if status.state.value == "success" else "red"
    console.print(f"[{color}]{status.state.value}[/{color}] {status.message}")
    if status.state.value != "success":
        raise typer.Exit(1)


@app.command()
def status() -> None:
    """Show saved plans, offers and the sync status."""
    from menuplan.store import JsonStateStore

    state = JsonStateStore().load_state()
    for person in Person:
        plan = state.profile(person).plan
        filled = sum(1 for day in DAYS if day in plan)
        console.print(f"[bold]{person.value}[/bold]: {filled}/7 days planned")
    console.print(f"Pantry items: {len(state.pantry_items)}")
    console.print(f"Active offers: {len(state.active_offers)} (updated {state.last_offer_update or 'never'})")
    console.print(f"Sync: {state.sync_status.state.value} {state.sync_status.message}")


@app.command()
def health() -> None:
    """Check configuration and the catalog."""
    from menuplan.catalog import CatalogIncompleteError, load_catalog
    from menuplan.config import get_settings

    console.print("\n[bold]Menuplan Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("[green]OK[/green] Configuration loaded")
        console.print(f"   Environment: {settings.menuplan_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Data file: {settings.data_file_path}")

        if settings.google_api_key:
            console.print("[green]OK[/green] Google API key configured")
        else:
            console.print("[yellow]WARN[/yellow] GOOGLE_API_KEY missing; plans will come from the local fallback")

        if settings.ollama_model:
            console.print(f"[green]OK[/green] Local provider: {settings.ollama_model} at {settings.ollama_base_url}")
        else:
            console.print("[dim]INFO[/dim] No local provider configured")

        catalog = load_catalog(settings.catalog_path, legacy_suffix_matching=settings.legacy_suffix_matching)
        catalog.validate_complete()
        console.print(f"[green]OK[/green] Catalog complete ({len(catalog)} options)")

        console.print("\n[green]All checks passed![/green]")

    except CatalogIncompleteError as e:
        console.print(f"\n[red]FAIL {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        console.print("[dim]Check your .env file and catalog path.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from menuplan import __version__

    console.print(f"Menuplan version {__version__}")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log all prompts to prompt_logs/"),
) -> None:
    """Start the web API server."""
    import os

    import uvicorn

    _prepare(log_prompts, False)
    actual_port = int(os.environ.get("PORT", port))

    console.print(
        Panel.fit(
            f"[bold green]Menuplan API[/bold green]\nhttp://localhost:{actual_port}\n[dim]Press Ctrl+C to stop[/dim]",
            border_style="green",
        )
    )

    uvicorn.run(
        "menuplan.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
