"""CLI entry-point: browse the catalog, generate content, run jobs, serve the API."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from rcb.catalog import build_product_source, resolve_products
from rcb.config import get_settings
from rcb.errors import ContentBuilderError, GenerationFailure, SourceUnavailable
from rcb.generate import build_generator
from rcb.jobs.models import JobStatus
from rcb.publish import DASHBOARD_LAYOUT, STOREFRONT_LAYOUT, ContentFileBuilder
from rcb.schemas.content import ContentConfig

app = typer.Typer(help="Riverpark Content Builder")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(None, help="Port (default from PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the dashboard API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("backend.main:app", host=host, port=port or settings.port, reload=reload)


@app.command()
def categories():
    """List catalog categories."""
    console = Console()
    source = build_product_source(get_settings())
    try:
        cats = asyncio.run(source.get_categories())
    except SourceUnavailable as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Categories")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Products", justify="right")
    for c in cats:
        table.add_row(str(c.id), c.name, str(c.product_count))
    console.print(table)


@app.command()
def products(
    category: list[str] = typer.Option(default=[], help="Category id (repeatable); all when omitted"),
):
    """List products for the given categories."""
    console = Console()
    source = build_product_source(get_settings())
    try:
        items = asyncio.run(resolve_products(source, category))
    except SourceUnavailable as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{len(items)} products")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Price", justify="right")
    for p in items:
        table.add_row(str(p.product_id), p.name, ", ".join(p.categories), f"{p.price:.2f}")
    console.print(table)


@app.command()
def generate(
    product_id: int = typer.Argument(..., help="Product id"),
    template: str = typer.Option("community-standard", help="Care template type"),
    family: str = typer.Option("community", help="Fish family group"),
    behavior: str = typer.Option("community-friendly", help="Fish behavior"),
    validation: str = typer.Option("moderate", help="strict | moderate | lenient"),
    output: str = typer.Option(None, help="Write both content files to this directory"),
    storefront: bool = typer.Option(False, "--storefront", help="Use species/ai-search file names"),
):
    """Generate content for one product and print it as JSON."""
    console = Console()
    settings = get_settings()
    source = build_product_source(settings)
    generator = build_generator(settings)
    try:
        config = ContentConfig(
            family=family, behavior=behavior, template_type=template, validation=validation
        )
    except ValueError as e:
        console.print(f"[red]Invalid content config: {e}[/red]")
        raise typer.Exit(2)

    async def _run():
        product = await source.get_product(product_id)
        if product is None:
            return None, None
        return product, await generator.generate(product, config)

    try:
        product, content = asyncio.run(_run())
    except (SourceUnavailable, GenerationFailure) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    if product is None:
        console.print(f"[red]Product {product_id} not found[/red]")
        raise typer.Exit(1)

    console.print_json(json.dumps(content.to_wire()))
    if output:
        builder = ContentFileBuilder(STOREFRONT_LAYOUT if storefront else DASHBOARD_LAYOUT)
        for path in builder.write(Path(output), content, product):
            console.print(f"Wrote {path}")


@app.command("run-job")
def run_job(
    category: list[str] = typer.Option(default=[], help="Category id (repeatable); all when omitted"),
    batch_size: int = typer.Option(25, min=1, help="Products per tick"),
    concurrent: int = typer.Option(5, min=1, help="Concurrent products within a tick"),
    template: str = typer.Option("community-standard", help="Care template type"),
    tick_interval: float = typer.Option(0.0, help="Seconds between ticks"),
):
    """Run one job in-process to completion with a live progress bar."""
    from rcb.services import build_services

    console = Console()
    settings = get_settings()
    try:
        config = ContentConfig(template_type=template)
    except ValueError as e:
        console.print(f"[red]Invalid content config: {e}[/red]")
        raise typer.Exit(2)

    async def _run():
        services = build_services(settings, tick_interval=tick_interval, start_delay=0.0)
        engine = services.engine
        job = await engine.create(category, batch_size, concurrent, config)
        console.print(f"Job [bold]{job.id}[/bold]: {job.progress.total} products")
        with engine.events.subscribe([job.id]) as sub, Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TextColumn("{task.fields[failed]} failed"),
            console=console,
        ) as progress:
            task = progress.add_task("Generating", total=job.progress.total or 1, failed=0)
            while not job.is_terminal:
                job = await sub.get()
                done = job.progress.completed + job.progress.failed
                progress.update(task, completed=done, failed=job.progress.failed)
        await engine.shutdown()
        return job

    try:
        job = asyncio.run(_run())
    except ContentBuilderError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    colour = "green" if job.status is JobStatus.COMPLETED else "red"
    console.print(
        f"[{colour}]{job.status.value}[/{colour}]: {job.progress.completed} succeeded, "
        f"{job.progress.failed} failed ({job.progress.percentage}%)"
    )
    if job.errors:
        table = Table(title="Errors")
        table.add_column("Product", justify="right")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Message")
        for err in job.errors:
            table.add_row(str(err.product_id), err.product_name, err.error_type, err.message)
        console.print(table)
    if job.status is not JobStatus.COMPLETED:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
