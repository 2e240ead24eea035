from datetime import date, datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from homeops.catalog import CategoryRegistry, TagRegistry
from homeops.config import Settings
from homeops.extraction import ExtractionCoordinator
from homeops.integrations.item_store import ItemStore, ItemStoreError
from homeops.models import ItemSnapshot, PurchaseDraft
from homeops.utils.logging import configure_logging
from homeops.warranty import (
    ClaimReason,
    ItemAggregator,
    SortOrder,
    WarrantyClock,
    compose_claim,
    schedule_for,
)

load_dotenv()

app = typer.Typer(no_args_is_help=True)


def _items_option():
    return typer.Option(
        Path("items.json"), "--items", "-i", help="JSON file holding the item collection"
    )


def _today_option():
    return typer.Option(
        None, "--today", help="Reference date (YYYY-MM-DD) instead of the current time"
    )


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context):
    """HomeOps warranty tracker."""
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        typer.echo(f"Error: invalid HOMEOPS_* setting: {e}", err=True)
        raise typer.Exit(code=1) from e
    configure_logging(settings.log_level)
    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings.from_env()


def _now(today: str | None) -> date | datetime:
    if today is None:
        return datetime.now()
    try:
        return date.fromisoformat(today)
    except ValueError as e:
        typer.echo(f"Error: invalid --today value {today!r}", err=True)
        raise typer.Exit(code=1) from e


def _load(items_path: Path) -> ItemSnapshot:
    try:
        return ItemStore(items_path).snapshot()
    except ItemStoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


def _read_text(path: Path) -> str:
    try:
        # OCR output may carry stray bytes; they must not stop extraction
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        typer.echo(f"Error reading {path}: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def scan(
    receipt: Path = typer.Argument(..., help="Text file with the OCR output of a receipt"),
):
    """Extract a purchase draft from receipt text."""
    draft = ExtractionCoordinator().extract(_read_text(receipt))
    if draft.is_empty:
        typer.echo("No fields could be extracted; enter the item manually.", err=True)
    typer.echo(draft.model_dump_json(indent=2))


@app.command()
def add(
    category: str = typer.Option(..., "--category", "-c", help="Item category"),
    months: int = typer.Option(..., "--months", "-m", help="Warranty duration in months"),
    name: str | None = typer.Option(None, "--name", "-n", help="Item name"),
    purchase_date: str | None = typer.Option(
        None, "--purchase-date", help="Purchase date (YYYY-MM-DD), defaults to today"
    ),
    price: str | None = typer.Option(None, "--price", help="Purchase price"),
    store: str | None = typer.Option(None, "--store", help="Store name"),
    location: str | None = typer.Option(None, "--location", help="Where the item is kept"),
    tags: list[str] | None = typer.Option(None, "--tag", "-t", help="Tag (repeatable)"),
    favorite: bool = typer.Option(False, "--favorite", help="Mark as favorite"),
    from_receipt: Path | None = typer.Option(
        None, "--from-receipt", "-r", help="Prefill fields from receipt text"
    ),
    items: Path = _items_option(),
):
    """Add an item, optionally prefilled from a scanned receipt."""
    draft = PurchaseDraft()
    if from_receipt is not None:
        draft = ExtractionCoordinator().extract(_read_text(from_receipt))
        typer.echo(f"Prefilled from receipt: {draft.model_dump_json(exclude_none=True)}")

    registry = CategoryRegistry()
    if registry.get(category) is None:
        typer.echo(f"Using custom category: {category}")

    item_tags = {tag.strip() for tag in tags or [] if tag.strip()}

    try:
        item = draft.to_item(
            category,
            months,
            name=name,
            purchase_date=purchase_date or draft.purchase_date or date.today(),
            purchase_price=price,
            store_name=store,
            location=location,
            tags=item_tags,
            is_favorite=favorite,
        )
    except ValidationError as e:
        typer.echo(f"Error: invalid item: {e}", err=True)
        raise typer.Exit(code=1) from e

    try:
        ItemStore(items).add(item)
    except ItemStoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Added {item.name} ({item.id})")


@app.command()
def remove(
    item_id: str = typer.Argument(..., help="Id of the item to delete"),
    items: Path = _items_option(),
):
    """Delete an item."""
    try:
        ItemStore(items).remove(item_id)
    except ItemStoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"Removed {item_id}")


@app.command("list")
def list_items(
    ctx: typer.Context,
    search: str | None = typer.Option(None, "--search", "-s", help="Name or category text"),
    category: str | None = typer.Option(None, "--category", "-c", help="Exact category"),
    sort: SortOrder = typer.Option(SortOrder.PURCHASE_DATE_DESC, "--sort", help="Sort order"),
    items: Path = _items_option(),
    today: str | None = _today_option(),
):
    """List items with their warranty status."""
    settings = _settings(ctx)
    now = _now(today)
    clock = WarrantyClock(settings)
    aggregator = ItemAggregator(clock, settings)

    snapshot = _load(items)
    selected = aggregator.sort(
        aggregator.filter(snapshot.items, search=search, category=category), sort, now
    )
    if not selected:
        typer.echo("No items found.")
        return

    for annotated in clock.annotate(selected, now):
        item, state = annotated.item, annotated.state
        typer.echo(
            f"{item.name} | {item.category} | expires {state.expiration_date} | "
            f"{state.days_remaining} days | {state.status_label}"
        )


@app.command()
def collections(
    ctx: typer.Context,
    items: Path = _items_option(),
    today: str | None = _today_option(),
):
    """Show smart collections: favorites, recent, high value and groups."""
    settings = _settings(ctx)
    aggregator = ItemAggregator(WarrantyClock(settings), settings)
    buckets = aggregator.smart_collections(_load(items).items, _now(today))
    if not buckets:
        typer.echo("No items found.")
        return

    for bucket in buckets:
        typer.echo(f"[{bucket.kind.value}] {bucket.title} ({bucket.count})")
        for item in bucket.items:
            typer.echo(f"  - {item.name}")


@app.command()
def stats(
    ctx: typer.Context,
    items: Path = _items_option(),
    today: str | None = _today_option(),
    as_json: bool = typer.Option(False, "--json", help="Print the snapshot as JSON"),
):
    """Show analytics and insights for the collection."""
    settings = _settings(ctx)
    aggregator = ItemAggregator(WarrantyClock(settings), settings)
    snapshot = aggregator.snapshot(_load(items).items, _now(today))

    if as_json:
        typer.echo(snapshot.model_dump_json(indent=2))
        return

    typer.echo(f"Total items: {snapshot.total_items}")
    typer.echo(f"Total value: ${snapshot.total_value:,.2f}")
    typer.echo(f"Average value: ${snapshot.average_value:,.2f}")
    typer.echo(f"Highest value: ${snapshot.highest_value:,.2f}")
    typer.echo(f"Average warranty: {snapshot.average_warranty_months} mo")
    typer.echo(f"Added this month: {snapshot.added_this_month}")
    typer.echo(
        f"Warranties: {snapshot.active_count} active, "
        f"{snapshot.expiring_soon_count} expiring, {snapshot.expired_count} expired"
    )
    for entry in snapshot.categories:
        typer.echo(f"  {entry.category}: {entry.count}")

    for insight in aggregator.insights(snapshot):
        typer.echo(f"{insight.title}: {insight.message}")


@app.command()
def alerts(
    ctx: typer.Context,
    items: Path = _items_option(),
    upcoming: bool = typer.Option(False, "--upcoming", help="Skip reminders already past"),
    today: str | None = _today_option(),
):
    """Print the warranty reminder schedule."""
    settings = _settings(ctx)
    now = _now(today) if upcoming else None
    triggers = schedule_for(_load(items).items, now=now, settings=settings)
    if not triggers:
        typer.echo("No reminders scheduled.")
        return
    for trigger in triggers:
        typer.echo(f"{trigger.fire_at} {trigger.identifier} {trigger.title} {trigger.body}")


@app.command()
def claim(
    item_id: str = typer.Argument(..., help="Id of the item to claim for"),
    reason: ClaimReason = typer.Option(
        ClaimReason.DEFECTIVE_PRODUCT, "--reason", help="Reason for the claim"
    ),
    description: str = typer.Option(..., "--description", "-d", help="What went wrong"),
    items: Path = _items_option(),
    today: str | None = _today_option(),
):
    """Draft a warranty claim letter for an item."""
    item = _load(items).find(item_id)
    if item is None:
        typer.echo(f"Error: no item with id {item_id}", err=True)
        raise typer.Exit(code=1)

    letter = compose_claim(item, reason, description, _now(today))
    if not letter.under_warranty:
        typer.echo(f"Warning: the warranty for {item.name} has expired.", err=True)
    typer.echo(f"To: {letter.recipient}")
    typer.echo(f"Subject: {letter.subject}")
    typer.echo("")
    typer.echo(letter.body)


@app.command()
def categories():
    """List known categories and tags."""
    for category in CategoryRegistry().all:
        typer.echo(category.name)
    typer.echo("")
    typer.echo("Tags: " + ", ".join(TagRegistry().all))


def main():
    app()


if __name__ == "__main__":
    main()
