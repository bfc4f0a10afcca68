# sharebox/cli/runner.py

"""Headless CLI commands, all routed through the ProductStore."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from sharebox.models.errors import ProductValidationError
from sharebox.models.product import Product
from sharebox.services.notifications import ConsoleNotifier
from sharebox.services.product_store import ProductStore
from sharebox.storage.file_manager import FileManager
from sharebox.storage.kv_storage import SQLiteStorage

logger = logging.getLogger("sharebox.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def open_store(db_path: Path | None = None) -> ProductStore:
    """Build an un-initialised store for ``with open_store() as store:``."""
    return ProductStore(
        SQLiteStorage(db_path), notifier=ConsoleNotifier(_err)
    )


def print_error(message: str) -> None:
    """Print a failure line on stderr without markup parsing."""
    _err.print(message, style="red", markup=False)


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="ShareBox Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Title", max_width=40)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Likes", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("By")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.id,
            p.title[:40],
            f"{p.price:,.2f}",
            p.category,
            str(p.likes),
            str(len(p.comments)),
            p.created_by,
        )

    Console().print(table)


def run_list(
    store: ProductStore,
    search: str | None = None,
    category: str | None = None,
    sort: str | None = None,
    mine: bool = False,
    output_format: str = "table",
) -> int:
    """Print the filtered product list; filters given here are saved."""
    if any(v is not None for v in (search, category, sort)) or mine:
        store.set_filters(
            search=search,
            category=category,
            sort=sort,
            show_my_products=True if mine else None,
        )

    products = store.get_filtered_products()
    if output_format == "json":
        json.dump(
            [p.to_dict() for p in products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    else:
        _print_table(products)

    if not products:
        _err.print("[yellow]No products found.[/yellow]")
    return 0


def run_stats(store: ProductStore) -> int:
    """Print catalog statistics."""
    stats = store.get_stats()
    table = Table(title="Catalog Stats", title_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Products", str(stats.total_products))
    table.add_row("Total likes", str(stats.total_likes))
    table.add_row(
        "Most liked",
        (
            f"{stats.most_liked.title} ({stats.most_liked.likes})"
            if stats.most_liked
            else "-"
        ),
    )
    table.add_row(f"Shared by {store.user.name}", str(stats.user_products))
    for category, count in stats.category_distribution.items():
        table.add_row(f"  {category}", str(count))

    Console().print(table)
    return 0


def run_add(
    store: ProductStore,
    title: str,
    description: str,
    price: str,
    category: str,
    image_path: str | None = None,
) -> int:
    """Add a product; prints its id on stdout."""
    image: str | None = None
    try:
        if image_path:
            image = FileManager.read_image_data_uri(
                Path(image_path).expanduser()
            )
        product = store.add_product(
            title=title,
            description=description,
            price=price,
            category=category,
            image=image,
        )
    except ProductValidationError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Failed to read image %s", image_path, exc_info=True)
        _err.print(f"[red]Image failed: {exc}[/red]")
        return 1

    sys.stdout.write(f"{product.id}\n")
    return 0


def run_like(store: ProductStore, product_id: str) -> int:
    if not store.like_product(product_id):
        _err.print(f"[red]No product with id {product_id}[/red]")
        return 1
    return 0


def run_comment(store: ProductStore, product_id: str, text: str) -> int:
    if not store.add_comment(product_id, text):
        _err.print(
            "[red]Comment not added (unknown id or empty text)[/red]"
        )
        return 1
    return 0


def run_delete(
    store: ProductStore, product_id: str, assume_yes: bool = False
) -> int:
    """Delete a product after interactive (or ``--yes``) confirmation."""
    confirmation = store.request_delete(product_id)
    if confirmation is None:
        _err.print(f"[red]No product with id {product_id}[/red]")
        return 1

    if not assume_yes and not Confirm.ask(
        f"Delete '{confirmation.title}'?", console=_err
    ):
        store.cancel_delete(confirmation)
        _err.print("[dim]Cancelled[/dim]")
        return 1

    return 0 if store.confirm_delete(confirmation) else 1


def run_profile(
    store: ProductStore,
    name: str | None = None,
    avatar_path: str | None = None,
    toggle_theme: bool = False,
) -> int:
    """Update the user profile and print it."""
    if name is not None:
        store.set_user_name(name)
    if avatar_path:
        try:
            store.set_avatar(
                FileManager.read_image_data_uri(
                    Path(avatar_path).expanduser()
                )
            )
        except (OSError, ValueError) as exc:
            _err.print(f"[red]Avatar failed: {exc}[/red]")
            return 1
    if toggle_theme:
        store.toggle_theme()

    user = store.user
    _err.print(
        f"[bold]{user.name}[/bold]  theme={user.theme}  "
        f"avatar={'yes' if user.avatar else 'no'}"
    )
    return 0


def run_export(
    store: ProductStore, output_dir: str | None = None
) -> int:
    """Write the export document and print its path."""
    file_manager = FileManager(
        Path(output_dir) if output_dir is not None else None
    )
    try:
        path = file_manager.save_export(store.export_data())
    except OSError as exc:
        logger.error("Export failed: %s", exc, exc_info=True)
        _err.print(f"[red]Export failed: {exc}[/red]")
        return 1

    _err.print(f"[green]✓ Data exported[/green] [dim]{path}[/dim]")
    sys.stdout.write(f"{path}\n")
    return 0


async def run_import(store: ProductStore, filepath: str) -> int:
    """Merge an export file into the catalog."""
    result = await store.import_data(Path(filepath).expanduser())
    if not result.ok:
        _err.print(f"[dim]{result.error}[/dim]")
        return 1
    if result.skipped:
        _err.print(
            f"[dim]{result.skipped} already present, skipped[/dim]"
        )
    return 0
