# main.py

"""Entry point for ShareBox (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from sharebox.config.logging_config import setup_logging
from sharebox.config.settings import Settings
from sharebox.models.errors import StorageError

logger = logging.getLogger("sharebox.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    sort_ids = [s["id"] for s in Settings.SORT_OPTIONS]

    parser = argparse.ArgumentParser(
        prog="sharebox",
        description="Share, browse, like and comment on products.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    sub = parser.add_subparsers(dest="command")

    list_cmd = sub.add_parser("list", help="List products.")
    list_cmd.add_argument("--search", default=None)
    list_cmd.add_argument("--category", default=None)
    list_cmd.add_argument("--sort", choices=sort_ids, default=None)
    list_cmd.add_argument(
        "--mine",
        action="store_true",
        default=False,
        help="Only products shared by the current user.",
    )
    list_cmd.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )

    sub.add_parser("stats", help="Show catalog statistics.")

    add_cmd = sub.add_parser("add", help="Share a new product.")
    add_cmd.add_argument("title")
    add_cmd.add_argument("-d", "--description", required=True)
    add_cmd.add_argument("-p", "--price", required=True)
    add_cmd.add_argument(
        "-c", "--category", default=Settings.DEFAULT_CATEGORY
    )
    add_cmd.add_argument("--image", default=None, dest="image_path")

    like_cmd = sub.add_parser("like", help="Like a product.")
    like_cmd.add_argument("product_id")

    comment_cmd = sub.add_parser("comment", help="Comment on a product.")
    comment_cmd.add_argument("product_id")
    comment_cmd.add_argument("text")

    delete_cmd = sub.add_parser("delete", help="Delete a product.")
    delete_cmd.add_argument("product_id")
    delete_cmd.add_argument(
        "-y", "--yes", action="store_true", default=False,
        help="Skip the confirmation prompt.",
    )

    profile_cmd = sub.add_parser("profile", help="Show or edit your profile.")
    profile_cmd.add_argument("--name", default=None)
    profile_cmd.add_argument("--avatar", default=None, dest="avatar_path")
    profile_cmd.add_argument(
        "--toggle-theme", action="store_true", default=False,
        dest="toggle_theme",
    )

    export_cmd = sub.add_parser("export", help="Export all data to JSON.")
    export_cmd.add_argument(
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Custom output directory (default: exports/).",
    )

    import_cmd = sub.add_parser("import", help="Import an export file.")
    import_cmd.add_argument("file")

    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from sharebox.ui.app import ShareBoxApp

    try:
        app = ShareBoxApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("ShareBox TUI shutting down")


def _run_cli(args: argparse.Namespace) -> int:
    """Run one headless command against the persisted store."""
    from sharebox.cli import runner

    try:
        store = runner.open_store()
    except StorageError as exc:
        logger.error("Cannot open storage: %s", exc)
        runner.print_error(str(exc))
        return 1

    with store:
        if args.command == "list":
            return runner.run_list(
                store,
                search=args.search,
                category=args.category,
                sort=args.sort,
                mine=args.mine,
                output_format=args.output_format,
            )
        if args.command == "stats":
            return runner.run_stats(store)
        if args.command == "add":
            return runner.run_add(
                store,
                title=args.title,
                description=args.description,
                price=args.price,
                category=args.category,
                image_path=args.image_path,
            )
        if args.command == "like":
            return runner.run_like(store, args.product_id)
        if args.command == "comment":
            return runner.run_comment(store, args.product_id, args.text)
        if args.command == "delete":
            return runner.run_delete(store, args.product_id, args.yes)
        if args.command == "profile":
            return runner.run_profile(
                store,
                name=args.name,
                avatar_path=args.avatar_path,
                toggle_theme=args.toggle_theme,
            )
        if args.command == "export":
            return runner.run_export(store, args.output_dir)
        if args.command == "import":
            return asyncio.run(runner.run_import(store, args.file))
    return 1


def main() -> None:
    """Route to the TUI (no command) or a headless CLI command."""
    log_file = setup_logging()
    logger.info("ShareBox starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        _run_tui()
    else:
        sys.exit(_run_cli(args))


if __name__ == "__main__":
    main()
