"""Command-line interface for Hotel Ledger Reports."""

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

from hotel_ledger_reports import __version__
from hotel_ledger_reports.api_client import APIError, ReportsAPIClient
from hotel_ledger_reports.config import get_settings
from hotel_ledger_reports.domain.artifacts import ExportEncoding
from hotel_ledger_reports.domain.labels import label, report_title
from hotel_ledger_reports.domain.reports import ReportFilter, ReportVariant
from hotel_ledger_reports.logging_config import configure_logging
from hotel_ledger_reports.services.export import format_cell
from hotel_ledger_reports.services.printing import PreviewSurface
from hotel_ledger_reports.services.report_query import ReportQuery
from hotel_ledger_reports.services.session import ReportSession


def create_client() -> ReportsAPIClient:
    """Build the ledger source client from settings."""
    return ReportsAPIClient.from_settings(get_settings())


def _filter_from_args(args: argparse.Namespace) -> ReportFilter:
    extra = {}
    for item in args.param or []:
        key, _, value = item.partition("=")
        if key:
            extra[key] = value
    return ReportFilter(
        account=args.account or "",
        currency=args.currency or "",
        start_date=args.start_date or "",
        end_date=args.end_date or "",
        created_by=args.created_by or "",
        reservation=args.reservation or "",
        account_type=args.account_type or "",
        payment_method=args.payment_method or "",
        extra=extra,
    )


def _language(args: argparse.Namespace) -> str:
    return args.language or get_settings().default_language


def _session(client: ReportsAPIClient, args: argparse.Namespace) -> ReportSession:
    settings = get_settings()
    variant = ReportVariant(args.variant)
    preview_dir = settings.preview_directory
    return ReportSession(
        ReportQuery(client, variant, default_page_size=settings.default_page_size),
        language=_language(args),
        report_filter=_filter_from_args(args),
        page_size=getattr(args, "page_size", None) or settings.default_page_size,
        debounce_seconds=settings.search_debounce_seconds,
        preview=PreviewSurface(directory=preview_dir),
    )


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


async def _accounts(args: argparse.Namespace) -> int:
    async with create_client() as client:
        session = ReportSession(
            ReportQuery(client, ReportVariant.ACCOUNT_STATEMENT),
            language=_language(args),
        )
        options = await session.load_account_options()
    if session.error_message:
        return _fail(session.error_message)
    if not options:
        print("No accounts found.")
        return 0
    for option in options:
        print(f"{option.id:<12} {option.label}")
    return 0


async def _report(args: argparse.Namespace) -> int:
    async with create_client() as client:
        session = _session(client, args)
        result = await session.search(page=args.page)
    if result is None:
        return _fail(session.error_message or "Query failed")

    language = session.language
    columns = session.columns
    print(report_title(session.variant, language))
    print(" | ".join(c.title for c in columns))
    print("-" * 80)
    offset = (args.page - 1) * session.page_size
    for position, row in enumerate(result.rows, start=offset + 1):
        print(" | ".join(format_cell(c, row, position) for c in columns))
    print("-" * 80)
    print(f"{len(result.rows)} of {result.total_records} records")
    if result.summary is not None:
        presented = result.summary.rounded()
        for key in ("total_debit", "total_credit", "net_balance"):
            print(f"{label(key, language)}: {getattr(presented, key):.2f}")
    return 0


async def _export(args: argparse.Namespace) -> int:
    settings = get_settings()
    encoding = (
        ExportEncoding(args.encoding) if args.encoding else settings.export_encoding
    )
    async with create_client() as client:
        session = _session(client, args)
        artifact = await session.export(encoding=encoding)
    if artifact is None:
        return _fail(session.error_message or "Export failed")
    output_dir = Path(args.output) if args.output else settings.export_directory
    path = artifact.save(output_dir)
    print(f"Exported {artifact.row_count} rows to {path}")
    return 0


async def _print(args: argparse.Namespace) -> int:
    async with create_client() as client:
        session = _session(client, args)
        resource = await session.open_print_preview()
    if resource is None:
        return _fail(session.error_message or "Print preview failed")
    try:
        print(f"Print preview ready: {resource.url}")
        if args.open:
            session.print_preview()
        _wait_for_close()
    finally:
        session.close_preview()
    return 0


def _wait_for_close() -> None:
    """Keep the preview alive until the user is done with it."""
    try:
        input("Press Enter to close the preview...")
    except EOFError:
        pass


def _print_listing(
    items: list[dict], name_keys: tuple[str, ...], empty: str
) -> None:
    if not items:
        print(empty)
        return
    for item in items:
        name = next((str(item[k]) for k in name_keys if item.get(k)), "")
        print(f"{str(item.get('id', '')):<12} {name}")


async def _currencies(args: argparse.Namespace) -> int:
    name_keys = ("name_ar", "name_en")
    if _language(args) != "ar":
        name_keys = ("name_en", "name_ar")
    try:
        async with create_client() as client:
            items = await client.list_currencies()
    except (APIError, httpx.HTTPError) as e:
        return _fail(e.detail if isinstance(e, APIError) else str(e))
    _print_listing(items, name_keys + ("name", "code"), "No currencies found.")
    return 0


async def _users(args: argparse.Namespace) -> int:
    try:
        async with create_client() as client:
            items = await client.list_users()
    except (APIError, httpx.HTTPError) as e:
        return _fail(e.detail if isinstance(e, APIError) else str(e))
    _print_listing(items, ("name", "username"), "No users found.")
    return 0


def cmd_accounts(args: argparse.Namespace) -> int:
    """List the chart of accounts as flattened selector options."""
    return asyncio.run(_accounts(args))


def cmd_report(args: argparse.Namespace) -> int:
    """Run one page of a report and print it."""
    return asyncio.run(_report(args))


def cmd_export(args: argparse.Namespace) -> int:
    """Export the full report extent to a delimited file."""
    return asyncio.run(_export(args))


def cmd_print(args: argparse.Namespace) -> int:
    """Prepare a print preview document."""
    return asyncio.run(_print(args))


def cmd_currencies(args: argparse.Namespace) -> int:
    """List currencies with their ids."""
    return asyncio.run(_currencies(args))


def cmd_users(args: argparse.Namespace) -> int:
    return asyncio.run(_users(args))


def cmd_version(args: argparse.Namespace) -> int:
    print(f"hotel-ledger-reports {__version__}")
    return 0


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "variant",
        choices=[v.value for v in ReportVariant],
        help="Report to run",
    )
    parser.add_argument("--account", "-a", help="Account id")
    parser.add_argument("--currency", "-c", help="Currency id")
    parser.add_argument("--start-date", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end-date", help="End date (YYYY-MM-DD)")
    parser.add_argument("--created-by", help="Accountant/user id")
    parser.add_argument("--reservation", help="Reservation number")
    parser.add_argument("--account-type", help="Account type (fund movement)")
    parser.add_argument("--payment-method", help="Payment method (fund movement)")
    parser.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        help="Extra query parameter passed through to the report source",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hlr",
        description="Hotel Ledger Reports - ledger statements, exports and print previews",
    )
    parser.add_argument(
        "--language",
        "-l",
        choices=["ar", "en"],
        default=None,
        help="Display language (default from HLR_DEFAULT_LANGUAGE)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # accounts command
    accounts_parser = subparsers.add_parser(
        "accounts", help="List the chart of accounts"
    )
    accounts_parser.set_defaults(func=cmd_accounts)

    # report command
    report_parser = subparsers.add_parser("report", help="Show one page of a report")
    _add_filter_arguments(report_parser)
    report_parser.add_argument("--page", type=int, default=1, help="Page number")
    report_parser.add_argument(
        "--page-size", type=int, default=None, help="Rows per page"
    )
    report_parser.set_defaults(func=cmd_report)

    # export command
    export_parser = subparsers.add_parser(
        "export", help="Export a report to CSV/TSV"
    )
    _add_filter_arguments(export_parser)
    export_parser.add_argument(
        "--encoding",
        "-e",
        choices=[e.value for e in ExportEncoding],
        default=None,
        help="Export encoding policy (default from HLR_EXPORT_ENCODING)",
    )
    export_parser.add_argument("--output", "-o", help="Output directory")
    export_parser.set_defaults(func=cmd_export)

    # print command
    print_parser = subparsers.add_parser("print", help="Prepare a print preview")
    _add_filter_arguments(print_parser)
    print_parser.add_argument(
        "--open", action="store_true", help="Open the preview in the browser to print"
    )
    print_parser.set_defaults(func=cmd_print)

    # currencies command
    currencies_parser = subparsers.add_parser(
        "currencies", help="List currencies (ids for --currency)"
    )
    currencies_parser.set_defaults(func=cmd_currencies)

    # users command
    users_parser = subparsers.add_parser(
        "users", help="List users (ids for --created-by)"
    )
    users_parser.set_defaults(func=cmd_users)

    # version command
    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging()
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
