"""Command-line interface for the shift roster."""

from __future__ import annotations

import argparse

import uvicorn

from roster.config import AppConfig, load_config
from roster.domain.db import Store
from roster.domain.validation import parse_shift_filter
from roster.io.export_csv import export_employees_csv, export_shifts_csv
from roster.io.import_csv import import_employees_csv, import_shifts_csv
from roster.logging_config import setup_logging


def _open_store(cfg: AppConfig) -> Store:
    store = Store(cfg.database.path, echo=cfg.database.echo)
    store.init_database()
    return store


def _cmd_init_db(args: argparse.Namespace, cfg: AppConfig) -> None:
    """Create the database file and tables if needed."""
    store = _open_store(cfg)
    store.close()
    print(f"[OK] Database ready at {cfg.database.path}")


def _cmd_serve(args: argparse.Namespace, cfg: AppConfig) -> None:
    """Run the HTTP API."""
    from server.main import create_app

    host = args.host or cfg.server.host
    port = args.port or cfg.server.port
    uvicorn.run(create_app(cfg), host=host, port=port, log_level=cfg.log_level.lower())


def _cmd_import_csv(args: argparse.Namespace, cfg: AppConfig) -> None:
    """Import CSV data into the database."""
    store = _open_store(cfg)
    try:
        if args.employees:
            count = import_employees_csv(store, args.employees)
            print(f"[OK] Imported {count} employees")

        if args.shifts:
            count = import_shifts_csv(store, args.shifts)
            print(f"[OK] Imported {count} shifts")

        print("[OK] CSV import complete")
    except Exception as e:
        print(f"[ERROR] Import failed: {e}")
        raise
    finally:
        store.close()


def _cmd_export(args: argparse.Namespace, cfg: AppConfig) -> None:
    """Export data from the database to CSV."""
    store = _open_store(cfg)
    try:
        if args.employees:
            count = export_employees_csv(store, args.employees)
            print(f"[OK] Exported {count} employees to {args.employees}")

        if args.shifts:
            shift_filter = parse_shift_filter(args.date, args.employee_id)
            count = export_shifts_csv(store, args.shifts, shift_filter)
            print(f"[OK] Exported {count} shifts to {args.shifts}")
    except Exception as e:
        print(f"[ERROR] Export failed: {e}")
        raise
    finally:
        store.close()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="roster",
        description="Staff roster and shift assignment service",
    )
    parser.add_argument("--config", help="Path to config YAML/JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Create the database and tables")
    init.set_defaults(func=_cmd_init_db)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address (overrides config)")
    serve.add_argument("--port", type=int, help="Port (overrides config)")
    serve.set_defaults(func=_cmd_serve)

    imp = sub.add_parser("import-csv", help="Import CSV data into the database")
    imp.add_argument("--employees", help="Path to employees CSV")
    imp.add_argument("--shifts", help="Path to shifts CSV")
    imp.set_defaults(func=_cmd_import_csv)

    exp = sub.add_parser("export", help="Export data from the database to CSV")
    exp.add_argument("--employees", help="Path to export employees CSV")
    exp.add_argument("--shifts", help="Path to export shifts CSV")
    exp.add_argument("--date", help="Only shifts on this date (YYYY-MM-DD)")
    exp.add_argument("--employee-id", help="Only shifts for this employee (ignored with --date)")
    exp.set_defaults(func=_cmd_export)

    args = parser.parse_args(argv)
    cfg = load_config(args.config)
    setup_logging(cfg.log_level)
    args.func(args, cfg)


if __name__ == "__main__":
    main()
