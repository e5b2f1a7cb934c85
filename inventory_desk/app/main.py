from __future__ import annotations

import argparse
import sys

from inventory_desk.app.container import build_app
from inventory_desk.app.shell import Shell
from inventory_desk.core.config import load_settings
from inventory_desk.core.errors import ConfigError
from inventory_desk.core.logging import configure_logging, get_logger, log_action
from inventory_desk.data.local.db import create_db_engine, create_session_factory
from inventory_desk.data.local.seed import seed_user
from inventory_desk.routing.routes import HOME

logger = get_logger(__name__)


def _settings(args: argparse.Namespace):
    overrides = {}
    if getattr(args, "backend", None):
        overrides["BACKEND"] = args.backend
    settings = load_settings(args.env_file, **overrides)
    configure_logging(settings.LOG_LEVEL)
    return settings


def cmd_run(args: argparse.Namespace) -> int:
    settings = _settings(args)
    app = build_app(settings)
    log_action(logger, "app", "start", None, "ok", backend=settings.BACKEND)
    Shell(app).run(args.route or HOME)
    return 0


def cmd_seed_admin(args: argparse.Namespace) -> int:
    settings = _settings(args)
    if settings.BACKEND != "local":
        print("seed-admin only works with the local backend.", file=sys.stderr)
        return 2
    session_factory = create_session_factory(create_db_engine(settings.DATABASE_URL))
    user_id = seed_user(session_factory, args.email, args.password)
    log_action(logger, "seed", "seed_admin", user_id, "ok")
    print(f"Admin ready: {args.email} ({user_id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inventory-desk", description="Inventory and returns desk")
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--backend", choices=["local", "remote"], default=None)
    parser.add_argument("--route", default=None, help="path to open first, e.g. /products")
    parser.set_defaults(func=cmd_run)

    subparsers = parser.add_subparsers(dest="command")
    seed_parser = subparsers.add_parser("seed-admin", help="create a local user with the admin role")
    seed_parser.add_argument("--email", required=True)
    seed_parser.add_argument("--password", required=True)
    seed_parser.set_defaults(func=cmd_seed_admin)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
