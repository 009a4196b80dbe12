#!/usr/bin/env python3
"""
Car Catalog -- operator command line.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 3001
  python main.py serve --reload
  python main.py create-user admin@example.com
  python main.py create-user admin@example.com --name "Fleet Admin"
  python main.py create-user admin@example.com --db sqlite:////srv/cars.db

Environment variables (see core/config.py):
  SECRET_KEY     Required unless DEBUG=true. At least 32 characters.
  DATABASE_URL   SQLAlchemy URL. Defaults to car_catalog.db beside this file.
"""

import argparse
import getpass
import sys

from core.errors import CatalogError


def _prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _create_user(args: argparse.Namespace) -> int:
    # Imported here so `serve --help` works without a configured SECRET_KEY.
    from auth.service import SessionService
    from auth.store import UserStore

    password = _prompt_for_password()
    store = UserStore(args.db_url)
    try:
        user, _token = SessionService(store).register(args.email.strip(), password, args.name)
    except CatalogError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        store.close()

    print(f"Created user #{user.id}: {user.email}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carcatalog",
        description="Car catalog REST API -- operator commands.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API under uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3001)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    serve.set_defaults(func=_serve)

    create = sub.add_parser("create-user", help="Register a user from the terminal")
    create.add_argument("email", help="Login email (stored exactly as given)")
    create.add_argument("--name", default=None, help="Optional display name")
    create.add_argument(
        "--db",
        dest="db_url",
        default=None,
        help="SQLAlchemy database URL (defaults to DATABASE_URL or car_catalog.db)",
    )
    create.set_defaults(func=_create_user)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
