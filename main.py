#!/usr/bin/env python3
"""
TaskFlow -- account registration and login.

Server commands (need SECRET_KEY, or DEBUG=true for a throwaway key):
  python main.py serve
  python main.py init-db

Client commands (talk to a running server, keep the session on disk):
  python main.py register --name "Jo Lee" --email jo@ex.com
  python main.py login --email jo@ex.com
  python main.py status
  python main.py logout

Environment variables:
  TASKFLOW_API_BASE_URL   Server the client commands talk to (default http://localhost:5000).
  TASKFLOW_SESSION_PATH   Where the client session is stored (default ~/.taskflow/session.db).
"""

import argparse
import getpass
import sys
from pathlib import Path
from typing import Optional

from core.config import get_client_settings


def _navigate(path: str) -> None:
    print(f"  -> {path}")


def _open_session(args: argparse.Namespace):
    """Build a SessionManager over the on-disk session file."""
    from client.api import AuthApiClient
    from client.session import SessionManager
    from client.storage import FileStorage

    settings = get_client_settings()
    api = AuthApiClient(args.api_url or settings.api_base_url, timeout=settings.request_timeout)
    storage = FileStorage(Path(args.session_file or settings.session_path).expanduser())
    return SessionManager(api, storage, navigate=_navigate), storage


def _password(args: argparse.Namespace) -> str:
    return args.password if args.password is not None else getpass.getpass("Password: ")


# ---------------------------------------------------------------------------
# Server commands
# ---------------------------------------------------------------------------


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    from sqlalchemy.exc import SQLAlchemyError

    from auth.store import UserStore

    if args.database_url:
        db_url = args.database_url
    else:
        from core.config import get_settings

        db_url = get_settings().database_url
    try:
        store = UserStore(db_url)
    except SQLAlchemyError as e:
        print(f"  [!] Error creating users table: {e}")
        return 1
    store.close()
    print("  Users table created successfully.")
    return 0


# ---------------------------------------------------------------------------
# Client commands
# ---------------------------------------------------------------------------


def cmd_register(args: argparse.Namespace) -> int:
    from client.api import AuthRequestError

    session, storage = _open_session(args)
    try:
        with session:
            try:
                user = session.register(args.name, args.email, _password(args))
            except AuthRequestError as e:
                print(f"  [!] {e}")
                return 1
            print(f"  Registered and logged in as {user.name} <{user.email}>.")
            return 0
    finally:
        storage.close()


def cmd_login(args: argparse.Namespace) -> int:
    from client.api import AuthRequestError

    session, storage = _open_session(args)
    try:
        with session:
            try:
                user = session.login(args.email, _password(args))
            except AuthRequestError as e:
                print(f"  [!] {e}")
                return 1
            print(f"  Logged in as {user.name} <{user.email}>.")
            return 0
    finally:
        storage.close()


def cmd_logout(args: argparse.Namespace) -> int:
    session, storage = _open_session(args)
    try:
        with session:
            session.logout()
        print("  Logged out.")
        return 0
    finally:
        storage.close()


def cmd_status(args: argparse.Namespace) -> int:
    from client.views import HomeView

    session, storage = _open_session(args)
    try:
        with session:
            user = session.user
            if user is not None:
                print(f"  Logged in as {user.name} <{user.email}>.")
            else:
                print("  Not logged in.")
            HomeView(session, _navigate).resolve()
            return 0 if user is not None else 1
    finally:
        storage.close()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="taskflow",
        description="TaskFlow account registration and login.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  DEBUG=true python main.py serve --reload
  python main.py init-db --database-url sqlite:///taskflow_auth.db
  python main.py register --name "Jo Lee" --email jo@ex.com
  python main.py login --email jo@ex.com
  python main.py status
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("serve", help="Run the API server")
    p.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    p.add_argument("--port", type=int, default=None, help="Bind port (default: PORT setting)")
    p.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("init-db", help="Create the users table if it does not exist")
    p.add_argument("--database-url", default=None, metavar="URL", help="SQLAlchemy URL (default: DATABASE_URL)")
    p.set_defaults(func=cmd_init_db)

    client_opts = argparse.ArgumentParser(add_help=False)
    client_opts.add_argument("--api-url", default=None, metavar="URL", help="Server base URL")
    client_opts.add_argument("--session-file", default=None, metavar="PATH", help="Session storage file")

    p = sub.add_parser("register", parents=[client_opts], help="Create an account and log in")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", default=None, help="Prompted for when omitted")
    p.set_defaults(func=cmd_register)

    p = sub.add_parser("login", parents=[client_opts], help="Log in and store the session")
    p.add_argument("--email", required=True)
    p.add_argument("--password", default=None, help="Prompted for when omitted")
    p.set_defaults(func=cmd_login)

    p = sub.add_parser("logout", parents=[client_opts], help="Forget the stored session")
    p.set_defaults(func=cmd_logout)

    p = sub.add_parser("status", parents=[client_opts], help="Show the stored session")
    p.set_defaults(func=cmd_status)

    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
