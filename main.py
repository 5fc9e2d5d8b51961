#!/usr/bin/env python3
"""
Pet Store -- command-line entry point.

Usage:
  python main.py serve                 # run the API with uvicorn
  python main.py serve --reload        # auto-reload on code changes
  python main.py serve --port 8080
  python main.py seed                  # wipe the database and load demo data

Environment variables (see core/config.py):
  SECRET_KEY / JWT_SECRET   Token signing key, at least 32 characters.
  DEBUG=true                Generate a throwaway signing key when none is set.
  DATABASE_URL              SQLAlchemy URL, defaults to ./petstore.db.
  PORT, HOST                Listening address for `serve`.

`seed` exits with status 1 when any step fails.
"""

import argparse
import logging
import sys

logger = logging.getLogger("petstore.cli")


def _run_seed() -> int:
    """Seed the configured database. Returns the process exit code."""
    from core.config import get_settings
    from core.db import create_db_engine

    try:
        engine = create_db_engine(get_settings().database_url)
    except Exception:
        logger.exception("Error during seed: could not configure the database")
        return 1

    try:
        # Imported late: auth.tokens reads settings at import time
        from auth.store import UserStore
        from petstore.seed import seed
        from petstore.store import PetStore

        seed(UserStore(engine), PetStore(engine))
    except Exception:
        logger.exception("Error during seed")
        return 1
    finally:
        engine.dispose()
    return 0


def _run_server(host: str | None, port: int | None, reload: bool) -> int:
    import uvicorn

    from core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="petstore",
        description="Pet store REST API.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    sub.add_parser("seed", help="Reset the database and load demo data")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "seed":
        return _run_seed()
    return _run_server(args.host, args.port, args.reload)


if __name__ == "__main__":
    sys.exit(main())
