import argparse

from loguru import logger

import descomplicar.models  # noqa: F401
from descomplicar.config import get_settings
from descomplicar.db.database import Base, get_sync_session

settings = get_settings()


def init_database():
    """Create all tables."""
    with get_sync_session() as session:
        Base.metadata.create_all(session.get_bind())
    logger.info("Database initialized")


def run_triggers():
    """Run the expiration triggers once, now."""
    from descomplicar.scheduler.jobs import run_expiration_triggers

    results = run_expiration_triggers()
    logger.info(f"Result: {results}")


def send_welcome(user_id: int):
    from descomplicar.notifications.triggers import execute_welcome_trigger

    with get_sync_session() as session:
        delivered = execute_welcome_trigger(session, user_id)
    logger.info(f"Welcome templates delivered: {delivered}")


def clear_fipe_cache(key: str = None):
    from descomplicar.cache.file_cache import clear_cache

    clear_cache(key)
    logger.info(f"Cache cleared: {key or 'all entries'}")


def main():
    parser = argparse.ArgumentParser(description="Descomplicar CLI")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # init command
    subparsers.add_parser("init", help="Initialize database")

    # seed command
    subparsers.add_parser("seed", help="Seed default notification templates")

    # serve command
    subparsers.add_parser("serve", help="Start API server")

    # run-triggers command
    subparsers.add_parser("run-triggers", help="Run expiration triggers now")

    # welcome command
    welcome_parser = subparsers.add_parser("welcome", help="Send welcome templates to a user")
    welcome_parser.add_argument("--user-id", "-u", type=int, required=True, help="User id")

    # clear-cache command
    cache_parser = subparsers.add_parser("clear-cache", help="Clear FIPE cache")
    cache_parser.add_argument("--key", "-k", help="Single cache key (default: all)")

    args = parser.parse_args()

    if args.command == "init":
        init_database()
    elif args.command == "seed":
        from descomplicar.db.seed import seed_default_templates

        seed_default_templates()
    elif args.command == "serve":
        import uvicorn

        uvicorn.run(
            "descomplicar.main:app",
            host=settings.api_host,
            port=settings.api_port,
            reload=settings.debug,
        )
    elif args.command == "run-triggers":
        run_triggers()
    elif args.command == "welcome":
        send_welcome(args.user_id)
    elif args.command == "clear-cache":
        clear_fipe_cache(args.key)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
