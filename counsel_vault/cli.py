# counsel_vault/cli.py

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from counsel_vault.config.logging import configure_logging
from counsel_vault.config.settings import AppSettings, get_settings
from counsel_vault.dependencies import validate_configuration
from counsel_vault.infrastructure.database.session import create_engine, init_models
from counsel_vault.security.exceptions import ConfigurationError
from counsel_vault.security.key_provider import generate_key_hex

logger = logging.getLogger(__name__)


async def _init_db(settings: AppSettings) -> None:
    engine = create_engine(settings.database_url)
    try:
        await init_models(engine)
    finally:
        await engine.dispose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="counsel-vault")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("generate-key", help="print a new DATABASE_ENCRYPTION_KEY value")
    commands.add_parser("check-config", help="validate the configured encryption key")
    commands.add_parser("init-db", help="create missing tables")
    args = parser.parse_args(argv)

    if args.command == "generate-key":
        print(generate_key_hex())
        return 0

    settings = get_settings()
    if args.command == "check-config":
        try:
            validate_configuration(settings)
        except ConfigurationError as e:
            print(f"configuration error: {e.message}", file=sys.stderr)
            return 1
        print("encryption key OK")
        return 0

    configure_logging(settings.log_level)
    asyncio.run(_init_db(settings))
    logger.info("database_initialized")
    return 0
