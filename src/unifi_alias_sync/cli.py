#!/usr/bin/env python3
"""UniFi Client Alias Sync CLI.

Propagates client aliases between all sites of a UniFi controller: an
alias set on one site is copied to every other site where that client is
known but unaliased. Existing aliases are never overwritten.

Settings are read from the environment (and a ``.env`` file); see
``unifi_alias_sync.config`` for the variables.

Example Usage:
    $ unifi-alias-sync                       # Dry run (default)
    $ unifi-alias-sync --apply               # Actually write aliases
    $ unifi-alias-sync --env-file site.env   # Load settings from a file
    $ unifi-alias-sync --debug               # Trace controller traffic
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .api.client import UniFiControllerClient
from .api.exceptions import AliasSyncError, ConfigurationError, SyncAbortedError
from .config import SyncConfig
from .sync.adapters.unifi_inventory_adapter import UniFiInventoryAdapter
from .sync.use_cases.sync_aliases import SyncAliasesUseCase

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Send status lines to stdout, one per event."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s' if debug else '%(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout,
        force=True,
    )


async def run_sync(config: SyncConfig) -> int:
    """Run one alias sync against the configured controller.

    This is the run boundary: every fatal error ends up here, after the
    controller session has been released.

    Args:
        config: Validated settings

    Returns:
        Process exit status (0 on success, 1 on a fatal error)
    """
    if config.dry_run:
        logger.info("Dry-run mode enabled; aliases won't actually get synchronized.")

    try:
        async with UniFiControllerClient(
            config.controller_url,
            config.username,
            config.password,
            verify_ssl=config.verify_ssl,
            unifi_os=config.unifi_os,
            debug=config.debug,
        ) as controller:
            use_case = SyncAliasesUseCase(
                inventory=UniFiInventoryAdapter(controller),
                overrides=config.aliases,
                prioritized_sites=config.prioritized_sites,
                dry_run=config.dry_run,
            )
            result = await use_case.execute()

    except SyncAbortedError as e:
        if e.is_notice:
            logger.info(e.message)
        else:
            logger.error(e.message)
        return 1

    except AliasSyncError as e:
        logger.error(f"Error: {e.message}")
        logger.debug(f"Error details: {e.to_dict()}")
        return 1

    logger.debug(f"Summary: {result.to_dict()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unifi-alias-sync",
        description="Sync client aliases across all sites of a UniFi controller",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  unifi-alias-sync                        # Report what would change
  unifi-alias-sync --apply                # Write missing aliases
  unifi-alias-sync --env-file site.env    # Read settings from site.env
        """
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_const",
        const=True,
        default=None,
        help="Only report aliases that would be set (overrides UNIFI_ALIAS_SYNC_DRY_RUN)"
    )
    mode_group.add_argument(
        "--apply",
        dest="dry_run",
        action="store_const",
        const=False,
        help="Write missing aliases to the controller (overrides UNIFI_ALIAS_SYNC_DRY_RUN)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output, including controller requests"
    )
    parser.add_argument(
        "--env-file",
        type=str,
        metavar="FILE",
        help="Load settings from FILE instead of ./.env"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(args.debug)

    if args.env_file:
        if not Path(args.env_file).is_file():
            logger.error(f"Error: Unable to locate env file: {args.env_file}")
            return 1
        load_dotenv(args.env_file, override=True)
    else:
        load_dotenv()

    try:
        config = SyncConfig.from_env()
    except ConfigurationError as e:
        for problem in e.problems:
            logger.error(f"Error: {problem}")
        logger.error(e.message)
        return 1

    if args.dry_run is not None:
        config.dry_run = args.dry_run
    if args.debug:
        config.debug = True
    configure_logging(config.debug)

    logger.info("Environment and config have been verified.")
    logger.debug(f"Config: {config}")

    return asyncio.run(run_sync(config))


if __name__ == "__main__":
    sys.exit(main())
