"""
dyndns - keep DNS records pointed at the current public IP address.

Usage:
    dyndns auto                             - Reconcile configured records
    dyndns get PROVIDER DOMAIN [SUBDOMAIN]  - Show records held by a provider
    dyndns generate-config                  - Write an example configuration
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import requests

from .auto import AddressResolutionError, build_automatic_records, find_changes, resolve_addresses
from .config import Config, ConfigError, config_dir_from_env
from .dns.base import DNSProvider, Feature
from .dns.errors import ProviderError
from .dns.records import Record
from .dns.registry import get_provider

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging"""
    if verbose:
        level = "DEBUG"
    else:
        level = os.environ.get("DYNDNS_LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _reconcile(
    provider: DNSProvider, domain: str, desired: list[Record], dry_run: bool
) -> None:
    """Compare desired records with the provider and apply what it supports"""
    if not provider.is_feature_supported(Feature.GET_RECORDS):
        logger.warning(
            f"{provider.name} does not support reading records, skipping {domain}"
        )
        return

    current = provider.get_records(domain, [record.domain for record in desired])
    changes = find_changes(desired, current)

    if not changes:
        logger.info(f"{domain}: {len(desired)} record(s) up to date")
        return

    for change in changes:
        record = change.desired
        was = ", ".join(r.value.content for r in change.current) or "-"
        logger.info(
            f"{domain}: {change.action} {record.record_type.value} {record.domain}: "
            f"{was} -> {record.value.content}"
        )

        feature = Feature.UPDATE_RECORD if change.current else Feature.ADD_RECORD
        if not provider.is_feature_supported(feature):
            logger.warning(f"{provider.name} does not support {feature.value}")
            continue

        if dry_run:
            logger.info("[DRY RUN] Would apply change")
            continue

        if change.current:
            provider.update_record(record)
        else:
            provider.add_record(record)


def cmd_auto(config: Config, dry_run: bool = False) -> int:
    with requests.Session() as session:
        try:
            addresses = resolve_addresses(config.resolver, session)
        except AddressResolutionError as e:
            logger.error(str(e))
            return 1

    success = True
    for dns_config in config.dns:
        try:
            provider = get_provider(dns_config.provider_name, config.providers)
        except ProviderError as e:
            logger.error(str(e))
            success = False
            continue

        try:
            for domain in dns_config.domains:
                desired = build_automatic_records(domain.automatic_records, addresses)
                desired.extend(record.to_record() for record in domain.manual_records)
                if not desired:
                    continue

                try:
                    _reconcile(provider, domain.domain, desired, dry_run)
                except ProviderError as e:
                    logger.error(f"{provider.name}: {domain.domain}: {e}")
                    success = False
        finally:
            provider.close()

    return 0 if success else 1


def cmd_get(config: Config, provider_name: str, domain: str, subdomains: list[str]) -> int:
    try:
        provider = get_provider(provider_name, config.providers)
    except ProviderError as e:
        logger.error(str(e))
        return 1

    try:
        if subdomains:
            records = provider.get_records(domain, subdomains)
        else:
            records = provider.get_all_records(domain)
    except ProviderError as e:
        logger.error(str(e))
        return 1
    finally:
        provider.close()

    print(json.dumps([record.to_dict() for record in records], indent=2))
    return 0


def cmd_generate_config(output: Path, force: bool = False) -> int:
    if output.exists() and not force:
        logger.info(
            f"Configuration directory {output} already exists. Use --force to overwrite."
        )
        return 0

    Config.create_example_structure(output)
    logger.info(f"Configuration structure created in {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dyndns",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-c",
        "--config-dir",
        type=Path,
        default=None,
        help="Configuration directory (default: $DYNDNS_CONFIG_DIR or ./config)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    auto = subparsers.add_parser(
        "auto", help="Update providers as defined in the configuration"
    )
    auto.add_argument(
        "--dry-run",
        action="store_true",
        help="Don't make actual changes",
    )

    get = subparsers.add_parser("get", help="Show records held by a provider")
    get.add_argument("provider", help="Name of the configured provider")
    get.add_argument("domain", help="Zone to read records from")
    get.add_argument(
        "subdomains",
        nargs="*",
        help="Only show records with these exact names (default: all records)",
    )

    generate = subparsers.add_parser(
        "generate-config", help="Generate configuration directory structure"
    )
    generate.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("config"),
        help="Output directory path (default: ./config)",
    )
    generate.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Force overwrite existing files",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "generate-config":
        return cmd_generate_config(args.output, args.force)

    config_dir = args.config_dir or config_dir_from_env()
    try:
        config = Config.load_from_directory(config_dir)
    except ConfigError as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1

    if args.command == "auto":
        return cmd_auto(config, dry_run=args.dry_run)

    return cmd_get(config, args.provider, args.domain, args.subdomains)


if __name__ == "__main__":
    sys.exit(main())
