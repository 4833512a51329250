"""
Command-line interface for the agent domains client.

This module provides the main CLI entry point with commands for:
- check: Check a single domain for availability and pricing
- bulk: Check several domains at once
- ideas: Generate domain ideas from keywords
- buy: Register a domain, paying in USDC
- order: Show the status of an order

Results are printed as JSON on stdout. Classified errors are printed as
JSON on stderr and the command exits with status 1.
"""

import argparse
import asyncio
import json
import os
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from . import __version__
from .audit_logger import AuditLogger
from .client import AgentDomains
from .config import (
    PRIVATE_KEY_ENV,
    ClientConfig,
    load_config_from_env,
    load_config_from_file,
    load_env_file,
)
from .enums import LogLevel, SourceChain
from .exceptions import AgentDomainsError
from .signer import LocalAccountSigner


def load_config(config_path: Optional[str]) -> Optional[ClientConfig]:
    """
    Load configuration from a file if given, else from the environment.

    Returns:
        ClientConfig, or None if an explicit config file could not be read
    """
    if config_path:
        config = load_config_from_file(Path(config_path))
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
        return config
    return load_config_from_env()


def create_logger(config: ClientConfig, verbose: bool) -> Optional[AuditLogger]:
    """Create an audit logger when verbose output or audit mode is requested."""
    if not verbose and not config.logging.audit_mode:
        return None
    logger = AuditLogger.from_config(config.logging)
    if verbose:
        logger.min_level = LogLevel.DEBUG
    return logger


def create_signer() -> Optional[LocalAccountSigner]:
    """Create the wallet signer from the private key environment variable."""
    private_key = os.getenv(PRIVATE_KEY_ENV)
    if not private_key:
        print(f"Error: {PRIVATE_KEY_ENV} is not set", file=sys.stderr)
        return None
    try:
        return LocalAccountSigner.from_key(private_key)
    except ValueError:
        print(f"Error: {PRIVATE_KEY_ENV} is not a valid private key", file=sys.stderr)
        return None


def to_jsonable(result: Any) -> Any:
    """Convert a client result to plain JSON data, preferring the raw payload."""
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    raw = getattr(result, "raw", None)
    if raw:
        return raw
    if is_dataclass(result):
        return asdict(result)
    return result


def print_json(data: Any, stream=None) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False), file=stream or sys.stdout)


def load_registrant(registrant_path: str) -> Optional[dict]:
    """Read a registrant record in wire form from a JSON file."""
    try:
        with open(registrant_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {registrant_path}", file=sys.stderr)
        return None
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading registrant: {e}", file=sys.stderr)
        return None

    if not isinstance(data, dict):
        print("Error: Registrant file must contain a JSON object", file=sys.stderr)
        return None
    return data


def run_with_client(
    args: argparse.Namespace,
    operation: Callable[[AgentDomains], Awaitable[Any]],
) -> int:
    """
    Build a client from args and environment, run one operation, print it.

    Returns:
        Exit code (0 on success, 1 on any error)
    """
    config = load_config(args.config)
    if config is None:
        return 1

    signer = create_signer()
    if signer is None:
        return 1

    async def run(logger: Optional[AuditLogger]) -> Any:
        async with AgentDomains(signer, config=config, logger=logger) as client:
            return await operation(client)

    try:
        result = asyncio.run(run(create_logger(config, args.verbose)))
    except AgentDomainsError as e:
        print_json(e.to_dict(), stream=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_json(to_jsonable(result))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    return run_with_client(
        args,
        lambda client: client.check_domain(args.domain, registrant_country=args.country),
    )


def cmd_bulk(args: argparse.Namespace) -> int:
    """Handle the 'bulk' command."""
    return run_with_client(args, lambda client: client.check_bulk(args.domains))


def cmd_ideas(args: argparse.Namespace) -> int:
    """Handle the 'ideas' command."""
    return run_with_client(
        args,
        lambda client: client.suggest_domains(
            args.keywords,
            tlds=args.tld,
            patterns=args.pattern,
            max_to_check=args.max_to_check,
            include_unavailable=True if args.include_unavailable else None,
        ),
    )


def cmd_buy(args: argparse.Namespace) -> int:
    """Handle the 'buy' command."""
    registrant = load_registrant(args.registrant)
    if registrant is None:
        return 1

    return run_with_client(
        args,
        lambda client: client.buy_domain(
            args.domain,
            registrant=registrant,
            years=args.years,
            nameservers=args.nameserver,
            source_chain=args.source_chain,
            idempotency_key=args.idempotency_key,
            prevalidate=not args.no_prevalidate,
        ),
    )


def cmd_order(args: argparse.Namespace) -> int:
    """Handle the 'order' command."""
    return run_with_client(args, lambda client: client.get_order(args.order_id))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file (defaults to AGENT_DOMAINS_* environment)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging to stderr",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="agent-domains",
        description="Check, suggest and register domains paid in USDC",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'check' command
    check_parser = subparsers.add_parser(
        "check",
        help="Check a single domain for availability",
    )
    check_parser.add_argument(
        "domain",
        help="Domain to check (e.g., cool.dev)",
    )
    check_parser.add_argument(
        "--country",
        help="Registrant country (ISO 3166-1 alpha-2) for restriction warnings",
    )
    _add_common_arguments(check_parser)
    check_parser.set_defaults(func=cmd_check)

    # 'bulk' command
    bulk_parser = subparsers.add_parser(
        "bulk",
        help="Check up to 50 domains at once",
    )
    bulk_parser.add_argument(
        "domains",
        nargs="+",
        help="Domains to check",
    )
    _add_common_arguments(bulk_parser)
    bulk_parser.set_defaults(func=cmd_bulk)

    # 'ideas' command
    ideas_parser = subparsers.add_parser(
        "ideas",
        help="Generate domain ideas from keywords",
    )
    ideas_parser.add_argument(
        "keywords",
        nargs="+",
        help="Keywords to generate ideas from",
    )
    ideas_parser.add_argument(
        "--tld", "-t",
        action="append",
        help="TLD to check (repeatable)",
    )
    ideas_parser.add_argument(
        "--pattern", "-p",
        action="append",
        choices=["exact", "hyphenated", "prefix", "suffix"],
        help="Name pattern (repeatable)",
    )
    ideas_parser.add_argument(
        "--max-to-check",
        type=int,
        help="Maximum number of domains to check",
    )
    ideas_parser.add_argument(
        "--include-unavailable",
        action="store_true",
        help="Also list domains that are taken",
    )
    _add_common_arguments(ideas_parser)
    ideas_parser.set_defaults(func=cmd_ideas)

    # 'buy' command
    buy_parser = subparsers.add_parser(
        "buy",
        help="Register a domain, paying in USDC",
    )
    buy_parser.add_argument(
        "domain",
        help="Domain to register",
    )
    buy_parser.add_argument(
        "--registrant", "-r",
        required=True,
        help="Path to a JSON file with the registrant contact",
    )
    buy_parser.add_argument(
        "--years", "-y",
        type=int,
        help="Registration years (default: 1)",
    )
    buy_parser.add_argument(
        "--nameserver", "-n",
        action="append",
        help="Custom nameserver (repeatable)",
    )
    buy_parser.add_argument(
        "--source-chain",
        choices=[chain.value for chain in SourceChain],
        help="Chain the USDC is coming from (default: base)",
    )
    buy_parser.add_argument(
        "--idempotency-key",
        help="Explicit idempotency key (derived from the order when omitted)",
    )
    buy_parser.add_argument(
        "--no-prevalidate",
        action="store_true",
        help="Skip the pre-payment validation dry-run",
    )
    _add_common_arguments(buy_parser)
    buy_parser.set_defaults(func=cmd_buy)

    # 'order' command
    order_parser = subparsers.add_parser(
        "order",
        help="Show the status of an order",
    )
    order_parser.add_argument(
        "order_id",
        help="Order identifier returned by 'buy'",
    )
    _add_common_arguments(order_parser)
    order_parser.set_defaults(func=cmd_order)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # .env may hold the private key even when settings come from --config
    load_env_file()

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
