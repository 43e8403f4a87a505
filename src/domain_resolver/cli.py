"""
Command-line interface for the domain resolver.

This module provides the main CLI entry point with commands for:
- check: Check one or more candidate names for availability
- check-list: Check candidate names read from a file
- config: Configuration management
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .audit_logger import AuditLogger
from .config import (
    ResolverConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from .engine import AvailabilityEngine
from .exceptions import ConfigurationError, ValidationError
from .models import AvailabilityResult
from .normalizer import is_blank


DEFAULT_CONFIG_PATH = Path.home() / ".domain_resolver" / "config.json"


def read_names_file(names_file: Path) -> list[str]:
    """
    Read candidate names, one per line; blank lines and ``#`` comments are skipped.

    Raises:
        ValidationError: If the file is missing, unreadable or has no names
    """
    try:
        with open(names_file, "r", encoding="utf-8") as f:
            names = [
                line.strip() for line in f
                if line.strip() and not line.lstrip().startswith("#")
            ]
    except FileNotFoundError:
        raise ValidationError(
            code="file_not_found",
            message=f"File not found: {names_file}",
            details={"path": str(names_file)},
        )
    except OSError as e:
        raise ValidationError(
            code="file_unreadable",
            message=f"Error reading file: {e}",
            details={"path": str(names_file)},
        )

    if not names:
        raise ValidationError(
            code="empty_input",
            message="No names found in file",
            details={"path": str(names_file)},
        )
    return names


def resolve_config(args: argparse.Namespace) -> ResolverConfig:
    """Load configuration from --config if given, otherwise from the environment."""
    if getattr(args, "config", None):
        config = load_config_from_file(Path(args.config))
        if config is None:
            raise ConfigurationError(
                code="config_not_found",
                message=f"Could not load config from {args.config}",
                details={"path": args.config},
            )
        return config
    env_file = Path(args.env_file) if getattr(args, "env_file", None) else None
    return load_config_from_env(env_file)


def format_result(result: AvailabilityResult) -> str:
    if result.failed:
        return f"  {result.domain}: unknown ({result.error})"
    status = "available" if result.available else "taken"
    return f"  {result.domain}: {status} [{result.provider.value}]"


async def check_names(
    names: list[str],
    config: ResolverConfig,
    verbose: bool = False,
    as_json: bool = False,
    output_file: Optional[Path] = None,
) -> int:
    """
    Check candidate names and print the results.

    Returns:
        Exit code (0 if any name is available, 1 otherwise)

    Raises:
        ValidationError: If every name is blank
    """
    names = [name for name in names if not is_blank(name)]
    if not names:
        raise ValidationError(
            code="empty_input",
            message="No names given",
        )

    logger = None
    if verbose:
        logger = AuditLogger.from_config(config.logging.level, config.logging.output_format)

    if not as_json:
        print(f"Checking {len(names)} name(s)...")

    async with AvailabilityEngine(config, logger=logger) as engine:
        results = await engine.check_domains(names)

    records = [result.to_record() for result in results]
    available_count = sum(1 for result in results if result.available)

    if as_json:
        print(json.dumps(records, indent=2, ensure_ascii=False))
    else:
        for result in results:
            print(format_result(result))
        print(f"\nSummary: {available_count}/{len(results)} name(s) available")

    if output_file:
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            if not as_json:
                print(f"Results written to: {output_file}")
        except OSError as e:
            print(f"Error writing results: {e}", file=sys.stderr)

    return 0 if available_count > 0 else 1


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    config = resolve_config(args)
    return asyncio.run(check_names(
        names=args.names,
        config=config,
        verbose=args.verbose,
        as_json=args.json,
    ))


def cmd_check_list(args: argparse.Namespace) -> int:
    """Handle the 'check-list' command."""
    names = read_names_file(Path(args.file))
    config = resolve_config(args)
    return asyncio.run(check_names(
        names=names,
        config=config,
        verbose=args.verbose,
        as_json=args.json,
        output_file=Path(args.output) if args.output else None,
    ))


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  Extension: .{config.extension}")
        print(f"  Cache TTL: {config.cache.ttl_seconds}s")
        print(f"  Batch: {config.batch.batch_size} every {config.batch.delay_seconds}s")
        for provider_config in config.providers:
            state = "enabled" if provider_config.enabled else "disabled"
            print(
                f"  {provider_config.name.value}: {state}, "
                f"{provider_config.quota_limit} per {provider_config.quota_window_seconds:g}s"
            )
        return 0

    if args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        try:
            save_config_to_file(create_default_config(), config_path)
        except OSError as e:
            print(f"Error saving config: {e}", file=sys.stderr)
            return 1
        print(f"Configuration created at: {config_path}")
        return 0

    if args.action == "validate":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1
        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-resolver",
        description="Multi-provider domain availability resolver",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--config", "-c", help="Path to JSON configuration file")
        sub.add_argument("--env-file", help="Path to a .env file")
        sub.add_argument("--json", action="store_true", help="Print results as JSON")
        sub.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    check_parser = subparsers.add_parser(
        "check",
        help="Check one or more names for availability",
    )
    check_parser.add_argument("names", nargs="+", help="Names to check (e.g. example or example.com)")
    add_common(check_parser)
    check_parser.set_defaults(func=cmd_check)

    check_list_parser = subparsers.add_parser(
        "check-list",
        help="Check names from a file",
    )
    check_list_parser.add_argument("file", help="Path to file containing names (one per line)")
    check_list_parser.add_argument("--output", "-o", help="Path to write results as JSON")
    add_common(check_list_parser)
    check_list_parser.set_defaults(func=cmd_check_list)

    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument("action", choices=["show", "init", "validate"], help="Configuration action")
    config_parser.add_argument("--path", "-p", help="Path to configuration file")
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.set_defaults(func=cmd_config)

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

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (ConfigurationError, ValidationError) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
