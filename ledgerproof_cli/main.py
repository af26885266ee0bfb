"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m ledgerproof_cli verify <proof_path> --genesis 0x... [--roster PATH]
                                     [--key 0x... | --key-text TEXT] [--json] [--debug]
    python -m ledgerproof_cli inspect <proof_path> [--json]
    python -m ledgerproof_cli config --init

Environment Variables:
    LEDGERPROOF_HASH_ALGORITHM     hashlib algorithm (default: sha256)
    LEDGERPROOF_THRESHOLD_POLICY   Signature threshold: bft, majority, all
    LEDGERPROOF_MAX_WORKERS        Batch verification threads (default: 4)
    LEDGERPROOF_LOG_LEVEL          Log level (default: INFO)
    LEDGERPROOF_LOG_FILE           Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import load_config
from ledgerproof_cli import __version__
from ledgerproof_cli.commands import inspect, verify
from ledgerproof_cli.config import get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="ledgerproof",
        description="Ledger proof verifier - check skipchain links and trie inclusion offline.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./ledgerproof.json or ~/.config/ledgerproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof against a trusted genesis block",
        description="Verify forward links, trie root binding and optionally a key.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to proof JSON document",
    )
    verify_parser.add_argument(
        "--genesis", "-g",
        type=str,
        required=True,
        help="Trusted genesis block id (hex)",
    )
    verify_parser.add_argument(
        "--roster", "-r",
        type=str,
        default=None,
        help="Genesis roster JSON (default: trust.anchors from config)",
    )
    key_group = verify_parser.add_mutually_exclusive_group()
    key_group.add_argument(
        "--key", "-k",
        type=str,
        default=None,
        help="Key to check for inclusion (hex)",
    )
    key_group.add_argument(
        "--key-text",
        type=str,
        default=None,
        help="Key to check for inclusion (UTF-8 text)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include detailed checks",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- inspect command ---
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show the structure of a proof (unverified)",
        description="Print trie path, latest block and forward links without verifying.",
    )
    inspect_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to proof JSON document",
    )
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    inspect_parser.set_defaults(func=inspect.inspect_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="ledgerproof.json",
        help="Path for config file (default: ledgerproof.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nAdd the genesis ids and rosters you trust under trust.anchors.")
        print("You can also use environment variables (LEDGERPROOF_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: ledgerproof config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
