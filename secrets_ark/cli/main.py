"""CLI entrypoint for secrets-ark."""
import sys
import argparse
import logging
from typing import List, Optional, TextIO

from secrets_ark.secrets.domains.config_loader import (
    CheckerConfig,
    ConfigError,
    load_config,
    validate_keys,
)
from secrets_ark.secrets.domains.environment import EnvironmentLookup
from secrets_ark.secrets.domains.models import InvalidInputPolicy, StatusPolicy
from secrets_ark.secrets.workflows.secret_check import check_secrets, error_report

from .io_adapter import InputDecodeError, parse_input, read_input_json, write_output_json
from .validators import split_keys

VERSION = "0.1.0"

# Configure logging to stderr; stdout carries only the JSON report
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def _read_input(stdin: Optional[TextIO]):
    """Read raw input, treating a closed or interactive stdin as no input."""
    if stdin is None:
        return None
    if stdin.isatty():
        logger.debug("stdin is a terminal, skipping input")
        return None
    return read_input_json(stdin)


def run(
    config: CheckerConfig,
    stdin: Optional[TextIO],
    stdout: TextIO,
    environment: Optional[EnvironmentLookup] = None,
) -> int:
    """
    Read optional input, check secrets, and write one JSON report.

    Args:
        config: Resolved checker settings
        stdin: Input stream (may be None)
        stdout: Output stream for the report
        environment: Lookup capability (defaults to the process environment)

    Returns:
        Process exit code
    """
    report = None

    try:
        check_input = parse_input(_read_input(stdin))
        logger.debug(f"Received input message of {len(check_input.message)} characters")
    except InputDecodeError as e:
        if config.on_invalid_input == InvalidInputPolicy.ERROR:
            logger.warning(f"Failed to parse input: {e}")
            report = error_report(f"Failed to parse input: {e}")
        else:
            logger.warning(f"Ignoring invalid input, using defaults: {e}")
    except OSError as e:
        print(f"Error: Failed to read input: {e}", file=sys.stderr)
        return 1

    if report is None:
        report = check_secrets(config.keys, environment=environment, policy=config.policy)

    try:
        write_output_json(report, stdout)
    except OSError as e:
        print(f"Error: Failed to write output: {e}", file=sys.stderr)
        return 1

    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secrets-ark",
        description="Check which secrets are set in the environment and print a JSON report",
        epilog="""
Input:
  An optional JSON object on stdin, e.g. {"message": ""}. Empty or invalid
  input does not stop the check.

Exit codes:
  0 - Report written (whatever number of secrets was found)
  1 - Runtime error (unreadable input stream, unwritable output)
  2 - Usage error (invalid arguments or configuration)

Environment variables:
  SECRETS_ARK_CONFIG - Path to config file

Configuration:
  Default location: ~/.config/secrets-ark/config.yml
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config file (overrides SECRETS_ARK_CONFIG and the default location)"
    )
    parser.add_argument(
        "--keys",
        help="Comma-separated environment variable names to check (overrides config)"
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in StatusPolicy],
        help="How the report status is derived (overrides config)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug information to stderr"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"secrets-ark {VERSION}"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (unreadable input, unwritable output)
        2 - Usage errors (invalid arguments, invalid config)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
        if args.keys is not None:
            config.keys = validate_keys(split_keys(args.keys), "--keys")
        if args.policy:
            config.policy = StatusPolicy(args.policy)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        code = run(config, sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
