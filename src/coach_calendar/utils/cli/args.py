"""
Command-line argument parsing for Coach Calendar.

This module parses the global path/timezone options and the calendar
subcommands of the ``coach-calendar`` command.
"""

import argparse
import sys
from pathlib import Path
from typing import NamedTuple

from ..core.version import get_version
from ..time.formatting import DATE_STYLES


class PathValidationError(Exception):
    """Raised when a path validation fails."""

    pass


class ParsedArgs(NamedTuple):
    """Container for parsed command-line arguments."""

    config_file: Path
    log_folder: Path
    command: str
    tz: str | None
    json: bool
    options: dict[str, object]


class DefaultPaths:
    """Default paths for Coach Calendar."""

    CONFIG_FILE: Path = Path("data/config/config.yml")
    LOG_FOLDER: Path = Path("data/logs")


def validate_config_file_path(config_file_str: str) -> Path:
    """
    Validate configuration file path.

    Args:
        config_file_str: String path to configuration file

    Returns:
        Resolved Path object for the configuration file

    Raises:
        PathValidationError: If the configuration file path is invalid
    """
    try:
        config_file = Path(config_file_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid config file path: {e}") from e

    if config_file.exists() and config_file.is_dir():
        raise PathValidationError(
            f"Config file path exists but is not a file: {config_file}"
        )

    return config_file


def validate_folder_path(path_str: str, folder_name: str) -> Path:
    """
    Validate and resolve a folder path.

    Args:
        path_str: String representation of the folder path
        folder_name: Name of the folder (for error messages)

    Returns:
        Resolved absolute path to the folder

    Raises:
        PathValidationError: If the path is invalid
    """
    try:
        path = Path(path_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid {folder_name} path: {e}") from e

    if path.exists() and not path.is_dir():
        raise PathValidationError(
            f"{folder_name.capitalize()} path exists but is not a directory: {path}"
        )

    return path


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for Coach Calendar.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="coach-calendar",
        description="Coach Calendar - timezone-aware calendar dates for the coaching app",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  coach-calendar --tz America/Los_Angeles today
    Show today's date for a user on the US west coast

  coach-calendar navigate 2025-08-31 next
    Step to the following calendar day

  coach-calendar --json grid 2025 9
    Print the 42-cell month grid for September 2025 as JSON

  coach-calendar set-timezone Europe/London
    Store a timezone preference in the config file
""",
    )

    defaults = DefaultPaths()

    _ = parser.add_argument(
        "--config-file",
        type=str,
        default=str(defaults.CONFIG_FILE),
        help="Path to the configuration file (default: %(default)s). Defaults are used if it doesn't exist.",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--log-folder",
        type=str,
        default=str(defaults.LOG_FOLDER),
        help="Path to the log folder (default: %(default)s). Created if it doesn't exist.",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--tz",
        type=str,
        default=None,
        help="IANA timezone to use instead of the configured preference",
        metavar="TZ",
    )
    _ = parser.add_argument(
        "--json", action="store_true", help="Print results as JSON"
    )
    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    _ = subparsers.add_parser("today", help="Show today's date")

    navigate = subparsers.add_parser("navigate", help="Step one day backwards or forwards")
    _ = navigate.add_argument("date", help="Date in YYYY-MM-DD format")
    _ = navigate.add_argument("direction", choices=["prev", "next"])

    week = subparsers.add_parser("week", help="Show the Monday-Sunday week containing a date")
    _ = week.add_argument("date", help="Date in YYYY-MM-DD format")

    month = subparsers.add_parser("month", help="List every date of a month")
    _ = month.add_argument("year", type=int)
    _ = month.add_argument("month", type=int)

    grid = subparsers.add_parser("grid", help="Show the 6-week calendar grid of a month")
    _ = grid.add_argument("year", type=int)
    _ = grid.add_argument("month", type=int)

    fmt = subparsers.add_parser("format", help="Format a date for display")
    _ = fmt.add_argument("date", help="Date in YYYY-MM-DD format")
    _ = fmt.add_argument(
        "--style",
        choices=DATE_STYLES,
        default=None,
        help="Date style (default: configured display.date_style)",
    )

    _ = subparsers.add_parser("resolve", help="Show the effective timezone")
    _ = subparsers.add_parser("timezones", help="List common timezones and their offsets")

    set_tz = subparsers.add_parser(
        "set-timezone", help="Store a timezone preference in the config file"
    )
    _ = set_tz.add_argument(
        "timezone",
        help="IANA timezone identifier, or 'none' to clear the preference",
    )

    init = subparsers.add_parser("init-config", help="Write a documented sample config file")
    _ = init.add_argument(
        "--force", action="store_true", help="Overwrite an existing config file"
    )

    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        ParsedArgs containing validated paths and the chosen command

    Raises:
        SystemExit: If argument parsing fails, path validation fails or
            --help is requested
    """
    parser = create_argument_parser()
    parsed = parser.parse_args(args)

    namespace: dict[str, object] = dict(vars(parsed))
    config_file_str = str(namespace.pop("config_file"))
    log_folder_str = str(namespace.pop("log_folder"))
    command = str(namespace.pop("command"))
    tz = namespace.pop("tz")
    as_json = bool(namespace.pop("json"))

    try:
        config_file = validate_config_file_path(config_file_str)
        log_folder = validate_folder_path(log_folder_str, "log folder")
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return ParsedArgs(
        config_file=config_file,
        log_folder=log_folder,
        command=command,
        tz=tz if isinstance(tz, str) else None,
        json=as_json,
        options=namespace,
    )


def ensure_directories_exist(parsed_args: ParsedArgs) -> None:
    """
    Ensure that the log directory exists.

    Raises:
        OSError: If directory creation fails
    """
    parsed_args.log_folder.mkdir(parents=True, exist_ok=True)
