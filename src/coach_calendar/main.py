"""
Main entry point for Coach Calendar.

This module parses command-line arguments, loads configuration, sets up
logging, applies the timezone settings to the process-wide resolver and
dispatches the calendar subcommands.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from .config.manager import ConfigManager
from .config.schema import CoachCalendarConfig
from .utils.cli.args import ParsedArgs, ensure_directories_exist, parse_arguments
from .utils.core.exceptions import CoachCalendarError, ConfigurationError
from .utils.time import (
    COMMON_TIMEZONES,
    CalendarGridCell,
    calendar_grid,
    configure_resolver,
    format_date,
    format_month_title,
    format_week_range,
    get_default_resolver,
    get_timezone_offset,
    get_zone,
    is_today,
    month_dates,
    navigate_date,
    resolve_timezone,
    today,
    week_dates,
    week_range,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2

LOG_FILE = "coach-calendar.log"
ERROR_LOG_FILE = "coach-calendar-errors.log"

logger = logging.getLogger(__name__)


def setup_logging(logs_dir: Path, console_level: str = "INFO") -> None:
    """
    Configure logging with size-based rotation and multiple handlers.

    Sets up a detailed rotating debug log, an error-only rotating log and a
    console handler on stderr (stdout carries command output).

    Args:
        logs_dir: Directory for the log files
        console_level: Level name for the console handler
    """
    _ = logs_dir.mkdir(exist_ok=True, parents=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )
    simple_formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    # File handler with rotation (5MB max, keep 5 backups)
    file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / LOG_FILE,
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)

    error_handler = logging.handlers.RotatingFileHandler(
        logs_dir / ERROR_LOG_FILE,
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(error_handler)


def load_configuration(config_path: Path) -> CoachCalendarConfig:
    """
    Load the configuration file, or defaults when it does not exist.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    try:
        return ConfigManager.load_or_default(config_path)
    except (OSError, yaml.YAMLError, ValueError, PydanticValidationError) as e:
        raise ConfigurationError(
            f"Failed to load configuration from {config_path}: {e}",
            user_message=f"failed to load configuration from {config_path}: {e}",
            context=str(config_path),
        ) from e


def apply_timezone_config(config: CoachCalendarConfig) -> None:
    """Push the configured fallback and neutral timezones into the resolver."""
    _ = configure_resolver(
        fallback=config.timezone.fallback,
        neutral=config.timezone.neutral,
    )


def _on_config_change(old: CoachCalendarConfig, new: CoachCalendarConfig) -> None:
    if old.timezone != new.timezone:
        logger.info("Timezone configuration changed, updating resolver")
        apply_timezone_config(new)


def effective_timezone_for(args: ParsedArgs, config: CoachCalendarConfig) -> str:
    """The --tz option wins over the stored preference."""
    if args.tz is not None:
        return args.tz
    return resolve_timezone(config.timezone.preference)


def render_grid(cells: list[CalendarGridCell], title: str) -> str:
    """
    Render a calendar grid as text, Sunday first.

    Days outside the month are shown as dots and today is bracketed.
    """
    lines = [title.center(28).rstrip(), " Su  Mo  Tu  We  Th  Fr  Sa"]
    for row_start in range(0, len(cells), 7):
        row: list[str] = []
        for cell in cells[row_start : row_start + 7]:
            day = int(cell.date[-2:])
            if cell.is_today:
                row.append(f"[{day:>2}]")
            elif cell.is_current_month:
                row.append(f" {day:>2} ")
            else:
                row.append("  . ")
        lines.append("".join(row).rstrip())
    return "\n".join(lines)


def store_timezone_preference(config_manager: ConfigManager, value: str) -> dict[str, object]:
    """
    Persist a timezone preference, or clear it with 'none'.

    Raises:
        InvalidTimezoneError: If the identifier is not resolvable
        ConfigurationError: If the config file cannot be written
    """
    config = config_manager.get_current_config()
    preference = None if value.lower() == "none" else value
    if preference is not None:
        _ = get_zone(preference)

    new_config = config.model_copy(
        update={"timezone": config.timezone.model_copy(update={"preference": preference})}
    )
    try:
        config_manager.update_config(new_config, save=True)
    except OSError as e:
        raise ConfigurationError(
            f"Failed to save configuration: {e}",
            context=str(config_manager.config_file_path),
        ) from e

    return {
        "preference": preference,
        "timezone": resolve_timezone(preference),
        "config_file": str(config_manager.config_file_path),
    }


def write_sample_config(config_path: Path, force: bool) -> dict[str, object]:
    """
    Write the documented sample configuration.

    Raises:
        ConfigurationError: If the file exists (without force) or cannot be written
    """
    if config_path.exists() and not force:
        raise ConfigurationError(
            f"Configuration file already exists: {config_path}",
            user_message=f"{config_path} already exists (use --force to overwrite)",
            context=str(config_path),
        )
    try:
        ConfigManager.create_sample_config(config_path)
    except OSError as e:
        raise ConfigurationError(
            f"Failed to write sample configuration: {e}", context=str(config_path)
        ) from e
    logger.info(f"Sample configuration written to {config_path}")
    return {"created": str(config_path)}


def run_command(args: ParsedArgs, config_manager: ConfigManager) -> object:
    """
    Execute a calendar subcommand.

    Returns:
        A JSON-serialisable result, or a string for text-only output

    Raises:
        CoachCalendarError: If the command input is invalid
    """
    config = config_manager.get_current_config()
    if args.command == "init-config":
        return write_sample_config(args.config_file, bool(args.options.get("force")))
    if args.command == "set-timezone":
        return store_timezone_preference(config_manager, str(args.options["timezone"]))

    tz = effective_timezone_for(args, config)
    options = args.options
    logger.debug(f"Running {args.command} in {tz} with {options}")

    match args.command:
        case "today":
            current = today(tz)
            return {
                "date": current,
                "timezone": tz,
                "formatted": format_date(current, config.display.date_style, tz),
            }
        case "navigate":
            return {
                "date": navigate_date(str(options["date"]), options["direction"], tz),  # pyright: ignore[reportArgumentType]
                "timezone": tz,
            }
        case "week":
            week = week_range(str(options["date"]), tz)
            return {
                "start": week.start,
                "end": week.end,
                "label": format_week_range(week.start, tz),
                "dates": list(week_dates(week.start, tz)),
            }
        case "month":
            return list(month_dates(int(str(options["year"])), int(str(options["month"])), tz))
        case "grid":
            year, month = int(str(options["year"])), int(str(options["month"]))
            cells = calendar_grid(year, month, tz)
            if args.json:
                return [
                    {
                        "date": cell.date,
                        "isCurrentMonth": cell.is_current_month,
                        "isToday": cell.is_today,
                        "dayOfWeek": cell.day_of_week,
                    }
                    for cell in cells
                ]
            return render_grid(cells, format_month_title(year, month, tz))
        case "format":
            value = str(options["date"])
            style = options.get("style") or config.display.date_style
            return {
                "date": value,
                "formatted": format_date(value, style, tz),  # pyright: ignore[reportArgumentType]
                "is_today": is_today(value, tz),
            }
        case "resolve":
            resolver = get_default_resolver()
            return {
                "timezone": tz,
                "preference": config.timezone.preference,
                "detected": resolver.detected,
                "fallback": resolver.fallback,
            }
        case "timezones":
            return [
                {"id": tz_id, "label": label, "offset_minutes": get_timezone_offset(tz_id)}
                for tz_id, label in COMMON_TIMEZONES
            ]
        case _:
            raise ValueError(f"Unknown command: {args.command}")


def render(result: object, as_json: bool) -> str:
    """Render a command result for stdout."""
    if as_json:
        return json.dumps(result, indent=2)
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        return "\n".join(f"{key}: {value}" for key, value in result.items())  # pyright: ignore[reportUnknownVariableType]
    if isinstance(result, list):
        lines: list[str] = []
        for item in result:  # pyright: ignore[reportUnknownVariableType]
            if isinstance(item, dict):
                lines.append("  ".join(str(v) for v in item.values()))  # pyright: ignore[reportUnknownVariableType,reportUnknownArgumentType]
            else:
                lines.append(str(item))  # pyright: ignore[reportUnknownArgumentType]
        return "\n".join(lines)
    return str(result)


def run(argv: list[str] | None = None) -> int:
    """
    Run the command-line interface.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    args = parse_arguments(argv)

    config_manager = ConfigManager()
    try:
        # init-config may replace a broken file, so it never reads it
        config = (
            ConfigManager.get_default_config()
            if args.command == "init-config"
            else load_configuration(args.config_file)
        )
    except ConfigurationError as e:
        print(f"Error: {e.user_message}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        ensure_directories_exist(args)
        setup_logging(args.log_folder, config.logging.level)
    except OSError as e:
        print(f"Error: cannot set up logging in {args.log_folder}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    config_manager.config_file_path = args.config_file
    config_manager.register_change_callback(_on_config_change)
    config_manager.set_current_config(config)
    apply_timezone_config(config)

    try:
        result = run_command(args, config_manager)
    except ConfigurationError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e.user_message}", file=sys.stderr)
        return EXIT_FAILURE
    except CoachCalendarError as e:
        logger.debug(f"Rejected input for {args.command}: {e}")
        print(f"Error: {e.user_message}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    print(render(result, args.json))
    return EXIT_OK
