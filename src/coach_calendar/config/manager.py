"""
YAML-backed configuration for Coach Calendar.

``ConfigManager`` reads and writes ``config.yml`` (validated by the Pydantic
models in ``schema``) and holds the live configuration that the CLI works
from. Callbacks registered on the manager see every replacement of the live
configuration, which is how the timezone resolver follows a changed
``timezone`` section.
"""

import logging
import tempfile
import threading
from pathlib import Path
from typing import Callable

import yaml

from .schema import CoachCalendarConfig

logger = logging.getLogger(__name__)

ConfigChangeCallback = Callable[[CoachCalendarConfig, CoachCalendarConfig], None]

SAMPLE_CONFIG = """# Coach Calendar Configuration File
# Copy this file to config.yml and modify the values as needed.

timezone:
  # Stored timezone preference (IANA identifier such as America/Denver).
  # Leave as null to detect the system timezone.
  preference: null
  # Timezone used when the system timezone cannot be detected
  fallback: "UTC"
  # Value that means "no preference stored"
  neutral: "UTC"

display:
  # Default date style: long, short, month-day, weekday or numeric
  date_style: "long"

logging:
  # Console log level: DEBUG, INFO, WARNING, ERROR or CRITICAL
  level: "INFO"
"""


class ConfigManager:
    """Loads, saves and holds the Coach Calendar configuration."""

    def __init__(self) -> None:
        self._current_config: CoachCalendarConfig | None = None
        self._config_lock: threading.RLock = threading.RLock()
        self._change_callbacks: list[ConfigChangeCallback] = []
        self._config_file_path: Path | None = None

    @staticmethod
    def load_config(config_path: Path) -> CoachCalendarConfig:
        """
        Load and validate a YAML configuration file.

        An empty file is read as an empty mapping, so every section takes its
        defaults.

        Raises:
            FileNotFoundError: If the file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the document is not a mapping
            pydantic.ValidationError: If a value fails schema validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            raw_config_data = {}
        if not isinstance(raw_config_data, dict):
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        return CoachCalendarConfig.model_validate(raw_config_data)

    @staticmethod
    def load_or_default(config_path: Path) -> CoachCalendarConfig:
        """Load ``config_path``, or return the defaults when it does not exist."""
        if not config_path.exists():
            logger.info(f"No configuration file at {config_path}, using defaults")
            return ConfigManager.get_default_config()
        return ConfigManager.load_config(config_path)

    @staticmethod
    def save_config(config: CoachCalendarConfig, config_path: Path) -> None:
        """
        Write the configuration atomically (temporary file, then replace).

        Raises:
            OSError: If the file cannot be written
        """
        content = yaml.dump(
            config.model_dump(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=config_path.parent,
                prefix=f".{config_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_path = Path(temp_file.name)
                _ = temp_file.write(content)

            _ = temp_path.replace(config_path)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise OSError(f"Failed to save configuration to {config_path}: {e}") from e

    @staticmethod
    def get_default_config() -> CoachCalendarConfig:
        return CoachCalendarConfig()

    @staticmethod
    def validate_config(config: CoachCalendarConfig) -> bool:
        """
        Re-run schema validation on a configuration built in code.

        Models changed with ``model_copy(update=...)`` bypass validation, so
        they are round-tripped through ``model_dump`` before being applied.

        Raises:
            pydantic.ValidationError: If the configuration is invalid
        """
        _ = CoachCalendarConfig.model_validate(config.model_dump())
        return True

    @staticmethod
    def create_sample_config(sample_path: Path) -> None:
        """Write the documented sample configuration, creating parent folders."""
        _ = sample_path.parent.mkdir(parents=True, exist_ok=True)
        _ = sample_path.write_text(SAMPLE_CONFIG, encoding="utf-8")

    def set_current_config(self, config: CoachCalendarConfig) -> None:
        """Replace the live configuration and notify callbacks (not on first set)."""
        with self._config_lock:
            old_config = self._current_config
            self._current_config = config
            if old_config is None:
                return

            for callback in self._change_callbacks:
                try:
                    callback(old_config, config)
                except Exception as e:
                    logger.error(f"Error in config change callback: {e}")

    def update_config(self, new_config: CoachCalendarConfig, save: bool = False) -> None:
        """
        Validate and apply a new configuration, notifying callbacks.

        Args:
            new_config: The new configuration to apply
            save: Also write it to ``config_file_path``

        Raises:
            pydantic.ValidationError: If the configuration is invalid
            RuntimeError: If saving is requested but no file path is set
            OSError: If saving fails
        """
        _ = self.validate_config(new_config)

        if save:
            if self._config_file_path is None:
                raise RuntimeError("Cannot save configuration: no config file path set")
            _ = self._config_file_path.parent.mkdir(parents=True, exist_ok=True)
            self.save_config(new_config, self._config_file_path)
            logger.info(f"Configuration saved to {self._config_file_path}")

        self.set_current_config(new_config)

    def get_current_config(self) -> CoachCalendarConfig:
        """
        Get the live configuration.

        Raises:
            RuntimeError: If no configuration has been set
        """
        with self._config_lock:
            if self._current_config is None:
                raise RuntimeError(
                    "No configuration has been set. Call set_current_config() first."
                )
            return self._current_config

    @property
    def config_file_path(self) -> Path | None:
        """Path of the file the live configuration is saved to."""
        return self._config_file_path

    @config_file_path.setter
    def config_file_path(self, path: Path | None) -> None:
        self._config_file_path = path

    def register_change_callback(self, callback: ConfigChangeCallback) -> None:
        """Call ``callback(old, new)`` whenever the live configuration is replaced."""
        with self._config_lock:
            if callback not in self._change_callbacks:
                self._change_callbacks.append(callback)

    def unregister_change_callback(self, callback: ConfigChangeCallback) -> None:
        with self._config_lock:
            if callback in self._change_callbacks:
                self._change_callbacks.remove(callback)
