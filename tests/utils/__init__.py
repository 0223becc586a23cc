"""
Test utilities package for Coach Calendar tests.

## Available Modules

### test_helpers.py
- `create_temp_config_file()`: Context manager for temporary YAML config files
- `freeze_now()`: Context manager pinning "now" for the calendar arithmetic functions
- `create_config_manager_with_config()`: Create ConfigManager with pre-set configuration
"""

from .test_helpers import (
    create_config_manager_with_config,
    create_temp_config_file,
    freeze_now,
)

__all__ = [
    "create_config_manager_with_config",
    "create_temp_config_file",
    "freeze_now",
]
