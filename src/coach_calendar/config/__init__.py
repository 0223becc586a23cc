"""Configuration schema and YAML-backed configuration manager."""
