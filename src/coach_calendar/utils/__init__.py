"""Shared utilities for Coach Calendar."""
