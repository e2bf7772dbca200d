"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment variable or settings value cannot be used."""


class MissingConfigurationError(ConfigurationError):
    """One or more required environment variables are unset or blank."""
