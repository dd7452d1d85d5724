"""Configuration module for Resolution Desk.

This module provides centralized configuration for the editor.

Available Configurations:
- EditorConfig: Passphrases, timer polling and store transaction tuning
"""

from src.config.editor_config import (
    DEFAULT_CHAIR_PASSPHRASE,
    DEFAULT_COMMITTEE_PASSPHRASES,
    DEFAULT_EDITOR_CONFIG,
    TEST_EDITOR_CONFIG,
    EditorConfig,
)

__all__ = [
    "EditorConfig",
    "DEFAULT_CHAIR_PASSPHRASE",
    "DEFAULT_COMMITTEE_PASSPHRASES",
    "DEFAULT_EDITOR_CONFIG",
    "TEST_EDITOR_CONFIG",
]
