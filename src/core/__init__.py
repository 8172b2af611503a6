"""
CaseKeeper - Core Package
=========================

Configuration, logging and the moderation store.

DESIGN:
    Core modules expose process-wide instances so every service sees the
    same state:
    - get_config() returns the same Config instance
    - get_store() returns the same ModerationStore instance
    - logger is a global TreeLogger instance
"""

# =============================================================================
# Core Imports
# =============================================================================

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    LOCAL_TZ,
    get_config,
)

from .logger import logger, TreeLogger

from .store import ModerationStore, MemoryStore, get_store


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "LOCAL_TZ",
    "get_config",
    # Logger
    "logger",
    "TreeLogger",
    # Store
    "ModerationStore",
    "MemoryStore",
    "get_store",
]
