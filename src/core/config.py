"""
CaseKeeper - Configuration Module
=================================

Centralized configuration management with environment variable validation.

DESIGN:
    A single Config dataclass is loaded from environment variables at
    startup. Role and channel IDs are integers so comparisons against
    discord.py snowflakes never depend on string formatting.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Permission tiers are derived from the configured role IDs
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Set
from zoneinfo import ZoneInfo


# =============================================================================
# Timezone Configuration
# =============================================================================

LOCAL_TZ = ZoneInfo("Europe/London")
"""Timezone used for log timestamps and embed footers."""


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        guild_id: The community server the bot moderates.
        role_board_id: Board of Directors role.
        role_admin_id: Administrator role.
        role_mod_id: Moderator role.
        muted_role_id: Role applied to muted members.
        mod_action_channel_id: Channel receiving case notices.
        role_log_channel_id: Channel receiving role change notices.
        history_channel_ids: Channels where history/notes/reason may be used.
        history_category_id: Category whose channels also qualify.
        role_management_role_ids: Extra roles allowed to add/remove roles.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str
    guild_id: int

    # -------------------------------------------------------------------------
    # Required: Roles
    # -------------------------------------------------------------------------

    role_board_id: int
    role_admin_id: int
    role_mod_id: int
    muted_role_id: int

    # -------------------------------------------------------------------------
    # Required: Channels
    # -------------------------------------------------------------------------

    mod_action_channel_id: int

    # -------------------------------------------------------------------------
    # Optional: Channels
    # -------------------------------------------------------------------------

    role_log_channel_id: Optional[int] = None
    history_channel_ids: Set[int] = field(default_factory=set)
    history_category_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Roles
    # -------------------------------------------------------------------------

    role_management_role_ids: Set[int] = field(default_factory=set)

    # -------------------------------------------------------------------------
    # Optional: Display
    # -------------------------------------------------------------------------

    server_name: str = "Thames Valley Roleplay"
    developer_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None

    # =========================================================================
    # Permission Tiers
    # =========================================================================

    @property
    def staff_roles(self) -> FrozenSet[int]:
        """Moderator, Administrator and Board of Directors."""
        return frozenset({self.role_mod_id, self.role_admin_id, self.role_board_id})

    @property
    def board_roles(self) -> FrozenSet[int]:
        return frozenset({self.role_board_id})

    @property
    def admin_board_roles(self) -> FrozenSet[int]:
        return frozenset({self.role_admin_id, self.role_board_id})

    @property
    def role_management_roles(self) -> FrozenSet[int]:
        """Configured allowlist plus all staff roles."""
        return frozenset(self.role_management_role_ids) | self.staff_roles

    @property
    def role_temp_roles(self) -> FrozenSet[int]:
        return self.admin_board_roles

    @property
    def role_log_channel(self) -> int:
        """Role notices fall back to the mod action channel."""
        return self.role_log_channel_id or self.mod_action_channel_id


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Per-action colour palette for case notices."""

    BAN = 0xFF0000
    UNBAN = 0x00FF99
    MUTE = 0xFFA500
    UNMUTE = 0x00FFFF
    KICK = 0xFF66FF
    CHANNEL_LOCK = 0x9933FF
    CHANNEL_UNLOCK = 0x33CCFF
    MODNOTE_ADD = 0xFFFF00
    MODNOTE_REMOVE = 0xCC9900
    MODNOTE_SHOW = 0xFFFFFF
    WARN_ADD = 0xFF5555
    WARN_REMOVE = 0x55FF55
    HISTORY = 0x9999FF
    REASON_UPDATE = 0x00FFCC
    ROLE_ADD = 0x00CC66
    ROLE_REMOVE = 0xCC6600
    ROLE_TEMP = 0x66CCFF


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int(value: Optional[str], name: str) -> int:
    """
    Parse string to integer with descriptive error handling.

    Raises:
        ConfigValidationError: If value is missing or not a valid integer.
    """
    if not value:
        raise ConfigValidationError(f"Missing required: {name}")
    try:
        return int(value)
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """Parse optional string to integer, returning None on failure."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_set(value: Optional[str]) -> Set[int]:
    """
    Parse comma-separated string to set of integers.

    Args:
        value: Comma-separated string of integers (e.g., "123,456,789").

    Returns:
        Set of parsed integers, empty set if input is None or empty.
    """
    if not value:
        return set()
    result = set()
    for part in value.split(","):
        part = part.strip()
        if part:
            try:
                result.add(int(part))
            except ValueError:
                pass  # Skip invalid entries silently
    return result


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL if it looks like http(s), else None with a warning."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

REQUIRED_VARIABLES = (
    "DISCORD_TOKEN",
    "GUILD_ID",
    "ROLE_BOARD_ID",
    "ROLE_ADMIN_ID",
    "ROLE_MOD_ID",
    "MUTED_ROLE_ID",
    "MOD_ACTION_CHANNEL_ID",
)


def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    DESIGN:
        Collects every missing required variable before failing so the
        operator sees the full list in one run.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    missing = [name for name in REQUIRED_VARIABLES if not os.getenv(name)]
    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return Config(
        discord_token=os.getenv("DISCORD_TOKEN"),
        guild_id=_parse_int(os.getenv("GUILD_ID"), "GUILD_ID"),
        role_board_id=_parse_int(os.getenv("ROLE_BOARD_ID"), "ROLE_BOARD_ID"),
        role_admin_id=_parse_int(os.getenv("ROLE_ADMIN_ID"), "ROLE_ADMIN_ID"),
        role_mod_id=_parse_int(os.getenv("ROLE_MOD_ID"), "ROLE_MOD_ID"),
        muted_role_id=_parse_int(os.getenv("MUTED_ROLE_ID"), "MUTED_ROLE_ID"),
        mod_action_channel_id=_parse_int(
            os.getenv("MOD_ACTION_CHANNEL_ID"), "MOD_ACTION_CHANNEL_ID"
        ),
        role_log_channel_id=_parse_int_optional(os.getenv("ROLE_LOG_CHANNEL_ID")),
        history_channel_ids=_parse_int_set(os.getenv("HISTORY_CHANNEL_IDS")),
        history_category_id=_parse_int_optional(os.getenv("HISTORY_CATEGORY_ID")),
        role_management_role_ids=_parse_int_set(os.getenv("ROLE_MANAGEMENT_ROLE_IDS")),
        server_name=os.getenv("SERVER_NAME", "Thames Valley Roleplay"),
        developer_id=_parse_int_optional(os.getenv("DEVELOPER_ID")),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration (used by tests and reloads)."""
    global _config
    _config = config


def validate_and_log_config() -> None:
    """
    Validate configuration and log a summary at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from src.core.logger import logger

    config = get_config()

    if not config.role_log_channel_id:
        logger.info("Optional config not set: ROLE_LOG_CHANNEL_ID (using mod action channel)")
    if not config.history_channel_ids and not config.history_category_id:
        logger.warning("No history channels configured - /history, /reason and /modnote show are unusable")

    logger.tree("Configuration Validated", [
        ("Guild", str(config.guild_id)),
        ("Staff Roles", str(len(config.staff_roles))),
        ("Role Managers", str(len(config.role_management_roles))),
        ("History Channels", str(len(config.history_channel_ids))),
        ("Error Webhook", "Enabled" if config.error_webhook_url else "Disabled"),
    ], emoji="⚙️")


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "LOCAL_TZ",
    "REQUIRED_VARIABLES",
    "get_config",
    "set_config",
    "load_config",
    "validate_and_log_config",
]
