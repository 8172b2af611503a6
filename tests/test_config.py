"""
Tests for src/core/config.py
"""

import pytest

from src.core.config import (
    REQUIRED_VARIABLES,
    Config,
    ConfigValidationError,
    get_config,
    load_config,
    set_config,
)


REQUIRED_ENV = {
    "DISCORD_TOKEN": "token",
    "GUILD_ID": "1000",
    "ROLE_BOARD_ID": "10",
    "ROLE_ADMIN_ID": "11",
    "ROLE_MOD_ID": "12",
    "MUTED_ROLE_ID": "20",
    "MOD_ACTION_CHANNEL_ID": "30",
}

OPTIONAL_VARIABLES = (
    "ROLE_LOG_CHANNEL_ID",
    "HISTORY_CHANNEL_IDS",
    "HISTORY_CATEGORY_ID",
    "ROLE_MANAGEMENT_ROLE_IDS",
    "SERVER_NAME",
    "DEVELOPER_ID",
    "ERROR_WEBHOOK_URL",
)


@pytest.fixture
def env(monkeypatch):
    for name in REQUIRED_VARIABLES + OPTIONAL_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    yield monkeypatch
    set_config(None)


# =============================================================================
# Loading
# =============================================================================

class TestLoadConfig:
    def test_required_only(self, env):
        config = load_config()

        assert config.guild_id == 1000
        assert config.muted_role_id == 20
        assert config.history_channel_ids == set()
        assert config.role_log_channel_id is None
        assert config.server_name == "Thames Valley Roleplay"

    def test_missing_variables_are_listed(self, env):
        env.delenv("GUILD_ID")
        env.delenv("MUTED_ROLE_ID")

        with pytest.raises(ConfigValidationError) as exc:
            load_config()

        assert "GUILD_ID" in str(exc.value)
        assert "MUTED_ROLE_ID" in str(exc.value)

    def test_invalid_integer(self, env):
        env.setenv("ROLE_MOD_ID", "moderator")

        with pytest.raises(ConfigValidationError, match="ROLE_MOD_ID"):
            load_config()

    def test_optional_values(self, env):
        env.setenv("HISTORY_CHANNEL_IDS", "40, 41,,bogus")
        env.setenv("ROLE_MANAGEMENT_ROLE_IDS", "13")
        env.setenv("ROLE_LOG_CHANNEL_ID", "31")
        env.setenv("ERROR_WEBHOOK_URL", "not-a-url")

        config = load_config()

        assert config.history_channel_ids == {40, 41}
        assert config.role_management_role_ids == {13}
        assert config.role_log_channel == 31
        assert config.error_webhook_url is None

    def test_get_config_is_cached(self, env):
        set_config(None)
        first = get_config()
        env.setenv("GUILD_ID", "2000")

        assert get_config() is first


# =============================================================================
# Permission Tiers
# =============================================================================

class TestTiers:
    def test_tiers(self, config):
        assert config.staff_roles == {10, 11, 12}
        assert config.board_roles == {10}
        assert config.admin_board_roles == {10, 11}
        assert config.role_temp_roles == {10, 11}
        assert config.role_management_roles == {10, 11, 12, 13}

    def test_role_log_falls_back_to_mod_channel(self):
        config = Config(
            discord_token="t",
            guild_id=1,
            role_board_id=10,
            role_admin_id=11,
            role_mod_id=12,
            muted_role_id=20,
            mod_action_channel_id=30,
        )
        assert config.role_log_channel == 30
