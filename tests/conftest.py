"""
CaseKeeper - Test Fixtures
==========================

Shared fixtures for all tests.
"""

import asyncio
import dataclasses
import os
import tempfile
from typing import Dict, List, Optional, Set, Tuple

import pytest

# Keep test runs from writing into the project's logs/ directory
os.environ.setdefault("CASEKEEPER_LOG_DIR", tempfile.mkdtemp(prefix="casekeeper-logs-"))

import discord

from src.core.config import Config
from src.core.store import MemoryStore
from src.services.expiry_scheduler import ExpiryScheduler
from src.services.mod_log import ModLogService
from src.services.moderation import Actor, ModerationService
from src.services.platform import (
    EmbedEditor,
    LogReference,
    MemberInfo,
    ModerationPlatform,
    PlatformError,
)


# =============================================================================
# IDs
# =============================================================================

GUILD_ID = 1000
BOT_ID = 999

ROLE_BOARD = 10
ROLE_ADMIN = 11
ROLE_MOD = 12
ROLE_HELPER = 13
MUTED_ROLE = 20
ROLE_VIP = 21
ROLE_HIGH = 22

MOD_CHANNEL = 30
ROLE_LOG_CHANNEL = 31
HISTORY_CHANNEL = 40
HISTORY_CATEGORY = 50
GENERAL_CHANNEL = 60

MOD_ID = 111
ADMIN_ID = 112
BOARD_ID = 113
HELPER_ID = 114
MEMBER_ID = 222
OTHER_MEMBER_ID = 223


# =============================================================================
# Fake Platform
# =============================================================================

class FakePlatform(ModerationPlatform):
    """
    In-memory guild that records every call.

    Operations named in `failing` raise PlatformError, users in
    `dm_blocked` cannot receive DMs and guild permissions named in
    `missing_permissions` are not held by the bot.
    """

    def __init__(self) -> None:
        self.members: Dict[int, MemberInfo] = {}
        self.roles: Dict[int, int] = {
            ROLE_BOARD: 90,
            ROLE_ADMIN: 80,
            ROLE_MOD: 70,
            ROLE_HELPER: 60,
            MUTED_ROLE: 10,
            ROLE_VIP: 20,
            ROLE_HIGH: 95,
        }
        self.bans: Dict[int, str] = {}
        self.channels: Dict[int, str] = {
            MOD_CHANNEL: "mod-actions",
            ROLE_LOG_CHANNEL: "role-log",
            HISTORY_CHANNEL: "history",
            GENERAL_CHANNEL: "general",
        }
        self.locked: Dict[int, bool] = {}
        self.bot_position = 85
        self.dms: List[Tuple[int, discord.Embed]] = []
        self.notices: Dict[LogReference, discord.Embed] = {}
        self.calls: List[Tuple[str, ...]] = []
        self.failing: Set[str] = set()
        self.dm_blocked: Set[int] = set()
        self.missing_permissions: Set[str] = set()
        self._next_message_id = 5000

    # -------------------------------------------------------------------------
    # Setup Helpers
    # -------------------------------------------------------------------------

    def add_member(self, user_id: int, name: str, roles=(), is_bot: bool = False) -> MemberInfo:
        role_ids = frozenset(roles)
        member = MemberInfo(
            id=user_id,
            name=name,
            role_ids=role_ids,
            top_position=max((self.roles.get(r, 0) for r in role_ids), default=0),
            is_bot=is_bot,
        )
        self.members[user_id] = member
        return member

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise PlatformError(operation, "Missing Permissions")

    def _set_roles(self, user_id: int, role_ids) -> None:
        member = self.members[user_id]
        self.members[user_id] = dataclasses.replace(member, role_ids=frozenset(role_ids))

    def notices_in(self, channel_id: int) -> List[discord.Embed]:
        return [embed for ref, embed in self.notices.items() if ref.channel_id == channel_id]

    # -------------------------------------------------------------------------
    # ModerationPlatform
    # -------------------------------------------------------------------------

    @property
    def bot_user_id(self) -> int:
        return BOT_ID

    @property
    def latency(self) -> float:
        return 0.042

    async def fetch_member(self, user_id: int) -> Optional[MemberInfo]:
        self._check("fetch_member")
        return self.members.get(user_id)

    async def fetch_ban(self, user_id: int) -> Optional[str]:
        return self.bans.get(user_id)

    async def role_position(self, role_id: int) -> Optional[int]:
        return self.roles.get(role_id)

    async def bot_top_position(self) -> int:
        return self.bot_position

    async def bot_has_permission(self, permission: str) -> bool:
        return permission not in self.missing_permissions

    async def channel_name(self, channel_id: int) -> Optional[str]:
        return self.channels.get(channel_id)

    async def send_dm(self, user_id: int, embed: discord.Embed) -> bool:
        self.calls.append(("dm", user_id))
        if user_id in self.dm_blocked:
            return False
        self.dms.append((user_id, embed))
        return True

    async def send_embed(self, channel_id: int, embed: discord.Embed) -> LogReference:
        self._check("send")
        self._next_message_id += 1
        reference = LogReference(channel_id, self._next_message_id)
        self.notices[reference] = embed
        return reference

    async def edit_embed(self, reference: LogReference, editor: EmbedEditor) -> None:
        self._check("edit")
        if reference not in self.notices:
            raise PlatformError("edit", "Unknown Message")
        self.notices[reference] = editor(self.notices[reference].copy())

    async def add_role(self, user_id: int, role_id: int, reason: str) -> None:
        self.calls.append(("add_role", user_id, role_id))
        self._check("add_role")
        self._set_roles(user_id, self.members[user_id].role_ids | {role_id})

    async def remove_role(self, user_id: int, role_id: int, reason: str) -> None:
        self.calls.append(("remove_role", user_id, role_id))
        self._check("remove_role")
        self._set_roles(user_id, self.members[user_id].role_ids - {role_id})

    async def ban(self, user_id: int, reason: str) -> None:
        self.calls.append(("ban", user_id))
        self._check("ban")
        member = self.members.pop(user_id)
        self.bans[user_id] = member.name

    async def unban(self, user_id: int, reason: str) -> None:
        self.calls.append(("unban", user_id))
        self._check("unban")
        del self.bans[user_id]

    async def kick(self, user_id: int, reason: str) -> None:
        self.calls.append(("kick", user_id))
        self._check("kick")
        del self.members[user_id]

    async def set_channel_locked(self, channel_id: int, locked: bool, reason: str) -> None:
        self.calls.append(("lock" if locked else "unlock", channel_id))
        self._check("lock")
        self.locked[channel_id] = locked


class ManualSleep:
    """
    Injectable sleep that blocks until released by the test.

    Each call records the requested delay and waits on an event.
    """

    def __init__(self) -> None:
        self.delays: List[float] = []
        self._release = asyncio.Event()

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await self._release.wait()

    def release(self) -> None:
        self._release.set()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config():
    return Config(
        discord_token="test-token",
        guild_id=GUILD_ID,
        role_board_id=ROLE_BOARD,
        role_admin_id=ROLE_ADMIN,
        role_mod_id=ROLE_MOD,
        muted_role_id=MUTED_ROLE,
        mod_action_channel_id=MOD_CHANNEL,
        role_log_channel_id=ROLE_LOG_CHANNEL,
        history_channel_ids={HISTORY_CHANNEL},
        history_category_id=HISTORY_CATEGORY,
        role_management_role_ids={ROLE_HELPER},
    )


@pytest.fixture
def store():
    """A fresh, empty store."""
    return MemoryStore()


@pytest.fixture
def platform():
    fake = FakePlatform()
    fake.add_member(MOD_ID, "mod#0001", roles=[ROLE_MOD])
    fake.add_member(ADMIN_ID, "admin#0001", roles=[ROLE_ADMIN])
    fake.add_member(BOARD_ID, "board#0001", roles=[ROLE_BOARD])
    fake.add_member(HELPER_ID, "helper#0001", roles=[ROLE_HELPER])
    fake.add_member(MEMBER_ID, "member#0001")
    fake.add_member(OTHER_MEMBER_ID, "other#0001")
    return fake


@pytest.fixture
def manual_sleep():
    return ManualSleep()


@pytest.fixture
def mod_log(platform, config, store):
    return ModLogService(platform, config, store)


@pytest.fixture
def scheduler(platform, store, mod_log, manual_sleep):
    return ExpiryScheduler(platform, store, mod_log, sleep=manual_sleep)


@pytest.fixture
def service(platform, config, store, mod_log, scheduler):
    return ModerationService(
        platform,
        config,
        store=store,
        mod_log=mod_log,
        scheduler=scheduler,
    )


def make_actor(platform: FakePlatform, user_id: int, channel_id: int = GENERAL_CHANNEL,
               category_id: Optional[int] = None) -> Actor:
    member = platform.members[user_id]
    return Actor(
        user_id=member.id,
        name=member.name,
        role_ids=member.role_ids,
        top_position=member.top_position,
        channel_id=channel_id,
        category_id=category_id,
    )


@pytest.fixture
def moderator(platform):
    return make_actor(platform, MOD_ID)


@pytest.fixture
def admin(platform):
    return make_actor(platform, ADMIN_ID)


@pytest.fixture
def board(platform):
    return make_actor(platform, BOARD_ID)


@pytest.fixture
def helper(platform):
    return make_actor(platform, HELPER_ID)


@pytest.fixture
def outsider(platform):
    """A member with no staff roles."""
    return make_actor(platform, OTHER_MEMBER_ID)


@pytest.fixture
def moderator_in_history(platform):
    return make_actor(platform, MOD_ID, channel_id=HISTORY_CHANNEL)
