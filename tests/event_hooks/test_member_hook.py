import asyncio
from types import SimpleNamespace

from guildkeeper.event_hooks import member_hook
from guildkeeper.memory.cache import CachedMember
from guildkeeper.services import build_services

GUILD = SimpleNamespace(id=1)
DISPLAY_ROLE = 50


class FakeMember:
    def __init__(self, member_id, roles=()):
        self.id = member_id
        self.guild = GUILD
        self.name = f"user{member_id}"
        self.display_name = self.name
        self.bot = False
        self.joined_at = None
        self.roles = [SimpleNamespace(id=r) for r in roles]
        self.added = []
        self.removed = []

    async def add_roles(self, *roles, reason=None):
        self.added.extend(r.id for r in roles)

    async def remove_roles(self, *roles, reason=None):
        self.removed.extend(r.id for r in roles)


def _bot(make_config, bot_cls):
    config = make_config(
        {
            "thread_auto_invite": {
                "role_ids": [101, 102],
                "display_role_id": DISPLAY_ROLE,
                "min_member_count": 2,
            }
        }
    )
    return bot_cls(services=build_services(config))


def test_join_and_remove_keep_store_current(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)
    members = bot.services.members

    asyncio.run(member_hook.handle_join(bot, FakeMember(7, roles=[3])))
    assert members.get(1, 7).role_ids == frozenset({3})

    payload = SimpleNamespace(guild_id=1, user=SimpleNamespace(id=7))
    asyncio.run(member_hook.handle_remove(bot, payload))
    assert members.get(1, 7) is None


def test_gaining_display_role_grants_invitation_role(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)
    services = bot.services
    services.members.insert(CachedMember(guild_id=1, user_id=7, name="user7", display_name="user7"))
    after = FakeMember(7, roles=[DISPLAY_ROLE])

    asyncio.run(member_hook.handle_update(bot, FakeMember(7), after))

    assert after.added == [101]
    assert services.role_counts.get(101) == 1
    assert services.members.get(1, 7).has_role(DISPLAY_ROLE)


def test_losing_display_role_removes_invitation_role(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)
    services = bot.services
    services.members.insert(
        CachedMember(guild_id=1, user_id=7, name="user7", display_name="user7", role_ids=frozenset({DISPLAY_ROLE, 102}))
    )
    services.role_counts.initialize(services.members.get_all(1))
    after = FakeMember(7, roles=[102])

    asyncio.run(member_hook.handle_update(bot, FakeMember(7), after))

    assert after.removed == [102]
    assert services.role_counts.get(102) == 0


def test_update_without_previous_state_only_caches(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)
    after = FakeMember(8, roles=[DISPLAY_ROLE])

    asyncio.run(member_hook.handle_update(bot, FakeMember(8), after))

    assert after.added == []
    assert bot.services.members.get(1, 8) is not None
