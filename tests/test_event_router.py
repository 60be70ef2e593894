import asyncio

from guildkeeper.event_hooks import default_router
from guildkeeper.event_hooks.router import EventKind, EventRouter


def test_failing_handler_does_not_block_others(caplog):
    router = EventRouter()
    seen = []

    @router.on(EventKind.MESSAGE_CREATE)
    async def broken(message):
        raise RuntimeError("boom")

    @router.on(EventKind.MESSAGE_CREATE)
    async def healthy(message):
        seen.append(message)

    asyncio.run(router.dispatch(EventKind.MESSAGE_CREATE, "hello"))

    assert seen == ["hello"]
    assert "boom" in caplog.text


def test_dispatch_without_handlers_is_noop():
    asyncio.run(EventRouter().dispatch(EventKind.THREAD_CREATE, object()))


def test_default_router_covers_every_feature_event():
    router = default_router()

    for kind in (
        EventKind.READY,
        EventKind.MESSAGE_CREATE,
        EventKind.MESSAGE_UPDATE,
        EventKind.MESSAGE_DELETE,
        EventKind.INTERACTION_CREATE,
        EventKind.THREAD_CREATE,
        EventKind.MEMBER_ADD,
        EventKind.MEMBER_UPDATE,
        EventKind.MEMBER_REMOVE,
    ):
        assert router.handlers(kind), kind
