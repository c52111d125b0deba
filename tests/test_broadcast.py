import asyncio

from forum.services.broadcast import ConnectionRegistry


class FakeSocket:
    def __init__(self, broken=False):
        self.broken = broken
        self.sent = []
        self.accepted = False
        self.closed = False

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.broken:
            raise RuntimeError("connection reset")
        self.sent.append(data)

    async def close(self):
        self.closed = True


def run(coro):
    return asyncio.run(coro)


def test_broadcast_reaches_every_unfiltered_connection():
    registry = ConnectionRegistry()
    a, b = FakeSocket(), FakeSocket()

    async def scenario():
        await registry.connect(a)
        await registry.connect(b)
        return await registry.broadcast("postLiked", {"postId": 1, "userId": 2}, post_id=1)

    assert run(scenario()) == 2
    assert a.accepted and b.accepted
    assert a.sent == b.sent == [{"event": "postLiked", "data": {"postId": 1, "userId": 2}}]


def test_failed_send_drops_connection():
    registry = ConnectionRegistry()
    good, dead = FakeSocket(), FakeSocket(broken=True)

    async def scenario():
        await registry.connect(good)
        await registry.connect(dead)
        first = await registry.broadcast("userTyping", {"postId": 3, "user": "x"})
        second = await registry.broadcast("userTyping", {"postId": 3, "user": "x"})
        return first, second

    assert run(scenario()) == (1, 1)
    assert len(registry) == 1
    assert len(good.sent) == 2


def test_subscriptions_and_exclusion():
    registry = ConnectionRegistry()
    watcher, other, sender = FakeSocket(), FakeSocket(), FakeSocket()

    async def scenario():
        watcher_id = await registry.connect(watcher)
        await registry.connect(other)
        sender_id = await registry.connect(sender)
        registry.subscribe(watcher_id, 7)

        await registry.broadcast("commentAdded", {"postId": 8}, post_id=8, exclude=sender_id)
        await registry.broadcast("commentAdded", {"postId": 7}, post_id=7, exclude=sender_id)
        await registry.broadcast("userOnline", {"userId": 1})

    run(scenario())

    assert [m["data"] for m in watcher.sent] == [{"postId": 7}, {"userId": 1}]
    assert [m["data"] for m in other.sent] == [{"postId": 8}, {"postId": 7}, {"userId": 1}]
    assert [m["event"] for m in sender.sent] == ["userOnline"]


def test_presence_and_close():
    registry = ConnectionRegistry()
    first, second = FakeSocket(), FakeSocket()

    async def scenario():
        first_id = await registry.connect(first)
        second_id = await registry.connect(second)
        registry.authenticate(first_id, 10)
        registry.authenticate(second_id, 10)
        assert registry.disconnect(first_id) == 10
        assert registry.online_users() == {10}
        await registry.close()

    run(scenario())

    assert second.closed
    assert len(registry) == 0
