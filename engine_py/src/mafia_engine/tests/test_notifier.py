"""
Tests for delivering notifications through a transport.
"""

import asyncio

import pytest

from mafia_engine.models import MessageRef
from mafia_engine.notifier import Notification, deliver, dispatch


class FakeNotifier:
    """Records deliveries; recipients in ``blocked`` raise like a blocked chat."""

    def __init__(self, blocked=()):
        self.blocked = set(blocked)
        self.sent = []
        self.deleted = []
        self._next_id = 0

    def _ref(self, recipient):
        if recipient in self.blocked:
            raise RuntimeError(f"bot was blocked by {recipient}")
        self._next_id += 1
        return MessageRef(chat_id=recipient, message_id=self._next_id)

    async def send_text(self, recipient, text):
        ref = self._ref(recipient)
        self.sent.append((recipient, text))
        return ref

    async def send_image(self, recipient, image, caption):
        ref = self._ref(recipient)
        self.sent.append((recipient, caption))
        return ref

    async def delete_message(self, ref):
        self._ref(ref.chat_id)
        self.deleted.append(ref)


def test_dispatch_in_order():
    notifier = FakeNotifier()
    notifications = [
        Notification.message(1, "first"),
        Notification.photo(2, "assets/don.png", "second"),
        Notification.delete(MessageRef(chat_id=3, message_id=9)),
    ]

    asyncio.run(dispatch(notifier, notifications))

    assert notifier.sent == [(1, "first"), (2, "second")]
    assert notifier.deleted == [MessageRef(chat_id=3, message_id=9)]


def test_dispatch_skips_failing_recipient():
    """One blocked recipient does not stop the rest of the batch."""
    notifier = FakeNotifier(blocked={2})
    notifications = [Notification.message(uid, f"hi {uid}") for uid in (1, 2, 3)]

    asyncio.run(dispatch(notifier, notifications))

    assert notifier.sent == [(1, "hi 1"), (3, "hi 3")]


def test_dispatch_returns_tracked_reveal():
    notifier = FakeNotifier()
    notifications = [
        Notification.photo(100, "assets/doc.png", "Ann is Doctor", track_reveal=True),
        Notification.photo(1, "assets/doc.png", "Your role is Doctor"),
    ]

    tracked = asyncio.run(dispatch(notifier, notifications))

    assert tracked == MessageRef(chat_id=100, message_id=1)


def test_dispatch_tracked_reveal_failed():
    notifier = FakeNotifier(blocked={100})
    notifications = [Notification.photo(100, "assets/doc.png", "Ann is Doctor", track_reveal=True)]
    assert asyncio.run(dispatch(notifier, notifications)) is None


def test_deliver_unknown_kind():
    with pytest.raises(ValueError):
        asyncio.run(deliver(FakeNotifier(), Notification("carrier-pigeon", 1)))


def test_engine_outbox_dispatch(started_game, engine):
    """Reveal-all keeps going when a player has blocked the bot."""
    game = started_game()
    blocked = game.players[0].id
    notifier = FakeNotifier(blocked={blocked})

    result = engine.reveal_all_players(game.id, 100)
    asyncio.run(dispatch(notifier, result.notifications))

    recipients = [r for r, _ in notifier.sent]
    assert blocked not in recipients
    assert set(recipients) == {p.id for p in game.players[1:]} | {100}
    assert game.players[0].revealed
