"""
Outbound notifications.

Engine operations never talk to the transport directly. They return a list
of ``Notification`` records which the adapter hands to ``dispatch`` once the
state change is committed.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .models import MessageRef

logger = logging.getLogger(__name__)

KIND_TEXT = "text"
KIND_IMAGE = "image"
KIND_DELETE = "delete"


@dataclass
class Notification:
    kind: str
    recipient: int
    text: str = ""  # message text, or caption for images
    image: Optional[str] = None
    ref: Optional[MessageRef] = None  # message to delete
    track_reveal: bool = False  # remember the delivered message as the game's last reveal

    @classmethod
    def message(cls, recipient: int, text: str) -> 'Notification':
        return cls(KIND_TEXT, recipient, text=text)

    @classmethod
    def photo(cls, recipient: int, image: str, caption: str, track_reveal: bool = False) -> 'Notification':
        return cls(KIND_IMAGE, recipient, text=caption, image=image, track_reveal=track_reveal)

    @classmethod
    def delete(cls, ref: MessageRef) -> 'Notification':
        return cls(KIND_DELETE, ref.chat_id, ref=ref)


class Notifier(Protocol):
    """Capabilities the engine expects from a chat transport."""

    async def send_text(self, recipient: int, text: str) -> MessageRef:
        ...

    async def send_image(self, recipient: int, image: str, caption: str) -> MessageRef:
        ...

    async def delete_message(self, ref: MessageRef) -> None:
        ...


async def deliver(notifier: Notifier, notification: Notification) -> Optional[MessageRef]:
    """Send a single notification and return the transport's reference to it."""
    if notification.kind == KIND_TEXT:
        return await notifier.send_text(notification.recipient, notification.text)
    if notification.kind == KIND_IMAGE:
        return await notifier.send_image(notification.recipient, notification.image, notification.text)
    if notification.kind == KIND_DELETE:
        await notifier.delete_message(notification.ref)
        return None
    raise ValueError(f"Unknown notification kind: {notification.kind}")


async def dispatch(notifier: Notifier, notifications: List[Notification]) -> Optional[MessageRef]:
    """
    Deliver notifications in order.

    A failure for one recipient (blocked bot, closed connection) is logged
    and skipped; the rest of the batch is still delivered.

    Returns:
        Reference of the delivered notification flagged ``track_reveal``, if any
    """
    tracked = None
    for notification in notifications:
        try:
            ref = await deliver(notifier, notification)
        except Exception as e:
            logger.warning(f"Could not deliver {notification.kind} to {notification.recipient}: {e}")
            continue
        if notification.track_reveal:
            tracked = ref
    return tracked
