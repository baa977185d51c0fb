"""Per-chat serialization of update handling."""
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from functools import wraps

from telegram import Update
from telegram.ext import ContextTypes


class _Slot:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


class ChatLocks:
    """One lock per chat id, so updates of the same chat run one at a time.

    A slot only lives while some handler holds or waits for it, so the map
    stays as small as the number of chats currently being processed.
    """

    def __init__(self) -> None:
        self._slots: dict[int, _Slot] = {}

    @asynccontextmanager
    async def hold(self, chat_id: int) -> AsyncIterator[None]:
        slot = self._slots.get(chat_id)
        if slot is None:
            slot = self._slots[chat_id] = _Slot()
        slot.users += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.users -= 1
            if slot.users == 0:
                del self._slots[chat_id]


Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]


def serialized_per_chat(handler: Handler) -> Handler:
    """Run ``handler`` while holding the lock of the update's chat."""

    @wraps(handler)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        locks: ChatLocks | None = context.application.bot_data.get("chat_locks")
        chat = update.effective_chat
        if locks is None or chat is None:
            await handler(update, context)
            return
        async with locks.hold(chat.id):
            await handler(update, context)

    return wrapper
