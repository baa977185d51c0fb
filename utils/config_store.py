from __future__ import annotations

import logging

from utils.messages import DEFAULT_MSG_TEMPLATE
from utils.storage import Storage

logger = logging.getLogger(__name__)


def template_key(chat_id: int | str) -> str:
    return f"{chat_id}_msg_template"


def owner_id_key(chat_id: int | str) -> str:
    return f"{chat_id}_owner_id"


class TemplateCache:
    """In-memory mirror of the templates already read from or written to storage."""

    def __init__(self) -> None:
        self._templates: dict[str, str] = {}

    def get(self, chat_id: int | str) -> str | None:
        return self._templates.get(str(chat_id))

    def set(self, chat_id: int | str, template: str) -> None:
        self._templates[str(chat_id)] = template

    def discard(self, chat_id: int | str) -> None:
        self._templates.pop(str(chat_id), None)


class GroupConfigStore:
    """Per-chat owner id and welcome template, persisted through ``Storage``."""

    def __init__(self, storage: Storage, cache: TemplateCache | None = None) -> None:
        self._storage = storage
        self.cache = cache if cache is not None else TemplateCache()

    # -- welcome template ----------------------------------------------------

    async def get_template(self, chat_id: int | str) -> str:
        cached = self.cache.get(chat_id)
        if cached:
            return cached

        stored = await self._storage.get_item(template_key(chat_id))
        if stored:
            self.cache.set(chat_id, stored)
            return stored

        # Not configured yet: remember the default, but don't persist it
        self.cache.set(chat_id, DEFAULT_MSG_TEMPLATE)
        return DEFAULT_MSG_TEMPLATE

    async def set_template(self, chat_id: int | str, template: str) -> None:
        await self._storage.set_item(template_key(chat_id), template)
        self.cache.set(chat_id, template)

    async def remove_template(self, chat_id: int | str) -> None:
        self.cache.discard(chat_id)
        await self._storage.remove_item(template_key(chat_id))

    # -- owner ---------------------------------------------------------------

    async def get_owner_id(self, chat_id: int | str) -> int | None:
        return await self._storage.get_item(owner_id_key(chat_id))

    async def set_owner_id(self, chat_id: int | str, owner_id: int) -> None:
        await self._storage.set_item(owner_id_key(chat_id), owner_id)

    async def remove_owner_id(self, chat_id: int | str) -> None:
        await self._storage.remove_item(owner_id_key(chat_id))

    async def remove_group(self, chat_id: int | str) -> None:
        await self.remove_owner_id(chat_id)
        await self.remove_template(chat_id)
        logger.info("Removed welcome config for chat %s", chat_id)
