"""Command routing.

Every command goes through one table (``COMMAND_ROUTES``) that states where a
command may be used and what happens when it is used elsewhere, instead of a
pattern handler per command.
"""
from __future__ import annotations

import enum
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from telegram import Update
from telegram.ext import ContextTypes

from services.messaging import send_error_message, send_message
from services.template import compose_message
from utils.chat_locks import serialized_per_chat
from utils.messages import (
    EMPTY_TEMPLATE_MSG,
    HELP_MSG,
    NOT_GROUP_MSG,
    NOT_OWNER_MSG,
    START_MSG,
    TEMPLATE_SET_MSG,
)

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = {"group", "supergroup"}

COMMAND_PATTERN = re.compile(
    r"^/(?P<name>[A-Za-z0-9_]+)(?:@(?P<mention>[A-Za-z0-9_]+))?(?:\s(?P<argument>[\s\S]*))?$"
)


@dataclass(frozen=True)
class ParsedCommand:
    name: str
    mention: str | None
    argument: str


def parse_command(text: str) -> ParsedCommand | None:
    match = COMMAND_PATTERN.match(text or "")
    if not match:
        return None
    return ParsedCommand(
        name=match.group("name"),
        mention=match.group("mention"),
        argument=match.group("argument") or "",
    )


def is_group(chat_type: str | None) -> bool:
    return chat_type in GROUP_CHAT_TYPES


CommandCallback = Callable[[Update, ContextTypes.DEFAULT_TYPE, ParsedCommand], Awaitable[None]]


class ChatScope(enum.Enum):
    ANY = "any"
    GROUP = "group"
    PRIVATE = "private"

    def allows(self, chat_type: str | None) -> bool:
        if self is ChatScope.GROUP:
            return is_group(chat_type)
        if self is ChatScope.PRIVATE:
            return not is_group(chat_type)
        return True


@dataclass(frozen=True)
class CommandRoute:
    name: str
    callback: CommandCallback
    scope: ChatScope = ChatScope.ANY
    # inside groups, only answer "/cmd@<bot>" so several bots can share a name
    mention_required_in_group: bool = False
    # called instead of ``callback`` when the scope doesn't match; None = ignore
    out_of_scope: CommandCallback | None = None


# ─── Command callbacks ──────────────────────────────────────────────────────


async def not_group_notice(update: Update, context: ContextTypes.DEFAULT_TYPE, command: ParsedCommand) -> None:
    await send_message(context.bot, update.effective_message.chat.id, NOT_GROUP_MSG)


async def change_welcome_message_command(
    update: Update, context: ContextTypes.DEFAULT_TYPE, command: ParsedCommand
) -> None:
    message = update.effective_message
    chat_id = message.chat.id
    issuer = message.from_user

    new_template = command.argument.strip()
    if not new_template:
        await send_error_message(context.bot, chat_id, EMPTY_TEMPLATE_MSG)
        return

    store = context.application.bot_data["group_config"]
    owner_id = await store.get_owner_id(chat_id)
    if issuer is None or issuer.id != owner_id:
        logger.warning(
            "User %s tried to change the welcome message of %s (owner: %s)",
            issuer.id if issuer else "unknown", chat_id, owner_id,
        )
        await send_error_message(context.bot, chat_id, NOT_OWNER_MSG)
        return

    await store.set_template(chat_id, new_template)
    logger.info("Welcome message of %s changed by %s", chat_id, issuer.id)

    example = compose_message(new_template, issuer, message.chat.title)
    await send_message(context.bot, chat_id, TEMPLATE_SET_MSG.format(example=example))


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE, command: ParsedCommand) -> None:
    await send_message(context.bot, update.effective_message.chat.id, HELP_MSG)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE, command: ParsedCommand) -> None:
    await send_message(context.bot, update.effective_message.chat.id, START_MSG)


COMMAND_ROUTES: dict[str, CommandRoute] = {
    route.name: route
    for route in (
        CommandRoute(
            "change_welcome_message",
            change_welcome_message_command,
            scope=ChatScope.GROUP,
            out_of_scope=not_group_notice,
        ),
        CommandRoute("help", help_command, mention_required_in_group=True),
        CommandRoute("start", start_command, scope=ChatScope.PRIVATE),
    )
}


# ─── Dispatch ───────────────────────────────────────────────────────────────


def _mentions(command: ParsedCommand, bot_username: str) -> bool:
    return bool(command.mention) and command.mention.lower() == bot_username.lstrip("@").lower()


def resolve_callback(command: ParsedCommand, chat_type: str | None, bot_username: str) -> CommandCallback | None:
    """Pick what to run for ``command`` in a chat of ``chat_type``, if anything."""
    route = COMMAND_ROUTES.get(command.name)
    if route is None:
        return None

    # "/cmd@another_bot" is not for us
    if command.mention and not _mentions(command, bot_username):
        return None

    if not route.scope.allows(chat_type):
        return route.out_of_scope

    if route.mention_required_in_group and is_group(chat_type) and not _mentions(command, bot_username):
        return None

    return route.callback


@serialized_per_chat
async def command_dispatcher(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    if not message or not message.text:
        return

    command = parse_command(message.text)
    if command is None:
        return

    bot_username = context.application.bot_data["bot_username"]
    callback = resolve_callback(command, message.chat.type, bot_username)
    if callback is None:
        return

    await callback(update, context, command)
