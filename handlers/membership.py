"""Membership handlers — bot added/removed, welcome messages for new members."""

import logging

from telegram import Update
from telegram.ext import ContextTypes

from services.messaging import send_message
from services.template import compose_intro_message, compose_message
from utils.chat_locks import serialized_per_chat

logger = logging.getLogger(__name__)


@serialized_per_chat
async def new_member_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Introduce the bot when it's added, otherwise greet the new members."""
    message = update.effective_message
    if not message or not message.new_chat_members:
        return

    store = context.application.bot_data["group_config"]
    chat_id = message.chat.id
    group_name = message.chat.title

    for member in message.new_chat_members:
        if member.id == context.bot.id:
            inviter = message.from_user
            if not inviter:
                continue
            await send_message(context.bot, chat_id, compose_intro_message(inviter, group_name))
            await store.set_owner_id(chat_id, inviter.id)
            logger.info("Bot added to group %s (%s) by user %s", chat_id, group_name, inviter.id)
            continue

        if member.is_bot:
            continue

        template = await store.get_template(chat_id)
        await send_message(context.bot, chat_id, compose_message(template, member, group_name))


@serialized_per_chat
async def member_left_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Forget the group's configuration when the bot leaves it."""
    message = update.effective_message
    if not message or not message.left_chat_member:
        return

    if message.left_chat_member.id != context.bot.id:
        return

    store = context.application.bot_data["group_config"]
    await store.remove_group(message.chat.id)
    logger.info("Bot removed from group %s (%s)", message.chat.id, message.chat.title)
