from __future__ import annotations

from telegram import Bot, Message
from telegram.constants import ParseMode

from services.markup import render_markdown
from services.template import compose_error_message


async def send_message(bot: Bot, chat_id: int, text: str) -> Message:
    return await bot.send_message(
        chat_id=chat_id,
        text=render_markdown(text),
        parse_mode=ParseMode.HTML,
    )


async def send_error_message(bot: Bot, chat_id: int, text: str) -> Message:
    return await send_message(bot, chat_id, compose_error_message(text))
