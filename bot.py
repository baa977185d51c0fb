import argparse
import logging
import os
import signal

from dotenv import load_dotenv
from telegram import BotCommand, Update
from telegram.ext import Application, ApplicationBuilder, MessageHandler, filters

from handlers.commands import command_dispatcher
from handlers.membership import member_left_handler, new_member_handler
from services.messaging import send_error_message
from utils.chat_locks import ChatLocks
from utils.config_store import GroupConfigStore, TemplateCache
from utils.logger import setup_logger
from utils.messages import COMMAND_DESCRIPTIONS, UNEXPECTED_ERROR_MSG
from utils.storage import Storage

logger = logging.getLogger(__name__)

DEFAULT_PERSISTENCE_PATH = "./.persistence"


async def post_init(application: Application) -> None:
    commands = [BotCommand(name, description) for name, description in COMMAND_DESCRIPTIONS.items()]
    await application.bot.set_my_commands(commands)


async def post_shutdown(application: Application) -> None:
    storage = application.bot_data.get("storage")
    if storage:
        storage.close()


async def error_handler(update: object, context) -> None:
    logger.exception("Unhandled error while processing update %s", update, exc_info=context.error)

    if not isinstance(update, Update) or update.effective_chat is None:
        return

    # Best effort: the chat that triggered the failure gets a generic notice
    try:
        await send_error_message(context.bot, update.effective_chat.id, UNEXPECTED_ERROR_MSG)
    except Exception:
        logger.exception("Failed to notify chat %s about the error", update.effective_chat.id)


def build_application(token: str, bot_username: str, persistence_path: str = DEFAULT_PERSISTENCE_PATH) -> Application:
    # Init core services
    storage = Storage.init(persistence_path)
    group_config = GroupConfigStore(storage, TemplateCache())

    application = (
        ApplicationBuilder()
        .token(token)
        .concurrent_updates(True)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    application.bot_data["storage"] = storage
    application.bot_data["group_config"] = group_config
    application.bot_data["chat_locks"] = ChatLocks()
    application.bot_data["bot_username"] = bot_username.lstrip("@")

    # ─── Membership ──────────────────────────────────────────────────────
    application.add_handler(MessageHandler(filters.StatusUpdate.NEW_CHAT_MEMBERS, new_member_handler))
    application.add_handler(MessageHandler(filters.StatusUpdate.LEFT_CHAT_MEMBER, member_left_handler))

    # ─── Commands (routed by handlers.commands.COMMAND_ROUTES) ───────────
    application.add_handler(MessageHandler(filters.COMMAND & filters.UpdateType.MESSAGE, command_dispatcher))

    application.add_error_handler(error_handler)
    return application


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Telegram bot that welcomes new group members.")
    parser.add_argument("-t", "--api-token", default=os.getenv("BOT_TOKEN"), help="Bot API token (env: BOT_TOKEN)")
    parser.add_argument(
        "-u", "--bot-username", default=os.getenv("BOT_USERNAME"), help="Bot username, without @ (env: BOT_USERNAME)"
    )
    parser.add_argument(
        "-p",
        "--persistence-path",
        default=os.getenv("PERSISTENCE_PATH"),
        help=f"Storage directory (env: PERSISTENCE_PATH, default: {DEFAULT_PERSISTENCE_PATH})",
    )
    parser.add_argument("--log-file", default=os.getenv("LOG_FILE", "bot.log"), help="Log file (env: LOG_FILE)")
    return parser.parse_args(argv)


def check_settings(options: argparse.Namespace) -> argparse.Namespace:
    """Fail on missing mandatory options, fill in defaults for the optional ones."""
    if not options.api_token:
        raise RuntimeError("❌   The --api-token (-t) option is required! (or set BOT_TOKEN)")
    if not options.bot_username:
        raise RuntimeError("❌   The --bot-username (-u) option is required! (or set BOT_USERNAME)")
    if not options.persistence_path:
        logger.warning(
            "⚠️   No --persistence-path (-p) defined, the default will be used: %s", DEFAULT_PERSISTENCE_PATH
        )
        options.persistence_path = DEFAULT_PERSISTENCE_PATH

    return options


def main() -> None:
    load_dotenv()
    options = parse_args()
    setup_logger(options.log_file)
    check_settings(options)

    app = build_application(options.api_token, options.bot_username, options.persistence_path)
    app.run_polling(
        allowed_updates=Update.ALL_TYPES,
        stop_signals=(signal.SIGINT, signal.SIGTERM),
    )


if __name__ == "__main__":
    main()
