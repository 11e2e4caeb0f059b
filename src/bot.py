import html
import logging

import httpx

from telegram import BotCommand, Update
from telegram.error import Conflict
from telegram.ext import (
    filters,
    Application,
    MessageHandler,
    ApplicationBuilder,
    CommandHandler,
    ContextTypes,
)

import config
from gauge import ContractReadError, GaugeReader
from models import GaugeReminder
from repository import Repository
from utils import hours_to_str, is_valid_address, str_to_positive_int

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------
#  @messages
# ----------------------------------------------------------------

ADD_USAGE = "❌ Usage: /add_gauge_reminder <gaugeAddress> <rewardToken> <hoursBefore> <usernameToPing>"
REMOVE_USAGE = "❌ Usage: /remove_gauge_reminder <gaugeAddress> <rewardToken>"

INVALID_ADDRESS = "❌ Invalid gauge or reward token address."
INVALID_HOURS_BEFORE = "❌ Invalid hoursBefore value."
INVALID_USER = "❌ Invalid username to ping."
TOKEN_NOT_FOUND = "❌ Token not found in gauge."
CONTRACT_READ_FAILED = "❌ Could not read gauge contract."

NOTHING_TO_REMOVE = "❌ No gauges found to remove."
REMINDER_NOT_FOUND = "❌ Gauge with specified reward token not found."

NO_REMINDERS = "ℹ️ No gauge reminders set for this group."

HELP_MESSAGE = """Usage:
/add_gauge_reminder <gaugeAddress> <rewardToken> <hoursBefore> <usernameToPing>

/remove_gauge_reminder <gaugeAddress> <rewardToken>

/list_gauge_reminders

Example:
/add_gauge_reminder 0xGauge... 0xToken... 24 myusername"""

COMMANDS = [
    BotCommand(
        "add_gauge_reminder",
        "Add a new gauge reminder: <gauge> <token> <hoursBefore> <username>",
    ),
    BotCommand("remove_gauge_reminder", "Remove a gauge reminder: <gauge> <token>"),
    BotCommand("list_gauge_reminders", "List gauge reminders of this group"),
    BotCommand("help", "Show usage help"),
]

# ----------------------------------------------------------------
#  @utils
# ----------------------------------------------------------------


def get_repository(context: ContextTypes.DEFAULT_TYPE) -> Repository:
    return context.bot_data["repository"]


def get_gauge_reader(context: ContextTypes.DEFAULT_TYPE) -> GaugeReader:
    return context.bot_data["gauge_reader"]


def get_chat_id(update: Update) -> str:
    return str(update.effective_chat.id)


def str_reminder(idx: int, reminder: GaugeReminder) -> str:
    return (
        f"#{idx + 1}\n"
        f"Gauge: <code>{reminder.gauge_address}</code>\n"
        f"Reward Token: <code>{reminder.reward_token}</code>\n"
        f"Hours Before: {reminder.hours_before}h\n"
        f"User to Ping: @{html.escape(reminder.user_to_ping)}"
    )


def str_added(reminder: GaugeReminder, hours_left: float | None) -> str:
    if hours_left is None:
        estimate = "⏰ Current estimate is unavailable."
    else:
        estimate = f"⏰ Current estimate: rewards run out in ~{hours_to_str(hours_left)} hours."

    return (
        "✅ Gauge added!\n"
        f"Will alert @{reminder.user_to_ping} {reminder.hours_before}h before rewards run out.\n\n"
        f"{estimate}"
    )


# ----------------------------------------------------------------
#  @default
# ----------------------------------------------------------------


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(HELP_MESSAGE)


# ----------------------------------------------------------------
#  @reminder_management
# ----------------------------------------------------------------


async def add_gauge_reminder_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    args = context.args or []

    if len(args) != 4:
        await update.message.reply_text(ADD_USAGE)
        return

    (gauge_address, reward_token, hours_before_str, user_to_ping) = args

    if not is_valid_address(gauge_address) or not is_valid_address(reward_token):
        await update.message.reply_text(INVALID_ADDRESS)
        return

    hours_before = str_to_positive_int(hours_before_str)

    if hours_before == -1:
        await update.message.reply_text(INVALID_HOURS_BEFORE)
        return

    user_to_ping = user_to_ping.lstrip("@")

    if not user_to_ping:
        await update.message.reply_text(INVALID_USER)
        return

    gauge_reader = get_gauge_reader(context)

    try:
        token_found = await gauge_reader.token_exists_on_gauge(gauge_address, reward_token)
    except ContractReadError:
        logger.error("Failed to validate gauge %s", gauge_address, exc_info=True)
        await update.message.reply_text(CONTRACT_READ_FAILED)
        return

    if not token_found:
        await update.message.reply_text(TOKEN_NOT_FOUND)
        return

    # The estimate is informational only, the reminder is added regardless
    try:
        hours_left = await gauge_reader.hours_remaining(gauge_address, reward_token)
    except ContractReadError:
        logger.warning("Failed to estimate hours left for gauge %s", gauge_address, exc_info=True)
        hours_left = None

    reminder = GaugeReminder(
        gauge_address=gauge_address,
        reward_token=reward_token,
        hours_before=hours_before,
        user_to_ping=user_to_ping,
    )

    chat_id = get_chat_id(update)

    get_repository(context).add_reminder(chat_id, reminder)

    await update.message.reply_text(str_added(reminder, hours_left))

    logger.info("Added gauge for chat %s: %s %s", chat_id, gauge_address, reward_token)


async def remove_gauge_reminder_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    args = context.args or []

    if len(args) != 2:
        await update.message.reply_text(REMOVE_USAGE)
        return

    (gauge_address, reward_token) = args

    if not is_valid_address(gauge_address) or not is_valid_address(reward_token):
        await update.message.reply_text(INVALID_ADDRESS)
        return

    chat_id = get_chat_id(update)
    repository = get_repository(context)

    group = repository.get(chat_id)

    if not group or not group.gauges:
        await update.message.reply_text(NOTHING_TO_REMOVE)
        return

    removed = repository.remove_reminders(chat_id, gauge_address, reward_token)

    if not removed:
        await update.message.reply_text(REMINDER_NOT_FOUND)
        return

    await update.message.reply_text(
        f"✅ Gauge {gauge_address} with reward token {reward_token} removed successfully."
    )

    logger.info("Removed gauge for chat %s: %s %s", chat_id, gauge_address, reward_token)


async def list_gauge_reminders_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    group = get_repository(context).get(get_chat_id(update))

    if not group or not group.gauges:
        await update.message.reply_text(NO_REMINDERS)
        return

    reminders = [str_reminder(idx, reminder) for idx, reminder in enumerate(group.gauges)]
    reminders = "\n\n".join(reminders)

    await update.message.reply_text(
        f"📋 <b>Active Gauge Reminders:</b>\n\n{reminders}", parse_mode="HTML"
    )


# ----------------------------------------------------------------
#  @common_handlers
# ----------------------------------------------------------------


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    if isinstance(context.error, Conflict):
        return

    if isinstance(context.error, httpx.ReadError):
        return

    logger.error("An error occurred: ", exc_info=context.error)

    if not config.DEVELOPER_CHAT_ID:
        return

    # Notify the developer about the error
    await context.bot.send_message(
        config.DEVELOPER_CHAT_ID, f"[LOG] An error occurred: {context.error}"
    )


async def invalid_command_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text("Invalid command. Type /help for more information")


async def register_commands(app: Application):
    # Shows the commands in the "/" menu
    await app.bot.set_my_commands(COMMANDS)


# ----------------------------------------------------------------
#  @runner
# ----------------------------------------------------------------


def build_application(
    token: str, repository: Repository, gauge_reader: GaugeReader
) -> Application:
    app = ApplicationBuilder().token(token).post_init(register_commands).build()

    app.bot_data["repository"] = repository
    app.bot_data["gauge_reader"] = gauge_reader

    # Handle errors during bot operation
    app.add_error_handler(error_handler)

    # Handle default commands
    app.add_handler(CommandHandler("start", help_command))
    app.add_handler(CommandHandler("help", help_command))

    # Handle reminder commands
    app.add_handler(CommandHandler("add_gauge_reminder", add_gauge_reminder_command))
    app.add_handler(CommandHandler("remove_gauge_reminder", remove_gauge_reminder_command))
    app.add_handler(CommandHandler("list_gauge_reminders", list_gauge_reminders_command))

    # Handle invalid commands
    app.add_handler(MessageHandler(filters.COMMAND, invalid_command_handler))

    return app


def run_polling(token: str, repository: Repository, gauge_reader: GaugeReader):
    app = build_application(token, repository, gauge_reader)

    # Run the bot using 'polling'
    app.run_polling()
