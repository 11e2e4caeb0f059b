import logging
import time
from typing import Awaitable, Callable

from telegram.error import TelegramError

from gauge import ContractReadError, GaugeReader
from models import GaugeReminder
from repository import Repository
from utils import hours_to_str, hours_until

SendMessage = Callable[[str, str], Awaitable]

logger = logging.getLogger(__name__)


def str_alert(reminder: GaugeReminder, hours_left: float) -> str:
    return (
        f"⚠️ Rewards for token {reminder.reward_token} on gauge {reminder.gauge_address} "
        f"will run out in {hours_to_str(hours_left)} hours!\n\n"
        f"@{reminder.user_to_ping} please top up the rewards:\n"
        "1. Approve the gauge as spender for your reward token.\n"
        "2. Call deposit_reward_token(token, amount) on the gauge contract."
    )


async def run_checker_once(
    repository: Repository,
    gauge_reader: GaugeReader,
    send_message: SendMessage,
    now: int | None = None,
) -> int:
    """
    Check every reminder once and alert the chats whose reward streams
    end within their threshold. Returns the number of alerts sent.

    Nothing is remembered between runs, so a reminder keeps alerting on
    each run until its stream is topped up or it is removed.
    """
    logger.info("Starting single gauge check run...")

    if now is None:
        now = int(time.time())

    alerts = 0

    for chat_id, group in repository.get_all_groups():
        for reminder in group.gauges:
            try:
                reward_data = await gauge_reader.reward_data(
                    reminder.gauge_address, reminder.reward_token
                )
            except ContractReadError:
                logger.error(
                    "Error checking gauge %s", reminder.gauge_address, exc_info=True
                )
                continue

            hours_left = hours_until(reward_data.period_finish, now)

            logger.info(
                "Gauge %s Token %s: %sh left.",
                reminder.gauge_address,
                reminder.reward_token,
                hours_to_str(hours_left),
            )

            if hours_left > reminder.hours_before:
                continue

            try:
                await send_message(chat_id, str_alert(reminder, hours_left))
            except TelegramError:
                logger.error("Failed to send alert to chat %s", chat_id, exc_info=True)
                continue

            alerts += 1
            logger.info("Sent alert to chat %s for user %s", chat_id, reminder.user_to_ping)

    logger.info("Gauge check run completed, %d alerts sent.", alerts)

    return alerts
