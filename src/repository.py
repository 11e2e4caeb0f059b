import json
import logging
import os

from config import CONFIG_FILE
from models import GaugeReminder, GroupConfig

logger = logging.getLogger(__name__)


class Repository:
    """
    Gauge reminders of every chat, backed by a single JSON file.

    The whole mapping is rewritten on each mutation. There is no locking:
    a single writer process is assumed. With `path=None` nothing is
    persisted.
    """

    def __init__(self, path: str | None = CONFIG_FILE):
        self.path = path
        self.groups: dict[str, GroupConfig] = {}

    def load(self) -> None:
        if self.path is None or not os.path.exists(self.path):
            self.groups = {}
            return

        # A corrupt file aborts startup
        with open(self.path, encoding="utf-8") as file:
            data = json.load(file)

        self.groups = {
            str(chat_id): GroupConfig.from_dict(group) for chat_id, group in data.items()
        }

        logger.info("Loaded reminders for %d chats from %s", len(self.groups), self.path)

    def save(self) -> None:
        if self.path is None:
            return

        data = {chat_id: group.to_dict() for chat_id, group in self.groups.items()}

        with open(self.path, "w", encoding="utf-8") as file:
            json.dump(data, file, indent=2)

    # ----------------------------------------------------------------
    #  @groups
    # ----------------------------------------------------------------

    def get(self, chat_id) -> GroupConfig | None:
        return self.groups.get(str(chat_id))

    def upsert_group(self, chat_id) -> GroupConfig:
        chat_id = str(chat_id)

        if chat_id not in self.groups:
            self.groups[chat_id] = GroupConfig()

        return self.groups[chat_id]

    def get_all_groups(self) -> list[tuple[str, GroupConfig]]:
        return list(self.groups.items())

    # ----------------------------------------------------------------
    #  @reminders
    # ----------------------------------------------------------------

    def add_reminder(self, chat_id, reminder: GaugeReminder) -> None:
        self.upsert_group(chat_id).gauges.append(reminder)
        self.save()

    def remove_reminders(self, chat_id, gauge_address: str, reward_token: str) -> int:
        group = self.get(chat_id)

        if not group:
            return 0

        initial_length = len(group.gauges)

        group.gauges = [
            gauge
            for gauge in group.gauges
            if not gauge.matches(gauge_address, reward_token)
        ]

        removed = initial_length - len(group.gauges)

        if removed:
            self.save()

        return removed
