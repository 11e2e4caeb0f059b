"""Pytest configuration and fixtures."""

import time
from unittest.mock import AsyncMock, Mock

import pytest

from gauge import ContractReadError, GaugeReader
from repository import Repository

GAUGE = "0x" + "a1" * 20
OTHER_GAUGE = "0x" + "b2" * 20
TOKEN = "0x" + "c3" * 20
OTHER_TOKEN = "0x" + "d4" * 20
DISTRIBUTOR = "0x" + "e5" * 20


class FakeGaugeReader(GaugeReader):
    """GaugeReader answering from in-memory gauges instead of an RPC node."""

    def __init__(self):
        super().__init__(w3=None)
        self.gauges: dict[str, dict[str, int]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple] = []

    def add_gauge(self, gauge: str, finishes: dict[str, int]) -> None:
        self.gauges[gauge.lower()] = {token: finish for token, finish in finishes.items()}

    def fail(self, gauge: str) -> None:
        self.failing.add(gauge.lower())

    async def _call(self, gauge: str, name: str, *args):
        self.calls.append((gauge, name, *args))

        if gauge.lower() in self.failing or gauge.lower() not in self.gauges:
            raise ContractReadError(f"{name} failed on gauge {gauge}")

        finishes = self.gauges[gauge.lower()]
        tokens = list(finishes)

        if name == "reward_count":
            return len(tokens)

        if name == "reward_tokens":
            return tokens[args[0]]

        if name == "reward_data":
            for token, finish in finishes.items():
                if token.lower() == args[0].lower():
                    return (DISTRIBUTOR, finish, 10**18, finish - 86400, 0)

            return ("0x" + "00" * 20, 0, 0, 0, 0)

        raise ContractReadError(f"unknown view {name}")


@pytest.fixture
def now():
    return int(time.time())


@pytest.fixture
def gauge_reader():
    return FakeGaugeReader()


@pytest.fixture
def repository(tmp_path):
    repository = Repository(str(tmp_path / "config.json"))
    repository.load()
    return repository


@pytest.fixture
def make_update():
    def _make_update(chat_id=-1001):
        update = Mock()
        update.effective_chat.id = chat_id
        update.message.reply_text = AsyncMock()
        return update

    return _make_update


@pytest.fixture
def make_context(repository, gauge_reader):
    def _make_context(args=None):
        context = Mock()
        context.args = args
        context.bot_data = {"repository": repository, "gauge_reader": gauge_reader}
        context.bot.send_message = AsyncMock()
        return context

    return _make_context


def last_reply(update) -> str:
    return update.message.reply_text.call_args.args[0]
