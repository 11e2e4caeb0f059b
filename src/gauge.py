import time

from web3 import AsyncWeb3, AsyncHTTPProvider

from models import RewardData
from utils import hours_until

GAUGE_ABI = [
    {
        "type": "function",
        "name": "reward_count",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "reward_tokens",
        "stateMutability": "view",
        "inputs": [{"name": "arg0", "type": "uint256"}],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "reward_data",
        "stateMutability": "view",
        "inputs": [{"name": "arg0", "type": "address"}],
        "outputs": [
            {"name": "distributor", "type": "address"},
            {"name": "period_finish", "type": "uint256"},
            {"name": "rate", "type": "uint256"},
            {"name": "last_update", "type": "uint256"},
            {"name": "integral", "type": "uint256"},
        ],
    },
]


class ContractReadError(Exception):
    """A read-only call to a gauge contract failed."""


class GaugeReader:
    """Read-only client for the reward views of a gauge contract."""

    def __init__(self, w3: AsyncWeb3):
        self.w3 = w3

    @classmethod
    def from_url(cls, rpc_url: str) -> "GaugeReader":
        return cls(AsyncWeb3(AsyncHTTPProvider(rpc_url)))

    def _contract(self, gauge: str):
        address = AsyncWeb3.to_checksum_address(gauge)
        return self.w3.eth.contract(address=address, abi=GAUGE_ABI)

    async def _call(self, gauge: str, name: str, *args):
        try:
            args = [
                AsyncWeb3.to_checksum_address(arg) if isinstance(arg, str) else arg
                for arg in args
            ]
            function = getattr(self._contract(gauge).functions, name)

            return await function(*args).call()
        except Exception as error:
            raise ContractReadError(f"{name} failed on gauge {gauge}") from error

    # ----------------------------------------------------------------
    #  @views
    # ----------------------------------------------------------------

    async def reward_count(self, gauge: str) -> int:
        return int(await self._call(gauge, "reward_count"))

    async def reward_tokens(self, gauge: str, index: int) -> str:
        return await self._call(gauge, "reward_tokens", index)

    async def reward_data(self, gauge: str, token: str) -> RewardData:
        values = await self._call(gauge, "reward_data", token)

        return RewardData.from_tuple(values)

    # ----------------------------------------------------------------
    #  @derived
    # ----------------------------------------------------------------

    async def hours_remaining(self, gauge: str, token: str, now: int | None = None) -> float:
        reward_data = await self.reward_data(gauge, token)

        if now is None:
            now = int(time.time())

        return hours_until(reward_data.period_finish, now)

    async def token_exists_on_gauge(self, gauge: str, token: str) -> bool:
        reward_count = await self.reward_count(gauge)

        for index in range(reward_count):
            reward_token = await self.reward_tokens(gauge, index)

            if reward_token.lower() == token.lower():
                return True

        return False
