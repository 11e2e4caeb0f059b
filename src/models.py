from dataclasses import dataclass, field


@dataclass
class GaugeReminder:
    gauge_address: str
    reward_token: str
    hours_before: int
    user_to_ping: str

    def matches(self, gauge_address: str, reward_token: str) -> bool:
        return (
            self.gauge_address.lower() == gauge_address.lower()
            and self.reward_token.lower() == reward_token.lower()
        )

    def to_dict(self) -> dict:
        return {
            "gaugeAddress": self.gauge_address,
            "rewardToken": self.reward_token,
            "hoursBefore": self.hours_before,
            "userToPing": self.user_to_ping,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GaugeReminder":
        return cls(
            gauge_address=data["gaugeAddress"],
            reward_token=data["rewardToken"],
            hours_before=data["hoursBefore"],
            user_to_ping=data["userToPing"],
        )


@dataclass
class GroupConfig:
    gauges: list[GaugeReminder] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"gauges": [gauge.to_dict() for gauge in self.gauges]}

    @classmethod
    def from_dict(cls, data: dict) -> "GroupConfig":
        return cls([GaugeReminder.from_dict(gauge) for gauge in data.get("gauges", [])])


@dataclass(frozen=True)
class RewardData:
    """Decoded result of a gauge's `reward_data(token)` view."""

    distributor: str
    period_finish: int
    rate: int
    last_update: int
    integral: int

    @classmethod
    def from_tuple(cls, values) -> "RewardData":
        (distributor, period_finish, rate, last_update, integral) = values

        return cls(
            distributor=distributor,
            period_finish=int(period_finish),
            rate=int(rate),
            last_update=int(last_update),
            integral=int(integral),
        )
