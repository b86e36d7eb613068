from enum import Enum


class CheckStatus(str, Enum):
    UP = "up"
    DEGRADED = "degraded"
    DOWN = "down"

    @property
    def severity(self) -> int:
        mapping = {
            CheckStatus.DOWN: 2,
            CheckStatus.DEGRADED: 1,
            CheckStatus.UP: 0,
        }

        return mapping[self]

    @property
    def is_available(self) -> bool:
        return self is not CheckStatus.DOWN

    @classmethod
    def from_uptime(cls, uptime_percent: float) -> "CheckStatus":
        if uptime_percent >= 99.5:
            return cls.UP

        if uptime_percent >= 95.0:
            return cls.DEGRADED

        return cls.DOWN
