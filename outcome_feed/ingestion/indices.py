"""Tracked composite indices and sampling granularities."""

from enum import Enum

from ..exceptions import ConfigError


class Index(Enum):
    BTC = "BTC"
    ETH = "ETH"

    @property
    def symbol(self) -> str:
        """BitMEX symbol without the leading dot, e.g. BXBT."""
        return INDEX_SYMBOLS[self]

    @property
    def api_symbol(self) -> str:
        return f".{self.symbol}"

    @classmethod
    def from_selector(cls, selector: str) -> "Index":
        """Parse a CLI/config selector (case-insensitive) into an Index."""
        try:
            return cls(selector.strip().upper())
        except (ValueError, AttributeError):
            valid = ", ".join(i.value for i in cls)
            raise ConfigError(
                f"Unknown index '{selector}'. Expected one of: {valid}",
                details={"selector": selector},
            ) from None


# One row per Index member.
INDEX_SYMBOLS = {
    Index.BTC: "BXBT",
    Index.ETH: "BETH",
}


class Granularity(Enum):
    MINUTE = "minute"
    HOUR = "hour"

    @property
    def samples_per_hour(self) -> int:
        return 60 if self is Granularity.MINUTE else 1

    @property
    def timestamp_filter(self) -> dict:
        """Server-side filter keeping only on-the-minute / on-the-hour rows."""
        if self is Granularity.MINUTE:
            return {"timestamp.ss": "00"}
        return {"timestamp.mm": "00", "timestamp.ss": "00"}

    @classmethod
    def from_selector(cls, selector: str) -> "Granularity":
        try:
            return cls(selector.strip().lower())
        except (ValueError, AttributeError):
            valid = ", ".join(g.value for g in cls)
            raise ConfigError(
                f"Unknown granularity '{selector}'. Expected one of: {valid}",
                details={"selector": selector},
            ) from None
