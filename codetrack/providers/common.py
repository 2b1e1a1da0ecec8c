from __future__ import annotations

from dataclasses import asdict, dataclass


class ProviderError(Exception):
    """A platform's stats source failed or the account does not exist."""

    def __init__(self, platform: str, message: str):
        self.platform = platform
        super().__init__(message)


@dataclass
class PlatformStats:
    """Raw statistics for one account, as returned by a stats provider.

    Fields a platform does not expose stay at their zero default.
    """
    problems_solved: int = 0
    contests_participated: int = 0
    rating: int = 0
    max_rating: int = 0
    rank: str | None = None
    easy_solved: int = 0
    medium_solved: int = 0
    hard_solved: int = 0
    acceptance_rate: float = 0.0

    def as_dict(self) -> dict:
        return asdict(self)


def to_int(value, default: int = 0) -> int:
    """Lenient int conversion for scraped values like '1,234' or '1523.7'."""
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).replace(',', '').strip()
    try:
        return int(float(text))
    except ValueError:
        return default
