"""The five judging platforms tracked by codetrack."""
from __future__ import annotations

from enum import Enum


class UnsupportedPlatformError(ValueError):
    """Raised when a platform name is not one of the tracked platforms."""

    def __init__(self, platform):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


class Platform(str, Enum):
    LEETCODE = 'leetcode'
    CODEFORCES = 'codeforces'
    CODECHEF = 'codechef'
    GFG = 'gfg'
    HACKERRANK = 'hackerrank'

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def profile_base_url(self) -> str:
        return _PROFILE_BASE_URLS[self]

    def profile_url(self, username: str) -> str:
        return f"{self.profile_base_url}{username}"


_DISPLAY_NAMES = {
    Platform.LEETCODE: 'LeetCode',
    Platform.CODEFORCES: 'Codeforces',
    Platform.CODECHEF: 'CodeChef',
    Platform.GFG: 'GeeksforGeeks',
    Platform.HACKERRANK: 'HackerRank',
}

_PROFILE_BASE_URLS = {
    Platform.LEETCODE: 'https://leetcode.com/u/',
    Platform.CODEFORCES: 'https://codeforces.com/profile/',
    Platform.CODECHEF: 'https://www.codechef.com/users/',
    Platform.GFG: 'https://www.geeksforgeeks.org/user/',
    Platform.HACKERRANK: 'https://www.hackerrank.com/profile/',
}

# Stable iteration order; also the order of the weight table.
ALL_PLATFORMS = tuple(Platform)


def parse_platform(value) -> Platform:
    """Return the Platform for *value*, raising UnsupportedPlatformError."""
    if isinstance(value, Platform):
        return value
    try:
        return Platform(str(value).strip().lower())
    except ValueError:
        raise UnsupportedPlatformError(value) from None


def is_supported(value) -> bool:
    try:
        parse_platform(value)
    except UnsupportedPlatformError:
        return False
    return True
