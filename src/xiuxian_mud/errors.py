"""Error taxonomy for the combat and progression core."""
from __future__ import annotations


class GameCoreError(Exception):
    """Base class for every error raised by the core."""


class ConfigurationError(GameCoreError):
    """A realm, species, equipment or item table is empty or malformed."""


class InvalidInput(GameCoreError, ValueError):
    """A caller passed a value the core refuses to work with."""


class RealmTooLow(GameCoreError):
    """Equipment requires a higher realm than the character has reached."""

    def __init__(self, item_name: str, required: str, current: str):
        self.item_name = item_name
        self.required = required
        self.current = current
        super().__init__(f"{item_name} requires {required}, character is {current}")
