"""
Error Types

All recoverable conditions raised by the game engine. None of them is fatal:
callers report them to the player or ignore them.
"""

from typing import Dict, Optional


class WorldleError(Exception):
    def __init__(self, code: str, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidGuess(WorldleError):
    """Unknown country, rejected duplicate, or a session that is already over."""

    def __init__(self, message: str = "Invalid guess", details: Optional[Dict] = None):
        super().__init__("INVALID_GUESS", message, details)


class AlreadyRecorded(WorldleError):
    """The session cannot be scored: its day already has a record, or it is not a finished daily game."""

    def __init__(self, day_index: Optional[int], reason: Optional[str] = None):
        super().__init__(
            "ALREADY_RECORDED",
            reason or f"Day {day_index} has already been recorded",
            {"day_index": day_index},
        )
        self.day_index = day_index


class CorruptPersistedState(WorldleError):
    """Stored value could not be decoded. Stores fall back to defaults."""

    def __init__(self, key: str, reason: str):
        super().__init__("CORRUPT_STATE", f"Unreadable value for '{key}': {reason}", {"key": key})
        self.key = key
        self.reason = reason


class ModeError(WorldleError):
    def __init__(self, message: str = "Operation not available in this game mode", details: Optional[Dict] = None):
        super().__init__("INVALID_MODE", message, details)


class WriteConflict(WorldleError):
    """Another writer kept changing a stored value while this one tried to update it."""

    def __init__(self, key: str, attempts: int):
        super().__init__("WRITE_CONFLICT", f"Gave up writing '{key}' after {attempts} attempts", {"key": key})
        self.key = key
        self.attempts = attempts
