from __future__ import annotations


class EwiConfigError(Exception):
    """Base class for all configuration and codec errors."""


class OutOfRangeError(EwiConfigError, ValueError):
    def __init__(self, name: str, value: int, min_val: int, max_val: int) -> None:
        super().__init__(f"{name} must be {min_val}-{max_val}, got {value}")
        self.name = name
        self.value = value
        self.min_val = min_val
        self.max_val = max_val


class AddressOutOfRangeError(EwiConfigError, ValueError):
    def __init__(self, bank: int, offset: int) -> None:
        super().__init__(f"No parameter at address bank={bank} offset={offset}")
        self.bank = bank
        self.offset = offset


class ParamNotFoundError(EwiConfigError, LookupError):
    pass


class MalformedFrameError(EwiConfigError, ValueError):
    """Raised by strict frame parsing; normal decoding skips such frames."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SysExFileError(EwiConfigError, OSError):
    pass
