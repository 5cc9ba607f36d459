# asciilog/errors.py
from __future__ import annotations


class AsciiLogError(Exception):
    """Base class for every error raised by asciilog."""


class EmptyInputError(AsciiLogError):
    """A stage was given an empty string or collection where data is required."""


class DateTokenError(AsciiLogError):
    """The latest date could not be read from the last log line."""


class MalformedLineError(DateTokenError):
    pass


class EmptyDateTimeError(DateTokenError):
    pass


class NoTimeSeparatorError(DateTokenError):
    pass


class EmptyResultError(DateTokenError):
    pass


class WhoisExecutionError(AsciiLogError):
    """The external whois utility could not be run for an address."""

    def __init__(self, ip: str, reason: str) -> None:
        super().__init__(f"whois lookup failed for {ip}: {reason}")
        self.ip = ip
        self.reason = reason
