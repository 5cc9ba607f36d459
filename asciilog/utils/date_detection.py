# asciilog/utils/date_detection.py

from __future__ import annotations
from typing import Sequence

from asciilog.errors import (
    EmptyDateTimeError,
    EmptyInputError,
    EmptyResultError,
    MalformedLineError,
    NoTimeSeparatorError,
)
from asciilog.utils.logging import get_logger

log = get_logger(__name__)


def split_into_lines(text: str) -> list[str]:
    """
    Split raw log text on newlines.

    A trailing newline leaves an empty final element, exactly like str.split.
    """
    if not text:
        raise EmptyInputError("log text is empty")
    return text.split("\n")


def select_last_line(lines: Sequence[str]) -> str:
    """
    Pick the line that carries the most recent entry.

    Logs normally end with a newline, so an empty final line is skipped in
    favour of the one before it.
    """
    if not lines:
        raise EmptyInputError("no log lines given")
    if len(lines) > 1 and lines[-1] == "":
        return lines[-2]
    return lines[-1]


def latest_date_token(last_line: str) -> str:
    """
    Extract the date portion of the timestamp on a log line.

    For the common log layout

        1.2.3.4 - - [10/Oct/2023:13:55:36 -0700] "GET / HTTP/1.1" 200 612

    this returns "10/Oct/2023". The value is treated as an opaque string and
    only ever used as a substring filter.
    """
    if not last_line:
        raise EmptyInputError("cannot read a date from an empty line")

    elements = last_line.split(" ")
    if len(elements) < 4:
        raise MalformedLineError(f"expected at least 4 fields, got {len(elements)}")

    datetime = elements[3].removeprefix("[").removesuffix("]")
    if not datetime:
        raise EmptyDateTimeError("date-time field is empty")

    date_part, sep, _ = datetime.partition(":")
    if not sep:
        raise NoTimeSeparatorError(f"no ':' time separator in {datetime!r}")

    # the first piece keeps its trailing ':', as in "10/Oct/2023:"
    result = (date_part + sep).strip(":")
    if not result:
        raise EmptyResultError(f"no date left in {datetime!r}")

    log.debug("Latest date in log: %s", result)
    return result
