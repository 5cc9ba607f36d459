# asciilog/processing/extract.py

from __future__ import annotations

from collections import Counter
from typing import Iterable

from asciilog.utils.logging import get_logger

log = get_logger(__name__)

# candidate client addresses outside this length range are ignored
MIN_ADDRESS_LEN = 7
MAX_ADDRESS_LEN = 15


def extract(lines: Iterable[str], date_token: str) -> Counter[str]:
    """
    Count requests per client address for lines carrying ``date_token``.

    The client address is the first space-separated field of a line. Lines
    without the token, and candidates whose length falls outside the IPv4
    range, are skipped. IPv6 clients are therefore never counted.
    """
    counts: Counter[str] = Counter()
    if not date_token:
        return counts

    seen = 0
    for line in lines:
        if date_token not in line:
            continue
        seen += 1

        elements = line.split(" ")
        ip = elements[0]
        if len(ip) < MIN_ADDRESS_LEN or len(ip) > MAX_ADDRESS_LEN:
            continue

        counts[ip] += 1

    log.info(
        "Matched %d lines for %s, %d distinct addresses",
        seen, date_token, len(counts),
    )
    return counts
