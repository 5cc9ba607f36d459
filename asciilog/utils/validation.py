# asciilog/utils/validation.py
from __future__ import annotations

import re

_DECIMAL = re.compile(r"[0-9]+")
_HEXTET = re.compile(r"[0-9A-Fa-f]{1,4}")


def is_valid_ipv4(ip: str) -> bool:
    """
    True for dotted-quad literals such as "0.0.0.0" .. "255.255.255.255".

    Each of the 4 pieces must be a plain decimal number no larger than 255.
    Leading zeros are tolerated.
    """
    if len(ip) < 7 or len(ip) > 15:
        return False

    pieces = ip.split(".")
    if len(pieces) != 4:
        return False

    for octet in pieces:
        if not _DECIMAL.fullmatch(octet):
            return False
        if int(octet) > 255:
            return False

    return True


def is_valid_ipv6(ip: str) -> bool:
    """
    Coarse IPv6 check: every ':' separated group is 1-4 hex digits.

    Group counts are not verified and "::" compression (which produces an
    empty group) is rejected.
    """
    if not ip:
        return False

    for group in ip.split(":"):
        if not _HEXTET.fullmatch(group):
            return False

    return True


def slash24(ip: str) -> str:
    """Return the enclosing /24 network of an IPv4 address, e.g. "10.1.2.0/24"."""
    if not is_valid_ipv4(ip):
        raise ValueError(f"not an IPv4 address: {ip!r}")
    a, b, c, _ = ip.split(".")
    return f"{a}.{b}.{c}.0/24"
