# asciilog/processing/sort.py

from __future__ import annotations

from typing import Mapping

from asciilog.errors import EmptyInputError


def pad_first_octet(ip: str) -> str:
    """Left-pad with zeros so the first octet is three characters wide."""
    dot = ip.find(".")
    if dot == 1:
        return "00" + ip
    if dot == 2:
        return "0" + ip
    return ip


def sorted_keys(counts: Mapping[str, int]) -> list[str]:
    """
    Order dotted-quad addresses numerically by their first octet.

    Plain string sorting puts "10.0.0.1" before "2.2.2.2". Sorting on the
    zero-padded form fixes that for the first octet; later octets still
    compare as strings. The original keys are returned untouched.
    """
    if not counts:
        raise EmptyInputError("no addresses to sort")
    return sorted(counts, key=lambda ip: (pad_first_octet(ip), ip))
