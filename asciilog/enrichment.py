# asciilog/enrichment.py

from __future__ import annotations

import re
import socket
import subprocess
from typing import Callable, Iterable, Optional, Sequence

from asciilog.errors import WhoisExecutionError
from asciilog.models import WhoisSummary
from asciilog.utils.logging import get_logger

log = get_logger(__name__)

NOT_AVAILABLE = "N/A"
UNKNOWN_COUNTRY = "--"
WHOIS_DIVIDER = "---------------------"
NO_WHOIS_ENTRIES = "No whois entries given at this time."

_COUNTRY_FIELD = re.compile(r"country:([^\n]{2,32})\n", re.IGNORECASE)
_COUNTRY_CODE = re.compile(r"^[A-Za-z]{2}$")

Resolver = Callable[[str], tuple]
WhoisLookup = Callable[[str], str]


def hostname_for(ip: str, resolver: Resolver = socket.gethostbyaddr) -> str:
    """Reverse-resolve ``ip``; "N/A" when there is no usable answer."""
    try:
        hostname, _aliases, _addrs = resolver(ip)
    except (OSError, ValueError) as e:
        log.debug("gethostbyaddr(%r) failed: %s", ip, e)
        return NOT_AVAILABLE

    if not hostname:
        return NOT_AVAILABLE
    return hostname


def resolve_hostnames(
        addresses: Iterable[str],
        resolver: Resolver = socket.gethostbyaddr,
) -> dict[str, str]:
    """Map every address to its reverse DNS name, one lookup at a time."""
    return {ip: hostname_for(ip, resolver=resolver) for ip in addresses}


def whois_record(
        ip: str,
        command: str = "whois",
        timeout: Optional[float] = None,
) -> str:
    """
    Run ``whois <ip>`` and return its combined stdout/stderr.

    A missing binary, a non-zero exit status or an expired timeout raise
    WhoisExecutionError.
    """
    try:
        completed = subprocess.run(
            [command, ip],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
            check=True,
        )
    except FileNotFoundError as e:
        raise WhoisExecutionError(ip, f"{command} not found") from e
    except subprocess.CalledProcessError as e:
        raise WhoisExecutionError(ip, f"exit status {e.returncode}") from e
    except subprocess.TimeoutExpired as e:
        raise WhoisExecutionError(ip, f"timed out after {timeout}s") from e
    except OSError as e:
        raise WhoisExecutionError(ip, str(e)) from e

    return completed.stdout or ""


def country_for(record: str) -> str:
    """
    Pull a two-letter country code out of a whois record.

    Only the first "country:" line is looked at. Registries that chain
    several records (ARIN -> RIPE -> ...) usually put the most specific
    country last, so this can report the wrong one for those.

    The value is split on any whitespace rather than single spaces only, so
    tab-aligned records are read too.
    """
    match = _COUNTRY_FIELD.search(record)
    if match is None:
        return UNKNOWN_COUNTRY

    value = match.group(1).strip()
    if len(value) < 2:
        return UNKNOWN_COUNTRY

    for piece in value.split():
        if _COUNTRY_CODE.match(piece):
            return piece

    return UNKNOWN_COUNTRY


def _whois_block(ip: str, body: str) -> str:
    return f"Whois Entry for the following: {ip}\n{body}\n\n{WHOIS_DIVIDER}\n\n"


def enrich(
        addresses: Sequence[str],
        lookup: Optional[WhoisLookup] = None,
) -> WhoisSummary:
    """
    Fetch whois records for ``addresses`` in order and collect country codes.

    The first WhoisExecutionError ends the pass; what was gathered up to
    that point is kept and the error is stored on the returned summary.
    """
    if lookup is None:
        lookup = whois_record

    parts: list[str] = []
    countries: dict[str, str] = {}
    entries = 0
    error: Optional[WhoisExecutionError] = None

    for ip in addresses:
        if not ip:
            continue

        try:
            record = lookup(ip)
        except WhoisExecutionError as e:
            log.warning("Stopping whois pass at %s: %s", ip, e.reason)
            error = e
            break

        trimmed = record.strip()
        if not trimmed or trimmed == "<nil>":
            log.debug("No whois data for %s", ip)
            parts.append(_whois_block(ip, NOT_AVAILABLE))
            continue

        countries[ip] = country_for(record)
        parts.append(_whois_block(ip, trimmed))
        entries += 1

    if entries == 0:
        parts.append(NO_WHOIS_ENTRIES)

    log.info("Collected %d whois entries for %d addresses", entries, len(addresses))
    return WhoisSummary(
        text="".join(parts),
        countries=countries,
        entries=entries,
        error=error,
    )
