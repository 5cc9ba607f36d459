# asciilog/report.py

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional

from asciilog.enrichment import NOT_AVAILABLE, UNKNOWN_COUNTRY
from asciilog.processing.sort import sorted_keys
from asciilog.utils.validation import is_valid_ipv4

IP_REPORT_TITLE = "IP Address Counts Data"
WHOIS_REPORT_TITLE = "Whois Entry Data"
HEADER_DIVIDER = "-------------------------"
NO_ADDRESSES = "No IP addresses listed at this time."
IP_COLUMN_WIDTH = 15


def format_generated_at(moment: datetime) -> str:
    """Format a timestamp like the Unix ``date`` command, e.g. "Mon Oct  9 13:55:36 UTC 2023"."""
    pieces = [f"{moment:%a %b}", f"{moment.day:>2}", f"{moment:%H:%M:%S}"]
    zone = moment.strftime("%Z")
    if zone:
        pieces.append(zone)
    pieces.append(str(moment.year))
    return " ".join(pieces)


def render_header(title: str, generated_at: str, latest_date: str) -> str:
    return (
        f"{title}\n"
        "\n"
        f"Generated on: {generated_at}\n"
        "\n"
        f"Log Data for {latest_date}\n"
        f"{HEADER_DIVIDER}\n"
        "\n"
    )


def _country_column(ip: str, countries: Mapping[str, str]) -> str:
    code = countries.get(ip) or UNKNOWN_COUNTRY
    if len(code) != 2:
        return UNKNOWN_COUNTRY
    return code


def render_counts(
        counts: Mapping[str, int],
        hostnames: Mapping[str, str],
        countries: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render the count table, one row per address in address order:

        2 | 1.1.1.1         | AU | one.one.one.one

    The country column is left out entirely when ``countries`` is None.
    Anything that is not a valid IPv4 address is skipped.
    """
    rows: list[str] = []
    addresses = sorted_keys(counts) if counts else []

    for ip in addresses:
        if not is_valid_ipv4(ip):
            continue

        columns = [str(counts[ip]), ip.ljust(IP_COLUMN_WIDTH)]
        if countries is not None:
            columns.append(_country_column(ip, countries))
        columns.append(hostnames.get(ip) or NOT_AVAILABLE)

        rows.append(" | ".join(columns) + "\n")

    if not rows:
        return NO_ADDRESSES
    return "".join(rows)


def build_ip_report(
        counts: Mapping[str, int],
        hostnames: Mapping[str, str],
        latest_date: str,
        generated_at: str,
        countries: Optional[Mapping[str, str]] = None,
) -> str:
    header = render_header(IP_REPORT_TITLE, generated_at, latest_date)
    return header + render_counts(counts, hostnames, countries)


def build_whois_report(whois_text: str, latest_date: str, generated_at: str) -> str:
    return render_header(WHOIS_REPORT_TITLE, generated_at, latest_date) + whois_text
