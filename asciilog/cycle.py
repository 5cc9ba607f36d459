# asciilog/cycle.py

from __future__ import annotations

import functools
import socket
import threading
from datetime import datetime
from typing import Callable, Optional

from asciilog.config import CycleConfig
from asciilog.enrichment import Resolver, WhoisLookup, enrich, resolve_hostnames, whois_record
from asciilog.errors import AsciiLogError
from asciilog.export import address_rows, save_counts_csv, save_report
from asciilog.models import CycleResult
from asciilog.processing.extract import extract
from asciilog.processing.sort import sorted_keys
from asciilog.report import build_ip_report, build_whois_report, format_generated_at
from asciilog.utils.date_detection import latest_date_token, select_last_line, split_into_lines
from asciilog.utils.logging import get_logger
from asciilog.utils.validation import is_valid_ipv4

log = get_logger(__name__)


def build_reports(
        text: str,
        whois: bool = True,
        now: Optional[datetime] = None,
        resolver: Resolver = socket.gethostbyaddr,
        whois_lookup: Optional[WhoisLookup] = None,
) -> CycleResult:
    """
    Turn raw access-log text into the IP report (and whois report).

    Nothing is written here. Errors from the tokenizer propagate.
    """
    lines = split_into_lines(text)
    latest_date = latest_date_token(select_last_line(lines))

    counts = extract(lines, latest_date)
    # only dotted quads are looked up and reported
    addresses = [ip for ip in (sorted_keys(counts) if counts else []) if is_valid_ipv4(ip)]

    generated_at = format_generated_at(now or datetime.now().astimezone())

    countries = None
    whois_report = None
    if whois:
        summary = enrich(addresses, lookup=whois_lookup)
        if summary.error is not None:
            log.error("Whois pass incomplete: %s", summary.error)
        countries = summary.countries
        whois_report = build_whois_report(summary.text, latest_date, generated_at)

    hostnames = resolve_hostnames(addresses, resolver=resolver)
    ip_report = build_ip_report(
        counts,
        hostnames,
        latest_date=latest_date,
        generated_at=generated_at,
        countries=countries,
    )

    return CycleResult(
        latest_date=latest_date,
        counts=counts,
        ip_report=ip_report,
        whois_report=whois_report,
        hostnames=hostnames,
        countries=countries,
    )


def run_cycle(
        config: CycleConfig,
        now: Optional[datetime] = None,
        resolver: Resolver = socket.gethostbyaddr,
        whois_lookup: Optional[WhoisLookup] = None,
) -> CycleResult:
    """
    One full pass: read the access log, build both reports, write them.

    Files are only written once every report string is complete.
    """
    log_path = config.access_log_path
    log.info("Reading %s", log_path)
    text = log_path.read_text(encoding="utf-8", errors="replace")

    if whois_lookup is None:
        whois_lookup = functools.partial(
            whois_record,
            command=config.whois_command,
            timeout=config.whois_timeout,
        )

    result = build_reports(
        text,
        whois=config.whois,
        now=now,
        resolver=resolver,
        whois_lookup=whois_lookup,
    )

    result.written.append(save_report(result.ip_report, config.ip_log_path))
    if result.whois_report is not None:
        result.written.append(save_report(result.whois_report, config.whois_log_path))
    if config.csv_output is not None:
        rows = address_rows(result.counts, result.hostnames, result.countries)
        result.written.append(save_counts_csv(rows, config.csv_output))

    return result


def run_scheduled(
        config: CycleConfig,
        stop: threading.Event,
        cycle: Callable[[CycleConfig], CycleResult] = run_cycle,
) -> int:
    """
    Run ``cycle`` now and then every ``config.interval_seconds`` until
    ``stop`` is set. A failed cycle is logged and skipped.

    Returns the number of cycles that completed.
    """
    completed = 0
    while not stop.is_set():
        try:
            result = cycle(config)
        except (AsciiLogError, OSError) as e:
            log.error("Cycle aborted: %s", e)
        else:
            completed += 1
            log.info("Cycle %d done for %s", completed, result.latest_date)

        if stop.wait(config.interval_seconds):
            break

    log.info("Scheduler stopped after %d cycles", completed)
    return completed
