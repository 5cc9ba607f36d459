# asciilog/export.py

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

import pandas as pd

from asciilog.enrichment import NOT_AVAILABLE, UNKNOWN_COUNTRY
from asciilog.models import AddressRow
from asciilog.processing.sort import sorted_keys
from asciilog.utils.logging import get_logger
from asciilog.utils.validation import is_valid_ipv4, slash24

log = get_logger(__name__)


PathLike = Union[str, Path]

CSV_COLUMNS = ["ip", "slash24", "count", "country", "hostname"]


def _target_mode(path: Path) -> int:
    """Permission bits for a replacement of ``path``: its current ones, else umask defaults."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save_report(text: str, path: PathLike) -> Path:
    """
    Write a finished report, replacing any previous copy in one step.

    The text goes to a temporary file next to the target first, so a
    failure never leaves a half-written report behind.
    """
    out_path = Path(path)
    log.info("Saving report to %s", out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    mode = _target_mode(out_path)
    fd, tmp_name = tempfile.mkstemp(dir=out_path.parent, prefix=f".{out_path.name}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            os.chmod(tmp_name, mode)
            fh.write(text)
        os.replace(tmp_name, out_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    log.debug("Wrote %d bytes to %s", len(text.encode("utf-8")), out_path)
    return out_path


def address_rows(
        counts: Mapping[str, int],
        hostnames: Mapping[str, str],
        countries: Optional[Mapping[str, str]] = None,
) -> list[AddressRow]:
    """Same rows as the count table, as records."""
    if not counts:
        return []

    countries = countries or {}
    rows = []
    for ip in sorted_keys(counts):
        if not is_valid_ipv4(ip):
            continue
        country = countries.get(ip) or UNKNOWN_COUNTRY
        rows.append(
            AddressRow(
                ip=ip,
                count=counts[ip],
                country=country if len(country) == 2 else UNKNOWN_COUNTRY,
                hostname=hostnames.get(ip) or NOT_AVAILABLE,
            )
        )
    return rows


def rows_to_dataframe(rows: Iterable[AddressRow]) -> pd.DataFrame:
    records = [
        {
            "ip": row.ip,
            "slash24": slash24(row.ip),
            "count": row.count,
            "country": row.country,
            "hostname": row.hostname,
        }
        for row in rows
    ]
    return pd.DataFrame(records, columns=CSV_COLUMNS)


def save_counts_csv(rows: Iterable[AddressRow], path: PathLike) -> Path:
    """Write the per-address summary as CSV."""
    out_path = Path(path)
    df = rows_to_dataframe(rows)
    if df.empty:
        log.warning("No addresses to export; writing header only to %s", out_path)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    log.info("Wrote %d rows to %s", len(df), out_path)
    return out_path
