# asciilog/models.py
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from asciilog.errors import WhoisExecutionError


@dataclass
class AddressRow:
    ip: str                 # "a.b.c.d"
    count: int              # requests seen on the latest date
    country: str            # 2-letter code or "--"
    hostname: str           # reverse DNS name or "N/A"


@dataclass
class WhoisSummary:
    text: str                                   # whois.log body
    countries: Dict[str, str] = field(default_factory=dict)
    entries: int = 0                            # full records appended
    error: Optional[WhoisExecutionError] = None  # set when the pass stopped early


@dataclass
class CycleResult:
    latest_date: str
    counts: Counter
    ip_report: str
    whois_report: Optional[str] = None
    hostnames: Dict[str, str] = field(default_factory=dict)
    countries: Optional[Dict[str, str]] = None
    written: list[Path] = field(default_factory=list)
