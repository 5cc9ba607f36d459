# asciilog/config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

ServerType = Literal["nginx", "apache"]

ONE_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class CycleConfig:
    """Everything the cycle driver needs; built once by the CLI."""

    server_type: ServerType = "nginx"
    log_directory: Path = Path("/var/log")
    access_log: str = "access.log"
    web_location: Path = Path("/var/www/html/data")
    ip_log: str = "ip.log"
    whois_log: str = "whois.log"
    whois: bool = True
    whois_command: str = "whois"
    whois_timeout: Optional[float] = None
    csv_output: Optional[Path] = None
    daemon_mode: bool = False
    interval_seconds: float = ONE_DAY

    @property
    def access_log_path(self) -> Path:
        return self.log_directory / self.server_type / self.access_log

    @property
    def ip_log_path(self) -> Path:
        return self.web_location / self.ip_log

    @property
    def whois_log_path(self) -> Path:
        return self.web_location / self.whois_log
