from __future__ import annotations

import signal
import socket
import sys
import threading
from pathlib import Path
from enum import Enum
from typing import Optional

import typer

from asciilog.config import ONE_DAY, CycleConfig
from asciilog.cycle import build_reports, run_cycle, run_scheduled
from asciilog.errors import AsciiLogError
from asciilog.utils.logging import configure, get_logger, set_level

app = typer.Typer(help="Daily IP address counts (with whois countries) from nginx/apache access logs.")

log = get_logger(__name__)


class ServerType(str, Enum):
    nginx = "nginx"
    apache = "apache"


def _setup_logging(verbose: bool) -> None:
    if verbose:
        set_level("DEBUG")


@app.command()
def run(
        server_type: ServerType = typer.Option(
            ServerType.nginx,
            "--server-type",
            "-s",
            case_sensitive=False,
            envvar="ASCII_LOG_SERVER_TYPE",
            help="Currently active server: nginx | apache",
        ),
        log_directory: Path = typer.Option(
            Path("/var/log"),
            "--log-directory",
            envvar="ASCII_LOG_LOG_DIRECTORY",
            help="Directory holding <server-type>/access.log.",
        ),
        web_location: Path = typer.Option(
            Path("/var/www/html/data"),
            "--web-location",
            "-w",
            envvar="ASCII_LOG_WEB_LOCATION",
            help="Existing directory that receives ip.log and whois.log.",
        ),
        daemon_mode: bool = typer.Option(
            False,
            "--daemon-mode/--no-daemon-mode",
            envvar="ASCII_LOG_DAEMON_MODE",
            help="Keep running and regenerate the reports every --interval seconds.",
        ),
        interval: float = typer.Option(
            ONE_DAY,
            "--interval",
            min=1,
            help="Seconds between cycles in daemon mode (default: 24 hours).",
        ),
        whois: bool = typer.Option(
            True,
            "--whois/--no-whois",
            help="Look up every address with the whois utility and add a country column.",
        ),
        whois_command: str = typer.Option(
            "whois",
            "--whois-command",
            envvar="ASCII_LOG_WHOIS_COMMAND",
            help="whois executable to run.",
        ),
        whois_timeout: Optional[float] = typer.Option(
            None,
            "--whois-timeout",
            help="Give up on a single whois call after this many seconds.",
        ),
        csv_output: Optional[Path] = typer.Option(
            None,
            "--csv",
            help="Also write a CSV summary (ip, slash24, count, country, hostname) here.",
        ),
        verbose: bool = typer.Option(False, "--verbose", "-V", help="Debug logging."),
):
    """
    Generate ip.log (and whois.log) from today's entries in the access log.

    Example:

        ascii-log run --server-type apache -w /var/www/html/data
        ascii-log run --daemon-mode --no-whois
    """
    _setup_logging(verbose)

    web_location = web_location.expanduser().resolve()
    if not web_location.is_dir():
        typer.echo(f"The following directory does not exist: {web_location}", err=True)
        raise typer.Exit(code=1)

    config = CycleConfig(
        server_type=server_type.value,
        log_directory=log_directory.expanduser(),
        web_location=web_location,
        whois=whois,
        whois_command=whois_command,
        whois_timeout=whois_timeout,
        csv_output=csv_output,
        daemon_mode=daemon_mode,
        interval_seconds=interval,
    )
    log.info("Access log: %s (server=%s)", config.access_log_path, config.server_type)

    if not config.daemon_mode:
        try:
            result = run_cycle(config)
        except (AsciiLogError, OSError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

        for path in result.written:
            typer.echo(f"Wrote {path}")
        return

    stop = threading.Event()

    def _request_stop(signum, _frame):
        log.info("Received signal %d, stopping after the current cycle", signum)
        stop.set()

    signal.signal(signal.SIGTERM, _request_stop)
    signal.signal(signal.SIGINT, _request_stop)
    run_scheduled(config, stop)


@app.command()
def preview(
        input: Path = typer.Argument(
            ...,
            exists=True,
            dir_okay=False,
            help="Access log to summarise.",
        ),
        whois: bool = typer.Option(
            False,
            "--whois/--no-whois",
            help="Run whois for the country column (slow).",
        ),
        resolve: bool = typer.Option(
            True,
            "--resolve/--no-resolve",
            help="Reverse-resolve hostnames.",
        ),
        verbose: bool = typer.Option(False, "--verbose", "-V", help="Debug logging."),
):
    """
    Print the IP count report for an access log without writing any files.
    """
    _setup_logging(verbose)

    resolver = socket.gethostbyaddr if resolve else _no_resolver

    try:
        text = input.expanduser().read_text(encoding="utf-8", errors="replace")
        result = build_reports(text, whois=whois, resolver=resolver)
    except (AsciiLogError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(result.ip_report.rstrip("\n"))


def _no_resolver(ip: str) -> tuple:
    raise OSError("hostname resolution disabled")


def main() -> None:
    """Entry point for console_scripts."""
    configure()
    try:
        app()
    except KeyboardInterrupt:
        # Graceful Ctrl+C handling
        typer.echo("Interrupted by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
