"""Daily IP address count reports built from web-server access logs."""

__version__ = "0.3.0"
