"""Structured logging utilities."""

from .run_log import JsonlRunLogger, RunEvent, new_run_id, utc_timestamp

__all__ = ["JsonlRunLogger", "RunEvent", "new_run_id", "utc_timestamp"]
