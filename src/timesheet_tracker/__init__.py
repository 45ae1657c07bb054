"""Timesheet tracker: work entry logging with manager approval."""

__version__ = "0.1.0"
