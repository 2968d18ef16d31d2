# ecr_secret_operator/core/__init__.py

"""
Core infrastructure: clock, exceptions and logging.
"""

from .clock import Clock, FixedClock, RealClock, format_time, parse_time

__all__ = ["Clock", "FixedClock", "RealClock", "format_time", "parse_time"]
