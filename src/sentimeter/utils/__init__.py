"""Utility modules for sentimeter."""

from .benchmark import timed
from .data_prep import read_report, read_source, write_report

__all__ = [
    "read_report",
    "read_source",
    "timed",
    "write_report",
]
