"""Sentiment provider clients for sentimeter."""

from .base import Executor
from .mturk_client import MechanicalTurkClient, MechanicalTurkSettings, merge_polarity
from .registry import EXECUTORS, create_executor, supported_providers

__all__ = [
    "Executor",
    "EXECUTORS",
    "MechanicalTurkClient",
    "MechanicalTurkSettings",
    "create_executor",
    "merge_polarity",
    "supported_providers",
]
