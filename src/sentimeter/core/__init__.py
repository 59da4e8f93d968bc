"""Core modules for sentimeter."""

from .config import settings
from .constants import Polarity, ProviderNames
from .context import AnalysisExecutionContext
from .models import *

__all__ = [
    "settings",
    "Polarity",
    "ProviderNames",
    "AnalysisExecutionContext",
    "ResultSet",
    "SentimentDetail",
    "ProgressEvent",
    "RunSummary",
    "ExecutionStatus",
    "DataFormat",
]
