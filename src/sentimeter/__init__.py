"""sentimeter - benchmark third-party sentiment analysis services against each other and against human raters."""

__version__ = "1.0.0"
__author__ = "sentimeter Team"

from .core.models import *
from .core.config import settings
from .core.context import AnalysisExecutionContext
from .services.registry import create_executor, supported_providers

__all__ = [
    "settings",
    "AnalysisExecutionContext",
    "create_executor",
    "supported_providers",
]
