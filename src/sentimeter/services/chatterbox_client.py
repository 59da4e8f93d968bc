"""Chatterbox (Mashape) sentiment client."""

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from ..core.config import settings
from ..core.constants import Polarity, ProviderLimits, ProviderNames, Thresholds
from ..core.context import AnalysisExecutionContext
from ..core.locale import double_language_code
from ..core.models import RunSummary
from .base import ensure_success, new_session, request_timeout, run_documents

logger = logging.getLogger(__name__)


class ChatterboxClient:
    """Classifies short documents; anything over 300 characters is rejected locally."""

    name = ProviderNames.CHATTERBOX
    languages = ("English", "French", "Dutch", "German", "Portuguese", "Spanish")

    def __init__(self, session: Optional[requests.Session] = None, url: Optional[str] = None):
        self.session = session
        self.url = url or settings.chatterbox_url
        self.last_run: Optional[RunSummary] = None

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        return self.last_run.context if self.last_run else None

    def is_language_supported(self, language: str) -> bool:
        return language in self.languages

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        session = new_session(self.session)
        headers = {"X-Mashape-Authorization": context.key}
        language = double_language_code(context.language)

        def analyze(doc_id: str, text: str) -> Tuple[float, str]:
            response = session.post(
                self.url,
                data={"lang": language, "text": text},
                headers=headers,
                timeout=request_timeout(),
            )
            ensure_success(self.name, response)
            sentiment: Dict[str, Any] = response.json()
            value = float(sentiment["value"])
            return value, score_polarity(value)

        self.last_run = run_documents(
            self.name, context, analyze, size_limit=ProviderLimits.CHATTERBOX_MAX_CHARS
        )
        return self.last_run


def score_polarity(value: float) -> str:
    if value < Thresholds.CHATTERBOX_NEGATIVE:
        return Polarity.NEGATIVE
    if value > Thresholds.CHATTERBOX_POSITIVE:
        return Polarity.POSITIVE
    return Polarity.NEUTRAL
