"""Skyttle (Mashape) sentiment client."""

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from ..core.config import settings
from ..core.constants import Polarity, ProviderNames, Thresholds
from ..core.context import AnalysisExecutionContext
from ..core.errors import ProviderError
from ..core.locale import double_language_code
from ..core.models import ExecutionStatus, RunSummary
from .base import ensure_success, new_session, request_timeout, run_documents

logger = logging.getLogger(__name__)


class SkyttleClient:
    """Derives a signed score from Skyttle's positive/negative/neutral percentages."""

    name = ProviderNames.SKYTTLE
    languages = ("English", "French", "German", "Russian")

    def __init__(self, session: Optional[requests.Session] = None, url: Optional[str] = None):
        self.session = session
        self.url = url or settings.skyttle_url
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
            payload = {
                "text": text,
                "lang": language,
                "keywords": "1",
                "sentiment": "1",
                "annotate": "0",
            }
            response = session.post(self.url, data=payload, headers=headers, timeout=request_timeout())
            ensure_success(self.name, response)
            return scores_to_verdict(extract_scores(response.json()))

        self.last_run = run_documents(
            self.name, context, analyze, non_success_status=ExecutionStatus.FAILED
        )
        return self.last_run


def extract_scores(body: Dict[str, Any]) -> Dict[str, float]:
    docs = body.get("docs") or []
    if not docs:
        raise ProviderError(ProviderNames.SKYTTLE, "Skyttle response has no documents")
    scores = docs[0]["sentiment_scores"]
    return {key: float(scores[key]) for key in ("neg", "pos", "neu")}


def scores_to_verdict(scores: Dict[str, float]) -> Tuple[float, str]:
    """Map percentage shares to (score, polarity).

    A clear neutral majority wins outright; otherwise the larger of the
    negative and positive shares decides. Equal shares read as neutral.
    """
    negative, positive, neutral = scores["neg"], scores["pos"], scores["neu"]
    if neutral > Thresholds.SKYTTLE_NEUTRAL_PERCENT:
        return 0.0, Polarity.NEUTRAL
    if negative > positive:
        return -negative / 100, Polarity.NEGATIVE
    if positive > negative:
        return positive / 100, Polarity.POSITIVE
    return 0.0, Polarity.NEUTRAL
