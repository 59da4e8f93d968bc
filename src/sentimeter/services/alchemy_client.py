"""AlchemyAPI text sentiment client."""

import logging
import xml.etree.ElementTree as ET
from typing import Optional, Tuple

import requests

from ..core.config import settings
from ..core.constants import ProviderNames
from ..core.context import AnalysisExecutionContext
from ..core.errors import ProviderError
from ..core.models import RunSummary
from .base import ensure_success, new_session, request_timeout, run_documents

logger = logging.getLogger(__name__)


class AlchemyClient:
    """Scores each document with one form POST and an XML response."""

    name = ProviderNames.ALCHEMY
    languages = ("English", "French", "German", "Spanish", "Portuguese", "Italian")

    def __init__(self, session: Optional[requests.Session] = None, url: Optional[str] = None):
        self.session = session
        self.url = url or settings.alchemy_url
        self.last_run: Optional[RunSummary] = None

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        return self.last_run.context if self.last_run else None

    def is_language_supported(self, language: str) -> bool:
        return language in self.languages

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        session = new_session(self.session)

        def analyze(doc_id: str, text: str) -> Tuple[float, str]:
            response = session.post(
                self.url,
                data={"apikey": context.key, "text": text, "outputMode": "xml"},
                timeout=request_timeout(),
            )
            ensure_success(self.name, response)
            return parse_response(response.text)

        self.last_run = run_documents(self.name, context, analyze)
        return self.last_run


def parse_response(body: str) -> Tuple[float, str]:
    """Extract (score, polarity) from an Alchemy XML document."""
    root = ET.fromstring(body)
    status = (root.findtext("status") or "").strip()
    if status.upper() != "OK":
        reason = root.findtext("statusInfo") or status or "no status"
        raise ProviderError(ProviderNames.ALCHEMY, f"Alchemy returned status {reason}")

    sentiment = root.find("docSentiment")
    if sentiment is None:
        raise ProviderError(ProviderNames.ALCHEMY, "Alchemy response has no docSentiment element")

    polarity = (sentiment.findtext("type") or "").strip()
    score_text = (sentiment.findtext("score") or "").strip()
    # Neutral documents come back without a score
    score = float(score_text) if score_text else 0.0
    return score, polarity
