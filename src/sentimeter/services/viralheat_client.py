"""Viralheat review sentiment client."""

import logging
from typing import Optional, Tuple

import requests

from ..core.config import settings
from ..core.constants import ProviderLimits, ProviderNames
from ..core.context import AnalysisExecutionContext
from ..core.models import RunSummary
from .base import ensure_success, new_session, request_timeout, run_documents

logger = logging.getLogger(__name__)


class ViralheatClient:
    name = ProviderNames.VIRALHEAT
    languages = ("English",)

    def __init__(self, session: Optional[requests.Session] = None, url: Optional[str] = None):
        self.session = session
        self.url = url or settings.viralheat_url
        self.last_run: Optional[RunSummary] = None

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        return self.last_run.context if self.last_run else None

    def is_language_supported(self, language: str) -> bool:
        return language in self.languages

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        session = new_session(self.session)

        def analyze(doc_id: str, text: str) -> Tuple[float, str]:
            response = session.get(
                self.url,
                params={"api_key": context.key, "text": text},
                timeout=request_timeout(),
            )
            ensure_success(self.name, response)
            sentiment = response.json()
            # Viralheat reports a probability and its own mood label
            return float(sentiment["prob"]), sentiment["mood"]

        self.last_run = run_documents(
            self.name, context, analyze, size_limit=ProviderLimits.VIRALHEAT_MAX_CHARS
        )
        return self.last_run
