"""Bitext sentiment client."""

import logging
import xml.etree.ElementTree as ET
from typing import Optional, Tuple

import requests

from ..core.config import settings
from ..core.constants import Polarity, ProviderLimits, ProviderNames
from ..core.context import AnalysisExecutionContext
from ..core.errors import ProviderError
from ..core.locale import triple_language_code
from ..core.models import ExecutionStatus, RunSummary
from .base import ensure_success, new_session, request_timeout, run_documents

logger = logging.getLogger(__name__)


class BitextClient:
    """Scores each document with a form POST; block scores are averaged."""

    name = ProviderNames.BITEXT
    languages = ("English", "Spanish", "Portuguese")

    def __init__(self, session: Optional[requests.Session] = None, url: Optional[str] = None):
        self.session = session
        self.url = url or settings.bitext_url
        self.last_run: Optional[RunSummary] = None

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        return self.last_run.context if self.last_run else None

    def is_language_supported(self, language: str) -> bool:
        return language in self.languages

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        session = new_session(self.session)
        language = triple_language_code(context.language)

        def analyze(doc_id: str, text: str) -> Tuple[float, str]:
            # The response is always parsed as XML, whatever format the context asks for
            payload = {
                "User": context.key,
                "Pass": context.secret,
                "OutFormat": "XML",
                "Detail": "Global",
                "Normalized": "No",
                "Theme": "Gen",
                "ID": doc_id,
                "Lang": language,
                "Text": text,
            }
            response = session.post(self.url, data=payload, timeout=request_timeout())
            ensure_success(self.name, response)
            score = average_score(response.content)
            return score, score_polarity(score)

        self.last_run = run_documents(
            self.name,
            context,
            analyze,
            size_limit=ProviderLimits.BITEXT_MAX_CHARS,
            non_success_status=ExecutionStatus.PROCESSED,
        )
        return self.last_run


def clean_response(body: bytes) -> bytes:
    """Drop line breaks and the quotes Bitext wraps around element content."""
    for newline in (b"\r\n", b"\r", b"\n"):
        body = body.replace(newline, b"")
    return body.replace(b'>"', b">").replace(b'"<', b"<")


def average_score(body: bytes) -> float:
    """Mean GLOBAL_VALUE over every BLOCK of a RESULT document."""
    # Parsing bytes lets the XML declaration pick the encoding
    root = ET.fromstring(clean_response(body))
    values = [float(block.findtext("GLOBAL_VALUE") or 0) for block in root.iter("BLOCK")]
    if not values:
        raise ProviderError(ProviderNames.BITEXT, "Bitext response has no sentiment blocks")
    return sum(values) / len(values)


def score_polarity(score: float) -> str:
    if score < 0:
        return Polarity.NEGATIVE
    if score > 0:
        return Polarity.POSITIVE
    return Polarity.NEUTRAL
