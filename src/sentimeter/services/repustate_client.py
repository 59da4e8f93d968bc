"""Repustate bulk sentiment client."""

import logging
from typing import Dict, List, Optional, Tuple

import requests

from ..core.config import settings
from ..core.constants import Polarity, ProviderLimits, ProviderNames, Thresholds
from ..core.context import AnalysisExecutionContext
from ..core.errors import ProviderStatusError
from ..core.locale import double_language_code
from ..core.models import ExecutionStatus, ProgressEvent, ResultSet, RunSummary
from ..utils.benchmark import timed
from .base import empty_run, ensure_success, new_session, request_timeout

logger = logging.getLogger(__name__)

# Statuses Repustate answers with when the account may not use a language
ACCOUNT_REJECTION_CODES = (401, 403)


class RepustateClient:
    """Scores the corpus in batches of numbered texts via bulk-score."""

    name = ProviderNames.REPUSTATE
    languages = ("English", "Arabic", "Chinese", "German", "French", "Spanish", "Italian")

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        url: Optional[str] = None,
        batch_size: int = ProviderLimits.REPUSTATE_BATCH_SIZE,
    ):
        self.session = session
        self.url = url or settings.repustate_url
        self.batch_size = batch_size
        self.last_run: Optional[RunSummary] = None

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        return self.last_run.context if self.last_run else None

    def is_language_supported(self, language: str) -> bool:
        return language in self.languages

    def bulk_score(self, session: requests.Session, key: str, texts: Dict[str, str], language: str) -> Dict[int, float]:
        """POST one batch and return scores keyed by the numeric text id."""
        endpoint = f"{self.url.rstrip('/')}/{key}/bulk-score.json"
        payload = dict(texts)
        payload["lang"] = language
        response = session.post(endpoint, data=payload, timeout=request_timeout())
        ensure_success(self.name, response)
        return {int(item["id"]): float(item["score"]) for item in response.json()["results"]}

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        if context.total <= 0:
            self.last_run = empty_run(self.name, context)
            return self.last_run

        session = new_session(self.session)
        language = double_language_code(context.language)
        total = context.total
        processed = 0
        failed = 0
        canceled = False

        # Global 1-based numbering in corpus order
        numbered: List[Tuple[int, ResultSet]] = list(enumerate(context.results.values(), start=1))

        for start in range(0, len(numbered), self.batch_size):
            batch = numbered[start:start + self.batch_size]
            texts = {f"text{number}": result.source for number, result in batch}

            try:
                with timed(f"{self.name}: batch of {len(batch)} documents has been received",
                           enabled=context.use_debug_mode):
                    scores = self.bulk_score(session, context.key, texts, language)
            except ProviderStatusError as e:
                if e.status_code in ACCOUNT_REJECTION_CODES:
                    reason = f"Your Repustate account doesn't support {context.language} language"
                    logger.error(f"{self.name}: {reason} (HTTP {e.status_code})")
                    context.emit(self.name, ProgressEvent(ExecutionStatus.CANCELED, total, 0, 0, reason=reason))
                    self.last_run = RunSummary(
                        self.name, context, total, processed, failed, aborted=True, reason=reason
                    )
                    return self.last_run
                failed, canceled = self._fail_batch(context, batch, total, processed, failed, str(e))
            except Exception as e:
                failed, canceled = self._fail_batch(context, batch, total, processed, failed, str(e))
            else:
                for number, result in batch:
                    if number in scores:
                        score = scores[number]
                        processed += 1
                        result.add_output(self.name, score, score_polarity(score))
                        event = ProgressEvent(ExecutionStatus.PROCESSED, total, processed, failed)
                    else:
                        failed += 1
                        result.add_output(self.name, 0, Polarity.FAILED)
                        event = ProgressEvent(
                            ExecutionStatus.FAILED, total, processed, failed,
                            reason=f"Repustate returned no score for text{number}",
                        )
                    if context.emit(self.name, event):
                        canceled = True
                        break

            if canceled:
                break

        context.emit(self.name, ProgressEvent(ExecutionStatus.SUCCESS, total, processed, failed))
        logger.info(f"{self.name}: finished, processed {processed}, failed {failed} of {total}")
        self.last_run = RunSummary(self.name, context, total, processed, failed, canceled=canceled)
        return self.last_run

    def _fail_batch(
        self,
        context: AnalysisExecutionContext,
        batch: List[Tuple[int, ResultSet]],
        total: int,
        processed: int,
        failed: int,
        reason: str,
    ) -> Tuple[int, bool]:
        """Mark every document of a batch failed; returns (failed, canceled)."""
        logger.warning(f"{self.name}: batch of {len(batch)} documents failed: {reason}")
        for _, result in batch:
            failed += 1
            result.add_output(self.name, 0, Polarity.FAILED)
            if context.emit(self.name, ProgressEvent(ExecutionStatus.FAILED, total, processed, failed, reason=reason)):
                return failed, True
        return failed, False


def score_polarity(score: float) -> str:
    if score <= Thresholds.REPUSTATE_NEGATIVE:
        return Polarity.NEGATIVE
    if score >= Thresholds.REPUSTATE_POSITIVE:
        return Polarity.POSITIVE
    return Polarity.NEUTRAL
