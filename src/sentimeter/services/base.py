"""Executor contract and the per-document loop shared by single-call providers."""

import logging
from typing import Callable, Iterable, Optional, Protocol, Tuple, Union, runtime_checkable

import requests

from ..core.config import settings
from ..core.constants import Polarity
from ..core.context import AnalysisExecutionContext
from ..core.errors import ProviderStatusError
from ..core.models import ExecutionStatus, ProgressEvent, RunSummary
from ..utils.benchmark import timed

logger = logging.getLogger(__name__)

Verdict = Union[Tuple[float, str], Tuple[float, str, float]]
Analyzer = Callable[[str, str], Verdict]

SUCCESS_CODES = (200, 202)


@runtime_checkable
class Executor(Protocol):
    """Capability every provider client offers."""

    name: str

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        ...

    def is_language_supported(self, language: str) -> bool:
        ...

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        ...


def empty_run(provider: str, context: AnalysisExecutionContext) -> RunSummary:
    """Report an empty corpus with a single Canceled event."""
    context.emit(provider, ProgressEvent(ExecutionStatus.CANCELED, 0, 0, 0))
    return RunSummary(provider, context, 0, 0, 0, canceled=True)


def ensure_success(provider: str, response: requests.Response, accepted: Iterable[int] = SUCCESS_CODES) -> None:
    """Raise ProviderStatusError unless the response carries an accepted status."""
    if response.status_code not in accepted:
        raise ProviderStatusError(provider, response.status_code, response.text)


def new_session(session: Optional[requests.Session]) -> requests.Session:
    return session if session is not None else requests.Session()


def request_timeout() -> float:
    return settings.request_timeout


def run_documents(
    provider: str,
    context: AnalysisExecutionContext,
    analyze: Analyzer,
    size_limit: Optional[int] = None,
    non_success_status: ExecutionStatus = ExecutionStatus.PROCESSED,
) -> RunSummary:
    """Send every document to ``analyze`` one at a time and record the verdicts.

    ``analyze(doc_id, text)`` returns ``(score, polarity[, confidence])``. A
    ProviderStatusError is recorded as a failure reported with
    ``non_success_status``; any other exception is recorded as a failure
    reported as Failed with the exception message. The trailing Success event
    is emitted even when the observer cancels mid-loop.
    """
    if context.total <= 0:
        return empty_run(provider, context)

    total = context.total
    processed = 0
    failed = 0
    canceled = False

    for doc_id, result in context.results.items():
        if size_limit is not None and len(result.source) > size_limit:
            failed += 1
            result.add_output(provider, 0, Polarity.FAILED)
            logger.warning(f"{provider}: document {doc_id} is {len(result.source)} characters, limit is {size_limit}")
            if context.emit(provider, ProgressEvent(ExecutionStatus.FAILED, total, processed, failed)):
                canceled = True
                break
            continue

        try:
            with timed(f"{provider}: sentiment for the document {doc_id} has been retrieved",
                       enabled=context.use_debug_mode):
                verdict = analyze(doc_id, result.source)
        except ProviderStatusError as e:
            failed += 1
            result.add_output(provider, 0, Polarity.FAILED)
            logger.warning(f"{provider}: document {doc_id} rejected with HTTP {e.status_code}")
            reason = str(e) if non_success_status is ExecutionStatus.FAILED else None
            event = ProgressEvent(non_success_status, total, processed, failed, reason=reason)
        except Exception as e:
            failed += 1
            result.add_output(provider, 0, Polarity.FAILED)
            logger.warning(f"{provider}: document {doc_id} failed: {e}")
            event = ProgressEvent(ExecutionStatus.FAILED, total, processed, failed, reason=str(e))
        else:
            processed += 1
            result.add_output(provider, *verdict)
            event = ProgressEvent(ExecutionStatus.PROCESSED, total, processed, failed)

        if context.emit(provider, event):
            canceled = True
            break

    context.emit(provider, ProgressEvent(ExecutionStatus.SUCCESS, total, processed, failed))
    logger.info(f"{provider}: finished, processed {processed}, failed {failed} of {total}")
    return RunSummary(provider, context, total, processed, failed, canceled=canceled)
