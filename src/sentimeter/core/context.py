"""Execution context shared by every executor in a run."""

import logging
from typing import Any, Callable, Dict, Optional

from .models import DataFormat, ExecutionStatus, ProgressEvent, ResultSet

logger = logging.getLogger(__name__)

# Observer signature: (provider, event) -> truthy to cancel the run
ProgressObserver = Callable[[str, ProgressEvent], Optional[bool]]


class AnalysisExecutionContext:
    """Credentials, language and the document corpus handed to an executor.

    The ``results`` mapping is borrowed from the caller: executors write into
    the ResultSet values it holds but never add, remove or replace entries.
    """

    def __init__(
        self,
        results: Dict[str, ResultSet],
        *,
        key: str = "",
        secret: str = "",
        language: str = "English",
        format: DataFormat = DataFormat.JSON,
        use_debug_mode: bool = False,
        custom_field: Any = None,
        document_length: int = 0,
        on_progress: Optional[ProgressObserver] = None,
    ):
        self._results = results
        self._use_debug_mode = use_debug_mode
        self.key = key
        self.secret = secret
        self.language = language
        self.format = format
        self.custom_field = custom_field
        self.document_length = document_length
        self.on_progress = on_progress

    @property
    def results(self) -> Dict[str, ResultSet]:
        return self._results

    @property
    def use_debug_mode(self) -> bool:
        return self._use_debug_mode

    @property
    def total(self) -> int:
        return len(self._results)

    def emit(self, provider: str, event: ProgressEvent) -> bool:
        """Report an event to the observer and return whether it asked to cancel."""
        if event.status is ExecutionStatus.FAILED and event.reason:
            logger.debug(f"{provider}: {event.status.value} {event.processed + event.failed}/{event.total} ({event.reason})")
        else:
            logger.debug(f"{provider}: {event.status.value} {event.processed + event.failed}/{event.total}")

        if self.on_progress is None:
            return False
        return bool(self.on_progress(provider, event))
