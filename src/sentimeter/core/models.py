"""Data models for sentimeter."""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .constants import Polarity

NAN = float("nan")


class ExecutionStatus(Enum):
    PROCESSED = "Processed"
    FAILED = "Failed"
    SUCCESS = "Success"
    CANCELED = "Canceled"


class DataFormat(Enum):
    XML = "XML"
    JSON = "JSON"


@dataclass(frozen=True)
class SentimentDetail:
    """One provider's verdict on one document."""
    score: float
    polarity: str
    confidence: float = NAN
    reference_polarity: str = ""

    def __str__(self) -> str:
        if math.isnan(self.score) and not math.isnan(self.confidence):
            result = f"{self.polarity},{self.confidence:.2f}"
        else:
            result = f"{self.polarity},{self.score:.2f}"

        if self.reference_polarity:
            verdict = "agrees" if self.polarity == self.reference_polarity else "disagrees"
            result += f",{verdict}"
        return result


class ResultSet:
    """Per-document accumulator of one SentimentDetail per provider."""

    def __init__(self, source: str):
        self._source = source
        self._output: Dict[str, SentimentDetail] = {}

    @property
    def source(self) -> str:
        return self._source

    def add_output(self, provider: str, score: float, polarity: str, confidence: float = NAN) -> None:
        """Store a provider's result, replacing any earlier one."""
        self._output[provider] = SentimentDetail(float(score), polarity, float(confidence))

    def get_detail(self, provider: str) -> Optional[SentimentDetail]:
        return self._output.get(provider)

    def get_score(self, provider: str) -> float:
        detail = self._output.get(provider)
        return detail.score if detail else NAN

    def get_polarity(self, provider: str) -> str:
        detail = self._output.get(provider)
        return detail.polarity if detail else Polarity.NONE

    def get_confidence(self, provider: str) -> float:
        detail = self._output.get(provider)
        return detail.confidence if detail else NAN

    def add_reference_polarity(self, polarity: str, exclude: Optional[str] = None) -> None:
        """Mark every provider except ``exclude`` with a reference polarity to compare against."""
        for provider, detail in self._output.items():
            if provider != exclude:
                self._output[provider] = replace(detail, reference_polarity=polarity)

    def has_reference_polarity(self) -> bool:
        return any(detail.reference_polarity for detail in self._output.values())

    def get_services(self) -> List[str]:
        """Provider names in lexicographic order."""
        return sorted(self._output)

    def __contains__(self, provider: str) -> bool:
        return provider in self._output

    def __len__(self) -> int:
        return len(self._output)

    def __str__(self) -> str:
        parts = [f"{self._output[name]}," for name in self.get_services()]
        parts.append(f'"{self._source}"')
        return "".join(parts)

    def __repr__(self) -> str:
        return f"ResultSet(source={self._source!r}, services={self.get_services()!r})"


@dataclass(frozen=True)
class ProgressEvent:
    """One status transition reported to the progress observer."""
    status: ExecutionStatus
    total: int
    processed: int
    failed: int = 0
    reason: Optional[str] = None

    @property
    def progress(self) -> int:
        """Completion percentage, capped at 100."""
        done = self.processed + self.failed
        if self.total <= 0 or done >= self.total:
            return 100
        return (done * 100) // self.total


@dataclass(frozen=True)
class RunSummary:
    """Outcome of one executor run over a context."""
    provider: str
    context: Any = field(repr=False)
    total: int
    processed: int
    failed: int
    canceled: bool = False
    aborted: bool = False
    reason: Optional[str] = None
