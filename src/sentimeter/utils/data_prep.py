"""Reading source corpora and writing/reading CSV reports."""

import logging
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.constants import ReportConstants
from ..core.errors import ReportFormatError
from ..core.models import ResultSet

logger = logging.getLogger(__name__)


def read_source(path: str, cut_by: int = 300) -> Dict[str, ResultSet]:
    """Load a corpus, one document per line.

    Plain-text lines are truncated to ``cut_by`` characters; for ``.csv``
    files only the first column is kept. Each document gets a fresh uuid.
    """
    source = Path(path)
    if not source.exists() or source.stat().st_size == 0:
        raise FileNotFoundError(f"Source file {path} doesn't exist or it's empty")
    if cut_by < ReportConstants.MIN_CUT_BY:
        raise ValueError(f"Text cutting threshold should be at least {ReportConstants.MIN_CUT_BY} characters")

    is_csv = source.suffix.lower() == ".csv"
    documents: Dict[str, ResultSet] = {}

    with open(source, "r", encoding="utf-8") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if len(line.strip()) < ReportConstants.MIN_LINE_LENGTH:
                continue
            text = line.split(",")[0] if is_csv else line[:cut_by]
            documents[str(uuid.uuid4())] = ResultSet(text)

    logger.info(f"Loaded {len(documents)} documents from {path}")
    return documents


def report_header(sample: Optional[ResultSet], column_labels: Optional[Dict[str, str]] = None) -> str:
    """Header line for a report whose rows look like ``sample``."""
    labels = ReportConstants.SCORE_LABELS if column_labels is None else column_labels
    columns = [ReportConstants.DOCUMENT_ID_COLUMN]
    services = sample.get_services() if sample is not None else []
    for service in services:
        label = labels.get(service, ReportConstants.DEFAULT_SCORE_LABEL)
        columns.append(f"{service} Polarity")
        columns.append(f"{service} {label}")
        if sample.get_detail(service).reference_polarity:
            columns.append(f"{service} {ReportConstants.AGREEMENT_LABEL}")
    columns.append(ReportConstants.SOURCE_TEXT_COLUMN)
    return ",".join(columns)


def write_report(path: str, documents: Dict[str, ResultSet], column_labels: Optional[Dict[str, str]] = None) -> None:
    """Write one header line and one ``{id},{ResultSet}`` row per document."""
    sample = next(iter(documents.values()), None)

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(report_header(sample, column_labels) + "\n")
        for doc_id, result in documents.items():
            f.write(f"{doc_id},{result}\n")

    logger.info(f"Report with {len(documents)} documents written to {path}")


def _parse_header(columns: List[str]) -> List[Tuple[str, int]]:
    """Services named in a header, each with the number of columns it spans."""
    if len(columns) <= 1:
        raise ReportFormatError("Report isn't a proper CSV file")
    if columns[0] != ReportConstants.DOCUMENT_ID_COLUMN:
        raise ReportFormatError('Report doesn\'t have "Document ID" column or it\'s not the first one')
    if columns[-1] != ReportConstants.SOURCE_TEXT_COLUMN:
        raise ReportFormatError('Report doesn\'t have "Source text" column or it\'s not the last one')

    widths: Dict[str, int] = {}
    for column in columns[1:-1]:
        service = column.split(" ")[0]
        widths[service] = widths.get(service, 0) + 1
    return list(widths.items())


def read_report(path: str) -> Dict[str, ResultSet]:
    """Parse a report written by ``write_report`` back into ResultSets.

    Agreement columns are skipped; only polarity and score are restored.
    """
    source = Path(path)
    if not source.exists() or source.stat().st_size == 0:
        raise FileNotFoundError(f"Report {path} doesn't exist or it's empty")

    documents: Dict[str, ResultSet] = {}
    services: Optional[List[Tuple[str, int]]] = None
    width = 0

    with open(source, "r", encoding="utf-8") as f:
        for number, line in enumerate(f, start=1):
            line = line.rstrip("\r\n")
            if services is None:
                services = _parse_header(line.split(","))
                width = sum(span for _, span in services)
                continue
            if len(line.strip()) < ReportConstants.MIN_LINE_LENGTH:
                continue

            # Source text is last and may itself contain commas
            columns = line.split(",", 1 + width)
            if len(columns) != 2 + width:
                raise ReportFormatError(f"Line {number} of {path} has {len(columns)} columns")

            result = ResultSet(columns[-1].strip('"'))
            position = 1
            for service, span in services:
                polarity, score = columns[position], columns[position + 1]
                try:
                    result.add_output(service, float(score), polarity)
                except ValueError:
                    raise ReportFormatError(f"Line {number} of {path}: bad {service} score {score!r}") from None
                position += span
            documents[columns[0]] = result

    if services is None:
        raise ReportFormatError(f"Report {path} has no header")

    logger.info(f"Loaded {len(documents)} documents from report {path}")
    return documents
