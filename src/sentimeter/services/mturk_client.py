"""Amazon Mechanical Turk client: submit documents as HITs, collect worker votes later."""

import logging
import math
import xml.etree.ElementTree as ET
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import boto3
import yaml

from ..core.config import settings
from ..core.constants import FINAL_POLARITIES, MTurkConstants, Polarity, ProviderNames
from ..core.context import AnalysisExecutionContext
from ..core.errors import RegistrationError
from ..core.locale import country_code, is_known_country
from ..core.models import NAN, ExecutionStatus, ProgressEvent, RunSummary
from ..utils.benchmark import timed
from .base import empty_run

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).parent / "templates" / MTurkConstants.TEMPLATE_FILE
QUESTION_FORM_NS = "http://mechanicalturk.amazonaws.com/AWSMechanicalTurkDataSchemas/2017-11-06/QuestionForm.xsd"


@dataclass
class MechanicalTurkSettings:
    """HIT parameters carried in ``context.custom_field``."""
    email: Optional[str] = None
    assignments: int = 3
    reward: Decimal = Decimal("0.10")
    time_to_finish: int = 300
    time_to_approve: int = 1800
    percent_of_success: int = 75
    locale: Optional[str] = None

    @classmethod
    def from_yaml(cls, path: str) -> "MechanicalTurkSettings":
        """Load settings from a YAML mapping; missing keys keep their defaults."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        defaults = cls()
        return cls(
            email=data.get("email", defaults.email),
            assignments=int(data.get("assignments", defaults.assignments)),
            reward=Decimal(str(data.get("reward", defaults.reward))),
            time_to_finish=int(data.get("time_to_finish", defaults.time_to_finish)),
            time_to_approve=int(data.get("time_to_approve", defaults.time_to_approve)),
            percent_of_success=int(data.get("percent_of_success", defaults.percent_of_success)),
            locale=data.get("locale", defaults.locale),
        )


def merge_polarity(answers: Sequence[str]) -> Tuple[str, float]:
    """Majority vote over worker answers.

    Returns (polarity, confidence) where confidence is the winning share.
    No repeated answer means no agreement: "undefined". Ties go to the
    answer seen first.
    """
    if not answers:
        return Polarity.UNDEFINED, 0.0

    # most_common keeps insertion order among equal counts
    winner, count = Counter(answers).most_common(1)[0]
    confidence = count / len(answers)
    if count == 1:
        return Polarity.UNDEFINED, confidence
    return winner, confidence


def render_question(doc_id: str, text: str, template_path: Path = TEMPLATE_PATH) -> str:
    """Fill the QuestionForm template with one document."""
    ET.register_namespace("", QUESTION_FORM_NS)
    root = ET.parse(template_path).getroot()
    question = root.find(f"{{{QUESTION_FORM_NS}}}Question")
    question.find(f"{{{QUESTION_FORM_NS}}}QuestionIdentifier").text = doc_id
    question.find(f"{{{QUESTION_FORM_NS}}}QuestionContent/{{{QUESTION_FORM_NS}}}Text").text = text
    return ET.tostring(root, encoding="unicode")


def first_answer(answer_xml: str) -> Optional[str]:
    """First answer value of a QuestionFormAnswers document, "undefined" when it is empty."""
    root = ET.fromstring(answer_xml)
    answer = root.find("{*}Answer")
    if answer is None:
        return None
    for tag in ("SelectionIdentifier", "FreeText", "OtherSelectionText"):
        value = answer.findtext(f"{{*}}{tag}")
        if value:
            return value.strip()
    return Polarity.UNDEFINED


def extract_answers(assignments: List[Dict[str, Any]]) -> List[str]:
    answers = []
    for assignment in assignments:
        if assignment.get("AssignmentStatus") == "Rejected":
            continue
        value = first_answer(assignment.get("Answer") or "")
        if value is not None:
            answers.append(value)
    return answers


class MechanicalTurkClient:
    """Human-rated sentiment in two phases: ``execute`` submits, ``collect`` reads the votes."""

    name = ProviderNames.MECHANICAL_TURK

    def __init__(self, client: Any = None):
        self.client = client
        self.last_run: Optional[RunSummary] = None

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        return self.last_run.context if self.last_run else None

    def is_language_supported(self, language: str) -> bool:
        # Workers read any language
        return True

    def _client(self, context: AnalysisExecutionContext):
        if self.client is not None:
            return self.client
        return boto3.client(
            "mturk",
            aws_access_key_id=context.key,
            aws_secret_access_key=context.secret,
            region_name=settings.mturk_region,
            endpoint_url=settings.mturk_endpoint_url,
        )

    @staticmethod
    def _settings(context: AnalysisExecutionContext) -> MechanicalTurkSettings:
        if isinstance(context.custom_field, MechanicalTurkSettings):
            return context.custom_field
        return MechanicalTurkSettings()

    def qualification_requirements(self, hit_settings: MechanicalTurkSettings) -> List[Dict[str, Any]]:
        requirements = [{
            "QualificationTypeId": MTurkConstants.APPROVAL_RATE_QUALIFICATION,
            "Comparator": "GreaterThanOrEqualTo",
            "IntegerValues": [hit_settings.percent_of_success],
        }]
        if hit_settings.locale:
            locale = hit_settings.locale
            country = country_code(locale) if is_known_country(locale) else locale.upper()
            requirements.append({
                "QualificationTypeId": MTurkConstants.LOCALE_QUALIFICATION,
                "Comparator": "EqualTo",
                "LocaleValues": [{"Country": country}],
            })
        return requirements

    def register_hit_type(self, client, hit_settings: MechanicalTurkSettings) -> str:
        """Create the HIT type and, when an email is set, its notification."""
        try:
            response = client.create_hit_type(
                AutoApprovalDelayInSeconds=hit_settings.time_to_approve,
                AssignmentDurationInSeconds=hit_settings.time_to_finish,
                Reward=str(hit_settings.reward),
                Title=MTurkConstants.TITLE,
                Keywords=MTurkConstants.KEYWORDS,
                Description=MTurkConstants.DESCRIPTION,
                QualificationRequirements=self.qualification_requirements(hit_settings),
            )
            hit_type_id = response["HITTypeId"]

            if hit_settings.email:
                client.update_notification_settings(
                    HITTypeId=hit_type_id,
                    Notification={
                        "Destination": hit_settings.email,
                        "Transport": "Email",
                        "Version": MTurkConstants.NOTIFICATION_VERSION,
                        "EventTypes": ["AssignmentReturned"],
                    },
                    Active=True,
                )
        except Exception as e:
            raise RegistrationError(self.name, str(e)) from e

        logger.info(f"{self.name}: HIT type {hit_type_id} registered")
        return hit_type_id

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        """Submit every document as a HIT and store its id in the MechanicalTurk slot."""
        if context.total <= 0:
            self.last_run = empty_run(self.name, context)
            return self.last_run

        client = self._client(context)
        hit_settings = self._settings(context)
        total = context.total
        debug = context.use_debug_mode

        try:
            with timed(f"{self.name}: HIT type for sentiment analysis has been created", enabled=debug):
                hit_type_id = self.register_hit_type(client, hit_settings)
        except RegistrationError as e:
            logger.error(f"{self.name}: HIT type registration failed: {e}")
            context.emit(self.name, ProgressEvent(ExecutionStatus.FAILED, total, 0, 0, reason=str(e)))
            self.last_run = RunSummary(self.name, context, total, 0, 0, aborted=True, reason=str(e))
            return self.last_run

        processed = 0
        failed = 0
        canceled = False
        for doc_id, result in context.results.items():
            try:
                with timed(f"{self.name}: HIT for document {doc_id} has been sent", enabled=debug):
                    response = client.create_hit_with_hit_type(
                        HITTypeId=hit_type_id,
                        MaxAssignments=hit_settings.assignments,
                        LifetimeInSeconds=MTurkConstants.HIT_LIFETIME_SECONDS,
                        Question=render_question(doc_id, result.source),
                    )
                hit_id = response["HIT"]["HITId"]
            except Exception as e:
                failed += 1
                result.add_output(self.name, 0, Polarity.FAILED)
                logger.warning(f"{self.name}: HIT for document {doc_id} failed: {e}")
                event = ProgressEvent(ExecutionStatus.FAILED, total, processed, failed, reason=str(e))
            else:
                processed += 1
                result.add_output(self.name, hit_settings.assignments, hit_id)
                event = ProgressEvent(ExecutionStatus.PROCESSED, total, processed, failed)

            if context.emit(self.name, event):
                canceled = True
                break

        context.emit(self.name, ProgressEvent(ExecutionStatus.SUCCESS, total, processed, failed))
        self.last_run = RunSummary(self.name, context, total, processed, failed, canceled=canceled)
        return self.last_run

    def list_assignments(self, client, hit_id: str) -> List[Dict[str, Any]]:
        assignments: List[Dict[str, Any]] = []
        kwargs: Dict[str, Any] = {"HITId": hit_id, "MaxResults": 100}
        while True:
            response = client.list_assignments_for_hit(**kwargs)
            assignments.extend(response.get("Assignments", []))
            token = response.get("NextToken")
            if not token:
                return assignments
            kwargs["NextToken"] = token

    def collect(self, context: AnalysisExecutionContext) -> RunSummary:
        """Read worker answers for every pending HIT and resolve them by majority vote."""
        results = context.results
        first = next(iter(results.values()), None)
        if first is None or self.name not in first:
            context.emit(self.name, ProgressEvent(ExecutionStatus.CANCELED, 0, 0, 0))
            self.last_run = RunSummary(self.name, context, 0, 0, 0, canceled=True)
            return self.last_run

        client = self._client(context)
        total = context.total
        debug = context.use_debug_mode
        processed = 0
        failed = 0
        canceled = False

        for doc_id, result in results.items():
            hit_id = result.get_polarity(self.name)
            if hit_id in FINAL_POLARITIES or hit_id == Polarity.NONE:
                continue

            expected = result.get_score(self.name)
            expected = 0 if math.isnan(expected) else expected

            try:
                with timed(f"{self.name}: answers for HIT {hit_id} have been received", enabled=debug):
                    assignments = self.list_assignments(client, hit_id)
            except Exception as e:
                failed += 1
                logger.warning(f"{self.name}: could not read assignments for HIT {hit_id}: {e}")
                event = ProgressEvent(ExecutionStatus.FAILED, total, processed, failed, reason=str(e))
                if context.emit(self.name, event):
                    canceled = True
                    break
                continue

            answers = extract_answers(assignments)
            if len(assignments) < expected or not answers:
                # Not enough votes yet; the HIT id stays for the next collect
                processed += 1
                continue

            polarity, confidence = merge_polarity(answers)
            processed += 1
            result.add_output(self.name, NAN, polarity, confidence)
            if context.emit(self.name, ProgressEvent(ExecutionStatus.PROCESSED, total, processed, failed)):
                canceled = True
                break

        context.emit(self.name, ProgressEvent(ExecutionStatus.SUCCESS, total, processed, failed))
        self.last_run = RunSummary(self.name, context, total, processed, failed, canceled=canceled)
        return self.last_run
