"""Semantria REST client: queue documents, then poll for processed results."""

import hashlib
import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

import requests
from requests_oauthlib import OAuth1
from tenacity import Retrying, retry_if_result, wait_fixed

from ..core.config import settings
from ..core.constants import Polarity, ProviderNames
from ..core.context import AnalysisExecutionContext
from ..core.errors import ProviderError, RegistrationError
from ..core.models import DataFormat, ExecutionStatus, ProgressEvent, RunSummary
from ..utils.benchmark import timed
from .base import empty_run, ensure_success, new_session, request_timeout

logger = logging.getLogger(__name__)

# Semantria document statuses
QUEUED = "QUEUED"
PROCESSED = "PROCESSED"
FAILED = "FAILED"


class JsonCodec:
    extension = "json"
    content_type = "application/json"

    def encode_documents(self, documents: List[Dict[str, str]]) -> str:
        return json.dumps(documents)

    def encode_configuration(self, language: str) -> str:
        return json.dumps([{"name": f"sentimeter {language}", "language": language}])

    def decode_subscription(self, body: str) -> Dict[str, int]:
        basic = json.loads(body)["basic_settings"]
        return {
            "characters_limit": int(basic["characters_limit"]),
            "batch_limit": int(basic["batch_limit"]),
        }

    def decode_configurations(self, body: str) -> List[Dict[str, Any]]:
        return json.loads(body) if body.strip() else []

    def decode_documents(self, body: str) -> List[Dict[str, Any]]:
        return json.loads(body) if body.strip() else []


class XmlCodec:
    extension = "xml"
    content_type = "application/xml"

    def encode_documents(self, documents: List[Dict[str, str]]) -> str:
        root = ET.Element("documents")
        for document in documents:
            node = ET.SubElement(root, "document")
            ET.SubElement(node, "id").text = document["id"]
            ET.SubElement(node, "text").text = document["text"]
        return ET.tostring(root, encoding="unicode")

    def encode_configuration(self, language: str) -> str:
        root = ET.Element("configurations")
        added = ET.SubElement(root, "added")
        node = ET.SubElement(added, "configuration")
        ET.SubElement(node, "name").text = f"sentimeter {language}"
        ET.SubElement(node, "language").text = language
        return ET.tostring(root, encoding="unicode")

    def decode_subscription(self, body: str) -> Dict[str, int]:
        basic = ET.fromstring(body).find("basic_settings")
        if basic is None:
            raise ProviderError(ProviderNames.SEMANTRIA, "Semantria subscription has no basic_settings")
        return {
            "characters_limit": int(basic.findtext("characters_limit")),
            "batch_limit": int(basic.findtext("batch_limit")),
        }

    def decode_configurations(self, body: str) -> List[Dict[str, Any]]:
        if not body.strip():
            return []
        return [
            {"config_id": node.findtext("config_id"), "language": node.findtext("language")}
            for node in ET.fromstring(body).iter("configuration")
        ]

    def decode_documents(self, body: str) -> List[Dict[str, Any]]:
        if not body.strip():
            return []
        return [
            {
                "id": node.findtext("id"),
                "status": node.findtext("status"),
                "sentiment_score": node.findtext("sentiment_score"),
                "sentiment_polarity": node.findtext("sentiment_polarity"),
            }
            for node in ET.fromstring(body).iter("document")
        ]


def codec_for(data_format: DataFormat):
    return XmlCodec() if data_format is DataFormat.XML else JsonCodec()


class SemantriaClient:
    """Asynchronous provider: documents are queued in batches and collected by polling."""

    name = ProviderNames.SEMANTRIA
    languages = ("English", "French", "Spanish", "German", "Portuguese", "Chinese")

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        url: Optional[str] = None,
        poll_interval: Optional[float] = None,
    ):
        self.session = session
        self.url = (url or settings.semantria_url).rstrip("/")
        self.poll_interval = settings.semantria_poll_interval if poll_interval is None else poll_interval
        self.last_run: Optional[RunSummary] = None

    @property
    def context(self) -> Optional[AnalysisExecutionContext]:
        return self.last_run.context if self.last_run else None

    def is_language_supported(self, language: str) -> bool:
        return language in self.languages

    def _auth(self, context: AnalysisExecutionContext) -> OAuth1:
        # Semantria signs with the MD5 digest of the secret
        secret = hashlib.md5(context.secret.encode("utf-8")).hexdigest()
        return OAuth1(context.key, client_secret=secret)

    def _request(self, session, method: str, path: str, codec, auth, **kwargs) -> requests.Response:
        url = f"{self.url}/{path}.{codec.extension}"
        headers = {"Content-Type": codec.content_type}
        response = session.request(method, url, auth=auth, headers=headers, timeout=request_timeout(), **kwargs)
        ensure_success(self.name, response)
        return response

    def get_subscription(self, session, codec, auth) -> Dict[str, int]:
        return codec.decode_subscription(self._request(session, "GET", "subscription", codec, auth).text)

    def get_or_create_configuration(self, session, codec, auth, language: str, debug: bool = False) -> str:
        """Return the config id for a language, creating the configuration if needed."""
        with timed(f"{self.name}: configuration for {language} language has been retrieved", enabled=debug):
            config_id = self._find_configuration(session, codec, auth, language)
        if config_id:
            return config_id

        logger.info(f"{self.name}: no configuration for {language}, creating one")
        self._request(session, "POST", "configurations", codec, auth, data=codec.encode_configuration(language))
        config_id = self._find_configuration(session, codec, auth, language)
        if not config_id:
            raise RegistrationError(self.name, f"Configuration for {language} language isn't available")
        return config_id

    def _find_configuration(self, session, codec, auth, language: str) -> Optional[str]:
        response = self._request(session, "GET", "configurations", codec, auth)
        for config in codec.decode_configurations(response.text):
            if config.get("language") == language:
                return config.get("config_id")
        return None

    def queue_batch(self, session, codec, auth, config_id: str, documents: List[Dict[str, str]]) -> None:
        self._request(
            session, "POST", "document/batch", codec, auth,
            params={"config_id": config_id}, data=codec.encode_documents(documents),
        )

    def get_processed(self, session, codec, auth, config_id: str) -> List[Dict[str, Any]]:
        response = self._request(session, "GET", "document/processed", codec, auth, params={"config_id": config_id})
        return codec.decode_documents(response.text)

    def execute(self, context: AnalysisExecutionContext) -> RunSummary:
        if context.total <= 0:
            self.last_run = empty_run(self.name, context)
            return self.last_run

        session = new_session(self.session)
        codec = codec_for(context.format)
        auth = self._auth(context)
        debug = context.use_debug_mode
        total = context.total
        results = context.results

        # doc id -> QUEUED, PROCESSED or FAILED for this run
        state: Dict[str, str] = {}
        canceled = False

        def count(status: str) -> int:
            return sum(1 for value in state.values() if value == status)

        def record_failed(doc_id: str) -> None:
            results[doc_id].add_output(self.name, 0, Polarity.FAILED)
            state[doc_id] = FAILED

        def event(status: ExecutionStatus, reason: Optional[str] = None) -> ProgressEvent:
            return ProgressEvent(status, total, count(PROCESSED), count(FAILED), reason=reason)

        try:
            with timed(f"{self.name}: subscription object has been obtained", enabled=debug):
                subscription = self.get_subscription(session, codec, auth)
            characters_limit = subscription["characters_limit"]
            batch_limit = max(1, subscription["batch_limit"])

            pending: List[Dict[str, str]] = []
            for doc_id, result in results.items():
                if len(result.source) >= characters_limit:
                    record_failed(doc_id)
                    logger.warning(f"{self.name}: document {doc_id} exceeds the {characters_limit} character limit")
                    if context.emit(self.name, event(ExecutionStatus.FAILED)):
                        canceled = True
                        break
                else:
                    pending.append({"id": doc_id, "text": result.source})

            config_id = None
            if not canceled and pending:
                config_id = self.get_or_create_configuration(session, codec, auth, context.language, debug)

            for start in range(0, len(pending), batch_limit):
                if canceled:
                    break
                batch = pending[start:start + batch_limit]
                try:
                    with timed(f"{self.name}: batch of {len(batch)} documents has been queued", enabled=debug):
                        self.queue_batch(session, codec, auth, config_id, batch)
                except Exception as e:
                    logger.warning(f"{self.name}: batch of {len(batch)} documents rejected: {e}")
                    for document in batch:
                        record_failed(document["id"])
                    progress = event(ExecutionStatus.FAILED, reason=str(e))
                else:
                    state.update((document["id"], QUEUED) for document in batch)
                    progress = event(ExecutionStatus.PROCESSED)
                if context.emit(self.name, progress):
                    canceled = True

            def poll_once() -> bool:
                """Fetch processed documents; True while polling should continue."""
                nonlocal canceled
                with timed(f"{self.name}: processed documents have been received", enabled=debug):
                    processed_docs = self.get_processed(session, codec, auth, config_id)
                for data in processed_docs:
                    doc_id = data.get("id")
                    if state.get(doc_id) != QUEUED:
                        continue
                    polarity = data.get("sentiment_polarity")
                    if data.get("status") != PROCESSED or not polarity:
                        logger.warning(f"{self.name}: document {doc_id} came back as {data.get('status')}")
                        record_failed(doc_id)
                        continue
                    results[doc_id].add_output(self.name, float(data.get("sentiment_score") or 0), polarity)
                    state[doc_id] = PROCESSED
                if context.emit(self.name, event(ExecutionStatus.PROCESSED)):
                    canceled = True
                    return False
                return QUEUED in state.values()

            if QUEUED in state.values() and not canceled:
                retryer = Retrying(
                    retry=retry_if_result(lambda keep_polling: keep_polling),
                    wait=wait_fixed(self.poll_interval),
                    reraise=True,
                )
                retryer(poll_once)
        except Exception as e:
            logger.error(f"{self.name}: run failed: {e}")
            for doc_id in results:
                if state.get(doc_id) in (None, QUEUED):
                    record_failed(doc_id)
            if context.emit(self.name, event(ExecutionStatus.FAILED, reason=str(e))):
                self.last_run = RunSummary(
                    self.name, context, total, count(PROCESSED), count(FAILED), canceled=True, reason=str(e)
                )
                return self.last_run

        processed, failed = count(PROCESSED), count(FAILED)
        context.emit(self.name, ProgressEvent(ExecutionStatus.SUCCESS, total, processed, failed))
        logger.info(f"{self.name}: finished, processed {processed}, failed {failed} of {total}")
        self.last_run = RunSummary(self.name, context, total, processed, failed, canceled=canceled)
        return self.last_run
