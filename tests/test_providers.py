"""Tests for the single-call provider clients."""

from unittest.mock import Mock, patch

import pytest
import requests

from sentimeter.core.constants import Polarity
from sentimeter.core.models import ResultSet
from sentimeter.services.alchemy_client import AlchemyClient
from sentimeter.services.bitext_client import BitextClient, average_score
from sentimeter.services.chatterbox_client import ChatterboxClient
from sentimeter.services.chatterbox_client import score_polarity as chatterbox_polarity
from sentimeter.services.skyttle_client import SkyttleClient, scores_to_verdict
from sentimeter.services.viralheat_client import ViralheatClient

from conftest import EventRecorder, make_context, make_response

ALCHEMY_OK = """<?xml version="1.0" encoding="UTF-8"?>
<results>
    <status>OK</status>
    <language>english</language>
    <docSentiment>
        <type>positive</type>
        <score>0.612</score>
    </docSentiment>
</results>"""

ALCHEMY_NEUTRAL = """<results><status>OK</status><docSentiment><type>neutral</type></docSentiment></results>"""

ALCHEMY_ERROR = """<results><status>ERROR</status><statusInfo>invalid-api-key</statusInfo></results>"""

BITEXT_OK = """<?xml version="1.0" encoding="UTF-8"?>
<RESULT>
<BLOCK><ID>1</ID><GLOBAL_VALUE>"2.0"</GLOBAL_VALUE><TEXT>"Good"</TEXT></BLOCK>
<BLOCK><ID>2</ID><GLOBAL_VALUE>-1.0</GLOBAL_VALUE><TEXT>Meh</TEXT></BLOCK>
</RESULT>"""


class TestAlchemyClient:

    def test_scores_document(self, recorder):
        session = Mock()
        session.post.return_value = make_response(text=ALCHEMY_OK)
        results = {"a": ResultSet("Great!")}

        summary = AlchemyClient(session=session, url="http://alchemy").execute(
            make_context(results, recorder, key="secret-key")
        )

        assert results["a"].get_polarity("Alchemy") == "positive"
        assert results["a"].get_score("Alchemy") == pytest.approx(0.612)
        args, kwargs = session.post.call_args
        assert args[0] == "http://alchemy"
        assert kwargs["data"] == {"apikey": "secret-key", "text": "Great!", "outputMode": "xml"}
        assert recorder.statuses == ["Processed", "Success"]
        assert summary.processed == 1

    def test_missing_score_defaults_to_zero(self):
        session = Mock()
        session.post.return_value = make_response(text=ALCHEMY_NEUTRAL)
        results = {"a": ResultSet("It is.")}

        AlchemyClient(session=session).execute(make_context(results))

        assert results["a"].get_polarity("Alchemy") == "neutral"
        assert results["a"].get_score("Alchemy") == 0

    def test_error_status_is_failure(self, recorder):
        session = Mock()
        session.post.return_value = make_response(text=ALCHEMY_ERROR)
        results = {"a": ResultSet("Great!")}

        AlchemyClient(session=session).execute(make_context(results, recorder))

        assert results["a"].get_polarity("Alchemy") == Polarity.FAILED
        assert recorder.statuses == ["Failed", "Success"]
        assert "invalid-api-key" in recorder.events[0][1].reason

    def test_transport_error_is_failure(self, recorder):
        session = Mock()
        session.post.side_effect = requests.ConnectionError("connection refused")
        results = {"a": ResultSet("Great!")}

        AlchemyClient(session=session).execute(make_context(results, recorder))

        assert recorder.events[0][1].reason == "connection refused"

    def test_creates_session_when_none_given(self):
        with patch("sentimeter.services.base.requests.Session") as session_class:
            session_class.return_value.post.return_value = make_response(text=ALCHEMY_OK)
            AlchemyClient().execute(make_context({"a": ResultSet("x")}))
        session_class.assert_called_once()

    def test_languages(self):
        client = AlchemyClient()
        assert client.is_language_supported("Italian")
        assert not client.is_language_supported("Russian")


class TestBitextClient:

    def test_average_of_blocks(self, recorder):
        session = Mock()
        session.post.return_value = make_response(text=BITEXT_OK)
        results = {"doc-1": ResultSet("Good. Meh.")}

        BitextClient(session=session).execute(
            make_context(results, recorder, key="user", secret="pass", language="Spanish")
        )

        assert results["doc-1"].get_score("Bitext") == pytest.approx(0.5)
        assert results["doc-1"].get_polarity("Bitext") == Polarity.POSITIVE
        payload = session.post.call_args.kwargs["data"]
        assert payload["User"] == "user"
        assert payload["Pass"] == "pass"
        assert payload["Lang"] == "Esp"
        assert payload["ID"] == "doc-1"
        assert payload["OutFormat"] == "XML"
        assert payload["Detail"] == "Global"

    def test_oversized_document_never_sent(self, recorder):
        session = Mock()
        results = {"a": ResultSet("x" * 8193), "b": ResultSet("x" * 8192)}
        session.post.return_value = make_response(text=BITEXT_OK)

        BitextClient(session=session).execute(make_context(results, recorder))

        assert session.post.call_count == 1
        assert results["a"].get_polarity("Bitext") == Polarity.FAILED
        assert recorder.statuses == ["Failed", "Processed", "Success"]

    def test_non_success_status_reported_as_processed(self, recorder):
        session = Mock()
        session.post.return_value = make_response(status_code=500, text="oops")
        results = {"a": ResultSet("x")}

        summary = BitextClient(session=session).execute(make_context(results, recorder))

        assert results["a"].get_polarity("Bitext") == Polarity.FAILED
        assert recorder.statuses == ["Processed", "Success"]
        assert (summary.processed, summary.failed) == (0, 1)

    def test_accepted_status_is_success(self):
        session = Mock()
        session.post.return_value = make_response(status_code=202, text=BITEXT_OK)
        results = {"a": ResultSet("x")}

        BitextClient(session=session).execute(make_context(results))

        assert results["a"].get_polarity("Bitext") == Polarity.POSITIVE

    def test_empty_result_fails(self):
        with pytest.raises(Exception):
            average_score(b"<RESULT></RESULT>")

    def test_zero_average_is_neutral(self):
        body = b"<RESULT><BLOCK><GLOBAL_VALUE>1</GLOBAL_VALUE></BLOCK><BLOCK><GLOBAL_VALUE>-1</GLOBAL_VALUE></BLOCK></RESULT>"
        session = Mock()
        session.post.return_value = make_response(content=body)
        results = {"a": ResultSet("x")}

        BitextClient(session=session).execute(make_context(results))

        assert results["a"].get_polarity("Bitext") == Polarity.NEUTRAL

    def test_declared_encoding_is_honoured(self):
        body = '<?xml version="1.0" encoding="ISO-8859-1"?><RESULT><BLOCK><TEXT>caf\xe9</TEXT><GLOBAL_VALUE>-3</GLOBAL_VALUE></BLOCK></RESULT>'
        assert average_score(body.encode("latin-1")) == -3


class TestChatterboxClient:

    @pytest.mark.parametrize("value,expected", [
        (-0.26, Polarity.NEGATIVE),
        (-0.25, Polarity.NEUTRAL),
        (0.0, Polarity.NEUTRAL),
        (0.25, Polarity.NEUTRAL),
        (0.26, Polarity.POSITIVE),
    ])
    def test_thresholds(self, value, expected):
        assert chatterbox_polarity(value) == expected

    def test_request_and_mapping(self):
        session = Mock()
        session.post.return_value = make_response(json_data={"language": "fr", "value": -0.6, "sent": -1})
        results = {"a": ResultSet("Nul")}

        ChatterboxClient(session=session).execute(make_context(results, key="mashape", language="French"))

        assert results["a"].get_polarity("Chatterbox") == Polarity.NEGATIVE
        assert results["a"].get_score("Chatterbox") == -0.6
        kwargs = session.post.call_args.kwargs
        assert kwargs["headers"] == {"X-Mashape-Authorization": "mashape"}
        assert kwargs["data"] == {"lang": "fr", "text": "Nul"}

    def test_size_limit(self, recorder):
        session = Mock()
        results = {"a": ResultSet("x" * 301)}

        ChatterboxClient(session=session).execute(make_context(results, recorder))

        session.post.assert_not_called()
        assert recorder.statuses == ["Failed", "Success"]

    def test_cancel_after_first_document(self, corpus):
        session = Mock()
        session.post.return_value = make_response(json_data={"value": 0.9})
        observer = EventRecorder(cancel_after=1)

        summary = ChatterboxClient(session=session).execute(make_context(corpus, observer))

        assert session.post.call_count == 1
        assert observer.statuses == ["Processed", "Success"]
        assert summary.canceled

    def test_context_is_kept(self, corpus):
        session = Mock()
        session.post.return_value = make_response(json_data={"value": 0.9})
        client = ChatterboxClient(session=session)
        context = make_context(corpus)

        client.execute(context)

        assert client.context is context


class TestViralheatClient:

    def test_probability_and_mood(self):
        session = Mock()
        session.get.return_value = make_response(json_data={"text": "x", "prob": 0.83, "mood": "positive"})
        results = {"a": ResultSet("Nice")}

        ViralheatClient(session=session, url="http://vh").execute(make_context(results, key="vh-key"))

        assert results["a"].get_score("Viralheat") == 0.83
        assert results["a"].get_polarity("Viralheat") == "positive"
        session.get.assert_called_once()
        assert session.get.call_args.kwargs["params"] == {"api_key": "vh-key", "text": "Nice"}

    def test_limit_is_360(self, recorder):
        session = Mock()
        session.get.return_value = make_response(json_data={"prob": 0.5, "mood": "neutral"})
        results = {"a": ResultSet("x" * 360), "b": ResultSet("x" * 361)}

        ViralheatClient(session=session).execute(make_context(results, recorder))

        assert session.get.call_count == 1
        assert results["b"].get_polarity("Viralheat") == Polarity.FAILED

    def test_english_only(self):
        assert ViralheatClient().is_language_supported("English")
        assert not ViralheatClient().is_language_supported("French")


class TestSkyttleClient:

    @pytest.mark.parametrize("scores,expected", [
        ({"neg": 10.0, "pos": 20.0, "neu": 70.0}, (0.0, Polarity.NEUTRAL)),
        ({"neg": 60.0, "pos": 20.0, "neu": 20.0}, (-0.6, Polarity.NEGATIVE)),
        ({"neg": 10.0, "pos": 45.0, "neu": 45.0}, (0.45, Polarity.POSITIVE)),
        ({"neg": 25.0, "pos": 25.0, "neu": 50.0}, (0.0, Polarity.NEUTRAL)),
    ])
    def test_mapping(self, scores, expected):
        score, polarity = scores_to_verdict(scores)
        assert polarity == expected[1]
        assert score == pytest.approx(expected[0])

    def test_sends_source_text(self):
        session = Mock()
        session.post.return_value = make_response(json_data={
            "docs": [{"language": "en", "sentiment_scores": {"neg": 5.0, "pos": 80.0, "neu": 15.0}}]
        })
        results = {"a": ResultSet("Brilliant")}

        SkyttleClient(session=session).execute(make_context(results, language="German"))

        payload = session.post.call_args.kwargs["data"]
        assert payload["text"] == "Brilliant"
        assert payload["lang"] == "de"
        assert (payload["keywords"], payload["sentiment"], payload["annotate"]) == ("1", "1", "0")
        assert results["a"].get_score("Skyttle") == pytest.approx(0.8)

    def test_http_error_is_failed_event(self, recorder):
        session = Mock()
        session.post.return_value = make_response(status_code=403, text="forbidden")
        results = {"a": ResultSet("x")}

        SkyttleClient(session=session).execute(make_context(results, recorder))

        assert recorder.statuses == ["Failed", "Success"]
        assert results["a"].get_polarity("Skyttle") == Polarity.FAILED

    def test_empty_docs_is_failure(self, recorder):
        session = Mock()
        session.post.return_value = make_response(json_data={"docs": []})
        results = {"a": ResultSet("x")}

        SkyttleClient(session=session).execute(make_context(results, recorder))

        assert recorder.statuses == ["Failed", "Success"]
