"""Shared fixtures for sentimeter tests."""

from unittest.mock import Mock

import pytest

from sentimeter.core.context import AnalysisExecutionContext
from sentimeter.core.models import ResultSet


def make_response(status_code=200, text="", json_data=None, content=None):
    """A stand-in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.content = content if content is not None else text.encode("utf-8")
    response.json.return_value = json_data
    return response


class EventRecorder:
    """Progress observer that keeps every event and can cancel after N of them."""

    def __init__(self, cancel_after=None):
        self.events = []
        self.cancel_after = cancel_after

    def __call__(self, provider, event):
        self.events.append((provider, event))
        return self.cancel_after is not None and len(self.events) >= self.cancel_after

    @property
    def statuses(self):
        return [event.status.value for _, event in self.events]


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def corpus():
    return {
        "a": ResultSet("I love it"),
        "b": ResultSet("I hate it"),
        "c": ResultSet("It is a box"),
    }


def make_context(results, observer=None, **kwargs):
    kwargs.setdefault("key", "key")
    return AnalysisExecutionContext(results, on_progress=observer, **kwargs)
