"""
Shared fixtures.

``recorder`` is an httpx MockTransport that stores every request it sees
and answers with a configurable JSON body, so no test touches the network.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mantle_client import MantleClient


class RequestRecorder:
    """Mock transport that records requests and replays a canned response."""

    def __init__(self):
        self.requests = []
        self.response_body = {"ok": True}
        self.status_code = 200
        self.raw_body = None
        self.raw_content = None
        self.error = None
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw_content is not None:
            return httpx.Response(self.status_code, content=self.raw_content)
        if self.raw_body is not None:
            return httpx.Response(self.status_code, text=self.raw_body)
        return httpx.Response(self.status_code, json=self.response_body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    return RequestRecorder()


@pytest.fixture
def client(recorder):
    """Client authenticated with a server API key."""
    return MantleClient(
        app_id="test_app_id",
        api_key="test_api_key",
        transport=recorder.transport,
    )
