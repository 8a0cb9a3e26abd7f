"""Shared fixtures: a fake Assistants API behind httpx.MockTransport."""

import json

import httpx
import pytest

from config import RelayConfig

BASE_URL = "https://api.test/v1"


class FakeAssistantAPI:
    """Answers the thread/run/message/transcription calls and records every request."""

    def __init__(self):
        self.requests = []
        self.overrides = {}
        self.initial_status = "queued"
        self.run_statuses = ["completed"]
        self.messages = [
            {"id": "msg_2", "role": "assistant", "content": [
                {"type": "text", "text": {"value": "Hello there [4:0†source] friend", "annotations": []}},
            ]},
            {"id": "msg_1", "role": "user", "content": [
                {"type": "text", "text": {"value": "hi", "annotations": []}},
            ]},
        ]
        self.transcript = "transcribed words"
        self.on_transcribe = None

    def override(self, method: str, path: str, response: httpx.Response):
        self.overrides[(method, path)] = response

    def calls(self, method: str, path: str) -> list:
        return [r for r in self.requests if r.method == method and r.url.path == "/v1" + path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/v1"):]
        override = self.overrides.get((request.method, path))
        if override is not None:
            return override

        if request.method == "POST" and path == "/threads":
            return httpx.Response(200, json={"id": "thread_1", "object": "thread"})
        if request.method == "POST" and path == "/threads/thread_1/runs":
            return httpx.Response(200, json={"id": "run_1", "status": self.initial_status})
        if request.method == "GET" and path == "/threads/thread_1/runs/run_1":
            status = self.run_statuses.pop(0) if len(self.run_statuses) > 1 else self.run_statuses[0]
            return httpx.Response(200, json={"id": "run_1", "status": status})
        if request.method == "GET" and path == "/threads/thread_1/messages":
            return httpx.Response(200, json={"object": "list", "data": self.messages})
        if request.method == "POST" and path == "/audio/transcriptions":
            if self.on_transcribe is not None:
                self.on_transcribe(request)
            return httpx.Response(200, json={"text": self.transcript})
        return httpx.Response(404, json={"error": {"message": f"no route {request.method} {path}"}})


def request_json(request: httpx.Request):
    return json.loads(request.content)


@pytest.fixture
def fake_api():
    return FakeAssistantAPI()


@pytest.fixture
def http_client(fake_api):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def relay_config(tmp_path):
    return RelayConfig(
        openai_api_key="sk-test",
        assistant_id="asst_123",
        base_url=BASE_URL,
        poll_interval_seconds=0,
        upload_dir=str(tmp_path / "uploads"),
    )
