"""
Assistant API client — thread, run and message calls plus audio transcription.

Every thread/run/message call needs the OpenAI-Beta header; the transcription
endpoint only takes the bearer token. Non-2xx responses raise UpstreamError
with the upstream status and body so the relay can pass them straight back.
"""

import logging
from typing import IO, Any, List, Tuple

import httpx

from config import RelayConfig
from exceptions import UpstreamError
from models import RunStatus

logger = logging.getLogger(__name__)

ASSISTANTS_BETA_HEADER = {"OpenAI-Beta": "assistants=v2"}


def _error_from_response(response: httpx.Response) -> UpstreamError:
    try:
        return UpstreamError(response.status_code, response.json())
    except ValueError:
        return UpstreamError(response.status_code, response.text, media_type="text/plain")


class AssistantClient:
    def __init__(self, http: httpx.AsyncClient, config: RelayConfig):
        self._http = http
        self._config = config

    def _auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self._config.openai_api_key}"}

    def _assistant_headers(self) -> dict:
        return {**self._auth_headers(), **ASSISTANTS_BETA_HEADER}

    async def _request_json(self, method: str, path: str, **kwargs) -> dict:
        response = await self._http.request(
            method,
            f"{self._config.base_url}{path}",
            headers=self._assistant_headers(),
            **kwargs,
        )
        if not response.is_success:
            error = _error_from_response(response)
            logger.error("%s %s failed (%s): %s", method, path, error.status_code, error.body)
            raise error
        return response.json()

    async def create_thread(self, history: List[dict]) -> str:
        data = await self._request_json("POST", "/threads", json={"messages": history})
        return data["id"]

    async def create_run(self, thread_id: str, assistant_id: str) -> Tuple[str, RunStatus]:
        data = await self._request_json(
            "POST",
            f"/threads/{thread_id}/runs",
            json={"assistant_id": assistant_id},
        )
        return data["id"], RunStatus.parse(data.get("status"))

    async def get_run_status(self, thread_id: str, run_id: str) -> RunStatus:
        data = await self._request_json("GET", f"/threads/{thread_id}/runs/{run_id}")
        status = RunStatus.parse(data.get("status"))
        if status is RunStatus.UNKNOWN:
            logger.warning("Run %s reported unrecognised status %r", run_id, data.get("status"))
        return status

    async def list_messages(self, thread_id: str) -> List[Any]:
        data = await self._request_json("GET", f"/threads/{thread_id}/messages")
        return data.get("data") or []

    async def transcribe(self, file: IO[bytes], filename: str, model: str) -> str:
        response = await self._http.post(
            f"{self._config.base_url}/audio/transcriptions",
            headers=self._auth_headers(),
            files={"file": (filename, file)},
            data={"model": model},
        )
        if not response.is_success:
            logger.error("Transcription failed (%s): %s", response.status_code, response.text)
            raise UpstreamError(response.status_code, response.text, media_type="text/plain")
        return response.json().get("text", "")
