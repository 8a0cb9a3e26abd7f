from typing import Any

from fastapi import HTTPException


class RelayException(HTTPException):
    """Relay-side failure, rendered as {"error": detail}."""


class NotConfiguredException(RelayException):
    def __init__(self, detail: str = "ASSISTANT_ID not configured"):
        super().__init__(status_code=500, detail=detail)


class MissingAudioException(RelayException):
    def __init__(self, detail: str = "no audio file"):
        super().__init__(status_code=400, detail=detail)


class RunTimeoutException(RelayException):
    def __init__(self, detail: str):
        super().__init__(status_code=504, detail=f"Run did not finish: {detail}")


class LocalFailureException(RelayException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)


class UpstreamError(Exception):
    """A call to the assistant API came back with a non-2xx status.

    ``body`` is the decoded JSON payload when the upstream sent JSON, otherwise
    the raw response text. ``media_type`` is kept so the body can be relayed
    back unchanged.
    """

    def __init__(self, status_code: int, body: Any, media_type: str = "application/json"):
        super().__init__(f"Upstream returned {status_code}")
        self.status_code = status_code
        self.body = body
        self.media_type = media_type


class RunTimeoutError(Exception):
    def __init__(self, run_id: str, attempts: int):
        super().__init__(f"run {run_id} still pending after {attempts} status checks")
        self.run_id = run_id
        self.attempts = attempts
