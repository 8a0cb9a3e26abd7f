"""
Relay Service
Handles: browser chat via the Assistants API (thread → run → poll → messages),
audio transcription.
Port: 3000

- Config is read once at startup into a frozen RelayConfig
- Upstream errors come back with the upstream status and body untouched
- No retries; every failure surfaces on the same request
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile

from assistant_client import AssistantClient
from config import RelayConfig, load_config
from dependencies import get_assistant_client, get_config, require_assistant_id
from exceptions import (
    LocalFailureException,
    MissingAudioException,
    RelayException,
    RunTimeoutError,
    RunTimeoutException,
    UpstreamError,
)
from models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    RunStatus,
    TranscribeResponse,
)
from poller import wait_for_run
from sanitizer import extract_reply_text, sanitize_reply
from uploads import stored_upload

logger = logging.getLogger("relay")


# ── App ───────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=logging.INFO, format="[relay] %(levelname)s %(name)s: %(message)s")
    config = load_config()
    app.state.config = config
    async with httpx.AsyncClient(timeout=httpx.Timeout(config.timeout_seconds)) as http_client:
        app.state.http_client = http_client
        logger.info("Started on port %s (assistant %s)", config.port, config.assistant_id or "unset")
        yield


app = FastAPI(title="Relay Service", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RelayException)
async def relay_error(request: Request, exc: RelayException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(UpstreamError)
async def upstream_error(request: Request, exc: UpstreamError):
    if exc.media_type == "application/json":
        return JSONResponse(status_code=exc.status_code, content=exc.body)
    return Response(content=exc.body, status_code=exc.status_code, media_type=exc.media_type)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=500, content={"error": f"Invalid request body: {exc.errors()}"})


# ── Helpers ───────────────────────────────────────────────────────────────────

async def run_chat(
    assistant: AssistantClient,
    config: RelayConfig,
    assistant_id: str,
    history: list,
) -> str:
    thread_id = await assistant.create_thread(history)
    logger.info("Thread created: %s", thread_id)

    run_id, status = await assistant.create_run(thread_id, assistant_id)
    logger.info("Run started: %s (%s)", run_id, status.value)

    status, checks = await wait_for_run(
        assistant,
        thread_id,
        run_id,
        status,
        interval=config.poll_interval_seconds,
        max_attempts=config.poll_max_attempts,
    )
    if status is not RunStatus.COMPLETED:
        # non-completed terminal runs still fall through to the message fetch
        logger.warning("Run %s ended as %s after %d checks", run_id, status.value, checks)

    messages = await assistant.list_messages(thread_id)
    reply = sanitize_reply(extract_reply_text(messages))
    logger.info("Assistant reply (cleaned, %d chars)", len(reply))
    return reply


# ── Endpoints ─────────────────────────────────────────────────────────────────

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@app.post("/api/chat", response_model=ChatResponse, responses={**ERROR_RESPONSES, 504: {"model": ErrorResponse}})
async def chat(
    payload: Optional[ChatRequest] = None,
    assistant_id: str = Depends(require_assistant_id),
    config: RelayConfig = Depends(get_config),
    assistant: AssistantClient = Depends(get_assistant_client),
):
    payload = payload or ChatRequest()
    logger.info("Sending conversation to assistant %s", assistant_id)
    try:
        reply = await run_chat(assistant, config, assistant_id, payload.forwarded_history())
    except UpstreamError:
        raise
    except RunTimeoutError as e:
        logger.error("%s", e)
        raise RunTimeoutException(str(e))
    except Exception as e:
        logger.exception("Server error (assistant run)")
        raise LocalFailureException(str(e))
    return {"reply": reply}


@app.post("/api/transcribe", response_model=TranscribeResponse, responses=ERROR_RESPONSES)
async def transcribe(
    request: Request,
    config: RelayConfig = Depends(get_config),
    assistant: AssistantClient = Depends(get_assistant_client),
):
    async with request.form() as form:
        # a plain text "audio" field counts as missing
        audio = form.get("audio")
        if not isinstance(audio, UploadFile):
            raise MissingAudioException()

        logger.info("Sending audio for transcription (%s)", audio.filename)
        try:
            async with stored_upload(audio, config.upload_dir) as path:
                with open(path, "rb") as fh:
                    text = await assistant.transcribe(fh, audio.filename or "audio", config.transcribe_model)
        except UpstreamError as e:
            return JSONResponse(status_code=e.status_code, content={"error": e.body})
        except Exception as e:
            logger.exception("Server error (transcribe)")
            raise LocalFailureException(str(e))
    return {"text": text}


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": "relay"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=load_config().port, reload=True)
