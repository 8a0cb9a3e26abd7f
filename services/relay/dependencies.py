import httpx
from fastapi import Depends, Request

from assistant_client import AssistantClient
from config import RelayConfig
from exceptions import NotConfiguredException


def get_config(request: Request) -> RelayConfig:
    return request.app.state.config


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_assistant_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    config: RelayConfig = Depends(get_config),
) -> AssistantClient:
    return AssistantClient(http, config)


def require_assistant_id(config: RelayConfig = Depends(get_config)) -> str:
    # runs before body validation, so nothing reaches the API without an assistant
    if not config.assistant_id:
        raise NotConfiguredException()
    return config.assistant_id
