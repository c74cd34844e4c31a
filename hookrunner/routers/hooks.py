"""Push webhook route: every method on every path is dispatched."""

import asyncio
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from starlette.requests import ClientDisconnect

from hookrunner.dependencies import get_command_runner, get_config_store
from hookrunner.errors import RequestParseError, RequestReadError
from hookrunner.services.command_runner import CommandRunner
from hookrunner.services.config_store import ConfigStore
from hookrunner.services.dispatcher import decode_payload, dispatch

logger = structlog.get_logger()

router = APIRouter(tags=["hooks"])

HOOK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

Store = Annotated[ConfigStore, Depends(get_config_store)]
Runner = Annotated[CommandRunner, Depends(get_command_runner)]


async def read_body(request: Request) -> bytes:
    """Read the full request body.

    Raises:
        RequestReadError: If the client disconnects before the body arrives.
    """
    try:
        return await request.body()
    except ClientDisconnect as exc:
        raise RequestReadError("client disconnected while sending body") from exc


@router.api_route("/", methods=HOOK_METHODS, include_in_schema=False)
@router.api_route("/{path:path}", methods=HOOK_METHODS, include_in_schema=False)
async def push_hook(request: Request, store: Store, runner: Runner) -> Response:
    """Receive a push webhook and run the configured commands.

    Dispatch runs in a worker thread and the response is sent only after
    every matching command has exited. Read and decode failures are logged
    and answered with 400; nothing is executed for them.
    """
    try:
        body = await read_body(request)
    except RequestReadError as exc:
        logger.error("request_read_failed", path=request.url.path, error=str(exc))
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        payload = decode_payload(body)
    except RequestParseError as exc:
        logger.error("request_parse_failed", path=request.url.path, error=str(exc))
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    await asyncio.to_thread(dispatch, payload, store.current, runner)
    return Response(status_code=status.HTTP_200_OK)
