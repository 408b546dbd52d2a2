"""
FastAPI application and endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import ChatRelayError, EmptyPrompt, ServerStopping, UpstreamRejected
from .inference import InferenceCapability
from .lifecycle import ServerHandle
from .message_utils import parse_completion_request
from .models import DEFAULT_MODEL, ModelCard
from .prompt_format import format_prompt
from .streaming import stream_answer, build_completion_response

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ChatRelayError)
    async def chat_relay_error_handler(request: Request, e: ChatRelayError):
        if e.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {e.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {e.message}")
        return error_response(e.status_code, e.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, e: StarletteHTTPException):
        # unknown paths and wrong methods on known paths look the same
        if e.status_code in (404, 405):
            return error_response(404, "Endpoint not found")
        return error_response(e.status_code, str(e.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, e: Exception):
        logger.exception(f"Error: {e}")
        return error_response(500, str(e))


def create_app(
    capability: InferenceCapability,
    handle: Optional[ServerHandle] = None,
    default_model: str = DEFAULT_MODEL,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        capability: Inference backend that lists models and generates text
        handle: Lifecycle handle whose stop hook /kill fires
        default_model: Model used when a request names none
    """
    handle = handle or ServerHandle()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        handle.mark_listening()
        logger.info("Server is listening")
        try:
            yield
        finally:
            handle.mark_stopped()
            logger.info("Server has been shut down.")

    app = FastAPI(title="chatrelay", version="1.0.0", lifespan=lifespan)
    app.state.server_handle = handle
    install_error_handlers(app)

    @app.post("/kill")
    async def kill():
        """Acknowledge, then stop accepting connections"""
        if not handle.request_stop():
            raise ServerStopping("Server is already shutting down")

        logger.info("Shutdown requested")
        return JSONResponse(
            content={"message": "Server shutting down"},
            background=BackgroundTask(handle.stop),
        )

    @app.get("/v1/models")
    async def list_models():
        cards = [
            ModelCard(id=str(index), name=name).model_dump()
            for index, name in enumerate(capability.list_models())
        ]
        return cards

    @app.post("/v1/chat/completions")
    async def chat_completions(request: Request):
        """OpenAI-compatible chat completion endpoint"""
        chat_request = parse_completion_request(await request.body(), default_model)
        model = chat_request.model
        logger.debug(f"Request body: {chat_request.model_dump_json()}")

        prompt = format_prompt(chat_request.messages, model)
        if not prompt:
            raise EmptyPrompt("Missing 'content' in the last message")

        logger.debug(f"Will send prompt to model {model}: {prompt!r}")

        try:
            answer = capability.ask(prompt, model)
        except ChatRelayError:
            raise
        except Exception as e:
            raise UpstreamRejected(str(e))

        if chat_request.stream:
            return StreamingResponse(
                stream_answer(answer, model),
                media_type="text/event-stream",
                headers=SSE_HEADERS,
            )

        result = await answer.text()
        return build_completion_response(result, model)

    return app
