"""
Server-Sent Events (SSE) streaming response generation
"""

import json
import logging
import uuid
from datetime import datetime
from typing import Dict, Any, Optional, AsyncIterator

from .exceptions import UpstreamFailure
from .inference import Answer
from .models import (
    ChatCompletionChunk,
    ChatCompletionResponse,
    Choice,
    ChoiceMessage,
    StreamChoice,
)

logger = logging.getLogger(__name__)

DONE_FRAME = "data: [DONE]\n\n"


def new_chat_id() -> str:
    return f"chatcmpl-{uuid.uuid4().hex}"


def _now() -> int:
    return int(datetime.now().timestamp())


def format_sse(payload: Dict[str, Any]) -> str:
    """Frame one JSON payload as an SSE data event"""
    return f"data: {json.dumps(payload)}\n\n"


def create_chunk(
    chat_id: str,
    model: str,
    delta: Dict[str, Any],
    finish_reason: Optional[str] = None
) -> Dict[str, Any]:
    """Build a single chunk in OpenAI format"""
    chunk = ChatCompletionChunk(
        id=chat_id,
        created=_now(),
        model=model,
        choices=[StreamChoice(delta=delta, finish_reason=finish_reason)],
    )
    return chunk.model_dump()


def create_sse_chunk(
    chat_id: str,
    model: str,
    delta: Dict[str, Any],
    finish_reason: Optional[str] = None
) -> str:
    """Generate a single SSE chunk in OpenAI format"""
    return format_sse(create_chunk(chat_id, model, delta, finish_reason))


async def stream_answer(answer: Answer, model: str) -> AsyncIterator[str]:
    """Stream an answer as it is generated, one chunk per fragment"""
    chat_id = new_chat_id()

    try:
        async for fragment in answer:
            yield create_sse_chunk(chat_id, model, {"content": fragment})
    except UpstreamFailure as e:
        logger.error(f"Generation failed mid-stream: {e}")
        yield format_sse({"error": e.message})
        return
    finally:
        # also reached when the client disconnects
        await answer.aclose()

    yield create_sse_chunk(chat_id, model, {"content": ""}, "stop")
    yield DONE_FRAME


def build_completion_response(content: str, model: str) -> Dict[str, Any]:
    """Build a full non-streaming response"""
    response = ChatCompletionResponse(
        id=new_chat_id(),
        created=_now(),
        model=model,
        choices=[Choice(message=ChoiceMessage(content=content))],
    )
    return response.model_dump()
