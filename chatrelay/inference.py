"""
Inference capability interface and the lazy answer stream it returns
"""

import asyncio
import logging
import threading
from typing import Callable, List, Optional, Protocol

from .exceptions import UpstreamFailure

logger = logging.getLogger(__name__)

_FRAGMENT = "fragment"
_DONE = "done"
_FAILED = "failed"


class AnswerCancelled(Exception):
    """Raised inside the producer once the consumer has closed the answer"""


class Answer:
    """
    Lazy sequence of text fragments produced by one inference call.

    Iterating yields fragments as they arrive. Iteration stops when the
    producer completes and raises UpstreamFailure when it fails. Producers may
    run on another thread; emit/complete/fail hand events to the event loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._events: asyncio.Queue = asyncio.Queue()
        self._fragments: List[str] = []
        self._result: Optional[str] = None
        self._error: Optional[UpstreamFailure] = None
        self._finished = False
        self._cancelled = threading.Event()

    # Producer side

    def emit(self, text: str) -> None:
        if self._cancelled.is_set():
            raise AnswerCancelled()
        if text:
            self._put(_FRAGMENT, text)

    def complete(self, result: Optional[str] = None) -> None:
        self._put(_DONE, result)

    def fail(self, error: BaseException) -> None:
        self._put(_FAILED, error)

    def _put(self, kind: str, value) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._events.put_nowait, (kind, value))

    # Consumer side

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        if self._finished:
            if self._error is not None:
                raise self._error
            raise StopAsyncIteration

        kind, value = await self._events.get()
        if kind == _FRAGMENT:
            self._fragments.append(value)
            return value

        self._finished = True
        if kind == _DONE:
            self._result = value if value is not None else "".join(self._fragments)
            raise StopAsyncIteration

        self._error = UpstreamFailure(str(value) or type(value).__name__)
        raise self._error from value

    async def text(self) -> str:
        """Wait for the whole answer and return the final text"""
        async for _ in self:
            pass
        return self._result

    async def aclose(self) -> None:
        """Stop consuming; the producer is aborted at its next fragment"""
        if not self._finished:
            self._cancelled.set()


class InferenceCapability(Protocol):
    def list_models(self) -> List[str]:
        ...

    def ask(self, prompt: str, model: str) -> Answer:
        """Start generating; raise UpstreamRejected for an unsupported model"""
        ...


def ask_in_thread(generate: Callable[[Callable[[str], None]], Optional[str]]) -> Answer:
    """
    Run a blocking, callback-style generator in the default executor.

    Args:
        generate: Called with an emit(text) callback for each fragment; returns
            the final text, or None to use the concatenated fragments
    """
    loop = asyncio.get_running_loop()
    answer = Answer(loop)

    def run() -> None:
        try:
            result = generate(answer.emit)
        except AnswerCancelled:
            logger.debug("Generation abandoned by client")
        except Exception as e:
            logger.debug(f"Generation failed: {e}")
            answer.fail(e)
        else:
            answer.complete(result)

    loop.run_in_executor(None, run)
    return answer
