"""
chatrelay: OpenAI-compatible chat gateway

Renders chat messages into model-family prompt templates and relays the
generated text back as OpenAI-style responses or SSE streams.
"""

__version__ = "1.0.0"
__author__ = "chatrelay Contributors"

from .exceptions import ChatRelayError
from .models import Message, ChatCompletionRequest
from .prompt_format import FormatFamily, classify_model, format_prompt

__all__ = [
    "ChatRelayError",
    "Message",
    "ChatCompletionRequest",
    "FormatFamily",
    "classify_model",
    "format_prompt",
    "__version__",
]
