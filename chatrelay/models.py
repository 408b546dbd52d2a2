"""
Data models for OpenAI-compatible API
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict, Any

DEFAULT_MODEL = "OpenAI_GPT4o-mini"


class Message(BaseModel):
    """OpenAI-compatible message model"""
    role: str
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class ChatCompletionRequest(BaseModel):
    """OpenAI-compatible chat completion request"""
    model: Optional[str] = None
    messages: List[Message] = Field(min_length=1)
    stream: bool = False

    @field_validator("stream", mode="before")
    @classmethod
    def _only_literal_true(cls, value):
        # anything but JSON true means a batch response
        return value is True


class ChoiceMessage(BaseModel):
    role: str = "assistant"
    content: str


class Choice(BaseModel):
    index: int = 0
    message: ChoiceMessage
    finish_reason: Optional[str] = "stop"


class ChatCompletionResponse(BaseModel):
    """OpenAI-compatible non-streaming response"""
    id: str
    object: str = "chat.completion"
    created: int
    model: str
    choices: List[Choice]
    usage: Dict[str, Any] = Field(default_factory=dict)


class StreamChoice(BaseModel):
    index: int = 0
    delta: Dict[str, Any]
    finish_reason: Optional[str] = None


class ChatCompletionChunk(BaseModel):
    """One SSE event of a streamed response"""
    id: str
    object: str = "chat.completion.chunk"
    created: int
    model: str
    choices: List[StreamChoice]


class ModelCard(BaseModel):
    id: str
    name: str
