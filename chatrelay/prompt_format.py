"""
Model-family prompt templates

Each family renders the ordered conversation into the single prompt string its
tokenizer expects. The family is picked from the model identifier by an ordered
table of substring rules; the first matching rule wins.
"""

from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple

from .models import Message


class FormatFamily(str, Enum):
    LLAMA3 = "llama3"
    LLAMA2 = "llama2"
    MISTRAL = "mistral"
    CLAUDE = "claude"
    GROK = "grok"
    SIMPLE_CHAT = "simple_chat"
    # Same grammar as SIMPLE_CHAT for backends without a system role (Gemini)
    SIMPLE_CHAT_NO_SYSTEM = "simple_chat_no_system"
    DEFAULT = "default"


# Evaluated top to bottom against the lowercased model identifier
FAMILY_RULES: List[Tuple[Tuple[str, ...], FormatFamily]] = [
    (("llama3.1", "llama-4"), FormatFamily.LLAMA3),
    (("llama3", "llama-3.3"), FormatFamily.LLAMA3),
    (("llama2", "codellama"), FormatFamily.LLAMA2),
    (("mistral", "nemo", "codestral"), FormatFamily.MISTRAL),
    (("anthropic", "claude"), FormatFamily.CLAUDE),
    (("grok",), FormatFamily.GROK),
    (("deepseek",), FormatFamily.LLAMA2),
    (("openai",), FormatFamily.SIMPLE_CHAT),
    (("google", "gemini"), FormatFamily.SIMPLE_CHAT_NO_SYSTEM),
]


def classify_model(model_id: str) -> FormatFamily:
    """Return the prompt family for a model identifier (case-insensitive)"""
    model_lower = model_id.lower()
    for needles, family in FAMILY_RULES:
        if any(needle in model_lower for needle in needles):
            return family
    return FormatFamily.DEFAULT


def format_llama3(messages: Sequence[Message]) -> str:
    prompt = "<|begin_of_text|>"
    for msg in messages:
        role = msg.role if msg.role in ("assistant", "system") else "user"
        prompt += f"<|start_header_id|>{role}<|end_header_id|>\n\n{msg.content}<|eot_id|>"
    prompt += "<|start_header_id|>assistant<|end_header_id|>\n\n"
    return prompt


def format_llama2(messages: Sequence[Message]) -> str:
    prompt = "<s>"
    remaining = list(messages)

    if remaining and remaining[0].role == "system":
        prompt += f"[INST] <<SYS>>\n{remaining[0].content}\n<</SYS>>\n\n"
        remaining = remaining[1:]

    for msg in remaining:
        if msg.role == "user":
            prompt += f"[INST] {msg.content} [/INST]"
        elif msg.role == "assistant":
            # close the turn and open the next sequence
            prompt += f" {msg.content} </s><s>"

    if prompt.endswith("<s>"):
        prompt = prompt[:-len("<s>")]
    return prompt


def format_mistral(messages: Sequence[Message]) -> str:
    prompt = "<s>"
    for msg in messages:
        if msg.role == "user":
            prompt += f"[INST] {msg.content} [/INST]"
        elif msg.role == "assistant":
            prompt += f"{msg.content}</s>"
    return prompt


def format_claude(messages: Sequence[Message]) -> str:
    prompt = ""
    for msg in messages:
        if msg.role == "system":
            prompt += f"{msg.content}\n\n"
        elif msg.role == "user":
            prompt += f"User: {msg.content}\n\n"
        elif msg.role == "assistant":
            prompt += f"Assistant: {msg.content}\n\n"
    return prompt + "Assistant:"


def format_grok(messages: Sequence[Message]) -> str:
    labels = {
        "system": "System Instruction",
        "user": "User",
        "assistant": "Assistant",
    }
    prompt = ""
    for msg in messages:
        label = labels.get(msg.role)
        if label:
            prompt += f"{label}:\n{msg.content}\n\n"
    return prompt + "Assistant:\n"


def format_simple_chat(messages: Sequence[Message], system_supported: bool = True) -> str:
    lines = []
    for msg in messages:
        if not system_supported and msg.role == "system":
            lines.append(f"(System Instruction: {msg.content})")
        else:
            lines.append(f"{msg.role}: {msg.content}")
    return "\n\n".join(lines)


def format_default(messages: Sequence[Message]) -> str:
    return "\n\n".join(f"<{msg.role}>: {msg.content}" for msg in messages)


FORMATTERS: Dict[FormatFamily, Callable[[Sequence[Message]], str]] = {
    FormatFamily.LLAMA3: format_llama3,
    FormatFamily.LLAMA2: format_llama2,
    FormatFamily.MISTRAL: format_mistral,
    FormatFamily.CLAUDE: format_claude,
    FormatFamily.GROK: format_grok,
    FormatFamily.SIMPLE_CHAT: format_simple_chat,
    FormatFamily.SIMPLE_CHAT_NO_SYSTEM: lambda messages: format_simple_chat(messages, system_supported=False),
    FormatFamily.DEFAULT: format_default,
}


def format_prompt(messages: Sequence[Message], model_id: str) -> str:
    """
    Render messages into the prompt string expected by the model family.

    Args:
        messages: Conversation in order, at least one message
        model_id: Model identifier used to pick the template
    """
    return FORMATTERS[classify_model(model_id)](messages)
