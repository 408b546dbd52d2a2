"""
Runtime configuration read from the environment
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from .exceptions import ConfigurationError, InvalidPort
from .models import DEFAULT_MODEL

# One identifier per prompt family, baseline first
DEFAULT_MODELS = [
    DEFAULT_MODEL,
    "OpenAI_GPT4o",
    "Anthropic_Claude_Haiku",
    "Anthropic_Claude_Sonnet",
    "MetaAI_Llama3.1_70B",
    "MetaAI_Llama-3.3_70B",
    "MetaAI_Llama-4_Scout",
    "MetaAI_Llama2_70B",
    "MistralAI_Nemo",
    "MistralAI_Codestral",
    "Google_Gemini_Flash",
    "xAI_Grok-2",
    "DeepSeek_R1",
]


@dataclass
class Settings:
    port: int = 8000
    host: str = "0.0.0.0"
    server_url: str = "http://localhost:8080"
    default_model: str = DEFAULT_MODEL
    models: List[str] = field(default_factory=lambda: list(DEFAULT_MODELS))
    log_level: str = "INFO"


def parse_port(value: str) -> int:
    digits = value.strip()
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidPort(f"The port is invalid: {value!r}. Please set a valid number.")
    port = int(digits)
    if not 0 < port < 65536:
        raise InvalidPort(f"The port is out of range: {port}")
    return port


def parse_models(value: str) -> List[str]:
    models = []
    for name in value.split(","):
        name = name.strip()
        if name and name not in models:
            models.append(name)
    if not models:
        raise ConfigurationError("CHATRELAY_MODELS lists no models")
    return models


def load_settings() -> Settings:
    """Read settings from the environment (and a .env file if present)"""
    load_dotenv()

    settings = Settings(
        port=parse_port(os.getenv("CHATRELAY_PORT", "8000")),
        host=os.getenv("CHATRELAY_HOST", "0.0.0.0"),
        server_url=os.getenv("LLAMA_CPP_SERVER_URL", "http://localhost:8080"),
        default_model=os.getenv("CHATRELAY_DEFAULT_MODEL", DEFAULT_MODEL),
        log_level=os.getenv("CHATRELAY_LOG_LEVEL", "INFO").upper(),
    )
    models = os.getenv("CHATRELAY_MODELS")
    if models is not None:
        settings.models = parse_models(models)
    return settings
