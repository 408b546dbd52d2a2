"""
llama.cpp-backed inference capability
"""

import logging
from typing import List, Optional, Sequence

from llama_cpp_agent import LlamaCppAgent
from llama_cpp_agent.providers import LlamaCppServerProvider

from .exceptions import UpstreamRejected
from .inference import Answer, ask_in_thread

logger = logging.getLogger(__name__)


class LlamaCppCapability:
    """
    Serves every catalogue identifier from one llama.cpp server.

    Prompts arrive fully rendered, so the agent is used for raw text
    completion only; the identifier just selects the prompt template.
    """

    def __init__(self, server_url: str, models: Sequence[str], agent: Optional[LlamaCppAgent] = None):
        logger.info(f"llama.cpp server: {server_url}")

        self.provider = LlamaCppServerProvider(server_address=server_url)
        self.agent = agent or LlamaCppAgent(self.provider, debug_output=False)
        self.models = list(models)

        logger.info(f"Serving models: {self.models}")

    def list_models(self) -> List[str]:
        return list(self.models)

    def ask(self, prompt: str, model: str) -> Answer:
        if model not in self.models:
            raise UpstreamRejected(f"Model '{model}' is not supported")

        settings = self.provider.get_provider_default_settings()
        settings.stream = True

        def generate(emit):
            return self.agent.get_text_response(
                prompt,
                llm_sampling_settings=settings,
                streaming_callback=lambda chunk: emit(chunk.text),
            )

        return ask_in_thread(generate)
