import sys
from pathlib import Path
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chatrelay.api import create_app  # noqa: E402
from chatrelay.exceptions import UpstreamRejected  # noqa: E402
from chatrelay.inference import ask_in_thread  # noqa: E402
from chatrelay.lifecycle import ServerHandle  # noqa: E402


class FakeCapability:
    """Inference backend that replays canned fragments on a worker thread"""

    def __init__(self, models=None, fragments=("Hel", "lo"), result=None, error: Optional[Exception] = None):
        self.models = list(models or ["OpenAI_GPT4o-mini", "MetaAI_Llama3.1_70B", "MistralAI_Nemo"])
        self.fragments = list(fragments)
        self.result = result
        self.error = error
        self.calls: List[tuple] = []

    def list_models(self):
        return list(self.models)

    def ask(self, prompt, model):
        if model not in self.models:
            raise UpstreamRejected(f"Model '{model}' is not supported")
        self.calls.append((prompt, model))

        def generate(emit):
            for fragment in self.fragments:
                emit(fragment)
            if self.error is not None:
                raise self.error
            return self.result

        return ask_in_thread(generate)


@pytest.fixture
def capability():
    return FakeCapability()


@pytest.fixture
def stop_calls():
    return []


@pytest.fixture
def client(capability, stop_calls):
    handle = ServerHandle(stop_hook=lambda: stop_calls.append(True))
    app = create_app(capability, handle)
    with TestClient(app) as test_client:
        yield test_client
