import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from assistant import CareerAssistant
from fakes import FakeClock, FakeLLMClient, FakeSleep
from result_cache import ResultCache


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return FakeSleep()


@pytest.fixture
def make_live(clock, sleep):
    def _make(responses=None, error=None):
        client = FakeLLMClient(responses=responses, error=error)
        assistant = CareerAssistant(
            api_key="test-key",
            provider="gemini",
            model_name="gemini-test",
            client=client,
            cache=ResultCache(clock=clock),
            sleep=sleep,
        )
        return assistant, client

    return _make


@pytest.fixture
def demo(clock, sleep):
    client = FakeLLMClient(error=AssertionError("demo mode must not call the model"))
    assistant = CareerAssistant(
        api_key="",
        provider="gemini",
        client=client,
        cache=ResultCache(clock=clock),
        sleep=sleep,
    )
    return assistant, client
