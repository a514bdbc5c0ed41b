import sys
from pathlib import Path

import pytest

BACKEND = Path(__file__).resolve().parents[1]
backend_str = str(BACKEND)
if backend_str not in sys.path:
    sys.path.insert(0, backend_str)

from raillovable.engine.orchestrator import SessionOrchestrator  # noqa: E402
from raillovable.schemas.provider import ProviderConfig  # noqa: E402
from raillovable.store import InMemoryProjectStore  # noqa: E402

from helpers import RecordingPublisher  # noqa: E402


@pytest.fixture
def store():
    return InMemoryProjectStore()


@pytest.fixture
def provider_config():
    return ProviderConfig(provider="openai", model="gpt-4o", credentials={"openai": "sk-test"})


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def make_orchestrator(store, provider_config, publisher):
    """Build an orchestrator over the in-memory store with a given gateway."""
    def _make(gateway, config=None, store_override=None):
        return SessionOrchestrator(
            store=store_override or store,
            gateway=gateway,
            config_source=lambda: config or provider_config,
            publisher=publisher,
        )

    return _make
