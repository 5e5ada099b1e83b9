import asyncio
import os
import time

import pytest

# The API module wires its adapters at import time; keep it off hardware and network
os.environ["CAMERA_ADAPTER"] = "mock"
os.environ["CLASSIFIER_ADAPTER"] = "mock"
os.environ["TRANSLATOR_ADAPTER"] = "mock"
os.environ["POLL_FPS"] = "200"

from pictionary.services.session_store import SessionStore


@pytest.fixture
def status():
    return SessionStore()


@pytest.fixture
def eventually():
    """Await until cond() is true, failing after `timeout` seconds."""
    async def _eventually(cond, timeout: float = 3.0):
        deadline = time.monotonic() + timeout
        while not cond():
            if time.monotonic() > deadline:
                pytest.fail("condition not reached in time")
            await asyncio.sleep(0.005)
    return _eventually
