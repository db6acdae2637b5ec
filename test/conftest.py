from __future__ import annotations

from pathlib import Path
from typing import Iterable

import httpx
import pytest
from dotenv import load_dotenv

# Load dotenv files early so settings and fixtures can read them via os.getenv
TEST_ROOT = Path(__file__).resolve().parent
load_dotenv(TEST_ROOT / ".env", override=False)

pytest_plugins = ["odcs_harness.pytest_plugin"]


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    """Only the embedded server and mock transports may be reached from tests."""
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://testserver",
    )

    orig_sync = httpx._client.Client.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        resolved = str(self._merge_url(url))
        if _is_allowed(resolved):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {resolved}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
