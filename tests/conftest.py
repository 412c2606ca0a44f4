"""Pytest configuration.

The repository uses a flat layout without requiring an installed package. This conftest ensures tests
can import from the `bystar.*` namespace when running `pytest` locally.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import bystar...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from tests.support import NOW, Event, Post, RecordingDispatcher  # noqa: E402


@pytest.fixture()
def dispatcher(monkeypatch: pytest.MonkeyPatch) -> RecordingDispatcher:
    """Bind `Post` and `Event` to a recording dispatcher and freeze their clock at `NOW`."""

    recorder = RecordingDispatcher()
    for model in (Post, Event):
        monkeypatch.setattr(model, "dispatcher", recorder)
        monkeypatch.setattr(model, "clock", lambda: NOW)
    return recorder
