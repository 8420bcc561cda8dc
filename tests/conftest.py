from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from ecostat.config import GRID_INTENSITY_ENV


class FakeClock:
    """Manually advanced clock for deterministic session timestamps."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 10, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _clear_grid_intensity(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(GRID_INTENSITY_ENV, raising=False)


@pytest.fixture
def message_event() -> Callable[..., dict[str, Any]]:
    """Build raw ``message.updated`` payloads as the host publishes them."""

    def build(
        *,
        session_id: str = "ses_1",
        message_id: str = "msg_1",
        role: str = "assistant",
        input: int = 0,
        output: int = 0,
        reasoning: int = 0,
        cache_read: int = 0,
        cache_write: int = 0,
        cost: float = 0.0,
        model_id: str = "claude-haiku-4-5",
        provider_id: str = "anthropic",
        created: int = 1759309200000,
        completed: int | None = None,
    ) -> dict[str, Any]:
        return {
            "type": "message.updated",
            "properties": {
                "info": {
                    "id": message_id,
                    "sessionID": session_id,
                    "role": role,
                    "tokens": {
                        "input": input,
                        "output": output,
                        "reasoning": reasoning,
                        "cache": {"read": cache_read, "write": cache_write},
                    },
                    "cost": cost,
                    "modelID": model_id,
                    "providerID": provider_id,
                    "time": {"created": created, "completed": completed},
                }
            },
        }

    return build
