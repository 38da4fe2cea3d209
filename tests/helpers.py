"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off operation closures as coverage expands.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from fallible import Failure, Result, Success


@dataclass
class ScriptedOperation:
    """Zero-argument async operation that replays a scripted sequence.

    Script items are Results (returned) or exceptions (raised). When the
    script runs out, the last item is repeated. ``delay_s`` suspends before
    each outcome; ``log`` is shared between operations to assert call order.
    """

    script: list[Result[Any, Any] | BaseException]
    name: str = "op"
    delay_s: float = 0.0
    log: list[str] = field(default_factory=list)
    calls: int = 0
    started: int = 0
    finished: int = 0
    cancelled: bool = False

    async def __call__(self) -> Result[Any, Any]:
        self.calls += 1
        self.started += 1
        self.log.append(f"start:{self.name}")
        idx = min(self.calls - 1, len(self.script) - 1)
        item = self.script[idx]
        try:
            if self.delay_s > 0:
                await asyncio.sleep(self.delay_s)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        self.finished += 1
        self.log.append(f"end:{self.name}")
        if isinstance(item, BaseException):
            raise item
        return item


def ok(name: str, value: Any, **kwargs: Any) -> ScriptedOperation:
    return ScriptedOperation([Success(value)], name=name, **kwargs)


def fail(name: str, error: Any, **kwargs: Any) -> ScriptedOperation:
    return ScriptedOperation([Failure(error)], name=name, **kwargs)
