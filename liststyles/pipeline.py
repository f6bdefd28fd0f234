# liststyles/pipeline.py
"""
Ordered handler pipelines.

Each pipeline maps an event name (e.g. ``"element:li"`` or
``"attribute:listStyle:listItem"``) to named handlers tagged with a priority.
Handlers run from the highest priority to the lowest; handlers sharing a
priority run in registration order.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

PRIORITIES: Dict[str, int] = {
    "highest": 100000,
    "high": 1000,
    "normal": 0,
    "low": -1000,
    "lowest": -100000,
}


@dataclass
class Handler:
    name: str
    callback: Callable[..., Any]
    priority: int
    order: int


class Pipeline:
    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: Dict[str, List[Handler]] = {}
        self._counter = 0

    def on(self, event: str, callback: Callable[..., Any], *, name: str = "", priority: str = "normal") -> Handler:
        if priority not in PRIORITIES:
            raise ValueError(f"unknown priority {priority!r}, expected one of {sorted(PRIORITIES)}")
        self._counter += 1
        handler = Handler(
            name=name or getattr(callback, "__name__", "handler"),
            callback=callback,
            priority=PRIORITIES[priority],
            order=self._counter,
        )
        handlers = self._handlers.setdefault(event, [])
        handlers.append(handler)
        handlers.sort(key=lambda h: (-h.priority, h.order))
        return handler

    def handlers(self, event: str) -> List[Handler]:
        return list(self._handlers.get(event, ()))

    def fire(self, event: str, *args: Any, **kwargs: Any) -> None:
        for handler in self.handlers(event):
            logger.debug("[%s] %s -> %s", self.name, event, handler.name)
            handler.callback(*args, **kwargs)
