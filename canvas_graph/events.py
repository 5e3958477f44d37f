"""
Event channels and draw-hook payloads.

Every output event and override point is an EventChannel: a list of
callbacks invoked in subscription order. Callers can ask a channel whether
anyone is listening, which is how the renderer decides between a custom
clear and the default one, and whether building a hook payload is worth it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, TypeVar

from .graph_data import Link, Node
from .graph_state import PositionedNode, RoutedLink

T = TypeVar("T")


class EventChannel(Generic[T]):
    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: List[Callable[[T], None]] = []

    # ---------------- Registration ----------------

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[T], None]:
        """Register a callback; returns it so this can be used as a decorator."""
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Callable[[T], None]) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            raise ValueError(f"Callback not subscribed to {self.name!r}") from None

    def clear(self) -> None:
        self._subscribers.clear()

    # ---------------- Dispatch -------------------

    def has_subscribers(self) -> bool:
        return bool(self._subscribers)

    def emit(self, payload: T) -> None:
        for callback in list(self._subscribers):
            callback(payload)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"EventChannel({self.name!r}, subscribers={len(self._subscribers)})"


# ---------------------------------------------------------------------------
# Draw hook payloads
# ---------------------------------------------------------------------------

@dataclass
class LinkPreDraw:
    """The default line is skipped unless a hook sets ``skip_default_draw`` to False."""

    link: Link
    geometry: RoutedLink
    surface: Any
    skip_default_draw: bool = True


@dataclass
class LinkPostDraw:
    link: Link
    geometry: RoutedLink
    surface: Any


@dataclass
class NodePreDraw:
    """The default node box is skipped unless a hook sets ``skip_default_draw`` to False."""

    node: Node
    geometry: PositionedNode
    surface: Any
    skip_default_draw: bool = True


@dataclass
class NodePostDraw:
    node: Node
    geometry: PositionedNode
    surface: Any


@dataclass
class ClearOverride:
    surface: Any
