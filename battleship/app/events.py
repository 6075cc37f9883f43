"""Engine outcome events and the in-process bus that delivers them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from battleship.core.models import Coord, Orientation, ShipType, ShotResult, Side

TEvent = TypeVar("TEvent")
EventHandler = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class PlacementPreviewed:
    ship_type: ShipType
    origin: Coord
    orientation: Orientation
    cells: tuple[Coord, ...]
    valid: bool


@dataclass(frozen=True, slots=True)
class ShipPlaced:
    ship_type: ShipType
    cells: tuple[Coord, ...]


@dataclass(frozen=True, slots=True)
class PlacementCleared:
    pass


@dataclass(frozen=True, slots=True)
class BattleStarted:
    pass


@dataclass(frozen=True, slots=True)
class ShotResolved:
    """One resolved shot.

    `sunk_cells` carries every cell of the struck ship when the shot sank it, so
    the presentation layer can render the sinking distinctly from a plain hit.
    """

    shooter: Side
    coord: Coord
    result: ShotResult
    sunk_cells: tuple[Coord, ...] = ()


@dataclass(frozen=True, slots=True)
class TurnChanged:
    turn: Side


@dataclass(frozen=True, slots=True)
class GameOver:
    winner: Side


@dataclass(frozen=True, slots=True)
class GameReset:
    pass


@dataclass(frozen=True, slots=True)
class Subscription:
    """Opaque subscription token."""

    id: int


class EventBus:
    """Simple in-process pub/sub for engine events."""

    def __init__(self) -> None:
        self._next_id = 1
        self._subscriptions: dict[int, tuple[type[object], EventHandler]] = {}

    def subscribe(
        self,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        """Subscribe handler for an event type and its subclasses."""
        sub_id = self._next_id
        self._next_id += 1
        self._subscriptions[sub_id] = (event_type, handler)
        return Subscription(sub_id)

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription if present."""
        self._subscriptions.pop(subscription.id, None)

    def publish(self, event: object) -> int:
        """Publish one event and return number of invoked handlers."""
        invoked = 0
        for subscribed_type, handler in tuple(self._subscriptions.values()):
            if isinstance(event, subscribed_type):
                handler(event)
                invoked += 1
        return invoked
