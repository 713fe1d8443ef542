"""Tracking feed reducer — folds feed batches into what an order screen shows.

The feed is append-only. A batch is either a full snapshot of an order's
updates or an increment; both fold the same way, because entries whose id
is already known are skipped rather than replaced.

Feed sources deliver batches newest-first, so within one batch the last
entry is treated as the earliest arrival. Updates sharing a timestamp are
shown most-recently-arrived first.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from shared.order_status import TERMINAL_STATUSES, OrderStatus, coerce_status
from tracking.geo.estimator import GeoPoint, delivery_window, estimate_delivery


@dataclass(frozen=True)
class FeedEntry:
    id: str
    order_id: str
    status: OrderStatus
    timestamp: datetime
    message: str = ""
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    estimated_delivery: datetime | None = None

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def point(self) -> GeoPoint | None:
        return GeoPoint(self.latitude, self.longitude) if self.has_location else None


@dataclass(frozen=True)
class AgentPosition:
    agent_id: str
    latitude: float
    longitude: float
    timestamp: datetime


@dataclass(frozen=True)
class TrackingState:
    order_id: str
    status: OrderStatus | None = None
    updates: tuple[FeedEntry, ...] = ()
    route: tuple[GeoPoint, ...] = ()
    map_center: GeoPoint | None = None
    estimated_delivery: datetime | None = None
    delivery_window: str | None = None
    agent_position: AgentPosition | None = None
    eta_as_of: datetime | None = None
    arrivals: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


def initial_state(order_id, status=None, estimated_delivery=None, now=None) -> TrackingState:
    """State before any feed batch: what the order record says."""
    return TrackingState(
        order_id=str(order_id),
        status=coerce_status(status) if status is not None else None,
        estimated_delivery=estimated_delivery,
        delivery_window=delivery_window(estimated_delivery, now) if estimated_delivery else None,
    )


def _newest_first(entries, arrivals):
    return sorted(entries, key=lambda e: (e.timestamp, arrivals[e.id]), reverse=True)


def reduce_feed(state: TrackingState, entries, now: datetime | None = None) -> TrackingState:
    """Fold a batch of FeedEntry into ``state`` and return the new state."""
    arrivals = dict(state.arrivals)
    merged = list(state.updates)
    seq = len(arrivals)
    for entry in reversed(list(entries)):
        if entry.id in arrivals:
            continue
        arrivals[entry.id] = seq
        seq += 1
        merged.append(entry)

    if len(merged) == len(state.updates):
        return state

    updates = tuple(_newest_first(merged, arrivals))
    route = tuple(e.point for e in reversed(updates) if e.has_location)

    estimated, eta_as_of = state.estimated_delivery, state.eta_as_of
    with_eta = next((e for e in updates if e.estimated_delivery is not None), None)
    if with_eta is not None and (eta_as_of is None or with_eta.timestamp > eta_as_of):
        estimated, eta_as_of = with_eta.estimated_delivery, with_eta.timestamp

    return replace(
        state,
        status=updates[0].status,
        updates=updates,
        route=route,
        map_center=route[-1] if route else state.map_center,
        estimated_delivery=estimated,
        delivery_window=delivery_window(estimated, now) if estimated else None,
        eta_as_of=eta_as_of,
        arrivals=arrivals,
    )


def apply_agent_position(
    state: TrackingState,
    position: AgentPosition,
    destination=None,
    now: datetime | None = None,
) -> TrackingState:
    """Record the agent's latest position and refine the ETA from it.

    Positions older than the one already held are ignored. The ETA is only
    refined while the order is still moving and a destination is known.
    """
    current = state.agent_position
    if current is not None and position.timestamp < current.timestamp:
        return state

    state = replace(state, agent_position=position)
    if destination is None or state.is_terminal:
        return state

    now = now or datetime.now(UTC)
    estimated = estimate_delivery(position, destination, now=now)
    return replace(
        state,
        estimated_delivery=estimated,
        delivery_window=delivery_window(estimated, now),
        eta_as_of=position.timestamp,
    )
