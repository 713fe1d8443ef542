"""Order status transition table.

    pending → confirmed → processing → shipped → delivered
    {pending, confirmed, processing, shipped} → cancelled
    {pending, confirmed, processing, shipped} → refunded

delivered, cancelled and refunded are terminal.
"""

from shared.order_status import TERMINAL_STATUSES, OrderStatus

HAPPY_PATH = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

_ABANDON = {OrderStatus.CANCELLED, OrderStatus.REFUNDED}

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED} | _ABANDON,
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING} | _ABANDON,
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED} | _ABANDON,
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED} | _ABANDON,
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
    OrderStatus.REFUNDED: set(),  # terminal
}


def allowed_transitions(current: OrderStatus) -> frozenset:
    return frozenset(_VALID_TRANSITIONS.get(current, set()))


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS.get(current, set())


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def path_to(current: OrderStatus, target: OrderStatus) -> list[OrderStatus]:
    """Statuses to step through to get from ``current`` to ``target``.

    Forward moves along the happy path include every intermediate status so
    each hop is a legal edge. Anything else is a single (possibly illegal)
    hop; the caller validates it.
    """
    if current == target:
        return []
    if current in HAPPY_PATH and target in HAPPY_PATH:
        start, end = HAPPY_PATH.index(current), HAPPY_PATH.index(target)
        if end > start:
            return list(HAPPY_PATH[start + 1 : end + 1])
    return [target]
