"""Order store factory — get_order_store() / set_order_store()."""

from ordering.store.port import OrderStore

_current_store: OrderStore | None = None


def get_order_store() -> OrderStore:
    """Return the current order store. Defaults to RepositoryOrderStore."""
    global _current_store
    if _current_store is None:
        from ordering.store.repository_adapter import RepositoryOrderStore

        _current_store = RepositoryOrderStore()
    return _current_store


def set_order_store(store: OrderStore) -> None:
    """Override the active order store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_order_store() -> None:
    global _current_store
    _current_store = None
