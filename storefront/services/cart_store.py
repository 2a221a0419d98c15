"""
CartStore - Cart State Container

Single owner of the cart item collection. Every mutation builds a complete
new CartState (items and aggregates together) and publishes it in one step,
so readers and subscribers never see items and totals disagree.
"""

import threading
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from storefront.domain import EMPTY_CART, CartItem, CartState, CatalogProduct, normalize_product

from .base import BaseService

Listener = Callable[[CartState], None]


class CartStore(BaseService):
    """
    Mutable cart holding immutable snapshots.

    Responsibilities:
    - Add/merge, update, remove and clear cart items
    - Keep ``total`` and ``count`` in step with the items
    - Push each new snapshot to subscribers

    Operations that change nothing (invalid quantity, unknown id, floor at
    quantity 1) return the current snapshot object itself.

    Example:
        >>> store = CartStore()
        >>> unsubscribe = store.subscribe(lambda state: print(state.count))
        >>> state = store.add({"id": "p1", "name": "Apples", "price": "1.00"}, 2)
        2
        >>> store.add({"id": "p1", "name": "Apples", "price": "1.00"}, 3).count
        5
    """

    def __init__(self, initial: Optional[CartState] = None):
        super().__init__()
        self._lock = threading.RLock()
        self._state: CartState = initial if initial is not None else EMPTY_CART
        self._listeners: List[Listener] = []
        self._placing = False

    @classmethod
    def from_items(cls, items: Iterable[CartItem]) -> "CartStore":
        return cls(CartState.of(items))

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with every new snapshot.

        Returns:
            Callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, items: Iterable[CartItem]) -> CartState:
        # Caller holds the lock.
        state = CartState.of(items)
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                self.logger.error(f"Cart listener {listener!r} failed: {e}", exc_info=True)
        return state

    # Queries

    def current_state(self) -> CartState:
        return self._state

    def is_in_cart(self, item_id: str) -> bool:
        return self._state.get(item_id) is not None

    def quantity_of(self, item_id: str) -> int:
        item = self._state.get(item_id)
        return item.quantity if item else 0

    # Mutations

    def add(self, product: Union[CatalogProduct, Mapping[str, Any]], qty: int = 1) -> CartState:
        """
        Add a product, merging with an existing line of the same id.

        Args:
            product: Catalog product or raw catalog mapping (normalized here)
            qty: Units to add, at least 1

        Returns:
            Resulting CartState (unchanged snapshot if qty < 1)
        """
        if qty < 1:
            self.logger.warning(f"Ignoring add of {qty} units: minimum quantity is 1")
            return self._state

        normalized = normalize_product(product)

        with self._lock:
            current = self._state
            if current.get(normalized.id) is not None:
                items = [
                    item.with_quantity(item.quantity + qty) if item.id == normalized.id else item
                    for item in current.items
                ]
            else:
                items = [*current.items, CartItem.from_product(normalized, qty)]
            state = self._commit(items)

        self.logger.info(f"Added to cart: {qty}x {normalized.name} (count={state.count})")
        return state

    def set_quantity(self, item_id: str, qty: int) -> CartState:
        if qty < 1:
            self.logger.warning(f"Ignoring quantity {qty} for {item_id}: minimum quantity is 1")
            return self._state

        with self._lock:
            current = self._state
            item = current.get(item_id)
            if item is None or item.quantity == qty:
                return current
            return self._commit(
                existing.with_quantity(qty) if existing.id == item_id else existing for existing in current.items
            )

    def remove(self, item_id: str) -> CartState:
        with self._lock:
            current = self._state
            if current.get(item_id) is None:
                return current
            state = self._commit(item for item in current.items if item.id != item_id)

        self.logger.info(f"Removed {item_id} from cart")
        return state

    def clear(self) -> CartState:
        with self._lock:
            if self._state.is_empty:
                return self._state
            return self._commit(())

    def increment_quantity(self, item_id: str) -> CartState:
        with self._lock:
            item = self._state.get(item_id)
            if item is None:
                return self._state
            return self.set_quantity(item_id, item.quantity + 1)

    def decrement_quantity(self, item_id: str) -> CartState:
        """Lower the quantity by one. Stops at 1; removal is a separate call."""
        with self._lock:
            item = self._state.get(item_id)
            if item is None or item.quantity <= 1:
                return self._state
            return self.set_quantity(item_id, item.quantity - 1)

    # Checkout

    @property
    def is_placing(self) -> bool:
        return self._placing

    def begin_placement(self) -> bool:
        """
        Claim the cart for one order placement.

        Returns:
            False if another placement already holds the cart
        """
        with self._lock:
            if self._placing:
                return False
            self._placing = True
            return True

    def end_placement(self) -> None:
        with self._lock:
            self._placing = False
