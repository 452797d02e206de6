"""Shopping cart store.

Every command becomes a :data:`~rxstores.models.cart.CartAction` on one
ordered action queue (one lane per command kind, merged).  The queue folds
each action into the current snapshot with the pure :func:`reduce_cart`.
Totals are derived from ``items`` and never stored.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from rxstores.models._base import StoreModel
from rxstores.models.cart import (
    AddItem,
    AdjustQuantity,
    CartAction,
    CartItem,
    ClearCart,
    Product,
    RemoveItem,
    SetQuantity,
)
from rxstores.reactive.observable import Derived, Observable, State
from rxstores.reactive.scheduling import ActionQueue
from rxstores.stores._base import StoreBase

_logger = logging.getLogger(__name__)

CartItems = tuple[CartItem, ...]


def reduce_cart(items: CartItems, action: CartAction) -> CartItems:
    """Fold one action into the cart.

    Pure and total: malformed actions (missing product, id or quantity)
    return *items* unchanged instead of raising.
    """
    if isinstance(action, AddItem):
        product = action.product
        if product is None:
            return items
        for index, item in enumerate(items):
            if item.product.id == product.id:
                updated = list(items)
                updated[index] = item.model_copy(update={"quantity": item.quantity + 1})
                return tuple(updated)
        return (*items, CartItem(product=product, quantity=1))

    if isinstance(action, RemoveItem):
        if action.product_id is None:
            return items
        return tuple(item for item in items if item.product.id != action.product_id)

    if isinstance(action, SetQuantity):
        if action.product_id is None or action.quantity is None:
            return items
        return _set_quantity(items, action.product_id, action.quantity)

    if isinstance(action, AdjustQuantity):
        if action.product_id is None:
            return items
        for item in items:
            if item.product.id == action.product_id:
                return _set_quantity(items, action.product_id, item.quantity + action.delta)
        return items

    if isinstance(action, ClearCart):
        return ()

    return items


def _set_quantity(items: CartItems, product_id: int, quantity: int) -> CartItems:
    if quantity <= 0:
        return tuple(item for item in items if item.product.id != product_id)
    return tuple(
        item.model_copy(update={"quantity": quantity}) if item.product.id == product_id else item for item in items
    )


def total_price(items: CartItems) -> float:
    return sum((item.product.price * item.quantity for item in items), 0.0)


def total_items(items: CartItems) -> int:
    return sum(item.quantity for item in items)


def _build(model: type[StoreModel], **fields: Any) -> Any:
    try:
        return model(**fields)
    except ValidationError:
        _logger.debug("Malformed %s command %r ignored", model.__name__, fields)
        return None


class CartStore(StoreBase):
    """Ordered cart of products.

    Usage::

        cart = CartStore()
        cart.total_price.subscribe(render_total)
        cart.add_to_cart(Product(id=1, name="Pen", price=2.5))
    """

    def __init__(self) -> None:
        super().__init__("CartStore")
        self._items: State[CartItems] = State((), name="cart.items")
        self._actions: ActionQueue[CartAction] = ActionQueue(self._apply, name="cart.actions")

        self._add = self._actions.lane(lambda product: _build(AddItem, product=product))
        self._remove = self._actions.lane(lambda product_id: _build(RemoveItem, product_id=product_id))
        self._update = self._actions.lane(
            lambda product_id, quantity: _build(SetQuantity, product_id=product_id, quantity=quantity)
        )
        self._adjust = self._actions.lane(
            lambda product_id, delta: _build(AdjustQuantity, product_id=product_id, delta=delta)
        )
        self._clear = self._actions.lane(ClearCart)

        self.total_price: Derived[float] = self._items.map(total_price, name="cart.total_price")
        self.total_items: Derived[int] = self._items.map(total_items, name="cart.total_items")
        self.item_count: Derived[int] = self._items.map(len, name="cart.item_count")
        self.is_empty: Derived[bool] = self._items.map(lambda items: not items, name="cart.is_empty")

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def items(self) -> Observable[CartItems]:
        return self._items

    @property
    def snapshot(self) -> CartItems:
        return self._items.value

    def get_item(self, product_id: int) -> CartItem | None:
        return next((item for item in self._items.value if item.product.id == product_id), None)

    def has_product(self, product_id: int) -> bool:
        return self.get_item(product_id) is not None

    def get_quantity(self, product_id: int) -> int:
        item = self.get_item(product_id)
        return item.quantity if item is not None else 0

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_to_cart(self, product: Product) -> None:
        self._require_active()
        self._add(product)

    def remove_from_cart(self, product_id: int) -> None:
        self._require_active()
        self._remove(product_id)

    def set_quantity(self, product_id: int, quantity: int) -> None:
        self._require_active()
        self._update(product_id, quantity)

    def increase(self, product_id: int) -> None:
        self._require_active()
        self._adjust(product_id, 1)

    def decrease(self, product_id: int) -> None:
        self._require_active()
        self._adjust(product_id, -1)

    def clear(self) -> None:
        self._require_active()
        self._clear()

    # ------------------------------------------------------------------
    # Fold
    # ------------------------------------------------------------------

    def _apply(self, action: CartAction) -> None:
        current = self._items.value
        updated = reduce_cart(current, action)
        if updated == current:
            _logger.debug("Cart action %s left the cart unchanged", action.type)
            return
        self._items.set(updated)
        _logger.debug("Cart updated by %s: lines=%d units=%d", action.type, len(updated), total_items(updated))

    def _on_dispose(self) -> None:
        self._actions.close()
        for view in (self.total_price, self.total_items, self.item_count, self.is_empty):
            view.complete()
        self._items.complete()
