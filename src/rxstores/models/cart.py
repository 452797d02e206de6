"""Cart models: products, cart lines and the cart action variants."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from rxstores.models._base import StoreModel


class Product(StoreModel):
    """A purchasable product; identity is ``id``."""

    id: int
    name: str
    price: float = Field(ge=0)


class CartItem(StoreModel):
    """One cart line.  A line with quantity below one is never stored."""

    product: Product
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


class AddItem(StoreModel):
    """Add one unit of ``product``."""

    type: Literal["add"] = "add"
    product: Product | None = None


class RemoveItem(StoreModel):
    """Remove the line for ``product_id``."""

    type: Literal["remove"] = "remove"
    product_id: int | None = None


class SetQuantity(StoreModel):
    """Replace the quantity of ``product_id``; ``quantity <= 0`` removes the line."""

    type: Literal["set_quantity"] = "set_quantity"
    product_id: int | None = None
    quantity: int | None = None


class AdjustQuantity(StoreModel):
    """Shift the quantity of ``product_id`` by ``delta``, resolved against the cart at fold time."""

    type: Literal["adjust_quantity"] = "adjust_quantity"
    product_id: int | None = None
    delta: int = 0


class ClearCart(StoreModel):
    """Empty the cart."""

    type: Literal["clear"] = "clear"


CartAction = Annotated[
    AddItem | RemoveItem | SetQuantity | AdjustQuantity | ClearCart,
    Field(discriminator="type"),
]
"""Tagged union of every action the cart reducer understands."""
