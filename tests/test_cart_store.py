from __future__ import annotations

import pytest

from rxstores.exceptions import StoreDisposedError
from rxstores.models.cart import AddItem, AdjustQuantity, CartItem, ClearCart, Product, RemoveItem, SetQuantity
from rxstores.stores.cart import CartStore, reduce_cart, total_items, total_price

PEN = Product(id=1, name="Pen", price=2.5)
BOOK = Product(id=2, name="Book", price=12.0)
MUG = Product(id=3, name="Mug", price=7.25)


def _quantities(cart: CartStore) -> list[tuple[int, int]]:
    return [(item.product.id, item.quantity) for item in cart.snapshot]


# ----------------------------------------------------------------------
# Reducer
# ----------------------------------------------------------------------


def test_reduce_add_appends_then_increments() -> None:
    items = reduce_cart((), AddItem(product=PEN))
    items = reduce_cart(items, AddItem(product=BOOK))
    items = reduce_cart(items, AddItem(product=PEN))

    assert [(i.product.id, i.quantity) for i in items] == [(1, 2), (2, 1)]


def test_reduce_set_quantity_non_positive_removes_line() -> None:
    items = (CartItem(product=PEN, quantity=3), CartItem(product=BOOK))

    assert reduce_cart(items, SetQuantity(product_id=1, quantity=0)) == (CartItem(product=BOOK),)
    assert reduce_cart(items, SetQuantity(product_id=1, quantity=-4)) == (CartItem(product=BOOK),)
    assert reduce_cart(items, SetQuantity(product_id=1, quantity=5))[0].quantity == 5


def test_reduce_adjust_quantity_uses_current_line() -> None:
    items = (CartItem(product=PEN, quantity=2), CartItem(product=BOOK))

    assert reduce_cart(items, AdjustQuantity(product_id=1, delta=1))[0].quantity == 3
    assert reduce_cart(items, AdjustQuantity(product_id=1, delta=-2)) == (CartItem(product=BOOK),)
    assert reduce_cart(items, AdjustQuantity(product_id=99, delta=1)) is items


def test_reduce_remove_and_clear() -> None:
    items = (CartItem(product=PEN), CartItem(product=BOOK))

    assert reduce_cart(items, RemoveItem(product_id=2)) == (CartItem(product=PEN),)
    assert reduce_cart(items, RemoveItem(product_id=99)) == items
    assert reduce_cart(items, ClearCart()) == ()


@pytest.mark.parametrize(
    "action",
    [
        AddItem(),
        RemoveItem(),
        SetQuantity(product_id=1),
        SetQuantity(quantity=2),
        AdjustQuantity(delta=1),
    ],
)
def test_reduce_malformed_action_is_noop(action) -> None:
    items = (CartItem(product=PEN),)

    assert reduce_cart(items, action) is items


def test_reduce_does_not_mutate_input() -> None:
    items = (CartItem(product=PEN),)
    reduce_cart(items, AddItem(product=PEN))

    assert items[0].quantity == 1


def test_totals() -> None:
    items = (CartItem(product=PEN, quantity=2), CartItem(product=MUG, quantity=4))

    assert total_price(items) == pytest.approx(34.0)
    assert total_items(items) == 6
    assert total_price(()) == 0.0


# ----------------------------------------------------------------------
# Store
# ----------------------------------------------------------------------


def test_cart_commands_update_items_and_derived_totals() -> None:
    cart = CartStore()
    totals: list[float] = []
    cart.total_price.subscribe(totals.append)

    cart.add_to_cart(PEN)
    cart.add_to_cart(PEN)
    cart.add_to_cart(BOOK)

    assert _quantities(cart) == [(1, 2), (2, 1)]
    assert cart.total_items.value == 3
    assert cart.item_count.value == 2
    assert cart.is_empty.value is False
    assert totals == [0.0, 2.5, 5.0, 17.0]


def test_increase_and_decrease_step_quantity_by_one() -> None:
    cart = CartStore()
    cart.add_to_cart(PEN)

    cart.increase(PEN.id)
    cart.increase(PEN.id)
    assert cart.get_quantity(PEN.id) == 3

    cart.decrease(PEN.id)
    cart.decrease(PEN.id)
    cart.decrease(PEN.id)
    assert not cart.has_product(PEN.id)
    assert cart.is_empty.value is True


def test_increases_queued_by_an_observer_each_apply_to_the_latest_quantity() -> None:
    cart = CartStore()
    reacted = False

    def on_items(items: tuple[CartItem, ...]) -> None:
        nonlocal reacted
        if items and not reacted:
            reacted = True
            cart.increase(PEN.id)
            cart.increase(PEN.id)

    cart.items.subscribe(on_items, emit_current=False)
    cart.add_to_cart(PEN)

    assert cart.get_quantity(PEN.id) == 3


def test_increase_and_decrease_of_absent_product_are_noops() -> None:
    cart = CartStore()
    seen: list[tuple[CartItem, ...]] = []
    cart.items.subscribe(seen.append, emit_current=False)

    cart.increase(42)
    cart.decrease(42)
    cart.remove_from_cart(42)

    assert seen == []


def test_set_quantity_and_clear() -> None:
    cart = CartStore()
    cart.add_to_cart(PEN)
    cart.add_to_cart(BOOK)

    cart.set_quantity(BOOK.id, 4)
    assert cart.get_item(BOOK.id) == CartItem(product=BOOK, quantity=4)

    cart.set_quantity(PEN.id, 0)
    assert _quantities(cart) == [(2, 4)]

    cart.clear()
    assert cart.snapshot == ()
    assert cart.total_price.value == 0.0


def test_malformed_commands_are_ignored() -> None:
    cart = CartStore()
    cart.add_to_cart(PEN)

    cart.add_to_cart(None)  # type: ignore[arg-type]
    cart.set_quantity(PEN.id, "many")  # type: ignore[arg-type]
    cart.remove_from_cart("not-an-id")  # type: ignore[arg-type]

    assert _quantities(cart) == [(1, 1)]


def test_unchanged_cart_is_not_republished() -> None:
    cart = CartStore()
    cart.add_to_cart(PEN)
    seen: list[tuple[CartItem, ...]] = []
    cart.items.subscribe(seen.append, emit_current=False)

    cart.set_quantity(PEN.id, 1)

    assert seen == []


def test_command_issued_by_observer_is_handled_after_current_action() -> None:
    cart = CartStore()
    snapshots: list[list[int]] = []

    def observer(items: tuple[CartItem, ...]) -> None:
        snapshots.append([item.product.id for item in items])
        if len(items) == 1 and not cart.has_product(BOOK.id):
            cart.add_to_cart(BOOK)

    cart.items.subscribe(observer, emit_current=False)
    cart.add_to_cart(PEN)
    cart.add_to_cart(MUG)

    assert snapshots == [[1], [1, 2], [1, 2, 3]]


def test_disposed_cart_rejects_commands() -> None:
    cart = CartStore()
    cart.add_to_cart(PEN)
    cart.dispose()
    cart.dispose()

    assert cart.disposed
    with pytest.raises(StoreDisposedError):
        cart.add_to_cart(BOOK)
    assert cart.total_items.value == 1


@pytest.mark.asyncio
async def test_cart_is_an_async_context_manager() -> None:
    async with CartStore() as cart:
        cart.add_to_cart(MUG)
        assert cart.total_price.value == pytest.approx(7.25)

    assert cart.disposed


def test_replaying_actions_yields_the_same_cart() -> None:
    actions = [AddItem(product=PEN), AddItem(product=PEN), AddItem(product=BOOK), RemoveItem(product_id=PEN.id)]

    first: tuple[CartItem, ...] = ()
    second: tuple[CartItem, ...] = ()
    for action in actions:
        first = reduce_cart(first, action)
    for action in actions:
        second = reduce_cart(second, action)

    assert first == second == (CartItem(product=BOOK),)
