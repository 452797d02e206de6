"""Tests for Pydantic model parsing with StoreModel."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from rxstores.models import (
    AddItem,
    CartAction,
    CartItem,
    CatalogProduct,
    ClearCart,
    DashboardState,
    DashboardStats,
    FieldError,
    FieldName,
    FormSubmission,
    PaginationState,
    PollResult,
    Post,
    Product,
    SetQuantity,
    StopwatchState,
)

# ------------------------------------------------------------------
# StoreModel
# ------------------------------------------------------------------


class TestStoreModel:
    def test_camel_case_keys_are_accepted(self) -> None:
        post = Post.model_validate({"id": 7, "title": "t", "body": "b", "userId": 3})
        assert post.user_id == 3

    def test_snake_case_keys_are_accepted(self) -> None:
        assert Post(id=7, user_id=3).user_id == 3

    def test_values_are_kept_verbatim(self) -> None:
        post = Post.model_validate({"id": 1, "title": "--", "body": " ", "userId": None})
        assert post.title == "--"
        assert post.body == " "
        assert post.user_id is None

    def test_missing_keys_fall_back_to_defaults(self) -> None:
        post = Post.model_validate({"id": 1})
        assert post.title == ""
        assert post.body == ""
        assert post.user_id is None

    def test_unknown_keys_are_ignored(self) -> None:
        post = Post.model_validate({"id": 1, "tags": ["x"]})
        assert not hasattr(post, "tags")

    def test_models_are_frozen(self) -> None:
        product = Product(id=1, name="Pen", price=1.0)
        with pytest.raises(ValidationError):
            product.price = 2.0  # type: ignore[misc]


# ------------------------------------------------------------------
# Cart
# ------------------------------------------------------------------


class TestCartModels:
    def test_quantity_below_one_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CartItem(product=Product(id=1, name="Pen", price=1.0), quantity=0)

    def test_negative_price_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Product(id=1, name="Pen", price=-1)

    def test_line_total(self) -> None:
        item = CartItem(product=Product(id=1, name="Pen", price=2.5), quantity=4)
        assert item.line_total == 10.0

    def test_actions_parse_by_type(self) -> None:
        adapter: TypeAdapter[CartAction] = TypeAdapter(CartAction)

        assert isinstance(adapter.validate_python({"type": "clear"}), ClearCart)
        assert adapter.validate_python({"type": "set_quantity", "productId": 2, "quantity": 3}) == SetQuantity(
            product_id=2, quantity=3
        )
        assert adapter.validate_python({"type": "add"}) == AddItem()
        with pytest.raises(ValidationError):
            adapter.validate_python({"type": "checkout"})


# ------------------------------------------------------------------
# Dashboard / feed / form / catalog
# ------------------------------------------------------------------


def test_dashboard_defaults() -> None:
    state = DashboardState()
    assert state.stats is None
    assert state.is_loading is False
    assert state.is_paused is False


def test_poll_result_ok_flag() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    stats = DashboardStats(total_users=10, active_users=7, total_sales=5000, today_revenue=1000, last_updated=now)

    assert PollResult(stats=stats, completed_at=now).ok
    assert not PollResult(error="boom", completed_at=now).ok
    assert not PollResult(error="--", completed_at=now).ok
    assert not PollResult(error="", completed_at=now).ok


def test_pagination_defaults_allow_first_load() -> None:
    state = PaginationState()
    assert state.posts == ()
    assert state.current_page == 0
    assert state.has_more is True


def test_field_error_validity() -> None:
    assert FieldError(field=FieldName.EMAIL).is_valid
    assert not FieldError(field="password", message="Password is required").is_valid


def test_form_submission_hides_password_in_repr() -> None:
    submission = FormSubmission(email="a@b.c", password="hunter22")
    assert "hunter22" not in repr(submission)


def test_catalog_product_ids_are_strings() -> None:
    assert CatalogProduct.model_validate({"id": 5, "name": "Lamp"}).id == "5"


def test_stopwatch_state_rejects_negative_elapsed() -> None:
    with pytest.raises(ValidationError):
        StopwatchState(elapsed_seconds=-1)
