"""Domain range checks for orders and the scheduling horizon."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np

from dosescheduler.config import DEFAULT_CONFIG, DoseSchedulerConfig
from dosescheduler.errors import ValidationError
from dosescheduler.models import Order

OrderLike = Union[Order, Mapping[str, Any]]


def is_integer(value: Any) -> bool:
    """Return True for Python and numpy integers, excluding booleans."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _check_range(
    name: str, value: Any, low: int, high: Optional[int], order_id: Optional[str]
) -> None:
    if not is_integer(value):
        raise ValidationError(name, f"must be an integer, got {value!r}", order_id)
    if value < low or (high is not None and value > high):
        bounds = f"[{low}, {high}]" if high is not None else f">= {low}"
        raise ValidationError(name, f"must be in {bounds}, got {value!r}", order_id)


def validate_horizon_days(
    days: Any, config: DoseSchedulerConfig = DEFAULT_CONFIG
) -> None:
    """Reject horizon lengths outside the configured day range."""
    _check_range("days", days, config.min_horizon_days, config.max_horizon_days, None)


def validate_order(order: Order, config: DoseSchedulerConfig = DEFAULT_CONFIG) -> None:
    """Fail with :class:`ValidationError` on the first out-of-range field."""
    if not isinstance(order.order_id, str) or not order.order_id:
        raise ValidationError("order_id", "must be a non-empty string")
    order_id = order.order_id
    if not isinstance(order.patient_id, str) or not order.patient_id:
        raise ValidationError("patient_id", "must be a non-empty string", order_id)
    if not is_integer(order.tz_offset_minutes):
        raise ValidationError(
            "tz_offset_minutes",
            f"must be an integer, got {order.tz_offset_minutes!r}",
            order_id,
        )
    _check_range(
        "frequency_per_day",
        order.frequency_per_day,
        1,
        config.max_frequency_per_day,
        order_id,
    )
    _check_range(
        "priority", order.priority, config.min_priority, config.max_priority, order_id
    )
    _check_range("window_minutes", order.window_minutes, 0, None, order_id)


def coerce_order(order: OrderLike) -> Order:
    """Accept either an :class:`Order` or a mapping of its fields."""
    if isinstance(order, Order):
        return order
    if isinstance(order, Mapping):
        return Order.from_mapping(order)
    raise ValidationError("order", f"must be an Order or a mapping, got {type(order).__name__}")


def validate_orders(
    orders: Iterable[OrderLike], config: DoseSchedulerConfig = DEFAULT_CONFIG
) -> List[Order]:
    """Coerce and validate every order, stopping at the first violation."""
    validated: List[Order] = []
    for raw in orders:
        order = coerce_order(raw)
        validate_order(order, config)
        validated.append(order)
    return validated


__all__ = [
    "coerce_order",
    "is_integer",
    "validate_horizon_days",
    "validate_order",
    "validate_orders",
]
