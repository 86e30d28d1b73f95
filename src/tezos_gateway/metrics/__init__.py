"""Derived metrics computed from upstream statistics."""

from tezos_gateway.metrics.users import (
    add_calendar_month_ms,
    estimate_monthly_users,
    round_half_up,
)

__all__ = ["add_calendar_month_ms", "estimate_monthly_users", "round_half_up"]
