"""Ordering rule shared by every level of the content hierarchy.

Modules, lessons, courses and tracks are ordered by their explicit
``sort_order`` with ``created_at`` breaking ties.
"""

from typing import Any

from sqlalchemy import ColumnElement


def explicit_order_by(model: Any) -> tuple[ColumnElement[Any], ColumnElement[Any]]:
    """``ORDER BY`` clauses for ``model``: ``sort_order`` then ``created_at``."""
    return (model.sort_order.asc(), model.created_at.asc())
