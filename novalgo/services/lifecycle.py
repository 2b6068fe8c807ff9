"""Pending -> terminal status transitions shared by deposits and withdrawals."""

from datetime import datetime

from novalgo.extensions import db
from novalgo.utils.exceptions import InvalidStateTransition, NotFound


def claim_pending(model, row_id, new_status, admin_id=None, admin_notes=None):
    """
    Move a ``pending`` row of ``model`` to ``new_status``.

    Returns ``(row, transitioned)``. The status check is part of the UPDATE
    itself, so of two concurrent callers exactly one sees ``transitioned``;
    a row already in ``new_status`` comes back with ``transitioned=False``.
    """
    label = model.__name__.lower()
    row = model.query.filter_by(id=row_id).with_for_update().first()
    if row is None:
        raise NotFound(f"{model.__name__} not found", details={f"{label}_id": row_id})

    values = {
        model.status: new_status,
        model.processed_by: admin_id,
        model.processed_at: datetime.utcnow(),
    }
    if admin_notes is not None:
        values[model.admin_notes] = admin_notes

    claimed = (
        model.query
        .filter_by(id=row_id, status="pending")
        .update(values, synchronize_session=False)
    )
    db.session.refresh(row)

    if claimed:
        return row, True
    if row.status == new_status:
        return row, False
    raise InvalidStateTransition(
        f"Cannot mark a {row.status} {label} as {new_status}",
        details={f"{label}_id": row_id, "status": row.status},
    )
