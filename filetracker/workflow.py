# filetracker/workflow.py
"""File movement custody workflow.

    Pending(1) --approve--> Approved(3) --take_out--> Taken Out(5) --return--> Returned(4)
        \\--reject--> Rejected(2)

Rejected and Returned are terminal. Every transition is applied as a
conditional update on the expected source status, so of two concurrent
calls on one movement only one can succeed.
"""

from datetime import datetime
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from filetracker.auth.decorators import require_role
from filetracker.errors import (
    DuplicateRequest,
    InvalidTransition,
    MissingDepartment,
    NotFound,
    RemarkRequired,
    StoreUnavailable,
)
from filetracker.extensions import db
from filetracker.models import Movement, MovementFile, MovementPatch, Status
from filetracker.scope import validate_files_in_department
from filetracker.utils import create_movement_log, local_today

# operation -> (required status, resulting status)
TRANSITIONS = {
    'approve': (Status.PENDING, Status.APPROVED),
    'reject': (Status.PENDING, Status.REJECTED),
    'take_out': (Status.APPROVED, Status.TAKEN_OUT),
    'return': (Status.TAKEN_OUT, Status.RETURNED),
}

TERMINAL_STATUSES = frozenset({Status.REJECTED, Status.RETURNED})


def submit_request(identity, file_ids, move_type=None, remark=None, folder_id=None):
    """Create a pending movement for a set of files.

    The movement row, its file links and the audit entry are committed
    together or not at all.

    Args:
        identity: Requesting identity
        file_ids: Ids of the requested files
        move_type: Free-form label, defaults to DEFAULT_MOVE_TYPE
        remark: Optional note from the requester
        folder_id: Optional folder the request is scoped to

    Returns:
        Movement: The committed movement

    Raises:
        MissingDepartment: The requester has no department
        EmptySelection, UnknownFiles, CrossDepartment: Scope check failed
        DuplicateRequest: A requested file is already in a pending request
        StoreUnavailable: The insert failed and was rolled back
    """
    if not identity.department_id:
        raise MissingDepartment()

    ids = validate_files_in_department(file_ids, identity.department_id)

    duplicates = Movement.pending_file_ids(identity.id, ids)
    if duplicates:
        raise DuplicateRequest(duplicates)

    try:
        movement = Movement(
            move_type=move_type or current_app.config['DEFAULT_MOVE_TYPE'],
            move_date=local_today(),
            status_id=Status.PENDING,
            remark=remark or None,
            requested_by=identity.id,
            folder_id=folder_id
        )
        db.session.add(movement)
        db.session.flush()

        for file_id in ids:
            db.session.add(MovementFile(move_id=movement.move_id, file_id=file_id))

        create_movement_log(
            identity.id, 'request', movement.move_id,
            f"Requested files: {', '.join(str(f) for f in ids)}"
        )
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception(f'Failed to create movement for user {identity.id}')
        raise StoreUnavailable() from e

    current_app.logger.info(
        f'Movement {movement.move_id} requested by user {identity.id} for files {ids}'
    )
    return movement


def _check_status(move_id, operation):
    required, _ = TRANSITIONS[operation]
    status_id = Movement.current_status(move_id)
    if status_id is None:
        raise NotFound(move_id)
    if status_id != required:
        raise InvalidTransition(move_id, Status.name_of(status_id), operation)


def _transition(identity, move_id, operation, patch, notes=None):
    """Move a movement along one edge of the workflow.

    Raises:
        NotFound: No movement with ``move_id``
        InvalidTransition: The movement is not in the required status
        StoreUnavailable: The update failed and was rolled back
    """
    required, _ = TRANSITIONS[operation]
    _check_status(move_id, operation)

    try:
        if not Movement.apply_patch(move_id, required, patch):
            # Another request moved the row since the check above
            db.session.rollback()
            _check_status(move_id, operation)
            raise InvalidTransition(move_id, Status.name_of(required), operation)

        create_movement_log(identity.id, operation, move_id, notes)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception(f'Failed to {operation} movement {move_id}')
        raise StoreUnavailable() from e

    current_app.logger.info(f'Movement {move_id}: {operation} by user {identity.id}')
    return db.session.get(Movement, move_id)


def approve(identity, move_id):
    """Pending -> Approved. Administrative roles only."""
    require_role(identity, current_app.config['ADMIN_ROLES'], 'Only admin can approve.')
    _, target = TRANSITIONS['approve']
    patch = MovementPatch(
        status_id=target,
        approved_by=identity.id,
        approved_at=datetime.utcnow()
    )
    return _transition(identity, move_id, 'approve', patch)


def reject(identity, move_id, remark):
    """Pending -> Rejected. Administrative roles only; a remark is required."""
    require_role(identity, current_app.config['ADMIN_ROLES'], 'Only admin can reject.')
    remark = (remark or '').strip()
    if not remark:
        raise RemarkRequired()
    _, target = TRANSITIONS['reject']
    patch = MovementPatch(
        status_id=target,
        approved_by=identity.id,
        approved_at=datetime.utcnow(),
        remark=remark
    )
    return _transition(identity, move_id, 'reject', patch, notes=remark)


def take_out(identity, move_id):
    """Approved -> Taken Out. Custody roles only."""
    require_role(
        identity,
        current_app.config['CUSTODY_ROLES'],
        'Only custody staff can take files out.'
    )
    _, target = TRANSITIONS['take_out']
    patch = MovementPatch(status_id=target, taken_at=datetime.utcnow())
    return _transition(identity, move_id, 'take_out', patch)


def return_files(identity, move_id):
    """Taken Out -> Returned."""
    _, target = TRANSITIONS['return']
    patch = MovementPatch(status_id=target, return_at=datetime.utcnow())
    return _transition(identity, move_id, 'return', patch)


def delete_movement(identity, move_id):
    """Remove a movement and its file links. Administrative override."""
    require_role(identity, current_app.config['ADMIN_ROLES'])
    movement = db.session.get(Movement, move_id)
    if movement is None:
        raise NotFound(move_id)

    try:
        notes = f"Deleted while {movement.status_name}; files: {movement.file_ids}"
        db.session.delete(movement)
        create_movement_log(identity.id, 'delete', move_id, notes)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception(f'Failed to delete movement {move_id}')
        raise StoreUnavailable() from e

    current_app.logger.warning(f'Movement {move_id} deleted by user {identity.id}')
