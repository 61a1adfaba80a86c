# filetracker/movements/projection.py
"""Read models for file movements.

Rows are enriched with the files they cover and with names from the shared
directory. A listing costs one query for movements, one for all of their
files, and one directory lookup each for users and departments. Names the
directory does not know come back as None.
"""

from sqlalchemy import exists
from filetracker.directory import resolve_users, resolve_departments
from filetracker.extensions import db
from filetracker.models import Movement, MovementFile, File, Folder, FolderFile, Status
from filetracker.utils import format_timestamp


def all_movements():
    return Movement.query.order_by(Movement.move_id.desc())


def movements_requested_by(user_id):
    return Movement.query.filter(Movement.requested_by == user_id)\
        .order_by(Movement.move_id.desc())


def movements_for_department(department_id):
    """Movements covering at least one file from the department's folders."""
    in_department = exists().where(
        MovementFile.move_id == Movement.move_id,
        FolderFile.file_id == MovementFile.file_id,
        Folder.folder_id == FolderFile.folder_id,
        Folder.department_id == department_id
    )
    return Movement.query.filter(in_department).order_by(Movement.move_id.desc())


def pending_movements():
    return Movement.query.filter(Movement.status_id == Status.PENDING)\
        .order_by(Movement.move_date.desc(), Movement.move_id.desc())


def notifications_for(user_id):
    """The user's movements that were decided and need their attention."""
    return Movement.query.filter(
        Movement.requested_by == user_id,
        Movement.status_id.in_([Status.REJECTED, Status.APPROVED])
    ).order_by(Movement.move_date.desc(), Movement.move_id.desc())


def files_by_movement(move_ids):
    """Map move ids to their files, ordered by folder name then file name."""
    if not move_ids:
        return {}

    rows = db.session.query(
        MovementFile.move_id,
        File.file_id,
        File.file_name,
        Folder.folder_id,
        Folder.folder_name,
        Folder.department_id
    ).join(File, File.file_id == MovementFile.file_id)\
        .outerjoin(FolderFile, FolderFile.file_id == File.file_id)\
        .outerjoin(Folder, Folder.folder_id == FolderFile.folder_id)\
        .filter(MovementFile.move_id.in_(move_ids))\
        .order_by(MovementFile.move_id, Folder.folder_name, File.file_name)\
        .all()

    grouped = {move_id: [] for move_id in move_ids}
    for row in rows:
        grouped[row.move_id].append(row)
    return grouped


def _owning_department(file_rows, requester):
    for row in file_rows:
        if row.department_id is not None:
            return row.department_id
    return requester.get('department_id') if requester else None


def serialize_movements(movements):
    """Turn movements into enriched dictionaries for JSON responses.

    Args:
        movements: Sequence of Movement instances

    Returns:
        list: One dict per movement, in the given order
    """
    movements = list(movements)
    if not movements:
        return []

    files = files_by_movement([m.move_id for m in movements])
    users = resolve_users(
        [m.requested_by for m in movements] + [m.approved_by for m in movements]
    )

    department_ids = {}
    for movement in movements:
        department_ids[movement.move_id] = _owning_department(
            files[movement.move_id],
            users.get(movement.requested_by)
        )
    departments = resolve_departments(department_ids.values())

    result = []
    for movement in movements:
        requester = users.get(movement.requested_by)
        approver = users.get(movement.approved_by)
        department_id = department_ids[movement.move_id]
        result.append({
            'move_id': movement.move_id,
            'move_type': movement.move_type,
            'move_date': movement.move_date.isoformat() if movement.move_date else None,
            'status_id': movement.status_id,
            'status_name': movement.status_name,
            'status_label': Status.label_of(movement.status_id),
            'remark': movement.remark,
            'requested_by': movement.requested_by,
            'requested_by_name': requester['name'] if requester else None,
            'approved_by': movement.approved_by,
            'approved_by_name': approver['name'] if approver else None,
            'department_id': department_id,
            'department_name': departments.get(department_id),
            'folder_id': movement.folder_id,
            'approved_at': format_timestamp(movement.approved_at),
            'taken_at': format_timestamp(movement.taken_at),
            'return_at': format_timestamp(movement.return_at),
            'files': [
                {
                    'file_id': row.file_id,
                    'file_name': row.file_name,
                    'folder_id': row.folder_id,
                    'folder_name': row.folder_name,
                }
                for row in files[movement.move_id]
            ],
        })
    return result


def serialize_movement(movement):
    return serialize_movements([movement])[0]


def department_of(movement):
    """Department owning a movement's files, None when it has no foldered file."""
    row = db.session.query(Folder.department_id)\
        .join(FolderFile, FolderFile.folder_id == Folder.folder_id)\
        .join(MovementFile, MovementFile.file_id == FolderFile.file_id)\
        .filter(MovementFile.move_id == movement.move_id)\
        .first()
    return row.department_id if row else None
