# filetracker/directory.py
"""Batch name lookups against the shared directory.

Ids that the directory does not know are left out of the returned
mapping; callers render them as unknown.
"""

from filetracker.models import DirectoryUser, Department


def distinct_ids(ids):
    """Drop None values and duplicates, keeping first-seen order."""
    seen = []
    for value in ids:
        if value is not None and value not in seen:
            seen.append(value)
    return seen


def resolve_users(user_ids):
    """Map user ids to directory records.

    Args:
        user_ids: Iterable of user ids, may contain None and duplicates

    Returns:
        dict: user_id -> {'user_id', 'name', 'email', 'department_id'}
    """
    ids = distinct_ids(user_ids)
    if not ids:
        return {}

    users = DirectoryUser.query.filter(DirectoryUser.user_id.in_(ids)).all()
    return {
        user.user_id: {
            'user_id': user.user_id,
            'name': user.usr_name,
            'email': user.usr_email,
            'department_id': user.usr_dept,
        }
        for user in users
    }


def resolve_departments(department_ids):
    """Map department ids to display names.

    Args:
        department_ids: Iterable of department ids, may contain None and duplicates

    Returns:
        dict: department_id -> department name
    """
    ids = distinct_ids(department_ids)
    if not ids:
        return {}

    departments = Department.query.filter(Department.department_id.in_(ids)).all()
    return {dept.department_id: dept.department for dept in departments}
