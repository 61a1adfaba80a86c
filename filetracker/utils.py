# filetracker/utils.py

from datetime import datetime
import pytz
from flask import current_app
from filetracker.models import MovementLog
from filetracker.extensions import db


def local_timezone():
    return pytz.timezone(current_app.config.get('TIMEZONE', 'UTC'))


def format_timestamp(timestamp):
    """Convert a naive UTC timestamp to the configured timezone.

    Args:
        timestamp: UTC datetime object, or None

    Returns:
        str: ISO 8601 string with offset, or None
    """
    if timestamp is None:
        return None
    return pytz.utc.localize(timestamp).astimezone(local_timezone()).isoformat()


def local_today():
    """Current calendar date in the configured timezone."""
    return pytz.utc.localize(datetime.utcnow()).astimezone(local_timezone()).date()


def create_movement_log(user_id, action_type, move_id, notes=None):
    """Create a workflow audit log entry.

    The entry joins the caller's transaction and is committed with it.

    Args:
        user_id: Id of the acting user
        action_type: Type of action (request/approve/reject/take_out/return/delete)
        move_id: Movement being affected
        notes: Optional notes about the action

    Returns:
        MovementLog: The created log entry
    """
    log = MovementLog(
        user_id=user_id,
        action_type=action_type,
        move_id=move_id,
        notes=notes
    )
    db.session.add(log)
    return log
