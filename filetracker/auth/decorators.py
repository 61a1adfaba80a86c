from functools import wraps
from typing import NamedTuple, Optional
from flask import current_app
from flask_login import current_user
from filetracker.errors import Unauthenticated, Forbidden


class Identity(NamedTuple):
    """The acting user, as established by the session."""
    id: int
    name: str
    role: Optional[str]
    department_id: Optional[int]

    def has_role(self, roles):
        return self.role in roles


def identity_for(user):
    return Identity(
        id=user.user_id,
        name=user.usr_name,
        role=user.role,
        department_id=user.usr_dept
    )


def current_identity():
    """Build the acting identity from the logged-in user.

    Raises:
        Unauthenticated: If no user is logged in
    """
    if not current_user or not current_user.is_authenticated:
        raise Unauthenticated()
    return identity_for(current_user)


def require_role(identity, roles, message=None):
    """Fail unless the identity holds one of ``roles``.

    Args:
        identity: Acting identity
        roles: Iterable of accepted role names
        message: Optional error message

    Raises:
        Forbidden: If the identity's role is not accepted
    """
    if not identity.has_role(roles):
        raise Forbidden(message)
    return identity


def admin_required(f):
    """Decorator to restrict access to administrative roles.

    Checks that the current user is authenticated and holds one of
    ``ADMIN_ROLES``. Responds 401 or 403 otherwise.

    Args:
        f: The view function to decorate

    Returns:
        decorated_function: The decorated view function
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = current_identity()
        require_role(identity, current_app.config['ADMIN_ROLES'])
        return f(*args, **kwargs)
    return decorated_function
