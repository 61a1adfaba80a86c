from flask import Blueprint

bp = Blueprint('movements', __name__)

from filetracker.movements import routes  # noqa: E402,F401
