# filetracker/models/directory.py
"""Read-only mappings onto the shared user/department directory."""

from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from filetracker.extensions import db


class UserLevel(db.Model):
    __bind_key__ = 'shared'
    __tablename__ = 'userlevels'

    userlevelid = db.Column(db.Integer, primary_key=True)
    userlevelname = db.Column(db.String(50), unique=True, nullable=False)

    def __repr__(self):
        return f'<UserLevel {self.userlevelname}>'


class Department(db.Model):
    __bind_key__ = 'shared'
    __tablename__ = 'tref_department'

    department_id = db.Column(db.Integer, primary_key=True)
    department = db.Column(db.String(100), nullable=False)

    def __repr__(self):
        return f'<Department {self.department}>'


class DirectoryUser(UserMixin, db.Model):
    """User account from the shared directory.

    Inherits from:
        UserMixin: Provides default implementations for Flask-Login interface
        db.Model: SQLAlchemy model base class
    """
    __bind_key__ = 'shared'
    __tablename__ = 'users'

    user_id = db.Column(db.Integer, primary_key=True)
    usr_name = db.Column(db.String(100), nullable=False)
    usr_email = db.Column(db.String(120), unique=True, nullable=False)
    usr_pwd = db.Column(db.String(255))
    usr_dept = db.Column(db.Integer, db.ForeignKey('tref_department.department_id'))
    userlevel = db.Column(db.Integer, db.ForeignKey('userlevels.userlevelid'))

    level = db.relationship('UserLevel', lazy='joined')
    department = db.relationship('Department', lazy='joined')

    def get_id(self):
        """Session key used by Flask-Login."""
        return str(self.user_id)

    @property
    def role(self):
        return self.level.userlevelname if self.level else None

    def set_password(self, password):
        """Set user's password hash from plain text password.

        Args:
            password: Plain text password to hash
        """
        self.usr_pwd = generate_password_hash(password)

    def check_password(self, password):
        """Check if plain text password matches hash.

        Args:
            password: Plain text password to verify

        Returns:
            bool: True if password matches, False otherwise
        """
        if not self.usr_pwd:
            return False
        return check_password_hash(self.usr_pwd, password)

    def __repr__(self):
        return f'<DirectoryUser {self.usr_email}>'
