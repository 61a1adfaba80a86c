# filetracker/models/status.py

from filetracker.extensions import db


class Status(db.Model):
    """Lookup table naming the movement status codes."""
    __tablename__ = 'status'

    status_id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    status_name = db.Column(db.String(30), unique=True, nullable=False)

    PENDING = 1
    REJECTED = 2
    APPROVED = 3
    RETURNED = 4
    TAKEN_OUT = 5

    PREDEFINED_STATUSES = [
        (PENDING, 'Pending'),
        (REJECTED, 'Rejected'),
        (APPROVED, 'Approved'),
        (RETURNED, 'Returned'),
        (TAKEN_OUT, 'Taken Out'),
    ]
    NAMES = dict(PREDEFINED_STATUSES)

    # Returned and Rejected both leave the file on the shelf
    LABELS = {
        PENDING: 'pending',
        APPROVED: 'approved',
        TAKEN_OUT: 'taken-out',
        RETURNED: 'available',
        REJECTED: 'available',
    }

    @classmethod
    def get_predefined_statuses(cls):
        """Create predefined statuses if they don't exist."""
        for status_id, name in cls.PREDEFINED_STATUSES:
            status = db.session.get(cls, status_id)
            if not status:
                db.session.add(cls(status_id=status_id, status_name=name))
            elif status.status_name != name:
                status.status_name = name
        db.session.commit()
        return cls.query.order_by(cls.status_id).all()

    @classmethod
    def name_of(cls, status_id):
        return cls.NAMES.get(status_id, 'Unknown')

    @classmethod
    def label_of(cls, status_id):
        return cls.LABELS.get(status_id, 'unknown')

    def __repr__(self):
        return f'<Status {self.status_id} {self.status_name}>'
