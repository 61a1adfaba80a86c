# filetracker/models/movement.py

from dataclasses import dataclass, fields
from datetime import date, datetime
from sqlalchemy import select, update
from filetracker.extensions import db
from filetracker.models.status import Status


class _Unset:
    def __repr__(self):
        return 'UNSET'


UNSET = _Unset()


@dataclass(frozen=True)
class MovementPatch:
    """Column changes made by one workflow transition.

    Fields left as ``UNSET`` are not touched; ``None`` is a real value.
    """
    status_id: int
    approved_by: object = UNSET
    approved_at: object = UNSET
    remark: object = UNSET
    taken_at: object = UNSET
    return_at: object = UNSET

    def values(self):
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


class Movement(db.Model):
    """A custody request for one or more physical files."""
    __tablename__ = 'file_movement'

    move_id = db.Column(db.Integer, primary_key=True)
    move_type = db.Column(db.String(50), nullable=False, default='Take Out')
    move_date = db.Column(db.Date, nullable=False, default=date.today)
    status_id = db.Column(
        db.Integer,
        db.ForeignKey('status.status_id'),
        nullable=False,
        default=Status.PENDING,
        index=True
    )
    remark = db.Column(db.Text)
    requested_by = db.Column(db.Integer, nullable=False, index=True)
    approved_by = db.Column(db.Integer)
    folder_id = db.Column(db.Integer, db.ForeignKey('folder.folder_id'))
    approved_at = db.Column(db.DateTime)
    taken_at = db.Column(db.DateTime)
    return_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    status = db.relationship('Status', lazy='joined')
    movement_files = db.relationship(
        'MovementFile',
        backref='movement',
        lazy='select',
        cascade='all, delete-orphan'
    )

    @property
    def status_name(self):
        if self.status is not None:
            return self.status.status_name
        return Status.name_of(self.status_id)

    @property
    def file_ids(self):
        return [mf.file_id for mf in self.movement_files]

    @classmethod
    def current_status(cls, move_id):
        """Committed status of a movement, or None when it does not exist."""
        return db.session.execute(
            select(cls.status_id).where(cls.move_id == move_id)
        ).scalar_one_or_none()

    @classmethod
    def apply_patch(cls, move_id, from_status, patch):
        """Apply ``patch`` only while the row is still in ``from_status``.

        Returns:
            bool: True if the row was updated
        """
        result = db.session.execute(
            update(cls)
            .where(cls.move_id == move_id, cls.status_id == from_status)
            .values(**patch.values())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @classmethod
    def pending_file_ids(cls, user_id, file_ids):
        """Ids among ``file_ids`` already in one of the user's pending requests."""
        if not file_ids:
            return []
        rows = db.session.query(MovementFile.file_id)\
            .join(cls, cls.move_id == MovementFile.move_id)\
            .filter(
                cls.requested_by == user_id,
                cls.status_id == Status.PENDING,
                MovementFile.file_id.in_(file_ids)
            ).distinct().all()
        found = {row.file_id for row in rows}
        return [file_id for file_id in file_ids if file_id in found]

    @classmethod
    def has_pending_request(cls, user_id, file_id):
        return bool(cls.pending_file_ids(user_id, [file_id]))

    def __repr__(self):
        return f'<Movement {self.move_id} {self.status_name}>'


class MovementFile(db.Model):
    __tablename__ = 'file_movement_files'

    id = db.Column(db.Integer, primary_key=True)
    move_id = db.Column(
        db.Integer,
        db.ForeignKey('file_movement.move_id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    file_id = db.Column(db.Integer, db.ForeignKey('file.file_id'), nullable=False, index=True)

    __table_args__ = (
        db.UniqueConstraint('move_id', 'file_id', name='unique_file_per_movement'),
    )

    def __repr__(self):
        return f'<MovementFile move={self.move_id} file={self.file_id}>'
