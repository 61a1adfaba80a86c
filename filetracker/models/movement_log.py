# filetracker/models/movement_log.py
from datetime import datetime
from filetracker.extensions import db


class MovementLog(db.Model):
    """Audit trail of workflow actions on file movements"""
    __tablename__ = 'movement_log'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    action_type = db.Column(db.String(20), nullable=False)  # request, approve, reject, take_out, return, delete
    # No foreign key: log rows outlive deleted movements
    move_id = db.Column(db.Integer, index=True)
    notes = db.Column(db.Text)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<MovementLog {self.action_type} on {self.move_id} by User {self.user_id}>'
