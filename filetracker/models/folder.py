# filetracker/models/folder.py

from datetime import datetime
from sqlalchemy.orm import validates
from filetracker.extensions import db


class Folder(db.Model):
    """A physical folder owned by one department."""
    __tablename__ = 'folder'

    folder_id = db.Column(db.Integer, primary_key=True)
    folder_name = db.Column(db.String(200), nullable=False)
    department_id = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @validates('folder_name')
    def validate_folder_name(self, key, value):
        if not value or not value.strip():
            raise ValueError("Folder name cannot be empty")
        return value.strip()

    @classmethod
    def for_department(cls, department_id):
        """Folders owned by a department, by name."""
        return cls.query.filter_by(department_id=department_id)\
            .order_by(cls.folder_name).all()

    def __repr__(self):
        return f'<Folder {self.folder_name}>'


class File(db.Model):
    __tablename__ = 'file'

    file_id = db.Column(db.Integer, primary_key=True)
    file_name = db.Column(db.String(200), nullable=False)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)
    user_id = db.Column(db.Integer)

    @classmethod
    def for_department(cls, department_id):
        """(file, folder) rows of a department ordered by folder then file name."""
        return db.session.query(cls, Folder)\
            .join(FolderFile, FolderFile.file_id == cls.file_id)\
            .join(Folder, Folder.folder_id == FolderFile.folder_id)\
            .filter(Folder.department_id == department_id)\
            .order_by(Folder.folder_name, cls.file_name)\
            .all()

    def __repr__(self):
        return f'<File {self.file_name}>'


class FolderFile(db.Model):
    """Places a file in exactly one folder."""
    __tablename__ = 'folder_files'

    id = db.Column(db.Integer, primary_key=True)
    folder_id = db.Column(db.Integer, db.ForeignKey('folder.folder_id'), nullable=False)
    file_id = db.Column(db.Integer, db.ForeignKey('file.file_id'), nullable=False, unique=True)

    def __repr__(self):
        return f'<FolderFile folder={self.folder_id} file={self.file_id}>'
