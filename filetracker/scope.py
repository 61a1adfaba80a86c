# filetracker/scope.py

from filetracker.directory import distinct_ids
from filetracker.errors import EmptySelection, UnknownFiles, CrossDepartment
from filetracker.extensions import db
from filetracker.models import Folder, FolderFile


def validate_files_in_department(file_ids, department_id):
    """Check that every requested file sits in a folder of ``department_id``.

    The check is all or nothing: one bad id rejects the whole selection.

    Args:
        file_ids: Requested file ids
        department_id: Department of the requesting user

    Returns:
        list: The distinct file ids, in request order

    Raises:
        EmptySelection: No file ids were given
        UnknownFiles: Some ids have no folder; lists exactly those ids
        CrossDepartment: Some files belong to another department's folder
    """
    ids = distinct_ids(file_ids)
    if not ids:
        raise EmptySelection()

    rows = db.session.query(FolderFile.file_id, Folder.department_id)\
        .join(Folder, Folder.folder_id == FolderFile.folder_id)\
        .filter(FolderFile.file_id.in_(ids))\
        .all()

    found = {row.file_id for row in rows}
    missing = [file_id for file_id in ids if file_id not in found]
    if missing:
        raise UnknownFiles(missing)

    wrong = {row.file_id for row in rows if row.department_id != department_id}
    if wrong:
        raise CrossDepartment([file_id for file_id in ids if file_id in wrong])

    return ids
