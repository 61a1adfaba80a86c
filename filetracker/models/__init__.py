from filetracker.models.status import Status
from filetracker.models.folder import Folder, File, FolderFile
from filetracker.models.movement import Movement, MovementFile, MovementPatch, UNSET
from filetracker.models.movement_log import MovementLog
from filetracker.models.directory import DirectoryUser, UserLevel, Department

__all__ = [
    'Status',
    'Folder',
    'File',
    'FolderFile',
    'Movement',
    'MovementFile',
    'MovementPatch',
    'UNSET',
    'MovementLog',
    'DirectoryUser',
    'UserLevel',
    'Department',
]
