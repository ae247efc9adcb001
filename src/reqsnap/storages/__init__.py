from ._base import SnapshotStorage
from .file import FileSnapshotStorage

__all__ = [
    "SnapshotStorage",
    "FileSnapshotStorage",
]
