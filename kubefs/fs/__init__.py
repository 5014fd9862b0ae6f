"""Filesystem-driver facing layer.

The llfuse bridge lives in kubefs.fs.mount and is imported only when
mounting, since it needs the llfuse extension module.
"""

from kubefs.fs.adapter import FilesystemAdapter
from kubefs.fs.attributes import DirectoryEntry, FileAttributes

__all__ = ["FilesystemAdapter", "FileAttributes", "DirectoryEntry"]
