"""Value types returned by the filesystem adapter."""

import stat
from dataclasses import asdict, dataclass
from typing import Any, Dict, NamedTuple

from kubefs.vfs.base import NodeType

BLOCK_SIZE = 512

DIRECTORY_MODE = stat.S_IFDIR | 0o555
FILE_MODE = stat.S_IFREG | 0o444


@dataclass(frozen=True)
class FileAttributes:
    """stat(2)-style attributes of one node."""
    st_ino: int
    st_mode: int
    st_nlink: int
    st_size: int
    st_uid: int
    st_gid: int
    st_atime_ns: int
    st_mtime_ns: int
    st_ctime_ns: int
    st_blksize: int = BLOCK_SIZE
    st_blocks: int = 0

    @property
    def is_directory(self) -> bool:
        return stat.S_ISDIR(self.st_mode)

    @property
    def is_file(self) -> bool:
        return stat.S_ISREG(self.st_mode)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DirectoryEntry(NamedTuple):
    """One readdir entry: (name, inode, type)."""
    name: str
    inode: int
    node_type: NodeType


def block_count(size: int) -> int:
    """Number of 512-byte blocks needed for ``size`` bytes."""
    return (size + BLOCK_SIZE - 1) // BLOCK_SIZE
