"""
Filesystem callback surface.

The FilesystemAdapter answers the requests a FUSE driver forwards from
the kernel (lookup, getattr, readdir, read, open) against a frozen
ProjectionTree. It knows nothing about the FUSE library itself; the
bridge in kubefs.fs.mount translates its results and errors.

The filesystem is read-only: every mutating request raises
ReadOnlyFilesystem and changes nothing.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from kubefs.errors import InvalidArgument, NotADirectory, NotAFile, ReadOnlyFilesystem
from kubefs.fs.attributes import (
    BLOCK_SIZE,
    DIRECTORY_MODE,
    FILE_MODE,
    DirectoryEntry,
    FileAttributes,
    block_count,
)
from kubefs.vfs.base import DirectoryNode, FileNode, Node, NodeType
from kubefs.vfs.inodes import ROOT_INODE
from kubefs.vfs.render import ContentRenderer
from kubefs.vfs.snapshot import ProjectionTree

logger = logging.getLogger(__name__)

_WRITE_FLAGS = os.O_APPEND | os.O_CREAT | os.O_TRUNC


class FilesystemAdapter:
    """
    Read-only filesystem operations over one snapshot.

    All timestamps are the snapshot time; the snapshot carries no
    per-object modification times. Safe to call from several driver
    worker threads at once.
    """

    def __init__(
        self,
        tree: ProjectionTree,
        renderer: Optional[ContentRenderer] = None,
        uid: Optional[int] = None,
        gid: Optional[int] = None,
    ):
        """
        Initialize the adapter.

        Args:
            tree: Built projection tree
            renderer: Content renderer (a memoizing one is created if omitted)
            uid: Owner reported for every node (default: this process's uid)
            gid: Group reported for every node (default: this process's gid)
        """
        self.tree = tree
        self.renderer = renderer or ContentRenderer()
        self.uid = os.getuid() if uid is None else uid
        self.gid = os.getgid() if gid is None else gid
        self._time_ns = int(tree.timestamp * 1e9)

    # -- Lookups

    def lookup(self, parent_inode: int, name: str) -> Tuple[int, FileAttributes]:
        """
        Resolve one path segment.

        ``.`` and ``..`` are answered from the parent itself without
        consulting the tree's children.

        Raises:
            NoSuchEntry: If the directory has no such entry
            NotADirectory: If parent_inode is a file
            StaleInode: If parent_inode was never allocated
        """
        logger.debug(f"FUSE: Received lookup for {parent_inode=} {name=}")
        parent = self.tree.node_for(parent_inode)
        if not isinstance(parent, DirectoryNode):
            raise NotADirectory(f"{parent.get_path()} is not a directory")

        if name == ".":
            inode = parent_inode
        elif name == "..":
            inode = self._parent_inode(parent_inode, parent)
        else:
            inode = self.tree.resolve(parent_inode, name)

        return inode, self.getattr(inode)

    def getattr(self, inode: int) -> FileAttributes:
        """
        Attributes of one node.

        Directories report size 0 and ``nlink`` of 2 plus their
        subdirectories; files report the length of their rendered content.
        """
        node = self.tree.node_for(inode)
        if isinstance(node, DirectoryNode):
            return self._attributes(inode, DIRECTORY_MODE, 2 + node.subdirectory_count(), 0)

        size = self.renderer.size(node)
        return self._attributes(inode, FILE_MODE, 1, size)

    def readdir(self, inode: int, offset: int = 0) -> List[DirectoryEntry]:
        """
        Directory entries starting at ``offset``.

        The full listing is ``.``, ``..`` and then the children sorted by
        name; the same inode always yields the same sequence, so callers
        can page through it by offset.

        Raises:
            NotADirectory: If the inode is a file
        """
        logger.debug(f"FUSE: Received readdir for {inode=} {offset=}")
        if offset < 0:
            raise InvalidArgument(f"negative readdir offset {offset}")

        node = self.tree.node_for(inode)
        if not isinstance(node, DirectoryNode):
            raise NotADirectory(f"{node.get_path()} is not a directory")

        entries = [
            DirectoryEntry(".", inode, NodeType.DIRECTORY),
            DirectoryEntry("..", self._parent_inode(inode, node), NodeType.DIRECTORY),
        ]
        entries.extend(DirectoryEntry(*entry) for entry in self.tree.list_children(inode))
        return entries[offset:]

    def read(self, inode: int, offset: int, length: int) -> bytes:
        """
        Read a byte range of a file's rendered content.

        The range is clamped to the content; reading at or past the end
        returns ``b""``.

        Raises:
            NotAFile: If the inode is a directory
            InvalidArgument: If offset or length is negative
        """
        logger.debug(f"FUSE: Received read for {inode=} {offset=} {length=}")
        if offset < 0 or length < 0:
            raise InvalidArgument(f"invalid read range offset={offset} length={length}")

        node = self._file(inode)
        data = self.renderer.content(node)
        if offset >= len(data):
            return b""
        return data[offset:offset + length]

    # -- Handles

    def open(self, inode: int, flags: int) -> int:
        """
        Open a file for reading.

        Returns:
            File handle (the inode itself; there is no per-handle state)

        Raises:
            ReadOnlyFilesystem: If write access is requested
            NotAFile: If the inode is a directory
        """
        logger.debug(f"FUSE: Received open for {inode=} {flags=}")
        node = self._file(inode)
        if (flags & os.O_ACCMODE) != os.O_RDONLY or flags & _WRITE_FLAGS:
            raise ReadOnlyFilesystem(f"{node.get_path()}: cannot open for writing")
        return inode

    def opendir(self, inode: int) -> int:
        node = self.tree.node_for(inode)
        if not isinstance(node, DirectoryNode):
            raise NotADirectory(f"{node.get_path()} is not a directory")
        return inode

    def release(self, fh: int) -> None:
        pass

    def releasedir(self, fh: int) -> None:
        pass

    def statfs(self) -> Dict[str, Any]:
        """Filesystem statistics; there is never any free space."""
        files = len(self.tree.inodes)
        return {
            "f_bsize": BLOCK_SIZE,
            "f_frsize": BLOCK_SIZE,
            "f_blocks": 0,
            "f_bfree": 0,
            "f_bavail": 0,
            "f_files": files,
            "f_ffree": 0,
            "f_favail": 0,
            "f_namemax": 255,
        }

    # -- Mutations (all rejected)

    def write(self, inode: int, offset: int, data: bytes) -> int:
        raise self._read_only("write", inode)

    def create(self, parent_inode: int, name: str, mode: int, flags: int) -> Tuple[int, FileAttributes]:
        raise self._read_only("create", parent_inode, name)

    def mkdir(self, parent_inode: int, name: str, mode: int) -> FileAttributes:
        raise self._read_only("mkdir", parent_inode, name)

    def mknod(self, parent_inode: int, name: str, mode: int, rdev: int) -> FileAttributes:
        raise self._read_only("mknod", parent_inode, name)

    def unlink(self, parent_inode: int, name: str) -> None:
        raise self._read_only("unlink", parent_inode, name)

    def rmdir(self, parent_inode: int, name: str) -> None:
        raise self._read_only("rmdir", parent_inode, name)

    def rename(self, old_parent_inode: int, old_name: str, new_parent_inode: int, new_name: str) -> None:
        raise self._read_only("rename", old_parent_inode, old_name)

    def symlink(self, parent_inode: int, name: str, target: str) -> FileAttributes:
        raise self._read_only("symlink", parent_inode, name)

    def link(self, inode: int, new_parent_inode: int, new_name: str) -> FileAttributes:
        raise self._read_only("link", new_parent_inode, new_name)

    def setattr(self, inode: int, **changes: Any) -> FileAttributes:
        raise self._read_only("setattr", inode)

    def setxattr(self, inode: int, name: str, value: bytes) -> None:
        raise self._read_only("setxattr", inode)

    def removexattr(self, inode: int, name: str) -> None:
        raise self._read_only("removexattr", inode)

    # -- Helpers

    def _file(self, inode: int) -> FileNode:
        node = self.tree.node_for(inode)
        if not isinstance(node, FileNode):
            raise NotAFile(f"{node.get_path()} is a directory")
        return node

    def _parent_inode(self, inode: int, node: Node) -> int:
        if node.parent is None:
            return ROOT_INODE
        return self.tree.inode_of(node.parent)

    def _attributes(self, inode: int, mode: int, nlink: int, size: int) -> FileAttributes:
        return FileAttributes(
            st_ino=inode,
            st_mode=mode,
            st_nlink=nlink,
            st_size=size,
            st_uid=self.uid,
            st_gid=self.gid,
            st_atime_ns=self._time_ns,
            st_mtime_ns=self._time_ns,
            st_ctime_ns=self._time_ns,
            st_blocks=block_count(size),
        )

    def _read_only(self, operation: str, inode: int, name: Optional[str] = None) -> ReadOnlyFilesystem:
        target = f"{inode}/{name}" if name is not None else str(inode)
        logger.debug(f"FUSE: Rejected {operation} on {target}: read-only filesystem")
        return ReadOnlyFilesystem(f"{operation}: read-only filesystem")
