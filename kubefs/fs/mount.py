"""
llfuse bridge.

KubeOperations forwards llfuse callbacks to the FilesystemAdapter and
translates between the two: names arrive as bytes, attributes leave as
llfuse.EntryAttributes, and FilesystemError subclasses become
llfuse.FUSEError with their errno.
"""

import errno
import functools
import logging
import subprocess
from typing import Any, Callable, Iterator, Tuple

import llfuse

from kubefs.errors import FilesystemError
from kubefs.fs.adapter import FilesystemAdapter
from kubefs.fs.attributes import FileAttributes

logger = logging.getLogger(__name__)

# The tree never changes, so the kernel may cache entries for a long time
ENTRY_TIMEOUT = 300
ATTR_TIMEOUT = 300


def fuse_errors(func: Callable) -> Callable:
    """Convert adapter errors into FUSEError; anything unexpected becomes EIO."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except llfuse.FUSEError:
            raise
        except FilesystemError as e:
            logger.debug(f"FUSE: {func.__name__} failed: {e}")
            raise llfuse.FUSEError(e.errno) from e
        except Exception as e:
            logger.warning(f"FUSE: unexpected error in {func.__name__}", exc_info=True)
            raise llfuse.FUSEError(errno.EIO) from e

    return wrapper


def _decode(name: bytes) -> str:
    try:
        return name.decode("utf-8")
    except UnicodeDecodeError as e:
        raise llfuse.FUSEError(errno.EINVAL) from e


class KubeOperations(llfuse.Operations):  # type: ignore
    """llfuse operations backed by a FilesystemAdapter."""

    def __init__(self, adapter: FilesystemAdapter):
        super().__init__()
        self.adapter = adapter

    def make_entry_attributes(self, attrs: FileAttributes) -> llfuse.EntryAttributes:
        entry = llfuse.EntryAttributes()
        for k, v in attrs.to_dict().items():
            setattr(entry, k, v)
        entry.generation = 0
        entry.entry_timeout = ENTRY_TIMEOUT
        entry.attr_timeout = ATTR_TIMEOUT
        return entry

    @fuse_errors
    def lookup(self, parent_inode: int, name: bytes, ctx: Any = None) -> llfuse.EntryAttributes:
        _, attrs = self.adapter.lookup(parent_inode, _decode(name))
        return self.make_entry_attributes(attrs)

    @fuse_errors
    def getattr(self, inode: int, ctx: Any = None) -> llfuse.EntryAttributes:
        return self.make_entry_attributes(self.adapter.getattr(inode))

    @fuse_errors
    def opendir(self, inode: int, ctx: Any = None) -> int:
        return self.adapter.opendir(inode)

    @fuse_errors
    def readdir(self, fh: int, off: int) -> Iterator[Tuple[bytes, llfuse.EntryAttributes, int]]:
        # The directory handle is the directory's inode. Entries are built
        # up front so errors surface here rather than mid-iteration.
        entries = []
        for i, entry in enumerate(self.adapter.readdir(fh, off)):
            attrs = self.make_entry_attributes(self.adapter.getattr(entry.inode))
            entries.append((entry.name.encode("utf-8"), attrs, off + i + 1))
        return iter(entries)

    def releasedir(self, fh: int) -> None:
        self.adapter.releasedir(fh)

    @fuse_errors
    def open(self, inode: int, flags: int, ctx: Any = None) -> int:
        return self.adapter.open(inode, flags)

    @fuse_errors
    def read(self, fh: int, off: int, size: int) -> bytes:
        return self.adapter.read(fh, off, size)

    def release(self, fh: int) -> None:
        self.adapter.release(fh)

    def flush(self, fh: int) -> None:
        pass

    def forget(self, inode_list: Any) -> None:
        # Inodes are never released for the life of the snapshot
        pass

    @fuse_errors
    def statfs(self, ctx: Any = None) -> llfuse.StatvfsData:
        stats = llfuse.StatvfsData()
        for k, v in self.adapter.statfs().items():
            setattr(stats, k, v)
        return stats

    @fuse_errors
    def getxattr(self, inode: int, name: bytes, ctx: Any = None) -> bytes:
        raise llfuse.FUSEError(llfuse.ENOATTR)

    @fuse_errors
    def listxattr(self, inode: int, ctx: Any = None) -> Iterator[bytes]:
        return iter([])

    # -- Mutations: the adapter rejects all of these

    @fuse_errors
    def write(self, fh: int, off: int, buf: bytes) -> int:
        return self.adapter.write(fh, off, buf)

    @fuse_errors
    def create(self, parent_inode: int, name: bytes, mode: int, flags: int, ctx: Any = None):
        return self.adapter.create(parent_inode, _decode(name), mode, flags)

    @fuse_errors
    def mkdir(self, parent_inode: int, name: bytes, mode: int, ctx: Any = None):
        return self.adapter.mkdir(parent_inode, _decode(name), mode)

    @fuse_errors
    def mknod(self, parent_inode: int, name: bytes, mode: int, rdev: int, ctx: Any = None):
        return self.adapter.mknod(parent_inode, _decode(name), mode, rdev)

    @fuse_errors
    def unlink(self, parent_inode: int, name: bytes, ctx: Any = None) -> None:
        self.adapter.unlink(parent_inode, _decode(name))

    @fuse_errors
    def rmdir(self, parent_inode: int, name: bytes, ctx: Any = None) -> None:
        self.adapter.rmdir(parent_inode, _decode(name))

    @fuse_errors
    def rename(self, parent_inode_old: int, name_old: bytes, parent_inode_new: int,
               name_new: bytes, ctx: Any = None) -> None:
        self.adapter.rename(parent_inode_old, _decode(name_old), parent_inode_new, _decode(name_new))

    @fuse_errors
    def symlink(self, parent_inode: int, name: bytes, target: bytes, ctx: Any = None):
        return self.adapter.symlink(parent_inode, _decode(name), _decode(target))

    @fuse_errors
    def link(self, inode: int, new_parent_inode: int, new_name: bytes, ctx: Any = None):
        return self.adapter.link(inode, new_parent_inode, _decode(new_name))

    @fuse_errors
    def setattr(self, inode: int, attr: Any, fields: Any, fh: Any, ctx: Any = None):
        return self.adapter.setattr(inode)

    @fuse_errors
    def setxattr(self, inode: int, name: bytes, value: bytes, ctx: Any = None) -> None:
        self.adapter.setxattr(inode, _decode(name), value)

    @fuse_errors
    def removexattr(self, inode: int, name: bytes, ctx: Any = None) -> None:
        self.adapter.removexattr(inode, _decode(name))


def mount_filesystem(
    adapter: FilesystemAdapter,
    mountpoint: str,
    workers: int = 4,
    debug: bool = False,
    allow_other: bool = False,
) -> None:
    """Mount the adapter at ``mountpoint`` and serve until unmounted.

    Blocks until the filesystem is unmounted; resources are released on
    every exit path.
    """
    options = set(llfuse.default_options)
    options.add("fsname=kubefs")
    options.add("ro")
    if debug:
        options.add("debug")
    if allow_other:
        options.add("allow_other")

    logger.info(f"Mounting kubefs at {mountpoint}")
    llfuse.init(KubeOperations(adapter), str(mountpoint), options)
    try:
        llfuse.main(workers=workers)
    finally:
        llfuse.close()
    logger.info(f"Unmounted {mountpoint}")


def unmount_filesystem(mountpoint: str) -> None:
    """Unmount a kubefs mount (``fusermount -u``)."""
    subprocess.run(["fusermount", "-u", str(mountpoint)], check=True)
