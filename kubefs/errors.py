"""Error taxonomy for kubefs.

Errors fall into three groups:

    - FetchError: the remote cluster could not be queried
    - RenderError: a node's content could not be serialized
    - FilesystemError: a filesystem request could not be satisfied; each
      subclass carries the errno reported back to the operating system
"""

import errno as _errno
from typing import Optional


class KubeFSError(Exception):
    """Base class for all kubefs errors."""
    pass


class FetchError(KubeFSError):
    """The remote cluster was unreachable, refused the request, or returned garbage."""

    def __init__(
        self,
        message: str,
        namespace: Optional[str] = None,
        kind: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.namespace = namespace
        self.kind = kind
        self.status_code = status_code


class RenderError(KubeFSError):
    """A node's document could not be rendered."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class FilesystemError(KubeFSError):
    """A filesystem request failed; ``errno`` is what the kernel sees."""
    errno = _errno.EIO


class NoSuchEntry(FilesystemError):
    errno = _errno.ENOENT


class NotADirectory(FilesystemError):
    errno = _errno.ENOTDIR


class NotAFile(FilesystemError):
    errno = _errno.EISDIR


class StaleInode(FilesystemError):
    """An inode number that was never handed out."""
    errno = _errno.ENOENT


class ReadOnlyFilesystem(FilesystemError):
    errno = _errno.EROFS


class InvalidArgument(FilesystemError):
    errno = _errno.EINVAL
