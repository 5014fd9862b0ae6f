"""Inode numbering for the projection tree."""

import logging
import threading
from typing import Dict, Iterator, Tuple

from kubefs.errors import StaleInode
from kubefs.vfs.base import DirectoryNode, Node

logger = logging.getLogger(__name__)

# FUSE reserves inode 1 for the mount root
ROOT_INODE = 1


class InodeTable:
    """
    Bidirectional, append-only mapping between inode numbers and nodes.

    Numbers are handed out monotonically starting after ROOT_INODE and are
    never reused or removed, so any number the kernel has seen stays
    resolvable for the lifetime of the process. Nodes are keyed by
    identity, which keeps the tree itself free of inode bookkeeping.
    """

    def __init__(self, root: DirectoryNode):
        self._lock = threading.Lock()
        self._inode_to_node: Dict[int, Node] = {ROOT_INODE: root}
        self._node_to_inode: Dict[int, int] = {id(root): ROOT_INODE}
        self._next_inode_ctr: int = ROOT_INODE + 1
        self.root = root

    def __len__(self) -> int:
        return len(self._inode_to_node)

    def allocate(self, node: Node) -> int:
        """
        Return the inode for a node, numbering it first if it is new.

        Safe to call concurrently: two callers racing on the same unseen
        node get the same number.
        """
        inode = self._node_to_inode.get(id(node))
        if inode is not None:
            return inode
        with self._lock:
            inode = self._node_to_inode.get(id(node))
            if inode is None:
                inode = self._next_inode_ctr
                self._next_inode_ctr += 1
                self._inode_to_node[inode] = node
                self._node_to_inode[id(node)] = inode
            return inode

    def allocate_tree(self, root: Node) -> int:
        """Number a subtree in preorder, children in listing order.

        Returns:
            Number of nodes visited
        """
        count = 0
        stack = [root]
        while stack:
            node = stack.pop()
            self.allocate(node)
            count += 1
            if isinstance(node, DirectoryNode):
                stack.extend(reversed(node.list_children()))
        return count

    def node_for(self, inode: int) -> Node:
        """
        Raises StaleInode if the number was never allocated.
        """
        try:
            return self._inode_to_node[inode]
        except KeyError as e:
            raise StaleInode(f"inode {inode} is not allocated") from e

    def inode_of(self, node: Node) -> int:
        """Inode of a node, allocating one if the node has not been seen."""
        return self.allocate(node)

    def __contains__(self, inode: int) -> bool:
        return inode in self._inode_to_node

    def items(self) -> Iterator[Tuple[int, Node]]:
        return iter(sorted(self._inode_to_node.items()))
