"""Defines the AVL tree augmented with right weights; repeated keys are rejected, so every key appears at most once."""
from __future__ import annotations

import logging
import weakref
from typing import Any, Iterator, List, Optional, Tuple

from rankavl.dependency.types import RankedPayload

logger = logging.getLogger(__name__)

# The first line of every scoreboard.
SCOREBOARD_HEADER = "NAME\tID\tSCORE\n"


class RankedAVLTreeNode:
    def __init__(self, payload: RankedPayload, key: Any):
        """
        Given a payload and its key, create a new ranked AVL tree node.

        Comparing to the standard AVL tree node, we add three fields:
            - Balance factor, the height of the left subtree minus the height of the right subtree.
            - Right weight, the number of nodes in the right subtree, used to compute ranks.
            - Parent, a weak back-reference to the node holding this one as a child.
        :param payload: The entity stored at this node; it must expose name, id and score.
        :param key: A totally ordered value that places the node in the tree.
        """
        self.payload: RankedPayload = payload
        self.key: Any = key
        self.height: int = 1
        self.balance_factor: int = 0
        self.right_weight: int = 0
        self.left_node: Optional[RankedAVLTreeNode] = None
        self.right_node: Optional[RankedAVLTreeNode] = None
        self._parent_ref: Optional[weakref.ReferenceType] = None

    @property
    def parent(self) -> Optional[RankedAVLTreeNode]:
        """The node holding this node as a child, or None for the root."""
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, node: Optional[RankedAVLTreeNode]) -> None:
        self._parent_ref = weakref.ref(node) if node is not None else None

    def __repr__(self) -> str:
        return f"RankedAVLTreeNode(key={self.key!r}, height={self.height}, right_weight={self.right_weight})"


class RankedAVLTree:
    """
    Defines the ranked AVL tree operations.

    The tree object holds no nodes; each operation receives the current root and the mutating ones return the new root,
    which the caller must store in place of the old one. Rank order is descending by key: the largest key has rank 1.
    """

    @staticmethod
    def __get_height(node: Optional[RankedAVLTreeNode]) -> int:
        """Get the height of the input node."""
        # If the node is empty, the height would be 0; otherwise return height.
        return node.height if node else 0

    @staticmethod
    def __reconnect_children(node: RankedAVLTreeNode) -> None:
        """Point the parent reference of both children back to the input node."""
        if node.left_node:
            node.left_node.parent = node
        if node.right_node:
            node.right_node.parent = node

    def __update_height(self, node: RankedAVLTreeNode) -> None:
        """Update the height and the balance factor of the input node."""
        left_height = self.__get_height(node.left_node)
        right_height = self.__get_height(node.right_node)
        node.height = 1 + max(left_height, right_height)
        node.balance_factor = left_height - right_height

    def __rotate_left(self, in_node: RankedAVLTreeNode) -> RankedAVLTreeNode:
        """
        Perform a left rotation at the provided input node.

        :param in_node: Some RankedAVLTreeNode to rotate.
        :return: The parent node of the rotated node.
        """
        logger.debug("Rotate left at key %r.", in_node.key)
        # Save the right child of the input node as the parent node.
        p_node = in_node.right_node
        # The input node will be the left child of the parent node; we store its left child to a tmp variable.
        tmp_node = p_node.left_node

        # Now we set the input node as the left child of the parent node.
        p_node.left_node = in_node
        # The left child of the parent node was on the right of the input node.
        in_node.right_node = tmp_node

        # The parent node takes over the position of the input node.
        p_node.parent = in_node.parent
        self.__reconnect_children(in_node)
        self.__reconnect_children(p_node)

        # Update the input node first, since the new parent node height depends on it.
        self.__update_height(in_node)
        self.__update_height(p_node)

        # The parent node and its right subtree left the right subtree of the input node.
        in_node.right_weight -= p_node.right_weight + 1

        # Return the new parent node.
        return p_node

    def __rotate_right(self, in_node: RankedAVLTreeNode) -> RankedAVLTreeNode:
        """
        Perform a right rotation at the provided input node.

        :param in_node: Some RankedAVLTreeNode to rotate.
        :return: The parent node of the rotated node.
        """
        logger.debug("Rotate right at key %r.", in_node.key)
        # Save the left child of the input node as the parent node.
        p_node = in_node.left_node
        # The input node will be the right child of the parent node; we store its right child to a tmp variable.
        tmp_node = p_node.right_node

        # Now we set the input node as the right child of the parent node.
        p_node.right_node = in_node
        # The right child of the parent node was on the left of the input node.
        in_node.left_node = tmp_node

        # The parent node takes over the position of the input node.
        p_node.parent = in_node.parent
        self.__reconnect_children(in_node)
        self.__reconnect_children(p_node)

        # Update the input node first, since the new parent node height depends on it.
        self.__update_height(in_node)
        self.__update_height(p_node)

        # The input node and its right subtree joined the right subtree of the parent node.
        p_node.right_weight += in_node.right_weight + 1

        # Return the new parent node.
        return p_node

    def __balance(self, node: RankedAVLTreeNode) -> RankedAVLTreeNode:
        """Re-balance a node if it is unbalanced."""
        # Update the height and the balance factor of the node.
        self.__update_height(node)

        # Left heavy subtree rotation.
        if node.balance_factor > 1:
            # The left-right case; a balanced left child goes through the single rotation.
            if node.left_node.balance_factor < 0:
                node.left_node = self.__rotate_left(node.left_node)
            # The left-left case.
            return self.__rotate_right(node)

        # Right heavy subtree rotation.
        if node.balance_factor < -1:
            # The right-left case; a balanced right child goes through the single rotation.
            if node.right_node.balance_factor > 0:
                node.right_node = self.__rotate_right(node.right_node)
            # The right-right case.
            return self.__rotate_left(node)

        return node

    def __rebalance_path(self, stack: List[RankedAVLTreeNode]) -> RankedAVLTreeNode:
        """
        Re-balance every node on a root-to-node path, from the bottom up.

        :param stack: The visited nodes, with the root at the bottom of the stack.
        :return: The updated AVL tree root node.
        """
        while stack:
            # Get the last node and balance it at this position.
            node = stack.pop()
            balanced_node = self.__balance(node)

            # If a parent exists, update which node the parent should point to.
            if stack:
                parent = stack[-1]
                if parent.left_node is node:
                    parent.left_node = balanced_node
                else:
                    parent.right_node = balanced_node
                balanced_node.parent = parent
            else:
                balanced_node.parent = None
                return balanced_node

        # The code should not exit the while loop without returning.
        raise ValueError("The node was not successfully inserted.")

    @staticmethod
    def exists(key: Any, root: Optional[RankedAVLTreeNode]) -> bool:
        """Check whether a node with exactly the provided key is in the tree."""
        while root:
            if key < root.key:
                root = root.left_node
            elif key > root.key:
                root = root.right_node
            else:
                return True

        return False

    def insert(self, root: Optional[RankedAVLTreeNode], payload: RankedPayload, key: Any) -> RankedAVLTreeNode:
        """
        Inserts a new node into the tree, which is represented by the root.

        If the key is already present, nothing changes and the input root is returned.
        :param root: The root node of the AVL tree.
        :param payload: The entity to store.
        :param key: The key that places the entity in the tree.
        :return: The updated AVL tree root node.
        """
        # If the tree is empty, the new node becomes the root.
        if not root:
            return RankedAVLTreeNode(payload=payload, key=key)

        # Repeated keys are skipped, so the right weights below may be increased safely.
        if self.exists(key=key, root=root):
            logger.debug("Key %r already exists; insert skipped.", key)
            return root

        # Create a stack to hold all visited nodes and set root to node for readability.
        stack = []
        node = root

        # Traverse the tree to find the insertion point.
        while node:
            # Add visited node to stack.
            stack.append(node)
            # If the key is smaller, we go left.
            if key < node.key:
                if not node.left_node:
                    node.left_node = RankedAVLTreeNode(payload=payload, key=key)
                    node.left_node.parent = node
                    stack.append(node.left_node)
                    break
                node = node.left_node
            # Otherwise go right, and the new node lands in the right subtree of this node.
            else:
                node.right_weight += 1
                if not node.right_node:
                    node.right_node = RankedAVLTreeNode(payload=payload, key=key)
                    node.right_node.parent = node
                    stack.append(node.right_node)
                    break
                node = node.right_node

        # Rebalance the tree from the insertion point up to the root.
        return self.__rebalance_path(stack)

    def __recursive_insert(
            self, root: Optional[RankedAVLTreeNode], payload: RankedPayload, key: Any
    ) -> RankedAVLTreeNode:
        """Insert into the subtree rooted at the input node and return the balanced subtree root."""
        # When we reach an empty root, create a new tree node to store the payload.
        if root is None:
            return RankedAVLTreeNode(payload=payload, key=key)
        # If not an empty node, we compare the key.
        elif key < root.key:
            root.left_node = self.__recursive_insert(root=root.left_node, payload=payload, key=key)
        else:
            root.right_node = self.__recursive_insert(root=root.right_node, payload=payload, key=key)
            root.right_weight += 1

        self.__reconnect_children(root)
        return self.__balance(root)

    def recursive_insert(
            self, root: Optional[RankedAVLTreeNode], payload: RankedPayload, key: Any
    ) -> RankedAVLTreeNode:
        """
        Inserts a new node into the tree, which is represented by the root.

        We also provide the recursive algorithm to validate the correctness of the non-recursive approach.
        :param root: The root node of the AVL tree.
        :param payload: The entity to store.
        :param key: The key that places the entity in the tree.
        :return: The updated AVL tree root node.
        """
        if self.exists(key=key, root=root):
            logger.debug("Key %r already exists; insert skipped.", key)
            return root

        new_root = self.__recursive_insert(root=root, payload=payload, key=key)
        new_root.parent = None
        return new_root

    def delete(self, root: Optional[RankedAVLTreeNode], key: Any) -> Optional[RankedAVLTreeNode]:
        """
        Deletes the node with the provided key from the tree, which is represented by the root.

        A node with two children takes the payload and key of its in-order successor, and the successor is removed
        instead; hence node identities are not stable across deletions.
        :param root: The root node of the AVL tree.
        :param key: The key to delete.
        :return: The updated AVL tree root node, or None if the tree became empty.
        """
        # Missing keys are skipped, so the right weights below may be decreased safely.
        if not self.exists(key=key, root=root):
            logger.debug("Key %r does not exist; delete skipped.", key)
            return root

        # Create a stack to hold the ancestors of the node to remove.
        stack = []
        node = root

        # Find the node holding the key.
        while key != node.key:
            stack.append(node)
            if key < node.key:
                node = node.left_node
            else:
                # The removed node lies in the right subtree of this node.
                node.right_weight -= 1
                node = node.right_node

        # With two children, absorb the in-order successor and remove the successor instead.
        if node.left_node and node.right_node:
            stack.append(node)
            node.right_weight -= 1
            successor = node.right_node
            while successor.left_node:
                stack.append(successor)
                successor = successor.left_node

            logger.debug("Key %r takes the place of deleted key %r.", successor.key, node.key)
            node.payload, node.key = successor.payload, successor.key
            node = successor

        # The node to remove now has at most one child, which takes its place.
        child = node.left_node if node.left_node else node.right_node
        node.left_node = node.right_node = None
        node.parent = None

        # When the root itself is removed, its child is the whole tree.
        if not stack:
            if child:
                child.parent = None
            return child

        parent = stack[-1]
        if parent.left_node is node:
            parent.left_node = child
        else:
            parent.right_node = child
        if child:
            child.parent = parent

        # Rebalance the tree from the removal point up to the root.
        return self.__rebalance_path(stack)

    @staticmethod
    def search(key: Any, root: Optional[RankedAVLTreeNode]) -> Optional[RankedPayload]:
        """
        Performs a search on the provided key and root node.

        :param key: The key to search for.
        :param root: The root node of the AVL tree.
        :return: The payload corresponding to the provided search key, or None if it is absent.
        """
        # While the root is not empty.
        while root:
            if key < root.key:
                root = root.left_node
            elif key > root.key:
                root = root.right_node
            else:
                return root.payload

        # If never found, return None.
        return None

    @staticmethod
    def get_rank(key: Any, root: Optional[RankedAVLTreeNode]) -> int:
        """
        Get the rank of the node with the provided key, where the largest key has rank 1.

        :param key: The key to rank.
        :param root: The root node of the AVL tree.
        :return: The 1-based rank, or -1 if the key is absent.
        """
        # Number of nodes with a larger key seen so far.
        rank = 0

        while root:
            if key < root.key:
                # This node and its right subtree all rank above the key.
                rank += root.right_weight + 1
                root = root.left_node
            elif key > root.key:
                root = root.right_node
            else:
                return rank + root.right_weight + 1

        return -1

    @staticmethod
    def size(root: Optional[RankedAVLTreeNode]) -> int:
        """Count the nodes in the tree by walking down the left spine."""
        count = 0
        while root:
            count += root.right_weight + 1
            root = root.left_node
        return count

    @staticmethod
    def in_order(root: Optional[RankedAVLTreeNode]) -> Iterator[RankedAVLTreeNode]:
        """Yield the nodes in ascending key order."""
        stack = []
        node = root
        while stack or node:
            # Go as far left as possible before yielding.
            while node:
                stack.append(node)
                node = node.left_node
            node = stack.pop()
            yield node
            node = node.right_node

    @staticmethod
    def reverse_in_order(root: Optional[RankedAVLTreeNode]) -> Iterator[RankedAVLTreeNode]:
        """Yield the nodes in descending key order, i.e. by rank."""
        stack = []
        node = root
        while stack or node:
            # Go as far right as possible before yielding.
            while node:
                stack.append(node)
                node = node.right_node
            node = stack.pop()
            yield node
            node = node.left_node

    def tree_string(self, root: Optional[RankedAVLTreeNode]) -> str:
        """Get the parenthesized structure of the tree, labelled by payload names."""
        if not root:
            return ""
        return f"({self.tree_string(root.left_node)}{root.payload.name}{self.tree_string(root.right_node)})"

    def scoreboard(self, root: Optional[RankedAVLTreeNode]) -> str:
        """Get the scoreboard, one tab separated line per payload, from the largest key to the smallest."""
        lines = [SCOREBOARD_HEADER]
        for node in self.reverse_in_order(root):
            lines.append(f"{node.payload.name}\t{node.payload.id}\t{node.payload.score}\n")
        return "".join(lines)

    def check_invariants(self, root: Optional[RankedAVLTreeNode]) -> None:
        """
        Recompute every structural invariant from scratch and compare with the cached fields.

        :param root: The root node of the AVL tree.
        :raises ValueError: Naming the first invariant that does not hold.
        """
        if root and root.parent is not None:
            raise ValueError(f"The root with key {root.key!r} has a parent.")
        self.__check_subtree(root)

    def __check_subtree(self, node: Optional[RankedAVLTreeNode]) -> Tuple[int, int, Any, Any]:
        """Check the subtree and return its height, size, smallest key and largest key."""
        if node is None:
            return 0, 0, None, None

        for child in (node.left_node, node.right_node):
            if child and child.parent is not node:
                raise ValueError(f"Parent mismatch: key {child.key!r} does not point back to key {node.key!r}.")

        l_height, l_size, l_min, l_max = self.__check_subtree(node.left_node)
        r_height, r_size, r_min, r_max = self.__check_subtree(node.right_node)

        # Left keys are strictly smaller and right keys are not smaller.
        if l_max is not None and not l_max < node.key:
            raise ValueError(f"Ordering violated: left subtree of key {node.key!r} holds key {l_max!r}.")
        if r_min is not None and r_min < node.key:
            raise ValueError(f"Ordering violated: right subtree of key {node.key!r} holds key {r_min!r}.")

        height = 1 + max(l_height, r_height)
        if node.height != height:
            raise ValueError(f"height mismatch at key {node.key!r}: cached {node.height}, actual {height}")
        if node.balance_factor != l_height - r_height:
            raise ValueError(
                f"balance_factor mismatch at key {node.key!r}: "
                f"cached {node.balance_factor}, actual {l_height - r_height}"
            )
        if abs(node.balance_factor) > 1:
            raise ValueError(f"Key {node.key!r} is unbalanced with balance factor {node.balance_factor}.")
        if node.right_weight != r_size:
            raise ValueError(f"right_weight mismatch at key {node.key!r}: cached {node.right_weight}, actual {r_size}")

        smallest = l_min if l_min is not None else node.key
        largest = r_max if r_max is not None else node.key
        return height, l_size + r_size + 1, smallest, largest
