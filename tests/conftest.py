import pytest

from rankavl.dependency import Player, RankedAVLTree


@pytest.fixture
def avl_tree():
    """Provide a fresh ranked AVL tree object."""
    return RankedAVLTree()


@pytest.fixture
def build_tree(avl_tree):
    """Provide a function that inserts players keyed by their score, in the given order, and returns the root."""

    def _build(keys):
        root = None
        for key in keys:
            root = avl_tree.insert(root=root, payload=Player(name=f"p{key}", id=key, score=key), key=key)
        return root

    return _build
