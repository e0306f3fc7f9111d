from rankavl.dependency.ranked_avl_tree import SCOREBOARD_HEADER, RankedAVLTree, RankedAVLTreeNode
from rankavl.dependency.types import Player, RankedPayload, Score
