from rankavl.dependency import SCOREBOARD_HEADER, Player, RankedAVLTree, RankedAVLTreeNode, RankedPayload, Score
