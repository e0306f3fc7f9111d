"""This file demonstrates how to keep a scoreboard of players in the ranked AVL tree.

Players are keyed by their score, so the highest score has rank 1. Usage:
    python demo/scoreboard_demo.py --num_players 10 --remove 3 --seed 1
"""

import argparse
import logging
import random

from rankavl.dependency import Player, RankedAVLTree


def build_scoreboard(num_players: int, rng: random.Random):
    # Create the tree object; the root is kept here and replaced after every insert.
    avl_tree = RankedAVLTree()
    root = None

    # Draw distinct scores, since players with a repeated key would be skipped.
    scores = rng.sample(range(1000, 3000), num_players)
    players = [Player(name=f"player{i}", id=i, score=score) for i, score in enumerate(scores)]

    # Issue some insert queries.
    for player in players:
        root = avl_tree.insert(root=root, payload=player, key=player.score)

    return avl_tree, root, players


def main():
    parser = argparse.ArgumentParser(description="Build and print a random scoreboard.")
    parser.add_argument("--num_players", type=int, default=10, help="Number of players to insert.")
    parser.add_argument("--remove", type=int, default=3, help="Number of players to remove afterwards.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    parser.add_argument("--verbose", action="store_true", help="Log every rotation.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(message)s")
    rng = random.Random(args.seed)

    avl_tree, root, players = build_scoreboard(num_players=args.num_players, rng=rng)

    print(f"Tree: {avl_tree.tree_string(root=root)}")
    print(avl_tree.scoreboard(root=root))

    # Issue some rank queries.
    for player in players:
        print(f"{player.name} with score {player.score} has rank {avl_tree.get_rank(key=player.score, root=root)}")

    # Remove some players and show the scoreboard again.
    for player in rng.sample(players, min(args.remove, len(players))):
        print(f"Remove {player.name}")
        root = avl_tree.delete(root=root, key=player.score)

    print(avl_tree.scoreboard(root=root))


if __name__ == "__main__":
    main()
