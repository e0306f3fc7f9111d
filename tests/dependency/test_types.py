from rankavl.dependency import Player, RankedAVLTree


class TestPlayer:
    def test_elo_alias(self):
        player = Player(name="ann", id=7, score=2100)
        assert player.elo == 2100

    def test_default_score(self):
        assert Player(name="bob", id=1).score == 0

    def test_any_payload_with_name_id_score(self):
        # The tree only reads name, id and score, so any object exposing them works.
        class Team:
            def __init__(self, name, id, score):
                self.name = name
                self.id = id
                self.score = score

        avl_tree = RankedAVLTree()
        root = avl_tree.insert(root=None, payload=Team(name="red", id="t1", score=3.5), key=3.5)
        assert avl_tree.tree_string(root=root) == "(red)"
        assert avl_tree.scoreboard(root=root) == "NAME\tID\tSCORE\nred\tt1\t3.5\n"
