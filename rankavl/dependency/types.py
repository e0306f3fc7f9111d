from dataclasses import dataclass
from typing import Any, Protocol, Union

# A score is anything numeric the scoreboard can display.
Score = Union[int, float]


class RankedPayload(Protocol):
    """The narrow view of an entity that the ranked tree needs for rendering; the tree never inspects anything else."""
    name: str
    id: Any
    score: Score


@dataclass
class Player:
    """A ranked entity of the reference system: a named player with an id and a rating."""
    name: str
    id: Any
    score: Score = 0

    @property
    def elo(self) -> Score:
        """The rating under its chess-style name."""
        return self.score
