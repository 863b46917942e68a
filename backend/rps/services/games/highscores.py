from typing import Dict, List

from .scoring import DRAW, LOSS, WIN

COMPUTER = 'computer'
MULTIPLAYER = 'multiplayer'
MODES = (COMPUTER, MULTIPLAYER)

POINTS = {
    WIN: 1.0,
    DRAW: 0.5,
    LOSS: 0.0,
}


class HighscoreLedger:
    """In-memory leaderboard per game mode: display name -> accumulated score.

    Names only appear once they have earned points; a loss on its own never
    creates an entry. Scores are never decreased or pruned.
    """

    def __init__(self):
        self._scores: Dict[str, Dict[str, float]] = {mode: {} for mode in MODES}

    def _board(self, mode: str) -> Dict[str, float]:
        try:
            return self._scores[mode]
        except KeyError:
            raise ValueError(f"Unknown highscore mode: {mode!r}") from None

    def record_result(self, mode: str, name: str, outcome: str) -> float:
        board = self._board(mode)
        if outcome not in POINTS:
            raise ValueError(f"Unknown outcome: {outcome!r}")
        points = POINTS[outcome]
        if points:
            board[name] = board.get(name, 0.0) + points
        return board.get(name, 0.0)

    def score(self, mode: str, name: str) -> float:
        return self._board(mode).get(name, 0.0)

    def __contains__(self, key) -> bool:
        mode, name = key
        return name in self._board(mode)

    def top(self, mode: str, limit: int = 10) -> List[Dict]:
        """Highest scores first. Ranks are positional, even between equal scores."""
        entries = sorted(self._board(mode).items(), key=lambda item: item[1], reverse=True)
        return [
            {'name': name, 'score': score, 'rank': index + 1}
            for index, (name, score) in enumerate(entries[:max(0, limit)])
        ]
