import random
import string
from typing import Any, Container, Dict, List, Optional

from rps.models import Player
from .scoring import DRAW, is_valid_choice, round_winner

# Room phases
WAITING = 'waiting'
CHOOSING = 'choosing'
FINISHED = 'finished'


def generate_game_id(taken: Container[str] = (), length: int = 6) -> str:
    """Generate a short room id not present in ``taken``."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        game_id = f"game-{code}"
        if game_id not in taken:
            return game_id


class MatchRoom:
    """One two-player match and its round state machine.

    ``waiting`` until both players are ready, then rounds cycle through
    ``choosing`` until ``max_rounds`` have resolved and the room is
    ``finished``. A mutually agreed rematch resets it back to ``choosing``.
    """

    def __init__(self, game_id: str, player1: Player, player2: Player, max_rounds: int = 3):
        self.game_id = game_id
        self.players: List[Player] = [player1, player2]
        self.current_round = 1
        self.max_rounds = max_rounds
        self.scores: Dict[str, int] = {player1.id: 0, player2.id: 0}
        self.choices: Dict[str, Optional[str]] = {player1.id: None, player2.id: None}
        self.ready: Dict[str, bool] = {player1.id: False, player2.id: False}
        self.wants_rematch: Dict[str, bool] = {player1.id: False, player2.id: False}
        self.started = False
        self.phase = WAITING
        self.finished_at: Optional[float] = None

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def has_player(self, player_id: str) -> bool:
        return player_id in self.scores

    def get_opponent(self, player_id: str) -> Optional[Player]:
        if not self.has_player(player_id):
            return None
        return next(p for p in self.players if p.id != player_id)

    @property
    def accepting_choices(self) -> bool:
        return self.started and self.phase == CHOOSING

    def submit_choice(self, player_id: str, choice: Any) -> bool:
        """Record a choice for the current round. Last write wins."""
        if not self.has_player(player_id) or not is_valid_choice(choice):
            return False
        if not self.accepting_choices:
            return False
        self.choices[player_id] = choice
        return True

    def both_submitted(self) -> bool:
        return all(self.choices[pid] for pid in self.player_ids)

    def resolve_round(self) -> Dict[str, Any]:
        """Score the current round and advance, or finish after the last one."""
        if not self.both_submitted():
            raise ValueError('Both choices are required to resolve a round')
        first_id, second_id = self.player_ids
        winner_id = round_winner(first_id, self.choices[first_id], second_id, self.choices[second_id])
        if winner_id != DRAW:
            self.scores[winner_id] += 1

        game_over = self.current_round >= self.max_rounds
        result = {
            'round': self.current_round,
            'choices': dict(self.choices),
            'winner_id': winner_id,
            'scores': dict(self.scores),
            'game_over': game_over,
        }
        if game_over:
            self.phase = FINISHED
        else:
            self.current_round += 1
            self._clear_choices()
        return result

    def mark_ready(self, player_id: str) -> bool:
        """Flag a player ready. Returns True when this call starts the room."""
        if not self.has_player(player_id) or self.started:
            return False
        self.ready[player_id] = True
        if not all(self.ready.values()):
            return False
        self.ready = dict.fromkeys(self.ready, False)
        self.started = True
        if self.phase == WAITING:
            self.phase = CHOOSING
        return True

    def mark_wants_rematch(self, player_id: str) -> bool:
        """Register a rematch vote. Returns True when this call resets the room.

        Votes only count once the match is finished.
        """
        if not self.has_player(player_id) or self.phase != FINISHED:
            return False
        self.wants_rematch[player_id] = True
        if not all(self.wants_rematch.values()):
            return False
        self.reset()
        return True

    def reset(self) -> None:
        self.current_round = 1
        self.scores = dict.fromkeys(self.scores, 0)
        self._clear_choices()
        self.ready = dict.fromkeys(self.ready, False)
        self.wants_rematch = dict.fromkeys(self.wants_rematch, False)
        self.finished_at = None
        if self.started:
            self.phase = CHOOSING

    def game_state(self) -> Dict[str, Any]:
        return {
            'round': self.current_round,
            'max_rounds': self.max_rounds,
            'scores': dict(self.scores),
        }

    def _clear_choices(self) -> None:
        self.choices = dict.fromkeys(self.choices, None)
