from typing import Dict, Optional

ROCK = 'rock'
PAPER = 'paper'
SCISSORS = 'scissors'
VALID_CHOICES = (ROCK, PAPER, SCISSORS)

DRAW = 'draw'

WIN = 'win'
LOSS = 'loss'
OUTCOMES = (WIN, LOSS, DRAW)

# choice -> the choice it beats
BEATS = {
    ROCK: SCISSORS,
    SCISSORS: PAPER,
    PAPER: ROCK,
}


def is_valid_choice(choice) -> bool:
    return isinstance(choice, str) and choice in VALID_CHOICES


def round_winner(first_id: str, first_choice: str, second_id: str, second_choice: str) -> str:
    """Return the id of the player whose choice wins, or DRAW on equal choices."""
    if first_choice == second_choice:
        return DRAW
    if BEATS[first_choice] == second_choice:
        return first_id
    return second_id


def final_winner(scores: Dict[str, int]) -> str:
    """Compare accumulated match scores. Equal scores are a draw."""
    (first_id, first_score), (second_id, second_score) = list(scores.items())
    if first_score > second_score:
        return first_id
    if first_score < second_score:
        return second_id
    return DRAW


def outcome_for(player_id: str, winner_id: Optional[str]) -> str:
    if winner_id == DRAW:
        return DRAW
    return WIN if winner_id == player_id else LOSS
