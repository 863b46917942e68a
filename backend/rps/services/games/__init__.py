"""Game domain services: rules, rooms, matchmaking, highscores and timers.

This package contains pure(ish) domain logic that socket handlers and
HTTP routes build on, keeping transport concerns separated from core
game mechanics.
"""

from .highscores import HighscoreLedger
from .matchmaking import MatchmakingQueue
from .room import MatchRoom, generate_game_id

__all__ = ['HighscoreLedger', 'MatchmakingQueue', 'MatchRoom', 'generate_game_id']
