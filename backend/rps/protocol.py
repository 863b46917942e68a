"""Socket.IO message protocol.

One model per event that carries a payload. Inbound models reject malformed
client data by construction; outbound models fix the camelCase wire shape.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# --- EVENT NAMES ---
# client -> server
FIND_MATCH = 'find-match'
CANCEL_MATCHMAKING = 'cancel-matchmaking'
PLAYER_READY = 'player-ready'
SUBMIT_CHOICE = 'submit-choice'
REQUEST_REMATCH = 'request-rematch'
CHAT_MESSAGE = 'chat-message'
GAME_EVENT = 'game-event'
REQUEST_HIGHSCORES = 'request-highscores'
UPDATE_HIGHSCORE_COMPUTER = 'update-highscore-computer'

# server -> client
WAITING_FOR_OPPONENT = 'waiting-for-opponent'
MATCH_FOUND = 'match-found'
GAME_START = 'game-start'
CHOICE_CONFIRMED = 'choice-confirmed'
ROUND_RESULT = 'round-result'
GAME_OVER = 'game-over'
OPPONENT_WANTS_REMATCH = 'opponent-wants-rematch'
REMATCH_READY = 'rematch-ready'
OPPONENT_DISCONNECTED = 'opponent-disconnected'
HIGHSCORES_DATA = 'highscores-data'
HIGHSCORES_UPDATED = 'highscores-updated'
ERROR = 'error'

Choice = Literal['rock', 'paper', 'scissors']
Mode = Literal['computer', 'multiplayer']


class Message(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# --- CLIENT MESSAGES ---
class FindMatch(Message):
    name: Optional[str] = None


class SubmitChoice(Message):
    choice: Choice


class ChatMessage(Message):
    message: str = Field(min_length=1)


class GameEvent(Message):
    model_config = ConfigDict(extra='allow')


class HighscoreRequest(Message):
    mode: Mode


class ComputerResult(Message):
    player_name: str
    is_tie: bool = False
    won: bool = False

    @field_validator('player_name')
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('playerName must not be blank')
        return value


# --- SERVER MESSAGES ---
class OpponentInfo(Message):
    id: str
    name: str


class MatchFound(Message):
    game_id: str
    opponent: OpponentInfo
    player_number: int


class GameState(Message):
    round: int
    max_rounds: int
    scores: Dict[str, int]


class GameStart(Message):
    game_state: GameState


class RoundResult(Message):
    round: int
    choices: Dict[str, Optional[str]]
    winner_id: str
    scores: Dict[str, int]
    game_over: bool


class GameOver(Message):
    winner_id: str
    final_scores: Dict[str, int]


class ChatRelay(Message):
    player_id: str
    player_name: str
    message: str
    timestamp: int


class HighscoreEntry(Message):
    name: str
    score: float
    rank: int


class Highscores(Message):
    mode: Mode
    highscores: List[HighscoreEntry]


class ErrorMessage(Message):
    message: str


def parse(model, data: Any, field: Optional[str] = None):
    """Validate a raw Socket.IO payload into ``model``.

    Bare (non-object) payloads are wrapped under ``field`` when given, so
    ``emit('submit-choice', 'rock')`` and ``{'choice': 'rock'}`` both parse.
    """
    if field is not None and not isinstance(data, dict):
        data = {field: data}
    return model.model_validate(data if data is not None else {})
