import threading
import time
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app, request
from flask_socketio import join_room
from pydantic import ValidationError

from rps import socketio
from rps import protocol as proto
from rps.models import Player, display_name
from rps.services.games import HighscoreLedger, MatchmakingQueue, MatchRoom, generate_game_id
from rps.services.games.highscores import COMPUTER, MULTIPLAYER
from rps.services.games.room import FINISHED
from rps.services.games.scheduler import schedule_room_reap
from rps.services.games.scoring import DRAW, LOSS, WIN, final_winner, outcome_for

EXTENSION_KEY = 'rps_coordinator'


class SessionCoordinator:
    """Owns the matchmaking queue, the active rooms, the player records and
    the highscore ledger for one app, and turns inbound socket events into
    state transitions plus outbound emits.

    Every public method runs under a single re-entrant lock, so two
    near-simultaneous submissions for the same room never interleave.
    """

    def __init__(self, app=None):
        self.queue = MatchmakingQueue()
        self.rooms: Dict[str, MatchRoom] = {}
        self.players: Dict[str, Player] = {}
        self.ledger = HighscoreLedger()
        self._lock = threading.RLock()
        self.app = None
        self.namespace = '/'
        self.max_rounds = 3
        self.highscore_limit = 10
        self.finished_room_ttl = 0
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        self.app = app
        self.namespace = app.config.get('SOCKETIO_NAMESPACE', '/')
        self.max_rounds = int(app.config.get('MAX_ROUNDS', 3))
        self.highscore_limit = int(app.config.get('HIGHSCORE_LIMIT', 10))
        self.finished_room_ttl = int(app.config.get('FINISHED_ROOM_TTL_SEC', 0))
        app.extensions[EXTENSION_KEY] = self

    @property
    def logger(self):
        return self.app.logger

    # ---- transport helpers ----

    def _emit(self, event: str, payload: Optional[Dict[str, Any]] = None, to: Optional[str] = None,
              skip_sid: Optional[str] = None) -> None:
        args = () if payload is None else (payload,)
        socketio.emit(event, *args, to=to, skip_sid=skip_sid, namespace=self.namespace)

    def _error(self, sid: str, message: str) -> None:
        self._emit(proto.ERROR, proto.ErrorMessage(message=message).payload(), to=sid)

    def _seated(self, sid: str) -> Tuple[Optional[Player], Optional[MatchRoom]]:
        player = self.players.get(sid)
        if not player or not player.game_id:
            return player, None
        room = self.rooms.get(player.game_id)
        if room is None:
            player.game_id = None
        return player, room

    def _close_room(self, room: MatchRoom) -> None:
        self.rooms.pop(room.game_id, None)
        for p in room.players:
            if p.game_id == room.game_id:
                p.game_id = None
        socketio.close_room(room.game_id, namespace=self.namespace)

    def _abandon_room(self, sid: str, room: MatchRoom, reason: str) -> None:
        self._emit(proto.OPPONENT_DISCONNECTED, to=room.game_id, skip_sid=sid)
        self._close_room(room)
        self.logger.info(f"[{reason}] game={room.game_id} ended by sid={sid}")

    # ---- matchmaking ----

    def find_match(self, sid: str, data: Any) -> None:
        try:
            msg = proto.parse(proto.FindMatch, data)
        except ValidationError:
            self.logger.warning(f"[queue] sid={sid} malformed find-match payload")
            self._error(sid, 'Invalid find-match request')
            return

        with self._lock:
            player, room = self._seated(sid)
            if room is not None:
                self._abandon_room(sid, room, 'requeue')
            name = display_name(msg.name, sid)
            if player is None:
                player = Player(id=sid, name=name)
                self.players[sid] = player
            else:
                player.name = name

            if sid in self.queue:
                self._emit(proto.WAITING_FOR_OPPONENT, to=sid)
                return

            opponent = self.queue.dequeue_oldest()
            if opponent is None:
                self.queue.enqueue(player)
                self._emit(proto.WAITING_FOR_OPPONENT, to=sid)
                self.logger.info(f"[queue] {player.name} is waiting for an opponent")
                return

            self._create_room(opponent, player)

    def _create_room(self, first: Player, second: Player) -> MatchRoom:
        room = MatchRoom(generate_game_id(self.rooms), first, second, max_rounds=self.max_rounds)
        self.rooms[room.game_id] = room
        for number, (player, other) in enumerate(((first, second), (second, first)), start=1):
            player.game_id = room.game_id
            join_room(room.game_id, sid=player.id, namespace=self.namespace)
            found = proto.MatchFound(
                game_id=room.game_id,
                opponent=proto.OpponentInfo(**other.to_dict()),
                player_number=number,
            )
            self._emit(proto.MATCH_FOUND, found.payload(), to=player.id)
        self.logger.info(f"[match] game={room.game_id} {first.name} vs {second.name}")
        return room

    def cancel_matchmaking(self, sid: str) -> None:
        with self._lock:
            if self.queue.cancel(sid):
                self.logger.info(f"[queue] sid={sid} cancelled matchmaking")

    # ---- room lifecycle ----

    def player_ready(self, sid: str) -> None:
        with self._lock:
            _, room = self._seated(sid)
            if room is None:
                return
            if room.mark_ready(sid):
                start = proto.GameStart(game_state=proto.GameState(**room.game_state()))
                self._emit(proto.GAME_START, start.payload(), to=room.game_id)
                self.logger.info(f"[start] game={room.game_id}")

    def submit_choice(self, sid: str, data: Any) -> None:
        with self._lock:
            _, room = self._seated(sid)
            if room is None or not room.accepting_choices:
                return
            try:
                msg = proto.parse(proto.SubmitChoice, data, field='choice')
            except ValidationError:
                self.logger.warning(f"[choice] game={room.game_id} sid={sid} rejected {data!r}")
                self._error(sid, 'Invalid choice')
                return
            room.submit_choice(sid, msg.choice)
            self._emit(proto.CHOICE_CONFIRMED, to=sid)

            if not room.both_submitted():
                return
            result = room.resolve_round()
            self._emit(proto.ROUND_RESULT, proto.RoundResult(**result).payload(), to=room.game_id)
            self.logger.info(
                f"[round] game={room.game_id} round={result['round']} winner={result['winner_id']}"
            )
            if result['game_over']:
                self._finish_match(room)

    def _finish_match(self, room: MatchRoom) -> None:
        winner_id = final_winner(room.scores)
        over = proto.GameOver(winner_id=winner_id, final_scores=dict(room.scores))
        self._emit(proto.GAME_OVER, over.payload(), to=room.game_id)
        for p in room.players:
            self.ledger.record_result(MULTIPLAYER, p.name, outcome_for(p.id, winner_id))
        self._broadcast_highscores(MULTIPLAYER)
        room.finished_at = time.time()
        self.logger.info(f"[game-over] game={room.game_id} winner={winner_id} scores={room.scores}")
        schedule_room_reap(self.app, self, room.game_id)

    def request_rematch(self, sid: str) -> None:
        with self._lock:
            _, room = self._seated(sid)
            if room is None or room.phase != FINISHED or room.wants_rematch[sid]:
                return
            self._emit(proto.OPPONENT_WANTS_REMATCH, to=room.game_id, skip_sid=sid)
            if room.mark_wants_rematch(sid):
                self._emit(proto.REMATCH_READY, to=room.game_id)
                self.logger.info(f"[rematch] game={room.game_id}")

    def disconnect(self, sid: str) -> None:
        with self._lock:
            self.queue.cancel(sid)
            _, room = self._seated(sid)
            if room is not None:
                self._abandon_room(sid, room, 'disconnect')
            self.players.pop(sid, None)
        self.logger.info(f"[disconnect] sid={sid}")

    # ---- relays ----

    def chat_message(self, sid: str, data: Any) -> None:
        with self._lock:
            player, room = self._seated(sid)
            if room is None:
                return
            try:
                msg = proto.parse(proto.ChatMessage, data, field='message')
            except ValidationError:
                self._error(sid, 'Invalid chat message')
                return
            relay = proto.ChatRelay(
                player_id=sid,
                player_name=player.name,
                message=msg.message,
                timestamp=int(time.time() * 1000),
            )
            self._emit(proto.CHAT_MESSAGE, relay.payload(), to=room.game_id)

    def game_event(self, sid: str, data: Any) -> None:
        with self._lock:
            _, room = self._seated(sid)
            if room is None:
                return
            try:
                event = proto.parse(proto.GameEvent, data)
            except ValidationError:
                self._error(sid, 'Invalid game event')
                return
            payload = event.payload()
            payload['playerId'] = sid
            self._emit(proto.GAME_EVENT, payload, to=room.game_id)

    # ---- highscores ----

    def highscores(self, mode: str, limit: Optional[int] = None) -> Dict[str, Any]:
        limit = self.highscore_limit if limit is None else limit
        with self._lock:
            entries = self.ledger.top(mode, limit)
        return proto.Highscores(
            mode=mode,
            highscores=[proto.HighscoreEntry(**e) for e in entries],
        ).payload()

    def _broadcast_highscores(self, mode: str) -> None:
        self._emit(proto.HIGHSCORES_UPDATED, self.highscores(mode))

    def request_highscores(self, sid: str, data: Any) -> None:
        try:
            msg = proto.parse(proto.HighscoreRequest, data)
        except ValidationError:
            self._error(sid, 'Invalid highscore mode')
            return
        self._emit(proto.HIGHSCORES_DATA, self.highscores(msg.mode), to=sid)

    def update_highscore_computer(self, sid: str, data: Any) -> None:
        try:
            msg = proto.parse(proto.ComputerResult, data)
        except ValidationError:
            self.logger.warning(f"[highscore] sid={sid} malformed solo result")
            self._error(sid, 'Invalid highscore update')
            return
        if msg.is_tie:
            outcome = DRAW
        elif msg.won:
            outcome = WIN
        else:
            outcome = LOSS
        with self._lock:
            self.ledger.record_result(COMPUTER, msg.player_name, outcome)
            self._broadcast_highscores(COMPUTER)

    # ---- housekeeping ----

    def reap_finished_rooms(self, now: Optional[float] = None) -> List[str]:
        """Drop rooms whose match ended at least FINISHED_ROOM_TTL_SEC ago."""
        if self.finished_room_ttl <= 0:
            return []
        now = time.time() if now is None else now
        with self._lock:
            expired = [
                room for room in self.rooms.values()
                if room.finished_at is not None and now - room.finished_at >= self.finished_room_ttl
            ]
            for room in expired:
                self._close_room(room)
                self.logger.info(f"[reap] game={room.game_id} idle since game over")
        return [room.game_id for room in expired]

    def status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'status': 'ok',
                'players': len(self.players),
                'games': len(self.rooms),
                'waiting': len(self.queue),
            }


# ---- Socket.IO handlers ----

def _coordinator() -> SessionCoordinator:
    return current_app.extensions[EXTENSION_KEY]


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    _coordinator().disconnect(_get_sid())


def handle_find_match(data=None):
    _coordinator().find_match(_get_sid(), data)


def handle_cancel_matchmaking(data=None):
    _coordinator().cancel_matchmaking(_get_sid())


def handle_player_ready(data=None):
    _coordinator().player_ready(_get_sid())


def handle_submit_choice(data=None):
    _coordinator().submit_choice(_get_sid(), data)


def handle_request_rematch(data=None):
    _coordinator().request_rematch(_get_sid())


def handle_chat_message(data=None):
    _coordinator().chat_message(_get_sid(), data)


def handle_game_event(data=None):
    _coordinator().game_event(_get_sid(), data)


def handle_request_highscores(data=None):
    _coordinator().request_highscores(_get_sid(), data)


def handle_update_highscore_computer(data=None):
    _coordinator().update_highscore_computer(_get_sid(), data)


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    proto.FIND_MATCH: handle_find_match,
    proto.CANCEL_MATCHMAKING: handle_cancel_matchmaking,
    proto.PLAYER_READY: handle_player_ready,
    proto.SUBMIT_CHOICE: handle_submit_choice,
    proto.REQUEST_REMATCH: handle_request_rematch,
    proto.CHAT_MESSAGE: handle_chat_message,
    proto.GAME_EVENT: handle_game_event,
    proto.REQUEST_HIGHSCORES: handle_request_highscores,
    proto.UPDATE_HIGHSCORE_COMPUTER: handle_update_highscore_computer,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register every Socket.IO event handler on ``namespace``."""
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
