import os

_default_origins = ','.join([
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
])

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', _default_origins).split(',') if o.strip()]
    # Namespace the browser client connects to
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Rounds per match
    MAX_ROUNDS = int(os.environ.get('MAX_ROUNDS', '3'))
    # Entries returned in a leaderboard reply or broadcast
    HIGHSCORE_LIMIT = int(os.environ.get('HIGHSCORE_LIMIT', '10'))
    # Seconds a finished room may linger without a rematch. 0 disables reaping.
    FINISHED_ROOM_TTL_SEC = int(os.environ.get('FINISHED_ROOM_TTL_SEC', '300'))
