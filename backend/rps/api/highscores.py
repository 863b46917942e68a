from flask import Blueprint, current_app, jsonify, request

from rps.services.games.highscores import MODES

highscores = Blueprint('highscores', __name__)


@highscores.route('/<string:mode>', methods=['GET'])
def get_highscores(mode):
    """
    Returns the leaderboard for a game mode, same shape as `highscores-data`.
    """
    if mode not in MODES:
        return jsonify({'error': f'Unknown mode {mode!r}'}), 404

    max_limit = int(current_app.config.get('HIGHSCORE_LIMIT', 10))
    limit = request.args.get('limit', type=int)
    if limit is None:
        limit = max_limit
    limit = max(1, min(limit, max_limit))

    coordinator = current_app.extensions['rps_coordinator']
    return jsonify(coordinator.highscores(mode, limit))
