from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the rock-paper-scissors game server!'})

@main.route('/health')
def health():
    """Connected players, active rooms and queue length."""
    return jsonify(current_app.extensions['rps_coordinator'].status())
