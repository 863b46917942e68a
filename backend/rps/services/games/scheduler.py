import time

from rps import socketio


def schedule_room_reap(app, coordinator, game_id: str) -> None:
    """Schedule a sweep of finished rooms once this room's TTL has elapsed.

    - No-ops in TESTING mode (tests call ``reap_finished_rooms`` directly)
    - No-ops when FINISHED_ROOM_TTL_SEC is 0
    - The sweep only removes rooms that are still finished and past their
      deadline, so a rematch in the meantime keeps the room alive
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return
    ttl = int(app.config.get('FINISHED_ROOM_TTL_SEC', 0))
    if ttl <= 0:
        return

    app.logger.info(f"[reap-set] game={game_id} ttl={ttl}s")

    def _worker(gid: str, delay: int):
        time.sleep(delay)
        with app.app_context():
            reaped = coordinator.reap_finished_rooms()
            if gid not in reaped:
                app.logger.info(f"[reap-skip] game={gid} no longer finished or already gone")

    socketio.start_background_task(_worker, game_id, ttl)
