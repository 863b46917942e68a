from rps.models import Player, display_name
from rps.services.games.matchmaking import MatchmakingQueue


def _players(*names):
    return [Player(id=f"sid-{n}", name=n) for n in names]


def test_dequeue_is_fifo():
    queue = MatchmakingQueue()
    p1, p2, p3 = _players('P1', 'P2', 'P3')
    for p in (p1, p2, p3):
        assert queue.enqueue(p)
    assert queue.dequeue_oldest() is p1
    assert queue.dequeue_oldest() is p2
    assert len(queue) == 1


def test_dequeue_empty_returns_none():
    assert MatchmakingQueue().dequeue_oldest() is None


def test_enqueue_is_idempotent():
    queue = MatchmakingQueue()
    (p1,) = _players('P1')
    assert queue.enqueue(p1)
    assert not queue.enqueue(p1)
    assert len(queue) == 1


def test_cancel_removes_only_that_player():
    queue = MatchmakingQueue()
    p1, p2, p3 = _players('P1', 'P2', 'P3')
    for p in (p1, p2, p3):
        queue.enqueue(p)
    assert queue.cancel(p2.id)
    assert p2.id not in queue
    assert queue.snapshot() == {p1.id: 'P1', p3.id: 'P3'}


def test_cancel_unknown_player_is_noop():
    queue = MatchmakingQueue()
    (p1,) = _players('P1')
    queue.enqueue(p1)
    assert not queue.cancel('sid-nobody')
    assert len(queue) == 1


def test_display_name_defaults_for_blank_input():
    assert display_name('  Ann  ', 'abcdef') == 'Ann'
    assert display_name('   ', 'abcdef') == 'Player abcd'
    assert display_name(None, 'abcdef') == 'Player abcd'
