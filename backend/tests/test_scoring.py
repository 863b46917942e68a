import pytest

from rps.services.games.scoring import (
    DRAW,
    LOSS,
    WIN,
    final_winner,
    is_valid_choice,
    outcome_for,
    round_winner,
)

A = 'sid-a'
B = 'sid-b'


@pytest.mark.parametrize(
    'choice_a, choice_b, expected',
    [
        ('rock', 'rock', DRAW),
        ('paper', 'paper', DRAW),
        ('scissors', 'scissors', DRAW),
        ('rock', 'scissors', A),
        ('scissors', 'paper', A),
        ('paper', 'rock', A),
        ('scissors', 'rock', B),
        ('paper', 'scissors', B),
        ('rock', 'paper', B),
    ],
)
def test_round_winner_table(choice_a, choice_b, expected):
    assert round_winner(A, choice_a, B, choice_b) == expected


@pytest.mark.parametrize('choice', ['rock', 'paper', 'scissors'])
def test_valid_choices(choice):
    assert is_valid_choice(choice)


@pytest.mark.parametrize('choice', ['', 'Rock', 'lizard', None, 1, ['rock']])
def test_invalid_choices(choice):
    assert not is_valid_choice(choice)


def test_final_winner_compares_scores():
    assert final_winner({A: 2, B: 1}) == A
    assert final_winner({A: 0, B: 3}) == B
    assert final_winner({A: 1, B: 1}) == DRAW


def test_outcome_for():
    assert outcome_for(A, A) == WIN
    assert outcome_for(B, A) == LOSS
    assert outcome_for(A, DRAW) == DRAW
