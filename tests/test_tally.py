
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votecore.errors
import votecore.tally
from votecore.records import Currency, Election, ElectionKind


def make_election(options=('A', 'B'), threshold=1, max_voters=100,
                  quorum=50):
    return Election(
        name='Tallied', max_voters=max_voters, options=tuple(options),
        duration=10, quorum=quorum, threshold=threshold, created_at=0,
        creator='ST1TEST', kind=ElectionKind.public, anonymity_level=0,
        reveal_period=10, jurisdiction='Global', currency=Currency.STX,
        is_open=True, min_votes=1, max_votes=100, updated_at=0,
    )


def fill(engine, counts, election_id=0):
    for option, n_votes in counts.items():
        for _ in range(n_votes):
            engine.increment(election_id, option)


def test_default_zero():
    engine = votecore.tally.TallyEngine()
    assert engine.tally(0, 'A') == 0
    assert engine.total_revealed(0) == 0
    assert engine.tallies(0, make_election()) == {'A': 0, 'B': 0}


def test_increment():
    engine = votecore.tally.TallyEngine()
    assert engine.increment(0, 'A') == 1
    assert engine.increment(0, 'A') == 2
    assert engine.increment(1, 'A') == 1
    assert engine.tally(0, 'A') == 2
    assert engine.tally(1, 'A') == 1
    assert engine.tally(0, 'B') == 0
    assert engine.total_revealed(0) == 2


def test_tallies_in_declared_order():
    engine = votecore.tally.TallyEngine()
    fill(engine, {'C': 2, 'A': 1})
    tallies = engine.tallies(0, make_election(options='CBA'))
    assert list(tallies.items()) == [('C', 2), ('B', 0), ('A', 1)]


@pytest.mark.parametrize(('options', 'threshold', 'counts', 'winner'), [
    ('AB', 1, {'A': 1, 'B': 2}, 'A'),
    ('AB', 2, {'A': 1, 'B': 2}, 'B'),
    ('BA', 1, {'A': 1, 'B': 2}, 'B'),
    ('AB', 3, {'A': 1, 'B': 2}, None),
    ('AB', 1, {}, None),
    ('ABC', 60, {'A': 59, 'B': 60, 'C': 61}, 'B'),
])
def test_compute_winner(options, threshold, counts, winner):
    engine = votecore.tally.TallyEngine()
    fill(engine, counts)
    election = make_election(options=options, threshold=threshold)
    assert engine.compute_winner(0, election) == winner


@pytest.mark.parametrize(('max_voters', 'quorum', 'size'), [
    (100, 50, 50),
    (3, 50, 1),
    (7, 33, 2),
    (1000, 100, 1000),
    (10, 0, 0),
])
def test_quorum_size(max_voters, quorum, size):
    election = make_election(max_voters=max_voters, quorum=quorum)
    assert votecore.tally.quorum_size(election) == size


def test_check_quorum():
    engine = votecore.tally.TallyEngine()
    election = make_election(max_voters=7, quorum=33)
    assert not engine.check_quorum(election, 1)
    assert engine.check_quorum(election, 2)
    assert engine.check_quorum(make_election(quorum=0), 0)


def test_require_quorum():
    engine = votecore.tally.TallyEngine()
    election = make_election(max_voters=10, quorum=50)
    engine.require_quorum(election, 5)
    with pytest.raises(votecore.errors.QuorumNotMetError) as excinfo:
        engine.require_quorum(election, 4)
    assert excinfo.value.code == 126
    assert excinfo.value.quorum_size == 5
    assert excinfo.value.n_revealed == 4
