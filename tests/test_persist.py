
import sys
import os
import json

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votecore.ballot
import votecore.errors
import votecore.ledger
import votecore.persist
from votecore.records import Currency, ElectionKind

sys.path.append(os.path.join(os.path.dirname(__file__)))
from test_directory import voice_hash
from test_ledger import SALT, election_args


def populated_ledger():
    ledger = votecore.ledger.Ledger()
    ledger.call('ST2AUTH', 'set_authority', 'ST2AUTH')
    ledger.call('ST2AUTH', 'set_creation_fee', 42)
    for voter in ('ST1A', 'ST1B'):
        ledger.call(voter, 'register', voice_hash(voter))
    ledger.call('ST1A', 'delegate', 'ST1B')
    ledger.call('ST1CREATOR', 'create', *election_args(name='Old'))
    ledger.call('ST1CREATOR', 'create', *election_args(name='Second'))
    ledger.call('ST1CREATOR', 'update', 0, 'Renamed', 50, ['A', 'B', 'C'])
    ledger.advance(2)
    for voter, option in (('ST1A', 'A'), ('ST1B', 'C')):
        ledger.call(voter, 'submit_vote', 0,
                    votecore.ballot.make_commitment(option, SALT))
    ledger.set_height(11)
    ledger.call('ST1A', 'reveal_vote', 0, 'A', SALT)
    return ledger


def test_json_ready():
    state = votecore.persist.to_dict(populated_ledger().system)
    assert json.loads(json.dumps(state)) == state
    assert state['governance'] == {
        'authority': 'ST2AUTH', 'max_elections': 500, 'creation_fee': 42,
    }
    assert state['next_id'] == 2
    assert state['elections']['0']['kind'] == 'public'
    assert state['elections']['0']['options'] == ['A', 'B', 'C']
    assert state['voters']['ST1A']['delegate'] == 'ST1B'
    assert state['voters']['ST1A']['voice_hash'] == voice_hash('ST1A').hex()
    assert state['tallies'] == {'0': {'A': 1}}


def test_restore():
    original = populated_ledger().system
    restored = votecore.persist.from_dict(
        json.loads(json.dumps(votecore.persist.to_dict(original)))
    )
    assert restored.count() == 2
    assert restored.exists('Renamed')
    assert restored.exists('Second')
    assert not restored.exists('Old')
    election = restored.get_election(0)
    assert election == original.get_election(0)
    assert election.kind is ElectionKind.public
    assert election.currency is Currency.STX
    assert restored.get_election_update(0) == original.get_election_update(0)
    assert restored.get_voter('ST1A') == original.get_voter('ST1A')
    assert restored.get_vote(0, 'ST1A') == original.get_vote(0, 'ST1A')
    assert restored.get_vote(0, 'ST1B') == original.get_vote(0, 'ST1B')
    assert restored.voted_elections('ST1B') == [0]
    assert restored.get_tallies(0) == {'A': 1, 'B': 0, 'C': 0}
    assert restored.compute_winner(0) is None
    assert restored.governance.creation_fee == 42


def test_restored_system_keeps_rules():
    ledger = votecore.ledger.Ledger(
        system=votecore.persist.from_dict(
            votecore.persist.to_dict(populated_ledger().system)
        )
    )
    ledger.set_height(11)
    again = ledger.call('ST1A', 'reveal_vote', 0, 'A', SALT)
    assert isinstance(again.error, votecore.errors.AlreadyRevealedError)
    assert ledger.call('ST1B', 'reveal_vote', 0, 'C', SALT).ok
    assert ledger.system.get_tally(0, 'C') == 1
    dup = ledger.call('ST1CREATOR', 'create', *election_args(name='Second'))
    assert isinstance(dup.error, votecore.errors.ElectionAlreadyExistsError)


@pytest.mark.parametrize('data', [
    [],
    {},
    {'version': 99},
    {'version': votecore.persist.FORMAT_VERSION},
])
def test_invalid_state(data):
    with pytest.raises(ValueError):
        votecore.persist.from_dict(data)


@pytest.mark.parametrize(('key', 'value'), [
    ('voted', []),
    ('tallies', ['A']),
    ('voters', None),
    ('votes', [None]),
    ('governance', 'ST2AUTH'),
])
def test_malformed_state(key, value):
    state = votecore.persist.to_dict(populated_ledger().system)
    state[key] = value
    with pytest.raises(ValueError):
        votecore.persist.from_dict(state)
