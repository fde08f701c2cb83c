'''Serialization of the voting system state to JSON-ready dictionaries.

:func:`to_dict` captures the complete state of a
:class:`votecore.system.VotingSystem` (governance, voters, elections and
their updates, votes and tallies) using only JSON-compatible types; byte
strings are stored as hex and enumerations by value. :func:`from_dict`
builds a new system from such a dictionary and :func:`load_state` replaces
the state of an existing one, which is how the ledger runtime rolls back a
failed operation.
'''

import enum
from typing import Any, Callable, Dict, List

import votecore.system
from votecore.records import (
    Currency,
    Election,
    ElectionKind,
    ElectionUpdate,
    Vote,
    Voter,
)


FORMAT_VERSION = 1


def serialize_value(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif type(value) in CONVERTIBLE_TYPES:
        return CONVERTIBLE_TYPES[type(value)](value)
    elif hasattr(value, '_asdict'):
        return {
            key: serialize_value(val)
            for key, val in value._asdict().items()
        }
    elif hasattr(value, 'items') and hasattr(value, 'keys'):
        return {str(key): serialize_value(val) for key, val in value.items()}
    elif hasattr(value, '__iter__'):
        return [serialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def _hex_or_none(value: Any) -> Any:
    return None if value is None else bytes.fromhex(value)


def election_from_dict(data: Dict[str, Any]) -> Election:
    data = dict(data)
    data['options'] = tuple(data['options'])
    data['kind'] = ElectionKind(data['kind'])
    data['currency'] = Currency(data['currency'])
    return Election(**data)


def update_from_dict(data: Dict[str, Any]) -> ElectionUpdate:
    data = dict(data)
    data['options'] = tuple(data['options'])
    return ElectionUpdate(**data)


def voter_from_dict(data: Dict[str, Any]) -> Voter:
    data = dict(data)
    data['voice_hash'] = bytes.fromhex(data['voice_hash'])
    return Voter(**data)


def vote_from_dict(data: Dict[str, Any]) -> Vote:
    data = dict(data)
    data['commitment'] = bytes.fromhex(data['commitment'])
    data['salt'] = _hex_or_none(data['salt'])
    return Vote(**data)


def to_dict(system) -> Dict[str, Any]:
    '''Serialize the state of a voting system to a JSON-ready dictionary.'''
    governance = system.governance
    registry = system.registry
    ballots = system.ballots
    return {
        'version': FORMAT_VERSION,
        'governance': {
            'authority': governance.authority,
            'max_elections': governance.max_elections,
            'creation_fee': governance.creation_fee,
        },
        'voters': serialize_value(system.directory.voters),
        'next_id': registry.next_id,
        'elections': serialize_value(registry.elections),
        'updates': serialize_value(registry.updates),
        'votes': [
            dict(election_id=election_id, voter=voter, **serialize_value(vote))
            for (election_id, voter), vote in ballots.votes.items()
        ],
        'voted': serialize_value(ballots.voted),
        'tallies': serialize_value(system.tallies.counts),
    }


def load_state(system, data: Dict[str, Any]):
    '''Replace the state of a voting system by a serialized one.

    The new state is fully parsed before the system is touched.

    :param system: The voting system to load the state into.
    :param data: A dictionary created by :func:`to_dict`.
    :returns: The system passed in.
    :raises ValueError: If the dictionary is not a valid serialized state.
    '''
    if not isinstance(data, dict):
        raise ValueError(f'invalid state: dict expected, got {data!r}')
    version = data.get('version')
    if version != FORMAT_VERSION:
        raise ValueError(f'unsupported state format version: {version!r}')
    try:
        voters = _parse_mapping(data['voters'], str, voter_from_dict)
        elections = _parse_mapping(data['elections'], int, election_from_dict)
        updates = _parse_mapping(data['updates'], int, update_from_dict)
        votes = {}
        for vote_data in data['votes']:
            vote_data = dict(vote_data)
            key = (int(vote_data.pop('election_id')), vote_data.pop('voter'))
            votes[key] = vote_from_dict(vote_data)
        voted = {
            voter: [int(election_id) for election_id in ids]
            for voter, ids in data['voted'].items()
        }
        tallies = {
            int(election_id): {
                option: int(count) for option, count in counts.items()
            }
            for election_id, counts in data['tallies'].items()
        }
        governance = data['governance']
        authority = governance['authority']
        max_elections = int(governance['max_elections'])
        creation_fee = int(governance['creation_fee'])
        next_id = int(data['next_id'])
    except (AttributeError, KeyError, TypeError) as e:
        raise ValueError(f'invalid state: {e!r}') from e
    system.governance.authority = authority
    system.governance.max_elections = max_elections
    system.governance.creation_fee = creation_fee
    system.directory.voters = voters
    system.registry.elections = elections
    system.registry.updates = updates
    system.registry.name_index = {
        election.name: election_id
        for election_id, election in elections.items()
    }
    system.registry.next_id = next_id
    system.ballots.votes = votes
    system.ballots.voted = voted
    system.tallies.counts = tallies
    return system


def from_dict(data: Dict[str, Any]):
    '''Build a voting system from a dictionary created by :func:`to_dict`.'''
    return load_state(votecore.system.VotingSystem(), data)


def _parse_mapping(data: Dict[str, Any],
                   key_type: Callable[[Any], Any],
                   parser: Callable[[Dict[str, Any]], Any],
                   ) -> Dict[Any, Any]:
    return {key_type(key): parser(val) for key, val in data.items()}


ATOMIC_TYPES: List[type] = [
    str, int, float, bool, type(None),
]

CONVERTIBLE_TYPES: Dict[type, Callable] = {
    bytes: bytes.hex,
}
