"""A commandline tool for voters and election observers.

Computes ballot commitments and salts for the commit-reveal protocol and
summarizes saved voting system states.
"""

import argparse
import io
import json
import logging
import secrets
import sys
from typing import Optional

import votecore.config
import votecore.persist
from votecore.ballot import make_commitment, reveal_window, voting_window
from votecore.system import VotingSystem

argparser = argparse.ArgumentParser(
    prog='votecore',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any log messages',
)
subparsers = argparser.add_subparsers(dest='command', required=True)
commit_parser = subparsers.add_parser(
    'commit',
    help='compute the commitment to an option with a salt',
)
commit_parser.add_argument('option', help='option label to vote for')
commit_parser.add_argument('salt', help='secret salt as hex')
salt_parser = subparsers.add_parser(
    'salt',
    help='generate a random salt',
)
salt_parser.add_argument(
    '-n', '--n-bytes',
    type=int,
    default=votecore.config.HASH_SIZE,
    help='salt length in bytes',
)
show_parser = subparsers.add_parser(
    'show',
    help='summarize elections in a saved state file',
)
show_parser.add_argument(
    'state_file',
    type=argparse.FileType('r', encoding='utf8'),
    help='JSON state file produced by votecore.persist.to_dict',
)
show_parser.add_argument(
    '-e', '--election-id',
    type=int,
    help='only show this election',
)


def commit(option: str, salt_hex: str) -> str:
    try:
        salt = bytes.fromhex(salt_hex)
    except ValueError as e:
        raise ValueError(f'salt must be hexadecimal: {salt_hex!r}') from e
    return make_commitment(option, salt).hex()


def load_state(state_file: io.TextIOBase) -> VotingSystem:
    return votecore.persist.from_dict(json.load(state_file))


def show_election(system: VotingSystem, election_id: int) -> None:
    election = system.get_election(election_id)
    if election is None:
        print(f'Election {election_id} not found')
        return
    print(f'Election {election_id}: {election.name}')
    print(f'  kind {election.kind.value}, {election.jurisdiction},'
          f' fee currency {election.currency.value},'
          f' {"open" if election.is_open else "closed"}')
    print('  voting at heights {} to {}'.format(*voting_window(election)))
    print('  revealing at heights {} to {}'.format(*reveal_window(election)))
    total = system.total_revealed(election_id)
    quorum = 'met' if system.check_quorum(election_id) else 'not met'
    print(f'  {total} votes revealed of max {election.max_voters},'
          f' quorum of {election.quorum}% {quorum}')
    for option, n_votes in system.get_tallies(election_id).items():
        print(f'  {option:<{votecore.config.MAX_OPTION_LENGTH}} {n_votes:>6}')
    winner = system.compute_winner(election_id)
    if winner is None:
        print(f'  No option reached the threshold of {election.threshold}')
    else:
        print(f'  Winner: {winner}')


def show(state_file: io.TextIOBase,
         election_id: Optional[int] = None,
         ) -> None:
    system = load_state(state_file)
    if election_id is not None:
        show_election(system, election_id)
        return
    print(f'{system.count()} elections')
    for i in range(system.count()):
        show_election(system, i)


def main(command: str,
         verbose: bool = False,
         quiet: bool = False,
         option: Optional[str] = None,
         salt: Optional[str] = None,
         n_bytes: int = votecore.config.HASH_SIZE,
         state_file: Optional[io.TextIOBase] = None,
         election_id: Optional[int] = None,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if command == 'commit':
        print(commit(option, salt))
    elif command == 'salt':
        print(secrets.token_bytes(n_bytes).hex())
    elif command == 'show':
        show(state_file, election_id)
    else:
        raise ValueError(f'unknown command: {command}')


if __name__ == '__main__':
    args = argparser.parse_args()
    try:
        main(**vars(args))
    except ValueError as e:
        print(f'error: {e}', file=sys.stderr)
        sys.exit(1)
