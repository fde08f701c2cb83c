'''Election creation, update and lookup.

Elections are identified by a dense integer id, assigned sequentially from
zero, and by a unique name. The registry keeps both indices consistent: an
update that renames an election moves its name index entry atomically.

Creation parameters are checked in a fixed order and the first violated
bound determines the error raised; see :func:`validate_params`. No check
writes anything, so a rejected operation leaves the registry untouched.
'''

import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Type, Union

import votecore.config
from votecore.config import (
    ANONYMITY_LEVEL_BOUNDS,
    MAX_VOTERS_BOUNDS,
    OPTIONS_BOUNDS,
    QUORUM_BOUNDS,
    REVEAL_PERIOD_BOUNDS,
    THRESHOLD_BOUNDS,
)
from votecore.context import CallContext
from votecore.errors import (
    ElectionAlreadyExistsError,
    ElectionNotFoundError,
    InvalidAnonymityLevelError,
    InvalidCurrencyError,
    InvalidDurationError,
    InvalidElectionKindError,
    InvalidJurisdictionError,
    InvalidMaxVotersError,
    InvalidMaxVotesError,
    InvalidMinVotesError,
    InvalidOptionsError,
    InvalidParamError,
    InvalidQuorumError,
    InvalidRevealPeriodError,
    InvalidThresholdError,
    MaxElectionsExceededError,
    NotAuthorizedError,
    TransferFailedError,
    ValidationError,
)
from votecore.governance import GovernanceStore
from votecore.records import (
    Currency,
    Election,
    ElectionKind,
    ElectionUpdate,
)


logger = logging.getLogger(__name__)

BoundsTupleType = Tuple[Optional[int], Optional[int]]


class BoundsChecker:
    '''Check that a value is an integer lying within inclusive bounds.

    Booleans and other non-integer numbers are rejected.

    :param bounds: Lower and upper bound, inclusive. None means the
        respective bound is not checked.
    :param error: Validation error class raised for values out of bounds.
    '''
    def __init__(self,
                 bounds: BoundsTupleType,
                 error: Type[ValidationError],
                 ):
        self.min_value, self.max_value = bounds
        self.error = error

    def is_valid(self, value: int) -> bool:
        return (
            isinstance(value, int) and not isinstance(value, bool)
            and (self.min_value is None or value >= self.min_value)
            and (self.max_value is None or value <= self.max_value)
        )

    def describe(self) -> str:
        if self.max_value is None:
            return f'integer >={self.min_value}'
        elif self.min_value is None:
            return f'integer <={self.max_value}'
        else:
            return f'integer {self.min_value}..{self.max_value}'

    def check(self, value: int) -> int:
        if not self.is_valid(value):
            raise self.error(value, self.describe())
        return value


MAX_VOTERS_CHECKER = BoundsChecker(MAX_VOTERS_BOUNDS, InvalidMaxVotersError)
DURATION_CHECKER = BoundsChecker((1, None), InvalidDurationError)
QUORUM_CHECKER = BoundsChecker(QUORUM_BOUNDS, InvalidQuorumError)
THRESHOLD_CHECKER = BoundsChecker(THRESHOLD_BOUNDS, InvalidThresholdError)
ANONYMITY_LEVEL_CHECKER = BoundsChecker(
    ANONYMITY_LEVEL_BOUNDS, InvalidAnonymityLevelError
)
REVEAL_PERIOD_CHECKER = BoundsChecker(
    REVEAL_PERIOD_BOUNDS, InvalidRevealPeriodError
)
MIN_VOTES_CHECKER = BoundsChecker((1, None), InvalidMinVotesError)
MAX_VOTES_CHECKER = BoundsChecker((1, None), InvalidMaxVotesError)


def check_label(value: Any,
                max_length: int,
                error: Type[ValidationError],
                ) -> str:
    '''Check that a value is a non-empty string of limited length.'''
    if not isinstance(value, str) or not value or len(value) > max_length:
        raise error(value, f'non-empty text of at most {max_length} chars')
    return value


def check_name(name: Any) -> str:
    return check_label(
        name, votecore.config.MAX_NAME_LENGTH, InvalidParamError
    )


def check_options(options: Any) -> Tuple[str, ...]:
    '''Check an option list and return it as a tuple.

    There must be 1 to 10 options, all distinct non-empty labels of at most
    50 characters.
    '''
    min_count, max_count = OPTIONS_BOUNDS
    max_length = votecore.config.MAX_OPTION_LENGTH
    if isinstance(options, (str, bytes)):
        raise InvalidOptionsError(options, 'a sequence of labels')
    labels = tuple(options)
    if (
        not min_count <= len(labels) <= max_count
        or not all(
            isinstance(label, str) and 0 < len(label) <= max_length
            for label in labels
        )
        or len(frozenset(labels)) != len(labels)
    ):
        raise InvalidOptionsError(
            options,
            f'{min_count} to {max_count} distinct non-empty labels'
            f' of at most {max_length} chars'
        )
    return labels


def check_kind(kind: Union[str, ElectionKind]) -> ElectionKind:
    try:
        return ElectionKind(kind)
    except ValueError:
        raise InvalidElectionKindError(
            kind, [k.value for k in ElectionKind]
        ) from None


def check_currency(currency: Union[str, Currency]) -> Currency:
    try:
        return Currency(currency)
    except ValueError:
        raise InvalidCurrencyError(
            currency, [c.value for c in Currency]
        ) from None


def validate_params(name: str,
                    max_voters: int,
                    options: Sequence[str],
                    duration: int,
                    quorum: int,
                    threshold: int,
                    kind: Union[str, ElectionKind],
                    anonymity_level: int,
                    reveal_period: int,
                    jurisdiction: str,
                    currency: Union[str, Currency],
                    min_votes: int,
                    max_votes: int,
                    ) -> Dict[str, Any]:
    '''Validate election creation parameters.

    The checks run in parameter order and the first failing one raises.

    :returns: The parameters in normalized form (options as a tuple, kind and
        currency as enumeration members), keyed by :class:`Election` field
        names.
    :raises ValidationError: A subclass specific to the first parameter out
        of bounds.
    '''
    return dict(
        name=check_name(name),
        max_voters=MAX_VOTERS_CHECKER.check(max_voters),
        options=check_options(options),
        duration=DURATION_CHECKER.check(duration),
        quorum=QUORUM_CHECKER.check(quorum),
        threshold=THRESHOLD_CHECKER.check(threshold),
        kind=check_kind(kind),
        anonymity_level=ANONYMITY_LEVEL_CHECKER.check(anonymity_level),
        reveal_period=REVEAL_PERIOD_CHECKER.check(reveal_period),
        jurisdiction=check_label(
            jurisdiction,
            votecore.config.MAX_JURISDICTION_LENGTH,
            InvalidJurisdictionError,
        ),
        currency=check_currency(currency),
        min_votes=MIN_VOTES_CHECKER.check(min_votes),
        max_votes=MAX_VOTES_CHECKER.check(max_votes),
    )


class ElectionRegistry:
    '''Creates, updates and looks up elections.

    Creating an election costs the creation fee configured in governance,
    paid by the caller to the authority through the context's transfer
    primitive. Only the creator can update an election, and only its name,
    voter capacity and options; timing, quorum, threshold and kind are fixed
    at creation.

    :param governance: Governance store providing the election cap, the fee
        and its recipient.
    '''
    def __init__(self, governance: GovernanceStore):
        self.governance = governance
        self.elections: Dict[int, Election] = {}
        self.updates: Dict[int, ElectionUpdate] = {}
        self.name_index: Dict[str, int] = {}
        self.next_id = 0

    def count(self) -> int:
        return self.next_id

    def exists(self, name: str) -> bool:
        return name in self.name_index

    def get(self, election_id: int) -> Optional[Election]:
        return self.elections.get(election_id)

    def get_by_name(self, name: str) -> Optional[Election]:
        election_id = self.name_index.get(name)
        if election_id is None:
            return None
        return self.elections[election_id]

    def get_id(self, name: str) -> Optional[int]:
        return self.name_index.get(name)

    def get_update(self, election_id: int) -> Optional[ElectionUpdate]:
        return self.updates.get(election_id)

    def require(self, election_id: int) -> Election:
        '''Return an election by id.

        :raises ElectionNotFoundError: If there is no such election.
        '''
        try:
            return self.elections[election_id]
        except KeyError:
            raise ElectionNotFoundError(election_id) from None

    def create(self,
               ctx: CallContext,
               name: str,
               max_voters: int,
               options: Sequence[str],
               duration: int,
               quorum: int,
               threshold: int,
               kind: Union[str, ElectionKind],
               anonymity_level: int,
               reveal_period: int,
               jurisdiction: str,
               currency: Union[str, Currency],
               min_votes: int,
               max_votes: int,
               ) -> int:
        '''Create an election and return its id.

        :raises MaxElectionsExceededError: If the election cap is reached.
        :raises ValidationError: If a parameter is out of bounds.
        :raises ElectionAlreadyExistsError: If the name is taken.
        :raises AuthorityNotVerifiedError: If no fee recipient is configured.
        :raises TransferFailedError: If the creation fee cannot be paid.
        '''
        if self.next_id >= self.governance.max_elections:
            raise MaxElectionsExceededError
        params = validate_params(
            name, max_voters, options, duration, quorum, threshold, kind,
            anonymity_level, reveal_period, jurisdiction, currency,
            min_votes, max_votes,
        )
        if name in self.name_index:
            raise ElectionAlreadyExistsError(name)
        authority = self.governance.require_authority()
        fee = self.governance.creation_fee
        if not ctx.transfer(fee, ctx.caller, authority):
            raise TransferFailedError(
                f'cannot transfer creation fee {fee} from {ctx.caller}'
            )
        election_id = self.next_id
        self.elections[election_id] = Election(
            created_at=ctx.height,
            updated_at=ctx.height,
            creator=ctx.caller,
            is_open=True,
            **params
        )
        self.name_index[name] = election_id
        self.next_id += 1
        logger.info('election %d (%r) created by %s at height %d',
                    election_id, name, ctx.caller, ctx.height)
        return election_id

    def update(self,
               ctx: CallContext,
               election_id: int,
               name: str,
               max_voters: int,
               options: Sequence[str],
               ) -> bool:
        '''Rename an election and replace its capacity and options.

        Renaming an election to its current name is permitted.

        :raises ElectionNotFoundError: If there is no such election.
        :raises NotAuthorizedError: If the caller did not create it.
        :raises ValidationError: If a parameter is out of bounds.
        :raises ElectionAlreadyExistsError: If another election has the name.
        '''
        election = self.require(election_id)
        if election.creator != ctx.caller:
            raise NotAuthorizedError
        name = check_name(name)
        max_voters = MAX_VOTERS_CHECKER.check(max_voters)
        options = check_options(options)
        if self.name_index.get(name, election_id) != election_id:
            raise ElectionAlreadyExistsError(name)
        self.elections[election_id] = election._replace(
            name=name,
            max_voters=max_voters,
            options=options,
            updated_at=ctx.height,
        )
        del self.name_index[election.name]
        self.name_index[name] = election_id
        self.updates[election_id] = ElectionUpdate(
            name=name,
            max_voters=max_voters,
            options=options,
            updated_at=ctx.height,
            updater=ctx.caller,
        )
        logger.info('election %d updated by %s: name %r, %d voters, '
                    'options %s', election_id, ctx.caller, name, max_voters,
                    ', '.join(options))
        return True
