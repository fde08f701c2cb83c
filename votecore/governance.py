'''Process-wide governance configuration.'''

import logging
from typing import Optional

import votecore.config
from votecore.config import Settings
from votecore.errors import (
    AlreadyConfiguredError,
    AuthorityNotVerifiedError,
    InvalidPrincipalError,
    InvalidUpdateParamError,
)
from votecore.records import Principal


logger = logging.getLogger(__name__)


class GovernanceStore:
    '''Holds the authority identity, the election cap and the creation fee.

    The authority is the recipient of election creation fees and must be
    configured before voters can register or elections can be created. It
    can be set only once.

    :param settings: Initial election cap and creation fee.
    '''
    def __init__(self, settings: Optional[Settings] = None):
        if settings is None:
            settings = Settings()
        self.authority: Optional[Principal] = None
        self.max_elections = settings.max_elections
        self.creation_fee = settings.creation_fee

    @property
    def has_authority(self) -> bool:
        return self.authority is not None

    def require_authority(self) -> Principal:
        '''Return the configured authority.

        :raises AuthorityNotVerifiedError: If no authority is configured.
        '''
        if self.authority is None:
            raise AuthorityNotVerifiedError
        return self.authority

    def set_authority(self, principal: Principal) -> bool:
        if self.authority is not None:
            raise AlreadyConfiguredError
        if not principal or principal == votecore.config.BURN_PRINCIPAL:
            raise InvalidPrincipalError(principal)
        self.authority = principal
        logger.info('authority set to %s', principal)
        return True

    def set_max_elections(self, n: int) -> bool:
        self.require_authority()
        if n <= 0:
            raise InvalidUpdateParamError(n, '>0', 'max_elections')
        self.max_elections = n
        logger.info('maximum election count set to %d', n)
        return True

    def set_creation_fee(self, fee: int) -> bool:
        self.require_authority()
        if fee < 0:
            raise InvalidUpdateParamError(fee, '>=0', 'creation_fee')
        self.creation_fee = fee
        logger.info('election creation fee set to %d', fee)
        return True
