
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votecore.config
import votecore.errors
import votecore.governance


def test_defaults():
    gov = votecore.governance.GovernanceStore()
    assert gov.authority is None
    assert not gov.has_authority
    assert gov.max_elections == votecore.config.DEFAULT_MAX_ELECTIONS
    assert gov.creation_fee == votecore.config.DEFAULT_CREATION_FEE


def test_settings():
    gov = votecore.governance.GovernanceStore(
        votecore.config.Settings(max_elections=3, creation_fee=0)
    )
    assert gov.max_elections == 3
    assert gov.creation_fee == 0


def test_set_authority_once():
    gov = votecore.governance.GovernanceStore()
    assert gov.set_authority('ST2AUTH')
    assert gov.authority == 'ST2AUTH'
    assert gov.require_authority() == 'ST2AUTH'
    with pytest.raises(votecore.errors.AlreadyConfiguredError):
        gov.set_authority('ST3OTHER')
    assert gov.authority == 'ST2AUTH'


@pytest.mark.parametrize('principal', [
    votecore.config.BURN_PRINCIPAL,
    '',
])
def test_reject_invalid_authority(principal):
    gov = votecore.governance.GovernanceStore()
    with pytest.raises(votecore.errors.InvalidPrincipalError):
        gov.set_authority(principal)
    assert gov.authority is None


def test_require_authority_unset():
    gov = votecore.governance.GovernanceStore()
    with pytest.raises(votecore.errors.AuthorityNotVerifiedError) as excinfo:
        gov.require_authority()
    assert excinfo.value.code == 109


@pytest.mark.parametrize(('setter', 'value'), [
    ('set_max_elections', 10),
    ('set_creation_fee', 1000),
])
def test_setters_need_authority(setter, value):
    gov = votecore.governance.GovernanceStore()
    with pytest.raises(votecore.errors.AuthorityNotVerifiedError):
        getattr(gov, setter)(value)
    gov.set_authority('ST2AUTH')
    assert getattr(gov, setter)(value)


def test_set_values():
    gov = votecore.governance.GovernanceStore()
    gov.set_authority('ST2AUTH')
    gov.set_max_elections(7)
    gov.set_creation_fee(0)
    assert gov.max_elections == 7
    assert gov.creation_fee == 0


@pytest.mark.parametrize(('setter', 'value'), [
    ('set_max_elections', 0),
    ('set_max_elections', -1),
    ('set_creation_fee', -5),
])
def test_setters_reject_out_of_bounds(setter, value):
    gov = votecore.governance.GovernanceStore()
    gov.set_authority('ST2AUTH')
    before = (gov.max_elections, gov.creation_fee)
    with pytest.raises(votecore.errors.InvalidUpdateParamError):
        getattr(gov, setter)(value)
    assert (gov.max_elections, gov.creation_fee) == before
