
import sys
import os
import io
import json
import hashlib

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votecore.__main__
import votecore.persist

sys.path.append(os.path.join(os.path.dirname(__file__)))
from test_persist import populated_ledger


def test_commit():
    assert votecore.__main__.commit('A', b'salt'.hex()) == (
        hashlib.sha256(b'Asalt').hexdigest()
    )


def test_commit_bad_salt():
    with pytest.raises(ValueError):
        votecore.__main__.commit('A', 'not hex')


def test_parse_commit():
    args = votecore.__main__.argparser.parse_args(['commit', 'A', '00ff'])
    assert args.command == 'commit'
    assert args.option == 'A'
    assert args.salt == '00ff'


def test_salt(capsys):
    votecore.__main__.main('salt', quiet=True, n_bytes=16)
    out = capsys.readouterr().out.strip()
    assert len(bytes.fromhex(out)) == 16


def test_show(capsys):
    state = votecore.persist.to_dict(populated_ledger().system)
    votecore.__main__.show(io.StringIO(json.dumps(state)))
    out = capsys.readouterr().out
    assert '2 elections' in out
    assert 'Election 0: Renamed' in out
    assert 'Election 1: Second' in out
    assert 'voting at heights 0 to 10' in out
    assert 'revealing at heights 11 to 30' in out
    assert '1 votes revealed of max 50' in out
    assert 'No option reached the threshold of 60' in out


def test_show_one(capsys):
    state = votecore.persist.to_dict(populated_ledger().system)
    votecore.__main__.show(io.StringIO(json.dumps(state)), election_id=5)
    assert 'Election 5 not found' in capsys.readouterr().out
