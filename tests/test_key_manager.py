import json

import base58
import pytest
from solders.keypair import Keypair

from config.key_manager import KeyLoadError, load_keypair_from_env, parse_keypair


def test_parse_json_array():
    kp = Keypair()
    assert parse_keypair(json.dumps(list(bytes(kp)))).pubkey() == kp.pubkey()


def test_parse_base58():
    kp = Keypair()
    assert parse_keypair(base58.b58encode(bytes(kp)).decode()).pubkey() == kp.pubkey()


@pytest.mark.parametrize("value", ["", "[1, 2, 3]", "[1, 2", "[\"a\"]", "0OIl", base58.b58encode(b"short").decode()])
def test_invalid_keys(value):
    with pytest.raises(KeyLoadError):
        parse_keypair(value)


def test_load_from_env():
    kp = Keypair()
    env = {"ADMIN_KEYPAIR": json.dumps(list(bytes(kp)))}
    assert load_keypair_from_env(env=env).pubkey() == kp.pubkey()


def test_missing_env_var():
    with pytest.raises(KeyLoadError):
        load_keypair_from_env("USER_KEYPAIR", env={})
