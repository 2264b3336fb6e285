"""Tests for the password hasher, the enumeration timing defense and request identity."""
import pytest
from starlette.requests import Request

from core import security
from core.security import (
    PBKDF2_KEYLEN,
    authenticate,
    generate_salt,
    get_client_ip,
    get_user_agent,
    hash_password,
    verify_password,
)


def _flip_hex_bit(value: str, index: int = 0) -> str:
    """Flip the lowest bit of the hex digit at *index*."""
    digit = int(value[index], 16) ^ 1
    return value[:index] + format(digit, "x") + value[index + 1:]


def _request(headers: dict) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "POST", "path": "/", "headers": raw})


class _User:
    def __init__(self, password: str):
        self.salt = generate_salt()
        self.password_hash = hash_password(password, self.salt)


def test_salt_is_256_bits_hex_and_unique():
    salts = {generate_salt() for _ in range(20)}
    assert len(salts) == 20
    for salt in salts:
        assert len(salt) == 64
        int(salt, 16)


def test_hash_is_fixed_length_hex_and_deterministic():
    salt = generate_salt()
    digest = hash_password("Sup3rSecret!", salt)
    assert len(digest) == PBKDF2_KEYLEN * 2
    assert digest == hash_password("Sup3rSecret!", salt)
    assert digest == digest.lower()


def test_hash_matches_reference_pbkdf2():
    """Digests stay compatible with PBKDF2-HMAC-SHA512 / 100k rounds over the hex salt text."""
    import hashlib

    salt = "a" * 64
    expected = hashlib.pbkdf2_hmac("sha512", b"pw", salt.encode(), 100_000, 64).hex()
    assert hash_password("pw", salt) == expected


def test_verify_accepts_correct_password():
    salt = generate_salt()
    digest = hash_password("correct horse", salt)
    assert verify_password("correct horse", digest, salt) is True


@pytest.mark.parametrize("mutate", ["password", "salt", "hash"])
def test_verify_rejects_single_bit_mutations(mutate):
    password, salt = "correct horse", generate_salt()
    digest = hash_password(password, salt)

    if mutate == "password":
        password = chr(ord(password[0]) ^ 1) + password[1:]
    elif mutate == "salt":
        salt = _flip_hex_bit(salt, 10)
    else:
        digest = _flip_hex_bit(digest, len(digest) - 1)

    assert verify_password(password, digest, salt) is False


def test_verify_rejects_malformed_stored_hash():
    assert verify_password("pw", "not-hex", generate_salt()) is False
    assert verify_password("pw", "abcd", generate_salt()) is False


def test_authenticate_known_user():
    user = _User("Sup3rSecret!")
    assert authenticate(user, "Sup3rSecret!") is True
    assert authenticate(user, "wrong") is False


def test_authenticate_unknown_user_runs_full_hash(monkeypatch):
    """Missing user and wrong password both perform exactly one key derivation."""
    user = _User("Sup3rSecret!")
    calls = []
    real = security.hash_password

    def counting(password, salt):
        calls.append(salt)
        return real(password, salt)

    monkeypatch.setattr(security, "hash_password", counting)

    assert authenticate(None, "Sup3rSecret!") is False
    assert len(calls) == 1
    assert calls[0] != user.salt  # decoy salt, freshly generated

    assert authenticate(user, "wrong") is False
    assert len(calls) == 2


def test_client_ip_prefers_forwarded_for_first_hop():
    req = _request({"X-Forwarded-For": "1.2.3.4, 10.0.0.1", "X-Real-IP": "9.9.9.9"})
    assert get_client_ip(req) == "1.2.3.4"


def test_client_ip_falls_back_to_real_ip_then_unknown():
    assert get_client_ip(_request({"X-Real-IP": "9.9.9.9"})) == "9.9.9.9"
    assert get_client_ip(_request({})) == "unknown"


def test_user_agent_defaults_to_unknown():
    assert get_user_agent(_request({"User-Agent": "curl/8"})) == "curl/8"
    assert get_user_agent(_request({})) == "unknown"
