from jose import jwt

from hireme.config import settings
from hireme.core.security import (
    create_access_token,
    decode_access_token,
    generate_id,
    hash_password,
    verify_password,
)


def test_password_hash_and_verify_roundtrip():
    plain = "StrongPass123!"
    hashed = hash_password(plain)
    assert hashed != plain
    assert verify_password(plain, hashed) is True
    assert verify_password("wrong", hashed) is False


def test_long_passwords_are_not_truncated():
    base = "a" * 80
    hashed = hash_password(base + "1")
    assert verify_password(base + "2", hashed) is False


def test_access_token_carries_subject_and_role():
    token = create_access_token("user-123", "employer")
    assert decode_access_token(token) == "user-123"
    claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    assert claims["role"] == "employer"


def test_decode_invalid_token_and_generators():
    assert decode_access_token("not-a-jwt") is None
    assert len(generate_id()) > 10
    assert generate_id() != generate_id()
