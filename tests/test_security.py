from datetime import timedelta

import pytest
from jose import JWTError, jwt

from garage.security.csrf import CsrfTokens
from garage.security.password import hash_password, verify_password
from garage.security.tokens import JWTSettings, create_session_token, decode_session_token

JWT = JWTSettings(secret="unit-test-secret-value")


def test_password_hash_is_salted_and_verifiable():
    h1 = hash_password("Azerty@01", 4)
    h2 = hash_password("Azerty@01", 4)
    assert h1 != h2
    assert h1.startswith("$2")
    assert verify_password("Azerty@01", h1)
    assert not verify_password("azerty@01", h1)


def test_password_rejects_empty_and_garbage_hash():
    with pytest.raises(ValueError):
        hash_password("", 4)
    assert verify_password("", hash_password("x", 4)) is False
    assert verify_password("Azerty@01", "not-a-bcrypt-hash") is False


def test_session_token_round_trip_claims():
    token = create_session_token(user_id=42, role="admin", settings=JWT)
    decoded = decode_session_token(token, JWT)
    assert decoded["sub"] == "42"
    assert decoded["role"] == "admin"
    assert decoded["typ"] == "session"
    assert decoded["iss"] == "garage-app"
    assert decoded["aud"] == "garage-users"
    assert decoded["exp"] - decoded["iat"] == 24 * 3600


def test_session_token_tampered_signature_is_rejected():
    token = create_session_token(user_id=1, role="client", settings=JWT)
    head, payload, sig = token.split(".")
    forged = f"{head}.{payload}.{'B' if sig[0] == 'A' else 'A'}{sig[1:]}"
    with pytest.raises(JWTError):
        decode_session_token(forged, JWT)


def test_session_token_other_secret_is_rejected():
    token = create_session_token(user_id=1, role="client", settings=JWTSettings(secret="another-secret"))
    with pytest.raises(JWTError):
        decode_session_token(token, JWT)


def test_session_token_expired_is_rejected():
    expired = JWTSettings(secret=JWT.secret, session_ttl=timedelta(seconds=-10))
    token = create_session_token(user_id=1, role="client", settings=expired)
    with pytest.raises(JWTError):
        decode_session_token(token, JWT)


def test_session_token_wrong_audience_is_rejected():
    other = JWTSettings(secret=JWT.secret, audience="someone-else")
    token = create_session_token(user_id=1, role="client", settings=other)
    with pytest.raises(JWTError):
        decode_session_token(token, JWT)


def test_session_token_wrong_type_is_rejected():
    token = jwt.encode(
        {"iss": JWT.issuer, "aud": JWT.audience, "sub": "1", "typ": "refresh"},
        JWT.secret,
        algorithm=JWT.algorithm,
    )
    with pytest.raises(JWTError):
        decode_session_token(token, JWT)


def test_csrf_token_verifies_with_same_secret_only():
    tokens = CsrfTokens("csrf-secret")
    token = tokens.create()
    assert "." in token
    assert tokens.verify(token)
    assert not CsrfTokens("other-secret").verify(token)


@pytest.mark.parametrize("bad", [None, "", "no-separator", ".sig", "salt.", "salt.wrong", "sel.é"])
def test_csrf_token_rejects_malformed(bad):
    assert CsrfTokens("csrf-secret").verify(bad) is False


def test_csrf_secret_required():
    with pytest.raises(ValueError):
        CsrfTokens("")
