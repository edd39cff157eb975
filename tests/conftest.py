"""
Shared pytest fixtures for jsonjwt tests.
"""

import pytest
from jwcrypto import jwk, jws
from jwcrypto.common import base64url_encode, json_encode

from jsonjwt import config

# 2023-11-14 22:13:20 UTC, a whole second so relative times are exact
NOW_MS = 1_700_000_000_000
NOW_S = NOW_MS // 1000


def encode_segment(value) -> str:
    """Base64url-encode a JSON value the way a token segment is encoded."""
    return base64url_encode(json_encode(value))


def build_token(header, payload, signature: str = "sig") -> str:
    return f"{encode_segment(header)}.{encode_segment(payload)}.{signature}"


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Keep the CLI state file out of the user's home directory."""
    state_path = tmp_path / "state.json"
    monkeypatch.setattr(config, "STATE_PATH", state_path)
    monkeypatch.setattr(config, "PERSIST", True)
    return state_path


@pytest.fixture
def encode():
    """The segment encoder, for tests that build segments by hand."""
    return encode_segment


@pytest.fixture
def make_token():
    """The token builder, for tests that build tokens by hand."""
    return build_token


@pytest.fixture
def now_s() -> int:
    return NOW_S


@pytest.fixture
def now_ms() -> int:
    return NOW_MS


@pytest.fixture
def sample_header() -> dict:
    return {"alg": "HS256", "typ": "JWT"}


@pytest.fixture
def expired_payload() -> dict:
    """Payload whose exp is ten seconds before NOW_MS."""
    return {"sub": "1", "exp": NOW_S - 10}


@pytest.fixture
def expired_token(sample_header, expired_payload) -> str:
    return build_token(sample_header, expired_payload)


@pytest.fixture
def valid_payload() -> dict:
    return {
        "sub": "user-42",
        "name": "Ada",
        "roles": ["admin", "dev"],
        "iat": NOW_S - 3600,
        "exp": NOW_S + 2 * 86400,
    }


@pytest.fixture
def valid_token(sample_header, valid_payload) -> str:
    return build_token(sample_header, valid_payload, signature="c2lnbmF0dXJl")


@pytest.fixture
def signed_token(valid_payload) -> str:
    """A real Ed25519-signed compact JWS."""
    key = jwk.JWK.generate(kty='OKP', crv='Ed25519')
    token = jws.JWS(json_encode(valid_payload))
    token.add_signature(key, alg='EdDSA', protected=json_encode({"alg": "EdDSA", "typ": "JWT"}))
    return token.serialize(compact=True)


@pytest.fixture
def nested_document() -> dict:
    return {
        "a": 1,
        "b": [1, 2],
        "user": {"name": "Ada", "tags": ["x"], "active": True, "manager": None},
    }
