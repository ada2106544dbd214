from __future__ import annotations

import copy

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.utils import base64url_encode

VALID_POST = {
    "message_id": 255,
    "sender_chat": {
        "id": -1001391712027,
        "title": "MotorTG Test Channel",
        "username": "testvoipciannel",
        "type": "channel",
    },
    "chat": {
        "id": -1001391712027,
        "title": "MotorTG Test Channel",
        "username": "testvoipciannel",
        "type": "channel",
    },
    "date": 1680514605,
    "text": "#MotoGP | VITTORIA PER MARCO BEZZECCHI \n@MotorTG",
    "entities": [
        {"offset": 0, "length": 7, "type": "hashtag"},
        {"offset": 10, "length": 34, "type": "bold"},
        {"offset": 45, "length": 8, "type": "mention"},
    ],
}


@pytest.fixture
def post_payload() -> dict:
    """A forwarded channel post, including an undeclared ``sender_chat``."""
    return copy.deepcopy(VALID_POST)


@pytest.fixture
def signing_keys() -> dict[str, bytes | str]:
    private_key = ec.generate_private_key(ec.SECP256R1())
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return {
        "private_pem": private_pem,
        "public_pem": public_pem.decode("ascii"),
        "public_b64": base64url_encode(public_pem).decode("ascii"),
    }


@pytest.fixture
def sign_token(signing_keys):
    def _sign(payload: str = "Token verification", key: bytes | None = None) -> str:
        return jwt.PyJWS().encode(
            payload.encode("utf-8"),
            key or signing_keys["private_pem"],
            algorithm="ES256",
        )

    return _sign


@pytest.fixture
def gate_settings(settings, signing_keys):
    settings.POST_NAMESPACE_PUBLIC_KEY = signing_keys["public_b64"]
    settings.POST_NAMESPACE_TOKEN_PAYLOAD = "Token verification"
    return settings
