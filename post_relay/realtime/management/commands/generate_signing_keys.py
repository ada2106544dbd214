from __future__ import annotations

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandParser
from jwt.utils import base64url_encode

from post_relay.realtime.gate import ALGORITHM


class Command(BaseCommand):
    help = (
        "Generate an ES256 key pair for the /post namespace gate and print "
        "both keys base64url-encoded"
    )

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--issue-token",
            dest="issue_token",
            action="store_true",
            help=(
                "Also print a token signed with the new private key over "
                "POST_NAMESPACE_TOKEN_PAYLOAD."
            ),
        )

    def handle(self, *args, **options) -> str | None:
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

        self.stdout.write("public: " + base64url_encode(public_pem).decode("ascii"))
        self.stdout.write("private: " + base64url_encode(private_pem).decode("ascii"))

        if options.get("issue_token"):
            token = jwt.PyJWS().encode(
                settings.POST_NAMESPACE_TOKEN_PAYLOAD.encode("utf-8"),
                private_pem,
                algorithm=ALGORITHM,
            )
            self.stdout.write("token: " + token)
        return None
