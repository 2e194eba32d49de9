"""Envelope-encryption capability and its AWS KMS backend."""

from pathlib import Path
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import KMSConfig
from .errors import EncryptionError
from .roles import Role


class EncryptService(Protocol):
    """Encrypts bytes under a KMS key.

    Implementations are expected to be nondeterministic: encrypting the same
    plaintext twice returns different ciphertext.
    """

    def encrypt(self, key_arn: str, region: str, plaintext: bytes) -> bytes: ...


class KMSEncryptService:
    """AWS KMS implementation of EncryptService."""

    def __init__(self) -> None:
        self._clients: dict[str, object] = {}

    def _client(self, region: str):
        client = self._clients.get(region)
        if client is None:
            client = boto3.client("kms", region_name=region)
            self._clients[region] = client
        return client

    def encrypt(self, key_arn: str, region: str, plaintext: bytes) -> bytes:
        """Encrypt plaintext with the KMS key key_arn.

        Raises:
            EncryptionError: If the KMS call fails
        """
        try:
            response = self._client(region).encrypt(KeyId=key_arn, Plaintext=plaintext)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            raise EncryptionError(
                f"KMS encrypt failed with {error_code or 'unknown error'} for key {key_arn}",
                operation="encrypt",
            ) from e
        except BotoCoreError as e:
            raise EncryptionError(f"KMS encrypt failed: {e}", operation="encrypt") from e

        return response["CiphertextBlob"]


def resolve_encrypt_service(kms_config: KMSConfig) -> EncryptService:
    """Return the injected service, or the AWS KMS backend when none is set."""
    if kms_config.encrypt_service is not None:
        return kms_config.encrypt_service
    return KMSEncryptService()


def encrypt_bytes(
    service: EncryptService,
    kms_config: KMSConfig,
    plaintext: bytes,
    role: Role | None = None,
    path: Path | None = None,
) -> bytes:
    """Encrypt plaintext once, without retrying.

    Raises:
        EncryptionError: If the service fails or returns no ciphertext
    """
    try:
        ciphertext = service.encrypt(kms_config.key_arn, kms_config.region, plaintext)
    except EncryptionError as e:
        if e.role is None:
            e.role = role
        if e.path is None:
            e.path = path
        raise
    except Exception as e:
        raise EncryptionError(
            f"encryption service failed: {e}", role=role, path=path, operation="encrypt"
        ) from e

    if not ciphertext:
        raise EncryptionError("encryption service returned empty ciphertext", role=role, path=path, operation="encrypt")
    return bytes(ciphertext)
