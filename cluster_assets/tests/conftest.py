"""Test fixtures for cluster_assets tests."""

import os
from pathlib import Path

import pytest

from cluster_assets.lib.config import AssetsConfig, KMSConfig
from cluster_assets.lib.factory import CertificateAuthority, KeyCertFactory


class DummyEncryptService:
    """Nondeterministic stand-in for KMS: a random nonce prefixed to the plaintext."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, bytes]] = []

    def encrypt(self, key_arn: str, region: str, plaintext: bytes) -> bytes:
        self.calls.append((key_arn, region, plaintext))
        return b"dummy-ciphertext:" + os.urandom(16) + plaintext


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    """Return an empty assets directory."""
    directory = tmp_path / "credentials"
    directory.mkdir()
    return directory


@pytest.fixture
def assets_config() -> AssetsConfig:
    """Return config with short validity periods."""
    return AssetsConfig(key_size=2048, ca_validity_days=30, cert_validity_days=7)


@pytest.fixture
def factory(assets_config: AssetsConfig) -> KeyCertFactory:
    return KeyCertFactory(assets_config)


@pytest.fixture
def ca(factory: KeyCertFactory) -> CertificateAuthority:
    """Generate a throwaway CA."""
    return factory.generate_ca()


@pytest.fixture
def dummy_encrypt_service() -> DummyEncryptService:
    return DummyEncryptService()


@pytest.fixture
def kms_config(dummy_encrypt_service: DummyEncryptService) -> KMSConfig:
    """Return KMS config backed by the dummy encryption service."""
    return KMSConfig(
        key_arn="arn:aws:kms:us-west-1:123456789012:key/test",
        region="us-west-1",
        encrypt_service=dummy_encrypt_service,
    )
