"""Tests for compaction of asset bundles."""

import pytest

from cluster_assets.lib.compactor import compact, compact_bytes, decompact
from cluster_assets.lib.models import EncryptedAssetBundle, RawAssetBundle, TokenAssets
from cluster_assets.lib.roles import ALL_ROLES


@pytest.fixture
def raw() -> RawAssetBundle:
    return RawAssetBundle.from_pems(
        keys={role: f"{role.value} key".encode() for role in ALL_ROLES},
        certs={role: f"{role.value} cert".encode() for role in ALL_ROLES},
    )


@pytest.fixture
def encrypted() -> EncryptedAssetBundle:
    return EncryptedAssetBundle.from_ciphertexts({role: f"{role.value} ciphertext".encode() for role in ALL_ROLES})


class TestCompactBytes:
    """Tests for compact_bytes."""

    def test_is_deterministic(self) -> None:
        """Should produce identical output for identical input."""
        assert compact_bytes(b"-----BEGIN CERTIFICATE-----") == compact_bytes(b"-----BEGIN CERTIFICATE-----")

    def test_decompacts_to_input(self) -> None:
        """Should decompact back to the original bytes."""
        assert decompact(compact_bytes(b"payload")) == b"payload"

    def test_empty_stays_empty(self) -> None:
        """Should compact empty bytes to an empty string."""
        assert compact_bytes(b"") == ""


class TestCompact:
    """Tests for compact()."""

    def test_unencrypted_mode_uses_plaintext_keys(self, raw: RawAssetBundle) -> None:
        """Should compact plaintext keys when no ciphertext is given."""
        assets = compact(raw)
        for role in ALL_ROLES:
            assert decompact(assets.key_for(role)) == raw.key_for(role)
            assert decompact(assets.cert_for(role)) == raw.cert_for(role)

    def test_encrypted_mode_uses_ciphertext_keys(self, raw: RawAssetBundle, encrypted: EncryptedAssetBundle) -> None:
        """Should compact ciphertext keys and plaintext certificates."""
        assets = compact(raw, encrypted)
        for role in ALL_ROLES:
            assert decompact(assets.key_for(role)) == encrypted.key_for(role)
            assert decompact(assets.cert_for(role)) == raw.cert_for(role)

    def test_tokens_are_compacted(self, raw: RawAssetBundle) -> None:
        """Should compact both token files."""
        assets = compact(raw, tokens=TokenAssets(auth_tokens=b"t,u,1", tls_bootstrap_token=b"abc"))
        assert decompact(assets.auth_tokens) == b"t,u,1"
        assert decompact(assets.tls_bootstrap_token) == b"abc"
        assert assets.has_auth_tokens()
        assert assets.has_tls_bootstrap_token()

    def test_missing_tokens_are_absent(self, raw: RawAssetBundle) -> None:
        """Should report both tokens absent when none are given."""
        assets = compact(raw)
        assert not assets.has_auth_tokens()
        assert not assets.has_tls_bootstrap_token()

    def test_same_input_gives_equal_assets(self, raw: RawAssetBundle, encrypted: EncryptedAssetBundle) -> None:
        """Should return equal assets for equal inputs."""
        assert compact(raw, encrypted) == compact(raw, encrypted)
