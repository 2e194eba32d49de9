"""Tests for bootstrap token generation and the token store."""

import base64
from pathlib import Path

import pytest

from cluster_assets.lib.errors import RandomSourceError
from cluster_assets.lib.tokens import TokenStore, random_tls_bootstrap_token


class TestRandomTLSBootstrapToken:
    """Tests for random_tls_bootstrap_token."""

    def test_contains_no_comma(self) -> None:
        """Should never contain a comma, so the token fits a CSV field."""
        for _ in range(200):
            assert "," not in random_tls_bootstrap_token()

    def test_decodes_to_256_bits(self) -> None:
        """Should encode exactly 256 bits of randomness."""
        decoded = base64.urlsafe_b64decode(random_tls_bootstrap_token())
        assert len(decoded) * 8 == 256

    def test_successive_tokens_differ(self) -> None:
        """Should return a different token on each call."""
        assert random_tls_bootstrap_token() != random_tls_bootstrap_token()

    def test_uses_injected_random_source(self) -> None:
        """Should draw its bytes from the supplied random source."""
        token = random_tls_bootstrap_token(lambda n: b"\xff" * n)
        assert base64.urlsafe_b64decode(token) == b"\xff" * 32
        assert "_" in token

    def test_unavailable_source_raises(self) -> None:
        """Should raise RandomSourceError when the source fails."""

        def broken(n: int) -> bytes:
            raise OSError("no entropy")

        with pytest.raises(RandomSourceError, match="no entropy"):
            random_tls_bootstrap_token(broken)

    def test_short_read_raises(self) -> None:
        """Should raise RandomSourceError when the source returns too few bytes."""
        with pytest.raises(RandomSourceError, match="returned 16 bytes"):
            random_tls_bootstrap_token(lambda n: b"\x00" * 16)


class TestTokenStore:
    """Tests for TokenStore.load_or_create."""

    def test_generates_and_persists_bootstrap_token(self, assets_dir: Path) -> None:
        """Should generate a bootstrap token and write it to the cache directory."""
        tokens = TokenStore(assets_dir).load_or_create()

        assert tokens.tls_bootstrap_token == (assets_dir / "kubelet-tls-bootstrap-token").read_bytes()
        assert len(base64.urlsafe_b64decode(tokens.tls_bootstrap_token)) == 32

    def test_second_call_reads_same_token(self, assets_dir: Path) -> None:
        """Should return the cached token on a second run instead of generating one."""

        def exhausted(n: int) -> bytes:
            raise OSError("random source must not be used")

        first = TokenStore(assets_dir).load_or_create()
        second = TokenStore(assets_dir, random_source=exhausted).load_or_create()

        assert first == second

    def test_new_token_removes_stale_ciphertext(self, assets_dir: Path) -> None:
        """Should delete a cached encrypted token left behind by an earlier token."""
        stale = assets_dir / "kubelet-tls-bootstrap-token.enc"
        stale.write_bytes(b"ciphertext-of-an-old-token")

        TokenStore(assets_dir).load_or_create()

        assert not stale.exists()
        assert (assets_dir / "kubelet-tls-bootstrap-token").exists()

    def test_cached_token_keeps_its_ciphertext(self, assets_dir: Path) -> None:
        """Should leave the encrypted token alone when the plaintext token is reused."""
        TokenStore(assets_dir).load_or_create()
        cached = assets_dir / "kubelet-tls-bootstrap-token.enc"
        cached.write_bytes(b"ciphertext")

        TokenStore(assets_dir).load_or_create()

        assert cached.read_bytes() == b"ciphertext"

    def test_auth_tokens_read_verbatim(self, assets_dir: Path) -> None:
        """Should return tokens.csv byte for byte."""
        (assets_dir / "tokens.csv").write_bytes(b"secret,kubelet,10001\n")
        assert TokenStore(assets_dir).load_or_create().auth_tokens == b"secret,kubelet,10001\n"

    def test_auth_tokens_default_empty(self, assets_dir: Path) -> None:
        """Should not create tokens.csv when it is absent."""
        TokenStore(assets_dir).load_or_create()
        assert not (assets_dir / "tokens.csv").exists()

    def test_creation_disabled_leaves_token_empty(self, assets_dir: Path) -> None:
        """Should return an empty token and write nothing when creation is disabled."""
        tokens = TokenStore(assets_dir, allow_create=False).load_or_create()
        assert tokens.tls_bootstrap_token == b""
        assert not (assets_dir / "kubelet-tls-bootstrap-token").exists()
