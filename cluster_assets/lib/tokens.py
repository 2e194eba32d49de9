"""Kubelet TLS bootstrap token generation and the token files of an assets directory."""

import base64
import secrets
from collections.abc import Callable
from pathlib import Path

from .cache_files import read_cache_file, remove_cache_file, write_cache_file
from .errors import RandomSourceError
from .logging_config import LOGGER
from .models import TokenAssets

AUTH_TOKENS_FILENAME = "tokens.csv"
TLS_BOOTSTRAP_TOKEN_FILENAME = "kubelet-tls-bootstrap-token"
ENCRYPTED_AUTH_TOKENS_FILENAME = AUTH_TOKENS_FILENAME + ".enc"
ENCRYPTED_TLS_BOOTSTRAP_TOKEN_FILENAME = TLS_BOOTSTRAP_TOKEN_FILENAME + ".enc"

TOKEN_BYTES = 32

RandomSource = Callable[[int], bytes]


def random_tls_bootstrap_token(random_source: RandomSource | None = None) -> str:
    """Return 256 random bits in URL-safe base64.

    The URL-safe alphabet has no comma, so the token can be embedded in the
    comma-separated token file read by the kubelet.

    Raises:
        RandomSourceError: If the random source fails or returns too few bytes
    """
    source = random_source or secrets.token_bytes
    try:
        data = source(TOKEN_BYTES)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError(f"secure random source unavailable: {e}", operation="random") from e

    if len(data) != TOKEN_BYTES:
        raise RandomSourceError(
            f"secure random source returned {len(data)} bytes, expected {TOKEN_BYTES}",
            operation="random",
        )
    return base64.urlsafe_b64encode(data).decode("ascii")


class TokenStore:
    """Loads tokens.csv and kubelet-tls-bootstrap-token from an assets directory.

    tokens.csv is optional and never created. The bootstrap token is
    generated and persisted on first use when creation is allowed; any
    ciphertext of a previous token is removed before the new one is written.
    """

    def __init__(
        self,
        directory: Path,
        allow_create: bool = True,
        random_source: RandomSource | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.allow_create = allow_create
        self.random_source = random_source

    def load_or_create(self) -> TokenAssets:
        auth_tokens = read_cache_file(self.directory / AUTH_TOKENS_FILENAME) or b""

        token_path = self.directory / TLS_BOOTSTRAP_TOKEN_FILENAME
        bootstrap_token = read_cache_file(token_path)
        if bootstrap_token is None:
            bootstrap_token = b""
            if self.allow_create:
                bootstrap_token = random_tls_bootstrap_token(self.random_source).encode("ascii")
                remove_cache_file(self.directory / ENCRYPTED_TLS_BOOTSTRAP_TOKEN_FILENAME)
                write_cache_file(token_path, bootstrap_token)
                LOGGER.info("Generated kubelet TLS bootstrap token in %s", token_path)

        return TokenAssets(auth_tokens=auth_tokens, tls_bootstrap_token=bootstrap_token)
