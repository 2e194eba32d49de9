"""Entry points that turn an assets directory into CompactAssets.

Each call runs sequentially: plaintext keys and certificates, then their
ciphertext (encrypted mode only), then token files, then compaction. Any
failure aborts the whole bundle.
"""

from pathlib import Path

from .ciphertext_store import CiphertextAssetStore
from .compactor import compact
from .config import AssetsConfig, KMSConfig
from .factory import KeyCertFactory
from .models import CompactAssets, RawAssetBundle, TokenAssets
from .plaintext_store import PlaintextAssetStore
from .tokens import (
    ENCRYPTED_AUTH_TOKENS_FILENAME,
    ENCRYPTED_TLS_BOOTSTRAP_TOKEN_FILENAME,
    RandomSource,
    TokenStore,
)


def load_or_create_raw_assets(
    directory: Path,
    allow_create: bool = True,
    config: AssetsConfig | None = None,
) -> RawAssetBundle:
    """Load or create the plaintext keys and certificates in directory."""
    store = PlaintextAssetStore(directory, KeyCertFactory(config), allow_create=allow_create)
    return store.load_or_create()


def load_or_create_encrypted_bundle(
    directory: Path,
    allow_create: bool,
    kms_config: KMSConfig,
    config: AssetsConfig | None = None,
    random_source: RandomSource | None = None,
) -> CompactAssets:
    """Return CompactAssets whose keys and tokens are KMS ciphertext.

    The encryption service is only called for entries without a cached
    *.enc file, so repeated calls return equal bundles.

    Args:
        directory: Assets directory used as the plaintext and ciphertext cache
        allow_create: If False, missing keys, certificates or tokens are not generated
        kms_config: Target KMS key, region and encryption service
        config: Key size, validity periods and per-role profiles
        random_source: Secure random source for the bootstrap token

    Returns:
        CompactAssets with plaintext certificates and encrypted keys
    """
    directory = Path(directory)
    plaintext_store = PlaintextAssetStore(directory, KeyCertFactory(config), allow_create=allow_create)
    raw = plaintext_store.load_or_create()

    ciphertext_store = CiphertextAssetStore(directory, kms_config)
    encrypted = ciphertext_store.load_or_create(raw)

    tokens = TokenStore(directory, allow_create=allow_create, random_source=random_source).load_or_create()
    encrypted_tokens = TokenAssets(
        auth_tokens=ciphertext_store.load_or_encrypt(ENCRYPTED_AUTH_TOKENS_FILENAME, tokens.auth_tokens),
        tls_bootstrap_token=ciphertext_store.load_or_encrypt(
            ENCRYPTED_TLS_BOOTSTRAP_TOKEN_FILENAME, tokens.tls_bootstrap_token
        ),
    )

    return compact(raw, encrypted, encrypted_tokens)


def load_or_create_unencrypted_bundle(
    directory: Path,
    allow_create: bool,
    config: AssetsConfig | None = None,
    random_source: RandomSource | None = None,
) -> CompactAssets:
    """Return CompactAssets whose keys and tokens are plaintext."""
    raw = load_or_create_raw_assets(directory, allow_create, config)
    tokens = TokenStore(directory, allow_create=allow_create, random_source=random_source).load_or_create()
    return compact(raw, None, tokens)
