"""Compaction of asset bundles into the gzip+base64 form embedded in node bootstrap data."""

import base64
import gzip

from .models import CompactAssets, EncryptedAssetBundle, RawAssetBundle, TokenAssets
from .roles import Role


def compact_bytes(data: bytes) -> str:
    """Gzip then base64-encode data; empty input stays empty.

    mtime is pinned so identical input always compacts to identical output.
    """
    if not data:
        return ""
    return base64.b64encode(gzip.compress(data, mtime=0)).decode("ascii")


def decompact(value: str) -> bytes:
    """Reverse compact_bytes."""
    if not value:
        return b""
    return gzip.decompress(base64.b64decode(value))


def compact(
    raw: RawAssetBundle,
    encrypted: EncryptedAssetBundle | None = None,
    tokens: TokenAssets | None = None,
) -> CompactAssets:
    """Merge certificates, keys and tokens into CompactAssets.

    Keys come from encrypted when given, otherwise the plaintext PEM from raw
    is used. Certificates are always plaintext.
    """
    tokens = tokens or TokenAssets()
    fields: dict[str, str] = {}
    for role in Role:
        prefix = role.value.replace("-", "_")
        key = encrypted.key_for(role) if encrypted is not None else raw.key_for(role)
        fields[f"{prefix}_key"] = compact_bytes(key)
        fields[f"{prefix}_cert"] = compact_bytes(raw.cert_for(role))

    return CompactAssets(
        **fields,
        auth_tokens=compact_bytes(tokens.auth_tokens),
        tls_bootstrap_token=compact_bytes(tokens.tls_bootstrap_token),
    )
