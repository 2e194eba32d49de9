"""Asset bundles passed between the stores, the compactor and callers."""

from dataclasses import asdict, dataclass

from .roles import Role


def _attr(role: Role, kind: str) -> str:
    return f"{role.value.replace('-', '_')}_{kind}"


@dataclass(frozen=True)
class RawAssetBundle:
    """PEM-encoded keys and certificates for every role.

    Backed by the plaintext cache; stable for a given directory until its
    files are removed.
    """

    ca_key: bytes
    ca_cert: bytes
    apiserver_key: bytes
    apiserver_cert: bytes
    admin_key: bytes
    admin_cert: bytes
    worker_key: bytes
    worker_cert: bytes
    etcd_key: bytes
    etcd_cert: bytes
    etcd_client_key: bytes
    etcd_client_cert: bytes

    def key_for(self, role: Role) -> bytes:
        return getattr(self, _attr(role, "key"))

    def cert_for(self, role: Role) -> bytes:
        return getattr(self, _attr(role, "cert"))

    @classmethod
    def from_pems(cls, keys: dict[Role, bytes], certs: dict[Role, bytes]) -> "RawAssetBundle":
        """Build a bundle from per-role PEM maps; every role must be present."""
        fields = {}
        for role in Role:
            fields[_attr(role, "key")] = keys[role]
            fields[_attr(role, "cert")] = certs[role]
        return cls(**fields)


@dataclass(frozen=True)
class EncryptedAssetBundle:
    """Ciphertext of every role's private key. Certificates are never encrypted."""

    ca_key: bytes
    apiserver_key: bytes
    admin_key: bytes
    worker_key: bytes
    etcd_key: bytes
    etcd_client_key: bytes

    def key_for(self, role: Role) -> bytes:
        return getattr(self, _attr(role, "key"))

    @classmethod
    def from_ciphertexts(cls, keys: dict[Role, bytes]) -> "EncryptedAssetBundle":
        return cls(**{_attr(role, "key"): keys[role] for role in Role})


@dataclass(frozen=True)
class TokenAssets:
    """Auxiliary token files, plaintext or encrypted depending on the pipeline."""

    auth_tokens: bytes = b""
    tls_bootstrap_token: bytes = b""


@dataclass(frozen=True)
class CompactAssets:
    """Gzipped, base64-encoded assets consumed by the bootstrap templates.

    Keys are ciphertext in encrypted mode and plaintext PEM otherwise.
    """

    ca_cert: str
    ca_key: str
    apiserver_cert: str
    apiserver_key: str
    admin_cert: str
    admin_key: str
    worker_cert: str
    worker_key: str
    etcd_cert: str
    etcd_key: str
    etcd_client_cert: str
    etcd_client_key: str
    auth_tokens: str = ""
    tls_bootstrap_token: str = ""

    def has_auth_tokens(self) -> bool:
        return len(self.auth_tokens) > 0

    def has_tls_bootstrap_token(self) -> bool:
        return len(self.tls_bootstrap_token) > 0

    def key_for(self, role: Role) -> str:
        return getattr(self, _attr(role, "key"))

    def cert_for(self, role: Role) -> str:
        return getattr(self, _attr(role, "cert"))

    def to_dict(self) -> dict[str, str]:
        """Return field name to compacted value, for JSON output."""
        return asdict(self)
