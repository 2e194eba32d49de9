"""Key/cert factory: the cluster CA and the role certificates it signs.

Leaf material can only be issued through a resolved CertificateAuthority,
so every leaf is signed by the CA that is cached alongside it.
"""

from dataclasses import dataclass

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .cert_utils import generate_private_key, serialize_certificate, serialize_private_key
from .certificate_builder import CertificateBuilder
from .config import AssetsConfig
from .errors import GenerationError
from .roles import Role


@dataclass(frozen=True)
class KeyPair:
    """Private key and certificate for one role, with their PEM encodings."""

    role: Role
    private_key: RSAPrivateKey
    certificate: x509.Certificate
    key_pem: bytes
    cert_pem: bytes


@dataclass(frozen=True)
class CertificateAuthority:
    """Resolved CA: freshly generated or loaded from the cache."""

    private_key: RSAPrivateKey
    certificate: x509.Certificate
    key_pem: bytes
    cert_pem: bytes

    def as_key_pair(self) -> KeyPair:
        return KeyPair(
            role=Role.CA,
            private_key=self.private_key,
            certificate=self.certificate,
            key_pem=self.key_pem,
            cert_pem=self.cert_pem,
        )


class KeyCertFactory:
    """Generates RSA key pairs and X.509 certificates per role."""

    def __init__(self, config: AssetsConfig | None = None) -> None:
        """Initialize factory with configuration.

        Args:
            config: Key size, validity periods and per-role profiles
        """
        self.config = config or AssetsConfig()

    def generate_ca(self) -> CertificateAuthority:
        """Generate a new self-signed CA.

        Raises:
            GenerationError: If key generation or self-signing fails
        """
        try:
            key = generate_private_key(self.config.key_size)
            cert = CertificateBuilder.build_ca(
                profile=self.config.profile_for(Role.CA),
                private_key=key,
                validity_days=self.config.ca_validity_days,
            )
        except (ValueError, TypeError) as e:
            raise GenerationError(
                f"failed to generate CA: {e}", role=Role.CA, operation="generate"
            ) from e

        return CertificateAuthority(
            private_key=key,
            certificate=cert,
            key_pem=serialize_private_key(key),
            cert_pem=serialize_certificate(cert),
        )

    def generate_leaf(self, role: Role, ca: CertificateAuthority) -> KeyPair:
        """Generate a key pair for role with a certificate signed by ca.

        Raises:
            GenerationError: If role is the CA, or key generation or signing fails
        """
        if role is Role.CA:
            raise GenerationError(
                "the CA is not a leaf role; use generate_ca()", role=role, operation="generate"
            )

        try:
            key = generate_private_key(self.config.key_size)
            cert = CertificateBuilder.build_leaf_certificate(
                profile=self.config.profile_for(role),
                usage=role.usage,
                private_key=key,
                issuer_cert=ca.certificate,
                issuer_key=ca.private_key,
                validity_days=self.config.cert_validity_days,
            )
        except (ValueError, TypeError) as e:
            raise GenerationError(
                f"failed to generate certificate: {e}", role=role, operation="generate"
            ) from e

        return KeyPair(
            role=role,
            private_key=key,
            certificate=cert,
            key_pem=serialize_private_key(key),
            cert_pem=serialize_certificate(cert),
        )
