"""Asset generation and KMS configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.x509 import oid

from .roles import Role

if TYPE_CHECKING:
    from .encryption import EncryptService


@dataclass
class CertProfile:
    """Subject and SAN policy for one role.

    SANs are supplied by the caller from the cluster topology; none are
    assumed here.
    """

    common_name: str
    organizations: list[str] = field(default_factory=list)
    dns_names: list[str] = field(default_factory=list)
    ip_addresses: list[str] = field(default_factory=list)

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name for certificate generation."""
        attributes = [
            x509.NameAttribute(oid.NameOID.ORGANIZATION_NAME, organization)
            for organization in self.organizations
        ]
        attributes.append(x509.NameAttribute(oid.NameOID.COMMON_NAME, self.common_name))
        return x509.Name(attributes)


def default_profiles() -> dict[Role, CertProfile]:
    """Return subject-only profiles for every role."""
    return {
        Role.CA: CertProfile(common_name="kube-ca", organizations=["kube-aws"]),
        Role.APISERVER: CertProfile(common_name="kube-apiserver"),
        Role.ADMIN: CertProfile(common_name="kube-admin", organizations=["system:masters"]),
        Role.WORKER: CertProfile(common_name="kube-worker"),
        Role.ETCD: CertProfile(common_name="kube-etcd"),
        Role.ETCD_CLIENT: CertProfile(common_name="kube-etcd-client"),
    }


@dataclass
class AssetsConfig:
    """Key sizes, validity periods and per-role certificate profiles."""

    key_size: int = 2048
    ca_validity_days: int = 3650
    cert_validity_days: int = 365
    profiles: dict[Role, CertProfile] = field(default_factory=default_profiles)

    def profile_for(self, role: Role) -> CertProfile:
        """Return the profile for role, falling back to the default subject."""
        profile = self.profiles.get(role)
        if profile is None:
            profile = default_profiles()[role]
        return profile


@dataclass(frozen=True)
class KMSConfig:
    """Target KMS key and the encryption capability used to reach it.

    encrypt_service=None selects the AWS KMS backend.
    """

    key_arn: str
    region: str
    encrypt_service: EncryptService | None = None
