"""Certificate builder for X.509 certificate construction."""

import ipaddress
from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import ExtendedKeyUsageOID

from .cert_utils import generate_serial_number
from .config import CertProfile


class CertificateBuilder:
    """Builds the self-signed cluster CA and the role certificates it signs."""

    @staticmethod
    def build_ca(
        profile: CertProfile,
        private_key: RSAPrivateKey,
        validity_days: int,
    ) -> x509.Certificate:
        """Build self-signed CA certificate.

        Args:
            profile: Subject of the CA
            private_key: RSA private key for signing
            validity_days: Certificate validity period in days

        Returns:
            Self-signed X.509 certificate with CA extensions
        """
        subject = profile.to_x509_name()
        not_before = datetime.now(timezone.utc)
        not_after = not_before + timedelta(days=validity_days)

        builder = (
            x509.CertificateBuilder()
            .subject_name(subject)
            .issuer_name(subject)
            .public_key(private_key.public_key())
            .serial_number(generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=True, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=True,
                    crl_sign=True,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
                critical=False,
            )
        )

        return builder.sign(private_key, hashes.SHA256())

    @staticmethod
    def build_leaf_certificate(
        profile: CertProfile,
        usage: str,
        private_key: RSAPrivateKey,
        issuer_cert: x509.Certificate,
        issuer_key: RSAPrivateKey,
        validity_days: int,
    ) -> x509.Certificate:
        """Build end-entity certificate signed by the CA.

        Args:
            profile: Subject and SANs of the certificate
            usage: 'server' for server-auth, 'client' for client-auth
            private_key: Key whose public half is certified
            issuer_cert: CA certificate (issuer)
            issuer_key: CA private key for signing
            validity_days: Certificate validity period in days

        Returns:
            X.509 end-entity certificate signed by the CA

        Raises:
            ValueError: If usage is unknown or a SAN IP address is malformed
        """
        if usage == "server":
            extended_usage = [ExtendedKeyUsageOID.SERVER_AUTH]
        elif usage == "client":
            extended_usage = [ExtendedKeyUsageOID.CLIENT_AUTH]
        else:
            raise ValueError(f"unknown certificate usage: {usage}")

        not_before = datetime.now(timezone.utc)
        not_after = not_before + timedelta(days=validity_days)

        builder = (
            x509.CertificateBuilder()
            .subject_name(profile.to_x509_name())
            .issuer_name(issuer_cert.subject)
            .public_key(private_key.public_key())
            .serial_number(generate_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(x509.ExtendedKeyUsage(extended_usage), critical=False)
            .add_extension(
                x509.AuthorityKeyIdentifier.from_issuer_public_key(issuer_key.public_key()),
                critical=False,
            )
        )

        sans = build_subject_alternative_names(profile)
        if sans:
            builder = builder.add_extension(x509.SubjectAlternativeName(sans), critical=False)

        return builder.sign(issuer_key, hashes.SHA256())


def build_subject_alternative_names(profile: CertProfile) -> list[x509.GeneralName]:
    """Return DNS and IP SAN entries for profile, DNS names first."""
    names: list[x509.GeneralName] = [x509.DNSName(name) for name in profile.dns_names]
    names.extend(x509.IPAddress(ipaddress.ip_address(ip)) for ip in profile.ip_addresses)
    return names
