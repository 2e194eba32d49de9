"""Plaintext asset store: the on-disk PEM cache that pins cluster identity."""

from pathlib import Path

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .cache_files import read_cache_file, remove_cache_file, write_cache_file
from .cert_utils import (
    deserialize_certificate,
    deserialize_private_key,
    key_matches_certificate,
    validate_certificate_chain,
)
from .errors import AssetNotFoundError, ParseError
from .factory import CertificateAuthority, KeyCertFactory, KeyPair
from .logging_config import LOGGER
from .models import RawAssetBundle
from .roles import LEAF_ROLES, Role


class PlaintextAssetStore:
    """Loads the PEM keys and certificates in a directory, generating missing ones.

    The CA is resolved first. When it has to be generated, every leaf is
    regenerated too, overwriting any leaf files already on disk, since they
    were signed by a CA that no longer exists.
    """

    def __init__(
        self,
        directory: Path,
        factory: KeyCertFactory | None = None,
        allow_create: bool = True,
    ) -> None:
        """Initialize store.

        Args:
            directory: Assets directory holding <role>-key.pem and <role>.pem
            factory: Key/cert factory used for missing entries
            allow_create: If False, a missing entry raises AssetNotFoundError
        """
        self.directory = Path(directory)
        self.factory = factory or KeyCertFactory()
        self.allow_create = allow_create
        self.generated_roles: tuple[Role, ...] = ()

    def load_or_create(self) -> RawAssetBundle:
        """Return the bundle for this directory, creating missing entries.

        Raises:
            ParseError: If a cached key or certificate is malformed, does not
                match its counterpart, or was not signed by the cached CA
            AssetNotFoundError: If an entry is missing and creation is not allowed
            GenerationError: If generating a missing entry fails
            AssetIOError: If a cache file cannot be read or written
        """
        generated: list[Role] = []

        ca = self._load_ca()
        new_ca = ca is None
        if ca is None:
            ca = self._create_ca()
            generated.append(Role.CA)

        keys = {Role.CA: ca.key_pem}
        certs = {Role.CA: ca.cert_pem}

        for role in LEAF_ROLES:
            pems = None if new_ca else self._load_leaf(role, ca)
            if pems is None:
                pair = self._create_leaf(role, ca)
                pems = (pair.key_pem, pair.cert_pem)
                generated.append(role)
            keys[role], certs[role] = pems

        # The CA is persisted last: until it is on disk, a re-run still sees
        # the CA as missing and regenerates every leaf.
        if new_ca:
            self._persist(ca.as_key_pair())
            LOGGER.info("Persisted new CA in %s", self.directory, extra={"role": Role.CA.value})

        self.generated_roles = tuple(generated)
        return RawAssetBundle.from_pems(keys, certs)

    def _path(self, filename: str) -> Path:
        return self.directory / filename

    def _read_pems(self, role: Role) -> tuple[bytes, bytes] | None:
        """Return (key_pem, cert_pem), or None when either file is absent."""
        key_path = self._path(role.key_filename)
        cert_path = self._path(role.cert_filename)
        key_pem = read_cache_file(key_path, role)
        cert_pem = read_cache_file(cert_path, role)

        if key_pem is None and cert_pem is None:
            return None
        if key_pem is None or cert_pem is None:
            missing = key_path if key_pem is None else cert_path
            LOGGER.warning("Incomplete %s entry, %s is missing", role.value, missing)
            return None
        return key_pem, cert_pem

    def _parse(self, role: Role, key_pem: bytes, cert_pem: bytes) -> tuple[RSAPrivateKey, x509.Certificate]:
        try:
            key = deserialize_private_key(key_pem)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise ParseError(
                f"malformed private key: {e}",
                role=role,
                path=self._path(role.key_filename),
                operation="parse",
            ) from e
        try:
            cert = deserialize_certificate(cert_pem)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise ParseError(
                f"malformed certificate: {e}",
                role=role,
                path=self._path(role.cert_filename),
                operation="parse",
            ) from e

        if not key_matches_certificate(key, cert):
            raise ParseError(
                "private key does not match certificate",
                role=role,
                path=self._path(role.cert_filename),
                operation="parse",
            )
        return key, cert

    def _load_ca(self) -> CertificateAuthority | None:
        pems = self._read_pems(Role.CA)
        if pems is None:
            return None

        key_pem, cert_pem = pems
        key, cert = self._parse(Role.CA, key_pem, cert_pem)
        LOGGER.debug("Loaded CA from %s", self.directory)
        return CertificateAuthority(private_key=key, certificate=cert, key_pem=key_pem, cert_pem=cert_pem)

    def _load_leaf(self, role: Role, ca: CertificateAuthority) -> tuple[bytes, bytes] | None:
        pems = self._read_pems(role)
        if pems is None:
            return None

        key_pem, cert_pem = pems
        _, cert = self._parse(role, key_pem, cert_pem)
        if not validate_certificate_chain(cert, ca.certificate):
            raise ParseError(
                "certificate is not signed by the cached CA",
                role=role,
                path=self._path(role.cert_filename),
                operation="verify",
            )
        LOGGER.debug("Loaded %s key pair from %s", role.value, self.directory)
        return key_pem, cert_pem

    def _require_create(self, role: Role) -> None:
        if not self.allow_create:
            raise AssetNotFoundError(
                "key pair not found and creation is disabled",
                role=role,
                path=self._path(role.key_filename),
                operation="load",
            )

    def _persist(self, pair: KeyPair) -> None:
        # Ciphertext and certificate of the replaced key go first, so neither
        # outlives the key it belongs to. An interrupted write then reads back
        # as an incomplete entry.
        remove_cache_file(self._path(pair.role.encrypted_key_filename), pair.role)
        remove_cache_file(self._path(pair.role.cert_filename), pair.role)
        write_cache_file(self._path(pair.role.key_filename), pair.key_pem, pair.role, private=True)
        write_cache_file(self._path(pair.role.cert_filename), pair.cert_pem, pair.role, private=False)

    def _create_ca(self) -> CertificateAuthority:
        self._require_create(Role.CA)
        ca = self.factory.generate_ca()
        LOGGER.info("Generated new CA for %s; all leaf certificates will be regenerated", self.directory)
        return ca

    def _create_leaf(self, role: Role, ca: CertificateAuthority) -> KeyPair:
        self._require_create(role)
        pair = self.factory.generate_leaf(role, ca)
        self._persist(pair)
        LOGGER.info(
            "Generated %s key pair in %s",
            role.value,
            self.directory,
            extra={"role": role.value, "path": str(self._path(role.key_filename))},
        )
        return pair
