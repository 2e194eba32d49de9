"""Ciphertext asset store: the on-disk cache of encrypted private keys.

Cache decisions are made on file presence only. Encryption is
nondeterministic, so a cached *.enc file is the only way to hand the same
ciphertext out twice.
"""

from pathlib import Path

from .cache_files import read_cache_file, write_cache_file
from .config import KMSConfig
from .encryption import EncryptService, encrypt_bytes, resolve_encrypt_service
from .errors import ParseError
from .logging_config import LOGGER
from .models import EncryptedAssetBundle, RawAssetBundle
from .roles import Role


class CiphertextAssetStore:
    """Loads cached ciphertext for each private key, encrypting the missing ones."""

    def __init__(
        self,
        directory: Path,
        kms_config: KMSConfig,
        encrypt_service: EncryptService | None = None,
    ) -> None:
        """Initialize store.

        Args:
            directory: Assets directory holding <role>-key.pem.enc files
            kms_config: Target KMS key and region
            encrypt_service: Overrides the service resolved from kms_config
        """
        self.directory = Path(directory)
        self.kms_config = kms_config
        self.encrypt_service = encrypt_service or resolve_encrypt_service(kms_config)
        self.encrypted_names: tuple[str, ...] = ()

    def load_or_create(self, raw: RawAssetBundle) -> EncryptedAssetBundle:
        """Return ciphertext for every role's key.

        Cached files are returned verbatim and are not checked against raw.
        The plaintext store deletes a role's *.enc whenever it replaces the
        key, so a cached file always wraps the current key.

        Raises:
            EncryptionError: If the encryption service fails
            ParseError: If a cached ciphertext file is empty
            AssetIOError: If a cache file cannot be read or written
        """
        encrypted: list[str] = []
        ciphertexts: dict[Role, bytes] = {}

        for role in Role:
            name = role.encrypted_key_filename
            ciphertext, created = self._load_or_encrypt(name, raw.key_for(role), role)
            if created:
                encrypted.append(name)
            ciphertexts[role] = ciphertext

        self.encrypted_names = tuple(encrypted)
        return EncryptedAssetBundle.from_ciphertexts(ciphertexts)

    def load_or_encrypt(self, name: str, plaintext: bytes) -> bytes:
        """Return cached ciphertext for an auxiliary file, encrypting it if absent.

        Empty plaintext is never encrypted and yields empty bytes.
        """
        if not plaintext:
            return b""
        ciphertext, _ = self._load_or_encrypt(name, plaintext, None)
        return ciphertext

    def _load_or_encrypt(
        self, name: str, plaintext: bytes, role: Role | None
    ) -> tuple[bytes, bool]:
        path = self.directory / name

        cached = read_cache_file(path, role)
        if cached is not None:
            if not cached:
                raise ParseError("cached ciphertext is empty", role=role, path=path, operation="parse")
            LOGGER.debug("Using cached ciphertext %s", path)
            return cached, False

        ciphertext = encrypt_bytes(self.encrypt_service, self.kms_config, plaintext, role=role, path=path)
        write_cache_file(path, ciphertext, role, private=False)
        LOGGER.info("Encrypted %s with %s", path, self.kms_config.key_arn, extra={"path": str(path)})
        return ciphertext, True
