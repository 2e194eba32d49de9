"""Certificate roles and their on-disk cache file names."""

from enum import Enum


class Role(Enum):
    """Role tag of a key pair; the value is the cache file stem."""

    CA = "ca"
    APISERVER = "apiserver"
    ADMIN = "admin"
    WORKER = "worker"
    ETCD = "etcd"
    ETCD_CLIENT = "etcd-client"

    @property
    def usage(self) -> str:
        """Return 'ca', 'server' or 'client'."""
        if self is Role.CA:
            return "ca"
        if self in (Role.APISERVER, Role.ETCD):
            return "server"
        return "client"

    @property
    def key_filename(self) -> str:
        return f"{self.value}-key.pem"

    @property
    def cert_filename(self) -> str:
        return f"{self.value}.pem"

    @property
    def encrypted_key_filename(self) -> str:
        return f"{self.key_filename}.enc"


# Generation order after the CA has been resolved
LEAF_ROLES: tuple[Role, ...] = (
    Role.APISERVER,
    Role.ADMIN,
    Role.WORKER,
    Role.ETCD,
    Role.ETCD_CLIENT,
)

ALL_ROLES: tuple[Role, ...] = (Role.CA, *LEAF_ROLES)
