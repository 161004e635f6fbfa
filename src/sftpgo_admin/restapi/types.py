"""API record types for the SFTPGo REST API.

Pydantic models representing the payloads exchanged with the SFTPGo admin
API. Records are immutable and keep unknown fields, so a record read from the
server can be sent back verbatim. Optional fields default to ``None`` and are
left out of serialized payloads.
"""

import enum
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


class ApiRecord(BaseModel):
    """Base for all records exchanged with the server."""

    model_config = ConfigDict(frozen=True, extra="allow")

    def to_payload(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict, dropping unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class AccessToken(ApiRecord):
    """Bearer token issued by the token endpoint."""

    access_token: str
    expires_at: datetime

    @property
    def expires_at_utc(self) -> datetime:
        """Expiry as an aware datetime, naive values are taken as UTC."""
        if self.expires_at.tzinfo is None:
            return self.expires_at.replace(tzinfo=timezone.utc)
        return self.expires_at


class SecretStatus(str, enum.Enum):
    """Encryption status of a Secret payload."""

    PLAIN = "Plain"
    AES_256_GCM = "AES-256-GCM"
    SECRETBOX = "Secretbox"
    GCP = "GCP"
    AWS = "AWS"
    VAULT_TRANSIT = "VaultTransit"
    REDACTED = "Redacted"


class Secret(ApiRecord):
    """Credential value, opaque to the client.

    The status tells the server how to interpret the payload; the client
    never decrypts it. Statuses without a SecretStatus member are kept as
    plain strings.
    """

    status: Annotated[
        SecretStatus | str | None,
        Field(union_mode="left_to_right"),
    ] = None
    payload: str | None = None
    key: str | None = None
    additional_data: str | None = None
    mode: int | None = None


class FilesystemProvider(enum.IntEnum):
    """Storage backend used for a user's home directory."""

    LOCAL = 0
    S3 = 1
    GCS = 2
    AZURE_BLOB = 3
    CRYPTED = 4
    SFTP = 5


class S3FsConfig(ApiRecord):
    """S3 compatible storage settings.

    ``key_prefix``, if set, must not start with "/" and must end with "/".
    ``upload_part_size`` is in MB, 0 selects the SDK default (5MB).
    """

    bucket: str | None = None
    key_prefix: str | None = None
    region: str | None = None
    access_key: str | None = None
    access_secret: Secret | None = None
    endpoint: str | None = None
    storage_class: str | None = None
    upload_part_size: int | None = None
    upload_concurrency: int | None = None


class Filesystem(ApiRecord):
    """Filesystem configuration, tagged by ``provider``.

    Only the S3 settings are modeled; the settings of the other providers
    are passed through as plain JSON objects, and an unknown provider code
    is kept as a plain int.
    """

    provider: Annotated[
        FilesystemProvider | int,
        Field(union_mode="left_to_right"),
    ] = FilesystemProvider.LOCAL
    s3config: S3FsConfig | None = None
    gcsconfig: dict[str, Any] | None = None
    azblobconfig: dict[str, Any] | None = None
    cryptconfig: dict[str, Any] | None = None
    sftpconfig: dict[str, Any] | None = None


class ExtensionsFilter(ApiRecord):
    """Allowed/denied file extensions for a virtual path."""

    path: str = ""
    allowed_extensions: list[str] | None = None
    denied_extensions: list[str] | None = None


class PatternsFilter(ApiRecord):
    """Allowed/denied shell-like file patterns for a virtual path."""

    path: str = ""
    allowed_patterns: list[str] | None = None
    denied_patterns: list[str] | None = None


class UserFilters(ApiRecord):
    """Additional login and file restrictions for a user."""

    allowed_ip: list[str] | None = None
    denied_ip: list[str] | None = None
    denied_login_methods: list[str] | None = None
    denied_protocols: list[str] | None = None
    file_extensions: list[ExtensionsFilter] | None = None
    file_patterns: list[PatternsFilter] | None = None
    max_upload_file_size: int | None = None


class User(ApiRecord):
    """An SFTPGo user.

    Timestamps are unix milliseconds, bandwidth limits are KB/s and a zero
    quota or limit means unlimited.
    """

    id: int = 0
    status: int = 0
    username: str = ""
    expiration_date: int = 0
    password: str | None = None
    public_keys: list[str] | None = None
    home_dir: str = ""
    uid: int = 0
    gid: int = 0
    max_sessions: int = 0
    quota_size: int = 0
    quota_files: int = 0
    permissions: dict[str, list[str]] = {}
    used_quota_size: int = 0
    used_quota_files: int = 0
    last_quota_update: int = 0
    upload_bandwidth: int = 0
    download_bandwidth: int = 0
    last_login: int = 0
    filters: UserFilters = UserFilters()
    filesystem: Filesystem = Filesystem()
    additional_info: str | None = None


class Users(list[User]):
    """List of users as returned by the users endpoint."""

    def filter(self, predicate: Callable[[User], bool]) -> "Users":
        """Return the users matching ``predicate``, in their original order."""
        return Users(user for user in self if predicate(user))


class ConnectionTransfer(ApiRecord):
    """An upload or download running on a connection."""

    operation_type: str | None = None
    start_time: int | None = None
    size: int | None = None
    path: str | None = None


class ConnectionStatus(ApiRecord):
    """Snapshot of an active connection."""

    username: str | None = None
    connection_id: str | None = None
    client_version: str | None = None
    remote_address: str | None = None
    connection_time: int | None = None
    last_activity: int | None = None
    protocol: str | None = None
    active_transfers: list[ConnectionTransfer] | None = None
    command: str | None = None


class UserQuotaScan(ApiRecord):
    """A running quota scan."""

    username: str = ""
    start_time: int = 0

    @property
    def started_at(self) -> datetime:
        """Scan start as an aware UTC datetime."""
        return datetime.fromtimestamp(self.start_time / 1000, tz=timezone.utc)


class UserQuotaScans(list[UserQuotaScan]):
    """List of quota scans as returned by the quota-scans endpoint."""
