"""Value objects exchanged with the drive API."""

from . import config


class Credentials:
    """Immutable snapshot of the current session credentials.

    The token manager swaps whole instances; attributes cannot be rebound.
    """

    __slots__ = ("refresh_token", "access_token", "expires_at", "drive_id")

    def __init__(self, refresh_token: str, access_token: str = "",
                 expires_at: float = 0, drive_id: str = ""):
        object.__setattr__(self, "refresh_token", refresh_token)
        object.__setattr__(self, "access_token", access_token)
        object.__setattr__(self, "expires_at", expires_at)
        object.__setattr__(self, "drive_id", drive_id)

    def __setattr__(self, name, value):
        raise AttributeError(f"Credentials is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Credentials is immutable, cannot delete {name!r}")

    def is_valid(self, now: float) -> bool:
        return bool(self.access_token) and now < self.expires_at

    def __repr__(self):
        return f"Credentials(drive_id={self.drive_id!r}, expires_at={self.expires_at!r})"


class FileDescriptor:
    """What the server is told about a file before its bytes are sent."""

    __slots__ = ("name", "size", "pre_hash")

    def __init__(self, name: str, size: int, pre_hash: str = ""):
        if size < 0:
            raise ValueError(f"negative file size: {size}")
        self.name = name
        self.size = size
        self.pre_hash = pre_hash

    @classmethod
    def from_source(cls, source, pre_hash: str = "") -> "FileDescriptor":
        return cls(source.name, source.size, pre_hash)

    def __repr__(self):
        return f"FileDescriptor(name={self.name!r}, size={self.size!r})"


class PartInfo:
    __slots__ = ("part_number", "upload_url")

    def __init__(self, part_number: int, upload_url: str = ""):
        self.part_number = part_number
        self.upload_url = upload_url

    def to_dict(self) -> dict:
        d = {"part_number": self.part_number}
        if self.upload_url:
            d["upload_url"] = self.upload_url
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "PartInfo":
        return cls(d.get("part_number", 0), d.get("upload_url") or "")


class UploadSession:
    """upload_id / file_id / part plan returned by create_with_proof."""

    __slots__ = ("upload_id", "file_id", "part_info_list")

    def __init__(self, upload_id: str, file_id: str, part_info_list: list[PartInfo]):
        self.upload_id = upload_id
        self.file_id = file_id
        self.part_info_list = part_info_list


class RemoteItem:
    """Metadata of a remote file or folder, built wholesale from a response."""

    _FIELDS = (
        "drive_id", "domain_id", "file_id", "parent_file_id", "name", "type",
        "size", "content_hash", "content_hash_name", "crc64_hash",
        "content_type", "file_extension", "category", "created_at",
        "updated_at", "download_url", "url", "thumbnail", "upload_id",
        "encrypt_mode", "status", "hidden", "starred",
    )

    __slots__ = _FIELDS + ("raw",)

    def __init__(self, **fields):
        for name in self._FIELDS:
            setattr(self, name, fields.get(name))
        self.raw = fields.get("raw") or {}

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"

    @classmethod
    def from_dict(cls, d: dict) -> "RemoteItem":
        fields = {name: d.get(name) for name in cls._FIELDS}
        # createWithFolders answers with file_name instead of name
        if fields["name"] is None:
            fields["name"] = d.get("file_name")
        if fields["size"] is None:
            fields["size"] = 0
        return cls(raw=dict(d), **fields)

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self._FIELDS}

    def __repr__(self):
        return f"RemoteItem(file_id={self.file_id!r}, name={self.name!r}, type={self.type!r})"


class ListOptions:
    """Optional list parameters. ``limit=0`` means fetch every page."""

    __slots__ = ("limit", "order_by", "order_direction")

    def __init__(self, limit: int = config.LIST_LIMIT_UNLIMITED,
                 order_by: str = config.ORDER_BY_NAME,
                 order_direction: str = config.ORDER_DESC):
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        if order_by not in config.ORDER_BY_CHOICES:
            raise ValueError(f"unknown order_by: {order_by!r}")
        if order_direction not in config.ORDER_DIRECTION_CHOICES:
            raise ValueError(f"unknown order_direction: {order_direction!r}")
        self.limit = limit
        self.order_by = order_by
        self.order_direction = order_direction

    @property
    def unlimited(self) -> bool:
        return self.limit == config.LIST_LIMIT_UNLIMITED


class ListResponse:
    __slots__ = ("items", "next_marker")

    def __init__(self, items: list[RemoteItem] = None, next_marker: str = ""):
        self.items = items if items is not None else []
        self.next_marker = next_marker

    @classmethod
    def from_dict(cls, d: dict) -> "ListResponse":
        items = [RemoteItem.from_dict(i) for i in d.get("items") or []]
        return cls(items, d.get("next_marker") or "")
