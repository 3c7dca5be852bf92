"""Exception hierarchy.

Every operation fails fast: errors are raised to the immediate caller and
nothing in this package retries a request.
"""


class AliDriveError(Exception):
    """Base exception for all alidrive errors."""


class AuthError(AliDriveError):
    """Token refresh was rejected or returned an incomplete credential set."""


class APIError(AliDriveError):
    """Remote API returned an error body."""

    def __init__(self, code, message="", status=0):
        self.code = code
        self.message = message
        self.status = status
        super().__init__(f"API error {code} (HTTP {status}): {message}")


class CancelledError(AliDriveError):
    """The request context was cancelled or its deadline passed."""


# ── Upload ────────────────────────────────────────────────────────

class UploadError(AliDriveError):
    """Upload failure."""


class FileInvalidError(UploadError):
    """The local source cannot be uploaded (e.g. it is a directory)."""


class ProofError(UploadError):
    """create_with_proof returned a session that cannot be used."""


class PartUploadError(UploadError):
    """A part PUT did not return HTTP 200."""

    def __init__(self, part_number, status=0, reason=""):
        self.part_number = part_number
        self.status = status
        detail = reason or f"HTTP {status}"
        super().__init__(f"Upload of part {part_number} failed: {detail}")


# ── Download ──────────────────────────────────────────────────────

class DownloadError(AliDriveError):
    """Download failure."""


class ItemNotFileError(DownloadError):
    """The item to open is not of type 'file'."""


# ── Remove ────────────────────────────────────────────────────────

class RemoveError(AliDriveError):
    """Remove (trash or delete) of an item failed."""


class BatchMismatchError(RemoveError):
    """A batch response did not carry one answer per requested id."""

    def __init__(self, expected, got):
        self.expected = expected
        self.got = got
        super().__init__(f"Batch request failed: sent {expected} requests, got {got} responses")
