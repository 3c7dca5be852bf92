"""Byte sources accepted by the uploader.

Anything with ``name``, ``size`` and a forward-only ``read(n)`` can be
uploaded. The adapters here cover local files, in-memory buffers and
arbitrary readable streams of known length.
"""

import io
import os

from .errors import FileInvalidError


class FileSource:
    """Interface: a named, sized, sequentially readable byte stream."""

    name: str = ""
    size: int = 0

    def read(self, n: int = -1) -> bytes:
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class LocalFileSource(FileSource):
    def __init__(self, path: str):
        if os.path.isdir(path):
            raise FileInvalidError(f"Is a directory: {path}")
        self.path = path
        self.name = os.path.basename(path)
        self.size = os.path.getsize(path)
        self._f = open(path, "rb")

    def read(self, n: int = -1) -> bytes:
        return self._f.read(n)

    def close(self):
        self._f.close()


class BytesSource(FileSource):
    def __init__(self, name: str, data: bytes):
        self.name = name
        self.size = len(data)
        self._buf = io.BytesIO(data)

    def read(self, n: int = -1) -> bytes:
        return self._buf.read(n)


class StreamSource(FileSource):
    """Wrap a readable file-like object whose length is known up front."""

    def __init__(self, name: str, size: int, fileobj):
        self.name = name
        self.size = size
        self._f = fileobj

    def read(self, n: int = -1) -> bytes:
        return self._f.read(n)

    def close(self):
        self._f.close()


class LimitedReader:
    """Read at most ``limit`` bytes from ``source``, never past it."""

    def __init__(self, source, limit: int):
        self.source = source
        self.remaining = limit

    def read(self, n: int = -1) -> bytes:
        if self.remaining <= 0:
            return b""
        if n < 0 or n > self.remaining:
            n = self.remaining
        data = self.source.read(n)
        self.remaining -= len(data)
        return data
