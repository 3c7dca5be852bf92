"""alidrive - Aliyun Drive client: refresh-token auth, chunked upload, streamed download."""

__version__ = "0.1.0"
