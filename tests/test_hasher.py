"""Tests for alidrive.hasher."""

import hashlib

from alidrive.hasher import compute_content_hash, compute_pre_hash, matches_content_hash
from alidrive.models import RemoteItem


class TestPreHash:
    def test_first_kilobyte_only(self, tmp_path):
        path = tmp_path / "big.bin"
        head = b"a" * 1024
        path.write_bytes(head + b"b" * 5000)
        assert compute_pre_hash(str(path)) == hashlib.sha1(head).hexdigest().upper()

    def test_small_file(self, tmp_path):
        path = tmp_path / "small.bin"
        path.write_bytes(b"hi")
        assert compute_pre_hash(str(path)) == hashlib.sha1(b"hi").hexdigest().upper()


class TestContentHash:
    def test_whole_file(self, tmp_path):
        path = tmp_path / "f.bin"
        data = bytes(range(256)) * 1000
        path.write_bytes(data)
        assert compute_content_hash(str(path), read_size=1000) == \
            hashlib.sha1(data).hexdigest().upper()

    def test_empty(self, tmp_path):
        path = tmp_path / "e.bin"
        path.write_bytes(b"")
        assert compute_content_hash(str(path)) == hashlib.sha1(b"").hexdigest().upper()

    def test_matches_item(self, tmp_path):
        path = tmp_path / "f.bin"
        path.write_bytes(b"content")
        digest = hashlib.sha1(b"content").hexdigest()
        item = RemoteItem.from_dict({"content_hash": digest, "content_hash_name": "sha1"})
        assert matches_content_hash(str(path), item)

    def test_mismatch_or_unknown(self, tmp_path):
        path = tmp_path / "f.bin"
        path.write_bytes(b"content")
        assert not matches_content_hash(str(path), RemoteItem.from_dict({"content_hash": "00"}))
        assert not matches_content_hash(str(path), RemoteItem.from_dict({}))
        md5_item = RemoteItem.from_dict({"content_hash": "x", "content_hash_name": "md5"})
        assert not matches_content_hash(str(path), md5_item)
