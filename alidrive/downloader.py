"""Download: resolve item -> check it is a file -> stream its signed URL."""

import logging
import os

import requests

from . import config
from .api import AliDriveAPI
from .context import Context, background
from .errors import DownloadError, ItemNotFileError
from .fileops import get_item
from .hasher import matches_content_hash
from .utils import ProgressBar

log = logging.getLogger(__name__)


def _discard(path: str):
    if os.path.exists(path):
        os.remove(path)


def get_download_url(api: AliDriveAPI, file_id: str, ctx: Context = None) -> str:
    url = api.get_download_url(file_id, ctx=ctx).get("url")
    if not url:
        raise DownloadError(f"No download URL for {file_id}")
    return url


def open_item_file(api: AliDriveAPI, file_id: str, ctx: Context = None):
    """Open the content of a remote file as a streaming response.

    Returns ``(item, response)``; the caller owns and must close the
    response.
    """
    ctx = ctx or background()
    item = get_item(api, file_id, ctx=ctx)
    if not item.is_file:
        raise ItemNotFileError(f"Item {file_id} is a {item.type}, not a file")
    url = item.download_url or item.url or get_download_url(api, file_id, ctx=ctx)

    resp = api.download_stream(url, ctx=ctx)
    if resp.status_code != 200:
        resp.close()
        raise DownloadError(f"Unexpected status {resp.status_code} downloading {file_id}")
    return item, resp


def _write_body(resp: requests.Response, tmp_path: str, item, ctx: Context,
                progress: bool) -> int:
    written = 0
    try:
        with ProgressBar(item.size or 0, desc=f"Downloading {item.name}",
                         enabled=progress) as pbar, open(tmp_path, "wb") as f:
            for chunk in resp.iter_content(chunk_size=config.DOWNLOAD_CHUNK_SIZE):
                ctx.check()
                if chunk:
                    f.write(chunk)
                    written += len(chunk)
                    pbar.update(len(chunk))
    except requests.RequestException as exc:
        _discard(tmp_path)
        raise DownloadError(f"Download of {item.file_id} interrupted: {exc}") from exc
    except BaseException:
        _discard(tmp_path)
        raise
    return written


def download_to_local_file(api: AliDriveAPI, file_id: str, target: str,
                           ctx: Context = None, progress: bool = True,
                           verify: bool = False) -> int:
    """Download into ``target`` (or into it, if it is a directory); return bytes written.

    With ``verify`` the SHA-1 of the downloaded bytes must match the item's
    content hash, otherwise the partial file is discarded and DownloadError
    raised.
    """
    ctx = ctx or background()
    item, resp = open_item_file(api, file_id, ctx=ctx)
    try:
        if os.path.isdir(target):
            target = os.path.join(target, item.name)
        os.makedirs(os.path.dirname(os.path.abspath(target)), exist_ok=True)
        tmp_path = target + ".alidrive.tmp"
        written = _write_body(resp, tmp_path, item, ctx, progress)
    finally:
        resp.close()

    checkable = item.content_hash and (item.content_hash_name or "sha1").lower() == "sha1"
    if verify and checkable and not matches_content_hash(tmp_path, item):
        _discard(tmp_path)
        raise DownloadError(f"Content hash mismatch for {file_id}")

    os.replace(tmp_path, target)
    log.info("Downloaded: %s -> %s (%d bytes)", file_id, target, written)
    return written
