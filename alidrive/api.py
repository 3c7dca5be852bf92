"""Low-level API client: one method per drive endpoint.

Methods return decoded JSON dicts. Shaping results into models and
validating protocol answers is left to uploader / downloader / fileops.
"""

import logging

import requests

from . import config
from .auth import TokenManager
from .context import Context, background
from .errors import APIError
from .transport import call_cancellable, decode_json, new_session, post_json

log = logging.getLogger(__name__)


class AliDriveAPI:
    """Thin wrapper around the drive REST API."""

    def __init__(self, token_manager: TokenManager = None, refresh_token: str = None,
                 pool_connections: int = None, pool_maxsize: int = None):
        self.session = new_session(pool_connections, pool_maxsize)
        self.auth = token_manager or TokenManager(refresh_token, self.session)

    @property
    def drive_id(self) -> str:
        return self.auth.drive_id

    def _authorize(self, ctx: Context = None) -> tuple[Context, str]:
        ctx = ctx or background()
        return ctx, self.auth.ensure_valid_token(ctx)

    def _post(self, url: str, body: dict, ctx: Context, token: str,
              check: bool = True) -> dict:
        resp = post_json(self.session, url, body, ctx, token)
        return self._decode(resp, check)

    @staticmethod
    def _decode(resp: requests.Response, check: bool = True) -> dict:
        try:
            data = decode_json(resp)
        except ValueError as exc:
            raise APIError("InvalidResponse", "response body is not JSON", resp.status_code) from exc
        if check and resp.status_code >= 400:
            raise APIError(data.get("code", "HTTPError"), data.get("message", ""), resp.status_code)
        return data

    # ── Upload (create_with_proof / part PUT / complete) ──────────

    def create_with_proof(self, parent_id: str, name: str, size: int,
                          part_info_list: list[dict], pre_hash: str = "",
                          ctx: Context = None) -> dict:
        ctx, token = self._authorize(ctx)
        return self._post(config.CREATE_WITH_PROOF_URL, {
            "drive_id": self.drive_id,
            "part_info_list": part_info_list,
            "parent_file_id": parent_id,
            "name": name,
            "type": "file",
            "check_name_mode": config.CHECK_NAME_MODE,
            "size": size,
            "pre_hash": pre_hash,
        }, ctx, token, check=False)

    def upload_part(self, upload_url: str, body, ctx: Context = None) -> int:
        """PUT one part body (bytes or iterable of bytes); return the HTTP status."""
        ctx = ctx or background()
        timeout = ctx.timeout()

        def put() -> int:
            resp = self.session.put(upload_url, data=body, timeout=timeout)
            status = resp.status_code
            resp.close()
            return status

        return call_cancellable(ctx, put)

    def complete_upload(self, upload_id: str, file_id: str, ctx: Context = None) -> dict:
        ctx, token = self._authorize(ctx)
        return self._post(config.COMPLETE_UPLOAD_URL, {
            "drive_id": self.drive_id,
            "upload_id": upload_id,
            "file_id": file_id,
        }, ctx, token)

    # ── Listing / meta ────────────────────────────────────────────

    def list_files(self, parent_id: str, marker: str = "", limit: int = config.LIST_LIMIT_ALL,
                   fetch_all: bool = True, order_by: str = config.ORDER_BY_NAME,
                   order_direction: str = config.ORDER_DESC, ctx: Context = None) -> dict:
        ctx, token = self._authorize(ctx)
        body = {
            "drive_id": self.drive_id,
            "parent_file_id": parent_id,
            "order_by": order_by,
            "order_direction": order_direction,
            "fields": "*",
            "all": fetch_all,
            "limit": limit,
            "image_thumbnail_process": config.IMAGE_THUMBNAIL_PROCESS,
            "image_url_process": config.IMAGE_URL_PROCESS,
            "video_thumbnail_process": config.VIDEO_THUMBNAIL_PROCESS,
            "url_expire_sec": config.URL_EXPIRE_SEC,
        }
        if marker:
            body["marker"] = marker
        return self._post(config.FILE_LIST_URL, body, ctx, token)

    def get_file(self, file_id: str, ctx: Context = None) -> dict:
        ctx, token = self._authorize(ctx)
        return self._post(config.FILE_GET_URL, {
            "drive_id": self.drive_id,
            "file_id": file_id,
            "image_thumbnail_process": config.IMAGE_THUMBNAIL_PROCESS,
            "image_url_process": config.IMAGE_URL_PROCESS,
            "video_thumbnail_process": config.VIDEO_THUMBNAIL_PROCESS,
            "url_expire_sec": config.URL_EXPIRE_SEC,
        }, ctx, token)

    # ── File management ───────────────────────────────────────────

    def create_folder(self, parent_id: str, name: str, ctx: Context = None) -> dict:
        ctx, token = self._authorize(ctx)
        return self._post(config.CREATE_FOLDER_URL, {
            "check_name_mode": config.CHECK_NAME_MODE,
            "type": "folder",
            "drive_id": self.drive_id,
            "name": name,
            "parent_file_id": parent_id,
        }, ctx, token)

    def remove_file(self, file_id: str, force: bool = False,
                    ctx: Context = None) -> requests.Response:
        """Trash (or, with ``force``, delete) an item. Returns the raw response."""
        ctx, token = self._authorize(ctx)
        url = config.DELETE_URL if force else config.TRASH_URL
        return post_json(self.session, url, {
            "drive_id": self.drive_id,
            "file_id": file_id,
        }, ctx, token)

    def batch_remove(self, file_ids: list[str], force: bool = False,
                     ctx: Context = None) -> dict:
        """One batch call holding a trash (or delete) sub-request per id."""
        ctx, token = self._authorize(ctx)
        path = config.BATCH_DELETE_PATH if force else config.BATCH_TRASH_PATH
        requests_ = [{
            "url": path,
            "method": "POST",
            "id": file_id,
            "headers": {"Content-Type": "application/json"},
            "body": {"drive_id": self.drive_id, "file_id": file_id},
        } for file_id in file_ids]
        return self._post(config.BATCH_URL, {
            "requests": requests_,
            "resource": "file",
        }, ctx, token)

    # ── Download ──────────────────────────────────────────────────

    def get_download_url(self, file_id: str, ctx: Context = None) -> dict:
        ctx, token = self._authorize(ctx)
        return self._post(config.GET_DOWNLOAD_URL_URL, {
            "drive_id": self.drive_id,
            "file_id": file_id,
        }, ctx, token)

    def download_stream(self, url: str, headers: dict = None,
                        ctx: Context = None) -> requests.Response:
        """Open a streaming GET on a signed download URL."""
        ctx = ctx or background()
        return call_cancellable(
            ctx,
            self.session.get,
            url,
            headers=headers,
            stream=True,
            allow_redirects=True,
            timeout=ctx.timeout(),
        )
