"""Refresh-token exchange and access-token lifecycle."""

import logging
import threading
import time

import requests

from . import config
from .context import Context, background
from .errors import AuthError
from .models import Credentials
from .transport import decode_json, new_session, post_json

log = logging.getLogger(__name__)


def refresh_auth(refresh_token: str, session: requests.Session = None,
                 ctx: Context = None, clock=time.time) -> Credentials:
    """Exchange ``refresh_token`` for a fresh credential set.

    The server rotates the refresh token: the returned Credentials carry the
    new one, and the old one must not be used again. Any missing field in
    the answer raises AuthError.
    """
    if not refresh_token:
        raise AuthError("No refresh token. Pass --refresh-token or set ALIDRIVE_REFRESH_TOKEN.")
    session = session or new_session()
    ctx = ctx or background()

    now = clock()
    resp = post_json(session, config.REFRESH_TOKEN_URL,
                     {"refresh_token": refresh_token}, ctx)
    try:
        result = decode_json(resp)
    except ValueError as exc:
        raise AuthError(f"Token refresh failed: undecodable response (HTTP {resp.status_code})") from exc

    access_token = result.get("access_token") or ""
    expires_in = result.get("expires_in") or 0
    drive_id = result.get("default_drive_id") or ""
    new_refresh = result.get("refresh_token") or ""

    if not (access_token and expires_in and drive_id and new_refresh):
        raise AuthError(
            f"Token refresh failed: {result.get('code', 'incomplete response')} "
            f"{result.get('message', '')}".rstrip()
        )

    log.debug("Token refreshed for drive %s, expires in %ss", drive_id, expires_in)
    return Credentials(
        refresh_token=new_refresh,
        access_token=access_token,
        expires_at=now + expires_in,
        drive_id=drive_id,
    )


class TokenManager:
    """Sole owner of the session credentials.

    Readers of a still-valid token take no lock. Refreshes are serialized:
    at most one exchange is in flight, and callers that queued behind it
    reuse its result.
    """

    def __init__(self, refresh_token: str = None, session: requests.Session = None,
                 clock=time.time):
        self.session = session or new_session()
        self._clock = clock
        self._credentials = Credentials(refresh_token or config.REFRESH_TOKEN)
        self._lock = threading.Lock()

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def drive_id(self) -> str:
        return self._credentials.drive_id

    @property
    def refresh_token(self) -> str:
        return self._credentials.refresh_token

    def ensure_valid_token(self, ctx: Context = None) -> str:
        """Return a usable access token, refreshing first if it expired."""
        creds = self._credentials
        if creds.is_valid(self._clock()):
            return creds.access_token

        with self._lock:
            creds = self._credentials
            if creds.is_valid(self._clock()):
                return creds.access_token
            log.info("Access token missing or expired, refreshing...")
            return self._refresh_locked(ctx).access_token

    def refresh(self, ctx: Context = None) -> Credentials:
        """Force a refresh regardless of expiry."""
        with self._lock:
            return self._refresh_locked(ctx)

    def _refresh_locked(self, ctx: Context = None) -> Credentials:
        creds = refresh_auth(self._credentials.refresh_token, self.session,
                             ctx, clock=self._clock)
        self._credentials = creds
        return creds
