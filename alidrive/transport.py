"""Shared HTTP session: connection pool, timeouts, fixed header decoration."""

import logging
import threading

import requests
from requests.adapters import HTTPAdapter

from . import config
from .context import Context
from .errors import CancelledError

log = logging.getLogger(__name__)


def new_session(pool_connections: int = None, pool_maxsize: int = None) -> requests.Session:
    """Build the one session every request goes through."""
    session = requests.Session()
    session.headers.update(config.COMMON_HEADERS)

    adapter = HTTPAdapter(
        pool_connections=pool_connections or config.POOL_CONNECTIONS,
        pool_maxsize=pool_maxsize or config.POOL_MAXSIZE,
        max_retries=0,  # failures surface to the caller, never retried
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def json_headers(access_token: str = None) -> dict:
    h = dict(config.JSON_HEADERS)
    if access_token:
        h["Authorization"] = f"Bearer {access_token}"
    return h


def _close_quietly(result):
    if isinstance(result, requests.Response):
        result.close()


def call_cancellable(ctx: Context, fn, *args, **kwargs):
    """Run the blocking request ``fn`` so that cancelling ``ctx`` interrupts the wait.

    The call runs on a daemon worker thread. The caller gets the result, or
    CancelledError as soon as ``ctx`` is cancelled or its deadline passes.
    An abandoned call's response is closed when it arrives, and a response
    that arrives after cancellation is closed instead of returned.
    """
    ctx.check()
    done = threading.Event()
    lock = threading.Lock()
    outcome = {}

    def worker():
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            with lock:
                outcome["error"] = exc
        else:
            with lock:
                abandoned = outcome.get("abandoned", False)
                if not abandoned:
                    outcome["result"] = result
            if abandoned:
                _close_quietly(result)
        finally:
            done.set()

    unregister = ctx.on_cancel(done.set)
    try:
        threading.Thread(target=worker, name="alidrive-request", daemon=True).start()
        left = ctx.remaining()
        done.wait(max(0, left) if left is not None else None)
    finally:
        unregister()

    with lock:
        finished = "result" in outcome or "error" in outcome
        if not finished:
            outcome["abandoned"] = True
    if not finished:
        log.debug("Abandoning in-flight request")
        ctx.check()
        raise CancelledError("Context deadline exceeded")

    if "error" in outcome:
        try:
            ctx.check()
        except CancelledError as exc:
            raise exc from outcome["error"]
        raise outcome["error"]
    result = outcome["result"]
    if ctx.cancelled:
        _close_quietly(result)
        ctx.check()
    return result


def post_json(session: requests.Session, url: str, body: dict,
              ctx: Context, access_token: str = None) -> requests.Response:
    log.debug("POST %s", url)
    return call_cancellable(
        ctx,
        session.post,
        url,
        json=body,
        headers=json_headers(access_token),
        timeout=ctx.timeout(),
    )



def decode_json(resp: requests.Response) -> dict:
    """Decode a JSON body; an empty body decodes to ``{}``."""
    if not resp.content:
        return {}
    return resp.json()
