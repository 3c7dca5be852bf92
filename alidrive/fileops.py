"""File management operations: list, get, mkdir, remove, batch remove."""

import logging

from . import config
from .api import AliDriveAPI
from .context import Context
from .errors import BatchMismatchError, RemoveError
from .models import ListOptions, ListResponse, RemoteItem
from .transport import decode_json

log = logging.getLogger(__name__)


def list_items(api: AliDriveAPI, parent_id: str = "", marker: str = "",
               options: ListOptions = None, ctx: Context = None) -> ListResponse:
    """List the children of ``parent_id`` (the drive root when empty).

    With an unlimited ``options.limit`` every page is fetched, following
    ``next_marker`` until the server returns an empty one; items are kept in
    arrival order. Otherwise one page is returned along with its marker.
    """
    parent_id = parent_id or config.ROOT_FILE_ID
    options = options or ListOptions()

    if not options.unlimited:
        return ListResponse.from_dict(api.list_files(
            parent_id, marker=marker, limit=options.limit, fetch_all=False,
            order_by=options.order_by, order_direction=options.order_direction,
            ctx=ctx,
        ))

    items = []
    pages = 0
    while True:
        page = ListResponse.from_dict(api.list_files(
            parent_id, marker=marker, limit=config.LIST_LIMIT_ALL, fetch_all=True,
            order_by=options.order_by, order_direction=options.order_direction,
            ctx=ctx,
        ))
        items.extend(page.items)
        pages += 1
        marker = page.next_marker
        if not marker:
            break

    log.debug("Listed %d items of %s in %d pages", len(items), parent_id, pages)
    return ListResponse(items, "")


def get_item(api: AliDriveAPI, file_id: str, ctx: Context = None) -> RemoteItem:
    return RemoteItem.from_dict(api.get_file(file_id, ctx=ctx))


def mkdir(api: AliDriveAPI, parent_id: str, name: str, ctx: Context = None) -> RemoteItem:
    """Create a folder; a name clash makes the server pick a new name."""
    item = RemoteItem.from_dict(api.create_folder(parent_id or config.ROOT_FILE_ID, name, ctx=ctx))
    log.info("Created folder: %s (%s)", item.name, item.file_id)
    return item


def remove(api: AliDriveAPI, file_id: str, force: bool = False, ctx: Context = None):
    """Move an item to the recycle bin, or delete it outright with ``force``.

    Synchronous removals answer 204 with no body; asynchronous ones answer
    with the file id and an async task id.
    """
    resp = api.remove_file(file_id, force=force, ctx=ctx)
    if resp.status_code == 204:
        log.info("%s: %s", "Deleted" if force else "Trashed", file_id)
        return
    try:
        result = decode_json(resp)
    except ValueError as exc:
        raise RemoveError(f"Remove of {file_id} failed (HTTP {resp.status_code})") from exc
    if resp.status_code >= 400 or not result.get("file_id"):
        raise RemoveError(
            f"Remove of {file_id} failed (HTTP {resp.status_code}): "
            f"{result.get('code', '')} {result.get('message', '')}".rstrip()
        )
    log.info("%s: %s (task %s)", "Deleted" if force else "Trashed",
             file_id, result.get("async_task_id", ""))


def batch_remove(api: AliDriveAPI, file_ids: list[str], force: bool = False,
                 ctx: Context = None) -> list[RemoveError | None]:
    """Remove many items in one call.

    Returns one verdict per input id, in input order: ``None`` on success or
    a RemoveError. Raises BatchMismatchError when the server does not answer
    every sub-request.
    """
    if not file_ids:
        return []
    result = api.batch_remove(file_ids, force=force, ctx=ctx)
    responses = result.get("responses") or []
    if len(responses) != len(file_ids):
        raise BatchMismatchError(len(file_ids), len(responses))

    by_id = {r.get("id"): r for r in responses if r.get("id")}
    verdicts = []
    for position, file_id in enumerate(file_ids):
        response = by_id.get(file_id, responses[position])
        status = response.get("status", 0)
        if 200 <= status < 300:
            verdicts.append(None)
        else:
            body = response.get("body") or {}
            verdicts.append(RemoveError(
                f"Remove of {file_id} failed (HTTP {status}): {body.get('code', '')}".rstrip()
            ))

    failed = sum(1 for v in verdicts if v is not None)
    log.info("Batch %s: %d ok, %d failed", "delete" if force else "trash",
             len(verdicts) - failed, failed)
    return verdicts
