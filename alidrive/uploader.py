"""Upload: proof negotiation + sequential part PUTs + completion.

    negotiate()  create_with_proof registers the file and hands back one
                 signed upload URL per part
    upload_part() streams at most MAX_PART_SIZE bytes to one URL
    complete()   tells the server every part is in place

A failed part aborts the whole upload. Nothing is resumed and the
orphaned server-side session is left as is; the caller starts over.
"""

import logging
import os

import requests

from . import config
from .api import AliDriveAPI
from .context import Context, background
from .errors import PartUploadError, ProofError
from .fileops import mkdir
from .hasher import compute_pre_hash
from .models import FileDescriptor, PartInfo, RemoteItem, UploadSession
from .streams import LimitedReader, LocalFileSource
from .utils import ProgressBar

log = logging.getLogger(__name__)


# ── Part plan ─────────────────────────────────────────────────────

def part_count(size: int) -> int:
    """ceil(size / MAX_PART_SIZE); an empty file still has one part."""
    return max(1, (size + config.MAX_PART_SIZE - 1) // config.MAX_PART_SIZE)


def make_part_info_list(size: int) -> list[PartInfo]:
    return [PartInfo(n) for n in range(1, part_count(size) + 1)]


# ── Proof negotiation ─────────────────────────────────────────────

def negotiate(api: AliDriveAPI, parent_id: str, descriptor: FileDescriptor,
              ctx: Context = None) -> UploadSession:
    """Register the upload and obtain one upload URL per part.

    Raises ProofError unless the answer carries a file_id, an upload_id and
    exactly one upload URL for every planned part. The returned URLs are
    merged into the local plan, so the session always covers parts
    1..part_count(size) in order.
    """
    parts = make_part_info_list(descriptor.size)
    result = api.create_with_proof(
        parent_id=parent_id or config.ROOT_FILE_ID,
        name=descriptor.name,
        size=descriptor.size,
        part_info_list=[p.to_dict() for p in parts],
        pre_hash=descriptor.pre_hash or "",
        ctx=ctx,
    )

    file_id = result.get("file_id") or ""
    upload_id = result.get("upload_id") or ""
    returned = [PartInfo.from_dict(p) for p in result.get("part_info_list") or []]

    if not file_id or not upload_id or not returned:
        detail = " ".join(filter(None, (result.get("code"), result.get("message"))))
        raise ProofError(f"create_with_proof failed for {descriptor.name}: "
                         f"{detail or 'missing file_id, upload_id or parts'}")

    missing = [p.part_number for p in returned if not p.upload_url]
    if missing:
        raise ProofError(f"create_with_proof returned no upload URL for parts {missing}")

    urls = {}
    for p in returned:
        if not 1 <= p.part_number <= len(parts):
            raise ProofError(f"create_with_proof returned unplanned part {p.part_number} "
                             f"(planned 1..{len(parts)})")
        if p.part_number in urls:
            raise ProofError(f"create_with_proof returned part {p.part_number} twice")
        urls[p.part_number] = p.upload_url

    unanswered = [p.part_number for p in parts if p.part_number not in urls]
    if unanswered:
        raise ProofError(f"create_with_proof returned no upload URL for parts {unanswered}")

    planned = [PartInfo(p.part_number, urls[p.part_number]) for p in parts]
    log.debug("Upload session %s for %s: %d parts", upload_id, descriptor.name, len(planned))
    return UploadSession(upload_id, file_id, planned)


# ── Part upload ───────────────────────────────────────────────────

def _part_body(reader: LimitedReader, ctx: Context, pbar: ProgressBar = None):
    while True:
        ctx.check()
        chunk = reader.read(config.UPLOAD_READ_SIZE)
        if not chunk:
            return
        if pbar is not None:
            pbar.update(len(chunk))
        yield chunk


def upload_part(api: AliDriveAPI, upload_url: str, reader: LimitedReader,
                ctx: Context = None, part_number: int = 0,
                pbar: ProgressBar = None):
    """PUT one part. Anything but HTTP 200 raises PartUploadError."""
    ctx = ctx or background()
    try:
        status = api.upload_part(upload_url, _part_body(reader, ctx, pbar), ctx=ctx)
    except requests.RequestException as exc:
        raise PartUploadError(part_number, reason=str(exc)) from exc
    if status != 200:
        raise PartUploadError(part_number, status)


def upload_parts(api: AliDriveAPI, session: UploadSession, stream, size: int,
                 ctx: Context = None, pbar: ProgressBar = None):
    """Upload every part in order, reading ``stream`` forward exactly once.

    Part n covers bytes [(n-1) * MAX_PART_SIZE, n * MAX_PART_SIZE) of the
    declared ``size``; nothing beyond ``size`` is read from the stream.
    """
    for part in session.part_info_list:
        offset = (part.part_number - 1) * config.MAX_PART_SIZE
        reader = LimitedReader(stream, min(config.MAX_PART_SIZE, max(0, size - offset)))
        upload_part(api, part.upload_url, reader, ctx=ctx,
                    part_number=part.part_number, pbar=pbar)
        log.debug("Part %d/%d uploaded", part.part_number, len(session.part_info_list))


# ── Completion ────────────────────────────────────────────────────

def complete(api: AliDriveAPI, session: UploadSession, ctx: Context = None) -> RemoteItem:
    result = api.complete_upload(session.upload_id, session.file_id, ctx=ctx)
    return RemoteItem.from_dict(result)


# ── Entry points ──────────────────────────────────────────────────

def upload_file(api: AliDriveAPI, parent_id: str, descriptor: FileDescriptor,
                stream, ctx: Context = None, progress: bool = False) -> RemoteItem:
    """negotiate -> upload every part -> complete."""
    ctx = ctx or background()
    session = negotiate(api, parent_id, descriptor, ctx=ctx)
    with ProgressBar(descriptor.size, desc=f"Uploading {descriptor.name}",
                     enabled=progress) as pbar:
        upload_parts(api, session, stream, descriptor.size, ctx=ctx, pbar=pbar)
    item = complete(api, session, ctx=ctx)
    log.info("Upload complete: %s -> %s", descriptor.name, item.file_id)
    return item


def upload_local_file(api: AliDriveAPI, parent_id: str, local_path: str,
                      ctx: Context = None, use_pre_hash: bool = False,
                      progress: bool = True) -> RemoteItem:
    with LocalFileSource(local_path) as source:
        pre_hash = compute_pre_hash(local_path) if use_pre_hash else ""
        descriptor = FileDescriptor.from_source(source, pre_hash)
        return upload_file(api, parent_id, descriptor, source, ctx=ctx, progress=progress)


def upload_dir(api: AliDriveAPI, parent_id: str, local_dir: str,
               ctx: Context = None, use_pre_hash: bool = False,
               progress: bool = True) -> list[RemoteItem]:
    """Recursively upload a directory as a new folder under ``parent_id``."""
    local_dir = os.path.abspath(local_dir)
    results = []
    folder_ids = {}

    for root, dirs, files in os.walk(local_dir):
        dirs.sort()
        if root == local_dir:
            folder_parent, name = parent_id, os.path.basename(local_dir)
        else:
            folder_parent, name = folder_ids[os.path.dirname(root)], os.path.basename(root)
        folder = mkdir(api, folder_parent, name, ctx=ctx)
        folder_ids[root] = folder.file_id

        for fname in sorted(files):
            item = upload_local_file(api, folder.file_id, os.path.join(root, fname),
                                     ctx=ctx, use_pre_hash=use_pre_hash, progress=progress)
            results.append(item)

    return results
