"""Argparse CLI: subcommand definitions and dispatch."""

import argparse
import os
import sys

from . import __version__, config
from .api import AliDriveAPI
from .models import ListOptions
from .utils import format_size, format_time, setup_logging


def _make_api(args) -> AliDriveAPI:
    return AliDriveAPI(refresh_token=args.refresh_token or config.REFRESH_TOKEN)


# ── Subcommand handlers ──────────────────────────────────────────

def cmd_whoami(args):
    api = _make_api(args)
    creds = api.auth.refresh()
    print(f"Drive ID:      {creds.drive_id}")
    print(f"Refresh token: {creds.refresh_token}")
    print("(the previous refresh token has been rotated; keep the one above)")


def cmd_ls(args):
    from .fileops import list_items
    api = _make_api(args)
    options = ListOptions(limit=args.limit, order_by=args.order_by,
                          order_direction=args.order_direction)
    result = list_items(api, args.parent_id, marker=args.marker, options=options)

    if not result.items:
        print("(empty)")
        return

    for item in result.items:
        kind = "d" if item.is_folder else "-"
        size = format_size(item.size or 0)
        mtime = format_time(item.updated_at)
        print(f"{kind}  {size:>10s}  {mtime}  {item.file_id}  {item.name}")
    if result.next_marker:
        print(f"next marker: {result.next_marker}")


def cmd_mkdir(args):
    from .fileops import mkdir
    api = _make_api(args)
    item = mkdir(api, args.parent_id, args.name)
    print(f"Created: {item.name} ({item.file_id})")


def cmd_upload(args):
    from .uploader import upload_dir, upload_local_file
    api = _make_api(args)
    local = os.path.abspath(args.local_path)

    if os.path.isdir(local):
        items = upload_dir(api, args.parent_id, local, use_pre_hash=args.pre_hash)
        print(f"Uploaded {len(items)} files.")
    elif os.path.isfile(local):
        item = upload_local_file(api, args.parent_id, local, use_pre_hash=args.pre_hash)
        print(f"Uploaded: {item.name} ({item.file_id})")
    else:
        print(f"Local path not found: {local}")
        sys.exit(1)


def cmd_download(args):
    from .downloader import download_to_local_file
    api = _make_api(args)
    written = download_to_local_file(api, args.file_id, os.path.abspath(args.local_path),
                                     verify=args.verify)
    print(f"Download complete ({format_size(written)}).")


def cmd_url(args):
    from .downloader import get_download_url
    api = _make_api(args)
    print(get_download_url(api, args.file_id))


def cmd_rm(args):
    from .fileops import batch_remove, remove
    api = _make_api(args)
    if len(args.file_ids) == 1:
        remove(api, args.file_ids[0], force=args.force)
        print(f"Removed: {args.file_ids[0]}")
        return

    verdicts = batch_remove(api, args.file_ids, force=args.force)
    failed = 0
    for file_id, err in zip(args.file_ids, verdicts):
        if err is None:
            print(f"Removed: {file_id}")
        else:
            failed += 1
            print(f"Failed:  {file_id}: {err}", file=sys.stderr)
    if failed:
        sys.exit(1)


# ── Parser construction ──────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alidrive",
        description="Aliyun Drive CLI tool",
    )
    parser.add_argument("-V", "--version", action="version", version=f"alidrive {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-t", "--refresh-token", default=None,
                        help="Refresh token (default: $ALIDRIVE_REFRESH_TOKEN)")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # whoami
    p = sub.add_parser("whoami", help="Refresh the token and show the drive id")
    p.set_defaults(func=cmd_whoami)

    # ls / list
    for name in ("ls", "list"):
        p = sub.add_parser(name, help="List a remote folder")
        p.add_argument("parent_id", nargs="?", default=config.ROOT_FILE_ID,
                       help="Folder id (default: root)")
        p.add_argument("-l", "--limit", type=int, default=config.LIST_LIMIT_UNLIMITED,
                       help="Page size; 0 fetches every page (default: 0)")
        p.add_argument("-m", "--marker", default="", help="Resume from this marker")
        p.add_argument("-o", "--order-by", default=config.ORDER_BY_NAME,
                       choices=config.ORDER_BY_CHOICES)
        p.add_argument("-d", "--order-direction", default=config.ORDER_DESC,
                       choices=config.ORDER_DIRECTION_CHOICES)
        p.set_defaults(func=cmd_ls)

    # mkdir
    p = sub.add_parser("mkdir", help="Create a remote folder")
    p.add_argument("parent_id", help="Parent folder id ('root' for the top level)")
    p.add_argument("name", help="Folder name")
    p.set_defaults(func=cmd_mkdir)

    # upload
    p = sub.add_parser("upload", help="Upload file or directory")
    p.add_argument("local_path", help="Local file/directory path")
    p.add_argument("parent_id", nargs="?", default=config.ROOT_FILE_ID,
                   help="Destination folder id (default: root)")
    p.add_argument("--pre-hash", action="store_true",
                   help="Send the 1 KB pre-hash so the server may skip known content")
    p.set_defaults(func=cmd_upload)

    # download
    p = sub.add_parser("download", help="Download a file")
    p.add_argument("file_id", help="Remote file id")
    p.add_argument("local_path", help="Local destination file or directory")
    p.add_argument("--verify", action="store_true",
                   help="Check the SHA-1 of the downloaded file against the remote hash")
    p.set_defaults(func=cmd_download)

    # url
    p = sub.add_parser("url", help="Print a signed download URL")
    p.add_argument("file_id", help="Remote file id")
    p.set_defaults(func=cmd_url)

    # rm / delete
    for name in ("rm", "delete"):
        p = sub.add_parser(name, help="Trash (or delete) remote items")
        p.add_argument("file_ids", nargs="+", help="Remote item ids")
        p.add_argument("-f", "--force", action="store_true",
                       help="Delete permanently instead of moving to the recycle bin")
        p.set_defaults(func=cmd_rm)

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(verbose=getattr(args, "verbose", False))

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if getattr(args, "verbose", False):
            import traceback
            traceback.print_exc()
        sys.exit(1)
