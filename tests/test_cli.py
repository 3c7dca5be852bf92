"""Tests for alidrive.cli."""

from unittest.mock import MagicMock, patch

import pytest

from alidrive import config
from alidrive.cli import build_parser, cmd_download, cmd_ls, cmd_mkdir, cmd_rm, cmd_upload, cmd_whoami, main
from alidrive.errors import RemoveError
from alidrive.models import Credentials, ListResponse, RemoteItem


def _args(**kw):
    args = MagicMock()
    args.refresh_token = "rt"
    for k, v in kw.items():
        setattr(args, k, v)
    return args


class TestBuildParser:
    def test_version(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_no_command(self):
        assert build_parser().parse_args([]).command is None

    def test_ls_defaults(self):
        args = build_parser().parse_args(["ls"])
        assert args.parent_id == config.ROOT_FILE_ID
        assert args.limit == 0
        assert args.order_by == "name"
        assert args.order_direction == "DESC"

    def test_ls_options(self):
        args = build_parser().parse_args(["list", "abc", "-l", "20", "-o", "size", "-d", "ASC"])
        assert (args.parent_id, args.limit, args.order_by, args.order_direction) == \
            ("abc", 20, "size", "ASC")

    def test_refresh_token_option(self):
        args = build_parser().parse_args(["-t", "tok", "whoami"])
        assert args.refresh_token == "tok"

    def test_upload(self):
        args = build_parser().parse_args(["upload", "./a.txt", "folder1", "--pre-hash"])
        assert args.local_path == "./a.txt"
        assert args.parent_id == "folder1"
        assert args.pre_hash

    def test_rm_force(self):
        args = build_parser().parse_args(["rm", "a", "b", "--force"])
        assert args.file_ids == ["a", "b"]
        assert args.force


class TestCommands:
    @patch("alidrive.cli._make_api")
    def test_whoami(self, mock_make, capsys):
        api = MagicMock()
        api.auth.refresh.return_value = Credentials("new_rt", "at", 1, "drive9")
        mock_make.return_value = api
        cmd_whoami(_args())
        out = capsys.readouterr().out
        assert "drive9" in out
        assert "new_rt" in out

    @patch("alidrive.fileops.list_items")
    @patch("alidrive.cli._make_api")
    def test_ls(self, mock_make, mock_list, capsys):
        mock_list.return_value = ListResponse([
            RemoteItem.from_dict({"file_id": "f1", "name": "a.txt", "type": "file", "size": 2048}),
            RemoteItem.from_dict({"file_id": "d1", "name": "docs", "type": "folder"}),
        ])
        cmd_ls(_args(parent_id="root", limit=0, marker="", order_by="name", order_direction="DESC"))
        out = capsys.readouterr().out
        assert "a.txt" in out and "2.0 KB" in out
        assert "d  " in out

    @patch("alidrive.fileops.list_items")
    @patch("alidrive.cli._make_api")
    def test_ls_empty(self, mock_make, mock_list, capsys):
        mock_list.return_value = ListResponse()
        cmd_ls(_args(parent_id="root", limit=0, marker="", order_by="name", order_direction="DESC"))
        assert "(empty)" in capsys.readouterr().out

    @patch("alidrive.fileops.mkdir")
    @patch("alidrive.cli._make_api")
    def test_mkdir(self, mock_make, mock_mkdir, capsys):
        mock_mkdir.return_value = RemoteItem.from_dict({"file_id": "d1", "name": "docs"})
        cmd_mkdir(_args(parent_id="root", name="docs"))
        assert "d1" in capsys.readouterr().out

    @patch("alidrive.uploader.upload_local_file")
    @patch("alidrive.cli._make_api")
    def test_upload_file(self, mock_make, mock_upload, tmp_path, capsys):
        f = tmp_path / "a.txt"
        f.write_text("x")
        mock_upload.return_value = RemoteItem.from_dict({"file_id": "f1", "name": "a.txt"})
        cmd_upload(_args(local_path=str(f), parent_id="root", pre_hash=False))
        assert "f1" in capsys.readouterr().out

    @patch("alidrive.uploader.upload_dir")
    @patch("alidrive.cli._make_api")
    def test_upload_dir(self, mock_make, mock_upload_dir, tmp_path, capsys):
        mock_upload_dir.return_value = [RemoteItem(), RemoteItem()]
        cmd_upload(_args(local_path=str(tmp_path), parent_id="root", pre_hash=False))
        assert "2 files" in capsys.readouterr().out

    @patch("alidrive.cli._make_api")
    def test_upload_missing(self, mock_make, tmp_path):
        with pytest.raises(SystemExit):
            cmd_upload(_args(local_path=str(tmp_path / "nope"), parent_id="root", pre_hash=False))

    @patch("alidrive.downloader.download_to_local_file", return_value=1024)
    @patch("alidrive.cli._make_api")
    def test_download(self, mock_make, mock_dl, capsys):
        cmd_download(_args(file_id="f1", local_path="/tmp/out", verify=True))
        assert mock_dl.call_args.kwargs["verify"] is True
        assert "1.0 KB" in capsys.readouterr().out

    @patch("alidrive.fileops.remove")
    @patch("alidrive.cli._make_api")
    def test_rm_single(self, mock_make, mock_remove):
        cmd_rm(_args(file_ids=["f1"], force=True))
        mock_remove.assert_called_once_with(mock_make.return_value, "f1", force=True)

    @patch("alidrive.fileops.batch_remove")
    @patch("alidrive.cli._make_api")
    def test_rm_batch_partial_failure(self, mock_make, mock_batch, capsys):
        mock_batch.return_value = [None, RemoveError("nope")]
        with pytest.raises(SystemExit) as exc_info:
            cmd_rm(_args(file_ids=["a", "b"], force=False))
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Removed: a" in captured.out
        assert "Failed:  b" in captured.err


class TestMain:
    def test_no_command_exits(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["alidrive"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1

    @patch("alidrive.cli._make_api")
    def test_error_exits(self, mock_make, monkeypatch, capsys):
        mock_make.return_value.auth.refresh.side_effect = RuntimeError("boom")
        monkeypatch.setattr("sys.argv", ["alidrive", "whoami"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "boom" in capsys.readouterr().err
