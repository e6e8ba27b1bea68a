"""Tests for the MinIO client backend."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from s3perf.backends import MinioBackend
from s3perf.errors import TransportError
from s3perf.models import TestFile

FILES = [
    TestFile(path=Path("testfiles/s3perf-testfile1.txt"), checksum="a"),
    TestFile(path=Path("testfiles/s3perf-testfile2.txt"), checksum="b"),
]
DEST = Path("testfiles/download")


@pytest.fixture
def mock_run():
    with patch("s3perf.backends.base.run_command") as mock:
        mock.return_value = Mock(stdout="")
        yield mock


@pytest.fixture
def mock_parallel():
    with patch("s3perf.backends.base.run_parallel") as mock:
        yield mock


class TestMinioBackend:
    """Command lines built for mc."""

    def test_requires_alias(self):
        with pytest.raises(ValueError):
            MinioBackend("  ")

    def test_create_container(self, mock_run):
        MinioBackend("local").create_container("bucket")
        assert mock_run.call_args[0][0] == ["mc", "mb", "local/bucket"]

    def test_upload_all(self, mock_run):
        MinioBackend("local").upload_all(FILES, "bucket")
        assert mock_run.call_args[0][0] == [
            "mc", "cp",
            "testfiles/s3perf-testfile1.txt",
            "testfiles/s3perf-testfile2.txt",
            "local/bucket/",
        ]

    def test_upload_all_parallel(self, mock_parallel):
        MinioBackend("local", parallel=True).upload_all(FILES, "bucket")
        template, items = mock_parallel.call_args[0]
        assert template == ["mc", "cp", "{}", "local/bucket/"]
        assert items == ["testfiles/s3perf-testfile1.txt", "testfiles/s3perf-testfile2.txt"]

    def test_list_container(self, mock_run):
        MinioBackend("local").list_container("bucket")
        assert mock_run.call_args[0][0] == ["mc", "ls", "local/bucket"]

    def test_download_all(self, mock_run):
        MinioBackend("local").download_all("bucket", FILES, DEST)
        assert mock_run.call_args[0][0] == [
            "mc", "cp",
            "local/bucket/s3perf-testfile1.txt",
            "local/bucket/s3perf-testfile2.txt",
            "testfiles/download/",
        ]

    def test_download_all_parallel(self, mock_parallel):
        MinioBackend("local", parallel=True).download_all("bucket", FILES, DEST)
        template, items = mock_parallel.call_args[0]
        assert template == ["mc", "cp", "local/bucket/{}", "testfiles/download/"]
        assert items == ["s3perf-testfile1.txt", "s3perf-testfile2.txt"]

    def test_delete_objects_removes_bucket(self, mock_run, mock_parallel):
        """mc cannot erase only the objects; the bucket goes with them."""
        MinioBackend("local", parallel=True).delete_objects("bucket", FILES)
        assert mock_run.call_args[0][0] == ["mc", "rb", "--force", "local/bucket"]
        mock_parallel.assert_not_called()
        assert MinioBackend.deletes_container_with_objects is True

    def test_delete_container(self, mock_run):
        MinioBackend("local").delete_container("bucket")
        assert mock_run.call_args[0][0] == ["mc", "rb", "local/bucket"]

    def test_container_exists(self, mock_run):
        assert MinioBackend("local").container_exists("bucket") is True
        mock_run.side_effect = TransportError("gone", step="check the bucket")
        assert MinioBackend("local").container_exists("bucket") is False
