"""Tests for the bucketfs command-line interface."""

import pytest
from typer.testing import CliRunner

from bucketfs import __version__
from bucketfs.cli import app

runner = CliRunner()

CREDENTIALS = ["--access-key-id", "test_key", "--secret-access-key", "test_secret"]


@pytest.fixture
def invoke(s3_client):
    """Run a command against the mocked bucket."""

    def _invoke(*args: str):
        return runner.invoke(app, [*args, *CREDENTIALS])

    return _invoke


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_mkdir(invoke, bucket_keys):
    result = invoke("mkdir", "s3://test-bucket/a/b")

    assert result.exit_code == 0
    assert "Created directory: s3://test-bucket/a/b" in result.output
    assert bucket_keys() == {"a_$folder$", "a/b_$folder$"}


def test_mkdir_no_parents(invoke, bucket_keys):
    result = invoke("mkdir", "s3://test-bucket/a/b", "--no-parents")

    assert result.exit_code == 1
    assert bucket_keys() == set()


def test_ls(invoke, put):
    put("data/file1.txt", b"12345")
    put("data/2024/file2.txt")

    result = invoke("ls", "s3://test-bucket/data")

    assert result.exit_code == 0
    assert "2024/" in result.output
    assert "file1.txt" in result.output
    assert "file2.txt" not in result.output


def test_ls_recursive(invoke, put):
    put("data/2024/file2.txt")

    result = invoke("ls", "s3://test-bucket/data", "-r")

    assert result.exit_code == 0
    assert "2024/file2.txt" in result.output


def test_ls_empty(invoke):
    invoke("mkdir", "s3://test-bucket/empty")

    result = invoke("ls", "s3://test-bucket/empty")

    assert result.exit_code == 0
    assert "No entries found." in result.output


def test_ls_missing(invoke):
    result = invoke("ls", "s3://test-bucket/missing")
    assert result.exit_code == 1


def test_mv_file(invoke, put, bucket_keys):
    put("a.txt", b"x")

    result = invoke("mv", "s3://test-bucket/a.txt", "s3://test-bucket/b.txt")

    assert result.exit_code == 0
    assert bucket_keys() == {"b.txt"}


def test_mv_directory(invoke, put, bucket_keys):
    put("src/a.txt")
    put("src/sub/b.txt")

    result = invoke("mv", "s3://test-bucket/src", "s3://test-bucket/dst")

    assert result.exit_code == 0
    assert {"dst/a.txt", "dst/sub/b.txt"} <= bucket_keys()
    assert not any(key.startswith("src") for key in bucket_keys())


def test_mv_across_buckets(invoke, put, bucket_keys):
    """Test that a destination in another bucket is refused up front."""
    put("a.txt")

    result = invoke("mv", "s3://test-bucket/a.txt", "s3://other-bucket/a.txt")

    assert result.exit_code == 1
    assert "Error" in result.output
    assert bucket_keys() == {"a.txt"}


def test_rm_non_empty_requires_recursive(invoke, put, bucket_keys):
    put("d/a.txt")

    result = invoke("rm", "s3://test-bucket/d")

    assert result.exit_code == 1
    assert "d/a.txt" in bucket_keys()


def test_rm_recursive(invoke, put, bucket_keys):
    put("d/a.txt")
    put("d/sub/b.txt")

    result = invoke("rm", "s3://test-bucket/d", "--recursive")

    assert result.exit_code == 0
    assert "Deleted: s3://test-bucket/d" in result.output
    assert bucket_keys() == set()


def test_stat_file(invoke, put):
    put("a.txt", b"12345")

    result = invoke("stat", "s3://test-bucket/a.txt")

    assert result.exit_code == 0
    assert "Type: file" in result.output
    assert "Size: 5 bytes" in result.output
    assert "Mode: 0o777" in result.output


def test_stat_directory(invoke, put):
    put("d/a.txt")

    result = invoke("stat", "s3://test-bucket/d")

    assert result.exit_code == 0
    assert "Type: directory" in result.output


def test_stat_missing(invoke):
    result = invoke("stat", "s3://test-bucket/missing")
    assert result.exit_code == 1


def test_invalid_uri():
    result = runner.invoke(app, ["ls", "/not/a/bucket"])
    assert result.exit_code == 1
