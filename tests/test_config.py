"""Tests for run configuration and environment validation."""

from pathlib import Path
from unittest.mock import patch

import pytest

from s3perf.cli import parse_args
from s3perf.config import load_run_config, validate_sizes
from s3perf.errors import EnvironmentMisconfigured, ToolMissing, ValidationError
from s3perf.models import Backend, BucketCase

SWIFT_ENV = {"ST_AUTH": "http://swift/auth/v1.0", "ST_USER": "user", "ST_KEY": "key"}


def all_tools(tool):
    return f"/usr/bin/{tool}"


def tools_except(*missing):
    def which(tool):
        return None if tool in missing else f"/usr/bin/{tool}"
    return which


@pytest.fixture
def which():
    with patch("s3perf.commands.shutil.which", side_effect=all_tools) as mock_which:
        yield mock_which


class TestLoadRunConfig:
    """Tests for load_run_config with all tools installed."""

    def test_minimal_arguments(self, which):
        """-n and -s alone select s3cmd with defaults."""
        config = load_run_config(parse_args(["-n", "5", "-s", "1048576"]), environ={})

        assert config.file_count == 5
        assert config.file_size == 1048576
        assert config.backend == Backend.S3CMD
        assert config.bucket_case == BucketCase.LOWER
        assert config.parallel is False
        assert config.keep_local_files is False
        assert config.append_csv is False
        assert config.directory == Path("testfiles")

    def test_all_flags(self, which):
        args = parse_args(["-n", "2", "-s", "10", "-u", "-k", "-p", "-o", "-q"])
        config = load_run_config(args, environ={})

        assert config.bucket_case == BucketCase.UPPER
        assert config.bucket_name == "S3PERF-TESTBUCKET"
        assert config.keep_local_files is True
        assert config.parallel is True
        assert config.append_csv is True
        assert config.quiet is True

    def test_minio_backend(self, which):
        config = load_run_config(parse_args(["-n", "1", "-s", "1", "-m", " local "]), environ={})
        assert config.backend == Backend.MINIO
        assert config.backend_alias == "local"

    def test_swift_backend(self, which):
        config = load_run_config(parse_args(["-n", "1", "-s", "1", "-a"]), environ=SWIFT_ENV)
        assert config.backend == Backend.SWIFT

    def test_both_alternative_backends_rejected(self, which):
        with pytest.raises(ValidationError, match="not both"):
            load_run_config(parse_args(["-n", "1", "-s", "1", "-a", "-m", "x"]), environ=SWIFT_ENV)


class TestBounds:
    """Numeric bounds on file count and size."""

    def test_max_size_accepted(self, which):
        config = load_run_config(parse_args(["-n", "1", "-s", "16777216"]), environ={})
        assert config.file_size == 16777216

    @pytest.mark.parametrize(
        "count,size",
        [(0, 1), (-1, 1), (1, 0), (1, -5), (1, 16777217)],
    )
    def test_out_of_range_rejected(self, which, count, size):
        with pytest.raises(ValidationError):
            load_run_config(parse_args(["-n", str(count), "-s", str(size)]), environ={})

    def test_validate_sizes_messages(self):
        with pytest.raises(ValidationError, match="greater than 0"):
            validate_sizes(0, 1)
        with pytest.raises(ValidationError, match="between 1 and 16777216"):
            validate_sizes(1, 16777217)

    @pytest.mark.parametrize("alias", ["", "   "])
    def test_blank_minio_alias_rejected(self, which, alias):
        with pytest.raises(ValidationError, match="non-empty alias"):
            load_run_config(parse_args(["-n", "1", "-s", "1", "-m", alias]), environ={})


class TestTools:
    """Required external tools."""

    def test_missing_backend_tool(self):
        with patch("s3perf.commands.shutil.which", side_effect=tools_except("s3cmd")):
            with pytest.raises(ToolMissing) as exc_info:
                load_run_config(parse_args(["-n", "1", "-s", "1"]), environ={})
        assert exc_info.value.tool == "s3cmd"
        assert "s3cmd" in str(exc_info.value)

    def test_missing_ping(self):
        with patch("s3perf.commands.shutil.which", side_effect=tools_except("ping")):
            with pytest.raises(ToolMissing) as exc_info:
                load_run_config(parse_args(["-n", "1", "-s", "1"]), environ={})
        assert exc_info.value.tool == "ping"

    def test_ping_not_required_when_disabled(self):
        with patch("s3perf.commands.shutil.which", side_effect=tools_except("ping")):
            config = load_run_config(parse_args(["-n", "1", "-s", "1"]),
                                     environ={"S3PERF_PING_HOST": ""})
        assert config.ping_host is None

    def test_only_selected_client_required(self):
        """s3cmd is not needed when the MinIO client drives the run."""
        with patch("s3perf.commands.shutil.which", side_effect=tools_except("s3cmd", "swift")):
            config = load_run_config(parse_args(["-n", "1", "-s", "1", "-m", "local"]), environ={})
        assert config.backend == Backend.MINIO

    def test_parallel_requires_gnu_parallel(self):
        with patch("s3perf.commands.shutil.which", side_effect=tools_except("parallel")):
            with pytest.raises(ToolMissing) as exc_info:
                load_run_config(parse_args(["-n", "1", "-s", "1", "-p"]), environ={})
        assert exc_info.value.tool == "parallel"

    def test_parallel_tool_not_needed_sequentially(self):
        with patch("s3perf.commands.shutil.which", side_effect=tools_except("parallel")):
            config = load_run_config(parse_args(["-n", "1", "-s", "1"]), environ={})
        assert config.parallel is False

    def test_tools_checked_before_bounds(self):
        """A missing tool is reported even when the numbers are also bad."""
        with patch("s3perf.commands.shutil.which", side_effect=tools_except("s3cmd")):
            with pytest.raises(ToolMissing):
                load_run_config(parse_args(["-n", "0", "-s", "1"]), environ={})


class TestSwiftEnvironment:
    """ST_AUTH, ST_USER and ST_KEY for the Swift API."""

    @pytest.mark.parametrize("variable", ["ST_AUTH", "ST_USER", "ST_KEY"])
    def test_missing_variable(self, which, variable):
        environ = {k: v for k, v in SWIFT_ENV.items() if k != variable}
        with pytest.raises(EnvironmentMisconfigured) as exc_info:
            load_run_config(parse_args(["-n", "1", "-s", "1", "-a"]), environ=environ)
        assert exc_info.value.variable == variable

    def test_empty_variable(self, which):
        environ = dict(SWIFT_ENV, ST_KEY="")
        with pytest.raises(EnvironmentMisconfigured, match="ST_KEY"):
            load_run_config(parse_args(["-n", "1", "-s", "1", "-a"]), environ=environ)

    def test_not_required_for_s3(self, which):
        config = load_run_config(parse_args(["-n", "1", "-s", "1"]), environ={})
        assert config.backend == Backend.S3CMD


class TestSettingsPriority:
    """Command line over environment over defaults."""

    def test_environment_overrides_defaults(self, which):
        environ = {
            "S3PERF_DIRECTORY": "/data/s3perf",
            "S3PERF_OUTPUT_FILE": "/data/results.csv",
            "S3PERF_PING_HOST": "1.1.1.1",
            "S3PERF_PROBE_URL": "http://minio:9000",
        }
        config = load_run_config(parse_args(["-n", "1", "-s", "1"]), environ=environ)

        assert config.directory == Path("/data/s3perf")
        assert config.output_file == Path("/data/results.csv")
        assert config.ping_host == "1.1.1.1"
        assert config.probe_url == "http://minio:9000"

    def test_command_line_overrides_environment(self, which):
        args = parse_args([
            "-n", "1", "-s", "1",
            "-d", "work",
            "--output-file", "out.csv",
            "--ping-host", "9.9.9.9",
            "--probe-url", "http://s3.local",
        ])
        environ = {"S3PERF_DIRECTORY": "/data", "S3PERF_PING_HOST": "1.1.1.1"}

        config = load_run_config(args, environ=environ)

        assert config.directory == Path("work")
        assert config.output_file == Path("out.csv")
        assert config.ping_host == "9.9.9.9"
        assert config.probe_url == "http://s3.local"
