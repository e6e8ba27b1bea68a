"""Tests for connectivity checks."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from s3perf.errors import NetworkUnreachable, TransportError
from s3perf.models import RunConfig
from s3perf.network import check_connectivity, ping, probe_endpoint


def _response(status_code: int) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("HEAD", "http://s3.local"))


class TestPing:
    """Tests for ping."""

    @patch("s3perf.network.run_command")
    def test_single_ping(self, mock_run):
        ping("8.8.8.8")
        mock_run.assert_called_once_with(
            ["ping", "-q", "-c", "1", "-W", "1", "8.8.8.8"], step="ping"
        )

    @patch("s3perf.network.run_command")
    def test_no_answer_raises(self, mock_run):
        mock_run.side_effect = TransportError("no answer", step="ping", returncode=1)
        with pytest.raises(NetworkUnreachable, match="no working internet connection"):
            ping("8.8.8.8")


class TestProbeEndpoint:
    """Tests for the HTTP endpoint probe."""

    @patch("s3perf.network.httpx.head")
    def test_forbidden_counts_as_reachable(self, mock_head):
        """Storage endpoints answer anonymous requests with 403."""
        mock_head.return_value = _response(403)
        assert probe_endpoint("http://s3.local") == 403

    @patch("s3perf.network.httpx.head")
    def test_retries_transient_errors(self, mock_head):
        mock_head.side_effect = [httpx.ConnectError("refused"), _response(200)]
        sleep = MagicMock()

        assert probe_endpoint("http://s3.local", sleep=sleep) == 200
        assert mock_head.call_count == 2
        sleep.assert_called_once()

    @patch("s3perf.network.httpx.head")
    def test_exhausted_raises(self, mock_head):
        mock_head.side_effect = httpx.ConnectError("refused")

        with pytest.raises(NetworkUnreachable, match="after 3 attempts"):
            probe_endpoint("http://s3.local", sleep=MagicMock())

        assert mock_head.call_count == 3

    @patch("s3perf.network.httpx.head")
    def test_server_errors_are_retried(self, mock_head):
        mock_head.return_value = _response(503)

        with pytest.raises(NetworkUnreachable):
            probe_endpoint("http://s3.local", sleep=MagicMock())

        assert mock_head.call_count == 3

    @patch("s3perf.network.httpx.head")
    def test_permanent_error_raises_without_retry(self, mock_head):
        mock_head.side_effect = httpx.UnsupportedProtocol("ftp not supported")

        with pytest.raises(NetworkUnreachable, match="not reachable"):
            probe_endpoint("ftp://s3.local", sleep=MagicMock())

        assert mock_head.call_count == 1


class TestCheckConnectivity:
    """Tests for check_connectivity."""

    @patch("s3perf.network.probe_endpoint")
    @patch("s3perf.network.ping")
    def test_ping_only_by_default(self, mock_ping, mock_probe):
        result = check_connectivity(RunConfig(file_count=1, file_size=1))

        assert result is None
        mock_ping.assert_called_once_with("8.8.8.8")
        mock_probe.assert_not_called()

    @patch("s3perf.network.probe_endpoint", return_value=200)
    @patch("s3perf.network.ping")
    def test_probe_when_configured(self, mock_ping, mock_probe):
        config = RunConfig(file_count=1, file_size=1, ping_host=None,
                           probe_url="http://s3.local")

        assert check_connectivity(config) == 200
        mock_ping.assert_not_called()
        assert mock_probe.call_args[0][0] == "http://s3.local"
