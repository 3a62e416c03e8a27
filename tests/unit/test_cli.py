"""Tests for the cwupload command line."""
import pytest
from typer.testing import CliRunner

from cwupload import AuthenticationError, NetworkError, Step, UploadResult
from cwupload.cli import main as cli_main
from cwupload.client import UploadOutcome


class FakeLibraryClient:
    """Stands in for LibraryClient and records calls on the class."""

    check_result = True
    check_error = None
    outcomes = None
    upload_error = None
    calls = []

    def __init__(self, credentials, config=None):
        self.credentials = credentials
        self.config = config

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def check_credentials(self):
        type(self).calls.append(("check", self.credentials))
        if self.check_error is not None:
            raise self.check_error
        return self.check_result

    async def upload_many(self, payloads, concurrency=4, continue_on_fail=False):
        type(self).calls.append(("upload_many", payloads, concurrency, continue_on_fail))
        if self.upload_error is not None:
            raise self.upload_error
        if self.outcomes is not None:
            return self.outcomes
        return [
            UploadOutcome(i, p.file_name, result=UploadResult(True, f"/book/{i + 1}", {}))
            for i, p in enumerate(payloads)
        ]


@pytest.fixture
def fake_client(monkeypatch):
    """Replaces LibraryClient in the CLI module."""
    class Client(FakeLibraryClient):
        calls = []

    monkeypatch.setattr(cli_main, "LibraryClient", Client)
    return Client


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def server_args():
    return ["--url", "https://books.example.com", "--username", "admin", "--password", "pw"]


@pytest.fixture
def book(tmp_path):
    path = tmp_path / "dune.epub"
    path.write_bytes(b"PK\x03\x04")
    return path


class TestCheckCommand:
    """Test suite for `cwupload check`."""

    def test_success(self, runner, fake_client, server_args):
        result = runner.invoke(cli_main.app, ["check", *server_args])

        assert result.exit_code == 0
        assert "Logged in" in result.output
        _, credentials = fake_client.calls[0]
        assert credentials.base_url == "https://books.example.com"

    def test_rejected(self, runner, fake_client, server_args):
        """Test wrong credentials exit with 1."""
        fake_client.check_result = False

        result = runner.invoke(cli_main.app, ["check", *server_args])

        assert result.exit_code == 1
        assert "Wrong username or password" in result.output

    def test_network_error(self, runner, fake_client, server_args):
        fake_client.check_error = NetworkError("Connection refused", step=Step.LOGIN_PAGE)

        result = runner.invoke(cli_main.app, ["check", *server_args])

        assert result.exit_code == 1
        assert "Connection refused" in result.output

    def test_invalid_url(self, runner, fake_client):
        """Test invalid base URL exits with 2."""
        result = runner.invoke(cli_main.app, ["check", "--url", "books.example.com", "-u", "admin", "-p", "pw"])

        assert result.exit_code == 2
        assert fake_client.calls == []

    def test_env_variables(self, runner, fake_client, monkeypatch):
        """Test options fall back to environment variables."""
        monkeypatch.setenv("CWUPLOAD_URL", "https://env.example.com")
        monkeypatch.setenv("CWUPLOAD_USERNAME", "reader")
        monkeypatch.setenv("CWUPLOAD_PASSWORD", "pw")

        result = runner.invoke(cli_main.app, ["check"])

        assert result.exit_code == 0
        _, credentials = fake_client.calls[0]
        assert credentials.username == "reader"

    def test_prompts_for_password(self, runner, fake_client, monkeypatch):
        """Test missing password is prompted for."""
        monkeypatch.delenv("CWUPLOAD_PASSWORD", raising=False)

        result = runner.invoke(
            cli_main.app,
            ["check", "--url", "https://books.example.com", "-u", "admin"],
            input="secret\n"
        )

        assert result.exit_code == 0
        _, credentials = fake_client.calls[0]
        assert credentials.password == "secret"


class TestUploadCommand:
    """Test suite for `cwupload upload`."""

    def test_upload(self, runner, fake_client, server_args, book):
        """Test a successful upload prints the location."""
        result = runner.invoke(cli_main.app, ["upload", str(book), *server_args, "--title", "Dune"])

        assert result.exit_code == 0
        assert "uploaded" in result.output
        assert "/book/1" in result.output

        _, payloads, concurrency, continue_on_fail = fake_client.calls[0]
        assert payloads[0].file_name == "dune.epub"
        assert payloads[0].content == b"PK\x03\x04"
        assert payloads[0].form_metadata() == {"title": "Dune"}
        assert concurrency == 1
        assert continue_on_fail is False

    def test_batch_options(self, runner, fake_client, server_args, book, tmp_path):
        """Test concurrency and continue-on-fail are passed through."""
        other = tmp_path / "emma.pdf"
        other.write_bytes(b"%PDF")

        result = runner.invoke(
            cli_main.app,
            ["upload", str(book), str(other), *server_args, "-c", "2", "--continue-on-fail"]
        )

        assert result.exit_code == 0
        _, payloads, concurrency, continue_on_fail = fake_client.calls[0]
        assert [p.file_name for p in payloads] == ["dune.epub", "emma.pdf"]
        assert payloads[1].mime_type == "application/pdf"
        assert concurrency == 2
        assert continue_on_fail is True

    def test_failed_outcome(self, runner, fake_client, server_args, book):
        """Test a failed item exits with 1."""
        fake_client.outcomes = [
            UploadOutcome(0, "dune.epub", error=AuthenticationError("Invalid username or password", step=Step.SESSION_CHECK))
        ]

        result = runner.invoke(cli_main.app, ["upload", str(book), *server_args, "--continue-on-fail"])

        assert result.exit_code == 1
        assert "failed" in result.output

    def test_rejected_outcome(self, runner, fake_client, server_args, book):
        """Test a response without location is reported."""
        fake_client.outcomes = [UploadOutcome(0, "dune.epub", result=UploadResult(False, None, "ok"))]

        result = runner.invoke(cli_main.app, ["upload", str(book), *server_args])

        assert result.exit_code == 1
        assert "no location returned" in result.output

    def test_upload_error(self, runner, fake_client, server_args, book):
        fake_client.upload_error = NetworkError("Unexpected response", step=Step.UPLOAD, status=500)

        result = runner.invoke(cli_main.app, ["upload", str(book), *server_args])

        assert result.exit_code == 1
        assert "Upload failed" in result.output

    def test_missing_file(self, runner, fake_client, server_args, tmp_path):
        """Test nonexistent files are rejected by the argument parser."""
        result = runner.invoke(cli_main.app, ["upload", str(tmp_path / "nope.epub"), *server_args])

        assert result.exit_code == 2
        assert fake_client.calls == []

    def test_location_printed_literally(self, runner, fake_client, server_args, book):
        """Test server-supplied locations aren't read as rich markup."""
        fake_client.outcomes = [UploadOutcome(0, "dune.epub", result=UploadResult(True, "/book/[bold]7", {}))]

        result = runner.invoke(cli_main.app, ["upload", str(book), *server_args])

        assert result.exit_code == 0
        assert "/book/[bold]7" in result.output
