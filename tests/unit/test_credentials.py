"""Tests for credentials and credential sources."""
import pytest

from cwupload.core.exceptions import ValidationError
from cwupload.core.session import (
    CredentialSource,
    Credentials,
    EnvCredentialSource,
    StaticCredentialSource,
)


class TestCredentials:
    """Test suite for Credentials."""

    def test_trailing_slash_stripped(self):
        """Test base URL normalization."""
        credentials = Credentials("admin", "pw", "https://books.example.com/")

        assert credentials.base_url == "https://books.example.com"

    def test_subpath_kept(self):
        """Test servers mounted under a path."""
        credentials = Credentials("admin", "pw", "http://nas.local:8083/calibre//")

        assert credentials.base_url == "http://nas.local:8083/calibre"

    def test_password_hidden_from_repr(self):
        """Test repr doesn't leak the password."""
        credentials = Credentials("admin", "hunter2", "https://books.example.com")

        assert "hunter2" not in repr(credentials)

    @pytest.mark.parametrize("base_url", ["", "books.example.com", "ftp://books.example.com", "https://"])
    def test_invalid_base_url(self, base_url):
        """Test non-absolute or non-http URLs are rejected."""
        with pytest.raises(ValidationError):
            Credentials("admin", "pw", base_url)

    def test_username_required(self):
        """Test empty username."""
        with pytest.raises(ValidationError, match="Username"):
            Credentials("", "pw", "https://books.example.com")

    def test_immutable(self):
        """Test credentials are frozen."""
        credentials = Credentials("admin", "pw", "https://books.example.com")

        with pytest.raises(AttributeError):
            credentials.username = "other"


class TestCredentialSources:
    """Test suite for credential sources."""

    @pytest.mark.asyncio
    async def test_static_source(self, credentials):
        """Test static source returns the given credentials."""
        source = StaticCredentialSource(credentials)

        assert await source.get_credentials() is credentials
        assert isinstance(source, CredentialSource)

    @pytest.mark.asyncio
    async def test_env_source(self):
        """Test reading from an environment mapping."""
        source = EnvCredentialSource({
            "CWUPLOAD_URL": "https://books.example.com/",
            "CWUPLOAD_USERNAME": "reader",
            "CWUPLOAD_PASSWORD": "pw",
        })

        credentials = await source.get_credentials()

        assert credentials.username == "reader"
        assert credentials.base_url == "https://books.example.com"

    @pytest.mark.asyncio
    async def test_env_source_reads_os_environ(self, monkeypatch):
        """Test default environment lookup happens per call."""
        monkeypatch.setenv("CWUPLOAD_URL", "https://books.example.com")
        monkeypatch.setenv("CWUPLOAD_USERNAME", "first")
        monkeypatch.setenv("CWUPLOAD_PASSWORD", "pw")
        source = EnvCredentialSource()

        assert (await source.get_credentials()).username == "first"

        monkeypatch.setenv("CWUPLOAD_USERNAME", "second")
        assert (await source.get_credentials()).username == "second"

    @pytest.mark.asyncio
    async def test_env_source_missing_variables(self):
        """Test missing variables are reported."""
        source = EnvCredentialSource({"CWUPLOAD_URL": "https://books.example.com"})

        with pytest.raises(ValidationError, match="CWUPLOAD_USERNAME, CWUPLOAD_PASSWORD"):
            await source.get_credentials()
