"""
Tests for the OS and network edges: HTTP client, clipboard tools, git, credentials.

Nothing here touches the network or real programs; subprocess and urllib are faked.

Run with:
    pytest tests/test_system.py -v
"""

import io
import json
import socket
import subprocess
import urllib.error

import pytest

from gentools.clipboard import BACKENDS, ClipboardError, SystemClipboard, detect_backend
from gentools.credentials import (
    EnvSecretProvider,
    KeychainSecretProvider,
    get_secret_provider,
    require_api_key,
)
from gentools.errors import EmptyInputError, MissingCredentialError, ToolUnavailableError, TransportError
from gentools.git import GitAnalyzer, GitError
from gentools.llm import ChatCompletionsClient, build_request
from gentools.prompts import COMMIT_MESSAGE

ENDPOINT = "https://api.example.com/v1/chat/completions"


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

class FakeHTTPResponse:

    def __init__(self, status, body):
        self.status = status
        self._body = body

    def read(self):
        return self._body.encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class TestChatCompletionsClient:

    @pytest.fixture
    def request_body(self):
        return build_request("diff --git a/x b/x", COMMIT_MESSAGE, model="gpt-4o")

    @pytest.fixture
    def urlopen(self, monkeypatch):
        """Replace urlopen; set .result to a response or an exception to raise."""
        calls = []

        def fake_urlopen(req, **kwargs):
            calls.append((req, kwargs))
            if isinstance(fake_urlopen.result, Exception):
                raise fake_urlopen.result
            return fake_urlopen.result

        fake_urlopen.calls = calls
        fake_urlopen.result = FakeHTTPResponse(200, '{"choices": []}')
        monkeypatch.setattr("gentools.llm.client.urllib.request.urlopen", fake_urlopen)
        return fake_urlopen

    def test_posts_json_with_bearer_token(self, urlopen, request_body):
        client = ChatCompletionsClient(ENDPOINT, "sk-test", timeout=30)
        client.send(request_body)

        req, kwargs = urlopen.calls[0]
        assert req.full_url == ENDPOINT
        assert req.get_method() == "POST"
        assert req.get_header("Authorization") == "Bearer sk-test"
        assert req.get_header("Content-type") == "application/json"
        assert json.loads(req.data)["model"] == "gpt-4o"
        assert kwargs == {"timeout": 30}

    def test_no_timeout_when_disabled(self, urlopen, request_body):
        ChatCompletionsClient(ENDPOINT, "sk-test", timeout=None).send(request_body)
        assert urlopen.calls[0][1] == {}

    def test_returns_status_and_body(self, urlopen, request_body):
        urlopen.result = FakeHTTPResponse(200, '{"ok": true}')
        assert ChatCompletionsClient(ENDPOINT, "k").send(request_body) == (200, '{"ok": true}')

    def test_http_error_is_returned_not_raised(self, urlopen, request_body):
        urlopen.result = urllib.error.HTTPError(
            ENDPOINT, 401, "Unauthorized", {}, io.BytesIO(b'{"error": {"message": "bad key"}}')
        )
        status, body = ChatCompletionsClient(ENDPOINT, "k").send(request_body)
        assert status == 401
        assert "bad key" in body

    def test_connection_refused(self, urlopen, request_body):
        urlopen.result = urllib.error.URLError(ConnectionRefusedError(111, "Connection refused"))
        with pytest.raises(TransportError, match="Could not reach"):
            ChatCompletionsClient(ENDPOINT, "k").send(request_body)

    @pytest.mark.parametrize("endpoint", ["api.example.com/v1/chat/completions", "localhost:8080"])
    def test_endpoint_without_scheme(self, urlopen, request_body, endpoint):
        with pytest.raises(TransportError, match="Invalid endpoint URL"):
            ChatCompletionsClient(endpoint, "k").send(request_body)
        assert urlopen.calls == []

    def test_timeout(self, urlopen, request_body):
        urlopen.result = urllib.error.URLError(socket.timeout("timed out"))
        with pytest.raises(TransportError, match="timed out after 5s"):
            ChatCompletionsClient(ENDPOINT, "k", timeout=5).send(request_body)

    def test_read_timeout(self, urlopen, request_body):
        urlopen.result = TimeoutError("The read operation timed out")
        with pytest.raises(TransportError, match="timed out"):
            ChatCompletionsClient(ENDPOINT, "k", timeout=5).send(request_body)

    def test_complete_validates(self, urlopen, request_body):
        urlopen.result = FakeHTTPResponse(200, '{"choices": [{"message": {"content": "fix: typo"}}]}')
        result = ChatCompletionsClient(ENDPOINT, "k").complete(request_body)
        assert result.content == "fix: typo"


# ---------------------------------------------------------------------------
# Clipboard
# ---------------------------------------------------------------------------

class TestDetectBackend:

    @staticmethod
    def _which(*installed):
        return lambda name: f"/usr/bin/{name}" if name in installed else None

    def test_macos(self):
        backend = detect_backend(platform="darwin", which=self._which("pbcopy", "pbpaste"))
        assert backend.name == "pbcopy"

    def test_linux_prefers_wayland(self):
        backend = detect_backend(platform="linux", which=self._which("wl-copy", "wl-paste", "xclip"))
        assert backend.name == "wl-clipboard"

    def test_linux_falls_back_to_xsel(self):
        backend = detect_backend(platform="linux", which=self._which("xsel"))
        assert backend.name == "xsel"

    def test_copy_only_needs_copy_tool(self):
        backend = detect_backend(need_paste=False, platform="linux", which=self._which("wl-copy"))
        assert backend.name == "wl-clipboard"

    def test_paste_missing(self):
        with pytest.raises(ToolUnavailableError):
            detect_backend(platform="linux", which=self._which("wl-copy"))

    def test_nothing_installed(self):
        with pytest.raises(ToolUnavailableError, match="xclip"):
            detect_backend(platform="linux", which=self._which())

    def test_unknown_platform(self):
        with pytest.raises(ToolUnavailableError):
            detect_backend(platform="sunos5", which=self._which("pbcopy"))


class TestSystemClipboard:

    @pytest.fixture
    def xclip(self):
        return SystemClipboard(BACKENDS["linux"][1])

    def test_write_pipes_text(self, xclip, monkeypatch):
        calls = []

        def fake_run(args, **kwargs):
            calls.append((args, kwargs))
            return subprocess.CompletedProcess(args, 0, stdout=b"", stderr=b"")

        monkeypatch.setattr("gentools.clipboard.subprocess.run", fake_run)
        xclip.write("feat: ünïcode")

        args, kwargs = calls[0]
        assert args == ["xclip", "-selection", "clipboard"]
        assert kwargs["input"] == "feat: ünïcode".encode("utf-8")

    def test_read_decodes_output(self, xclip, monkeypatch):
        monkeypatch.setattr(
            "gentools.clipboard.subprocess.run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 0, stdout="notes\n".encode("utf-8")),
        )
        assert xclip.read() == "notes\n"

    def test_failing_tool(self, xclip, monkeypatch):
        def fake_run(args, **kwargs):
            raise subprocess.CalledProcessError(1, args)

        monkeypatch.setattr("gentools.clipboard.subprocess.run", fake_run)
        with pytest.raises(ClipboardError):
            xclip.write("text")

    def test_tool_vanished(self, xclip, monkeypatch):
        def fake_run(args, **kwargs):
            raise FileNotFoundError(args[0])

        monkeypatch.setattr("gentools.clipboard.subprocess.run", fake_run)
        with pytest.raises(ToolUnavailableError):
            xclip.read()


# ---------------------------------------------------------------------------
# Git
# ---------------------------------------------------------------------------

class TestGitAnalyzer:

    def _fake_git(self, monkeypatch, diff="", fail=None, missing=False):
        def fake_run(args, **kwargs):
            if missing:
                raise FileNotFoundError("git")
            if fail and args[1] == fail:
                raise subprocess.CalledProcessError(128, args, stderr="fatal: not a git repository")
            stdout = diff if args[1] == "diff" else "ok\n"
            return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr="")

        monkeypatch.setattr("gentools.git.analyzer.subprocess.run", fake_run)

    def test_returns_staged_diff(self, monkeypatch):
        self._fake_git(monkeypatch, diff="diff --git a/x b/x\n+1\n")
        assert GitAnalyzer().get_staged_diff() == "diff --git a/x b/x\n+1\n"

    def test_empty_diff(self, monkeypatch):
        self._fake_git(monkeypatch, diff="")
        with pytest.raises(EmptyInputError, match="No staged changes"):
            GitAnalyzer().get_staged_diff()

    def test_git_missing(self, monkeypatch):
        self._fake_git(monkeypatch, missing=True)
        with pytest.raises(GitError, match="not installed"):
            GitAnalyzer()

    def test_not_a_repository(self, monkeypatch):
        self._fake_git(monkeypatch, fail="rev-parse")
        with pytest.raises(GitError, match="Not inside a git repository"):
            GitAnalyzer()

    def test_git_error_is_tool_error(self):
        assert issubclass(GitError, ToolUnavailableError)


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

class TestCredentials:

    def test_env_provider(self):
        assert EnvSecretProvider({"OPENAI_API_KEY": "sk-1"}).get("OPENAI_API_KEY") == "sk-1"
        assert EnvSecretProvider({}).get("OPENAI_API_KEY") is None

    def test_require_api_key_hint(self):
        with pytest.raises(MissingCredentialError, match="export OPENAI_API_KEY"):
            require_api_key(EnvSecretProvider({}))

    def test_get_secret_provider(self):
        assert isinstance(get_secret_provider("env"), EnvSecretProvider)
        assert isinstance(get_secret_provider("keychain", "my-key"), KeychainSecretProvider)
        with pytest.raises(ValueError):
            get_secret_provider("vault")

    def test_keychain_lookup(self, monkeypatch):
        calls = []

        def fake_run(args, **kwargs):
            calls.append(args)
            return subprocess.CompletedProcess(args, 0, stdout="sk-from-keychain\n", stderr="")

        monkeypatch.setattr("gentools.credentials.sys.platform", "darwin")
        monkeypatch.setattr("gentools.credentials.subprocess.run", fake_run)

        provider = KeychainSecretProvider(service="openai", account="me")
        assert provider.get("OPENAI_API_KEY") == "sk-from-keychain"
        assert calls[0] == ["security", "find-generic-password", "-a", "me", "-s", "openai", "-w"]

    def test_keychain_item_not_found(self, monkeypatch):
        monkeypatch.setattr("gentools.credentials.sys.platform", "darwin")
        monkeypatch.setattr(
            "gentools.credentials.subprocess.run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 44, stdout="", stderr="not found"),
        )
        provider = KeychainSecretProvider(account="me")
        with pytest.raises(MissingCredentialError, match="security add-generic-password"):
            require_api_key(provider)

    def test_keychain_off_macos(self, monkeypatch):
        monkeypatch.setattr("gentools.credentials.sys.platform", "linux")
        with pytest.raises(ToolUnavailableError):
            KeychainSecretProvider(account="me").get("OPENAI_API_KEY")
