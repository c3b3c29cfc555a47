"""Tests for remote Package.swift lookup (GitHub, GitLab, git fallback)."""

from __future__ import annotations

import asyncio
import base64
import io
import tarfile
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cdv2spm.core.process import CommandResult
from cdv2spm.engines.dependency_resolver.remote import (
    GitRepositoryChecker,
    _decode_base64,
    _extract_from_tar,
)

_RUN = "cdv2spm.engines.dependency_resolver.remote.run_command"

_MANIFEST = 'let package = Package(name: "Y", products: [.library(name: "Y", targets: ["Y"])])\n'


def _client(head=None, get=None) -> MagicMock:
    client = MagicMock(spec=httpx.AsyncClient)
    client.head = AsyncMock(return_value=head or httpx.Response(404))
    client.get = AsyncMock(return_value=get or httpx.Response(404))
    client.aclose = AsyncMock()
    return client


def _checker(client: MagicMock, **kwargs) -> GitRepositoryChecker:
    kwargs.setdefault("github_token", None)
    kwargs.setdefault("gitlab_token", None)
    return GitRepositoryChecker(client=client, **kwargs)


def _tar(name: str, content: str) -> bytes:
    buf = io.BytesIO()
    data = content.encode()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        info = tarfile.TarInfo(name)
        info.size = len(data)
        tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


# ── GitHub ───────────────────────────────────────────────────────────────


class TestGitHub:
    @pytest.mark.anyio
    async def test_exists_via_head(self):
        client = _client(head=httpx.Response(200))
        with patch(_RUN, new=AsyncMock()) as run:
            assert await _checker(client).has_package_swift("https://github.com/x/y.git", "2.2.1")
        run.assert_not_awaited()
        args, kwargs = client.head.call_args
        assert args[0] == "https://api.github.com/repos/x/y/contents/Package.swift"
        assert kwargs["params"] == {"ref": "2.2.1"}
        assert "Authorization" not in kwargs["headers"]

    @pytest.mark.anyio
    async def test_token_header(self):
        client = _client(head=httpx.Response(200))
        await _checker(client, github_token="s3cret").has_package_swift("https://github.com/x/y", "main")
        assert client.head.call_args.kwargs["headers"]["Authorization"] == "token s3cret"

    @pytest.mark.anyio
    async def test_fetch_decodes_base64(self):
        encoded = base64.encodebytes(_MANIFEST.encode()).decode()
        client = _client(get=httpx.Response(200, json={"content": encoded, "encoding": "base64"}))
        content = await _checker(client).fetch_package_swift("git@github.com:x/y.git", "main")
        assert content == _MANIFEST

    @pytest.mark.anyio
    async def test_network_error_falls_through_to_git(self):
        client = _client()
        client.head.side_effect = httpx.ConnectTimeout("slow")
        with patch(_RUN, new=AsyncMock(return_value=CommandResult(0, b""))) as run:
            assert await _checker(client).has_package_swift("https://github.com/x/y.git", "main")
        assert run.await_count == 2
        assert run.await_args_list[0].args[0] == [
            "git",
            "ls-remote",
            "--exit-code",
            "https://github.com/x/y.git",
            "main",
        ]


# ── GitLab ───────────────────────────────────────────────────────────────


class TestGitLab:
    @pytest.mark.anyio
    async def test_exists_encodes_project_path(self):
        client = _client(head=httpx.Response(200))
        assert await _checker(client).has_package_swift("https://gitlab.com/group/sub/proj.git", "v1")
        url = client.head.call_args.args[0]
        assert url == "https://gitlab.com/api/v4/projects/group%2Fsub%2Fproj/repository/files/Package.swift"

    @pytest.mark.anyio
    async def test_fetch_raw(self):
        client = _client(get=httpx.Response(200, text=_MANIFEST))
        content = await _checker(client, gitlab_token="tok").fetch_package_swift(
            "https://gitlab.com/group/proj", "main"
        )
        assert content == _MANIFEST
        args, kwargs = client.get.call_args
        assert args[0].endswith("/repository/files/Package.swift/raw")
        assert kwargs["headers"] == {"PRIVATE-TOKEN": "tok"}


# ── git fallback ─────────────────────────────────────────────────────────


class TestGitFallback:
    @pytest.mark.anyio
    async def test_unknown_host_uses_git(self):
        client = _client()
        with patch(_RUN, new=AsyncMock(return_value=CommandResult(0, b""))):
            assert await _checker(client).has_package_swift("https://git.example.org/x/y.git", "1.0")
        client.head.assert_not_awaited()

    @pytest.mark.anyio
    async def test_missing_ref(self):
        with patch(_RUN, new=AsyncMock(return_value=CommandResult(2, b""))) as run:
            assert not await _checker(_client()).has_package_swift("https://git.example.org/x/y", "nope")
        run.assert_awaited_once()

    @pytest.mark.anyio
    async def test_git_missing(self):
        with patch(_RUN, new=AsyncMock(side_effect=FileNotFoundError("git"))):
            assert not await _checker(_client()).has_package_swift("https://git.example.org/x/y", "main")

    @pytest.mark.anyio
    async def test_git_timeout(self):
        with patch(_RUN, new=AsyncMock(side_effect=asyncio.TimeoutError())):
            assert await _checker(_client()).fetch_package_swift("https://git.example.org/x/y", "main") is None

    @pytest.mark.anyio
    async def test_fetch_from_archive(self):
        archive = _tar("Package.swift", _MANIFEST)
        with patch(_RUN, new=AsyncMock(return_value=CommandResult(0, archive))) as run:
            content = await _checker(_client()).fetch_package_swift("https://git.example.org/x/y", "1.0")
        assert content == _MANIFEST
        assert run.await_args.args[0] == [
            "git",
            "archive",
            "--remote=https://git.example.org/x/y",
            "1.0",
            "Package.swift",
        ]

    @pytest.mark.anyio
    async def test_everything_fails(self):
        with patch(_RUN, new=AsyncMock(return_value=CommandResult(128, b"fatal"))):
            assert await _checker(_client()).fetch_package_swift("https://github.com/x/y", "main") is None


# ── lifecycle & helpers ──────────────────────────────────────────────────


class TestLifecycle:
    @pytest.mark.anyio
    async def test_injected_client_not_closed(self):
        client = _client()
        async with _checker(client):
            pass
        client.aclose.assert_not_awaited()

    @pytest.mark.anyio
    async def test_owned_client_closed(self):
        checker = GitRepositoryChecker()
        with patch.object(checker._client, "aclose", new=AsyncMock()) as aclose:
            await checker.close()
        aclose.assert_awaited_once()


class TestHelpers:
    def test_decode_base64_wrapped(self):
        payload = base64.encodebytes(b"hello world" * 10).decode()
        assert "\n" in payload
        assert _decode_base64(payload) == "hello world" * 10

    def test_decode_base64_invalid(self):
        assert _decode_base64("not base64!!") is None

    def test_extract_from_tar_missing_member(self):
        assert _extract_from_tar(_tar("README.md", "hi"), "Package.swift") is None

    def test_extract_from_garbage(self):
        assert _extract_from_tar(b"not a tarball", "Package.swift") is None
