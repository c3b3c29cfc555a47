"""Check remote Git repositories for a Package.swift manifest.

Strategies, tried in order until one succeeds:

1. GitHub contents API (``HEAD`` for existence, ``GET`` + base64 for content)
2. GitLab repository files API (project path percent-encoded)
3. Plain git against the remote: ``git ls-remote`` + ``git archive --remote``

Every failure is swallowed and the next strategy is tried; callers only ever
see ``False`` / ``None``.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import os
import tarfile
from urllib.parse import quote

import httpx
import structlog

from cdv2spm.core.forge import parse_github_url, parse_gitlab_url
from cdv2spm.core.process import run_command

log = structlog.get_logger("cdv2spm.resolver")

MANIFEST_FILE = "Package.swift"

_GITHUB_API = "https://api.github.com"
_DEFAULT_HTTP_TIMEOUT = 10.0
_GIT_TIMEOUT = 20.0


class GitRepositoryChecker:
    """Locate and fetch Package.swift in a remote repository at a given ref."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = None,
        github_token: str | None = None,
        gitlab_token: str | None = None,
        git_timeout: float = _GIT_TIMEOUT,
    ) -> None:
        if timeout is None:
            timeout = float(os.environ.get("CDV2SPM_HTTP_TIMEOUT", _DEFAULT_HTTP_TIMEOUT))
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._owns_client = client is None
        self._github_token = github_token or os.environ.get("GITHUB_TOKEN")
        self._gitlab_token = gitlab_token or os.environ.get("GITLAB_TOKEN")
        self._git_timeout = git_timeout

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GitRepositoryChecker:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def has_package_swift(self, repo_url: str, ref: str = "main") -> bool:
        """True if Package.swift exists in *repo_url* at *ref*."""
        log.debug("remote.check", url=repo_url, ref=ref)

        if await self._github_exists(repo_url, ref):
            return True
        if await self._gitlab_exists(repo_url, ref):
            return True
        return await self._git_exists(repo_url, ref)

    async def fetch_package_swift(self, repo_url: str, ref: str = "main") -> str | None:
        """Raw Package.swift text from *repo_url* at *ref*, or None."""
        log.debug("remote.fetch", url=repo_url, ref=ref)

        for fetch in (self._github_content, self._gitlab_content, self._git_content):
            content = await fetch(repo_url, ref)
            if content is not None:
                return content
        return None

    # ── GitHub ─────────────────────────────────────────────────────────────

    def _github_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._github_token:
            headers["Authorization"] = f"token {self._github_token}"
        return headers

    @staticmethod
    def _github_contents_url(repo_url: str) -> str | None:
        owner_repo = parse_github_url(repo_url)
        if owner_repo is None:
            return None
        owner, repo = owner_repo
        return f"{_GITHUB_API}/repos/{owner}/{repo}/contents/{MANIFEST_FILE}"

    async def _github_exists(self, repo_url: str, ref: str) -> bool:
        api_url = self._github_contents_url(repo_url)
        if api_url is None:
            return False
        return await self._head_ok(api_url, ref, self._github_headers())

    async def _github_content(self, repo_url: str, ref: str) -> str | None:
        api_url = self._github_contents_url(repo_url)
        if api_url is None:
            return None
        resp = await self._get(api_url, ref, self._github_headers())
        if resp is None:
            return None
        try:
            data = resp.json()
        except ValueError:
            return None
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            return None
        return _decode_base64(data["content"])

    # ── GitLab ─────────────────────────────────────────────────────────────

    def _gitlab_headers(self) -> dict[str, str]:
        return {"PRIVATE-TOKEN": self._gitlab_token} if self._gitlab_token else {}

    @staticmethod
    def _gitlab_file_url(repo_url: str) -> str | None:
        host_path = parse_gitlab_url(repo_url)
        if host_path is None:
            return None
        host, project_path = host_path
        project = quote(project_path, safe="")
        return f"https://{host}/api/v4/projects/{project}/repository/files/{MANIFEST_FILE}"

    async def _gitlab_exists(self, repo_url: str, ref: str) -> bool:
        api_url = self._gitlab_file_url(repo_url)
        if api_url is None:
            return False
        return await self._head_ok(api_url, ref, self._gitlab_headers())

    async def _gitlab_content(self, repo_url: str, ref: str) -> str | None:
        api_url = self._gitlab_file_url(repo_url)
        if api_url is None:
            return None
        resp = await self._get(f"{api_url}/raw", ref, self._gitlab_headers())
        if resp is None:
            return None
        return resp.text

    # ── git fallback ───────────────────────────────────────────────────────

    async def _git_exists(self, repo_url: str, ref: str) -> bool:
        log.debug("remote.git_check", url=repo_url, ref=ref)
        ls_remote = ["git", "ls-remote", "--exit-code", repo_url, ref]
        if not await self._git_ok(ls_remote):
            return False
        archive = ["git", "archive", f"--remote={repo_url}", ref, MANIFEST_FILE]
        return await self._git_ok(archive)

    async def _git_content(self, repo_url: str, ref: str) -> str | None:
        log.debug("remote.git_fetch", url=repo_url, ref=ref)
        cmd = ["git", "archive", f"--remote={repo_url}", ref, MANIFEST_FILE]
        try:
            result = await run_command(cmd, timeout=self._git_timeout)
        except (OSError, asyncio.TimeoutError) as exc:
            log.debug("remote.git_failed", cmd=cmd[:2], error=str(exc) or type(exc).__name__)
            return None
        if not result.ok:
            return None
        return _extract_from_tar(result.stdout, MANIFEST_FILE)

    async def _git_ok(self, cmd: list[str]) -> bool:
        try:
            result = await run_command(cmd, timeout=self._git_timeout)
        except (OSError, asyncio.TimeoutError) as exc:
            log.debug("remote.git_failed", cmd=cmd[:2], error=str(exc) or type(exc).__name__)
            return False
        return result.ok

    # ── HTTP helpers ───────────────────────────────────────────────────────

    async def _head_ok(self, url: str, ref: str, headers: dict[str, str]) -> bool:
        try:
            resp = await self._client.head(url, params={"ref": ref}, headers=headers)
        except httpx.HTTPError as exc:
            log.debug("remote.head_failed", url=url, error=str(exc))
            return False
        return resp.status_code == 200

    async def _get(self, url: str, ref: str, headers: dict[str, str]) -> httpx.Response | None:
        try:
            resp = await self._client.get(url, params={"ref": ref}, headers=headers)
        except httpx.HTTPError as exc:
            log.debug("remote.get_failed", url=url, error=str(exc))
            return None
        if resp.status_code != 200:
            log.debug("remote.get_status", url=url, status=resp.status_code)
            return None
        return resp


def _decode_base64(payload: str) -> str | None:
    # The contents API wraps base64 at 60 columns
    try:
        raw = base64.b64decode(payload.replace("\n", ""), validate=True)
    except (binascii.Error, ValueError):
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _extract_from_tar(data: bytes, member: str) -> str | None:
    """Pull one file out of a ``git archive`` tarball."""
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as tar:
            fobj = tar.extractfile(member)
            if fobj is None:
                return None
            return fobj.read().decode("utf-8", errors="replace")
    except (tarfile.TarError, KeyError):
        return None
