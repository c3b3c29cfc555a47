"""Git forge URL utilities (GitHub / GitLab)."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_GITHUB_URL_RE = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$", re.IGNORECASE)
_SHORT_URL_RE = re.compile(r"^([^/:@\s]+)/([^/:@\s]+?)(?:\.git)?/?$")

_RELEASE_DOWNLOAD_RE = re.compile(
    r"^https?://(?:www\.)?github\.com/([^/]+)/([^/]+)/releases/download/", re.IGNORECASE
)
_REPO_HOMEPAGE_RE = re.compile(
    r"^https?://(?:www\.)?(?:github\.com|gitlab\.com)/[^/]+/[^/]+/?$", re.IGNORECASE
)

# Comparison operators stripped before testing for a bare dotted version.
_SPEC_OPERATORS = ("~>", ">=", "<=", ">", "<")
_BARE_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*$")


def parse_github_url(repo_url: str) -> tuple[str, str] | None:
    """Extract ``(owner, repo)`` from a GitHub URL.

    Handles:
      - https://github.com/owner/repo
      - https://github.com/owner/repo.git
      - git@github.com:owner/repo.git
      - owner/repo
    """
    repo_url = repo_url.strip()
    for pattern in (_GITHUB_URL_RE, _SHORT_URL_RE):
        m = pattern.search(repo_url)
        if m:
            return m.group(1), m.group(2)
    return None


def parse_gitlab_url(repo_url: str) -> tuple[str, str] | None:
    """Extract ``(host, project_path)`` from a GitLab URL.

    Only hosts whose name contains ``gitlab`` are recognised (gitlab.com and
    the usual self-hosted ``gitlab.example.org`` naming). Nested group paths
    are kept intact: ``https://gitlab.com/group/sub/proj.git`` gives
    ``("gitlab.com", "group/sub/proj")``.
    """
    repo_url = repo_url.strip()

    # SCP-like SSH form: git@gitlab.com:group/proj.git
    if "://" not in repo_url and "@" in repo_url and ":" in repo_url:
        host_part, _, path = repo_url.partition(":")
        host = host_part.rsplit("@", 1)[-1]
    else:
        parts = urlsplit(repo_url)
        host = parts.hostname or ""
        path = parts.path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]

    if "gitlab" not in host.lower() or "/" not in path:
        return None
    return host, path


def github_clone_url_from_release(http_url: str) -> str | None:
    """Map a GitHub ``releases/download`` asset URL to the repo's clone URL."""
    m = _RELEASE_DOWNLOAD_RE.match(http_url.strip())
    if m is None:
        return None
    return f"https://github.com/{m.group(1)}/{m.group(2)}.git"


def infer_git_url(http_url: str, homepage: str | None) -> str | None:
    """Best-effort guess of the Git repository behind an HTTP pod source.

    Tries the release-download URL shape first, then the pod's homepage when
    it points straight at a hosted repository. Returns None when neither
    applies.
    """
    from_release = github_clone_url_from_release(http_url)
    if from_release is not None:
        return from_release

    if homepage and _REPO_HOMEPAGE_RE.match(homepage.strip()):
        url = homepage.strip().rstrip("/")
        return url if url.endswith(".git") else f"{url}.git"
    return None


def version_tag_from_spec(spec: str) -> str | None:
    """Derive a tag candidate from a CocoaPods constraint.

    ``"~> 2.1.0"`` gives ``"2.1.0"``; anything that is not a bare dotted
    number once the operator is stripped gives None.
    """
    version = spec.strip()
    for op in _SPEC_OPERATORS:
        if version.startswith(op):
            version = version[len(op) :].strip()
            break
    return version if _BARE_VERSION_RE.match(version) else None
