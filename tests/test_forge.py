"""Tests for GitHub / GitLab URL helpers."""

from __future__ import annotations

import pytest

from cdv2spm.core.forge import (
    github_clone_url_from_release,
    infer_git_url,
    parse_github_url,
    parse_gitlab_url,
    version_tag_from_spec,
)


class TestParseGithubUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/owner/repo",
            "https://github.com/owner/repo.git",
            "https://github.com/owner/repo/",
            "git@github.com:owner/repo.git",
            "owner/repo",
        ],
    )
    def test_forms(self, url):
        assert parse_github_url(url) == ("owner", "repo")

    @pytest.mark.parametrize(
        "url",
        [
            "https://gitlab.com/group/proj.git",
            "https://example.com/a/b",
            "not a url",
        ],
    )
    def test_non_github(self, url):
        assert parse_github_url(url) is None


class TestParseGitlabUrl:
    def test_https(self):
        assert parse_gitlab_url("https://gitlab.com/group/proj.git") == ("gitlab.com", "group/proj")

    def test_nested_groups(self):
        assert parse_gitlab_url("https://gitlab.com/group/sub/proj") == ("gitlab.com", "group/sub/proj")

    def test_scp(self):
        assert parse_gitlab_url("git@gitlab.example.org:team/proj.git") == (
            "gitlab.example.org",
            "team/proj",
        )

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/owner/repo.git",
            "https://gitlab.com/just-a-group",
            "owner/repo",
        ],
    )
    def test_rejects(self, url):
        assert parse_gitlab_url(url) is None


class TestInference:
    def test_release_download(self):
        url = "https://github.com/owner/repo/releases/download/1.0.0/Repo.xcframework.zip"
        assert github_clone_url_from_release(url) == "https://github.com/owner/repo.git"

    def test_release_download_non_match(self):
        assert github_clone_url_from_release("https://cdn.example.com/sdk.zip") is None

    def test_infer_prefers_release_url(self):
        url = "https://github.com/owner/repo/releases/download/1.0/x.zip"
        assert infer_git_url(url, "https://github.com/other/thing") == "https://github.com/owner/repo.git"

    @pytest.mark.parametrize(
        "homepage, expected",
        [
            ("https://github.com/owner/repo", "https://github.com/owner/repo.git"),
            ("https://github.com/owner/repo/", "https://github.com/owner/repo.git"),
            ("https://gitlab.com/owner/repo.git", "https://gitlab.com/owner/repo.git"),
            ("https://www.example.com/sdk", None),
            ("https://github.com/owner/repo/wiki", None),
            (None, None),
        ],
    )
    def test_infer_from_homepage(self, homepage, expected):
        assert infer_git_url("https://cdn.example.com/sdk.zip", homepage) == expected


class TestVersionTag:
    @pytest.mark.parametrize(
        "spec, expected",
        [
            ("~> 2.1.0", "2.1.0"),
            (">= 1.0", "1.0"),
            ("<= 3", "3"),
            ("< 2.0", "2.0"),
            ("> 1.5.2", "1.5.2"),
            ("4.2.0", "4.2.0"),
            ("", None),
            ("1.0-beta", None),
            ("= 1.0", None),
        ],
    )
    def test_derivation(self, spec, expected):
        assert version_tag_from_spec(spec) == expected
