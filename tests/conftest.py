from contextlib import asynccontextmanager
import http

import pytest
from gidgethub import BadRequest

from deploy_comment.github.api import CommentAPI


class FakeGitHub:
    """In-memory stand-in for the issue comment endpoints of ``GitHubAPI``."""

    def __init__(self, comments=None, fail=None):
        self.comments = [dict(c) for c in comments or []]
        self.fail = fail or {}
        self.calls = []
        self._next_id = 1000

    def _check(self, method):
        if method in self.fail:
            raise self.fail[method]

    @property
    def mutations(self):
        return [c for c in self.calls if c[0] in ("PATCH", "POST")]

    async def getiter(self, url, url_vars=None, **kwargs):
        self.calls.append(("GET", url, url_vars))
        self._check("GET")
        for comment in list(self.comments):
            yield dict(comment)

    async def patch(self, url, url_vars=None, data=None, **kwargs):
        self.calls.append(("PATCH", url, url_vars))
        self._check("PATCH")
        for comment in self.comments:
            if comment["id"] == url_vars["comment_id"]:
                comment["body"] = data["body"]
                return dict(comment)
        raise BadRequest(http.HTTPStatus.NOT_FOUND, "Not Found")

    async def post(self, url, url_vars=None, data=None, **kwargs):
        self.calls.append(("POST", url, url_vars))
        self._check("POST")
        self._next_id += 1
        comment = {
            "id": self._next_id,
            "body": data["body"],
            "user": {"login": "deploy-bot", "type": "Bot"},
            "html_url": f"https://github.com/org/repo/pull/1#issuecomment-{self._next_id}",
        }
        self.comments.append(comment)
        return dict(comment)


@pytest.fixture
def fake_github():
    return FakeGitHub


@pytest.fixture
def make_connect():
    def factory(gh):
        seen = []

        @asynccontextmanager
        async def connect(credentials, base_url):
            seen.append(credentials)
            yield CommentAPI(gh)

        connect.seen = seen
        return connect

    return factory


@pytest.fixture
def deploy_env():
    return {
        "CONTEXT": "deploy-preview",
        "PULL_REQUEST": "true",
        "REVIEW_ID": "42",
        "REPOSITORY_URL": "https://github.com/org/repo",
        "DEPLOY_PRIME_URL": "https://deploy-preview-42--my-site.netlify.app",
        "COMMIT_REF": "abcdef1234567890abcdef1234567890abcdef12",
        "DEPLOY_ID": "64f0c0ffee",
        "SITE_ID": "site-uuid",
        "VITE_GATEWAY_API_URL": "https://api.staging.example.com",
        "GITHUB_TOKEN": "ghp_secret",
    }
