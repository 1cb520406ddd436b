"""Shared fixtures for image host tests."""

import json

import pytest

from imagehost import GitHubImageHost, HostConfig, Reply, ReplyError


class FakeTransport:
    """Transport returning queued replies and recording every call."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def send(self, method, url, headers, body=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "body": body})
        if not self.replies:
            raise AssertionError(f"unexpected request: {method} {url}")
        return self.replies.pop(0)

    def methods(self):
        return [c["method"] for c in self.calls]


def ok(payload=None):
    """2xx reply with a JSON body."""
    return Reply(error=ReplyError.NO_ERROR, data=json.dumps(payload or {}).encode(), status_code=200)


def not_found():
    return Reply(
        error=ReplyError.CONTENT_NOT_FOUND,
        data=b'{"message":"Not Found"}',
        status_code=404,
        error_string="HTTP 404 Not Found",
    )


def http_error(status=500, body=b'{"message":"Server Error"}'):
    return Reply(
        error=ReplyError.HTTP_ERROR,
        data=body,
        status_code=status,
        error_string=f"HTTP {status}",
    )


@pytest.fixture
def config():
    return HostConfig(access_token="t", owner_name="alice", repo_name="notes")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def host(config, transport):
    return GitHubImageHost(config, transport=transport)


def network_error():
    return Reply(error=ReplyError.NETWORK_ERROR, error_string="connection refused")
