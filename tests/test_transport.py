"""Tests for HttpxTransport reply classification."""

import httpx

from imagehost import GitHubImageHost, HostConfig, HttpxTransport, ReplyError


def make_transport(handler, **kwargs):
    return HttpxTransport(transport=httpx.MockTransport(handler), **kwargs)


class TestHttpxTransport:
    """Status codes and exceptions map to ReplyError."""

    def test_success(self):
        transport = make_transport(lambda request: httpx.Response(201, content=b'{"a": 1}'))
        reply = transport.send("PUT", "https://api.github.com/x", {}, b"{}")
        assert reply.error is ReplyError.NO_ERROR
        assert reply.ok
        assert reply.status_code == 201
        assert reply.data == b'{"a": 1}'

    def test_not_found(self):
        transport = make_transport(lambda request: httpx.Response(404, content=b"nope"))
        reply = transport.send("GET", "https://api.github.com/x", {})
        assert reply.error is ReplyError.CONTENT_NOT_FOUND
        assert reply.text == "nope"
        assert "404" in reply.error_string

    def test_other_status(self):
        transport = make_transport(lambda request: httpx.Response(401, content=b"denied"))
        reply = transport.send("GET", "https://api.github.com/x", {})
        assert reply.error is ReplyError.HTTP_ERROR
        assert not reply.ok

    def test_network_error_does_not_raise(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        reply = make_transport(handler).send("GET", "https://api.github.com/x", {})
        assert reply.error is ReplyError.NETWORK_ERROR
        assert reply.data == b""
        assert "connection refused" in reply.error_string

    def test_single_attempt_by_default(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("down", request=request)

        make_transport(handler).send("GET", "https://api.github.com/x", {})
        assert len(attempts) == 1

    def test_retries_connection_failures(self, monkeypatch):
        monkeypatch.setattr("time.sleep", lambda seconds: None)
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("down", request=request)
            return httpx.Response(200, content=b"{}")

        reply = make_transport(handler, max_retries=3).send("GET", "https://api.github.com/x", {})
        assert reply.ok
        assert len(attempts) == 3

    def test_headers_and_body_sent(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.content
            return httpx.Response(200)

        make_transport(handler).send(
            "DELETE", "https://api.github.com/x", {"Authorization": "token t"}, b'{"sha":"1"}'
        )
        assert seen == {"method": "DELETE", "auth": "token t", "body": b'{"sha":"1"}'}

    def test_invalid_url_does_not_raise(self):
        transport = make_transport(lambda request: httpx.Response(200))
        reply = transport.send("GET", "https://api.github.com/repos/a/b/contents/a\nb.png", {})
        assert reply.error is ReplyError.INVALID_REQUEST
        assert not reply.ok

    def test_non_ascii_header_does_not_raise(self):
        transport = make_transport(lambda request: httpx.Response(200))
        reply = transport.send("GET", "https://api.github.com/x", {"Authorization": "token tök"})
        assert reply.error is ReplyError.INVALID_REQUEST
        assert reply.error_string


def test_host_over_httpx():
    requests = []
    url = "https://raw.githubusercontent.com/alice/notes/master/a/b.png"

    def handler(request):
        requests.append(request)
        if request.method == "GET" and not any(r.method == "PUT" for r in requests):
            return httpx.Response(404, json={"message": "Not Found"})
        if request.method == "PUT":
            return httpx.Response(201, json={"content": {"download_url": url}})
        if request.method == "GET":
            return httpx.Response(200, json={"sha": "deadbeef"})
        return httpx.Response(200, json={"commit": {}})

    host = GitHubImageHost(
        HostConfig(access_token="t", owner_name="alice", repo_name="notes"),
        transport=make_transport(handler),
    )
    created, _ = host.create(b"img", "a/b.png")
    assert created == url
    removed, message = host.remove(created)
    assert removed, message
    assert [r.method for r in requests] == ["GET", "PUT", "GET", "DELETE"]
    assert requests[0].url.path == "/repos/alice/notes/contents/a/b.png"
    assert requests[0].headers["Accept"] == "application/vnd.github.v3+json"
    assert requests[3].content == b'{"message":"VX_DEL: a/b.png","sha":"deadbeef"}'


class TestHostWithMalformedInput:
    """Bad paths and tokens come back as failures, not exceptions."""

    def test_create_with_control_character_in_path(self):
        requests = []
        host = GitHubImageHost(
            HostConfig(access_token="t", owner_name="alice", repo_name="notes"),
            transport=make_transport(lambda request: requests.append(request) or httpx.Response(404)),
        )
        url, message = host.create(b"x", "a\nb.png")
        assert url == ""
        assert message.startswith("Failed to query the resource at the image host")
        assert requests == []

    def test_validate_config_with_non_ascii_token(self):
        host = GitHubImageHost(transport=make_transport(lambda request: httpx.Response(200)))
        ok, message = host.validate_config(
            HostConfig(access_token="tök", owner_name="alice", repo_name="notes")
        )
        assert not ok
        assert message == ""
