"""Tests for the notes service access grantor."""

from __future__ import annotations

import json

import httpx

from app.infrastructure.note_access import NotesServiceAccessGrantor


def test_grant_posts_share_request_to_notes_service() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(201, json={"status": "shared"})

    grantor = NotesServiceAccessGrantor(
        "http://notes.local", transport=httpx.MockTransport(handler)
    )

    assert grantor.grant_access("n1", "bob@x.com", "alice@x.com") is True
    assert len(captured) == 1
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "http://notes.local/notes/n1/share"
    assert request.headers["X-User-Email"] == "alice@x.com"
    assert json.loads(request.content) == {"note_id": "n1", "emails": ["bob@x.com"]}


def test_grant_reports_error_status() -> None:
    grantor = NotesServiceAccessGrantor(
        "http://notes.local",
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )

    assert grantor.grant_access("n1", "bob@x.com", "alice@x.com") is False


def test_grant_reports_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    grantor = NotesServiceAccessGrantor(
        "http://notes.local", transport=httpx.MockTransport(handler)
    )

    assert grantor.grant_access("n1", "bob@x.com", "alice@x.com") is False


def test_grant_is_skipped_without_configuration() -> None:
    assert NotesServiceAccessGrantor(None).grant_access("n1", "bob@x.com", "alice@x.com") is False


def test_note_id_is_encoded_as_a_single_path_segment() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200)

    grantor = NotesServiceAccessGrantor(
        "http://notes.local", transport=httpx.MockTransport(handler)
    )

    assert grantor.grant_access("../admin?x=1", "bob@x.com", "alice@x.com") is True
    request = captured[0]
    assert request.url.raw_path == b"/notes/..%2Fadmin%3Fx%3D1/share"
    assert request.url.query == b""
    assert json.loads(request.content)["note_id"] == "../admin?x=1"


def test_invalid_url_is_reported_instead_of_raised() -> None:
    grantor = NotesServiceAccessGrantor(
        "http://notes\x01.local",
        transport=httpx.MockTransport(lambda request: httpx.Response(200)),
    )

    assert grantor.grant_access("n1", "bob@x.com", "alice@x.com") is False
