"""
Tests for the Mailchimp adapter, using a recording fake session.
"""

from __future__ import annotations

import hashlib
from typing import Any

import pytest
import requests

from sjba_api.adapters.mailchimp import MailchimpAdapter, subscriber_hash
from sjba_api.adapters.sqlite_db import SQLiteNewsletterSignupRepo
from sjba_api.components.newsletter import SignupInput, run
from sjba_api.domain.errors import MailingListError


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None) -> None:
        self.status_code = status_code
        self._body = body
        self.content = b"" if body is None else b"x"
        self.text = "" if body is None else str(body)

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no body")
        return self._body


class FakeSession:
    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.auth: Any = None

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_adapter(session: FakeSession) -> MailchimpAdapter:
    return MailchimpAdapter("key-us21", "us21", "list123", session=session)  # type: ignore[arg-type]


def test_subscriber_hash_lowercases() -> None:
    expected = hashlib.md5(b"jane@nyu.edu").hexdigest()
    assert subscriber_hash("Jane@NYU.edu") == expected


def test_basic_auth_configured() -> None:
    session = FakeSession()
    make_adapter(session)
    assert session.auth == ("anystring", "key-us21")


def test_upsert_then_tag() -> None:
    session = FakeSession(FakeResponse(200, {"id": "abc"}), FakeResponse(204))
    make_adapter(session).upsert_subscriber(
        "jane@nyu.edu", "Jane", "Doe", tags=["Website Signup"]
    )

    put, tag = session.calls
    member_url = (
        f"https://us21.api.mailchimp.com/3.0/lists/list123/members/{subscriber_hash('jane@nyu.edu')}"
    )
    assert put["method"] == "PUT"
    assert put["url"] == member_url
    assert put["json"] == {
        "email_address": "jane@nyu.edu",
        "status_if_new": "subscribed",
        "merge_fields": {"FNAME": "Jane", "LNAME": "Doe", "MMERGE6": "Jane Doe"},
    }
    assert tag["method"] == "POST"
    assert tag["url"] == f"{member_url}/tags"
    assert tag["json"] == {"tags": [{"name": "Website Signup", "status": "active"}]}


def test_upsert_without_tags_skips_tag_call() -> None:
    session = FakeSession(FakeResponse(200, {"id": "abc"}))
    make_adapter(session).upsert_subscriber("jane@nyu.edu", "Jane", "Doe")
    assert len(session.calls) == 1


def test_upsert_api_error() -> None:
    session = FakeSession(FakeResponse(400, {"title": "Invalid Resource", "detail": "fake"}))
    with pytest.raises(MailingListError) as exc:
        make_adapter(session).upsert_subscriber("jane@nyu.edu", "Jane", "Doe")
    assert exc.value.upstream_status == 400
    assert "fake" in str(exc.value)


def test_network_error() -> None:
    session = FakeSession(requests.exceptions.ConnectTimeout("timed out"))
    with pytest.raises(MailingListError, match="request failed"):
        make_adapter(session).upsert_subscriber("jane@nyu.edu", "Jane", "Doe")


def test_remove_treats_404_as_success() -> None:
    session = FakeSession(FakeResponse(404, {"title": "Resource Not Found"}))
    make_adapter(session).remove_subscriber("jane@nyu.edu")
    assert session.calls[0]["method"] == "DELETE"


def test_remove_failure() -> None:
    session = FakeSession(FakeResponse(503, {"title": "Unavailable"}))
    with pytest.raises(MailingListError):
        make_adapter(session).remove_subscriber("jane@nyu.edu")


def test_ping() -> None:
    session = FakeSession(FakeResponse(200, {"health_status": "Everything's Chimpy!"}))
    make_adapter(session).ping()
    assert session.calls[0]["url"].endswith("/3.0/ping")


def test_ping_unexpected_body() -> None:
    session = FakeSession(FakeResponse(200, {"health_status": "meh"}))
    with pytest.raises(MailingListError, match="Unexpected ping"):
        make_adapter(session).ping()


def test_tag_failure_keeps_subscriber() -> None:
    session = FakeSession(FakeResponse(200, {"id": "abc"}), FakeResponse(500, {"title": "Boom"}))
    make_adapter(session).upsert_subscriber(
        "jane@nyu.edu", "Jane", "Doe", tags=["Website Signup"]
    )
    assert [c["method"] for c in session.calls] == ["PUT", "POST"]


def test_signup_stored_when_tagging_fails(db_path: str) -> None:
    repo = SQLiteNewsletterSignupRepo(db_path)
    session = FakeSession(
        FakeResponse(200, {"id": "abc"}), FakeResponse(500, {"title": "Boom"}), FakeResponse(204)
    )

    result = run(
        SignupInput(email="jane@nyu.edu", first_name="Jane", last_name="Doe"),
        repo=repo,
        mailing_list=make_adapter(session),
    )

    assert result.success
    assert result.created
    assert repo.get_by_email("jane@nyu.edu") is not None
    assert "DELETE" not in [c["method"] for c in session.calls]
