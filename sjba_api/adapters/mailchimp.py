"""
Mailchimp Marketing API v3 adapter.

Implements MailingListPort over HTTPS with ``requests``. Subscribers are
addressed by the MD5 hex digest of the lowercased email, as the API
requires.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence
from typing import Any

import requests

from sjba_api.domain.errors import MailingListError

logger = logging.getLogger(__name__)

HEALTHY_PING = "Everything's Chimpy!"
FULL_NAME_MERGE_FIELD = "MMERGE6"
DEFAULT_TIMEOUT_SECONDS = 10.0


def subscriber_hash(email: str) -> str:
    return hashlib.md5(email.lower().encode("utf-8")).hexdigest()


class MailchimpAdapter:
    """Mailing-list client for one Mailchimp audience."""

    def __init__(
        self,
        api_key: str,
        server_prefix: str,
        list_id: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.list_id = list_id
        self.base_url = f"https://{server_prefix}.api.mailchimp.com/3.0"
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.auth = ("anystring", api_key)

    # --- MailingListPort ---

    def upsert_subscriber(
        self,
        email: str,
        first_name: str,
        last_name: str,
        tags: Sequence[str] = (),
    ) -> None:
        member_path = f"/lists/{self.list_id}/members/{subscriber_hash(email)}"
        self._request(
            "PUT",
            member_path,
            json={
                "email_address": email,
                "status_if_new": "subscribed",
                "merge_fields": {
                    "FNAME": first_name,
                    "LNAME": last_name,
                    FULL_NAME_MERGE_FIELD: f"{first_name} {last_name}",
                },
            },
        )
        if tags:
            # The member is already subscribed; a missing tag must not undo that
            try:
                self._request(
                    "POST",
                    f"{member_path}/tags",
                    json={"tags": [{"name": tag, "status": "active"} for tag in tags]},
                )
            except MailingListError as e:
                logger.warning(
                    "Tagging mailing list subscriber %s failed: %s",
                    email,
                    e,
                    extra={"email": email},
                )
        logger.info("Added/updated mailing list subscriber", extra={"email": email})

    def remove_subscriber(self, email: str) -> None:
        self._request(
            "DELETE",
            f"/lists/{self.list_id}/members/{subscriber_hash(email)}",
            allow_not_found=True,
        )
        logger.info("Removed mailing list subscriber", extra={"email": email})

    def ping(self) -> None:
        body = self._request("GET", "/ping")
        status = body.get("health_status") if isinstance(body, dict) else None
        if status != HEALTHY_PING:
            raise MailingListError(f"Unexpected ping response: {status!r}")

    # --- HTTP ---

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise MailingListError(f"Mailchimp request failed: {e}") from e

        if allow_not_found and response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise MailingListError(
                f"Mailchimp {method} {path} returned {response.status_code}: {_problem(response)}",
                status=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None


def _problem(response: requests.Response) -> str:
    """Extract the API problem detail, falling back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("title") or body)
    return str(body)
