"""Gmail API client helpers."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any, Dict, Iterable

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .config import Settings, get_settings
from .errors import UpstreamError
from .models import Message

logger = logging.getLogger(__name__)

DEFAULT_LABELS = ("INBOX", "SENT")


class GmailClient:
    """Light wrapper around the Gmail API for one hour of message headers."""

    def __init__(self, settings: Settings | None = None, *, service: Any = None) -> None:
        self._settings = settings or get_settings()
        self._service_instance = service

    def _credentials(self) -> Credentials:
        if not self._settings.google_refresh_token:
            raise ValueError("GOOGLE_REFRESH_TOKEN must be set before using the Gmail client.")

        creds = Credentials(
            None,
            refresh_token=self._settings.google_refresh_token,
            client_id=self._settings.google_client_id,
            client_secret=self._settings.google_client_secret,
            token_uri="https://oauth2.googleapis.com/token",
            scopes=list(self._settings.google_scopes),
        )
        if creds.expired and creds.refresh_token:
            creds.refresh(Request())
        return creds

    def _service(self):
        if self._service_instance is None:
            credentials = self._credentials()
            self._service_instance = build("gmail", "v1", credentials=credentials, cache_discovery=False)
        return self._service_instance

    def get_email_address(self) -> str:
        """Return the address of the authenticated mailbox."""
        try:
            profile = self._service().users().getProfile(userId=self._settings.gmail_user_id).execute()
        except HttpError as exc:
            raise UpstreamError(f"Fetching the Gmail profile failed: {exc}") from exc
        return profile["emailAddress"]

    def iter_window(
        self,
        start: int,
        end: int,
        label_ids: Iterable[str] = DEFAULT_LABELS,
        page_size: int = 100,
    ) -> Generator[Message, None, None]:
        """Yield messages carrying any of ``label_ids`` dated in ``[start, end)``.

        Each label is listed separately; a message found under several labels
        is yielded once.
        """
        seen: set[str] = set()
        for label in label_ids:
            for metadata in self._list_ids(f"after:{start} before:{end}", label, page_size):
                if metadata["id"] in seen:
                    continue
                seen.add(metadata["id"])
                yield Message.from_headers(self._fetch_headers(metadata["id"]))

    def _list_ids(self, query: str, label: str, page_size: int) -> Generator[Dict[str, Any], None, None]:
        service = self._service()
        request = service.users().messages().list(
            userId=self._settings.gmail_user_id,
            q=query,
            labelIds=[label],
            maxResults=page_size,
        )

        while request is not None:
            try:
                response = request.execute()
            except HttpError as exc:
                raise UpstreamError(f"Listing {label} messages failed: {exc}") from exc
            yield from response.get("messages", [])
            request = service.users().messages().list_next(previous_request=request, previous_response=response)

    def _fetch_headers(self, message_id: str) -> Dict[str, Any]:
        try:
            detail = (
                self._service()
                .users()
                .messages()
                .get(
                    userId=self._settings.gmail_user_id,
                    id=message_id,
                    format="metadata",
                    metadataHeaders=["From", "To"],
                )
                .execute()
            )
        except HttpError as exc:
            raise UpstreamError(f"Fetching message {message_id} failed: {exc}") from exc
        return self._simplify_message(detail)

    @staticmethod
    def _simplify_message(message: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            item["name"].lower(): item["value"]
            for item in message.get("payload", {}).get("headers", [])
        }
        return {
            "id": message.get("id"),
            "from": headers.get("from"),
            "to": headers.get("to"),
        }


__all__ = ["GmailClient"]
