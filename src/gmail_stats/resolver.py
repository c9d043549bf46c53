"""MX record lookups used to tell whether a domain's mail is hosted by Google."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import Settings, get_settings
from .errors import UpstreamError

logger = logging.getLogger(__name__)

MX_RECORD_TYPE = 15
# DNS RCODE 3: the domain does not exist, which is an answer rather than a failure.
NXDOMAIN = 3


class MxRecordResolver:
    """Resolve a domain's MX records through a DNS-over-HTTPS JSON endpoint.

    A domain counts as provider-hosted when its most preferred mail exchange
    host contains ``marker`` (``google.com`` for Gmail and Workspace).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._session = session or requests.Session()

    def __call__(self, domain: str) -> bool:
        return self.resolve(domain)

    def resolve(self, domain: str) -> bool:
        records = self.mx_records(domain)
        if not records:
            return False
        _, exchange = min(records)
        return self._settings.mx_host_marker.lower() in exchange.lower()

    def mx_records(self, domain: str) -> List[Tuple[int, str]]:
        """Return ``(preference, exchange)`` pairs for ``domain``."""
        try:
            response = self._session.get(
                self._settings.dns_resolver_url,
                params={"name": domain, "type": "MX"},
                headers={"Accept": "application/dns-json"},
                timeout=self._settings.resolver_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise UpstreamError(f"MX lookup for {domain} failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError(f"MX lookup for {domain} returned a malformed body") from exc

        return self._parse_answer(domain, payload)

    @staticmethod
    def _parse_answer(domain: str, payload: Dict[str, Any]) -> List[Tuple[int, str]]:
        status = payload.get("Status", 0)
        if status == NXDOMAIN:
            logger.debug("Domain %s does not exist", domain)
            return []
        if status != 0:
            raise UpstreamError(f"MX lookup for {domain} failed with DNS status {status}")

        records: List[Tuple[int, str]] = []
        for answer in payload.get("Answer", []) or []:
            if answer.get("type") != MX_RECORD_TYPE:
                continue
            parts = str(answer.get("data", "")).split()
            if len(parts) != 2:
                raise UpstreamError(f"Unexpected MX answer for {domain}: {answer.get('data')!r}")
            preference, exchange = parts
            try:
                records.append((int(preference), exchange.rstrip(".")))
            except ValueError as exc:
                raise UpstreamError(f"Unexpected MX preference for {domain}: {preference!r}") from exc
        return records


__all__ = ["MxRecordResolver"]
