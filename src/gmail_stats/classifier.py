"""Decide whether a message counterparty is hosted by the tracked mail provider."""

from __future__ import annotations

import logging
from email.utils import getaddresses
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

DomainResolver = Callable[[str], bool]


def parse_addresses(header: str) -> List[str]:
    """Return the lower-cased addresses found in a ``From``/``To`` header."""
    if not header:
        return []
    return [address.strip().lower() for _, address in getaddresses([header]) if address.strip()]


def _domain_of(address: str) -> str:
    return address.rpartition("@")[2].strip().strip(">").lower()


class DomainClassifier:
    """Provider-hosting test with a literal fast path and a memoized resolver.

    Resolver failures are reported as "not hosted" so that one bad lookup
    never fails a whole hour. Create one instance per batch; answers are
    cached per domain for the instance's lifetime.
    """

    def __init__(self, resolver: DomainResolver, *, provider_domain: str = "gmail.com") -> None:
        self._resolver = resolver
        self._provider_domain = provider_domain.lower()
        self._cache: Dict[str, bool] = {}

    @property
    def provider_domain(self) -> str:
        return self._provider_domain

    def is_provider_hosted(self, address: str) -> bool:
        if not address:
            return False
        if self._provider_domain in address.lower():
            return True

        domain = _domain_of(address)
        if not domain:
            return False
        if domain not in self._cache:
            self._cache[domain] = self._resolve(domain)
        return self._cache[domain]

    def counterparty_is_provider_hosted(self, header: str, self_address: str) -> bool:
        """True when any address in ``header`` other than the account's own is hosted.

        A header naming only the account itself (mail sent to oneself) is
        judged on the account's own address.
        """
        own = self_address.lower()
        addresses = parse_addresses(header)
        counterparties = [address for address in addresses if address != own] or addresses
        return any(self.is_provider_hosted(address) for address in counterparties)

    def _resolve(self, domain: str) -> bool:
        try:
            return bool(self._resolver(domain))
        except Exception as exc:
            logger.warning("Domain resolution for %s failed, treating as not hosted: %s", domain, exc)
            return False


__all__ = ["DomainClassifier", "DomainResolver", "parse_addresses"]
