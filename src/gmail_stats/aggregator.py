"""Fold a batch of messages into the four hourly provenance counters."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from .classifier import DomainClassifier
from .models import Category, CounterSet, Message

logger = logging.getLogger(__name__)


def categorize(message: Message, self_address: str, classifier: DomainClassifier) -> Category:
    """Return the single bucket a message is counted in.

    Rules are applied in order and the first match wins. A message whose
    headers mention the account in neither ``To`` nor ``From`` still lands in
    ``fromMeToNonGmail``.
    """
    own = self_address.lower()
    sent_to_me = own in message.recipients.lower()

    if sent_to_me and classifier.counterparty_is_provider_hosted(message.sender, own):
        return Category.TO_ME_FROM_GMAIL
    if sent_to_me:
        return Category.TO_ME_FROM_NON_GMAIL

    sent_from_me = own in message.sender.lower()
    if sent_from_me and classifier.counterparty_is_provider_hosted(message.recipients, own):
        return Category.FROM_ME_TO_GMAIL
    if not sent_from_me:
        logger.debug("Message %s mentions %s in neither To nor From", message.id, self_address)
    return Category.FROM_ME_TO_NON_GMAIL


def aggregate(
    self_address: str,
    messages: Sequence[Message],
    classifier: DomainClassifier,
    *,
    max_workers: Optional[int] = None,
) -> CounterSet:
    """Count ``messages`` per category for ``self_address``.

    With ``max_workers`` greater than one, messages are categorized on a
    thread pool; the counters are still reduced in a single pass.
    """
    if max_workers and max_workers > 1 and len(messages) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            categories = list(
                pool.map(lambda message: categorize(message, self_address, classifier), messages)
            )
    else:
        categories = [categorize(message, self_address, classifier) for message in messages]

    counters = CounterSet.from_categories(categories)
    logger.debug("Aggregated %d messages for %s: %s", counters.total, self_address, counters)
    return counters


__all__ = ["aggregate", "categorize"]
