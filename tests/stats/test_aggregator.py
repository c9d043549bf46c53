from __future__ import annotations

from typing import List

import pytest

from gmail_stats.aggregator import aggregate, categorize
from gmail_stats.classifier import DomainClassifier
from gmail_stats.models import Category, CounterSet, Message

ME = "me@work.com"


def _classifier(hosted: tuple[str, ...] = ()) -> DomainClassifier:
    return DomainClassifier(lambda domain: domain in hosted)


def _scenario_batch() -> List[Message]:
    return [
        Message(sender="X <x@gmail.com>", recipients=ME, id="1"),
        Message(sender="y@example.com", recipients=f"Me <{ME}>", id="2"),
        Message(sender=ME, recipients="z@gmail.com", id="3"),
        Message(sender=ME, recipients="w@example.com", id="4"),
    ]


def test_one_message_per_category() -> None:
    counters = aggregate(ME, _scenario_batch(), _classifier())

    assert counters == CounterSet(
        to_me_from_gmail=1,
        to_me_from_non_gmail=1,
        from_me_to_gmail=1,
        from_me_to_non_gmail=1,
    )


def test_total_matches_batch_size() -> None:
    messages = _scenario_batch() * 3 + [Message(sender="a@b.com", recipients="c@d.com")]

    counters = aggregate(ME, messages, _classifier())

    assert counters.total == len(messages)


def test_aggregate_is_deterministic() -> None:
    messages = _scenario_batch()

    first = aggregate(ME, messages, _classifier(("example.com",)))
    second = aggregate(ME, messages, _classifier(("example.com",)))

    assert first == second


def test_resolver_hosted_domain_counts_as_gmail() -> None:
    message = Message(sender="team@calblueprint.org", recipients=ME)

    category = categorize(message, ME, _classifier(("calblueprint.org",)))

    assert category is Category.TO_ME_FROM_GMAIL


def test_to_me_wins_over_from_me() -> None:
    message = Message(sender=ME, recipients=f"{ME}, z@gmail.com")

    assert categorize(message, ME, _classifier()) is Category.TO_ME_FROM_NON_GMAIL


def test_unrelated_message_falls_into_catch_all() -> None:
    message = Message(sender="a@gmail.com", recipients="b@gmail.com")

    assert categorize(message, ME, _classifier()) is Category.FROM_ME_TO_NON_GMAIL


def test_self_address_match_ignores_case() -> None:
    message = Message(sender="x@gmail.com", recipients="ME@Work.com")

    assert categorize(message, ME, _classifier()) is Category.TO_ME_FROM_GMAIL


def test_empty_batch() -> None:
    assert aggregate(ME, [], _classifier()) == CounterSet()


def test_input_is_not_mutated() -> None:
    messages = _scenario_batch()
    snapshot = list(messages)

    aggregate(ME, messages, _classifier())

    assert messages == snapshot


@pytest.mark.parametrize("workers", [None, 1, 4])
def test_parallel_categorization_matches_serial(workers) -> None:
    messages = _scenario_batch() * 5

    counters = aggregate(ME, messages, _classifier(), max_workers=workers)

    assert counters == CounterSet(5, 5, 5, 5)


def test_note_to_self_from_gmail_account_counts_as_gmail() -> None:
    own = "me@gmail.com"
    message = Message(sender=own, recipients=own)

    counters = aggregate(own, [message], _classifier())

    assert counters == CounterSet(to_me_from_gmail=1)


def test_note_to_self_from_non_gmail_account() -> None:
    message = Message(sender=ME, recipients=ME)

    assert categorize(message, ME, _classifier()) is Category.TO_ME_FROM_NON_GMAIL
