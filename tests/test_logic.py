import threading
import pytest
from ticket_checkin.logic import (
    MESSAGE_ALREADY_USED,
    MESSAGE_NOT_FOUND,
    MESSAGE_VALID,
    MissingTicketCode,
    to_response,
    verify_ticket,
)
from ticket_checkin.models import VerificationOutcome, VerificationResult
from ticket_checkin.storage import InMemoryTicketStore
from .conftest import make_ticket


def test_first_verification_consumes_ticket(store):
    result = verify_ticket(store, "T1")

    assert result.outcome is VerificationOutcome.VALID
    assert result.ticket.code == "T1"
    assert store.find("T1").used is True


def test_repeat_verification_reports_already_used(store):
    first = verify_ticket(store, "T1")

    for _ in range(3):
        again = verify_ticket(store, "T1")
        assert again.outcome is VerificationOutcome.ALREADY_USED
        assert again.ticket.buyerId == first.ticket.buyerId
        assert again.ticket.purchaseDate == first.ticket.purchaseDate


def test_seeded_used_ticket_is_already_used(store):
    assert verify_ticket(store, "T2").outcome is VerificationOutcome.ALREADY_USED


def test_unknown_code_mutates_nothing(store):
    before = store.list()

    result = verify_ticket(store, "UNKNOWN")

    assert result.outcome is VerificationOutcome.NOT_FOUND
    assert result.ticket is None
    assert store.list() == before


def test_lookup_is_exact_match(store):
    assert verify_ticket(store, "t1").outcome is VerificationOutcome.NOT_FOUND
    assert store.find("T1").used is False


@pytest.mark.parametrize("code", [None, ""])
def test_missing_code_raises(code):
    with pytest.raises(MissingTicketCode):
        verify_ticket(InMemoryTicketStore(), code)


def test_missing_code_raises_even_if_catalog_has_empty_code():
    store = InMemoryTicketStore([make_ticket("")])
    with pytest.raises(MissingTicketCode):
        verify_ticket(store, "")


def test_scenario_from_seed():
    store = InMemoryTicketStore([make_ticket("T1")])

    assert to_response(verify_ticket(store, "T1")).used is False
    assert to_response(verify_ticket(store, "T1")).used is True
    assert to_response(verify_ticket(store, "UNKNOWN")).used is None
    with pytest.raises(MissingTicketCode):
        verify_ticket(store, "")


def test_concurrent_verification_consumes_once():
    store = InMemoryTicketStore([make_ticket("FRESH")])
    barrier = threading.Barrier(16)
    outcomes = []
    outcomes_lock = threading.Lock()

    def worker():
        barrier.wait()
        result = verify_ticket(store, "FRESH")
        with outcomes_lock:
            outcomes.append(result.outcome)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(VerificationOutcome.VALID) == 1
    assert outcomes.count(VerificationOutcome.ALREADY_USED) == 15


def test_to_response_shapes():
    ticket = make_ticket("T9")

    valid = to_response(VerificationResult(outcome=VerificationOutcome.VALID, ticket=ticket))
    assert valid.message == MESSAGE_VALID
    assert valid.used is False
    assert valid.buyerName == "Ada Lovelace"

    used = to_response(VerificationResult(outcome=VerificationOutcome.ALREADY_USED, ticket=ticket))
    assert used.message == MESSAGE_ALREADY_USED
    assert used.used is True
    assert used.eventId == "EVT001"

    missing = to_response(VerificationResult(outcome=VerificationOutcome.NOT_FOUND))
    assert missing.message == MESSAGE_NOT_FOUND
    assert missing.used is None
    assert missing.eventId is None


def test_whitespace_code_is_looked_up_as_is(store):
    assert verify_ticket(store, "   ").outcome is VerificationOutcome.NOT_FOUND
