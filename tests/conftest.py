import pytest
from fastapi.testclient import TestClient
from ticket_checkin.main import app, get_store
from ticket_checkin.models import TicketRecord
from ticket_checkin.storage import InMemoryTicketStore


def make_ticket(code: str, used: bool = False) -> TicketRecord:
    return TicketRecord(
        code=code,
        used=used,
        eventId="EVT001",
        buyerId="BUYER-" + code,
        eventName="Spring Gala",
        buyerName="Ada Lovelace",
        purchaseDate="2024-03-01",
    )


@pytest.fixture
def store():
    return InMemoryTicketStore([make_ticket("T1"), make_ticket("T2", used=True)])


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
