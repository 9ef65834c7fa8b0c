import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
from .models import TicketRecord


class TicketStoreError(Exception):
    """Raised when the ticket store cannot serve a request."""


class TicketStore(ABC):
    """
    Interface of the ticket record set.

    mark_used must be atomic: among any number of callers for the same code,
    exactly one gets True back, and only while the ticket was still unused.
    """

    @abstractmethod
    def find(self, code: str) -> Optional[TicketRecord]:
        ...

    @abstractmethod
    def mark_used(self, code: str) -> bool:
        ...

    @abstractmethod
    def list(self) -> List[TicketRecord]:
        ...


class InMemoryTicketStore(TicketStore):
    def __init__(self, tickets: Iterable[TicketRecord] = ()) -> None:
        # code -> TicketRecord
        self._tickets: Dict[str, TicketRecord] = {}
        self._lock = threading.Lock()
        for ticket in tickets:
            self._tickets[ticket.code] = ticket.model_copy()

    def find(self, code: str) -> Optional[TicketRecord]:
        with self._lock:
            ticket = self._tickets.get(code)
            return ticket.model_copy() if ticket is not None else None

    def mark_used(self, code: str) -> bool:
        with self._lock:
            ticket = self._tickets.get(code)
            if ticket is None or ticket.used:
                return False
            ticket.used = True
            return True

    def list(self) -> List[TicketRecord]:
        with self._lock:
            return [ticket.model_copy() for ticket in self._tickets.values()]


SEED_TICKETS: List[TicketRecord] = [
    TicketRecord(
        code="TICKET123",
        used=False,
        eventId="EVT001",
        buyerId="USER123",
        eventName="Summer Music Festival 2024",
        buyerName="John Doe",
        purchaseDate="2024-01-15",
    ),
    TicketRecord(
        code="TICKET456",
        used=True,
        eventId="EVT002",
        buyerId="USER456",
        eventName="Summer Music Festival 2024",
        buyerName="Jane Smith",
        purchaseDate="2024-01-10",
    ),
    TicketRecord(
        code="TICKET789",
        used=False,
        eventId="EVT001",
        buyerId="USER789",
        eventName="Summer Music Festival 2024",
        buyerName="Mike Johnson",
        purchaseDate="2024-01-20",
    ),
    TicketRecord(
        code="TICKET999",
        used=False,
        eventId="EVT001",
        buyerId="USER999",
        eventName="Summer Music Festival 2024",
        buyerName="Sarah Wilson",
        purchaseDate="2024-01-18",
    ),
]


def seeded_store() -> InMemoryTicketStore:
    return InMemoryTicketStore(SEED_TICKETS)
