from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class TicketRecord(BaseModel):
    code: str
    used: bool = False

    eventId: str
    buyerId: str
    eventName: str
    buyerName: str
    purchaseDate: str  # YYYY-MM-DD


class VerificationOutcome(str, Enum):
    VALID = "VALID"
    ALREADY_USED = "ALREADY_USED"
    NOT_FOUND = "NOT_FOUND"


class VerificationResult(BaseModel):
    outcome: VerificationOutcome
    ticket: Optional[TicketRecord] = None


class VerifyTicketRequest(BaseModel):
    # Optional so a missing code reaches the handler instead of failing validation
    ticketCode: Optional[str] = None


class VerifyTicketResponse(BaseModel):
    message: str
    used: Optional[bool] = None

    eventId: Optional[str] = None
    buyerId: Optional[str] = None
    eventName: Optional[str] = None
    buyerName: Optional[str] = None
    purchaseDate: Optional[str] = None


class ScanStats(BaseModel):
    totalScanned: int = 0
    validTickets: int = 0
    usedTickets: int = 0
    invalidTickets: int = 0


class ScanLogEntry(BaseModel):
    code: str
    result: VerifyTicketResponse
    timestamp: datetime

    @property
    def status(self) -> str:
        if self.result.used is False:
            return "Valid"
        if self.result.used is True:
            return "Used"
        return "Invalid"
