import logging
from typing import Optional
from .models import (
    TicketRecord,
    VerificationOutcome,
    VerificationResult,
    VerifyTicketResponse,
)
from .storage import TicketStore

logger = logging.getLogger(__name__)

MESSAGE_VALID = "Ticket verified successfully - entry granted"
MESSAGE_ALREADY_USED = "Ticket has already been used for entry"
MESSAGE_NOT_FOUND = "Invalid ticket code - not found in system"
MESSAGE_MISSING_CODE = "Ticket code is required"
MESSAGE_SERVER_ERROR = "Server error - please try again"


class VerificationError(Exception):
    """Unexpected failure while verifying a ticket."""


class MissingTicketCode(ValueError):
    def __init__(self, message: str = MESSAGE_MISSING_CODE) -> None:
        super().__init__(message)
        self.message = message


def verify_ticket(store: TicketStore, code: Optional[str]) -> VerificationResult:
    """
    Check a ticket code and consume it on first successful use.

    Outcomes:
     1. Unknown code -> NOT_FOUND, nothing mutated
     2. Known, unused -> VALID, ticket flipped to used by this call
     3. Known, used -> ALREADY_USED
    """
    if not code:
        raise MissingTicketCode()

    ticket = store.find(code)
    if ticket is None:
        logger.info("Ticket %s not found", code)
        return VerificationResult(outcome=VerificationOutcome.NOT_FOUND)

    # a concurrent caller may have consumed it between find and mark_used
    if store.mark_used(code):
        logger.info("Ticket %s verified for event %s", code, ticket.eventId)
        return VerificationResult(outcome=VerificationOutcome.VALID, ticket=ticket)

    logger.info("Ticket %s already used", code)
    return VerificationResult(outcome=VerificationOutcome.ALREADY_USED, ticket=ticket)


def _with_metadata(message: str, used: bool, ticket: TicketRecord) -> VerifyTicketResponse:
    return VerifyTicketResponse(
        message=message,
        used=used,
        eventId=ticket.eventId,
        buyerId=ticket.buyerId,
        eventName=ticket.eventName,
        buyerName=ticket.buyerName,
        purchaseDate=ticket.purchaseDate,
    )


def to_response(result: VerificationResult) -> VerifyTicketResponse:
    if result.outcome is VerificationOutcome.NOT_FOUND:
        return VerifyTicketResponse(message=MESSAGE_NOT_FOUND, used=None)

    if result.outcome is VerificationOutcome.ALREADY_USED:
        return _with_metadata(MESSAGE_ALREADY_USED, True, result.ticket)

    # used=False reports the state this call found, before consuming it
    return _with_metadata(MESSAGE_VALID, False, result.ticket)
