import logging
from typing import List
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .config import settings
from .logic import (
    MESSAGE_MISSING_CODE,
    MESSAGE_SERVER_ERROR,
    MissingTicketCode,
    VerificationError,
    to_response,
    verify_ticket,
)
from .models import TicketRecord, VerifyTicketRequest, VerifyTicketResponse
from .storage import TicketStore, TicketStoreError, seeded_store

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------
# FastAPI App & Routes
# ---------------------------

app = FastAPI(title=settings.APP_NAME)

# records live for the lifetime of the process
app.state.store = seeded_store()

allow_origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    # credentials cannot be combined with a wildcard origin
    allow_credentials="*" not in allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def get_store(request: Request) -> TicketStore:
    return request.app.state.store


def _error(status_code: int, message: str) -> JSONResponse:
    body = VerifyTicketResponse(message=message, used=None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_unset=True))


def _is_unreadable_body(exc: RequestValidationError) -> bool:
    for error in exc.errors():
        if error.get("type") == "json_invalid" or tuple(error.get("loc", ())) == ("body",):
            return True
    return False


@app.exception_handler(MissingTicketCode)
async def missing_ticket_code_handler(request: Request, exc: MissingTicketCode):
    return _error(400, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # an absent or non-JSON body is a server-side parse failure, not a missing code
    if _is_unreadable_body(exc):
        logger.error("Could not read verification request body: %s", exc.errors())
        return _error(500, MESSAGE_SERVER_ERROR)
    logger.info("Rejected malformed verification request: %s", exc.errors())
    return _error(400, MESSAGE_MISSING_CODE)


@app.exception_handler(TicketStoreError)
async def store_error_handler(request: Request, exc: TicketStoreError):
    logger.error("Ticket store failure: %s", exc)
    return _error(500, MESSAGE_SERVER_ERROR)


@app.exception_handler(VerificationError)
async def verification_error_handler(request: Request, exc: VerificationError):
    logger.error("Error verifying ticket: %s", exc, exc_info=exc.__cause__)
    return _error(500, MESSAGE_SERVER_ERROR)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error")
    return _error(500, MESSAGE_SERVER_ERROR)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/api/tickets", response_model=List[TicketRecord])
def list_tickets(store: TicketStore = Depends(get_store)):
    return store.list()


# metadata fields are omitted when the code is unknown
@app.post(
    "/api/tickets/verify-ticket",
    response_model=VerifyTicketResponse,
    response_model_exclude_unset=True,
)
def verify_ticket_route(payload: VerifyTicketRequest, store: TicketStore = Depends(get_store)):
    try:
        result = verify_ticket(store, payload.ticketCode)
    except (MissingTicketCode, TicketStoreError):
        raise
    except Exception as e:
        # handled inside the middleware stack so the 500 still carries CORS headers
        raise VerificationError(str(e)) from e
    return to_response(result)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ticket_checkin.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
    )
