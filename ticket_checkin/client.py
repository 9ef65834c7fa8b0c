import argparse
import logging
import sys
from typing import Optional, TextIO
import httpx
from .config import settings
from .models import VerifyTicketResponse
from .session import ScanSession

logger = logging.getLogger(__name__)

VERIFY_PATH = "/api/tickets/verify-ticket"


class ScannerClient:
    """Manual-entry scanner: posts codes to the verification endpoint."""

    def __init__(
        self,
        http: httpx.Client,
        session: Optional[ScanSession] = None,
    ) -> None:
        self.http = http
        self.session = session or ScanSession(
            log_limit=settings.SCAN_LOG_LIMIT,
            duplicate_window=settings.DUPLICATE_SCAN_WINDOW_SECONDS,
        )

    def scan(self, code: str) -> Optional[VerifyTicketResponse]:
        """Returns None when the code is empty or a duplicate within the window."""
        code = code.strip()
        if not self.session.should_process(code):
            return None

        try:
            resp = self.http.post(VERIFY_PATH, json={"ticketCode": code})
            result = VerifyTicketResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Verification request for %s failed: %s", code, e)
            result = VerifyTicketResponse(message="Server Error", used=None)
            # failed requests count as invalid but stay out of the recent log
            self.session.record(code, result, log=False)
            return result

        self.session.record(code, result)
        return result


def _describe(code: str, result: VerifyTicketResponse) -> str:
    if result.used is False:
        status = "VALID"
    elif result.used is True:
        status = "USED"
    else:
        status = "INVALID"
    line = f"[{status}] {code}: {result.message}"
    if result.buyerName:
        line += f" ({result.buyerName}, {result.eventName})"
    return line


def run(client: ScannerClient, stdin: TextIO, stdout: TextIO) -> None:
    for line in stdin:
        code = line.strip()
        if not code:
            continue
        result = client.scan(code)
        if result is None:
            stdout.write(f"[SKIPPED] {code}: scanned moments ago\n")
            continue
        stdout.write(_describe(code, result) + "\n")

    stats = client.session.stats
    stdout.write(
        f"Total: {stats.totalScanned}  Valid: {stats.validTickets}  "
        f"Used: {stats.usedTickets}  Invalid: {stats.invalidTickets}\n"
    )


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Manual-entry ticket scanner")
    parser.add_argument("--url", default=settings.SCANNER_API_URL, help="Check-in service base URL")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    with httpx.Client(base_url=args.url, timeout=10.0) as http:
        run(ScannerClient(http), sys.stdin, sys.stdout)


if __name__ == "__main__":
    main()
