# scripts/demo_auth.py
# Authenticate a demo identity against the Smart-ID demo environment.
#   SMARTID_CONFIG=smartid.demo.yaml python scripts/demo_auth.py 10101010005 EE
import logging
import sys
import time

from smartid.core.client import SmartIdClient
from smartid.core.config import load_settings
from smartid.models.models import Complete

POLL_TIMEOUT_MS = 5000
MAX_POLLS = 24


def main(identifier: str, country_code: str) -> int:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s [%(name)s.%(funcName)s] %(message)s")
    client = SmartIdClient(settings)

    session = client.start_authentication(identifier, country_code)
    print(f"Verification code: {session.verification_code}")

    for _ in range(MAX_POLLS):
        status = client.authentication_status(session, timeout_ms=POLL_TIMEOUT_MS)
        if isinstance(status, Complete):
            if status.identity:
                print(f"Authenticated: {status.identity}")
                return 0
            print(f"Session ended: {status.end_result}")
            return 1
        time.sleep(1)

    print("Gave up waiting for the user")
    return 2


if __name__ == "__main__":
    if len(sys.argv) not in (2, 3):
        print("Usage: python demo_auth.py <identifier> [country_code]")
        sys.exit(1)

    sys.exit(main(sys.argv[1], sys.argv[2] if len(sys.argv) == 3 else "EE"))
