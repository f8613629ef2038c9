# smartid/services/status_service.py
import logging
from typing import Any, Dict, Optional

from smartid.core.errors import ProtocolError
from smartid.core.transport import ApiRequest
from smartid.models.models import Complete, Running, SessionStatus
from smartid.services.session_service import raise_for_error
from smartid.utils.helpers import path_segment

log = logging.getLogger(__name__)

STATE_RUNNING = "RUNNING"
STATE_COMPLETE = "COMPLETE"


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def parse_status(session_id: str, data: Dict[str, Any]) -> SessionStatus:
    """Map a session-status response body onto Running or Complete."""
    state = data.get("state")
    if state == STATE_RUNNING:
        return Running(session_id=session_id)
    if state != STATE_COMPLETE:
        log.error("Unknown session state for %s: %r", session_id, state)
        raise ProtocolError(None, f"unknown session state: {state!r}")

    result = data.get("result")
    if isinstance(result, dict):
        end_result = result.get("endResult")
        document_number = result.get("documentNumber")
    else:
        # Some responses carry the end result as a bare string
        end_result, document_number = result, None
    if not end_result:
        raise ProtocolError(None, "complete session without endResult")

    cert = _section(data, "cert")
    signature = _section(data, "signature")
    return Complete(
        session_id=session_id,
        end_result=str(end_result),
        document_number=document_number,
        certificate_value=cert.get("value"),
        certificate_level=cert.get("certificateLevel"),
        signature_value=signature.get("value"),
        signature_algorithm=signature.get("algorithm"),
    )


class StatusPoller:
    """Single, side-effect free session-status queries; the caller owns the polling loop"""

    def __init__(self, transport):
        self.transport = transport

    def get_status(self, session_id: str, timeout_ms: Optional[int] = None) -> SessionStatus:
        params: Dict[str, Any] = {}
        hold_seconds = 0.0
        if timeout_ms is not None:
            if int(timeout_ms) < 0:
                raise ValueError(f"timeout_ms must not be negative, got {timeout_ms}")
            params["timeoutMs"] = int(timeout_ms)
            hold_seconds = int(timeout_ms) / 1000.0

        response = self.transport.send(ApiRequest(
            method="GET",
            path=f"/session/{path_segment(session_id)}",
            params=params,
            hold_seconds=hold_seconds,
        ))
        raise_for_error(response)
        if not isinstance(response.data, dict):
            raise ProtocolError(response.status, f"unexpected status body: {response.data!r}")

        status = parse_status(session_id, response.data)
        if isinstance(status, Complete):
            log.info("Session %s complete: %s", session_id, status.end_result)
        return status
