# smartid/services/session_service.py
"""
Session initiation: session-hash generation, verification codes and the
authentication / signature / certificate-choice start requests.
"""
import hashlib
import logging
import secrets
from typing import Any, Dict, Optional, Union

from smartid.core.config import Settings
from smartid.core.errors import ProtocolError
from smartid.core.transport import ApiRequest, ApiResponse
from smartid.models.models import Session, SessionKind
from smartid.utils.helpers import b64, hash_bytes, path_segment

log = logging.getLogger(__name__)

HASH_TYPE = "SHA256"
DEFAULT_COUNTRY = "EE"
_ENTROPY_BYTES = 20


def generate_session_hash(entropy: Optional[bytes] = None) -> str:
    """SHA-256 (hex) over fresh random bytes, or over caller-supplied entropy."""
    value = entropy if entropy is not None else secrets.token_bytes(_ENTROPY_BYTES)
    return hashlib.sha256(value).hexdigest()


def verification_code(session_hash: Union[str, bytes], encoding: str = "hex") -> str:
    """
    Four-digit code shown to the user: SHA-256 of the hash bytes, last two
    bytes as a big-endian uint16, modulo 10000, zero-padded.
    """
    digest = hashlib.sha256(hash_bytes(session_hash, encoding)).digest()
    code = int.from_bytes(digest[-2:], "big") % 10000
    return f"{code:04d}"


def raise_for_error(response: ApiResponse) -> None:
    """Turn an explicit error body (or an HTTP error status) into a ProtocolError."""
    data = response.data if isinstance(response.data, dict) else {}
    if data.get("code") is not None and data.get("message"):
        log.error("Smart-ID error %s: %s", data["code"], data["message"])
        raise ProtocolError(data["code"], str(data["message"]))
    if response.status >= 400:
        message = data.get("title") or data.get("message") or str(response.data)
        log.error("Smart-ID error HTTP %s: %s", response.status, message)
        raise ProtocolError(response.status, str(message))


class SessionInitiator:
    """Starts Smart-ID sessions for the configured relying party"""

    def __init__(self, settings: Settings, transport):
        self.settings = settings
        self.transport = transport

    def _relying_party(self) -> Dict[str, Any]:
        return {
            "relyingPartyUUID": self.settings.relying_party_uuid,
            "relyingPartyName": self.settings.relying_party_name,
        }

    def _start(self, kind: SessionKind, identifier: str, country_code: str, body: Dict[str, Any]) -> str:
        path = f"/{kind.value}/pno/{path_segment(country_code)}/{path_segment(identifier)}"
        response = self.transport.send(ApiRequest(method="POST", path=path, body=body))
        data = response.data if isinstance(response.data, dict) else {}
        if response.status < 400 and data.get("sessionID"):
            log.info("Started %s session %s", kind.value, data["sessionID"])
            return str(data["sessionID"])
        raise_for_error(response)
        log.error("Unexpected response starting %s session: %s", kind.value, response.data)
        raise ProtocolError(response.status, f"no session id in response: {response.data}")

    def _start_with_hash(self, kind: SessionKind, identifier: str, country_code: str, session_hash: str) -> Session:
        body = self._relying_party()
        body["hash"] = b64(bytes.fromhex(session_hash))
        body["hashType"] = HASH_TYPE
        session_id = self._start(kind, identifier, country_code, body)
        return Session(
            session_id=session_id,
            session_hash=session_hash,
            verification_code=verification_code(session_hash),
            kind=kind,
        )

    def start_authentication(self, identifier: str, country_code: str = DEFAULT_COUNTRY) -> Session:
        return self._start_with_hash(SessionKind.AUTHENTICATION, identifier, country_code, generate_session_hash())

    def start_signature(
        self,
        identifier: str,
        country_code: str,
        document_hash: Union[str, bytes],
        encoding: str = "hex",
    ) -> Session:
        """
        The document hash (hex or base64 string, or raw digest bytes) is already
        a SHA-256 digest and becomes the session hash unchanged.
        """
        raw = hash_bytes(document_hash, encoding)
        if len(raw) != hashlib.sha256().digest_size:
            raise ValueError(f"document hash must be {hashlib.sha256().digest_size} bytes, got {len(raw)}")
        return self._start_with_hash(SessionKind.SIGNATURE, identifier, country_code or DEFAULT_COUNTRY, raw.hex())

    def start_certificate_choice(self, identifier: str, country_code: str = DEFAULT_COUNTRY) -> Session:
        session_id = self._start(SessionKind.CERTIFICATE_CHOICE, identifier, country_code, self._relying_party())
        return Session(session_id=session_id, session_hash=None, verification_code=None,
                       kind=SessionKind.CERTIFICATE_CHOICE)
