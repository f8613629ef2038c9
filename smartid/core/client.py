# smartid/core/client.py
"""
Smart-ID relying-party client.

Holds the immutable Settings and a transport, and chains the services:
start a session, poll it, and on success verify the returned certificate and
signature before any identity is handed back.
"""
import dataclasses
import logging
from typing import Optional, Union

from smartid.core.config import Settings
from smartid.core.errors import InvalidSignatureError
from smartid.core.transport import RequestsTransport
from smartid.models.models import (
    Certificate, CertificateEncoding, Complete, PersonalIdentity, Session, SessionKind, SessionStatus,
)
from smartid.services.certificate_service import parse_certificate
from smartid.services.identity_service import extract_identity
from smartid.services.session_service import SessionInitiator, verification_code
from smartid.services.signature_service import verify_signature
from smartid.services.status_service import StatusPoller
from smartid.services.trust_service import validate_certificate
from smartid.utils.helpers import b64_dec

log = logging.getLogger(__name__)


class SmartIdClient:

    def __init__(self, settings: Settings, transport=None):
        self.settings = settings
        self.transport = transport or RequestsTransport(settings)
        self.initiator = SessionInitiator(settings, self.transport)
        self.poller = StatusPoller(self.transport)

    # -------- Session initiation --------
    def start_authentication(self, identifier: str, country_code: str = "EE") -> Session:
        return self.initiator.start_authentication(identifier, country_code)

    def start_signature(
        self, identifier: str, country_code: str, document_hash: Union[str, bytes], encoding: str = "hex",
    ) -> Session:
        return self.initiator.start_signature(identifier, country_code, document_hash, encoding)

    def start_certificate_choice(self, identifier: str, country_code: str = "EE") -> Session:
        return self.initiator.start_certificate_choice(identifier, country_code)

    @staticmethod
    def verification_code(session_hash: Union[str, bytes], encoding: str = "hex") -> str:
        return verification_code(session_hash, encoding)

    # -------- Polling --------
    def get_status(self, session_id: str, timeout_ms: Optional[int] = None) -> SessionStatus:
        return self.poller.get_status(session_id, timeout_ms)

    def authentication_status(self, session: Session, timeout_ms: Optional[int] = None) -> SessionStatus:
        """Poll once; a successful completion is returned only after full verification."""
        return self._signed_status(session, timeout_ms)

    def signature_status(self, session: Session, timeout_ms: Optional[int] = None) -> SessionStatus:
        return self._signed_status(session, timeout_ms)

    def certificate_choice_status(self, session_id: str, timeout_ms: Optional[int] = None) -> SessionStatus:
        status = self.get_status(session_id, timeout_ms)
        if not isinstance(status, Complete) or not status.is_success:
            return status
        certificate = self._trusted_certificate(status)
        return dataclasses.replace(status, certificate=certificate, identity=extract_identity(certificate))

    def _signed_status(self, session: Session, timeout_ms: Optional[int]) -> SessionStatus:
        if session.kind == SessionKind.CERTIFICATE_CHOICE or session.session_hash is None:
            raise ValueError("certificate choice sessions carry no signature; use certificate_choice_status")
        status = self.get_status(session.session_id, timeout_ms)
        if not isinstance(status, Complete) or not status.is_success:
            return status
        return self.verify_completion(status, session.session_hash)

    # -------- Verification chain --------
    def _trusted_certificate(self, status: Complete) -> Certificate:
        certificate = parse_certificate(status.certificate_value or "", CertificateEncoding.BASE64)
        validate_certificate(certificate, self.settings.trusted_issuers)
        return certificate

    def verify_completion(self, status: Complete, session_hash: Union[str, bytes]) -> Complete:
        """
        parse -> trust -> verify -> extract. Any failure propagates; nothing
        partially verified is returned.
        """
        certificate = self._trusted_certificate(status)
        try:
            signature = b64_dec(status.signature_value or "")
        except ValueError:
            raise InvalidSignatureError("invalid signature") from None
        verify_signature(certificate, session_hash, signature)
        identity = extract_identity(certificate)
        log.info("Session %s verified for %s", status.session_id, identity.personal_identifier)
        return dataclasses.replace(status, certificate=certificate, identity=identity)

    def identity_from_certificate(
        self,
        value: Union[str, bytes],
        encoding: CertificateEncoding = CertificateEncoding.BASE64,
    ) -> PersonalIdentity:
        """Identity from a certificate without trust checks (e.g. one already validated)."""
        return extract_identity(parse_certificate(value, encoding))
