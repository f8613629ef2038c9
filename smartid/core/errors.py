# smartid/core/errors.py
"""
Error taxonomy for the Smart-ID relying-party client
"""
from typing import Optional


class SmartIdError(Exception):
    pass


class TransportError(SmartIdError):
    """Network, TLS or response-decoding failure at the HTTP boundary"""
    pass


class ProtocolError(SmartIdError):
    """The remote service answered with an explicit error instead of a result"""

    def __init__(self, code: Optional[object], message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.code}: {self.message}"


class CertificateFormatError(SmartIdError):
    pass


class UntrustedCertificateError(SmartIdError):
    pass


class InvalidSignatureError(SmartIdError):
    pass


class IncompleteCertificateError(SmartIdError):
    pass
