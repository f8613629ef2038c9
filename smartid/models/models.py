"""
Domain Models and Data Structures
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class SessionKind(str, Enum):
    AUTHENTICATION = "authentication"
    SIGNATURE = "signature"
    CERTIFICATE_CHOICE = "certificatechoice"


class EndResult(str, Enum):
    """Terminal outcomes reported by the Smart-ID service"""
    OK = "OK"
    USER_REFUSED = "USER_REFUSED"
    TIMEOUT = "TIMEOUT"
    DOCUMENT_UNUSABLE = "DOCUMENT_UNUSABLE"
    WRONG_VC = "WRONG_VC"
    REQUIRED_INTERACTION_NOT_SUPPORTED_BY_APP = "REQUIRED_INTERACTION_NOT_SUPPORTED_BY_APP"
    USER_REFUSED_CERT_CHOICE = "USER_REFUSED_CERT_CHOICE"
    USER_REFUSED_DISPLAYTEXTANDPIN = "USER_REFUSED_DISPLAYTEXTANDPIN"
    USER_REFUSED_VC_CHOICE = "USER_REFUSED_VC_CHOICE"
    USER_REFUSED_CONFIRMATIONMESSAGE = "USER_REFUSED_CONFIRMATIONMESSAGE"
    USER_REFUSED_CONFIRMATIONMESSAGE_WITH_VC_CHOICE = "USER_REFUSED_CONFIRMATIONMESSAGE_WITH_VC_CHOICE"


class KeyKind(str, Enum):
    EC = "EC"
    RSA = "RSA"


class CertificateEncoding(str, Enum):
    DER = "der"
    PEM = "pem"
    BASE64 = "base64"  # base64 of DER, as carried in status responses


@dataclass(frozen=True)
class Session:
    """One initiated Smart-ID session"""
    session_id: str
    session_hash: Optional[str]  # hex; None for certificate choice
    verification_code: Optional[str]
    kind: SessionKind


@dataclass(frozen=True)
class Running:
    """Non-terminal poll result; poll again later"""
    session_id: str


@dataclass(frozen=True)
class Complete:
    """Terminal poll result"""
    session_id: str
    end_result: str
    document_number: Optional[str] = None
    certificate_value: Optional[str] = None
    certificate_level: Optional[str] = None
    signature_value: Optional[str] = None
    signature_algorithm: Optional[str] = None
    # Populated only after the verification chain succeeded
    certificate: Optional["Certificate"] = None
    identity: Optional["PersonalIdentity"] = None

    @property
    def is_success(self) -> bool:
        return self.end_result == EndResult.OK.value


SessionStatus = Union[Running, Complete]


@dataclass(frozen=True)
class ECPublicKey:
    curve: str
    x: int
    y: int
    kind: KeyKind = field(default=KeyKind.EC, init=False)


@dataclass(frozen=True)
class RSAPublicKey:
    modulus: int
    exponent: int
    kind: KeyKind = field(default=KeyKind.RSA, init=False)


PublicKey = Union[ECPublicKey, RSAPublicKey]


@dataclass(frozen=True)
class Certificate:
    """Parsed X.509 certificate, reduced to what Smart-ID verification needs"""
    not_before: datetime
    not_after: datetime
    subject: Dict[str, str]
    issuer: Dict[str, str]
    public_key: PublicKey
    der: bytes = field(repr=False, default=b"")


@dataclass(frozen=True)
class TrustedIssuer:
    """Issuer attribute set accepted as authoritative, keyed by short names (C, O, OID, CN, E)"""
    attributes: Tuple[Tuple[str, str], ...]

    @staticmethod
    def from_mapping(mapping: Dict[str, object]) -> "TrustedIssuer":
        for k, v in mapping.items():
            # Unquoted YAML like `C: NO` loads as a boolean
            if not isinstance(k, str) or not isinstance(v, str):
                raise ValueError(f"trusted issuer attribute {k!r} must map a string to a string, got {v!r}")
        return TrustedIssuer(attributes=tuple(mapping.items()))

    def as_dict(self) -> Dict[str, str]:
        return dict(self.attributes)


@dataclass(frozen=True)
class PersonalIdentity:
    first_name: str
    last_name: str
    personal_identifier: str
    country: str
