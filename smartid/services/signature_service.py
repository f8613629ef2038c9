# smartid/services/signature_service.py
"""
Verification of the signature a Smart-ID device produced over a session hash.

EC keys sign with ECDSA on P-256 and return a raw r||s pair; RSA keys return a
PKCS#1 v1.5 block whose payload is DigestInfo(SHA-256) || session hash. In
both cases the session hash is already a digest and is never hashed again.
"""
import hmac
import logging
from abc import ABC, abstractmethod
from typing import Dict, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, encode_dss_signature

from smartid.core.errors import InvalidSignatureError
from smartid.models.models import Certificate, ECPublicKey, KeyKind, PublicKey, RSAPublicKey
from smartid.utils.helpers import hash_bytes

log = logging.getLogger(__name__)

# DER of DigestInfo{ sha256, NULL } up to and including the OCTET STRING header
SHA256_DIGEST_INFO_PREFIX = bytes([
    0x30, 0x31, 0x30, 0x0d, 0x06, 0x09, 0x60, 0x86, 0x48, 0x01,
    0x65, 0x03, 0x04, 0x02, 0x01, 0x05, 0x00, 0x04, 0x20,
])

EC_COORDINATE_SIZE = 32


class SignatureVerifier(ABC):
    """Base verifier; subclasses raise InvalidSignature or ValueError on any mismatch."""

    @abstractmethod
    def check(self, public_key: PublicKey, session_hash: bytes, signature: bytes) -> None:
        ...


class EcdsaP256Verifier(SignatureVerifier):

    def check(self, public_key: ECPublicKey, session_hash: bytes, signature: bytes) -> None:
        if public_key.curve != ec.SECP256R1.name:
            raise ValueError("curve")
        if len(signature) != 2 * EC_COORDINATE_SIZE:
            raise ValueError("sig")
        # Raw r||s, split at the midpoint
        r = int.from_bytes(signature[:EC_COORDINATE_SIZE], "big")
        s = int.from_bytes(signature[EC_COORDINATE_SIZE:], "big")
        key = ec.EllipticCurvePublicNumbers(public_key.x, public_key.y, ec.SECP256R1()).public_key()
        key.verify(encode_dss_signature(r, s), session_hash, ec.ECDSA(Prehashed(hashes.SHA256())))


class RsaPkcs1Verifier(SignatureVerifier):

    def check(self, public_key: RSAPublicKey, session_hash: bytes, signature: bytes) -> None:
        key = rsa.RSAPublicNumbers(public_key.exponent, public_key.modulus).public_key()
        recovered = key.recover_data_from_signature(signature, padding.PKCS1v15(), None)
        expected = SHA256_DIGEST_INFO_PREFIX + session_hash
        if not hmac.compare_digest(recovered, expected):
            raise InvalidSignature()


_VERIFIERS: Dict[KeyKind, SignatureVerifier] = {
    KeyKind.EC: EcdsaP256Verifier(),
    KeyKind.RSA: RsaPkcs1Verifier(),
}


def verify_signature(
    certificate: Certificate,
    session_hash: Union[str, bytes],
    signature: bytes,
) -> None:
    """
    Verify `signature` over `session_hash` (hex string or raw bytes) with the
    certificate's public key. Every failure surfaces as the same
    InvalidSignatureError so callers learn nothing about which check failed.
    """
    verifier = _VERIFIERS.get(certificate.public_key.kind)
    try:
        if verifier is None:
            raise ValueError("kind")
        verifier.check(certificate.public_key, hash_bytes(session_hash), signature)
    except (InvalidSignature, ValueError, TypeError):
        log.warning("Signature verification failed")
        raise InvalidSignatureError("invalid signature") from None
