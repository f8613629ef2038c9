# smartid/services/certificate_service.py
"""
X.509 certificate parsing for Smart-ID responses
"""
import logging
from typing import Dict, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from smartid.core.errors import CertificateFormatError
from smartid.models.models import Certificate, CertificateEncoding, ECPublicKey, PublicKey, RSAPublicKey
from smartid.models.oids import long_name_for_oid
from smartid.utils.helpers import b64_dec

log = logging.getLogger(__name__)


def _load(data: Union[bytes, str], encoding: CertificateEncoding) -> x509.Certificate:
    if encoding == CertificateEncoding.PEM:
        if isinstance(data, str):
            data = data.encode()
        return x509.load_pem_x509_certificate(data)
    if encoding == CertificateEncoding.BASE64:
        data = b64_dec(data)
    elif isinstance(data, str):
        raise ValueError("DER certificate must be bytes")
    return x509.load_der_x509_certificate(data)


def _name_to_mapping(name: x509.Name) -> Dict[str, str]:
    # Unknown OIDs are kept under their dotted string so nothing is dropped.
    out: Dict[str, str] = {}
    for attr in name:
        value = attr.value
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        out[long_name_for_oid(attr.oid.dotted_string)] = value
    return out


def _public_key(cert: x509.Certificate) -> PublicKey:
    try:
        key = cert.public_key()
    except (ValueError, UnsupportedAlgorithm) as e:
        raise CertificateFormatError(f"unreadable public key: {e}") from e

    if isinstance(key, ec.EllipticCurvePublicKey):
        numbers = key.public_numbers()
        return ECPublicKey(curve=key.curve.name, x=numbers.x, y=numbers.y)
    if isinstance(key, rsa.RSAPublicKey):
        numbers = key.public_numbers()
        return RSAPublicKey(modulus=numbers.n, exponent=numbers.e)
    raise CertificateFormatError(f"unsupported public key type: {type(key).__name__}")


def parse_certificate(
    data: Union[bytes, str],
    encoding: CertificateEncoding = CertificateEncoding.DER,
) -> Certificate:
    """
    Decode a DER, PEM or base64-DER certificate into a Certificate record.

    Raises CertificateFormatError when the input is not a well-formed X.509
    certificate or carries a key that is neither EC nor RSA.
    """
    encoding = CertificateEncoding(encoding)
    try:
        cert = _load(data, encoding)
        subject = _name_to_mapping(cert.subject)
        issuer = _name_to_mapping(cert.issuer)
        not_before = cert.not_valid_before_utc
        not_after = cert.not_valid_after_utc
    except ValueError as e:
        log.warning("Certificate decoding failed (%s): %s", encoding.value, str(e))
        raise CertificateFormatError(f"malformed certificate: {e}") from e

    return Certificate(
        not_before=not_before,
        not_after=not_after,
        subject=subject,
        issuer=issuer,
        public_key=_public_key(cert),
        der=cert.public_bytes(serialization.Encoding.DER),
    )
