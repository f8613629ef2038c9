# smartid/services/trust_service.py
import logging
from datetime import datetime
from typing import Dict, Iterable, Mapping, Optional

from smartid.core.errors import UntrustedCertificateError
from smartid.models.models import Certificate, TrustedIssuer
from smartid.models.oids import short_name_for
from smartid.utils.helpers import utcnow

log = logging.getLogger(__name__)


def issuer_short_names(certificate: Certificate) -> Dict[str, str]:
    return {short_name_for(name): value for name, value in certificate.issuer.items()}


def issuer_matches(issuer: Mapping[str, str], trusted: TrustedIssuer) -> bool:
    """Exact structural equality: same key set and same value for every key."""
    expected = trusted.as_dict()
    if set(issuer.keys()) != set(expected.keys()):
        return False
    return all(issuer[k] == expected[k] for k in expected)


def is_active(certificate: Certificate, now: Optional[datetime] = None) -> bool:
    now = now or utcnow()
    # Open interval: both boundary instants are rejected
    return certificate.not_before < now < certificate.not_after


def validate_certificate(
    certificate: Certificate,
    trusted_issuers: Iterable[TrustedIssuer],
    now: Optional[datetime] = None,
) -> None:
    """
    Check validity window first, then the issuer against the allow-list.
    Raises UntrustedCertificateError on either failure.
    """
    if not is_active(certificate, now):
        log.warning("Certificate not active: valid %s .. %s",
                    certificate.not_before.isoformat(), certificate.not_after.isoformat())
        raise UntrustedCertificateError("not active")

    issuer = issuer_short_names(certificate)
    if not any(issuer_matches(issuer, trusted) for trusted in trusted_issuers):
        log.error("Invalid issuer: %s", issuer)
        raise UntrustedCertificateError("unrecognized issuer")
