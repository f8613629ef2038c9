# smartid/services/identity_service.py
import logging
from typing import Optional

from smartid.core.errors import IncompleteCertificateError
from smartid.models.models import Certificate, PersonalIdentity
from smartid.models.oids import AttributeOID

log = logging.getLogger(__name__)


def _identifier_from_common_name(common_name: str, given_name: str, surname: str) -> Optional[str]:
    # Older certificate profiles carry no serial number; the CommonName looks
    # like "PNOEE-10101010005,DEMO,SMART-ID".
    for part in common_name.split(","):
        if part != given_name and part != surname:
            return part
    return None


def extract_identity(certificate: Certificate) -> PersonalIdentity:
    """Map subject attributes of a trusted certificate to a PersonalIdentity."""
    subject = certificate.subject
    given_name = subject.get(AttributeOID.GIVEN_NAME.long_name)
    surname = subject.get(AttributeOID.SURNAME.long_name)
    if given_name is None or surname is None:
        raise IncompleteCertificateError("certificate subject lacks GivenName or SurName")

    identifier = subject.get(AttributeOID.DEVICE_SERIAL_NUMBER.long_name)
    if identifier is None:
        common_name = subject.get(AttributeOID.COMMON_NAME.long_name)
        if common_name is not None:
            identifier = _identifier_from_common_name(common_name, given_name, surname)
    if not identifier:
        raise IncompleteCertificateError("certificate subject lacks a personal identifier")

    country = subject.get(AttributeOID.COUNTRY.long_name)
    if country is None:
        raise IncompleteCertificateError("certificate subject lacks Country")

    log.debug("Extracted identity %s for %s %s", identifier, given_name, surname)
    return PersonalIdentity(
        first_name=given_name,
        last_name=surname,
        personal_identifier=identifier,
        country=country,
    )
