# smartid/models/oids.py
"""
Fixed table of X.500 name attributes found in Smart-ID certificates
"""
from enum import Enum
from typing import Dict, Optional


class AttributeOID(Enum):
    # value = (dotted oid, long name, short name)
    COMMON_NAME = ("2.5.4.3", "CommonName", "CN")
    COUNTRY = ("2.5.4.6", "Country", "C")
    DEVICE_SERIAL_NUMBER = ("2.5.4.5", "DeviceSerialNumber", None)
    DOMAIN_COMPONENT = ("0.9.2342.19200300.100.1.25", "DomainComponent", "DC")
    EMAIL = ("1.2.840.113549.1.9.1", "EMail", "E")
    GIVEN_NAME = ("2.5.4.42", "GivenName", "G")
    INITIALS = ("2.5.4.43", "Initials", "I")
    LOCALITY = ("2.5.4.7", "Locality", "L")
    ORGANIZATION = ("2.5.4.10", "Organization", "O")
    ORGANIZATION_IDENTIFIER = ("2.5.4.97", "OrganizationIdentifier", "OID")
    ORGANIZATION_UNIT = ("2.5.4.11", "OrganizationUnit", "OU")
    STATE = ("2.5.4.8", "State", "ST")
    STREET_ADDRESS = ("2.5.4.9", "StreetAddress", "Street")
    SURNAME = ("2.5.4.4", "SurName", "SN")
    TITLE = ("2.5.4.12", "Title", "T")
    UNSTRUCTURED_ADDRESS = ("1.2.840.113549.1.9.8", "UnstructuredAddress", None)
    UNSTRUCTURED_NAME = ("1.2.840.113549.1.9.2", "UnstructuredName", None)

    @property
    def dotted(self) -> str:
        return self.value[0]

    @property
    def long_name(self) -> str:
        return self.value[1]

    @property
    def short_name(self) -> Optional[str]:
        return self.value[2]


_BY_DOTTED: Dict[str, AttributeOID] = {a.dotted: a for a in AttributeOID}
_BY_LONG: Dict[str, AttributeOID] = {a.long_name: a for a in AttributeOID}


def attribute_for_oid(dotted: str) -> Optional[AttributeOID]:
    return _BY_DOTTED.get(dotted)


def long_name_for_oid(dotted: str) -> str:
    """Long attribute name, or the dotted OID itself when the OID is not in the table."""
    attr = _BY_DOTTED.get(dotted)
    return attr.long_name if attr else dotted


def short_name_for(name: str) -> str:
    """
    Map a long attribute name (as stored on a parsed Certificate) to its short
    form. Attributes without a short form keep their long name; unknown
    attributes keep their dotted OID.
    """
    attr = _BY_LONG.get(name)
    if attr is None or attr.short_name is None:
        return name
    return attr.short_name
