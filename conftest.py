"""
Shared fixtures for the Smart-ID client tests
"""

import base64
import logging
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, decode_dss_signature
from cryptography.x509.oid import NameOID

from smartid.core.config import Settings

ORGANIZATION_IDENTIFIER = x509.ObjectIdentifier("2.5.4.97")

ISSUER_ATTRIBUTES = {
    "C": "EE",
    "O": "SK ID Solutions AS",
    "OID": "NTREE-10747013",
    "CN": "ESTEID2018",
}

_NAME_OIDS = {
    "C": NameOID.COUNTRY_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "OID": ORGANIZATION_IDENTIFIER,
    "CN": NameOID.COMMON_NAME,
    "E": NameOID.EMAIL_ADDRESS,
    "G": NameOID.GIVEN_NAME,
    "SN": NameOID.SURNAME,
    "SERIALNUMBER": NameOID.SERIAL_NUMBER,
    "PSEUDONYM": x509.ObjectIdentifier("2.5.4.65"),
}

DEMO_SUBJECT = {
    "C": "EE",
    "SN": "SMART-ID",
    "G": "DEMO",
    "CN": "PNOEE-10101010005,DEMO,SMART-ID",
}


def _name(attributes):
    return x509.Name([x509.NameAttribute(_NAME_OIDS[k], v) for k, v in attributes.items()])


@pytest.fixture(scope="session")
def ca_key():
    """Key that signs test certificates; its identity lives only in the issuer name"""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def make_cert(ca_key, ec_key):
    """Factory building a DER certificate for the given key, subject and issuer"""
    def _make(key=None, subject=None, issuer=None, not_before=None, not_after=None):
        key = key or ec_key
        now = datetime.now(timezone.utc).replace(microsecond=0)
        cert = x509.CertificateBuilder().subject_name(
            _name(subject if subject is not None else DEMO_SUBJECT)
        ).issuer_name(
            _name(issuer if issuer is not None else ISSUER_ATTRIBUTES)
        ).public_key(
            key.public_key()
        ).serial_number(
            x509.random_serial_number()
        ).not_valid_before(
            not_before or now - timedelta(days=1)
        ).not_valid_after(
            not_after or now + timedelta(days=365)
        ).sign(ca_key, hashes.SHA256())
        return cert.public_bytes(serialization.Encoding.DER)
    return _make


@pytest.fixture
def sign_ec():
    """Raw r||s ECDSA P-256 signature over a precomputed SHA-256 digest"""
    def _sign(key, digest: bytes) -> bytes:
        der = key.sign(digest, ec.ECDSA(Prehashed(hashes.SHA256())))
        r, s = decode_dss_signature(der)
        return r.to_bytes(32, "big") + s.to_bytes(32, "big")
    return _sign


@pytest.fixture
def sign_rsa():
    """PKCS#1 v1.5 signature over DigestInfo(SHA-256) || digest"""
    def _sign(key, digest: bytes) -> bytes:
        return key.sign(digest, padding.PKCS1v15(), Prehashed(hashes.SHA256()))
    return _sign


@pytest.fixture
def settings_data():
    """Configuration mapping shaped like smartid.yaml"""
    return {
        "relying_party": {
            "uuid": "00000000-0000-0000-0000-000000000000",
            "name": "DEMO",
        },
        "api": {
            "hostname": "sid.demo.sk.ee",
            "path": "/smart-id-rp/v1",
            "authorize_token": "test-token",
        },
        "trusted_issuers": [
            {"C": "EE", "O": "AS Sertifitseerimiskeskus", "CN": "ESTEID-SK 2011"},
            dict(ISSUER_ATTRIBUTES),
        ],
        "logging": {"level": "DEBUG"},
    }


@pytest.fixture
def settings(settings_data):
    return Settings.from_mapping(settings_data)


@pytest.fixture
def b64():
    return lambda data: base64.b64encode(data).decode()


@pytest.fixture
def demo_subject():
    return dict(DEMO_SUBJECT)


@pytest.fixture
def issuer_attributes():
    return dict(ISSUER_ATTRIBUTES)


@pytest.fixture
def smartid_logger():
    """The package logger, with its level restored after the test"""
    logger = logging.getLogger("smartid")
    level = logger.level
    yield logger
    logger.setLevel(level)
