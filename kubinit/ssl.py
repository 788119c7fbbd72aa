"""
ssl.py holds the certificate authority handed to control plane machines
"""
# pylint: disable=too-many-arguments

import datetime
import os

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes

from kubinit import CA_DIRECTORY
from kubinit.provision.cloud_init import WriteFile
from kubinit.util.logger import Logger

LOGGER = Logger(__name__)


def create_key(size=2048, public_exponent=65537):
    """Create an RSA private key

    Args:
        size (int) - the key byte size
        public_exponent (int) - the key public_exponent

    Return:
        rsa key object instance
    """
    key = rsa.generate_private_key(
        public_exponent=public_exponent,
        key_size=size,
        backend=default_backend()
    )
    return key


# pylint: disable=dangerous-default-value
def create_ca(private_key, public_key, name, orga="Kubernetes",
              key_usage=[True, False, True, False, False, True,
                         False, False, False],
              days=3650):
    """
    create a self signed CA

    Args:
        private_key (inst): private key instance to sign the CA
        public_key (inst): public key of the CA
        name (str): the common name of the CA
        orga (str): the organization of the CA
        key_usage (list): Key Usage parameters. Indices stand for:
            [digital_signature, content_commitment, key_encipherment,
            data_encipherment, key_agreement, key_cert_sign, crl_sign,
            encipher_only, decipher_only]
        days (int): how long the CA is valid

    Return:
        ssl certificate object
    """
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, orga),
        x509.NameAttribute(NameOID.COMMON_NAME, name),
    ])

    now = datetime.datetime.now(datetime.timezone.utc)

    cert = x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        public_key
    ).not_valid_before(
        # the orchestrator's clock may run ahead of the new machine's
        now - datetime.timedelta(minutes=10)
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_after(
        now + datetime.timedelta(days=days))

    cert = cert.add_extension(
        x509.KeyUsage(*key_usage),
        critical=True)

    cert = cert.add_extension(x509.BasicConstraints(True, None), critical=True)
    cert = cert.add_extension(
        x509.SubjectKeyIdentifier.from_public_key(public_key),
        critical=False)

    cert = cert.add_extension(
        x509.AuthorityKeyIdentifier.from_issuer_public_key(public_key),
        critical=False)

    cert = cert.sign(private_key, hashes.SHA256(), default_backend())

    return cert


def pem_key(key):
    """encode the private bytes of a key as PEM string"""

    bytes_args = dict(encoding=serialization.Encoding.PEM,
                      format=serialization.PrivateFormat.TraditionalOpenSSL,
                      encryption_algorithm=serialization.NoEncryption())

    return key.private_bytes(**bytes_args).decode()


def pem_cert(cert):
    """encode the public bytes of a cert as PEM string"""
    return cert.public_bytes(serialization.Encoding.PEM).decode()


def read_cert(cert):  # pragma: no coverage
    """
    read SSL certificate from path

    Args:
        cert (str) - path to a cert on a file system

    Return:
        cert (inst) - a certificate instance
    """

    with open(cert, "rb") as fh:
        cert = x509.load_pem_x509_certificate(
            fh.read(), default_backend())
    return cert


def read_key(key):  # pragma: no coverage
    """
    read SSL key from path

    Args:
        key (str) - path to a key on a file system

    Return:
        private_key (inst) - a private key instance
    """
    with open(key, "rb") as key_file:
        private_key = serialization.load_pem_private_key(
            key_file.read(),
            password=None,
            backend=default_backend())
    return private_key


class CertBundle:
    """
    a simple class to hold a certificate with its own key
    """

    @classmethod
    def create_ca(cls, name="kubernetes-ca", size=2048):
        """
        create a new self signed CA bundle
        """
        key = create_key(size=size)
        cert = create_ca(key, key.public_key(), name)
        LOGGER.debug("Created CA %s", name)
        return cls(key, cert)

    @classmethod
    def read_bundle(cls, key, cert):
        """
        read a certificate bundle from file system
        """
        key, cert = read_key(key), read_cert(cert)
        return cls(key, cert)

    def __init__(self, key, cert):
        self.key = key
        self.cert = cert


class Certificates:
    """
    The certificate material a control plane machine needs on first boot.

    Args:
        ca_bundle (CertBundle): the cluster CA
        directory (str): where the files are written on the machine.
            ``microk8s refresh-certs`` picks the CA up from there.
    """
    def __init__(self, ca_bundle, directory=CA_DIRECTORY):
        self.ca_bundle = ca_bundle
        self.directory = directory

    @classmethod
    def from_paths(cls, cert, key, directory=CA_DIRECTORY):
        """load an existing CA from the file system"""
        return cls(CertBundle.read_bundle(key, cert), directory)

    @classmethod
    def generate(cls, directory=CA_DIRECTORY):
        """create certificates with a brand new CA"""
        return cls(CertBundle.create_ca(), directory)

    @property
    def ca_cert(self):
        """the PEM encoded CA certificate"""
        return pem_cert(self.ca_bundle.cert)

    @property
    def ca_key(self):
        """the PEM encoded CA key"""
        return pem_key(self.ca_bundle.key)

    def as_files(self):
        """
        Return the certificates as file directives, key first.

        Returns:
            list of :class:`kubinit.provision.cloud_init.WriteFile`
        """
        return [
            WriteFile(os.path.join(self.directory, "ca.key"), self.ca_key,
                      "0600"),
            WriteFile(os.path.join(self.directory, "ca.crt"), self.ca_cert,
                      "0600"),
        ]
