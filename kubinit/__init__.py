# pylint: disable=missing-docstring
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version('kubinit')
except PackageNotFoundError:
    __version__ = '0.1.0'

# Defining some constants
CLOUD_CONFIG_HEADER = "## template: jinja\n#cloud-config"
SENTINEL_FILE_COMMAND = ("echo success > "
                         "/run/cluster-api/bootstrap-success.complete")
DEFAULT_ADDONS = ["dns"]
DNS_ADDON = "dns"
PORT_OF_CLUSTER_AGENT = "25000"
PORT_OF_DQLITE = "19001"
CA_DIRECTORY = "/var/tmp"
