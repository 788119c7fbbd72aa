"""
This module assembles the cloud-init user data for MicroK8s machines
created by a cluster orchestrator.

Every machine gets a request object describing it. The ``new_*`` functions
normalize the request in place and render it:

* :func:`new_init_control_plane` - the first control plane node, which
  owns the CA and hands out the join token
* :func:`new_join_control_plane` - further control plane nodes
* :func:`new_join_worker` - worker nodes

A request must not be reused after it was rendered.
"""
import re

from kubinit import (CLOUD_CONFIG_HEADER, SENTINEL_FILE_COMMAND,
                     PORT_OF_CLUSTER_AGENT, PORT_OF_DQLITE)
from kubinit.provision import templates
from kubinit.provision.render import generate, RenderError
from kubinit.util.logger import Logger
from kubinit.util.net import endpoint_type, ENDPOINT_TYPE_DNS
from kubinit.util.util import (extract_version_parts, snap_channel_argument,
                               ensure_dns_addon)

LOGGER = Logger(__name__)

PERMISSIONS_PATTERN = re.compile(r"^0?[0-7]{3}$")


class PreparationError(ValueError):
    """raised when the base user data fields can't be prepared"""


class WriteFile:  # pylint: disable=too-few-public-methods
    """
    A file cloud-init writes to the machine.

    Args:
        path (str): e.g. /var/tmp/ca.crt
        content (str): the file's content
        permissions (str): octal mode, e.g. "0600"
    """
    def __init__(self, path, content, permissions="0600"):
        self.path = path
        self.content = content
        self.permissions = permissions

    @classmethod
    def from_dict(cls, data):
        """create a WriteFile from a configuration entry"""
        try:
            return cls(data['path'], data['content'],
                       str(data.get('permissions', '0600')))
        except (KeyError, TypeError, AttributeError) as err:
            raise ValueError(f"invalid file entry {data!r}") from err

    def validate(self):
        """
        Raises:
            PreparationError if the file can't be written by cloud-init
        """
        if not self.path or not isinstance(self.path, str):
            raise PreparationError(f"file {self!r} has no path")
        if not isinstance(self.content, str):
            raise PreparationError(f"content of {self.path} is not text")
        if not PERMISSIONS_PATTERN.match(str(self.permissions)):
            raise PreparationError(
                f"permissions of {self.path} are not octal: "
                f"{self.permissions!r}")

    def __eq__(self, other):
        if not isinstance(other, WriteFile):
            return NotImplemented
        return ((self.path, self.content, self.permissions) ==
                (other.path, other.content, other.permissions))

    def __repr__(self):
        return f"WriteFile({self.path!r}, permissions={self.permissions!r})"


class BaseUserData:
    """
    The fields all user data share.

    Attributes:
        header (str): the cloud-config header
        sentinel_file_command (str): the last command, it tells the
            orchestrator the machine finished bootstrapping
        write_files (list): the files written on the machine, in order
        additional_files (list): files requested by the caller, appended
            after the certificates
        control_plane (bool): if the machine becomes a control plane node
        role (str): set by :meth:`prepare` from ``control_plane``
    """
    def __init__(self, additional_files=None):
        self.header = ""
        self.sentinel_file_command = ""
        self.write_files = []
        self.additional_files = list(additional_files or [])
        self.control_plane = False
        self.role = None

    def prepare(self):
        """
        Fill in the header, the sentinel command and the role, append the
        additional files.

        Raises:
            PreparationError if any file can't be written
        """
        self.header = CLOUD_CONFIG_HEADER
        self.write_files.extend(self.additional_files)
        for wfile in self.write_files:
            wfile.validate()
        self.sentinel_file_command = SENTINEL_FILE_COMMAND
        self.role = "control-plane" if self.control_plane else "worker"

    def context(self):
        """the base fields as template variables"""
        return {'header': self.header,
                'sentinel_file_command': self.sentinel_file_command,
                'write_files': self.write_files}


# pylint: disable=too-many-instance-attributes,too-many-arguments
class ControlPlaneInput:
    """
    Describes the first control plane node of a cluster.

    Args:
        certificates: provides the CA as files, see
            :class:`kubinit.ssl.Certificates`
        control_plane_endpoint (str): IP or DNS name of the API server
        join_token (str): the token other nodes join with
        join_token_ttl_in_secs (int): how long the token is valid
        version (str): the Kubernetes version, e.g. 1.21.3
        addons (list): MicroK8s addons to enable, DNS is always added
        additional_files (list): extra :class:`WriteFile` instances
        port_of_cluster_agent (str): port of the MicroK8s cluster agent
        port_of_dqlite (str): port of the dqlite datastore
    """
    def __init__(self, certificates, control_plane_endpoint, join_token,
                 join_token_ttl_in_secs, version, addons=None,
                 additional_files=None,
                 port_of_cluster_agent=PORT_OF_CLUSTER_AGENT,
                 port_of_dqlite=PORT_OF_DQLITE):
        self.base = BaseUserData(additional_files)
        self.certificates = certificates
        self.control_plane_endpoint = control_plane_endpoint
        self.control_plane_endpoint_type = ENDPOINT_TYPE_DNS
        self.join_token = join_token
        self.join_token_ttl_in_secs = join_token_ttl_in_secs
        self.version = version
        self.addons = addons
        self.port_of_cluster_agent = port_of_cluster_agent
        self.port_of_dqlite = port_of_dqlite

    def context(self):
        """the request as template variables"""
        ctx = self.base.context()
        ctx.update({
            'control_plane_endpoint': self.control_plane_endpoint,
            'control_plane_endpoint_type': self.control_plane_endpoint_type,
            'join_token': self.join_token,
            'join_token_ttl_in_secs': self.join_token_ttl_in_secs,
            'version': self.version,
            'addons': self.addons,
            'port_of_cluster_agent': self.port_of_cluster_agent,
            'port_of_dqlite': self.port_of_dqlite})
        return ctx


class ControlPlaneJoinInput:
    """
    Describes a control plane node joining a running cluster.

    Args:
        certificates: provides the CA as files
        control_plane_endpoint (str): IP or DNS name of the API server
        join_token (str): the token to join with, also handed out by this
            node afterwards
        join_token_ttl_in_secs (int): how long the token is valid
        ip_of_node_to_join (str): address of an existing control plane node
        port_of_node_to_join (str): cluster agent port of that node
        version (str): the Kubernetes version, e.g. 1.21.3
        additional_files (list): extra :class:`WriteFile` instances
        port_of_dqlite (str): port of the dqlite datastore
    """
    def __init__(self, certificates, control_plane_endpoint, join_token,
                 join_token_ttl_in_secs, ip_of_node_to_join,
                 port_of_node_to_join, version, additional_files=None,
                 port_of_dqlite=PORT_OF_DQLITE):
        self.base = BaseUserData(additional_files)
        self.certificates = certificates
        self.control_plane_endpoint = control_plane_endpoint
        self.control_plane_endpoint_type = ENDPOINT_TYPE_DNS
        self.join_token = join_token
        self.join_token_ttl_in_secs = join_token_ttl_in_secs
        self.ip_of_node_to_join = ip_of_node_to_join
        self.port_of_node_to_join = port_of_node_to_join
        self.version = version
        self.port_of_dqlite = port_of_dqlite

    def context(self):
        """the request as template variables"""
        ctx = self.base.context()
        ctx.update({
            'control_plane_endpoint': self.control_plane_endpoint,
            'control_plane_endpoint_type': self.control_plane_endpoint_type,
            'join_token': self.join_token,
            'join_token_ttl_in_secs': self.join_token_ttl_in_secs,
            'ip_of_node_to_join': self.ip_of_node_to_join,
            'port_of_node_to_join': self.port_of_node_to_join,
            'version': self.version,
            'port_of_dqlite': self.port_of_dqlite})
        return ctx


class WorkerJoinInput:
    """
    Describes a worker node joining a running cluster. Workers get no
    certificates.
    """
    def __init__(self, control_plane_endpoint, join_token,
                 ip_of_node_to_join, port_of_node_to_join, version,
                 additional_files=None):
        self.base = BaseUserData(additional_files)
        self.control_plane_endpoint = control_plane_endpoint
        self.join_token = join_token
        self.ip_of_node_to_join = ip_of_node_to_join
        self.port_of_node_to_join = port_of_node_to_join
        self.version = version

    def context(self):
        """the request as template variables"""
        ctx = self.base.context()
        ctx.update({
            'control_plane_endpoint': self.control_plane_endpoint,
            'join_token': self.join_token,
            'ip_of_node_to_join': self.ip_of_node_to_join,
            'port_of_node_to_join': self.port_of_node_to_join,
            'version': self.version})
        return ctx


def to_snap_channel(version):
    """
    Turn a Kubernetes version into the snap channel argument.

    Raises:
        VersionFormatError if version is not major.minor[.patch]
    """
    major, minor = extract_version_parts(version)
    channel = snap_channel_argument(major, minor)
    LOGGER.debug("Version %s installs with %s", version, channel)
    return channel


def classify_endpoint(request):
    """set the endpoint type of request, DNS unless the endpoint is an IP"""
    request.control_plane_endpoint_type = endpoint_type(
        request.control_plane_endpoint)
    LOGGER.debug("Control plane endpoint %s is of type %s",
                 request.control_plane_endpoint,
                 request.control_plane_endpoint_type)


def new_init_control_plane(request, renderer=generate):
    """
    Render the user data of the node initializing the cluster.

    Args:
        request (ControlPlaneInput): the request, normalized in place
        renderer (callable): see :func:`kubinit.provision.render.generate`

    Returns:
        bytes

    Raises:
        VersionFormatError, RenderError
    """
    base = request.base
    base.header = CLOUD_CONFIG_HEADER
    base.sentinel_file_command = SENTINEL_FILE_COMMAND
    base.write_files = list(request.certificates.as_files())
    base.write_files.extend(base.additional_files)
    base.control_plane = True
    base.role = "control-plane"

    request.control_plane_endpoint_type = ENDPOINT_TYPE_DNS
    request.version = to_snap_channel(request.version)

    request.addons = ensure_dns_addon(request.addons)
    LOGGER.debug("Enabling addons %s", ", ".join(request.addons))

    classify_endpoint(request)

    return renderer("InitControlplane", templates.CONTROL_PLANE_INIT,
                    request)


def new_join_control_plane(request, renderer=generate):
    """
    Render the user data of a control plane node joining the cluster.

    Args:
        request (ControlPlaneJoinInput): the request, normalized in place
        renderer (callable): see :func:`kubinit.provision.render.generate`

    Returns:
        bytes

    Raises:
        PreparationError, VersionFormatError, RenderError
    """
    request.base.write_files = list(request.certificates.as_files())
    request.base.control_plane = True
    request.base.prepare()

    request.version = to_snap_channel(request.version)
    classify_endpoint(request)

    try:
        return renderer("JoinControlplane", templates.CONTROL_PLANE_JOIN,
                        request)
    except Exception as err:  # pylint: disable=broad-except
        raise RenderError(
            "failed to generate user data for machine joining control "
            f"plane: {err}", err) from err


def new_join_worker(request, renderer=generate):
    """
    Render the user data of a worker node joining the cluster.

    Raises:
        PreparationError, VersionFormatError, RenderError
    """
    request.base.control_plane = False
    request.base.prepare()

    request.version = to_snap_channel(request.version)

    try:
        return renderer("JoinWorker", templates.WORKER_JOIN, request)
    except Exception as err:  # pylint: disable=broad-except
        raise RenderError(
            "failed to generate user data for machine joining as worker: "
            f"{err}", err) from err
