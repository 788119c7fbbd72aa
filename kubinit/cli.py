"""
cli.py
======

misc functions turning a kubinit configuration file into user data,
usually called from ``kubinit.kubinit.Kubinit``.

Don't use directly
"""
import os
import sys

import yaml

from kubinit import PORT_OF_CLUSTER_AGENT, PORT_OF_DQLITE
from kubinit.provision.cloud_init import (ControlPlaneInput,
                                          ControlPlaneJoinInput,
                                          WorkerJoinInput, WriteFile)
from kubinit.ssl import Certificates
from kubinit.util.logger import Logger
from kubinit.util.net import is_port
from kubinit.util.util import k8s_version_validation


LOGGER = Logger(__name__)


def read_config(path):
    """load a kubinit configuration file"""
    with open(path, 'r') as stream:
        config = yaml.safe_load(stream)

    if not isinstance(config, dict):
        raise ValueError(f"{path} does not contain a mapping")

    return config


def require(config, key):
    """return config[key] or fail with a readable message"""
    try:
        value = config[key]
    except KeyError:
        raise ValueError(f"'{key}' is missing in the configuration") \
            from None

    if value is None or value == "":
        raise ValueError(f"'{key}' must not be empty")

    return value


def get_port(config, key, default=None):
    """read a port as string, the templates substitute it verbatim"""
    port = config.get(key, default)
    if port is None:
        port = require(config, key)
    if not is_port(port):
        raise ValueError(f"'{key}' is not a valid port: {port!r}")
    return str(port)


def get_version(config):
    """
    the Kubernetes version, YAML would turn an unquoted 1.20 into 1.2
    """
    version = require(config, 'version')
    if not isinstance(version, str):
        raise ValueError(f"'version' must be quoted, got {version!r}")
    if not k8s_version_validation(version):
        raise ValueError(f"'version' is not major.minor[.patch]: "
                         f"{version!r}")
    return version


def get_addons(config):
    """the addons to enable, a list of names or nothing"""
    addons = config.get('addons')
    if addons is None:
        return None
    if not isinstance(addons, list) or \
            not all(isinstance(addon, str) for addon in addons):
        raise ValueError(f"'addons' must be a list of names, got {addons!r}")
    return addons


def get_certificates(config):
    """
    Read the CA from the paths given under ``ca``, create a new one
    if there is no such section.
    """
    ca_paths = config.get('ca')
    if not ca_paths:
        LOGGER.info("No CA configured, creating a new one ...")
        return Certificates.generate()

    return Certificates.from_paths(require(ca_paths, 'cert'),
                                   require(ca_paths, 'key'))


def get_additional_files(config):
    """the files listed under ``additional-files``"""
    return [WriteFile.from_dict(item)
            for item in config.get('additional-files') or []]


def init_request(config, certificates=None):
    """create the request for the first control plane node"""
    if certificates is None:
        certificates = get_certificates(config)

    return ControlPlaneInput(
        certificates,
        require(config, 'control-plane-endpoint'),
        require(config, 'join-token'),
        require(config, 'join-token-ttl'),
        get_version(config),
        addons=get_addons(config),
        additional_files=get_additional_files(config),
        port_of_cluster_agent=get_port(config, 'port-of-cluster-agent',
                                       PORT_OF_CLUSTER_AGENT),
        port_of_dqlite=get_port(config, 'port-of-dqlite', PORT_OF_DQLITE))


def join_request(config, certificates=None):
    """create the request for a control plane node joining the cluster"""
    if certificates is None:
        certificates = get_certificates(config)

    return ControlPlaneJoinInput(
        certificates,
        require(config, 'control-plane-endpoint'),
        require(config, 'join-token'),
        require(config, 'join-token-ttl'),
        require(config, 'ip-of-node-to-join'),
        get_port(config, 'port-of-node-to-join', PORT_OF_CLUSTER_AGENT),
        get_version(config),
        additional_files=get_additional_files(config),
        port_of_dqlite=get_port(config, 'port-of-dqlite', PORT_OF_DQLITE))


def worker_request(config):
    """create the request for a worker node"""
    return WorkerJoinInput(
        require(config, 'control-plane-endpoint'),
        require(config, 'join-token'),
        require(config, 'ip-of-node-to-join'),
        get_port(config, 'port-of-node-to-join', PORT_OF_CLUSTER_AGENT),
        get_version(config),
        additional_files=get_additional_files(config))


def userdata_path(config, kind):
    """the default output path, next to the configuration file"""
    return "-".join((os.path.splitext(config)[0], kind, "userdata.yaml"))


def write_userdata(userdata, output):
    """
    Write the rendered user data to output. ``-`` writes to STDOUT.

    Returns:
        the path written to or None
    """
    if output == "-":
        sys.stdout.write(userdata.decode())
        sys.stdout.flush()
        return None

    with open(output, "wb") as fh:
        fh.write(userdata)

    LOGGER.success("User data was written to: %s", output)
    return output
