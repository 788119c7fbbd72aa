"""Contains utility functions for network stuff"""

from netaddr import valid_ipv4, valid_ipv6, INET_PTON
from netaddr.core import AddrFormatError

ENDPOINT_TYPE_IP = "IP"
ENDPOINT_TYPE_DNS = "DNS"


def is_port(port):
    """Checks if a port is valid"""

    try:
        port = int(port)
    except (TypeError, ValueError):
        return False

    return 0 <= port <= 65535


def is_ip(ip):
    """Checks if an IP is a valid IPv4 or IPv6 address"""

    if not ip or not isinstance(ip, str):
        return False

    try:
        return valid_ipv4(ip, flags=INET_PTON) or valid_ipv6(ip)
    except AddrFormatError:
        return False


def endpoint_type(endpoint):
    """Classify a control plane endpoint.

    Both the init and the join user data use this, so a given endpoint
    is always classified the same way.

    Args:
        endpoint (str): an IP literal or a DNS name

    Returns:
        ``"IP"`` if the endpoint parses as an IP address, else ``"DNS"``
    """
    if is_ip(endpoint):
        return ENDPOINT_TYPE_IP

    return ENDPOINT_TYPE_DNS
