"""
General purpose utilities
"""
import re

from kubinit import DNS_ADDON

VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)(\.[0-9A-Za-z.+-]*)?$")


class VersionFormatError(ValueError):
    """raised when a Kubernetes version is not ``major.minor[.patch]``"""


def extract_version_parts(version):
    """
    Split a Kubernetes version into its major and minor components.

    Args:
        version (str): e.g. ``1.21.3``, ``v1.22`` or ``1.23.0-rc.1``

    Returns:
        tuple of (major, minor) as strings without leading zeros

    Raises:
        VersionFormatError if the version has no numeric major and minor
    """
    if not isinstance(version, str):
        raise VersionFormatError(f"failed to parse version {version!r}")

    match = VERSION_PATTERN.match(version.strip())
    if not match:
        raise VersionFormatError(f"failed to parse version {version!r}")

    return str(int(match.group(1))), str(int(match.group(2)))


def snap_channel_argument(major, minor):
    """format the snap install argument selecting the release track"""
    return f"--channel={major}.{minor}/stable"


def k8s_version_validation(version):
    """return True if version can be turned into a snap channel"""
    try:
        extract_version_parts(version)
    except VersionFormatError:
        return False
    return True


def has_dns_addon(addons):
    """check if any addon name contains ``dns``"""
    return any(DNS_ADDON in addon for addon in addons)


def ensure_dns_addon(addons):
    """
    Return the addons to enable, making sure DNS is among them.

    An empty or missing list becomes ``["dns"]``. ``dns`` is appended
    when no name contains it, so ``coredns-extra`` already satisfies
    the check.

    Args:
        addons (list or None): addon names in the order to enable them

    Returns:
        a new list, the input is not modified
    """
    if not addons:
        return [DNS_ADDON]

    addons = list(addons)
    if not has_dns_addon(addons):
        addons.append(DNS_ADDON)

    return addons


def shell_words(words):
    """
    Quote each word with single quotes and join them by spaces.

    The result is meant for a shell ``for`` loop. Single quotes inside
    a word are not escaped.
    """
    return " ".join("'%s'" % word for word in words)
