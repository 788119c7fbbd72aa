import pytest

from kubinit.util.util import (extract_version_parts, snap_channel_argument,
                               k8s_version_validation, ensure_dns_addon,
                               has_dns_addon, shell_words,
                               VersionFormatError)
from kubinit.util.net import is_ip, is_port, endpoint_type

from .testdata import INVALID_VERSIONS


@pytest.mark.parametrize("version,expected", [
    ("1.21.3", ("1", "21")),
    ("1.21", ("1", "21")),
    ("v1.22.0", ("1", "22")),
    ("1.23.0-rc.1", ("1", "23")),
    ("2.0.1.4", ("2", "0")),
    ("01.021.3", ("1", "21")),
])
def test_extract_version_parts(version, expected):
    assert extract_version_parts(version) == expected


@pytest.mark.parametrize("version", INVALID_VERSIONS)
def test_extract_version_parts_fails(version):
    with pytest.raises(VersionFormatError):
        extract_version_parts(version)


def test_version_format_error_is_value_error():
    with pytest.raises(ValueError):
        extract_version_parts("abc")


def test_snap_channel_argument():
    assert snap_channel_argument("1", "21") == "--channel=1.21/stable"


def test_k8s_version_validation():
    for vers in ["1.12.7", "1.13", "v1.15.0"]:
        assert k8s_version_validation(vers) is True

    for vers in INVALID_VERSIONS:
        assert k8s_version_validation(vers) is False


def test_ensure_dns_addon():
    assert ensure_dns_addon(None) == ["dns"]
    assert ensure_dns_addon([]) == ["dns"]
    assert ensure_dns_addon(["ingress"]) == ["ingress", "dns"]
    assert ensure_dns_addon(["dnsutils"]) == ["dnsutils"]


def test_ensure_dns_addon_does_not_modify_input():
    addons = ["ingress"]
    ensure_dns_addon(addons)
    assert addons == ["ingress"]


def test_ensure_dns_addon_idempotent():
    once = ensure_dns_addon(["ingress", "storage"])
    assert ensure_dns_addon(once) == once


def test_has_dns_addon():
    assert has_dns_addon(["metrics-dns"])
    assert not has_dns_addon(["ingress"])
    assert not has_dns_addon([])


def test_shell_words():
    assert shell_words(["dns", "ingress"]) == "'dns' 'ingress'"
    assert shell_words([]) == ""


@pytest.mark.parametrize("endpoint,expected", [
    ("10.0.0.5", "IP"),
    ("192.168.1.1", "IP"),
    ("::1", "IP"),
    ("fd00:10::5", "IP"),
    ("cluster.example.com", "DNS"),
    ("localhost", "DNS"),
    ("256.1.1.1", "DNS"),
    ("10.0.0.5:6443", "DNS"),
    ("", "DNS"),
    (None, "DNS"),
])
def test_endpoint_type(endpoint, expected):
    assert endpoint_type(endpoint) == expected


def test_is_ip():
    assert is_ip("10.0.0.5")
    assert not is_ip("")
    assert not is_ip("cluster.example.com")


def test_is_port():
    assert is_port(6443)
    assert is_port("25000")
    assert not is_port(70000)
    assert not is_port("abc")
    assert not is_port(None)
