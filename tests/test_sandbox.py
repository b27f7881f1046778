import json
from pathlib import Path

import pytest

from barforge.sandbox import (
    SandboxConfig,
    SandboxSeverity,
    SandboxStatus,
    is_allowed_read_path,
    is_allowed_write_path,
)


@pytest.mark.parametrize(
    "path",
    [
        "/usr/share/fonts",
        "/usr/share/icons/hicolor",
        "/etc/fonts/conf.d",
        "/var/lib/fonts/custom",
        "/usr/lib/python3.12",
        "/opt/application",
    ],
)
def test_read_path_whitelist_allows_system_directories(path):
    assert is_allowed_read_path(Path(path)) is True


@pytest.mark.parametrize(
    "path",
    [
        "/etc/shadow",
        "/etc/passwd",
        "/home/user/.ssh",
        "/root",
        "/var/log/auth.log",
        "/etc/sudoers",
    ],
)
def test_read_path_whitelist_rejects_sensitive_paths(path):
    assert is_allowed_read_path(Path(path)) is False


@pytest.mark.parametrize("path", ["/tmp/waybar-module", "/var/tmp/cache", "/tmp"])
def test_write_path_whitelist_allows_temp_directories(path):
    assert is_allowed_write_path(Path(path)) is True


@pytest.mark.parametrize(
    "path",
    [
        "/etc/passwd",
        "/etc/shadow",
        "/home/user/.bashrc",
        "/usr/bin/malicious",
        "/root/.ssh/authorized_keys",
        "/var/log/auth.log",
    ],
)
def test_write_path_whitelist_rejects_system_paths(path):
    assert is_allowed_write_path(Path(path)) is False


def test_whitelists_accept_plain_strings():
    assert is_allowed_read_path("/usr/share/themes") is True
    assert is_allowed_write_path("/home/user") is False


def test_sandbox_status_severity_mapping():
    assert SandboxStatus.FULLY_ENFORCED.severity() is SandboxSeverity.SUCCESS
    assert SandboxStatus.PARTIALLY_ENFORCED.severity() is SandboxSeverity.WARNING
    assert SandboxStatus.NOT_SUPPORTED.severity() is SandboxSeverity.ERROR
    assert SandboxStatus.FAILED.severity() is SandboxSeverity.ERROR


def test_sandbox_status_is_secure():
    assert SandboxStatus.FULLY_ENFORCED.is_secure()
    assert SandboxStatus.PARTIALLY_ENFORCED.is_secure()
    assert not SandboxStatus.NOT_SUPPORTED.is_secure()
    assert not SandboxStatus.FAILED.is_secure()


def test_sandbox_status_allows_execution():
    assert SandboxStatus.FULLY_ENFORCED.allows_execution()
    assert SandboxStatus.PARTIALLY_ENFORCED.allows_execution()
    assert SandboxStatus.NOT_SUPPORTED.allows_execution()
    assert not SandboxStatus.FAILED.allows_execution()


def test_sandbox_status_descriptions():
    assert SandboxStatus.FULLY_ENFORCED.description() == "All security restrictions active"
    assert SandboxStatus.FAILED.description() == "Failed to apply sandbox restrictions"
    assert (
        SandboxStatus.NOT_SUPPORTED.description()
        == "Landlock not supported on this kernel"
    )


def test_sandbox_config_default():
    config = SandboxConfig()
    assert config.allow_network is False
    assert config.allowed_ports == []
    assert config.extra_ro_paths == []
    assert config.extra_rw_paths == []


def test_sandbox_config_serialization():
    config = SandboxConfig(
        allow_network=True,
        allowed_ports=[80, 443],
        extra_ro_paths=[Path("/usr/share/fonts")],
        extra_rw_paths=[Path("/tmp/module")],
    )
    restored = SandboxConfig.from_json(config.to_json())
    assert restored.allow_network == config.allow_network
    assert restored.allowed_ports == config.allowed_ports
    assert restored.extra_ro_paths == config.extra_ro_paths
    assert restored.extra_rw_paths == config.extra_rw_paths


def test_sandbox_config_json_field_names():
    config = SandboxConfig(allowed_ports=[8080], extra_rw_paths=[Path("/tmp/x")])
    data = json.loads(config.to_json())
    assert data == {
        "allow_network": False,
        "allowed_ports": [8080],
        "extra_ro_paths": [],
        "extra_rw_paths": ["/tmp/x"],
    }


def test_sandbox_config_from_json_rejects_missing_field():
    with pytest.raises(ValueError, match="allowed_ports"):
        SandboxConfig.from_json('{"allow_network": true}')


def test_sandbox_config_from_json_rejects_bad_port():
    text = json.dumps(
        {
            "allow_network": True,
            "allowed_ports": [70000],
            "extra_ro_paths": [],
            "extra_rw_paths": [],
        }
    )
    with pytest.raises(ValueError):
        SandboxConfig.from_json(text)


def test_sandbox_config_from_json_rejects_non_object():
    with pytest.raises(ValueError):
        SandboxConfig.from_json("[1, 2]")