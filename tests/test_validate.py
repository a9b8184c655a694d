from __future__ import annotations

import pytest

from setup_user import (
    RESTRICTED_PORTS,
    DuplicateAccount,
    InvalidPort,
    InvalidUsername,
    PrivilegeError,
    RestrictedPort,
    UsageError,
    is_truthy,
    validate,
)


def test_requires_root_before_anything_else(setup_host):
    setup_host.root = False
    with pytest.raises(PrivilegeError):
        validate(setup_host, "")
    assert setup_host.calls == []


def test_username_required(setup_host):
    with pytest.raises(UsageError):
        validate(setup_host, "")


@pytest.mark.parametrize(
    "name",
    ["John", "1abc", "-bob", "bo b", "bob$", "bob\n", "jöhn", "bob.smith", "BOB"],
)
def test_bad_usernames_rejected(setup_host, name):
    with pytest.raises(InvalidUsername):
        validate(setup_host, name)
    assert setup_host.ran("adduser") == []


@pytest.mark.parametrize("name", ["john", "_svc", "john-doe", "a1_", "x"])
def test_good_usernames_accepted(setup_host, name):
    assert validate(setup_host, name).username == name


def test_existing_account_rejected(setup_host):
    setup_host.users.add("john")
    with pytest.raises(DuplicateAccount):
        validate(setup_host, "john")


@pytest.mark.parametrize("port", ["0", "65536", "99999", "abc", "22a", "-1", "+22", "２２", "2.2"])
def test_bad_ports_rejected(setup_host, port):
    with pytest.raises(InvalidPort):
        validate(setup_host, "john", "", port)


@pytest.mark.parametrize("port", sorted(RESTRICTED_PORTS))
def test_restricted_ports_rejected(setup_host, port):
    with pytest.raises(RestrictedPort):
        validate(setup_host, "john", "", str(port))


@pytest.mark.parametrize("port,expected", [("2222", 2222), ("22", 22), ("65535", 65535), ("", None)])
def test_port_accepted(setup_host, port, expected):
    assert validate(setup_host, "john", "", port).port == expected


@pytest.mark.parametrize("token", ["yes", "YES", "Yes", "true", "True", "1", "y", "Y", " yes "])
def test_sudo_truthy(token):
    assert is_truthy(token)


@pytest.mark.parametrize("token", [None, "", "no", "0", "false", "sudo", "yess"])
def test_sudo_falsy(token):
    assert not is_truthy(token)


def test_auth_mode_follows_key(setup_host):
    with_key = validate(setup_host, "john", "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5 john@laptop")
    without = validate(setup_host, "jane", "   ")
    assert with_key.use_key
    assert not without.use_key
