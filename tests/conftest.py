from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

import maintain
import setup_user

STOCK_SSHD_CONFIG = """\
# $OpenBSD: sshd_config,v 1.104 2021/07/02 05:11:21 dtucker Exp $

Include /etc/ssh/sshd_config.d/*.conf

#Port 22
#AddressFamily any
#ListenAddress 0.0.0.0

#PermitRootLogin prohibit-password
#StrictModes yes

# To disable tunneled clear text passwords, change to no here!
#PasswordAuthentication yes
#PermitEmptyPasswords no

KbdInteractiveAuthentication no
UsePAM yes

X11Forwarding yes
PrintMotd no

AcceptEnv LANG LC_*
Subsystem	sftp	/usr/lib/openssh/sftp-server

# Example of overriding settings on a per-user basis
#Match User anoncvs
#	X11Forwarding no
#	PermitTTY no
"""

STOCK_SUDOERS = """\
Defaults	env_reset
Defaults	secure_path="/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"

root	ALL=(ALL:ALL) ALL
%sudo	ALL=(ALL:ALL) ALL

@includedir /etc/sudoers.d
"""

Result = Tuple[int, str, str]


class FakeSetupHost(setup_user.Host):
    """Accounts live in a set, home directories under tmp_path."""

    def __init__(self, tmp_path: Path, *, root: bool = True) -> None:
        self.root = root
        self.home = tmp_path / "home"
        self.users = set()
        self.calls: List[List[str]] = []
        self.interactive: List[List[str]] = []
        self.slept: List[float] = []
        # command prefix -> result, or list of results consumed in order
        self.responses: Dict[Tuple[str, ...], object] = {}

    def _scripted(self, cmd: List[str]) -> Optional[Result]:
        for prefix, result in self.responses.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                if isinstance(result, list):
                    return result.pop(0) if len(result) > 1 else result[0]
                return result  # type: ignore[return-value]
        return None

    def run(self, cmd, *, interactive=False, timeout=120):
        self.calls.append(list(cmd))
        if interactive:
            self.interactive.append(list(cmd))
        scripted = self._scripted(cmd)
        if scripted is not None:
            return scripted
        if cmd[0] == "id":
            return (0 if cmd[1] in self.users else 1), "", ""
        if cmd[0] == "adduser":
            self.users.add(cmd[-1])
            (self.home / cmd[-1]).mkdir(parents=True, exist_ok=True)
            return 0, "", ""
        if cmd[0] == "userdel":
            self.users.discard(cmd[-1])
            shutil.rmtree(self.home / cmd[-1], ignore_errors=True)
            return 0, "", ""
        return 0, "", ""

    def is_root(self) -> bool:
        return self.root

    def home_of(self, username: str) -> Path:
        return self.home / username

    def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)

    def ran(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


class FakeMaintainHost(maintain.Host):
    def __init__(self, *, root: bool = True, installed=("docker", "snap")) -> None:
        self.root = root
        self.installed = set(installed)
        self.calls: List[List[str]] = []
        self.responses: Dict[Tuple[str, ...], Result] = {}
        self.free = 20 * 1024 ** 3
        self.kernel = "5.15.0-91-generic"

    def run(self, cmd, *, stream=False, timeout=120):
        self.calls.append(list(cmd))
        for prefix, result in self.responses.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                return result
        return 0, "", ""

    def is_root(self) -> bool:
        return self.root

    def which(self, name: str) -> bool:
        return name in self.installed

    def free_bytes(self, path: str = "/") -> int:
        return self.free

    def running_kernel(self) -> str:
        return self.kernel

    def ran(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture
def setup_host(tmp_path: Path) -> FakeSetupHost:
    return FakeSetupHost(tmp_path)


@pytest.fixture
def etc(tmp_path: Path) -> Path:
    d = tmp_path / "etc"
    d.mkdir()
    (d / "sshd_config").write_text(STOCK_SSHD_CONFIG, encoding="utf-8")
    (d / "sudoers").write_text(STOCK_SUDOERS, encoding="utf-8")
    return d


@pytest.fixture
def settings(etc: Path) -> setup_user.Settings:
    return setup_user.Settings(sshd_config=etc / "sshd_config", sudoers=etc / "sudoers")


@pytest.fixture
def config_file(tmp_path: Path, etc: Path) -> Path:
    p = tmp_path / "inkrex.yml"
    p.write_text(
        "setup:\n"
        f'  sshd_config: "{etc / "sshd_config"}"\n'
        f'  sudoers: "{etc / "sudoers"}"\n',
        encoding="utf-8",
    )
    return p


@pytest.fixture
def maintain_host() -> FakeMaintainHost:
    return FakeMaintainHost()
