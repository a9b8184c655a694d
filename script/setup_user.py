#!/usr/bin/env python3
"""
inkrex-scripts - setup

Create an SSH-accessible account on this host and harden sshd:
- optional public key (key-only login, password auth disabled)
- optional sudo group membership (passwordless only with a key)
- root login disabled, optional port change
- sshd_config snapshot before any change; every change is rolled back
  if a later step fails, including sshd failing to come back up

Exit codes:
  0 = account created and sshd confirmed running
  1 = rejected, or failed and rolled back
"""

from __future__ import annotations

import argparse
import dataclasses
import os
import pwd
import re
import shutil
import subprocess
import sys
import textwrap
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

RESTRICTED_PORTS = frozenset(
    {20, 21, 23, 25, 53, 80, 110, 143, 443, 465, 587, 993, 995, 3306, 5432, 6379, 27017}
)
TRUTHY = frozenset({"yes", "true", "1", "y"})
USERNAME_RE = re.compile(r"[a-z_][a-z0-9_-]*")

# -------------------------
# Utilities
# -------------------------


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def info(msg: str) -> None:
    print(f"[..] {msg}")


def ok(msg: str) -> None:
    print(f"[OK] {msg}")


def warn(msg: str) -> None:
    print(f"[!!] {msg}")


def run(
    cmd: List[str], *, capture: bool = True, timeout: Optional[int] = 120
) -> subprocess.CompletedProcess:
    return subprocess.run(
        cmd, capture_output=capture, text=True, errors="replace", timeout=timeout
    )


def load_yaml(path: str) -> Dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as ex:
        raise RuntimeError(
            "PyYAML is required. Install with: python3 -m pip install pyyaml "
            "or your distro package (python3-yaml)."
        ) from ex

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError("Config root must be a mapping/dict")
    return data


def cfg_get(cfg: Dict[str, Any], path: str, default: Any = None) -> Any:
    cur: Any = cfg
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def looks_like_ssh_pubkey(pub: str) -> bool:
    return bool(
        re.match(
            r"^(ssh-ed25519|ssh-rsa|ssh-dss|ecdsa-sha2-nistp\d+|sk-\S+)\s+[A-Za-z0-9+/=]+(\s+.*)?$",
            pub.strip(),
        )
    )


# -------------------------
# Errors
# -------------------------


class SetupError(RuntimeError):
    """Base for every rejection or failed step.

    A step that got part way may attach the ledger describing what it already
    changed, so rollback can undo it.
    """

    def __init__(self, message: str, *, ledger: Optional["Ledger"] = None) -> None:
        super().__init__(message)
        self.ledger = ledger


class PrivilegeError(SetupError):
    pass


class UsageError(SetupError):
    pass


class InvalidUsername(SetupError):
    pass


class DuplicateAccount(SetupError):
    pass


class InvalidPort(SetupError):
    pass


class RestrictedPort(SetupError):
    pass


class SnapshotFailed(SetupError):
    pass


class StepFailed(SetupError):
    pass


class InvalidDaemonConfig(SetupError):
    pass


class ServiceRestartFailed(SetupError):
    pass


# -------------------------
# Settings
# -------------------------


@dataclasses.dataclass
class Settings:
    sshd_config: Path = Path("/etc/ssh/sshd_config")
    sudoers: Path = Path("/etc/sudoers")
    sudo_group: str = "sudo"
    sshd_binary: str = "sshd"
    services: Tuple[str, ...] = ("ssh", "sshd")
    socket_unit: str = "ssh.socket"
    settle_seconds: float = 2.0
    health_attempts: int = 3
    health_interval: float = 1.0


def load_settings(path: Optional[str]) -> Settings:
    cfg = load_yaml(path) if path else {}
    d = Settings()
    services = cfg_get(cfg, "setup.services", list(d.services))
    if isinstance(services, str):
        services = [services]
    if not isinstance(services, list) or not services:
        raise RuntimeError("setup.services must be a non-empty list")
    return Settings(
        sshd_config=Path(cfg_get(cfg, "setup.sshd_config", str(d.sshd_config))),
        sudoers=Path(cfg_get(cfg, "setup.sudoers", str(d.sudoers))),
        sudo_group=str(cfg_get(cfg, "setup.sudo_group", d.sudo_group)),
        sshd_binary=str(cfg_get(cfg, "setup.sshd_binary", d.sshd_binary)),
        services=tuple(str(s) for s in services),
        socket_unit=str(cfg_get(cfg, "setup.socket_unit", d.socket_unit)),
        settle_seconds=float(cfg_get(cfg, "setup.health.settle_seconds", d.settle_seconds)),
        health_attempts=max(1, int(cfg_get(cfg, "setup.health.attempts", d.health_attempts))),
        health_interval=float(cfg_get(cfg, "setup.health.interval_seconds", d.health_interval)),
    )


# -------------------------
# Host collaborators
# -------------------------


class Host:
    """The local machine: commands, accounts and clocks."""

    def run(
        self, cmd: List[str], *, interactive: bool = False, timeout: Optional[int] = 120
    ) -> Tuple[int, str, str]:
        if interactive:
            # Attached to the terminal so adduser can prompt for a password.
            cp = run(cmd, capture=False, timeout=None)
            return cp.returncode, "", ""
        try:
            cp = run(cmd, capture=True, timeout=timeout)
        except subprocess.TimeoutExpired:
            return 124, "", "timeout"
        except FileNotFoundError:
            return 127, "", f"{cmd[0]}: command not found"
        return cp.returncode, (cp.stdout or "").strip(), (cp.stderr or "").strip()

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def user_exists(self, username: str) -> bool:
        rc, _, _ = self.run(["id", username], timeout=10)
        return rc == 0

    def home_of(self, username: str) -> Path:
        return Path(pwd.getpwnam(username).pw_dir)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


# -------------------------
# sshd_config model
# -------------------------

_DIRECTIVE_RE = re.compile(r"^(?P<hash>#*)(?P<key>[A-Za-z][A-Za-z0-9]*)(?:[ \t=]|$)")


@dataclasses.dataclass
class ConfigLine:
    raw: str
    key: Optional[str] = None  # lowercased keyword; None for blanks and prose
    commented: bool = False

    @classmethod
    def parse(cls, raw: str) -> "ConfigLine":
        m = _DIRECTIVE_RE.match(raw.lstrip())
        if not m:
            return cls(raw)
        return cls(raw, m.group("key").lower(), bool(m.group("hash")))

    @property
    def active(self) -> bool:
        return self.key is not None and not self.commented


class SshdConfig:
    """sshd_config as a list of lines, editable one directive at a time.

    Only the global section (before the first active ``Match``) is touched.
    ``set`` leaves exactly one active line for the keyword there, so applying
    the same edit twice gives the same document.
    """

    def __init__(self, lines: List[ConfigLine], trailing_newline: bool = True) -> None:
        self.lines = lines
        self.trailing_newline = trailing_newline

    @classmethod
    def parse(cls, text: str) -> "SshdConfig":
        return cls(
            [ConfigLine.parse(raw) for raw in text.splitlines()],
            trailing_newline=text.endswith("\n") or not text,
        )

    @classmethod
    def load(cls, path: Path) -> "SshdConfig":
        # surrogateescape keeps stray non-UTF-8 bytes so save() writes them back unchanged
        return cls.parse(path.read_text(encoding="utf-8", errors="surrogateescape"))

    def render(self) -> str:
        text = "\n".join(line.raw for line in self.lines)
        if self.lines and self.trailing_newline:
            text += "\n"
        return text

    def save(self, path: Path) -> None:
        path.write_text(self.render(), encoding="utf-8", errors="surrogateescape")

    def _global_end(self) -> int:
        for i, line in enumerate(self.lines):
            if line.active and line.key == "match":
                return i
        return len(self.lines)

    def get(self, key: str) -> Optional[str]:
        k = key.lower()
        for line in self.lines[: self._global_end()]:
            if line.active and line.key == k:
                parts = re.split(r"[ \t=]+", line.raw.strip(), maxsplit=1)
                return parts[1].strip() if len(parts) > 1 else ""
        return None

    def set(self, key: str, value: str) -> None:
        k = key.lower()
        end = self._global_end()
        matches = [i for i in range(end) if self.lines[i].key == k]
        new = ConfigLine(f"{key} {value}", k, False)
        if not matches:
            self.lines.insert(end, new)
            return
        first, rest = matches[0], matches[1:]
        self.lines[first] = new
        for i in reversed(rest):
            if self.lines[i].active:
                del self.lines[i]


# -------------------------
# Validation
# -------------------------


@dataclasses.dataclass(frozen=True)
class Params:
    username: str
    public_key: str = ""
    port: Optional[int] = None
    sudo: bool = False

    @property
    def use_key(self) -> bool:
        return bool(self.public_key)


def parse_port(raw: str) -> int:
    if not re.fullmatch(r"[0-9]+", raw):
        raise InvalidPort("SSH port must be a number")
    port = int(raw)
    if port < 1 or port > 65535:
        raise InvalidPort("SSH port must be between 1 and 65535")
    if port in RESTRICTED_PORTS:
        raise RestrictedPort(
            f"Port {port} is commonly used for other services. Please choose a "
            "different port (recommended: 2222, 2200, or a high port like 49152-65535)"
        )
    return port


def is_truthy(token: Optional[str]) -> bool:
    return (token or "").strip().lower() in TRUTHY


def validate(
    host: Host,
    username: Optional[str],
    public_key: Optional[str] = None,
    ssh_port: Optional[str] = None,
    add_to_sudo: Optional[str] = None,
) -> Params:
    if not host.is_root():
        raise PrivilegeError("This script must be run as root or with sudo")
    if not username:
        raise UsageError("Username is required!")
    if not USERNAME_RE.fullmatch(username):
        raise InvalidUsername(
            "Invalid username. Username must start with a lowercase letter or "
            "underscore, and contain only lowercase letters, digits, hyphens, "
            "and underscores."
        )
    if host.user_exists(username):
        raise DuplicateAccount(f"User '{username}' already exists!")

    port = parse_port(ssh_port.strip()) if ssh_port and ssh_port.strip() else None
    key = (public_key or "").strip()
    if key and not looks_like_ssh_pubkey(key):
        warn("Public key does not look like an OpenSSH public key line; installing it as given")
    return Params(username=username, public_key=key, port=port, sudo=is_truthy(add_to_sudo))


# -------------------------
# Provisioning with rollback
# -------------------------


@dataclasses.dataclass(frozen=True)
class Ledger:
    snapshot: Optional[Path] = None
    account_created: bool = False
    sudoers_entry: Optional[str] = None
    sudoers_size: Optional[int] = None  # bytes before the append; None if the file was new

    @property
    def sudoers_modified(self) -> bool:
        return self.sudoers_entry is not None


Step = Callable[[Ledger], Ledger]


def sudoers_line(username: str) -> str:
    return f"{username} ALL=(ALL) NOPASSWD:ALL"


class Provisioner:
    def __init__(self, host: Host, settings: Settings, params: Params) -> None:
        self.host = host
        self.settings = settings
        self.params = params
        self.rolled_back = False

    def steps(self) -> List[Tuple[str, Step]]:
        p = self.params
        out: List[Tuple[str, Step]] = [("create account", self.create_account)]
        if p.sudo:
            out.append(("sudo group", self.grant_sudo_group))
            if p.use_key:
                out.append(("passwordless sudo", self.grant_passwordless_sudo))
        if p.use_key:
            out.append(("ssh key", self.install_key))
        out += [
            ("sshd config", self.edit_daemon_config),
            ("sshd config test", self.validate_daemon_config),
            ("sshd restart", self.restart_daemon),
            ("sshd health", self.verify_health),
        ]
        return out

    def apply(self) -> int:
        try:
            ledger = self.snapshot_config(Ledger())
        except Exception as ex:
            eprint(f"ERROR: could not back up {self.settings.sshd_config}: {ex}")
            return 1

        for label, step in self.steps():
            try:
                ledger = step(ledger)
            except KeyboardInterrupt:
                eprint(f"ERROR: {label}: interrupted")
                self.rollback(ledger)
                return 1
            except SetupError as ex:
                eprint(f"ERROR: {label}: {ex}")
                self.rollback(ex.ledger or ledger)
                return 1
            except Exception as ex:
                eprint(f"ERROR: {label}: {type(ex).__name__}: {ex}")
                self.rollback(ledger)
                return 1

        self.cleanup(ledger)
        self.print_summary()
        return 0

    # -- steps --

    def snapshot_config(self, ledger: Ledger) -> Ledger:
        info("Backing up SSH configuration...")
        live = self.settings.sshd_config
        if not live.is_file():
            raise SnapshotFailed(f"{live} does not exist")
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        backup = live.with_name(f"{live.name}.backup.{stamp}")
        n = 1
        while backup.exists():
            backup = live.with_name(f"{live.name}.backup.{stamp}.{n}")
            n += 1
        shutil.copy2(live, backup)
        ok(f"SSH config backed up to: {backup}")
        return dataclasses.replace(ledger, snapshot=backup)

    def create_account(self, ledger: Ledger) -> Ledger:
        user = self.params.username
        info(f"Creating user: {user}")
        if self.params.use_key:
            cmd = ["adduser", "--disabled-password", "--gecos", "", user]
        else:
            cmd = ["adduser", "--gecos", "", user]
        try:
            rc, out, err = self.host.run(cmd, interactive=not self.params.use_key)
        except KeyboardInterrupt:
            raise StepFailed("interrupted", ledger=self._partial_account(ledger))
        if rc != 0:
            raise StepFailed(
                f"adduser failed (rc={rc}): {err or out}".strip(),
                ledger=self._partial_account(ledger),
            )
        if self.params.use_key:
            ok("User created without password")
        else:
            ok("User created with password")
        return dataclasses.replace(ledger, account_created=True)

    def _partial_account(self, ledger: Ledger) -> Optional[Ledger]:
        if self.host.user_exists(self.params.username):
            return dataclasses.replace(ledger, account_created=True)
        return None

    def grant_sudo_group(self, ledger: Ledger) -> Ledger:
        group = self.settings.sudo_group
        info(f"Adding user to {group} group...")
        rc, out, err = self.host.run(["usermod", "-aG", group, self.params.username])
        if rc != 0:
            raise StepFailed(f"usermod failed (rc={rc}): {err or out}".strip())
        ok(f"User added to {group} group")
        return ledger

    def grant_passwordless_sudo(self, ledger: Ledger) -> Ledger:
        info("Setting up passwordless sudo...")
        entry = sudoers_line(self.params.username)
        path = self.settings.sudoers
        existing = path.read_bytes() if path.exists() else None
        prefix = b"\n" if existing and not existing.endswith(b"\n") else b""
        ledger = dataclasses.replace(
            ledger,
            sudoers_entry=entry,
            sudoers_size=None if existing is None else len(existing),
        )
        try:
            with open(path, "ab") as f:
                f.write(prefix + entry.encode("utf-8") + b"\n")
        except OSError as ex:
            raise StepFailed(f"writing {path}: {ex}", ledger=ledger)
        ok("Passwordless sudo configured")
        return ledger

    def install_key(self, ledger: Ledger) -> Ledger:
        info("Setting up SSH key authentication...")
        user = self.params.username
        try:
            ssh_dir = self.host.home_of(user) / ".ssh"
        except KeyError:
            raise StepFailed(f"no passwd entry for {user}")
        ssh_dir.mkdir(parents=True, exist_ok=True)
        os.chmod(ssh_dir, 0o700)

        keys = ssh_dir / "authorized_keys"
        keys.write_text(self.params.public_key + "\n", encoding="utf-8")
        os.chmod(keys, 0o600)

        rc, out, err = self.host.run(["chown", "-R", f"{user}:{user}", str(ssh_dir)])
        if rc != 0:
            raise StepFailed(f"chown {ssh_dir} failed (rc={rc}): {err or out}".strip())
        ok("SSH key configured")
        return ledger

    def edit_daemon_config(self, ledger: Ledger) -> Ledger:
        info("Configuring SSH daemon...")
        conf = SshdConfig.load(self.settings.sshd_config)
        if self.params.use_key:
            conf.set("PasswordAuthentication", "no")
        conf.set("PermitRootLogin", "no")
        if self.params.port is not None:
            conf.set("Port", str(self.params.port))
        conf.save(self.settings.sshd_config)

        if self.params.use_key:
            ok("Password authentication disabled")
        ok("Root login disabled")
        if self.params.port is not None:
            ok(f"SSH port changed to {self.params.port}")
        return ledger

    def validate_daemon_config(self, ledger: Ledger) -> Ledger:
        info("Testing SSH configuration...")
        rc, out, err = self.host.run(
            [self.settings.sshd_binary, "-t", "-f", str(self.settings.sshd_config)]
        )
        if rc != 0:
            raise InvalidDaemonConfig(
                f"SSH configuration test failed (rc={rc}): {err or out}".strip()
            )
        ok("SSH configuration is valid")
        return ledger

    def restart_daemon(self, ledger: Ledger) -> Ledger:
        info("Restarting SSH service...")
        rc, out, err = self.host.run(["systemctl", "daemon-reload"])
        if rc != 0:
            raise StepFailed(f"systemctl daemon-reload failed (rc={rc}): {err or out}".strip())
        errors = []
        for name in self.settings.services:
            rc, out, err = self.host.run(["systemctl", "restart", name], timeout=60)
            if rc == 0:
                return ledger
            errors.append(f"{name}: rc={rc} {err or out}".strip())
        raise ServiceRestartFailed("could not restart SSH service (" + "; ".join(errors) + ")")

    def service_active(self) -> bool:
        for name in self.settings.services:
            rc, _, _ = self.host.run(["systemctl", "is-active", "--quiet", name], timeout=10)
            if rc == 0:
                return True
        return False

    def verify_health(self, ledger: Ledger) -> Ledger:
        s = self.settings
        self.host.sleep(s.settle_seconds)
        for attempt in range(s.health_attempts):
            if attempt:
                self.host.sleep(s.health_interval)
            if self.service_active():
                ok("SSH service restarted successfully")
                self.host.run(["systemctl", "restart", s.socket_unit], timeout=60)
                return ledger
        raise ServiceRestartFailed("SSH service failed to restart!")

    def cleanup(self, ledger: Ledger) -> None:
        if ledger.snapshot is None:
            return
        try:
            ledger.snapshot.unlink()
        except FileNotFoundError:
            pass
        except OSError as ex:
            warn(f"Could not remove backup {ledger.snapshot}: {ex}")

    # -- rollback --

    def rollback(self, ledger: Ledger) -> None:
        if self.rolled_back:
            return
        self.rolled_back = True
        eprint("ERROR: Rolling back changes...")
        user = self.params.username

        if ledger.account_created:
            info(f"Removing user {user}...")
            try:
                rc, out, err = self.host.run(["userdel", "-r", user])
                if rc != 0:
                    warn(f"userdel {user}: rc={rc} {err or out}".strip())
            except Exception as ex:
                warn(f"userdel {user}: {ex}")

        if ledger.snapshot is not None and ledger.snapshot.is_file():
            info("Restoring SSH config backup...")
            try:
                shutil.copyfile(ledger.snapshot, self.settings.sshd_config)
                ledger.snapshot.unlink()
            except Exception as ex:
                warn(f"restoring {self.settings.sshd_config}: {ex}")
            else:
                self._restart_best_effort()

        if ledger.sudoers_entry is not None:
            info("Removing sudoers entry...")
            try:
                truncate_to(self.settings.sudoers, ledger.sudoers_size)
            except Exception as ex:
                warn(f"sudoers cleanup: {ex}")

        eprint("ERROR: Rollback completed. Exiting.")

    def _restart_best_effort(self) -> None:
        for name in self.settings.services:
            try:
                rc, _, _ = self.host.run(["systemctl", "restart", name], timeout=60)
            except Exception as ex:
                warn(f"systemctl restart {name}: {ex}")
                continue
            if rc == 0:
                return
        warn("SSH service could not be restarted after restoring the backup")

    # -- report --

    def print_summary(self) -> None:
        p = self.params
        print("")
        ok("=========================================")
        ok("         Setup Complete")
        ok("=========================================")
        print("")
        info(f"Username: {p.username}")
        if p.use_key:
            info("Authentication: SSH Key")
            info("Password authentication: Disabled")
        else:
            info("Authentication: Password")
            info("Password authentication: Enabled")
        if p.sudo:
            info("Sudo access: Enabled")
            if p.use_key:
                info("Passwordless sudo: Enabled")
        else:
            info("Sudo access: Not enabled")
        info("Root login: Disabled")
        if p.port is not None:
            print("")
            warn("=========================================")
            warn("     SSH PORT HAS BEEN CHANGED")
            warn("=========================================")
            warn(f"New SSH Port: {p.port}")
            warn("Connect using:")
            warn(f"  ssh -p {p.port} {p.username}@<server-ip>")
            warn("CRITICAL: Test the new SSH connection in a separate terminal")
            warn("  BEFORE closing this session to avoid being locked out!")
            warn("=========================================")
        print("")


def truncate_to(path: Path, size: Optional[int]) -> None:
    """Cut ``path`` back to its first ``size`` bytes, or remove it when ``size`` is None."""
    if size is None:
        path.unlink()
        return
    current = path.stat().st_size
    if current < size:
        raise RuntimeError(f"{path} is shorter than before ({current} < {size} bytes); left as is")
    os.truncate(path, size)


# -------------------------
# Main
# -------------------------

EPILOG = textwrap.dedent("""\
    Examples:
      1. SSH key only:
         sudo setup john "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAA..."
      2. SSH key and sudo:
         sudo setup john "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAA..." "" yes
      3. SSH key, sudo and port 2222:
         sudo setup john "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAA..." 2222 yes
      4. Password only (prompts for the password):
         sudo setup john
      5. Password and sudo:
         sudo setup john "" "" yes
      6. Password, sudo and port 2222:
         sudo setup john "" 2222 yes

    Notes:
      - Must be run as root or with sudo
      - Passwordless sudo is enabled only with both an SSH key and sudo
      - Root login is always disabled; password authentication is disabled
        when an SSH key is given
      - sshd_config is backed up first and every change is rolled back if
        any step fails
    """)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        eprint(f"ERROR: {message}")
        self.print_help(sys.stdout)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    ap = _Parser(
        prog="setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Create an SSH user and harden sshd, rolling back on failure.",
        epilog=EPILOG,
    )
    ap.add_argument("username", nargs="?", default="", help="Username to create (required)")
    ap.add_argument(
        "public_key",
        nargs="?",
        default="",
        help="SSH public key (optional; without it a password is prompted for)",
    )
    ap.add_argument("ssh_port", nargs="?", default="", help="New SSH port (optional)")
    ap.add_argument(
        "add_to_sudo", nargs="?", default="", help="'yes' or 'true' to add the user to sudo"
    )
    ap.add_argument("--config", default=None, help="Optional YAML config with path/service overrides")
    return ap


def main(argv: Optional[List[str]] = None, host: Optional[Host] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    host = host or Host()

    try:
        settings = load_settings(args.config)
    except Exception as ex:
        eprint(f"ERROR: {ex}")
        return 1

    try:
        params = validate(host, args.username, args.public_key, args.ssh_port, args.add_to_sudo)
    except (PrivilegeError, UsageError) as ex:
        eprint(f"ERROR: {ex}")
        ap.print_help(sys.stdout)
        return 1
    except SetupError as ex:
        eprint(f"ERROR: {ex}")
        return 1

    info(f"Starting SSH user setup for: {params.username}")
    if params.port is not None:
        info(f"Will change SSH port to: {params.port}")
    if params.sudo:
        info(f"Will add user to {settings.sudo_group} group")
    if params.use_key:
        info("Using SSH key authentication")
    else:
        info("No public key provided. User will be created with password authentication.")

    return Provisioner(host, settings, params).apply()


if __name__ == "__main__":
    sys.exit(main())
