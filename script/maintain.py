#!/usr/bin/env python3
"""
inkrex-scripts - maintain

Routine cleanup for a single Debian/Ubuntu host:
- apt update / upgrade / autoclean / autoremove
- docker system + volume prune (if docker is installed)
- old kernel removal (keeps the newest two plus the running one)
- journal vacuum
- disabled snap revisions (if snap is installed)
- failed systemd units and reboot-required report

Every step is best-effort: a failure is reported and the next step runs.

Exit codes:
  0 = maintenance ran (may include warnings), or usage shown
  1 = not root / bad config
"""

from __future__ import annotations

import argparse
import dataclasses
import os
import re
import shutil
import subprocess
import sys
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

# -------------------------
# Utilities
# -------------------------


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def run(
    cmd: List[str], *, capture: bool = True, timeout: Optional[int] = 60
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


# -------------------------
# Reporting
# -------------------------


@dataclasses.dataclass
class Finding:
    step: str
    severity: str  # "INFO" | "OK" | "WARN"
    details: str


class Reporter:
    def __init__(self) -> None:
        self.items: List[Finding] = []
        self.done: List[str] = []

    def info(self, step: str, details: str) -> None:
        self._add(step, "INFO", details)

    def ok(self, step: str, details: str) -> None:
        self._add(step, "OK", details)

    def warn(self, step: str, details: str) -> None:
        self._add(step, "WARN", details)

    def completed(self, task: str) -> None:
        self.done.append(task)

    def _add(self, step: str, severity: str, details: str) -> None:
        self.items.append(Finding(step, severity, details))
        prefix = {"INFO": "[..] ", "OK": "[OK] ", "WARN": "[!!] "}.get(severity, "[?] ")
        print(f"{prefix}{step}: {details}")

    def warnings(self) -> int:
        return sum(1 for x in self.items if x.severity == "WARN")

    def print_summary(self) -> None:
        print("\n== Maintenance Complete ==")
        if self.done:
            print("Completed tasks:")
            for task in self.done:
                print(f"  - {task}")
        print(f"\nSummary: WARN={self.warnings()}")


# -------------------------
# Settings / host
# -------------------------


@dataclasses.dataclass
class Settings:
    min_free_gb: float = 1.0
    kernels_keep: int = 2
    journal_retention: str = "7d"
    reboot_flag: Path = Path("/var/run/reboot-required")


def load_settings(path: Optional[str]) -> Settings:
    cfg = load_yaml(path) if path else {}
    d = Settings()
    return Settings(
        min_free_gb=float(cfg_get(cfg, "maintain.min_free_gb", d.min_free_gb)),
        kernels_keep=max(0, int(cfg_get(cfg, "maintain.kernels_keep", d.kernels_keep))),
        journal_retention=str(cfg_get(cfg, "maintain.journal_retention", d.journal_retention)),
        reboot_flag=Path(cfg_get(cfg, "maintain.reboot_flag", str(d.reboot_flag))),
    )


class Host:
    def run(
        self, cmd: List[str], *, stream: bool = False, timeout: Optional[int] = 120
    ) -> Tuple[int, str, str]:
        try:
            cp = run(cmd, capture=not stream, timeout=timeout)
        except subprocess.TimeoutExpired:
            return 124, "", "timeout"
        except FileNotFoundError:
            return 127, "", f"{cmd[0]}: command not found"
        return cp.returncode, (cp.stdout or "").strip(), (cp.stderr or "").strip()

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def which(self, name: str) -> bool:
        return shutil.which(name) is not None

    def free_bytes(self, path: str = "/") -> int:
        return shutil.disk_usage(path).free

    def running_kernel(self) -> str:
        return os.uname().release


# -------------------------
# Output parsing
# -------------------------


def version_key(s: str) -> List[Tuple[int, Any]]:
    # natural order, like sort -V: digit runs compare numerically
    return [(0, int(t)) if t.isdigit() else (1, t) for t in re.findall(r"\d+|\D+", s)]


def parse_installed_kernels(dpkg_list: str) -> List[str]:
    out = []
    for line in dpkg_list.splitlines():
        parts = line.split()
        if len(parts) < 2 or parts[0] != "ii":
            continue
        if re.match(r"^linux-image-[0-9]", parts[1]):
            out.append(parts[1].split(":", 1)[0])
    return sorted(set(out), key=version_key)


def plan_kernel_cleanup(
    installed: Sequence[str], running: str, keep: int = 2
) -> Tuple[List[str], List[str]]:
    """Split installed kernel packages into (kept, removable).

    The newest ``keep`` packages and the one for the running release are kept.
    """
    newest_first = sorted(installed, key=version_key, reverse=True)
    kept: List[str] = []
    remove: List[str] = []
    for i, pkg in enumerate(newest_first):
        version = pkg[len("linux-image-"):]
        if i < keep or (running and version == running):
            kept.append(pkg)
        else:
            remove.append(pkg)
    return kept, remove


def parse_disabled_snaps(snap_list: str) -> List[Tuple[str, str]]:
    out = []
    # Name Version Rev Tracking Publisher Notes; Notes is comma-separated
    for line in snap_list.splitlines()[1:]:
        parts = line.split()
        if len(parts) >= 4 and "disabled" in parts[-1].split(","):
            out.append((parts[0], parts[2]))
    return out


def parse_failed_units(text: str) -> List[str]:
    units = []
    for line in text.splitlines():
        parts = line.replace("●", " ").replace("*", " ").split()
        if parts:
            units.append(parts[0])
    return units


# -------------------------
# Steps
# -------------------------


class Maintenance:
    def __init__(self, host: Host, settings: Settings, rep: Reporter) -> None:
        self.host = host
        self.settings = settings
        self.rep = rep

    def _cmd(self, step: str, cmd: List[str], *, stream: bool = False, timeout: Optional[int] = 120) -> bool:
        rc, out, err = self.host.run(cmd, stream=stream, timeout=timeout)
        if rc != 0:
            self.rep.warn(step, f"{' '.join(cmd)} failed: rc={rc} {err or out}".strip())
            return False
        return True

    def check_disk_space(self) -> None:
        free_gb = self.host.free_bytes("/") / 1024 ** 3
        if free_gb < self.settings.min_free_gb:
            self.rep.warn("disk", f"Low disk space detected: {free_gb:.1f}GB available; proceeding with caution")
        else:
            self.rep.ok("disk", f"{free_gb:.1f}GB available")

    def maintain_apt(self) -> None:
        steps = [
            (["apt", "update"], "Package lists updated", "APT package lists updated"),
            (["apt", "upgrade", "-y"], "Packages upgraded", "Packages upgraded"),
            (["apt", "autoclean"], "Package cache cleaned", "APT cache cleaned"),
            (["apt", "autoremove", "-y"], "Unused packages removed", "Unused packages removed"),
        ]
        for cmd, msg, task in steps:
            self.rep.info("apt", " ".join(cmd))
            if self._cmd("apt", cmd, stream=True, timeout=3600):
                self.rep.ok("apt", msg)
                self.rep.completed(task)

    def cleanup_docker(self) -> None:
        if not self.host.which("docker"):
            self.rep.info("docker", "Docker not installed, skipping Docker cleanup")
            return
        self.rep.info("docker", "Pruning images, containers and networks (may take a while)")
        system = self._cmd("docker", ["docker", "system", "prune", "-af"], stream=True, timeout=3600)
        self.rep.info("docker", "Pruning volumes")
        volumes = self._cmd("docker", ["docker", "volume", "prune", "-f"], stream=True, timeout=3600)
        if system and volumes:
            self.rep.ok("docker", "Docker cleaned")
            self.rep.completed("Docker cleaned")

    def cleanup_kernels(self) -> None:
        rc, out, err = self.host.run(["dpkg", "-l"], timeout=60)
        if rc != 0:
            self.rep.warn("kernels", f"dpkg -l failed: rc={rc} {err}".strip())
            return
        installed = parse_installed_kernels(out)
        kept, remove = plan_kernel_cleanup(
            installed, self.host.running_kernel(), self.settings.kernels_keep
        )
        for pkg in kept:
            self.rep.info("kernels", f"Keeping {pkg}")
        if not remove:
            self.rep.info("kernels", "No old kernels to remove")
            return
        removed = 0
        for pkg in remove:
            if self._cmd("kernels", ["apt-get", "purge", "-y", pkg], timeout=900):
                removed += 1
        if removed:
            self.rep.ok("kernels", f"Removed {removed} old kernel package(s)")
            self.rep.completed("Old kernels removed")

    def cleanup_logs(self) -> None:
        keep = self.settings.journal_retention
        if self._cmd("journal", ["journalctl", f"--vacuum-time={keep}"], timeout=300):
            self.rep.ok("journal", f"Journal logs older than {keep} removed")
            self.rep.completed("Logs cleaned")

    def cleanup_snap(self) -> None:
        if not self.host.which("snap"):
            self.rep.info("snap", "Snap not installed, skipping snap cleanup")
            return
        rc, out, err = self.host.run(["snap", "list", "--all"], timeout=60)
        if rc != 0:
            self.rep.warn("snap", f"snap list failed: rc={rc} {err}".strip())
            return
        removed = 0
        for name, rev in parse_disabled_snaps(out):
            if self._cmd("snap", ["snap", "remove", name, f"--revision={rev}"], timeout=600):
                removed += 1
        if removed:
            self.rep.ok("snap", f"Old snap revisions cleaned ({removed} removed)")
            self.rep.completed("Snap cleaned")
        else:
            self.rep.info("snap", "No old snap revisions to clean")

    def check_failed_services(self) -> None:
        rc, out, err = self.host.run(["systemctl", "--failed", "--no-legend"], timeout=30)
        units = parse_failed_units(out) if rc == 0 else []
        if rc != 0:
            self.rep.warn("services", f"systemctl --failed: rc={rc} {err}".strip())
        elif units:
            for unit in units:
                self.rep.warn("services", f"failed: {unit}")
        else:
            self.rep.ok("services", "No failed services detected")
        self.rep.completed("Failed services checked")

    def check_reboot_required(self) -> None:
        flag = self.settings.reboot_flag
        if not flag.exists():
            self.rep.ok("reboot", "No reboot required")
            return
        self.rep.warn("reboot", "REBOOT REQUIRED: system updates require a reboot; please reboot when convenient")
        pkgs = flag.with_name(flag.name + ".pkgs")
        if pkgs.exists():
            for pkg in pkgs.read_text(encoding="utf-8", errors="replace").split():
                self.rep.warn("reboot", f"needed by {pkg}")

    def run_all(self) -> None:
        for step in (
            self.check_disk_space,
            self.maintain_apt,
            self.cleanup_docker,
            self.cleanup_kernels,
            self.cleanup_logs,
            self.cleanup_snap,
            self.check_failed_services,
            self.check_reboot_required,
        ):
            name = step.__name__
            try:
                step()
            except Exception as ex:
                self.rep.warn(name, f"skipped: {ex}")


# -------------------------
# Main
# -------------------------


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="maintain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent("""\
        Routine host maintenance:
          - APT package updates and upgrades
          - Docker cleanup (if installed)
          - Old kernel removal
          - Journal log cleanup
          - Snap revision cleanup (if installed)
          - Failed service check
          - Reboot requirement check
        """),
        epilog=textwrap.dedent("""\
        Examples:
          sudo maintain --exec
          sudo maintain --exec --config /etc/inkrex.yml

        Nothing is changed unless --exec is given.
        """),
    )
    ap.add_argument("--exec", dest="execute", action="store_true", help="Actually perform maintenance")
    ap.add_argument("--config", default=None, help="Optional YAML config")
    return ap


def main(argv: Optional[List[str]] = None, host: Optional[Host] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if not args.execute:
        ap.print_help(sys.stdout)
        return 0

    host = host or Host()
    if not host.is_root():
        eprint("ERROR: This script must be run as root or with sudo")
        ap.print_help(sys.stdout)
        return 1

    try:
        settings = load_settings(args.config)
    except Exception as ex:
        eprint(f"ERROR: {ex}")
        return 1

    rep = Reporter()
    print("[..] Starting maintenance...")
    Maintenance(host, settings, rep).run_all()
    rep.print_summary()
    return 0


if __name__ == "__main__":
    sys.exit(main())
