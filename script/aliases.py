#!/usr/bin/env python3
"""
inkrex-scripts - aliases

Small docker conveniences:
  aliases compose [args...]          docker compose [args...]
  aliases enter <container> [shell]  shell into a container, /bin/sh fallback
  aliases shell-init                 print alias definitions for ~/.bashrc
"""

from __future__ import annotations

import argparse
import shutil
import subprocess
import sys
from typing import Any, List, Optional

DEFAULT_SHELL = "/bin/bash"
FALLBACK_SHELL = "/bin/sh"
# docker exec: 126 = shell not executable, 127 = shell not found
SHELL_MISSING = (126, 127)

SHELL_INIT = """\
alias docker-compose='docker compose'
alias docker-enter='aliases enter'
"""


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def run(cmd: List[str]) -> int:
    try:
        return subprocess.run(cmd).returncode
    except FileNotFoundError:
        eprint(f"{cmd[0]}: command not found")
        return 127


def docker_missing() -> bool:
    if shutil.which("docker") is None:
        eprint("docker: command not found")
        return True
    return False


def compose(args: List[str]) -> int:
    return run(["docker", "compose", *args])


def docker_enter(container: str, shell: Optional[str] = None) -> int:
    # 127 from docker itself must not look like a missing shell
    if docker_missing():
        return 127
    shell = shell or DEFAULT_SHELL
    rc = run(["docker", "exec", "-it", container, shell])
    if rc in SHELL_MISSING and shell != FALLBACK_SHELL:
        eprint(f"{shell} not available in {container}, falling back to {FALLBACK_SHELL}")
        rc = run(["docker", "exec", "-it", container, FALLBACK_SHELL])
    return rc


def enter_main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Usage: docker-enter <container> [shell]")
        return 1
    return docker_enter(args[0], args[1] if len(args) > 1 else None)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="aliases", description="Docker shell conveniences.")
    sub = ap.add_subparsers(dest="command")

    p_compose = sub.add_parser("compose", help="docker compose passthrough")
    p_compose.add_argument("args", nargs=argparse.REMAINDER)

    p_enter = sub.add_parser("enter", help="open a shell in a running container")
    p_enter.add_argument("container", nargs="?")
    p_enter.add_argument("shell", nargs="?", default=None)

    sub.add_parser("shell-init", help="print alias definitions for a shell rc file")

    args = ap.parse_args(argv)
    if args.command == "compose":
        return compose(args.args)
    if args.command == "enter":
        if not args.container:
            print("Usage: docker-enter <container> [shell]")
            return 1
        return docker_enter(args.container, args.shell)
    if args.command == "shell-init":
        sys.stdout.write(SHELL_INIT)
        return 0
    ap.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
