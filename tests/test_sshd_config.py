from __future__ import annotations

from pathlib import Path

from setup_user import ConfigLine, SshdConfig


def _active(conf: SshdConfig, key: str):
    return [line.raw for line in conf.lines if line.active and line.key == key.lower()]


def test_commented_default_is_replaced_in_place(etc: Path):
    conf = SshdConfig.load(etc / "sshd_config")
    before = [line.raw for line in conf.lines].index("#Port 22")

    conf.set("Port", "2222")

    assert conf.lines[before].raw == "Port 2222"
    assert _active(conf, "Port") == ["Port 2222"]


def test_same_edit_twice_leaves_one_line(etc: Path):
    conf = SshdConfig.load(etc / "sshd_config")
    conf.set("Port", "2222")
    once = conf.render()
    conf.set("Port", "2222")

    assert conf.render() == once
    assert once.count("Port 2222") == 1


def test_duplicate_active_directives_collapse():
    conf = SshdConfig.parse("Port 22\nUsePAM yes\nPort 2200\n")
    conf.set("Port", "2222")
    assert conf.render() == "Port 2222\nUsePAM yes\n"


def test_missing_directive_is_appended():
    conf = SshdConfig.parse("UsePAM yes\n")
    conf.set("PermitRootLogin", "no")
    assert conf.render() == "UsePAM yes\nPermitRootLogin no\n"


def test_match_blocks_are_left_alone():
    text = (
        "UsePAM yes\n"
        "Match User backup\n"
        "    PasswordAuthentication yes\n"
    )
    conf = SshdConfig.parse(text)
    conf.set("PasswordAuthentication", "no")

    assert conf.render() == (
        "UsePAM yes\n"
        "PasswordAuthentication no\n"
        "Match User backup\n"
        "    PasswordAuthentication yes\n"
    )
    assert conf.get("PasswordAuthentication") == "no"


def test_prose_comment_is_not_a_directive():
    line = ConfigLine.parse("# PasswordAuthentication is covered below")
    assert line.key is None

    conf = SshdConfig.parse("# PasswordAuthentication is covered below\n")
    conf.set("PasswordAuthentication", "no")
    assert conf.render().splitlines() == [
        "# PasswordAuthentication is covered below",
        "PasswordAuthentication no",
    ]


def test_keywords_match_case_insensitively():
    conf = SshdConfig.parse("permitrootlogin yes\n")
    conf.set("PermitRootLogin", "no")
    assert conf.render() == "PermitRootLogin no\n"


def test_equals_form_is_recognised():
    conf = SshdConfig.parse("Port=22\n")
    assert conf.get("port") == "22"
    conf.set("Port", "2222")
    assert conf.render() == "Port 2222\n"


def test_untouched_lines_survive_byte_for_byte(etc: Path):
    original = (etc / "sshd_config").read_text(encoding="utf-8")
    conf = SshdConfig.parse(original)
    assert conf.render() == original

    conf.set("PermitRootLogin", "no")
    changed = conf.render().splitlines()
    for a, b in zip(original.splitlines(), changed):
        if a != "#PermitRootLogin prohibit-password":
            assert a == b


def test_missing_trailing_newline_is_kept():
    conf = SshdConfig.parse("UsePAM yes")
    conf.set("Port", "2222")
    assert conf.render() == "UsePAM yes\nPort 2222"


def test_empty_document():
    conf = SshdConfig.parse("")
    conf.set("PermitRootLogin", "no")
    assert conf.render() == "PermitRootLogin no\n"
