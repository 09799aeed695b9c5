"""
KEY=VALUE env file handling - parse, merge-write, and template diffing.

The format is deliberately simple: one assignment per line, `#` starts a
comment line, everything after the first `=` is the value. Rewrites touch
only the lines of keys being written; comments, blank lines, and unrelated
keys stay byte-for-byte as they were.
"""

import logging
from pathlib import Path

log = logging.getLogger("devsetup.env")


def _split_assignment(line: str) -> tuple[str, str] | None:
    """Return (key, value) for an assignment line, None for anything else."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    key, sep, value = stripped.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key, value.strip()


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse key=value pairs from an env file.

    Returns an empty dict when the file does not exist. Later assignments
    of the same key win.
    """
    if not path.exists():
        return {}

    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        parsed = _split_assignment(line)
        if parsed:
            key, value = parsed
            values[key] = value
    return values


def _line_ending(lines: list[str]) -> str:
    """Ending of the last terminated line, "\\n" for a new or one-line file."""
    for line in reversed(lines):
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith("\n"):
            return "\n"
    return "\n"


def write_merged(
    path: Path,
    updates: dict[str, str],
    overwrite_existing: bool = True,
) -> bool:
    """Merge updates into an env file in place.

    A key that already has a line gets that line replaced, unless
    overwrite_existing is False and the current value is non-empty. When a
    key is assigned more than once, the last assignment is the one
    rewritten, matching parse_env_file. A key with no line is appended
    using the file's line ending. The file is only written when its
    content actually changes. Returns True if it was written.
    """
    content = ""
    if path.exists():
        # newline="" keeps CRLF files CRLF
        with open(path, encoding="utf-8", newline="") as f:
            content = f.read()
    lines = content.splitlines(keepends=True)
    eol = _line_ending(lines)

    # Last line index per key
    positions: dict[str, int] = {}
    for idx, line in enumerate(lines):
        parsed = _split_assignment(line)
        if parsed:
            positions[parsed[0]] = idx

    appended: list[str] = []
    for key, value in updates.items():
        assignment = f"{key}={value}"
        if key in positions:
            idx = positions[key]
            current = _split_assignment(lines[idx])
            if not overwrite_existing and current and current[1]:
                continue
            body = lines[idx].rstrip("\r\n")
            lines[idx] = assignment + lines[idx][len(body):]
        else:
            appended.append(assignment)

    new_content = "".join(lines)
    if appended:
        if new_content and not new_content.endswith("\n"):
            new_content += eol + eol.join(appended)
        else:
            new_content += eol.join(appended) + eol

    if new_content == content:
        log.debug("No changes for %s", path)
        return False

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(new_content)
    log.debug("Wrote %d key(s) to %s", len(updates), path)
    return True


def missing_keys(template_path: Path, target_path: Path) -> list[str]:
    """Template keys that are absent or empty in the target, in template order.

    A target that does not exist is missing every template key.
    """
    template = parse_env_file(template_path)
    target = parse_env_file(target_path)
    return [key for key in template if not target.get(key)]
