"""Loading of resolver candidate files.

Format: one address per line. Blank lines and `#` comments are ignored.
"""

from __future__ import annotations

from pathlib import Path

from core.domain.errors import ResolverFileError


def parse_resolver_lines(text: str) -> list[str]:
    candidates: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        candidates.append(line)
    return candidates


def load_resolver_candidates(path: Path) -> list[str]:
    """Read `path` and return the candidates in file order."""

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ResolverFileError(path, str(exc)) from exc
    return parse_resolver_lines(raw)
