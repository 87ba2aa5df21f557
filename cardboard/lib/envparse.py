"""
Safe .env parser for board configuration.

Reads KEY=value lines without any shell evaluation. Values containing shell
metacharacters are rejected outright rather than interpreted.
"""

import re
from pathlib import Path

FORBIDDEN_PATTERNS = [
    re.compile(r'`'),        # backticks
    re.compile(r'\$\('),     # command substitution
    re.compile(r'\$\{'),     # variable expansion
    re.compile(r';'),
    re.compile(r'&&'),
    re.compile(r'\|'),
]

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_env(text: str, source: str = "<string>") -> dict[str, str]:
    """
    Parse env-file text into a dict.

    Raises:
        ValueError: on a line without '=', a bad key, or a forbidden pattern
    """
    result = {}
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('export '):
            line = line[len('export '):].lstrip()

        key, sep, value = line.partition('=')
        if not sep:
            raise ValueError(f"{source}:{lineno}: expected KEY=value")
        key = key.strip()
        if not KEY_PATTERN.match(key):
            raise ValueError(f"{source}:{lineno}: invalid key '{key}'")

        value = _unquote(value.strip())
        if any(p.search(value) for p in FORBIDDEN_PATTERNS):
            raise ValueError(f"{source}:{lineno}: forbidden pattern in value for {key}")
        result[key] = value
    return result


def load_env(filepath: Path) -> dict[str, str]:
    """
    Parse an env file. A missing file yields an empty dict.

    Raises:
        ValueError: if the file content is invalid
    """
    path = Path(filepath)
    if not path.exists():
        return {}
    return parse_env(path.read_text(encoding="utf-8"), source=str(path))
