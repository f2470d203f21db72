from __future__ import annotations
import re
import chardet  # type: ignore
from pathlib import Path
from typing import Iterator, Optional

BINARY_BYTES = bytes(range(0, 32)) + b"\x7f"
JAVA_SERIAL_MAGIC = b"\xac\xed"

# First '#' or ';' not directly preceded by a quote starts a comment.
COMMENT_RE = re.compile(r"(?<![\"'])[#;]")
QUOTES = ("\"", "'")
LITERAL_NEWLINE = "\\n"


def is_likely_binary(
    data: bytes, control_threshold: float = 0.30, high_bit_threshold: float = 0.60
) -> bool:
    if not data:
        return False
    total = len(data)
    if 0 in data:
        return True
    if data.startswith(JAVA_SERIAL_MAGIC):
        return True
    control = sum(1 for b in data if b in BINARY_BYTES and b not in (9, 10, 13))
    if (control / total) > control_threshold:
        return True
    high = sum(1 for b in data if b >= 0x80)
    if (high / total) > high_bit_threshold:
        # mostly non-ASCII content is only accepted as UTF-8
        try:
            data.decode("utf-8", errors="strict")
        except UnicodeDecodeError:
            return True
    return False


def decode_text(data: bytes) -> Optional[str]:
    if is_likely_binary(data):
        return None
    enc = chardet.detect(data).get("encoding")
    candidates = []
    if enc:
        candidates.append(enc)
    candidates.append("utf-8")
    for candidate in candidates:
        try:
            return data.decode(candidate, errors="strict")
        except (LookupError, UnicodeDecodeError):
            continue
    return None


def read_text_safely(path: Path, max_bytes: int = 20_000_000) -> Optional[str]:
    try:
        with path.open("rb") as f:
            head = f.read(min(4096, max_bytes))
            if is_likely_binary(head):
                return None
            rest = f.read(max_bytes - len(head))
            data = head + rest
    except OSError:
        return None
    return decode_text(data)


def iter_lines(text: str) -> Iterator[str]:
    yield from text.splitlines()


def strip_comment(line: str) -> str:
    m = COMMENT_RE.search(line)
    if m:
        line = line[: m.start()]
    return line.rstrip()


def preprocess(text: str) -> str:
    """Drop trailing comments and blank lines, then trim the whole text.

    The comment check only looks at the character before ``#``/``;``, so a
    ``#`` inside an unquoted value (``pass=ab#cd``) is treated as a comment.
    """

    lines = (strip_comment(line) for line in iter_lines(text))
    return "\n".join(line for line in lines if line.strip()).strip()


def _normalize_once(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] in QUOTES and value[-1] == value[0]:
        value = value[1:-1]
    return value.replace(LITERAL_NEWLINE, "").strip()


def normalize_value(value: str) -> str:
    """Trim, unquote one matching layer and drop literal ``\\n`` markers.

    Repeated until stable so the result is always a fixed point.
    """

    prev = None
    while value != prev:
        prev = value
        value = _normalize_once(value)
    return value
