"""JavaScript string-literal escaping and its inverse."""

from __future__ import annotations

_SIMPLE_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}

_SIMPLE_UNESCAPES: dict[str, str] = {
    "\\": "\\",
    "'": "'",
    '"': '"',
    "/": "/",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _escape_char(ch: str) -> str:
    simple = _SIMPLE_ESCAPES.get(ch)
    if simple is not None:
        return simple
    code = ord(ch)
    if code < 0x20 or code == 0x7F:
        return f"\\x{code:02x}"
    # Line terminators in JS source, even inside a literal on older engines.
    if ch in ("\u2028", "\u2029"):
        return f"\\u{code:04x}"
    return ch


def escape_js_string(text: str) -> str:
    """Escape ``text`` for embedding between quotes in a JS string literal."""
    return "".join(_escape_char(ch) for ch in text)


def _read_hex(text: str, start: int, length: int) -> int:
    digits = text[start:start + length]
    if len(digits) != length or not set(digits) <= _HEX_DIGITS:
        raise ValueError(f"invalid hex escape at offset {start - 2}: {digits!r}")
    return int(digits, 16)


def unescape_js_string(text: str) -> str:
    """Inverse of :func:`escape_js_string`, plus the other common JS escapes.

    Raises ValueError on an unknown or truncated escape sequence.
    """
    if "\\" not in text:
        return text

    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= n:
            raise ValueError("trailing backslash")
        esc = text[i + 1]
        simple = _SIMPLE_UNESCAPES.get(esc)
        if simple is not None:
            out.append(simple)
            i += 2
        elif esc == "0" and not (i + 2 < n and text[i + 2].isdigit()):
            out.append("\0")
            i += 2
        elif esc == "x":
            out.append(chr(_read_hex(text, i + 2, 2)))
            i += 4
        elif esc == "u" and i + 2 < n and text[i + 2] == "{":
            end = text.find("}", i + 3)
            if end == -1:
                raise ValueError(f"unterminated \\u{{...}} escape at offset {i}")
            code = _read_hex(text, i + 3, end - (i + 3)) if end > i + 3 else -1
            if not 0 <= code <= 0x10FFFF:
                raise ValueError(f"invalid code point escape at offset {i}")
            out.append(chr(code))
            i = end + 1
        elif esc == "u":
            code = _read_hex(text, i + 2, 4)
            i += 6
            # Combine a surrogate pair written as two \\u escapes.
            if 0xD800 <= code <= 0xDBFF and text.startswith("\\u", i):
                try:
                    low = _read_hex(text, i + 2, 4)
                except ValueError:
                    low = -1
                if 0xDC00 <= low <= 0xDFFF:
                    code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                    i += 6
            out.append(chr(code))
        else:
            raise ValueError(f"unknown escape sequence \\{esc} at offset {i}")
    return "".join(out)
