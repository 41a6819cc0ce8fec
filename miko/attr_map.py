"""Parsing of attribute argument lists such as ``"/path", method = "get", sse``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

__all__ = ["StrAttrMap"]

_LEXER_RE = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<str>"(?:[^"\\]|\\.)*")
    | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<num>\d[\w.]*)
    | (?P<path>::)
    | (?P<punct>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPE = re.compile(r"\\(?:x([0-7][0-9a-fA-F])|u\{([0-9a-fA-F_]{1,8})\}|\n\s*|(.))", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_OPEN = "([{"
_CLOSE = ")]}"


def _unescape(body: str) -> str:
    def replace(match: re.Match) -> str:
        hex_byte, unicode, simple = match.groups()
        if hex_byte is not None:
            return chr(int(hex_byte, 16))
        if unicode is not None:
            return chr(int(unicode.replace("_", ""), 16))
        if simple is None:
            return ""
        if simple not in _SIMPLE_ESCAPES:
            raise ValueError(f"unknown escape sequence: \\{simple}")
        return _SIMPLE_ESCAPES[simple]

    return _ESCAPE.sub(replace, body)


def _quote(value: str) -> str:
    out = []
    for char in value:
        if char in ('"', "\\"):
            out.append("\\" + char)
        elif char == "\n":
            out.append("\\n")
        elif char == "\r":
            out.append("\\r")
        elif char == "\t":
            out.append("\\t")
        elif char == "\0":
            out.append("\\0")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\u{{{ord(char):x}}}")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens = []
    for match in _LEXER_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        if kind == "ws":
            continue
        if kind == "str":
            tokens.append(("str", _unescape(value[1:-1])))
        elif kind == "punct" and value == '"':
            raise ValueError("unterminated string literal")
        else:
            tokens.append((kind, value))
    return tokens


def _skip_group(tokens: list[tuple[str, str]], pos: int) -> int:
    depth = 0
    while pos < len(tokens):
        kind, value = tokens[pos]
        if kind == "punct" and value in _OPEN:
            depth += 1
        elif kind == "punct" and value in _CLOSE:
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    raise ValueError("unbalanced delimiters in attribute")


@dataclass
class StrAttrMap:
    """String-valued attribute arguments, with an optional bare string default."""

    map: dict[str, str] = field(default_factory=dict)
    default: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "StrAttrMap":
        """Parse an attribute argument list; raise ``ValueError`` when malformed."""
        tokens = _tokenize(text)
        result = cls()
        pos = 0
        while pos < len(tokens):
            kind, value = tokens[pos]
            if kind == "str":
                result.default = value
                pos += 1
            else:
                pos = result._parse_meta(tokens, pos)
            if pos < len(tokens) and tokens[pos] == ("punct", ","):
                pos += 1
        return result

    def _parse_meta(self, tokens: list[tuple[str, str]], pos: int) -> int:
        segments = []
        if tokens[pos] == ("path", "::"):
            segments.append("")
            pos += 1
        while True:
            if pos >= len(tokens) or tokens[pos][0] != "ident":
                raise ValueError("expected an identifier in attribute")
            segments.append(tokens[pos][1])
            pos += 1
            if pos < len(tokens) and tokens[pos] == ("path", "::"):
                pos += 1
                continue
            break
        ident = segments[0] if len(segments) == 1 else None
        following = tokens[pos] if pos < len(tokens) else None

        if following is not None and following[0] == "punct" and following[1] in _OPEN:
            return _skip_group(tokens, pos)
        if ident is None:
            raise ValueError(f"expected a single identifier, got {'::'.join(segments)!r}")
        if following == ("punct", "="):
            pos += 1
            start = pos
            depth = 0
            while pos < len(tokens):
                kind, value = tokens[pos]
                if kind == "punct" and value in _OPEN:
                    depth += 1
                elif kind == "punct" and value in _CLOSE:
                    depth -= 1
                elif depth == 0 and (kind, value) == ("punct", ","):
                    break
                pos += 1
            value_tokens = tokens[start:pos]
            if not value_tokens:
                raise ValueError(f"missing value for {ident!r}")
            if len(value_tokens) == 1 and value_tokens[0][0] == "str":
                self.map[ident] = value_tokens[0][1]
            return pos
        self.map[ident] = ident
        return pos

    def get(self, key: str) -> Optional[str]:
        return self.map.get(key)

    def get_or_default(self, key: str) -> Optional[str]:
        """The value under ``key``, else the bare string default."""
        value = self.map.get(key)
        return value if value is not None else self.default

    def to_source(self) -> str:
        """Render back to attribute argument syntax."""
        parts = []
        if self.default is not None:
            parts.append(_quote(self.default))
        for key, value in self.map.items():
            if not _IDENT.match(key):
                raise ValueError(f"not a valid identifier: {key!r}")
            parts.append(f"{key} = {_quote(value)}")
        return ", ".join(parts)