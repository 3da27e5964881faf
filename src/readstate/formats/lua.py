# ABOUTME: Reader and writer for the Lua table literals KOReader uses in sidecar files.
# ABOUTME: Handles the subset of Lua that KOReader's dump() produces, plus hand-edited variants.

import math
import re
from typing import Any


class LuaDecodeError(Exception):
    """Raised when text cannot be parsed as a Lua table literal."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at offset {position}")
        self.position = position


class LuaEncodeError(Exception):
    """Raised when a value has no Lua literal representation."""


_WHITESPACE_RE = re.compile(r"\s+")
_COMMENT_RE = re.compile(r"--(?!\[=*\[)[^\n]*")
_LONG_COMMENT_RE = re.compile(r"--\[(=*)\[.*?\]\1\]", re.DOTALL)
_LONG_STRING_RE = re.compile(r"\[(=*)\[\n?(.*?)\]\1\]", re.DOTALL)
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
)

_KEYWORDS = {"true": True, "false": False, "nil": None}

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "\n": "\n",
}


class _Parser:
    """Recursive descent parser over a single Lua expression."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, message: str) -> LuaDecodeError:
        return LuaDecodeError(message, self.pos)

    def skip(self) -> None:
        """Skip whitespace and comments."""
        while self.pos < len(self.text):
            for pattern in (_WHITESPACE_RE, _LONG_COMMENT_RE, _COMMENT_RE):
                match = pattern.match(self.text, self.pos)
                if match and match.end() > self.pos:
                    self.pos = match.end()
                    break
            else:
                return

    def peek(self) -> str:
        self.skip()
        return self.text[self.pos : self.pos + 1]

    def expect(self, literal: str) -> None:
        self.skip()
        if not self.text.startswith(literal, self.pos):
            raise self.error(f"Expected {literal!r}")
        self.pos += len(literal)

    def parse_chunk(self) -> Any:
        """Parse an optional `return` followed by one expression, then end of input."""
        self.skip()
        match = _NAME_RE.match(self.text, self.pos)
        if match and match.group() == "return":
            self.pos = match.end()
        value = self.parse_value()
        self.skip()
        if self.pos < len(self.text) and self.text[self.pos] == ";":
            self.pos += 1
            self.skip()
        if self.pos != len(self.text):
            raise self.error("Unexpected trailing content")
        return value

    def parse_value(self) -> Any:
        char = self.peek()
        if not char:
            raise self.error("Unexpected end of input")
        if char == "{":
            return self.parse_table()
        if char in "\"'":
            return self.parse_quoted()
        if char == "[":
            return self.parse_long_string()
        if char == "-":
            self.pos += 1
            value = self.parse_value()
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise self.error("Unary minus applied to a non-number")
            return -value
        if char.isdigit() or char == ".":
            return self.parse_number()
        match = _NAME_RE.match(self.text, self.pos)
        if match and match.group() in _KEYWORDS:
            self.pos = match.end()
            return _KEYWORDS[match.group()]
        if match and match.group() == "math":
            return self.parse_math_constant()
        raise self.error(f"Unexpected character {char!r}")

    def parse_math_constant(self) -> float:
        if self.text.startswith("math.huge", self.pos):
            self.pos += len("math.huge")
            return math.inf
        raise self.error("Unsupported expression")

    def parse_number(self) -> int | float:
        match = _NUMBER_RE.match(self.text, self.pos)
        if not match:
            raise self.error("Malformed number")
        self.pos = match.end()
        literal = match.group()
        if literal[:2].lower() == "0x":
            return int(literal, 16)
        if any(c in literal for c in ".eE"):
            return float(literal)
        return int(literal)

    def parse_quoted(self) -> str:
        """Parse a quoted string; escapes produce bytes, decoded as UTF-8 at the end."""
        quote = self.text[self.pos]
        start = self.pos
        self.pos += 1
        data = bytearray()
        while True:
            if self.pos >= len(self.text):
                raise self.error("Unterminated string")
            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                break
            if char == "\n":
                raise self.error("Unescaped newline in string")
            if char == "\\":
                data += self.parse_escape()
                continue
            data += char.encode("utf-8")
            self.pos += 1
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LuaDecodeError("String is not valid UTF-8", start) from exc

    def parse_escape(self) -> bytes:
        self.pos += 1
        char = self.text[self.pos : self.pos + 1]
        if char in _ESCAPES:
            self.pos += 1
            return _ESCAPES[char].encode("utf-8")
        if char.isdigit():
            digits = re.match(r"\d{1,3}", self.text[self.pos :]).group()
            if int(digits) > 255:
                raise self.error("Decimal escape too large")
            self.pos += len(digits)
            return bytes([int(digits)])
        if char == "x":
            hex_digits = self.text[self.pos + 1 : self.pos + 3]
            if len(hex_digits) != 2 or not all(c in "0123456789abcdefABCDEF" for c in hex_digits):
                raise self.error("Malformed \\x escape")
            self.pos += 3
            return bytes([int(hex_digits, 16)])
        if char == "z":
            self.pos += 1
            match = _WHITESPACE_RE.match(self.text, self.pos)
            if match:
                self.pos = match.end()
            return b""
        raise self.error(f"Invalid escape sequence \\{char}")

    def parse_long_string(self) -> str:
        match = _LONG_STRING_RE.match(self.text, self.pos)
        if not match:
            raise self.error("Malformed long string")
        self.pos = match.end()
        return match.group(2)

    def parse_table(self) -> dict[Any, Any] | list[Any]:
        self.expect("{")
        entries: dict[Any, Any] = {}
        next_index = 1
        while self.peek() != "}":
            if not self.peek():
                raise self.error("Unterminated table")
            key, value = self.parse_field()
            if key is None:
                key = next_index
                next_index += 1
            if value is not None:
                entries[key] = value
            if self.peek() in (",", ";"):
                self.pos += 1
            elif self.peek() != "}":
                raise self.error("Expected ',' or '}'")
        self.pos += 1
        return _as_list_if_sequence(entries)

    def parse_field(self) -> tuple[Any, Any]:
        """Parse one table field, returning (None, value) for positional entries."""
        if self.peek() == "[" and not _LONG_STRING_RE.match(self.text, self.pos):
            self.pos += 1
            key = self.parse_value()
            if key is None:
                raise self.error("Table key is nil")
            self.expect("]")
            self.expect("=")
            return key, self.parse_value()
        match = _NAME_RE.match(self.text, self.pos)
        if match and match.group() not in _KEYWORDS:
            after = match.end()
            rest = _WHITESPACE_RE.match(self.text, after)
            if rest:
                after = rest.end()
            if self.text.startswith("=", after) and not self.text.startswith("==", after):
                self.pos = after + 1
                return match.group(), self.parse_value()
        return None, self.parse_value()


def _as_list_if_sequence(entries: dict[Any, Any]) -> dict[Any, Any] | list[Any]:
    """Return a list when the keys are exactly 1..n, otherwise the dict."""
    if not entries:
        return entries
    keys = list(entries)
    if all(isinstance(k, int) and not isinstance(k, bool) for k in keys) and sorted(
        keys
    ) == list(range(1, len(keys) + 1)):
        return [entries[i] for i in range(1, len(keys) + 1)]
    return entries


def loads(text: str) -> Any:
    """Parse a Lua chunk of the form ``[-- comment] return <expression>``.

    Args:
        text: Lua source as written by KOReader.

    Returns:
        The decoded value. Tables keyed exactly 1..n become lists, all other
        tables become dicts.

    Raises:
        LuaDecodeError: If the text is not a supported Lua literal.
    """
    return _Parser(text).parse_chunk()


def _quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\0", "\\000")
    )
    return f'"{escaped}"'


def _dump_key(key: Any) -> str:
    if isinstance(key, str):
        return f"[{_quote(key)}]"
    if isinstance(key, (int, float)) and not isinstance(key, bool):
        return f"[{_dump_scalar(key)}]"
    raise LuaEncodeError(f"Unsupported table key: {key!r}")


def _dump_scalar(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            raise LuaEncodeError("NaN has no Lua literal")
        if math.isinf(value):
            return "math.huge" if value > 0 else "-math.huge"
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    raise LuaEncodeError(f"Unsupported value type: {type(value).__name__}")


def _sort_key(key: Any) -> tuple[int, Any]:
    # Numbers before strings, each group in natural order.
    if isinstance(key, str):
        return (1, key)
    return (0, key)


def _dump_value(value: Any, depth: int) -> str:
    if isinstance(value, list):
        value = {index: item for index, item in enumerate(value, start=1)}
    if not isinstance(value, dict):
        return _dump_scalar(value)
    if not value:
        return "{}"
    indent = "    " * (depth + 1)
    lines = ["{"]
    for key in sorted(value, key=_sort_key):
        lines.append(f"{indent}{_dump_key(key)} = {_dump_value(value[key], depth + 1)},")
    lines.append("    " * depth + "}")
    return "\n".join(lines)


def dumps(value: Any, header: str | None = None) -> str:
    """Serialize a value as a Lua chunk in KOReader's sidecar layout.

    Args:
        value: Nested dicts, lists, strings, numbers, booleans and None.
        header: Optional text written as a leading ``--`` comment line.

    Returns:
        Lua source ending with a newline.

    Raises:
        LuaEncodeError: If the value contains something Lua cannot represent.
    """
    prefix = f"-- {header}\n" if header is not None else ""
    return f"{prefix}return {_dump_value(value, 0)}\n"
