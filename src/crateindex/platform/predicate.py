"""Platform predicates --- parsing and rendering of cargo ``target`` conditions.

A dependency may be declared under ``[target.'cfg(unix)'.dependencies]`` or
under a bare target triple such as ``[target.x86_64-pc-windows-msvc]``.
Both forms are parsed into a small predicate tree:

- ``CfgFlag``   -- a bare configuration flag, e.g. ``unix``
- ``CfgValue``  -- a key/value option, e.g. ``target_os = "linux"``
- ``CfgAll`` / ``CfgAny`` / ``CfgNot`` -- boolean combinators

A target triple becomes ``CfgValue("target", triple)``. Rendering via
``str()`` yields the body that goes inside ``cfg(...)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NewType

from crateindex.exceptions import PlatformParseError

# A rendered configuration guard, always of the form ``cfg(<predicate>)``.
PlatformExpr = NewType("PlatformExpr", str)

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<punct>[(),=])|(?P<string>\"(?:[^\"\\]|\\.)*\")|(?P<ident>[A-Za-z_][A-Za-z0-9_]*))"
)
_TRIPLE_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.\-]*$")


class PlatformPredicate:
    """Base class of all predicate nodes."""

    @staticmethod
    def parse(text: str) -> PlatformPredicate:
        """Parse a cargo platform condition.

        Args:
            text: Either ``cfg(<predicate>)`` or a target triple.

        Returns:
            The parsed predicate tree.

        Raises:
            PlatformParseError: If *text* is neither form.
        """
        stripped = text.strip()
        if stripped.startswith("cfg(") or stripped.startswith("cfg "):
            return _Parser(text).parse_cfg()
        if _TRIPLE_RE.match(stripped):
            return CfgValue("target", stripped)
        raise PlatformParseError(text, "expected cfg(...) or a target triple")

    def to_expr(self) -> PlatformExpr:
        """Render as a ``cfg(...)`` guard expression."""
        return PlatformExpr(f"cfg({self})")


@dataclass(frozen=True)
class CfgFlag(PlatformPredicate):
    key: str

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class CfgValue(PlatformPredicate):
    key: str
    value: str

    def __str__(self) -> str:
        return f'{self.key} = "{self.value}"'


@dataclass(frozen=True)
class CfgAll(PlatformPredicate):
    preds: tuple[PlatformPredicate, ...]

    def __str__(self) -> str:
        return "all(" + ", ".join(str(p) for p in self.preds) + ")"


@dataclass(frozen=True)
class CfgAny(PlatformPredicate):
    preds: tuple[PlatformPredicate, ...]

    def __str__(self) -> str:
        return "any(" + ", ".join(str(p) for p in self.preds) + ")"


@dataclass(frozen=True)
class CfgNot(PlatformPredicate):
    pred: PlatformPredicate

    def __str__(self) -> str:
        return f"not({self.pred})"


# ---------------------------------------------------------------------------
# Recursive-descent parser for the cfg() grammar
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = self._tokenize(text)
        self._pos = 0

    def _tokenize(self, text: str) -> list[tuple[str, str]]:
        tokens: list[tuple[str, str]] = []
        pos = 0
        while pos < len(text):
            if text[pos:].strip() == "":
                break
            m = _TOKEN_RE.match(text, pos)
            if not m:
                raise PlatformParseError(
                    text, f"unexpected character {text[pos:].lstrip()[:1]!r}"
                )
            kind = m.lastgroup or ""
            tokens.append((kind, m.group(kind)))
            pos = m.end()
        return tokens

    def _peek(self) -> tuple[str, str] | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> tuple[str, str]:
        tok = self._peek()
        if tok is None:
            raise PlatformParseError(self._text, "unexpected end of input")
        self._pos += 1
        return tok

    def _expect(self, value: str) -> None:
        _, got = self._next()
        if got != value:
            raise PlatformParseError(self._text, f"expected {value!r}, found {got!r}")

    def parse_cfg(self) -> PlatformPredicate:
        kind, word = self._next()
        if kind != "ident" or word != "cfg":
            raise PlatformParseError(self._text, "expected 'cfg'")
        self._expect("(")
        pred = self._predicate()
        self._expect(")")
        if self._peek() is not None:
            raise PlatformParseError(self._text, "trailing input after cfg(...)")
        return pred

    def _predicate(self) -> PlatformPredicate:
        kind, word = self._next()
        if kind != "ident":
            raise PlatformParseError(self._text, f"expected identifier, found {word!r}")

        nxt = self._peek()
        if word in ("all", "any") and nxt == ("punct", "("):
            self._pos += 1
            preds = self._predicate_list()
            return CfgAll(preds) if word == "all" else CfgAny(preds)
        if word == "not" and nxt == ("punct", "("):
            self._pos += 1
            pred = self._predicate()
            self._expect(")")
            return CfgNot(pred)
        if nxt == ("punct", "="):
            self._pos += 1
            kind, value = self._next()
            if kind != "string":
                raise PlatformParseError(self._text, f"expected string after '{word} ='")
            return CfgValue(word, value[1:-1])
        return CfgFlag(word)

    def _predicate_list(self) -> tuple[PlatformPredicate, ...]:
        preds: list[PlatformPredicate] = []
        while True:
            if self._peek() == ("punct", ")"):
                self._pos += 1
                return tuple(preds)
            preds.append(self._predicate())
            _, sep = self._next()
            if sep == ")":
                return tuple(preds)
            if sep != ",":
                raise PlatformParseError(self._text, f"expected ',' or ')', found {sep!r}")
