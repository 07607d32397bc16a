"""Streaming HTML rewriter.

An event-driven visitor over the stdlib incremental tokenizer
(``html.parser.HTMLParser``). Handlers are registered per selector and
fire as matching start tags go by; no document tree is built. Markup
that no handler touches is re-emitted verbatim, so a document with no
matches comes out unchanged (end tags aside, which are lowercased).

Usage::

    rewriter = HTMLRewriter()
    rewriter.on("head", element=lambda el: el.append('<meta name="x">'))
    rewriter.on("header nav a", element=mark_current)
    rewriter.on('script[type="application/ld+json"]', text=patch_dates)

    html = rewriter.transform(source)              # whole document
    async for chunk in rewriter.stream(chunks):    # or chunk by chunk
        ...

Selectors are deliberately small: ``tag``, ``*``, ``tag[attr]``,
``tag[attr="value"]``, and descendant chains of those separated by
whitespace (``header nav a``).
"""

import re
from collections.abc import AsyncIterable, AsyncIterator, Callable
from dataclasses import dataclass, field
from html import escape
from html.parser import HTMLParser
from typing import Self, TypeAlias

VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)

_FOREIGN_ROOTS = frozenset({"svg", "math"})

# Start tags that implicitly close an open element of another kind.
_IMPLICIT_CLOSE = {"body": frozenset({"head"})}

_SIMPLE_SELECTOR = re.compile(
    r"""^(?P<tag>[a-zA-Z][a-zA-Z0-9-]*|\*)?
        (?:\[\s*(?P<attr>[a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*
           (?:=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\]\s]+))\s*)?
        \])?$""",
    re.VERBOSE,
)

ElementHandler: TypeAlias = Callable[["Element"], None]
TextHandler: TypeAlias = Callable[[str], str | None]


class SelectorError(ValueError):
    """Raised for selectors outside the supported subset."""


@dataclass(frozen=True, slots=True)
class _Simple:
    tag: str | None
    attr: str | None = None
    value: str | None = None

    def matches(self, tag: str, attrs: dict[str, str | None]) -> bool:
        if self.tag is not None and self.tag != tag:
            return False
        if self.attr is None:
            return True
        if self.attr not in attrs:
            return False
        return self.value is None or attrs[self.attr] == self.value


@dataclass(frozen=True, slots=True)
class Selector:
    """A parsed descendant chain of simple selectors."""

    source: str
    parts: tuple[_Simple, ...]

    @classmethod
    def parse(cls, source: str) -> "Selector":
        parts: list[_Simple] = []
        for token in source.split():
            match = _SIMPLE_SELECTOR.match(token)
            if match is None or not token:
                msg = f"unsupported selector {source!r} (at {token!r})"
                raise SelectorError(msg)
            tag = match["tag"]
            value = match["dq"] if match["dq"] is not None else match["sq"]
            if value is None:
                value = match["bare"]
            parts.append(
                _Simple(
                    tag=None if tag in (None, "*") else tag.lower(),
                    attr=match["attr"].lower() if match["attr"] else None,
                    value=value,
                )
            )
        if not parts:
            msg = "empty selector"
            raise SelectorError(msg)
        return cls(source=source, parts=tuple(parts))

    def matches(
        self,
        tag: str,
        attrs: dict[str, str | None],
        ancestors: list[tuple[str, dict[str, str | None]]],
    ) -> bool:
        """Match the element, then its chain against *ancestors* (outermost first)."""
        if not self.parts[-1].matches(tag, attrs):
            return False
        remaining = list(self.parts[:-1])
        for anc_tag, anc_attrs in reversed(ancestors):
            if not remaining:
                break
            if remaining[-1].matches(anc_tag, anc_attrs):
                remaining.pop()
        return not remaining


class Element:
    """A start tag as seen by element handlers.

    Mutations are recorded and applied by the rewriter once every
    handler for this tag has run.
    """

    __slots__ = ("_appended", "_attrs", "_inner", "_modified", "self_closing", "tag")

    def __init__(
        self,
        tag: str,
        attrs: list[tuple[str, str | None]],
        *,
        self_closing: bool = False,
    ) -> None:
        self.tag = tag
        self.self_closing = self_closing
        self._attrs: list[tuple[str, str | None]] = list(attrs)
        self._appended: list[str] = []
        self._inner: str | None = None
        self._modified = False

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attributes!r}>"

    @property
    def attributes(self) -> dict[str, str | None]:
        """Attribute name -> value (``None`` for valueless attributes); first wins."""
        result: dict[str, str | None] = {}
        for name, value in self._attrs:
            result.setdefault(name, value)
        return result

    @property
    def modified(self) -> bool:
        return self._modified

    def get_attribute(self, name: str) -> str | None:
        """Value of *name*; ``""`` for a valueless attribute, ``None`` if absent."""
        name = name.lower()
        for attr_name, value in self._attrs:
            if attr_name == name:
                return "" if value is None else value
        return None

    def has_attribute(self, name: str) -> bool:
        name = name.lower()
        return any(attr_name == name for attr_name, _ in self._attrs)

    def set_attribute(self, name: str, value: str) -> None:
        """Set *name* in place (keeping its position), or append it."""
        name = name.lower()
        self._modified = True
        for index, (attr_name, _) in enumerate(self._attrs):
            if attr_name == name:
                self._attrs[index] = (name, value)
                return
        self._attrs.append((name, value))

    def remove_attribute(self, name: str) -> None:
        name = name.lower()
        kept = [(n, v) for n, v in self._attrs if n != name]
        if len(kept) != len(self._attrs):
            self._attrs = kept
            self._modified = True

    def append(self, html: str) -> None:
        """Insert raw *html* just before this element's end tag."""
        self._appended.append(html)

    def set_inner_content(self, html: str) -> None:
        """Replace everything between the start and end tag with raw *html*."""
        self._inner = html

    def render_start_tag(self) -> str:
        parts = [f"<{self.tag}"]
        for name, value in self._attrs:
            if value is None:
                parts.append(f" {name}")
            else:
                parts.append(f' {name}="{escape(value, quote=True)}"')
        parts.append(" />" if self.self_closing else ">")
        return "".join(parts)


@dataclass(slots=True)
class _Open:
    """Per-element state while the element is open."""

    tag: str
    attrs: dict[str, str | None]
    element: Element | None = None
    text_handlers: list[TextHandler] = field(default_factory=list)
    capturing: bool = False
    discarding: bool = False


class HTMLRewriter:
    """A reusable set of selector handlers.

    The rewriter itself holds no per-document state: each ``transform``
    or ``stream`` call runs its own session, so one instance can serve
    any number of concurrent documents.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: list[tuple[Selector, ElementHandler | None, TextHandler | None]] = []

    def on(
        self,
        selector: str,
        *,
        element: ElementHandler | None = None,
        text: TextHandler | None = None,
    ) -> Self:
        """Register handlers for elements matching *selector*.

        *element* runs on the start tag and may mutate it. *text* receives
        the element's whole inner source once its end tag is reached and
        returns a replacement (or ``None`` to keep it).
        """
        if element is None and text is None:
            msg = "on() needs an element or text handler"
            raise TypeError(msg)
        self._handlers.append((Selector.parse(selector), element, text))
        return self

    def session(self) -> "RewriteSession":
        """Start rewriting one document."""
        return RewriteSession(self._handlers)

    def transform(self, html: str) -> str:
        """Rewrite a complete document in one go."""
        session = self.session()
        return session.feed(html) + session.close()

    async def stream(self, chunks: AsyncIterable[str]) -> AsyncIterator[str]:
        """Rewrite a document as it arrives, yielding output as it is ready."""
        session = self.session()
        async for chunk in chunks:
            out = session.feed(chunk)
            if out:
                yield out
        tail = session.close()
        if tail:
            yield tail


class RewriteSession(HTMLParser):
    """One document's pass through an ``HTMLRewriter``."""

    def __init__(
        self,
        handlers: list[tuple[Selector, ElementHandler | None, TextHandler | None]],
    ) -> None:
        super().__init__(convert_charrefs=False)
        self._handlers = handlers
        self._stack: list[_Open] = []
        # Output sinks: the document, plus one buffer per capturing element.
        self._sinks: list[list[str]] = [[]]
        self._discard_depth = 0
        self._closed = False
        self._verbatim = False

    # -- Public API --

    def feed(self, data: str) -> str:  # type: ignore[override]
        """Consume *data*; return whatever output is complete so far."""
        super().feed(data)
        return self._drain()

    def close(self) -> str:
        """Finish the document; open elements are closed implicitly."""
        if not self._closed:
            self._closed = True
            super().close()
            while self._stack:
                self._close_top(emit_end_tag=False)
        return self._drain()

    # -- Output --

    def _drain(self) -> str:
        out = "".join(self._sinks[0])
        self._sinks[0].clear()
        return out

    def _write(self, text: str) -> None:
        if self._discard_depth == 0 and text:
            self._sinks[-1].append(text)

    # -- Tokenizer events --

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._start(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._start(tag, attrs, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        for depth in range(len(self._stack) - 1, -1, -1):
            if self._stack[depth].tag == tag:
                while len(self._stack) > depth + 1:
                    self._close_top(emit_end_tag=False)
                self._close_top(emit_end_tag=True)
                return
        # Stray end tag: nothing to close, keep it as-is.
        self._write(f"</{tag}>")

    def handle_data(self, data: str) -> None:
        self._write(data)

    # References, comments and declarations are copied from the source as
    # written. The tokenizer reports each one, then advances past it with
    # updatepos(), which sees its exact span.

    def handle_entityref(self, name: str) -> None:
        self._verbatim = True

    def handle_charref(self, name: str) -> None:
        self._verbatim = True

    def handle_comment(self, data: str) -> None:
        self._verbatim = True

    def handle_decl(self, decl: str) -> None:
        self._verbatim = True

    def handle_pi(self, data: str) -> None:
        self._verbatim = True

    def unknown_decl(self, data: str) -> None:
        self._verbatim = True

    def updatepos(self, i: int, j: int) -> int:
        if self._verbatim:
            self._verbatim = False
            self._write(self.rawdata[i:j])
        return super().updatepos(i, j)

    # -- Element lifecycle --

    def _start(self, tag: str, attrs: list[tuple[str, str | None]], *, self_closing: bool) -> None:
        raw = self.get_starttag_text() or ""

        closes = _IMPLICIT_CLOSE.get(tag)
        if closes:
            while self._stack and self._stack[-1].tag in closes:
                self._close_top(emit_end_tag=False)

        # "/>" only closes void elements and foreign (SVG, MathML) content;
        # on anything else it is an ordinary start tag.
        is_void = tag in VOID_ELEMENTS or (self_closing and self._in_foreign_content(tag))

        if self._discard_depth:
            # Inside replaced content: no handlers, nothing emitted.
            if not is_void:
                self._stack.append(_Open(tag=tag, attrs={}))
            return

        attr_map: dict[str, str | None] = {}
        for name, value in attrs:
            attr_map.setdefault(name, value)
        ancestors = [(o.tag, o.attrs) for o in self._stack]

        element: Element | None = None
        text_handlers: list[TextHandler] = []
        for selector, on_element, on_text in self._handlers:
            if not selector.matches(tag, attr_map, ancestors):
                continue
            if on_element is not None:
                if element is None:
                    element = Element(tag, attrs, self_closing=self_closing and is_void)
                on_element(element)
            if on_text is not None and not is_void:
                text_handlers.append(on_text)

        self._write(element.render_start_tag() if element and element.modified else raw)

        if is_void:
            return

        entry = _Open(tag=tag, attrs=attr_map, element=element, text_handlers=text_handlers)
        self._stack.append(entry)
        if text_handlers:
            entry.capturing = True
            self._sinks.append([])
        if element is not None and element._inner is not None:
            self._write(element._inner)
            entry.discarding = True
            self._discard_depth += 1

    def _in_foreign_content(self, tag: str) -> bool:
        return tag in _FOREIGN_ROOTS or any(o.tag in _FOREIGN_ROOTS for o in self._stack)

    def _close_top(self, *, emit_end_tag: bool) -> None:
        entry = self._stack.pop()
        if entry.discarding:
            self._discard_depth -= 1
        if self._discard_depth:
            return
        if entry.capturing:
            inner = "".join(self._sinks.pop())
            for handler in entry.text_handlers:
                replacement = handler(inner)
                if replacement is not None:
                    inner = replacement
            self._write(inner)
        if entry.element is not None:
            for html in entry.element._appended:
                self._write(html)
        if emit_end_tag:
            self._write(f"</{entry.tag}>")
