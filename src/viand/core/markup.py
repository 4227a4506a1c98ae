"""
Depth-aware splitting and markup declaration parsing.

Markup lines pack a tag, classes, a ref, attributes, an event binding and
optional inline content into one line::

    button.primary#save(disabled: $busy, title: "Save: now") -> submit(): "Save"

Naive splitting on ``:`` or ``,`` breaks on nested calls and quoted text.
Every helper here only considers separators at the top level: outside
``()``, ``[]`` and ``{}`` and outside quoted strings.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from .ir.view import HANDLER_SENTINEL, TextMode

_QUOTES = ('"', "'", "`")
_OPENERS = "([{"
_CLOSERS = ")]}"

# Attribute keys whose own first colon belongs to the key (``bind:value``).
PREFIXED_KEYS = frozenset({"bind", "class", "style"})

_SLOT = re.compile(r"^slot\b\s*(\w+)?")
_EVENT_CALL = re.compile(r"^([A-Za-z0-9_.]+)\s*\((.*)\)$")
_HANDLER_NAME = re.compile(r"^[A-Za-z_$][\w.$]*$")
_SIGIL_REF = re.compile(r"\$[A-Za-z_]\w*")


def _top_level_indices(text: str) -> Iterator[int]:
    """Yield indices of characters at bracket depth zero, outside quotes."""
    depth = 0
    quote: str | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            # An unbalanced closer must not hide every later separator.
            depth = max(0, depth - 1)
        elif depth == 0:
            yield i
        i += 1


def find_top_level(text: str, needle: str, *, last: bool = False) -> int:
    """
    Find a top-level occurrence of ``needle``.

    Args:
        text: Text to search
        needle: Separator, may be longer than one character
        last: Return the last occurrence instead of the first

    Returns:
        Index of the occurrence, or -1
    """
    found = -1
    for i in _top_level_indices(text):
        if text.startswith(needle, i):
            if not last:
                return i
            found = i
    return found


def find_split_colon(text: str) -> int:
    """
    Index of the colon separating a declaration from its content, or -1.

    >>> find_split_colon('div(onclick: "a:b(c:d)"): "literal: text"')
    24
    """
    return find_top_level(text, ":")


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """
    Split on top-level occurrences of ``sep``.

    Parts are returned untrimmed; an empty input yields ``[""]``.
    """
    parts: list[str] = []
    start = 0
    for i in _top_level_indices(text):
        if i >= start and text.startswith(sep, i):
            parts.append(text[start:i])
            start = i + len(sep)
    parts.append(text[start:])
    return parts


def split_inline(text: str) -> tuple[str, str | None]:
    """
    Split a markup line into its declaration and inline content.

    Returns:
        Tuple of (declaration, inline content or None)
    """
    idx = find_split_colon(text)
    if idx == -1:
        return text.strip().removesuffix(":").strip(), None
    inline = text[idx + 1 :].strip()
    return text[:idx].strip(), inline or None


def unquote(text: str) -> str:
    """Remove one pair of matching surrounding quotes, if present."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        return text[1:-1]
    return text


def _is_single_string(text: str) -> bool:
    quote = text[0]
    i = 1
    while i < len(text) - 1:
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return False
        i += 1
    return True


def classify_text(raw: str, *, prose: bool = False) -> tuple[str, TextMode]:
    """
    Decide how a text fragment should be carried in the IR.

    A single quoted string loses its quotes and is LITERAL, or INTERPOLATED
    when it references ``$name``. Unquoted inline content is an EXPRESSION;
    unquoted free-form prose lines (``prose=True``) are LITERAL or
    INTERPOLATED like quoted text.

    Returns:
        Tuple of (content, mode)
    """
    text = raw.strip()
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0] and _is_single_string(text):
        inner = text[1:-1]
        return inner, TextMode.INTERPOLATED if _SIGIL_REF.search(inner) else TextMode.LITERAL
    if prose:
        return text, TextMode.INTERPOLATED if _SIGIL_REF.search(text) else TextMode.LITERAL
    return text, TextMode.EXPRESSION


def parse_attributes(raw: str) -> dict[str, str]:
    """
    Parse the text between an element's parentheses.

    ``bind:``, ``class:`` and ``style:`` keys keep their first segment as
    part of the key. A bare name becomes a boolean attribute set to
    ``true``.
    """
    attributes: dict[str, str] = {}
    for pair in split_top_level(raw, ","):
        pair = pair.strip()
        if not pair:
            continue
        colon = find_split_colon(pair)
        if colon == -1:
            attributes[pair] = "true"
            continue
        key = pair[:colon].strip()
        value = pair[colon + 1 :].strip()
        if key in PREFIXED_KEYS:
            next_colon = find_split_colon(value)
            if next_colon != -1:
                key = f"{key}:{value[:next_colon].strip()}"
                value = value[next_colon + 1 :].strip()
        attributes[key] = value
    return attributes


def parse_event_binding(side: str) -> tuple[str, str]:
    """
    Parse the text after ``->`` into an attribute key and handler reference.

    ``click()`` and a bare ``save`` bind ``onclick``; ``input(setName)``
    binds ``oninput``; ``keydown.enter(submit)`` binds ``onkeydown|enter``.
    """
    side = side.strip()
    match = _EVENT_CALL.match(side)
    if match:
        name, args = match.group(1), match.group(2).strip()
        if not args:
            return "onclick", f"{HANDLER_SENTINEL}{name}()"
        return f"on{name.replace('.', '|')}", f"{HANDLER_SENTINEL}{args}"
    if _HANDLER_NAME.match(side):
        return "onclick", f"{HANDLER_SENTINEL}{side}()"
    return "onclick", f"{HANDLER_SENTINEL}{side}"


@dataclass
class Markup:
    """
    A parsed markup line.

    Attributes:
        tag: Element tag (``div`` when only classes or a ref were given)
        attributes: Attributes in source order, classes and handler last
        ref: ``#ref`` name, if any
        inline: Inline content after the split colon, if any
        opens_block: The line ends with ``:`` and has no inline content
        slot: Slot name when the line declares a slot
    """

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    ref: str | None = None
    inline: str | None = None
    opens_block: bool = False
    slot: str | None = None


def parse_markup(text: str) -> Markup:
    """
    Parse one markup line.

    Args:
        text: Trimmed line text

    Returns:
        The parsed declaration; never raises
    """
    text = text.strip()
    declaration, inline = split_inline(text)
    opens_block = inline is None and text.endswith(":")

    slot = _SLOT.match(declaration)
    if slot:
        return Markup(tag="slot", slot=slot.group(1) or "children", inline=inline)

    tag_side = declaration
    event_side = ""
    arrow = find_top_level(declaration, "->", last=True)
    if arrow != -1:
        tag_side = declaration[:arrow].strip()
        event_side = declaration[arrow + 2 :].strip()

    attributes: dict[str, str] = {}
    tag = tag_side
    open_paren = tag_side.find("(")
    close_paren = tag_side.rfind(")")
    if open_paren != -1 and close_paren > open_paren:
        tag = tag_side[:open_paren].strip()
        attributes = parse_attributes(tag_side[open_paren + 1 : close_paren])

    ref: str | None = None
    parts: list[str] = []
    for part in tag.split("."):
        if "#" in part:
            part, ref_name = part.split("#", 1)
            ref = ref_name.strip() or ref
        parts.append(part.strip())

    name = parts[0] or "div"
    classes = " ".join(p for p in parts[1:] if p)
    if classes:
        attributes["class"] = classes

    if event_side:
        key, handler = parse_event_binding(event_side)
        attributes[key] = handler

    return Markup(
        tag=name,
        attributes=attributes,
        ref=ref,
        inline=inline,
        opens_block=opens_block,
    )
