"""Structural repair: rebalance closing tags after a substring replacement.

Replacing ``<div onClick={f}>`` with ``<button onClick={f}>`` leaves the
matching ``</div>`` behind. This pass walks the whole file once, tracks open
tags on a stack and renames any closing tag that does not match the tag on
top of the stack. It only rewrites closing-tag names; it never inserts or
removes elements and is not a markup parser.
"""

import re
from dataclasses import dataclass
from typing import List


OPEN_TAG_RE = re.compile(r"<([a-zA-Z][a-zA-Z0-9]*)(?:\s[^>]*)?\s*(?<!/)\s*>")
CLOSE_TAG_RE = re.compile(r"</([a-zA-Z][a-zA-Z0-9]*)\s*>")
SELF_CLOSING_RE = re.compile(r"<([a-zA-Z][a-zA-Z0-9]*)(?:\s[^>]*)?\s*/>")

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})


@dataclass
class TagToken:
    """One opening or closing tag found in the text."""
    kind: str   # open, close
    name: str
    start: int
    length: int


@dataclass
class TagRewrite:
    start: int
    length: int
    text: str


def tokenize_tags(content: str) -> List[TagToken]:
    """
    Find opening and closing tags, sorted by position.

    Self-closing tags and void elements are left out of the opening stream
    since they never take a closing tag.
    """
    self_closing = {m.start() for m in SELF_CLOSING_RE.finditer(content)}

    tokens = []
    for m in OPEN_TAG_RE.finditer(content):
        name = m.group(1)
        if name.lower() in VOID_ELEMENTS or m.start() in self_closing:
            continue
        tokens.append(TagToken("open", name, m.start(), len(m.group(0))))

    for m in CLOSE_TAG_RE.finditer(content):
        tokens.append(TagToken("close", m.group(1), m.start(), len(m.group(0))))

    # The two scans are independent, so restore document order
    tokens.sort(key=lambda t: t.start)
    return tokens


def find_orphaned_closing_tags(content: str) -> List[TagRewrite]:
    """Closing tags whose name disagrees with the innermost open tag."""
    stack: List[str] = []
    rewrites: List[TagRewrite] = []

    for token in tokenize_tags(content):
        if token.kind == "open":
            stack.append(token.name)
            continue

        if not stack:
            # Unmatched close that predates the edit; leave it alone
            continue

        top = stack.pop()
        if top != token.name:
            rewrites.append(TagRewrite(token.start, token.length, f"</{top}>"))

    return rewrites


def repair_closing_tags(content: str) -> str:
    """
    Rename orphaned closing tags in a full file text.

    Args:
        content: Full file text after a substring replacement

    Returns:
        Repaired text, or the input itself when nothing needed rewriting
    """
    rewrites = find_orphaned_closing_tags(content)
    if not rewrites:
        return content

    result = content
    # Rightmost first so earlier offsets stay valid
    for rewrite in reversed(rewrites):
        end = rewrite.start + rewrite.length
        result = result[:rewrite.start] + rewrite.text + result[end:]

    return result
