"""
Markup Module - Tokenize inline style tags and resolve them into styled spans

Supported tags (case-sensitive, nestable):
    <c:#RRGGBB>...</c>   text color
    <s:NN>...</s>        font size

Anything else between angle brackets is kept as literal text.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional


COLOR_PREFIX = "c:"
SIZE_PREFIX = "s:"
CLOSE_TAGS = {"/c": COLOR_PREFIX, "/s": SIZE_PREFIX}


class TokenKind(str, Enum):
    TEXT = "text"
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class MarkupToken:
    """One lexed piece of a marked-up line"""
    kind: TokenKind
    value: str  # literal text, or the trimmed tag body for OPEN/CLOSE


@dataclass(frozen=True)
class StyleFrame:
    """Active styling at a lexing position"""
    color: str
    font_size: float


@dataclass(frozen=True)
class StyledSpan:
    """A run of text drawn with a single color and font size"""
    text: str
    color: str
    font_size: float


def is_open_tag(tag: str) -> bool:
    return tag.startswith(COLOR_PREFIX) or tag.startswith(SIZE_PREFIX)


def is_close_tag(tag: str) -> bool:
    return tag in CLOSE_TAGS


def closing_tag_for(open_tag: str) -> str:
    """Synthetic closer for an open tag body, e.g. 'c:#fff' -> '</c>'"""
    if open_tag.startswith(COLOR_PREFIX):
        return "</c>"
    if open_tag.startswith(SIZE_PREFIX):
        return "</s>"
    return ""


def parse_font_size(value: str) -> Optional[float]:
    """
    Parse the numeric part of a size tag

    Returns:
        The size, or None when it is not a finite positive number
    """
    try:
        size = float(value)
    except ValueError:
        return None
    if not math.isfinite(size) or size <= 0:
        return None
    return size


def tokenize(line: str) -> List[MarkupToken]:
    """
    Split a line into literal text, open tags and close tags

    Adjacent literal characters are merged into one TEXT token. An unknown
    bracketed token stays literal (brackets included), and a '<' with no
    closing '>' is a literal '<'.
    """
    tokens: List[MarkupToken] = []
    buf = ""
    i = 0

    while i < len(line):
        if line[i] == "<":
            close_idx = line.find(">", i)
            if close_idx != -1:
                tag = line[i + 1:close_idx].strip()
                if is_open_tag(tag) or is_close_tag(tag):
                    if buf:
                        tokens.append(MarkupToken(TokenKind.TEXT, buf))
                        buf = ""
                    kind = TokenKind.OPEN if is_open_tag(tag) else TokenKind.CLOSE
                    tokens.append(MarkupToken(kind, tag))
                else:
                    buf += line[i:close_idx + 1]
                i = close_idx + 1
                continue
        buf += line[i]
        i += 1

    if buf:
        tokens.append(MarkupToken(TokenKind.TEXT, buf))

    return tokens


def resolve_inline(line: str, base: StyleFrame) -> List[StyledSpan]:
    """
    Resolve one display line into flat styled spans

    Open tags push a copy of the top frame with one field replaced. Close
    tags pop the top frame regardless of its kind; the base frame is
    restored if the stack runs empty. Malformed markup never raises.

    Args:
        line: Marked-up text of a single line
        base: Style of the line outside any tag

    Returns:
        Spans in drawing order (empty text is never emitted)
    """
    spans: List[StyledSpan] = []
    stack: List[StyleFrame] = [base]

    for token in tokenize(line):
        top = stack[-1]

        if token.kind is TokenKind.TEXT:
            # tokenize() already merged adjacent text
            spans.append(StyledSpan(token.value, top.color, top.font_size))

        elif token.kind is TokenKind.OPEN:
            value = token.value[2:]
            if token.value.startswith(COLOR_PREFIX):
                stack.append(replace(top, color=value or top.color))
            else:
                size = parse_font_size(value)
                stack.append(replace(top, font_size=size) if size is not None else top)

        else:
            stack.pop()
            if not stack:
                stack.append(base)

    return spans
