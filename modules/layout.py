"""
Layout Module - Wrap marked-up text into display lines under a character budget
"""

from typing import List

from modules.markup import CLOSE_TAGS, TokenKind, closing_tag_for, is_close_tag, is_open_tag, tokenize


def wrap_lines(content: str, chars_per_line: int) -> List[str]:
    """
    Wrap text into display lines, keeping every line valid markup

    Only visible characters count toward the budget; style tags are
    zero-width. Style tags still open at a break are closed at the end of
    the line and re-opened at the head of the next one. Unknown bracketed
    tokens are never split.

    Args:
        content: Raw text with inline markup
        chars_per_line: Maximum visible characters per line

    Returns:
        Display lines in order (empty input gives no lines)
    """
    lines: List[str] = []
    open_stack: List[str] = []
    buf = ""
    visible = 0

    def close_open_tags() -> str:
        return "".join(closing_tag_for(tag) for tag in reversed(open_stack))

    def flush_line(force: bool = False) -> None:
        nonlocal buf, visible
        if not buf and not force:
            return
        lines.append(buf + close_open_tags())
        buf = "".join(f"<{tag}>" for tag in open_stack)
        visible = 0

    i = 0
    while i < len(content):
        ch = content[i]

        if ch == "\n":
            flush_line(force=True)
            i += 1
            continue

        if ch == "<":
            close_idx = content.find(">", i)
            if close_idx != -1:
                tag = content[i + 1:close_idx].strip()

                if is_open_tag(tag):
                    buf += f"<{tag}>"
                    open_stack.append(tag)

                elif is_close_tag(tag):
                    buf += f"<{tag}>"
                    prefix = CLOSE_TAGS[tag]
                    for k in range(len(open_stack) - 1, -1, -1):
                        if open_stack[k].startswith(prefix):
                            del open_stack[k]
                            break

                else:
                    token = content[i:close_idx + 1]
                    if visible + len(token) > chars_per_line:
                        flush_line()
                    buf += token
                    visible += len(token)

                i = close_idx + 1
                continue

        if visible + 1 > chars_per_line:
            flush_line()
        buf += ch
        visible += 1
        i += 1

    if buf or open_stack:
        lines.append(buf + close_open_tags())

    return lines


def visible_text(line: str) -> str:
    """Strip recognized style tags, keeping everything that would be drawn"""
    return "".join(t.value for t in tokenize(line) if t.kind is TokenKind.TEXT)


def wrap_plain(content: str, chars_per_line: int) -> List[str]:
    """
    Wrap text without interpreting markup; every character is visible

    Line breaks follow wrap_lines: a newline ends the current line and a
    trailing empty segment produces no line.
    """
    budget = max(1, chars_per_line)
    lines: List[str] = []
    segments = content.split("\n")

    for index, segment in enumerate(segments):
        if not segment:
            if index < len(segments) - 1:
                lines.append("")
            continue
        lines.extend(segment[i:i + budget] for i in range(0, len(segment), budget))

    return lines
