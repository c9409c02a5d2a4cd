import pytest

from modules.markup import (
    MarkupToken,
    StyleFrame,
    StyledSpan,
    TokenKind,
    closing_tag_for,
    parse_font_size,
    resolve_inline,
    tokenize,
)


BASE = StyleFrame(color="#000000", font_size=30)


def test_tokenize_plain_text_is_one_token():
    assert tokenize("hello world") == [MarkupToken(TokenKind.TEXT, "hello world")]


def test_tokenize_open_text_close():
    assert tokenize("<c:#ff0000>hi</c>") == [
        MarkupToken(TokenKind.OPEN, "c:#ff0000"),
        MarkupToken(TokenKind.TEXT, "hi"),
        MarkupToken(TokenKind.CLOSE, "/c"),
    ]


def test_tokenize_trims_tag_body():
    tokens = tokenize("< s:40 >x< /s >")
    assert tokens[0] == MarkupToken(TokenKind.OPEN, "s:40")
    assert tokens[-1] == MarkupToken(TokenKind.CLOSE, "/s")


def test_unknown_tags_stay_literal():
    assert tokenize("a<b>bold</b>") == [MarkupToken(TokenKind.TEXT, "a<b>bold</b>")]


def test_unterminated_bracket_is_literal():
    assert tokenize("1 < 2") == [MarkupToken(TokenKind.TEXT, "1 < 2")]


def test_closing_tag_for():
    assert closing_tag_for("c:#fff") == "</c>"
    assert closing_tag_for("s:12") == "</s>"
    assert closing_tag_for("x") == ""


@pytest.mark.parametrize("value, expected", [
    ("40", 40.0),
    ("12.5", 12.5),
    ("0", None),
    ("-3", None),
    ("abc", None),
    ("", None),
    ("inf", None),
    ("nan", None),
])
def test_parse_font_size(value, expected):
    assert parse_font_size(value) == expected


def test_resolve_plain_line_uses_base():
    assert resolve_inline("hello", BASE) == [StyledSpan("hello", "#000000", 30)]


def test_resolve_nested_tags():
    spans = resolve_inline("a<c:#ff0000>b<s:40>c</s>d</c>e", BASE)
    assert spans == [
        StyledSpan("a", "#000000", 30),
        StyledSpan("b", "#ff0000", 30),
        StyledSpan("c", "#ff0000", 40),
        StyledSpan("d", "#ff0000", 30),
        StyledSpan("e", "#000000", 30),
    ]


def test_invalid_size_keeps_current_size():
    spans = resolve_inline("<s:big>x</s>y", BASE)
    assert spans == [StyledSpan("x", "#000000", 30), StyledSpan("y", "#000000", 30)]


def test_empty_color_inherits_current_color():
    spans = resolve_inline("<c:#00ff00><c:>x</c></c>", BASE)
    assert spans == [StyledSpan("x", "#00ff00", 30)]


def test_close_pops_top_frame_whatever_its_kind():
    spans = resolve_inline("<c:#ff0000><s:40>a</c>b", BASE)
    assert spans[1] == StyledSpan("b", "#ff0000", 30)


def test_stray_close_restores_base():
    assert resolve_inline("</c></s>a", BASE) == [StyledSpan("a", "#000000", 30)]


def test_no_empty_spans():
    assert resolve_inline("<c:#ff0000></c>", BASE) == []
    assert resolve_inline("", BASE) == []
