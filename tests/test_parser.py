import pytest

from MarkdownFlex import markdown_parser
from MarkdownFlex.model import (
    BlockQuote,
    Bold,
    CodeBlock,
    Heading,
    HorizontalRule,
    HtmlBlock,
    ImageBlock,
    InlineCode,
    InlineLink,
    InlineText,
    Italic,
    ListBlock,
    Paragraph,
    Strikethrough,
    TableBlock,
    TextType,
)


def test_heading_scenario():
    result = markdown_parser.parse_markdown("# Title")
    assert result.tokens == [Heading(level=1, inline=[InlineText("Title")])]
    assert result.text_type is TextType.TEXT


def test_single_code_block_is_code():
    result = markdown_parser.parse_markdown("```\nfoo\n```")
    assert result.tokens == [CodeBlock(language=None, lines=["foo"])]
    assert result.text_type is TextType.CODE


def test_bullet_list_scenario():
    result = markdown_parser.parse_markdown("- a\n- b")
    assert result.text_type is TextType.TEXT
    assert len(result.tokens) == 1
    block = result.tokens[0]
    assert isinstance(block, ListBlock)
    assert not block.ordered
    assert [item.blocks for item in block.items] == [
        [Paragraph(inline=[InlineText("a")])],
        [Paragraph(inline=[InlineText("b")])],
    ]
    assert all(item.index is None and item.depth == 0 for item in block.items)


def test_bold_with_nested_italic():
    result = markdown_parser.parse_markdown("**bold *and italic*** text")
    assert result.tokens == [
        Paragraph(
            inline=[
                Bold(children=[InlineText("bold "), Italic(children=[InlineText("and italic")])]),
                InlineText(" text"),
            ]
        )
    ]


@pytest.mark.parametrize("text", ["", "   ", "\n\n\t\n"])
def test_empty_input(text):
    result = markdown_parser.parse_markdown(text)
    assert result.tokens == []
    assert result.text_type is TextType.TEXT


def test_ordered_list_keeps_declared_start():
    result = markdown_parser.parse_markdown("3. three\n4. four\n5. five")
    block = result.tokens[0]
    assert isinstance(block, ListBlock) and block.ordered
    assert block.start == 3
    assert [item.index for item in block.items] == [3, 4, 5]


def test_nested_list_tracks_depth():
    md_text = "- a\n  - b\n  - c\n- d"
    block = markdown_parser.parse_markdown(md_text).tokens[0]
    assert isinstance(block, ListBlock)
    assert len(block.items) == 2
    first = block.items[0]
    assert first.blocks[0] == Paragraph(inline=[InlineText("a")])
    nested = first.blocks[1]
    assert isinstance(nested, ListBlock)
    assert nested.depth == 1
    assert [item.depth for item in nested.items] == [1, 1]
    assert [item.blocks[0] for item in nested.items] == [
        Paragraph(inline=[InlineText("b")]),
        Paragraph(inline=[InlineText("c")]),
    ]
    assert block.items[1].blocks == [Paragraph(inline=[InlineText("d")])]


def test_blockquote_contains_list():
    result = markdown_parser.parse_markdown("> quote\n>\n> - x\n> - y")
    quote = result.tokens[0]
    assert isinstance(quote, BlockQuote)
    assert quote.blocks[0] == Paragraph(inline=[InlineText("quote")])
    assert isinstance(quote.blocks[1], ListBlock)
    assert len(quote.blocks[1].items) == 2


def test_fence_language_and_verbatim_lines():
    result = markdown_parser.parse_markdown("```python extra\nprint(1)\n\n**x** = 2\n```")
    assert result.tokens == [CodeBlock(language="python", lines=["print(1)", "", "**x** = 2"])]
    assert result.text_type is TextType.CODE


def test_unterminated_fence_consumes_rest():
    result = markdown_parser.parse_markdown("# Intro\n\n```\nfoo\n# not a heading")
    assert result.tokens[0] == Heading(level=1, inline=[InlineText("Intro")])
    assert result.tokens[1] == CodeBlock(language=None, lines=["foo", "# not a heading"])
    assert result.text_type is TextType.TEXT


def test_code_with_other_content_is_text():
    result = markdown_parser.parse_markdown("```\na\n```\n\nafter")
    assert isinstance(result.tokens[0], CodeBlock)
    assert result.text_type is TextType.TEXT
    two_blocks = markdown_parser.parse_markdown("```\na\n```\n\n```\nb\n```")
    assert two_blocks.text_type is TextType.TEXT


def test_horizontal_rule_between_paragraphs():
    result = markdown_parser.parse_markdown("one\n\n---\n\ntwo\n\n***")
    assert result.tokens == [
        Paragraph(inline=[InlineText("one")]),
        HorizontalRule(),
        Paragraph(inline=[InlineText("two")]),
        HorizontalRule(),
    ]


def test_table_cells_and_alignment():
    md_text = "| A | B |\n| :-- | --: |\n| 1 | **2** |\n| 3 | 4 |"
    table = markdown_parser.parse_markdown(md_text).tokens[0]
    assert isinstance(table, TableBlock)
    assert table.header == [[InlineText("A")], [InlineText("B")]]
    assert table.alignments == ["left", "right"]
    assert table.rows == [
        [[InlineText("1")], [Bold(children=[InlineText("2")])]],
        [[InlineText("3")], [InlineText("4")]],
    ]


def test_table_without_separator_is_paragraph():
    result = markdown_parser.parse_markdown("| A | B |\n| 1 | 2 |")
    assert len(result.tokens) == 1
    assert isinstance(result.tokens[0], Paragraph)


def test_standalone_image_is_promoted():
    result = markdown_parser.parse_markdown("![Logo](https://example.com/a.png)")
    assert result.tokens == [ImageBlock(src="https://example.com/a.png", alt="Logo")]


def test_image_inside_text_splits_paragraph():
    result = markdown_parser.parse_markdown("See\n![x](https://example.com/x.png)\nhere")
    assert result.tokens == [
        Paragraph(inline=[InlineText("See")]),
        ImageBlock(src="https://example.com/x.png", alt="x"),
        Paragraph(inline=[InlineText("here")]),
    ]


def test_image_in_heading_becomes_alt_text():
    result = markdown_parser.parse_markdown("## ![alt](x.png)")
    assert result.tokens == [Heading(level=2, inline=[InlineText("alt")])]


def test_inline_spans():
    result = markdown_parser.parse_markdown("~~gone~~ `**raw**` [**site**](https://e.com)")
    assert result.tokens[0].inline == [
        Strikethrough(children=[InlineText("gone")]),
        InlineText(" "),
        InlineCode("**raw**"),
        InlineText(" "),
        InlineLink(url="https://e.com", children=[Bold(children=[InlineText("site")])]),
    ]


def test_overlapping_delimiters_close_leftmost_valid_match():
    result = markdown_parser.parse_markdown("*a**b*c**")
    assert result.tokens[0].inline == [Italic(children=[InlineText("a**b")]), InlineText("c**")]


def test_unmatched_delimiters_stay_literal():
    result = markdown_parser.parse_markdown("**open and *half")
    assert result.tokens == [Paragraph(inline=[InlineText("**open and *half")])]


def test_line_breaks_become_newlines():
    result = markdown_parser.parse_markdown("line one\nline two")
    assert result.tokens == [Paragraph(inline=[InlineText("line one\nline two")])]


def test_heading_levels():
    result = markdown_parser.parse_markdown("###### six")
    assert result.tokens == [Heading(level=6, inline=[InlineText("six")])]


def test_html_block_kept_raw():
    result = markdown_parser.parse_markdown("<div>\nhi\n</div>")
    assert result.tokens == [HtmlBlock(raw="<div>\nhi\n</div>")]


def test_parse_is_deterministic():
    md_text = "# T\n\n- a\n  1. b\n\n> q\n\n| x |\n| - |\n| y |"
    parser = markdown_parser.MarkdownParser()
    assert parser.parse(md_text) == parser.parse(md_text)
    assert parser.parse(md_text) == markdown_parser.parse_markdown(md_text)


def test_ordered_list_declared_start_of_zero():
    block = markdown_parser.parse_markdown("0. zero\n1. one").tokens[0]
    assert isinstance(block, ListBlock) and block.ordered
    assert block.start == 0
    assert [item.index for item in block.items] == [0, 1]
