#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/renderers/test_markdown_renderer.py
"""Unit tests for MarkdownRenderer and ``serialize``."""

import io

import pytest

from blogmd.ast import (
    Mark,
    Node,
    block_math,
    blockquote,
    bold,
    bullet_list,
    code,
    code_block,
    doc,
    hard_break,
    heading,
    horizontal_rule,
    image,
    inline_math,
    italic,
    link,
    list_item,
    ordered_list,
    paragraph,
    strike,
    table,
    table_cell,
    table_header,
    table_row,
    text,
    underline,
)
from blogmd.exceptions import RenderingError
from blogmd.options.markdown import MarkdownRendererOptions
from blogmd.renderers.markdown import MarkdownRenderer, serialize
from blogmd.utils.images import make_export_image_rewriter


def simple_table(header, *rows):
    return table(
        table_row(*(table_header(cell) for cell in header)),
        *(table_row(*(table_cell(cell) for cell in row)) for row in rows),
    )


@pytest.mark.unit
class TestBasicBlocks:
    """One block of each type."""

    def test_heading(self):
        assert serialize(doc(heading(1, "Title"))) == "# Title"

    @pytest.mark.parametrize("level,prefix", [(2, "##"), (6, "######"), (9, "######"), (0, "#"), ("3", "###")])
    def test_heading_levels(self, level, prefix):
        assert serialize(doc(heading(level, "x"))) == f"{prefix} x"

    def test_heading_trailing_hash_escaped(self):
        assert serialize(doc(heading(1, "C#"))) == "# C\\#"

    def test_paragraphs_separated_by_blank_line(self):
        assert serialize(doc(paragraph("one"), paragraph("two"))) == "one\n\ntwo"

    def test_code_block(self):
        assert serialize(doc(code_block("const x = 1;", "js"))) == "```js\nconst x = 1;\n```"

    def test_empty_code_block(self):
        assert serialize(doc(code_block("", "py"))) == "```py\n```"

    def test_code_block_fence_grows(self):
        assert serialize(doc(code_block("```\ninner\n```"))) == "````\n```\ninner\n```\n````"

    def test_code_block_content_not_escaped(self):
        assert serialize(doc(code_block("a * b $x$"))) == "```\na * b $x$\n```"

    def test_blockquote(self):
        assert serialize(doc(blockquote(paragraph("quoted text")))) == "> quoted text"

    def test_blockquote_with_two_paragraphs(self):
        assert serialize(doc(blockquote(paragraph("a"), paragraph("b")))) == "> a\n>\n> b"

    def test_horizontal_rule(self):
        assert serialize(doc(horizontal_rule())) == "---"

    def test_image(self):
        assert serialize(doc(image("https://example.com/img.png", alt="photo"))) == "![photo](https://example.com/img.png)"

    def test_image_with_title(self):
        assert serialize(doc(image("x.png", alt="a", title='say "hi"'))) == '![a](x.png "say \\"hi\\"")'

    def test_image_url_with_space_bracketed(self):
        assert serialize(doc(image("/a b.png"))) == "![](</a b.png>)"

    def test_image_alt_escaped(self):
        assert serialize(doc(image("x.png", alt="a *b* [c]"))) == "![a \\*b\\* \\[c\\]](x.png)"

    def test_image_destination_and_title_delimiters_escaped(self):
        result = serialize(doc(image("x$`y.png", alt="a", title="$x$ `c`")))
        assert result == "![a](x\\$%60y.png \"\\$x\\$ \\`c\\`\")"

    def test_null_attributes_use_defaults(self):
        tree = doc(
            Node("heading", attrs={"level": None}, content=[text("T")]),
            Node("codeBlock", attrs={"language": None}, content=[text("x")]),
            Node("image", attrs={"src": "a.png", "alt": None, "title": None}),
        )
        assert serialize(tree) == "# T\n\n```\nx\n```\n\n![](a.png)"

    def test_no_trailing_newline(self):
        assert not serialize(doc(paragraph("x"), horizontal_rule())).endswith("\n")


@pytest.mark.unit
class TestEmptyInputs:
    """Non-doc roots and empty documents."""

    def test_non_doc_root(self):
        assert serialize(paragraph("hello")) == ""

    def test_doc_without_content(self):
        assert serialize(doc()) == ""
        assert serialize(Node("doc")) == ""

    def test_empty_blocks_skipped(self):
        assert serialize(doc(paragraph(), paragraph("x"), blockquote())) == "x"


@pytest.mark.unit
class TestInlineMarks:
    """Marks and their delimiters."""

    @pytest.mark.parametrize(
        "node,expected",
        [
            (paragraph("hello ", text("bold", bold())), "hello **bold**"),
            (paragraph("hello ", text("italic", italic())), "hello _italic_"),
            (paragraph("run ", text("npm install", code())), "run `npm install`"),
            (paragraph(text("deleted", strike())), "~~deleted~~"),
            (paragraph(text("u", underline())), "<u>u</u>"),
            (paragraph(text("here", link("https://example.com"))), "[here](https://example.com)"),
        ],
    )
    def test_single_mark(self, node, expected):
        assert serialize(doc(node)) == expected

    def test_link_with_title(self):
        node = paragraph(text("t", link("https://e.com", title="T")))
        assert serialize(doc(node)) == '[t](https://e.com "T")'

    def test_link_dollars_escaped(self):
        node = paragraph(text("t", link("https://e.com/$x$", title="$5")))
        assert serialize(doc(node)) == "[t](https://e.com/\\$x\\$ \"\\$5\")"

    def test_shared_marks_stay_open(self):
        node = paragraph(text("a ", bold()), text("b", bold(), italic()), text(" c", bold()))
        assert serialize(doc(node)) == "**a _b_ c**"

    def test_canonical_nesting(self):
        node = paragraph(text("x", italic(), bold(), link("https://e.com")))
        assert serialize(doc(node)) == "[**_x_**](https://e.com)"

    def test_edge_whitespace_moved_outside(self):
        node = paragraph(text("x"), text(" bold ", bold()), text("y"))
        assert serialize(doc(node)) == "x **bold** y"

    def test_code_inside_bold(self):
        node = paragraph(text("a", bold(), code()))
        assert serialize(doc(node)) == "**`a`**"

    def test_code_span_with_backticks(self):
        assert serialize(doc(paragraph(text("a`b", code())))) == "``a`b``"
        assert serialize(doc(paragraph(text("`tick`", code())))) == "`` `tick` ``"

    def test_unknown_mark_ignored(self):
        assert serialize(doc(paragraph(text("x", Mark("highlight"))))) == "x"

    def test_emphasis_symbol_option(self):
        options = MarkdownRendererOptions(emphasis_symbol="*")
        assert serialize(doc(paragraph(text("i", italic()))), options) == "*i*"


@pytest.mark.unit
class TestTextEscaping:
    """Plain text is escaped so it reads back as the same text."""

    def test_inline_punctuation(self):
        assert serialize(doc(paragraph("2 * 3 = [six]"))) == "2 \\* 3 = \\[six\\]"

    @pytest.mark.parametrize(
        "raw,expected",
        [("# not heading", "\\# not heading"), ("- not a list", "\\- not a list"), ("1. not a list", "1\\. not a list")],
    )
    def test_line_starts(self, raw, expected):
        assert serialize(doc(paragraph(raw))) == expected

    def test_prices_escaped(self):
        assert serialize(doc(paragraph("I have $5 and $10."))) == "I have \\$5 and \\$10."

    def test_whitespace_collapsed(self):
        assert serialize(doc(paragraph("a   \n  b"))) == "a b"

    def test_escaping_disabled(self):
        options = MarkdownRendererOptions(escape_special=False)
        assert serialize(doc(paragraph("a * b")), options) == "a * b"


@pytest.mark.unit
class TestHardBreaks:
    """Line breaks inside textblocks."""

    def test_paragraph(self):
        assert serialize(doc(paragraph("a", hard_break(), "b"))) == "a\\\nb"

    def test_heading_uses_space(self):
        assert serialize(doc(heading(2, "a", hard_break(), "b"))) == "## a b"

    def test_trailing_break_dropped(self):
        assert serialize(doc(paragraph("a", hard_break()))) == "a"


@pytest.mark.unit
class TestMath:
    """Inline and block math output."""

    def test_inline_math(self):
        node = paragraph("formula: ", inline_math("x^2 + y^2 = z^2"))
        assert serialize(doc(node)) == "formula: $x^2 + y^2 = z^2$"

    def test_block_math(self):
        assert serialize(doc(block_math("E = mc^2"))) == "$$\nE = mc^2\n$$"

    def test_empty_inline_math_skipped(self):
        result = serialize(doc(paragraph("a ", inline_math(""), " b")))
        assert result == "a b"
        assert "$$" not in result

    def test_empty_block_math_skipped(self):
        assert serialize(doc(paragraph("a"), block_math(""), paragraph("b"))) == "a\n\nb"

    def test_inline_math_with_dollar_uses_marker(self):
        result = serialize(doc(paragraph(inline_math("a$b"))))
        assert result == '<span data-type="inline-math" data-latex="a&#36;b"></span>'

    def test_inline_math_that_reads_as_price_uses_marker(self):
        result = serialize(doc(paragraph(inline_math("5"))))
        assert result == '<span data-type="inline-math" data-latex="5"></span>'

    def test_block_math_with_double_dollar_uses_marker(self):
        result = serialize(doc(block_math("a $$ b")))
        assert result == '<div data-type="block-math" data-latex="a &#36;&#36; b"></div>'

    def test_block_math_in_blockquote_single_line(self):
        assert serialize(doc(blockquote(block_math("x")))) == "> $$x$$"

    def test_multiline_block_math_in_list_uses_marker(self):
        result = serialize(doc(bullet_list(list_item(block_math("a \\\\\nb")))))
        assert result == '- <div data-type="block-math" data-latex="a \\\\&#10;b"></div>'

    def test_adjacent_inline_math_uses_marker(self):
        result = serialize(doc(paragraph(inline_math("x"), inline_math("y"))))
        assert result == '$x$<span data-type="inline-math" data-latex="y"></span>'

    def test_dollar_text_next_to_math_is_escaped(self):
        result = serialize(doc(paragraph("a$", inline_math("x"), "$b")))
        assert result == "a\\$$x$\\$b"

    @pytest.mark.parametrize(
        "content,expected",
        [
            (["5$", inline_math("x")], '5$<span data-type="inline-math" data-latex="x"></span>'),
            ([inline_math("x"), "$5"], '<span data-type="inline-math" data-latex="x"></span>$5'),
            (["a\\", inline_math("x")], 'a\\<span data-type="inline-math" data-latex="x"></span>'),
        ],
    )
    def test_unescaped_text_touching_math_uses_marker(self, content, expected):
        options = MarkdownRendererOptions(escape_special=False)
        assert serialize(doc(paragraph(*content)), options) == expected

    @pytest.mark.parametrize(
        "latex,attribute",
        [
            ("a~~~b", "a&#126;&#126;&#126;b"),
            ("\\text{`a`}", "\\text{&#96;a&#96;}"),
            ("x \\", "x \\"),
        ],
    )
    def test_inline_math_read_as_code_or_escape_uses_marker(self, latex, attribute):
        result = serialize(doc(paragraph(inline_math(latex))))
        assert result == f'<span data-type="inline-math" data-latex="{attribute}"></span>'

    def test_block_math_with_tilde_fence_uses_marker(self):
        result = serialize(doc(block_math("a ~~~ b")))
        assert result == '<div data-type="block-math" data-latex="a &#126;&#126;&#126; b"></div>'


@pytest.mark.unit
class TestLists:
    """List markers, numbering and nesting."""

    def test_bullet_list(self):
        assert serialize(doc(bullet_list(list_item("item 1"), list_item("item 2")))) == "- item 1\n- item 2"

    def test_ordered_list(self):
        assert serialize(doc(ordered_list(list_item("first"), list_item("second")))) == "1. first\n2. second"

    def test_ordered_list_start(self):
        assert serialize(doc(ordered_list(list_item("one"), list_item("two"), start=3))) == "3. one\n4. two"

    def test_nested_bullet_indented_two_spaces(self):
        tree = doc(bullet_list(list_item(paragraph("parent"), bullet_list(list_item("child")))))
        assert serialize(tree) == "- parent\n  - child"

    def test_nested_under_ordered_item_aligns_with_content(self):
        tree = doc(ordered_list(list_item(paragraph("a"), bullet_list(list_item("b")))))
        assert serialize(tree) == "1. a\n   - b"

    def test_adjacent_bullet_lists_alternate_marker(self):
        assert serialize(doc(bullet_list(list_item("a")), bullet_list(list_item("b")))) == "- a\n\n* b"

    def test_adjacent_ordered_lists_alternate_delimiter(self):
        assert serialize(doc(ordered_list(list_item("a")), ordered_list(list_item("b")))) == "1. a\n\n1) b"

    def test_alternate_of_star_is_dash(self):
        options = MarkdownRendererOptions(bullet_marker="*")
        assert serialize(doc(bullet_list(list_item("a")), bullet_list(list_item("b"))), options) == "* a\n\n- b"

    def test_empty_item(self):
        assert serialize(doc(bullet_list(list_item(), list_item("b")))) == "-\n- b"

    def test_loose_item_with_two_paragraphs(self):
        tree = doc(bullet_list(list_item(paragraph("a"), paragraph("b"))))
        assert serialize(tree) == "- a\n\n  b"

    def test_non_item_children_skipped(self):
        tree = doc(bullet_list(list_item("a"), paragraph("stray")))
        assert serialize(tree) == "- a"


@pytest.mark.unit
class TestTables:
    """Pipe table output."""

    def test_table(self):
        result = serialize(doc(simple_table(["Name", "Age"], ["Alice", "30"])))
        assert result == "| Name | Age |\n| --- | --- |\n| Alice | 30 |"

    @pytest.mark.parametrize("columns", [1, 2, 5])
    def test_separator_has_one_cell_per_column(self, columns):
        header = [f"h{i}" for i in range(columns)]
        separator = serialize(doc(simple_table(header))).split("\n")[1]
        assert separator == "| " + " | ".join(["---"] * columns) + " |"

    def test_ragged_rows_padded(self):
        result = serialize(doc(simple_table(["A", "B"], ["x"])))
        assert result.split("\n")[2] == "| x |  |"

    def test_pipe_in_cell_escaped(self):
        result = serialize(doc(simple_table(["a|b"])))
        assert result.split("\n")[0] == "| a\\|b |"

    def test_code_with_pipe_in_cell_written_as_html(self):
        tree = doc(table(table_row(table_header(paragraph(text("a | *b*", code()))))))
        assert serialize(tree).split("\n")[0] == "| <code>a &#124; \\*b\\*</code> |"

    def test_code_without_pipe_in_cell_stays_backticked(self):
        tree = doc(table(table_row(table_header(paragraph(text("x", code()))))))
        assert serialize(tree).split("\n")[0] == "| `x` |"

    def test_pipe_in_image_and_link_escaped(self):
        cell = paragraph(image("a.png", alt="a|b"), text("t", link("https://e.com/?q=a|b")))
        result = serialize(doc(table(table_row(table_header(cell)))))
        assert result.split("\n")[0] == "| ![a\\|b](a.png)[t](https://e.com/?q=a\\|b) |"

    def test_hard_break_in_cell_becomes_space(self):
        tree = doc(table(table_row(table_header(paragraph("a", hard_break(), "b")))))
        assert serialize(tree).split("\n")[0] == "| a b |"

    def test_empty_table_skipped(self):
        assert serialize(doc(table(), paragraph("x"))) == "x"


@pytest.mark.unit
class TestImageRewriting:
    """The ``rewrite_image_src`` hook."""

    def test_custom_rewriter(self):
        options = MarkdownRendererOptions(rewrite_image_src=lambda src: src.replace("/images/", "./local/"))
        assert serialize(doc(image("/images/abc.jpg")), options) == "![](./local/abc.jpg)"

    def test_export_rewriter(self):
        options = MarkdownRendererOptions(rewrite_image_src=make_export_image_rewriter())
        tree = doc(image("/images/abc-123.jpg?quality=80", alt="photo"))
        assert serialize(tree, options) == "![photo](./images/abc-123.jpg)"

    def test_identity_by_default(self):
        assert serialize(doc(image("/images/a.jpg?q=1"))) == "![](/images/a.jpg?q=1)"


@pytest.mark.unit
class TestUnknownNodes:
    """Node types without a markdown rule."""

    def test_unknown_container_dropped(self):
        tree = doc(paragraph("a"), Node("callout", content=[paragraph("inside")]), paragraph("b"))
        assert serialize(tree) == "a\n\nb"

    def test_unknown_inline_node_dropped(self):
        assert serialize(doc(paragraph("a ", Node("mention", attrs={"id": 1}), " b"))) == "a b"

    def test_leaf_renders_nothing(self):
        assert serialize(doc(paragraph("a"), Node("widget"), paragraph("b"))) == "a\n\nb"

    def test_inline_leaves_at_block_level_form_paragraph(self):
        assert serialize(doc(text("loose "), text("text", bold()))) == "loose **text**"


@pytest.mark.unit
class TestFrontmatter:
    """Front matter output."""

    def test_rendered_when_enabled(self):
        tree = Node("doc", attrs={"frontmatter": {"title": "Post"}}, content=[heading(1, "T")])
        options = MarkdownRendererOptions(render_frontmatter=True)
        assert serialize(tree, options) == "---\ntitle: Post\n---\n\n# T"

    def test_ignored_by_default(self):
        tree = Node("doc", attrs={"frontmatter": {"title": "Post"}}, content=[heading(1, "T")])
        assert serialize(tree) == "# T"


@pytest.mark.unit
class TestRenderOutput:
    """Writing rendered output to paths and streams."""

    def test_render_to_path(self, tmp_path):
        target = tmp_path / "post.md"
        MarkdownRenderer().render(doc(heading(1, "Title")), target)
        assert target.read_text(encoding="utf-8") == "# Title"

    def test_render_to_text_stream(self):
        buffer = io.StringIO()
        MarkdownRenderer().render(doc(paragraph("ü")), buffer)
        assert buffer.getvalue() == "ü"

    def test_render_to_binary_stream(self):
        buffer = io.BytesIO()
        MarkdownRenderer().render(doc(paragraph("ü")), buffer)
        assert buffer.getvalue() == "ü".encode("utf-8")

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(RenderingError) as exc_info:
            MarkdownRenderer().render(doc(paragraph("x")), tmp_path / "missing" / "post.md")
        assert exc_info.value.rendering_stage == "write"


@pytest.mark.unit
def test_sample_post(sample_post):
    result = serialize(sample_post, MarkdownRendererOptions(rewrite_image_src=make_export_image_rewriter()))
    blocks = result.split("\n\n")
    assert blocks[0] == "# Notes on _series_"
    assert blocks[1] == "The sum $\\sum_{i=1}^{n} i$ is **well known**; see [the docs](https://example.com/docs)."
    assert blocks[2] == "$$\n\\frac{n(n+1)}{2}\n$$"
    assert blocks[3] == "- first\n  - nested\n- second"
    assert blocks[4] == "3. one\n4. two"
    assert blocks[5] == "> quoted text"
    assert blocks[6] == "```python\nprint('$5')\n```"
    assert blocks[7] == "![diagram](./images/abc-123.jpg)"
    assert blocks[8] == "| Name | Age |\n| --- | --- |\n| Alice | 30 |"
    assert blocks[9] == "---"
    assert blocks[10] == "I have \\$5 and \\$10."
