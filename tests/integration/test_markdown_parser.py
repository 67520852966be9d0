#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_markdown_parser.py
"""Integration tests for markdown import through the default bridge."""

import asyncio
import io

import pytest

from blogmd.ast import (
    bold,
    code,
    doc,
    extract_text,
    find_nodes,
    hard_break,
    inline_math,
    link,
    paragraph,
    strike,
    text,
    underline,
)
from blogmd.options.markdown import MarkdownParserOptions
from blogmd.parsers.markdown import MarkdownParser, parse, parse_sync


def types(node):
    return [child.type for child in node.children]


@pytest.mark.integration
class TestStructure:
    """Block structure of imported markdown."""

    def test_heading_paragraph_list(self):
        tree = parse_sync("# Hello\n\nSome **bold** text\n\n- item 1\n- item 2")
        assert types(tree) == ["heading", "paragraph", "bulletList"]
        assert tree.children[0].attrs["level"] == 1
        assert tree.children[1] == paragraph("Some ", text("bold", bold()), " text")
        assert len(tree.children[2].children) == 2

    def test_code_block_language(self):
        tree = parse_sync("```js\nconsole.log('hi');\n```")
        block = tree.children[0]
        assert block.type == "codeBlock"
        assert block.attrs["language"] == "js"
        assert extract_text(block) == "console.log('hi');"

    def test_image_at_top_level(self):
        tree = parse_sync("![alt text](https://example.com/img.png)")
        assert types(tree) == ["image"]
        assert tree.children[0].attrs["src"] == "https://example.com/img.png"
        assert tree.children[0].attrs["alt"] == "alt text"

    def test_blockquote(self):
        tree = parse_sync("> quoted")
        assert types(tree) == ["blockquote"]
        assert tree.children[0].children[0] == paragraph("quoted")

    def test_table(self):
        tree = parse_sync("| Name | Age |\n| --- | --- |\n| Alice | 30 |")
        table_node = tree.children[0]
        assert table_node.type == "table"
        assert len(table_node.children) == 2
        assert [cell.type for cell in table_node.children[0].children] == ["tableHeader", "tableHeader"]
        assert extract_text(table_node.children[1].children[0]) == "Alice"

    def test_link(self):
        tree = parse_sync("[click me](https://example.com)")
        assert tree.children[0] == paragraph(text("click me", link("https://example.com")))

    def test_empty_input(self):
        assert parse_sync("") == doc(paragraph())

    def test_nested_list(self):
        tree = parse_sync("- parent\n  - child")
        item = tree.children[0].children[0]
        assert types(item) == ["paragraph", "bulletList"]

    def test_ordered_start(self):
        tree = parse_sync("3. a\n4. b")
        assert tree.children[0].type == "orderedList"
        assert tree.children[0].attrs["start"] == 3

    def test_hard_break(self):
        assert parse_sync("a\\\nb") == doc(paragraph("a", hard_break(), "b"))

    def test_inline_marks(self):
        tree = parse_sync("~~gone~~ <u>under</u> `code`")
        assert tree.children[0] == paragraph(
            text("gone", strike()), " ", text("under", underline()), " ", text("code", code())
        )

    def test_horizontal_rule(self):
        assert types(parse_sync("a\n\n---\n\nb")) == ["paragraph", "horizontalRule", "paragraph"]


@pytest.mark.integration
class TestMath:
    """Math recognition through the preprocessor."""

    def test_inline_math(self):
        tree = parse_sync("The formula $x^2 + y^2 = z^2$ is famous.")
        assert find_nodes(tree, "inlineMath")[0].attrs["latex"] == "x^2 + y^2 = z^2"

    def test_block_math(self):
        tree = parse_sync("before\n\n$$\nE = mc^2\n$$\n\nafter")
        assert types(tree) == ["paragraph", "blockMath", "paragraph"]
        assert tree.children[1].attrs["latex"] == "E = mc^2"

    def test_multiline_block_math(self):
        tree = parse_sync("$$\n\\begin{aligned}\na &= b \\\\\nc &= d\n\\end{aligned}\n$$")
        assert tree.children[0].attrs["latex"] == "\\begin{aligned}\na &= b \\\\\nc &= d\n\\end{aligned}"

    def test_math_in_list_and_heading(self):
        tree = parse_sync("# Area $\\pi r^2$\n\n- $a^2$")
        assert [node.attrs["latex"] for node in find_nodes(tree, "inlineMath")] == ["\\pi r^2", "a^2"]

    def test_math_next_to_text(self):
        assert parse_sync("Let $x$ be") == doc(paragraph("Let ", inline_math("x"), " be"))

    @pytest.mark.parametrize(
        "source",
        [
            "I have $5 and $10.",
            "I have $5 in my pocket",
            "It costs $10.99.",
            "$5 or $10.",
            "$50,000,000 and $1,234,567.89",
            "Value $50,000$ was recorded.",
        ],
    )
    def test_prices_stay_text(self, source):
        tree = parse_sync(source)
        assert find_nodes(tree, "inlineMath") == []
        assert extract_text(tree) == source

    def test_price_text_exact(self):
        assert parse_sync("Cost: $100") == doc(paragraph("Cost: $100"))

    @pytest.mark.parametrize(
        "source,code_text",
        [
            ("`$x^2$`", "$x^2$"),
            ("``$x$``", "$x$"),
            ("```$x$```", "$x$"),
            ("```` `$x^2$` ````", "`$x^2$`"),
        ],
    )
    def test_code_spans_protected(self, source, code_text):
        tree = parse_sync(source)
        assert find_nodes(tree, "inlineMath") == []
        assert tree.children[0] == paragraph(text(code_text, code()))

    @pytest.mark.parametrize("fence", ["```", "~~~"])
    def test_fenced_code_protected(self, fence):
        tree = parse_sync(f"{fence}\n$x$ and $$y$$\n{fence}")
        assert types(tree) == ["codeBlock"]
        assert extract_text(tree) == "$x$ and $$y$$"

    def test_preprocessing_can_be_disabled(self):
        tree = parse_sync("$x$", MarkdownParserOptions(preprocess_math=False))
        assert tree == doc(paragraph("$x$"))


@pytest.mark.integration
class TestInputs:
    """Input types, options and concurrency."""

    def test_bytes(self):
        assert parse_sync("# Café".encode("utf-8")).children[0].children[0].text == "Café"

    def test_path(self, tmp_path):
        path = tmp_path / "post.md"
        path.write_text("Hello $x$", encoding="utf-8")
        assert find_nodes(parse_sync(path), "inlineMath")

    def test_missing_path(self, tmp_path):
        from blogmd.exceptions import ValidationError

        with pytest.raises(ValidationError):
            parse_sync(tmp_path / "missing.md")

    def test_stream(self):
        assert parse_sync(io.StringIO("> q")).children[0].type == "blockquote"

    def test_frontmatter(self):
        source = "---\ntitle: Post\ntags: [math]\n---\n# Body"
        tree = parse_sync(source, MarkdownParserOptions(parse_frontmatter=True))
        assert tree.attrs["frontmatter"] == {"title": "Post", "tags": ["math"]}
        assert types(tree) == ["heading"]

    def test_frontmatter_off_by_default(self):
        tree = parse_sync("---\ntitle: Post\n---\n# Body")
        assert "frontmatter" not in tree.attrs
        assert types(tree)[0] == "horizontalRule"

    def test_tables_disabled(self):
        tree = parse_sync("| a |\n| --- |\n| 1 |", MarkdownParserOptions(parse_tables=False))
        assert find_nodes(tree, "table") == []

    def test_concurrent_parses(self):
        async def run_all():
            return await asyncio.gather(*(parse(f"Value ${i}x$ and text {i}") for i in range(5)))

        trees = asyncio.run(run_all())
        assert [find_nodes(tree, "inlineMath")[0].attrs["latex"] for tree in trees] == [f"{i}x" for i in range(5)]

    def test_parser_instance_reusable(self):
        parser = MarkdownParser()

        async def run_twice():
            return await parser.parse("$a$"), await parser.parse("$b$")

        first, second = asyncio.run(run_twice())
        assert first == doc(paragraph(inline_math("a")))
        assert second == doc(paragraph(inline_math("b")))

    def test_sample_markdown(self, sample_markdown):
        tree = parse_sync(sample_markdown)
        assert types(tree) == [
            "heading",
            "paragraph",
            "blockMath",
            "bulletList",
            "orderedList",
            "blockquote",
            "codeBlock",
            "table",
            "paragraph",
        ]
        assert [node.attrs["latex"] for node in find_nodes(tree, "inlineMath")] == ["x^2 + y^2 = z^2"]
        assert extract_text(tree.children[-1]) == "I have $5 and $10."
        assert extract_text(tree.children[6]) == "console.log('$5');"
