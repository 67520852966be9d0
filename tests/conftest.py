"""Pytest configuration and shared fixtures for the blogmd test suite.

This module provides shared fixtures and test configuration used across
the unit and integration tests.
"""

import os

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from blogmd.ast import (
    block_math,
    blockquote,
    bold,
    bullet_list,
    code_block,
    doc,
    heading,
    horizontal_rule,
    image,
    inline_math,
    italic,
    link,
    list_item,
    ordered_list,
    paragraph,
    table,
    table_cell,
    table_header,
    table_row,
    text,
)

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose, deadline=None)
settings.register_profile("dev", max_examples=30, deadline=None, suppress_health_check=[HealthCheck.too_slow])
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def sample_post():
    """Provide a post tree exercising every node type the editor stores."""
    return doc(
        heading(1, text("Notes on "), text("series", italic())),
        paragraph(
            text("The sum "),
            inline_math("\\sum_{i=1}^{n} i"),
            text(" is "),
            text("well known", bold()),
            text("; see "),
            text("the docs", link("https://example.com/docs")),
            text("."),
        ),
        block_math("\\frac{n(n+1)}{2}"),
        bullet_list(
            list_item(paragraph(text("first")), bullet_list(list_item("nested"))),
            list_item("second"),
        ),
        ordered_list(list_item("one"), list_item("two"), start=3),
        blockquote(paragraph(text("quoted text"))),
        code_block("print('$5')", "python"),
        image("/images/abc-123.jpg?quality=80", alt="diagram"),
        table(
            table_row(table_header("Name"), table_header("Age")),
            table_row(table_cell("Alice"), table_cell("30")),
        ),
        horizontal_rule(),
        paragraph(text("I have $5 and $10.")),
    )


@pytest.fixture
def sample_markdown() -> str:
    """Provide markdown with math, prices, code and nested structure."""
    return """# Hello

Some **bold** text and $x^2 + y^2 = z^2$ inline.

$$
E = mc^2
$$

- item 1
  - child
- item 2

1. first
2. second

> quoted text

```js
console.log('$5');
```

| Name | Age |
| --- | --- |
| Alice | 30 |

I have $5 and $10."""
