"""Tests for srcxref.highlight.transform."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from srcxref.errors import OutputWriteError, SourceReadError
from srcxref.highlight import CodeTransformer, TransformOptions
from srcxref.highlight.transform import line_number_padding, split_lines
from tests._fixtures.source_tree import SourceTreeBuilder

BAR = """\
package org.apache.maven.jxr;

/**
 * A bar.
 */
public class Bar {
    public static final Bar INSTANCE = new Bar();
}
"""

OUTER = """\
package org.apache.maven.jxr;

public class Outer {
    static class Inner {}
}

class
Split {}
"""

CLIENT = """\
package org.apache.maven.jxr;

class Client {
    Outer.Inner inner;
}
"""

BAR_PATH = "src/org/apache/maven/jxr/Bar.java"


@pytest.fixture
def transformer(source_tree: SourceTreeBuilder) -> CodeTransformer:
    source_tree.write(
        {
            BAR_PATH: BAR,
            "src/org/apache/maven/jxr/Outer.java": OUTER,
            "src/org/apache/maven/jxr/Client.java": CLIENT,
            "src/Solo.java": "class Solo {}\n",
        }
    )
    return CodeTransformer(source_tree.table())


def _transform(
    transformer: CodeTransformer,
    source_tree: SourceTreeBuilder,
    relative: str,
    options: TransformOptions | None = None,
) -> str:
    page_name = Path(relative).with_suffix(".html").name
    package_dir = Path(relative).parent.relative_to("src")
    dest = source_tree.path("xref") / package_dir / page_name
    transformer.transform(source_tree.path(relative), dest, options)
    return dest.read_text(encoding="utf-8")


def test_split_lines_handles_every_line_ending() -> None:
    assert split_lines("a\r\nb\rc\nd\n") == ["a", "b", "c", "d"]
    assert split_lines("") == []


def test_line_number_padding() -> None:
    assert line_number_padding(9) == "   "
    assert line_number_padding(10) == "  "
    assert line_number_padding(100) == " "


def test_page_links_uses_and_anchors_declaration(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    page = _transform(transformer, source_tree, BAR_PATH)

    assert page.count("Bar.html#Bar") == 2
    assert '<a id="Bar" class="jxr_declaration">Bar</a>' in page
    for keyword in ("public", "static", "final", "new"):
        assert f'<strong class="jxr_keyword">{keyword}</strong>' in page
    assert '<em class="jxr_javadoccomment"> * A bar.</em>' in page


def test_page_header_and_footer(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    options = TransformOptions(revision="r42", bottom="Copyright Example")

    page = _transform(transformer, source_tree, BAR_PATH, options)

    assert page.startswith("<!DOCTYPE html>\n")
    assert '<html lang="en">' in page
    assert '<meta charset="utf-8" />' in page
    assert '<meta name="revision" content="r42" />' in page
    assert "<title>Bar xref</title>" in page
    assert 'href="../../../../stylesheet.css"' in page
    assert "View Javadoc" not in page
    assert page.endswith('</pre>\n<hr/>\n<div id="footer">Copyright Example</div>\n</body>\n</html>\n')


def test_every_line_gets_a_numbered_anchor(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    page = _transform(transformer, source_tree, BAR_PATH)

    numbers = re.findall(r'<a class="jxr_linenumber" id="L(\d+)" href="#L\1">\1</a>', page)
    assert numbers == [str(n) for n in range(1, 9)]
    assert '<a class="jxr_linenumber" id="L1" href="#L1">1</a>   ' in page


def test_nested_and_split_declarations_have_ids(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    page = _transform(transformer, source_tree, "src/org/apache/maven/jxr/Outer.java")

    assert '<a id="Outer" class="jxr_declaration">Outer</a>' in page
    assert '<a id="Outer.Inner" class="jxr_declaration">Inner</a>' in page
    # the name sits on the line after its keyword, so only an empty anchor is placed
    assert '<a id="Split"></a>' in page


def test_fragments_resolve_to_ids(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    client = _transform(transformer, source_tree, "src/org/apache/maven/jxr/Client.java")
    outer = _transform(transformer, source_tree, "src/org/apache/maven/jxr/Outer.java")

    assert '<a href="../../../../org/apache/maven/jxr/Outer.html#Outer.Inner">Outer.Inner</a>' in client
    pages = {"Client.html": client, "Outer.html": outer}
    for href in re.findall(r'href="[^"]*?([A-Za-z]+\.html)#([^"]+)"', client):
        page_name, fragment = href
        assert f'id="{fragment}"' in pages[page_name]


def test_default_package_page_links_root_stylesheet(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    page = _transform(transformer, source_tree, "src/Solo.java")

    assert 'href="stylesheet.css"' in page
    assert '<a id="Solo" class="jxr_declaration">Solo</a>' in page


def test_repeated_runs_are_byte_identical(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    source = source_tree.path(BAR_PATH)
    first = transformer.transform(source, source_tree.path("one/Bar.html"))
    second = transformer.transform(source, source_tree.path("two/Bar.html"))

    assert first.read_bytes() == second.read_bytes()


def test_javadoc_link_is_relative(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    apidocs = source_tree.path("apidocs")
    apidocs.mkdir()

    page = _transform(transformer, source_tree, BAR_PATH, TransformOptions(javadoc_dir=apidocs))

    assert (
        '<div id="overview"><a href="../../../../../apidocs/org/apache/maven/jxr/Bar.html">'
        "View Javadoc</a></div>"
    ) in page


def test_unwritable_destination_raises(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    blocker = source_tree.path("blocker")
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(OutputWriteError):
        transformer.transform(source_tree.path(BAR_PATH), blocker / "Bar.html")


def test_unknown_input_encoding_raises(
    transformer: CodeTransformer, source_tree: SourceTreeBuilder
) -> None:
    with pytest.raises(SourceReadError):
        transformer.transform(
            source_tree.path(BAR_PATH),
            source_tree.path("xref/Bar.html"),
            TransformOptions(input_encoding="no-such-codec"),
        )
