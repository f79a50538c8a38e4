"""End-to-end tests for the cross-reference pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from srcxref.config import JavadocConfig, XrefConfig
from srcxref.errors import XrefError
from srcxref.indexing.rendering import DEFAULT_TEMPLATES_DIR
from srcxref.parsing import parse_source
from srcxref.stores import file_cache
from srcxref.xref import XRef
from tests._fixtures.source_tree import SourceTreeBuilder

SOURCES = {
    "src/main/java/org/apache/maven/jxr/Bar.java": """\
        package org.apache.maven.jxr;

        public class Bar {
            public static final Bar INSTANCE = new Bar();
        }
        """,
    "src/main/java/org/apache/maven/jxr/Foo.java": """\
        package org.apache.maven.jxr;

        import org.apache.maven.jxr.util.Helper;

        public class Foo {
            private Bar bar;
            private Helper helper;
        }
        """,
    "src/main/java/org/apache/maven/jxr/util/Helper.java": """\
        package org.apache.maven.jxr.util;

        public class Helper {}
        """,
    "src/main/java/Solo.java": "class Solo {}\n",
}


def _config(source_tree: SourceTreeBuilder, **overrides: object) -> XrefConfig:
    config = XrefConfig(root=source_tree.path(), javadoc=JavadocConfig(version="1.8"))
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def test_full_run_writes_pages_index_and_stylesheet(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)

    result = XRef().run(_config(source_tree))

    out = source_tree.path("target/xref")
    assert result.destination == out
    assert sorted(p.relative_to(out).as_posix() for p in result.pages) == [
        "Solo.html",
        "org/apache/maven/jxr/Bar.html",
        "org/apache/maven/jxr/Foo.html",
        "org/apache/maven/jxr/util/Helper.html",
    ]
    for name in ("index.html", "overview-frame.html", "allclasses-frame.html", "overview-summary.html"):
        assert (out / name).is_file()
    assert (out / "org/apache/maven/jxr/util/package-summary.html").is_file()
    assert (out / "package-frame.html").is_file()
    assert result.stylesheet == out / "stylesheet.css"
    assert result.stylesheet.read_text(encoding="utf-8") == (
        DEFAULT_TEMPLATES_DIR / "jdk8" / "stylesheet.css"
    ).read_text(encoding="utf-8")


def test_pages_link_across_packages(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)

    XRef().run(_config(source_tree))

    foo = source_tree.path("target/xref/org/apache/maven/jxr/Foo.html").read_text(encoding="utf-8")
    assert '<a href="../../../../org/apache/maven/jxr/Bar.html#Bar">Bar</a>' in foo
    assert '<a href="../../../../org/apache/maven/jxr/util/Helper.html#Helper">Helper</a>' in foo
    assert '<a href="../../../../org/apache/maven/jxr/util/package-summary.html">' in foo
    bar = source_tree.path("target/xref/org/apache/maven/jxr/Bar.html").read_text(encoding="utf-8")
    assert bar.count("Bar.html#Bar") == 2


def test_same_root_spelled_twice_is_processed_once(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)
    src = source_tree.path("src/main/java")

    result = XRef().run(_config(source_tree, source_dirs=[src, src / "org" / ".."]))

    assert len(result.source_roots) == 1
    assert len(result.pages) == 4


def test_custom_includes_select_files(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(
        {
            "src/keep/Keep.ext": "class Keep {}\n",
            "src/skip/Skip.ext": "class Skip {}\n",
        }
    )

    result = XRef().run(
        _config(source_tree, source_dirs=[source_tree.path("src")], includes=["**/keep/*.ext"])
    )

    out = source_tree.path("target/xref")
    assert result.pages == [out / "keep" / "Keep.html"]
    assert not (out / "skip").exists()


def test_include_and_exclude_in_same_directory(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(
        {
            "src/keep/Keep.ext": "class Keep {}\n",
            "src/keep/Skip.ext": "class Skip {}\n",
        }
    )

    result = XRef().run(
        _config(
            source_tree,
            source_dirs=[source_tree.path("src")],
            includes=["**/keep/*.ext"],
            excludes=["**/keep/Skip.ext"],
        )
    )

    out = source_tree.path("target/xref")
    assert result.pages == [out / "keep" / "Keep.html"]
    assert not (out / "keep" / "Skip.html").exists()
    all_classes = (out / "allclasses-frame.html").read_text(encoding="utf-8")
    assert "Skip" not in all_classes


def _snapshot(directory: Path) -> dict[str, bytes]:
    return {
        path.relative_to(directory).as_posix(): path.read_bytes()
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


def test_repeated_full_runs_are_byte_identical(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)
    out = source_tree.path("target/xref")

    XRef().run(_config(source_tree))
    first = _snapshot(out)
    XRef().run(_config(source_tree))
    second = _snapshot(out)
    XRef().run(_config(source_tree, destination=source_tree.path("elsewhere")))
    third = _snapshot(source_tree.path("elsewhere"))

    assert "index.html" in first
    assert "org/apache/maven/jxr/package-summary.html" in first
    assert first == second == third


def test_symlinked_root_parses_each_file_once(
    source_tree: SourceTreeBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    source_tree.write(SOURCES)
    link = source_tree.path("linked-src")
    try:
        link.symlink_to(source_tree.path("src/main/java"), target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available")

    parsed: list[Path] = []

    def counting_parse(path: Path, *args: object) -> object:
        parsed.append(path)
        return parse_source(path, *args)

    monkeypatch.setattr(file_cache, "parse_source", counting_parse)

    result = XRef().run(_config(source_tree, source_dirs=[link]))

    assert len(result.pages) == 4
    assert len(parsed) == 4
    assert len(set(parsed)) == 4


def test_no_sources_generates_nothing(source_tree: SourceTreeBuilder) -> None:
    result = XRef().run(_config(source_tree))

    assert result.pages == []
    assert result.index_pages == []
    assert not source_tree.path("target/xref").exists()


def test_existing_apidocs_are_linked(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)
    source_tree.path("target/apidocs").mkdir(parents=True)

    XRef().run(_config(source_tree))

    bar = source_tree.path("target/xref/org/apache/maven/jxr/Bar.html").read_text(encoding="utf-8")
    assert 'href="../../../../../apidocs/org/apache/maven/jxr/Bar.html">View Javadoc</a>' in bar


def test_disabled_javadoc_is_not_linked(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)
    source_tree.path("target/apidocs").mkdir(parents=True)

    XRef().run(_config(source_tree, javadoc=JavadocConfig(enabled=False, version="1.8")))

    bar = source_tree.path("target/xref/org/apache/maven/jxr/Bar.html").read_text(encoding="utf-8")
    assert "View Javadoc" not in bar


def test_detected_version_picks_templates(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)

    XRef(version_detector=lambda: "1.4.2").run(_config(source_tree, javadoc=JavadocConfig()))

    index = source_tree.path("target/xref/index.html").read_text(encoding="utf-8")
    assert "<frameset" in index
    stylesheet = source_tree.path("target/xref/stylesheet.css").read_text(encoding="utf-8")
    assert "javadoc 1.4" in stylesheet


def test_custom_stylesheet_and_keywords(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)
    source_tree.write({"css/custom.css": "pre { color: red; }\n"})

    XRef().run(
        _config(
            source_tree,
            stylesheet=source_tree.path("css/custom.css"),
            keywords=["private"],
        )
    )

    out = source_tree.path("target/xref")
    assert (out / "stylesheet.css").read_text(encoding="utf-8") == "pre { color: red; }\n"
    foo = (out / "org/apache/maven/jxr/Foo.html").read_text(encoding="utf-8")
    assert '<strong class="jxr_keyword">private</strong>' in foo
    assert '<strong class="jxr_keyword">public</strong>' not in foo


def test_footer_uses_resolved_bottom(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)

    XRef().run(_config(source_tree, bottom="Built by {organizationName}"))

    bar = source_tree.path("target/xref/org/apache/maven/jxr/Bar.html")
    assert '<div id="footer">Built by</div>' in bar.read_text(encoding="utf-8")


def test_write_failure_is_wrapped(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(SOURCES)
    blocker = source_tree.path("blocker")
    blocker.write_text("file", encoding="utf-8")

    with pytest.raises(XrefError, match="Cross-reference generation failed"):
        XRef().run(_config(source_tree, destination=blocker))
