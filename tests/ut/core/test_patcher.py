"""即时加载指令中和测试"""

from __future__ import annotations

import pytest

from lazylib.core.exceptions import ValidationError
from lazylib.core.patcher import ContentPatcher


@pytest.fixture()
def patcher() -> ContentPatcher:
    return ContentPatcher()


class TestNeutralize:
    def test_single_directive(self, patcher: ContentPatcher) -> None:
        src = b"<?php\nrequire_once 'Zend/Exception.php';\nclass Zend_Foo {}\n"
        out = patcher.neutralize(src)
        assert out == b"<?php\n//require_once 'Zend/Exception.php';\nclass Zend_Foo {}\n"

    def test_every_occurrence(self, patcher: ContentPatcher) -> None:
        src = b"require_once 'a.php';\n  require_once 'b.php';\nif ($x) { require_once 'c.php'; }"
        out = patcher.neutralize(src)
        assert out.count(b"//require_once") == 3
        assert patcher.count_active(out) == 0

    def test_adjacent_occurrences(self, patcher: ContentPatcher) -> None:
        assert patcher.neutralize(b"require_oncerequire_once") == b"//require_once//require_once"

    def test_start_and_end_offsets(self, patcher: ContentPatcher) -> None:
        assert patcher.neutralize(b"require_once") == b"//require_once"
        assert patcher.neutralize(b"x;require_once") == b"x;//require_once"

    def test_other_bytes_untouched(self, patcher: ContentPatcher) -> None:
        src = b"\x00\xffrequire_once\r\n\tfoo require_onc require_once\xe4\xb8\xad"
        out = patcher.neutralize(src)
        assert out.replace(b"//require_once", b"require_once") == src

    def test_no_directive_unchanged(self, patcher: ContentPatcher) -> None:
        src = b"<?php class Zend_Foo { public function require() {} }"
        assert patcher.neutralize(src) == src

    def test_already_commented_left_alone(self, patcher: ContentPatcher) -> None:
        src = b"//require_once 'a.php';\n"
        assert patcher.neutralize(src) == src

    @pytest.mark.parametrize("src", [
        b"",
        b"require_once",
        b"/require_once",
        b"///require_once",
        b"require_oncerequire_oncerequire_once",
        b"a require_once b //require_once c",
    ])
    def test_idempotent(self, patcher: ContentPatcher, src: bytes) -> None:
        once = patcher.neutralize(src)
        assert patcher.neutralize(once) == once


class TestCustomDirective:
    def test_python_style(self) -> None:
        patcher = ContentPatcher(directive="eager_include", comment_marker="# ")
        out = patcher.neutralize(b"eager_include('x')\nVALUE = 1\n")
        assert out == b"# eager_include('x')\nVALUE = 1\n"
        assert patcher.neutralize(out) == out

    def test_regex_metacharacters_are_literal(self) -> None:
        patcher = ContentPatcher(directive="inc(*)", comment_marker="--")
        assert patcher.neutralize(b"inc(*) incc") == b"--inc(*) incc"

    @pytest.mark.parametrize(("directive", "marker"), [("", "//"), ("require_once", "")])
    def test_empty_rejected(self, directive: str, marker: str) -> None:
        with pytest.raises(ValidationError):
            ContentPatcher(directive=directive, comment_marker=marker)


def test_count_active(patcher: ContentPatcher) -> None:
    assert patcher.count_active(b"require_once //require_once require_once") == 2
