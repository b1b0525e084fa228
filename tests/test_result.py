"""
Unit tests for the result boundary and the functional API helpers.
"""

import pytest

import domino
from domino.dom import Document
from domino.errors import RescuableFailure, UnwrapError
from domino.result import Err, Ok, fail, read_file, rescue


# ============================================================================
# OK / ERR TESTS
# ============================================================================


class TestResult:
    """Tests for the Ok and Err values."""

    def test_ok(self):
        result = Ok(3)

        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == 3
        assert result.unwrap_or(0) == 3
        assert result.map(lambda value: value + 1) == Ok(4)
        assert repr(result) == "Ok(3)"

    def test_err(self):
        result = Err("boom")

        assert result.is_err()
        assert result.unwrap_or(0) == 0
        assert result.map(lambda value: value + 1) is result
        assert repr(result) == "Err('boom')"
        with pytest.raises(UnwrapError):
            result.unwrap()

    def test_equality(self):
        assert Ok(1) == Ok(1)
        assert Ok(1) != Err(1)
        assert Err(None) == Err(None)
        assert len({Ok(1), Ok(1), Err(1)}) == 2


# ============================================================================
# RESCUE TESTS
# ============================================================================


class TestRescue:
    """Tests for rescue() and fail()."""

    def test_success(self):
        assert rescue(int, "12") == Ok(12)

    def test_passes_keyword_arguments(self):
        assert rescue(int, "ff", base=16) == Ok(255)

    def test_exception_becomes_message(self):
        assert rescue(fail, "boom") == Err("boom")

    def test_builtin_exception(self):
        result = rescue(int, "twelve")

        assert result == Err("invalid literal for int() with base 10: 'twelve'")

    def test_fail_raises(self):
        with pytest.raises(RescuableFailure, match="boom"):
            fail("boom")

    @pytest.mark.parametrize("exception", [KeyboardInterrupt, SystemExit])
    def test_base_exceptions_propagate(self, exception):
        def interrupted():
            raise exception()

        with pytest.raises(exception):
            rescue(interrupted)


# ============================================================================
# FILE TESTS
# ============================================================================


class TestReadFile:
    """Tests for read_file() and load_file()."""

    def test_reads_bytes(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_bytes(b"<p>hi</p>")

        assert read_file(str(path)) == Ok(b"<p>hi</p>")

    def test_missing_file(self, tmp_path):
        assert read_file(str(tmp_path / "missing.html")) == Err(None)

    def test_directory(self, tmp_path):
        assert read_file(str(tmp_path)) == Err(None)

    def test_load_file(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_bytes('<meta charset="utf-8"><p class="a">héllo</p>'.encode("utf-8"))

        result = domino.load_file(str(path))

        assert result.is_ok()
        assert isinstance(result.unwrap(), Document)
        assert domino.text(domino.select(result.unwrap(), "p.a")) == "héllo"

    def test_load_missing_file(self, tmp_path):
        assert domino.load_file(str(tmp_path / "missing.html")) == Err(None)


# ============================================================================
# TRY_SELECT TESTS
# ============================================================================


class TestTrySelect:
    """Tests for try_select()."""

    def test_valid_selector(self, simple_doc):
        result = domino.try_select(simple_doc, "p")

        assert result.is_ok()
        assert domino.length(result.unwrap()) == 2

    def test_invalid_selector(self, simple_doc):
        result = domino.try_select(simple_doc, ">>invalid<<")

        assert result.is_err()
        assert result.error.startswith("Invalid selector '>>invalid<<'")

    def test_select_rejects_unknown_scope(self):
        with pytest.raises(TypeError):
            domino.select("<p>not parsed</p>", "p")
