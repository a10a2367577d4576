"""Tests for ConfigBuilder — validation, file opening, defaults."""

import io
import os

import pytest

from regexfilter.builder import STDIN_NAME, STDOUT_NAME, ConfigBuilder
from regexfilter.destinations import DISCARD, Destination
from regexfilter.errors import (
    ConfigurationError,
    DestinationOpenError,
    DuplicateOptionError,
    NoFiltersError,
    PatternCompileError,
    ResourceError,
    SourceOpenError,
)
from regexfilter.models import RemainderMode


class TestAddFilter:
    def test_entries_keep_order_and_positions(self, builder, tmp_path):
        builder.add_filter("^1", str(tmp_path / "a"))
        builder.add_filter("^2", str(tmp_path / "b"))
        builder.add_filter("^1", str(tmp_path / "c"))
        config = builder.finalize()
        assert [e.position for e in config.filters] == [1, 2, 3]
        assert [e.pattern.pattern for e in config.filters] == ["^1", "^2", "^1"]
        assert [e.destination.name for e in config.filters] == [
            str(tmp_path / "a"), str(tmp_path / "b"), str(tmp_path / "c"),
        ]

    def test_destination_created(self, builder, tmp_path):
        target = tmp_path / "out"
        builder.add_filter("x", str(target))
        assert target.exists()

    def test_destination_truncated(self, builder, tmp_path):
        target = tmp_path / "out"
        target.write_text("stale content\n")
        builder.add_filter("x", str(target))
        assert target.read_bytes() == b""

    def test_bad_pattern_reports_position_and_text(self, builder, tmp_path):
        builder.add_filter("ok", str(tmp_path / "a"))
        with pytest.raises(PatternCompileError) as exc_info:
            builder.add_filter("(unclosed", str(tmp_path / "b"))
        err = exc_info.value
        assert err.position == 2
        assert err.pattern == "(unclosed"
        assert "#2" in str(err)
        assert "(unclosed" in str(err)
        assert isinstance(err, ResourceError)

    def test_bad_pattern_opens_nothing(self, builder, tmp_path):
        with pytest.raises(PatternCompileError):
            builder.add_filter("[", str(tmp_path / "never"))
        assert not (tmp_path / "never").exists()

    def test_unopenable_destination(self, builder, tmp_path):
        target = str(tmp_path / "missing-dir" / "out")
        with pytest.raises(DestinationOpenError) as exc_info:
            builder.add_filter("x", target)
        err = exc_info.value
        assert err.position == 1
        assert err.target == target
        assert "No such file or directory" in str(err)
        with pytest.raises(NoFiltersError):
            builder.finalize()

    def test_same_path_shares_destination(self, builder, tmp_path):
        target = str(tmp_path / "shared")
        first = builder.add_filter("a", target)
        second = builder.add_filter("b", os.path.join(str(tmp_path), ".", "shared"))
        assert first.destination is second.destination

    def test_dash_is_standard_output(self, builder, stdout_buffer):
        entry = builder.add_filter("x", "-")
        assert entry.destination.stream is stdout_buffer
        assert entry.destination.name == STDOUT_NAME


class TestSetInput:
    def test_opens_file(self, builder, write_input, tmp_path):
        path = write_input(b"data\n")
        source = builder.set_input(path)
        assert source.name == path
        assert source.stream.read() == b"data\n"

    def test_duplicate(self, builder, write_input):
        path = write_input(b"")
        builder.set_input(path)
        with pytest.raises(DuplicateOptionError) as exc_info:
            builder.set_input(path)
        assert exc_info.value.option == "infile"
        assert isinstance(exc_info.value, ConfigurationError)

    def test_missing_file(self, builder, tmp_path):
        target = str(tmp_path / "nope")
        with pytest.raises(SourceOpenError) as exc_info:
            builder.set_input(target)
        assert exc_info.value.target == target
        assert "nope" in str(exc_info.value)

    def test_dash_is_standard_input(self):
        stdin = io.BytesIO(b"x\n")
        with ConfigBuilder(stdin=stdin, stdout=io.BytesIO()) as b:
            source = b.set_input("-")
        assert source.stream is stdin
        assert source.name == STDIN_NAME


class TestSetRemainder:
    def test_discard(self, builder, tmp_path):
        builder.add_filter("x", str(tmp_path / "a"))
        builder.set_remainder(RemainderMode.DISCARD)
        assert builder.finalize().remainder is DISCARD
        assert sorted(os.listdir(tmp_path)) == ["a"]

    def test_file(self, builder, tmp_path):
        builder.add_filter("x", str(tmp_path / "a"))
        remainder = builder.set_remainder(RemainderMode.FILE, str(tmp_path / "rest"))
        assert isinstance(remainder, Destination)
        assert (tmp_path / "rest").exists()
        assert builder.finalize().remainder is remainder

    def test_duplicate(self, builder):
        builder.set_remainder(RemainderMode.DISCARD)
        with pytest.raises(DuplicateOptionError) as exc_info:
            builder.set_remainder(RemainderMode.DISCARD)
        assert exc_info.value.option == "remainder"

    def test_unopenable_file(self, builder, tmp_path):
        with pytest.raises(DestinationOpenError) as exc_info:
            builder.set_remainder(RemainderMode.FILE, str(tmp_path / "x" / "y"))
        assert exc_info.value.position is None
        assert "remainder" in str(exc_info.value)


class TestFinalize:
    def test_no_filters(self, tmp_path):
        stdin = io.BytesIO(b"line\n")
        stdout = io.BytesIO()
        with ConfigBuilder(stdin=stdin, stdout=stdout) as b:
            with pytest.raises(NoFiltersError) as exc_info:
                b.finalize()
        assert isinstance(exc_info.value, ConfigurationError)
        assert stdin.tell() == 0
        assert stdout.getvalue() == b""

    def test_defaults(self, builder, stdout_buffer, tmp_path):
        builder.add_filter("x", str(tmp_path / "a"))
        config = builder.finalize()
        assert config.source.name == STDIN_NAME
        assert config.remainder.name == STDOUT_NAME
        assert config.remainder.stream is stdout_buffer

    def test_idempotent(self, builder, tmp_path):
        builder.add_filter("x", str(tmp_path / "a"))
        assert builder.finalize() == builder.finalize()

    def test_configuration_frozen(self, builder, tmp_path):
        builder.add_filter("x", str(tmp_path / "a"))
        config = builder.finalize()
        with pytest.raises(AttributeError):
            config.remainder = DISCARD


def test_close_releases_files(tmp_path):
    with ConfigBuilder(stdin=io.BytesIO(), stdout=io.BytesIO()) as b:
        entry = b.add_filter("x", str(tmp_path / "a"))
        source = b.set_input(str(tmp_path / "a"))
    assert entry.destination.stream.closed
    assert source.stream.closed


def test_close_leaves_standard_streams_open(tmp_path):
    stdout = io.BytesIO()
    with ConfigBuilder(stdin=io.BytesIO(), stdout=stdout) as b:
        b.add_filter("x", "-")
    assert not stdout.closed
