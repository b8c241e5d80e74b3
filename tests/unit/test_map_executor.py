"""
Unit tests for MapExecutor and map_section
"""

import os
import logging
import pytest

from threadmr.common.errors import InvalidArgumentError, FileAccessError
from threadmr.coordinator.sectioner import compute_sections
from threadmr.worker.functions import identity_map
from threadmr.worker.map_executor import MapExecutor, map_section


class TestMapSectionReading:
    """Tests for reading a section"""

    def test_reads_full_file_when_offsets_cover_entire_file(self, sample_input_file):
        """Test reading entire file"""
        file_size = os.path.getsize(sample_input_file)

        output = map_section(sample_input_file, 0, file_size, identity_map)

        assert len(output) == 5  # 5 lines in sample text
        assert output[0] == "The quick brown fox jumps over the lazy dog."
        assert output[-1] == "Lazy dogs sleep all day."

    def test_reads_partial_file_split(self, sample_input_file):
        """Test reading partial file with offsets"""
        offsets = compute_sections(sample_input_file, 2)

        first = map_section(sample_input_file, offsets[0], offsets[1], identity_map)

        # Should read at least one line but not all
        assert 0 < len(first) < 5

    def test_sections_cover_every_line_once(self, sample_input_file, sample_text):
        """Concatenated section outputs equal the input lines"""
        expected = sample_text.splitlines()

        for n in (1, 2, 3, 5, 8):
            offsets = compute_sections(sample_input_file, n)
            combined = []
            for start, end in zip(offsets, offsets[1:]):
                combined.extend(map_section(sample_input_file, start, end, identity_map))
            assert combined == expected

    def test_empty_range_returns_empty_list(self, sample_input_file):
        """Test handling of an empty section"""
        assert map_section(sample_input_file, 10, 10, identity_map) == []

    def test_line_crossing_end_is_consumed_whole(self, write_lines):
        """The end check happens between reads"""
        path = write_lines(["abc", "def"])

        assert map_section(path, 0, 1, identity_map) == ["abc"]

    def test_strips_crlf_terminators(self, temp_dir):
        path = os.path.join(temp_dir, 'crlf.txt')
        with open(path, 'wb') as f:
            f.write(b"one\r\ntwo\r\n")

        assert map_section(path, 0, 10, identity_map) == ["one", "two"]

    def test_keeps_empty_lines(self, write_lines):
        path = write_lines(["a", "", "b"])

        assert map_section(path, 0, os.path.getsize(path), identity_map) == ["a", "", "b"]

    def test_reads_past_end_offset_stops_at_eof(self, write_lines):
        path = write_lines(["only"])

        assert map_section(path, 0, 1000, identity_map) == ["only"]


class TestMapFunctionApplication:
    """Tests for how map function results are collected"""

    def test_zero_or_many_outputs_per_line(self, write_lines):
        """A line can map to no strings or to several"""
        path = write_lines(["a b c", "", "d"])

        output = map_section(path, 0, os.path.getsize(path), lambda line: line.split())

        assert output == ["a", "b", "c", "d"]

    def test_generator_map_function(self, write_lines):
        path = write_lines(["x", "y"])

        def twice(line):
            yield line
            yield line

        assert map_section(path, 0, os.path.getsize(path), twice) == ["x", "x", "y", "y"]

    def test_duplicates_are_retained(self, write_lines):
        path = write_lines(["a", "a", "a"])

        assert map_section(path, 0, os.path.getsize(path), identity_map) == ["a", "a", "a"]

    def test_map_function_errors_propagate(self, sample_input_file):
        def broken(line):
            raise RuntimeError("bad line")

        with pytest.raises(RuntimeError, match="bad line"):
            map_section(sample_input_file, 0, 10, broken)


class TestMapSectionErrors:
    """Tests for argument validation"""

    def test_empty_path(self):
        with pytest.raises(InvalidArgumentError):
            map_section('', 0, 10, identity_map)

    @pytest.mark.parametrize('map_fn', [None, "not callable"])
    def test_unset_map_function(self, sample_input_file, map_fn):
        with pytest.raises(InvalidArgumentError):
            map_section(sample_input_file, 0, 10, map_fn)

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileAccessError):
            map_section(os.path.join(temp_dir, 'missing.txt'), 0, 10, identity_map)


class TestMapExecutor:
    """Tests for the task wrapper"""

    def test_execute_returns_mapped_output(self, sample_input_file):
        executor = MapExecutor(
            task_id=0,
            input_path=sample_input_file,
            start_offset=0,
            end_offset=os.path.getsize(sample_input_file),
            map_fn=identity_map
        )

        output = executor.execute()

        assert len(output) == 5
        assert executor.execution_time_ms >= 0

    def test_execute_logs_and_reraises_failures(self, temp_dir, caplog):
        executor = MapExecutor(
            task_id=3,
            input_path=os.path.join(temp_dir, 'missing.txt'),
            start_offset=0,
            end_offset=10,
            map_fn=identity_map
        )

        with caplog.at_level(logging.ERROR):
            with pytest.raises(FileAccessError):
                executor.execute()

        assert "Map task 3 failed" in caplog.text
