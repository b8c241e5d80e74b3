"""
End-to-end tests for the threaded MapReduce pipeline
Runs complete jobs and checks the properties of the output artifacts
"""

import os
import sys
import random
import filecmp
import subprocess
from collections import Counter

import pytest

from threadmr.common.config import PipelineConfig
from threadmr.coordinator.job_manager import JobManager
from threadmr.coordinator.sectioner import compute_sections
from threadmr.coordinator.shuffle import shuffle
from threadmr.worker.functions import identity_map
from threadmr.worker.map_executor import map_section

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def random_lines():
    """Two thousand lines over a small vocabulary, with many repeats"""
    rng = random.Random(42)
    words = ["alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta", ""]
    return [" ".join(rng.choice(words) for _ in range(rng.randint(1, 3))).strip()
            for _ in range(2000)]


def _read_all_outputs(paths):
    lines = []
    for path in paths:
        with open(path, encoding='utf-8') as f:
            lines.extend(f.read().splitlines())
    return lines


@pytest.mark.integration
class TestPipelineProperties:
    """Coverage, partitioning, round trip and determinism"""

    @pytest.mark.parametrize('num_maps,num_reduces', [(1, 1), (2, 2), (3, 5), (8, 3), (16, 16)])
    def test_identity_round_trip(self, write_lines, random_lines, temp_dir, num_maps, num_reduces):
        """Multiset of output lines equals multiset of input lines"""
        path = write_lines(random_lines)
        output_dir = os.path.join(temp_dir, f"out-{num_maps}-{num_reduces}")

        job = JobManager(PipelineConfig(output_dir=output_dir)).run_job(
            path, num_maps, num_reduces)

        assert len(job.output_files) == num_reduces
        assert all(os.path.exists(p) for p in job.output_files)
        assert Counter(_read_all_outputs(job.output_files)) == Counter(random_lines)

    def test_mapper_outputs_cover_every_line(self, write_lines, random_lines):
        path = write_lines(random_lines)

        for num_maps in (1, 4, 7, 13):
            offsets = compute_sections(path, num_maps)
            outputs = [map_section(path, start, end, identity_map)
                       for start, end in zip(offsets, offsets[1:])]
            assert sum(len(o) for o in outputs) == len(random_lines)
            assert [line for o in outputs for line in o] == random_lines

    def test_each_key_lives_in_one_output_file(self, write_lines, random_lines, temp_dir):
        path = write_lines(random_lines)

        job = JobManager(PipelineConfig(output_dir=temp_dir)).run_job(path, 4, 3)

        owners = {}
        for index, output in enumerate(job.output_files):
            with open(output, encoding='utf-8') as f:
                for line in f.read().splitlines():
                    assert owners.setdefault(line, index) == index

    def test_bucket_sizes_sum_to_mapped_items(self, write_lines, random_lines):
        path = write_lines(random_lines)
        offsets = compute_sections(path, 5)
        outputs = [map_section(path, start, end, identity_map)
                   for start, end in zip(offsets, offsets[1:])]

        buckets = shuffle(outputs, 4)

        assert sum(len(b) for b in buckets) == sum(len(o) for o in outputs)

    def test_repeated_runs_are_byte_identical(self, write_lines, random_lines, temp_dir):
        path = write_lines(random_lines)
        first_dir = os.path.join(temp_dir, 'first')
        second_dir = os.path.join(temp_dir, 'second')

        first = JobManager(PipelineConfig(output_dir=first_dir)).run_job(path, 6, 4)
        second = JobManager(PipelineConfig(output_dir=second_dir)).run_job(path, 6, 4)

        assert first.section_offsets == second.section_offsets
        names = [os.path.basename(p) for p in first.output_files]
        match, mismatch, errors = filecmp.cmpfiles(first_dir, second_dir, names, shallow=False)
        assert match == names
        assert mismatch == [] and errors == []

    def test_rerun_overwrites_previous_outputs(self, write_lines, temp_dir):
        manager = JobManager(PipelineConfig(output_dir=temp_dir))
        manager.run_job(write_lines(["old", "old"], name='old.txt'), 1, 1)

        manager.run_job(write_lines(["new"], name='new.txt'), 1, 1)

        with open(os.path.join(temp_dir, 'output_0.txt')) as f:
            assert f.read() == "new\n"


@pytest.mark.integration
class TestScenarios:
    """Concrete scenarios with known answers"""

    def test_two_by_two_scenario(self, write_lines, temp_dir):
        path = write_lines(["a", "b", "a", "c"])

        job = JobManager(PipelineConfig(output_dir=temp_dir)).run_job(path, 2, 2)

        assert [t.item_count for t in job.map_tasks] == [2, 2]
        assert _read_all_outputs([job.output_files[0]]) == ["a", "a", "c"]
        assert _read_all_outputs([job.output_files[1]]) == ["b"]

    def test_wordcount_example(self, write_lines, temp_dir):
        """The example job counts words across reducers"""
        sys.path.insert(0, os.path.join(PROJECT_ROOT, 'examples'))
        try:
            import wordcount
        finally:
            sys.path.pop(0)

        path = write_lines(["the quick brown fox", "the lazy dog", "the fox"])

        job = JobManager(PipelineConfig(output_dir=temp_dir)).run_job(
            path, 2, 2, map_fn=wordcount.map_function, reduce_fn=wordcount.reduce_function)

        counts = dict(line.split("\t") for line in _read_all_outputs(job.output_files))
        assert counts == {'the': '3', 'quick': '1', 'brown': '1',
                          'fox': '2', 'lazy': '1', 'dog': '1'}


@pytest.mark.integration
class TestCommandLine:
    """Runs the CLI in a separate process"""

    def _run(self, args, cwd):
        env = dict(os.environ)
        env['PYTHONPATH'] = PROJECT_ROOT + os.pathsep + env.get('PYTHONPATH', '')
        return subprocess.run([sys.executable, '-m', 'threadmr.client.client'] + args,
                              capture_output=True, text=True, cwd=cwd, env=env)

    def test_writes_outputs_to_working_directory(self, write_lines, temp_dir):
        path = write_lines(["a", "b", "a", "c"])

        result = self._run([path, '2', '2'], cwd=temp_dir)

        assert result.returncode == 0, result.stderr
        with open(os.path.join(temp_dir, 'output_0.txt')) as f:
            assert f.read() == "a\na\nc\n"
        with open(os.path.join(temp_dir, 'output_1.txt')) as f:
            assert f.read() == "b\n"

    def test_usage_on_wrong_argument_count(self, temp_dir):
        result = self._run(['only-one-arg'], cwd=temp_dir)

        assert result.returncode != 0
        assert 'usage:' in result.stdout

    def test_failure_exit_code(self, empty_input_file, temp_dir):
        result = self._run([empty_input_file, '2', '2'], cwd=temp_dir)

        assert result.returncode == 1
        assert 'File is empty' in result.stderr
        assert not os.path.exists(os.path.join(temp_dir, 'output_0.txt'))
