"""
Unit tests for JobMetrics and MetricsCollector
"""

import os
import json

from threadmr.coordinator.metrics import JobMetrics, MetricsCollector


class TestJobMetrics:
    """Tests for derived timings and serialization"""

    def _metrics(self):
        return JobMetrics(
            job_id='job-1',
            start_time=100.0,
            end_time=110.0,
            num_map_tasks=4,
            num_reduce_tasks=2,
            input_size_bytes=1024,
            map_phase_start=101.0,
            map_phase_end=105.0,
            shuffle_phase_start=105.0,
            shuffle_phase_end=106.5,
            reduce_phase_start=106.5,
            reduce_phase_end=109.0,
        )

    def test_phase_durations(self):
        metrics = self._metrics()

        assert metrics.total_time_seconds == 10.0
        assert metrics.map_phase_time_seconds == 4.0
        assert metrics.shuffle_phase_time_seconds == 1.5
        assert metrics.reduce_phase_time_seconds == 2.5

    def test_save_to_file(self, temp_dir):
        path = os.path.join(temp_dir, 'metrics.json')

        self._metrics().save_to_file(path)

        with open(path) as f:
            data = json.load(f)
        assert data['job_id'] == 'job-1'
        assert data['num_map_tasks'] == 4
        assert data['total_time_seconds'] == 10.0


class TestMetricsCollector:
    """Tests for the per-job collector"""

    def test_tracks_job_lifecycle(self, sample_input_file, temp_dir):
        collector = MetricsCollector()
        output_file = os.path.join(temp_dir, 'output_0.txt')
        with open(output_file, 'w') as f:
            f.write("abc\n")

        collector.start_job('job-1', 2, 1, sample_input_file)
        collector.start_map_phase('job-1')
        collector.end_map_phase('job-1', mapped_items=5)
        collector.start_shuffle_phase('job-1')
        collector.end_shuffle_phase('job-1', distinct_keys=5)
        collector.start_reduce_phase('job-1')
        collector.end_job('job-1', [output_file])

        metrics = collector.get_metrics('job-1')
        assert metrics.input_size_bytes == os.path.getsize(sample_input_file)
        assert metrics.mapped_items == 5
        assert metrics.distinct_keys == 5
        assert metrics.output_size_bytes == 4
        assert metrics.end_time >= metrics.reduce_phase_start >= metrics.map_phase_start
        assert metrics.peak_memory_bytes > 0

    def test_missing_input_counts_as_zero_bytes(self, temp_dir):
        collector = MetricsCollector()

        collector.start_job('job-2', 1, 1, os.path.join(temp_dir, 'missing.txt'))

        assert collector.get_metrics('job-2').input_size_bytes == 0

    def test_unknown_job(self):
        collector = MetricsCollector()

        collector.end_map_phase('nope', 3)

        assert collector.get_metrics('nope') is None
