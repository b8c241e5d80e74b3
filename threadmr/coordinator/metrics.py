"""
Performance metrics collection for MapReduce jobs.
"""

import os
import time
import json
from dataclasses import dataclass, asdict
from typing import List, Optional

import psutil


@dataclass
class JobMetrics:
    """Metrics for a single MapReduce job execution."""

    job_id: str
    start_time: float
    num_map_tasks: int
    num_reduce_tasks: int
    input_size_bytes: int
    end_time: float = 0.0
    sectioning_start: float = 0.0
    sectioning_end: float = 0.0
    map_phase_start: float = 0.0
    map_phase_end: float = 0.0
    shuffle_phase_start: float = 0.0
    shuffle_phase_end: float = 0.0
    reduce_phase_start: float = 0.0
    reduce_phase_end: float = 0.0
    mapped_items: int = 0
    distinct_keys: int = 0
    output_size_bytes: int = 0
    peak_memory_bytes: int = 0

    @property
    def total_time_seconds(self) -> float:
        """Total job execution time in seconds."""
        return self.end_time - self.start_time

    @property
    def map_phase_time_seconds(self) -> float:
        """Map phase execution time in seconds."""
        return self.map_phase_end - self.map_phase_start

    @property
    def shuffle_phase_time_seconds(self) -> float:
        return self.shuffle_phase_end - self.shuffle_phase_start

    @property
    def reduce_phase_time_seconds(self) -> float:
        """Reduce phase execution time in seconds."""
        return self.reduce_phase_end - self.reduce_phase_start

    def to_dict(self) -> dict:
        """Convert metrics to dictionary."""
        data = asdict(self)
        data['total_time_seconds'] = self.total_time_seconds
        data['map_phase_time_seconds'] = self.map_phase_time_seconds
        data['shuffle_phase_time_seconds'] = self.shuffle_phase_time_seconds
        data['reduce_phase_time_seconds'] = self.reduce_phase_time_seconds
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


class MetricsCollector:
    """Collects and manages metrics for MapReduce jobs."""

    def __init__(self):
        self.job_metrics = {}
        self.process = psutil.Process()

    def _sample_memory(self, job_id: str):
        rss = self.process.memory_info().rss
        metrics = self.job_metrics[job_id]
        metrics.peak_memory_bytes = max(metrics.peak_memory_bytes, rss)

    def start_job(self, job_id: str, num_map_tasks: int, num_reduce_tasks: int,
                  input_path: str):
        """Initialize metrics tracking for a new job."""
        input_size = os.path.getsize(input_path) if os.path.exists(input_path) else 0

        now = time.time()
        self.job_metrics[job_id] = JobMetrics(
            job_id=job_id,
            start_time=now,
            sectioning_start=now,
            num_map_tasks=num_map_tasks,
            num_reduce_tasks=num_reduce_tasks,
            input_size_bytes=input_size,
        )
        self._sample_memory(job_id)

    def start_map_phase(self, job_id: str):
        """Mark the end of sectioning and the start of the map phase."""
        if job_id in self.job_metrics:
            now = time.time()
            self.job_metrics[job_id].sectioning_end = now
            self.job_metrics[job_id].map_phase_start = now

    def end_map_phase(self, job_id: str, mapped_items: int):
        """Mark the end of the map phase."""
        if job_id in self.job_metrics:
            self.job_metrics[job_id].map_phase_end = time.time()
            self.job_metrics[job_id].mapped_items = mapped_items
            self._sample_memory(job_id)

    def start_shuffle_phase(self, job_id: str):
        if job_id in self.job_metrics:
            self.job_metrics[job_id].shuffle_phase_start = time.time()

    def end_shuffle_phase(self, job_id: str, distinct_keys: int):
        if job_id in self.job_metrics:
            self.job_metrics[job_id].shuffle_phase_end = time.time()
            self.job_metrics[job_id].distinct_keys = distinct_keys
            self._sample_memory(job_id)

    def start_reduce_phase(self, job_id: str):
        """Mark the start of the reduce phase."""
        if job_id in self.job_metrics:
            self.job_metrics[job_id].reduce_phase_start = time.time()

    def end_job(self, job_id: str, output_files: List[str]):
        """Mark job completion and calculate output size."""
        if job_id in self.job_metrics:
            now = time.time()
            metrics = self.job_metrics[job_id]
            if metrics.reduce_phase_start and not metrics.reduce_phase_end:
                metrics.reduce_phase_end = now
            metrics.end_time = now
            metrics.output_size_bytes = sum(os.path.getsize(f) for f in output_files
                                            if os.path.exists(f))
            self._sample_memory(job_id)

    def get_metrics(self, job_id: str) -> Optional[JobMetrics]:
        """Retrieve metrics for a specific job."""
        return self.job_metrics.get(job_id)

    def remove_job(self, job_id: str) -> Optional[JobMetrics]:
        """Stop tracking a job and return its final metrics."""
        return self.job_metrics.pop(job_id, None)
