"""
Job Manager for the MapReduce pipeline
Drives a job through sectioning, mapping, shuffling and reducing, and keeps
track of job and task state
"""

import os
import time
import uuid
import logging
import threading
from enum import Enum
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from threadmr.common.config import PipelineConfig
from threadmr.common.errors import (InvalidArgumentError, FileAccessError,
                                    StageFailedError)
from threadmr.coordinator.metrics import JobMetrics, MetricsCollector
from threadmr.coordinator.sectioner import compute_sections, sections_from_offsets
from threadmr.coordinator.shuffle import shuffle
from threadmr.worker.functions import MapFunction, ReduceFunction, identity_map, identity_reduce
from threadmr.worker.map_executor import MapExecutor
from threadmr.worker.reduce_executor import ReduceExecutor

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """Status of a MapReduce job"""
    PENDING = "pending"
    SECTIONING = "sectioning"
    MAPPING = "mapping"
    SHUFFLING = "shuffling"
    REDUCING = "reducing"
    COMPLETED = "completed"
    FAILED = "failed"


class TaskStatus(Enum):
    """Status of individual map or reduce tasks"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class MapTask:
    """Represents a single map task"""
    task_id: int
    input_path: str
    start_offset: int
    end_offset: int
    status: TaskStatus = TaskStatus.PENDING
    error_message: str = ""
    execution_time_ms: int = 0
    item_count: int = 0


@dataclass
class ReduceTask:
    """Represents a single reduce task"""
    task_id: int
    output_path: str
    bucket_size: int = 0
    status: TaskStatus = TaskStatus.PENDING
    error_message: str = ""
    execution_time_ms: int = 0
    output_lines: int = 0


@dataclass
class Job:
    """Represents a complete MapReduce job"""
    job_id: str
    input_path: str
    num_map_tasks: int
    num_reduce_tasks: int
    status: JobStatus = JobStatus.PENDING
    section_offsets: List[int] = field(default_factory=list)
    map_tasks: List[MapTask] = field(default_factory=list)
    reduce_tasks: List[ReduceTask] = field(default_factory=list)
    output_files: List[str] = field(default_factory=list)
    error_message: str = ""
    start_time: float = 0.0
    end_time: float = 0.0
    metrics: Optional[JobMetrics] = None


class JobManager:
    """Runs MapReduce jobs on worker threads and tracks their lifecycle"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.jobs: Dict[str, Job] = {}
        self.lock = threading.Lock()
        self.metrics = MetricsCollector()

    def create_job(self, input_path: str, num_map_tasks: int, num_reduce_tasks: int,
                   job_id: Optional[str] = None) -> Job:
        """
        Register a new job

        Raises:
            InvalidArgumentError: If input_path is unset or either task count
                is not a positive integer
        """
        if not input_path or not isinstance(input_path, str):
            raise InvalidArgumentError(f"Invalid argument: input_path={input_path!r}")
        for name, count in (('num_map_tasks', num_map_tasks),
                            ('num_reduce_tasks', num_reduce_tasks)):
            if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
                raise InvalidArgumentError(f"Invalid argument: {name}={count!r}")

        with self.lock:
            job = Job(
                job_id=job_id or str(uuid.uuid4()),
                input_path=input_path,
                num_map_tasks=num_map_tasks,
                num_reduce_tasks=num_reduce_tasks,
                start_time=time.time()
            )
            self.jobs[job.job_id] = job
            return job

    def generate_map_tasks(self, job: Job) -> List[MapTask]:
        """Split the input file into M line-aligned map tasks"""
        job.section_offsets = compute_sections(job.input_path, job.num_map_tasks)

        job.map_tasks = [
            MapTask(
                task_id=section.index,
                input_path=job.input_path,
                start_offset=section.start,
                end_offset=section.end
            )
            for section in sections_from_offsets(job.section_offsets)
        ]
        return job.map_tasks

    def generate_reduce_tasks(self, job: Job, buckets: List[List[str]]) -> List[ReduceTask]:
        """Create one reduce task per bucket with its output artifact path"""
        job.reduce_tasks = [
            ReduceTask(
                task_id=index,
                output_path=self.config.output_path(index),
                bucket_size=len(bucket)
            )
            for index, bucket in enumerate(buckets)
        ]
        return job.reduce_tasks

    def run_job(self, input_path: str, num_map_tasks: int, num_reduce_tasks: int,
                map_fn: MapFunction = identity_map,
                reduce_fn: ReduceFunction = identity_reduce,
                job_id: Optional[str] = None) -> Job:
        """
        Run a complete job: section, map, shuffle, reduce

        Args:
            input_path: Newline-delimited text file to process
            num_map_tasks: Number of sections, one map worker each
            num_reduce_tasks: Number of buckets, one reduce worker and one artifact each
            map_fn: Function applied to every input line
            reduce_fn: Function applied to every bucket
            job_id: Optional job identifier (generated when omitted)

        Returns:
            The completed Job

        Raises:
            InvalidArgumentError: On bad counts or functions, before any work starts
            MapReduceError: On any stage failure; the job is left in FAILED state
        """
        if not callable(map_fn) or not callable(reduce_fn):
            raise InvalidArgumentError(
                f"Invalid argument: map_fn={map_fn!r}, reduce_fn={reduce_fn!r}")

        job = self.create_job(input_path, num_map_tasks, num_reduce_tasks, job_id)

        try:
            self.metrics.start_job(job.job_id, num_map_tasks, num_reduce_tasks, input_path)
            job.metrics = self.metrics.get_metrics(job.job_id)

            self._set_status(job, JobStatus.SECTIONING)
            map_tasks = self.generate_map_tasks(job)

            self._set_status(job, JobStatus.MAPPING)
            self.metrics.start_map_phase(job.job_id)
            executors = [
                MapExecutor(task.task_id, task.input_path, task.start_offset,
                            task.end_offset, map_fn)
                for task in map_tasks
            ]
            mapper_outputs = self._run_phase(job, "map", map_tasks, executors)
            for task, output in zip(map_tasks, mapper_outputs):
                task.item_count = len(output)
            self.metrics.end_map_phase(job.job_id, sum(len(o) for o in mapper_outputs))

            self._set_status(job, JobStatus.SHUFFLING)
            self.metrics.start_shuffle_phase(job.job_id)
            buckets = shuffle(mapper_outputs, num_reduce_tasks)
            self.metrics.end_shuffle_phase(job.job_id, len(set().union(*buckets)))

            self._set_status(job, JobStatus.REDUCING)
            self.metrics.start_reduce_phase(job.job_id)
            try:
                os.makedirs(self.config.output_dir, exist_ok=True)
            except OSError as e:
                raise FileAccessError(
                    f"Can't create output directory: {self.config.output_dir}") from e
            reduce_tasks = self.generate_reduce_tasks(job, buckets)
            executors = [
                ReduceExecutor(task.task_id, bucket, reduce_fn, task.output_path)
                for task, bucket in zip(reduce_tasks, buckets)
            ]
            reduced = self._run_phase(job, "reduce", reduce_tasks, executors)
            for task, output in zip(reduce_tasks, reduced):
                task.output_lines = len(output)

        except Exception as e:
            self._fail(job, e)
            raise

        job.output_files = [task.output_path for task in job.reduce_tasks]
        job.end_time = time.time()
        self.metrics.end_job(job.job_id, job.output_files)
        self._set_status(job, JobStatus.COMPLETED)
        return job

    def _run_phase(self, job: Job, stage: str, tasks: list, executors: list) -> list:
        """
        Run one executor per task on its own thread and wait for all of them

        Results are placed by task index. Every worker is joined before any
        result is read; if any worker failed, StageFailedError reports all of
        them.
        """
        logger.info(f"Job {job.job_id}: Starting {stage} phase with {len(tasks)} tasks")

        with ThreadPoolExecutor(max_workers=len(executors),
                                thread_name_prefix=f"{stage}-worker") as pool:
            futures = [pool.submit(self._run_task, task, executor)
                       for task, executor in zip(tasks, executors)]
            wait(futures)

        results = [None] * len(tasks)
        failures = {}
        for task, future in zip(tasks, futures):
            error = future.exception()
            if error is not None:
                failures[task.task_id] = error
            else:
                results[task.task_id] = future.result()

        if failures:
            raise StageFailedError(stage, failures) from failures[min(failures)]

        logger.info(f"Job {job.job_id}: {stage} phase completed")
        return results

    @staticmethod
    def _run_task(task, executor) -> list:
        task.status = TaskStatus.RUNNING
        try:
            result = executor.execute()
        except Exception as e:
            task.status = TaskStatus.FAILED
            task.error_message = str(e)
            raise
        finally:
            task.execution_time_ms = executor.execution_time_ms
        task.status = TaskStatus.COMPLETED
        return result

    def _set_status(self, job: Job, status: JobStatus):
        with self.lock:
            job.status = status
        logger.info(f"Job {job.job_id}: {status.value}")

    def _fail(self, job: Job, error: Exception):
        with self.lock:
            job.status = JobStatus.FAILED
            job.error_message = str(error)
            job.end_time = time.time()
        self.metrics.end_job(job.job_id, [])
        logger.error(f"Job {job.job_id} failed: {error}")

    def get_job(self, job_id: str) -> Optional[Job]:
        with self.lock:
            return self.jobs.get(job_id)

    def remove_job(self, job_id: str) -> Optional[Job]:
        """
        Forget a finished job and its metrics

        Jobs are kept until removed, so long-lived managers should call this
        once a job's results have been read.
        """
        with self.lock:
            job = self.jobs.pop(job_id, None)
        self.metrics.remove_job(job_id)
        return job

    def get_job_status(self, job_id: str) -> Optional[Dict]:
        """Get current job status with progress"""
        with self.lock:
            job = self.jobs.get(job_id)
            if not job:
                return None

            map_completed = sum(1 for t in job.map_tasks if t.status == TaskStatus.COMPLETED)
            reduce_completed = sum(1 for t in job.reduce_tasks
                                   if t.status == TaskStatus.COMPLETED)
            total_tasks = job.num_map_tasks + job.num_reduce_tasks
            progress = int((map_completed + reduce_completed) / total_tasks * 100)

            return {
                'status': job.status.value,
                'progress': progress,
                'map_completed': map_completed,
                'map_total': job.num_map_tasks,
                'reduce_completed': reduce_completed,
                'reduce_total': job.num_reduce_tasks,
                'error_message': job.error_message
            }
