"""Formatting helpers for reporting job progress and results."""

from typing import List

from threadmr.coordinator.job_manager import Job, JobStatus, TaskStatus


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable string."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds / 60)
    seconds = seconds % 60
    if minutes < 60:
        return f"{minutes}m {seconds:.1f}s"
    hours = int(minutes / 60)
    minutes = minutes % 60
    return f"{hours}h {minutes}m {seconds:.1f}s"


def format_size(size_bytes: float) -> str:
    """Format bytes into human-readable size."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} TB"


def format_progress_bar(completed: int, total: int, width: int = 40) -> str:
    """Create a progress bar string."""
    percentage = (completed / total) if total > 0 else 0
    filled = int(width * percentage)
    bar = "█" * filled + "░" * (width - filled)
    return f"[{bar}] {percentage:.1%}"


def format_job_summary(job: Job) -> List[str]:
    """Lines describing a finished (or failed) job."""
    lines = [
        f"Job ID: {job.job_id}",
        f"Status: {job.status.value.upper()}",
    ]
    if job.end_time:
        lines.append(f"Runtime: {format_duration(job.end_time - job.start_time)}")

    map_done = sum(1 for t in job.map_tasks if t.status == TaskStatus.COMPLETED)
    reduce_done = sum(1 for t in job.reduce_tasks if t.status == TaskStatus.COMPLETED)
    lines.append(f"Map tasks:    {format_progress_bar(map_done, job.num_map_tasks)}")
    lines.append(f"Reduce tasks: {format_progress_bar(reduce_done, job.num_reduce_tasks)}")

    metrics = job.metrics
    if metrics and job.status == JobStatus.COMPLETED:
        lines.append(f"Input: {format_size(metrics.input_size_bytes)}, "
                     f"{metrics.mapped_items} mapped items, "
                     f"{metrics.distinct_keys} distinct keys")
        lines.append(f"Phases: map {format_duration(metrics.map_phase_time_seconds)}, "
                     f"shuffle {format_duration(metrics.shuffle_phase_time_seconds)}, "
                     f"reduce {format_duration(metrics.reduce_phase_time_seconds)}")
        lines.append(f"Peak memory: {format_size(metrics.peak_memory_bytes)}")

    if job.output_files:
        lines.append("Output files:")
        lines.extend(f"  {path}" for path in job.output_files)

    if job.error_message:
        lines.append("Errors:")
        lines.append(f"  {job.error_message}")
    return lines
