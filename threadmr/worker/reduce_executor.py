"""
Reduce Task Executor
Executes reduce tasks by applying the reduce function to one bucket and
writing the result to that reducer's output artifact
"""

import os
import time
import logging
import tempfile
from typing import List

from threadmr.common.errors import InvalidArgumentError, FileAccessError
from threadmr.worker.functions import ReduceFunction

logger = logging.getLogger(__name__)


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once at import; os.umask can only be queried by setting it
ARTIFACT_MODE = 0o666 & ~_read_umask()


def write_artifact(output_path: str, lines: List[str]):
    """
    Write lines to output_path, one per line, replacing any existing file

    The content goes to a temporary file next to the target which is then
    renamed over it, so readers never see a partially written artifact. The
    artifact gets the same permissions a plain open() would give it.

    Raises:
        FileAccessError: If the artifact cannot be created or written
    """
    directory = os.path.dirname(os.path.abspath(output_path))
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=directory,
                                         prefix='.tmp-', suffix='.txt',
                                         delete=False) as f:
            tmp_path = f.name
            for line in lines:
                f.write(f"{line}\n")
        os.chmod(tmp_path, ARTIFACT_MODE)
        os.replace(tmp_path, output_path)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise FileAccessError(f"Can't open file: {output_path}") from e


def reduce_bucket(bucket: List[str], reduce_fn: ReduceFunction, output_path: str) -> List[str]:
    """
    Reduce one bucket and persist the result

    Args:
        bucket: Items assigned to this reducer
        reduce_fn: Callable mapping the whole bucket to an iterable of strings
        output_path: Path of the artifact to write

    Returns:
        The reduced strings, in the order they were written

    Raises:
        InvalidArgumentError: If bucket is empty, reduce_fn is not callable or output_path is empty
        FileAccessError: If the artifact cannot be written
    """
    if not bucket or not callable(reduce_fn) or not output_path:
        raise InvalidArgumentError(
            f"Invalid argument: bucket size={len(bucket) if bucket else 0}, "
            f"reduce_fn={reduce_fn!r}, output_path={output_path!r}")

    reduced = list(reduce_fn(bucket))
    write_artifact(output_path, reduced)
    return reduced


class ReduceExecutor:
    """Executes a single reduce task"""

    def __init__(self, task_id: int, bucket: List[str], reduce_fn: ReduceFunction,
                 output_path: str):
        """
        Initialize the reduce executor

        Args:
            task_id: Index of the bucket this task reduces
            bucket: Items assigned to this reducer by the shuffle
            reduce_fn: Reduce function applied to the bucket
            output_path: Path of the artifact this task writes
        """
        self.task_id = task_id
        self.bucket = bucket
        self.reduce_fn = reduce_fn
        self.output_path = output_path
        self.execution_time_ms = 0

    def execute(self) -> List[str]:
        """
        Execute the reduce task

        A bucket that received no keys still yields an (empty) artifact so
        that every reducer index has an output file.

        Returns:
            The reduced output written to the artifact
        """
        start_time = time.time()
        logger.info(f"Reduce task {self.task_id}: Reducing {len(self.bucket)} items")

        try:
            if self.bucket:
                reduced = reduce_bucket(self.bucket, self.reduce_fn, self.output_path)
            else:
                logger.warning(f"Reduce task {self.task_id}: Empty bucket, "
                               f"writing empty output")
                if not self.output_path:
                    raise InvalidArgumentError("Invalid argument: output_path is empty")
                reduced = []
                write_artifact(self.output_path, reduced)
        except Exception as e:
            self.execution_time_ms = int((time.time() - start_time) * 1000)
            logger.error(f"Reduce task {self.task_id} failed: {e}")
            raise

        self.execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Reduce task {self.task_id}: Wrote {len(reduced)} lines "
                    f"to {self.output_path} in {self.execution_time_ms}ms")
        return reduced
