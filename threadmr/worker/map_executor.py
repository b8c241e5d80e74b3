"""
Map Task Executor
Executes map tasks by reading one section of the input file and applying
the map function to every line in it
"""

import time
import logging
from typing import List

from threadmr.common.errors import InvalidArgumentError, FileAccessError
from threadmr.worker.functions import MapFunction

logger = logging.getLogger(__name__)


def map_section(path: str, start: int, end: int, map_fn: MapFunction) -> List[str]:
    """
    Apply map_fn to every line of the byte range [start, end)

    The position is checked between line reads, so a line that starts before
    end is always consumed in full.

    Args:
        path: Path to the input file
        start: Byte offset of the first line of the section
        end: Byte offset where the section stops
        map_fn: Callable mapping one line to an iterable of strings

    Returns:
        Mapped strings in emission order, duplicates kept

    Raises:
        InvalidArgumentError: If path is empty or map_fn is not callable
        FileAccessError: If the file cannot be opened or read
    """
    if not path or not callable(map_fn):
        raise InvalidArgumentError(f"Invalid argument: path={path!r}, map_fn={map_fn!r}")

    output = []
    try:
        with open(path, 'rb') as f:
            f.seek(start)
            while f.tell() < end:
                raw = f.readline()
                if not raw:
                    break
                if raw.endswith(b'\r\n'):
                    raw = raw[:-2]
                elif raw.endswith(b'\n'):
                    raw = raw[:-1]
                line = raw.decode('utf-8', errors='ignore')
                output.extend(map_fn(line))
    except OSError as e:
        raise FileAccessError(f"Can't open file: {path}") from e

    return output


class MapExecutor:
    """Executes a single map task"""

    def __init__(self, task_id: int, input_path: str, start_offset: int,
                 end_offset: int, map_fn: MapFunction):
        """
        Initialize the map executor

        Args:
            task_id: Index of the section this task maps
            input_path: Path to input file
            start_offset: Byte offset where this task should start reading
            end_offset: Byte offset where this task should stop reading
            map_fn: Map function applied to each line
        """
        self.task_id = task_id
        self.input_path = input_path
        self.start_offset = start_offset
        self.end_offset = end_offset
        self.map_fn = map_fn
        self.execution_time_ms = 0

    def execute(self) -> List[str]:
        """
        Execute the map task

        Returns:
            The mapped output of this section

        Raises:
            MapReduceError: Any failure, after logging it with the task id
        """
        start_time = time.time()
        logger.info(f"Map task {self.task_id}: Reading bytes "
                    f"[{self.start_offset}, {self.end_offset}) of {self.input_path}")

        try:
            output = map_section(self.input_path, self.start_offset,
                                 self.end_offset, self.map_fn)
        except Exception as e:
            self.execution_time_ms = int((time.time() - start_time) * 1000)
            logger.error(f"Map task {self.task_id} failed: {e}")
            raise

        self.execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Map task {self.task_id}: Generated {len(output)} items "
                    f"in {self.execution_time_ms}ms")
        return output
