"""
Error kinds raised by the MapReduce pipeline
"""


class MapReduceError(Exception):
    """Base class for every pipeline failure"""


class InvalidArgumentError(MapReduceError, ValueError):
    """Malformed call parameters: empty path, non-positive count, unset function"""


class FileAccessError(MapReduceError, OSError):
    """Open, read or write failure on the input file or an output artifact"""


class EmptyInputError(MapReduceError):
    """The input file has zero bytes"""


class StageFailedError(MapReduceError):
    """One or more workers of a pipeline stage failed"""

    def __init__(self, stage: str, failures: dict):
        """
        Args:
            stage: Name of the stage whose barrier observed the failures
            failures: Mapping of task_id to the exception that task raised
        """
        self.stage = stage
        self.failures = failures
        details = "; ".join(f"task {task_id}: {error}"
                            for task_id, error in sorted(failures.items()))
        super().__init__(f"{stage} stage failed ({len(failures)} task(s)): {details}")
