"""
Pipeline configuration read from the environment
"""

import os
import logging
from dataclasses import dataclass

from threadmr.common.errors import InvalidArgumentError

DEFAULT_OUTPUT_DIR = '.'
DEFAULT_OUTPUT_PATTERN = 'output_{index}.txt'
DEFAULT_LOG_LEVEL = 'INFO'


@dataclass
class PipelineConfig:
    """Where reducer artifacts go and how loud the run is"""
    output_dir: str = DEFAULT_OUTPUT_DIR
    output_pattern: str = DEFAULT_OUTPUT_PATTERN
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if not self.output_dir:
            raise InvalidArgumentError("Output directory must not be empty")
        if '{index}' not in self.output_pattern:
            raise InvalidArgumentError(
                f"Output pattern must contain '{{index}}': {self.output_pattern!r}")
        try:
            self.output_pattern.format(index=0)
        except (KeyError, IndexError, ValueError, AttributeError, TypeError) as e:
            raise InvalidArgumentError(
                f"Output pattern may only use the {{index}} field: {self.output_pattern!r}") from e
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise InvalidArgumentError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Build configuration from THREADMR_* environment variables"""
        return cls(
            output_dir=os.getenv('THREADMR_OUTPUT_DIR', DEFAULT_OUTPUT_DIR),
            output_pattern=os.getenv('THREADMR_OUTPUT_PATTERN', DEFAULT_OUTPUT_PATTERN),
            log_level=os.getenv('THREADMR_LOG_LEVEL', DEFAULT_LOG_LEVEL),
        )

    def output_path(self, index: int) -> str:
        """Artifact path for the reducer with the given index"""
        return os.path.join(self.output_dir, self.output_pattern.format(index=index))
