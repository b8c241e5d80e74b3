"""
Input Sectioner
Splits the input file into line-aligned byte ranges, one per map task
"""

import os
import logging
from dataclasses import dataclass
from typing import List

from threadmr.common.errors import InvalidArgumentError, FileAccessError, EmptyInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Section:
    """Half-open byte range [start, end) of the input file"""
    index: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


def compute_sections(path: str, num_sections: int) -> List[int]:
    """
    Compute section boundaries for the input file

    Every boundary except the first and the last is moved forward to the
    start of the next line, so no line is split between two sections. A
    target offset that already sits at the start of a line is kept as the
    boundary instead of skipping that line, so four equal-length lines in
    two sections split two and two.

    Args:
        path: Path to the input file
        num_sections: Number of sections (map tasks)

    Returns:
        List of num_sections + 1 byte offsets, starting at 0 and ending at the file size

    Raises:
        InvalidArgumentError: If path is empty or num_sections is not positive
        FileAccessError: If the file cannot be opened
        EmptyInputError: If the file is empty
    """
    if (not path or isinstance(num_sections, bool)
            or not isinstance(num_sections, int) or num_sections <= 0):
        raise InvalidArgumentError(
            f"Invalid argument: path={path!r}, num_sections={num_sections!r}")

    try:
        with open(path, 'rb') as f:
            file_size = os.fstat(f.fileno()).st_size
            if file_size == 0:
                raise EmptyInputError(f"File is empty: {path}")

            offsets = [0]
            for i in range(1, num_sections):
                target = i * file_size // num_sections
                if target == 0:
                    offsets.append(0)
                    continue

                # Reading from the byte before the target consumes the rest of
                # the current line, or just the terminator when target already
                # starts a line.
                f.seek(target - 1)
                f.readline()
                offsets.append(f.tell())
            offsets.append(file_size)
    except OSError as e:
        raise FileAccessError(f"Can't open file: {path}") from e

    logger.debug(f"Computed {num_sections} sections for {path}: {offsets}")
    return offsets


def sections_from_offsets(offsets: List[int]) -> List[Section]:
    """Pair consecutive boundaries into Section values"""
    return [Section(index=i, start=start, end=end)
            for i, (start, end) in enumerate(zip(offsets, offsets[1:]))]
