"""
Classic MapReduce word count example.
Counts the frequency of each word in the input text.

Usage: python examples/wordcount.py <input-path> <mapper-count> <reducer-count>
"""

import string
import sys
import logging
from collections import Counter

from threadmr.common.config import PipelineConfig
from threadmr.coordinator.job_manager import JobManager


def map_function(line):
    """
    Map function: emit each lower-cased word of the line.

    Args:
        line: Text line

    Returns:
        List of words, punctuation removed
    """
    words = line.translate(str.maketrans('', '', string.punctuation)).split()
    return [word.lower() for word in words]


def reduce_function(words):
    """
    Reduce function: count the words of one bucket.

    Every occurrence of a word is in the same bucket, so the counts are final.

    Args:
        words: All words assigned to this reducer

    Yields:
        "word<TAB>count" lines in word order
    """
    for word, count in sorted(Counter(words).items()):
        yield f"{word}\t{count}"


def main():
    if len(sys.argv) != 4:
        print(f"Usage: {sys.argv[0]} <input-path> <mapper-count> <reducer-count>")
        return 2

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    manager = JobManager(PipelineConfig.from_env())
    job = manager.run_job(sys.argv[1], int(sys.argv[2]), int(sys.argv[3]),
                          map_fn=map_function, reduce_fn=reduce_function)
    for path in job.output_files:
        print(path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
