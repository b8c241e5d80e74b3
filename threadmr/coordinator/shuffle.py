"""
Shuffle phase
Groups mapped items by key and distributes the groups over reducer buckets
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from threadmr.common.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def group_by_key(mapper_outputs: Sequence[List[str]]) -> Dict[str, List[str]]:
    """
    Group every mapped item under its own string value

    Mappers are visited in index order and items in emission order; every
    occurrence is kept.
    """
    grouped = defaultdict(list)
    for output in mapper_outputs:
        for item in output:
            grouped[item].append(item)
    return dict(grouped)


def shuffle(mapper_outputs: Sequence[List[str]], num_reducers: int) -> List[List[str]]:
    """
    Distribute grouped items across reducer buckets

    Keys are sorted ascending and dealt round robin, one step per distinct
    key, so all occurrences of a key end up in the same bucket and the
    placement only depends on the set of keys.

    Args:
        mapper_outputs: Output of every map task, in task order
        num_reducers: Number of buckets to produce

    Returns:
        Exactly num_reducers buckets; a bucket is empty when there are fewer
        distinct keys than reducers

    Raises:
        InvalidArgumentError: If mapper_outputs is empty or num_reducers is not positive
    """
    if (not mapper_outputs or isinstance(num_reducers, bool)
            or not isinstance(num_reducers, int) or num_reducers <= 0):
        raise InvalidArgumentError(
            f"Invalid argument: {len(mapper_outputs) if mapper_outputs else 0} mapper outputs, "
            f"num_reducers={num_reducers!r}")

    grouped = group_by_key(mapper_outputs)

    buckets = [[] for _ in range(num_reducers)]
    for counter, key in enumerate(sorted(grouped)):
        buckets[counter % num_reducers].extend(grouped[key])

    logger.info(f"Shuffled {sum(len(b) for b in buckets)} items with "
                f"{len(grouped)} distinct keys into {num_reducers} buckets")
    return buckets
