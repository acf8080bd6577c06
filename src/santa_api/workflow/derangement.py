"""
Derangement Generator

Produces a random permutation of participants in which nobody is mapped to
themselves. Fisher-Yates shuffle followed by a deterministic fix-up of any
remaining fixed points. The fix-up is not uniform-preserving.
"""

import random
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import TypeVar

from santa_api.workflow.exceptions import InsufficientParticipants
from santa_api.workflow.exceptions import InvalidRequest

T = TypeVar("T")

_system_random = random.SystemRandom()


def _shuffled_indices(n: int, rng: random.Random) -> List[int]:
    perm = list(range(n))
    for i in range(n - 1, 0, -1):
        j = rng.randint(0, i)
        perm[i], perm[j] = perm[j], perm[i]
    return perm


def _clear_fixed_points(perm: List[int]) -> None:
    fixed = [i for i, value in enumerate(perm) if value == i]

    if len(fixed) == 1:
        i = fixed[0]
        swap_with = 1 if i == 0 else 0
        perm[i], perm[swap_with] = perm[swap_with], perm[i]
    elif len(fixed) > 1:
        # rotate values among the fixed positions only
        values = [perm[idx] for idx in fixed]
        for k, idx in enumerate(fixed):
            perm[idx] = values[(k + 1) % len(fixed)]


def generate_derangement(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Generate a derangement of ``items``.

    Args:
        items: Distinct participant identifiers (N >= 2)
        rng: Randomness source; defaults to an unseeded SystemRandom

    Returns:
        List where element ``i`` is the recipient assigned to ``items[i]``

    Raises:
        InsufficientParticipants: Fewer than two items
        InvalidRequest: Items are not distinct
    """
    n = len(items)
    if n < 2:
        raise InsufficientParticipants(f"At least 2 participants required, got {n}")
    if len(set(items)) != n:
        raise InvalidRequest("Participant identifiers must be distinct")

    perm = _shuffled_indices(n, rng or _system_random)
    _clear_fixed_points(perm)

    return [items[idx] for idx in perm]


def pair_santas(participants: Sequence[T], rng: Optional[random.Random] = None) -> Dict[T, T]:
    """Return ``{santa: recipient}`` for a derangement of ``participants``."""
    recipients = generate_derangement(participants, rng)
    return dict(zip(participants, recipients))
