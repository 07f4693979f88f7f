"""Candidate pool construction and quota sampling.

Production draws from an unseeded ``random.Random`` so each day gets a fresh
list.  Tests pass a seeded instance to pin the outcome.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from taskflow.allocation.models.account import Account


def build_candidate_pool(accounts: Iterable[Account], excluded_ids: set[str]) -> list[Account]:
    """Drop excluded accounts and repeated ids, keeping catalog order."""
    pool: list[Account] = []
    seen: set[str] = set()
    for account in accounts:
        key = account.key
        if key in excluded_ids or key in seen:
            continue
        seen.add(key)
        pool.append(account)
    return pool


@dataclass(frozen=True)
class QuotaSample:
    accounts: list[Account]
    requested: int
    pool_size: int

    @property
    def short_pool(self) -> bool:
        """The pool could not cover the requested count (not an error)."""
        return self.pool_size < self.requested


class QuotaSampler:
    """Uniform sampling without replacement over an eligible pool."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()  # noqa: S311

    def sample(self, pool: Sequence[Account], count: int) -> QuotaSample:
        """Pick ``min(count, len(pool))`` accounts.

        A pool smaller than *count* is returned whole (in random order) and
        the sample reports ``short_pool``.
        """
        k = max(0, min(count, len(pool)))
        chosen = self._rng.sample(list(pool), k) if k else []
        return QuotaSample(accounts=chosen, requested=max(count, 0), pool_size=len(pool))
