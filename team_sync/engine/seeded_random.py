"""Seeded pseudo-random source for jitter, shuffles and target counts.

FNV-1a hashes a context string into a 32-bit seed that drives an xorshift32
generator. Everything random in the engines goes through ``XorShift32`` so
tests can inject a generator seeded from stable input only.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Sequence
from typing import TypeVar

from team_sync.activity_models import QuizContext, TeamContext


T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a hash over the characters of *text*."""
    h = _FNV_OFFSET
    for ch in text:
        h ^= ord(ch)
        h = (h * _FNV_PRIME) & _MASK32
    return h


class XorShift32:
    """xorshift32 (13, 17, 5) generator producing floats in [0, 1)."""

    def __init__(self, seed: int) -> None:
        self._state = (seed & _MASK32) or 1

    @classmethod
    def from_text(cls, text: str) -> XorShift32:
        return cls(fnv1a_32(text))

    def random(self) -> float:
        s = self._state
        s ^= (s << 13) & _MASK32
        s ^= s >> 17
        s ^= (s << 5) & _MASK32
        self._state = s
        return s / 4294967296

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both ends inclusive."""
        return low + int(self.random() * (high - low + 1))

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]

    def shuffled(self, items: Sequence[T]) -> list[T]:
        """Fisher-Yates shuffle of a copy of *items*."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            out[i], out[j] = out[j], out[i]
        return out


def _wall_clock_ms() -> float:
    return time.time() * 1000


def seed_from_context(
    team: TeamContext,
    quiz: QuizContext,
    department: str,
    clock: Callable[[], float] = _wall_clock_ms,
) -> int:
    """Seed derived from the contexts plus a millisecond timestamp.

    With the default wall-clock *clock* identical inputs give different seeds
    on every call; pass a constant clock for reproducible output.
    """
    payload = json.dumps(
        {
            "team": team.model_dump(),
            "quiz": quiz.model_dump(),
            "department": department,
            "t": int(clock()),
        },
        sort_keys=True,
    )
    return fnv1a_32(payload)


def rng_for_context(
    team: TeamContext,
    quiz: QuizContext,
    department: str,
    clock: Callable[[], float] = _wall_clock_ms,
) -> XorShift32:
    return XorShift32(seed_from_context(team, quiz, department, clock))
