from __future__ import annotations
from enum import Enum
from typing import Dict, List

from ..errors import ConfigurationError
from .address import AddressDecoder


class Outcome(Enum):
    """Result of a single cache access, valued by its verbose-trace label."""
    HIT = "hit"
    MISS_COLD = "miss"
    MISS_EVICT = "miss eviction"

    @property
    def is_miss(self) -> bool:
        return self is not Outcome.HIT


class CacheLine:
    """Represents a single line in a cache set."""
    def __init__(self):
        self.valid = False
        self.tag = 0
        self.recency = 0

    def __repr__(self):
        return f"CacheLine(valid={self.valid}, tag={self.tag:#x}, recency={self.recency})"


class CacheSet:
    """A fixed number of cache lines with least-recently-used replacement.

    Recency is a per-set stamp: every line touched by an access is given one
    more than the largest stamp currently in the set, so the line with the
    smallest stamp is always the least recently used one.
    """
    def __init__(self, associativity: int):
        self.lines = [CacheLine() for _ in range(associativity)]

    def find_line(self, tag: int) -> CacheLine | None:
        """Inspection helper: the valid line holding `tag`, recency left untouched."""
        for line in self.lines:
            if line.valid and line.tag == tag:
                return line
        return None

    def resolve(self, tag: int) -> Outcome:
        """Looks up `tag`, filling or replacing a line on a miss."""
        hit_line = None
        empty_line = None
        lru_line = None
        max_recency = 0

        for line in self.lines:
            if line.recency > max_recency:
                max_recency = line.recency
            if not line.valid:
                if empty_line is None:
                    empty_line = line
                continue
            if line.tag == tag:
                hit_line = line
            # strict '<' keeps the lowest slot on ties
            if lru_line is None or line.recency < lru_line.recency:
                lru_line = line

        if hit_line is not None:
            hit_line.recency = max_recency + 1
            return Outcome.HIT

        if empty_line is not None:
            empty_line.valid = True
            empty_line.tag = tag
            empty_line.recency = max_recency + 1
            return Outcome.MISS_COLD

        lru_line.tag = tag
        lru_line.recency = max_recency + 1
        return Outcome.MISS_EVICT

    def resident_tags(self) -> List[int]:
        """Inspection helper: tags of the valid lines in slot order."""
        return [line.tag for line in self.lines if line.valid]


class CacheModel:
    """
    A set-associative cache that only counts outcomes.
    There is no data, timing or write policy; each access is classified as a
    hit, a cold miss or a miss that evicts the set's LRU line.
    """
    def __init__(self, set_bits: int, associativity: int, block_bits: int):
        if associativity < 1:
            raise ConfigurationError("Associativity (E) must be at least 1.")
        self.decoder = AddressDecoder(set_bits, block_bits)
        self.set_bits = set_bits
        self.associativity = associativity
        self.block_bits = block_bits
        self.num_sets = 1 << set_bits
        self.block_size = 1 << block_bits
        self.size_bytes = self.num_sets * associativity * self.block_size
        try:
            self.sets = [CacheSet(associativity) for _ in range(self.num_sets)]
        except MemoryError:
            raise ConfigurationError(
                f"Cannot allocate {self.num_sets} sets of {associativity} lines."
            ) from None

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        # Per-set [hits, misses, evictions]
        self._set_counts: List[List[int]] = [[0, 0, 0] for _ in range(self.num_sets)]

    @classmethod
    def from_config(cls, config) -> CacheModel:
        return cls(config.s, config.E, config.b)

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def evictions(self) -> int:
        return self._evictions

    @property
    def accesses(self) -> int:
        return self._hits + self._misses

    def access(self, address: int) -> Outcome:
        """Simulates one access to `address` and updates the counters."""
        set_index, tag = self.decoder.decode(address)
        outcome = self.sets[set_index].resolve(tag)

        counts = self._set_counts[set_index]
        if outcome is Outcome.HIT:
            self._hits += 1
            counts[0] += 1
        else:
            self._misses += 1
            counts[1] += 1
            if outcome is Outcome.MISS_EVICT:
                self._evictions += 1
                counts[2] += 1
        return outcome

    def contains(self, address: int) -> bool:
        """Inspection helper: checks residency of `address` without changing any state."""
        set_index, tag = self.decoder.decode(address)
        return self.sets[set_index].find_line(tag) is not None

    def stats(self) -> Dict[str, int]:
        return {"hits": self._hits, "misses": self._misses, "evictions": self._evictions}

    def set_stats(self) -> List[Dict[str, int]]:
        """Per-set counters for every set that saw at least one access, by set index."""
        return [
            {"set": index, "hits": h, "misses": m, "evictions": e}
            for index, (h, m, e) in enumerate(self._set_counts)
            if h or m
        ]
