from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

CHUNK_SIZE = 8192
CHUNK_SHIFT = 13  # log2(CHUNK_SIZE)
CHUNK_MASK = CHUNK_SIZE - 1

MAX_INDEX = 0xFFFF


class _ChunkedHistory:
    """
    Append-only storage split into fixed-size numpy chunks.

    Entry i lives in chunk i >> 13 at offset i & 8191. Chunks are allocated
    lazily on the first write into them, so appends never copy earlier
    entries.
    """

    dtype = np.uint16

    def __init__(self) -> None:
        self.length = 0
        self._chunks: List[np.ndarray] = []

    def __len__(self) -> int:
        return self.length

    def clear(self) -> None:
        self.length = 0
        self._chunks = []

    def _append(self, value: int) -> None:
        index = self.length
        chunk_index = index >> CHUNK_SHIFT
        if chunk_index == len(self._chunks):
            self._chunks.append(np.zeros(CHUNK_SIZE, dtype=self.dtype))
        self._chunks[chunk_index][index & CHUNK_MASK] = value
        self.length = index + 1

    def _read(self, i: int) -> Optional[int]:
        if isinstance(i, bool) or not isinstance(i, (int, np.integer)):
            return None
        if i < 0 or i >= self.length:
            return None
        return int(self._chunks[i >> CHUNK_SHIFT][i & CHUNK_MASK])


def _check_index(value: int) -> int:
    if value < 0 or value > MAX_INDEX:
        raise ValueError(f"outcome index {value} does not fit in 16 bits")
    return value


class IndexHistory(_ChunkedHistory):
    """
    One 16-bit outcome index per trial.
    """

    dtype = np.uint16

    def push(self, value: int) -> None:
        self._append(_check_index(value))

    def get(self, i: int) -> Optional[int]:
        """
        Outcome index of trial `i`, or None when `i` is out of range.
        """
        return self._read(i)


class PackedPairHistory(_ChunkedHistory):
    """
    One 32-bit word per trial: A's index in the upper 16 bits, B's in the
    lower 16 bits.
    """

    dtype = np.uint32

    def push_pair(self, a: int, b: int) -> None:
        self._append((_check_index(a) << 16) | _check_index(b))

    def get_packed(self, i: int) -> Optional[int]:
        return self._read(i)

    def get_pair(self, i: int) -> Optional[Tuple[int, int]]:
        packed = self._read(i)
        if packed is None:
            return None
        return packed >> 16, packed & MAX_INDEX
