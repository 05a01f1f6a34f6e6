# sim/rng.py
from __future__ import annotations

from functools import cache
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _tag(p: object) -> int:
    if isinstance(p, (int, np.integer)):
        return _u32(int(p))
    s = p if isinstance(p, str) else repr(p)
    return _u32(crc32(s.encode("utf-8")))


class RNGRegistry:
    """
    Deterministic registry of numpy.random.Generator streams.
    Derivation path: [master_seed, session, stream, *parts]
    """

    def __init__(self, master_seed: int, *, session: str | int = 0):
        self.master_seed = _u32(master_seed)
        self.session_tag = _tag(str(session))

    @cache
    def generator(self, stream: str, *parts: object) -> np.random.Generator:
        ss = np.random.SeedSequence(
            entropy=[self.master_seed, self.session_tag, _tag(stream), *(_tag(p) for p in parts)]
        )
        return np.random.Generator(np.random.PCG64(ss))

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(name)

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        return self.generator(name, *parts)
