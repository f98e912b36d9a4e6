from __future__ import annotations

import hashlib
import math
import secrets

DEFAULT_PERCENTILES: tuple[float, ...] = (0.5, 0.9, 0.99)
NS_PER_US = 1_000.0


class _SampleRNG:
    """Index picker for reservoir replacement; blake2s counter stream when seeded."""

    __slots__ = ("_seed_material", "_counter", "_system_random")

    def __init__(self, seed: int | None = None) -> None:
        self._counter = 0
        if seed is None:
            self._seed_material: bytes | None = None
            self._system_random: secrets.SystemRandom | None = secrets.SystemRandom()
        else:
            self._seed_material = hashlib.blake2s(str(seed).encode("utf-8")).digest()
            self._system_random = None

    def _bits(self, bits: int) -> int:
        if self._system_random is not None:
            return self._system_random.getrandbits(bits)
        if self._seed_material is None:
            raise RuntimeError("Deterministic generator requires seed material")
        self._counter += 1
        digest = hashlib.blake2s(
            self._seed_material + self._counter.to_bytes(16, "big", signed=False)
        ).digest()
        return int.from_bytes(digest, "big") >> (len(digest) * 8 - bits)

    def randrange(self, stop: int) -> int:
        if stop <= 0:
            raise ValueError("Upper bound must be positive")
        bits = max(1, stop.bit_length())
        while True:
            value = self._bits(bits)
            if value < stop:
                return value


class LatencyReservoir:
    """Fixed-size uniform sample of per-call latencies (nanoseconds)."""

    __slots__ = ("k", "samples", "n", "total_ns", "_rng")

    def __init__(self, k: int = 1000, seed: int | None = 0x5EED) -> None:
        self.k = max(1, k)
        self.samples: list[int] = []
        self.n = 0
        self.total_ns = 0
        self._rng = _SampleRNG(seed)

    def offer(self, latency_ns: int) -> None:
        self.n += 1
        self.total_ns += latency_ns
        if len(self.samples) < self.k:
            self.samples.append(latency_ns)
            return
        j = self._rng.randrange(self.n)
        if j < self.k:
            self.samples[j] = latency_ns

    def mean_us(self) -> float:
        if not self.n:
            return 0.0
        return self.total_ns / self.n / NS_PER_US

    def percentiles_us(self, ps: tuple[float, ...] = DEFAULT_PERCENTILES) -> dict[str, float]:
        """Nearest-rank percentiles in microseconds, keyed ``p50``/``p90``/``p99``."""

        if not self.samples:
            return {f"p{round(p * 100)}": 0.0 for p in ps}
        data = sorted(self.samples)
        out: dict[str, float] = {}
        for p in ps:
            idx = min(len(data) - 1, max(0, math.ceil(p * len(data) - 1e-9) - 1))
            out[f"p{round(p * 100)}"] = data[idx] / NS_PER_US
        return out


__all__ = ["DEFAULT_PERCENTILES", "LatencyReservoir"]
