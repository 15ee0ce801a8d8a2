from __future__ import annotations

import hashlib
import logging
import random
import secrets
from dataclasses import dataclass, field
from typing import Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]


def seed_to_bytes(seed: Seed) -> bytes:
    """Canonical byte form of a master seed. None maps to empty bytes."""
    if seed is None:
        return b""
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, bool):
        raise TypeError("Boolean seeds are not supported")
    if isinstance(seed, int):
        if seed < 0:
            raise ValueError("Integer seeds must be non-negative")
        return seed.to_bytes(max(1, (seed.bit_length() + 7) // 8), "big")
    if isinstance(seed, str):
        return seed.strip().encode("utf-8")
    raise TypeError(f"Unsupported seed type: {type(seed)!r}")


@dataclass(frozen=True)
class RNGManager:
    """Hands out independent random streams derived from one master seed.

    A stream is keyed by a domain name plus identifiers, so the layout of
    depth 3 only depends on the master seed and the number 3, never on how
    much randomness earlier levels consumed.

        rngm = RNGManager(1234)
        rng = rngm.context_rng("level", 3)

    Without a master seed a random one is drawn and logged so a run can be
    replayed with --seed.
    """

    master_seed: Seed = None
    _key: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        key = seed_to_bytes(self.master_seed)
        if self.master_seed is None:
            key = secrets.token_bytes(16)
            logger.info("No master seed given; using random seed %s", key.hex())
        else:
            logger.debug("Master seed %r", self.master_seed)
        object.__setattr__(self, "_key", key)

    def derive_seed(self, domain: str, *identifiers: object) -> int:
        """64-bit seed for (domain, identifiers) under this master seed."""
        h = hashlib.blake2b(digest_size=8, person=b"undercroft")
        h.update(len(self._key).to_bytes(4, "big"))
        h.update(self._key)
        h.update(domain.encode("utf-8"))
        for ident in identifiers:
            h.update(b"\x1f")
            h.update(repr(ident).encode("utf-8"))
        seed = int.from_bytes(h.digest(), "big")
        logger.debug("Seed for %s%r -> %d", domain, identifiers, seed)
        return seed

    def context_rng(self, domain: str, *identifiers: object) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))

    def get_master_seed_hex(self) -> str:
        return self._key.hex()