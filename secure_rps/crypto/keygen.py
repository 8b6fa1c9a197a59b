"""Key generation from two fixed primes by bounded linear search."""

import logging
from math import gcd

from secure_rps.common.errors import KeyGenerationTimeout
from secure_rps.common.protocol import KeyMaterial

logger = logging.getLogger(__name__)

# Fixed primes used by every game.
DEFAULT_P = 45481
DEFAULT_Q = 45691

# The search would otherwise always settle on exponent 1.
PUBLIC_DEPTH = 5
PRIVATE_DEPTH = 1

# Per-stage cap; the private-exponent search for the fixed primes needs ~4.1M steps.
DEFAULT_MAX_ITERATIONS = 50_000_000


def totient(p: int, q: int, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> int:
    """
    t = lcm(p-1, q-1), found by stepping k*(p-1) and l*(q-1) towards each other.

    :param p: first prime
    :param q: second prime
    :return: the common multiple where both sequences meet
    """
    a = p - 1
    b = q - 1
    k = 1
    l = 1
    for _ in range(max_iterations):
        if a * k == b * l:
            return a * k
        if a * k < b * l:
            k += 1
        else:
            l += 1
    raise KeyGenerationTimeout("totient", max_iterations)


def find_public_exponent(t: int, depth: int = PUBLIC_DEPTH,
                         max_iterations: int = DEFAULT_MAX_ITERATIONS) -> int:
    """
    Return the depth-th integer in 1, 2, ... that is coprime with t.
    """
    found = 0
    i = 0
    for _ in range(max_iterations):
        i += 1
        if i >= t:
            break
        if gcd(i, t) == 1:
            found += 1
            if found == depth:
                return i
    raise KeyGenerationTimeout("public_exponent", max_iterations)


def find_private_exponent(e: int, t: int, depth: int = PRIVATE_DEPTH,
                          max_iterations: int = DEFAULT_MAX_ITERATIONS) -> int:
    """
    Return the depth-th d in 1, 2, ... with (d * e) % t == 1.
    """
    found = 0
    d = 0
    for _ in range(max_iterations):
        d += 1
        if (d * e) % t == 1:
            found += 1
            if found == depth:
                return d
    raise KeyGenerationTimeout("private_exponent", max_iterations)


def generate(
    p: int = DEFAULT_P,
    q: int = DEFAULT_Q,
    public_depth: int = PUBLIC_DEPTH,
    private_depth: int = PRIVATE_DEPTH,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> KeyMaterial:
    """
    Derive (e, d, n) from p and q.

    Deterministic: the same primes and depths always give the same key.

    :raises ValueError: if p or q is below 2
    :raises KeyGenerationTimeout: if any search stage exceeds max_iterations
    """
    if p < 2 or q < 2:
        raise ValueError("Primes must be at least 2")

    logger.info("[KEY] Computing encryption key...")
    n = p * q
    t = totient(p, q, max_iterations)
    logger.debug("[KEY] Totient %d", t)
    e = find_public_exponent(t, public_depth, max_iterations)
    logger.debug("[KEY] Public exponent %d", e)
    d = find_private_exponent(e, t, private_depth, max_iterations)
    logger.info("[KEY] Done (modulus %d, public exponent %d).", n, e)

    return KeyMaterial(modulus=n, public_exponent=e, private_exponent=d)
