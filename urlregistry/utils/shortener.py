"""Shortcode generation utility

This module provides a helper function for generating random candidate
shortcodes. The generator has no knowledge of existing shortcodes; uniqueness
is enforced by the registry, which retries until an unused code comes back.

Functions:
    generate_shortcode(length=6, rng=None):
        Generate a random Base62 token suitable for use as a URL slug.

Example:
    >>> import random
    >>> from urlregistry.utils import generate_shortcode
    >>> code = generate_shortcode(rng=random.Random(42))
    >>> len(code)
    6
"""

import random

from urlregistry.constants import Shortcode


ALPHABET = Shortcode.ALPHABET  # 26 lowercase + 26 uppercase + 10 digits
BASE = len(ALPHABET)

_system_random = random.SystemRandom()


def generate_shortcode(length: int = Shortcode.GENERATED_LENGTH, rng: random.Random | None = None) -> str:
    """Generate a random shortcode drawn uniformly from the Base62 alphabet.

    Each character is chosen independently and uniformly at random, so the
    default 6 character code space holds 62^6 (about 5.6 * 10^10) values.

    Args:
        length (int, optional):
            Number of characters in the shortcode. Defaults to 6.

        rng (random.Random | None, optional):
            Random source. Defaults to an OS-backed `random.SystemRandom`.
            Pass a seeded `random.Random` for reproducible output.

    Returns:
        str: A random alphanumeric shortcode.

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is not positive.

    Example:
        >>> generate_shortcode(length=8)
        'q7FemOjA'
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    source = rng if rng is not None else _system_random
    return ''.join(source.choice(ALPHABET) for _ in range(length))
