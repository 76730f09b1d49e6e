"""
Bit-Field Primitives
====================

Helpers for reading and writing inclusive bit ranges of a 32-bit
instruction word. Bit 31 is the most significant bit.

    >>> word = set_bits(0, 31, 27, 0b00001)
    >>> hex(word)
    '0x8000000'
    >>> get_bits(word, 31, 27)
    1
"""

WORD_BITS = 32
WORD_MASK = 0xFFFFFFFF


def _field_mask(hi: int, lo: int) -> int:
    """Return the right-aligned mask for the inclusive range [lo, hi]."""
    if hi < lo:
        raise ValueError(f"invalid bit range [{hi}:{lo}]: hi must be >= lo")
    if lo < 0 or hi >= WORD_BITS:
        raise ValueError(f"invalid bit range [{hi}:{lo}]: bits must be within 0..31")

    width = hi - lo + 1
    if width == WORD_BITS:
        return WORD_MASK
    return (1 << width) - 1


def get_bits(word: int, hi: int, lo: int) -> int:
    """
    Extract the inclusive bit range [lo, hi] from a word.

    Args:
        word: The 32-bit word
        hi: Highest bit position (inclusive, < 32)
        lo: Lowest bit position (inclusive)

    Returns:
        The field value, right-aligned
    """
    return (word >> lo) & _field_mask(hi, lo)


def set_bits(word: int, hi: int, lo: int, value: int) -> int:
    """
    OR a value into the inclusive bit range [lo, hi] of a word.

    The value is masked to the field width before it is shifted into
    place, so an oversized value can never spill into a neighbouring
    field. The target range is expected to be zero: fields are written
    exactly once.

    Args:
        word: The 32-bit word
        hi: Highest bit position (inclusive, < 32)
        lo: Lowest bit position (inclusive)
        value: The value to place

    Returns:
        The updated word
    """
    mask = _field_mask(hi, lo)
    return (word | ((value & mask) << lo)) & WORD_MASK


def fits_in_bits(value: int, width: int) -> bool:
    """
    Check whether an unsigned value fits in a field of the given width.

    Widths of 31 bits or more are treated as the full unsigned range and
    always fit.
    """
    if width >= 31:
        return True
    return value <= (1 << width) - 1
