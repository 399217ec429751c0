"""Block Check Code (BCC) used by the PD/LCD control protocol.

The BCC is a single raw byte: the XOR of every byte in the checked range.
For a request frame the range starts at the reserved byte right after SOH
and ends with ETX inclusive.
"""

from __future__ import annotations


def bcc(data: bytes) -> int:
    """Compute the XOR block check code over ``data``.

    Args:
        data: Bytes to check.

    Returns:
        The checksum byte as an int in ``0..255``. Empty input yields 0.
    """
    check = 0
    for byte in data:
        check ^= byte
    return check
