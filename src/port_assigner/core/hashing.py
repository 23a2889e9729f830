"""
Stable 32-bit polynomial string hash.

Python's built-in hash() is salted per process, so port assignment relies on
this hash instead. It reproduces the classic ``h = h * 31 + c`` string hash
bit for bit, iterating over UTF-16 code units and wrapping to a signed
32-bit integer.
"""

_MASK_32 = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def string_hash(value: str) -> int:
    """
    Compute the 32-bit polynomial hash of a string.

    Args:
        value: String to hash

    Returns:
        Signed 32-bit hash value
    """
    h = 0
    data = value.encode("utf-16-be", "surrogatepass")
    for i in range(0, len(data), 2):
        unit = (data[i] << 8) | data[i + 1]
        h = (h * 31 + unit) & _MASK_32
    return h - (1 << 32) if h & _SIGN_BIT else h
