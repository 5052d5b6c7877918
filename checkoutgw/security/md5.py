"""
Pure-Python MD5 (RFC 1321).

PayFast verifies request signatures with MD5 on its side, so this module
must match the reference algorithm bit for bit. It mirrors the ``hashlib``
object protocol (``update``/``digest``/``hexdigest``/``copy``) but has no
dependency on the interpreter's OpenSSL build, which may disable MD5 on
FIPS-mode hosts.
"""
import struct
from typing import Union

MASK = 0xFFFFFFFF

# Per-round left-rotation amounts
SHIFTS = (
    [7, 12, 17, 22] * 4
    + [5, 9, 14, 20] * 4
    + [4, 11, 16, 23] * 4
    + [6, 10, 15, 21] * 4
)

# floor(abs(sin(i + 1)) * 2**32)
CONSTANTS = (
    0xd76aa478, 0xe8c7b756, 0x242070db, 0xc1bdceee,
    0xf57c0faf, 0x4787c62a, 0xa8304613, 0xfd469501,
    0x698098d8, 0x8b44f7af, 0xffff5bb1, 0x895cd7be,
    0x6b901122, 0xfd987193, 0xa679438e, 0x49b40821,
    0xf61e2562, 0xc040b340, 0x265e5a51, 0xe9b6c7aa,
    0xd62f105d, 0x02441453, 0xd8a1e681, 0xe7d3fbc8,
    0x21e1cde6, 0xc33707d6, 0xf4d50d87, 0x455a14ed,
    0xa9e3e905, 0xfcefa3f8, 0x676f02d9, 0x8d2a4c8a,
    0xfffa3942, 0x8771f681, 0x6d9d6122, 0xfde5380c,
    0xa4beea44, 0x4bdecfa9, 0xf6bb4b60, 0xbebfbc70,
    0x289b7ec6, 0xeaa127fa, 0xd4ef3085, 0x04881d05,
    0xd9d4d039, 0xe6db99e5, 0x1fa27cf8, 0xc4ac5665,
    0xf4292244, 0x432aff97, 0xab9423a7, 0xfc93a039,
    0x655b59c3, 0x8f0ccc92, 0xffeff47d, 0x85845dd1,
    0x6fa87e4f, 0xfe2ce6e0, 0xa3014314, 0x4e0811a1,
    0xf7537e82, 0xbd3af235, 0x2ad7d2bb, 0xeb86d391,
)

INITIAL_STATE = (0x67452301, 0xefcdab89, 0x98badcfe, 0x10325476)

BLOCK_SIZE = 64
DIGEST_SIZE = 16


def _rotl(x, n):
    return ((x << n) | (x >> (32 - n))) & MASK


def _compress(state, block):
    """Run the 64 rounds over one 512-bit block and return the new state."""
    words = struct.unpack('<16I', block)
    a, b, c, d = state

    for i in range(64):
        if i < 16:
            f = (b & c) | (~b & MASK & d)
            g = i
        elif i < 32:
            f = (d & b) | (~d & MASK & c)
            g = (5 * i + 1) % 16
        elif i < 48:
            f = b ^ c ^ d
            g = (3 * i + 5) % 16
        else:
            f = c ^ (b | (~d & MASK))
            g = (7 * i) % 16

        f = (f + a + CONSTANTS[i] + words[g]) & MASK
        a, d, c = d, c, b
        b = (b + _rotl(f, SHIFTS[i])) & MASK

    return (
        (state[0] + a) & MASK,
        (state[1] + b) & MASK,
        (state[2] + c) & MASK,
        (state[3] + d) & MASK,
    )


class MD5:
    """Incremental MD5 hash object with the ``hashlib`` interface."""

    name = 'md5'
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: bytes = b''):
        self._state = INITIAL_STATE
        self._buffer = b''
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError('MD5 input must be bytes-like, not %s' % type(data).__name__)
        data = bytes(data)
        self._length += len(data)
        buffer = self._buffer + data

        offset = 0
        while len(buffer) - offset >= BLOCK_SIZE:
            self._state = _compress(self._state, buffer[offset:offset + BLOCK_SIZE])
            offset += BLOCK_SIZE
        self._buffer = buffer[offset:]

    def digest(self) -> bytes:
        # 0x80, zero padding to 56 mod 64, then the bit length as 64-bit LE
        padding = b'\x80' + b'\x00' * ((55 - self._length) % BLOCK_SIZE)
        length = struct.pack('<Q', (self._length * 8) & 0xFFFFFFFFFFFFFFFF)
        tail = self._buffer + padding + length

        state = self._state
        for offset in range(0, len(tail), BLOCK_SIZE):
            state = _compress(state, tail[offset:offset + BLOCK_SIZE])
        return struct.pack('<4I', *state)

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> 'MD5':
        clone = MD5()
        clone._state = self._state
        clone._buffer = self._buffer
        clone._length = self._length
        return clone


def digest(data: bytes) -> bytes:
    """Return the 16-byte MD5 digest of ``data``."""
    return MD5(data).digest()


def hexdigest(text: Union[str, bytes]) -> str:
    """
    Return the lowercase 32-character hex MD5 of ``text``.

    Strings are UTF-8 encoded first, which is how the gateway reads the
    posted form values.
    """
    if isinstance(text, str):
        text = text.encode('utf-8')
    return MD5(text).hexdigest()
