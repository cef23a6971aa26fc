"""File and byte hashing with BLAKE3 or SHA-256, as hex digests."""

from __future__ import annotations

import hashlib
import os
import struct
from typing import NamedTuple

from vigilant_canine.model import HashAlgorithm

__all__ = [
    "HashError",
    "hash_bytes",
    "hash_file",
    "algorithm_to_string",
    "string_to_algorithm",
]

_BUFFER_SIZE = 1024 * 1024


class HashError(Exception):
    """Raised when hashing fails or an algorithm is unknown."""


# --- BLAKE3 -----------------------------------------------------------------

_MASK = 0xFFFFFFFF
_BLOCK_LEN = 64
_CHUNK_LEN = 1024
_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3

_IV = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)
_MSG_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)
_ROUND_SCHEDULE = (
    (0, 4, 8, 12, 0, 1),
    (1, 5, 9, 13, 2, 3),
    (2, 6, 10, 14, 4, 5),
    (3, 7, 11, 15, 6, 7),
    (0, 5, 10, 15, 8, 9),
    (1, 6, 11, 12, 10, 11),
    (2, 7, 8, 13, 12, 13),
    (3, 4, 9, 14, 14, 15),
)


def _rotr(value: int, shift: int) -> int:
    return ((value >> shift) | (value << (32 - shift))) & _MASK


def _g(state: list[int], a: int, b: int, c: int, d: int, mx: int, my: int) -> None:
    state[a] = (state[a] + state[b] + mx) & _MASK
    state[d] = _rotr(state[d] ^ state[a], 16)
    state[c] = (state[c] + state[d]) & _MASK
    state[b] = _rotr(state[b] ^ state[c], 12)
    state[a] = (state[a] + state[b] + my) & _MASK
    state[d] = _rotr(state[d] ^ state[a], 8)
    state[c] = (state[c] + state[d]) & _MASK
    state[b] = _rotr(state[b] ^ state[c], 7)


def _compress(
    cv: tuple[int, ...],
    block_words: tuple[int, ...],
    counter: int,
    block_len: int,
    flags: int,
) -> list[int]:
    state = [
        *cv,
        *_IV[:4],
        counter & _MASK,
        (counter >> 32) & _MASK,
        block_len,
        flags,
    ]
    message = list(block_words)
    for _ in range(7):
        for a, b, c, d, x, y in _ROUND_SCHEDULE:
            _g(state, a, b, c, d, message[x], message[y])
        message = [message[i] for i in _MSG_PERMUTATION]
    low, high = state[:8], state[8:]
    return [x ^ y for x, y in zip(low, high)] + [x ^ y for x, y in zip(high, cv)]


def _words(block: bytes) -> tuple[int, ...]:
    return struct.unpack("<16I", block.ljust(_BLOCK_LEN, b"\0"))


class _Output(NamedTuple):
    input_cv: tuple[int, ...]
    block_words: tuple[int, ...]
    counter: int
    block_len: int
    flags: int

    def chaining_value(self) -> tuple[int, ...]:
        return tuple(
            _compress(self.input_cv, self.block_words, self.counter, self.block_len, self.flags)[:8]
        )

    def root_digest(self) -> bytes:
        words = _compress(
            self.input_cv, self.block_words, 0, self.block_len, self.flags | _ROOT
        )
        return struct.pack("<8I", *words[:8])


def _parent_output(left: tuple[int, ...], right: tuple[int, ...]) -> _Output:
    return _Output(_IV, left + right, 0, _BLOCK_LEN, _PARENT)


class _ChunkState:
    def __init__(self, counter: int) -> None:
        self.cv: tuple[int, ...] = _IV
        self.counter = counter
        self.block = bytearray()
        self.blocks_compressed = 0

    def __len__(self) -> int:
        return _BLOCK_LEN * self.blocks_compressed + len(self.block)

    def _start_flag(self) -> int:
        return _CHUNK_START if self.blocks_compressed == 0 else 0

    def update(self, data: memoryview) -> None:
        while data:
            if len(self.block) == _BLOCK_LEN:
                self.cv = tuple(
                    _compress(
                        self.cv,
                        _words(bytes(self.block)),
                        self.counter,
                        _BLOCK_LEN,
                        self._start_flag(),
                    )[:8]
                )
                self.blocks_compressed += 1
                self.block.clear()
            take = min(_BLOCK_LEN - len(self.block), len(data))
            self.block.extend(data[:take])
            data = data[take:]

    def output(self) -> _Output:
        return _Output(
            self.cv,
            _words(bytes(self.block)),
            self.counter,
            len(self.block),
            self._start_flag() | _CHUNK_END,
        )


class _Blake3:
    """Incremental BLAKE3 hasher producing a 32-byte digest."""

    def __init__(self) -> None:
        self._chunk = _ChunkState(0)
        self._cv_stack: list[tuple[int, ...]] = []

    def _push_chunk_cv(self, cv: tuple[int, ...], total_chunks: int) -> None:
        while total_chunks & 1 == 0:
            cv = _parent_output(self._cv_stack.pop(), cv).chaining_value()
            total_chunks >>= 1
        self._cv_stack.append(cv)

    def update(self, data: bytes | bytearray | memoryview) -> None:
        view = memoryview(data).cast("B")
        while view:
            if len(self._chunk) == _CHUNK_LEN:
                cv = self._chunk.output().chaining_value()
                total_chunks = self._chunk.counter + 1
                self._push_chunk_cv(cv, total_chunks)
                self._chunk = _ChunkState(total_chunks)
            take = min(_CHUNK_LEN - len(self._chunk), len(view))
            self._chunk.update(view[:take])
            view = view[take:]

    def digest(self) -> bytes:
        output = self._chunk.output()
        for cv in reversed(self._cv_stack):
            output = _parent_output(cv, output.chaining_value())
        return output.root_digest()

    def hexdigest(self) -> str:
        return self.digest().hex()


# --- public API ---------------------------------------------------------------


def _new_hasher(algorithm: HashAlgorithm) -> _Blake3 | "hashlib._Hash":
    if algorithm == HashAlgorithm.BLAKE3:
        return _Blake3()
    if algorithm == HashAlgorithm.SHA256:
        return hashlib.sha256()
    raise HashError("Unknown hash algorithm")


def hash_bytes(data: bytes | bytearray | memoryview, algorithm: HashAlgorithm) -> str:
    """Return the hex digest of ``data`` under ``algorithm``."""
    hasher = _new_hasher(algorithm)
    hasher.update(data)
    return hasher.hexdigest()


def hash_file(path: str | os.PathLike[str], algorithm: HashAlgorithm) -> str:
    """Return the hex digest of the file at ``path``.

    Raises HashError if the file cannot be opened or read.
    """
    hasher = _new_hasher(algorithm)
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise HashError(f"Failed to open file: {os.fspath(path)}") from exc
    with handle:
        try:
            while chunk := handle.read(_BUFFER_SIZE):
                hasher.update(chunk)
        except OSError as exc:
            raise HashError(f"Error reading file: {os.fspath(path)}") from exc
    return hasher.hexdigest()


def algorithm_to_string(algorithm: HashAlgorithm) -> str:
    """Return the configuration name of ``algorithm``."""
    try:
        return HashAlgorithm(algorithm).value
    except ValueError:
        return "unknown"


def string_to_algorithm(text: str) -> HashAlgorithm:
    """Parse an algorithm name; raises HashError for unknown names."""
    try:
        return HashAlgorithm(text)
    except ValueError:
        raise HashError(f"Unknown hash algorithm: {text}") from None