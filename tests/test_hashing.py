import pytest

from vigilant_canine.hashing import (
    HashError,
    algorithm_to_string,
    hash_bytes,
    hash_file,
    string_to_algorithm,
)
from vigilant_canine.model import HashAlgorithm

BLAKE3_EMPTY = "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"
BLAKE3_HELLO = "d74981efa70a0c880b8d8c1985d075dbcbf679b99a5f9914e5aaf96b831a9e24"
SHA256_EMPTY = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
SHA256_HELLO = "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"


def test_blake3_empty_string():
    assert hash_bytes(b"", HashAlgorithm.BLAKE3) == BLAKE3_EMPTY


def test_blake3_hello_world():
    assert hash_bytes(b"hello world", HashAlgorithm.BLAKE3) == BLAKE3_HELLO


def test_sha256_empty_string():
    assert hash_bytes(b"", HashAlgorithm.SHA256) == SHA256_EMPTY


def test_sha256_hello_world():
    assert hash_bytes(b"hello world", HashAlgorithm.SHA256) == SHA256_HELLO


def test_hash_file_success(tmp_path):
    path = tmp_path / "vigilant_canine_test_file.txt"
    path.write_bytes(b"hello world")
    assert hash_file(path, HashAlgorithm.BLAKE3) == BLAKE3_HELLO


def test_hash_file_sha256(tmp_path):
    path = tmp_path / "file.txt"
    path.write_bytes(b"hello world")
    assert hash_file(str(path), HashAlgorithm.SHA256) == SHA256_HELLO


def test_hash_file_not_found():
    with pytest.raises(HashError) as excinfo:
        hash_file("/nonexistent/file.txt", HashAlgorithm.BLAKE3)
    assert "Failed to open file" in str(excinfo.value)


def test_algorithm_to_string():
    assert algorithm_to_string(HashAlgorithm.BLAKE3) == "blake3"
    assert algorithm_to_string(HashAlgorithm.SHA256) == "sha256"


def test_string_to_algorithm():
    assert string_to_algorithm("blake3") is HashAlgorithm.BLAKE3
    assert string_to_algorithm("sha256") is HashAlgorithm.SHA256


def test_string_to_algorithm_unknown():
    with pytest.raises(HashError) as excinfo:
        string_to_algorithm("unknown")
    assert "Unknown hash algorithm" in str(excinfo.value)


@pytest.mark.parametrize("algorithm", list(HashAlgorithm))
def test_algorithm_name_round_trip(algorithm):
    assert string_to_algorithm(algorithm_to_string(algorithm)) is algorithm


@pytest.mark.parametrize("algorithm", list(HashAlgorithm))
def test_bytes_like_inputs_agree(algorithm):
    data = b"vigilant canine"
    expected = hash_bytes(data, algorithm)
    assert hash_bytes(bytearray(data), algorithm) == expected
    assert hash_bytes(memoryview(data), algorithm) == expected


@pytest.mark.parametrize("length", [63, 64, 65, 1023, 1024, 1025, 2048, 3073, 5000])
def test_blake3_digest_shape_across_chunk_boundaries(length):
    digest = hash_bytes(bytes(i % 251 for i in range(length)), HashAlgorithm.BLAKE3)
    assert len(digest) == 64
    assert all(ch in "0123456789abcdef" for ch in digest)


def test_blake3_lengths_give_distinct_digests():
    data = bytes(i % 251 for i in range(5000))
    lengths = [0, 1, 63, 64, 65, 1023, 1024, 1025, 2048, 2049, 4096, 5000]
    digests = {hash_bytes(data[:n], HashAlgorithm.BLAKE3) for n in lengths}
    assert len(digests) == len(lengths)


@pytest.mark.parametrize("algorithm", list(HashAlgorithm))
def test_hash_file_matches_hash_bytes_multi_chunk(tmp_path, algorithm):
    data = bytes(i % 251 for i in range(4500))
    path = tmp_path / "data.bin"
    path.write_bytes(data)
    assert hash_file(path, algorithm) == hash_bytes(data, algorithm)


def test_hash_bytes_unknown_algorithm():
    with pytest.raises(HashError):
        hash_bytes(b"data", "md5")