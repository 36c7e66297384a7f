"""Double hashing of mining headers

The header text is hashed, the hex digest is hashed once more and the second hex
digest is the block hash, e.g. sha256(sha256(header).hexdigest()).hexdigest()
"""
import hashlib

import powlab.mining_params as mining_params


class HashPrimitiveUnavailable(RuntimeError):
    """The digest algorithm cannot be constructed on this platform"""

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        super().__init__(algorithm)

    def __str__(self):
        return "hash primitive '{}' is not available".format(self.algorithm)


def hash_hex(text: str, algorithm: str = mining_params.HASH_ALGORITHM) -> str:
    """Single round: UTF-8 encode the text and return the lowercase hex digest"""
    try:
        digest = hashlib.new(algorithm)
    except (ValueError, TypeError) as e:
        raise HashPrimitiveUnavailable(algorithm) from e
    digest.update(text.encode("utf-8"))
    return digest.hexdigest()


def double_hash(text: str, algorithm: str = mining_params.HASH_ALGORITHM) -> str:
    # the second round hashes the hex string, not the raw digest bytes
    return hash_hex(hash_hex(text, algorithm), algorithm)
