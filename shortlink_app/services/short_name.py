"""
Short name generation for links created without an explicit one.
"""

import base64
import secrets


class RandomShortNameGenerator:
    """
    Random alphanumeric short names.

    Takes URL-safe base64 of a few random bytes and strips '-' and '_' so the
    result is plain alphanumeric. Uniqueness is not checked here: the insert
    hits the unique constraint and the service retries with a fresh name.
    """

    def __init__(self, length: int = 8):
        self.length = length
        # 3 bytes encode to 4 base64 chars; leave room for stripped symbols
        self._num_bytes = max(6, (length * 3) // 4 + 3)

    def generate(self) -> str:
        name = ""
        while len(name) < self.length:
            encoded = base64.urlsafe_b64encode(secrets.token_bytes(self._num_bytes)).decode("ascii")
            name += encoded.replace("-", "").replace("_", "").rstrip("=")
        return name[:self.length]
