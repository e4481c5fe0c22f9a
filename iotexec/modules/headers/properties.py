"""
Header property extraction.

Message headers travel as a text blob of newline separated `key:value`
lines. HeaderProperties parses the blob into an ordered sequence of
(key, value) pairs and gives typed access to individual properties.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from iotexec.errors import PropertyNotFound, PropertyTooLong
from iotexec.models import MAX_CORRELATION_ID_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_CAPACITY = MAX_CORRELATION_ID_LENGTH + 1

HeaderBlob = Union[bytes, str, None]


class HeaderProperties:
    """Ordered, read-only view of the key/value pairs in a header blob."""

    def __init__(self, pairs: Iterable[Tuple[str, str]] = ()):
        self._pairs: List[Tuple[str, str]] = list(pairs)

    @classmethod
    def parse(cls, blob: HeaderBlob) -> "HeaderProperties":
        """
        Parse a header blob.

        Args:
            blob: Raw header bytes (or text). None yields no properties.

        Returns:
            HeaderProperties with one pair per recognizable line

        Logic:
        1. Stop at the first NUL byte
        2. Split into lines, split each line on the first ':'
        3. Skip lines without a separator or that are not valid UTF-8
        """
        if blob is None:
            return cls()

        if isinstance(blob, str):
            blob = blob.encode("utf-8")

        blob = blob.split(b"\0", 1)[0]

        pairs = []
        for raw_line in blob.split(b"\n"):
            try:
                line = raw_line.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug(f"Skipping undecodable header line: {raw_line!r}")
                continue

            key, sep, value = line.partition(":")
            key = key.strip()
            if not sep or not key:
                continue

            pairs.append((key, value.strip()))

        return cls(pairs)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value stored under `name`, or `default`."""
        for key, value in self._pairs:
            if key == name:
                return value
        return default

    def get_bounded(self, name: str, capacity: int = DEFAULT_PROPERTY_CAPACITY) -> str:
        """
        Return a property value that fits a destination of `capacity` bytes.

        The destination keeps room for a terminator, so the UTF-8 encoded
        value must be strictly shorter than `capacity`.

        Raises:
            PropertyNotFound: no entry, or an empty value
            PropertyTooLong: the value does not fit
        """
        value = self.get(name)
        if not value:
            raise PropertyNotFound(f"header property '{name}' not found")

        if len(value.encode("utf-8")) >= capacity:
            raise PropertyTooLong(
                f"header property '{name}' exceeds {capacity - 1} bytes"
            )

        return value

    def render(self) -> str:
        """Serialize back to the wire format (no trailing newline)."""
        return "\n".join(f"{key}:{value}" for key, value in self._pairs)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._pairs)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._pairs)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"HeaderProperties({self._pairs!r})"


def get_property(
    header: HeaderBlob, name: str, capacity: int = DEFAULT_PROPERTY_CAPACITY
) -> str:
    """
    Extract a single property from a raw header blob.

    Args:
        header: Raw header bytes
        name: Property name, e.g. "messageId"
        capacity: Destination capacity in bytes, terminator included

    Returns:
        The property value

    Raises:
        PropertyNotFound: property is absent
        PropertyTooLong: value would not fit in `capacity`
    """
    return HeaderProperties.parse(header).get_bounded(name, capacity)
