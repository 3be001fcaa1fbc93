from typing import Callable, Protocol


class Transport(Protocol):
    """
    Defines the boundary write performed by the host.

    The transport receives one finished buffer per response. The view
    covers exactly the encoded message: it starts at the first encoded
    byte and ends at the last one. Implementations must not keep the
    view around after `write` returns.
    """

    def write(self, view: memoryview) -> None:
        """Hand the encoded buffer to the host."""


TextEncoder = Callable[[str], bytes]
"""
Converts a string into its UTF-8 byte sequence.
"""


def utf8_encode(text: str) -> bytes:
    return text.encode("utf-8")
