"""
MessagePack codec for websocket frames.

Every frame is a single map. Decoding enforces size limits so a client
cannot make the server allocate large structures.
"""

from typing import Any

import msgpack


class DecodeError(Exception):
    """Raised when a frame is not a valid, size-bounded MessagePack map."""


MAX_FRAME_BYTES = 64 * 1024
MAX_STR_LEN = 4 * 1024
MAX_BIN_LEN = 4 * 1024
# a single discard pile never exceeds the tile set
MAX_ARRAY_LEN = 128
MAX_MAP_LEN = 32
MAX_EXT_LEN = 0


def encode(data: dict[str, Any]) -> bytes:
    return msgpack.packb(data, use_bin_type=True)


def decode(data: bytes) -> dict[str, Any]:
    """
    Decode one client frame.

    Raises DecodeError if the payload is oversized, malformed, or not a map.
    """
    if len(data) > MAX_FRAME_BYTES:
        raise DecodeError(f"frame too large: {len(data)} bytes (max {MAX_FRAME_BYTES})")
    try:
        result = msgpack.unpackb(
            data,
            raw=False,
            strict_map_key=True,
            max_str_len=MAX_STR_LEN,
            max_bin_len=MAX_BIN_LEN,
            max_array_len=MAX_ARRAY_LEN,
            max_map_len=MAX_MAP_LEN,
            max_ext_len=MAX_EXT_LEN,
        )
    except (msgpack.UnpackException, ValueError) as e:
        raise DecodeError(f"malformed frame: {e}") from e

    if not isinstance(result, dict):
        raise DecodeError(f"expected a map, got {type(result).__name__}")
    return result
