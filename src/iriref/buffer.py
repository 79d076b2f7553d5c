"""iriref.buffer
In-place editing of IRI buffers.
"""


def replace(buffer: bytearray, start: int, end: int, content: bytes) -> None:
    """Replace buffer[start:end] with content, moving the tail as one block.

    The buffer is resized in place. When it shrinks, the tail is moved left
    before the buffer is truncated; when it grows, the buffer is extended
    before the tail is moved right, so no byte of the tail is lost.
    """
    if not 0 <= start <= end <= len(buffer):
        raise IndexError(f"range {start}..{end} out of bounds for buffer of length {len(buffer)}")

    delta: int = len(content) - (end - start)
    tail_len: int = len(buffer) - end
    new_end: int = start + len(content)

    if delta < 0:
        buffer[new_end : new_end + tail_len] = buffer[end:]
        del buffer[new_end + tail_len :]
    elif delta > 0:
        buffer.extend(bytes(delta))
        buffer[new_end:] = buffer[end : end + tail_len]

    buffer[start:new_end] = content
