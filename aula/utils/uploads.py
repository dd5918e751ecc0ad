def file_size(storage) -> int:
    """Size in bytes of an uploaded file, leaving the stream where it was."""
    stream = storage.stream
    pos = stream.tell()
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(pos)
    return size


def megabytes(limit: int) -> int:
    return limit // (1024 * 1024)
