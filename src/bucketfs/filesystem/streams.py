"""Writable stream that becomes a single object when closed."""

import io
import tempfile

from bucketfs.core import get_logger
from bucketfs.objectstorage.gateway import ObjectStoreGateway

logger = get_logger(__name__)

SPOOL_MAX_BYTES = 8 * 1024 * 1024


class S3OutputStream(io.RawIOBase):
    """Buffers written bytes and uploads them under ``key`` on close.

    Data stays in memory up to ``spool_max_bytes`` and spills to a temporary
    file beyond that. Nothing is visible in the bucket until ``close``.
    A failed upload raises from ``close``.
    """

    def __init__(
        self,
        gateway: ObjectStoreGateway,
        key: str,
        spool_max_bytes: int = SPOOL_MAX_BYTES,
    ):
        super().__init__()
        self.gateway = gateway
        self.key = key
        self._buffer = tempfile.SpooledTemporaryFile(max_size=spool_max_bytes)

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self._buffer.write(data)

    def close(self) -> None:
        if self.closed:
            return
        try:
            size = self._buffer.tell()
            self._buffer.seek(0)
            self.gateway.upload_fileobj(self._buffer, self.key)
            logger.info("Object written", key=self.key, size=size)
        finally:
            self._buffer.close()
            super().close()
