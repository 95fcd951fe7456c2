"""ClamAV malware scanning over the clamd network protocol."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, BinaryIO, Optional

import clamd
from starlette.concurrency import run_in_threadpool

from resume_assets.core.config import ClamAVSettings
from resume_assets.modules.assets.exceptions import ScanAborted, ScannerError
from resume_assets.modules.assets.models import ScanResult


class _AbortableReader:
    """Reads as end of file once ``abort`` is set."""

    def __init__(self, reader: BinaryIO, abort: asyncio.Event) -> None:
        self._reader = reader
        self._abort = abort

    def read(self, size: int = -1) -> bytes:
        if self._abort.is_set():
            return b""
        return self._reader.read(size)


class ClamdScanner:
    def __init__(self, settings: ClamAVSettings, client: Optional[clamd.ClamdNetworkSocket] = None) -> None:
        self._client = client or clamd.ClamdNetworkSocket(
            host=settings.host,
            port=settings.port,
            timeout=settings.timeout,
        )

    async def scan_stream(self, reader: BinaryIO, abort: asyncio.Event) -> AsyncIterator[ScanResult]:
        """Stream ``reader`` to clamd and yield one result per verdict.

        ``abort`` is checked before the call and between results. The blocking
        ``instream`` call itself runs in a worker thread and cannot be
        interrupted; once ``abort`` is set it stops sending further chunks and
        waits only for clamd's verdict on what was already sent (bounded by the
        client timeout). That verdict is then discarded.
        """
        if abort.is_set():
            raise ScanAborted("scan aborted before start")
        try:
            response = await run_in_threadpool(self._client.instream, _AbortableReader(reader, abort))
        except (clamd.ClamdError, OSError) as exc:
            raise ScannerError(f"clamd instream: {exc}") from exc

        if abort.is_set():
            raise ScanAborted("scan aborted during upload to clamd")
        for status, signature in (response or {}).values():
            if abort.is_set():
                raise ScanAborted("scan aborted")
            yield ScanResult(status=status, signature=signature)


__all__ = ["ClamdScanner"]
