"""VocabTutor JSON-lines server entry point.

Usage: python -m vocabtutor.server

Reads JSON requests from stdin (one per line), writes JSON responses and
notifications to stdout. All logging goes to stderr to keep the protocol clean.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .handler import ServerHandler
from .protocol import Notification, ProtocolError, Request, Response

logger = logging.getLogger("vocabtutor.server")


async def main() -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    loop = asyncio.get_running_loop()

    def write_line(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def write_notification(notification: Notification) -> None:
        write_line(notification.to_json_line())

    handler = ServerHandler(write_notification=write_notification)
    handler.start_sync()

    logger.info("vocabtutor-server: ready")

    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)

    try:
        while True:
            line = await reader.readline()
            if not line:
                break  # stdin closed

            line_str = line.decode("utf-8", errors="replace").strip()
            if not line_str:
                continue

            try:
                request = Request.from_line(line_str)
            except ProtocolError as e:
                write_line(Response(id=0, error=str(e)).to_json_line())
                continue

            try:
                result = await handler.dispatch(
                    {"method": request.method, "params": request.params}
                )
                resp = Response(id=request.id, result=result)
            except Exception as e:
                logger.error("%s failed: %s", request.method, e)
                resp = Response(id=request.id, error=str(e))

            write_line(resp.to_json_line())
    finally:
        handler.stop_sync()


if __name__ == "__main__":
    asyncio.run(main())
