"""Stdio transport — the newline-delimited JSON-RPC server loop.

One line in, one line out: each request is read, handled and its response
written (and flushed) before the next line is read.  The output stream carries
nothing but serialized responses.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING, Any, AnyStr, TextIO

from pydantic import ValidationError

from datetime_mcp.protocols.errors import PARSE_ERROR
from datetime_mcp.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse

if TYPE_CHECKING:
    from datetime_mcp.protocols.mcp.engine import ProtocolEngine

logger = logging.getLogger(__name__)


class StdioTransport:
    """Serves a :class:`ProtocolEngine` over an input and an output stream.

    Defaults to the process's stdin/stdout.  A text reader that wraps a byte
    buffer (such as ``sys.stdin``) is read through that buffer, so each line is
    decoded on its own and a line that is not UTF-8 becomes a parse error
    instead of ending the loop.  ``serve()`` returns when the input reaches
    end-of-stream or the output pipe breaks.
    """

    def __init__(
        self,
        engine: ProtocolEngine,
        reader: IO[AnyStr] | None = None,
        writer: TextIO | None = None,
    ) -> None:
        self._engine = engine
        source: IO[Any] = reader if reader is not None else sys.stdin
        self._reader: IO[Any] = getattr(source, "buffer", source)
        self._writer = writer if writer is not None else sys.stdout

    def serve(self) -> int:
        """Run until EOF and return the number of responses written."""
        handled = 0
        while True:
            line = self._reader.readline()
            if not line:
                logger.info("EOF received, shutting down")
                break

            payload = self.handle_line(line)
            if payload is None:
                continue

            if not self._send(payload):
                break
            handled += 1

        logger.info("Server stopped after %d message(s)", handled)
        return handled

    def handle_line(self, line: bytes | str) -> str | None:
        """Handle one raw input line; ``None`` means there is nothing to send."""
        if not line.strip():
            return None

        try:
            text = line.decode("utf-8") if isinstance(line, bytes) else line
            request = JsonRpcRequest.model_validate_json(text)
        except UnicodeDecodeError as exc:
            logger.warning("Parse error: %s", exc)
            return self._parse_error()
        except ValidationError as exc:
            logger.warning("Parse error: %s", exc.errors()[0]["msg"])
            return self._parse_error()

        response = self._engine.handle(request)
        serialized = response.to_json()
        logger.debug("Sending: %s", serialized)
        return serialized

    @staticmethod
    def _parse_error() -> str:
        return JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_json()

    def _send(self, payload: str) -> bool:
        try:
            self._writer.write(payload + "\n")
            self._writer.flush()
        except OSError as exc:
            logger.warning("Output stream closed while sending: %s", exc)
            return False
        return True
