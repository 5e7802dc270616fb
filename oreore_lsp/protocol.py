"""
Framing and dispatch edges of the oreore server, on top of pygls.

`OreoreLanguageServerProtocol.data_received` accepts arbitrary chunks; every
complete Content-Length frame in the buffer is handled, in arrival order,
before it returns. The consumed frame is always trimmed from the buffer,
whether it dispatched, failed to decode or was answered with an error.

Messages are routed by shape before pygls sees them:
- body is not JSON           -> -32700 with a null id
- no usable Content-Length   -> frame discarded, -32700 with a null id
- id only                    -> response: ignored (this server never sends requests)
- neither id nor method      -> -32600
- id + method / method only  -> structured into lsprotocol types by pygls and
                                routed to the registered features; pygls answers
                                unknown requests with -32601 and drops unknown
                                notifications

Capability negotiation rides on pygls's own `initialize` handling: the
server capabilities pygls builds from the registered features are adjusted
to what the client declared.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from lsprotocol.types import INITIALIZE, InitializeParams, InitializeResult
from pygls.exceptions import JsonRpcException, JsonRpcInvalidRequest, JsonRpcParseError
from pygls.protocol import LanguageServerProtocol, lsp_method

logger = logging.getLogger(__name__)

SEPARATOR = b"\r\n\r\n"
CONTENT_LENGTH = "content-length"
JSONRPC_VERSION = "2.0"


class OreoreLanguageServerProtocol(LanguageServerProtocol):
    def __init__(self, server, converter):
        super().__init__(server, converter)
        self.frame_buffer = b""

    @lsp_method(INITIALIZE)
    def lsp_initialize(self, params: InitializeParams) -> InitializeResult:
        result = super().lsp_initialize(params)
        self._server.negotiate(params.capabilities, result.capabilities)
        return result

    # --- Input ---

    def data_received(self, data: bytes) -> None:
        self.frame_buffer += data
        while self._process_frame():
            pass

    def _process_frame(self) -> bool:
        """Handle one complete frame. Returns False when more bytes are needed."""
        header_end = self.frame_buffer.find(SEPARATOR)
        if header_end == -1:
            return False
        header_length = header_end + len(SEPARATOR)

        content_length = None
        for line in self.frame_buffer[:header_end].decode("ascii", errors="replace").split("\r\n"):
            key, _, value = line.partition(":")
            if key.strip().lower() == CONTENT_LENGTH:
                try:
                    content_length = int(value.strip())
                except ValueError:
                    content_length = None

        if content_length is None or content_length < 0:
            logger.warning("discarding frame without a valid Content-Length header")
            self.frame_buffer = self.frame_buffer[header_length:]
            self._send_error(None, JsonRpcParseError.CODE, "missing Content-Length header")
            return True

        if len(self.frame_buffer) < header_length + content_length:
            return False

        body = self.frame_buffer[header_length:header_length + content_length]
        try:
            self._handle_body(body)
        finally:
            self.frame_buffer = self.frame_buffer[header_length + content_length:]
        return True

    def _handle_body(self, body: bytes) -> None:
        try:
            message = json.loads(body.decode("utf-8"))
        except ValueError:
            logger.warning("received an invalid JSON body (%d bytes)", len(body))
            self._send_error(None, JsonRpcParseError.CODE, "received an invalid JSON")
            return

        if not isinstance(message, dict) or message.get("jsonrpc") != JSONRPC_VERSION:
            self._send_error(None, JsonRpcInvalidRequest.CODE, "received an invalid request")
            return
        if "method" not in message:
            if "id" in message:
                logger.debug("ignoring response to id %r", message["id"])
            else:
                self._send_error(None, JsonRpcInvalidRequest.CODE, "received an invalid request")
            return

        try:
            structured = self._deserialize_message(message)
        except JsonRpcException as error:
            if "id" in message:
                self._send_error(message["id"], error.code, error.message)
            else:
                logger.error("dropping %s: %s", message["method"], error.message)
            return
        self._procedure_handler(structured)

    # --- Output ---

    def _send_error(self, msg_id: Any, code: int, message: str) -> None:
        self._send_data(
            {
                "jsonrpc": JSONRPC_VERSION,
                "id": msg_id,
                "error": {"code": code, "message": message},
            }
        )
