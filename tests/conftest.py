import json

import pytest

from oreore.compiler import compile_document
from oreore_lsp.server import create_server

URI = "file:///workspace/test.oreore"


def frame(message) -> bytes:
    body = json.dumps(message, ensure_ascii=False).encode("utf-8")
    return b"Content-Length: %d\r\n\r\n" % len(body) + body


def read_frames(data: bytes) -> list:
    """Split a byte string written by the server back into JSON messages."""
    messages = []
    while data:
        header, _, rest = data.partition(b"\r\n\r\n")
        length = None
        for line in header.split(b"\r\n"):
            key, _, value = line.partition(b":")
            if key.strip().lower() == b"content-length":
                length = int(value)
        messages.append(json.loads(rest[:length].decode("utf-8")))
        data = rest[length:]
    return messages


class Transport:
    """Stands in for the stdio transport pygls writes to."""

    def __init__(self):
        self.data = b""
        self.closed = False

    def write(self, data):
        self.data += data if isinstance(data, bytes) else data.encode("utf-8")

    def close(self):
        self.closed = True


class Client:
    """Drives a server session in-process and collects what it writes."""

    def __init__(self):
        self.server = create_server()
        self.transport = Transport()
        self.server.lsp.connection_made(self.transport)
        self.next_id = 1

    def close(self):
        self.server.shutdown()

    def feed(self, data: bytes) -> None:
        self.server.lsp.data_received(data)

    def drain(self) -> list:
        messages = read_frames(self.transport.data)
        self.transport.data = b""
        return messages

    def request(self, method, params=None):
        request_id = self.next_id
        self.next_id += 1
        message = {"jsonrpc": "2.0", "id": request_id, "method": method}
        if params is not None:
            message["params"] = params
        self.feed(frame(message))
        responses = [m for m in self.drain() if m.get("id") == request_id]
        assert len(responses) == 1
        return responses[0]

    def notify(self, method, params=None) -> list:
        message = {"jsonrpc": "2.0", "method": method}
        if params is not None:
            message["params"] = params
        self.feed(frame(message))
        return self.drain()

    def initialize(self, publish_diagnostics=True, token_types=None):
        text_document = {}
        if publish_diagnostics:
            text_document["publishDiagnostics"] = {}
        if token_types is not None:
            text_document["semanticTokens"] = {
                "requests": {"full": True},
                "tokenTypes": token_types,
                "tokenModifiers": [],
                "formats": ["relative"],
            }
        return self.request(
            "initialize",
            {"processId": None, "rootUri": None, "capabilities": {"textDocument": text_document}},
        )

    def open(self, text, uri=URI) -> list:
        return self.notify(
            "textDocument/didOpen",
            {"textDocument": {"uri": uri, "languageId": "oreore", "version": 1, "text": text}},
        )


@pytest.fixture
def compile_text():
    def _compile(text):
        return compile_document(URI, text)
    return _compile


@pytest.fixture
def client():
    client = Client()
    yield client
    client.close()
