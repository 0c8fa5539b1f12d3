"""conftest.py for the export tests.

Provides fake collaborators for the export pipeline. Raw messages use the
``b"MSG:<counter>:<argument count>:<payload>"`` layout so tests can build
stores by hand and read exported bytes back.
"""

from typing import List

import pytest

from dltexport.export.interfaces import LogMessage, MessageDecoder, MessageParser
from dltexport.export.store import InMemoryLogStore
from dltexport.export.sinks import BytesSink, MemoryClipboard
from dltexport.system.error_handler import LoggingErrorReporter


def make_raw(counter: int, payload: str, nargs: int = 0) -> bytes:
    return f"MSG:{counter}:{nargs}:{payload}".encode("utf-8")


class FakeMessage(LogMessage):
    """Message with fixed header values derived from its counter."""

    def __init__(self, counter: int, nargs: int, payload: str):
        self.time_string = "2024/01/02 03:04:05"
        self.microseconds = 42
        self.timestamp = 123456 + counter
        self.message_counter = counter
        self.ecu_id = "ECU1"
        self.app_id = "APP"
        self.context_id = "CTX"
        self.session_id = 7
        self.type_string = "log"
        self.subtype_string = "info"
        self.mode_string = "verbose"
        self.number_of_arguments = nargs
        self.payload = payload
        self.arguments: List[str] = []

    def argument_count(self) -> int:
        return len(self.arguments)

    def header_text(self) -> str:
        return f"{self.time_string} {self.ecu_id} {self.app_id} {self.context_id}"

    def payload_text(self) -> str:
        return self.payload

    def serialize(self) -> bytes:
        return make_raw(self.message_counter, self.payload, self.number_of_arguments)


class FakeParser(MessageParser):

    def parse(self, data: bytes) -> LogMessage:
        parts = data.decode("utf-8").split(":", 3)
        if len(parts) != 4 or parts[0] != "MSG":
            raise ValueError("not a message")
        return FakeMessage(int(parts[1]), int(parts[2]), parts[3])


class FakeDecoder(MessageDecoder):
    """Splits the payload into whitespace separated arguments."""

    def __init__(self):
        self.calls = []

    def decode(self, message: LogMessage, silent_mode: bool) -> None:
        self.calls.append((message.message_counter, silent_mode))
        message.arguments = message.payload.split()


@pytest.fixture
def store():
    return InMemoryLogStore([
        make_raw(0, "first message"),
        make_raw(1, "second  message"),
        make_raw(2, 'third "quoted" message'),
    ])


@pytest.fixture
def parser():
    return FakeParser()


@pytest.fixture
def decoder():
    return FakeDecoder()


@pytest.fixture
def reporter():
    return LoggingErrorReporter()


@pytest.fixture
def sink():
    return BytesSink()


@pytest.fixture
def clipboard():
    return MemoryClipboard()


@pytest.fixture(name="make_raw")
def make_raw_fixture():
    return make_raw
