"""Standard MIDI File chunk reader.

Walks the MThd header and MTrk chunks directly so meta records keep their
raw payload bytes, however malformed. Channel and sysex records are handed
to mido for decoding.
"""

import struct
from dataclasses import dataclass, field
from typing import List, Tuple

import mido

END_OF_TRACK = 0x2F


@dataclass
class RawMeta:
    """Meta record exactly as stored in the track chunk."""

    type_byte: int
    payload: bytes = b""
    time: int = 0


@dataclass
class SmfData:
    """Header fields and per-track records (delta times in ``time``)."""

    format: int
    ppq: int
    tracks: List[list] = field(default_factory=list)


def read_variable_length(data: bytes, pos: int) -> Tuple[int, int]:
    """Decode a variable-length quantity; returns (value, next position)."""
    value = 0
    while True:
        if pos >= len(data):
            raise ValueError("Truncated variable-length quantity")
        byte = data[pos]
        pos += 1
        value = (value << 7) | (byte & 0x7F)
        if byte < 0x80:
            return value, pos


def channel_data_length(status: int) -> int:
    """Number of data bytes following a channel status byte."""
    if 0xC0 <= status <= 0xDF:
        return 1
    return 2


class SmfReader:
    """Parse Standard MIDI File bytes into header fields and track records."""

    def __init__(self, data: bytes):
        """
        Initialize SmfReader.

        Args:
            data: Complete file contents
        """
        self.data = data
        self.pos = 0

    def read(self) -> SmfData:
        """
        Parse the header and every MTrk chunk.

        Chunks with other identifiers are skipped.

        Returns:
            SmfData; ``ppq`` is the raw signed division word

        Raises:
            ValueError: If the data is not a well-formed SMF
        """
        chunk_id, length = self._chunk_header()
        if chunk_id != b"MThd":
            raise ValueError("MThd not found. Probably not a MIDI file")
        if length < 6:
            raise ValueError(f"Header chunk too short ({length} bytes)")
        file_format, track_count, division = struct.unpack(">HHh", self._take(length)[:6])

        smf = SmfData(format=file_format, ppq=division)
        while len(smf.tracks) < track_count and self.pos < len(self.data):
            chunk_id, length = self._chunk_header()
            body = self._take(length)
            if chunk_id == b"MTrk":
                smf.tracks.append(self.read_track(body))
        return smf

    def read_track(self, body: bytes) -> list:
        """
        Parse the records of one track chunk.

        Args:
            body: Track chunk contents (without the chunk header)

        Returns:
            RawMeta and mido.Message records, each with its delta ``time``
        """
        records = []
        pos = 0
        running_status = None

        while pos < len(body):
            delta, pos = read_variable_length(body, pos)
            if pos >= len(body):
                raise ValueError("Truncated track data")

            status = body[pos]
            if status < 0x80:
                # Running status: the byte is already data
                if running_status is None:
                    raise ValueError("Running status without a previous status byte")
                status = running_status
            else:
                pos += 1

            if status == 0xFF:
                if pos >= len(body):
                    raise ValueError("Truncated meta event")
                type_byte = body[pos]
                length, pos = read_variable_length(body, pos + 1)
                payload = body[pos:pos + length]
                if len(payload) < length:
                    raise ValueError(f"Truncated meta event 0x{type_byte:02X}")
                pos += length
                records.append(RawMeta(type_byte=type_byte, payload=bytes(payload), time=delta))

            elif status in (0xF0, 0xF7):
                length, pos = read_variable_length(body, pos)
                data = body[pos:pos + length]
                if len(data) < length:
                    raise ValueError("Truncated sysex event")
                pos += length
                if data and data[0] == 0xF0:
                    data = data[1:]
                if data and data[-1] == 0xF7:
                    data = data[:-1]
                records.append(mido.Message("sysex", data=list(data), time=delta))
                running_status = None

            elif status < 0xF0:
                size = channel_data_length(status)
                data = body[pos:pos + size]
                if len(data) < size:
                    raise ValueError("Truncated channel message")
                pos += size
                records.append(mido.Message.from_bytes([status] + list(data), time=delta))
                running_status = status

            else:
                raise ValueError(f"Undefined status byte 0x{status:02X} in track data")

        return records

    def _chunk_header(self) -> Tuple[bytes, int]:
        header = self._take(8)
        return struct.unpack(">4sL", header)

    def _take(self, size: int) -> bytes:
        chunk = self.data[self.pos:self.pos + size]
        if len(chunk) < size:
            raise ValueError("Unexpected end of file")
        self.pos += size
        return chunk
