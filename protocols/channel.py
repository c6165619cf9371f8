"""Duplex exchange of field elements between the two parties.

Wire format: every vector is a header line `#<count>` followed by `count`
lines, each one field element as ASCII digits in a fixed radix (36 unless
configured otherwise). Both parties must agree on the count of every
exchange; the header lets the receiver detect a disagreement instead of
blocking or reading the next vector's values.

`exchange` writes and reads concurrently, so a large vector cannot fill the
stream buffers of both parties and stall them against each other.
"""

import asyncio
import logging
import time

from core.config import DEFAULT_RADIX
from core.errors import MPCError, ChannelError, ProtocolMisuseError

logger = logging.getLogger(__name__)

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def encode_int(x: int, radix: int = DEFAULT_RADIX) -> str:
    """Render a non-negative int in the given radix (lowercase digits)."""
    if x < 0:
        raise ValueError(f"Field elements are non-negative, got {x}")
    if radix == 10:
        return str(x)
    if radix == 16:
        return format(x, 'x')
    if x == 0:
        return "0"
    digits = []
    while x:
        x, rem = divmod(x, radix)
        digits.append(_DIGITS[rem])
    return "".join(reversed(digits))


def decode_int(line: str, radix: int = DEFAULT_RADIX) -> int:
    """Parse one wire line; only the radix's lowercase digits are accepted."""
    if not line or line.strip(_DIGITS[:radix]):
        raise ChannelError(f"Malformed field element line {line!r}")
    return int(line, radix)


class ChannelMetrics:
    """Track communication rounds and volume."""

    def __init__(self):
        self.rounds = 0
        self.messages_sent = 0
        self.values_sent = 0
        self.values_received = 0
        self.start_time = None

    def start(self):
        self.start_time = time.time()

    @property
    def elapsed(self):
        if self.start_time is None:
            return 0.0
        return time.time() - self.start_time


class SecureChannel:
    """One party's end of the duplex stream to its peer."""

    # Values per write before waiting for the transport to drain.
    WRITE_BATCH = 8192

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 radix: int = DEFAULT_RADIX, timeout: float | None = None):
        self.reader = reader
        self.writer = writer
        self.radix = radix
        self.timeout = timeout
        self.metrics = ChannelMetrics()

    async def exchange(self, values) -> list[int]:
        """Send our values, return the peer's values of the same length.

        Write and read run as two concurrent tasks; both are joined before
        returning and the first failure of either is raised.
        """
        values = list(values)
        self.metrics.rounds += 1
        logger.debug("round %d: exchanging %d values",
                     self.metrics.rounds, len(values))
        write_result, read_result = await self._guard(asyncio.gather(
            self._write(values), self._read(len(values)),
            return_exceptions=True))
        for outcome in (write_result, read_result):
            if isinstance(outcome, BaseException):
                self._raise(outcome)
        return read_result

    async def send(self, values):
        await self._run(self._write(list(values)))

    async def receive(self, count: int) -> list[int]:
        return await self._run(self._read(count))

    async def send_value(self, value: int):
        await self.send([value])

    async def receive_value(self) -> int:
        return (await self.receive(1))[0]

    async def close(self):
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError):
            pass

    async def _run(self, coro):
        try:
            return await self._guard(coro)
        except MPCError:
            raise
        except Exception as exc:
            self._raise(exc)

    async def _guard(self, awaitable):
        if self.timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise ChannelError(
                f"Peer did not complete the exchange within {self.timeout}s") from None

    @staticmethod
    def _raise(exc: BaseException):
        if isinstance(exc, MPCError):
            raise exc
        raise ChannelError(f"Channel I/O failed: {exc!r}") from exc

    async def _write(self, values: list[int]):
        self.writer.write(f"#{encode_int(len(values), self.radix)}\n".encode("ascii"))
        for start in range(0, len(values), self.WRITE_BATCH):
            chunk = values[start:start + self.WRITE_BATCH]
            payload = "".join(encode_int(v, self.radix) + "\n" for v in chunk)
            self.writer.write(payload.encode("ascii"))
            await self.writer.drain()
        await self.writer.drain()
        self.metrics.messages_sent += 1
        self.metrics.values_sent += len(values)

    async def _read(self, count: int) -> list[int]:
        header = await self._readline()
        if not header.startswith("#"):
            raise ChannelError(f"Expected vector header, got {header!r}")
        announced = decode_int(header[1:], self.radix)
        if announced != count:
            raise ProtocolMisuseError(
                f"Peer sent {announced} values, expected {count}")
        result = [decode_int(await self._readline(), self.radix)
                  for _ in range(count)]
        self.metrics.values_received += count
        return result

    async def _readline(self) -> str:
        raw = await self.reader.readline()
        if not raw.endswith(b"\n"):
            raise ChannelError("Connection closed by peer (short read)")
        return raw.decode("ascii").rstrip("\r\n")
