import asyncio
import logging
import time

from config.config import Config
from contracts.endpoint_address import EndpointAddress
from contracts.transfer_stats import TransferStats
from core.errors import EndpointConnectionError, TransferIOError, TransferTimeoutError
from core.metrics import PROBE_DURATION, PROBE_FAILURES
from core.profiler import Profiler

logger = logging.getLogger(__name__)


class TransferProbe:
    """
    Client side of a single-shot transfer measurement.

    Every call to ``measure`` opens its own connection, so consecutive probes
    never share state.
    """

    def __init__(
        self,
        read_timeout: float = Config.PROBE_READ_TIMEOUT,
        connect_timeout: float = Config.PROBE_CONNECT_TIMEOUT,
        chunk_size: int = Config.READ_CHUNK_SIZE,
    ):
        self.read_timeout = read_timeout
        self.connect_timeout = connect_timeout
        self.chunk_size = chunk_size

    @Profiler.profile
    async def measure(self, target: EndpointAddress, payload_size: int) -> TransferStats:
        """
        Send ``payload_size`` bytes to ``target`` and time the round trip.

        The timer brackets the send and the full response read; connecting is
        not timed.

        Args:
            target (EndpointAddress): Endpoint to probe.
            payload_size (int): Number of bytes to send; 0 is allowed.

        Returns:
            TransferStats: Counts and timing of the transfer.

        Raises:
            ValueError: If payload_size is negative.
            EndpointConnectionError: If the endpoint cannot be reached.
            TransferTimeoutError: If a response read exceeds the read timeout.
            TransferIOError: If the connection fails mid-transfer.
        """
        if payload_size < 0:
            raise ValueError(f"payload_size must be >= 0, got {payload_size}")

        reader, writer = await self._connect(target)
        try:
            start = time.perf_counter()
            await self._send(writer, payload_size, target)
            bytes_received = await self._receive(reader, target)
            elapsed = time.perf_counter() - start
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"Error while closing probe connection to {target}: {e}")

        PROBE_DURATION.observe(elapsed)
        stats = TransferStats(
            bytes_sent=payload_size,
            bytes_received=bytes_received,
            elapsed_seconds=elapsed,
        )
        logger.info(
            f"Probe to {target}: sent={stats.bytes_sent} received={stats.bytes_received} "
            f"elapsed={elapsed:.6f}s ratio={stats.ratio:.2f}"
        )
        return stats

    async def _connect(self, target: EndpointAddress):
        try:
            return await asyncio.wait_for(
                asyncio.open_connection(target.host, target.port),
                timeout=self.connect_timeout,
            )
        except asyncio.TimeoutError as e:
            PROBE_FAILURES.labels(error="connect").inc()
            logger.error(f"Connecting to {target} timed out after {self.connect_timeout}s")
            raise EndpointConnectionError(
                f"Timed out connecting to {target} after {self.connect_timeout}s"
            ) from e
        except OSError as e:
            PROBE_FAILURES.labels(error="connect").inc()
            logger.error(f"Could not connect to {target}: {e}")
            raise EndpointConnectionError(f"Could not connect to {target}: {e}") from e

    async def _send(self, writer: asyncio.StreamWriter, payload_size: int, target: EndpointAddress):
        # One reused chunk keeps memory flat for any payload size.
        chunk = bytes([Config.PROBE_FILL_BYTE]) * min(payload_size, self.chunk_size)
        remaining = payload_size
        try:
            while remaining >= len(chunk) > 0:
                writer.write(chunk)
                await writer.drain()
                remaining -= len(chunk)
            if remaining:
                writer.write(chunk[:remaining])
                await writer.drain()
            # Half-close so the endpoint sees the end of the request.
            if writer.can_write_eof():
                writer.write_eof()
        except OSError as e:
            PROBE_FAILURES.labels(error="io").inc()
            logger.error(f"Send to {target} failed: {e}")
            raise TransferIOError(f"Send to {target} failed: {e}") from e

    async def _receive(self, reader: asyncio.StreamReader, target: EndpointAddress) -> int:
        received = 0
        while True:
            try:
                chunk = await asyncio.wait_for(
                    reader.read(self.chunk_size), timeout=self.read_timeout
                )
            except asyncio.TimeoutError as e:
                PROBE_FAILURES.labels(error="timeout").inc()
                logger.error(
                    f"No response from {target} within {self.read_timeout}s "
                    f"({received} bytes received)"
                )
                raise TransferTimeoutError(
                    f"No response from {target} within {self.read_timeout}s"
                ) from e
            except OSError as e:
                PROBE_FAILURES.labels(error="io").inc()
                logger.error(f"Receive from {target} failed: {e}")
                raise TransferIOError(f"Receive from {target} failed: {e}") from e
            if not chunk:
                return received
            received += len(chunk)
