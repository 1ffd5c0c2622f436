import asyncio
import logging
from enum import Enum, auto
from typing import Optional

from config.config import Config
from contracts.endpoint_address import EndpointAddress
from core.errors import BindError
from core.metrics import ECHO_BYTES, ECHO_CONNECTIONS

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    LISTENING = auto()
    READING = auto()
    WRITING = auto()
    CLOSED = auto()


class EchoConnection:
    """
    Services one accepted connection: read the whole request, answer with
    half as many bytes, close.

    Each connection owns its own handler, so concurrent connections share no
    state.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        idle_timeout: float,
        chunk_size: int = Config.READ_CHUNK_SIZE,
    ):
        self.reader = reader
        self.writer = writer
        self.idle_timeout = idle_timeout
        self.chunk_size = chunk_size
        self.state = ConnectionState.LISTENING
        self.failed_state: Optional[ConnectionState] = None
        self.bytes_received = 0
        self.bytes_sent = 0
        self.peer = writer.get_extra_info("peername")

    async def handle(self):
        try:
            self.state = ConnectionState.READING
            await self._read_request()
            self.state = ConnectionState.WRITING
            await self._write_response()
        except (OSError, asyncio.CancelledError):
            self.failed_state = self.state
            raise
        finally:
            await self._close()

    async def _read_request(self):
        while True:
            try:
                chunk = await asyncio.wait_for(
                    self.reader.read(self.chunk_size), timeout=self.idle_timeout
                )
            except asyncio.TimeoutError:
                # Peer kept its write side open; answer what arrived so far.
                logger.debug(
                    f"Idle for {self.idle_timeout}s on {self.peer}, "
                    f"ending request at {self.bytes_received} bytes"
                )
                return
            if not chunk:
                return
            self.bytes_received += len(chunk)

    async def _write_response(self):
        size = self.bytes_received // 2
        chunk = bytes([Config.ECHO_FILL_BYTE]) * min(size, self.chunk_size)
        while self.bytes_sent < size:
            part = chunk[: size - self.bytes_sent]
            self.writer.write(part)
            await self.writer.drain()
            self.bytes_sent += len(part)
        if self.writer.can_write_eof():
            self.writer.write_eof()

    async def _close(self):
        self.state = ConnectionState.CLOSED
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error while closing connection from {self.peer}: {e}")


class EchoEndpoint:
    """
    TCP endpoint that answers every request with a response half its size.

    Connections are served concurrently, one task each. A failing connection
    is logged and dropped without affecting the accept loop.
    """

    def __init__(
        self,
        address: EndpointAddress,
        idle_timeout: float = Config.ENDPOINT_IDLE_TIMEOUT,
    ):
        self.address = address
        self.idle_timeout = idle_timeout
        self.connections_served = 0
        self._server: Optional[asyncio.AbstractServer] = None
        self._tasks = set()

    @property
    def is_running(self) -> bool:
        return self._server is not None

    @property
    def bound_address(self) -> EndpointAddress:
        """
        The address actually bound, with an ephemeral port resolved.

        Raises:
            RuntimeError: If the endpoint has not been started.
        """
        if self._server is None:
            raise RuntimeError("Echo endpoint is not started")
        host, port = self._server.sockets[0].getsockname()[:2]
        return EndpointAddress(host=host, port=port)

    async def start(self):
        """
        Bind the listening socket and begin accepting connections.

        Raises:
            BindError: If the address is in use or cannot be bound.
            RuntimeError: If the endpoint is already started.
        """
        if self._server is not None:
            raise RuntimeError(f"Echo endpoint already listening on {self.bound_address}")
        try:
            self._server = await asyncio.start_server(
                self._handle_connection,
                self.address.host,
                self.address.port,
                reuse_address=True,
            )
        except OSError as e:
            logger.error(f"Failed to bind echo endpoint to {self.address}: {e}")
            raise BindError(f"Could not bind echo endpoint to {self.address}: {e}") from e
        logger.info(f"Echo endpoint listening on {self.bound_address}")

    async def serve_forever(self):
        if self._server is None:
            await self.start()
        await self._server.serve_forever()

    async def stop(self):
        if self._server is None:
            return
        server, self._server = self._server, None
        server.close()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await server.wait_closed()
        logger.info(f"Echo endpoint on {self.address} stopped")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ):
        connection = EchoConnection(reader, writer, self.idle_timeout)
        task = asyncio.current_task()
        self._tasks.add(task)
        try:
            await connection.handle()
        except asyncio.CancelledError:
            # stop() cancels in-flight handlers; the writer is already closed.
            ECHO_CONNECTIONS.labels(outcome="cancelled").inc()
            logger.debug(
                f"Connection from {connection.peer} cancelled while "
                f"{(connection.failed_state or connection.state).name.lower()}"
            )
            return
        except OSError as e:
            ECHO_CONNECTIONS.labels(outcome="error").inc()
            logger.warning(
                f"Dropped connection from {connection.peer} while "
                f"{connection.failed_state.name.lower()}: {e}"
            )
            return
        finally:
            self._tasks.discard(task)
            ECHO_BYTES.labels(direction="in").inc(connection.bytes_received)
            ECHO_BYTES.labels(direction="out").inc(connection.bytes_sent)
        self.connections_served += 1
        ECHO_CONNECTIONS.labels(outcome="served").inc()
        logger.info(
            f"Served {connection.peer}: received={connection.bytes_received} "
            f"sent={connection.bytes_sent}"
        )
