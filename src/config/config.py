import os


class Config:
    """
    Configuration class for environment variables and default settings.
    """

    # Default echo endpoint address; the driver passes it explicitly to the
    # endpoint and the probe.
    ECHO_HOST = os.environ.get("ECHO_HOST", "127.0.0.1")
    ECHO_PORT = int(os.environ.get("ECHO_PORT", "8080"))

    # Probe bounds (seconds). Not user-tunable.
    PROBE_CONNECT_TIMEOUT = 5.0
    PROBE_READ_TIMEOUT = 5.0

    # Endpoint ends a request after this long without new bytes when the
    # peer keeps its write side open.
    ENDPOINT_IDLE_TIMEOUT = 2.0

    READ_CHUNK_SIZE = 64 * 1024
    PROBE_FILL_BYTE = 0x00
    ECHO_FILL_BYTE = 0x01

    # Driver defaults
    TRANSFER_TEST_SIZES = [1024, 10 * 1024, 100 * 1024]
    ESTIMATE_TEST_SIZES = [1024, 10 * 1024]
    OVERHEAD_PROFILE = os.environ.get("OVERHEAD_PROFILE", "garbled-circuit")
