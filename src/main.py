import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from config.config import Config
from config.logging_config import setup_logging
from contracts.endpoint_address import EndpointAddress
from contracts.overhead_estimate import OverheadEstimate
from contracts.probe_outcome import ProbeOutcome
from core.benchmark_runner import BenchmarkRunner
from core.echo_endpoint import EchoEndpoint
from core.errors import BindError
from core.formatting import format_bytes, format_duration, format_rate, format_ratio
from core.overhead_estimator import PROFILES, OverheadEstimator, get_profile
from core.transfer_probe import TransferProbe

logger = logging.getLogger(__name__)


def parse_sizes(value: str) -> List[int]:
    try:
        sizes = [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size list: {value!r}")
    if any(size < 0 for size in sizes):
        raise argparse.ArgumentTypeError(f"sizes must be >= 0: {value!r}")
    return sizes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Measure TCP round-trip transfers against an echo endpoint "
        "and estimate MPC communication overhead."
    )
    parser.add_argument("--host", default=Config.ECHO_HOST)
    parser.add_argument("--port", type=int, default=Config.ECHO_PORT)
    parser.add_argument("--sizes", type=parse_sizes, default=Config.TRANSFER_TEST_SIZES)
    parser.add_argument("--iterations", type=int, default=1)
    parser.add_argument(
        "--estimate-sizes", type=parse_sizes, default=Config.ESTIMATE_TEST_SIZES
    )
    parser.add_argument(
        "--profile", choices=sorted(PROFILES), default=Config.OVERHEAD_PROFILE
    )
    parser.add_argument(
        "--no-endpoint",
        action="store_true",
        help="Probe an already running endpoint instead of starting one in-process.",
    )
    return parser


def print_outcome(outcome: ProbeOutcome):
    print(f"Testing with {format_bytes(outcome.payload_size)} payload")
    if not outcome.ok:
        print(f"  Error measuring transfer: {outcome.error}")
        print()
        return
    stats = outcome.stats
    print(f"  Sent: {format_bytes(stats.bytes_sent)}")
    print(f"  Received: {format_bytes(stats.bytes_received)}")
    print(f"  Time: {format_duration(stats.elapsed_seconds)}")
    print(f"  Upload: {format_rate(stats.upload_rate)}")
    print(f"  Download: {format_rate(stats.download_rate)}")
    print(f"  Ratio (received/sent): {stats.ratio:.2f}")
    print()


def print_estimate(estimate: OverheadEstimate):
    print(f"Testing with {format_bytes(estimate.nominal_payload_bytes)} payload")
    print(f"  Simulated request size: {format_bytes(estimate.simulated_request_bytes)}")
    print(f"  Plain response size: {format_bytes(estimate.plain_response_bytes)}")
    print(f"  Simulated response size: {format_bytes(estimate.simulated_response_bytes)}")
    print(f"  Estimated MPC upload overhead: {format_bytes(estimate.upload_overhead_bytes)}")
    print(
        f"  Estimated MPC download overhead: {format_bytes(estimate.download_overhead_bytes)}"
    )
    print(
        f"  Overhead ratio: {format_ratio(estimate.upload_ratio)} upload, "
        f"{format_ratio(estimate.download_ratio)} download"
    )
    print()


async def run_benchmark(args: argparse.Namespace) -> int:
    target = EndpointAddress(host=args.host, port=args.port)
    runner = BenchmarkRunner(TransferProbe(), OverheadEstimator(get_profile(args.profile)))

    endpoint: Optional[EchoEndpoint] = None
    if not args.no_endpoint:
        endpoint = EchoEndpoint(target)
        try:
            await endpoint.start()
        except BindError as e:
            print(f"Could not start echo endpoint: {e}", file=sys.stderr)
            return 1
        target = endpoint.bound_address

    try:
        print("Network Transfer Test")
        print("=====================\n")
        for outcome in await runner.run_transfers(target, args.sizes, args.iterations):
            print_outcome(outcome)
    finally:
        if endpoint is not None:
            await endpoint.stop()

    print(f"MPC Communication Simulation ({args.profile})")
    print("============================\n")
    for estimate in runner.estimate_overheads(args.estimate_sizes):
        print_estimate(estimate)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.iterations < 1:
        build_parser().error("--iterations must be >= 1")
    setup_logging()
    return asyncio.run(run_benchmark(args))


if __name__ == "__main__":
    sys.exit(main())
