import logging
from typing import Iterable, List

from contracts.endpoint_address import EndpointAddress
from contracts.overhead_estimate import OverheadEstimate
from contracts.probe_outcome import ProbeOutcome
from core.overhead_estimator import OverheadEstimator
from core.transfer_probe import TransferProbe

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """
    Sequences transfer probes over a list of payload sizes and pairs nominal
    sizes with overhead estimates.
    """

    def __init__(self, probe: TransferProbe, estimator: OverheadEstimator):
        self.probe = probe
        self.estimator = estimator

    async def run_transfers(
        self,
        target: EndpointAddress,
        payload_sizes: Iterable[int],
        iterations: int = 1,
    ) -> List[ProbeOutcome]:
        """
        Probe ``target`` once per size and iteration, in order.

        A failed probe is logged and recorded in its outcome; the remaining
        probes still run. Each outcome is an individual sample.

        Args:
            target (EndpointAddress): Endpoint to probe.
            payload_sizes (Iterable[int]): Payload sizes to send.
            iterations (int): Probes per size.

        Returns:
            List[ProbeOutcome]: One outcome per probe.
        """
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        outcomes = []
        for size in payload_sizes:
            for _ in range(iterations):
                try:
                    stats = await self.probe.measure(target, size)
                except (ConnectionError, TimeoutError, OSError) as e:
                    logger.error(f"Error measuring transfer of {size} bytes to {target}: {e}")
                    outcomes.append(ProbeOutcome(payload_size=size, error=str(e)))
                    continue
                outcomes.append(ProbeOutcome(payload_size=size, stats=stats))
        return outcomes

    def estimate_overheads(self, payload_sizes: Iterable[int]) -> List[OverheadEstimate]:
        return [self.estimator.estimate(size) for size in payload_sizes]
