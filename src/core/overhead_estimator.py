"""
Order-of-magnitude estimate of the bandwidth an MPC-style protocol needs
compared with a plain request/response exchange.

The expansion factors are protocol assumptions, not measurements:

* ``garbled-circuit``: a garbled-circuit/OT exchange inflates the request
  roughly 25000x (circuit tables and oblivious transfers) and the response
  10x (output labels and decoding information).
* ``tlsnotary``: TLSNotary's published costs, a ~25 MiB fixed preprocessing
  upload plus ~10 bytes per request byte, with a response assumed 10x the
  request and downloaded at 0.04x that size (0.4x the request).
"""

import logging
import math
from decimal import ROUND_FLOOR, Decimal
from typing import Optional

from contracts.overhead_estimate import OverheadEstimate, OverheadProfile
from core.profiler import Profiler

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1
RATIO_UNDEFINED = math.inf

GARBLED_CIRCUIT_PROFILE = OverheadProfile(
    name="garbled-circuit",
    request_expansion_factor=25_000,
    response_expansion_factor=10,
)

TLSNOTARY_PROFILE = OverheadProfile(
    name="tlsnotary",
    request_expansion_factor=10,
    response_expansion_factor=0.4,
    fixed_request_bytes=25 * 1024 * 1024,
    assumed_response_factor=10,
)

PROFILES = {
    GARBLED_CIRCUIT_PROFILE.name: GARBLED_CIRCUIT_PROFILE,
    TLSNOTARY_PROFILE.name: TLSNOTARY_PROFILE,
}

DEFAULT_PROFILE = GARBLED_CIRCUIT_PROFILE


def get_profile(name: str) -> OverheadProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(
            f"Unknown overhead profile '{name}', expected one of {sorted(PROFILES)}"
        ) from None


def _scale(size: int, factor: float) -> int:
    # Decimal keeps e.g. 1024 * 0.4 exact instead of 409.59999...
    scaled = Decimal(size) * Decimal(str(factor))
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def _ratio(numerator: int, baseline: int) -> float:
    if baseline == 0:
        return RATIO_UNDEFINED
    return numerator / baseline


class OverheadEstimator:
    """
    Pure calculator scaling a nominal payload size by a profile's factors.
    """

    def __init__(self, profile: OverheadProfile = DEFAULT_PROFILE):
        self.profile = profile

    def _saturate(self, value: int, label: str) -> int:
        if value > U64_MAX:
            logger.warning(
                f"Simulated {label} size {value} exceeds 64-bit range, saturating "
                f"(profile={self.profile.name})"
            )
            return U64_MAX
        return value

    @Profiler.profile
    def estimate(
        self, nominal_payload_bytes: int, plain_response_bytes: Optional[int] = None
    ) -> OverheadEstimate:
        """
        Estimate simulated MPC request/response sizes for a nominal payload.

        Args:
            nominal_payload_bytes (int): Size of the plain application request.
            plain_response_bytes (Optional[int]): Size of the plain response the
                download side is compared against. Defaults to the nominal size
                scaled by the profile's assumed response factor.

        Returns:
            OverheadEstimate: Simulated sizes, overheads and ratios. Ratios
                against a zero baseline are ``RATIO_UNDEFINED``.

        Raises:
            ValueError: If a size is negative.
        """
        if nominal_payload_bytes < 0:
            raise ValueError(
                f"nominal_payload_bytes must be >= 0, got {nominal_payload_bytes}"
            )
        if plain_response_bytes is None:
            plain_response_bytes = self._saturate(
                _scale(nominal_payload_bytes, self.profile.assumed_response_factor),
                "plain response",
            )
        elif plain_response_bytes < 0:
            raise ValueError(
                f"plain_response_bytes must be >= 0, got {plain_response_bytes}"
            )

        request_bytes = self._saturate(
            self.profile.fixed_request_bytes
            + _scale(nominal_payload_bytes, self.profile.request_expansion_factor),
            "request",
        )
        response_bytes = self._saturate(
            _scale(nominal_payload_bytes, self.profile.response_expansion_factor),
            "response",
        )

        return OverheadEstimate(
            profile=self.profile.name,
            nominal_payload_bytes=nominal_payload_bytes,
            plain_response_bytes=plain_response_bytes,
            simulated_request_bytes=request_bytes,
            simulated_response_bytes=response_bytes,
            upload_overhead_bytes=max(0, request_bytes - nominal_payload_bytes),
            download_overhead_bytes=max(0, response_bytes - plain_response_bytes),
            upload_ratio=_ratio(request_bytes, nominal_payload_bytes),
            download_ratio=_ratio(response_bytes, plain_response_bytes),
        )
