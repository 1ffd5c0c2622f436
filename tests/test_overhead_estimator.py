import math
import unittest

from contracts.overhead_estimate import OverheadProfile
from core.overhead_estimator import (
    DEFAULT_PROFILE,
    RATIO_UNDEFINED,
    TLSNOTARY_PROFILE,
    U64_MAX,
    OverheadEstimator,
    get_profile,
)


class TestOverheadEstimator(unittest.TestCase):
    def setUp(self):
        self.estimator = OverheadEstimator()

    def test_default_profile_1kib(self):
        estimate = self.estimator.estimate(1024)
        self.assertEqual(estimate.profile, DEFAULT_PROFILE.name)
        self.assertEqual(estimate.simulated_request_bytes, 25_600_000)
        self.assertEqual(estimate.simulated_response_bytes, 10_240)
        self.assertEqual(estimate.upload_overhead_bytes, 25_600_000 - 1024)
        self.assertEqual(estimate.download_overhead_bytes, 10_240 - 1024)
        self.assertEqual(estimate.upload_ratio, 25_000.0)
        self.assertEqual(estimate.download_ratio, 10.0)

    def test_deterministic(self):
        self.assertEqual(self.estimator.estimate(10240), self.estimator.estimate(10240))
        self.assertEqual(
            OverheadEstimator().estimate(777), OverheadEstimator().estimate(777)
        )

    def test_zero_payload(self):
        estimate = self.estimator.estimate(0)
        self.assertEqual(estimate.simulated_request_bytes, 0)
        self.assertEqual(estimate.simulated_response_bytes, 0)
        self.assertEqual(estimate.upload_overhead_bytes, 0)
        self.assertEqual(estimate.download_overhead_bytes, 0)
        self.assertEqual(estimate.upload_ratio, RATIO_UNDEFINED)
        self.assertTrue(math.isinf(estimate.download_ratio))

    def test_plain_response_baseline(self):
        estimate = self.estimator.estimate(1024, plain_response_bytes=512)
        self.assertEqual(estimate.download_overhead_bytes, 10_240 - 512)
        self.assertEqual(estimate.download_ratio, 20.0)

    def test_overhead_clamped_at_zero(self):
        shrinking = OverheadProfile(
            name="shrink", request_expansion_factor=0.5, response_expansion_factor=0.25
        )
        estimate = OverheadEstimator(shrinking).estimate(1000)
        self.assertEqual(estimate.simulated_request_bytes, 500)
        self.assertEqual(estimate.upload_overhead_bytes, 0)
        self.assertEqual(estimate.download_overhead_bytes, 0)
        self.assertEqual(estimate.upload_ratio, 0.5)

    def test_tlsnotary_profile(self):
        estimate = OverheadEstimator(TLSNOTARY_PROFILE).estimate(1024)
        self.assertEqual(estimate.simulated_request_bytes, 25 * 1024 * 1024 + 10240)
        # 1024 * 0.4 floors to 409 without float drift
        self.assertEqual(estimate.simulated_response_bytes, 409)

    def test_tlsnotary_download_ratio_uses_assumed_response(self):
        estimate = OverheadEstimator(TLSNOTARY_PROFILE).estimate(1024)
        self.assertEqual(estimate.plain_response_bytes, 10 * 1024)
        self.assertAlmostEqual(estimate.download_ratio, 409 / 10240)
        self.assertAlmostEqual(estimate.download_ratio, 0.04, places=3)
        self.assertEqual(estimate.download_overhead_bytes, 0)

    def test_default_baseline_is_nominal_size(self):
        self.assertEqual(self.estimator.estimate(1024).plain_response_bytes, 1024)

    def test_saturates_instead_of_wrapping(self):
        with self.assertLogs("core.overhead_estimator", level="WARNING"):
            estimate = self.estimator.estimate(U64_MAX)
        self.assertEqual(estimate.simulated_request_bytes, U64_MAX)
        self.assertEqual(estimate.simulated_response_bytes, U64_MAX)

    def test_negative_input_rejected(self):
        with self.assertRaises(ValueError):
            self.estimator.estimate(-1)
        with self.assertRaises(ValueError):
            self.estimator.estimate(1, plain_response_bytes=-1)

    def test_get_profile(self):
        self.assertIs(get_profile("tlsnotary"), TLSNOTARY_PROFILE)
        with self.assertRaises(ValueError):
            get_profile("unknown")


if __name__ == "__main__":
    unittest.main()
