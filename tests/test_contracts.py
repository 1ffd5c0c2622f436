import math
import unittest
from datetime import timedelta

from pydantic import ValidationError

from contracts.endpoint_address import EndpointAddress
from contracts.overhead_estimate import OverheadProfile
from contracts.probe_outcome import ProbeOutcome
from contracts.probe_response import ProbeResponse
from contracts.transfer_stats import MeasureRequest, TransferStats


class TestTransferStatsContract(unittest.TestCase):
    def test_derived_fields(self):
        stats = TransferStats(bytes_sent=1024, bytes_received=512, elapsed_seconds=0.5)
        self.assertEqual(stats.upload_rate, 2048.0)
        self.assertEqual(stats.download_rate, 1024.0)
        self.assertEqual(stats.ratio, 0.5)
        self.assertEqual(stats.elapsed, timedelta(seconds=0.5))

    def test_rates_times_elapsed_give_byte_counts(self):
        stats = TransferStats(bytes_sent=10240, bytes_received=5120, elapsed_seconds=0.0037)
        self.assertTrue(math.isclose(stats.upload_rate * stats.elapsed_seconds, 10240))
        self.assertTrue(math.isclose(stats.download_rate * stats.elapsed_seconds, 5120))

    def test_zero_sent_uses_sentinels(self):
        stats = TransferStats(bytes_sent=0, bytes_received=0, elapsed_seconds=0.001)
        self.assertEqual(stats.ratio, 0.0)
        self.assertEqual(stats.upload_rate, 0.0)
        self.assertEqual(stats.download_rate, 0.0)

    def test_zero_elapsed_does_not_divide(self):
        stats = TransferStats(bytes_sent=8, bytes_received=4, elapsed_seconds=0.0)
        self.assertEqual(stats.upload_rate, 0.0)
        self.assertEqual(stats.download_rate, 0.0)
        self.assertEqual(stats.ratio, 0.5)

    def test_immutable(self):
        stats = TransferStats(bytes_sent=2, bytes_received=1, elapsed_seconds=1.0)
        with self.assertRaises(ValidationError):
            stats.bytes_sent = 4
        with self.assertRaises((ValidationError, AttributeError)):
            stats.ratio = 1.0

    def test_dump_includes_derived_fields(self):
        data = TransferStats(bytes_sent=4, bytes_received=2, elapsed_seconds=2.0).model_dump()
        self.assertEqual(data["upload_rate"], 2.0)
        self.assertEqual(data["download_rate"], 1.0)
        self.assertEqual(data["ratio"], 0.5)

    def test_validation(self):
        with self.assertRaises(ValidationError):
            TransferStats(bytes_sent=-1, bytes_received=0, elapsed_seconds=0.1)
        with self.assertRaises(ValidationError):
            MeasureRequest(payload_size=-5)


class TestEndpointAddressContract(unittest.TestCase):
    def test_str_and_hash(self):
        a = EndpointAddress(host="127.0.0.1", port=8080)
        b = EndpointAddress(host="127.0.0.1", port=8080)
        self.assertEqual(str(a), "127.0.0.1:8080")
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))

    def test_port_range(self):
        with self.assertRaises(ValidationError):
            EndpointAddress(host="127.0.0.1", port=70000)


class TestOtherContracts(unittest.TestCase):
    def test_probe_outcome_ok(self):
        stats = TransferStats(bytes_sent=2, bytes_received=1, elapsed_seconds=1.0)
        self.assertTrue(ProbeOutcome(payload_size=2, stats=stats).ok)
        self.assertFalse(ProbeOutcome(payload_size=2, error="refused").ok)

    def test_profile_defaults(self):
        profile = OverheadProfile(
            name="p", request_expansion_factor=2, response_expansion_factor=3
        )
        self.assertEqual(profile.fixed_request_bytes, 0)

    def test_probe_response_validation(self):
        # status is required
        with self.assertRaises(Exception):
            ProbeResponse()


if __name__ == "__main__":
    unittest.main()
