import json
import unittest

from motionpath.data_loading import ValidationError
from motionpath.session import build_session_payload, process_motion_data
from motionpath.data_loading import parse_motion_csv

CSV_WITH_GPS = """timestamp,accel_x,accel_y,accel_z,gyro_x,gyro_y,gyro_z,lat,lng
2000,0,0,11.81,0,0,0.1,0.0,0.00002
1000,0,0,11.81,0,0,0.1,0.0,0.0
3000,0,0,9.81,0,0,0.1,0.0,0.00004
"""


class TestProcessMotionData(unittest.TestCase):

    def test_sorted_annotated_and_projected(self):
        annotated, series = process_motion_data(parse_motion_csv(CSV_WITH_GPS))

        self.assertEqual([s.timestamp for s in annotated], [1000, 2000, 3000])
        self.assertIsNone(annotated[0].estimated_speed)
        self.assertEqual(series.timestamps, [1000, 2000, 3000])
        self.assertEqual(len(series.speed), 2)
        self.assertEqual(len(series.gps.lat), 3)


class TestBuildSessionPayload(unittest.TestCase):

    def test_payload_from_text(self):
        payload = build_session_payload(text=CSV_WITH_GPS)

        self.assertEqual(payload["sample_count"], 3)
        self.assertTrue(payload["has_gps"])
        self.assertEqual(payload["series"]["timeLabels"], ["00:00:01", "00:00:02", "00:00:03"])
        self.assertGreater(payload["summary"]["max_speed_mps"], 0.0)
        json.dumps(payload, allow_nan=False)

    def test_nan_values_serialized_as_none(self):
        text = "timestamp,accel_x,accel_y,accel_z,gyro_x,gyro_y,gyro_z\n0,x,0,9.81,0,0,0\n"
        payload = build_session_payload(text=text)

        self.assertIsNone(payload["series"]["acceleration"]["x"][0])
        self.assertFalse(payload["has_gps"])
        json.dumps(payload, allow_nan=False)

    def test_validation_error_propagates(self):
        with self.assertRaises(ValidationError):
            build_session_payload(text="timestamp,accel_x\n0,1\n")

    def test_requires_input(self):
        with self.assertRaises(ValueError):
            build_session_payload()


if __name__ == '__main__':
    unittest.main()
