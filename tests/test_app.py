import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

import app as app_module

CSV_TEXT = """timestamp,accel_x,accel_y,accel_z,gyro_x,gyro_y,gyro_z,lat,lng
0,0,0,9.81,0,0,0,0.0,0.0
500,0,0,10.81,0,0,0,0.0,0.00001
1000,0,0,10.81,0,0,0,0.0,0.00002
"""


class TestMotionApi(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.tmp.name)
        (self.data_dir / "morning_ride.csv").write_text(CSV_TEXT, encoding="utf-8")
        (self.data_dir / "broken.csv").write_text("timestamp,accel_x\n0,1\n", encoding="utf-8")

        patcher = mock.patch.object(app_module.analyze_motion_data, "DATA_DIR", self.data_dir)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.tmp.cleanup)
        app_module.session_cache.clear()
        app_module.samples_cache.clear()
        self.addCleanup(app_module.session_cache.clear)
        self.addCleanup(app_module.samples_cache.clear)

        self.client = TestClient(app_module.app)

    def test_list_datasets(self):
        response = self.client.get("/api/datasets")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [
            {"filename": "broken.csv", "display_name": "Broken"},
            {"filename": "morning_ride.csv", "display_name": "Morning Ride"},
        ])

    def test_session_series_and_summary(self):
        session = self.client.get("/api/session", params={"dataset": "morning_ride.csv"}).json()
        self.assertEqual(session["sample_count"], 3)
        self.assertIn("morning_ride.csv", app_module.session_cache)

        series = self.client.get("/api/series", params={"dataset": "morning_ride.csv"}).json()
        self.assertEqual(series["timestamps"], [0, 500, 1000])
        self.assertEqual(len(series["speed"]), 2)

        summary = self.client.get("/api/summary", params={"dataset": "morning_ride.csv"}).json()
        self.assertEqual(summary["end_ms"], 1000)

    def test_unknown_dataset_is_404(self):
        response = self.client.get("/api/session", params={"dataset": "missing.csv"})
        self.assertEqual(response.status_code, 404)

    def test_path_escape_is_404(self):
        response = self.client.get("/api/session", params={"dataset": "../secret.csv"})
        self.assertEqual(response.status_code, 404)

    def test_invalid_dataset_is_422(self):
        response = self.client.get("/api/session", params={"dataset": "broken.csv"})
        self.assertEqual(response.status_code, 422)
        self.assertIn("missing required columns", response.json()["detail"])

    def test_non_utf8_dataset_is_422(self):
        (self.data_dir / "latin.csv").write_bytes(
            CSV_TEXT.replace("0.0,0.0\n", "caf\xe9,0.0\n", 1).encode("latin-1"))
        response = self.client.get("/api/session", params={"dataset": "latin.csv"})
        self.assertEqual(response.status_code, 422)
        self.assertIn("not UTF-8", response.json()["detail"])

    def test_process_upload(self):
        response = self.client.post("/api/process", content=CSV_TEXT.encode("utf-8"),
                                    headers={"Content-Type": "text/csv"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["has_gps"])
        self.assertEqual(len(body["series"]["gps"]["lat"]), 3)

    def test_process_upload_runs_in_threadpool(self):
        with mock.patch.object(app_module, "run_in_threadpool",
                               wraps=app_module.run_in_threadpool) as pool:
            response = self.client.post("/api/process", content=CSV_TEXT.encode("utf-8"))
        self.assertEqual(response.status_code, 200)
        pool.assert_called_once()
        self.assertIs(pool.call_args.args[0], app_module.analyze_motion_data.build_session_payload)

    def test_process_upload_missing_columns(self):
        text = "timestamp,accel_x,accel_y,gyro_x,gyro_y,gyro_z\n0,1,2,3,4,5\n"
        response = self.client.post("/api/process", content=text.encode("utf-8"))
        self.assertEqual(response.status_code, 422)

    def test_process_upload_strict(self):
        text = CSV_TEXT + "1500,bad,0,9.81,0,0,0,0.0,0.0\n"
        lenient = self.client.post("/api/process", content=text.encode("utf-8"))
        strict = self.client.post("/api/process", params={"strict": "true"},
                                  content=text.encode("utf-8"))
        self.assertEqual(lenient.status_code, 200)
        self.assertEqual(strict.status_code, 422)

    def test_export_csv(self):
        response = self.client.get("/api/export/csv", params={"dataset": "morning_ride.csv"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("morning_ride_processed.csv", response.headers["content-disposition"])
        lines = response.text.strip().splitlines()
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[0].startswith("timestamp,time_label"))

    def test_export_reuses_cached_samples(self):
        loader = app_module.analyze_motion_data.load_motion_file
        with mock.patch.object(app_module.analyze_motion_data, "load_motion_file",
                               wraps=loader) as load:
            self.client.get("/api/session", params={"dataset": "morning_ride.csv"})
            response = self.client.get("/api/export/csv", params={"dataset": "morning_ride.csv"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(load.call_count, 1)
        self.assertIn("morning_ride.csv", app_module.samples_cache)


if __name__ == '__main__':
    unittest.main()
