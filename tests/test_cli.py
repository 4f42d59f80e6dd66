import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import analyze_motion_data

CSV_TEXT = """timestamp,accel_x,accel_y,accel_z,gyro_x,gyro_y,gyro_z
0,0,0,9.81,0,0,0
200,0,0,12.0,0,0,0
400,0,0,12.0,0,0,0
"""


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = Path(self.tmp.name)
        self.data_file = self.dir / "walk.csv"
        self.data_file.write_text(CSV_TEXT, encoding="utf-8")

    def run_cli(self, *args):
        out = io.StringIO()
        with redirect_stdout(out):
            code = analyze_motion_data.main([str(a) for a in args])
        return code, out.getvalue()

    def test_summary_and_exports(self):
        json_out = self.dir / "walk.json"
        csv_out = self.dir / "walk_processed.csv"
        plot_out = self.dir / "walk.png"

        code, output = self.run_cli(self.data_file, "--json", json_out, "--csv", csv_out,
                                    "--plot", plot_out)

        self.assertEqual(code, 0)
        self.assertIn("MOTION SUMMARY: walk.csv", output)
        payload = json.loads(json_out.read_text(encoding="utf-8"))
        self.assertEqual(payload["sample_count"], 3)
        self.assertEqual(len(csv_out.read_text(encoding="utf-8").strip().splitlines()), 4)
        self.assertTrue(plot_out.exists())

    def test_missing_columns_exit_code(self):
        bad = self.dir / "bad.csv"
        bad.write_text("timestamp,accel_x\n0,1\n", encoding="utf-8")
        code, output = self.run_cli(bad)
        self.assertEqual(code, 2)
        self.assertIn("missing required columns", output)

    def test_non_utf8_file_exit_code(self):
        latin = self.dir / "latin.csv"
        latin.write_bytes(CSV_TEXT.replace("9.81", "caf\xe9", 1).encode("latin-1"))
        code, output = self.run_cli(latin)
        self.assertEqual(code, 2)
        self.assertIn("not UTF-8", output)

    def test_missing_file_exit_code(self):
        code, _ = self.run_cli(self.dir / "nope.csv")
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
