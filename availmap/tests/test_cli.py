"""Tests for CLI argument parsing and integration."""

import copy
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from availmap.availmap import create_parser, main
from availmap.config.loader import DEFAULT_CONFIG
from availmap.models.queries import read_document
from availmap.models.schema import get_connection


class TestArgumentParser(unittest.TestCase):
    """Test CLI argument parsing."""

    def setUp(self):
        self.parser = create_parser()

    def test_default_no_args(self):
        args = self.parser.parse_args([])
        self.assertFalse(args.heatmap)
        self.assertFalse(args.participants)
        self.assertIsNone(args.submit)
        self.assertFalse(args.serve)

    def test_submit_with_dates(self):
        args = self.parser.parse_args(['--submit', 'Kim', '--dates', '2025-07-04', '2025-07-05'])
        self.assertEqual(args.submit, 'Kim')
        self.assertEqual(args.dates, ['2025-07-04', '2025-07-05'])

    def test_views_mutually_exclusive(self):
        with self.assertRaises(SystemExit):
            with redirect_stdout(io.StringIO()), mock.patch('sys.stderr', io.StringIO()):
                self.parser.parse_args(['--heatmap', '--participants'])

    def test_serve_options(self):
        args = self.parser.parse_args(['--serve', '--port', '9000', '--no-browser'])
        self.assertTrue(args.serve)
        self.assertEqual(args.port, 9000)
        self.assertTrue(args.no_browser)


class TestMain(unittest.TestCase):
    """Run main() against a temporary database."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = Path(self.temp_dir) / "schedule.db"
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.config['database_path'] = str(self.db_path)
        patcher = mock.patch('availmap.availmap.load_config', return_value=self.config)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def run_main(self, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            main(argv)
        return out.getvalue()

    def stored(self):
        conn = get_connection(self.db_path)
        try:
            return read_document(conn)
        finally:
            conn.close()

    def test_submit_registers_then_updates(self):
        output = self.run_main(['--submit', ' Kim ', '--dates', '2025-07-05', '2025-07-04'])
        self.assertIn('registered', output)
        self.assertEqual(self.stored(), {'Kim': ['2025-07-04', '2025-07-05']})

        output = self.run_main(['--submit', 'Kim', '--dates', '2025-08-01'])
        self.assertIn('updated', output)
        self.assertEqual(self.stored(), {'Kim': ['2025-08-01']})

    def test_submit_outside_window_rejected(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(['--submit', 'Kim', '--dates', '2025-09-01'])
        self.assertEqual(ctx.exception.code, 2)
        self.assertEqual(self.stored(), {})

    def test_submit_without_dates_rejected(self):
        with self.assertRaises(SystemExit):
            self.run_main(['--submit', 'Kim'])

    def test_participants_json(self):
        self.run_main(['--submit', 'Kim', '--dates', '2025-07-04'])
        self.run_main(['--submit', 'Lee', '--dates', '2025-07-04'])
        output = self.run_main(['--participants', '--json'])
        self.assertEqual(json.loads(output), {'participants': ['Kim', 'Lee']})

    def test_participants_table(self):
        self.run_main(['--submit', 'Kim', '--dates', '2025-07-04'])
        output = self.run_main(['--participants', '--no-color'])
        self.assertIn('PARTICIPANTS (1)', output)
        self.assertIn('Kim', output)

    def test_heatmap_text(self):
        self.run_main(['--submit', 'Kim', '--dates', '2025-07-04'])
        output = self.run_main(['--no-color'])
        self.assertIn('AVAILABILITY HEATMAP', output)
        self.assertIn('2025-07', output)
        self.assertIn('2025-08', output)
        self.assertIn('2025-07-04 (Fri)  1 available', output)

    def test_heatmap_json(self):
        self.run_main(['--submit', 'Kim', '--dates', '2025-07-04'])
        cells = json.loads(self.run_main(['--heatmap', '--json']))['cells']
        self.assertEqual(len(cells), 62)
        counts = {c['date']: c['count'] for c in cells}
        self.assertEqual(counts['2025-07-04'], 1)


if __name__ == '__main__':
    unittest.main()
