import io
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from py_mysql_probe import cli
from py_mysql_probe.outcome import Detected, DialFailure, NotMySQL
from py_mysql_probe.packet.handshake import Handshake
from py_mysql_probe.tests.fixtures import MYSQL_846_PACKET

__all__ = ["TestSettings", "TestMain"]


class TestSettings(unittest.TestCase):

    def write_conf(self, text):
        fd, path = tempfile.mkstemp(suffix='.conf')
        with os.fdopen(fd, 'w') as fw:
            fw.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_defaults(self):
        settings = cli.load_settings([])
        self.assertEqual(settings['host'], '127.0.0.1')
        self.assertEqual(settings['port'], 3306)
        self.assertEqual(settings['timeout'], 3.0)
        self.assertFalse(settings['verbose'])
        self.assertEqual(settings['log_level'], logging.WARNING)
        self.assertIsNone(settings['log_file'])

    def test_flags(self):
        settings = cli.load_settings(['--host', 'db1', '--port', '3307', '--timeout', '0.5', '-v',
                                      '--log-level', 'DEBUG'])
        self.assertEqual(settings['host'], 'db1')
        self.assertEqual(settings['port'], 3307)
        self.assertEqual(settings['timeout'], 0.5)
        self.assertTrue(settings['verbose'])
        self.assertEqual(settings['log_level'], logging.DEBUG)

    def test_config_then_flags(self):
        path = self.write_conf('[Probe]\nhost = 10.0.0.5\nport = 3310\nverbose = true\n'
                               '[Logging]\nlevel = 20\n')
        settings = cli.load_settings(['--config', path, '--port', '3311'])
        self.assertEqual(settings['host'], '10.0.0.5')
        self.assertEqual(settings['port'], 3311)
        self.assertEqual(settings['timeout'], 3.0)
        self.assertTrue(settings['verbose'])
        self.assertEqual(settings['log_level'], logging.INFO)

    def test_missing_config(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.load_settings(['--config', '/nonexistent/probe.conf'])

    def test_bad_values(self):
        path = self.write_conf('[Probe]\nport = mysql\n')
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.load_settings(['--config', path])
            with self.assertRaises(SystemExit):
                cli.load_settings(['--port', '70000'])
            with self.assertRaises(SystemExit):
                cli.load_settings(['--timeout', '0'])

    def test_timeout_not_finite(self):
        path = self.write_conf('[Probe]\ntimeout = inf\n')
        with redirect_stderr(io.StringIO()) as err:
            for argv in (['--timeout', 'nan'], ['--timeout', 'inf'], ['--config', path]):
                with self.assertRaises(SystemExit) as ctx:
                    cli.load_settings(argv)
                self.assertEqual(ctx.exception.code, 2)
        self.assertIn('timeout must be a positive number of seconds', err.getvalue())

    def test_main_rejects_nan_before_probing(self):
        with mock.patch.object(cli, 'probe') as probe, redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(['--host', '127.0.0.1', '--port', '1', '--timeout', 'nan'])
        probe.assert_not_called()


class TestMain(unittest.TestCase):

    def run_main(self, outcome, argv):
        out = io.StringIO()
        with mock.patch.object(cli, 'probe', return_value=outcome) as probe, \
                mock.patch.object(cli, 'init_logger'), redirect_stdout(out):
            status = cli.main(argv)
        return status, out.getvalue(), probe

    def test_detected(self):
        outcome = Detected(Handshake.loadFromPacket(MYSQL_846_PACKET))
        status, out, probe = self.run_main(outcome, ['--host', '192.168.1.100'])
        self.assertEqual(status, 0)
        self.assertEqual(out, '{"ok":true,"mysql":true,"server_version":"8.4.6","protocol":10,'
                              '"connection_id":10}\n')
        probe.assert_called_once_with('192.168.1.100', 3306, 3.0)

    def test_verbose(self):
        outcome = Detected(Handshake.loadFromPacket(MYSQL_846_PACKET))
        status, out, _ = self.run_main(outcome, ['-v'])
        self.assertEqual(status, 0)
        self.assertIn('"auth_plugin":"caching_sha2_password","preview_hex":"49000000', out)

    def test_failures_exit_zero(self):
        for outcome in (DialFailure('[Errno 111] Connection refused'), NotMySQL('short read')):
            status, out, _ = self.run_main(outcome, [])
            self.assertEqual(status, 0)
            self.assertEqual(len(out.splitlines()), 1)
