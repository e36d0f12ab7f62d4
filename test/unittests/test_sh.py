import subprocess
import unittest
from unittest import mock

import pcmkservice.sh


class TestLocalShell(unittest.TestCase):
    def setUp(self) -> None:
        self.local_shell = pcmkservice.sh.LocalShell()

    @mock.patch('subprocess.run')
    def test_subprocess_run(self, mock_run: mock.MagicMock):
        self.local_shell.subprocess_run('foo', input=b'bar')
        mock_run.assert_called_once_with(['/bin/sh', '-c', 'foo'], input=b'bar')

    @mock.patch('subprocess.run')
    def test_get_rc_stdout_stderr_raw(self, mock_run: mock.MagicMock):
        mock_run.return_value = subprocess.CompletedProcess(['/bin/sh'], 3, b'out', b'err')
        self.assertEqual((3, b'out', b'err'), self.local_shell.get_rc_stdout_stderr_raw('foo'))
        mock_run.assert_called_once_with(
            ['/bin/sh', '-c', 'foo'],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )

    def test_get_rc_stdout_stderr_decoded_and_stripped(self):
        self.local_shell.get_rc_stdout_stderr_raw = mock.Mock(self.local_shell.get_rc_stdout_stderr_raw)
        self.local_shell.get_rc_stdout_stderr_raw.return_value = 1, b' out \n', b'\terr\t\n'
        rc, out, err = self.local_shell.get_rc_stdout_stderr('foo')
        self.assertEqual(1, rc)
        self.assertEqual('out', out)
        self.assertEqual('err', err)
        self.local_shell.get_rc_stdout_stderr_raw.assert_called_once_with('foo')

    def test_get_stdout_or_raise_error(self):
        self.local_shell.get_rc_stdout_stderr_raw = mock.Mock(self.local_shell.get_rc_stdout_stderr_raw)
        self.local_shell.get_rc_stdout_stderr_raw.return_value = 0, b'output\n', b''
        self.assertEqual('output', self.local_shell.get_stdout_or_raise_error('foo'))

    def test_get_stdout_or_raise_error_failed(self):
        self.local_shell.get_rc_stdout_stderr_raw = mock.Mock(self.local_shell.get_rc_stdout_stderr_raw)
        self.local_shell.get_rc_stdout_stderr_raw.return_value = 1, b'', b'no such unit\n'
        with self.assertRaises(pcmkservice.sh.CommandFailure) as ctx:
            self.local_shell.get_stdout_or_raise_error('foo')
        self.assertIsInstance(ctx.exception, ValueError)
        self.assertEqual('foo', ctx.exception.cmd)
        self.assertEqual("Failed to run 'foo': no such unit", str(ctx.exception))

    def test_get_stdout_or_raise_error_accepted_status(self):
        self.local_shell.get_rc_stdout_stderr_raw = mock.Mock(self.local_shell.get_rc_stdout_stderr_raw)
        self.local_shell.get_rc_stdout_stderr_raw.return_value = 1, b'0 unit files listed.', b''
        self.assertEqual(
            '0 unit files listed.',
            self.local_shell.get_stdout_or_raise_error('foo', success_exit_status={0, 1}),
        )

    def test_decode_invalid_utf8(self):
        self.assertEqual('a\\xffb', pcmkservice.sh.Utils.decode_str(b'a\xffb'))
