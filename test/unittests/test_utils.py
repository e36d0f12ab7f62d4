import unittest
from unittest import mock

from pcmkservice import utils


class TestUtils(unittest.TestCase):

    def test_is_boolean_true(self):
        for value in (True, 'yes', 'TRUE', 'on', '1', 1):
            self.assertTrue(utils.is_boolean_true(value))
        for value in (None, False, 'no', 'off', '0', 0, ''):
            self.assertFalse(utils.is_boolean_true(value))

    def test_verify_boolean(self):
        self.assertTrue(utils.verify_boolean('Off'))
        self.assertFalse(utils.verify_boolean('maybe'))

    def test_strip_prefix(self):
        self.assertEqual('foo', utils.strip_prefix('p_foo', 'p_'))
        self.assertEqual('foo_p_', utils.strip_prefix('foo_p_', 'p_'))

    def test_quote(self):
        self.assertEqual("'it'\\''s'", utils.quote("it's"))

    @mock.patch('os.access')
    @mock.patch('os.path.isfile')
    @mock.patch('os.getenv')
    def test_is_program(self, mock_getenv, mock_isfile, mock_access):
        mock_getenv.return_value = '/usr/bin:/bin'
        mock_isfile.side_effect = lambda f: f == '/bin/systemctl'
        mock_access.return_value = True
        self.assertEqual('/bin/systemctl', utils.is_program('systemctl'))

    @mock.patch('os.path.isfile')
    def test_is_program_missing(self, mock_isfile):
        mock_isfile.return_value = False
        self.assertIsNone(utils.is_program('systemctl'))
