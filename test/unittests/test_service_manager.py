import unittest
from unittest import mock

import pcmkservice.sh
from pcmkservice import service_manager
from pcmkservice.service_manager import ExtraProviderError, ServiceBackend


class TestRegistry(unittest.TestCase):

    def test_backend_names(self):
        self.assertEqual(['systemd', 'redhat', 'debian', 'upstart', 'init'], ServiceBackend.backend_names())

    def test_get_backend_by_name(self):
        self.assertIs(service_manager.SystemdService, ServiceBackend.get_backend_by_name('systemd'))

    @mock.patch('pcmkservice.service_manager.InitService.suitable')
    @mock.patch('pcmkservice.service_manager.UpstartService.suitable')
    @mock.patch('pcmkservice.service_manager.DebianService.suitable')
    @mock.patch('pcmkservice.service_manager.RedhatService.suitable')
    @mock.patch('pcmkservice.service_manager.SystemdService.suitable')
    def test_suitable_backends(self, mock_systemd, mock_redhat, mock_debian, mock_upstart, mock_init):
        mock_systemd.return_value = True
        mock_redhat.return_value = False
        mock_debian.return_value = True
        mock_upstart.return_value = True
        mock_init.return_value = True
        res = service_manager.suitable_backends({'debian'})
        self.assertEqual(
            [service_manager.SystemdService, service_manager.UpstartService, service_manager.InitService],
            res,
        )
        mock_debian.assert_not_called()


class TestSystemdService(unittest.TestCase):

    def setUp(self):
        self.shell = mock.Mock(pcmkservice.sh.LocalShell)
        self.shell.get_stdout_or_raise_error.return_value = "nginx.service enabled enabled\n\n1 unit files listed."
        self.service = service_manager.SystemdService('nginx', self.shell)

    def test_init(self):
        self.assertEqual('nginx', self.service.name)
        self.assertEqual('systemd:nginx', str(self.service))
        self.shell.get_stdout_or_raise_error.assert_called_once_with(
            "systemctl list-unit-files 'nginx.service'", success_exit_status={0, 1})

    def test_init_not_available(self):
        self.shell.get_stdout_or_raise_error.return_value = "0 unit files listed."
        with self.assertRaises(ExtraProviderError) as err:
            service_manager.SystemdService('nosuch', self.shell)
        self.assertEqual('systemd', err.exception.provider)
        self.assertEqual('nosuch', err.exception.service)

    def test_unit_with_suffix(self):
        service = service_manager.SystemdService('nginx.service', self.shell)
        self.shell.get_rc_stdout_stderr.return_value = (0, 'active', '')
        self.assertTrue(service.running())
        self.shell.get_rc_stdout_stderr.assert_called_once_with("systemctl is-active 'nginx.service'")

    def test_enabled(self):
        self.shell.get_rc_stdout_stderr.return_value = (1, 'disabled', '')
        self.assertTrue(self.service.enableable())
        self.assertFalse(self.service.enabled())
        self.shell.get_rc_stdout_stderr.assert_called_once_with("systemctl is-enabled 'nginx.service'")

    def test_disable_and_stop(self):
        self.service.disable()
        self.service.stop()
        self.shell.get_stdout_or_raise_error.assert_has_calls([
            mock.call("systemctl disable 'nginx.service'"),
            mock.call("systemctl stop 'nginx.service'"),
        ])

    def test_stop_failure(self):
        self.shell.get_stdout_or_raise_error.side_effect = pcmkservice.sh.CommandFailure('systemctl stop', 'denied')
        with self.assertRaises(pcmkservice.sh.CommandFailure):
            self.service.stop()


class TestInitServices(unittest.TestCase):

    def setUp(self):
        self.shell = mock.Mock(pcmkservice.sh.LocalShell)

    @mock.patch('os.path.isfile')
    def test_init_not_enableable(self, mock_isfile):
        mock_isfile.return_value = True
        service = service_manager.InitService('ntpd', self.shell)
        self.assertFalse(service.enableable())
        self.shell.get_rc_stdout_stderr.return_value = (3, '', '')
        self.assertFalse(service.running())
        self.shell.get_rc_stdout_stderr.assert_called_once_with("'/etc/init.d/ntpd' status")
        mock_isfile.assert_called_once_with('/etc/init.d/ntpd')

    @mock.patch('os.path.isfile')
    def test_init_no_script(self, mock_isfile):
        mock_isfile.return_value = False
        with self.assertRaises(ExtraProviderError):
            service_manager.InitService('ntpd', self.shell)

    @mock.patch('os.path.isfile')
    def test_redhat(self, mock_isfile):
        mock_isfile.return_value = True
        service = service_manager.RedhatService('ntpd', self.shell)
        self.shell.get_rc_stdout_stderr.return_value = (0, '', '')
        self.assertTrue(service.enableable())
        self.assertTrue(service.enabled())
        service.disable()
        service.stop()
        self.shell.get_rc_stdout_stderr.assert_called_once_with("chkconfig 'ntpd'")
        self.shell.get_stdout_or_raise_error.assert_has_calls([
            mock.call("chkconfig 'ntpd' off"),
            mock.call("service 'ntpd' stop"),
        ])

    @mock.patch('glob.glob')
    @mock.patch('os.path.isfile')
    def test_debian_enabled(self, mock_isfile, mock_glob):
        mock_isfile.return_value = True
        mock_glob.side_effect = [[], ['/etc/rc3.d/S02ntp']]
        service = service_manager.DebianService('ntp', self.shell)
        self.assertTrue(service.enabled())
        mock_glob.assert_has_calls([mock.call('/etc/rc2.d/S??ntp'), mock.call('/etc/rc3.d/S??ntp')])

    @mock.patch('glob.glob')
    @mock.patch('os.path.isfile')
    def test_debian_disabled(self, mock_isfile, mock_glob):
        mock_isfile.return_value = True
        mock_glob.return_value = []
        service = service_manager.DebianService('ntp', self.shell)
        self.assertFalse(service.enabled())
        service.disable()
        self.shell.get_stdout_or_raise_error.assert_called_once_with("update-rc.d 'ntp' disable")


class TestUpstartService(unittest.TestCase):

    def setUp(self):
        self.shell = mock.Mock(pcmkservice.sh.LocalShell)

    @mock.patch('os.path.isfile')
    def test_running(self, mock_isfile):
        mock_isfile.return_value = True
        service = service_manager.UpstartService('mysql', self.shell)
        self.shell.get_rc_stdout_stderr.return_value = (0, 'mysql start/running, process 42', '')
        self.assertTrue(service.running())
        self.shell.get_rc_stdout_stderr.return_value = (0, 'mysql stop/waiting', '')
        self.assertFalse(service.running())

    @mock.patch('builtins.open', new_callable=mock.mock_open, read_data='manual\n')
    @mock.patch('os.path.isfile')
    def test_enabled_with_manual_override(self, mock_isfile, mock_file):
        mock_isfile.return_value = True
        service = service_manager.UpstartService('mysql', self.shell)
        self.assertFalse(service.enabled())
        mock_file.assert_called_once_with('/etc/init/mysql.override')

    @mock.patch('builtins.open')
    @mock.patch('os.path.isfile')
    def test_enabled_without_override(self, mock_isfile, mock_open):
        mock_isfile.return_value = True
        mock_open.side_effect = FileNotFoundError
        service = service_manager.UpstartService('mysql', self.shell)
        self.assertTrue(service.enabled())

    @mock.patch('builtins.open', new_callable=mock.mock_open)
    @mock.patch('os.path.isfile')
    def test_disable(self, mock_isfile, mock_file):
        mock_isfile.return_value = True
        service = service_manager.UpstartService('mysql', self.shell)
        service.disable()
        mock_file.assert_called_once_with('/etc/init/mysql.override', 'a')
        mock_file().write.assert_called_once_with('manual\n')
