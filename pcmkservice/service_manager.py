"""Backends managing a native (non-clustered) service on the local host.

Every backend registers itself by its provider name. A backend instance is bound to one service name; building it
fails with ExtraProviderError when the backend does not know that service.
"""
import glob
import os
import typing

from . import constants
from . import log
from . import sh
from . import utils


logger = log.setup_logger(__name__)


class ExtraProviderError(ValueError):
    def __init__(self, provider, service, msg):
        super().__init__("{} provider, service '{}': {}".format(provider, service, msg))
        self.provider = provider
        self.service = service


class ServiceBackend(object):
    """
    Base class of basic service backends
    """
    _registry = dict()
    provider_name = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.provider_name is not None:
            ServiceBackend._registry[cls.provider_name] = cls

    @staticmethod
    def get_backend_by_name(name: str) -> typing.Type['ServiceBackend']:
        return ServiceBackend._registry[name]

    @staticmethod
    def backend_names() -> typing.List[str]:
        return [name for name in constants.BASIC_SERVICE_PROVIDERS if name in ServiceBackend._registry]

    @classmethod
    def suitable(cls) -> bool:
        """Whether this backend can be used on the local host"""
        raise NotImplementedError

    def __init__(self, name: str, shell: sh.LocalShell = None):
        self.name = name
        if shell is None:
            self._shell = sh.local_shell()
        else:
            self._shell = shell
        if not self.service_is_available():
            raise ExtraProviderError(self.provider_name, name, "service is not available")

    def __str__(self):
        return "{}:{}".format(self.provider_name, self.name)

    def _run(self, cmd: str) -> int:
        rc, _, _ = self._shell.get_rc_stdout_stderr(cmd)
        return rc

    def _call(self, cmd: str) -> None:
        self._shell.get_stdout_or_raise_error(cmd)

    def service_is_available(self) -> bool:
        raise NotImplementedError

    def enableable(self) -> bool:
        return True

    def enabled(self) -> bool:
        raise NotImplementedError

    def running(self) -> bool:
        raise NotImplementedError

    def enable(self) -> None:
        raise NotImplementedError

    def disable(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class SystemdService(ServiceBackend):
    """
    Manage a service with systemctl
    """
    provider_name = "systemd"

    @classmethod
    def suitable(cls):
        return bool(utils.is_program("systemctl")) and os.path.isdir(constants.SYSTEMD_RUN_DIR)

    def _unit(self):
        unit = self.name if '.' in self.name else "{}.service".format(self.name)
        return utils.quote(unit)

    def service_is_available(self):
        out = self._shell.get_stdout_or_raise_error(
            "systemctl list-unit-files {}".format(self._unit()),
            success_exit_status={0, 1},
        )
        return "0 unit files listed" not in out and bool(out)

    def enabled(self):
        return 0 == self._run("systemctl is-enabled {}".format(self._unit()))

    def running(self):
        return 0 == self._run("systemctl is-active {}".format(self._unit()))

    def enable(self):
        self._call("systemctl enable {}".format(self._unit()))

    def disable(self):
        self._call("systemctl disable {}".format(self._unit()))

    def stop(self):
        self._call("systemctl stop {}".format(self._unit()))


class InitService(ServiceBackend):
    """
    Plain init script without any runlevel management
    """
    provider_name = "init"

    @classmethod
    def suitable(cls):
        return True

    def _script(self):
        return os.path.join(constants.INIT_D_DIR, self.name)

    def service_is_available(self):
        return os.path.isfile(self._script())

    def enableable(self):
        return False

    def enabled(self):
        return False

    def running(self):
        return 0 == self._run("{} status".format(utils.quote(self._script())))

    def stop(self):
        self._call("{} stop".format(utils.quote(self._script())))


class RedhatService(InitService):
    """
    Manage a SysV service with chkconfig and service
    """
    provider_name = "redhat"

    @classmethod
    def suitable(cls):
        return bool(utils.is_program("chkconfig")) and bool(utils.is_program("service"))

    def enableable(self):
        return True

    def enabled(self):
        return 0 == self._run("chkconfig {}".format(utils.quote(self.name)))

    def running(self):
        return 0 == self._run("service {} status".format(utils.quote(self.name)))

    def enable(self):
        self._call("chkconfig {} on".format(utils.quote(self.name)))

    def disable(self):
        self._call("chkconfig {} off".format(utils.quote(self.name)))

    def stop(self):
        self._call("service {} stop".format(utils.quote(self.name)))


class DebianService(InitService):
    """
    Manage a SysV service with update-rc.d and invoke-rc.d
    """
    provider_name = "debian"

    @classmethod
    def suitable(cls):
        return bool(utils.is_program("update-rc.d"))

    def enableable(self):
        return True

    def enabled(self):
        for runlevel in constants.RUNLEVELS:
            rc_dir = constants.RC_D_DIR_PATTERN.format(runlevel)
            if glob.glob(os.path.join(rc_dir, "S??{}".format(glob.escape(self.name)))):
                return True
        return False

    def enable(self):
        self._call("update-rc.d {} enable".format(utils.quote(self.name)))

    def disable(self):
        self._call("update-rc.d {} disable".format(utils.quote(self.name)))

    def stop(self):
        self._call("invoke-rc.d {} stop".format(utils.quote(self.name)))


class UpstartService(ServiceBackend):
    """
    Manage an upstart job with initctl and override files
    """
    provider_name = "upstart"

    @classmethod
    def suitable(cls):
        return bool(utils.is_program("initctl"))

    def _conf(self, ext="conf"):
        return os.path.join(constants.UPSTART_DIR, "{}.{}".format(self.name, ext))

    def service_is_available(self):
        return os.path.isfile(self._conf())

    def enabled(self):
        try:
            with open(self._conf("override")) as f:
                return not any(line.strip() == "manual" for line in f)
        except FileNotFoundError:
            return True

    def running(self):
        rc, out, _ = self._shell.get_rc_stdout_stderr("initctl status {}".format(utils.quote(self.name)))
        return rc == 0 and "start/running" in out

    def enable(self):
        override = self._conf("override")
        try:
            with open(override) as f:
                lines = [line for line in f if line.strip() != "manual"]
        except FileNotFoundError:
            return
        with open(override, "w") as f:
            f.writelines(lines)

    def disable(self):
        with open(self._conf("override"), "a") as f:
            f.write("manual\n")

    def stop(self):
        self._call("initctl stop {}".format(utils.quote(self.name)))


def suitable_backends(disabled: typing.Iterable[str] = ()) -> typing.List[typing.Type[ServiceBackend]]:
    """
    Backends usable on this host which are not in the disabled set
    """
    disabled = set(disabled or ())
    backends = []
    for name in ServiceBackend.backend_names():
        if name in disabled:
            logger.debug("Basic service provider '%s' is disabled", name)
            continue
        backend = ServiceBackend.get_backend_by_name(name)
        if backend.suitable():
            backends.append(backend)
    return backends
