"""Run shell commands on the local host.

LocalShell is a thin wrapper around the subprocess module used by the basic service backends. Commands run as the
current user through /bin/sh. Two flavours are provided:

1. get_rc_stdout_stderr returns the exit status with decoded and stripped outputs, leaving the interpretation of the
   exit status to the caller (e.g. `systemctl is-active` exits non-zero for an inactive unit).
2. get_stdout_or_raise_error raises CommandFailure unless the exit status is one of the accepted ones.
"""
import logging
import subprocess
import typing


logger = logging.getLogger(__name__)


class Error(ValueError):
    def __init__(self, msg, cmd):
        super().__init__(msg)
        self.cmd = cmd


class CommandFailure(Error):
    def __init__(self, cmd: str, msg: str):
        super().__init__("Failed to run '{}': {}".format(cmd, msg), cmd)


class Utils:
    @staticmethod
    def decode_str(x: bytes):
        try:
            return x.decode('utf-8')
        except UnicodeDecodeError as e:
            logger.debug('UTF-8 decode failure', exc_info=e)
            return x.decode('utf-8', errors='backslashreplace')


class LocalShell:
    """Provides methods to run commands on localhost as current user"""

    def subprocess_run(self, cmd: str, **kwargs):
        args = ['/bin/sh', '-c', cmd]
        logger.debug('subprocess_run: %s, %s', args, kwargs)
        return subprocess.run(args, **kwargs)

    def get_rc_stdout_stderr_raw(self, cmd: str) -> typing.Tuple[int, bytes, bytes]:
        result = self.subprocess_run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        return result.returncode, result.stdout, result.stderr

    def get_rc_stdout_stderr(self, cmd: str) -> typing.Tuple[int, str, str]:
        rc, stdout, stderr = self.get_rc_stdout_stderr_raw(cmd)
        return rc, Utils.decode_str(stdout).strip(), Utils.decode_str(stderr).strip()

    def get_stdout_or_raise_error(
            self,
            cmd: str,
            success_exit_status: typing.Optional[typing.Set[int]] = None,
    ) -> str:
        rc, stdout, stderr = self.get_rc_stdout_stderr_raw(cmd)
        to_raise = False
        if success_exit_status is None:
            if rc != 0:
                to_raise = True
        else:
            if rc not in success_exit_status:
                to_raise = True
        if not to_raise:
            return Utils.decode_str(stdout).strip()
        else:
            raise CommandFailure(cmd, Utils.decode_str(stderr).strip())


def local_shell():
    return LocalShell()
