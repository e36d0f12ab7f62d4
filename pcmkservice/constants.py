# See COPYING for license information.

MODE_GLOBAL = "global"
MODE_LOCAL = "local"
MODE_MASTER = "master"
MODES = (MODE_GLOBAL, MODE_LOCAL, MODE_MASTER)

STATUS_RUNNING = "running"
STATUS_STOPPED = "stopped"

TOPOLOGY_SIMPLE = "simple"
TOPOLOGY_CLONE = "clone"
TOPOLOGY_MULTISTATE = "multistate"

PRIMITIVE_PREFIX = "p_"
COMPLEX_PREFIXES = ("ms-", "clone-")

# tags passed to the cluster interface for CIB reset and online wait
STATUS_TAG = "service_status"

# primitive classes which run the native service themselves
NATIVE_BASED_PRIMITIVE_CLASSES = ("lsb", "systemd", "upstart", "service")

# known basic service backends, in probing order
BASIC_SERVICE_PROVIDERS = ("systemd", "redhat", "debian", "upstart", "init")

DEFAULT_PROFILE_NAME = "default"

SYSTEMD_RUN_DIR = "/run/systemd/system"
INIT_D_DIR = "/etc/init.d"
UPSTART_DIR = "/etc/init"
RC_D_DIR_PATTERN = "/etc/rc{}.d"
RUNLEVELS = ("2", "3", "4", "5")

RED = '\033[31m'
YELLOW = '\033[33m'
GREEN = '\033[32m'
END = '\033[0m'

# vim:ts=4:sw=4:et:
