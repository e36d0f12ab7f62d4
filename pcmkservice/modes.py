"""Types shared by the service controller: modes, topologies, identities and the mode configuration."""
import dataclasses
import enum
import typing

import yaml

from . import constants
from . import utils
from . import log


logger = log.setup_logger(__name__)


class InvalidMode(ValueError):
    def __init__(self, mode, operation=None):
        if operation is None:
            msg = "Unknown service mode '{}'".format(mode)
        else:
            msg = "Unknown service {} mode '{}'".format(operation, mode)
        super().__init__(msg)
        self.mode = mode
        self.operation = operation


class Mode(enum.Enum):
    GLOBAL = constants.MODE_GLOBAL
    LOCAL = constants.MODE_LOCAL
    MASTER = constants.MODE_MASTER

    def __str__(self):
        return self.value


class Topology(enum.Enum):
    SIMPLE = constants.TOPOLOGY_SIMPLE
    CLONE = constants.TOPOLOGY_CLONE
    MULTISTATE = constants.TOPOLOGY_MULTISTATE

    def __str__(self):
        return self.value


class Status(enum.Enum):
    RUNNING = constants.STATUS_RUNNING
    STOPPED = constants.STATUS_STOPPED

    def __str__(self):
        return self.value


def parse_mode(value, operation=None) -> Mode:
    """
    Convert a Mode member or a case-insensitive mode name to Mode
    Raise InvalidMode for anything else
    """
    if isinstance(value, Mode):
        return value
    if isinstance(value, str):
        try:
            return Mode(value.strip().lower())
        except ValueError:
            pass
    raise InvalidMode(value, operation)


@dataclasses.dataclass(frozen=True)
class ServiceIdentity:
    title: str
    configured_name: typing.Optional[str] = None

    def __post_init__(self):
        if not self.title:
            raise ValueError("Service title should not be empty")
        if not self.configured_name:
            object.__setattr__(self, 'configured_name', self.title)

    @property
    def name_equals_title(self) -> bool:
        return self.title == self.configured_name

    def __str__(self):
        if self.name_equals_title:
            return self.title
        return "{} (name: {})".format(self.title, self.configured_name)


_MODE_FIELDS = (
    'start_mode_simple', 'start_mode_clone', 'start_mode_multistate',
    'stop_mode_simple', 'stop_mode_clone', 'stop_mode_multistate',
    'status_mode_simple', 'status_mode_clone', 'status_mode_multistate',
)
_SET_FIELDS = ('native_based_primitive_classes', 'disabled_basic_service_providers')


@dataclasses.dataclass(frozen=True)
class ModeConfig:
    start_mode_simple: Mode = Mode.GLOBAL
    start_mode_clone: Mode = Mode.GLOBAL
    start_mode_multistate: Mode = Mode.MASTER
    stop_mode_simple: Mode = Mode.GLOBAL
    stop_mode_clone: Mode = Mode.GLOBAL
    stop_mode_multistate: Mode = Mode.GLOBAL
    status_mode_simple: Mode = Mode.LOCAL
    status_mode_clone: Mode = Mode.LOCAL
    status_mode_multistate: Mode = Mode.LOCAL
    add_location_constraint: bool = True
    cleanup_on_start: bool = True
    cleanup_on_stop: bool = True
    cleanup_on_status: bool = True
    cleanup_only_if_failures: bool = True
    restart_only_if_local: bool = False
    disable_basic_service_on_start: bool = True
    disable_basic_service_on_stop: bool = True
    disable_basic_service_on_status: bool = True
    native_based_primitive_classes: typing.FrozenSet[str] = frozenset(constants.NATIVE_BASED_PRIMITIVE_CLASSES)
    disabled_basic_service_providers: typing.FrozenSet[str] = frozenset()

    def __post_init__(self):
        for name in _MODE_FIELDS:
            object.__setattr__(self, name, parse_mode(getattr(self, name), name.split('_')[0]))
        for name in _SET_FIELDS:
            object.__setattr__(self, name, _to_frozenset(getattr(self, name)))

    @classmethod
    def field_names(cls) -> typing.List[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_dict(cls, data: typing.Mapping[str, typing.Any]) -> 'ModeConfig':
        """
        Build ModeConfig from a mapping of option names to values
        Option names may use dashes or underscores
        """
        known = cls.field_names()
        kwargs = {}
        for key, value in data.items():
            name = str(key).replace('-', '_')
            if name not in known:
                raise ValueError("Unknown service option '{}'".format(key))
            if name in _MODE_FIELDS or name in _SET_FIELDS or value is None:
                kwargs[name] = value
            else:
                kwargs[name] = utils.is_boolean_true(value)
        return cls(**kwargs)

    def mode_for(self, operation: str, topology: Topology) -> Mode:
        """
        Pick the configured mode for operation (start/stop/status) and topology
        """
        return getattr(self, "{}_mode_{}".format(operation, topology.value))

    def cleanup_on(self, operation: str) -> bool:
        return getattr(self, "cleanup_on_{}".format(operation))

    def disable_basic_service_on(self, operation: str) -> bool:
        if operation not in ("start", "stop", "status"):
            raise ValueError("Action '{}' is incorrect!".format(operation))
        return getattr(self, "disable_basic_service_on_{}".format(operation))


def _to_frozenset(value) -> typing.FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset(x.strip() for x in value.replace(',', ' ').split() if x.strip())
    return frozenset(str(x) for x in value)


def load_profile(path: str, name: str = constants.DEFAULT_PROFILE_NAME) -> ModeConfig:
    """
    Load mode options from a YAML profiles file

    The "default" profile is merged with the named profile,
    the named one wins on conflicting keys
    """
    try:
        with open(path) as f:
            profiles_data = yaml.load(f, Loader=yaml.SafeLoader)
    except FileNotFoundError:
        logger.debug("Profiles file %s not found, using built-in defaults", path)
        return ModeConfig()
    # empty file
    if not profiles_data:
        return ModeConfig()
    if not isinstance(profiles_data, dict):
        raise ValueError("Profiles file {} should contain a mapping".format(path))

    default_profile_dict = _load_specific_profile(profiles_data, constants.DEFAULT_PROFILE_NAME)
    specific_profile_dict = {}
    if name != constants.DEFAULT_PROFILE_NAME:
        specific_profile_dict = _load_specific_profile(profiles_data, name)
    # merge two dictionaries
    profile_dict = {**default_profile_dict, **specific_profile_dict}
    logger.debug("Loaded mode profile '%s' from %s: %s", name, path, profile_dict)
    return ModeConfig.from_dict(profile_dict)


def _load_specific_profile(profiles_data, profile_name):
    if profile_name not in profiles_data:
        logger.debug("Profile '%s' not found in profiles data", profile_name)
        return {}
    return profiles_data[profile_name] or {}
