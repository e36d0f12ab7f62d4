import dataclasses
import typing

from . import constants
from . import log
from . import utils
from .cluster import ClusterControl
from .modes import ServiceIdentity


logger = log.setup_logger(__name__)


class PrimitiveNotFound(ValueError):
    def __init__(self, identity: ServiceIdentity, candidates: typing.Sequence[str] = ()):
        msg = "Primitive '{}'".format(identity.title)
        if not identity.name_equals_title:
            msg += " with name '{}'".format(identity.configured_name)
        msg += " was not found in CIB!"
        if candidates:
            msg += " Tried: {}".format(', '.join(candidates))
        super().__init__(msg)
        self.identity = identity
        self.candidates = list(candidates)


@dataclasses.dataclass(frozen=True)
class ResolvedPrimitive:
    short_name: str
    full_name: str

    @property
    def is_complex(self) -> bool:
        return self.short_name != self.full_name


def _prefix_variation(name):
    if name.startswith(constants.PRIMITIVE_PREFIX):
        return utils.strip_prefix(name, constants.PRIMITIVE_PREFIX)
    return constants.PRIMITIVE_PREFIX + name


def service_name_variations(name: str) -> typing.List[str]:
    """
    Generate a list of strings the service name could be written as
    """
    variations = [name, _prefix_variation(name)]
    for prefix in constants.COMPLEX_PREFIXES:
        if name.startswith(prefix):
            simple_name = utils.strip_prefix(name, prefix)
            variations += [simple_name, _prefix_variation(simple_name)]
            break
    return variations


def candidate_names(identity: ServiceIdentity) -> typing.List[str]:
    """
    Title variations first, then the configured name variations
    Duplicates are dropped keeping the first position
    """
    names = service_name_variations(identity.title)
    if not identity.name_equals_title:
        names += service_name_variations(identity.configured_name)
    candidates = []
    for name in names:
        if name and name not in candidates:
            candidates.append(name)
    return candidates


class PrimitiveNameResolver(object):
    """
    Find the primitive registered in the CIB for a service identity
    The result is kept for the lifetime of the resolver
    """
    def __init__(self, cluster: ClusterControl):
        self.cluster = cluster
        self._resolved = {}

    def pick_existing_name(self, candidates: typing.Iterable[str]) -> typing.Optional[str]:
        for name in candidates:
            if self.cluster.primitive_exists(name):
                return name
        return None

    def resolve(self, identity: ServiceIdentity) -> ResolvedPrimitive:
        if identity in self._resolved:
            return self._resolved[identity]

        candidates = candidate_names(identity)
        name = self.pick_existing_name(candidates)
        if name is None:
            raise PrimitiveNotFound(identity, candidates)
        if identity.name_equals_title:
            logger.debug("Using CIB name '%s' for primitive '%s'", name, identity.title)
        else:
            logger.debug("Using CIB name '%s' for primitive '%s' with name '%s'",
                         name, identity.title, identity.configured_name)

        full_name = name
        if self.cluster.primitive_is_complex(name):
            full_name = self.cluster.primitive_full_name(name)
            logger.debug("Using full name '%s' for complex primitive '%s'", full_name, name)

        resolved = ResolvedPrimitive(short_name=name, full_name=full_name)
        self._resolved[identity] = resolved
        return resolved
