import typing

from . import constants
from . import log
from . import sh
from . import utils
from .cluster import ClusterControl
from .modes import ModeConfig, ServiceIdentity
from .resolver import ResolvedPrimitive
from .service_manager import ServiceBackend, suitable_backends


logger = log.setup_logger(__name__)


def basic_service_name(resolved: ResolvedPrimitive, identity: ServiceIdentity) -> str:
    """
    Name of the basic service without 'p_' prefix
    The configured name wins over the primitive name when it differs from the title,
    because most likely it is the real system service name
    """
    name = resolved.short_name
    if not identity.name_equals_title:
        name = identity.configured_name
    return utils.strip_prefix(name, constants.PRIMITIVE_PREFIX)


class BasicServiceCoordinator(object):
    """
    Disable and stop the native service shadowed by a cluster primitive
    using every suitable basic service backend
    """
    def __init__(self, cluster: ClusterControl, mode_config: ModeConfig, shell: sh.LocalShell = None, backends=None):
        self.cluster = cluster
        self.mode_config = mode_config
        self._shell = shell
        self._backends = backends

    def backends(self) -> typing.List[typing.Type[ServiceBackend]]:
        if self._backends is not None:
            return [b for b in self._backends if b.provider_name not in self.mode_config.disabled_basic_service_providers]
        return suitable_backends(self.mode_config.disabled_basic_service_providers)

    def native_based_primitive(self, resolved: ResolvedPrimitive) -> typing.Tuple[bool, str]:
        if not self.mode_config.native_based_primitive_classes:
            return False, None
        primitive_class = self.cluster.primitive_class(resolved.short_name)
        return primitive_class in self.mode_config.native_based_primitive_classes, primitive_class

    def extra_providers(self, service_name: str, primitive: str) -> typing.List[ServiceBackend]:
        providers = []
        for backend in self.backends():
            try:
                providers.append(backend(service_name, self._shell))
            except Exception as e:
                logger.info("Could not get an extra provider for the Pacemaker primitive '%s': %s", primitive, e)
        return providers

    def disable_basic_service(self, resolved: ResolvedPrimitive, identity: ServiceIdentity) -> None:
        service_name = basic_service_name(resolved, identity)
        logger.debug("Using '%s' as the basic service name for the primitive '%s'", service_name, resolved.short_name)

        native, primitive_class = self.native_based_primitive(resolved)
        if native:
            logger.info("Not stopping basic service '%s', since its Pacemaker primitive is using primitive_class '%s'",
                        service_name, primitive_class)
            return

        for provider in self.extra_providers(service_name, resolved.short_name):
            # disabling and stopping are attempted independently
            for step in (self._disable_provider, self._stop_provider):
                try:
                    step(provider)
                except Exception as e:
                    logger.info("Could not disable basic service for Pacemaker primitive '%s' using '%s' provider: %s",
                                resolved.short_name, provider.provider_name, e)

    @staticmethod
    def _disable_provider(provider: ServiceBackend) -> None:
        if provider.enableable() and provider.enabled():
            logger.info("Disable basic service '%s' using provider '%s'", provider.name, provider.provider_name)
            provider.disable()
        else:
            logger.info("Basic service '%s' is disabled as reported by '%s' provider",
                        provider.name, provider.provider_name)

    @staticmethod
    def _stop_provider(provider: ServiceBackend) -> None:
        if provider.running():
            logger.info("Stop basic service '%s' using provider '%s'", provider.name, provider.provider_name)
            provider.stop()
        else:
            logger.info("Basic service '%s' is stopped as reported by '%s' provider",
                        provider.name, provider.provider_name)
