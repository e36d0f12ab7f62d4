"""Reconcile the desired state of a service with the Pacemaker primitive running it.

ServiceController is built for one reconciliation pass. The primitive name and its topology are resolved on the first
operation and kept in an OperationContext for the rest of the pass; everything else is queried from the cluster each
time. Mode dispatch picks the start/stop/status strategy by topology from the ModeConfig.
"""
import dataclasses
import typing

from . import constants
from . import log
from .basic_service import BasicServiceCoordinator
from .cluster import ClusterControl
from .modes import InvalidMode, Mode, ModeConfig, ServiceIdentity, Status, Topology, parse_mode
from .resolver import PrimitiveNameResolver, ResolvedPrimitive


logger = log.setup_logger(__name__)
logger_utils = log.LoggerUtils(logger)


@dataclasses.dataclass(frozen=True)
class OperationContext:
    primitive: ResolvedPrimitive
    topology: Topology
    node: str

    @property
    def name(self):
        return self.primitive.short_name

    @property
    def full_name(self):
        return self.primitive.full_name


class ServiceController(object):

    def __init__(
            self,
            identity: ServiceIdentity,
            cluster: ClusterControl,
            mode_config: ModeConfig = None,
            coordinator: BasicServiceCoordinator = None,
    ):
        self.identity = identity
        self.cluster = cluster
        self.mode_config = mode_config if mode_config is not None else ModeConfig()
        if coordinator is None:
            coordinator = BasicServiceCoordinator(cluster, self.mode_config)
        self.coordinator = coordinator
        self.resolver = PrimitiveNameResolver(cluster)
        self._context = None

    @property
    def context(self) -> OperationContext:
        if self._context is None:
            primitive = self.resolver.resolve(self.identity)
            self._context = OperationContext(
                primitive=primitive,
                topology=self._topology(primitive.short_name),
                node=self.cluster.hostname(),
            )
        return self._context

    def _topology(self, name) -> Topology:
        if self.cluster.primitive_is_multistate(name):
            return Topology.MULTISTATE
        if self.cluster.primitive_is_clone(name):
            return Topology.CLONE
        return Topology.SIMPLE

    def _call_log(self, action):
        ctx = self.context
        logger.debug("Call '%s' for Pacemaker service '%s' on node '%s'", action, ctx.name, ctx.node)
        return ctx

    def _debug_report(self, action):
        report = self.cluster.cluster_debug_report("{} {}".format(self.identity.title, action))
        if report:
            logger.debug(report)

    def disable_basic_service_on_action(self, action: str):
        """
        Run the disable basic service action only if it is enabled for this action
        """
        if not self.mode_config.disable_basic_service_on(action):
            return
        self.coordinator.disable_basic_service(self.context.primitive, self.identity)

    def cleanup(self):
        """
        Cleanup the primitive and wait until cleanup finishes
        """
        ctx = self.context
        self.cluster.cleanup_primitive(ctx.full_name, ctx.node)
        self.cluster.wait_for_status(ctx.name)

    def _cleanup_on_action(self, action):
        if not self.mode_config.cleanup_on(action):
            return
        ctx = self.context
        if not self.mode_config.cleanup_only_if_failures or self.cluster.primitive_has_failures(ctx.name, ctx.node):
            self.cleanup()

    def status(self) -> Status:
        ctx = self._call_log("status")
        self.disable_basic_service_on_action("status")

        self.cluster.cib_reset(constants.STATUS_TAG)
        self.cluster.wait_for_online(constants.STATUS_TAG)

        out = self.service_status_mode(self.mode_config.mode_for("status", ctx.topology))

        if self.mode_config.add_location_constraint:
            if out == Status.RUNNING and not self.cluster.location_constraint_exists(ctx.full_name, ctx.node):
                logger.debug('Location constraint is missing. Service status set to "stopped".')
                out = Status.STOPPED

        if self.mode_config.cleanup_on_status:
            if out == Status.RUNNING and self.cluster.primitive_has_failures(ctx.name, ctx.node):
                logger.debug("Primitive: '%s' has failures on the node: '%s' Service status set to 'stopped'.",
                             ctx.name, ctx.node)
                out = Status.STOPPED

        logger.debug("Return: '%s'", out)
        self._debug_report("status")
        return out

    def start(self):
        ctx = self._call_log("start")
        self.disable_basic_service_on_action("start")

        if not self.cluster.primitive_is_managed(ctx.name):
            self.enable()

        self._cleanup_on_action("start")

        if self.mode_config.add_location_constraint:
            if not self.cluster.location_constraint_exists(ctx.full_name, ctx.node):
                self.cluster.add_location_constraint(ctx.full_name, ctx.node)

        with logger_utils.status_long("start of Pacemaker service '{}'".format(ctx.name)):
            self.service_start_mode(self.mode_config.mode_for("start", ctx.topology))
        self._debug_report("start")

    def stop(self):
        ctx = self._call_log("stop")
        self.disable_basic_service_on_action("stop")

        if not self.cluster.primitive_is_managed(ctx.name):
            self.enable()

        self._cleanup_on_action("stop")

        with logger_utils.status_long("stop of Pacemaker service '{}'".format(ctx.name)):
            self.service_stop_mode(self.mode_config.mode_for("stop", ctx.topology))
        self._debug_report("stop")

    def restart(self):
        ctx = self._call_log("restart")
        if self.mode_config.restart_only_if_local and not self.cluster.primitive_is_running(ctx.name, ctx.node):
            logger.info("Pacemaker service '%s' is not running on node '%s'. Skipping restart!", ctx.name, ctx.node)
            return

        stop_error = self._try_stop()
        if stop_error is not None:
            logger.warning("The service have failed to stop! Trying to start it anyway... (%s)", stop_error)
        self.start()

    def _try_stop(self) -> typing.Optional[Exception]:
        try:
            self.stop()
        except Exception as e:
            return e
        return None

    def service_start_mode(self, mode: Mode):
        ctx = self.context
        mode = parse_mode(mode, "start")

        def start_action():
            self.cluster.unban_primitive(ctx.name, ctx.node)
            self.cluster.start_primitive(ctx.name)
            self.cluster.start_primitive(ctx.full_name)

        if mode == Mode.MASTER:
            logger.debug("Choose master start for Pacemaker service '%s'", ctx.name)
            start_action()
            self.cluster.wait_for_master(ctx.name, retry=start_action)
        elif mode == Mode.LOCAL:
            logger.debug("Choose local start for Pacemaker service '%s' on node '%s'", ctx.name, ctx.node)
            start_action()
            self.cluster.wait_for_start(ctx.name, ctx.node, retry=start_action)
        elif mode == Mode.GLOBAL:
            logger.debug("Choose global start for Pacemaker service '%s'", ctx.name)
            start_action()
            self.cluster.wait_for_start(ctx.name, retry=start_action)
        else:
            raise InvalidMode(mode, "start")

    def service_stop_mode(self, mode: Mode):
        ctx = self.context
        mode = parse_mode(mode, "stop")

        def ban_action():
            self.cluster.ban_primitive(ctx.name, ctx.node)

        def stop_action():
            self.cluster.stop_primitive(ctx.name)

        # master has no demotion of its own, it is stopped locally by a ban
        if mode in (Mode.MASTER, Mode.LOCAL):
            logger.debug("Choose %s stop for Pacemaker service '%s' on node '%s'", mode, ctx.name, ctx.node)
            ban_action()
            self.cluster.wait_for_stop(ctx.name, ctx.node, retry=ban_action)
        elif mode == Mode.GLOBAL:
            logger.debug("Choose global stop for Pacemaker service '%s'", ctx.name)
            stop_action()
            self.cluster.wait_for_stop(ctx.name, retry=stop_action)
        else:
            raise InvalidMode(mode, "stop")

    def service_status_mode(self, mode: Mode) -> Status:
        ctx = self.context
        mode = parse_mode(mode, "status")
        if mode == Mode.LOCAL:
            logger.debug("Choose local status for Pacemaker service '%s' on node '%s'", ctx.name, ctx.node)
            return self.cluster.get_primitive_status(ctx.name, ctx.node)
        elif mode == Mode.GLOBAL:
            logger.debug("Choose global status for Pacemaker service '%s'", ctx.name)
            return self.cluster.get_primitive_status(ctx.name)
        raise InvalidMode(mode, "status")

    def enable(self):
        ctx = self._call_log("enable")
        self.cluster.manage_primitive(ctx.name)

    def disable(self):
        ctx = self._call_log("disable")
        self.cluster.unmanage_primitive(ctx.name)

    manual_start = disable

    def is_enabled(self) -> bool:
        ctx = self._call_log("enabled?")
        out = bool(self.cluster.get_primitive_enable(ctx.name))
        logger.debug("Return: '%s'", out)
        return out
