"""Contract of the cluster control interface consumed by the service controller.

The concrete implementation runs the CRM tools (crm_resource, crm_node, cibadmin, ...) and owns every detail of the
CIB format, polling intervals and timeouts. The controller only relies on the methods below. Every method may raise
ClusterInterfaceError; all of them are expected to be idempotent so the caller can retry them freely.
"""
import typing

from . import utils
from .modes import Status


RetryAction = typing.Optional[typing.Callable[[], None]]


class ClusterInterfaceError(ValueError):
    def __init__(self, msg, primitive=None):
        super().__init__(msg)
        self.primitive = primitive


class ClusterControl:

    def hostname(self) -> str:
        """Name of this node as known to the cluster."""
        return utils.this_node()

    # queries

    def primitive_exists(self, name: str) -> bool:
        raise NotImplementedError

    def primitive_is_managed(self, name: str) -> bool:
        raise NotImplementedError

    def primitive_is_clone(self, name: str) -> bool:
        raise NotImplementedError

    def primitive_is_multistate(self, name: str) -> bool:
        raise NotImplementedError

    def primitive_is_complex(self, name: str) -> bool:
        """Whether the primitive is wrapped by a group, clone or master resource."""
        raise NotImplementedError

    def primitive_full_name(self, name: str) -> str:
        """Id of the topmost resource containing this primitive."""
        raise NotImplementedError

    def primitive_class(self, name: str) -> str:
        """Resource agent class of the primitive (ocf, lsb, systemd, ...)."""
        raise NotImplementedError

    def primitive_has_failures(self, name: str, node: str) -> bool:
        raise NotImplementedError

    def primitive_is_running(self, name: str, node: str) -> bool:
        raise NotImplementedError

    def location_constraint_exists(self, name: str, node: str) -> bool:
        raise NotImplementedError

    def get_primitive_status(self, name: str, node: typing.Optional[str] = None) -> Status:
        """Running state of the primitive on the node, or anywhere in the cluster if node is None."""
        raise NotImplementedError

    def get_primitive_enable(self, name: str) -> bool:
        raise NotImplementedError

    # actions

    def manage_primitive(self, name: str) -> None:
        raise NotImplementedError

    def unmanage_primitive(self, name: str) -> None:
        raise NotImplementedError

    def ban_primitive(self, name: str, node: str) -> None:
        raise NotImplementedError

    def unban_primitive(self, name: str, node: str) -> None:
        raise NotImplementedError

    def start_primitive(self, name: str) -> None:
        raise NotImplementedError

    def stop_primitive(self, name: str) -> None:
        raise NotImplementedError

    def add_location_constraint(self, full_name: str, node: str) -> None:
        raise NotImplementedError

    def cleanup_primitive(self, full_name: str, node: str) -> None:
        raise NotImplementedError

    def cib_reset(self, tag: str) -> None:
        """Drop any cached view of the CIB so the next query reads it again."""
        raise NotImplementedError

    # waits
    # retry is called on the iterations where another attempt of the action is needed

    def wait_for_online(self, tag: str) -> None:
        raise NotImplementedError

    def wait_for_start(self, name: str, node: typing.Optional[str] = None, retry: RetryAction = None) -> None:
        raise NotImplementedError

    def wait_for_stop(self, name: str, node: typing.Optional[str] = None, retry: RetryAction = None) -> None:
        raise NotImplementedError

    def wait_for_master(self, name: str, retry: RetryAction = None) -> None:
        raise NotImplementedError

    def wait_for_status(self, name: str) -> None:
        raise NotImplementedError

    def cluster_debug_report(self, tag: str) -> str:
        return ''
