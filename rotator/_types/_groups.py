import dataclasses
import typing

from rotator import _configs


@dataclasses.dataclass(frozen=True)
class PollPolicy:
    """Bounds for a blocking poll against the AWS control plane."""

    #: Number of seconds to sleep between attempts.
    delay: float
    #: Number of times the condition is checked before giving up.
    max_attempts: int

    @classmethod
    def from_config(
        cls,
        data: typing.Optional[typing.Dict[str, typing.Any]],
        default: "PollPolicy",
    ) -> "PollPolicy":
        """Create a policy from config data, falling back on the default values."""
        data = data or {}
        return cls(
            delay=float(data.get("delay", default.delay)),
            max_attempts=int(data.get("max_attempts", default.max_attempts)),
        )

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {"delay": self.delay, "max_attempts": self.max_attempts}


@dataclasses.dataclass(frozen=True)
class GroupInstance:
    """Data structure that describes an instance as a member of an auto scaling group."""

    instance_id: str
    #: Auto Scaling lifecycle state, e.g. "InService" or "Detaching".
    lifecycle_state: str
    #: Launch configuration name or "{launch-template-id}:{version}" that the
    #: instance was launched from.
    launch_identity: typing.Optional[str]
    group_name: typing.Optional[str] = None
    health_status: typing.Optional[str] = None

    @property
    def is_terminating(self) -> bool:
        """Whether or not the instance is already leaving the group."""
        return self.lifecycle_state in _configs.TERMINATING_STATES

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {
            "instance_id": self.instance_id,
            "lifecycle_state": self.lifecycle_state,
            "launch_identity": self.launch_identity,
        }


@dataclasses.dataclass(frozen=True)
class Group:
    """Data structure that describes an auto scaling group on which to operate."""

    name: str
    #: Number of instances the group is trying to keep in service.
    desired_capacity: int
    #: Launch configuration name or "{launch-template-id}:{version}" that new
    #: instances in the group are currently launched from.
    launch_identity: typing.Optional[str]
    instances: typing.List["GroupInstance"] = dataclasses.field(
        default_factory=lambda: []
    )

    @property
    def in_service_count(self) -> int:
        """Number of member instances currently in service."""
        return len(
            [
                i
                for i in self.instances
                if i.lifecycle_state == _configs.IN_SERVICE_STATE
            ]
        )

    def is_outdated(self, instance: "GroupInstance") -> bool:
        """Whether or not the instance was launched from a superseded launch spec."""
        return instance.launch_identity != self.launch_identity


@dataclasses.dataclass(frozen=True)
class Ec2Instance:
    """Data structure that describes the EC2 side of a group instance."""

    instance_id: str
    #: EC2 power state name, e.g. "running" or "stopped".
    state: str
    #: Public DNS name of the instance, or its public IP when it has no DNS name.
    public_address: typing.Optional[str] = None
    #: EBS volume identifiers in block device mapping order.
    volume_ids: typing.List[str] = dataclasses.field(default_factory=lambda: [])

    @property
    def is_shut_down(self) -> bool:
        """Whether or not the instance is stopping or stopped."""
        return self.state in _configs.SHUT_DOWN_STATES


@dataclasses.dataclass(frozen=True)
class RotationPlan:
    """
    Result of the rotate phase that is handed to the teardown phase.

    Instances are listed in the order in which they were cycled and volumes
    are only listed for instances that were cycled.
    """

    group_name: typing.Optional[str]
    shutdown_instances: typing.List["GroupInstance"] = dataclasses.field(
        default_factory=lambda: []
    )
    volume_ids: typing.List[str] = dataclasses.field(default_factory=lambda: [])

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {
            "group_name": self.group_name,
            "shutdown_instances": [i.instance_id for i in self.shutdown_instances],
            "volume_ids": list(self.volume_ids),
        }


@dataclasses.dataclass(frozen=True)
class ItemResult:
    """Outcome of a single teardown action for an instance or volume."""

    identifier: str
    outcome: str
    error: typing.Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """Whether or not the item was handled without error."""
        return self.outcome != _configs.FAILED

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {"id": self.identifier, "outcome": self.outcome, "error": self.error}


@dataclasses.dataclass(frozen=True)
class TeardownReport:
    """Collected outcomes of the teardown phase."""

    terminations: typing.List["ItemResult"] = dataclasses.field(
        default_factory=lambda: []
    )
    deletions: typing.List["ItemResult"] = dataclasses.field(
        default_factory=lambda: []
    )

    @property
    def terminated_ids(self) -> typing.List[str]:
        """Identifiers of the instances that were terminated."""
        return [
            r.identifier for r in self.terminations if r.outcome == _configs.TERMINATED
        ]

    @property
    def failures(self) -> typing.List["ItemResult"]:
        """All items that failed during teardown."""
        return [r for r in (*self.terminations, *self.deletions) if not r.succeeded]

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {
            "terminations": [r.to_dict() for r in self.terminations],
            "deletions": [r.to_dict() for r in self.deletions],
        }
