import time
import typing

from rotator import _configs
from rotator import _controller
from rotator import _errors
from rotator import _types


def poll(
    check: typing.Callable[[], bool],
    policy: "_types.PollPolicy",
    before_attempt: typing.Callable[[], None] = None,
) -> bool:
    """
    Block until the check passes or the policy runs out of attempts.

    This is the only place in which the rotator suspends while waiting for the
    AWS control plane to change state. There is no cancellation other than
    terminating the process.

    :param check:
        Callable that returns True once the awaited condition has been met.
    :param policy:
        Delay and maximum number of attempts for the poll.
    :param before_attempt:
        Optional callable invoked before each attempt, commonly used to report
        the state being waited upon.
    :return:
        Whether or not the check passed within the allowed attempts.
    """
    for attempt in range(policy.max_attempts):
        if before_attempt is not None:
            before_attempt()
        if check():
            return True
        if attempt < policy.max_attempts - 1:
            time.sleep(policy.delay)
    return False


def wait_for_capacity(
    configs: "_types.RotatorConfigs",
    group_name: str,
    progress: "_types.Progress",
) -> "_types.Group":
    """
    Wait for the group to have its desired capacity of in-service instances.

    Before each attempt the group is reloaded and the state of each of its
    instances is reported so that operators can follow the replacement.

    :raises CapacityError:
        When the group does not return to capacity within the capacity policy.
    """
    progress.continue_(
        "Replacing outdated instances with new instances for the group...",
        {"group": group_name},
    )
    latest: typing.Dict[str, "_types.Group"] = {}

    def _report():
        group = _controller.get_group(configs, group_name)
        latest["group"] = group
        statuses = [f"{i.instance_id} ({i.lifecycle_state})" for i in group.instances]
        progress.continue_(f"Instances: {', '.join(statuses)}")

    def _at_capacity() -> bool:
        group = latest["group"]
        return group.in_service_count == group.desired_capacity

    if not poll(_at_capacity, configs.capacity_policy, before_attempt=_report):
        raise _errors.CapacityError(
            f"group {group_name} to reach its desired capacity",
            configs.capacity_policy,
        )

    progress.success("Group up to capacity!", {"group": group_name})
    return latest["group"]


def wait_for_instance_state(
    configs: "_types.RotatorConfigs",
    instance_id: str,
    state: str = _configs.IN_SERVICE_STATE,
) -> "_types.GroupInstance":
    """
    Wait for a group instance to reach the given lifecycle state.

    :raises WaitTimeoutError:
        When the instance does not reach the state within the instance policy.
    """
    latest: typing.Dict[str, typing.Optional["_types.GroupInstance"]] = {}

    def _in_state() -> bool:
        latest["instance"] = instance = _controller.get_group_instance(
            configs, instance_id
        )
        return instance is not None and instance.lifecycle_state == state

    if not poll(_in_state, configs.instance_policy):
        raise _errors.WaitTimeoutError(
            f"instance {instance_id} to be {state}", configs.instance_policy
        )
    return typing.cast(_types.GroupInstance, latest["instance"])


def wait_for_detached(configs: "_types.RotatorConfigs", instance_id: str):
    """
    Wait for a detaching instance to finish leaving its group.

    The instance is considered detached once its lifecycle state is Detached
    or once its auto scaling record is gone entirely.

    :raises WaitTimeoutError:
        When the detach does not settle within the detach policy.
    """

    def _detached() -> bool:
        instance = _controller.get_group_instance(configs, instance_id)
        return instance is None or instance.lifecycle_state == _configs.DETACHED_STATE

    if not poll(_detached, configs.detach_policy):
        raise _errors.WaitTimeoutError(
            f"instance {instance_id} to finish detaching", configs.detach_policy
        )


def wait_for_stopped(configs: "_types.RotatorConfigs", instance_id: str):
    """
    Wait for an EC2 instance to be fully stopped.

    An instance that no longer exists is considered stopped.

    :raises WaitTimeoutError:
        When the instance does not stop within the stopped policy.
    """

    def _stopped() -> bool:
        instance = _controller.get_instance(configs, instance_id)
        return instance is None or instance.state == _configs.STOPPED_STATE

    if not poll(_stopped, configs.stopped_policy):
        raise _errors.WaitTimeoutError(
            f"instance {instance_id} to stop", configs.stopped_policy
        )
