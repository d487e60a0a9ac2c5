import typing

from botocore import exceptions as botocore_exceptions

from rotator import _configs
from rotator import _controller
from rotator import _errors
from rotator import _inventory
from rotator import _reaper
from rotator import _shutdown
from rotator import _terminator
from rotator import _types
from rotator import _waiter


def _reattach_instance(
    configs: "_types.RotatorConfigs",
    instance: "_types.GroupInstance",
):
    """
    Re-attach a detached instance to its group.

    Instances that never started detaching are still members of the group and
    are left alone. Otherwise the detach is allowed to settle before the
    instance is attached again.
    """
    current = _controller.get_group_instance(configs, instance.instance_id)
    if current is not None and current.lifecycle_state not in (
        _configs.DETACHING_STATE,
        _configs.DETACHED_STATE,
    ):
        return

    _waiter.wait_for_detached(configs, instance.instance_id)
    _controller.attach_instance(configs, instance)


def _detach_instance(
    configs: "_types.RotatorConfigs",
    instance: "_types.GroupInstance",
    progress: "_types.Progress",
):
    """
    Detach an instance from its group and wait for its replacement.

    If the group can't be brought back up to capacity the instance is
    re-attached and the original error is raised, which aborts the rotation.
    """
    progress.success(f"Detaching instance: {instance.instance_id}")
    try:
        _controller.detach_instance(configs, instance)
        progress.success("- Waiting for the group to be up to capacity")
        _waiter.wait_for_capacity(configs, instance.group_name, progress)
    except Exception as error:
        progress.failure(f"Error bringing the group up to capacity: {error}")
        progress.failure(f"Attaching instance: {instance.instance_id}")
        try:
            _reattach_instance(configs, instance)
        except Exception as rollback_error:
            progress.failure(
                f"Failed to re-attach {instance.instance_id}: {rollback_error}"
            )
        raise


def _cycle_instances(
    configs: "_types.RotatorConfigs",
    instances: typing.List["_types.GroupInstance"],
    progress: "_types.Progress",
) -> typing.Tuple[typing.List["_types.GroupInstance"], typing.List[str]]:
    """Cycle the instances one at a time, returning those shut down and their volumes."""
    shutdown_instances: typing.List[_types.GroupInstance] = []
    volume_ids: typing.List[str] = []
    for instance in instances:
        if instance.is_terminating:
            continue

        _waiter.wait_for_instance_state(configs, instance.instance_id)
        volume_id = _reaper.identify_volume(configs, instance.instance_id, progress)
        _detach_instance(configs, instance, progress)

        progress.success(f"Shutting down {instance.instance_id}")
        _shutdown.shutdown_instance(configs, instance.instance_id, progress)

        shutdown_instances.append(instance)
        if volume_id:
            volume_ids.append(volume_id)
    return shutdown_instances, volume_ids


def rotate(
    configs: "_types.RotatorConfigs",
    instances: typing.List["_types.GroupInstance"] = None,
    progress: "_types.Progress" = None,
) -> "_types.RotationPlan":
    """
    Cycle outdated instances out of their auto scaling group.

    Each instance is detached one at a time, waiting for its replacement to be
    in service before it is shut down. Cycling a single instance at a time
    limits the capacity reduction of the group to one instance.

    :param configs:
        Current execution configuration for the rotator.
    :param instances:
        Instances to cycle. Defaults to all instances in the group with an
        outdated launch configuration or launch template.
    :param progress:
        Reporter for the rotation. One is created when not specified.
    :return:
        A plan listing the instances that were shut down and the volumes they
        leave behind, which is handed to the teardown phase.
    :raises WaitTimeoutError:
        When an instance does not come into service or the group cannot return
        to its desired capacity. No further instances are cycled.
    """
    progress = progress or _types.Progress(configs, "rotate")
    group = None
    if instances is None:
        try:
            group, instances = _inventory.outdated_instances(configs)
        except Exception as error:
            progress.failure(f"Failed to find outdated instances: {error}")
            raise

    if group is not None:
        group_name = group.name
    else:
        group_name = next((i.group_name for i in instances), None)
    if not instances:
        progress.success("No instances cycled.")
        return _types.RotationPlan(group_name=group_name)

    total = len(group.instances) if group else len(instances)
    progress.success(
        f"Cycling {len(instances)} of {total} instances in {group_name}...",
        {"instances": [i.to_dict() for i in instances]},
    )

    try:
        shutdown_instances, volume_ids = _cycle_instances(configs, instances, progress)
    except Exception as error:
        progress.failure(f"Rotation of {group_name} aborted: {error}")
        raise

    progress.success("All instances cycled.")
    return _types.RotationPlan(
        group_name=group_name,
        shutdown_instances=shutdown_instances,
        volume_ids=volume_ids,
    )


def teardown(
    configs: "_types.RotatorConfigs",
    plan: "_types.RotationPlan",
    progress: "_types.Progress" = None,
) -> "_types.TeardownReport":
    """
    Terminate the shut down instances of a rotation and reap their volumes.

    The two steps are independent of one another. Volumes are reaped even if
    terminating instances fails, in which case the termination error is raised
    once the volumes have been reaped.

    :param configs:
        Current execution configuration for the rotator.
    :param plan:
        The plan returned by the rotate phase.
    :param progress:
        Reporter for the teardown. One is created when not specified.
    """
    progress = progress or _types.Progress(configs, "teardown")

    terminations: typing.List[_types.ItemResult] = []
    termination_error: typing.Optional[Exception] = None
    try:
        terminations = _terminator.terminate_instances(
            configs, plan.shutdown_instances, progress
        )
    except (
        _errors.RotatorError,
        botocore_exceptions.BotoCoreError,
        botocore_exceptions.ClientError,
    ) as error:
        progress.failure(f"Failed to terminate outdated instances: {error}")
        termination_error = error

    deletions = _reaper.reap_volumes(configs, plan.volume_ids, progress)
    if termination_error is not None:
        raise termination_error

    report = _types.TeardownReport(terminations=terminations, deletions=deletions)
    progress.success("Outdated instances removed successfully!", report.to_dict())
    return report
