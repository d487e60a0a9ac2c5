import typing

from rotator import _configs
from rotator import _controller
from rotator import _types
from rotator import _waiter


def terminate_instances(
    configs: "_types.RotatorConfigs",
    instances: typing.List["_types.GroupInstance"],
    progress: "_types.Progress",
) -> typing.List["_types.ItemResult"]:
    """
    Terminate shut down instances.

    Instances are only terminated once they have stopped from within. An
    instance that still appears to be running is skipped and never forcibly
    terminated, and an instance that no longer exists is treated as already
    handled.

    :raises WaitTimeoutError:
        When a stopping instance does not finish stopping in time. This aborts
        the remaining terminations.
    """
    if instances:
        progress.continue_(f"Terminating {len(instances)} outdated instances...")

    results = []
    for group_instance in instances:
        instance_id = group_instance.instance_id
        instance = _controller.get_instance(configs, instance_id)
        if instance is None:
            results.append(_types.ItemResult(instance_id, _configs.NOT_FOUND))
            continue

        if not instance.is_shut_down:
            progress.continue_(
                f"Skipping {instance_id} as it is still {instance.state}.",
                {"instance_id": instance_id, "state": instance.state},
            )
            results.append(_types.ItemResult(instance_id, _configs.STILL_RUNNING))
            continue

        _waiter.wait_for_stopped(configs, instance_id)

        progress.continue_(f"Terminating {instance_id}")
        _controller.terminate_instance(configs, instance_id)
        results.append(_types.ItemResult(instance_id, _configs.TERMINATED))

    return results
