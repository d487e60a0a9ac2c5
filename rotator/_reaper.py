import typing

from rotator import _configs
from rotator import _controller
from rotator import _types


def identify_volume(
    configs: "_types.RotatorConfigs",
    instance_id: str,
    progress: "_types.Progress",
) -> typing.Optional[str]:
    """
    Find the root EBS volume of an instance so it can be reaped later.

    Failing to find a volume is not a critical error and will not cause issues
    with the rotation, so any failure is reported and None is returned.
    """
    try:
        instance = _controller.get_instance(configs, instance_id)
    except Exception as error:
        progress.failure(f"Failed to get volumes for instance {instance_id}: {error}")
        return None

    if instance is None:
        progress.failure(f"Instance {instance_id} no longer exists.")
        return None
    if not instance.volume_ids:
        progress.failure(f"No EBS volumes are mapped to instance {instance_id}.")
        return None
    return instance.volume_ids[0]


def reap_volumes(
    configs: "_types.RotatorConfigs",
    volume_ids: typing.List[str],
    progress: "_types.Progress",
) -> typing.List["_types.ItemResult"]:
    """
    Delete the volumes left behind by cycled instances.

    Failing to reap a volume is not a critical error and will not cause issues
    with the release, so failures are reported and collected in the results
    while the remaining volumes are still deleted.
    """
    results = []
    for volume_id in volume_ids:
        progress.continue_(f"Deleting volume: {volume_id}")
        try:
            _controller.delete_volume(configs, volume_id)
        except Exception as error:
            progress.failure(f"Failed to delete volume {volume_id}: {error}")
            results.append(_types.ItemResult(volume_id, _configs.FAILED, str(error)))
        else:
            results.append(_types.ItemResult(volume_id, _configs.DELETED))
    return results
