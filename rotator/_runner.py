import pathlib
import traceback
import typing

from botocore import exceptions as botocore_exceptions

from rotator import _errors
from rotator import _inventory
from rotator import _rotation
from rotator import _types


def _report_outdated(configs: "_types.RotatorConfigs") -> typing.Dict[str, typing.Any]:
    """Describe the outdated instances of the group without changing anything."""
    group, outdated = _inventory.outdated_instances(configs)
    return {
        "group": group.name,
        "desired_capacity": group.desired_capacity,
        "launch_identity": group.launch_identity,
        "instance_count": len(group.instances),
        "outdated": [i.to_dict() for i in outdated],
    }


def _execute(configs: "_types.RotatorConfigs") -> typing.Dict[str, typing.Any]:
    """Rotate the outdated instances of the group and tear down the old ones."""
    plan = _rotation.rotate(configs)
    report = _rotation.teardown(configs, plan)
    return {
        "plan": plan.to_dict(),
        "terminated": report.terminated_ids,
        "failures": [r.to_dict() for r in report.failures],
    }


def main(
    args: typing.Dict[str, typing.Any],
    config_path_override: typing.Union[str, pathlib.Path] = None,
) -> int:
    """
    Rotate the outdated instances of an auto scaling group.

    When not running live, the outdated instances are only reported.

    :param args:
        Arguments parsed from the command line. These arguments will take precedence
        over arguments specified by other means during execution.
    :param config_path_override:
        An override for the config path that is only used during non-normal execution
        calls. Most commonly this will be for testing purposes, but alternative calling
        implementations of this code could utilize this as well.
    :return:
        The number of errors that occurred, which is zero on success.
    """
    configs = _types.RotatorConfigs().load(args, config_path_override)
    configs.log("starting", configs.to_dict())

    try:
        if configs.dry_run:
            configs.log("outdated_instances", _report_outdated(configs))
        else:
            configs.log("rotated", _execute(configs))
    except (
        _errors.RotatorError,
        botocore_exceptions.BotoCoreError,
        botocore_exceptions.ClientError,
    ) as error:
        traceback.print_exc()
        print(f"{type(error)}: {error}")
        return 1

    return 0
