import typing

from rotator import _configs
from rotator import _errors
from rotator import _types


def _to_launch_identity(data: dict) -> typing.Optional[str]:
    """
    Identify the launch specification from boto3 group or instance data.

    Launch configurations are identified by their name and launch templates by
    their id and version. Groups using a mixed instances policy carry their
    launch template inside of that policy instead.
    """
    if name := data.get("LaunchConfigurationName"):
        return name

    template = data.get("LaunchTemplate") or (
        (data.get("MixedInstancesPolicy") or {})
        .get("LaunchTemplate", {})
        .get("LaunchTemplateSpecification")
    )
    if not template:
        return None

    identifier = template.get("LaunchTemplateId") or template.get("LaunchTemplateName")
    return f"{identifier}:{template.get('Version', '$Default')}"


def _to_group_instance(
    instance_data: dict,
    group_name: str = None,
) -> "_types.GroupInstance":
    """Convert a boto3 auto scaling instance object into a GroupInstance."""
    return _types.GroupInstance(
        instance_id=instance_data["InstanceId"],
        lifecycle_state=instance_data["LifecycleState"],
        launch_identity=_to_launch_identity(instance_data),
        group_name=instance_data.get("AutoScalingGroupName") or group_name,
        health_status=instance_data.get("HealthStatus"),
    )


def _to_group(group_data: dict) -> "_types.Group":
    """Convert a boto3 describe auto scaling group object into a Group."""
    name = group_data["AutoScalingGroupName"]
    return _types.Group(
        name=name,
        desired_capacity=group_data["DesiredCapacity"],
        launch_identity=_to_launch_identity(group_data),
        instances=[
            _to_group_instance(i, name) for i in (group_data.get("Instances") or [])
        ],
    )


def get_group_name(configs: "_types.RotatorConfigs") -> str:
    """
    Resolve the name of the auto scaling group to rotate.

    An explicitly configured group name is used as-is. Otherwise the group is
    the first auto scaling group resource in the configured CloudFormation
    stack.

    :param configs:
        Current execution configuration for the rotator.
    """
    if configs.group_name:
        return configs.group_name

    client = configs.session.client("cloudformation")
    response = client.describe_stack_resources(StackName=configs.stack_name)
    name = next(
        (
            r.get("PhysicalResourceId")
            for r in (response.get("StackResources") or [])
            if r.get("ResourceType") == _configs.GROUP_RESOURCE_TYPE
        ),
        None,
    )
    if not name:
        raise _errors.GroupNotFoundError(
            f"No auto scaling group found in stack {configs.stack_name}."
        )
    return name


def get_group(configs: "_types.RotatorConfigs", group_name: str) -> "_types.Group":
    """
    Fetch the current status of the named auto scaling group.

    :param configs:
        Current execution configuration for the rotator.
    :param group_name:
        Name of the auto scaling group to describe.
    """
    client = configs.session.client("autoscaling")
    response = client.describe_auto_scaling_groups(AutoScalingGroupNames=[group_name])
    group = next((_to_group(g) for g in (response.get("AutoScalingGroups") or [])), None)
    if group is None:
        raise _errors.GroupNotFoundError(f"Auto scaling group {group_name} not found.")
    return group


def get_group_instance(
    configs: "_types.RotatorConfigs",
    instance_id: str,
) -> typing.Optional["_types.GroupInstance"]:
    """
    Reload the auto scaling record for the specified instance.

    Once an instance has finished detaching from its group, or has been
    terminated, it no longer has a record and None is returned instead.
    """
    client = configs.session.client("autoscaling")
    response = client.describe_auto_scaling_instances(InstanceIds=[instance_id])
    return next(
        (
            _to_group_instance(i)
            for i in (response.get("AutoScalingInstances") or [])
        ),
        None,
    )


def detach_instance(configs: "_types.RotatorConfigs", instance: "_types.GroupInstance"):
    """
    Detach the instance from its group without decrementing desired capacity.

    The group will launch a replacement instance to return to its desired
    capacity, leaving the detached instance running outside of the group.
    """
    client = configs.session.client("autoscaling")
    client.detach_instances(
        InstanceIds=[instance.instance_id],
        AutoScalingGroupName=instance.group_name,
        ShouldDecrementDesiredCapacity=False,
    )


def attach_instance(configs: "_types.RotatorConfigs", instance: "_types.GroupInstance"):
    """Attach a previously detached instance back into its group."""
    client = configs.session.client("autoscaling")
    client.attach_instances(
        InstanceIds=[instance.instance_id],
        AutoScalingGroupName=instance.group_name,
    )
