from unittest.mock import MagicMock

import pytest
from pytest import mark

from rotator import _configs
from rotator import _controller
from rotator import _errors
from rotator.tests import _utils

group_data = {
    "AutoScalingGroupName": "web-group",
    "DesiredCapacity": 2,
    "LaunchTemplate": {"LaunchTemplateId": "lt-123", "Version": "4"},
    "Instances": [
        {
            "InstanceId": "i-1",
            "LifecycleState": "InService",
            "HealthStatus": "Healthy",
            "LaunchTemplate": {"LaunchTemplateId": "lt-123", "Version": "4"},
        },
        {
            "InstanceId": "i-2",
            "LifecycleState": "Pending",
            "HealthStatus": "Healthy",
            "LaunchTemplate": {"LaunchTemplateId": "lt-123", "Version": "3"},
        },
    ],
}

LAUNCH_IDENTITY_SCENARIOS = [
    ({"LaunchConfigurationName": "web-lc-2"}, "web-lc-2"),
    ({"LaunchTemplate": {"LaunchTemplateId": "lt-1", "Version": "7"}}, "lt-1:7"),
    ({"LaunchTemplate": {"LaunchTemplateName": "web"}}, "web:$Default"),
    (
        {
            "MixedInstancesPolicy": {
                "LaunchTemplate": {
                    "LaunchTemplateSpecification": {
                        "LaunchTemplateId": "lt-2",
                        "Version": "$Latest",
                    }
                }
            }
        },
        "lt-2:$Latest",
    ),
    ({}, None),
]


@mark.parametrize("data, expected", LAUNCH_IDENTITY_SCENARIOS)
def test_to_launch_identity(data: dict, expected: str):
    """Should identify launch configurations and templates alike."""
    assert _controller._groups._to_launch_identity(data) == expected


def test_get_group_name():
    """Should find the first auto scaling group resource in the stack."""
    configs = _utils.make_configs()
    client = configs.session.client.return_value
    client.describe_stack_resources.return_value = {
        "StackResources": [
            {"ResourceType": "AWS::EC2::SecurityGroup", "PhysicalResourceId": "sg-1"},
            {"ResourceType": _configs.GROUP_RESOURCE_TYPE, "PhysicalResourceId": "a"},
            {"ResourceType": _configs.GROUP_RESOURCE_TYPE, "PhysicalResourceId": "b"},
        ]
    }
    assert _controller.get_group_name(configs) == "a"
    configs.session.client.assert_called_with("cloudformation")
    client.describe_stack_resources.assert_called_once_with(StackName="stack")


def test_get_group_name_explicit():
    """Should use an explicitly configured group name without a stack lookup."""
    configs = _utils.make_configs(group_name="explicit")
    assert _controller.get_group_name(configs) == "explicit"
    assert not configs.session.client.called


def test_get_group_name_missing():
    """Should raise when the stack has no auto scaling group."""
    configs = _utils.make_configs()
    client = configs.session.client.return_value
    client.describe_stack_resources.return_value = {"StackResources": []}
    with pytest.raises(_errors.GroupNotFoundError):
        _controller.get_group_name(configs)


def test_get_group():
    """Should retrieve and transform auto scaling group data into a Group."""
    configs = _utils.make_configs()
    client = configs.session.client.return_value
    client.describe_auto_scaling_groups.return_value = {
        "AutoScalingGroups": [group_data]
    }

    group = _controller.get_group(configs, "web-group")
    assert group.name == "web-group"
    assert group.desired_capacity == 2
    assert group.launch_identity == "lt-123:4"
    assert [i.instance_id for i in group.instances] == ["i-1", "i-2"]
    assert group.instances[1].group_name == "web-group"
    assert group.in_service_count == 1
    assert [group.is_outdated(i) for i in group.instances] == [False, True]


def test_get_group_missing():
    """Should raise when the group does not exist."""
    configs = _utils.make_configs()
    client = configs.session.client.return_value
    client.describe_auto_scaling_groups.return_value = {"AutoScalingGroups": []}
    with pytest.raises(_errors.GroupNotFoundError):
        _controller.get_group(configs, "web-group")


def test_get_group_instance():
    """Should return the group instance or None once it has left the group."""
    configs = _utils.make_configs()
    client = configs.session.client.return_value
    client.describe_auto_scaling_instances.side_effect = [
        {
            "AutoScalingInstances": [
                {
                    "InstanceId": "i-1",
                    "AutoScalingGroupName": "web-group",
                    "LifecycleState": "Detaching",
                    "LaunchConfigurationName": "web-lc-1",
                }
            ]
        },
        {"AutoScalingInstances": []},
    ]

    instance = _controller.get_group_instance(configs, "i-1")
    assert instance.lifecycle_state == _configs.DETACHING_STATE
    assert instance.group_name == "web-group"
    assert instance.launch_identity == "web-lc-1"
    assert _controller.get_group_instance(configs, "i-1") is None


def test_detach_and_attach_instance():
    """Should detach without decrementing the desired capacity and re-attach."""
    configs = _utils.make_configs()
    client: MagicMock = configs.session.client.return_value
    instance = _utils.make_group_instance("i-1", group_name="web-group")

    _controller.detach_instance(configs, instance)
    client.detach_instances.assert_called_once_with(
        InstanceIds=["i-1"],
        AutoScalingGroupName="web-group",
        ShouldDecrementDesiredCapacity=False,
    )

    _controller.attach_instance(configs, instance)
    client.attach_instances.assert_called_once_with(
        InstanceIds=["i-1"],
        AutoScalingGroupName="web-group",
    )
