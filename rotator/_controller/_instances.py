import typing

from botocore import exceptions as botocore_exceptions

from rotator import _configs
from rotator import _types


def _to_ec2_instance(instance_data: dict) -> "_types.Ec2Instance":
    """Convert a boto3 describe instances object into an Ec2Instance."""
    return _types.Ec2Instance(
        instance_id=instance_data["InstanceId"],
        state=(instance_data.get("State") or {}).get("Name") or "unknown",
        public_address=(
            instance_data.get("PublicDnsName") or instance_data.get("PublicIpAddress")
        ),
        volume_ids=[
            mapping["Ebs"]["VolumeId"]
            for mapping in (instance_data.get("BlockDeviceMappings") or [])
            if (mapping.get("Ebs") or {}).get("VolumeId")
        ],
    )


def get_instance(
    configs: "_types.RotatorConfigs",
    instance_id: str,
) -> typing.Optional["_types.Ec2Instance"]:
    """
    Reload the EC2 record for the specified instance.

    :param configs:
        Current execution configuration for the rotator.
    :param instance_id:
        Identifier of the EC2 instance to describe.
    :return:
        The instance or None if EC2 no longer knows about the instance.
    """
    client = configs.session.client("ec2")
    try:
        response = client.describe_instances(InstanceIds=[instance_id])
    except botocore_exceptions.ClientError as error:
        code = error.response.get("Error", {}).get("Code")
        if code in _configs.INSTANCE_NOT_FOUND_CODES:
            return None
        raise

    return next(
        (
            _to_ec2_instance(instance)
            for reserve in (response.get("Reservations") or [])
            for instance in (reserve.get("Instances") or [])
        ),
        None,
    )


def terminate_instance(configs: "_types.RotatorConfigs", instance_id: str):
    """Terminate the specified EC2 instance."""
    client = configs.session.client("ec2")
    client.terminate_instances(InstanceIds=[instance_id])


def delete_volume(configs: "_types.RotatorConfigs", volume_id: str):
    """Delete the specified EBS volume."""
    client = configs.session.client("ec2")
    client.delete_volume(VolumeId=volume_id)
