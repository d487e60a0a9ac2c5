import dataclasses
import datetime
import json
import os
import pathlib
import typing

import boto3
import yaml

from rotator import _types

DEFAULT_INSTANCE_POLICY = _types.PollPolicy(delay=10, max_attempts=60)
DEFAULT_CAPACITY_POLICY = _types.PollPolicy(delay=30, max_attempts=60)
DEFAULT_DETACH_POLICY = _types.PollPolicy(delay=10, max_attempts=60)
DEFAULT_STOPPED_POLICY = _types.PollPolicy(delay=15, max_attempts=40)


def _or(*args: typing.Any, default: typing.Any = None) -> typing.Any:
    """
    Find the first non-None element in the args.

    If none of the values are not None, the default value will be returned instead.
    """
    return next((x for x in args if x is not None), default)


def _or_truthy(*args: typing.Any, default: typing.Any = None) -> typing.Any:
    """
    Find the first truthy element in the args.

    If none of the values are truthy, the default value will be returned instead.
    """
    return next((x for x in args if x), default)


def _load_configs(
    args: typing.Dict[str, typing.Any],
    config_path: typing.Union[str, pathlib.Path] = None,
) -> typing.Dict[str, typing.Any]:
    """
    Load configuration data from the config path.

    Config path lookup is prioritized in the following way:
    - config_path argument specified in this function signature.
    - `--config-path` command line argument.
    - CONFIG_PATH environmental variable.
    - Default value of "/application/config/config.yaml"

    If the config file fails to load because the file is not found, a blank
    configuration will be used instead.
    """
    p = pathlib.Path(
        config_path
        or args.get("config_path")
        or os.environ.get("CONFIG_PATH")
        or "/application/config/config.yaml"
    )
    try:
        return yaml.safe_load(p.resolve().read_text()) or {}
    except FileNotFoundError:
        return {}


@dataclasses.dataclass()
class RotatorConfigs:
    """Configuration data structure for rotating auto scaling group instances."""

    #: CloudFormation stack that owns the auto scaling group to rotate.
    stack_name: typing.Optional[str] = None
    #: Explicit auto scaling group name, which skips the stack lookup.
    group_name: typing.Optional[str] = None
    aws_profile: typing.Optional[str] = None
    aws_region: typing.Optional[str] = None
    #: Remote user used to connect to instances when shutting them down.
    ssh_user: typing.Optional[str] = None
    #: Optional file to which shutdown command output is appended.
    log_file: typing.Optional[str] = None
    live: bool = False
    pretty_print: bool = False
    instance_policy: "_types.PollPolicy" = DEFAULT_INSTANCE_POLICY
    capacity_policy: "_types.PollPolicy" = DEFAULT_CAPACITY_POLICY
    detach_policy: "_types.PollPolicy" = DEFAULT_DETACH_POLICY
    stopped_policy: "_types.PollPolicy" = DEFAULT_STOPPED_POLICY
    session: boto3.Session = dataclasses.field(
        hash=False, default_factory=lambda: boto3.Session()
    )
    last_loaded_at: datetime.datetime = dataclasses.field(
        default_factory=lambda: datetime.datetime.utcnow()
    )

    @property
    def dry_run(self) -> bool:
        """
        Whether this rotator is in dry-run mode.

        When running in dry-run mode, the rotator will report the outdated
        instances without detaching, shutting down or terminating anything.
        """
        return not self.live

    def load(
        self,
        args: typing.Dict[str, typing.Any],
        config_path: typing.Union[str, pathlib.Path] = None,
    ) -> "RotatorConfigs":
        """
        Populate rotator config with data from args, environment and a config file.

        Values given as command line arguments take precedence over environment
        variables, which take precedence over the values in the config file.
        Configuration is read once here and is not revalidated mid-rotation.
        """
        self.last_loaded_at = datetime.datetime.utcnow()
        raw = _load_configs(args, config_path)

        self.stack_name = _or_truthy(
            args.get("stack_name"),
            os.environ.get("STACK_NAME"),
            raw.get("stack_name"),
        )
        self.group_name = _or_truthy(
            args.get("group_name"),
            os.environ.get("GROUP_NAME"),
            raw.get("group_name"),
        )
        if not self.stack_name and not self.group_name:
            raise ValueError("A stack name or group name must be supplied.")

        self.aws_profile = _or(args.get("aws_profile"), self.aws_profile)
        self.aws_region = _or_truthy(
            args.get("aws_region"),
            os.environ.get("AWS_REGION"),
            raw.get("aws_region"),
        )
        self.ssh_user = _or_truthy(
            args.get("ssh_user"),
            os.environ.get("ROTATOR_SSH_USER"),
            raw.get("ssh_user"),
            os.environ.get("LOGNAME"),
        )
        self.log_file = _or_truthy(args.get("log_file"), raw.get("log_file"))
        self.live = _or_truthy(self.live, args.get("live"), False)
        self.pretty_print = _or_truthy(
            self.pretty_print, args.get("pretty_print"), False
        )

        policies = raw.get("policies") or {}
        self.instance_policy = _types.PollPolicy.from_config(
            policies.get("instance"), DEFAULT_INSTANCE_POLICY
        )
        self.capacity_policy = _types.PollPolicy.from_config(
            policies.get("capacity"), DEFAULT_CAPACITY_POLICY
        )
        self.detach_policy = _types.PollPolicy.from_config(
            policies.get("detach"), DEFAULT_DETACH_POLICY
        )
        self.stopped_policy = _types.PollPolicy.from_config(
            policies.get("stopped"), DEFAULT_STOPPED_POLICY
        )

        self.session = boto3.Session(
            profile_name=self.aws_profile,
            region_name=self.aws_region,
        )
        return self

    def log(self, message: str, data: dict):
        """Log the message and data for structured output."""
        print(
            json.dumps(
                {"message": message, "data": data},
                indent=2 if self.pretty_print else None,
            )
        )

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {
            "stack_name": self.stack_name,
            "group_name": self.group_name,
            "aws_profile": self.aws_profile,
            "aws_region": self.aws_region,
            "ssh_user": self.ssh_user,
            "log_file": self.log_file,
            "live": self.live,
            "last_loaded_at": str(self.last_loaded_at),
            "policies": {
                "instance": self.instance_policy.to_dict(),
                "capacity": self.capacity_policy.to_dict(),
                "detach": self.detach_policy.to_dict(),
                "stopped": self.stopped_policy.to_dict(),
            },
        }
