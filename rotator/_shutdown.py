import shlex
import typing

from rotator import _configs
from rotator import _controller
from rotator import _executor
from rotator import _types


def build_shutdown_command(ssh_user: typing.Optional[str], address: str) -> typing.List[str]:
    """Create the ssh command line that shuts down the remote host."""
    remote = f"{ssh_user}@{address}" if ssh_user else address
    options = [arg for option in _configs.SSH_OPTIONS for arg in ("-o", option)]
    return ["ssh", *options, remote, _configs.SHUTDOWN_COMMAND]


def shutdown_instance(
    configs: "_types.RotatorConfigs",
    instance_id: str,
    progress: "_types.Progress",
) -> bool:
    """
    Shut down the instance from within its operating system.

    This is done instead of stopping or terminating the instance through the
    EC2 API so that services on the instance are stopped properly and in-flight
    work is allowed to drain. Failures are reported but never raised because
    the instance has already been detached from its group by this point.

    :return:
        Whether or not the shutdown command was issued successfully.
    """
    try:
        instance = _controller.get_instance(configs, instance_id)
    except Exception as error:
        progress.failure(f"Failed to look up {instance_id} for shutdown: {error}")
        return False

    if instance is None or not instance.public_address:
        progress.failure(f"No public address found to shut down {instance_id}.")
        return False

    command = build_shutdown_command(configs.ssh_user, instance.public_address)
    progress.continue_(f"Shutting down {instance_id}", {"command": shlex.join(command)})
    try:
        success = _executor.execute(
            command,
            raise_on_failure=False,
            echo=configs.log_file is None,
            log_file=configs.log_file,
            timeout=_configs.SHUTDOWN_TIMEOUT,
        )
    except OSError as error:
        # The log file could not be written.
        progress.failure(f"Failed to record shutdown of {instance_id}: {error}")
        return False

    if not success:
        progress.failure(f"Shutdown command failed for {instance_id}.")
    return success
