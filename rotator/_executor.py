import pathlib
import shlex
import subprocess
import typing


def execute(
    command: typing.Sequence[str],
    raise_on_failure: bool = True,
    echo: bool = True,
    log_file: typing.Union[str, pathlib.Path] = None,
    timeout: typing.Optional[float] = None,
) -> bool:
    """
    Run a command line and wait for it to complete.

    :param command:
        Command line arguments to execute.
    :param raise_on_failure:
        Whether or not a non-zero exit code or a command that cannot be started
        should raise an error. When False, failures are only signaled by the
        returned value.
    :param echo:
        Whether or not to print the output of the command.
    :param log_file:
        Optional path of a file to which the command and its output are appended.
    :param timeout:
        Optional number of seconds after which the command is killed. A timed out
        command counts as a failure.
    :return:
        Whether or not the command completed successfully.
    """
    try:
        result = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            check=raise_on_failure,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as error:
        if raise_on_failure:
            raise
        output, returncode = f"{type(error).__name__}: {error}", None
    else:
        output, returncode = result.stdout or "", result.returncode

    if echo and output:
        print(output.rstrip())

    if log_file:
        with open(log_file, "a") as f:
            f.write(f"$ {shlex.join(command)}\n{output}")

    return returncode == 0
