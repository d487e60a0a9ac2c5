import typing

from rotator import _configs
from rotator import _types


class Progress:
    """
    Reports the progress of a named unit of work.

    Messages are purely observational. They are written as structured log
    output through the configs and are never consulted for control decisions.
    """

    def __init__(self, configs: "_types.RotatorConfigs", name: str):
        self.configs = configs
        self.name = name

    def _report(self, status: str, message: str, data: typing.Optional[dict]):
        self.configs.log(message, {"step": self.name, "status": status, **(data or {})})

    def success(self, message: str, data: dict = None):
        """Report that part of the unit of work completed successfully."""
        self._report(_configs.SUCCESS, message, data)

    def failure(self, message: str, data: dict = None):
        """Report that part of the unit of work failed."""
        self._report(_configs.FAILURE, message, data)

    def continue_(self, message: str, data: dict = None):
        """Report that the unit of work is still in progress."""
        self._report(_configs.CONTINUE, message, data)
