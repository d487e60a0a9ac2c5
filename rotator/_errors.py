import typing

if typing.TYPE_CHECKING:  # pragma: no cover
    from rotator import _types


class RotatorError(Exception):
    """Base class for errors raised while rotating group instances."""


class GroupNotFoundError(RotatorError):
    """Raised when the auto scaling group to rotate cannot be resolved."""


class WaitTimeoutError(RotatorError):
    """Raised when a bounded poll runs out of attempts."""

    def __init__(self, description: str, policy: "_types.PollPolicy"):
        self.description = description
        self.policy = policy
        super().__init__(
            f"Timed out waiting for {description} after "
            f"{policy.max_attempts} attempts ({policy.delay}s apart)."
        )


class CapacityError(WaitTimeoutError):
    """Raised when a group fails to return to its desired capacity."""
