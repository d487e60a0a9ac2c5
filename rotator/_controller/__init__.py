from rotator._controller._groups import attach_instance  # noqa: F401
from rotator._controller._groups import detach_instance  # noqa: F401
from rotator._controller._groups import get_group  # noqa: F401
from rotator._controller._groups import get_group_instance  # noqa: F401
from rotator._controller._groups import get_group_name  # noqa: F401
from rotator._controller._instances import delete_volume  # noqa: F401
from rotator._controller._instances import get_instance  # noqa: F401
from rotator._controller._instances import terminate_instance  # noqa: F401
