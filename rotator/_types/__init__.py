from rotator._types._groups import Ec2Instance  # noqa: F401
from rotator._types._groups import Group  # noqa: F401
from rotator._types._groups import GroupInstance  # noqa: F401
from rotator._types._groups import ItemResult  # noqa: F401
from rotator._types._groups import PollPolicy  # noqa: F401
from rotator._types._groups import RotationPlan  # noqa: F401
from rotator._types._groups import TeardownReport  # noqa: F401
from rotator._types._rotator import RotatorConfigs  # noqa: F401
from rotator._types._progress import Progress  # noqa: F401
