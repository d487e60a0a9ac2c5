import typing

from rotator import _controller
from rotator import _types


def outdated_instances(
    configs: "_types.RotatorConfigs",
    group: "_types.Group" = None,
) -> typing.Tuple["_types.Group", typing.List["_types.GroupInstance"]]:
    """
    Find the instances in the group launched from a superseded launch spec.

    This is a pure query that is safe to call repeatedly. The outdated state is
    recomputed from the current group on every call and never cached.

    :param configs:
        Current execution configuration for the rotator.
    :param group:
        An already loaded group to inspect. The group is resolved and loaded
        from the configs when not specified.
    :return:
        The group that was inspected and its outdated instances in the order
        in which the group lists them.
    """
    if group is None:
        group = _controller.get_group(configs, _controller.get_group_name(configs))
    return group, [i for i in group.instances if group.is_outdated(i)]
