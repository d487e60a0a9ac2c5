from pytest import mark

from rotator import _configs
from rotator import _types
from rotator.tests import _utils

OUTDATED_SCENARIOS = [
    ("lt-new:2", False),
    ("lt-new:1", True),
    ("lt-old:2", True),
    ("web-launch-config", True),
    (None, True),
]


@mark.parametrize("launch_identity, expected", OUTDATED_SCENARIOS)
def test_is_outdated(launch_identity: str, expected: bool):
    """Should identify instances launched from anything but the current launch spec."""
    group = _utils.make_group([], launch_identity="lt-new:2")
    instance = _utils.make_group_instance("i-1", launch_identity=launch_identity)
    assert group.is_outdated(instance) == expected


def test_in_service_count():
    """Should only count instances that are in service."""
    group = _utils.make_group(
        [
            _utils.make_group_instance("i-1"),
            _utils.make_group_instance("i-2", _configs.PENDING_STATE),
            _utils.make_group_instance("i-3", _configs.DETACHING_STATE),
            _utils.make_group_instance("i-4"),
        ],
        desired_capacity=3,
    )
    assert group.in_service_count == 2


@mark.parametrize("state", _configs.TERMINATING_STATES)
def test_is_terminating(state: str):
    """Should identify instances that are already leaving the group."""
    assert _utils.make_group_instance("i-1", state).is_terminating
    assert not _utils.make_group_instance("i-1").is_terminating


def test_poll_policy_from_config():
    """Should override only the configured values of the default policy."""
    default = _types.PollPolicy(delay=10, max_attempts=60)
    assert _types.PollPolicy.from_config(None, default) == default
    observed = _types.PollPolicy.from_config({"max_attempts": 5}, default)
    assert observed == _types.PollPolicy(delay=10, max_attempts=5)


def test_teardown_report():
    """Should collect terminated identifiers and failures across both steps."""
    report = _types.TeardownReport(
        terminations=[
            _types.ItemResult("i-1", _configs.TERMINATED),
            _types.ItemResult("i-2", _configs.NOT_FOUND),
            _types.ItemResult("i-3", _configs.STILL_RUNNING),
        ],
        deletions=[
            _types.ItemResult("vol-1", _configs.FAILED, "VolumeInUse"),
            _types.ItemResult("vol-2", _configs.DELETED),
        ],
    )
    assert report.terminated_ids == ["i-1"]
    assert [r.identifier for r in report.failures] == ["vol-1"]
    assert report.to_dict()["deletions"][0]["error"] == "VolumeInUse"
