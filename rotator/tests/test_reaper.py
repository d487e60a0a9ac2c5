from unittest.mock import MagicMock
from unittest.mock import patch

from pytest import mark

from rotator import _reaper
from rotator.tests import _utils

SCENARIOS = [
    {"lookup": _utils.make_ec2_instance("i-1"), "expected": "vol-i-1"},
    {
        "lookup": _utils.make_ec2_instance("i-1", volume_ids=["vol-a", "vol-b"]),
        "expected": "vol-a",
    },
    {"lookup": _utils.make_ec2_instance("i-1", volume_ids=[]), "expected": None},
    {"lookup": None, "expected": None},
    {"lookup": ValueError("FAKE"), "expected": None},
]


@mark.parametrize("scenario", SCENARIOS)
@patch("rotator._controller.get_instance")
def test_identify_volume(get_instance: MagicMock, scenario: dict):
    """Should find the first volume or report the failure to find one."""
    if isinstance(scenario["lookup"], Exception):
        get_instance.side_effect = scenario["lookup"]
    else:
        get_instance.return_value = scenario["lookup"]
    progress = MagicMock()

    observed = _reaper.identify_volume(_utils.make_configs(), "i-1", progress)
    assert observed == scenario["expected"]
    assert progress.failure.called == (scenario["expected"] is None)


@patch("rotator._controller.get_instance")
def test_identify_volume_messages(get_instance: MagicMock):
    """Should tell a vanished instance apart from one without volumes."""
    progress = MagicMock()
    configs = _utils.make_configs()

    get_instance.return_value = None
    _reaper.identify_volume(configs, "i-1", progress)
    get_instance.return_value = _utils.make_ec2_instance("i-1", volume_ids=[])
    _reaper.identify_volume(configs, "i-1", progress)

    messages = [c.args[0] for c in progress.failure.call_args_list]
    assert "no longer exists" in messages[0]
    assert "No EBS volumes" in messages[1]
