from unittest import mock

from canlink.netif import bring_down, bring_up


def _recorder():
    seen = []
    return seen, seen.append


def test_bring_up_runs_bitrate_then_up():
    seen, runner = _recorder()
    commands = bring_up("can0", 100000, runner)
    assert seen == [
        ["sudo", "ip", "link", "set", "can0", "type", "can", "bitrate", "100000"],
        ["sudo", "ip", "link", "set", "can0", "up"],
    ]
    assert commands == seen


def test_bring_up_uses_given_interface_and_bitrate():
    seen, runner = _recorder()
    commands = bring_up("vcan7", 500000, runner)
    assert commands[0][4] == "vcan7"
    assert commands[0][-1] == "500000"
    assert commands[1][-2:] == ["vcan7", "up"]
    assert commands == seen


def test_bring_down_runs_down():
    seen, runner = _recorder()
    commands = bring_down("can0", runner)
    assert seen == [["sudo", "ip", "link", "set", "can0", "down"]]
    assert commands == seen


def test_default_runner_calls_subprocess_without_check():
    with mock.patch("canlink.netif.subprocess.run") as run_mock:
        commands = bring_down("can1")
    assert commands == [["sudo", "ip", "link", "set", "can1", "down"]]
    run_mock.assert_called_once_with(
        ["sudo", "ip", "link", "set", "can1", "down"], check=False
    )


def test_default_runner_ignores_missing_executable():
    with mock.patch("canlink.netif.subprocess.run", side_effect=FileNotFoundError):
        commands = bring_up("can2", 250000)
    assert [c[-1] for c in commands] == ["250000", "up"]