"""Tests for the AsyncProcess helper."""

import sys

from simple_music_player.helpers.process import AsyncProcess, check_output, get_subprocess_env


async def test_check_output() -> None:
    """Test running a process and collecting its output."""
    returncode, output = await check_output(sys.executable, "-c", "print('hello')")
    assert returncode == 0
    assert output.strip() == b"hello"
    returncode, _ = await check_output(sys.executable, "-c", "raise SystemExit(3)")
    assert returncode == 3


async def test_natural_exit() -> None:
    """Test a process which exits by itself."""
    proc = AsyncProcess([sys.executable, "-c", "pass"], name="python")
    await proc.start()
    assert await proc.wait() == 0
    assert proc.closed
    assert not proc.close_called


async def test_suspend_resume_close() -> None:
    """Test that a suspended process can be resumed and closed."""
    proc = AsyncProcess([sys.executable, "-c", "import time; time.sleep(30)"])
    await proc.start()
    assert proc.returncode is None
    proc.suspend()
    assert proc.suspended
    proc.resume()
    assert not proc.suspended
    proc.suspend()
    # closing continues a suspended process so it can handle the terminate
    await proc.close()
    assert proc.close_called
    assert proc.returncode is not None
    assert not proc.suspended


def test_subprocess_env() -> None:
    """Test that extra variables are added to the environment."""
    env = get_subprocess_env({"SMP_TEST": "1"})
    assert env["SMP_TEST"] == "1"
    assert "LD_PRELOAD" not in env
