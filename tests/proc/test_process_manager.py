import sys
from os import getenv, makedirs
from os.path import join
from sys import platform

import pytest
from psutil import Process

from spaify.proc.process_manager import LocalProcess, ProcessManager, format_command


def test_format_command():
    assert format_command("npm run dev") == "npm run dev"
    assert format_command(["npm", "install", "-D", "@vitejs/plugin-vue"]) == "npm install -D @vitejs/plugin-vue"
    assert format_command(["php", "artisan", "my command"]) == "php artisan 'my command'"


@pytest.mark.asyncio
async def test_local_process_terminate(tmp_path):
    cmd = "timeout 5" if platform == "win32" else "sleep 5"

    lp = await LocalProcess.start(
        cmd,
        cwd=tmp_path,
        env={"PATH": getenv("PATH")},
    )

    assert lp.cmd == cmd
    assert lp.stdout == ""
    assert lp.stderr == ""

    p = Process(lp.pid)
    assert p.is_running()

    assert lp.is_running

    await lp.terminate()
    await lp.wait()
    assert not lp.is_running


@pytest.mark.asyncio
async def test_process_manager_run_command_capture_stdout(tmp_path):
    pm = ProcessManager(root_dir=tmp_path)

    return_code, stdout, stderr = await pm.run_command("echo hello")

    assert return_code == 0
    assert stdout.strip() == "hello"
    assert stderr == ""


@pytest.mark.asyncio
async def test_process_manager_run_command_capture_stderr(tmp_path):
    pm = ProcessManager(root_dir=tmp_path)

    return_code, stdout, stderr = await pm.run_command("echo hello >&2")

    assert return_code == 0
    assert stdout == ""
    assert stderr.strip() == "hello"


@pytest.mark.asyncio
async def test_process_manager_run_argument_list(tmp_path):
    pm = ProcessManager(root_dir=tmp_path)

    return_code, stdout, stderr = await pm.run_command(
        [sys.executable, "-c", "import sys; print('out'); sys.exit(3)"],
    )

    assert return_code == 3
    assert stdout.strip() == "out"


@pytest.mark.asyncio
async def test_process_manager_run_command_cwd(tmp_path):
    cwd = join("some", "sub", "directory")
    abs_cwd = join(tmp_path, cwd)
    makedirs(abs_cwd, exist_ok=True)

    pm = ProcessManager(root_dir=tmp_path)
    return_code, stdout, _ = await pm.run_command(
        [sys.executable, "-c", "import os; print(os.getcwd())"],
        cwd=cwd,
    )

    assert return_code == 0
    assert stdout.strip() == abs_cwd


@pytest.mark.asyncio
@pytest.mark.skipif(platform == "win32", reason="Uses sleep")
async def test_process_manager_run_command_timeout(tmp_path):
    pm = ProcessManager(root_dir=tmp_path)

    return_code, stdout, stderr = await pm.run_command("sleep 5", timeout=0.5)

    assert return_code is None


@pytest.mark.asyncio
async def test_process_manager_output_handler(tmp_path):
    stdout = ""

    async def output_handler(out, err):
        nonlocal stdout
        stdout += out

    pm = ProcessManager(root_dir=tmp_path, output_handler=output_handler)
    await pm.run_command("echo hello")

    assert stdout.strip() == "hello"

    stdout = ""
    await pm.run_command("echo hello", show_output=False)
    assert stdout == ""


@pytest.mark.asyncio
async def test_process_manager_missing_executable(tmp_path):
    pm = ProcessManager(root_dir=tmp_path)

    with pytest.raises(FileNotFoundError):
        await pm.run_command(["spaify-no-such-executable", "install"])
