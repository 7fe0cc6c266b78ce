import sys
from argparse import Namespace
from asyncio import run
from os.path import abspath

from spaify.cli.helpers import init, show_config
from spaify.config import Config
from spaify.disk.vfs import LocalDiskVFS
from spaify.log import get_logger
from spaify.proc.process_manager import ProcessManager
from spaify.scaffold.command import ScaffoldCommand
from spaify.ui.base import UIBase, UIClosedError
from spaify.ui.console import PlainConsoleUI

log = get_logger(__name__)


async def run_scaffold(command: ScaffoldCommand, ui: UIBase) -> bool:
    """
    Run the scaffold command, reporting any unexpected errors.

    :param command: Scaffold command to run.
    :param ui: User interface.
    :return: True if the project was scaffolded successfully, False otherwise.
    """
    try:
        return await command.run()
    except (KeyboardInterrupt, UIClosedError):
        log.info("Interrupted by user")
        await ui.send_error("Scaffolding interrupted.")
    except Exception as err:
        log.error(f"Uncaught exception: {err}", exc_info=True)
        await ui.send_error(f"Stopping Spaify due to error: {err}")

    return False


async def async_main(ui: UIBase, config: Config, args: Namespace) -> bool:
    """
    Main application coroutine.

    :param ui: User interface.
    :param config: Configuration.
    :param args: Command-line arguments.
    :return: True if the application ran successfully, False otherwise.
    """
    if args.show_config:
        show_config()
        return True

    root = abspath(config.scaffold.root)
    try:
        file_system = LocalDiskVFS(root, create=False)
    except ValueError as err:
        await ui.send_error(str(err))
        return False

    async def output_handler(out: str, err: str):
        await ui.send_stream_chunk(out + err)

    process_manager = ProcessManager(
        root_dir=root,
        output_handler=output_handler if args.verbose else None,
    )
    command = ScaffoldCommand(config.scaffold, ui, process_manager, file_system)

    ui_started = await ui.start()
    if not ui_started:
        return False

    try:
        success = await run_scaffold(command, ui)
    finally:
        await ui.stop()

    return success


def run_spaify() -> int:
    config, args = init()
    if not config:
        return 255
    ui = PlainConsoleUI()
    success = run(async_main(ui, config, args))
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(run_spaify())
