from os.path import join
from typing import TYPE_CHECKING, Optional

from spaify.config import ScaffoldConfig
from spaify.log import get_logger
from spaify.patch.region import MarkerPair, PatchResult, PatchStatus, patch_region
from spaify.proc.process_manager import Command, format_command
from spaify.templates.render import Renderer

if TYPE_CHECKING:
    from spaify.disk.vfs import VirtualFileSystem
    from spaify.proc.process_manager import ProcessManager
    from spaify.ui.base import UIBase

log = get_logger(__name__)


class ScaffoldCommand:
    """
    Scaffold a Laravel project for single page application development.

    The scaffolding is done in three steps:

    1. install the npm dependencies and devDependencies,
    2. publish the Inertia middleware and register it in the `web`
       middleware group of the Http Kernel,
    3. copy the default files (Blade view, CSS, JS, Tailwind, PostCSS
       and Vite config) and create the Vue directories.

    If the npm dependencies can't be installed, the scaffolding stops.
    Problems registering the middleware are reported, but not fatal.
    """

    name = "scaffold"
    description = "Scaffold Laravel project with Vue, Tailwindcss, InertiaJS, Ziggy, and Fontawesome"

    def __init__(
        self,
        config: ScaffoldConfig,
        ui: "UIBase",
        process_manager: "ProcessManager",
        file_system: "VirtualFileSystem",
    ):
        """
        Create a new scaffold command.

        :param config: Scaffolding configuration.
        :param ui: User interface to report progress to.
        :param process_manager: ProcessManager instance to run npm and artisan with.
        :param file_system: File system rooted at the Laravel project.
        """
        self.config = config
        self.ui = ui
        self.process_manager = process_manager
        self.file_system = file_system
        self.info_renderer = Renderer()

        self.middleware_warning: Optional[str] = None
        self.skipped_files: list[str] = []

    async def run(self) -> bool:
        """
        Run the scaffolding.

        :return: True if the project was scaffolded, False otherwise.
        """
        if self.config.install:
            await self.ui.send_message("Installing npm dependencies. Please wait as this may take a few seconds.")
            if not await self.install_dependencies():
                return False
        else:
            log.info("Skipping npm dependencies installation")

        await self.ui.send_message("Setting up Inertia middleware.")
        await self.setup_inertia_middleware()

        await self.ui.send_message("Setting up default files.")
        await self.configure_default_files()

        await self.ui.send_message(self.summary())
        return True

    async def install_dependencies(self) -> bool:
        """
        Install npm dependencies, then devDependencies.

        :return: True if both installations succeeded.
        """
        npm = self.config.npm
        installed = await self.run_process([npm, "install", *self.config.dependencies])
        if installed:
            installed = await self.run_process([npm, "install", "-D", *self.config.dev_dependencies])
        return installed

    async def setup_inertia_middleware(self) -> Optional[PatchResult]:
        """
        Publish the Inertia middleware and add it to the `web` middleware group.

        The kernel is only written if it was actually modified.

        :return: Result of patching the kernel, or None if the kernel file can't be read.
        """
        await self.run_process(self.config.middleware_command)

        kernel_path = self.config.kernel_path
        if not self.file_system.exists(kernel_path):
            self.middleware_warning = f"{kernel_path} not found"
            log.warning(f"Not registering Inertia middleware: {self.middleware_warning}")
            return None

        try:
            kernel = self.file_system.read(kernel_path)
        except ValueError as err:
            # UnicodeDecodeError is a ValueError too
            self.middleware_warning = f"could not read {kernel_path} ({err})"
            log.warning(f"Not registering Inertia middleware: {self.middleware_warning}")
            return None

        result = patch_region(
            kernel,
            [MarkerPair(m.start, m.end) for m in self.config.middleware_markers],
            self.config.middleware_entry,
            separator=self.config.entry_separator,
            entry_prefix=self.config.entry_prefix,
        )

        if result.changed:
            self.file_system.save(kernel_path, result.document)
            log.info(f"Registered {self.config.middleware_entry} in {kernel_path}")
        elif result.status == PatchStatus.ALREADY_PRESENT:
            log.info(f"{self.config.middleware_entry} is already registered in {kernel_path}")
        else:
            self.middleware_warning = f"unexpected format of {kernel_path} ({result.reason})"
            log.warning(f"Not registering Inertia middleware: {self.middleware_warning}")

        return result

    async def configure_default_files(self) -> list[str]:
        """
        Copy the stub files to their default location and create the Vue directories.

        :return: Paths of the copied files, relative to the project root.
        """
        copied = []
        for stub in self.config.stubs:
            if self.config.confirm_overwrite and self.file_system.exists(stub.destination):
                if not await self.confirm_overwrite(stub.destination):
                    log.debug(f"Keeping existing file {stub.destination}")
                    self.skipped_files.append(stub.destination)
                    continue

            self.file_system.copy(join(self.config.stubs_dir, stub.source), stub.destination)
            copied.append(stub.destination)

        for directory in self.config.directories:
            self.file_system.ensure_directory(directory)

        return copied

    async def confirm_overwrite(self, path: str) -> bool:
        answer = await self.ui.ask_question(
            f"File {path} already exists. Overwrite it?",
            buttons={"yes": "Yes", "no": "No"},
            default="no",
        )
        return answer.button == "yes"

    async def run_process(self, cmd: Command) -> bool:
        """
        Run a command in the project root and report its errors.

        :param cmd: Command to run.
        :return: True if the command finished successfully.
        """
        try:
            status_code, _, stderr = await self.process_manager.run_command(
                cmd,
                timeout=self.config.command_timeout,
            )
        except OSError as err:
            log.warning(f"Could not start {format_command(cmd)}: {err}")
            await self.ui.send_error(f"Could not run {format_command(cmd)}: {err}")
            return False

        if status_code == 0:
            return True

        if status_code is None:
            await self.ui.send_error(f"Command {format_command(cmd)} timed out after {self.config.command_timeout}s")
        else:
            await self.ui.send_error(stderr.strip() or f"Command {format_command(cmd)} failed with status {status_code}")
        return False

    def summary(self) -> str:
        return self.info_renderer.render_template(
            "summary.tpl",
            {
                "skipped_install": not self.config.install,
                "dependencies": self.config.dependencies,
                "dev_dependencies": self.config.dev_dependencies,
                "middleware_warning": self.middleware_warning,
                "middleware": self.config.middleware_entry,
                "kernel_path": self.config.kernel_path,
                "skipped_files": self.skipped_files,
            },
        )


__all__ = ["ScaffoldCommand"]
