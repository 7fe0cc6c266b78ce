from os.path import abspath, dirname, isdir, join
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

PACKAGE_DIR = abspath(join(dirname(__file__), ".."))
DEFAULT_STUBS_DIR = join(PACKAGE_DIR, "templates", "stubs")

DEFAULT_DEPENDENCIES = [
    "vue",
    "@inertiajs/vue3",
    "@fortawesome/fontawesome-svg-core",
    "@fortawesome/free-solid-svg-icons",
    "@fortawesome/free-regular-svg-icons",
    "@fortawesome/free-brands-svg-icons",
    "@fortawesome/vue-fontawesome@latest-3",
]
DEFAULT_DEV_DEPENDENCIES = [
    "@vitejs/plugin-vue",
    "tailwindcss",
    "postcss",
    "autoprefixer",
]

# Inertia middleware registered in the 'web' middleware group of the Http Kernel
INERTIA_MIDDLEWARE = "\\App\\Http\\Middleware\\HandleInertiaRequests::class"
KERNEL_PATH = "app/Http/Kernel.php"


class _StrictModel(BaseModel):
    """
    Pydantic parser configuration options.
    """

    model_config = ConfigDict(
        extra="forbid",
    )


class LogConfig(_StrictModel):
    """
    Configuration for logging.
    """

    level: str = Field(
        "INFO",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    format: str = Field(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        description="Logging format",
    )
    output: Optional[str] = Field(
        None,
        description="Output file for logs (if not specified, logs are printed to stderr)",
    )


class MarkerConfig(_StrictModel):
    """
    Start and end marker of a region in a text file.
    """

    start: str = Field(description="Text opening the region")
    end: str = Field(description="Text closing the region (first occurrence after the start)")


class StubFile(_StrictModel):
    """
    A stub file copied into the project.
    """

    source: str = Field(description="Stub file name, relative to the stubs directory")
    destination: str = Field(description="Destination path, relative to the project root")


class ScaffoldConfig(_StrictModel):
    """
    Configuration for scaffolding a Laravel project.
    """

    root: str = Field(".", description="Root directory of the Laravel project")
    install: bool = Field(True, description="Whether to install npm dependencies")
    npm: str = Field("npm", description="npm executable")
    dependencies: list[str] = Field(
        DEFAULT_DEPENDENCIES,
        description="npm packages to install as dependencies",
    )
    dev_dependencies: list[str] = Field(
        DEFAULT_DEV_DEPENDENCIES,
        description="npm packages to install as devDependencies",
    )
    middleware_command: Union[list[str], str] = Field(
        ["php", "artisan", "inertia:middleware"],
        description="Command publishing the Inertia middleware",
    )
    kernel_path: str = Field(KERNEL_PATH, description="Path to the Http Kernel, relative to the project root")
    middleware_entry: str = Field(INERTIA_MIDDLEWARE, description="Middleware to register")
    middleware_markers: list[MarkerConfig] = Field(
        [
            MarkerConfig(start="$middlewareGroups = [", end="];"),
            MarkerConfig(start="'web' => [", end="],"),
        ],
        description="Markers locating the middleware group, from outermost to innermost",
    )
    entry_separator: str = Field(",", description="Separator terminating each middleware entry")
    entry_prefix: str = Field("\\", description="Text each existing middleware entry starts with")
    stubs_dir: str = Field(DEFAULT_STUBS_DIR, description="Directory containing the stub files")
    stubs: list[StubFile] = Field(
        [
            StubFile(source="app.blade.php", destination="resources/views/app.blade.php"),
            StubFile(source="app.css", destination="resources/css/app.css"),
            StubFile(source="app.js", destination="resources/js/app.js"),
            StubFile(source="postcss.config.js", destination="postcss.config.js"),
            StubFile(source="tailwind.config.js", destination="tailwind.config.js"),
            StubFile(source="vite.config.js", destination="vite.config.js"),
        ],
        description="Stub files to copy into the project",
    )
    directories: list[str] = Field(
        ["resources/js/Components", "resources/js/Layouts", "resources/js/Pages"],
        description="Directories to create in the project",
    )
    command_timeout: Optional[float] = Field(
        None,
        description="Timeout (in seconds) for external commands (if not set, commands run until they finish)",
        gt=0.0,
    )
    confirm_overwrite: bool = Field(False, description="Ask before overwriting existing files")

    @field_validator("stubs_dir")
    @classmethod
    def validate_stubs_dir(cls, v: str) -> str:
        if not isdir(v):
            raise ValueError(f"Invalid stubs directory: {v}")
        return v

    @field_validator("middleware_markers")
    @classmethod
    def validate_markers(cls, v: list[MarkerConfig]) -> list[MarkerConfig]:
        if not v:
            raise ValueError("At least one middleware marker pair is required")
        return v


class Config(_StrictModel):
    """
    Spaify configuration
    """

    log: LogConfig = LogConfig()
    scaffold: ScaffoldConfig = ScaffoldConfig()


class ConfigLoader:
    """
    Configuration loader takes care of loading and parsing configuration files.

    The default loader is already initialized as `spaify.config.loader`. To
    load the configuration from a file, use `spaify.config.loader.load(path)`.

    To get the current configuration, use `spaify.config.get_config()`.
    """

    config: Config
    config_path: Optional[str]

    def __init__(self):
        self.config_path = None
        self.config = Config()

    @staticmethod
    def _remove_json_comments(json_str: str) -> str:
        """
        Remove comments from a JSON string.

        Removes all lines that start with "//" from the JSON string.

        :param json_str: JSON string with comments.
        :return: JSON string without comments.
        """
        return "\n".join([line for line in json_str.splitlines() if not line.strip().startswith("//")])

    @classmethod
    def from_json(cls: "ConfigLoader", config: str) -> Config:
        """
        Parse JSON Into a Config object.

        :param config: JSON string to parse.
        :return: Config object.
        """
        return Config.model_validate_json(cls._remove_json_comments(config), strict=True)

    def load(self, path: str) -> Config:
        """
        Load a configuration from a file.

        :param path: Path to the configuration file.
        :return: Config object.
        """
        with open(path, "rb") as f:
            raw_config = f.read()

        if b"\x00" in raw_config:
            encoding = "utf-16"
        else:
            encoding = "utf-8"

        text_config = raw_config.decode(encoding)
        self.config = self.from_json(text_config)
        self.config_path = path
        return self.config


loader = ConfigLoader()


def get_config() -> Config:
    """
    Return current configuration.

    :return: Current configuration object.
    """
    return loader.config


__all__ = ["loader", "get_config"]
