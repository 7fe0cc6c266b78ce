import re
from os.path import dirname, isfile, join

UNKNOWN_VERSION = "0.0.0"
SETUP_PATH = join(dirname(__file__), "..", "..", "setup.py")
SETUP_VERSION_PATTERN = re.compile(r'^\s*VERSION\s*=\s*"(.*)"\s*(#.*)?$')


def get_version(setup_path: str = SETUP_PATH) -> str:
    """
    Get Spaify version as defined in setup.py.

    If the version can't be found, returns "0.0.0".

    :param setup_path: Path to setup.py.
    :return: version string
    """
    if not isfile(setup_path):
        return UNKNOWN_VERSION

    with open(setup_path, "r", encoding="utf-8") as fp:
        for line in fp:
            m = SETUP_VERSION_PATTERN.match(line)
            if m:
                return m.group(1)

    return UNKNOWN_VERSION


__all__ = ["get_version"]
