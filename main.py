#!/usr/bin/env python


import os.path
import sys

try:
    from spaify.cli.main import run_spaify
except ImportError as err:
    spaify_root = os.path.dirname(__file__)
    requirements_path = os.path.join(spaify_root, "requirements.txt")
    print(f"Python environment for Spaify is not completely set up: module `{err.name}` is missing", file=sys.stderr)
    print(
        f"Please run `{sys.executable} -m pip install -r {requirements_path}` to finish Python setup, and rerun Spaify.",
        file=sys.stderr,
    )
    sys.exit(255)

sys.exit(run_spaify())
