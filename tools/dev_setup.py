#!/usr/bin/env python3

import os
from pathlib import Path
from subprocess import check_call

repo_dir = Path(__file__).resolve().parent.parent
os.chdir(str(repo_dir))

print("=== Update system packages (apt) ===")
apt_packages = ["libjpeg-dev", "zlib1g-dev", "python3-dev", "python3-venv"]
check_call(["sudo", "apt", "install"] + apt_packages)

print("\n=== Update python virtualenv ===")
venv_dir = repo_dir / "python_venv"
if not (venv_dir / "bin/activate").is_file():
    import venv  # pylint: disable=wrong-import-position

    venv.create(venv_dir, symlinks=True, with_pip=True)
check_call([venv_dir / "bin/pip", "install", "-e", ".[test,dev]"])

print("\n::: Setup complete! :::")
