#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Runtime dependency verification for plz-compdb.

Provides version checking for the third-party packages the compdb modules
import, so that plzCompDb.py can fail early with an install hint instead of a
bare ImportError. Output is plain text: this module must keep working when
colorama is the package that is missing, and packaging is only imported once
it is known to be installed.
"""

import sys
import logging
import argparse
from importlib.metadata import version, PackageNotFoundError
from typing import Dict, List, Optional, Tuple

from compdb.constants import EXIT_RUNTIME_ERROR

logger = logging.getLogger(__name__)

# Package version requirements (minimum versions, Ubuntu 24.04 LTS)
# packaging comes first: comparing versions needs it
PACKAGE_REQUIREMENTS: Dict[str, str] = {
    "packaging": "24.0",
    "colorama": "0.4.6",
}


def check_package_version(package_name: str, min_version: Optional[str] = None, raise_on_error: bool = True) -> Tuple[bool, bool, Optional[str]]:
    """Check if a package is installed and meets minimum version requirement.

    Args:
        package_name: PyPI package name (e.g., 'colorama')
        min_version: Minimum required version string. If None, uses PACKAGE_REQUIREMENTS.
        raise_on_error: If True, raises ImportError on failure

    Returns:
        Tuple of (is_installed, meets_version, installed_version or None)

    Raises:
        ValueError: If no minimum version is known for the package
        ImportError: If raise_on_error=True and package is missing or too old
    """
    if min_version is None:
        min_version = PACKAGE_REQUIREMENTS.get(package_name)
        if min_version is None:
            raise ValueError(f"No version requirement specified for {package_name}")

    try:
        installed_version = version(package_name)
    except PackageNotFoundError as exc:
        if raise_on_error:
            raise ImportError(f"{package_name} is not installed. Install with: pip install '{package_name}>={min_version}'") from exc
        return False, False, None

    from packaging.version import parse

    meets_version = parse(installed_version) >= parse(min_version)
    logger.debug("%s %s installed (need >=%s)", package_name, installed_version, min_version)

    if not meets_version and raise_on_error:
        raise ImportError(
            f"{package_name} {installed_version} is too old. "
            f"Version >={min_version} is required. "
            f"Upgrade with: pip install --upgrade '{package_name}>={min_version}'"
        )

    return True, meets_version, installed_version


def require_package(package_name: str, context: str = "plz-compdb") -> None:
    """Exit with an install hint if a package is missing or too old.

    Args:
        package_name: PyPI package name
        context: Description of what needs the package

    Exits:
        With EXIT_RUNTIME_ERROR (2) if package is unknown, missing or too old

    Example:
        >>> require_package('colorama', 'colored output')
    """
    min_ver = PACKAGE_REQUIREMENTS.get(package_name)
    if min_ver is None:
        print(f"Error: Unknown package '{package_name}' - no version requirement defined", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)

    is_installed, meets_version, installed_version = check_package_version(package_name, min_ver, raise_on_error=False)
    if not is_installed:
        print(f"Error: {package_name} is required for {context}.", file=sys.stderr)
        print(f"Install with: pip install '{package_name}>={min_ver}'", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)
    if not meets_version:
        print(f"Error: {package_name} {installed_version} is too old for {context}.", file=sys.stderr)
        print(f"Version >={min_ver} is required.", file=sys.stderr)
        print(f"Upgrade with: pip install --upgrade '{package_name}>={min_ver}'", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)


def check_all_packages() -> bool:
    """Check every package in PACKAGE_REQUIREMENTS and display status.

    Returns:
        True if all required packages are OK, False otherwise
    """
    print("plz-compdb package verification")
    print("=" * 40)

    all_ok = True
    for pkg_name, min_ver in PACKAGE_REQUIREMENTS.items():
        is_installed, meets_version, installed_ver = check_package_version(pkg_name, min_ver, raise_on_error=False)
        if is_installed and meets_version:
            print(f"  OK       {pkg_name} {installed_ver}")
        elif is_installed:
            print(f"  TOO OLD  {pkg_name} {installed_ver} (need >={min_ver})")
            all_ok = False
        else:
            print(f"  MISSING  {pkg_name}")
            all_ok = False
        if not is_installed and pkg_name == "packaging":
            # Remaining versions cannot be compared
            break

    print("=" * 40)
    if all_ok:
        print("All required packages are available")
        return True

    requirements = " ".join(f"'{name}>={ver}'" for name, ver in PACKAGE_REQUIREMENTS.items())
    print("Some required packages are missing or too old")
    print(f"Install missing packages with:\n  pip install {requirements}")
    return False


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI usage.

    Returns:
        Exit code: 0 for success, 1 for failures
    """
    parser = argparse.ArgumentParser(description="Verify plz-compdb package dependencies", formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--check-all", action="store_true", help="Check all known runtime packages")

    args = parser.parse_args(argv)

    if args.check_all:
        return 0 if check_all_packages() else 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
