#!/usr/bin/env python3
"""Check if all required dependencies are installed."""

import sys
from importlib import import_module

REQUIRED_PACKAGES = [
    ('numpy', 'numpy'),
    ('yaml', 'PyYAML'),
    ('loguru', 'loguru'),
    ('jsonschema', 'jsonschema'),
]

OPTIONAL_PACKAGES = [
    ('pytest', 'pytest'),
]


def _check(packages):
    missing = []
    for module_name, package_name in packages:
        try:
            mod = import_module(module_name)
            version = getattr(mod, '__version__', 'unknown')
            print(f"[OK] {package_name:25} {version}")
        except ImportError:
            missing.append(package_name)
            print(f"[MISSING] {package_name:25} NOT FOUND")
    return missing


def check_dependencies():
    """Check if all required packages are installed."""
    print("Checking dependencies...\n")
    missing = _check(REQUIRED_PACKAGES)

    print("\nTest tooling:")
    optional_missing = _check(OPTIONAL_PACKAGES)

    print("\n" + "="*60)

    if missing:
        print(f"\n[ERROR] Missing {len(missing)} package(s):")
        for pkg in missing:
            print(f"   - {pkg}")
        print("\nInstall with:")
        print("   pip install -e .")
        return False

    print(f"\n[SUCCESS] All {len(REQUIRED_PACKAGES)} required packages are installed!")
    if optional_missing:
        print("Install test tooling with: pip install -e .[test]")
    return True


if __name__ == "__main__":
    success = check_dependencies()
    sys.exit(0 if success else 1)
