"""Environment validation for hmm_inference dependencies."""

import sys
import warnings
from importlib import import_module
from typing import Dict

from packaging import version

# Required for inference; checked against minimum versions
CORE_PACKAGES = ('numpy', 'scipy')
# Needed only for labelled tables and plots
OPTIONAL_PACKAGES = ('pandas', 'matplotlib', 'seaborn')
CONFIG_PACKAGES = ('packaging', 'tomli_w', 'yaml')


def _installed_version(name: str) -> str:
    try:
        module = import_module(name)
    except ImportError:
        return 'not installed'
    return getattr(module, '__version__', 'unknown')


def check_environment(min_numpy: str = "1.25", min_scipy: str = "1.11") -> None:
    """Check that the environment meets minimum dependency requirements.

    Parameters
    ----------
    min_numpy : str, default="1.25"
        Minimum required NumPy version
    min_scipy : str, default="1.11"
        Minimum required SciPy version

    Raises
    ------
    RuntimeError
        If any requirement is not met

    Examples
    --------
    >>> check_environment()
    >>> check_environment(min_numpy="1.24", min_scipy="1.10")
    """
    errors = []

    if sys.version_info < (3, 11):
        errors.append(f"Python 3.11+ required, found {sys.version_info.major}.{sys.version_info.minor}")

    minimums = {'numpy': min_numpy, 'scipy': min_scipy}
    for name in CORE_PACKAGES:
        found = _installed_version(name)
        if found == 'not installed':
            errors.append(f"{name} not installed - required for inference")
        elif version.parse(found) < version.parse(minimums[name]):
            errors.append(f"{name} {minimums[name]}+ required, found {found}")

    optional_warnings = [
        f"{name} not found - required for belief tables and plots"
        for name in OPTIONAL_PACKAGES
        if _installed_version(name) == 'not installed'
    ]

    if errors:
        error_msg = "Environment validation failed:\n" + "\n".join(f"  - {err}" for err in errors)
        if optional_warnings:
            error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warn}" for warn in optional_warnings)
        error_msg += "\n\nTo install required dependencies:\n  pip install numpy scipy packaging"
        raise RuntimeError(error_msg)

    if optional_warnings:
        warning_msg = "Environment warnings:\n" + "\n".join(f"  - {warn}" for warn in optional_warnings)
        warnings.warn(warning_msg, UserWarning)


def get_dependency_versions() -> Dict[str, str]:
    """Get versions of all relevant dependencies.

    Returns
    -------
    dict
        Package name -> version string ('not installed' when missing)
    """
    versions = {
        'python': f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    }
    for name in CORE_PACKAGES + OPTIONAL_PACKAGES + CONFIG_PACKAGES:
        versions[name] = _installed_version(name)
    return versions


def print_environment_info() -> None:
    """Print dependency versions grouped by role."""
    versions = get_dependency_versions()

    print("hmm_inference - Environment Information")
    print("=" * 40)

    groups = [
        ("Core Dependencies", ('python',) + CORE_PACKAGES),
        ("Tables and Visualization", OPTIONAL_PACKAGES),
        ("Configuration", CONFIG_PACKAGES),
    ]
    for title, names in groups:
        print(f"\n{title}:")
        for name in names:
            print(f"  {name:12}: {versions[name]}")

    print("\nSystem Information:")
    print(f"  Platform     : {sys.platform}")
