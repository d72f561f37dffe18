"""
CurveKernel - Versionsquelle
============================

VERSION ist die einzige Stelle, an der die Versionsnummer gepflegt wird.
pyproject.toml liest sie statisch (setuptools attr), das Paket exportiert
sie als curvekernel.__version__.
"""

VERSION = "0.1.0"

# Release-Kennung: "alpha", "beta", "rc1", "" für stabile Releases
VERSION_SUFFIX = "alpha"

APP_NAME = "CurveKernel"

VERSION_MAJOR, VERSION_MINOR, VERSION_PATCH = (int(part) for part in VERSION.split("."))
VERSION_STRING = f"{VERSION}-{VERSION_SUFFIX}" if VERSION_SUFFIX else VERSION


def get_version_info() -> dict:
    """Versionsinformationen für Debug-Ausgaben und Serialisierung."""
    return {
        "app_name": APP_NAME,
        "version": VERSION,
        "version_string": VERSION_STRING,
        "major": VERSION_MAJOR,
        "minor": VERSION_MINOR,
        "patch": VERSION_PATCH,
        "suffix": VERSION_SUFFIX,
    }
