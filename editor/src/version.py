"""Application version module.

Released packages carry a baked version string. From a source checkout the
version is VERSION (major.minor) plus the number of commits since the last
tag, so every commit gets a distinct patch number.
"""

# Overwritten by the release script; stays None in a source checkout.
_BAKED_VERSION = None


def get_version() -> str:
    """Get the application version string (e.g. '0.1.7')."""
    if _BAKED_VERSION is not None:
        return _BAKED_VERSION
    return _dev_version()


def _git(args, cwd):
    import subprocess
    try:
        result = subprocess.run(['git'] + args, capture_output=True, text=True, check=False, cwd=cwd)
    except FileNotFoundError:
        return None  # git not installed
    return result.stdout.strip() if result.returncode == 0 else None


def _dev_version() -> str:
    """Derive the version from VERSION and git (source checkout only)."""
    from pathlib import Path

    # editor/src/version.py -> project root
    version_file = Path(__file__).resolve().parent.parent.parent / "VERSION"
    try:
        major_minor = version_file.read_text().strip()
    except FileNotFoundError:
        major_minor = "0.0"

    cwd = str(version_file.parent)
    described = _git(['describe', '--tags', '--long'], cwd)
    if described:
        # v0.1-5-gabcdef -> 5 commits since the tag
        parts = described.rsplit('-', 2)
        if len(parts) == 3:
            return f"{major_minor}.{parts[1]}"

    count = _git(['rev-list', '--count', 'HEAD'], cwd)
    if count:
        return f"{major_minor}.{count}"
    return f"{major_minor}.0"
