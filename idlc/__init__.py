"""idlc - IDL backend emitting ABI-compatible Rust, C and LLVM IR declarations."""
from importlib.metadata import PackageNotFoundError, version


def _source_tree_version() -> str:
    import tomllib
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        with open(pyproject, "rb") as f:
            return tomllib.load(f)["project"]["version"]
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        return "unknown"


try:
    __version__ = version("idlc")
    __dev__ = False
except PackageNotFoundError:
    # Running from a checkout without an install
    __version__ = _source_tree_version()
    __dev__ = True
