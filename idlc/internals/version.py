from __future__ import annotations
import platform
import sys

import llvmlite
from llvmlite import binding as llvm

from idlc import __version__ as app_ver, __dev__ as is_dev


def version_info() -> dict[str, str]:
    """Versions of idlc and of the toolchain pieces that decide its output."""
    return {
        "idlc": app_ver + (" (dev)" if is_dev else ""),
        "python": platform.python_version(),
        "llvmlite": llvmlite.__version__,
        "llvm": ".".join(map(str, llvm.llvm_version_info)),
        "host": llvm.get_default_triple(),
    }


def print_banner(stream=None) -> None:
    """Print the version banner, to stderr by default so generated code stays clean on stdout."""
    stream = stream or sys.stderr
    v = version_info()

    if getattr(stream, "isatty", lambda: False)():
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""

    print(
        f"{BOLD}idlc{RESET} • {v['idlc']}\n"
        f"{DIM}Python {v['python']} • llvmlite {v['llvmlite']} • LLVM {v['llvm']} • host {v['host']}{RESET}",
        file=stream,
    )
