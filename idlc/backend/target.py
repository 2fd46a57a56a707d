"""
Target description and triple parsing.

A Target bundles what the backends need to know about the host ABI: the LLVM
data layout (atom sizes and alignments), the pointer width and the width of
the C `int` (which drives the default enum discriminant).
"""
from __future__ import annotations
from dataclasses import dataclass
from llvmlite import binding as llvm

from idlc.internals.errors import config_error


@dataclass(frozen=True)
class TargetPlatform:
    """Represents a compilation target platform."""
    arch: str      # arm64, x86_64, riscv64, etc.
    vendor: str    # apple, pc, unknown, etc.
    os: str        # darwin, linux, windows, etc.
    abi: str       # (empty), gnu, musl, etc.


def parse_triple(triple: str) -> TargetPlatform:
    """
    Parse an LLVM target triple into components.

    Examples:
        arm64-apple-darwin25.0.0 -> TargetPlatform(arm64, apple, darwin, '')
        x86_64-pc-linux-gnu -> TargetPlatform(x86_64, pc, linux, gnu)
        x86_64-w64-windows-msvc -> TargetPlatform(x86_64, w64, windows, msvc)
    """
    parts = triple.split('-')

    # Handle version numbers in OS (e.g., darwin25.0.0)
    os_part = parts[2] if len(parts) > 2 else 'unknown'
    if '.' in os_part:
        os_part = os_part.split('.')[0]
    if os_part.startswith('darwin') or os_part.startswith('macos'):
        os_part = 'darwin'

    return TargetPlatform(
        arch=parts[0] if len(parts) > 0 else 'unknown',
        vendor=parts[1] if len(parts) > 1 else 'unknown',
        os=os_part,
        abi=parts[3] if len(parts) > 3 else '',
    )


@dataclass(frozen=True)
class ArchInfo:
    data_layout: str
    pointer_bits: int
    int_bits: int


# i64/f64 ABI alignment is spelled out wherever it differs from the natural width.
_X86_64 = ArchInfo("e-m:e-p:64:64-i64:64-f64:64-i128:128-f80:128-n8:16:32:64-S128", 64, 32)
_I686 = ArchInfo("e-m:e-p:32:32-i64:32:64-f64:32:64-f80:32-n8:16:32-S128", 32, 32)
_AARCH64 = ArchInfo("e-m:e-p:64:64-i8:8:32-i16:16:32-i64:64-i128:128-n32:64-S128", 64, 32)
_ARM = ArchInfo("e-m:e-p:32:32-i64:64-v128:64:128-a:0:32-n32-S64", 32, 32)
_RISCV64 = ArchInfo("e-m:e-p:64:64-i64:64-i128:128-n32:64-S128", 64, 32)
_WASM32 = ArchInfo("e-m:e-p:32:32-i64:64-n32:64-S128", 32, 32)
_AVR = ArchInfo("e-P1-p:16:8-i8:8-i16:8-i32:8-i64:8-f32:8-f64:8-n8-a:8", 16, 16)

ARCHITECTURES: dict[str, ArchInfo] = {
    "x86_64": _X86_64,
    "amd64": _X86_64,
    "i386": _I686,
    "i486": _I686,
    "i586": _I686,
    "i686": _I686,
    "x86": _I686,
    "aarch64": _AARCH64,
    "arm64": _AARCH64,
    "arm": _ARM,
    "armv7": _ARM,
    "thumbv7": _ARM,
    "riscv64": _RISCV64,
    "wasm32": _WASM32,
    "avr": _AVR,
}


@dataclass(frozen=True)
class Target:
    triple: str
    platform: TargetPlatform
    data_layout: str
    pointer_bits: int
    int_bits: int

    @classmethod
    def from_triple(cls, triple: str) -> "Target":
        """Build a Target for a triple.

        Raises:
            ConfigError: CE2002 if the architecture is not known.
        """
        platform = parse_triple(triple)
        info = ARCHITECTURES.get(platform.arch)
        if info is None:
            raise config_error("CE2002", arch=platform.arch, triple=triple)
        return cls(triple, platform, info.data_layout, info.pointer_bits, info.int_bits)

    @classmethod
    def host(cls) -> "Target":
        """Target for the machine running the generator."""
        return cls.from_triple(llvm.get_default_triple())

    def create_target_data(self) -> llvm.TargetData:
        """LLVM view of this target's data layout, used for ABI sizes and alignments."""
        return llvm.create_target_data(self.data_layout)
