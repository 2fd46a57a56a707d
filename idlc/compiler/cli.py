"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path

from idlc.internals.version import print_banner


def print_backends() -> int:
    from idlc.backend import BACKENDS

    for name, cls in sorted(BACKENDS.items()):
        caps = ", ".join(sorted(c.value for c in cls.capabilities)) or "types only"
        print(f"{name:6} {caps}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main generator entry point.

    Returns:
        0 on success, 1 if warnings were reported, 2 on errors.
    """
    ap = argparse.ArgumentParser(prog="idlc", description="Generate ABI-compatible type declarations")

    ap.add_argument("module", nargs='?', help="Path to the module description (.toml)")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("-b", "--backend", help="Target host: rust, c or llvm (default: rust)")
    ap.add_argument("--target", metavar="TRIPLE",
                    help="Target triple (default: the machine running idlc)")
    ap.add_argument("--enum-repr", metavar="ATOM",
                    help="Integer atom used for enum discriminants (e.g. u8, u32)")
    ap.add_argument("--config", metavar="FILE",
                    help="Read backend settings from FILE (default: ./idlc.toml if present)")
    ap.add_argument("-o", "--out", metavar="OUT", help="Output path (default: stdout)")
    ap.add_argument("--skip-unsupported", action="store_true",
                    help="Skip declarations the backend cannot emit instead of failing")
    ap.add_argument("--list-backends", action="store_true",
                    help="List backends and their capabilities")
    ap.add_argument("--traceback", action="store_true",
                    help="Print full traceback on internal errors (for debugging)")
    args = ap.parse_args(argv)

    if args.version:
        print_banner()
        return 0

    if args.list_backends:
        return print_backends()

    if not args.module:
        print("error: module file required", file=sys.stderr)
        return 2

    from idlc.backend.config import CONFIG_NAME, ProjectConfig, load_config
    from idlc.compiler.loader import load_module
    from idlc.compiler.pipeline import generate_to_bytes
    from idlc.internals.errors import CodedError, InternalError
    from idlc.internals.report import Reporter

    module_path = Path(args.module)
    reporter = Reporter(filename=str(module_path))

    try:
        config_path = Path(args.config) if args.config else Path.cwd() / CONFIG_NAME
        if args.config or config_path.exists():
            project = load_config(config_path)
        else:
            project = ProjectConfig()
        backend = args.backend or project.backend
        config = project.backend_config.with_overrides(args.target, args.enum_repr)

        module = load_module(module_path)
        output = generate_to_bytes(module, backend, config, reporter=reporter,
                                   skip_unsupported=args.skip_unsupported)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except CodedError as e:
        reporter.print()
        if isinstance(e, InternalError):
            print(f"internal error: {e}", file=sys.stderr)
            if args.traceback:
                traceback.print_exc()
        else:
            print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        if args.out:
            Path(args.out).write_bytes(output)
        else:
            sys.stdout.buffer.write(output)
            sys.stdout.buffer.flush()
    except OSError as e:
        print(f"error: cannot write output: {e}", file=sys.stderr)
        return 2

    reporter.print()
    if reporter.items:
        print(f"idlc: {reporter.summary()}", file=sys.stderr)
    return 1 if reporter.has_warnings else 0


if __name__ == "__main__":
    raise SystemExit(main())
