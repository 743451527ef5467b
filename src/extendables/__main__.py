"""CLI entry point: run `extendables pkg/module` or `python -m extendables pkg/module`."""

import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .bootstrap import boot
    from .shared.errors import ExtendablesError, ModuleNotFound

    parser = argparse.ArgumentParser(prog="extendables", description="Resolve and load Extendables modules.")
    parser.add_argument("identifiers", nargs="*", help="Module identifiers such as pkg/sub/leaf")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Installation root (default: cwd)")
    parser.add_argument("--settings", type=Path, default=None, help="Settings file (default: discovered)")
    parser.add_argument("--package-dir", action="append", dest="package_dirs", default=None,
                        help="Package directory; repeat to override the settings")
    parser.add_argument("--tests", action="store_true", help="List discovered *.specs files")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to stderr")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    root = args.root.resolve()
    if not root.is_dir():
        sys.stderr.write(f"extendables: error: not a directory: {root}\n")
        return 1

    try:
        registry = boot(root, settings_file=args.settings, package_directories=args.package_dirs)
    except ExtendablesError as e:
        sys.stderr.write(f"extendables: error: {e}\n")
        return 1

    if args.tests:
        for package_id, spec in registry.iter_tests():
            print(f"{package_id}\t{spec}")
        return 0

    if not args.identifiers:
        for package_id in sorted(registry):
            print(package_id)
        return 0

    status = 0
    for identifier in args.identifiers:
        try:
            loader = registry.loader_for(identifier)
        except ModuleNotFound as e:
            sys.stderr.write(f"extendables: error: {e}\n")
            status = 1
            continue
        exports, error = loader.load()
        if error is not None:
            sys.stderr.write(f"extendables: error: {error}\n")
            status = 1
            continue
        print(f"{identifier}: {', '.join(sorted(exports)) or '(no exports)'}")
    return status


if __name__ == "__main__":
    sys.exit(main())
