import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .core.models import ParserOptions
from .core.pipeline import CredentialParser
from .core.reporting import Reporter, filter_by_app, render_env, render_table
from .core.scanner import DEFAULT_EXCLUDE_DIRS, DirectoryScanner, SingleFileScanner, configure_logging
from .core.utils import decode_text, read_text_safely


def _add_parse_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--strict", action="store_true", help="Drop malformed keys, one-character values and example/test/dummy entries.")
    p.add_argument("--no-infer", action="store_true", help="Do not guess the owning app of each credential.")
    p.add_argument("--app", default=None, help="Only output credentials whose inferred app equals this name.")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="credsift",
        description="Extract key/value credentials from .env, JSON, YAML, TOML, XML or free-form text.",
    )
    sub = p.add_subparsers(dest="mode", required=True)

    # text mode
    t = sub.add_parser("text", help="Parse a file or stdin and print the credentials found.")
    t.add_argument("path", nargs="?", default="-", help="File to parse, or '-' for stdin (default).")
    t.add_argument("--output", choices=["table", "json", "env"], default="table", help="Output style.")
    _add_parse_options(t)

    # file mode
    f = sub.add_parser("file", help="Parse a single file and write export files.")
    f.add_argument("path", type=Path, help="File to parse.")
    f.add_argument("--out", type=Path, default=Path("./credsift_output"), help="Output directory.")
    _add_parse_options(f)

    # dir mode
    d = sub.add_parser("dir", help="Parse every matching file below a directory and write export files.")
    d.add_argument("path", type=Path, help="Directory to walk recursively.")
    d.add_argument("--out", type=Path, default=Path("./credsift_output"), help="Output directory.")
    d.add_argument("--workers", type=int, default=8, help="Number of worker threads.")
    d.add_argument("--include", default="*", help="Glob(s) to include, comma-separated.")
    d.add_argument("--exclude", default=",".join(DEFAULT_EXCLUDE_DIRS), help="Dir names to exclude, comma-separated.")
    d.add_argument("--max-file-size", type=int, default=5_000_000, help="Max file size in bytes to parse (default 5MB).")
    d.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    _add_parse_options(d)

    return p


def _options(args: argparse.Namespace) -> ParserOptions:
    return ParserOptions(infer_app_name=not args.no_infer, strict_mode=args.strict)


def _read_input(path: str) -> Optional[str]:
    if path == "-":
        return decode_text(sys.stdin.buffer.read())
    return read_text_safely(Path(path))


def run_text(args: argparse.Namespace) -> int:
    logger = configure_logging(verbose=args.verbose)
    text = _read_input(args.path)
    if text is None:
        print(f"Unable to read {args.path} as text.", file=sys.stderr)
        return 2

    fmt, results = CredentialParser(logger=logger).parse_with_format(text, _options(args))
    results = filter_by_app(results, args.app)
    if args.verbose:
        logger.info("Detected format: %s", fmt)
    if not results:
        print("No credentials found.", file=sys.stderr)
        return 1

    if args.output == "json":
        print(json.dumps([r.to_dict() for r in results], indent=2))
    elif args.output == "env":
        print(render_env(results))
    else:
        print(render_table(results))
    return 0


def run_file(args: argparse.Namespace) -> int:
    scanner = SingleFileScanner(
        file_path=args.path,
        options=_options(args),
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
    )
    fr = scanner.scan()
    if fr is None:
        print(f"Unable to read {args.path} as text.", file=sys.stderr)
        return 2

    summary = Reporter(args.out, app=args.app).write_all([fr])
    print(f"Found {summary['credentials']} credential(s) in {args.path} (format: {fr.format}).")
    return 0


def run_dir(args: argparse.Namespace) -> int:
    if not args.path.is_dir():
        print(f"{args.path} is not a directory.", file=sys.stderr)
        return 2

    scanner = DirectoryScanner(
        root=args.path,
        options=_options(args),
        include_globs=[g.strip() for g in args.include.split(",") if g.strip()],
        exclude_dirs=[e.strip() for e in args.exclude.split(",") if e.strip()],
        max_file_size=args.max_file_size,
        workers=args.workers,
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
        show_progress=not args.no_progress,
    )
    file_results = scanner.scan()

    summary = Reporter(args.out, app=args.app).write_all(file_results)
    print(f"Found {summary['credentials']} credential(s) in {summary['files']} file(s).")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.mode == "text":
        return run_text(args)
    elif args.mode == "file":
        return run_file(args)
    elif args.mode == "dir":
        return run_dir(args)
    else:
        parser.print_help()
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
