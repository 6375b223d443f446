# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tgtt import __version__
from tgtt.config import DEFAULT_CONFIG_NAME, load_config, merged_type_mappings, write_default_config
from tgtt.core.errors import TgttError
from tgtt.loader import Workspace, load_program
from tgtt.transpiler import Transpiler, TranspilerOptions, UnitSelection, transpile_expr

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="tgtt", description="Generate TypeScript type declarations from Go packages")
	sub = p.add_subparsers(dest="cmd", required=True)

	init = sub.add_parser("init", help="Write a default config file")
	init.add_argument("path", nargs="?", type=Path, default=Path(DEFAULT_CONFIG_NAME), help=f"Config path (default: ./{DEFAULT_CONFIG_NAME})")
	init.add_argument("--force", action="store_true", help="Overwrite an existing config file")

	gen = sub.add_parser("generate", help="Transpile the configured packages")
	gen.add_argument(
		"path",
		nargs="?",
		default=DEFAULT_CONFIG_NAME,
		help=f"Config path, or - for stdin (default: ./{DEFAULT_CONFIG_NAME})",
	)
	gen.add_argument("--root", type=Path, default=None, help="Go module root (default: the config file's directory)")
	gen.add_argument("--jobs", type=int, default=None, help="Modules rendered at once; 0 means no limit (overrides config)")
	gen.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (debug) output")

	expr = sub.add_parser("expr", help="Transpile a single Go type expression")
	expr.add_argument("expr", help="Go type expression, e.g. 'map[string]*pkg.T'")
	expr.add_argument("--fallback", default="any", help="Type used for interfaces (default: any)")

	sub.add_parser("version", help="Print the tgtt version")
	return p


def _generate(args: argparse.Namespace) -> int:
	cfg = load_config(args.path)
	root = args.root if args.root is not None else cfg.base_dir
	jobs = cfg.jobs if args.jobs is None else args.jobs
	if jobs < 0:
		raise TgttError("--jobs must be >= 0")

	workspace = Workspace(root, cfg.search_paths)
	patterns = [cfg.primary_package.path, *(pkg.path for pkg in cfg.secondary_packages)]
	program = load_program(workspace, patterns)
	primary = UnitSelection.of(workspace.import_path(cfg.primary_package.path), cfg.primary_package.names)
	secondaries = [UnitSelection.of(workspace.import_path(pkg.path), pkg.names) for pkg in cfg.secondary_packages]
	options = TranspilerOptions(
		type_mappings=merged_type_mappings(cfg, workspace.import_path),
		include_unexported=cfg.include_unexported,
		fallback_type=cfg.fallback_type,
	)

	t = Transpiler(program, primary, secondaries, options)
	graph = t.run()
	graph.write_dir(cfg.output_path, limit=jobs)
	warnings = sum(1 for d in t.diagnostics if d.severity == "warning")
	print(f"tgtt: wrote {len(graph)} module(s) to {cfg.output_path} ({warnings} warning(s))", file=sys.stderr)
	return 0


def main(argv: list[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)

	logging.basicConfig(level=logging.WARNING, format="%(message)s")
	if getattr(args, "verbose", False):
		logging.getLogger("tgtt").setLevel(logging.DEBUG)

	if args.cmd == "version":
		print(__version__)
		return 0

	try:
		if args.cmd == "init":
			write_default_config(args.path, force=bool(args.force))
			print(f"tgtt: wrote {args.path}", file=sys.stderr)
			return 0
		if args.cmd == "expr":
			print(transpile_expr(args.expr, fallback=args.fallback))
			return 0
		if args.cmd == "generate":
			return _generate(args)
	except TgttError as err:
		print(f"tgtt: error: {err}", file=sys.stderr)
		return 1
	except OSError as err:
		print(f"tgtt: error: {err}", file=sys.stderr)
		return 1

	p.error(f"unknown command {args.cmd}")
	return 2


if __name__ == "__main__":
	raise SystemExit(main())
