from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, settings file, command-line overrides), the output-folder
confirmation, the build itself, and the optional local preview server.
"""

import functools
import json
import sys
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List, Optional

from treedocs.core.pipeline.engine import check_output_location, run_build
from treedocs.core.pipeline.validator import build_config
from treedocs.domain.config import BuildConfig, get_default_config, load_config, save_config
from treedocs.domain.errors import ConfigurationError
from treedocs.domain.pipeline_models import BuildResult
from treedocs.infra.fs import is_non_empty_dir, normalize_path
from treedocs.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_logger,
    level_for_verbosity,
)
from treedocs.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

# Unit printed next to each stage's progress counter
STAGE_UNITS: Dict[str, str] = {
    "images": "images",
    "md": "pages",
    "site": "files",
    "pdf": "pdfs",
}

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success or declined, 1 build failure,
             2 configuration error, 130 interrupted).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap
    configure_logging(LoggingConfig(
        level=level_for_verbosity(args.debug, args.quiet),
        console=True,
        log_file=args.log_file,
    ))

    # 3. Configuration resolution
    try:
        cfg = _resolve_config(args)
        if not args.dump_config:
            check_output_location(cfg)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG

    if args.dump_config:
        print(json.dumps(cfg.to_dict(), ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        save_config(cfg.to_dict(), args.config_path)

    # 4. Output folder confirmation
    if is_non_empty_dir(cfg.dist_folder) and not args.assume_yes:
        if not _confirm_clear(cfg.dist_folder):
            print("Aborted. Nothing was built.")
            return EXIT_OK

    # 5. Build phase
    logger.info(f"Building documentation from '{cfg.root_folder}' into '{cfg.dist_folder}'")
    try:
        result = run_build(cfg, on_progress=_print_progress)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except KeyboardInterrupt:
        logger.warning("Build interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Build failed: {e}", exc_info=True)
        print(f"ERROR: Build failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    _print_human_summary(result)

    # 6. Optional preview
    if args.serve is not None:
        if not cfg.generate_website:
            logger.warning("--serve ignored: website generation is disabled.")
        else:
            serve_directory(normalize_path(cfg.dist_folder, "."), args.serve)

    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION RESOLUTION
# -----------------------------------------------------------------------------

def _resolve_config(args: Any) -> BuildConfig:
    """
    Merge defaults, the settings file and command-line overrides.

    Raises:
        ConfigurationError: If an explicitly requested settings file is
                            missing or malformed.
    """
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config(args.config_path, required=args.config_path is not None)

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    cfg, warnings = build_config(raw_conf, strict=False)

    for w in warnings:
        logger.warning(f"Configuration: {w}")
    return cfg


def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# INTERACTION
# -----------------------------------------------------------------------------

def _confirm_clear(path: str) -> bool:
    """
    Ask before a build wipes a non-empty output folder.

    Non-interactive sessions proceed without asking.
    """
    if not sys.stdin.isatty():
        return True
    try:
        answer = input(f"Output folder '{path}' is not empty and will be cleared. Continue? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _print_progress(stage: str, completed: int, total: int) -> None:
    unit = STAGE_UNITS.get(stage, "items")
    print(f"{stage}: processed {completed}/{total} {unit}", flush=True)


def serve_directory(path: str, port: int) -> None:
    """Serve a folder over HTTP until interrupted."""
    handler = functools.partial(SimpleHTTPRequestHandler, directory=path)
    with ThreadingHTTPServer(("", port), handler) as httpd:
        print(f"Serving '{path}' at http://localhost:{port} (Ctrl+C to stop)")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Preview server stopped.")

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    print(f"Built {result.folder_count} folders ({result.diagram_count} diagrams) "
          f"in {result.elapsed_seconds:.2f}s")
    print(f"Output folder: {result.dist_folder}")

    for report in result.stages:
        print(f"  - {report.name}: {len(report.outputs)} files ({report.elapsed_seconds:.2f}s)")


if __name__ == "__main__":
    sys.exit(main())
