import argparse
import json
import logging
import os
import sys
import time
import traceback

from Nova.config import LOGS_DIR, LOG_LEVEL

# Setup Logging
log_file = os.path.join(LOGS_DIR, "nova.log")
logging.basicConfig(
    filename=log_file,
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

def handle_exception(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logging.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))
    traceback.print_exception(exc_type, exc_value, exc_traceback)

sys.excepthook = handle_exception

from Nova.core import colors as clr
from Nova.core.orchestrator import Orchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nova",
        description="Turn a natural-language command into macOS app actions.",
    )
    parser.add_argument("command", nargs="*", help='e.g. "open Chrome and VS Code"')
    parser.add_argument("--workspace", help="Active workspace name to mention in the prompt")
    parser.add_argument("--model", help="Ollama model to use for this run")
    parser.add_argument("--info", action="store_true", help="Print the current system snapshot")
    parser.add_argument("--apps", action="store_true", help="List installed apps with bundle ids")
    parser.add_argument("--check", action="store_true", help="Test the Ollama connection")
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of styled text")
    return parser


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def run_info(orchestrator: Orchestrator, as_json: bool) -> int:
    snapshot = orchestrator.get_system_info()
    if as_json:
        _print_json(snapshot.to_dict())
        return 0
    print(clr.header(f"{snapshot.platform} ({snapshot.architecture})"))
    clr.print_info(f"Running: {', '.join(snapshot.running_names()) or '-'}")
    clr.print_info(f"Installed: {len(snapshot.available_apps)} apps")
    return 0


def run_apps(orchestrator: Orchestrator, as_json: bool) -> int:
    apps = orchestrator.list_applications()
    if as_json:
        _print_json([{"name": a.name, "bundle_id": a.bundle_id, "path": a.path} for a in apps])
        return 0
    for app in apps:
        print(f"{app.name:<40} {clr.debug(app.bundle_id or 'N/A')}")
    return 0


def run_check(orchestrator: Orchestrator, as_json: bool) -> int:
    connected = orchestrator.test_connection()
    models = orchestrator.list_models() if connected else []
    if as_json:
        _print_json({"connected": connected, "models": models})
    elif connected:
        clr.print_info(f"Ollama is reachable. Models: {', '.join(models) or 'none'}")
    else:
        clr.print_error("Ollama is not reachable.")
    return 0 if connected else 1


def run_command(orchestrator: Orchestrator, text: str, workspace, as_json: bool) -> int:
    t0 = time.time()
    if not as_json:
        clr.print_user(text)

    outcome = orchestrator.process_command(text, workspace=workspace)

    if as_json:
        _print_json(outcome.to_dict())
        return 0 if outcome.success else 1

    if not outcome.success:
        clr.print_error(outcome.error)
        return 1

    if not outcome.results:
        clr.print_warning("No actions to run.")
    for result in outcome.results:
        clr.print_result(f"{result.action.type} → {result.action.target}", result.success)
    clr.print_debug(f"  Total: {time.time() - t0:.2f}s")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        orchestrator = Orchestrator()
    except NotImplementedError as e:
        clr.print_error(str(e))
        return 1

    if args.model:
        orchestrator.set_model(args.model)

    if args.check:
        return run_check(orchestrator, args.json)
    if args.info:
        return run_info(orchestrator, args.json)
    if args.apps:
        return run_apps(orchestrator, args.json)

    text = " ".join(args.command).strip()
    if not text:
        build_parser().print_usage()
        return 2
    return run_command(orchestrator, text, args.workspace, args.json)


if __name__ == "__main__":
    sys.exit(main())
