import argparse
import logging
import os
import random

from dscript_engine.config import ConfigError, DScriptConfig, check_rounds, load_config
from dscript_parser.dscript_parser import EXAMPLE_DSCRIPT, MAX_LINES, validate_dscript, print_validation_report
from dscript_parser.editor_input import apply_edit
from sim_train import MetricsTableError, TrainingSimulator, format_result

"""
Interactive script to let users describe a neural network in D-Script, check it,
and watch a simulated training run. No real training happens: results come from
a table of predefined metrics or are generated.

Example:
INITIATEMYNETWORK IRISSCANNING
ADDONELAYER
ADDONELAYER
ADDSPECIALLAYER
RUNMEPLEASE
"""

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "dscript.yaml"

STYLES = {
    'info': "\033[36;1m",
    'success': "\033[32;1m",
    'warning': "\033[33;1m",
    'error': "\033[31;1m",
}
CHARSET_ERROR = "Only uppercase letters and spaces are allowed"


def paint(text, style, color=True):
    """Wrap text in the ANSI colour for style, or return it unchanged."""
    if not color:
        return text
    return f"{STYLES[style]}{text}\033[0m"


def get_config(args):
    """Load dscript.yaml (or --config) and apply command line overrides."""
    if args.config:
        config = load_config(args.config)
    elif os.path.exists(DEFAULT_CONFIG_FILE):
        config = load_config(DEFAULT_CONFIG_FILE)
    else:
        config = DScriptConfig()

    if args.rounds is not None:
        config.rounds = check_rounds(args.rounds)
    if args.seed is not None:
        config.seed = args.seed
    if args.metrics:
        config.metrics_file = args.metrics
    if args.realtime:
        config.realtime = True
    if args.no_color:
        config.color = False
    return config


def read_script_file(filename, color=True):
    """
    Read a script file through the editor filter.
    Returns the accepted script, or None if the file holds disallowed characters.
    """
    with open(filename, "r") as f:
        content = f.read()

    script = apply_edit("", content)
    if content.strip() and not script:
        print(paint(f"{CHARSET_ERROR} in {filename}", 'error', color))
        return None
    if content[len(script):].strip():
        print(paint(f"Script cut to the first {MAX_LINES} lines", 'warning', color))
    return script


def read_script_interactively(color=True):
    """Prompt for script lines until an empty line is entered."""
    print(paint("Type your D-Script, one command per line. Finish with an empty line.", 'info', color))
    print(paint("(Type EXAMPLE on the first line to load the example script.)", 'info', color))
    script = ""
    while True:
        line = input("> ").rstrip()
        if not line:
            break
        if not script and line.strip() == "EXAMPLE":
            print(f"\n{EXAMPLE_DSCRIPT}\n")
            return EXAMPLE_DSCRIPT
        candidate = f"{script}\n{line}" if script else line
        accepted = apply_edit(script, candidate)
        if accepted == script:
            print(paint(CHARSET_ERROR, 'error', color))
            continue
        script = accepted
        if len(script.split("\n")) >= MAX_LINES:
            print(paint(f"Reached the {MAX_LINES} line limit", 'warning', color))
            break
    return script


def confirm_training(rounds):
    answer = input(f"\nTrain network for {rounds} round(s)? (Y/N): ").strip().lower()
    return answer in ['y', 'yes']


def run_training(simulator, script, rounds, color=True):
    """Train the network and print the result."""
    print("\n" + paint("Training network...", 'info', color))
    success, result, err = simulator.run_script(script, rounds)

    if success:
        print(paint("✓ Training finished", 'success', color))
        print(format_result(result))
    else:
        print(paint(f"✗ {err}", 'error', color))

    return success


def build_parser():
    parser = argparse.ArgumentParser(description="Build and train a D-Script network")
    parser.add_argument("file", nargs="?", help="D-Script file (prompts for input if omitted)")
    parser.add_argument("-r", "--rounds", type=int, help="Training rounds (1-5)")
    parser.add_argument("-c", "--config", help=f"YAML config file (default: {DEFAULT_CONFIG_FILE} if present)")
    parser.add_argument("-m", "--metrics", help="YAML file with predefined metrics")
    parser.add_argument("-s", "--seed", type=int, help="Random seed for reproducible results")
    parser.add_argument("-y", "--yes", action="store_true", help="Train without asking for confirmation")
    parser.add_argument("--realtime", action="store_true", help="Wait as long as a real training run would")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every step")
    return parser


def main(argv=None):
    """Main workflow."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(levelname)s - %(message)s')

    color = not args.no_color
    try:
        # Setup
        config = get_config(args)
        color = config.color
        simulator = TrainingSimulator(
            metrics_file=config.metrics_file,
            rng=random.Random(config.seed),
            realtime=config.realtime
        )

        # Get script
        if args.file:
            script = read_script_file(args.file, color)
            if script is None:
                return 1
        else:
            script = read_script_interactively(color)

        # Validate
        is_valid, issues = validate_dscript(script)
        print_validation_report(issues, color)
        if not is_valid:
            print(paint("Please fix the script and try again", 'error', color))
            return 1

        # Train
        if not args.yes and not confirm_training(config.rounds):
            print(paint("Skipping training", 'error', color))
            return 0
        return 0 if run_training(simulator, script, config.rounds, color) else 1

    except (ConfigError, MetricsTableError, OSError) as e:
        print(paint(f"Error: {e}", 'error', color))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
