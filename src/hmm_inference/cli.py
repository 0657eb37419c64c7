import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from .config.settings import Settings, get_config, set_config
from .data.model_spec import ModelSpec, load_model_spec
from .data.presets import MODEL_PRESETS, list_model_presets
from .exceptions import HMMInferenceError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INPUT_ERROR = 2


def _setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure root logger to log to stderr and, optionally, a log file.

    Args:
        verbose: If ``True`` set console log level to ``DEBUG`` else ``WARNING``.
        log_file: Optional path to a log file, always written at ``DEBUG``.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handlers = []

    # Console handler; stdout is reserved for results
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(log_format))
    handlers.append(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(log_format))
        handlers.append(file_handler)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers)
    logging.debug("Logging initialised. Log file: %s", log_file)


def _load_model(model: str) -> ModelSpec:
    """Resolve a preset name or a JSON/YAML model file path."""
    if model in MODEL_PRESETS:
        return MODEL_PRESETS[model]
    return load_model_spec(model)


def _load_settings(path: str) -> Settings:
    """Read a ``--settings`` TOML file; unknown keys surface as ``ValueError``."""
    try:
        return Settings.from_toml(path)
    except TypeError as exc:
        raise ValueError(f"Invalid settings file {path}: {exc}") from exc


def _open_session(args: argparse.Namespace):
    from .data.session import InferenceSession

    spec = _load_model(args.model)
    session = InferenceSession(spec, display_horizon=getattr(args, "horizon", None))
    session.extend(args.evidence)
    return session


# -----------------------------------------------------------------------------
# Sub-command implementations
# -----------------------------------------------------------------------------

def _cmd_query(args: argparse.Namespace) -> int:
    """Entry point for the ``query`` sub-command."""
    logger = logging.getLogger(__name__)
    session = _open_session(args)
    logger.info("Querying %s with %d observation(s)", args.model, len(session))

    table = session.beliefs(start=args.start, stop=args.stop)
    print(table.to_frame().to_string(float_format=lambda v: f"{v:.{args.precision}f}"))
    print(f"\nP(evidence) = {table.likelihood:.{args.precision}g}")
    return EXIT_OK


def _cmd_likelihood(args: argparse.Namespace) -> int:
    """Entry point for the ``likelihood`` sub-command."""
    session = _open_session(args)
    engine = session.engine
    values = engine.log_likelihood(session.evidence) if args.log else engine.likelihood(session.evidence)

    column = "log P(e_0..t)" if args.log else "P(e_0..t)"
    frame = pd.DataFrame({"evidence": session.evidence_labels, column: values},
                         index=pd.Index(np.arange(len(values)), name="time"))
    print(frame.to_string())
    return EXIT_OK


def _cmd_simulate(args: argparse.Namespace) -> int:
    """Entry point for the ``simulate`` sub-command."""
    from .data.sequence_generator import sample_sequence

    spec = _load_model(args.model)
    draw = sample_sequence(spec.build(), args.steps, seed=args.seed)
    frame = pd.DataFrame({
        "state": spec.state_labels.decode(draw.states),
        "evidence": spec.evidence_labels.decode(draw.evidence),
    }, index=pd.Index(np.arange(len(draw)), name="time"))
    print(frame.to_string())
    return EXIT_OK


def _cmd_plot(args: argparse.Namespace) -> int:
    """Entry point for the ``plot`` sub-command."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from .viz.belief_evolution import (
        BeliefPlotConfig,
        plot_belief_heatmap,
        plot_belief_trajectories,
        save_belief_figure,
    )

    logger = logging.getLogger(__name__)
    settings = get_config()
    session = _open_session(args)
    table = session.beliefs()

    config = BeliefPlotConfig(dpi=settings.figure_dpi)
    plotter = plot_belief_heatmap if args.kind == "heatmap" else plot_belief_trajectories
    fig = plotter(table, config=config)

    output = Path(args.output) if args.output else settings.ensure_output_dir() / f"beliefs_{args.kind}.png"
    path = save_belief_figure(fig, output, dpi=settings.figure_dpi)
    plt.close(fig)
    logger.info("Saved %s plot to %s", args.kind, path)
    print(path)
    return EXIT_OK


def _cmd_presets(args: argparse.Namespace) -> int:
    """Entry point for the ``presets`` sub-command."""
    for name in list_model_presets():
        spec = MODEL_PRESETS[name]
        print(f"{name:10} states={spec.states} evidence={spec.evidence}")
    return EXIT_OK


def _cmd_env(args: argparse.Namespace) -> int:
    """Entry point for the ``env`` sub-command."""
    from .config.validate import print_environment_info

    print_environment_info()
    return EXIT_OK


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def _add_model_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "model",
        type=str,
        help=f"Model preset ({', '.join(list_model_presets())}) or JSON/YAML model file.",
    )
    parser.add_argument(
        "evidence",
        nargs="*",
        help="Observed evidence labels in time order.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hmm-inference",
        description="Exact inference for discrete hidden Markov models",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging output.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write DEBUG logs to this file.",
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="TOML settings file (defaults to config.toml / hmm_inference.toml if present).",
    )

    sub_parsers = parser.add_subparsers(dest="command", required=True)

    # query -------------------------------------------------------------------
    query_parser = sub_parsers.add_parser("query", help="Beliefs over a time range")
    _add_model_arguments(query_parser)
    query_parser.add_argument("--start", type=int, default=0, help="First time step.")
    query_parser.add_argument(
        "--stop",
        type=int,
        default=None,
        help="Last time step (defaults to the end of the display horizon).",
    )
    query_parser.add_argument("--horizon", type=int, default=None, help="Display horizon.")
    query_parser.add_argument("--precision", type=int, default=4, help="Printed decimals.")
    query_parser.set_defaults(func=_cmd_query)

    # likelihood --------------------------------------------------------------
    likelihood_parser = sub_parsers.add_parser("likelihood", help="Likelihood of each evidence prefix")
    _add_model_arguments(likelihood_parser)
    likelihood_parser.add_argument("--log", action="store_true", help="Report log-likelihoods.")
    likelihood_parser.set_defaults(func=_cmd_likelihood)

    # simulate ----------------------------------------------------------------
    simulate_parser = sub_parsers.add_parser("simulate", help="Sample states and evidence")
    simulate_parser.add_argument("model", type=str, help="Model preset or model file.")
    simulate_parser.add_argument("--steps", type=int, default=10, help="Sequence length.")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    simulate_parser.set_defaults(func=_cmd_simulate)

    # plot --------------------------------------------------------------------
    plot_parser = sub_parsers.add_parser("plot", help="Plot beliefs over the display horizon")
    _add_model_arguments(plot_parser)
    plot_parser.add_argument("--output", type=str, default=None, help="Figure path (png/svg/pdf).")
    plot_parser.add_argument("--kind", choices=["heatmap", "lines"], default="heatmap")
    plot_parser.add_argument("--horizon", type=int, default=None, help="Display horizon.")
    plot_parser.set_defaults(func=_cmd_plot)

    # presets -----------------------------------------------------------------
    presets_parser = sub_parsers.add_parser("presets", help="List bundled models")
    presets_parser.set_defaults(func=_cmd_presets)

    # env ---------------------------------------------------------------------
    env_parser = sub_parsers.add_parser("env", help="Show dependency versions")
    env_parser.set_defaults(func=_cmd_env)

    return parser


# -----------------------------------------------------------------------------
# Main entry point
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Parse ``argv`` and dispatch to sub-command implementation."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Logging must be set up *after* parsing to respect --verbose flag.
    _setup_logging(verbose=args.verbose, log_file=args.log_file)
    logger = logging.getLogger(__name__)

    try:
        if args.settings is not None:
            set_config(_load_settings(args.settings))
        return args.func(args)
    except (HMMInferenceError, FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Command %s failed: %s", args.command, exc)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
