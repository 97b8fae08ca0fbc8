from __future__ import annotations
import argparse
import sys
from ..config import CsimConfig
from ..errors import ConfigurationError, TraceSourceError
from ..runtime.simulator import run as run_sim
from ..utils.reporting import print_summary, generate_report
from ..utils.logging import get_logger

logger = get_logger(__name__)

PROG = "pyv-csim"

EXAMPLES = f"""\
Examples:
  linux>  {PROG} -s 4 -E 1 -b 4 -t traces/yi.trace
  linux>  {PROG} -v -s 8 -E 2 -b 4 -t traces/yi.trace
"""


def build_parser():
    p = argparse.ArgumentParser(
        prog=PROG,
        description="Set-associative LRU cache simulator for Valgrind memory traces",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    # Geometry and trace (default=None so a YAML config can supply them)
    p.add_argument("-s", type=int, default=None, dest="s", metavar="<num>",
                   help="Number of s bits for set index.")
    p.add_argument("-E", type=int, default=None, dest="E", metavar="<num>",
                   help="Number of lines per set.")
    p.add_argument("-b", type=int, default=None, dest="b", metavar="<num>",
                   help="Number of b bits for block offsets.")
    p.add_argument("-t", type=str, default=None, dest="trace", metavar="<file>",
                   help="Trace file.")
    p.add_argument("-v", action="store_true", default=None, dest="verbose",
                   help="Optional verbose flag.")

    # Config file
    p.add_argument("-c", "--config", type=str, default=None,
                   help="Path to YAML config file providing any of s, E, b, trace, verbose")

    # Outputs
    p.add_argument("--results", type=str, default=None, dest="results_file",
                   help="File receiving the 'hits misses evictions' record (default: .csim_results)")
    p.add_argument("--report", type=str, default=None, dest="report_dir",
                   help="Directory to save report.json and the per-set report.html")

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = CsimConfig.from_args(args)
        model = run_sim(config)
    except ConfigurationError as e:
        print(f"{PROG}: {e}")
        parser.print_usage()
        return 1
    except TraceSourceError as e:
        print(e, file=sys.stderr)
        return 1

    try:
        print_summary(model.hits, model.misses, model.evictions, config.results_file)
    except OSError as e:
        logger.error(f"Cannot write results file {config.results_file}: {e}")
        return 1
    if config.report_dir:
        generate_report(model, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
