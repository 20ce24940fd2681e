"""
Command line entry point.

Usage:
    aucpr [-t list|pr|roc] [-p POSCOUNT] [-n NEGCOUNT] [-r MINRECALL]
          [-o OUTPUTPREFIX] FILES...

One file prints AUC-PR and AUC-ROC (and with ``-o`` writes ``.opr .pr .spr
.roc``). Several files must be ``list`` sources; their curves are vertically
averaged and ``-o`` writes the averaged ``.pr .roc``.
"""

import argparse
import logging
import sys
from typing import Optional

from aucpr.config import get_settings
from aucpr.exceptions import AUCError
from aucpr.ingestion.formats import SOURCE_FORMATS
from aucpr.services.evaluation import EvaluationResult, EvaluationService
from aucpr.services.export import export_result

logger = logging.getLogger(__name__)

FORMAT_HELP = """\
FILETYPE details:
 roc:
  fpr tpr
 pr:
  recall precision
 list:
  prob outcome [weight]
  where prob is the probability of a positive, outcome is the true
  classification (0 or false for negatives, 1 or true for positives)
  and weight is an optional example weight, defaulting to 1.0
"""


def get_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="aucpr",
        description="Area under the precision-recall and ROC curves",
        epilog=FORMAT_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILES",
        help="Source files to evaluate",
    )
    parser.add_argument(
        "-t", "--type",
        dest="file_type",
        type=str.lower,
        choices=SOURCE_FORMATS,
        default="list",
        help="Source file type (default: list)",
    )
    parser.add_argument(
        "-p", "--pos-count",
        type=float,
        help="Number of positive examples (required for pr and roc)",
    )
    parser.add_argument(
        "-n", "--neg-count",
        type=float,
        help="Number of negative examples (required for pr and roc)",
    )
    parser.add_argument(
        "-r", "--min-recall",
        type=float,
        help="Only integrate the PR curve from this recall upward",
    )
    parser.add_argument(
        "-o", "--output-prefix",
        help="Write curve files to OUTPUTPREFIX.<ext>",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every row read and every point added",
    )
    return parser


def _print_scores(result: EvaluationResult) -> None:
    print(f"Area Under the Curve for Precision - Recall is {result.auc_pr}")
    print(f"Area Under the Curve for ROC is {result.auc_roc}")


def main(argv: Optional[list] = None) -> int:
    """
    Run the calculator.

    Args:
        argv: Optional command line arguments, without the program name

    Returns:
        Exit code (0 for success, 1 for a fatal error)
    """
    args = get_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.min_recall is not None and not 0.0 <= args.min_recall <= 1.0:
        print("MINRECALL must be between 0 and 1", file=sys.stderr)
        return 1

    service = EvaluationService(settings=settings)
    try:
        if len(args.files) == 1:
            result = service.evaluate_source(
                args.files[0],
                args.file_type,
                pos_count=args.pos_count,
                neg_count=args.neg_count,
                min_recall=args.min_recall,
            )
            _print_scores(result)
        else:
            if args.file_type != "list":
                print(
                    "Vertical averaging of multiple files only supported with list filetypes",
                    file=sys.stderr,
                )
                return 1
            result = service.evaluate_average(args.files, min_recall=args.min_recall)
            for member in result.members:
                print(f"Processing '{member.source_paths[0]}'")
                _print_scores(member)
            print("\nVertically averaged totals:")
            _print_scores(result)

        if args.output_prefix:
            export_result(result, args.output_prefix, service.storage)
    except AUCError as e:
        logger.debug("Fatal error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
