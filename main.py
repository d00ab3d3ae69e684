#!/usr/bin/env python3
"""m6A Site Prediction - Main Entry Point."""

import argparse
import logging
from pathlib import Path
from typing import Optional
import sys
import yaml

from m6a_prediction.io.tables import read_feature_table, write_predictions
from m6a_prediction.ml.model import load_model
from m6a_prediction.ml.predictor import predict_batch, predict_single
from m6a_prediction.schema import FeatureSchema


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging."""
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file."""
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def resolve_model_path(args: argparse.Namespace, config: dict) -> Path:
    """Pick the model path from the command line, falling back to config."""
    if args.model:
        return args.model
    configured = config.get("model", {}).get("path")
    if not configured:
        raise ValueError("No model given: pass --model or set model.path in the config")
    return Path(configured)


def resolve_threshold(args: argparse.Namespace, config: dict) -> float:
    """Pick the positive threshold from the command line, falling back to config."""
    if args.threshold is not None:
        return args.threshold
    return config.get("prediction", {}).get("positive_threshold", 0.5)


def run_batch_prediction(
    input_path: Path,
    output_dir: Path,
    model_path: Path,
    positive_threshold: float,
    config: dict,
    strict_categories: bool = False
) -> Path:
    """Predict every row of an input table and write the augmented table."""
    logger = logging.getLogger(__name__)
    logger.info(f"Running batch prediction on {input_path}")

    model = load_model(model_path)
    feature_df = read_feature_table(input_path)

    results = predict_batch(
        model,
        feature_df,
        positive_threshold=positive_threshold,
        strict_categories=strict_categories
    )

    filename = config.get("output", {}).get("filename", "m6A_predictions.csv")
    return write_predictions(results, output_dir / filename)


def run_single_prediction(
    args: argparse.Namespace,
    model_path: Path,
    positive_threshold: float
) -> dict:
    """Predict one sample given on the command line and print the result."""
    logger = logging.getLogger(__name__)
    logger.info("Running single-sample prediction")

    model = load_model(model_path)
    result = predict_single(
        model,
        gc_content=args.gc_content,
        RNA_type=args.rna_type,
        RNA_region=args.rna_region,
        exon_length=args.exon_length,
        distance_to_junction=args.distance_to_junction,
        evolutionary_conservation=args.evolutionary_conservation,
        DNA_5mer=args.dna_5mer,
        positive_threshold=positive_threshold
    )

    for key, value in result.to_dict().items():
        print(f"{key}\t{value}")
    return result.to_dict()


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="m6A Site Prediction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Predict every row of a table
  python main.py --mode batch --input data/m6A_input_example.csv --model rf_fit.pkl

  # Predict a single site
  python main.py --mode single --model rf_fit.pkl --gc-content 0.6 \\
      --rna-type mRNA --rna-region CDS --exon-length 12 \\
      --distance-to-junction 50 --evolutionary-conservation 0.8 --dna-5mer ATGAT
        """
    )

    parser.add_argument(
        "--mode",
        choices=["batch", "single"],
        default="batch",
        help="Prediction mode (default: batch)"
    )

    parser.add_argument(
        "--input", "-i",
        type=Path,
        help="Input feature table (CSV or TSV)"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("results"),
        help="Output directory (default: results/)"
    )

    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=Path("config/default.yaml"),
        help="Configuration file (default: config/default.yaml)"
    )

    parser.add_argument(
        "--model",
        type=Path,
        help="Pickled pre-trained classifier"
    )

    parser.add_argument(
        "--threshold",
        type=float,
        help="Positive probability threshold (default: from config, else 0.5)"
    )

    parser.add_argument(
        "--strict-categories",
        action="store_true",
        help="Reject unknown RNA_type/RNA_region values in batch mode"
    )

    sample = parser.add_argument_group("single-sample features")
    sample.add_argument("--gc-content", type=float)
    sample.add_argument("--rna-type", choices=FeatureSchema.RNA_TYPES)
    sample.add_argument("--rna-region", choices=FeatureSchema.RNA_REGIONS)
    sample.add_argument("--exon-length", type=float)
    sample.add_argument("--distance-to-junction", type=float)
    sample.add_argument("--evolutionary-conservation", type=float)
    sample.add_argument("--dna-5mer")

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file path"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    return parser


SINGLE_FIELDS = (
    "gc_content", "rna_type", "rna_region", "exon_length",
    "distance_to_junction", "evolutionary_conservation", "dna_5mer"
)


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)
    logger = logging.getLogger(__name__)

    config = {}
    if args.config.exists():
        config = load_config(args.config)
        logger.info(f"Loaded configuration from {args.config}")

    logger.info(f"m6A Prediction - Mode: {args.mode}")

    if args.mode == "batch" and not args.input:
        parser.error("--input required for batch mode")
    if args.mode == "single":
        missing = [f for f in SINGLE_FIELDS if getattr(args, f) is None]
        if missing:
            flags = ", ".join("--" + f.replace("_", "-") for f in missing)
            parser.error(f"single mode requires {flags}")

    try:
        model_path = resolve_model_path(args, config)
        threshold = resolve_threshold(args, config)

        if args.mode == "batch":
            strict = args.strict_categories or config.get("prediction", {}).get(
                "strict_categories", False
            )
            run_batch_prediction(
                args.input, args.output, model_path, threshold, config, strict
            )

        elif args.mode == "single":
            run_single_prediction(args, model_path, threshold)

        logger.info("Prediction completed successfully")

    except Exception as e:
        logger.error(f"Prediction failed: {e}")
        if args.debug:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
