#!/usr/bin/env python3
import os
import json
import argparse
import logging
import sys

from study_chunking.models import ProcessingOptions

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("study_chunking.log")
    ]
)
logger = logging.getLogger(__name__)


def build_processing_function(backend: str, model: str = None, options: ProcessingOptions = None):
    """Create the per-chunk operation for the selected backend."""
    if backend == "llm":
        from study_chunking.llm_handler import LLMChunkAnalyzer
        return LLMChunkAnalyzer(
            model_name=model,
            preserve_equations=options.preserve_equations if options else True,
        )

    from study_chunking.extractive import HeuristicChunkAnalyzer
    return HeuristicChunkAnalyzer()


def main(argv=None):
    """
    Main entry point for chunked study-material processing.
    """
    # Parse command line arguments
    parser = argparse.ArgumentParser(
        description="Study Chunking: split extracted document text into chunks and build study material"
    )

    parser.add_argument(
        "-i", "--input",
        required=True,
        help="Path to the input text file"
    )

    parser.add_argument(
        "-o", "--output",
        help="Path to save the output JSON file. If not provided, will use the input filename with _study.json."
    )

    parser.add_argument(
        "--backend",
        choices=["local", "llm"],
        default="local",
        help="Per-chunk backend: 'local' extractive analyzer or 'llm' (default: local)"
    )

    parser.add_argument("--model", help="LLM model name (default: LLM_MODEL or gemini-2.5-pro)")
    parser.add_argument("--chunk-size", type=int, help="Maximum characters per chunk (default: 4000)")
    parser.add_argument("--overlap-size", type=int, help="Characters of context carried into the next chunk (default: 200)")
    parser.add_argument("--max-concurrency", type=int, help="Chunks processed at once (default: 3)")
    parser.add_argument("--preprocess", action="store_true", help="Normalize OCR text before chunking")
    parser.add_argument("--estimate-only", action="store_true", help="Print the processing estimate and exit")

    args = parser.parse_args(argv)

    # Validate input file
    input_path = os.path.abspath(args.input)
    if not os.path.exists(input_path):
        logger.error(f"Input file not found: {input_path}")
        sys.exit(1)

    try:
        options = ProcessingOptions.from_env(
            chunk_size=args.chunk_size,
            overlap_size=args.overlap_size,
            max_concurrency=args.max_concurrency,
        )
    except ValueError as e:
        logger.error(f"Invalid processing options: {str(e)}")
        sys.exit(1)

    if args.estimate_only:
        from study_chunking.estimator import estimate_processing_time

        with open(input_path, 'r', encoding='utf-8') as f:
            estimate = estimate_processing_time(f.read(), options)
        print(json.dumps(estimate.to_dict(), indent=2))
        return

    # Determine output path
    if args.output:
        output_path = os.path.abspath(args.output)
    else:
        input_name = os.path.splitext(os.path.basename(input_path))[0]
        output_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "output")
        output_path = os.path.join(output_dir, f"{input_name}_study.json")

    # Create output directory if it doesn't exist
    os.makedirs(os.path.dirname(output_path), exist_ok=True)

    logger.info(f"Starting chunked processing on {input_path}")
    logger.info(f"Output will be saved to {output_path}")

    try:
        from study_chunking.orchestrator import process_text_file

        processing_function = build_processing_function(args.backend, args.model, options)
        process_text_file(input_path, output_path, processing_function, options, preprocess=args.preprocess)
        logger.info(f"Processing complete. Results saved to {output_path}")
    except Exception as e:
        logger.error(f"Error during processing: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
