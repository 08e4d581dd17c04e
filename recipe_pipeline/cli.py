"""
Command line entry point for the recipe pipeline.

Usage:
    # Pasted text from a file, or from stdin
    recipe-pipeline recipe.txt
    cat recipe.txt | recipe-pipeline -

    # Saved web page, photo, or live URL
    recipe-pipeline page.html
    recipe-pipeline card.jpg
    recipe-pipeline https://example.com/best-cookies

    # A cookbook spread holding several recipes
    recipe-pipeline --multi spread.png

Options:
    --html                  Treat the source as HTML
    --image                 Treat the source as an image
    --multi                 Split the input into several recipes
    --threshold FLOAT       Classifier confidence threshold (default: 0.65)
    --parse-ingredients     Output finished recipes with parsed ingredients
    --log-file PATH         Write logs to file
    --verbose, -v           Increase logging verbosity
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from recipe_pipeline.classifier import DEFAULT_CONFIDENCE_THRESHOLD, RecipeTextClassifier, RuleBasedLineModel
from recipe_pipeline.heuristics import extract_lines_from_html
from recipe_pipeline.ingredient_parser import parse_ingredient, parse_ingredient_with_comment
from recipe_pipeline.processor import RecipeProcessor
from recipe_pipeline.recipe import RecipeDraft
from recipe_pipeline.utils import setup_logging, split_lines

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {'.png', '.jpg', '.jpeg', '.tif', '.tiff', '.bmp', '.gif', '.webp'}
HTML_SUFFIXES = {'.html', '.htm'}


def is_url(source: str) -> bool:
    return source.startswith(('http://', 'https://'))


def detect_source_kind(args: argparse.Namespace) -> str:
    """Decide how to read the source: 'url', 'image', 'html' or 'text'."""
    if is_url(args.source):
        return 'url'
    if args.image:
        return 'image'
    if args.html:
        return 'html'
    if args.source != '-':
        suffix = Path(args.source).suffix.lower()
        if suffix in IMAGE_SUFFIXES:
            return 'image'
        if suffix in HTML_SUFFIXES:
            return 'html'
    return 'text'


def read_source_text(source: str) -> str:
    if source == '-':
        return sys.stdin.read()
    return Path(source).read_text(encoding='utf-8')


def draft_to_output(draft: RecipeDraft, parse_ingredients: bool, from_web: bool) -> dict:
    """JSON-ready representation of a draft, or of its finished recipe."""
    if not parse_ingredients:
        return draft.to_dict()
    parser = parse_ingredient_with_comment if from_web else parse_ingredient
    return asdict(draft.to_recipe(ingredient_parser=parser))


def run(args: argparse.Namespace) -> tuple[list[RecipeDraft], Optional[str]]:
    """
    Process the source described by args.

    Returns:
        Tuple of (drafts, error message or None)
    """
    classifier = RecipeTextClassifier(RuleBasedLineModel(), confidence_threshold=args.threshold)
    processor = RecipeProcessor(classifier=classifier)
    kind = detect_source_kind(args)
    logger.info(f"Processing {args.source} as {kind}")

    if kind == 'url':
        draft = processor.process_url(args.source)
        return ([draft], None) if draft else ([], processor.state.error_message)

    if args.multi:
        if kind == 'image':
            lines = processor.recognizer.recognize_text(args.source)
        elif kind == 'html':
            lines = extract_lines_from_html(read_source_text(args.source))
        else:
            lines = split_lines(read_source_text(args.source))

        drafts = processor.process_multi(lines)
        if not drafts:
            return [], processor.state.error_message or "No recipes found"
        return drafts, None

    if kind == 'image':
        draft = processor.process_image(args.source)
    elif kind == 'html':
        draft = processor.process_html(read_source_text(args.source))
    else:
        draft = processor.process_text(read_source_text(args.source))

    return ([draft], None) if draft else ([], processor.state.error_message)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Extract a structured recipe from text, HTML, a photo or a web page.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  recipe-pipeline recipe.txt
  recipe-pipeline --parse-ingredients https://example.com/best-cookies
  recipe-pipeline --multi -v spread.png
        """
    )

    parser.add_argument(
        'source',
        help="Text/HTML file, image, http(s) URL, or '-' for stdin"
    )

    parser.add_argument(
        '--html',
        action='store_true',
        help='Treat the source as HTML'
    )

    parser.add_argument(
        '--image',
        action='store_true',
        help='Treat the source as an image and run OCR'
    )

    parser.add_argument(
        '--multi',
        action='store_true',
        help='Split the input into several recipes'
    )

    parser.add_argument(
        '--threshold',
        type=float,
        default=DEFAULT_CONFIDENCE_THRESHOLD,
        metavar='FLOAT',
        help=f'Classifier confidence threshold (default: {DEFAULT_CONFIDENCE_THRESHOLD})'
    )

    parser.add_argument(
        '--parse-ingredients',
        dest='parse_ingredients',
        action='store_true',
        help='Output finished recipes with parsed ingredients and timings'
    )

    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Write logs to file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Increase logging verbosity (DEBUG level)'
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)
    setup_logging(log_file=args.log_file, verbose=args.verbose)

    try:
        drafts, error = run(args)
    except OSError as e:
        logger.error(f"Cannot read {args.source}: {e}")
        return 1

    if error:
        print(f"Error: {error}", file=sys.stderr)
        return 1

    from_web = is_url(args.source)
    output = [draft_to_output(draft, args.parse_ingredients, from_web) for draft in drafts]
    print(json.dumps(output if args.multi else output[0], indent=2, ensure_ascii=False))
    return 0


if __name__ == '__main__':
    sys.exit(main())
