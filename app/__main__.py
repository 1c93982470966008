import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from app.client.bootstrap import build_similarity_service
from app.client.languagetool import LanguageToolClient
from app.core.config import settings
from app.core.exceptions import EvaluationException
from app.models.request import AnalyseTextRequest
from app.services.text_analyzer import TextAnalyzer
from app.utils.rubric_loader import RubricLoader


async def _amain(req: AnalyseTextRequest, rubric_name: Optional[str]) -> int:
    loader = RubricLoader(rubric_file=settings.RUBRIC_FILE or None, default_name=settings.RUBRIC_NAME)
    analyzer = TextAnalyzer(
        languagetool=LanguageToolClient(),
        similarity=build_similarity_service(settings),
        rubric=loader.get(rubric_name),
    )
    result = await analyzer.analyse(req)
    print(json.dumps(result.to_wire(), ensure_ascii=False, indent=2))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Analyse a free-text answer and print the rubric score as JSON")
    group = parser.add_mutually_exclusive_group(required=False)
    group.add_argument("--text", help="Answer text to analyse")
    group.add_argument("--file", help="Path to a file containing the answer text")
    parser.add_argument("--expected", default="", help="Expected (reference) answer")
    parser.add_argument("--lang", default="", help="Expected language tag, e.g. fr or en")
    parser.add_argument("--keywords", nargs="*", default=[], help="Keywords for the structure heuristics")
    parser.add_argument("--eval-config", help="JSON file with a content evaluation config")
    parser.add_argument("--rubric", default=None, help="Rubric name from the rubric file")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if args.text:
        text = args.text
    elif args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            print(f"Failed to read file: {e}", file=sys.stderr)
            return 2
    else:
        text = sys.stdin.read()

    if not text.strip():
        print("No text provided. Use --text, --file, or pipe input.", file=sys.stderr)
        return 2

    eval_config = None
    if args.eval_config:
        try:
            with open(args.eval_config, "r", encoding="utf-8") as f:
                eval_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Failed to read eval config: {e}", file=sys.stderr)
            return 2

    try:
        req = AnalyseTextRequest(
            text=text,
            expected_answer=args.expected,
            expected_lang=args.lang,
            keywords=args.keywords,
            eval_config=eval_config,
            rubric=args.rubric,
        )
    except ValidationError as e:
        print(f"Invalid request: {e}", file=sys.stderr)
        return 2

    try:
        return asyncio.run(_amain(req, args.rubric))
    except EvaluationException as e:
        print(f"{e.__class__.__name__}: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
