import os
import re
import sys
import argparse
import shlex

from bs4 import BeautifulSoup

import config
import packager
from extractor import QuestionExtractor
from util.equation_blob import converter_from_settings


def plain_preview(html: str, width: int = 80) -> str:
    text = BeautifulSoup(html or "", "html.parser").get_text(" ")
    text = re.sub(r'\s+', ' ', text).strip()
    if not text:
        return "No stem"
    return text if len(text) <= width else text[:width - 3] + "..."


def print_summary(questions, output_path):
    print(f"Successfully extracted {len(questions)} questions to {output_path}")
    print("\nQuestion breakdown:")
    for i, q in enumerate(questions, start=1):
        print(f"  {i}. {plain_preview(q.stem)}")
        print(f"     Options: {len(q.options)}, Answer: {q.key or 'N/A'}, "
              f"Hint: {'Yes' if q.hint else 'No'}, Math: {'Yes' if q.has_math else 'No'}, "
              f"Images: {len(q.images)}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Extract exam questions from a DOCX file into JSON.")
    parser.add_argument("input", help="Path to the .docx file")
    parser.add_argument("output", help="Output .json file (or .zip with --zip)")
    parser.add_argument("--zip", action="store_true", help="Write a zip with one folder per question")
    parser.add_argument("--equation-command", default=None,
                        help="External MathType-to-MathML command; the blob path is appended")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    config.configure_logging("DEBUG" if args.verbose else None)

    if not os.path.exists(args.input):
        print(f"Error: Input file '{args.input}' does not exist.")
        return 1

    command = shlex.split(args.equation_command) if args.equation_command else None
    extractor = QuestionExtractor(converter_from_settings(command))
    questions = extractor.extract(args.input)

    if args.zip:
        packager.write_zip(questions, args.output)
    else:
        packager.write_json(questions, args.output)

    print_summary(questions, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
