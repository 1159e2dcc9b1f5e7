#!/usr/bin/env python3
"""BuildFlow pipeline CLI - inspect classification, prompts and enhancements.

Usage:
    python main.py classify --message "make the header blue" --project site-1
    python main.py prompt --message "add a blog page" --project site-1 --show-user-message
    python main.py enhance --html index.html --css style.css
    python main.py classify --message "..." --project site-1 --store projects.json
"""

import argparse
import asyncio
import logging
import sys

from agents.code_enhancer import enhance_generated_code
from core.pipeline import GenerationPipeline
from core.state import EnhancementOptions
from core.store import JsonProjectStore


def _read(path):
    if not path:
        return ""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _print_context(context):
    print(f"Iteration:  {'yes' if context.is_iteration else 'no'}")
    print(f"Scope:      {context.change_scope}")
    print(f"Files:      {len(context.existing_files)}")
    for f in context.existing_files:
        print(f"  {f.path} ({f.type}, {len(f.content)} chars)")
    if context.previous_prompts:
        print("History:")
        for p in context.previous_prompts:
            print(f"  - {p}")


def cmd_classify(args):
    pipeline = GenerationPipeline(JsonProjectStore(args.store))
    context = asyncio.run(pipeline.classify(args.message, args.project))
    _print_context(context)


def cmd_prompt(args):
    pipeline = GenerationPipeline(JsonProjectStore(args.store))
    payload = asyncio.run(pipeline.prepare(args.message, args.project))
    _print_context(payload.context)
    print(f"\n--- System prompt ({len(payload.system_prompt)} chars) ---")
    print(payload.system_prompt)
    if args.show_user_message:
        print(f"\n--- User message ({len(payload.user_message)} chars) ---")
        print(payload.user_message)


def cmd_enhance(args):
    options = EnhancementOptions(add_css_variables=args.css_variables)
    result = enhance_generated_code(_read(args.html), _read(args.css), _read(args.js), options)
    if not result.enhancements:
        print("No enhancements needed.")
        return
    print("Applied:")
    for e in result.enhancements:
        print(f"  - {e}")
    if args.write:
        for path, content in ((args.html, result.html), (args.css, result.css), (args.js, result.js)):
            if path:
                with open(path, "w", encoding="utf-8") as f:
                    f.write(content)
        print("Files updated in place.")


def main():
    parser = argparse.ArgumentParser(
        prog="buildflow",
        description="Iteration-aware prompt pipeline for the BuildFlow website builder",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    for name, help_text in (("classify", "Show the iteration verdict for a message"),
                            ("prompt", "Show the composed generation prompt")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--message", required=True, help="Chat message")
        sub.add_argument("--project", help="Project id in the store")
        sub.add_argument("--store", help="Path to the JSON project store")
        if name == "prompt":
            sub.add_argument("--show-user-message", action="store_true",
                             help="Also print the user message with embedded files")

    enhance_parser = subparsers.add_parser("enhance", help="Apply code enhancements to files")
    enhance_parser.add_argument("--html", help="HTML file")
    enhance_parser.add_argument("--css", help="CSS file")
    enhance_parser.add_argument("--js", help="JavaScript file")
    enhance_parser.add_argument("--css-variables", action="store_true",
                                help="Extract repeated colours into CSS variables")
    enhance_parser.add_argument("--write", action="store_true", help="Write results back")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "classify":
        cmd_classify(args)
    elif args.command == "prompt":
        cmd_prompt(args)
    elif args.command == "enhance":
        cmd_enhance(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
