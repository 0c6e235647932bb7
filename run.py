#!/usr/bin/env python3
"""
AAC board command engine
Entry point for resolving a single utterance against a board.

Usage:
    python run.py "delete the second button in the last row" --board board.json
    python run.py "make a button for I'm thirsty" --llm off
    python run.py "what can you do?" --model llama3.2:3b --log-level DEBUG
"""
import sys
import json
import argparse
from aacboard.core.logger import init_logger, get_logger
from aacboard.core.config import Config


def parse_args():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="AAC board command engine - resolve one utterance to a board command",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py "delete the water button" --board board.json
  python run.py "switch to Spanish" --llm off
  python run.py "remove the one next to help" --model llama3.1:latest

Board file (JSON):
  {"buttons": [{"id": "b1", "label": "Water", "text": "I want water",
                "row": 1, "col": 1, "index": 1}],
   "gridInfo": {"rows": 1, "columns": 1},
   "conversation": [{"role": "assistant", "content": "..."}]}
        """
    )

    parser.add_argument(
        "utterance",
        type=str,
        help="What the user said"
    )

    parser.add_argument(
        "--board",
        type=str,
        default=None,
        help="Path to a JSON board snapshot (buttons, gridInfo, conversation)"
    )

    parser.add_argument(
        "--llm",
        type=str,
        default=None,
        choices=["ollama", "off"],
        help=f"LLM backend for the arbiter and conversation (default: {Config.LLM_MODE})"
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"Ollama model name (default: {Config.OLLAMA_MODEL})"
    )

    parser.add_argument(
        "--ollama-url",
        type=str,
        default=None,
        help=f"Ollama API URL (default: {Config.OLLAMA_BASE_URL})"
    )

    parser.add_argument(
        "--llm-timeout",
        type=int,
        default=None,
        help=f"LLM request timeout in seconds (default: {Config.LLM_TIMEOUT})"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=Config.LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        default=Config.QUIET_MODE,
        help="Hide per-request routing details in the log"
    )

    return parser.parse_args()


def load_board(path):
    """Read a board snapshot JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def main():
    """Main entry point"""
    args = parse_args()

    init_logger(args.log_level, quiet_mode=args.quiet)
    logger = get_logger()

    board = {}
    if args.board:
        try:
            board = load_board(args.board)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read board file {args.board}: {e}")
            return 1
        if not isinstance(board, dict):
            logger.error(f"Board file {args.board} must contain a JSON object")
            return 1

    # Import engine after logger is initialized
    from aacboard.brain.llm_engine import LLMEngine
    from aacboard.core.engine import CommandEngine

    # Flags left unset fall back to Config / environment
    llm = LLMEngine.from_config(
        base_url=args.ollama_url,
        model=args.model,
        timeout=args.llm_timeout,
        llm_mode=args.llm
    )
    engine = CommandEngine(llm=llm)

    try:
        result = engine.handle_request(args.utterance, board)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
