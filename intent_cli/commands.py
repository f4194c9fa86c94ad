"""
Inspect, hash and split packed intents from the command line.

Usage:
    intent-cli inspect <hex>
    intent-cli hash <hex> --chain-id <id>
    intent-cli split <hex>
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from userintent_sdk.codec import decode_intent, split_intents
from userintent_sdk.exceptions import IntentError
from userintent_sdk.standards.relayed_execution import (
    RelayedExecutionStandard,
    decode_header,
    decode_instructions,
)
from userintent_sdk.utils import hex_to_bytes

logger = logging.getLogger(__name__)


def describe_intent(buffer: bytes) -> Dict[str, Any]:
    """
    Describe an intent as a JSON-serializable dict

    The header and instructions are additionally decoded with the relayed
    execution layout when they fit it.
    """
    intent = decode_intent(buffer)
    result = intent.model_dump(mode="json")
    result["total_length"] = intent.total_length
    try:
        result["relayed_execution"] = {
            "header": decode_header(intent.header).model_dump(mode="json"),
            "instructions": decode_instructions(intent.instructions).model_dump(mode="json"),
        }
    except IntentError as e:
        logger.debug(f"Intent does not use the relayed execution layout: {e}")
    return result


def intent_hash_hex(buffer: bytes, chain_id: int) -> str:
    standard = RelayedExecutionStandard(decode_intent(buffer).standard)
    return "0x" + standard.intent_hash(buffer, chain_id).hex()


def _read_intent(value: str) -> bytes:
    if value == "-":
        value = sys.stdin.read().strip()
    try:
        return hex_to_bytes(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Intent must be hex encoded: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="intent-cli", description="Inspect packed user intents")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="Decode an intent to JSON")
    inspect_parser.add_argument("intent", type=_read_intent, help="Hex encoded intent, or - for stdin")

    hash_parser = subparsers.add_parser("hash", help="Print the replay-protection hash of an intent")
    hash_parser.add_argument("intent", type=_read_intent, help="Hex encoded intent, or - for stdin")
    hash_parser.add_argument("--chain-id", type=int, required=True, help="Chain id the intent is bound to")

    split_parser = subparsers.add_parser("split", help="Split concatenated intents")
    split_parser.add_argument("intent", type=_read_intent, help="Hex encoded buffer, or - for stdin")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.command == "inspect":
            print(json.dumps(describe_intent(args.intent), indent=2))
        elif args.command == "hash":
            print(intent_hash_hex(args.intent, args.chain_id))
        elif args.command == "split":
            for part in split_intents(args.intent):
                print("0x" + part.hex())
    except IntentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
