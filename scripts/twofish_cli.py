"""Command-line front end for the Twofish plug-in.

Usage:
    python scripts/twofish_cli.py encrypt "attack at dawn" --key "0123456789abcdef"
    python scripts/twofish_cli.py decrypt <base64> --key "0123456789abcdef" --iv <hex>
    python scripts/twofish_cli.py encrypt 00112233 --input-encoding hex --mode ECB --key-encoding hex --key 00...

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from cipherforge.cipher.errors import CipherError
from cipherforge.cipher.registry import AlgorithmRegistry
from cipherforge.config import load_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Twofish (ECB/CBC, zero padding) encrypt/decrypt",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "The IV is never stored in the ciphertext. For CBC, keep the IV printed\n"
            "on encryption and pass it back with --iv when decrypting.\n"
        ),
    )
    parser.add_argument("direction", choices=["encrypt", "decrypt"])
    parser.add_argument("data", help="Input text (use '-' to read stdin)")
    parser.add_argument("--key", required=True, help="Key material")
    parser.add_argument("--key-encoding", default="utf8", help="utf8 | hex | base64 (default: utf8)")
    parser.add_argument("--mode", default=None, help="CBC | ECB (default: from settings)")
    parser.add_argument("--iv", default=None, help="16-byte IV (CBC only)")
    parser.add_argument("--iv-encoding", default="hex", help="hex | base64 (default: hex)")
    parser.add_argument("--input-encoding", default=None, help="Input encoding (decrypt also accepts 'auto')")
    parser.add_argument("--output-encoding", default=None, help="Output encoding")
    parser.add_argument(
        "--no-trim", action="store_true",
        help="Keep trailing zero bytes after decryption",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON object instead of plain text")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def _options(args: argparse.Namespace) -> Dict[str, Any]:
    opts: Dict[str, Any] = {
        "key": args.key,
        "key_encoding": args.key_encoding,
        "iv_encoding": args.iv_encoding,
    }
    if args.mode:
        opts["mode"] = args.mode
    if args.iv:
        opts["iv"] = args.iv
    if args.input_encoding:
        opts["input_encoding"] = args.input_encoding
    if args.output_encoding:
        opts["output_encoding"] = args.output_encoding
    if args.direction == "decrypt":
        opts["trim_trailing_zeros_on_decrypt"] = not args.no_trim
        opts["return_meta"] = True
    return opts


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    data = sys.stdin.read() if args.data == "-" else args.data
    cipher = AlgorithmRegistry().create("twofish")

    try:
        if args.direction == "encrypt":
            result = cipher.encrypt(data, **_options(args))
            payload = result.to_dict()
            text = result.ciphertext
        else:
            result = cipher.decrypt(data, **_options(args))
            payload = result.to_dict()
            text = result.plaintext
    except CipherError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if isinstance(text, bytes):
        text = text.hex()
        payload = {**payload, "ciphertext" if args.direction == "encrypt" else "plaintext": text}

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print(text)
        if args.direction == "encrypt" and payload.get("iv"):
            print(f"iv: {payload['iv']}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
