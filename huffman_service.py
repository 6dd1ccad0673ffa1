
# // filename: huffman_service.py

import argparse
import json
import sys
from dataclasses import asdict, dataclass, field
from typing import Dict, Optional, Tuple

from huffman_core import (
    SPACE_PLACEHOLDER,
    EmptyAlphabetError,
    HuffmanError,
    HuffmanLogic,
    HuffmanNode,
    ReservedSymbolError,
)

BITS_PER_SYMBOL = 8


def compression_ratio(original_symbols: int, encoded_bits: int) -> float:
    return original_symbols * BITS_PER_SYMBOL / encoded_bits if encoded_bits > 0 else 1.0


@dataclass
class CodecSession:
    text: str
    frequencies: Dict[str, int] = field(default_factory=dict)
    tree: Optional[HuffmanNode] = None
    codes: Dict[str, str] = field(default_factory=dict)
    encoded: str = ""


@dataclass
class CodecReport:
    text: str
    frequencies: Dict[str, int]
    codes: Dict[str, str]
    encoded: str
    decoded: str
    verified: bool
    original_bits: int
    encoded_bits: int
    compression_ratio: float

    def to_dict(self) -> dict:
        return asdict(self)


class HuffmanService:
    def __init__(self, placeholder=SPACE_PLACEHOLDER):
        self.logic = HuffmanLogic(placeholder)

    def compress(self, text: str) -> CodecSession:
        if self.logic.placeholder in text:
            raise ReservedSymbolError(self.logic.placeholder)
        if not text:
            return CodecSession(text)

        frequencies = self.logic.count_frequencies(text)
        tree = self.logic.build_tree(frequencies)
        codes = self.logic.generate_codes(tree)
        encoded = self.logic.encode(text, codes)
        return CodecSession(text, frequencies, tree, codes, encoded)

    def decompress(self, encoded: str, tree: Optional[HuffmanNode]) -> str:
        if tree is None:
            if encoded:
                raise EmptyAlphabetError("cannot decode a non-empty stream without a tree")
            return ""
        return self.logic.decode(encoded, tree)

    def run(self, text: str) -> CodecReport:
        session = self.compress(text)
        decoded = self.decompress(session.encoded, session.tree)
        return CodecReport(
            text=text,
            frequencies=session.frequencies,
            codes=session.codes,
            encoded=session.encoded,
            decoded=decoded,
            verified=decoded == text,
            original_bits=len(text) * BITS_PER_SYMBOL,
            encoded_bits=len(session.encoded),
            compression_ratio=compression_ratio(len(text), len(session.encoded)),
        )

    def pack(self, encoded: str) -> Tuple[bytes, int]:
        """Pack a '0'/'1' stream into bytes, zero-padding the last byte.

        Returns the bytes and the number of padding bits (0-7).
        """
        padding = -len(encoded) % 8
        padded = encoded + "0" * padding

        b = bytearray()
        for i in range(0, len(padded), 8):
            b.append(int(padded[i:i + 8], 2))
        return bytes(b), padding

    def unpack(self, data: bytes, padding: int) -> str:
        if not 0 <= padding < 8:
            raise ValueError(f"padding must be between 0 and 7, got {padding}")
        if not data:
            if padding:
                raise ValueError("padding given for an empty byte string")
            return ""
        bits = "".join(f"{byte:08b}" for byte in data)
        return bits[:len(bits) - padding]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Huffman-code a text string and verify the round trip")
    parser.add_argument("text", nargs="?", default=None, help="Text to encode (default: read stdin)")
    parser.add_argument(
        "--placeholder",
        default=SPACE_PLACEHOLDER,
        help=f"Symbol standing in for the space character (default: {SPACE_PLACEHOLDER})",
    )
    parser.add_argument("--packed", action="store_true", help="Include the byte-packed stream as hex")
    args = parser.parse_args(argv)

    text = args.text
    if text is None:
        try:
            text = sys.stdin.read()
        except UnicodeDecodeError as e:
            print(f"error: stdin is not valid text: {e}", file=sys.stderr)
            return 2
        # drop one trailing line ending, LF or CRLF
        if text.endswith("\r\n"):
            text = text[:-2]
        elif text.endswith("\n"):
            text = text[:-1]

    try:
        service = HuffmanService(args.placeholder)
        report = service.run(text)
    except (HuffmanError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    output = report.to_dict()
    if args.packed:
        data, padding = service.pack(report.encoded)
        output["packed"] = {"hex": data.hex(), "padding": padding}

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0 if report.verified else 1


if __name__ == "__main__":
    sys.exit(main())
