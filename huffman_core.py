# filename: huffman_core.py

import heapq
import itertools
from collections import Counter

SPACE = " "
# Stand-in for SPACE in the frequency and code tables.
SPACE_PLACEHOLDER = "␣"
SINGLE_SYMBOL_CODE = "0"


class HuffmanError(Exception):
    """Base class for codec contract violations."""


class EmptyAlphabetError(HuffmanError, ValueError):
    def __init__(self, message="cannot build a Huffman tree from an empty frequency table"):
        super().__init__(message)


class UnknownSymbolError(HuffmanError, LookupError):
    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"symbol {symbol!r} has no entry in the code table")


class TruncatedStreamError(HuffmanError, ValueError):
    def __init__(self, position):
        self.position = position
        super().__init__(f"bit stream ended mid-codeword after {position} bits")


class InvalidBitError(HuffmanError, ValueError):
    def __init__(self, bit, position):
        self.bit = bit
        self.position = position
        super().__init__(f"invalid bit {bit!r} at position {position}")


class ReservedSymbolError(HuffmanError, ValueError):
    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"input contains the reserved placeholder symbol {symbol!r}")


class HuffmanNode:
    """A leaf (symbol set) or an internal node owning exactly two children.

    Nodes are never modified after construction, so one tree can be read
    by any number of decoders at once.
    """

    __slots__ = ("symbol", "freq", "left", "right")

    def __init__(self, symbol, freq, left=None, right=None):
        if (left is None) != (right is None):
            raise ValueError("an internal node needs both children")
        if symbol is not None and left is not None:
            raise ValueError("a leaf cannot have children")
        if symbol is None and left is None:
            raise ValueError("a leaf needs a symbol")
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right

    @property
    def is_leaf(self):
        return self.left is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode({self.symbol!r}, {self.freq})"
        return f"HuffmanNode(None, {self.freq}, {self.left!r}, {self.right!r})"


class HuffmanLogic:
    def __init__(self, placeholder=SPACE_PLACEHOLDER):
        if len(placeholder) != 1 or placeholder == SPACE:
            raise ValueError(f"placeholder must be a single non-space character, got {placeholder!r}")
        self.placeholder = placeholder

    def substitute(self, ch):
        return self.placeholder if ch == SPACE else ch

    def restore(self, symbol):
        return SPACE if symbol == self.placeholder else symbol

    def count_frequencies(self, text):
        # Counter keeps first-appearance order, which fixes the tie-break below
        return dict(Counter(self.substitute(ch) for ch in text))

    def build_tree(self, frequencies):
        if not frequencies:
            raise EmptyAlphabetError()

        # (freq, sequence, node): equal frequencies pop in insertion order
        sequence = itertools.count()
        priority_queue = [(freq, next(sequence), HuffmanNode(symbol, freq))
                          for symbol, freq in frequencies.items()]
        heapq.heapify(priority_queue)

        while len(priority_queue) > 1:
            left_freq, _, left = heapq.heappop(priority_queue)
            right_freq, _, right = heapq.heappop(priority_queue)
            merged = HuffmanNode(None, left_freq + right_freq, left, right)
            heapq.heappush(priority_queue, (merged.freq, next(sequence), merged))

        return priority_queue[0][2]

    def generate_codes(self, root):
        if root.is_leaf:
            return {root.symbol: SINGLE_SYMBOL_CODE}

        codes = {}

        def walk(node, current_code):
            if node.is_leaf:
                codes[node.symbol] = current_code
                return
            walk(node.left, current_code + "0")
            walk(node.right, current_code + "1")

        walk(root, "")
        return codes

    def encode(self, text, codes):
        out = []
        for ch in text:
            symbol = self.substitute(ch)
            try:
                out.append(codes[symbol])
            except KeyError:
                raise UnknownSymbolError(symbol) from None
        return "".join(out)

    def decode(self, bits, root):
        """Walk ``root`` bit by bit, emitting a symbol at every leaf.

        Raises TruncatedStreamError if the bits run out anywhere but the
        root, and InvalidBitError for characters other than '0' and '1'.
        """
        decoded = []
        if root.is_leaf:
            symbol = self.restore(root.symbol)
            for position, bit in enumerate(bits):
                if bit not in "01":
                    raise InvalidBitError(bit, position)
                decoded.append(symbol)
            return "".join(decoded)

        current = root
        for position, bit in enumerate(bits):
            if bit == "0":
                current = current.left
            elif bit == "1":
                current = current.right
            else:
                raise InvalidBitError(bit, position)
            if current.is_leaf:
                decoded.append(self.restore(current.symbol))
                current = root

        if current is not root:
            raise TruncatedStreamError(len(bits))
        return "".join(decoded)
