import heapq
from collections import Counter
from typing import Optional, Dict, List

from huffarch.errors import FormatError

DOT_MAX_DEPTH = 3


# ---------------------------------
# Basic tree node
# ---------------------------------
class Node:
    def __init__(self, sym: Optional[int], freq: int):
        # sym: None for internal nodes, 0..255 for leaf nodes
        self.sym = sym
        self.freq = freq
        self.left: Optional['Node'] = None
        self.right: Optional['Node'] = None

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.sym is not None:
            return f"Node(sym={self.sym}, freq={self.freq})"
        return f"Node(internal, freq={self.freq})"


# ------------------------------------
# 1) Count bytes (freq)
# ------------------------------------
def build_freq_map(data: bytes) -> Dict[int, int]:
    # bytes iterate as ints 0..255, so symbols are unsigned everywhere
    return dict(Counter(data))


# -------------------------------------
# 2) Make heap and build Huffman tree
# -------------------------------------
def heap_from_freq(freq_map: Dict[int, int]) -> list:
    """
    Heap entries are (weight, order, node). Leaves get their order from the
    ascending symbol value, so equal weights always pop in the same sequence.
    """
    h = []
    for order, sym in enumerate(sorted(freq_map)):
        heapq.heappush(h, (freq_map[sym], order, Node(sym, freq_map[sym])))
    return h


def build_tree(h: list) -> Optional[Node]:
    # empty file -> no tree
    if not h:
        return None
    order = len(h)
    while len(h) > 1:
        wa, _, a = heapq.heappop(h)
        wb, _, b = heapq.heappop(h)
        p = Node(None, wa + wb)
        p.left = a
        p.right = b
        heapq.heappush(h, (p.freq, order, p))
        order += 1
    # a single distinct symbol leaves one bare leaf as the root
    return heapq.heappop(h)[2]


# ---------------------------
# 3) Walk tree -> code map
# ---------------------------
def make_codes(root: Optional[Node]) -> Dict[int, str]:
    codes: Dict[int, str] = {}
    if root is None:
        return codes
    if root.is_leaf():
        # lone leaf has no path; give it one bit so the payload isn't empty
        codes[root.sym] = "0"
        return codes

    path: List[str] = []

    def walk(node: Node):
        if node.is_leaf():
            codes[node.sym] = "".join(path)
            return
        path.append("0")
        walk(node.left)
        path.pop()
        path.append("1")
        walk(node.right)
        path.pop()

    walk(root)
    return codes


def rebuild_tree(codes: Dict[int, str]) -> Optional[Node]:
    """
    Rebuild a decoding tree from a symbol -> code map read out of an archive.

    Internal nodes are created on demand while walking each code from the root.
    A code that runs through an existing leaf, or ends where something already
    sits, means two codes collide and the table cannot be trusted.
    """
    if not codes:
        return None
    root = Node(None, 0)
    for sym, code in codes.items():
        if not code:
            raise FormatError(f"Empty code for symbol {sym}")
        node = root
        for bit in code[:-1]:
            if node.sym is not None:
                raise FormatError(f"Code for symbol {sym} runs through a leaf")
            node = _child(node, bit, create=True)
        if node.sym is not None:
            raise FormatError(f"Code for symbol {sym} runs through a leaf")
        if _child(node, code[-1], create=False) is not None:
            raise FormatError(f"Code for symbol {sym} collides with another code")
        leaf = Node(sym, 0)
        if code[-1] == "0":
            node.left = leaf
        else:
            node.right = leaf
    return root


def _child(node: Node, bit: str, create: bool) -> Optional[Node]:
    if bit == "0":
        if node.left is None and create:
            node.left = Node(None, 0)
        return node.left
    if bit == "1":
        if node.right is None and create:
            node.right = Node(None, 0)
        return node.right
    raise FormatError(f"Bad code bit {bit!r}")


def weighted_path_length(freq_map: Dict[int, int], codes: Dict[int, str]) -> int:
    return sum(freq * len(codes[sym]) for sym, freq in freq_map.items())


# --------------------------------
# Convert Tree to Graphviz format
# --------------------------------
def tree_to_dot(node: Optional[Node], max_depth: int = DOT_MAX_DEPTH) -> str:
    lines = ["digraph G {", "node [shape=circle, style=filled, color=lightblue];"]
    ids: Dict[int, str] = {}

    def label(n: Node) -> str:
        key = id(n)
        if key not in ids:
            ids[key] = f"n{len(ids)}"
            sym = n.sym if n.sym is not None else ""
            lines.append(f'{ids[key]} [label="{n.freq}\\n{sym}"];')
        return ids[key]

    def traverse(n: Optional[Node], depth: int = 0):
        if n is None or depth > max_depth:
            return
        src = label(n)
        for child in (n.left, n.right):
            if child is not None and depth < max_depth:
                lines.append(f"{src} -> {label(child)};")
                traverse(child, depth + 1)

    traverse(node)
    lines.append("}")
    return "\n".join(lines)
