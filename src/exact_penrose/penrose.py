# Penrose half tiles in Q(zeta), their substitution tree, and the lazy
# refinement of that tree against a moving viewport.
#
# References:
# - https://preshing.com/20110831/penrose-tiling-explained/
import logging
from dataclasses import dataclass
from enum import Enum

from exact_penrose.bbox import BBox, CachedBBox, Direction, EdgeDirections, Relation, Triangle, classify
from exact_penrose.cyclotomic import QZeta5, ZERO, ZETA2, ZETA3
from exact_penrose.errors import UnreachableState

logger = logging.getLogger(__name__)


class Parity(Enum):
    P2 = 2
    P3 = 3

    def flipped(self) -> "Parity":
        return Parity.P3 if self is Parity.P2 else Parity.P2


class Shape(Enum):
    # X: flat triangle, Y: tall triangle; a is the apex, bc the base
    X = "X"
    Y = "Y"


class Orientation(Enum):
    L = "L"
    R = "R"

    def flipped(self) -> "Orientation":
        return Orientation.R if self is Orientation.L else Orientation.L

    @property
    def sign(self) -> int:
        return 1 if self is Orientation.L else -1


@dataclass(frozen=True)
class TileType:
    parity: Parity
    shape: Shape
    orientation: Orientation

    def __str__(self) -> str:
        return f"P{self.parity.value}{self.shape.value}{self.orientation.value}"

    @staticmethod
    def parse(name: str) -> "TileType":
        if len(name) != 4 or name[0] != "P":
            raise ValueError(f"invalid tile type {name!r}")
        return TileType(Parity(int(name[1])), Shape(name[2]), Orientation(name[3]))


ALL_TILE_TYPES = tuple(TileType(p, s, o) for p in Parity for s in Shape for o in Orientation)

# Eight substitution steps lead from a P3XL tile to a smaller P3XL tile with
# the same orientation; this is the route the spine follows.
PATHS = tuple(TileType.parse(name) for name in "P2YR P3YR P2YR P3XR P2YL P3YL P2YL P3XL".split())


class State(Enum):
    EMPTY = 0
    PARTIAL = 1
    FULL = 2


def _cut(ori: Orientation, a: QZeta5, b: QZeta5) -> QZeta5:
    # b + (b - a) ζ^2, or ζ^3 for the mirrored tile
    return b + (b - a) * (ZETA2 if ori is Orientation.L else ZETA3)


class HalfTile:
    def __init__(self, type: TileType, tri: Triangle):
        self.state = State.EMPTY
        self.type = type
        self.tri = tri

    def __repr__(self) -> str:
        return f"HalfTile({self.type}, {self.state.name}, {self.tri})"

    @staticmethod
    def make(type: TileType, bc: Direction, a: QZeta5, b: QZeta5, c: QZeta5) -> "HalfTile":
        """Build a tile, deriving the directions of ca and ab from the type."""
        n = 2 if type.shape is Shape.X else -1
        n *= type.orientation.sign
        dirs = EdgeDirections(bc, bc.rotate(n), bc.rotate(-n))
        return HalfTile(type, Triangle(a, b, c, dirs))

    def subdivision(self) -> list["HalfTile"]:
        p, s, o = self.type.parity, self.type.shape, self.type.orientation
        a, b, c = self.tri.vs
        bc = self.tri.dirs.bc
        if p is Parity.P3 and s is Shape.X:
            d = _cut(o, a, b)
            return [
                HalfTile.make(TileType(Parity.P2, Shape.X, o), bc.rotate(2 * o.sign), d, c, a),
                HalfTile.make(TileType(Parity.P2, Shape.Y, o.flipped()), bc.rotate(-o.sign), b, a, d),
            ]
        elif p is Parity.P2 and s is Shape.Y:
            d = _cut(o, b, c)
            return [
                HalfTile.make(TileType(Parity.P3, Shape.Y, o), bc.rotate(o.sign), c, d, b),
                HalfTile.make(TileType(Parity.P3, Shape.X, o), bc.rotate(-o.sign), d, c, a),
            ]
        elif p in (Parity.P2, Parity.P3):
            # bookkeeping step: same triangle, other generation
            return [HalfTile(TileType(p.flipped(), s, o), self.tri)]
        raise UnreachableState(f"no substitution rule for {self.type}")


# spine_tile_{L+1} = spine_tile_L * SPINE_SCALE + SPINE_OFFSET
# SPINE_SCALE = 2 - 3ζ^2 - 3ζ^3 = φ^4 ≈ 6.854 undoes the eight steps of PATHS,
# SPINE_OFFSET = ζ - ζ^4 ≈ 1.902 i keeps their fixed point in place.
SPINE_TYPE = TileType.parse("P3XL")
SPINE_SCALE = QZeta5(2, 0, -3, -3)
SPINE_OFFSET = QZeta5.normalize(0, 1, 0, 0, -1)

_spine: list[Triangle] = []


def spine_triangle(level: int) -> Triangle:
    """Triangle of the P3XL tile that is `level` inflations above the base."""
    if not _spine:
        base = HalfTile.make(SPINE_TYPE, Direction.ZETA0, ZERO, ZETA3, -ZETA2)
        _spine.append(base.tri)
    while len(_spine) <= level:
        _spine.append(_spine[-1].map(SPINE_SCALE, SPINE_OFFSET))
    return _spine[level]


class TileArena:
    """Tree nodes addressed by index; children are index lists."""

    def __init__(self):
        self.tiles: list[HalfTile | None] = []
        self.children: list[list[int]] = []
        self._free: list[int] = []

    def __len__(self) -> int:
        return len(self.tiles) - len(self._free)

    def alloc(self, tile: HalfTile) -> int:
        if self._free:
            i = self._free.pop()
            self.tiles[i] = tile
            self.children[i] = []
        else:
            i = len(self.tiles)
            self.tiles.append(tile)
            self.children.append([])
        return i

    def release(self, root: int, keep: int | None = None):
        """Free the subtree at root, except the subtree at keep."""
        stack = [root]
        while stack:
            i = stack.pop()
            if i == keep:
                continue
            stack.extend(self.children[i])
            self.tiles[i] = None
            self.children[i] = []
            self._free.append(i)

    def release_children(self, i: int):
        for child in self.children[i]:
            self.release(child)
        self.children[i] = []

    def find_child(self, i: int, type: TileType) -> int | None:
        for child in self.children[i]:
            if self.tiles[child].type == type:
                return child
        return None


@dataclass
class RefineStats:
    visited: int = 0
    classified: int = 0
    subdivided: int = 0


class PenroseTree:
    """The part of the infinite tiling that is visible through a box.

    The root is always a spine tile; `level` counts its inflations, so the
    leaves sit 8 * level substitution steps below it and have the size of
    the level 0 spine tile.
    """

    def __init__(self, bound: BBox):
        self.arena = TileArena()
        self.stats = RefineStats()
        cached = CachedBBox(bound)
        self.level = self._containing_level(cached, 0)
        self.root = self.arena.alloc(HalfTile(SPINE_TYPE, spine_triangle(self.level)))
        self._refine(cached)

    def __len__(self) -> int:
        return len(self.arena)

    @staticmethod
    def _containing_level(bound: CachedBBox, level: int) -> int:
        while classify(spine_triangle(level), bound) is not Relation.CONTAIN:
            level += 1
        return level

    def _locate(self, bound: CachedBBox) -> tuple[Relation, list[TileType]]:
        # classify the root; if it contains the bound, follow the children
        # that still contain it as deep as the tree goes
        res = classify(self.arena.tiles[self.root].tri, bound)
        path = []
        if res is Relation.CONTAIN:
            node = self.root
            while True:
                for child in self.arena.children[node]:
                    tile = self.arena.tiles[child]
                    if classify(tile.tri, bound) is Relation.CONTAIN:
                        path.append(tile.type)
                        node = child
                        break
                else:
                    break
        return res, path

    def subtree(self, path: list[TileType]) -> int | None:
        node = self.root
        for t in path:
            node = self.arena.find_child(node, t)
            if node is None:
                return None
        return node

    def _expand(self, i: int) -> list[int]:
        if not self.arena.children[i]:
            self.stats.subdivided += 1
            self.arena.children[i] = [self.arena.alloc(t) for t in self.arena.tiles[i].subdivision()]
        return self.arena.children[i]

    def _graft(self, root: int, path: list[TileType], subtree: int):
        # expand along path below root and put subtree at its end
        parent = None
        node = root
        for t in path:
            self._expand(node)
            child = self.arena.find_child(node, t)
            if child is None:
                raise UnreachableState(f"{self.arena.tiles[node].type} has no {t} child")
            parent, node = node, child
        if parent is None:
            raise UnreachableState("cannot graft onto an empty path")
        siblings = self.arena.children[parent]
        siblings[siblings.index(node)] = subtree
        self.arena.release(node)

    def update(self, bound: BBox):
        """Move the window to `bound`, reusing as much of the tree as possible."""
        cached = CachedBBox(bound)
        self.stats = RefineStats()
        res, path = self._locate(cached)

        if res is Relation.DISJOINT:
            # nothing to reuse
            level = self._containing_level(cached, 0)
            logger.debug("rebuild: level %d -> %d", self.level, level)
            self.arena.release(self.root)
            self.level = level
            self.root = self.arena.alloc(HalfTile(SPINE_TYPE, spine_triangle(level)))

        elif res is Relation.CONTAIN:
            # shorten: descend along whole PATHS cycles, i.e. to a spine tile
            i = 0
            while i < len(path) and path[i] == PATHS[i % 8]:
                i += 1
            path = path[:i // 8 * 8]
            if path:
                root = self.subtree(path)
                self.arena.release(self.root, keep=root)
                logger.debug("shorten: level %d -> %d", self.level, self.level - len(path) // 8)
                self.level -= len(path) // 8
                self.root = root

        elif res in (Relation.INTERSECT, Relation.BE_CONTAINED):
            # lengthen: a larger spine tile with the old root grafted in
            level = self._containing_level(cached, self.level + 1)
            logger.debug("lengthen: level %d -> %d", self.level, level)
            root = self.arena.alloc(HalfTile(SPINE_TYPE, spine_triangle(level)))
            self._graft(root, list(PATHS) * (level - self.level), self.root)
            self.level = level
            self.root = root

        else:
            raise UnreachableState(f"unexpected relation {res}")

        self._refine(cached)

    def _refine(self, bound: CachedBBox):
        arena = self.arena
        stats = self.stats
        stack = [(self.root, self.level * 8, False)]
        while stack:
            i, depth, contained = stack.pop()
            tile = arena.tiles[i]
            stats.visited += 1
            if contained:
                res = Relation.BE_CONTAINED
            else:
                stats.classified += 1
                res = classify(tile.tri, bound)

            if res is Relation.DISJOINT:
                tile.state = State.EMPTY
                arena.release_children(i)
                continue

            if depth == 0:
                tile.state = State.FULL if res is Relation.BE_CONTAINED else State.PARTIAL
                continue

            if res is Relation.BE_CONTAINED and tile.state is State.FULL and arena.children[i]:
                # the whole subtree is already full
                continue

            tile.state = State.FULL if res is Relation.BE_CONTAINED else State.PARTIAL
            for child in self._expand(i):
                stack.append((child, depth - 1, res is Relation.BE_CONTAINED))

        logger.debug(
            "refine: level %d, %d nodes, visited %d, classified %d, subdivided %d",
            self.level, len(arena), stats.visited, stats.classified, stats.subdivided,
        )

    def tiles(self, level: int = 0) -> list[HalfTile]:
        """Non-empty tiles `level` substitution steps above the leaves."""
        if not 0 <= level <= self.level * 8:
            raise ValueError(f"level {level} outside 0..{self.level * 8}")
        nodes = [self.root]
        for _ in range(self.level * 8 - level):
            nodes = [child for i in nodes for child in self.arena.children[i]]
        return [self.arena.tiles[i] for i in nodes if self.arena.tiles[i].state is not State.EMPTY]

    def triangles(self, level: int = 0) -> list[Triangle]:
        return [tile.tri for tile in self.tiles(level)]
