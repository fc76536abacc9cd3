from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Tuple


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Cell = Tuple[int, int]
Cells = Tuple[Cell, ...]
OffsetTable = Tuple[Cells, ...]

# SRS offset data with rows flipped (positive row is down).
# A kick translation is from_offset[i] - to_offset[i].
OFFSETS_JLSTZ: OffsetTable = (
    ((0, 0), (0, 0), (0, 0), (0, 0), (0, 0)),
    ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
    ((0, 0), (0, 0), (0, 0), (0, 0), (0, 0)),
    ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
)

OFFSETS_I: OffsetTable = (
    ((0, 0), (-1, 0), (2, 0), (-1, 0), (2, 0)),
    ((-1, 0), (0, 0), (0, 0), (0, -1), (0, 2)),
    ((-1, -1), (1, -1), (-2, -1), (1, 0), (-2, 0)),
    ((0, -1), (0, -1), (0, -1), (0, 1), (0, -2)),
)

# O only needs to undo the drift of rotating around its corner.
OFFSETS_O: OffsetTable = (
    ((0, 0),),
    ((0, 1),),
    ((-1, 1),),
    ((-1, 0),),
)

COLORS: Dict[TetrominoType, Tuple[int, int, int]] = {
    TetrominoType.I: (0, 240, 240),
    TetrominoType.J: (0, 0, 240),
    TetrominoType.L: (240, 160, 0),
    TetrominoType.O: (240, 240, 0),
    TetrominoType.S: (0, 240, 0),
    TetrominoType.T: (160, 0, 240),
    TetrominoType.Z: (240, 0, 0),
}

BASE_CELLS: Dict[TetrominoType, Cells] = {
    TetrominoType.I: ((0, 0), (-1, 0), (1, 0), (2, 0)),
    TetrominoType.J: ((0, 0), (-1, -1), (-1, 0), (1, 0)),
    TetrominoType.L: ((0, 0), (-1, 0), (1, 0), (1, -1)),
    TetrominoType.O: ((0, 0), (0, -1), (1, -1), (1, 0)),
    TetrominoType.S: ((0, 0), (-1, 0), (0, -1), (1, -1)),
    TetrominoType.T: ((0, 0), (-1, 0), (0, -1), (1, 0)),
    TetrominoType.Z: ((0, 0), (-1, -1), (0, -1), (1, 0)),
}


def rotate_cells(cells: Cells, direction: int) -> Cells:
    """Rotate relative cells 90 degrees; +1 is clockwise, -1 counterclockwise."""
    if direction not in (1, -1):
        raise ValueError(f"rotation direction must be 1 or -1, got {direction!r}")
    return tuple((-y * direction, x * direction) for x, y in cells)


@dataclass(frozen=True)
class Shape:
    """Immutable tetromino definition shared by every piece of its kind."""

    kind: TetrominoType
    color: Tuple[int, int, int]
    cells: Cells
    offsets: OffsetTable
    layouts: Tuple[Cells, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        layouts = [self.cells]
        for _ in range(3):
            layouts.append(rotate_cells(layouts[-1], 1))
        object.__setattr__(self, "layouts", tuple(layouts))

    @property
    def name(self) -> str:
        return self.kind.name

    @property
    def min_x(self) -> int:
        return min(x for x, _ in self.cells)

    @property
    def max_x(self) -> int:
        return max(x for x, _ in self.cells)

    @property
    def min_y(self) -> int:
        return min(y for _, y in self.cells)

    @property
    def max_y(self) -> int:
        return max(y for _, y in self.cells)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    def layout(self, rotation: int) -> Cells:
        return self.layouts[rotation % 4]

    def kick_translations(self, from_state: int, to_state: int) -> Cells:
        from_offsets = self.offsets[from_state % 4]
        to_offsets = self.offsets[to_state % 4]
        return tuple(
            (fx - tx, fy - ty) for (fx, fy), (tx, ty) in zip(from_offsets, to_offsets)
        )


@dataclass(frozen=True)
class Rotation:
    """Candidate produced by `rotate`; nothing is committed until a kick fits."""

    state: int
    cells: Cells
    kicks: Cells


def rotate(shape: Shape, rotation: int, direction: int) -> Rotation:
    cells = rotate_cells(shape.layout(rotation), direction)
    new_state = (rotation + direction) % 4
    return Rotation(new_state, cells, shape.kick_translations(rotation, new_state))


def _offsets_for(kind: TetrominoType) -> OffsetTable:
    if kind is TetrominoType.I:
        return OFFSETS_I
    if kind is TetrominoType.O:
        return OFFSETS_O
    return OFFSETS_JLSTZ


def build_catalog() -> Dict[TetrominoType, Shape]:
    return {
        kind: Shape(kind=kind, color=COLORS[kind], cells=BASE_CELLS[kind], offsets=_offsets_for(kind))
        for kind in TetrominoType
    }


CATALOG: Dict[TetrominoType, Shape] = build_catalog()
SHAPES: Tuple[Shape, ...] = tuple(CATALOG[kind] for kind in TetrominoType)


def shape_for(kind: TetrominoType | int | str) -> Shape:
    if isinstance(kind, str):
        return CATALOG[TetrominoType[kind]]
    return CATALOG[TetrominoType(kind)]
