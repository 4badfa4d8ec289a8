"""
Seeded selection of payload-bearing pixel coordinates.

Coordinates are drawn from the rectangle inset by ``bound_offset`` on
every side. A candidate is accepted only when neither it nor any of its
4-connected neighbors has been taken, which guarantees that writing one
payload pixel never changes the neighbor baseline of another.

Candidates come from one checkerboard class of the rectangle, the
pixels whose x + y has a parity picked by the seed. Two pixels of the
same class are never 4-connected, so only reserved pixels can reject a
candidate and every count up to the capacity is reachable.

The accepted coordinates are returned in acceptance order; that order
decides which payload byte lands on which pixel.
"""

import logging
from typing import Iterable, List, NamedTuple, Set, Tuple

from .errors import CapacityError
from .prng import SplitMix64


logger = logging.getLogger(__name__)

DEFAULT_BOUND_OFFSET = 2
DEFAULT_DENSITY_FACTOR = 0.35

NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Coordinate(NamedTuple):
    """Pixel position, x is the column and y the row."""

    x: int
    y: int


def neighbors(x: int, y: int) -> List[Coordinate]:
    """Return the 4-connected neighbors of (x, y), ignoring image bounds."""
    return [Coordinate(x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS]


def blocked_pixels(
    width: int,
    height: int,
    bound_offset: int = DEFAULT_BOUND_OFFSET,
    reserved: Iterable[Tuple[int, int]] = (),
) -> Set[Tuple[int, int]]:
    """Return the candidate pixels that are reserved or 4-connected to a reserved pixel."""
    blocked = set()
    for x, y in reserved:
        for px, py in [(x, y)] + neighbors(x, y):
            if bound_offset <= px < width - bound_offset and bound_offset <= py < height - bound_offset:
                blocked.add((px, py))
    return blocked


def capacity(
    width: int,
    height: int,
    bound_offset: int = DEFAULT_BOUND_OFFSET,
    density_factor: float = DEFAULT_DENSITY_FACTOR,
    reserved: Iterable[Tuple[int, int]] = (),
) -> int:
    """
    Calculate how many coordinates can be selected in an image.

    Every selected pixel effectively reserves its 4-neighborhood, so only
    a fraction of the inset rectangle is usable. Reserved pixels and their
    neighbors are removed from the rectangle first, and the result never
    exceeds the free pixels of the smaller checkerboard class.

    Returns:
        floor(free_area * density_factor), never negative. Without
        reserved pixels and with density_factor <= 0.5 this is
        floor(inner_width * inner_height * density_factor).
    """
    inner_width = max(width - 2 * bound_offset, 0)
    inner_height = max(height - 2 * bound_offset, 0)
    area = inner_width * inner_height
    if area == 0:
        return 0

    class_sizes = [area // 2, area // 2]
    if area % 2:
        # The inset origin (bound_offset, bound_offset) is in the even class.
        class_sizes[0] += 1

    blocked = blocked_pixels(width, height, bound_offset, reserved)
    for x, y in blocked:
        class_sizes[(x + y) % 2] -= 1

    return min(int((area - len(blocked)) * density_factor), *class_sizes)


def select(
    seed: int,
    bounds: Tuple[int, int],
    count: int,
    bound_offset: int = DEFAULT_BOUND_OFFSET,
    density_factor: float = DEFAULT_DENSITY_FACTOR,
    reserved: Iterable[Tuple[int, int]] = (),
) -> List[Coordinate]:
    """
    Select ``count`` mutually non-adjacent coordinates.

    The first draw of the generator picks the checkerboard class; the
    rest walk a lazy Fisher-Yates shuffle of the inset rectangle, skipping
    pixels of the other class. For fixed arguments the result, including
    its order, is the same in every process.

    Args:
        seed: 32-bit seed (signed or unsigned; both forms select alike)
        bounds: (width, height) of the image
        count: Number of coordinates to select
        bound_offset: Margin between the image edge and the candidate area
        density_factor: Usable fraction of the candidate area
        reserved: Pixels treated as already taken; nothing selected touches them

    Returns:
        Ordered list of selected coordinates

    Raises:
        CapacityError: If count is negative or exceeds the capacity
    """
    width, height = bounds
    reserved = [(x, y) for x, y in reserved]
    if count < 0:
        raise CapacityError(
            f"Coordinate count must not be negative, got {count}",
            details={"requested": count, "capacity": 0},
        )

    available = capacity(width, height, bound_offset, density_factor, reserved)
    if count > available:
        raise CapacityError(
            f"Not enough pixel space: {count} requested, capacity is {available}",
            details={"requested": count, "capacity": available},
        )
    if count == 0:
        return []

    x0, y0 = bound_offset, bound_offset
    inner_width = width - 2 * bound_offset
    pool_size = inner_width * (height - 2 * bound_offset)

    rng = SplitMix64(seed)
    parity = rng.below(2)
    taken: Set[Tuple[int, int]] = set(reserved)
    selected: List[Coordinate] = []
    # Sparse view of the shuffled index array; missing keys map to themselves.
    swapped = {}

    for i in range(pool_size):
        j = rng.randrange(i, pool_size)
        index = swapped.get(j, j)
        swapped[j] = swapped.pop(i, i)

        x = x0 + index % inner_width
        y = y0 + index // inner_width
        if (x + y) % 2 != parity:
            continue
        if (x, y) in taken or any(n in taken for n in neighbors(x, y)):
            continue

        taken.add((x, y))
        selected.append(Coordinate(x, y))
        if len(selected) == count:
            logger.debug(f"Selected {count} coordinates after {i + 1} draws (seed={seed})")
            return selected

    raise CapacityError(
        f"Candidate pixels exhausted after selecting {len(selected)} of {count}",
        details={"requested": count, "capacity": len(selected)},
    )
