"""
patron/core/matrix.py
Cross Group A (rows) with Group D (cols) into 4-digit candidates.
"""
from __future__ import annotations

from patron.core.groups import POS_INDICES, DelayPair, PairCandidate

Matrix = tuple[tuple[str, ...], ...]


def combine_pairs(p1: str, pos1: str, p2: str, pos2: str) -> str:
    """
    Place p1 at pos1, then p2 at pos2 wherever those slots are still free.
    Slots left empty take p2's digits left to right: a digit qualifies while
    it is not on the board yet, or is on it fewer times than it remains in
    p2's working copy. Anything still empty becomes '0'.
    """
    res: list[str | None] = [None, None, None, None]

    i1, j1 = POS_INDICES[pos1]
    res[i1] = p1[0]
    res[j1] = p1[1]

    idx2 = POS_INDICES[pos2]
    placed = 0
    for rel, idx in enumerate(idx2):
        if res[idx] is None and placed < 2:
            res[idx] = p2[rel]
            placed += 1

    # The working copy starts from all of p2, including digits placed above.
    p2_digits = list(p2)
    for i in range(4):
        if res[i] is not None:
            continue
        used = [x for x in res if x is not None]
        remaining = [
            d for d in p2_digits
            if d not in used or p2_digits.count(d) > used.count(d)
        ]
        if remaining:
            res[i] = remaining[0]
            p2_digits.remove(remaining[0])

    return "".join(v if v is not None else "0" for v in res)


def generate_matrix(group_a: list[PairCandidate], group_d: list[DelayPair]) -> Matrix:
    return tuple(
        tuple(combine_pairs(a.pair, a.best_pos, d.pair, d.best_pos) for d in group_d)
        for a in group_a
    )


def flatten(matrix: Matrix) -> list[str]:
    return [cell for row in matrix for cell in row]


def get_diagonal(matrix: Matrix) -> list[str]:
    if not matrix:
        return []
    size = min(len(matrix), len(matrix[0]))
    return [matrix[i][i] for i in range(size)]
