"""Forward optics: reconstructing sieve coordinates from focal-plane tracks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

import numpy as np

from apexoptics.npoly import NPoly

__all__ = [
    "Track",
    "transport_to_focal_plane",
    "reconstruct_sieve",
    "transport_branch_names",
    "react_vertex_fix",
]


@dataclass(frozen=True)
class Track:
    """A trajectory: position and slopes in some coordinate system."""

    x: float
    y: float
    dxdz: float
    dydz: float

    def as_list(self) -> list[float]:
        """The coordinates in the order x, y, dxdz, dydz."""
        return [self.x, self.y, self.dxdz, self.dydz]


def transport_to_focal_plane(
    x: Sequence[float],
    y: Sequence[float],
    dxdz: Sequence[float],
    dydz: Sequence[float],
) -> list[Track]:
    """Convert per-track TRANSPORT coordinates to focal-plane tracks.

    The only difference between the two systems is the x-slope, which in the
    focal-plane system is ``dxdz - x/6``.
    """
    return [
        Track(x=xi, y=yi, dxdz=ti - xi / 6.0, dydz=pi)
        for xi, yi, ti, pi in zip(x, y, dxdz, dydz, strict=True)
    ]


def reconstruct_sieve(tracks_fp: Iterable[Track], polys: Mapping[str, NPoly]) -> list[Track]:
    """Map focal-plane tracks to sieve tracks with the x/y/dxdz/dydz_sv polynomials."""
    pol_x = polys["x_sv"]
    pol_y = polys["y_sv"]
    pol_dxdz = polys["dxdz_sv"]
    pol_dydz = polys["dydz_sv"]
    tracks_sv = []
    for track in tracks_fp:
        x_fp = track.as_list()
        tracks_sv.append(
            Track(
                x=pol_x.evaluate(x_fp),
                y=pol_y.evaluate(x_fp),
                dxdz=pol_dxdz.evaluate(x_fp),
                dydz=pol_dydz.evaluate(x_fp),
            )
        )
    return tracks_sv


def transport_branch_names(is_rhrs: bool) -> tuple[str, str, str, str]:
    """Names of the TRANSPORT-coordinate branches (x, y, th, ph) for an arm."""
    arm = "R" if is_rhrs else "L"
    return (f"{arm}_tr_tra_x", f"{arm}_tr_tra_y", f"{arm}_tr_tra_th", f"{arm}_tr_tra_ph")


def react_vertex_fix(values: Sequence[float], offset: float) -> np.ndarray:
    """Shift every value by the reaction-vertex coordinate ``offset``."""
    return np.asarray(values, dtype=float) + offset