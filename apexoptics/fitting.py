"""Least-squares fitting of optics polynomials to simulated track data."""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Iterable, Mapping, Sequence, Union

import numpy as np

from apexoptics.dbfile import db_path, write_db
from apexoptics.npoly import NPoly

__all__ = [
    "fp_inputs",
    "q1_inputs",
    "sieve_targets",
    "fit_coefficients",
    "build_models",
    "residuals",
    "fit_fp_to_sieve",
]

PathLike = Union[str, "os.PathLike[str]"]

FP_DOF = 4
Q1_DOF = 5
DEFAULT_HRS_MOMENTUM = 1104.0


def fp_inputs(x: float, y: float, dxdz: float, dydz: float) -> list[float]:
    """Polynomial inputs for a focal-plane track; the x-slope is corrected by ``-x/6``."""
    return [x, y, dxdz - x / 6.0, dydz]


def q1_inputs(
    position: Sequence[float],
    momentum: Sequence[float],
    hrs_momentum: float = DEFAULT_HRS_MOMENTUM,
) -> list[float]:
    """Polynomial inputs at the Q1 front: x, y, dx/dz, dy/dz and dp/p."""
    px, py, pz = momentum
    magnitude = math.hypot(px, py, pz)
    return [
        float(position[0]),
        float(position[1]),
        px / pz,
        py / pz,
        (magnitude - hrs_momentum) / hrs_momentum,
    ]


def sieve_targets(position: Sequence[float], momentum: Sequence[float]) -> dict[str, float]:
    """Sieve coordinates a fit maps onto, keyed by polynomial name."""
    px, py, pz = momentum
    return {
        "x_sv": float(position[0]),
        "y_sv": float(position[1]),
        "dxdz_sv": px / pz,
        "dydz_sv": py / pz,
    }


def fit_coefficients(
    poly: NPoly,
    inputs: Iterable[Sequence[float]],
    outputs: Mapping[str, Sequence[float]],
) -> dict[str, list[float]]:
    """Best-fit coefficients of ``poly``'s elements for each named output.

    Solves the normal equations ``A c = b`` with ``A = sum X X^T`` and
    ``b = sum X y``, where ``X`` holds the element monomials of each input.
    """
    rows = [poly.eval_no_coeff(x) for x in inputs]
    if not rows:
        raise ValueError("no input points to fit")
    design = np.vstack(rows)
    n_points = design.shape[0]

    for name, values in outputs.items():
        if len(values) != n_points:
            raise ValueError(
                f"output '{name}' has {len(values)} values, expected {n_points}"
            )

    a_matrix = design.T @ design
    result: dict[str, list[float]] = {}
    for name in sorted(outputs):
        target = np.asarray(outputs[name], dtype=float)
        b_vec = design.T @ target
        result[name] = [float(c) for c in np.linalg.solve(a_matrix, b_vec)]
    return result


def build_models(template: NPoly, coeffs: Mapping[str, Sequence[float]]) -> dict[str, NPoly]:
    """One polynomial per name with ``template``'s elements and the given coefficients."""
    models: dict[str, NPoly] = {}
    for name in sorted(coeffs):
        values = coeffs[name]
        if len(values) != len(template):
            raise ValueError(
                f"polynomial '{name}' has {len(values)} coefficients, "
                f"template has {len(template)} elements"
            )
        model = NPoly(template.n_dof)
        for elem, coeff in zip(template, values):
            model.add_element(elem.powers, coeff)
        models[name] = model
    return models


def residuals(
    model: NPoly,
    inputs: Iterable[Sequence[float]],
    targets: Iterable[float],
) -> np.ndarray:
    """Errors ``(target - model(x)) * 1e3`` for each point (mm or mrad)."""
    return np.array(
        [
            (float(t) - model.evaluate(x)) * 1e3
            for x, t in zip(inputs, targets, strict=True)
        ],
        dtype=float,
    )


def fit_fp_to_sieve(
    fp_rows: Iterable[Sequence[float]],
    sieve_targets_by_name: Mapping[str, Sequence[float]],
    order: int = 2,
    is_rhrs: bool = False,
    stem: PathLike = "data/csv/db_fwd",
) -> tuple[Path, dict[str, NPoly]]:
    """Fit focal-plane-to-sieve polynomials and write them to a database file.

    ``fp_rows`` holds ``(x_fp, y_fp, dxdz_fp, dydz_fp)`` per track. Returns
    the path written and the fitted polynomial for each target name.
    """
    template = NPoly(FP_DOF, order)
    inputs = [fp_inputs(*row) for row in fp_rows]
    coeffs = fit_coefficients(template, inputs, sieve_targets_by_name)
    path = write_db(db_path(os.fspath(stem), is_rhrs, order), template, coeffs, is_rhrs)
    return path, build_models(template, coeffs)