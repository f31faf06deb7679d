"""Reading and writing the plain-text polynomial database (".dat") files.

A database file starts with two header lines::

    poly-DoF 4
    is-RHRS 0

followed by one line per polynomial element::

    dxdz_sv   0   0   2   0   -3.044778720e-01

The first token names the polynomial the element belongs to, the next
``poly-DoF`` tokens are the powers of each input variable and the last token
is the element's coefficient.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence, Union

from apexoptics.npoly import NPoly

__all__ = [
    "DbHeader",
    "DbFormatError",
    "db_path",
    "read_header",
    "parse_poly_from_file",
    "load_polys",
    "write_db",
]

PathLike = Union[str, "os.PathLike[str]"]

SIEVE_POLY_NAMES = ("x_sv", "y_sv", "dxdz_sv", "dydz_sv")

_DOF_KEY = "poly-DoF"
_ARM_KEY = "is-RHRS"


class DbFormatError(ValueError):
    """Raised when a database file does not have the expected layout."""


@dataclass(frozen=True)
class DbHeader:
    """The metadata held in the first lines of a database file."""

    poly_dof: int
    is_rhrs: bool


def db_path(stem: str, is_rhrs: bool, order: int) -> str:
    """Output path for a database: ``<stem>_<L|R>_<order>ord.dat``."""
    arm = "_R" if is_rhrs else "_L"
    return f"{stem}{arm}_{order}ord.dat"


def _header_value(line: str, key: str, path: PathLike) -> int:
    tokens = line.split()
    if not tokens or tokens[0] != key:
        raise DbFormatError(f"missing '{key} [n]' header at top of db file '{path}'")
    if len(tokens) < 2:
        raise DbFormatError(f"header '{key}' in db file '{path}' has no value")
    try:
        return int(tokens[1])
    except ValueError as exc:
        raise DbFormatError(
            f"header '{key}' in db file '{path}' has a non-integer value {tokens[1]!r}"
        ) from exc


def read_header(path: PathLike) -> DbHeader:
    """Read the ``poly-DoF`` and ``is-RHRS`` header lines of a database file."""
    with open(path, encoding="utf-8") as dbfile:
        dof_line = dbfile.readline()
        arm_line = dbfile.readline()
    poly_dof = _header_value(dof_line, _DOF_KEY, path)
    is_rhrs = _header_value(arm_line, _ARM_KEY, path) == 1
    return DbHeader(poly_dof=poly_dof, is_rhrs=is_rhrs)


def parse_poly_from_file(path: PathLike, poly_name: str, poly: NPoly) -> int:
    """Append every element named ``poly_name`` in the file to ``poly``.

    Returns the number of elements added.
    """
    with open(path, encoding="utf-8") as dbfile:
        poly_dof = _header_value(dbfile.readline(), _DOF_KEY, path)
        if poly_dof != poly.n_dof:
            raise DbFormatError(
                f"poly DoF in db file ({poly_dof}) does not match DoF of passed poly ({poly.n_dof})"
            )

        added = 0
        for lineno, line in enumerate(dbfile, start=2):
            tokens = line.split()
            if not tokens or tokens[0] != poly_name:
                continue
            fields = tokens[1:]
            if len(fields) < poly_dof + 1:
                raise DbFormatError(
                    f"line {lineno} of db file '{path}' has {len(fields)} values, "
                    f"expected {poly_dof + 1}"
                )
            try:
                powers = [int(tok) for tok in fields[:poly_dof]]
                coeff = float(fields[poly_dof])
            except ValueError as exc:
                raise DbFormatError(f"malformed element on line {lineno} of db file '{path}'") from exc
            poly.add_element(powers, coeff)
            added += 1
    return added


def load_polys(path: PathLike, names: Iterable[str] = SIEVE_POLY_NAMES) -> dict[str, NPoly]:
    """Build one polynomial per name from the elements stored in a database file."""
    header = read_header(path)
    polys: dict[str, NPoly] = {}
    for name in names:
        poly = NPoly(header.poly_dof)
        if parse_poly_from_file(path, name, poly) < 1:
            warnings.warn(
                f"did not parse any elements for polynomial '{name}', check name.",
                stacklevel=2,
            )
        polys[name] = poly
    return polys


def write_db(
    path: PathLike,
    template: NPoly,
    coeffs: Mapping[str, Sequence[float]],
    is_rhrs: bool,
) -> Path:
    """Write one polynomial per name, using the elements of ``template``.

    ``coeffs`` maps each polynomial name to one coefficient per element of the
    template. Polynomials are written in name order.
    """
    for name, values in coeffs.items():
        if len(values) != len(template):
            raise ValueError(
                f"polynomial '{name}' has {len(values)} coefficients, "
                f"template has {len(template)} elements"
            )

    out = Path(path)
    with open(out, "w", encoding="utf-8") as outfile:
        outfile.write(f"{_DOF_KEY} {template.n_dof}\n")
        outfile.write(f"{_ARM_KEY} {1 if is_rhrs else 0}\n")
        for name in sorted(coeffs):
            for elem, coeff in zip(template, coeffs[name]):
                powers = "".join(f" {p:3d}" for p in elem.powers)
                outfile.write(f"{name}{powers}   {float(coeff):+.9e}\n")
    return out