"""Multivariate polynomials built from an appendable list of monomial elements."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations_with_replacement
from typing import Iterator, Sequence

import numpy as np

__all__ = ["NPolyElem", "NPoly"]


@dataclass
class NPolyElem:
    """One monomial: the power of each input variable and its coefficient."""

    powers: tuple[int, ...]
    coeff: float = 1.0

    def monomial(self, x: Sequence[float]) -> float:
        """Value of the monomial at ``x``, without the coefficient."""
        value = 1.0
        for xd, p in zip(x, self.powers):
            if p > 0:
                value *= xd**p
        return value

    def partial(self, x: Sequence[float], g: int) -> float:
        """Partial derivative of the monomial with respect to variable ``g``."""
        p_g = self.powers[g]
        if p_g < 1:
            return 0.0
        value = float(p_g) * x[g] ** (p_g - 1)
        for d, (xd, p) in enumerate(zip(x, self.powers)):
            if d != g and p > 0:
                value *= xd**p
        return value


class NPoly:
    """A polynomial on R^n made of a list of monomial elements.

    With ``order > 0`` every monomial whose total degree is at most ``order``
    is generated, each with coefficient 1.
    """

    def __init__(self, n_dof: int, order: int = 0) -> None:
        if n_dof < 0:
            raise ValueError(f"number of degrees of freedom must be >= 0, got {n_dof}")
        self.n_dof = n_dof
        self.order = order if order > 0 else 0
        self._elems: list[NPolyElem] = []
        if order > 0:
            self._auto_construct(order)

    def _auto_construct(self, max_power: int) -> None:
        # Each non-decreasing sequence over 0..n_dof picks which variable every
        # "power slot" goes to; the value n_dof stands for the constant 1.
        for slots in combinations_with_replacement(range(self.n_dof + 1), max_power):
            powers = tuple(slots.count(d) for d in range(self.n_dof))
            self._elems.append(NPolyElem(powers=powers, coeff=1.0))

    def _check_input(self, x: Sequence[float]) -> None:
        if len(x) != self.n_dof:
            raise ValueError(
                f"size of input vector ({len(x)}) does not match poly nDoF ({self.n_dof})"
            )

    def _check_coeffs(self, coeffs: Sequence[float]) -> None:
        if len(coeffs) != len(self._elems):
            raise ValueError(
                f"wrong number of coefficients: expected {len(self._elems)}, received {len(coeffs)}"
            )

    def eval_no_coeff(self, x: Sequence[float]) -> np.ndarray:
        """Value of every element's monomial at ``x``, ignoring coefficients."""
        self._check_input(x)
        return np.array([elem.monomial(x) for elem in self._elems], dtype=float)

    def evaluate(self, x: Sequence[float], coeffs: Sequence[float] | None = None) -> float:
        """Evaluate at ``x`` with the given coefficients, or the stored ones."""
        if coeffs is not None:
            self._check_coeffs(coeffs)
        self._check_input(x)
        if coeffs is None:
            coeffs = [elem.coeff for elem in self._elems]
        return float(sum(elem.monomial(x) * c for elem, c in zip(self._elems, coeffs)))

    def gradient(self, coeffs: Sequence[float], x: Sequence[float]) -> np.ndarray:
        """Gradient with respect to the inputs, using the given coefficients."""
        self._check_coeffs(coeffs)
        self._check_input(x)
        grad = np.zeros(self.n_dof, dtype=float)
        for elem, c in zip(self._elems, coeffs):
            grad += c * np.array([elem.partial(x, g) for g in range(self.n_dof)], dtype=float)
        return grad

    def add_element(self, powers: Sequence[int], coeff: float = 1.0) -> None:
        """Append a monomial with the given powers and coefficient."""
        if len(powers) != self.n_dof:
            raise ValueError(
                f"number of powers ({len(powers)}) incorrect for this poly's DoF ({self.n_dof})"
            )
        self._elems.append(NPolyElem(powers=tuple(int(p) for p in powers), coeff=float(coeff)))

    def _index(self, i: int) -> int:
        if not 0 <= i < len(self._elems):
            raise IndexError(
                f"invalid element index {i}; valid range is 0..{len(self._elems) - 1}"
            )
        return i

    def element(self, i: int) -> NPolyElem:
        """The element at index ``i`` (mutable, shared with the polynomial)."""
        return self._elems[self._index(i)]

    def element_powers(self, i: int) -> tuple[int, ...]:
        """The powers of the element at index ``i``."""
        return self._elems[self._index(i)].powers

    def element_coeff(self, i: int) -> float:
        """The coefficient of the element at index ``i``."""
        return self._elems[self._index(i)].coeff

    def __len__(self) -> int:
        return len(self._elems)

    def __iter__(self) -> Iterator[NPolyElem]:
        return iter(self._elems)