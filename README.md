# apexoptics

Polynomial optics models for spectrometer track reconstruction. A polynomial
is defined on an n-dimensional input space, for example the four focal-plane
coordinates `(x, y, dxdz, dydz)`. Least-squares fits give polynomials that
map focal-plane tracks onto sieve-plane coordinates. The fitted coefficients
are stored in a plain-text database file.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Polynomials: `apexoptics.npoly`

```python
from apexoptics.npoly import NPoly

poly = NPoly(4, 2)          # every term of total degree <= 2 in 4 variables
len(poly)                   # number of terms (15 here)
poly.eval_no_coeff([0.1, 0.2, 0.01, 0.02])   # value of each term alone, as a numpy array
poly.evaluate([0.1, 0.2, 0.01, 0.02])        # sum using the stored coefficients
poly.evaluate([0.1, 0.2, 0.01, 0.02], coeffs=[1.0] * len(poly))
```

Each term is an `NPolyElem` with `powers` (one power per input variable) and
`coeff`. Terms made by `NPoly(n_dof, order)` all have coefficient 1. With no
order, or an order of 0, the polynomial starts empty, and you add terms with
`add_element(powers, coeff)`. Iterating over an `NPoly` yields its elements.
`element(i)`, `element_powers(i)` and `element_coeff(i)` look up one term.

`gradient(coeffs, x)` returns the derivative with respect to each input
variable, computed with the given coefficients.

Wrong-sized inputs, coefficient lists or power lists raise `ValueError`. An
element index out of range raises `IndexError`.

## Fitting: `apexoptics.fitting`

- `fp_inputs(x, y, dxdz, dydz)` gives the polynomial inputs for a focal-plane
  track. The x-slope is corrected to `dxdz - x/6`.
- `q1_inputs(position, momentum, hrs_momentum=1104.0)` gives the five Q1-front
  inputs: x, y, dx/dz, dy/dz and dp/p.
- `sieve_targets(position, momentum)` gives the `x_sv`, `y_sv`, `dxdz_sv` and
  `dydz_sv` values a fit maps onto.
- `fit_coefficients(poly, inputs, outputs)` solves the normal equations for
  each named output column. It returns the coefficients for each name, one per
  element of `poly`.
- `build_models(template, coeffs)` makes one `NPoly` per name, with the
  template's terms and the fitted coefficients.
- `residuals(model, inputs, targets)` returns `(target - model(x)) * 1e3` for
  each point, in mm or mrad.
- `fit_fp_to_sieve(fp_rows, sieve_targets_by_name, order=2, is_rhrs=False,
  stem="data/csv/db_fwd")` runs the whole focal-plane-to-sieve fit. It writes
  the database file and returns its path together with the fitted models.

## Database files: `apexoptics.dbfile`

A file starts with two header lines, `poly-DoF <n>` and `is-RHRS <0|1>`.
After them comes one line per polynomial term: the polynomial's name, the
powers and the coefficient.

```
dxdz_sv   0   0   2   0   -3.044778720e-01
```

- `db_path(stem, is_rhrs, order)` builds the file name
  `<stem>_<L|R>_<order>ord.dat`.
- `write_db(path, template, coeffs, is_rhrs)` writes the polynomials in name
  order. Each coefficient is written as `%+.9e`.
- `read_header(path)` returns a `DbHeader` with `poly_dof` and `is_rhrs`.
- `parse_poly_from_file(path, poly_name, poly)` appends the named terms to
  `poly` and returns how many it added.
- `load_polys(path, names=("x_sv", "y_sv", "dxdz_sv", "dydz_sv"))` builds one
  polynomial per name. It issues a warning for any name that has no terms in
  the file.

A malformed header or element line raises `DbFormatError`, a subclass of
`ValueError`.

## Forward reconstruction: `apexoptics.forward`

- `transport_to_focal_plane(x, y, dxdz, dydz)` turns per-track transport
  coordinates into focal-plane `Track`s.
- `reconstruct_sieve(tracks_fp, polys)` applies the `x_sv`, `y_sv`,
  `dxdz_sv` and `dydz_sv` polynomials to give sieve-plane `Track`s.
- `transport_branch_names(is_rhrs)` names the transport branches for the
  left (`L_tr_tra_*`) or right (`R_tr_tra_*`) arm.
- `react_vertex_fix(values, offset)` shifts the values by the reaction-vertex
  coordinate.

## What this package does not do

It does not read event trees or other experiment data files. You pass track
coordinates in as Python sequences. It does not draw error histograms or
sieve-plane projections. It has no command-line program. For the two-stage
fit (focal plane to Q1 front, then Q1 front to sieve), it provides the Q1
input and sieve target helpers, but no function that runs that fit from
start to finish.