import numpy as np
import pytest

from apexoptics.forward import (
    Track,
    react_vertex_fix,
    reconstruct_sieve,
    transport_branch_names,
    transport_to_focal_plane,
)
from apexoptics.npoly import NPoly


def _linear(powers, coeff):
    poly = NPoly(4)
    poly.add_element(powers, coeff)
    return poly


def test_track_as_list():
    assert Track(1.0, 2.0, 3.0, 4.0).as_list() == [1.0, 2.0, 3.0, 4.0]


def test_transport_to_focal_plane_shifts_dxdz():
    tracks = transport_to_focal_plane([6.0, 0.0], [1.0, 2.0], [2.0, 0.5], [0.1, 0.2])
    assert tracks[0] == Track(x=6.0, y=1.0, dxdz=1.0, dydz=0.1)
    assert tracks[1] == Track(x=0.0, y=2.0, dxdz=0.5, dydz=0.2)


def test_transport_to_focal_plane_empty():
    assert transport_to_focal_plane([], [], [], []) == []


def test_transport_to_focal_plane_length_mismatch():
    with pytest.raises(ValueError):
        transport_to_focal_plane([1.0, 2.0], [1.0], [0.0, 0.0], [0.0, 0.0])


def test_transport_branch_names_left():
    assert transport_branch_names(False) == ("L_tr_tra_x", "L_tr_tra_y", "L_tr_tra_th", "L_tr_tra_ph")


def test_transport_branch_names_right():
    assert transport_branch_names(True) == ("R_tr_tra_x", "R_tr_tra_y", "R_tr_tra_th", "R_tr_tra_ph")


def test_reconstruct_sieve():
    polys = {
        "x_sv": _linear([1, 0, 0, 0], 2.0),
        "y_sv": _linear([0, 1, 0, 0], -1.0),
        "dxdz_sv": _linear([0, 0, 2, 0], 3.0),
        "dydz_sv": _linear([0, 0, 0, 0], 0.5),
    }
    tracks = [Track(1.0, 2.0, 0.1, 0.3), Track(-0.5, 0.0, 2.0, 0.0)]
    result = reconstruct_sieve(tracks, polys)
    assert len(result) == 2
    assert result[0].as_list() == pytest.approx([2.0, -2.0, 0.03, 0.5])
    assert result[1].as_list() == pytest.approx([-1.0, 0.0, 12.0, 0.5])


def test_reconstruct_sieve_missing_poly():
    polys = {"x_sv": _linear([1, 0, 0, 0], 1.0)}
    with pytest.raises(KeyError):
        reconstruct_sieve([Track(0.0, 0.0, 0.0, 0.0)], polys)


def test_reconstruct_sieve_wrong_dof():
    poly = NPoly(3)
    poly.add_element([1, 0, 0], 1.0)
    polys = {name: poly for name in ("x_sv", "y_sv", "dxdz_sv", "dydz_sv")}
    with pytest.raises(ValueError):
        reconstruct_sieve([Track(0.0, 0.0, 0.0, 0.0)], polys)


def test_transport_then_reconstruct_chain():
    polys = {name: _linear([0, 0, 1, 0], 1.0) for name in ("x_sv", "y_sv", "dxdz_sv", "dydz_sv")}
    tracks_fp = transport_to_focal_plane([3.0], [0.0], [1.0], [0.0])
    (sv,) = reconstruct_sieve(tracks_fp, polys)
    assert sv.x == pytest.approx(0.5)
    assert sv.dydz == pytest.approx(0.5)


def test_react_vertex_fix():
    result = react_vertex_fix([0.01, -0.02, 0.0], 0.005)
    np.testing.assert_allclose(result, [0.015, -0.015, 0.005])


def test_react_vertex_fix_empty():
    assert react_vertex_fix([], 1.0).shape == (0,)