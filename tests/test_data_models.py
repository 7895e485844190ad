import numpy as np
import pytest

from npendulum.data_models import (
    RenderConfig,
    SimulationParams,
    TrajectoryDataset,
    default_angle,
)
from npendulum.errors import DatasetError
from npendulum.utils import clamp_body_count, needs_confirmation, parse_csv_floats


def test_dataset_from_payload():
    ds = TrajectoryDataset.from_payload({"n": 2, "limit": 2.5, "positions": [[0, -1, 0, -2], [1, 0, 1, -1]]})
    assert ds.body_count == 2
    assert ds.spatial_limit == 2.5
    assert ds.frame_count == 2
    assert ds.body_position(1, 1) == (1.0, -1.0)
    assert ds.body_path(0, 0, 1).tolist() == [[0.0, -1.0], [1.0, 0.0]]


def test_dataset_is_read_only():
    ds = TrajectoryDataset.from_payload({"n": 1, "limit": 1, "positions": [[0, 0]]})
    with pytest.raises(ValueError):
        ds.frames[0, 0] = 5.0


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"n": 1, "limit": 1.0, "positions": []},
        {"n": 1, "limit": 1.0},
        {"n": 2, "limit": 1.0, "positions": [[0, 0]]},
        {"n": 1, "limit": 1.0, "positions": [[0, 0], [0, 0, 0]]},
        {"n": 1, "limit": 1.0, "positions": [[0, "x"]]},
        {"n": 1, "limit": 1.0, "positions": [[0, float("nan")]]},
        {"n": 0, "limit": 1.0, "positions": [[]]},
        {"n": 1.5, "limit": 1.0, "positions": [[0, 0]]},
        {"n": 1, "limit": "wide", "positions": [[0, 0]]},
        {"n": float("inf"), "limit": 1.0, "positions": [[0, 0]]},
        {"n": 1, "limit": 10 ** 400, "positions": [[0, 0]]},
        {"n": 1, "limit": 1.0, "positions": 5},
        {"n": 1, "limit": 1.0, "positions": {"x": 0}},
    ],
)
def test_malformed_payload_rejected(payload):
    with pytest.raises(DatasetError):
        TrajectoryDataset.from_payload(payload)


def test_zero_limit_is_accepted_as_data():
    # degenerate geometry is handled by the renderers, not at load time
    ds = TrajectoryDataset.from_payload({"n": 1, "limit": 0, "positions": [[0, 0]]})
    assert ds.spatial_limit == 0.0


def test_palette_wraps():
    cfg = RenderConfig()
    assert cfg.color_for(0) == cfg.color_for(len(cfg.palette))
    assert cfg.color_for(1) == (214, 39, 40)


def test_default_params_and_payload():
    params = SimulationParams.with_defaults(3, t_max=10.0, n_points=50)
    assert [default_angle(i) for i in range(4)] == [90.0, 45.0, 0.0, 0.0]
    payload = params.to_payload()
    assert payload == {
        "n": 3,
        "masses": "1.0,1.0,1.0",
        "lengths": "1.0,1.0,1.0",
        "initial_angles": "90.0,45.0,0.0",
        "t_max": 10.0,
        "n_points": 50,
    }


@pytest.mark.parametrize("raw,expected", [(0, 1), (-4, 1), (1, 1), (20, 20), (150, 150), (151, 150), ("7", 7), ("", 2), (None, 2)])
def test_clamp_body_count(raw, expected):
    assert clamp_body_count(raw) == expected


def test_parse_csv_floats_drops_garbage():
    assert parse_csv_floats("1, 2.5,x,,3") == [1.0, 2.5, 3.0]


@pytest.mark.parametrize("n,expected", [(1, False), (20, False), (21, True), (150, True)])
def test_large_chains_need_confirmation(n, expected):
    assert needs_confirmation(n) is expected
