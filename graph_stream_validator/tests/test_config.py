"""Tests for ValidatorConfig."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import pytest

from graph_stream_validator.models.config import ValidatorConfig


def test_config_defaults() -> None:
    c = ValidatorConfig()
    assert c.batch_capacity == 1024
    assert c.progress_every_batches == 10000
    assert c.progress_interval == 1024 * 10000
    assert c.dense_vertex_limit == 1 << 16
    assert c.max_overrun is None
    assert c.max_empty_batches is None
    assert c.max_findings is None


def test_config_is_frozen() -> None:
    c = ValidatorConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.batch_capacity = 5  # type: ignore[misc]


def test_config_replace() -> None:
    c = dataclasses.replace(ValidatorConfig(), batch_capacity=16, max_overrun=0)
    assert c.batch_capacity == 16
    assert c.max_overrun == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"batch_capacity": 0},
        {"progress_every_batches": -1},
        {"dense_vertex_limit": -1},
        {"max_overrun": -3},
        {"max_findings": -1},
    ],
)
def test_config_rejects_bad_values(kwargs) -> None:
    with pytest.raises(ValueError):
        ValidatorConfig(**kwargs)


def test_config_dict_round_trip() -> None:
    c = ValidatorConfig(batch_capacity=7, max_findings=100)
    d = c.to_dict()
    assert json.loads(json.dumps(d)) == d
    assert ValidatorConfig.from_dict(d) == c


def test_config_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="bogus"):
        ValidatorConfig.from_dict({"bogus": 1})


def test_config_from_json(tmp_path: Path) -> None:
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"batch_capacity": 32, "max_overrun": 100}), encoding="utf-8")
    c = ValidatorConfig.from_json(p)
    assert c.batch_capacity == 32
    assert c.max_overrun == 100
    assert c.progress_every_batches == 10000


def test_config_from_json_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ValidatorConfig.from_json(tmp_path / "missing.json")
    p = tmp_path / "list.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        ValidatorConfig.from_json(p)
