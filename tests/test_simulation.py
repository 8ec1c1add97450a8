"""Tests for zombiegrid.simulation — engine and config loading."""

from pathlib import Path

import numpy as np
import pytest

from zombiegrid.simulation.config import SimulationConfig
from zombiegrid.simulation.engine import SimulationEngine
from zombiegrid.world.cell import STAY, Status
from zombiegrid.world.world import World


def grid_state(world: World) -> list[tuple]:
    return [
        (
            c.status,
            c.population,
            c.direction,
            c.smell_human,
            c.smell_zombie,
            c.altitude,
            c.temperature,
        )
        for c in world.iter_cells()
    ]


class TestSimulationConfig:
    """Tests for YAML config loading and validation."""

    def test_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.seed == 42
        assert cfg.world_width == 150
        assert cfg.world_height == 100
        assert cfg.human_population == (50, 150)
        assert cfg.zombie_population == (1, 10)
        cfg.validate()

    def test_weights_by_status(self) -> None:
        weights = SimulationConfig().weights_by_status
        assert weights == {Status.EMPTY: 2.0, Status.ZOMBIE: 1.0, Status.HUMAN: 1.0}

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text(
            "seed: 99\n"
            "world_width: 16\n"
            "world_height: 12\n"
            "human_population: [60, 70]\n"
            "status_weights:\n"
            "  empty: 0\n"
            "  human: 1\n"
            "workers: 3\n"
        )
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.world_width == 16
        assert cfg.human_population == (60, 70)
        assert cfg.zombie_population == (1, 10)
        assert cfg.weights_by_status[Status.ZOMBIE] == 0.0
        assert cfg.workers == 3
        cfg.validate()

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert SimulationConfig.from_yaml(yaml_file) == SimulationConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_yaml(tmp_path / "nope.yaml")

    def test_default_yaml_matches_defaults(self) -> None:
        path = Path(__file__).resolve().parent.parent / "config" / "default.yaml"
        assert SimulationConfig.from_yaml(path) == SimulationConfig()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"world_width": 1, "world_height": 1},
            {"world_width": 0},
            {"terrain_octaves": 0},
            {"terrain_scale": 0.0},
            {"min_temperature": 50},
            {"status_weights": {"goblin": 1}},
            {"status_weights": {"empty": 0, "human": 0, "zombie": 0}},
            {"human_population": (10, 5)},
            {"zombie_population": (0, 5)},
            {"workers": 0},
            {"batch_rows": 0},
        ],
    )
    def test_validate_rejects(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            SimulationConfig(**overrides).validate()


class TestSimulationEngine:
    """Tests for the tick loop."""

    def test_engine_initialises(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        assert engine.tick == 0
        assert engine.current.width == small_config.world_width
        assert engine.current.height == small_config.world_height

    def test_initial_placement_within_ranges(
        self,
        small_config: SimulationConfig,
    ) -> None:
        engine = SimulationEngine(config=small_config)
        for cell in engine.current.iter_cells():
            assert cell.direction == STAY
            if cell.is_human:
                assert 50 <= cell.population <= 150
            elif cell.is_zombie:
                assert 1 <= cell.population <= 10

    def test_invalid_config_rejected(self) -> None:
        with pytest.raises(ValueError):
            SimulationEngine(config=SimulationConfig(workers=0))

    def test_step_advances_tick(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        engine.step()
        assert engine.tick == 1

    def test_run_multiple_ticks(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        engine.run(ticks=10)
        assert engine.tick == 10

    def test_step_publishes_new_buffer(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        before = engine.current
        before_state = grid_state(before)
        engine.step()
        assert engine.current is not before
        # The previous tick's buffer is left intact until the next step
        assert grid_state(before) == before_state

    def test_terrain_is_static(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        terrain = [(c.altitude, c.temperature) for c in engine.current.iter_cells()]
        engine.run(ticks=5)
        assert [
            (c.altitude, c.temperature) for c in engine.current.iter_cells()
        ] == terrain

    def test_invariants_hold_every_tick(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        for _ in range(15):
            engine.step()
            for cell in engine.current.iter_cells():
                assert (cell.population == 0) == (cell.status is Status.EMPTY)
                assert 0 <= cell.direction <= STAY
                assert cell.smell_human >= 0
                assert cell.smell_zombie >= 0
                if cell.is_empty:
                    assert cell.direction == STAY

    def test_determinism(self, small_config: SimulationConfig) -> None:
        """Same seed must produce identical state after N ticks."""
        engine_a = SimulationEngine(config=small_config)
        engine_a.run(ticks=20)
        engine_b = SimulationEngine(config=small_config)
        engine_b.run(ticks=20)
        assert grid_state(engine_a.current) == grid_state(engine_b.current)

    def test_threaded_matches_serial(self, small_config: SimulationConfig) -> None:
        serial = SimulationEngine(config=small_config)
        serial.run(ticks=12)

        threaded_cfg = SimulationConfig(
            seed=small_config.seed,
            world_width=small_config.world_width,
            world_height=small_config.world_height,
            terrain_octaves=small_config.terrain_octaves,
            terrain_scale=small_config.terrain_scale,
            workers=4,
            batch_rows=3,
        )
        with SimulationEngine(config=threaded_cfg) as threaded:
            threaded.run(ticks=12)
            assert grid_state(threaded.current) == grid_state(serial.current)

    def test_failed_tick_is_discarded(
        self,
        small_config: SimulationConfig,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from zombiegrid.simulation import engine as engine_module

        engine = SimulationEngine(config=small_config)
        engine.run(ticks=2)
        published = engine.current
        state = grid_state(published)

        def explode(cell, neighbours):
            raise RuntimeError("boom")

        monkeypatch.setattr(engine_module, "next_state", explode)
        with pytest.raises(RuntimeError, match="boom"):
            engine.step()
        assert engine.tick == 2
        assert engine.current is published
        assert grid_state(engine.current) == state

    def test_failed_threaded_tick_is_discarded(
        self,
        small_config: SimulationConfig,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from zombiegrid.simulation import engine as engine_module

        small_config.workers = 2
        small_config.batch_rows = 2
        with SimulationEngine(config=small_config) as engine:
            published = engine.current

            def explode(cell, neighbours):
                raise RuntimeError("boom")

            monkeypatch.setattr(engine_module, "next_state", explode)
            with pytest.raises(RuntimeError):
                engine.step()
            assert engine.tick == 0
            assert engine.current is published

    def test_snapshot_and_census(self, small_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=small_config)
        engine.step()
        snap = engine.snapshot()
        census = engine.census()
        expected_shape = (small_config.world_height, small_config.world_width)
        assert snap.status.shape == expected_shape
        assert int(snap.population[snap.status == Status.HUMAN.value].sum()) == (
            census.humans
        )
        assert int(np.count_nonzero(snap.status == Status.EMPTY.value)) == (
            census.empty_cells
        )
        assert not snap.population.flags.writeable

    def test_close_is_idempotent(self, small_config: SimulationConfig) -> None:
        small_config.workers = 2
        engine = SimulationEngine(config=small_config)
        engine.close()
        engine.close()
