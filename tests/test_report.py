"""Tests for experiment report data."""

import math

import pytest

from rlbandit.core.exceptions import ExperimentNotFoundError, InvalidArmStatsError
from rlbandit.registry import ExperimentRegistry
from rlbandit.stats.report import experiment_detail, experiment_overview
from rlbandit.storage.memory import InMemoryArmStatsStore
from rlbandit.storage.sql import SqlArmStatsStore


async def seed(store, experiment_id, arm_id, turns, rewards):
    for _ in range(turns):
        await store.increment_turn(experiment_id, arm_id)
    for _ in range(rewards):
        await store.increment_reward(experiment_id, arm_id)


class TestExperimentDetail:
    def test_per_arm_numbers(self, run, clock):
        store = InMemoryArmStatsStore(clock)

        async def scenario():
            await seed(store, "exp1", "a", 10, 4)
            clock.advance(5)
            await seed(store, "exp1", "b", 90, 9)
            return await experiment_detail(store, "exp1", n_samples=20_000)

        report = run(scenario())
        assert report.experiment_id == "exp1"
        assert report.experiment_name is None
        assert report.total_turns == 100
        assert report.total_arms == 2
        # Most recently updated arm first
        assert [arm.arm_id for arm in report.arms] == ["b", "a"]

        b, a = report.arms
        assert a.success_rate == pytest.approx(0.4)
        assert a.ucb1_score == pytest.approx(0.4 + math.sqrt(2.0 * math.log(100) / 10))
        assert a.posterior_mean == pytest.approx(5 / 12)
        low, high = a.credible_interval
        assert low < a.posterior_mean < high
        assert a.probability_best > b.probability_best
        assert a.probability_best + b.probability_best == pytest.approx(1.0)

    def test_report_is_reproducible(self, run, clock):
        store = InMemoryArmStatsStore(clock)
        run(seed(store, "exp1", "a", 20, 5))
        run(seed(store, "exp1", "b", 20, 7))
        assert run(experiment_detail(store, "exp1")) == run(experiment_detail(store, "exp1"))

    def test_arm_without_rewards(self, run, clock):
        store = InMemoryArmStatsStore(clock)
        run(store.increment_turn("exp1", "a"))
        report = run(experiment_detail(store, "exp1"))
        assert report.arms[0].success_rate == 0.0

    def test_unknown_experiment(self, run, clock):
        with pytest.raises(ExperimentNotFoundError, match='Experiment "nope" not found.'):
            run(experiment_detail(InMemoryArmStatsStore(clock), "nope"))

    def test_invalid_stored_counters(self, run, clock):
        store = InMemoryArmStatsStore(clock)
        run(store.increment_reward("exp1", "a"))
        with pytest.raises(InvalidArmStatsError):
            run(experiment_detail(store, "exp1"))

    def test_name_from_registry(self, run, clock, sql_session):
        async def scenario():
            async with sql_session() as db:
                store = SqlArmStatsStore(db, clock)
                registry = ExperimentRegistry(db, clock)
                await registry.register("exp1", "ab_tests", "Checkout button")
                await seed(store, "exp1", "a", 3, 1)
                return await experiment_detail(store, "exp1", registry=registry)

        report = run(scenario())
        assert report.experiment_name == "Checkout button"
        assert report.arms[0].turns == 3


class TestExperimentOverview:
    def test_rows_for_registered_experiments(self, run, clock, sql_session):
        registered_at = clock.now

        async def scenario():
            async with sql_session() as db:
                store = SqlArmStatsStore(db, clock)
                registry = ExperimentRegistry(db, clock)
                await registry.register("idle", "mod_a", "Idle test")
                clock.advance(10)
                await registry.register("busy", "mod_b")
                clock.advance(10)
                await store.increment_turns("busy", ["x", "y"])
                await store.increment_turn("busy", "x")
                # Traffic for an unregistered experiment is not listed
                await store.increment_turn("stray", "x")
                return await experiment_overview(store, registry)

        rows = run(scenario())
        assert [row.experiment_id for row in rows] == ["busy", "idle"]

        busy, idle = rows
        assert busy.module == "mod_b"
        assert busy.total_turns == 3
        assert busy.total_arms == 2
        assert busy.last_activity == registered_at + 20

        assert idle.experiment_name == "Idle test"
        assert idle.total_turns == 0
        assert idle.total_arms == 0
        assert idle.last_activity == registered_at

    def test_no_experiments(self, run, clock, sql_session):
        async def scenario():
            async with sql_session() as db:
                return await experiment_overview(SqlArmStatsStore(db, clock), ExperimentRegistry(db, clock))

        assert run(scenario()) == []
