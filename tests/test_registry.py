"""Tests for the experiment registry."""

from rlbandit.registry import ExperimentRegistry


class TestExperimentRegistry:
    def test_register_and_lookup(self, run, clock, sql_session):
        async def scenario():
            async with sql_session() as db:
                registry = ExperimentRegistry(db, clock)
                await registry.register("exp1", "ab_tests", "Homepage hero")
                return (
                    await registry.is_registered("exp1"),
                    await registry.get_owner("exp1"),
                    await registry.get_experiment_name("exp1"),
                    await registry.get("exp1"),
                )

        registered, owner, name, experiment = run(scenario())
        assert registered is True
        assert owner == "ab_tests"
        assert name == "Homepage hero"
        assert experiment.registered_at == clock.now

    def test_unknown_experiment(self, run, clock, sql_session):
        async def scenario():
            async with sql_session() as db:
                registry = ExperimentRegistry(db, clock)
                return (
                    await registry.is_registered("nope"),
                    await registry.get_owner("nope"),
                    await registry.get_experiment_name("nope"),
                    await registry.get("nope"),
                )

        assert run(scenario()) == (False, None, None, None)

    def test_reregister_keeps_name_when_none_given(self, run, clock, sql_session):
        async def scenario():
            async with sql_session() as db:
                registry = ExperimentRegistry(db, clock)
                await registry.register("exp1", "old_module", "Hero")
                clock.advance(10)
                await registry.register("exp1", "new_module")
                return await registry.get("exp1")

        experiment = run(scenario())
        assert experiment.module == "new_module"
        assert experiment.experiment_name == "Hero"
        assert experiment.registered_at == clock.now

    def test_reregister_replaces_name(self, run, clock, sql_session):
        async def scenario():
            async with sql_session() as db:
                registry = ExperimentRegistry(db, clock)
                await registry.register("exp1", "mod", "Old")
                await registry.register("exp1", "mod", "New")
                return await registry.get_experiment_name("exp1")

        assert run(scenario()) == "New"

    def test_get_all_newest_first(self, run, clock, sql_session):
        async def scenario():
            async with sql_session() as db:
                registry = ExperimentRegistry(db, clock)
                await registry.register("first", "mod_a")
                clock.advance(5)
                await registry.register("second", "mod_b")
                return await registry.get_all(), await registry.list_experiments()

        mapping, experiments = run(scenario())
        assert list(mapping.items()) == [("second", "mod_b"), ("first", "mod_a")]
        assert [e.experiment_id for e in experiments] == ["second", "first"]
