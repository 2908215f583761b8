import json

import pytest

from simchurch.data_layer.save_store import SaveStore
from simchurch.simulation_layer.engine import ChurchSimulation


class TestSaveStore:
    def test_round_trip(self, store):
        assert store.save("slot_1", {"week": 3, "news": ["a"]})
        assert store.exists("slot_1")
        assert store.load("slot_1") == {"week": 3, "news": ["a"]}
        assert store.list_slots() == ["slot_1"]

    def test_invalid_slot_names(self, store):
        assert not store.save("../escape", {})
        assert not store.save("", {})
        assert store.load("../escape") is None
        assert not store.exists("a/b")

    def test_missing_slot(self, store):
        assert store.load("nothing_here") is None
        assert not store.delete("nothing_here")

    def test_corrupt_file(self, tmp_path):
        store = SaveStore(tmp_path)
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        assert store.load("broken") is None

    def test_non_object_payload(self, tmp_path):
        store = SaveStore(tmp_path)
        (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
        assert store.load("list") is None

    def test_delete(self, store):
        store.save("gone", {"week": 1})
        assert store.delete("gone")
        assert not store.exists("gone")

    def test_no_temp_file_left_behind(self, tmp_path):
        store = SaveStore(tmp_path)
        store.save("clean", {"week": 1})
        assert sorted(p.name for p in tmp_path.iterdir()) == ["clean.json"]


class TestGamePersistence:
    def test_save_and_load(self, simulation, settings, store):
        simulation.run_weeks(6)
        simulation.set_policy("worshipStyle", "contemporary")
        assert simulation.save("game_a")

        restored = ChurchSimulation(settings=settings, store=store)
        assert restored.has_saved_game("game_a")
        assert restored.load("game_a")
        assert restored.state.to_dict() == simulation.state.to_dict()

    def test_default_slot(self, simulation, settings):
        assert not simulation.has_saved_game()
        assert simulation.save()
        assert simulation.has_saved_game(settings.api.save_slot)

    def test_loading_missing_slot_keeps_game(self, simulation):
        simulation.process_week()
        assert not simulation.load("never_saved")
        assert simulation.state.week == 2

    def test_invalid_policies_are_refused(self, simulation, store):
        payload = simulation.state.to_dict()
        payload["policies"]["worshipStyle"] = "silentDisco"
        store.save("tampered", payload)

        assert not simulation.load("tampered")
        assert simulation.state.policies["worshipStyle"] == "blended"

    def test_malformed_state_is_refused(self, simulation, store):
        store.save("partial", {"week": 9})
        assert not simulation.load("partial")
        assert simulation.state.week == 1

    def test_saved_file_is_plain_json(self, simulation, store):
        simulation.process_week()
        simulation.save("plain")
        data = json.loads((store.save_dir / "plain.json").read_text(encoding="utf-8"))
        assert data["week"] == 2
        assert set(data["stats"]) == {
            "attendance", "budget", "reputation", "congregation_morale", "spiritual_health", "community_outreach",
        }
        assert data["congregation"][0]["attendance_pattern"] in {"visitor", "sporadic", "regular", "dedicated"}

    @pytest.mark.parametrize(
        "path, value",
        [
            (("policies", "worshipStyle"), ["blended"]),
            (("week",), "3"),
            (("stats", "budget"), "5000"),
            (("congregation", 0, "satisfaction"), "high"),
            (("congregation", 0, "attendance_pattern"), "lurker"),
        ],
    )
    def test_mistyped_fields_are_refused(self, simulation, store, path, value):
        simulation.process_week()
        payload = simulation.state.to_dict()
        target = payload
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = value
        store.save("mistyped", payload)

        assert not simulation.load("mistyped")
        assert simulation.state.week == 2
        simulation.process_week()
        assert simulation.state.week == 3
