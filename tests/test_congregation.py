import pytest

from simchurch.simulation_layer.congregation import congregation
from simchurch.simulation_layer.congregation.member import CongregationMember
from simchurch.simulation_layer.congregation.member_generator import MemberGenerator
from simchurch.simulation_layer.models import AttendancePattern, GivingLevel
from simchurch.simulation_layer.random_utils import SimRandom
from simchurch.simulation_layer.state import GameState
from tests.conftest import ScriptedRandom, make_member


class RosterWatchingMember(CongregationMember):
    """Records who is on the roster whenever its tenure is read mid-pass."""

    def tenure(self, week: int) -> int:
        self.seen_rosters.append([m.id for m in self.state.congregation])
        return super().tenure(week)


class TestMemberGenerator:
    def test_initial_congregation_hits_target(self, rng, state):
        members = MemberGenerator(rng, state).generate_initial_congregation(50)
        assert len(members) == 50
        assert len({m.id for m in members}) == 50

    def test_empty_congregation(self, rng, state):
        assert MemberGenerator(rng, state).generate_initial_congregation(0) == []

    def test_family_shares_id_and_surname(self, rng, state):
        family = MemberGenerator(rng, state).generate_family()
        assert 1 <= len(family) <= 5
        assert len({m.family_id for m in family}) == 1
        assert len({m.name.split()[-1] for m in family}) == 1
        for member in family:
            if member.age < 18:
                assert member.giving_level == GivingLevel.NON_GIVER
            assert member.attendance_pattern == AttendancePattern.REGULAR

    def test_minors_never_give(self, rng, state):
        generator = MemberGenerator(rng, state)
        assert all(generator.generate_giving_level(12) == GivingLevel.NON_GIVER for _ in range(20))

    def test_new_member_has_not_attended(self, rng, state):
        member = MemberGenerator(rng, state).generate_member()
        assert member.last_attended_week is None
        assert member.total_attendance == 0
        assert member.joined_week == state.week
        assert 1 <= len(member.interests) <= 3


class TestWeeklyBehaviors:
    def test_roster_conservation(self, rng, state):
        state.congregation = MemberGenerator(rng, state).generate_initial_congregation(50)
        for _ in range(12):
            before = len(state.congregation)
            results = congregation.process_weekly_behaviors(state, rng)
            assert len(state.congregation) == before - results.departures + results.new_visitors
            assert not any(m.departed for m in state.congregation)
            state.advance_week()

    def test_visitor_conversion_is_counted(self, state):
        state.week = 5
        visitor = make_member(
            "newcomer", joined_week=1, satisfaction=90, attendance_pattern=AttendancePattern.VISITOR
        )
        state.congregation = [visitor]

        results = congregation.process_weekly_behaviors(state, ScriptedRandom(default=0.5))

        assert results.conversions == 1
        assert results.departures == 0
        assert results.new_visitors == 0
        assert visitor.attendance_pattern == AttendancePattern.REGULAR
        assert state.congregation == [visitor]

    def test_departed_member_stays_listed_until_the_pass_ends(self, state):
        state.week = 5
        leaver = make_member(
            "leaver", joined_week=1, satisfaction=40, attendance_pattern=AttendancePattern.VISITOR
        )
        watcher = RosterWatchingMember(id="watcher", name="Wanda Watts", age=40, joined_week=1,
                                       attendance_pattern=AttendancePattern.REGULAR)
        watcher.state = state
        watcher.seen_rosters = []
        state.congregation = [leaver, watcher]

        results = congregation.process_weekly_behaviors(state, ScriptedRandom(default=0.5))

        assert leaver.departed
        assert watcher.seen_rosters
        assert all(roster == ["leaver", "watcher"] for roster in watcher.seen_rosters)
        assert results.departures == 1
        assert [m.id for m in state.congregation] == ["watcher"]

    def test_walk_ins_count_as_attending(self):
        total_visitors = 0
        for seed in range(20):
            state = GameState()
            state.stats.reputation = 100
            results = congregation.process_weekly_behaviors(state, SimRandom(seed))

            assert results.attended_this_week == results.new_visitors == len(state.congregation)
            assert all(m.attended_in(state.week) for m in state.congregation)
            total_visitors += results.new_visitors
        assert total_visitors > 0

    def test_satisfied_member_invites_a_friend(self, state):
        host = make_member("member_host", age=40, satisfaction=90)
        state.congregation = [host]
        generator = MemberGenerator(ScriptedRandom(default=0.5), state)

        invited = congregation.process_invitations(state, ScriptedRandom([0.01]), generator)

        assert len(invited) == 1
        assert invited[0].invited_by == "member_host"
        assert invited[0].attendance_pattern == AttendancePattern.VISITOR
        assert invited[0].last_attended_week is None

    def test_departed_and_young_members_do_not_invite(self, state):
        state.congregation = [
            make_member("gone", age=40, satisfaction=95, departed=True),
            make_member("teen", age=15, satisfaction=95),
            make_member("visitor", age=40, satisfaction=95, attendance_pattern=AttendancePattern.VISITOR),
        ]
        generator = MemberGenerator(ScriptedRandom(), state)
        assert congregation.process_invitations(state, ScriptedRandom(default=0.0), generator) == []

    def test_visitor_chance_follows_reputation(self):
        assert congregation.visitor_chance(50) == pytest.approx(0.3)
        assert congregation.visitor_chance(80) == pytest.approx(0.6)


class TestGiving:
    def test_empty_congregation_gives_nothing(self, rng, state):
        assert congregation.calculate_weekly_giving(state, rng) == 0

    def test_only_attendees_give(self, state):
        state.congregation = [
            make_member("a", giving_level=GivingLevel.TITHER, satisfaction=100, last_attended_week=1),
            make_member("b", giving_level=GivingLevel.TITHER, satisfaction=100, last_attended_week=None),
            make_member("c", giving_level=GivingLevel.NON_GIVER, satisfaction=100, last_attended_week=1),
        ]
        assert congregation.calculate_weekly_giving(state, ScriptedRandom(default=0.0)) == 25

    def test_gift_scales_with_satisfaction(self, state):
        state.congregation = [
            make_member("a", giving_level=GivingLevel.TITHER, satisfaction=50, last_attended_week=3),
        ]
        assert congregation.calculate_weekly_giving(state, ScriptedRandom(default=0.0), service_week=3) == 13


class TestQueries:
    def test_stats_for_empty_roster(self, state):
        stats = congregation.get_stats(state)
        assert stats["total"] == 0
        assert stats["avg_satisfaction"] == 0

    def test_stats_breakdown(self, rng, state):
        state.congregation = MemberGenerator(rng, state).generate_initial_congregation(30)
        stats = congregation.get_stats(state)
        assert stats["total"] == 30
        assert sum(stats["by_pattern"].values()) == 30
        assert sum(stats["by_age_group"].values()) == 30
        assert sum(stats["by_giving"].values()) == 30

    def test_sorting_and_filtering(self, state):
        state.congregation = [
            make_member("a", name="Carol King", satisfaction=50, age=60),
            make_member("b", name="Alice Baker", satisfaction=90, age=25),
            make_member("c", name="Bob Young", satisfaction=70, age=40,
                        attendance_pattern=AttendancePattern.VISITOR),
        ]

        by_name = congregation.get_members(state, sort_by="name")
        assert [m.id for m in by_name] == ["b", "c", "a"]

        by_satisfaction = congregation.get_members(state, sort_by="satisfaction", limit=2)
        assert [m.id for m in by_satisfaction] == ["b", "c"]

        visitors = congregation.get_members(state, pattern=AttendancePattern.VISITOR)
        assert [m.id for m in visitors] == ["c"]

        young_adults = congregation.get_members(state, age_group="young_adult")
        assert [m.id for m in young_adults] == ["b"]

    def test_unknown_sort_key(self, state):
        with pytest.raises(ValueError):
            congregation.get_members(state, sort_by="shoe_size")
