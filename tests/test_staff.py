from simchurch.simulation_layer.models import NewsType, RejectionKind
from simchurch.simulation_layer.staff import candidate_generator, staff_manager
from simchurch.simulation_layer.staff.positions import GENERAL_SKILLS, POSITIONS
from simchurch.simulation_layer.staff.staff_member import StaffMember
from simchurch.simulation_layer.staff.traits import TRAITS, generate_random_traits


def make_staff(staff_id, position_id="associatePastor", skill=10, traits=(), morale=80, salary=800):
    position = POSITIONS[position_id]
    skills = {s: skill for s in (position.primary_skill, position.secondary_skill) + GENERAL_SKILLS}
    return StaffMember(
        id=staff_id,
        name=f"Staff {staff_id}",
        position_id=position_id,
        position=position.title,
        skills=skills,
        traits=list(traits),
        salary=salary,
        hired_week=1,
        morale=morale,
    )


class TestCandidateGenerator:
    def test_candidate_shape(self, rng, state):
        candidate = candidate_generator.generate_candidate(state, "worshipLeader", rng, expiry_weeks=3)
        position = POSITIONS["worshipLeader"]

        assert candidate.position == position.title
        assert set(candidate.skills) == {position.primary_skill, position.secondary_skill, *GENERAL_SKILLS}
        assert 5 <= candidate.skills[position.primary_skill] <= 10
        assert candidate.salary_expectation % 25 == 0
        assert candidate.expires_week == state.week + 3
        assert 1 <= len(candidate.traits) <= 2
        assert candidate.backstory

    def test_weekly_candidates_only_for_open_positions(self, rng, state):
        state.stats.attendance = 10
        for _ in range(30):
            for candidate in candidate_generator.generate_weekly_candidates(state, rng):
                assert POSITIONS[candidate.position_id].unlock_at_attendance <= 10

    def test_no_open_positions(self, rng, state):
        state.stats.attendance = 10
        state.staff = [make_staff(f"s{i}", pid) for i, pid in enumerate(["associatePastor"] * 2 + ["adminAssistant"] * 2)]
        assert candidate_generator.available_positions(state) == []
        for _ in range(10):
            assert candidate_generator.generate_weekly_candidates(state, rng) == []

    def test_traits_are_distinct(self, rng):
        for _ in range(50):
            traits = generate_random_traits(rng)
            assert len(traits) == len(set(traits))
            assert all(t in TRAITS for t in traits)


class TestHiring:
    def test_hire_moves_candidate_to_staff(self, rng, state):
        candidate = candidate_generator.generate_candidate(state, "associatePastor", rng)
        state.candidates.append(candidate)

        result = staff_manager.hire_candidate(state, candidate.id)

        assert result.success
        assert state.candidates == []
        hired = state.staff[0]
        assert hired.salary == candidate.salary_expectation
        assert hired.hired_week == state.week
        assert state.news[-1].type == NewsType.POSITIVE

    def test_hire_unknown_candidate(self, state):
        result = staff_manager.hire_candidate(state, "candidate_404")
        assert not result.success
        assert result.rejection == RejectionKind.NOT_FOUND

    def test_hire_respects_position_cap(self, rng, state):
        first = candidate_generator.generate_candidate(state, "youthPastor", rng)
        second = candidate_generator.generate_candidate(state, "youthPastor", rng)
        state.candidates.extend([first, second])

        assert staff_manager.hire_candidate(state, first.id).success
        result = staff_manager.hire_candidate(state, second.id)

        assert result.rejection == RejectionKind.VALIDATION
        assert "only have one" in result.message
        assert second in state.candidates
        assert len(state.staff) == 1

    def test_fire_lowers_colleague_morale(self, state):
        state.staff = [make_staff("a"), make_staff("b", morale=3)]
        result = staff_manager.fire_staff(state, "a")

        assert result.success
        assert [s.id for s in state.staff] == ["b"]
        assert state.staff[0].morale == 0

    def test_fire_unknown(self, state):
        assert staff_manager.fire_staff(state, "nobody").rejection == RejectionKind.NOT_FOUND

    def test_pass_on_candidate(self, rng, state):
        candidate = candidate_generator.generate_candidate(state, "adminAssistant", rng)
        state.candidates.append(candidate)
        assert staff_manager.pass_on_candidate(state, candidate.id).success
        assert state.candidates == []
        assert not staff_manager.pass_on_candidate(state, candidate.id).success

    def test_expired_candidates_are_removed(self, rng, state):
        state.week = 5
        expiring = candidate_generator.generate_candidate(state, "adminAssistant", rng, expiry_weeks=0)
        fresh = candidate_generator.generate_candidate(state, "adminAssistant", rng, expiry_weeks=1)
        state.candidates = [expiring, fresh]

        assert staff_manager.remove_expired_candidates(state) == 1
        assert state.candidates == [fresh]


class TestStaffEffects:
    def test_no_staff(self, state):
        effects = staff_manager.calculate_staff_effects(state)
        assert (effects.attendance_bonus, effects.reputation_bonus, effects.morale_bonus) == (0, 0, 0)

    def test_full_skill_gives_base_bonus(self, state):
        state.staff = [make_staff("a", skill=10)]
        effects = staff_manager.calculate_staff_effects(state)
        assert effects.attendance_bonus == 5
        assert effects.reputation_bonus == 2
        assert effects.morale_bonus == 3

    def test_bonus_scales_with_skill(self, state):
        state.staff = [make_staff("a", skill=5)]
        effects = staff_manager.calculate_staff_effects(state)
        assert effects.attendance_bonus == 3
        assert effects.morale_bonus == 2

    def test_traits_adjust_team_morale(self, state):
        state.staff = [make_staff("a", traits=["cheerful"]), make_staff("b", traits=["difficult"], skill=10)]
        effects = staff_manager.calculate_staff_effects(state)
        assert effects.morale_bonus == 3 + 3 + 5 - 5

    def test_total_salaries(self, state):
        state.staff = [make_staff("a", salary=800), make_staff("b", salary=450)]
        assert staff_manager.calculate_total_salaries(state) == 1250
