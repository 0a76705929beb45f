"""
Unit tests for RankingService.

Tests aggregation (mean of judge totals), ordering and tie-breaking,
exclusion rules, scope filters and medal tiers.
"""

import pytest

from backend.src.services.exceptions import ValidationError
from backend.src.services.performance_service import PerformanceService
from backend.src.services.ranking_service import RankingService, medal_for_percentage


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def ranking_service(test_db_session):
    """Create a RankingService instance for testing."""
    return RankingService(test_db_session)


@pytest.fixture
def judges(sample_judge):
    """Three judges."""
    return [sample_judge() for _ in range(3)]


# ============================================================================
# Medal Tier Tests
# ============================================================================


class TestMedalTiers:
    """Tests for the percentage-to-medal mapping."""

    @pytest.mark.parametrize("percentage,medal", [
        (100.0, "elite"),
        (95.0, "elite"),
        (94.9, "opus"),
        (90.0, "opus"),
        (85.0, "legend"),
        (80.0, "gold"),
        (79.99, "silver_plus"),
        (75.0, "silver_plus"),
        (70.0, "silver"),
        (69.9, "bronze"),
        (0.0, "bronze"),
    ])
    def test_thresholds(self, percentage, medal):
        """Test each threshold is inclusive."""
        assert medal_for_percentage(percentage) == medal


# ============================================================================
# Ranking Tests
# ============================================================================


class TestCalculateRankings:
    """Tests for ranking computation."""

    def test_orders_by_aggregate(
        self, ranking_service, sample_performance, sample_score, judges
    ):
        """Test higher aggregates rank first with strictly increasing ranks."""
        low = sample_performance(item_number=1)
        high = sample_performance(item_number=2)
        sample_score(judges[0], low, total=70)
        sample_score(judges[0], high, total=90)

        rankings = ranking_service.calculate_rankings()

        assert [r.performance_id for r in rankings] == [high.guid, low.guid]
        assert [r.rank for r in rankings] == [1, 2]

    def test_aggregate_is_mean_not_sum(
        self, ranking_service, sample_performance, sample_score, judges
    ):
        """Test more judges do not inflate the aggregate."""
        three_judges = sample_performance(item_number=1)
        one_judge = sample_performance(item_number=2)
        for judge in judges:
            sample_score(judge, three_judges, total=80)
        sample_score(judges[0], one_judge, total=85)

        rankings = ranking_service.calculate_rankings()

        assert rankings[0].performance_id == one_judge.guid
        assert rankings[0].total_score == 85.0
        assert rankings[1].total_score == 80.0
        assert rankings[1].judge_count == 3
        assert rankings[1].average_score == 16.0

    def test_tie_broken_by_item_number(
        self, ranking_service, sample_performance, sample_score, judges
    ):
        """Test equal aggregates rank the lower item number first."""
        b = sample_performance(item_number=2, title="B")
        a = sample_performance(item_number=1, title="A")
        sample_score(judges[0], a, total=88)
        sample_score(judges[0], b, total=88)

        rankings = ranking_service.calculate_rankings()

        assert [r.title for r in rankings] == ["A", "B"]
        assert [r.rank for r in rankings] == [1, 2]

    def test_tie_without_item_number_sorts_last(
        self, ranking_service, sample_performance, sample_score, judges
    ):
        """Test performances without an item number follow numbered ones."""
        unnumbered = sample_performance(item_number=None)
        numbered = sample_performance(item_number=40)
        sample_score(judges[0], unnumbered, total=75)
        sample_score(judges[0], numbered, total=75)

        rankings = ranking_service.calculate_rankings()

        assert [r.performance_id for r in rankings] == [numbered.guid, unnumbered.guid]

    def test_float_noise_does_not_break_ties(
        self, ranking_service, sample_performance, sample_score, judges
    ):
        """Test aggregates equal up to float noise tie on item number."""
        a = sample_performance(item_number=1)
        b = sample_performance(item_number=2)
        # 0.1 + 0.2 style noise in one of the sums
        sample_score(judges[0], a, technical_score=16.1, musical_score=16.2,
                     performance_score=16.0, styling_score=16.0,
                     overall_impression_score=16.0)
        sample_score(judges[0], b, technical_score=16.3, musical_score=16.0,
                     performance_score=16.0, styling_score=16.0,
                     overall_impression_score=16.0)

        rankings = ranking_service.calculate_rankings()

        assert [r.performance_id for r in rankings] == [a.guid, b.guid]

    def test_withdrawn_excluded(
        self, ranking_service, sample_performance, sample_score, judges
    ):
        """Test withdrawn performances are not ranked."""
        kept = sample_performance(item_number=1)
        withdrawn = sample_performance(item_number=2, withdrawn_from_judging=True)
        sample_score(judges[0], kept, total=70)
        sample_score(judges[0], withdrawn, total=99)

        rankings = ranking_service.calculate_rankings()

        assert [r.performance_id for r in rankings] == [kept.guid]

    def test_unscored_excluded(self, ranking_service, sample_performance, sample_score, judges):
        """Test performances without scores are not ranked."""
        scored = sample_performance(item_number=1)
        sample_performance(item_number=2)
        sample_score(judges[0], scored, total=70)

        rankings = ranking_service.calculate_rankings()

        assert len(rankings) == 1

    def test_withdraw_and_restore_keeps_scores(
        self, ranking_service, sample_performance, sample_score, judges, test_db_session
    ):
        """Test a restored performance ranks exactly as before."""
        performance = sample_performance(item_number=1)
        sample_score(judges[0], performance, total=92)
        sample_score(judges[1], performance, total=88)
        before = ranking_service.calculate_rankings()

        performance_service = PerformanceService(test_db_session)
        performance_service.set_withdrawal(performance.guid, "withdraw")
        assert ranking_service.calculate_rankings() == []

        performance_service.set_withdrawal(performance.guid, "restore")
        assert ranking_service.calculate_rankings() == before

    def test_percentage_and_medal(self, ranking_service, sample_performance, sample_score, judges):
        """Test the percentage and medal follow the aggregate."""
        performance = sample_performance(item_number=1)
        sample_score(judges[0], performance, total=95)
        sample_score(judges[1], performance, total=96)

        ranking = ranking_service.calculate_rankings()[0]

        assert ranking.percentage == 95.5
        assert ranking.medal == "elite"

    def test_medal_follows_rounded_percentage(
        self, ranking_service, sample_performance, sample_score, judges
    ):
        """Test a fractional aggregate that rounds up to a tier earns that tier."""
        performance = sample_performance(item_number=1)
        sample_score(judges[0], performance, total=69.96)

        ranking = ranking_service.calculate_rankings()[0]

        assert ranking.percentage == 70.0
        assert ranking.medal == "silver"

    def test_empty_result(self, ranking_service):
        """Test no performances gives an empty list."""
        assert ranking_service.calculate_rankings(region="Nowhere") == []


class TestRankingScopes:
    """Tests for per-scope rank numbering."""

    def test_ranks_restart_per_age_category(
        self, ranking_service, sample_event, sample_performance, sample_score, judges
    ):
        """Test each age category of a region has its own rank 1."""
        juniors = sample_event(name="Juniors", age_category="13-14")
        seniors = sample_event(name="Seniors", age_category="18-24")
        junior = sample_performance(event=juniors, item_number=1)
        senior_low = sample_performance(event=seniors, item_number=1)
        senior_high = sample_performance(event=seniors, item_number=2)
        sample_score(judges[0], junior, total=90)
        sample_score(judges[0], senior_low, total=80)
        sample_score(judges[0], senior_high, total=85)

        rankings = ranking_service.calculate_rankings(region="Gauteng")

        assert [(r.age_category, r.rank, r.performance_id) for r in rankings] == [
            ("13-14", 1, junior.guid),
            ("18-24", 1, senior_high.guid),
            ("18-24", 2, senior_low.guid),
        ]

    def test_ranks_restart_per_performance_type(
        self, ranking_service, sample_event, sample_performance, sample_score, judges
    ):
        """Test solos and duets are ranked separately."""
        duet = sample_performance(event=sample_event(name="Duets", performance_type="Duet"))
        solo = sample_performance(event=sample_event(name="Solos", performance_type="Solo"))
        sample_score(judges[0], duet, total=70)
        sample_score(judges[0], solo, total=95)

        rankings = ranking_service.calculate_rankings()

        assert [(r.performance_type, r.rank) for r in rankings] == [("Duet", 1), ("Solo", 1)]


class TestRankingFilters:
    """Tests for scope filters."""

    def test_region_filter_case_insensitive(
        self, ranking_service, sample_event, sample_performance, sample_score, judges
    ):
        """Test region matching ignores case."""
        gauteng = sample_performance(event=sample_event(name="G", region="Gauteng"))
        cape = sample_performance(event=sample_event(name="C", region="Western Cape"))
        sample_score(judges[0], gauteng, total=80)
        sample_score(judges[0], cape, total=80)

        rankings = ranking_service.calculate_rankings(region="GAUTENG")

        assert [r.performance_id for r in rankings] == [gauteng.guid]

    def test_age_and_type_use_entry_values(
        self, ranking_service, sample_event, sample_entry, sample_performance,
        sample_score, judges
    ):
        """Test entry overrides take precedence over event values."""
        event = sample_event(age_category="All Ages", performance_type="All")
        duet = sample_performance(entry=sample_entry(
            event=event, age_category="13-14", performance_type="Duet"
        ))
        solo = sample_performance(entry=sample_entry(
            event=event, age_category="13-14", performance_type="Solo"
        ))
        sample_score(judges[0], duet, total=80)
        sample_score(judges[0], solo, total=80)

        rankings = ranking_service.calculate_rankings(
            age_category="13-14", performance_type="duet"
        )

        assert [r.performance_id for r in rankings] == [duet.guid]
        assert rankings[0].performance_type == "Duet"

    def test_event_ids_intersect_with_filters(
        self, ranking_service, sample_event, sample_performance, sample_score, judges
    ):
        """Test explicit event ids narrow the other filters."""
        e1 = sample_event(name="E1", region="Gauteng")
        e2 = sample_event(name="E2", region="Gauteng")
        e3 = sample_event(name="E3", region="Free State")
        for event in (e1, e2, e3):
            sample_score(judges[0], sample_performance(event=event), total=80)

        rankings = ranking_service.calculate_rankings(
            region="Gauteng", event_ids=[e1.guid, e3.guid]
        )

        assert [r.event_id for r in rankings] == [e1.guid]

    def test_empty_event_ids(self, ranking_service, sample_performance, sample_score, judges):
        """Test an explicit empty event list matches nothing."""
        sample_score(judges[0], sample_performance(), total=80)

        assert ranking_service.calculate_rankings(event_ids=[]) == []

    def test_invalid_event_id(self, ranking_service):
        """Test malformed event ids are rejected."""
        with pytest.raises(ValidationError):
            ranking_service.calculate_rankings(event_ids=["prf_01hg02bbg00000000000000002"])


class TestEventsWithScores:
    """Tests for the scored-events listing."""

    def test_lists_only_scored_events(
        self, ranking_service, sample_event, sample_performance, sample_score, judges
    ):
        """Test events without scored, non-withdrawn performances are omitted."""
        scored = sample_event(name="Scored")
        withdrawn_only = sample_event(name="Withdrawn")
        sample_event(name="Empty")
        performance = sample_performance(event=scored)
        sample_score(judges[0], performance, total=80)
        sample_score(judges[1], performance, total=82)
        sample_score(
            judges[0],
            sample_performance(event=withdrawn_only, withdrawn_from_judging=True),
            total=80,
        )

        events = ranking_service.events_with_scores()

        assert [e.event_id for e in events] == [scored.guid]
        assert events[0].performance_count == 1
        assert events[0].score_count == 2
