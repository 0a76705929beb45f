"""
Unit tests for FeeService.

Tests the regular fee lookup, the nationals fee tiers and the one-time
registration fee handling against stored dancers.
"""

import pytest

from backend.src.models import Dancer
from backend.src.services.exceptions import UnknownCategoryError, ValidationError
from backend.src.services.fee_service import FeeService


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fee_service(test_db_session):
    """Create a FeeService instance for testing."""
    return FeeService(test_db_session)


# ============================================================================
# Regular Fee Lookup
# ============================================================================


class TestCalculateFee:
    """Tests for the regular entry fee lookup."""

    def test_teen_solo(self):
        """Test a known (age category, performance type) pair."""
        assert FeeService.calculate_fee("Teen", "Solo") == 400

    def test_lookup_is_case_insensitive(self):
        """Test keys match regardless of case and surrounding whitespace."""
        assert FeeService.calculate_fee("teen", "SOLO") == 400
        assert FeeService.calculate_fee(" 13-14 ", "group") == 220

    def test_lookup_is_deterministic(self):
        """Test identical inputs give identical fees."""
        fees = {FeeService.calculate_fee("Senior", "Duet") for _ in range(20)}
        assert fees == {280}

    def test_unknown_age_category(self):
        """Test an unknown age category is rejected."""
        with pytest.raises(UnknownCategoryError) as exc_info:
            FeeService.calculate_fee("Toddler", "Solo")

        assert exc_info.value.age_category == "Toddler"

    def test_unknown_performance_type(self):
        """Test an unknown performance type is rejected."""
        with pytest.raises(UnknownCategoryError):
            FeeService.calculate_fee("Teen", "Quartet")

    def test_unknown_category_is_validation_error(self):
        """Test callers can treat unknown categories as validation failures."""
        with pytest.raises(ValidationError):
            FeeService.calculate_fee("", "Solo")


# ============================================================================
# Nationals Fee Tiers
# ============================================================================


class TestBasePerformanceFee:
    """Tests for the nationals performance fee tiers."""

    @pytest.mark.parametrize("solo_count,expected", [
        (1, 400),
        (2, 750),
        (3, 1000),
        (4, 1200),
        (5, 1200),
        (6, 1300),
        (8, 1500),
    ])
    def test_solo_packages(self, solo_count, expected):
        """Test solo package pricing, including solos past the package."""
        fee, rate = FeeService.base_performance_fee("Solo", solo_count, 1)
        assert fee == expected
        assert rate is None

    def test_duet_and_trio_per_dancer(self):
        """Test duets and trios are charged per dancer."""
        assert FeeService.base_performance_fee("Duet", 0, 2) == (560, 280)
        assert FeeService.base_performance_fee("trio", 0, 3) == (840, 280)

    def test_small_group_rate(self):
        """Test groups below the large-group threshold."""
        assert FeeService.base_performance_fee("Group", 0, 9) == (1980, 220)

    def test_large_group_rate(self):
        """Test groups of ten or more get the reduced rate."""
        assert FeeService.base_performance_fee("Group", 0, 10) == (1900, 190)

    def test_unknown_type(self):
        """Test unknown nationals performance types are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            FeeService.base_performance_fee("Quartet", 0, 4)

        assert exc_info.value.field == "performanceType"

    def test_solo_count_below_one(self):
        """Test a solo package needs at least one solo."""
        with pytest.raises(ValidationError):
            FeeService.base_performance_fee("Solo", 0, 1)

    def test_participant_count_below_one(self):
        """Test non-solo items need at least one dancer."""
        with pytest.raises(ValidationError):
            FeeService.base_performance_fee("Group", 0, 0)


class TestCalculateNationalsFee:
    """Tests for the nationals fee breakdown."""

    def test_group_of_five_unpaid(self, fee_service):
        """Test five unregistered dancers pay the group rate plus registration."""
        result = fee_service.calculate_nationals_fee(
            "Group",
            solo_count=0,
            participant_count=5,
            participant_ids=["E1", "E2", "E3", "E4", "E5"],
        )

        assert result.base_fee == 1100
        assert result.per_participant_rate == 220
        assert result.participants_needing_registration == 5
        assert result.registration_fee == 1500
        assert result.total_fee == 2600
        assert result.performance_type == "Group"
        assert result.unpaid_participant_ids == ["E1", "E2", "E3", "E4", "E5"]

    def test_paid_dancers_not_charged(self, fee_service, sample_dancer):
        """Test dancers who already paid registration are excluded."""
        sample_dancer(eodsa_id="E1", registration_fee_paid=True)
        sample_dancer(eodsa_id="E2")

        result = fee_service.calculate_nationals_fee(
            "Duet", solo_count=0, participant_count=2, participant_ids=["E1", "E2"]
        )

        assert result.paid_participant_ids == ["E1"]
        assert result.unpaid_participant_ids == ["E2"]
        assert result.total_fee == 560 + 300

    def test_mastery_level_mismatch_is_charged(self, fee_service, sample_dancer):
        """Test registration paid for another mastery level does not count."""
        sample_dancer(
            eodsa_id="E1",
            registration_fee_paid=True,
            registration_fee_mastery_level="Water (Competitive)",
        )

        result = fee_service.calculate_nationals_fee(
            "Solo",
            solo_count=1,
            participant_count=1,
            participant_ids=["E1"],
            mastery_level="Fire (Advanced)",
        )

        assert result.participants_needing_registration == 1
        assert result.total_fee == 700

    def test_matching_mastery_level_is_covered(self, fee_service, sample_dancer):
        """Test registration paid for the requested mastery level counts."""
        sample_dancer(
            eodsa_id="E1",
            registration_fee_paid=True,
            registration_fee_mastery_level="Fire (Advanced)",
        )

        result = fee_service.calculate_nationals_fee(
            "Solo",
            solo_count=1,
            participant_count=1,
            participant_ids=["E1"],
            mastery_level="Fire (Advanced)",
        )

        assert result.registration_fee == 0
        assert result.total_fee == 400

    def test_duplicate_ids_charged_once(self, fee_service):
        """Test a dancer listed twice pays registration once."""
        result = fee_service.calculate_nationals_fee(
            "Trio", solo_count=0, participant_count=3, participant_ids=["E1", "E1", "E2"]
        )

        assert result.unpaid_participant_ids == ["E1", "E2"]
        assert result.registration_fee == 600

    def test_without_ids_charges_every_participant(self, fee_service):
        """Test every participant is charged when no ids are known."""
        result = fee_service.calculate_nationals_fee(
            "Group", solo_count=0, participant_count=4
        )

        assert result.participants_needing_registration == 4
        assert result.total_fee == 4 * 220 + 4 * 300

    def test_solo_defaults_to_one_participant(self, fee_service):
        """Test a solo without a participant count counts one dancer."""
        result = fee_service.calculate_nationals_fee("solo", solo_count=3, participant_count=0)

        assert result.participant_count == 1
        assert result.solo_count == 3
        assert result.total_fee == 1000 + 300
        assert result.description.startswith("3 solos package")

    def test_breakdown_is_deterministic(self, fee_service):
        """Test identical inputs give identical breakdowns."""
        first = fee_service.calculate_nationals_fee("Group", 0, 12, ["E1", "E2"])
        second = fee_service.calculate_nationals_fee("Group", 0, 12, ["E1", "E2"])
        assert first == second


# ============================================================================
# Registration Fee Status
# ============================================================================


class TestRegistrationStatus:
    """Tests for registration status and payment recording."""

    def test_check_registration_status(self, fee_service, sample_dancer):
        """Test dancers are split into paid and unpaid."""
        sample_dancer(eodsa_id="E1", registration_fee_paid=True)

        result = fee_service.check_registration_status(["E1", "E2", "E3"])

        assert result.total_dancers == 3
        assert result.dancers_already_paid == ["E1"]
        assert result.dancers_needing_registration == ["E2", "E3"]
        assert result.registration_fee_required == 600

    def test_mark_registration_fee_paid(self, fee_service, sample_dancer, test_db_session):
        """Test payment is recorded together with the mastery level."""
        sample_dancer(eodsa_id="E1")

        results = fee_service.mark_registration_fee_paid(["E1", "E404"], "Water (Competitive)")

        assert results == [
            {"dancer_id": "E1", "success": True, "error": None},
            {"dancer_id": "E404", "success": False, "error": "Dancer not found"},
        ]
        dancer = test_db_session.query(Dancer).filter(Dancer.eodsa_id == "E1").one()
        assert dancer.registration_fee_paid is True
        assert dancer.registration_fee_paid_at is not None
        assert dancer.registration_fee_mastery_level == "Water (Competitive)"

    def test_mark_paid_requires_mastery_level(self, fee_service):
        """Test the mastery level is mandatory."""
        with pytest.raises(ValidationError):
            fee_service.mark_registration_fee_paid(["E1"], "")

    def test_registration_lookup_requires_session(self):
        """Test registration lookups fail without a session."""
        with pytest.raises(RuntimeError):
            FeeService().check_registration_status(["E1"])
