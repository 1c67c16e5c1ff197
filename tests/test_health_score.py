"""Tests for the health score estimator."""

from datetime import date, timedelta

from pet_nutrition.core.health_score import (
    WeightEntry,
    estimate_health_score,
    score_change,
    weight_trend,
)
from pet_nutrition.core.pets import PetSnapshot

TODAY = date(2026, 6, 1)


def make_pet(**overrides):
    values = dict(
        species="dog",
        weight_kg=20,
        ideal_weight_kg=20,
        age_years=3,
        activity_level="medium",
        body_condition=5,
    )
    values.update(overrides)
    return PetSnapshot.build(**values)


def days_ago(days):
    return TODAY - timedelta(days=days)


def score(pet, **kwargs):
    kwargs.setdefault("last_vet_visit", days_ago(30))
    return estimate_health_score(pet, today=TODAY, **kwargs)


class TestWeightPenalties:
    """Tests for weight vs ideal weight tiers."""

    def test_healthy_pet_scores_100(self):
        """Test a pet at ideal weight with recent checkup scores 100."""
        result = score(make_pet())
        assert result.score == 100
        assert result.alerts == ()

    def test_overweight_tiers(self):
        """Test the 10/20/30 overweight tiers."""
        assert score(make_pet(weight_kg=22)).score == 90
        assert score(make_pet(weight_kg=24)).score == 80
        assert score(make_pet(weight_kg=26)).score == 70

    def test_underweight_tiers(self):
        """Test the 10/25 underweight tiers."""
        assert score(make_pet(weight_kg=18)).score == 90
        assert score(make_pet(weight_kg=16)).score == 75

    def test_severely_overweight_alert(self):
        """Test a critical alert above 125% of ideal weight."""
        result = score(make_pet(weight_kg=26))
        assert result.alerts[0].code == "weight_critical"
        assert result.alerts[0].priority == "critical"

    def test_no_ideal_weight(self):
        """Test a missing ideal weight costs 5 points."""
        assert score(make_pet(ideal_weight_kg=None)).score == 95


class TestOtherPenalties:
    """Tests for body condition, age, vet care and activity."""

    def test_body_condition_score(self):
        """Test body condition score tiers."""
        assert score(make_pet(body_condition=3)).score == 80
        assert score(make_pet(body_condition=7)).score == 85
        assert score(make_pet(body_condition=6)).score == 95
        assert score(make_pet(body_condition=4)).score == 100

    def test_missing_body_condition_score(self):
        """Test a missing score costs 10 points."""
        assert score(make_pet(body_condition=None)).score == 90

    def test_missing_data(self):
        """Test missing ideal weight, score, age and vet visit."""
        pet = make_pet(ideal_weight_kg=None, body_condition=None, age_years=None)
        result = estimate_health_score(pet, today=TODAY)
        assert result.score == 65

    def test_vet_visit_recency(self):
        """Test vet care tiers at 180 and 365 days."""
        assert score(make_pet(), last_vet_visit=days_ago(200)).score == 95
        assert score(make_pet(), last_vet_visit=days_ago(400)).score == 85

    def test_senior_without_recent_visit(self):
        """Test seniors need a checkup every 180 days."""
        result = score(make_pet(age_years=9), last_vet_visit=days_ago(200))
        assert result.score == 80
        assert any(alert.code == "senior_checkup" for alert in result.alerts)

    def test_young_low_activity(self):
        """Test young pets with low activity lose 5 points."""
        pet = make_pet(species="cat", weight_kg=4, ideal_weight_kg=4, age_years=1.5, activity_level="low")
        assert score(pet).score == 95

    def test_young_low_activity_dog(self):
        """Test the dog rule replaces the young pet penalty."""
        result = score(make_pet(age_years=1, activity_level="low"))
        assert result.score == 97
        assert "Young pet with low activity (-5)" in result.factors

    def test_adult_dog_low_activity(self):
        """Test low activity dogs lose 3 points."""
        assert score(make_pet(activity_level="low")).score == 97

    def test_adult_cat_low_activity(self):
        """Test adult cats are not penalised for low activity."""
        pet = make_pet(species="cat", weight_kg=4, ideal_weight_kg=4, activity_level="low")
        assert score(pet).score == 100

    def test_senior_other_species(self):
        """Test only dogs and cats get the senior checkup penalty."""
        pet = make_pet(species="rabbit", weight_kg=2, ideal_weight_kg=2, age_years=9)
        result = score(pet, last_vet_visit=days_ago(200))
        assert result.score == 95
        assert all(alert.code != "senior_checkup" for alert in result.alerts)

    def test_no_current_weight(self):
        """Test a missing weight costs 15 points."""
        result = score(make_pet(weight_kg=0))
        assert result.score == 85
        assert "No current weight recorded (-15)" in result.factors

    def test_worst_case(self):
        """Test every penalty tier at once."""
        # 30 weight + 20 body condition + 15 senior + 15 vet care + 3 activity
        pet = make_pet(weight_kg=30, body_condition=2, age_years=10, activity_level="low")
        result = estimate_health_score(pet, today=TODAY)
        assert result.score == 17


class TestWeightTrend:
    """Tests for weight trend analysis."""

    def test_needs_two_points(self):
        """Test a single reading has no trend."""
        assert weight_trend([WeightEntry(days_ago(5), 20)]) is None

    def test_increasing(self):
        """Test a 15% gain is increasing and alerts."""
        history = [WeightEntry(days_ago(60), 20), WeightEntry(days_ago(1), 23)]
        trend = weight_trend(history)
        assert trend.direction == "increasing"
        assert trend.change_pct == 15.0

        result = score(make_pet(weight_kg=23), weight_history=history)
        assert any(alert.code == "weight_gain_rapid" for alert in result.alerts)

    def test_decreasing(self):
        """Test a 15% loss is decreasing and alerts."""
        history = [WeightEntry(days_ago(1), 17), WeightEntry(days_ago(60), 20)]
        trend = weight_trend(history)
        assert trend.direction == "decreasing"

        result = score(make_pet(weight_kg=17), weight_history=history)
        assert any(alert.code == "weight_loss_rapid" for alert in result.alerts)

    def test_stable(self):
        """Test small changes are stable."""
        history = [WeightEntry(days_ago(30), 20), WeightEntry(days_ago(1), 20.5)]
        assert weight_trend(history).direction == "stable"

    def test_old_growth_recently_stable(self):
        """Test growth long ago does not raise a rapid gain alert."""
        history = [
            WeightEntry(days_ago(1500), 10),
            WeightEntry(days_ago(60), 20),
            WeightEntry(days_ago(1), 20),
        ]
        trend = weight_trend(history)
        assert trend.direction == "increasing"
        assert trend.change_pct == 100.0
        assert trend.previous_weight_kg == 20
        assert trend.recent_change_pct == 0.0

        result = score(make_pet(), weight_history=history)
        assert all(alert.code != "weight_gain_rapid" for alert in result.alerts)

    def test_recent_gain_after_stable_period(self):
        """Test the alert follows the two latest readings."""
        history = [
            WeightEntry(days_ago(90), 20),
            WeightEntry(days_ago(30), 20),
            WeightEntry(days_ago(1), 23),
        ]
        assert weight_trend(history).recent_change_pct == 15.0

        result = score(make_pet(weight_kg=23), weight_history=history)
        assert any(alert.code == "weight_gain_rapid" for alert in result.alerts)


class TestScoreChange:
    """Tests for the clamped score delta."""

    def test_first_score(self):
        """Test no previous score means no change."""
        assert score_change(90, None) == 0

    def test_clamped(self):
        """Test changes are clamped to 20 points."""
        assert score_change(90, 60) == 20
        assert score_change(50, 80) == -20

    def test_small_change(self):
        """Test small changes pass through."""
        assert score_change(85, 80) == 5
