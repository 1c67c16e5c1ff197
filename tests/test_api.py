"""Tests for API endpoints."""

from datetime import date

from pet_nutrition.models.models import NutritionPlan, WeightLog


def create_pet(client, **overrides):
    payload = {
        "name": "Buddy",
        "species": "dog",
        "age_years": 3,
        "weight_kg": 20,
        "ideal_weight_kg": 20,
        "activity_level": "medium",
        "body_condition_score": 5,
        "spay_neuter": "intact",
    }
    payload.update(overrides)
    response = client.post("/pet", json=payload)
    assert response.status_code == 201
    return response.json()


class TestAppEndpoints:
    """Tests for root and health endpoints."""

    def test_root(self, client):
        """Test root lists the routers."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["nutrition"] == "/nutrition"

    def test_health(self, client):
        """Test health check."""
        assert client.get("/health").json() == {"status": "healthy"}


class TestNutritionEndpoints:
    """Tests for the stateless calculator endpoints."""

    def test_calculate_adult_dog(self, client):
        """Test the 20kg adult dog scenario."""
        response = client.post("/nutrition/calculate", json={
            "species": "dog",
            "weight": 20,
            "age": 3,
            "activity_level": "moderate",
            "spay_neuter": "intact",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["rer"] == 662
        assert data["der"] == 1483
        assert data["lifestage"] == "adult"
        assert data["lifestage_multiplier"] == 1.6
        assert data["activity_multiplier"] == 1.4
        assert data["macros"]["protein_grams"] == 50.0
        assert data["warnings"] == []
        assert data["calculation_method"]

    def test_calculate_kitten(self, client):
        """Test the 4kg kitten scenario."""
        response = client.post("/nutrition/calculate", json={
            "species": "cat", "weight": 4, "age": 0.5, "activity_level": "low",
        })
        data = response.json()
        assert data["rer"] == 190
        assert data["der"] == 570
        assert data["lifestage"] == "kitten"

    def test_calculate_zero_weight(self, client):
        """Test zero weight is rejected with 422."""
        response = client.post("/nutrition/calculate", json={"species": "dog", "weight": 0, "age": 3})
        assert response.status_code == 422
        assert response.json()["detail"] == "Pet weight is required for calorie calculation"

    def test_calculate_nan_weight(self, client):
        """Test a NaN weight is rejected with 422."""
        response = client.post(
            "/nutrition/calculate",
            content='{"species": "dog", "weight": NaN, "age": 3}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    def test_meal_plan_infinite_weight(self, client):
        """Test an infinite weight is rejected with 422."""
        response = client.post(
            "/nutrition/meal-plan",
            content='{"species": "dog", "weight": Infinity, "age": 3}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    def test_body_condition_score(self, client):
        """Test an integer body condition is accepted."""
        response = client.post("/nutrition/calculate", json={
            "species": "dog", "weight": 20, "age": 3, "body_condition": 9,
        })
        assert response.json()["bcs_multiplier"] == 0.7

    def test_meal_plan(self, client):
        """Test the daily meal plan response."""
        response = client.post("/nutrition/meal-plan", json={
            "species": "dog", "weight": 20, "age": 3, "activity_level": "medium", "spay_neuter": "intact",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["meals_per_day"] == 2
        assert data["times"] == ["08:00", "18:00"]
        assert data["calories_per_meal"] == 742
        assert data["portion_guidance"]["dry_grams"] == 212
        assert len(data["feeding_schedule"]) == 2
        assert "water" in data["feeding_guidelines"]

    def test_meal_plan_contradicting_times(self, client):
        """Test a meal count that contradicts the times is rejected."""
        response = client.post("/nutrition/meal-plan", json={
            "species": "dog", "weight": 20, "age": 3,
            "meals_per_day": 2, "times": ["07:00", "12:00", "18:00"],
        })
        assert response.status_code == 422

    def test_weekly_plan(self, client):
        """Test the weekly plan and shopping list."""
        response = client.post("/nutrition/weekly-plan", json={
            "species": "dog", "weight": 20, "age": 3, "activity_level": "medium", "spay_neuter": "intact",
        })
        assert response.status_code == 200
        data = response.json()
        assert [day["day"] for day in data["weekly_plan"]] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert data["shopping_list"]["dry_grams"] == 212 * 2 * 7
        assert data["shopping_list"]["wet_grams"] == 0

    def test_validate_allergen(self, client):
        """Test allergens in supplied foods make the result invalid."""
        response = client.post("/nutrition/validate", json={
            "species": "dog", "weight": 20, "age": 3,
            "allergies": ["chicken"],
            "food_recommendations": [{"name": "Kibble", "ingredients": "Chicken, rice"}],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert data["errors"] == ["Food recommendation contains allergen: chicken"]

    def test_validate_supplied_der(self, client):
        """Test a supplied DER outside the band warns."""
        response = client.post("/nutrition/validate", json={
            "species": "dog", "weight": 20, "age": 3, "der": 400, "protein_grams": 10,
        })
        data = response.json()
        assert data["is_valid"] is True
        assert len(data["warnings"]) == 2


class TestPetEndpoints:
    """Tests for pet API endpoints."""

    def test_create_pet(self, client):
        """Test creating a pet normalises enum-like fields."""
        data = create_pet(client, species="Cat", activity_level="moderate", spay_neuter="spayed", weight_kg=4)
        assert data["species"] == "cat"
        assert data["activity_level"] == "medium"
        assert data["spay_neuter"] == "altered"
        assert data["id"] is not None

    def test_create_pet_logs_initial_weight(self, client, db_session):
        """Test an initial weight log is written."""
        pet = create_pet(client)
        logs = db_session.query(WeightLog).filter(WeightLog.pet_id == pet["id"]).all()
        assert len(logs) == 1
        assert logs[0].notes == "Initial weight"

    def test_create_pet_invalid_weight(self, client):
        """Test non-positive weight is rejected."""
        response = client.post("/pet", json={"name": "Ghost", "weight_kg": 0})
        assert response.status_code == 422

    def test_get_pet_with_calculations(self, client):
        """Test getting a pet with energy calculations."""
        pet = create_pet(client, weight_kg=22)
        response = client.get(f"/pet/{pet['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["rer"] == round(70 * 22 ** 0.75)
        assert data["life_stage"] == "adult"
        assert data["weight_goal"] == "weight_loss"
        assert data["target_daily_kcal"] < data["der"]

    def test_get_pet_not_found(self, client):
        """Test getting non-existent pet returns 404."""
        assert client.get("/pet/999").status_code == 404

    def test_list_pets(self, client):
        """Test listing all pets."""
        create_pet(client, name="Rex")
        create_pet(client, name="Ace")
        data = client.get("/pet").json()
        assert [p["name"] for p in data] == ["Ace", "Rex"]

    def test_update_pet_weight(self, client, db_session):
        """Test a weight update adds a weight log."""
        pet = create_pet(client)
        response = client.put(f"/pet/{pet['id']}", json={"weight_kg": 21})
        assert response.status_code == 200
        assert response.json()["weight_kg"] == 21
        logs = db_session.query(WeightLog).filter(WeightLog.pet_id == pet["id"]).all()
        assert len(logs) == 2

    def test_clear_ideal_weight(self, client):
        """Test 0 clears the ideal weight."""
        pet = create_pet(client)
        response = client.put(f"/pet/{pet['id']}", json={"ideal_weight_kg": 0})
        assert response.json()["ideal_weight_kg"] is None

    def test_delete_pet(self, client):
        """Test deleting a pet."""
        pet = create_pet(client)
        assert client.delete(f"/pet/{pet['id']}").status_code == 204
        assert client.get(f"/pet/{pet['id']}").status_code == 404


class TestLogEndpoints:
    """Tests for weight log and vet visit endpoints."""

    def test_weight_log_updates_pet(self, client):
        """Test logging a weight updates the pet."""
        pet = create_pet(client)
        response = client.post("/log/weight", json={"pet_id": pet["id"], "weight_kg": 19.5})
        assert response.status_code == 201
        assert client.get(f"/pet/{pet['id']}").json()["weight_kg"] == 19.5

        logs = client.get(f"/log/weight/pet/{pet['id']}").json()
        assert len(logs) == 2

    def test_weight_log_unknown_pet(self, client):
        """Test logging weight for a missing pet returns 404."""
        response = client.post("/log/weight", json={"pet_id": 999, "weight_kg": 10})
        assert response.status_code == 404

    def test_vet_visits(self, client):
        """Test recording and listing vet visits."""
        pet = create_pet(client)
        client.post("/log/vet-visit", json={"pet_id": pet["id"], "visit_date": "2025-01-10"})
        client.post("/log/vet-visit", json={"pet_id": pet["id"], "visit_date": "2025-06-10", "reason": "Checkup"})
        visits = client.get(f"/log/vet-visit/pet/{pet['id']}").json()
        assert [v["visit_date"] for v in visits] == ["2025-06-10", "2025-01-10"]

        assert client.delete(f"/log/vet-visit/{visits[0]['id']}").status_code == 204


class TestHealthScoreEndpoint:
    """Tests for the health score endpoint."""

    def test_health_score_and_change(self, client):
        """Test scoring twice reports the clamped change."""
        pet = create_pet(client)
        client.post("/log/vet-visit", json={"pet_id": pet["id"], "visit_date": date.today().isoformat()})

        first = client.get(f"/pet/{pet['id']}/health-score").json()
        assert first["score"] == 100
        assert first["score_change"] == 0

        client.post("/log/weight", json={"pet_id": pet["id"], "weight_kg": 30})
        second = client.get(f"/pet/{pet['id']}/health-score").json()
        assert second["score"] == 70
        assert second["score_change"] == -20
        assert second["weight_trend"]["direction"] == "increasing"
        assert "weight_gain_rapid" in [alert["code"] for alert in second["alerts"]]

    def test_health_score_without_vet_visit(self, client):
        """Test a pet never seen by a vet loses 15 points."""
        pet = create_pet(client)
        assert client.get(f"/pet/{pet['id']}/health-score").json()["score"] == 85

    def test_health_score_not_found(self, client):
        """Test a missing pet returns 404."""
        assert client.get("/pet/999/health-score").status_code == 404


class TestPlanEndpoints:
    """Tests for stored nutrition plans."""

    def test_create_plan(self, client, db_session):
        """Test creating a stored plan."""
        pet = create_pet(client)
        response = client.post(f"/plan/pet/{pet['id']}", json={})
        assert response.status_code == 201
        data = response.json()
        assert data["daily_calories"] == 1483
        assert data["daily_protein_grams"] == 50.0
        assert data["meals_per_day"] == 2
        assert data["weight_goal"] == "maintenance"
        assert len(data["food_recommendations"]) == 3
        assert data["validation"]["is_valid"] is True
        assert db_session.query(NutritionPlan).count() == 1

    def test_plan_leaves_out_allergens(self, client):
        """Test recommended ingredients skip the pet's allergens."""
        pet = create_pet(client, allergies=["chicken"])
        data = client.post(f"/plan/pet/{pet['id']}", json={}).json()
        assert all("chicken" not in food["ingredients"].lower() for food in data["food_recommendations"])
        assert data["validation"]["is_valid"] is True

    def test_weight_loss_plan(self, client):
        """Test an overweight pet gets a reduced calorie plan."""
        pet = create_pet(client, weight_kg=26)
        data = client.post(f"/plan/pet/{pet['id']}", json={}).json()
        assert data["weight_goal"] == "weight_loss"
        assert "Weight loss plan" in data["special_instructions"]

    def test_cat_plan_low_protein_percentage(self, client):
        """Test a cat plan on a low protein food fails validation."""
        pet = create_pet(client, species="cat", weight_kg=4, ideal_weight_kg=4)
        data = client.post(f"/plan/pet/{pet['id']}", json={"protein_percentage": 20}).json()
        assert data["validation"]["is_valid"] is False

    def test_list_get_validate_delete(self, client):
        """Test the stored plan lifecycle."""
        pet = create_pet(client)
        plan = client.post(f"/plan/pet/{pet['id']}", json={"plan_name": "Spring plan", "meals_per_day": 3}).json()
        assert plan["meals_per_day"] == 3
        assert len(plan["feeding_schedule"]) == 3

        plans = client.get(f"/plan/pet/{pet['id']}").json()
        assert [p["plan_name"] for p in plans] == ["Spring plan"]

        assert client.get(f"/plan/{plan['id']}").status_code == 200

        # Weight changes after the plan was stored
        client.put(f"/pet/{pet['id']}", json={"weight_kg": 40})
        validation = client.get(f"/plan/{plan['id']}/validate").json()["validation"]
        assert "calorie_mismatch" in [issue["code"] for issue in validation["issues"]]

        assert client.delete(f"/plan/{plan['id']}").status_code == 204
        assert client.get(f"/plan/{plan['id']}").status_code == 404

    def test_plan_for_missing_pet(self, client):
        """Test creating a plan for a missing pet returns 404."""
        assert client.post("/plan/pet/999", json={}).status_code == 404
