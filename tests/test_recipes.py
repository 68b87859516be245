"""Recipe catalog tests: authoring, hydration, visibility and admin curation."""

from src.models.recipe import Recipe, RecipeIngredient, RecipeNutrition, RecipeStep


def _create_recipe(client, headers, **overrides):
    payload = {
        "title": "Overnight Oats",
        "category": "breakfast",
        "description": "Simple oats",
        "ingredients": [
            {"name": "Oats", "quantity": "1 cup"},
            {"name": "Milk", "quantity": "1 cup"},
        ],
        "instructions": ["Mix everything", "  ", "Refrigerate overnight"],
        "nutrition": {"calories": 350, "protein": 12, "carbs_g": 50},
    }
    payload.update(overrides)
    response = client.post("/api/recipes", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_recipe_hydrates(client, admin_headers):
    """Creation returns the full hydrated recipe."""
    data = _create_recipe(client, admin_headers)
    assert data["title"] == "Overnight Oats"
    assert data["category"] == "breakfast"
    assert [i["name"] for i in data["ingredients"]] == ["Oats", "Milk"]
    assert data["instructions"] == ["Mix everything", "Refrigerate overnight"]


def test_nutrition_accepts_both_key_styles(client, admin_headers):
    data = _create_recipe(client, admin_headers)
    nutrition = data["nutrition"]
    assert nutrition["calories"] == 350
    assert nutrition["protein"] == 12
    assert nutrition["carbs"] == 50
    assert nutrition["fat"] == 0
    assert nutrition["sodium"] == 0


def test_create_recipe_requires_admin(client, auth_headers):
    response = client.post("/api/recipes", headers=auth_headers, json={"title": "Nope"})
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_create_recipe_requires_login(client):
    response = client.post("/api/recipes", json={"title": "Nope"})
    assert response.status_code == 401


def test_create_recipe_invalid_category(client, admin_headers):
    response = client.post(
        "/api/recipes", headers=admin_headers, json={"title": "Odd", "category": "brunch"}
    )
    assert response.status_code == 400


def test_missing_nutrition_reads_as_zeros(client, db, admin_headers):
    """A recipe without a nutrition row is served with all seven values at zero."""
    recipe = Recipe(title="Bare", category="other", is_public=True, published=True)
    db.add(recipe)
    db.commit()

    response = client.get(f"/api/recipes/{recipe.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["nutrition"] == {
        "calories": 0,
        "protein": 0,
        "carbs": 0,
        "fat": 0,
        "fiber": 0,
        "sugar": 0,
        "sodium": 0,
    }
    assert data["ingredients"] == []
    assert data["instructions"] == []


def test_children_are_served_in_order(client, db):
    recipe = Recipe(title="Ordered", category="dinner", is_public=True, published=True)
    db.add(recipe)
    db.flush()
    db.add_all(
        [
            RecipeIngredient(recipe_id=recipe.id, name="Second", position=2),
            RecipeIngredient(recipe_id=recipe.id, name="First", position=1),
            RecipeStep(recipe_id=recipe.id, step_no=2, text="Then this"),
            RecipeStep(recipe_id=recipe.id, step_no=1, text="Do this"),
        ]
    )
    db.commit()

    data = client.get(f"/api/recipes/{recipe.id}").json()
    assert [i["name"] for i in data["ingredients"]] == ["First", "Second"]
    assert data["instructions"] == ["Do this", "Then this"]


def test_visibility(client, admin_headers, auth_headers):
    """Private or unpublished recipes are hidden from anonymous and other users."""
    public = _create_recipe(client, admin_headers, title="Public")
    private = _create_recipe(client, admin_headers, title="Private", is_public=False)
    draft = _create_recipe(client, admin_headers, title="Draft", published=False)

    titles = {r["title"] for r in client.get("/api/recipes").json()}
    assert titles == {"Public"}

    titles = {r["title"] for r in client.get("/api/recipes", headers=auth_headers).json()}
    assert titles == {"Public"}

    titles = {r["title"] for r in client.get("/api/recipes", headers=admin_headers).json()}
    assert titles == {"Public", "Private", "Draft"}

    assert client.get(f"/api/recipes/{public['id']}").status_code == 200
    assert client.get(f"/api/recipes/{private['id']}").status_code == 404
    assert client.get(f"/api/recipes/{draft['id']}", headers=auth_headers).status_code == 404
    assert client.get(f"/api/recipes/{draft['id']}", headers=admin_headers).status_code == 200


def test_get_recipe_not_found(client):
    response = client.get("/api/recipes/99999")
    assert response.status_code == 404
    assert response.json() == {"error": "not_found", "detail": "Recipe not found"}


def test_admin_endpoints_forbidden_for_regular_users(client, auth_headers):
    assert client.get("/api/admin/recipes", headers=auth_headers).status_code == 403
    assert client.get("/api/admin/users", headers=auth_headers).status_code == 403
    response = client.post(
        "/api/admin/recipes/import", headers=auth_headers, json={"id": "52772"}
    )
    assert response.status_code == 403
    assert client.patch("/api/admin/recipes/1", headers=auth_headers, json={}).status_code == 403
    assert client.delete("/api/admin/recipes/1", headers=auth_headers).status_code == 403
    assert client.get("/api/admin/users/1", headers=auth_headers).status_code == 403


def test_admin_summaries(client, admin_headers):
    _create_recipe(client, admin_headers, title="Overnight Oats")
    _create_recipe(client, admin_headers, title="Chili", category="dinner", instructions=[])

    response = client.get("/api/admin/recipes", headers=admin_headers)
    assert response.status_code == 200
    rows = {row["title"]: row for row in response.json()}
    assert rows["Overnight Oats"]["ingredient_count"] == 2
    assert rows["Overnight Oats"]["step_count"] == 2
    assert rows["Overnight Oats"]["calories"] == 350
    assert rows["Overnight Oats"]["created_by_email"] == admin_headers.email
    assert rows["Chili"]["step_count"] == 0

    response = client.get("/api/admin/recipes?search=chil", headers=admin_headers)
    assert [row["title"] for row in response.json()] == ["Chili"]


def test_admin_patch_replaces_children(client, admin_headers):
    created = _create_recipe(client, admin_headers)
    response = client.patch(
        f"/api/admin/recipes/{created['id']}",
        headers=admin_headers,
        json={
            "title": "Better Oats",
            "ingredients": [{"name": "Rolled oats", "quantity": "2 cups"}],
            "instructions": ["Soak"],
            "nutrition": {"fat": 7},
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["title"] == "Better Oats"
    assert data["category"] == "breakfast"
    assert [i["name"] for i in data["ingredients"]] == ["Rolled oats"]
    assert data["instructions"] == ["Soak"]
    assert data["nutrition"]["fat"] == 7
    assert data["nutrition"]["calories"] == 350


def test_admin_patch_rejects_null_title(client, admin_headers):
    created = _create_recipe(client, admin_headers)
    response = client.patch(
        f"/api/admin/recipes/{created['id']}", headers=admin_headers, json={"title": None}
    )
    assert response.status_code == 400


def test_admin_patch_unknown_recipe(client, admin_headers):
    response = client.patch("/api/admin/recipes/99999", headers=admin_headers, json={})
    assert response.status_code == 404


def test_admin_delete_cascades(client, db, admin_headers):
    created = _create_recipe(client, admin_headers)

    response = client.delete(f"/api/admin/recipes/{created['id']}", headers=admin_headers)
    assert response.status_code == 204
    assert db.query(RecipeIngredient).filter_by(recipe_id=created["id"]).count() == 0
    assert db.query(RecipeStep).filter_by(recipe_id=created["id"]).count() == 0
    assert db.query(RecipeNutrition).filter_by(recipe_id=created["id"]).count() == 0

    response = client.delete(f"/api/admin/recipes/{created['id']}", headers=admin_headers)
    assert response.status_code == 404
