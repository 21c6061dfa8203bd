from fintrack.backend.db import DEFAULT_CATEGORIES


def add_category(client, headers, name="Gym", type="expense"):
    return client.post("/api/categories", json={"name": name, "type": type}, headers=headers)


class TestCategories:
    def test_defaults_visible_to_every_user(self, client, auth_headers):
        cats = client.get("/api/categories", headers=auth_headers).get_json()
        defaults = {(c["name"], c["type"]) for c in cats if c["isDefault"]}
        assert defaults == set(DEFAULT_CATEGORIES)
        assert all(c["userId"] is None for c in cats if c["isDefault"])

    def test_list_is_own_plus_defaults(self, client, register_and_login):
        alice = register_and_login()
        bob = register_and_login(email="bob@example.com", name="Bob")
        assert add_category(client, alice, "Gym").status_code == 201
        assert add_category(client, bob, "Pets").status_code == 201

        names = {c["name"] for c in client.get("/api/categories", headers=alice).get_json()}
        assert "Gym" in names
        assert "Pets" not in names
        assert "Salary" in names

    def test_duplicate_for_same_user_conflicts(self, client, auth_headers):
        assert add_category(client, auth_headers, "Gym", "expense").status_code == 201
        resp = add_category(client, auth_headers, "Gym", "expense")
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Category already exists"

    def test_same_name_other_type_or_user_is_fine(self, client, register_and_login):
        alice = register_and_login()
        bob = register_and_login(email="bob@example.com", name="Bob")
        assert add_category(client, alice, "Gifts", "expense").status_code == 201
        assert add_category(client, alice, "Gifts", "income").status_code == 201
        assert add_category(client, bob, "Gifts", "expense").status_code == 201

    def test_shadowing_a_default_name_is_allowed(self, client, auth_headers):
        assert add_category(client, auth_headers, "Salary", "income").status_code == 201

    def test_validation(self, client, auth_headers):
        assert add_category(client, auth_headers, "", "expense").status_code == 400
        assert add_category(client, auth_headers, "Gym", "other").status_code == 400

    def test_owner_deletes(self, client, auth_headers):
        cat = add_category(client, auth_headers).get_json()
        resp = client.delete(f"/api/categories/{cat['id']}", headers=auth_headers)
        assert resp.status_code == 200
        names = {c["name"] for c in client.get("/api/categories", headers=auth_headers).get_json()}
        assert "Gym" not in names

    def test_default_category_never_deletable(self, client, register_and_login):
        for email in ("alice@example.com", "bob@example.com"):
            headers = register_and_login(email=email)
            cats = client.get("/api/categories", headers=headers).get_json()
            default = next(c for c in cats if c["isDefault"])
            resp = client.delete(f"/api/categories/{default['id']}", headers=headers)
            assert resp.status_code == 400
            assert resp.get_json()["message"] == "Cannot delete default category"

    def test_other_users_category_forbidden(self, client, register_and_login):
        alice = register_and_login()
        bob = register_and_login(email="bob@example.com", name="Bob")
        cat = add_category(client, alice).get_json()

        resp = client.delete(f"/api/categories/{cat['id']}", headers=bob)
        assert resp.status_code == 401
        names = {c["name"] for c in client.get("/api/categories", headers=alice).get_json()}
        assert "Gym" in names

    def test_missing_category(self, client, auth_headers):
        assert client.delete("/api/categories/12345", headers=auth_headers).status_code == 404

    def test_seeding_is_idempotent(self, app):
        from fintrack.backend.db import connect, init_db, seed_default_categories
        init_db(app.config["DB_PATH"])
        conn = connect(app.config["DB_PATH"])
        try:
            assert seed_default_categories(conn) == 0
            count = conn.execute("SELECT COUNT(*) FROM categories WHERE user_id IS NULL").fetchone()[0]
        finally:
            conn.close()
        assert count == len(DEFAULT_CATEGORIES)
