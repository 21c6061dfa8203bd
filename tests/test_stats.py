import random

import pytest

from fintrack.backend.models import Transaction
from fintrack.backend.stats import month_bounds, monthly_summary, summarize


def tx(type, category, amount, date="2024-01-15T00:00:00", id=None):
    return Transaction(id=id, user_id=1, type=type, category=category, amount=amount, date=date)


class TestSummarize:
    def test_empty_set_is_all_zero(self):
        assert summarize([]).to_dict() == {
            "income": 0,
            "expense": 0,
            "balance": 0,
            "categoryStats": [],
            "counts": {"income": 0, "expense": 0},
        }

    def test_salary_and_rent_scenario(self):
        snapshot = summarize([tx("income", "Salary", 1000), tx("expense", "Rent", 400)]).to_dict()
        assert snapshot["income"] == 1000
        assert snapshot["expense"] == 400
        assert snapshot["balance"] == 600
        assert snapshot["categoryStats"] == [
            {"category": "Salary", "type": "income", "total": 1000, "count": 1},
            {"category": "Rent", "type": "expense", "total": 400, "count": 1},
        ]

    def test_groups_by_category_and_type(self):
        snapshot = summarize([
            tx("expense", "Food", 10),
            tx("expense", "Food", 15),
            tx("income", "Food", 5),
        ])
        stats = [c.to_dict() for c in snapshot.category_stats]
        assert stats == [
            {"category": "Food", "type": "expense", "total": 25, "count": 2},
            {"category": "Food", "type": "income", "total": 5, "count": 1},
        ]
        assert snapshot.counts == {"income": 1, "expense": 2}

    def test_ties_keep_discovery_order(self):
        snapshot = summarize([
            tx("expense", "B", 50),
            tx("expense", "A", 50),
            tx("expense", "C", 70),
            tx("expense", "B", 0.0),
        ])
        assert [c.category for c in snapshot.category_stats] == ["C", "B", "A"]

    @pytest.mark.parametrize("seed", range(5))
    def test_invariants_on_random_sets(self, seed):
        rng = random.Random(seed)
        txs = [
            tx(rng.choice(["income", "expense"]), rng.choice(["Food", "Rent", "Salary", "Misc"]),
               rng.randint(1, 500))
            for _ in range(rng.randint(0, 40))
        ]
        snapshot = summarize(txs)

        income = sum(t.amount for t in txs if t.type == "income")
        expense = sum(t.amount for t in txs if t.type == "expense")
        assert snapshot.income == income
        assert snapshot.expense == expense
        assert snapshot.balance == income - expense

        totals = [c.total for c in snapshot.category_stats]
        assert totals == sorted(totals, reverse=True)
        assert sum(totals) == income + expense
        assert sum(c.count for c in snapshot.category_stats) == len(txs)

    def test_fractional_sums_are_exact_to_the_cent(self):
        snapshot = summarize([
            tx("income", "Gifts", 0.1),
            tx("income", "Gifts", 0.2),
            tx("expense", "Food", 0.3),
        ])
        assert snapshot.income == 0.3
        assert snapshot.balance == 0
        assert [c.total for c in snapshot.category_stats] == [0.3, 0.3]


class TestMonthly:
    def test_month_bounds(self):
        assert month_bounds(2024, 2) == ("2024-02-01T00:00:00", "2024-03-01T00:00:00")
        assert month_bounds(2023, 12) == ("2023-12-01T00:00:00", "2024-01-01T00:00:00")

    def test_monthly_summary_newest_first(self):
        rows = monthly_summary([
            tx("income", "Salary", 1000, date="2024-01-05T00:00:00"),
            tx("expense", "Rent", 400, date="2024-01-06T00:00:00"),
            tx("expense", "Food", 50, date="2024-02-01T00:00:00"),
        ])
        assert rows == [
            {"month": "2024-02", "income": 0, "expense": 50, "net": -50},
            {"month": "2024-01", "income": 1000, "expense": 400, "net": 600},
        ]


class TestStatsEndpoint:
    def _add(self, client, headers, **body):
        resp = client.post("/api/transactions", json=body, headers=headers)
        assert resp.status_code == 201

    def test_empty(self, client, auth_headers):
        body = client.get("/api/transactions/stats", headers=auth_headers).get_json()
        assert body["income"] == 0
        assert body["expense"] == 0
        assert body["balance"] == 0
        assert body["categoryStats"] == []

    def test_scenario_and_owner_scoping(self, client, register_and_login):
        alice = register_and_login()
        bob = register_and_login(email="bob@example.com", name="Bob")
        self._add(client, alice, type="income", category="Salary", amount=1000)
        self._add(client, alice, type="expense", category="Rent", amount=400)
        self._add(client, bob, type="expense", category="Rent", amount=9999)

        body = client.get("/api/transactions/stats", headers=alice).get_json()
        assert body["income"] == 1000
        assert body["expense"] == 400
        assert body["balance"] == 600
        assert body["categoryStats"] == [
            {"category": "Salary", "type": "income", "total": 1000, "count": 1},
            {"category": "Rent", "type": "expense", "total": 400, "count": 1},
        ]

    def test_stats_reflect_deletes(self, client, auth_headers):
        self._add(client, auth_headers, type="expense", category="Food", amount=30)
        tx_id = client.get("/api/transactions", headers=auth_headers).get_json()[0]["id"]
        client.delete(f"/api/transactions/{tx_id}", headers=auth_headers)
        body = client.get("/api/transactions/stats", headers=auth_headers).get_json()
        assert body["expense"] == 0
        assert body["categoryStats"] == []

    def test_month_scoped_stats(self, client, auth_headers):
        self._add(client, auth_headers, type="income", category="Salary", amount=1000, date="2024-02-10")
        self._add(client, auth_headers, type="income", category="Salary", amount=500, date="2024-03-10")
        body = client.get("/api/transactions/stats?month=2&year=2024", headers=auth_headers).get_json()
        assert body["income"] == 1000

    def test_monthly_endpoint(self, client, auth_headers):
        self._add(client, auth_headers, type="income", category="Salary", amount=1000, date="2024-02-10")
        self._add(client, auth_headers, type="expense", category="Rent", amount=300, date="2024-02-11")
        rows = client.get("/api/transactions/stats/monthly", headers=auth_headers).get_json()
        assert rows == [{"month": "2024-02", "income": 1000, "expense": 300, "net": 700}]

    def test_requires_auth(self, client):
        assert client.get("/api/transactions/stats").status_code == 401

    def test_fractional_amounts_stay_consistent(self, client, auth_headers):
        for amount in (0.1, 0.2, 0.333):
            self._add(client, auth_headers, type="income", category="Gifts", amount=amount)
        self._add(client, auth_headers, type="expense", category="Food", amount=0.3)
        self._add(client, auth_headers, type="expense", category="Fees", amount=0.014)

        body = client.get("/api/transactions/stats", headers=auth_headers).get_json()
        assert body["income"] == 0.63
        assert body["expense"] == 0.31
        assert body["balance"] == 0.32

        def cents(v):
            return round(v * 100)

        assert cents(body["income"]) - cents(body["expense"]) == cents(body["balance"])
        category_cents = sum(cents(c["total"]) for c in body["categoryStats"])
        assert category_cents == cents(body["income"]) + cents(body["expense"])
