"""
Integration tests for the Insights API.

Runs the full FastAPI app against in-memory SQLite with a frozen clock
(Wednesday 2026-10-21 12:00, Asia/Jerusalem).
"""

import pytest


OVERDUE_DUE = "2026-10-17T10:00:00+03:00"
CREATED = "2026-10-19T09:00:00+03:00"


def _task(i, company_id="acme", due_date=OVERDUE_DUE, status="TODO"):
    return {
        "id": f"t{i}",
        "title": f"Task {i}",
        "status": status,
        "due_date": due_date,
        "company_id": company_id,
        "created_at": CREATED,
    }


@pytest.fixture
def busy_payload():
    """Overdue risk, concentration and low completion warnings, empty week info."""
    tasks = [_task(i) for i in range(8)]
    tasks += [_task(i, company_id="globex", due_date=None) for i in range(8, 10)]
    return {
        "tasks": tasks,
        "events": [{"id": "e1", "start": "2026-10-12T10:00:00+03:00"}],
        "companies": [{"id": "acme", "name": "Acme"}, {"id": "globex", "name": "Globex"}],
    }


@pytest.fixture
def agency_payload():
    return {
        "creators": [
            {
                "id": "creator-1",
                "name": "Dana",
                "tasks": [
                    {"id": f"d{i}", "due_date": "2026-10-16"} for i in range(5)
                ],
            },
            {"id": "creator-2", "name": "Noa"},
        ],
    }


# =============================================================================
# Auth
# =============================================================================


class TestInsightsAuth:

    def test_missing_user_header_is_401(self, client):
        response = client.post("/api/insights", json={})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"
        assert "X-Correlation-ID" in response.headers

    def test_agency_scope_requires_agency_account(self, client, creator_headers):
        response = client.post(
            "/api/insights",
            json={"scope": "agency"},
            headers=creator_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "PERMISSION_DENIED"

    def test_agency_endpoint_requires_agency_account(self, client, creator_headers, agency_payload):
        response = client.post("/api/insights/agency", json=agency_payload, headers=creator_headers)

        assert response.status_code == 403


# =============================================================================
# Compute
# =============================================================================


class TestComputeInsightsEndpoint:

    def test_empty_snapshot(self, client, creator_headers):
        response = client.post("/api/insights", json={}, headers=creator_headers)

        assert response.status_code == 200
        assert response.json() == {"insights": [], "total": 0}

    def test_default_limit_is_three(self, client, creator_headers, busy_payload):
        response = client.post("/api/insights", json=busy_payload, headers=creator_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert [i["severity"] for i in data["insights"]] == ["risk", "warning", "warning"]
        assert [i["insight_key"] for i in data["insights"]] == [
            "overdue_tasks",
            "company_concentration",
            "completion_rate_low",
        ]

    def test_limit_query(self, client, creator_headers, busy_payload):
        response = client.post("/api/insights?limit=10", json=busy_payload, headers=creator_headers)

        insights = response.json()["insights"]
        assert len(insights) == 4
        assert insights[-1]["insight_key"] == "no_events_week"

    def test_creator_insights_omit_creator_name(self, client, creator_headers, busy_payload):
        response = client.post("/api/insights", json=busy_payload, headers=creator_headers)

        for insight in response.json()["insights"]:
            assert "creator_name" not in insight

    def test_invalid_task_status_is_400(self, client, creator_headers):
        response = client.post(
            "/api/insights",
            json={"tasks": [{"id": "t1", "status": "BLOCKED"}]},
            headers=creator_headers,
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["fields"][0]["field"] == "tasks.0.status"

    def test_non_object_body_is_400(self, client, creator_headers):
        response = client.post("/api/insights", json=[1, 2], headers=creator_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_limit_out_of_range_is_400(self, client, creator_headers):
        response = client.post("/api/insights?limit=0", json={}, headers=creator_headers)

        assert response.status_code == 400

    def test_agency_endpoint(self, client, agency_headers, agency_payload):
        response = client.post("/api/insights/agency?limit=10", json=agency_payload, headers=agency_headers)

        assert response.status_code == 200
        insights = response.json()["insights"]
        assert insights[0]["severity"] == "risk"
        assert {i["creator_name"] for i in insights} == {"Dana"}
        assert "creator_at_risk:creator-1" in {i["id"] for i in insights}

    def test_agency_endpoint_empty(self, client, agency_headers):
        response = client.post("/api/insights/agency", json={"creators": []}, headers=agency_headers)

        assert response.json() == {"insights": [], "total": 0}


# =============================================================================
# Persistence
# =============================================================================


class TestDismissAndHistory:

    def test_dismiss_hides_insight_for_today(self, client, creator_headers, busy_payload):
        client.post("/api/insights?persist=true&limit=10", json=busy_payload, headers=creator_headers)

        response = client.post("/api/insights/overdue_tasks/dismiss", headers=creator_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True}

        again = client.post("/api/insights?persist=true&limit=10", json=busy_payload, headers=creator_headers)
        keys = [i["insight_key"] for i in again.json()["insights"]]
        assert "overdue_tasks" not in keys
        assert again.json()["total"] == 3

    def test_persist_records_only_returned_insights(self, client, creator_headers, busy_payload):
        response = client.post("/api/insights?limit=1&persist=true", json=busy_payload, headers=creator_headers)
        assert len(response.json()["insights"]) == 1

        history = client.get("/api/insights/history", headers=creator_headers).json()

        assert history["total"] == 1
        assert history["items"][0]["insight_id"] == "overdue_tasks"

    def test_without_persist_dismissals_are_ignored(self, client, creator_headers, busy_payload):
        client.post("/api/insights?persist=true", json=busy_payload, headers=creator_headers)
        client.post("/api/insights/overdue_tasks/dismiss", headers=creator_headers)

        response = client.post("/api/insights", json=busy_payload, headers=creator_headers)

        assert response.json()["insights"][0]["insight_key"] == "overdue_tasks"

    def test_dismiss_unknown_insight_is_404(self, client, creator_headers):
        response = client.post("/api/insights/overdue_tasks/dismiss", headers=creator_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_dismiss_is_user_scoped(self, client, creator_headers, busy_payload):
        client.post("/api/insights?persist=true", json=busy_payload, headers=creator_headers)

        response = client.post("/api/insights/overdue_tasks/dismiss", headers={"X-User-Id": "someone-else"})

        assert response.status_code == 404

    def test_history(self, client, creator_headers, busy_payload):
        client.post("/api/insights?persist=true&limit=10", json=busy_payload, headers=creator_headers)
        client.post("/api/insights/overdue_tasks/dismiss", headers=creator_headers)

        response = client.get("/api/insights/history?limit=2", headers=creator_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert data["has_more"] is True
        assert len(data["items"]) == 2
        assert {i["created_for_date"] for i in data["items"]} == {"2026-10-21"}

        dismissed = [
            i for i in client.get("/api/insights/history", headers=creator_headers).json()["items"]
            if i["insight_id"] == "overdue_tasks"
        ]
        assert dismissed[0]["dismissed_at"] is not None


# =============================================================================
# Static config
# =============================================================================


class TestSeverityConfig:

    def test_severity_config(self, client, creator_headers):
        response = client.get("/api/insights/severity-config", headers=creator_headers)

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"info", "warning", "risk"}
        assert data["risk"]["color"] == "text-red-600"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
