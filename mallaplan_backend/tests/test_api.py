"""
End-to-end tests through the FastAPI app against an in-memory database.
"""

CURRICULUM = {
    "courses": [
        {"code": "MAT001", "name": "Calculo I", "credits": 3},
        {"code": "PRG001", "name": "Programacion I", "credits": 4},
        {"code": "PRG002", "name": "Programacion II", "credits": 4, "prerequisites": ["PRG001"]},
    ]
}


def _load(client, history=None, curriculum=CURRICULUM):
    resp = client.put("/api/curricula/ICCI", json=curriculum)
    assert resp.status_code == 200
    if history is not None:
        resp = client.put("/api/students/student-123/history", json=history)
        assert resp.status_code == 200


def _register(client, email="ana@alumnos.ucn.cl", password="secreto123"):
    resp = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "name": "Ana",
        "career_code": "ICCI",
    })
    return resp


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestCurriculaEndpoints:
    def test_put_and_get(self, client):
        _load(client)
        data = client.get("/api/curricula/ICCI").json()
        assert data["career_code"] == "ICCI"
        assert data["total_courses"] == 3
        assert [c["code"] for c in data["courses"]] == ["MAT001", "PRG001", "PRG002"]
        assert data["courses"][2]["prerequisites"] == ["PRG001"]

    def test_unknown_career_is_404(self, client):
        resp = client.get("/api/curricula/NOPE")
        assert resp.status_code == 404
        assert "NOPE" in resp.json()["detail"]

    def test_course_lookup(self, client):
        _load(client)
        assert client.get("/api/curricula/ICCI/courses/PRG001").json()["credits"] == 4
        assert client.get("/api/curricula/ICCI/courses/NOPE").status_code == 404

    def test_duplicate_codes_rejected(self, client):
        resp = client.put("/api/curricula/ICCI", json={"courses": [
            {"code": "MAT001", "name": "a", "credits": 3},
            {"code": "MAT001", "name": "b", "credits": 3},
        ]})
        assert resp.status_code == 422

    def test_non_positive_credits_rejected(self, client):
        resp = client.put("/api/curricula/ICCI", json={"courses": [
            {"code": "MAT001", "name": "a", "credits": 0},
        ]})
        assert resp.status_code == 422


class TestHistoryEndpoints:
    def test_round_trip_and_pending(self, client):
        _load(client, {"approved": ["MAT001"], "failed": ["FIS001"]})
        data = client.get("/api/students/student-123/history").json()
        assert data == {"student_id": "student-123", "approved": ["MAT001"], "failed": ["FIS001"]}

        pending = client.get("/api/students/student-123/pending", params={"career_code": "ICCI"}).json()
        assert pending["pending"] == ["PRG001", "PRG002"]

    def test_unknown_student_has_empty_history(self, client):
        data = client.get("/api/students/nobody/history").json()
        assert data["approved"] == []
        assert data["failed"] == []


class TestProgressEndpoints:
    def test_create_list_update(self, client):
        student_id = _register(client).json()["student_id"]
        resp = client.post(f"/api/students/{student_id}/progress", json={
            "course_code": "MAT001", "status": "approved", "grade": 55, "year": 2024, "period": "S1",
        })
        assert resp.status_code == 201
        record = resp.json()
        assert record["period"] == "S1"
        assert record["status"] == "approved"

        resp = client.put(f"/api/progress/{record['id']}", json={"status": "failed", "grade": 35})
        assert resp.json()["status"] == "failed"

        records = client.get(f"/api/students/{student_id}/progress").json()
        assert [r["grade"] for r in records] == [35]

    def test_unknown_student(self, client):
        resp = client.post("/api/students/ghost/progress", json={
            "course_code": "MAT001", "status": "approved", "year": 2024, "period": "S1",
        })
        assert resp.status_code == 404
        assert client.get("/api/students/ghost/progress").status_code == 404

    def test_grade_out_of_range(self, client):
        student_id = _register(client).json()["student_id"]
        resp = client.post(f"/api/students/{student_id}/progress", json={
            "course_code": "MAT001", "status": "approved", "grade": 80, "year": 2024, "period": "S1",
        })
        assert resp.status_code == 422

    def test_unknown_record(self, client):
        assert client.put("/api/progress/999", json={"grade": 40}).status_code == 404


class TestManualSimulation:
    def test_valid_plan_is_projected(self, client):
        _load(client, {"approved": ["MAT001"], "failed": []})
        resp = client.post("/api/simulations/manual", json={
            "student_id": "student-123",
            "career_code": "ICCI",
            "manual_plan": [{"period": "S1", "year": 2025, "courses": ["PRG001"]}],
            "max_credits_per_semester": 10,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "complete"
        assert data["estimated_graduation"] == "S2-2025"
        assert [t["term"] for t in data["full_plan"]] == ["S1-2025", "S2-2025"]
        assert data["full_plan"][1]["courses"] == ["PRG002"]
        assert data["total_credits_per_semester"] == [
            {"semester": "S1-2025", "credits": 4},
            {"semester": "S2-2025", "credits": 4},
        ]
        assert data["approved_courses"] == ["MAT001", "PRG001", "PRG002"]
        assert data["pending_courses"] == []

    def test_missing_prerequisite_is_400(self, client):
        _load(client, {"approved": [], "failed": []})
        resp = client.post("/api/simulations/manual", json={
            "student_id": "student-123",
            "career_code": "ICCI",
            "manual_plan": [{"period": "S1", "year": 2025, "courses": ["PRG002"]}],
            "max_credits_per_semester": 10,
        })
        assert resp.status_code == 400
        body = resp.json()
        assert body["period"] == "S1"
        assert body["year"] == 2025
        assert body["reason"] == "missing prerequisite PRG001 for PRG002"
        assert body["detail"].startswith("Error in S1 2025")

    def test_retake_term_with_new_course_is_400(self, client):
        _load(client, {"approved": [], "failed": []})
        resp = client.post("/api/simulations/manual", json={
            "student_id": "student-123",
            "career_code": "ICCI",
            "manual_plan": [{"period": "I", "year": 2025, "courses": ["PRG001"]}],
            "max_credits_per_semester": 10,
        })
        assert resp.status_code == 400
        assert "only retakes allowed in I/V" in resp.json()["reason"]

    def test_unknown_career_is_404(self, client):
        resp = client.post("/api/simulations/manual", json={
            "student_id": "student-123",
            "career_code": "NOPE",
            "manual_plan": [],
            "max_credits_per_semester": 10,
        })
        assert resp.status_code == 404

    def test_deadlock_reported_as_incomplete(self, client):
        curriculum = {"courses": CURRICULUM["courses"] + [
            {"code": "LOOP01", "name": "Loop", "credits": 3, "prerequisites": ["LOOP01"]},
        ]}
        _load(client, {"approved": ["MAT001"], "failed": []}, curriculum=curriculum)
        resp = client.post("/api/simulations/manual", json={
            "student_id": "student-123",
            "career_code": "ICCI",
            "manual_plan": [{"period": "S1", "year": 2025, "courses": ["PRG001"]}],
            "max_credits_per_semester": 10,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "incomplete"
        assert data["message"] == "Plan incomplete, 1 course(s) pending."
        assert data["pending_courses"] == ["LOOP01"]

    def test_omitted_cap_uses_configured_default(self, client, monkeypatch):
        from mallaplan.core.config import settings

        monkeypatch.setattr(settings, "default_max_credits", 4)
        _load(client, {"approved": [], "failed": []})
        resp = client.post("/api/simulations/manual", json={
            "student_id": "student-123",
            "career_code": "ICCI",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert [t["courses"] for t in data["full_plan"]] == [["MAT001"], ["PRG001"], ["PRG002"]]
        assert all(item["credits"] <= 4 for item in data["total_credits_per_semester"])

    def test_cap_must_be_positive(self, client):
        resp = client.post("/api/simulations/manual", json={
            "student_id": "student-123",
            "career_code": "ICCI",
            "max_credits_per_semester": 0,
        })
        assert resp.status_code == 422


class TestAutomaticSimulation:
    def test_starts_after_latest_recorded_term(self, client):
        _load(client)
        student_id = _register(client).json()["student_id"]
        client.post(f"/api/students/{student_id}/progress", json={
            "course_code": "MAT001", "status": "approved", "year": 2024, "period": "S2",
        })
        resp = client.post("/api/simulations/automatic", json={
            "student_id": student_id,
            "career_code": "ICCI",
            "max_credits_per_semester": 20,
            "max_courses_per_semester": 5,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert [t["term"] for t in data["full_plan"]] == ["S1-2025", "S2-2025"]
        assert data["full_plan"][0]["courses"] == ["PRG001"]
        assert data["estimated_graduation"] == "S2-2025"

    def test_simulated_fail_goes_to_winter_term(self, client):
        _load(client)
        student_id = _register(client).json()["student_id"]
        client.post(f"/api/students/{student_id}/progress", json={
            "course_code": "PRG001", "status": "approved", "year": 2024, "period": "S2",
        })
        resp = client.post("/api/simulations/automatic", json={
            "student_id": student_id,
            "career_code": "ICCI",
            "max_credits_per_semester": 20,
            "max_courses_per_semester": 1,
            "use_summer_winter": True,
            "simulated_fails": ["PRG001"],
        })
        data = resp.json()
        assert [t["term"] for t in data["full_plan"]] == ["S1-2025", "I-2025", "S2-2025"]
        assert [t["courses"] for t in data["full_plan"]] == [["MAT001"], ["PRG001"], ["PRG002"]]
        assert data["pending_courses"] == []

    def test_winter_term_right_after_latest_first_semester(self, client):
        _load(client)
        student_id = _register(client).json()["student_id"]
        for code, status in (("MAT001", "approved"), ("PRG001", "failed")):
            client.post(f"/api/students/{student_id}/progress", json={
                "course_code": code, "status": status, "year": 2024, "period": "S1",
            })
        resp = client.post("/api/simulations/automatic", json={
            "student_id": student_id,
            "career_code": "ICCI",
            "max_credits_per_semester": 20,
            "max_courses_per_semester": 5,
            "use_summer_winter": True,
        })
        data = resp.json()
        assert [t["term"] for t in data["full_plan"]] == ["I-2024", "S2-2024"]
        assert [t["courses"] for t in data["full_plan"]] == [["PRG001"], ["PRG002"]]

    def test_credit_bounds(self, client):
        resp = client.post("/api/simulations/automatic", json={
            "student_id": "student-123",
            "career_code": "ICCI",
            "max_credits_per_semester": 10,
            "max_courses_per_semester": 5,
        })
        assert resp.status_code == 422


class TestAuthEndpoints:
    def test_register_login_and_me(self, client):
        resp = _register(client)
        assert resp.status_code == 201
        student_id = resp.json()["student_id"]

        resp = client.post("/api/auth/login", json={
            "email": "ana@alumnos.ucn.cl", "password": "secreto123",
        })
        assert resp.status_code == 200
        token = resp.json()["access_token"]

        me = client.get("/api/me", headers={"Authorization": f"Bearer {token}"}).json()
        assert me["id"] == student_id
        assert me["career_code"] == "ICCI"

    def test_duplicate_email(self, client):
        _register(client)
        assert _register(client).status_code == 400

    def test_wrong_password(self, client):
        _register(client)
        resp = client.post("/api/auth/login", json={
            "email": "ana@alumnos.ucn.cl", "password": "incorrecta",
        })
        assert resp.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/me").status_code == 401
        assert client.get("/api/me", headers={"Authorization": "Bearer nope"}).status_code == 401

    def test_token_carries_student_career(self, client):
        from mallaplan.core.security import decode_student_token

        data = _register(client).json()
        assert data["career_code"] == "ICCI"
        claims = decode_student_token(data["access_token"])
        assert claims.student_id == data["student_id"]
        assert claims.career_code == "ICCI"

    def test_token_for_another_career_is_rejected(self, client):
        from mallaplan.core.security import create_student_token

        student_id = _register(client).json()["student_id"]
        token = create_student_token(student_id, "ICI")
        resp = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
