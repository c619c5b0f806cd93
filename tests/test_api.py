from fastapi.testclient import TestClient

from roster.config import AppConfig, DatabaseConfig
from server.main import create_app


def _employee(client, **overrides):
    body = {"name": "Ana", "role": "Barista", "email": "ana@example.com", "phone": "555-0100"}
    body.update(overrides)
    return client.post("/api/employees", json=body)


def _shift(client, **overrides):
    body = {"date": "2024-01-01", "start_time": "09:00", "end_time": "17:00", "position": "Barista"}
    body.update(overrides)
    return client.post("/api/shifts", json=body)


class TestEmployeeAPI:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_list_empty(self, client):
        response = client.get("/api/employees")
        assert response.status_code == 200
        assert response.json() == []

    def test_create_and_get(self, client):
        response = _employee(client)
        assert response.status_code == 200
        created = response.json()
        assert created["id"] >= 1
        assert created["name"] == "Ana"
        assert "created_at" in created

        fetched = client.get(f"/api/employees/{created['id']}").json()
        assert fetched == created

    def test_create_missing_name_is_400(self, client):
        response = _employee(client, name="")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: name"}
        assert client.get("/api/employees").json() == []

    def test_create_without_body_is_400(self, client):
        response = client.post("/api/employees")
        assert response.status_code == 400
        assert "name" in response.json()["error"]

    def test_create_with_non_object_body_is_400(self, client):
        response = client.post("/api/employees", json=["Ana", "Barista"])
        assert response.status_code == 400
        assert "error" in response.json()

    def test_create_with_invalid_json_is_400(self, client):
        response = client.post(
            "/api/employees", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert "error" in response.json()

    def test_list_is_ordered_by_name(self, client):
        for name in ["Zoe", "Ana", "Mia"]:
            _employee(client, name=name)
        names = [e["name"] for e in client.get("/api/employees").json()]
        assert names == ["Ana", "Mia", "Zoe"]

    def test_get_missing_is_404(self, client):
        response = client.get("/api/employees/999999")
        assert response.status_code == 404
        assert response.json() == {"error": "Employee not found"}

    def test_non_integer_id_is_404(self, client):
        for path in ("/api/employees/abc", "/api/employees/1.5", "/api/employees/--5"):
            response = client.get(path)
            assert response.status_code == 404
            assert response.json() == {"error": "Employee not found"}

        assert client.put("/api/employees/abc", json={"name": "X", "role": "Y"}).status_code == 404
        assert client.delete("/api/employees/abc").status_code == 404

    def test_id_beyond_integer_range_is_404(self, client):
        huge = "9" * 25
        assert client.get(f"/api/employees/{huge}").json() == {"error": "Employee not found"}
        assert client.put(f"/api/employees/{huge}", json={"name": "X", "role": "Y"}).status_code == 404
        assert client.delete(f"/api/employees/{huge}").status_code == 404

    def test_update_echoes_input(self, client):
        emp_id = _employee(client).json()["id"]
        response = client.put(
            f"/api/employees/{emp_id}",
            json={"name": "Ana Lee", "role": "Manager", "email": None, "phone": "555-0199"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "id": emp_id, "name": "Ana Lee", "role": "Manager", "email": None, "phone": "555-0199",
        }
        assert client.get(f"/api/employees/{emp_id}").json()["role"] == "Manager"

    def test_update_missing_is_404(self, client):
        response = client.put("/api/employees/999999", json={"name": "X", "role": "Y"})
        assert response.status_code == 404

    def test_update_with_null_name_is_500(self, client):
        emp_id = _employee(client).json()["id"]
        response = client.put(f"/api/employees/{emp_id}", json={"role": "Manager"})
        assert response.status_code == 500
        assert "NOT NULL" in response.json()["error"]

    def test_delete_then_delete_again(self, client):
        emp_id = _employee(client).json()["id"]

        first = client.delete(f"/api/employees/{emp_id}")
        assert first.status_code == 200
        assert first.json() == {"message": "Employee deleted", "id": emp_id}

        second = client.delete(f"/api/employees/{emp_id}")
        assert second.status_code == 404


class TestShiftAPI:

    def test_create_returns_shift_without_employee_name(self, client):
        response = _shift(client, employee_id=7, notes="Opening")
        assert response.status_code == 200
        body = response.json()
        assert body["employee_id"] == 7
        assert body["notes"] == "Opening"
        assert "employee_name" not in body

    def test_create_missing_fields_is_400(self, client):
        response = client.post("/api/shifts", json={"date": "", "position": "Cook"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: date, start_time, end_time"}

    def test_create_with_bad_employee_id_is_400(self, client):
        response = _shift(client, employee_id="abc")
        assert response.status_code == 400
        assert "employee_id" in response.json()["error"]

    def test_employee_id_string_is_decoded(self, client):
        body = _shift(client, employee_id="4").json()
        assert body["employee_id"] == 4

    def test_empty_employee_id_means_unassigned(self, client):
        body = _shift(client, employee_id="").json()
        assert body["employee_id"] is None

    def test_list_includes_employee_name(self, client):
        emp_id = _employee(client, name="Ana").json()["id"]
        _shift(client, employee_id=emp_id)
        _shift(client, date="2024-01-02")

        shifts = client.get("/api/shifts").json()
        assert [s["employee_name"] for s in shifts] == ["Ana", None]

    def test_list_ordering(self, client):
        _shift(client, date="2024-01-02", start_time="08:00")
        _shift(client, date="2024-01-01", start_time="12:00")
        _shift(client, date="2024-01-01", start_time="06:00")

        shifts = client.get("/api/shifts").json()
        assert [(s["date"], s["start_time"]) for s in shifts] == [
            ("2024-01-01", "06:00"),
            ("2024-01-01", "12:00"),
            ("2024-01-02", "08:00"),
        ]

    def test_filter_precedence(self, client):
        _shift(client, date="2024-01-01", employee_id=1)
        _shift(client, date="2024-01-02", employee_id=2)

        by_date = client.get("/api/shifts", params={"date": "2024-01-01", "employee_id": 2}).json()
        assert [s["date"] for s in by_date] == ["2024-01-01"]

        by_employee = client.get("/api/shifts", params={"employee_id": 2}).json()
        assert [s["employee_id"] for s in by_employee] == [2]

    def test_empty_date_falls_back_to_employee_filter(self, client):
        _shift(client, employee_id=1)
        _shift(client, employee_id=2)
        shifts = client.get("/api/shifts", params={"date": "", "employee_id": "1"}).json()
        assert [s["employee_id"] for s in shifts] == [1]

    def test_unparseable_employee_id_query_matches_nothing(self, client):
        _shift(client, employee_id=1)
        for value in ("one", "--5", "\u00b2", "9" * 25):
            response = client.get("/api/shifts", params={"employee_id": value})
            assert response.status_code == 200
            assert response.json() == []

    def test_employee_id_beyond_integer_range_is_400(self, client):
        response = _shift(client, employee_id=10 ** 20)
        assert response.status_code == 400
        assert response.json() == {"error": "employee_id must be an integer"}
        assert client.get("/api/shifts").json() == []

    def test_shift_id_not_found_variants(self, client):
        for shift_id in ("abc", "9" * 25):
            assert client.get(f"/api/shifts/{shift_id}").json() == {"error": "Shift not found"}
            assert client.delete(f"/api/shifts/{shift_id}").status_code == 404
        body = {"date": "2024-02-01", "start_time": "10:00", "end_time": "18:00", "position": "Cook"}
        assert client.put("/api/shifts/abc", json=body).status_code == 404

    def test_get_and_missing(self, client):
        shift_id = _shift(client).json()["id"]
        assert client.get(f"/api/shifts/{shift_id}").json()["employee_name"] is None
        assert client.get("/api/shifts/999999").status_code == 404
        assert client.get("/api/shifts/999999").json() == {"error": "Shift not found"}

    def test_update(self, client):
        shift_id = _shift(client).json()["id"]
        response = client.put(
            f"/api/shifts/{shift_id}",
            json={"date": "2024-02-01", "start_time": "10:00", "end_time": "18:00",
                  "position": "Cook", "employee_id": 3, "notes": None},
        )
        assert response.status_code == 200
        assert response.json() == {
            "id": shift_id, "date": "2024-02-01", "start_time": "10:00", "end_time": "18:00",
            "position": "Cook", "employee_id": 3, "notes": None,
        }

    def test_update_missing_is_404(self, client):
        response = client.put(
            "/api/shifts/999999",
            json={"date": "2024-02-01", "start_time": "10:00", "end_time": "18:00", "position": "Cook"},
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Shift not found"}

    def test_dangling_reference(self, client):
        emp_id = _employee(client).json()["id"]
        shift_id = _shift(client, employee_id=emp_id).json()["id"]

        assert client.delete(f"/api/employees/{emp_id}").status_code == 200

        shift = client.get(f"/api/shifts/{shift_id}").json()
        assert shift["employee_id"] == emp_id
        assert shift["employee_name"] is None

    def test_delete_then_delete_again(self, client):
        shift_id = _shift(client).json()["id"]
        first = client.delete(f"/api/shifts/{shift_id}")
        assert first.json() == {"message": "Shift deleted", "id": shift_id}
        assert client.delete(f"/api/shifts/{shift_id}").status_code == 404


def test_custom_prefix_and_restart(db_path):
    cfg = AppConfig(database=DatabaseConfig(path=str(db_path)))
    cfg.server.api_prefix = "/v1"

    with TestClient(create_app(cfg)) as client:
        emp_id = client.post("/v1/employees", json={"name": "Ana", "role": "Barista"}).json()["id"]
        assert client.get("/api/employees").status_code == 404

    with TestClient(create_app(cfg)) as client:
        assert client.get(f"/v1/employees/{emp_id}").json()["name"] == "Ana"
