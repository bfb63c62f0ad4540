"""
Test the scheduling API with self-contained test data.
"""
import pytest
from fastapi.testclient import TestClient
from main import app


client = TestClient(app)


# Test data fixtures
def get_minimal_request():
    """Return minimal valid scheduling request."""
    return {
        "classes": [
            {
                "id": "c1",
                "class_name": "Welding Level 1 A",
                "class_code": "WLD-1A",
                "trade_id": "welding",
                "capacity": 20,
                "level": 1
            }
        ],
        "courses": [
            {
                "id": "weld-101",
                "name": "Welding Basics",
                "code": "WLD101",
                "trade_id": "welding",
                "level": 1,
                "periods_per_week": 1,
                "required_room_type": "workshop",
                "is_double_period": False
            }
        ],
        "trainers": [
            {
                "id": "t1",
                "full_name": "Jane Mugisha",
                "max_weekly_periods": 10,
                "preferred_daily_periods": 6,
                "trade_ids": ["welding"]
            }
        ],
        "rooms": [
            {
                "id": "r1",
                "name": "Workshop A",
                "code": "WS-A",
                "building_id": "b1",
                "room_type": "workshop",
                "capacity": 25
            }
        ],
        "max_periods": 8
    }


def get_medium_request():
    """Return medium-sized scheduling request with multiple trades and room types."""
    return {
        "classes": [
            {"id": "c1", "class_name": "Welding L1 A", "trade_id": "welding", "capacity": 20, "level": 1},
            {"id": "c2", "class_name": "Welding L1 B", "trade_id": "welding", "capacity": 18, "level": 1},
            {"id": "c3", "class_name": "Electrical L2", "trade_id": "electrical", "capacity": 15, "level": 2,
             "trainer_id": "t3"}
        ],
        "courses": [
            {"id": "weld-101", "name": "Welding Basics", "trade_id": "welding", "level": 1,
             "periods_per_week": 4, "required_room_type": "workshop", "is_double_period": True},
            {"id": "math-101", "name": "Applied Maths", "trade_id": "welding", "level": 1,
             "periods_per_week": 3, "required_room_type": "classroom"},
            {"id": "elec-201", "name": "Circuits", "trade_id": "electrical", "level": 2,
             "periods_per_week": 3, "required_room_type": "lab"}
        ],
        "trainers": [
            {"id": "t1", "full_name": "Alice Uwase", "max_weekly_periods": 20,
             "preferred_daily_periods": 4, "trade_ids": ["welding"]},
            {"id": "t2", "full_name": "Bob Habimana", "max_weekly_periods": 20,
             "preferred_daily_periods": 4, "trade_ids": ["welding"]},
            {"id": "t3", "full_name": "Claire Ineza", "max_weekly_periods": 12,
             "preferred_daily_periods": 3, "trade_ids": ["electrical"]}
        ],
        "rooms": [
            {"id": "r1", "name": "Workshop A", "room_type": "workshop", "capacity": 25},
            {"id": "r2", "name": "Room 101", "room_type": "classroom", "capacity": 30},
            {"id": "r3", "name": "Lab 1", "room_type": "lab", "capacity": 20}
        ],
        "max_periods": 6,
        "config": {
            "optimization_passes": 10,
            "weights": {"trainer_gap": 12}
        },
        "locked_assignments": [
            {
                "lesson_instance_id": "assembly",
                "class_id": "c1",
                "course_id": "math-101",
                "trainer_id": "t1",
                "room_id": "r2",
                "day": "Monday",
                "period_number": 1,
                "is_locked": True,
                "lock_type": "full"
            }
        ]
    }


def get_conflicts():
    """Return a mixed list of conflict reports."""
    return [
        {
            "type": "room_capacity",
            "lesson_instance_id": "lesson-0",
            "class_id": "c1",
            "course_id": "weld-101",
            "trainer_id": "t1",
            "details": "No workshop room with capacity >= 40"
        },
        {
            "type": "no_valid_slot",
            "lesson_instance_id": "lesson-1",
            "class_id": "c2",
            "course_id": "math-101",
            "trainer_id": "t2",
            "details": "No valid slot found for math-101 in class c2"
        },
        {
            "type": "no_valid_slot",
            "lesson_instance_id": "lesson-2",
            "class_id": "c2",
            "course_id": "math-101",
            "trainer_id": "t2",
            "details": "No valid slot found for math-101 in class c2"
        }
    ]


def test_root_endpoint():
    """Test root endpoint is accessible."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert "version" in data
    assert data["status"] == "healthy"


def test_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_generate_endpoint_minimal():
    """Test /api/v1/schedule/generate with minimal valid request."""
    response = client.post("/api/v1/schedule/generate", json=get_minimal_request())

    assert response.status_code == 200
    data = response.json()

    # Verify response structure
    assert data["status"] == "COMPLETE"
    assert data["total_lessons"] == 1
    assert data["placed_lessons"] == 1
    assert data["failed_lessons"] == 0
    assert data["conflicts"] == []
    assert isinstance(data["messages"], dict)
    assert data["solve_time_seconds"] >= 0

    assignment = data["assignments"][0]
    assert assignment["room_id"] == "r1"
    assert assignment["trainer_id"] == "t1"
    assert assignment["day"] in ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert 1 <= assignment["period_number"] <= 8

    # Timetable view carries resolved names
    assert len(data["timetable"]) == 1
    slot = data["timetable"][0]["slots"][0]
    assert slot["class_name"] == "Welding Level 1 A"
    assert slot["course_name"] == "Welding Basics"
    assert slot["trainer_name"] == "Jane Mugisha"
    assert slot["room_name"] == "Workshop A"


def test_generate_endpoint_medium():
    """Test /api/v1/schedule/generate with medium-sized request."""
    response = client.post("/api/v1/schedule/generate", json=get_medium_request())

    assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.json()}"
    data = response.json()

    assert data["status"] in ["COMPLETE", "PARTIAL"]
    assert data["total_lessons"] == data["placed_lessons"] + data["failed_lessons"]
    assert len(data["assignments"]) == data["placed_lessons"]

    # The locked entry comes back untouched
    locked = [a for a in data["assignments"] if a["is_locked"]]
    assert len(locked) == 1
    assert locked[0]["lesson_instance_id"] == "assembly"
    assert (locked[0]["day"], locked[0]["period_number"], locked[0]["room_id"]) == ("Monday", 1, "r2")

    # Practical courses land in rooms of the right type
    rooms = {r["id"]: r for r in get_medium_request()["rooms"]}
    courses = {c["id"]: c for c in get_medium_request()["courses"]}
    for a in data["assignments"]:
        if not a["is_locked"]:
            assert rooms[a["room_id"]]["room_type"] == courses[a["course_id"]]["required_room_type"]


def test_generate_endpoint_reports_partial_schedule():
    """An undersized room leaves the lesson unplaced but the run completes."""
    request = get_minimal_request()
    request["rooms"][0]["capacity"] = 10

    response = client.post("/api/v1/schedule/generate", json=request)
    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "PARTIAL"
    assert data["assignments"] == []
    assert data["conflicts"][0]["type"] == "room_capacity"
    assert data["messages"]["error_message"][0]["code"] == "PARTIAL_SCHEDULE"


def test_empty_request_is_complete():
    """Nothing to schedule is not an error."""
    response = client.post("/api/v1/schedule/generate", json={"max_periods": 6})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "COMPLETE"
    assert data["assignments"] == []
    assert data["timetable"] == []


def test_duplicate_ids_are_infeasible():
    request = get_minimal_request()
    request["trainers"].append(dict(request["trainers"][0]))

    response = client.post("/api/v1/schedule/generate", json=request)
    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "INFEASIBLE"
    error = data["messages"]["error_message"][0]
    assert error["code"] == "INVALID_INPUT"
    assert "title" in error
    assert "Duplicate trainer id: t1" in error["message"]


def test_locked_assignment_outside_grid_is_infeasible():
    request = get_minimal_request()
    request["locked_assignments"] = [
        {
            "lesson_instance_id": "late",
            "class_id": "c1",
            "course_id": "weld-101",
            "trainer_id": "t1",
            "room_id": "r1",
            "day": "Friday",
            "period_number": 8,
            "is_locked": True,
            "is_double_period": True
        }
    ]

    response = client.post("/api/v1/schedule/generate", json=request)
    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "INFEASIBLE"
    assert any("exceeds max periods" in e["message"] for e in data["messages"]["error_message"])


def test_validation_error_format():
    """Test that validation errors return human-friendly format."""
    # Missing required fields
    invalid_request = {
        "classes": [],
    }

    response = client.post("/api/v1/schedule/generate", json=invalid_request)

    # Should return 422 with errors in expected format
    assert response.status_code == 422
    data = response.json()
    assert "errors" in data
    assert isinstance(data["errors"], dict)
    assert data["errors"]["Max Periods"] == ["Max Periods is required."]

    for field, messages in data["errors"].items():
        assert isinstance(messages, list)
        assert len(messages) > 0
        assert isinstance(messages[0], str)


def test_max_periods_must_be_positive():
    request = get_minimal_request()
    request["max_periods"] = 0

    response = client.post("/api/v1/schedule/generate", json=request)
    assert response.status_code == 422
    messages = response.json()["errors"]["Max Periods"]
    assert "greater than or equal" in messages[0]


def test_unknown_room_type_is_rejected():
    request = get_minimal_request()
    request["rooms"][0]["room_type"] = "gym"

    response = client.post("/api/v1/schedule/generate", json=request)
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert any("Room Type" in field for field in errors)


def test_negative_config_override_is_rejected():
    request = get_minimal_request()
    request["config"] = {"max_backtrack_depth": -1}

    response = client.post("/api/v1/schedule/generate", json=request)
    assert response.status_code == 422


def test_format_conflicts_endpoint():
    request = {
        "conflicts": get_conflicts(),
        "course_names": {"weld-101": "Welding Basics"},
        "class_names": {"c1": "Welding L1 A"},
        "trainer_names": {"t1": "Alice Uwase"}
    }

    response = client.post("/api/v1/schedule/conflicts/format", json=request)
    assert response.status_code == 200
    data = response.json()

    assert len(data) == 3
    assert data[0]["title"] == "Room Capacity Insufficient"
    assert data[0]["severity"] == "warning"
    assert data[0]["course_name"] == "Welding Basics"
    assert data[0]["trainer_name"] == "Alice Uwase"
    assert data[0]["description"] == "No workshop room with capacity >= 40"
    # Unresolved names fall back to ids
    assert data[1]["severity"] == "error"
    assert data[1]["class_name"] == "c2"
    assert data[1]["course_name"] == "math-101"


def test_summary_endpoint():
    response = client.post("/api/v1/schedule/conflicts/summary", json=get_conflicts())
    assert response.status_code == 200
    assert response.json() == {"room_capacity": 1, "no_valid_slot": 2}


def test_summary_endpoint_rejects_unknown_conflict_type():
    conflicts = get_conflicts()
    conflicts[0]["type"] = "bad_weather"

    response = client.post("/api/v1/schedule/conflicts/summary", json=conflicts)
    assert response.status_code == 422


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
