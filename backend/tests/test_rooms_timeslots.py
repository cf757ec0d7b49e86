from conftest import create_room, create_teacher, create_time_slot


def test_room_names_are_unique(client):
    create_room(client, "Lab 1")

    duplicate = client.post("/api/rooms/", json={"name": "lab 1"})
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Room name already exists"
    assert [room["name"] for room in client.get("/api/rooms/").json()] == ["Lab 1"]


def test_delete_room(client):
    room = create_room(client, "Hall")
    assert client.delete(f"/api/rooms/{room['id']}").status_code == 200
    assert client.delete(f"/api/rooms/{room['id']}").status_code == 404


def test_time_slot_default_label_and_ordering(client):
    create_time_slot(client, "10:00", "11:00")
    create_time_slot(client, "08:00", "09:00", "Homeroom")

    labels = [slot["label"] for slot in client.get("/api/timeslots/").json()]
    assert labels == ["Homeroom", "10:00 - 11:00"]


def test_time_slot_validation(client):
    create_time_slot(client, "09:00", "10:00", "Period 1")

    assert client.post("/api/timeslots/", json={"start_time": "11:00", "end_time": "10:00"}).status_code == 422
    assert client.post("/api/timeslots/", json={"start_time": "9am", "end_time": "10:00"}).status_code == 422

    clash = client.post("/api/timeslots/", json={"start_time": "12:00", "end_time": "13:00", "label": "period 1"})
    assert clash.status_code == 409

    overlap = client.post("/api/timeslots/", json={"start_time": "09:30", "end_time": "10:30"})
    assert overlap.status_code == 409
    assert overlap.json()["detail"] == "Time slot overlaps with existing slot Period 1"

    touching = client.post("/api/timeslots/", json={"start_time": "10:00", "end_time": "11:00"})
    assert touching.status_code == 201


def test_teacher_workload(client, timetable):
    listed = client.get("/api/teachers/").json()
    assert listed[0]["workload"] is None

    [teacher] = client.get("/api/teachers/", params={"include_workload": True}).json()
    assert teacher["user"]["name"] == "Ada Lovelace"
    assert teacher["workload"] == {
        "class_count": 2,
        "total_students": 60,
        "weekly_hours": 1,
        "is_overloaded": False,
    }


def test_teacher_email_is_unique(client):
    create_teacher(client, "Grace Hopper", "grace@example.com")
    duplicate = client.post("/api/teachers/", json={"name": "Grace H.", "email": "GRACE@example.com"})
    assert duplicate.status_code == 409
