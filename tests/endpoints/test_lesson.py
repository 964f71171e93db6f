from fastapi.testclient import TestClient
from tests.helpers.asserts import api_call, assert_error, link_pairs


def test_create_lesson_returns_created_lesson(client: TestClient, auth_headers, admin_id, lesson_payload):
    body = lesson_payload(
        description="Newton's laws",
        pdfUrl="https://example.com/forces.pdf",
        videoUrl="https://www.youtube.com/watch?v=abc123",
        links=[{"title": "Khan Academy", "url": "https://khanacademy.org"}],
    )
    response = client.post("/lessons", json=body, headers=auth_headers)
    assert response.status_code == 201, response.text

    lesson = response.json()
    assert lesson["id"]
    assert lesson["title"] == "Les forces"
    assert lesson["placementKind"] == "curriculum"
    assert lesson["level"] == "Lycée"
    assert lesson["year"] == "1ère année"
    assert lesson["chapter"] == "Mécanique"
    assert lesson["lessonType"] == "Cours"
    assert lesson["order"] == 1
    assert lesson["grade"] is None
    assert lesson["pdfUrl"] == "https://example.com/forces.pdf"
    assert lesson["published"] is False
    assert lesson["createdBy"] == admin_id
    assert lesson["createdAt"] and lesson["updatedAt"]
    assert link_pairs(lesson) == [("Khan Academy", "https://khanacademy.org")]


def test_get_lesson_round_trip(client: TestClient, auth_headers, lesson_payload):
    links = [
        {"title": "Khan Academy", "url": "https://khanacademy.org"},
        {"title": "PhET", "url": "https://phet.colorado.edu"},
        {"title": "Wikipedia", "url": "https://fr.wikipedia.org/wiki/Force"},
    ]
    body = lesson_payload(description="Intro", links=links)
    created = api_call(client, "POST", "/lessons", headers=auth_headers, json=body).json()

    fetched = api_call(client, "GET", f"/lessons/{created['id']}", headers=auth_headers).json()
    generated = {"id", "createdAt", "updatedAt", "links"}
    assert {k: v for k, v in fetched.items() if k not in generated} == {
        k: v for k, v in created.items() if k not in generated
    }
    assert link_pairs(fetched) == [(l["title"], l["url"]) for l in links]


def test_create_grade_placement_lesson(client: TestClient, auth_headers, lesson_payload):
    lesson = api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(grade="Grade 10")).json()
    assert lesson["placementKind"] == "grade"
    assert lesson["subject"] == "Physics"
    assert lesson["grade"] == "Grade 10"
    assert lesson["level"] is None
    assert lesson["order"] is None


def test_create_accepts_snake_case_fields(client: TestClient, auth_headers, lesson_payload):
    body = lesson_payload(pdf_url="https://example.com/a.pdf")
    body["lesson_type"] = body.pop("lessonType")
    lesson = api_call(client, "POST", "/lessons", headers=auth_headers, json=body).json()
    assert lesson["pdfUrl"] == "https://example.com/a.pdf"
    assert lesson["lessonType"] == "Cours"


def test_curriculum_defaults(client: TestClient, auth_headers):
    body = {"title": "Atomes", "subject": "Chimie", "level": "Collège", "year": "3ème", "chapter": ""}
    lesson = api_call(client, "POST", "/lessons", headers=auth_headers, json=body).json()
    assert lesson["lessonType"] == "Cours"
    assert lesson["order"] == 0
    assert lesson["chapter"] is None


def test_create_requires_title_and_placement(client: TestClient, auth_headers, lesson_payload):
    assert_error(client.post("/lessons", json=lesson_payload(title="  "), headers=auth_headers), 422, "VALIDATION_ERROR")
    assert_error(client.post("/lessons", json={"title": "No placement", "subject": "Physics"}, headers=auth_headers), 422, "VALIDATION_ERROR")
    assert_error(client.post("/lessons", json={"title": "No subject", "grade": "Grade 10"}, headers=auth_headers), 422, "VALIDATION_ERROR")
    assert_error(client.post("/lessons", json=lesson_payload(year=None), headers=auth_headers), 422, "VALIDATION_ERROR")
    assert client.get("/lessons", headers=auth_headers).json() == []


def test_create_rejects_invalid_urls(client: TestClient, auth_headers, lesson_payload):
    response = client.post("/lessons", json=lesson_payload(videoUrl="not a url"), headers=auth_headers)
    assert_error(response, 422, "VALIDATION_ERROR")
    response = client.post("/lessons", json=lesson_payload(links=[{"title": "x", "url": "ftp://files"}]), headers=auth_headers)
    assert_error(response, 422, "VALIDATION_ERROR")


def test_get_missing_lesson_returns_404(client: TestClient, auth_headers):
    assert_error(client.get("/lessons/does-not-exist", headers=auth_headers), 404, "NOT_FOUND")


def test_update_replaces_fields_and_links(client: TestClient, auth_headers, admin_id, lesson_payload):
    created = api_call(
        client, "POST", "/lessons", headers=auth_headers,
        json=lesson_payload(links=[{"title": "Khan Academy", "url": "https://khanacademy.org"}]),
    ).json()

    body = lesson_payload(
        title="Les forces (révisé)",
        order=4,
        published=True,
        links=[{"title": "New", "url": "https://example.com"}],
    )
    updated = api_call(client, "PUT", f"/lessons/{created['id']}", headers=auth_headers, json=body).json()
    assert updated["title"] == "Les forces (révisé)"
    assert updated["order"] == 4
    assert updated["published"] is True
    assert updated["createdBy"] == admin_id
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] >= created["updatedAt"]

    fetched = api_call(client, "GET", f"/lessons/{created['id']}", headers=auth_headers).json()
    assert link_pairs(fetched) == [("New", "https://example.com")]


def test_update_with_empty_links_clears_them(client: TestClient, auth_headers, lesson_payload):
    created = api_call(
        client, "POST", "/lessons", headers=auth_headers,
        json=lesson_payload(links=[{"title": "A", "url": "https://a.example.com"}, {"title": "B", "url": "https://b.example.com"}]),
    ).json()

    api_call(client, "PUT", f"/lessons/{created['id']}", headers=auth_headers, json=lesson_payload(links=[]))
    fetched = api_call(client, "GET", f"/lessons/{created['id']}", headers=auth_headers).json()
    assert fetched["links"] == []


def test_update_without_links_keeps_them(client: TestClient, auth_headers, lesson_payload):
    created = api_call(
        client, "POST", "/lessons", headers=auth_headers,
        json=lesson_payload(links=[{"title": "A", "url": "https://a.example.com"}]),
    ).json()

    updated = api_call(client, "PUT", f"/lessons/{created['id']}", headers=auth_headers, json=lesson_payload(title="Renamed")).json()
    assert link_pairs(updated) == [("A", "https://a.example.com")]


def test_update_can_switch_placement(client: TestClient, auth_headers, lesson_payload):
    created = api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(grade="Grade 10")).json()
    updated = api_call(client, "PUT", f"/lessons/{created['id']}", headers=auth_headers, json=lesson_payload()).json()
    assert updated["placementKind"] == "curriculum"
    assert updated["grade"] is None
    assert updated["level"] == "Lycée"


def test_update_missing_lesson_returns_404(client: TestClient, auth_headers, lesson_payload):
    assert_error(client.put("/lessons/missing", json=lesson_payload(), headers=auth_headers), 404, "NOT_FOUND")


def test_delete_lesson(client: TestClient, auth_headers, lesson_payload):
    created = api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload()).json()

    response = api_call(client, "DELETE", f"/lessons/{created['id']}", headers=auth_headers)
    assert response.json() == {"success": True}
    assert_error(client.get(f"/lessons/{created['id']}", headers=auth_headers), 404, "NOT_FOUND")
    assert_error(client.delete(f"/lessons/{created['id']}", headers=auth_headers), 404, "NOT_FOUND")


def test_list_filters_are_conjunctive(client: TestClient, auth_headers, lesson_payload):
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="A", subject="Physique"))
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="B", subject="Chimie"))
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="C", subject="Chimie", year="2ème année"))

    lessons = api_call(client, "GET", "/lessons", headers=auth_headers, params={"subject": "Chimie", "year": "1ère année"}).json()
    assert [l["title"] for l in lessons] == ["B"]

    lessons = api_call(client, "GET", "/lessons", headers=auth_headers, params={"level": "Lycée"}).json()
    assert len(lessons) == 3


def test_list_curriculum_ordering(client: TestClient, auth_headers, lesson_payload):
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="y2-phys", year="2ème année", order=0))
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="y1-phys-o2", order=2))
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="y1-chim", subject="Chimie", order=9))
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="y1-phys-o1-old", order=1))
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="y1-phys-o1-new", order=1))

    lessons = api_call(client, "GET", "/lessons", headers=auth_headers, params={"level": "Lycée"}).json()
    assert [l["title"] for l in lessons] == [
        "y1-chim",
        "y1-phys-o1-new",
        "y1-phys-o1-old",
        "y1-phys-o2",
        "y2-phys",
    ]


def test_list_grade_filter_orders_newest_first(client: TestClient, auth_headers, lesson_payload):
    for title in ("first", "second", "third"):
        api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(grade="Grade 10", title=title))

    lessons = api_call(client, "GET", "/lessons", headers=auth_headers, params={"grade": "Grade 10"}).json()
    assert [l["title"] for l in lessons] == ["third", "second", "first"]


def test_published_filter_excludes_drafts(client: TestClient, auth_headers, lesson_payload):
    for i in range(6):
        api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title=f"L{i}", published=i % 2 == 0))

    published = api_call(client, "GET", "/lessons", params={"published": "true"}).json()
    assert sorted(l["title"] for l in published) == ["L0", "L2", "L4"]
    assert all(l["published"] for l in published)

    drafts = api_call(client, "GET", "/lessons", headers=auth_headers, params={"published": "false"}).json()
    assert sorted(l["title"] for l in drafts) == ["L1", "L3", "L5"]


def test_anonymous_readers_never_see_drafts(client: TestClient, auth_headers, lesson_payload):
    draft = api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="Draft")).json()
    api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(title="Live", published=True))

    for params in ({}, {"published": "false"}):
        lessons = api_call(client, "GET", "/lessons", params=params).json()
        assert "Draft" not in [l["title"] for l in lessons]

    assert_error(client.get(f"/lessons/{draft['id']}"), 404, "NOT_FOUND")
    assert api_call(client, "GET", f"/lessons/{draft['id']}", headers=auth_headers).json()["title"] == "Draft"


def test_kinematics_publish_scenario(client: TestClient, auth_headers):
    body = {"title": "Kinematics", "subject": "Physics", "grade": "Grade 10", "published": False}
    created = api_call(client, "POST", "/lessons", headers=auth_headers, json=body).json()

    published = api_call(client, "GET", "/lessons", params={"published": "true"}).json()
    assert created["id"] not in [l["id"] for l in published]

    api_call(client, "PUT", f"/lessons/{created['id']}", headers=auth_headers, json={**body, "published": True})

    published = api_call(client, "GET", "/lessons", params={"published": "true"}).json()
    assert created["id"] in [l["id"] for l in published]


def test_partial_update_publishes_lesson(client: TestClient, auth_headers):
    body = {"title": "Kinematics", "subject": "Physics", "grade": "Grade 10", "published": False,
            "links": [{"title": "Khan Academy", "url": "https://khanacademy.org"}]}
    created = api_call(client, "POST", "/lessons", headers=auth_headers, json=body).json()

    updated = api_call(client, "PUT", f"/lessons/{created['id']}", headers=auth_headers, json={"published": True}).json()
    assert updated["published"] is True
    assert updated["title"] == "Kinematics"
    assert updated["grade"] == "Grade 10"
    assert link_pairs(updated) == [("Khan Academy", "https://khanacademy.org")]

    published = api_call(client, "GET", "/lessons", params={"published": "true"}).json()
    assert [l["id"] for l in published] == [created["id"]]


def test_partial_update_keeps_curriculum_fields(client: TestClient, auth_headers, lesson_payload):
    created = api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload()).json()

    updated = api_call(client, "PUT", f"/lessons/{created['id']}", headers=auth_headers, json={"chapter": "Énergie"}).json()
    assert updated["chapter"] == "Énergie"
    assert (updated["level"], updated["year"], updated["order"]) == ("Lycée", "1ère année", 1)
    assert updated["lessonType"] == "Cours"


def test_partial_update_with_incomplete_placement_is_rejected(client: TestClient, auth_headers, lesson_payload):
    created = api_call(client, "POST", "/lessons", headers=auth_headers, json=lesson_payload(grade="Grade 10")).json()

    assert_error(client.put(f"/lessons/{created['id']}", json={"year": "2ème année"}, headers=auth_headers), 422, "VALIDATION_ERROR")
    assert_error(client.put(f"/lessons/{created['id']}", json={"title": None}, headers=auth_headers), 422, "VALIDATION_ERROR")

    fetched = api_call(client, "GET", f"/lessons/{created['id']}", headers=auth_headers).json()
    assert fetched["grade"] == "Grade 10"
    assert fetched["year"] is None
    assert fetched["title"] == "Kinematics"
