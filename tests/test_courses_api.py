"""HTTP tests for courses, their modules and content items."""

import pytest


@pytest.fixture
def create_course(client, auth_headers, mentor):
    def _create(title="Intro to Flask", description="Routing and templates", status=None, owner=None):
        body = {"title": title, "description": description}
        if status is not None:
            body["status"] = status
        return client.post("/api/v1/courses", json=body, headers=auth_headers(owner or mentor))

    return _create


@pytest.fixture
def course_id(create_course):
    return create_course(status="Published").get_json()["_id"]


@pytest.fixture
def add_module(client, auth_headers, mentor):
    def _add(course_id, title="Basics", order=1, user=None):
        return client.post(
            f"/api/v1/courses/{course_id}/modules",
            json={"title": title, "order": order},
            headers=auth_headers(user or mentor),
        )

    return _add


@pytest.fixture
def module_id(add_module, course_id):
    return add_module(course_id).get_json()["_id"]


@pytest.fixture
def add_item(client, auth_headers, mentor):
    def _add(module_id, user=None, **body):
        return client.post(
            f"/api/v1/modules/{module_id}/content-items",
            json=body,
            headers=auth_headers(user or mentor),
        )

    return _add


# =============================================================================
# Courses
# =============================================================================


class TestCourses:
    def test_mentor_creates_draft_course(self, create_course):
        r = create_course()
        assert r.status_code == 201
        data = r.get_json()
        assert data["status"] == "Draft"
        assert data["mentor"]["firstName"] == "Maya"

    def test_create_validation(self, create_course):
        assert create_course(title="").get_json()["error"] == "MissingField"
        assert create_course(title="x" * 151).get_json()["error"] == "InvalidField"
        assert create_course(status="Live").get_json()["error"] == "InvalidField"

    def test_only_mentors_create(self, create_course, mentee, admin):
        assert create_course(owner=mentee).status_code == 403
        assert create_course(owner=admin).status_code == 403

    def test_mentee_sees_only_published(self, client, auth_headers, create_course, mentee):
        draft_id = create_course(title="Draft course").get_json()["_id"]
        published = create_course(title="Live course", status="Published").get_json()["_id"]

        titles = [c["title"] for c in client.get("/api/v1/courses", headers=auth_headers(mentee)).get_json()]
        assert titles == ["Live course"]
        assert client.get(f"/api/v1/courses/{published}", headers=auth_headers(mentee)).status_code == 200
        assert client.get(f"/api/v1/courses/{draft_id}", headers=auth_headers(mentee)).status_code == 404

    def test_filter_by_mentor(self, client, auth_headers, create_course, other_mentor, mentor):
        create_course(title="Mine")
        create_course(title="Theirs", owner=other_mentor)
        r = client.get(f"/api/v1/courses?mentorId={other_mentor.id}", headers=auth_headers(mentor))
        assert [c["title"] for c in r.get_json()] == ["Theirs"]

    def test_update_keeps_omitted_fields(self, client, auth_headers, course_id, mentor):
        r = client.put(f"/api/v1/courses/{course_id}", json={"title": "Renamed", "description": ""},
                       headers=auth_headers(mentor))
        assert r.status_code == 200
        data = r.get_json()
        assert data["title"] == "Renamed"
        assert data["description"] == "Routing and templates"

    def test_non_owner_cannot_update(self, client, auth_headers, course_id, other_mentor):
        r = client.put(f"/api/v1/courses/{course_id}", json={"title": "Mine now"}, headers=auth_headers(other_mentor))
        assert r.status_code == 403

    def test_admin_may_archive(self, client, auth_headers, course_id, admin):
        r = client.put(f"/api/v1/courses/{course_id}", json={"status": "Archived"}, headers=auth_headers(admin))
        assert r.get_json()["status"] == "Archived"

    def test_delete_removes_modules_and_items(self, client, auth_headers, course_id, add_module, add_item, mentor):
        module_id = add_module(course_id).get_json()["_id"]
        item_id = add_item(module_id, title="Welcome", itemType="Lecture", order=1,
                           lectureContent="Hello").get_json()["_id"]
        headers = auth_headers(mentor)

        assert client.delete(f"/api/v1/courses/{course_id}", headers=headers).status_code == 200
        assert client.get(f"/api/v1/courses/{course_id}", headers=headers).status_code == 404
        assert client.get(f"/api/v1/modules/{module_id}", headers=headers).status_code == 404
        assert client.get(f"/api/v1/content-items/{item_id}", headers=headers).status_code == 404

    def test_course_owner_cannot_be_removed(self, client, auth_headers, course_id, mentor, admin):
        r = client.delete(f"/api/v1/users/{mentor.id}", headers=auth_headers(admin))
        assert r.status_code == 400
        assert r.get_json()["error"] == "Conflict"

    def test_array_body_is_rejected(self, client, auth_headers, mentor):
        r = client.post("/api/v1/courses", json=["title", "description"], headers=auth_headers(mentor))
        assert r.status_code == 400
        assert r.get_json()["error"] == "InvalidField"


# =============================================================================
# Modules
# =============================================================================


class TestModules:
    def test_modules_listed_by_order(self, client, auth_headers, add_module, course_id, mentee):
        add_module(course_id, title="Second", order=2)
        add_module(course_id, title="First", order=1)
        r = client.get(f"/api/v1/courses/{course_id}/modules", headers=auth_headers(mentee))
        assert [m["title"] for m in r.get_json()] == ["First", "Second"]

    def test_title_and_order_required(self, add_module, course_id):
        r = add_module(course_id, title="")
        assert r.status_code == 400
        assert r.get_json()["error"] == "MissingField"
        assert add_module(course_id, order=None).get_json()["error"] == "MissingField"
        assert add_module(course_id, order="first").get_json()["error"] == "InvalidField"

    def test_unknown_course(self, add_module):
        assert add_module(9999).status_code == 404

    def test_non_owner_forbidden(self, add_module, course_id, other_mentor, mentee):
        assert add_module(course_id, user=other_mentor).status_code == 403
        assert add_module(course_id, user=mentee).status_code == 403

    def test_admin_may_add(self, add_module, course_id, admin):
        assert add_module(course_id, user=admin).status_code == 201

    def test_update_order_only_when_given(self, client, auth_headers, module_id, mentor):
        headers = auth_headers(mentor)
        r = client.put(f"/api/v1/modules/{module_id}", json={"title": "Renamed"}, headers=headers)
        assert r.get_json()["order"] == 1
        r = client.put(f"/api/v1/modules/{module_id}", json={"order": 0}, headers=headers)
        data = r.get_json()
        assert data["order"] == 0
        assert data["title"] == "Renamed"

    def test_delete(self, client, auth_headers, module_id, other_mentor, mentor):
        assert client.delete(f"/api/v1/modules/{module_id}", headers=auth_headers(other_mentor)).status_code == 403
        assert client.delete(f"/api/v1/modules/{module_id}", headers=auth_headers(mentor)).status_code == 200
        assert client.get(f"/api/v1/modules/{module_id}", headers=auth_headers(mentor)).status_code == 404

    def test_draft_course_modules_hidden_from_mentee(self, client, auth_headers, create_course, add_module, mentee):
        draft_id = create_course(title="Draft").get_json()["_id"]
        module_id = add_module(draft_id).get_json()["_id"]
        assert client.get(f"/api/v1/courses/{draft_id}/modules", headers=auth_headers(mentee)).status_code == 404
        assert client.get(f"/api/v1/modules/{module_id}", headers=auth_headers(mentee)).status_code == 404


# =============================================================================
# Content Items
# =============================================================================


class TestContentItems:
    def test_lecture_keeps_only_its_body(self, add_item, module_id):
        r = add_item(module_id, title="Welcome", itemType="Lecture", order=1,
                     lectureContent="Hello", videoUrl="https://video.example.com/1")
        assert r.status_code == 201
        data = r.get_json()
        assert data["lectureContent"] == "Hello"
        assert data["videoUrl"] is None

    @pytest.mark.parametrize("item_type, missing", [
        ("Lecture", "lectureContent"),
        ("Video", "videoUrl"),
        ("Task", "taskDescription"),
    ])
    def test_type_body_required(self, add_item, module_id, item_type, missing):
        r = add_item(module_id, title="Item", itemType=item_type, order=1)
        assert r.status_code == 400
        assert missing in r.get_json()["message"]

    def test_resource_body_optional(self, add_item, module_id):
        r = add_item(module_id, title="Slides", itemType="Resource", order=1)
        assert r.status_code == 201
        assert r.get_json()["resourceUrl"] is None

    def test_invalid_and_missing_fields(self, add_item, module_id):
        assert add_item(module_id, title="Item", order=1).get_json()["error"] == "MissingField"
        assert add_item(module_id, title="Item", itemType="Podcast", order=1).get_json()["error"] == "InvalidField"
        r = add_item(module_id, title=["Item"], itemType="Task", order=1, taskDescription="Do it")
        assert r.get_json()["error"] == "InvalidField"

    def test_non_owner_forbidden(self, add_item, module_id, other_mentor):
        r = add_item(module_id, user=other_mentor, title="Item", itemType="Task", order=1, taskDescription="Do it")
        assert r.status_code == 403

    def test_list_by_order(self, client, auth_headers, add_item, module_id, mentee):
        add_item(module_id, title="Later", itemType="Task", order=5, taskDescription="b")
        add_item(module_id, title="Sooner", itemType="Task", order=2, taskDescription="a")
        r = client.get(f"/api/v1/modules/{module_id}/content-items", headers=auth_headers(mentee))
        assert [i["title"] for i in r.get_json()] == ["Sooner", "Later"]

    def test_update_touches_only_its_type_field(self, client, auth_headers, add_item, module_id, mentor):
        item_id = add_item(module_id, title="Clip", itemType="Video", order=1,
                           videoUrl="https://video.example.com/1").get_json()["_id"]
        r = client.put(
            f"/api/v1/content-items/{item_id}",
            json={"videoUrl": "https://video.example.com/2", "lectureContent": "ignored", "order": 3},
            headers=auth_headers(mentor),
        )
        data = r.get_json()
        assert data["videoUrl"] == "https://video.example.com/2"
        assert data["lectureContent"] is None
        assert data["order"] == 3
        assert data["title"] == "Clip"

    def test_attach_resource(self, client, auth_headers, add_item, module_id, mentor):
        item_id = add_item(module_id, title="Slides", itemType="Resource", order=1).get_json()["_id"]
        r = client.put(
            f"/api/v1/content-items/{item_id}/upload-resource",
            json={"resourceUrl": "https://files.example.com/slides.pdf", "originalFileName": "slides.pdf"},
            headers=auth_headers(mentor),
        )
        assert r.status_code == 200
        data = r.get_json()
        assert data["resourceUrl"] == "https://files.example.com/slides.pdf"
        assert data["originalFileName"] == "slides.pdf"

    def test_attach_resource_requires_resource_item(self, client, auth_headers, add_item, module_id, mentor):
        item_id = add_item(module_id, title="Task", itemType="Task", order=1, taskDescription="x").get_json()["_id"]
        r = client.put(f"/api/v1/content-items/{item_id}/upload-resource",
                       json={"resourceUrl": "https://files.example.com/a.pdf"}, headers=auth_headers(mentor))
        assert r.status_code == 400
        assert r.get_json()["error"] == "InvalidField"

    def test_delete(self, client, auth_headers, add_item, module_id, admin):
        item_id = add_item(module_id, title="Task", itemType="Task", order=1, taskDescription="x").get_json()["_id"]
        assert client.delete(f"/api/v1/content-items/{item_id}", headers=auth_headers(admin)).status_code == 200
        assert client.get(f"/api/v1/content-items/{item_id}", headers=auth_headers(admin)).status_code == 404
