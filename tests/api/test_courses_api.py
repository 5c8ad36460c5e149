from learnhub.courses import database as store

NEW_COURSE = {
    "title": "  Data Science 101 ",
    "description": "Pandas and friends",
    "categories": ["Data"],
    "price": 0,
    "level": "intermediate"
}


class TestPublicCatalog:

    async def test_lists_published_only(self, client, make_course):
        published = await make_course(title="Published")
        await make_course(title="Draft", status="draft")

        response = await client.get("/api/courses")

        body = response.json()
        assert response.status_code == 200
        assert [c["course_id"] for c in body["data"]] == [published["course_id"]]
        assert body["data"][0]["owner"] == {"user_id": "USR_TEACHER", "name": "Prof. Ada", "email": "ada@example.com"}
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}

    async def test_pagination_newest_first(self, client, db, make_course):
        for i in range(3):
            course = await make_course(title=f"Course {i}")
            await db.courses.update_one(
                {"course_id": course["course_id"]}, {"$set": {"created_at": course["created_at"].replace(year=2020 + i)}}
            )

        response = await client.get("/api/courses", params={"page": 2, "limit": 2})

        body = response.json()
        assert [c["title"] for c in body["data"]] == ["Course 0"]
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    async def test_search_is_literal_and_case_insensitive(self, client, make_course):
        await make_course(title="C++ Primer")
        await make_course(title="Cooking")

        response = await client.get("/api/courses", params={"search": "c++"})

        assert [c["title"] for c in response.json()["data"]] == ["C++ Primer"]

    async def test_limit_above_max_is_400(self, client):
        response = await client.get("/api/courses", params={"limit": 101})
        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_course_detail(self, client, db, make_course):
        course = await make_course()
        await store.add_student_to_course(db, course, "USR_STUDENT")

        response = await client.get(f"/api/courses/{course['course_id']}")

        data = response.json()["data"]
        assert data["owner"]["bio"] == "Teaches Python"
        assert data["enrolled"] == [{"user_id": "USR_STUDENT", "name": "Alice Learner", "email": "alice@example.com"}]
        assert data["total_duration"] == 20

    async def test_unknown_course(self, client):
        response = await client.get("/api/courses/COURSE_MISSING")
        assert response.status_code == 404


class TestTeacherCourses:

    async def test_create_course(self, client, headers):
        response = await client.post("/api/courses/teacher/course", json=NEW_COURSE, headers=headers("teacher"))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "Data Science 101"
        assert data["educator"] == "Prof. Ada"
        assert data["status"] == "draft"
        assert data["course_id"].startswith("COURSE_")

    async def test_create_requires_category(self, client, headers):
        response = await client.post(
            "/api/courses/teacher/course", json={**NEW_COURSE, "categories": [" "]}, headers=headers("teacher")
        )
        assert response.status_code == 400

    async def test_student_cannot_create(self, client, headers):
        response = await client.post("/api/courses/teacher/course", json=NEW_COURSE, headers=headers("student"))
        assert response.status_code == 403

    async def test_update_own_course(self, client, make_course, headers):
        course = await make_course(status="draft")

        response = await client.put(
            f"/api/courses/teacher/course/{course['course_id']}",
            json={"status": "published", "price": 10},
            headers=headers("teacher")
        )

        data = response.json()["data"]
        assert data["status"] == "published"
        assert data["price"] == 10
        assert data["title"] == "Python Basics"

    async def test_update_rejects_empty_categories(self, client, db, make_course, headers):
        course = await make_course()

        response = await client.put(
            f"/api/courses/teacher/course/{course['course_id']}", json={"categories": []}, headers=headers("teacher")
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        stored = await store.get_course(db, course["course_id"])
        assert stored["categories"] == ["Programming"]

    async def test_update_rejects_blank_title(self, client, make_course, headers):
        course = await make_course()

        response = await client.put(
            f"/api/courses/teacher/course/{course['course_id']}", json={"title": "   "}, headers=headers("teacher")
        )

        assert response.status_code == 400

    async def test_update_other_teachers_course(self, client, make_course, headers):
        course = await make_course()
        response = await client.put(
            f"/api/courses/teacher/course/{course['course_id']}", json={"title": "Mine"}, headers=headers("other_teacher")
        )
        assert response.status_code == 403

    async def test_add_section_defaults_order(self, client, make_course, headers):
        course = await make_course(sections=2)

        response = await client.post(
            f"/api/courses/teacher/course/{course['course_id']}/section",
            json={"title": "Wrap up", "description": "End", "content": "Bye", "duration": 5},
            headers=headers("teacher")
        )

        assert response.status_code == 201
        sections = response.json()["data"]["sections"]
        assert len(sections) == 3
        assert sections[-1]["order"] == 3
        assert sections[-1]["section_id"].startswith("SEC_")

    async def test_delete_blocked_while_enrolled(self, client, db, make_course, headers):
        course = await make_course()
        await store.create_enrollment(db, "USR_STUDENT", course["course_id"], "completed")

        response = await client.delete(f"/api/courses/teacher/course/{course['course_id']}", headers=headers("teacher"))

        assert response.status_code == 400
        assert await store.get_course(db, course["course_id"]) is not None

    async def test_delete_course(self, client, db, make_course, headers):
        course = await make_course()

        response = await client.delete(f"/api/courses/teacher/course/{course['course_id']}", headers=headers("teacher"))

        assert response.status_code == 200
        assert await store.get_course(db, course["course_id"]) is None

    async def test_own_courses_and_students(self, client, db, make_course, headers):
        course = await make_course(sections=2)
        await store.create_enrollment(db, "USR_STUDENT", course["course_id"], "completed")

        mine = await client.get("/api/courses/teacher/courses", headers=headers("teacher"))
        students = await client.get(
            f"/api/courses/teacher/course/{course['course_id']}/students", headers=headers("teacher")
        )

        assert mine.json()["data"][0]["total_sections"] == 2
        assert students.json()["data"][0]["name"] == "Alice Learner"
        assert students.json()["data"][0]["progress"] == 0
