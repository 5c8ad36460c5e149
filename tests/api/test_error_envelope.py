async def test_unknown_path_uses_envelope(client):
    response = await client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


async def test_wrong_method_uses_envelope(client, headers):
    response = await client.put("/api/enroll/mycourses", headers=headers("student"))

    assert response.status_code == 405
    assert response.json() == {"success": False, "message": "Method Not Allowed"}
