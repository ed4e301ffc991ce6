def _create(client, headers, **fields) -> dict:
    response = client.post("/api/admin/haircut-styles", json=fields, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_styles_require_admin(client) -> None:
    assert client.get("/api/admin/haircut-styles").status_code == 401
    assert client.post("/api/admin/haircut-styles", json={"name": "Fade"}).status_code == 401


def test_create_defaults_to_not_trending(client, admin_headers) -> None:
    style = _create(client, admin_headers, name="Buzz Cut", description="Short all over")

    assert style["id"] >= 1
    assert style["name"] == "Buzz Cut"
    assert style["isTrending"] is False
    assert style["image"] is None
    assert style["createdAt"]


def test_list_is_newest_first_and_filters_trending(client, clock, admin_headers) -> None:
    _create(client, admin_headers, name="Crew Cut")
    clock.advance(minutes=1)
    _create(client, admin_headers, name="Low Fade", isTrending=True)
    clock.advance(minutes=1)
    _create(client, admin_headers, name="Textured Crop", isTrending=True)

    everything = client.get("/api/admin/haircut-styles", headers=admin_headers).json()
    trending = client.get("/api/admin/haircut-styles?trending=true", headers=admin_headers).json()

    assert [s["name"] for s in everything] == ["Textured Crop", "Low Fade", "Crew Cut"]
    assert [s["name"] for s in trending] == ["Textured Crop", "Low Fade"]


def test_update_changes_only_given_fields(client, admin_headers) -> None:
    style = _create(client, admin_headers, name="Pompadour", description="Volume on top")

    response = client.put(
        f"/api/admin/haircut-styles/{style['id']}",
        json={"isTrending": True, "name": None},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["isTrending"] is True
    assert body["name"] == "Pompadour"
    assert body["description"] == "Volume on top"


def test_update_unknown_style_is_404(client, admin_headers) -> None:
    response = client.put("/api/admin/haircut-styles/999", json={"name": "Mullet"}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"message": "Haircut style not found"}
