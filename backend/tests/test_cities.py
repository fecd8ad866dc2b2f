from backend.app import models


def test_create_and_list_cities(client):
    for name in ("Tlaxcala", "Apizaco", "Huamantla"):
        response = client.post("/cities", json={"name": f"  {name} "})
        assert response.status_code == 201, response.text

    response = client.get("/cities")

    assert response.status_code == 200
    assert [city["name"] for city in response.json()] == ["Apizaco", "Huamantla", "Tlaxcala"]


def test_city_names_are_unique_ignoring_case(client):
    assert client.post("/cities", json={"name": "Tlaxcala"}).status_code == 201

    response = client.post("/cities", json={"name": "TLAXCALA"})

    assert response.status_code == 409
    assert response.json()["detail"] == "Ya existe una ciudad con ese nombre."


def test_deactivated_cities_are_hidden_from_active_listing(client):
    city = client.post("/cities", json={"name": "Calpulalpan"}).json()
    client.post("/cities", json={"name": "Zacatelco"})

    response = client.put(f"/cities/{city['id']}", json={"is_active": False})
    assert response.status_code == 200, response.text
    assert response.json()["is_active"] is False

    active = client.get("/cities", params={"active_only": True}).json()
    assert [item["name"] for item in active] == ["Zacatelco"]


def test_rename_city_to_existing_name_conflicts(client):
    client.post("/cities", json={"name": "Tlaxcala"})
    other = client.post("/cities", json={"name": "Apizaco"}).json()

    response = client.put(f"/cities/{other['id']}", json={"name": "tlaxcala"})

    assert response.status_code == 409


def test_update_unknown_city_returns_404(client):
    response = client.put(
        "/cities/00000000-0000-0000-0000-000000000000", json={"name": "Nueva"}
    )

    assert response.status_code == 404


def test_cities_added_in_one_flush_get_text_identifiers(db_session):
    cities = [models.City(name=name) for name in ("Tetla", "Chiautempan", "Tlaxco")]
    db_session.add_all(cities)
    db_session.flush()

    assert all(isinstance(city.id, str) for city in cities)
    assert len({city.id for city in cities}) == 3
    db_session.expire_all()
    assert db_session.get(models.City, cities[0].id).name == "Tetla"
