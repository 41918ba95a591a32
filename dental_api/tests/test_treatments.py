import pytest

from dental_api.models import Treatment


def add(client, name="Limpieza", **extra):
    return client.post("/treatments", json={"name": name, **extra})


def test_create_treatment_defaults(client):
    response = add(client, price=800)
    assert response.status_code == 201

    body = response.json()
    assert body["duration_minutes"] == 30
    assert body["is_active"] is True


@pytest.mark.parametrize(
    "extra",
    [
        {"name": "   "},
        {"price": -1},
        {"duration_minutes": 4},
        {"duration_minutes": 481},
    ],
)
def test_invalid_treatment_rejected(client, extra):
    assert add(client, **extra).status_code == 422


def test_catalog_sorted_by_name(client):
    add(client, "Resina")
    add(client, "Endodoncia")
    assert [t["name"] for t in client.get("/treatments").json()] == ["Endodoncia", "Resina"]


def test_update_treatment(client):
    treatment_id = add(client, price=800).json()["id"]

    response = client.patch(f"/treatments/{treatment_id}", json={"price": 950, "duration_minutes": 60})
    assert response.status_code == 200
    assert (response.json()["price"], response.json()["duration_minutes"]) == (950, 60)


def test_deactivate_hides_from_catalog(client):
    treatment_id = add(client).json()["id"]

    response = client.delete(f"/treatments/{treatment_id}")
    assert response.json() == {"message": "Treatment deactivated"}

    assert client.get("/treatments").json() == []
    inactive = client.get("/treatments", params={"include_inactive": True}).json()
    assert [t["is_active"] for t in inactive] == [False]


def test_reactivate(client):
    treatment_id = add(client).json()["id"]
    client.delete(f"/treatments/{treatment_id}")

    assert client.patch(f"/treatments/{treatment_id}", json={"is_active": True}).json()["is_active"] is True


def test_other_clinic_treatment_not_found(client, db, other_clinic):
    foreign = Treatment(clinic_id=other_clinic.id, name="Foreign", price=1.0)
    db.add(foreign)
    db.commit()

    assert client.patch(f"/treatments/{foreign.id}", json={"price": 2}).status_code == 404
    assert client.delete(f"/treatments/{foreign.id}").status_code == 404
