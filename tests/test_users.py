import pytest

from membership.models import RoleEnum

from conftest import PASSWORD

NEW_USER = {
    "username": "fresh",
    "password": "secret1",
    "contactNumber": "+15550002",
    "liveMode": "video",
}


@pytest.fixture()
def roster(make_user):
    """An admin, two supervisors, and members split between them."""
    ids = {"admin": make_user("admin", role=RoleEnum.ADMIN)}
    ids["lead_a"] = make_user("lead_a", role=RoleEnum.INCHARGE)
    ids["lead_b"] = make_user("lead_b", role=RoleEnum.INCHARGE)
    ids["amy"] = make_user("amy", incharge_id=ids["lead_a"])
    ids["abe"] = make_user("abe", incharge_id=ids["lead_a"])
    ids["bea"] = make_user("bea", incharge_id=ids["lead_b"])
    ids["loner"] = make_user("loner")
    return ids


def test_admin_lists_everyone_sorted(api_client, roster, login):
    response = api_client.get("/users", headers=login("admin"))
    assert response.status_code == 200
    usernames = [user["username"] for user in response.json()]
    assert usernames == sorted(roster)


def test_incharge_lists_only_supervised_members(api_client, roster, login):
    response = api_client.get("/users", headers=login("lead_a"))
    assert response.status_code == 200
    users = response.json()
    assert {user["username"] for user in users} == {"amy", "abe"}
    assert all(user["inchargeId"] == roster["lead_a"] for user in users)


def test_member_cannot_list_users(api_client, roster, login):
    assert api_client.get("/users", headers=login("amy")).status_code == 403


def test_profile_round_trip(api_client, roster, login):
    headers = login("amy")
    profile = api_client.get("/users/profile", headers=headers).json()
    assert profile["id"] == roster["amy"]
    assert profile["incharge"]["username"] == "lead_a"

    updated = api_client.put(
        "/users/profile",
        json={"contactNumber": "+19999", "liveMode": "video", "password": "changed1", "role": "ADMIN"},
        headers=headers,
    )
    assert updated.status_code == 200
    body = updated.json()
    assert body["contactNumber"] == "+19999"
    assert body["liveMode"] == "video"
    assert body["role"] == "MEMBER"

    assert api_client.post("/auth/login", json={"username": "amy", "password": PASSWORD}).status_code == 401
    assert api_client.post("/auth/login", json={"username": "amy", "password": "changed1"}).status_code == 200


def test_get_user_by_id(api_client, roster, login):
    response = api_client.get(f"/users/{roster['bea']}", headers=login("admin"))
    assert response.status_code == 200
    assert response.json()["username"] == "bea"

    assert api_client.get("/users/9999", headers=login("admin")).status_code == 404
    assert api_client.get(f"/users/{roster['bea']}", headers=login("amy")).status_code == 403


def test_incharge_creates_member_by_default(api_client, roster, login):
    response = api_client.post("/users", json={**NEW_USER, "inchargeId": roster["lead_a"]}, headers=login("lead_a"))
    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "MEMBER"
    assert body["inchargeId"] == roster["lead_a"]
    assert body["submitFeedbackEnabled"] is True
    assert "password" not in body


def test_incharge_cannot_create_admin(api_client, roster, login):
    response = api_client.post("/users", json={**NEW_USER, "role": "ADMIN"}, headers=login("lead_a"))
    assert response.status_code == 403
    assert response.json()["detail"] == "Incharge can only create members"


def test_admin_creates_incharge_with_flags(api_client, roster, login):
    response = api_client.post(
        "/users",
        json={**NEW_USER, "role": "INCHARGE", "watchLiveEnabled": False},
        headers=login("admin"),
    )
    assert response.status_code == 201
    assert response.json()["role"] == "INCHARGE"
    assert response.json()["watchLiveEnabled"] is False


def test_create_duplicate_username_conflicts(api_client, roster, login):
    response = api_client.post("/users", json={**NEW_USER, "username": "amy"}, headers=login("admin"))
    assert response.status_code == 409


def test_member_cannot_create_users(api_client, roster, login):
    assert api_client.post("/users", json=NEW_USER, headers=login("amy")).status_code == 403


def test_member_cannot_edit_anyone(api_client, roster, login):
    headers = login("amy")
    assert api_client.put(f"/users/{roster['amy']}", json={"contactNumber": "1"}, headers=headers).status_code == 403
    assert api_client.put("/users/9999", json={"contactNumber": "1"}, headers=headers).status_code == 403


def test_incharge_edit_rules(api_client, roster, login):
    headers = login("lead_a")

    ok = api_client.put(
        f"/users/{roster['bea']}", json={"contactNumber": "+1777", "role": "MEMBER"}, headers=headers
    )
    assert ok.status_code == 200
    assert ok.json()["contactNumber"] == "+1777"

    promote = api_client.put(f"/users/{roster['amy']}", json={"role": "INCHARGE"}, headers=headers)
    assert promote.status_code == 403
    assert promote.json()["detail"] == "Incharge cannot change user roles"

    peer = api_client.put(f"/users/{roster['lead_b']}", json={"contactNumber": "+1"}, headers=headers)
    assert peer.status_code == 403

    admin = api_client.put(f"/users/{roster['admin']}", json={"contactNumber": "+1"}, headers=headers)
    assert admin.status_code == 403


def test_admin_edit_is_unrestricted(api_client, roster, login):
    headers = login("admin")
    response = api_client.put(
        f"/users/{roster['loner']}",
        json={"role": "INCHARGE", "inchargeId": roster["lead_b"], "submitFeedbackEnabled": False},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "INCHARGE"
    assert body["inchargeId"] == roster["lead_b"]
    assert body["submitFeedbackEnabled"] is False

    cleared = api_client.put(f"/users/{roster['loner']}", json={"inchargeId": None}, headers=headers)
    assert cleared.json()["inchargeId"] is None

    assert api_client.put("/users/9999", json={"contactNumber": "1"}, headers=headers).status_code == 404


def test_incharge_delete_rules(api_client, roster, login):
    headers = login("lead_a")
    assert api_client.delete(f"/users/{roster['lead_b']}", headers=headers).status_code == 403
    assert api_client.delete(f"/users/{roster['admin']}", headers=headers).status_code == 403

    response = api_client.delete(f"/users/{roster['bea']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["username"] == "bea"
    assert api_client.get(f"/users/{roster['bea']}", headers=login("admin")).status_code == 404


def test_admin_deletes_supervisor_and_members_are_released(api_client, roster, login):
    headers = login("admin")
    assert api_client.delete(f"/users/{roster['lead_a']}", headers=headers).status_code == 200

    amy = api_client.get(f"/users/{roster['amy']}", headers=headers).json()
    assert amy["inchargeId"] is None
    assert api_client.delete("/users/9999", headers=headers).status_code == 404


def test_member_cannot_delete_users(api_client, roster, login):
    assert api_client.delete(f"/users/{roster['loner']}", headers=login("amy")).status_code == 403
