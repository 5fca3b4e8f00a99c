"""
Tests the group HTTP API.
"""

from uuid import uuid4

import pytest

from groupdir.service import user as user_service

ADMIN = {"X-Forwarded-User": "admin", "X-Forwarded-Admin": "true"}
REGULAR = {"X-Forwarded-User": "regular_user"}

BASE = "/api/v2/groups"


@pytest.mark.asyncio(loop_scope="session")
async def test_group_lifecycle(client):
    group_name = f"api_group_{uuid4().hex[:8]}"

    response = await client.post(
        BASE,
        json={"groupname": group_name, "description": "d", "externalName": "e"},
        headers=ADMIN,
    )
    assert response.status_code == 201
    assert response.json() == {"message": "group is created successfully"}

    response = await client.get(f"{BASE}/{group_name}")
    assert response.status_code == 200
    assert response.json() == {
        "groupname": group_name,
        "description": "d",
        "externalName": "e",
        "extension": {},
    }

    response = await client.get(BASE)
    assert response.status_code == 200
    assert group_name in [g["groupname"] for g in response.json()]

    response = await client.post(BASE, json={"groupname": group_name}, headers=ADMIN)
    assert response.status_code == 409
    assert response.json()["code"] == "ConflictGroupError"

    response = await client.delete(f"{BASE}/{group_name}", headers=ADMIN)
    assert response.status_code == 200
    assert response.json() == {"message": "group is removed successfully"}

    response = await client.delete(f"{BASE}/{group_name}", headers=ADMIN)
    assert response.status_code == 400
    assert response.json()["code"] == "NoGroupError"

    response = await client.get(f"{BASE}/{group_name}")
    assert response.status_code == 400
    assert response.json() == {
        "code": "NoGroupError",
        "message": f"Group {group_name} is not found.",
    }


@pytest.mark.asyncio(loop_scope="session")
async def test_authorization(client):
    group_name = f"api_group_{uuid4().hex[:8]}"

    response = await client.post(BASE, json={"groupname": group_name})
    assert response.status_code == 401

    response = await client.post(BASE, json={"groupname": group_name}, headers=REGULAR)
    assert response.status_code == 403
    assert response.json()["code"] == "ForbiddenUserError"

    response = await client.get(f"{BASE}/{group_name}")
    assert response.status_code == 400

    response = await client.post(BASE, json={"groupname": group_name}, headers=ADMIN)
    assert response.status_code == 201

    for method, path, body in [
        ("PUT", BASE, {"data": {"groupname": group_name}, "patch": False}),
        ("PUT", f"{BASE}/{group_name}/extension", {"extension": {"k": 1}}),
        ("PUT", f"{BASE}/{group_name}/extension/k/v", {"data": 1}),
        ("PUT", f"{BASE}/{group_name}/description", {"description": "x"}),
        ("PUT", f"{BASE}/{group_name}/externalname", {"externalName": "x"}),
        ("GET", f"{BASE}/{group_name}/userlist", None),
        ("DELETE", f"{BASE}/{group_name}", None),
    ]:
        response = await client.request(method, path, json=body, headers=REGULAR)
        assert response.status_code == 403, path
        assert response.json()["code"] == "ForbiddenUserError"

    response = await client.get(f"{BASE}/{group_name}")
    assert response.json() == {
        "groupname": group_name,
        "description": None,
        "externalName": None,
        "extension": {},
    }

    response = await client.delete(f"{BASE}/{group_name}", headers=ADMIN)
    assert response.status_code == 200


@pytest.mark.asyncio(loop_scope="session")
async def test_updates(client):
    group_name = f"api_group_{uuid4().hex[:8]}"

    response = await client.post(
        BASE,
        json={
            "groupname": group_name,
            "description": "d",
            "externalName": "e",
            "extension": {"a": {"x": 1}, "b": 2},
        },
        headers=ADMIN,
    )
    assert response.status_code == 201

    response = await client.put(
        BASE,
        json={"data": {"groupname": group_name, "extension": {"a": {"y": 2}}}, "patch": True},
        headers=ADMIN,
    )
    assert response.status_code == 201
    assert response.json() == {"message": f"update group {group_name} successfully."}

    group = (await client.get(f"{BASE}/{group_name}")).json()
    assert group["extension"] == {"a": {"y": 2}, "b": 2}
    assert group["description"] == "d"

    response = await client.put(
        f"{BASE}/{group_name}/extension/a/z", json={"data": [1, 2]}, headers=ADMIN
    )
    assert response.status_code == 201
    assert response.json() == {"message": "Update group extension data successfully."}

    response = await client.put(
        f"{BASE}/{group_name}/extension", json={"extension": {"c": None}}, headers=ADMIN
    )
    assert response.status_code == 201

    response = await client.put(
        f"{BASE}/{group_name}/description", json={"description": "nd"}, headers=ADMIN
    )
    assert response.status_code == 201

    response = await client.put(
        f"{BASE}/{group_name}/externalname", json={"externalName": "ne"}, headers=ADMIN
    )
    assert response.status_code == 201

    group = (await client.get(f"{BASE}/{group_name}")).json()
    assert group == {
        "groupname": group_name,
        "description": "nd",
        "externalName": "ne",
        "extension": {"a": {"y": 2, "z": [1, 2]}, "b": 2, "c": None},
    }

    response = await client.put(
        f"{BASE}/{group_name}/extension/a/", json={"data": 1}, headers=ADMIN
    )
    assert response.status_code == 400
    assert response.json()["code"] == "InvalidExtensionPathError"

    response = await client.put(
        BASE,
        json={"data": {"groupname": group_name, "description": "only"}, "patch": False},
        headers=ADMIN,
    )
    assert response.status_code == 201

    group = (await client.get(f"{BASE}/{group_name}")).json()
    assert group == {
        "groupname": group_name,
        "description": "only",
        "externalName": None,
        "extension": None,
    }

    response = await client.put(
        BASE,
        json={"data": {"groupname": f"{group_name}_missing"}, "patch": True},
        headers=ADMIN,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "NoGroupError"

    response = await client.delete(f"{BASE}/{group_name}", headers=ADMIN)
    assert response.status_code == 200


@pytest.mark.asyncio(loop_scope="session")
async def test_userlist(client, session_manager, logger):
    suffix = uuid4().hex[:8]
    group_name = f"api_group_{suffix}"

    response = await client.post(
        BASE,
        json={"groupname": group_name, "extension": {"acls": {"admin": True}}},
        headers=ADMIN,
    )
    assert response.status_code == 201

    async with session_manager.session() as conn:
        async with conn.begin():
            await user_service.create(
                user_name=f"first_{suffix}", group_list=[group_name], conn=conn, log=logger
            )
            await user_service.create(
                user_name=f"other_{suffix}", group_list=[], conn=conn, log=logger
            )

    response = await client.get(f"{BASE}/{group_name}/userlist", headers=ADMIN)
    assert response.status_code == 200
    assert response.json() == [{"username": f"first_{suffix}", "clusterAdmin": True}]

    async with session_manager.session() as conn:
        async with conn.begin():
            await user_service.delete(user_name=f"first_{suffix}", conn=conn, log=logger)
            await user_service.delete(user_name=f"other_{suffix}", conn=conn, log=logger)

    response = await client.delete(f"{BASE}/{group_name}", headers=ADMIN)
    assert response.status_code == 200


@pytest.mark.asyncio(loop_scope="session")
async def test_create_without_optional_fields(client):
    group_name = f"api_group_{uuid4().hex[:8]}"

    response = await client.post(BASE, json={"groupname": group_name}, headers=ADMIN)
    assert response.status_code == 201

    group = (await client.get(f"{BASE}/{group_name}")).json()
    assert group["description"] is None
    assert group["externalName"] is None
    assert group["extension"] == {}

    response = await client.post(
        BASE,
        json={"groupname": f"{group_name}_null", "description": None, "externalName": None},
        headers=ADMIN,
    )
    assert response.status_code == 201

    group = (await client.get(f"{BASE}/{group_name}_null")).json()
    assert group["description"] is None
    assert group["externalName"] is None

    for name in (group_name, f"{group_name}_null"):
        response = await client.delete(f"{BASE}/{name}", headers=ADMIN)
        assert response.status_code == 200


@pytest.mark.asyncio(loop_scope="session")
async def test_legacy_null_matches_patch(client):
    legacy = f"api_group_{uuid4().hex[:8]}"
    unified = f"{legacy}_unified"

    for name in (legacy, unified):
        response = await client.post(
            BASE,
            json={"groupname": name, "description": "d", "externalName": "e"},
            headers=ADMIN,
        )
        assert response.status_code == 201

    response = await client.put(
        f"{BASE}/{legacy}/description", json={"description": None}, headers=ADMIN
    )
    assert response.status_code == 201

    response = await client.put(
        f"{BASE}/{legacy}/externalname", json={"externalName": None}, headers=ADMIN
    )
    assert response.status_code == 201

    response = await client.put(
        BASE,
        json={
            "data": {"groupname": unified, "description": None, "externalName": None},
            "patch": True,
        },
        headers=ADMIN,
    )
    assert response.status_code == 201

    legacy_group = (await client.get(f"{BASE}/{legacy}")).json()
    unified_group = (await client.get(f"{BASE}/{unified}")).json()

    assert legacy_group["description"] is None
    assert legacy_group["externalName"] is None
    assert {k: v for k, v in legacy_group.items() if k != "groupname"} == {
        k: v for k, v in unified_group.items() if k != "groupname"
    }

    for name in (legacy, unified):
        response = await client.delete(f"{BASE}/{name}", headers=ADMIN)
        assert response.status_code == 200
