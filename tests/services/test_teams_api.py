"""Team Routes — create, read, update (reparent), valid parents, hierarchy render.

Invariants:
    - Created teams carry their breadcrumb in path_text
    - Reparenting under a descendant or self returns 409 CIRCULAR_REFERENCE and
      leaves the stored hierarchy unchanged
    - Unknown parent returns 400 INVALID_PARENT, unknown team 404
    - GET /teams renders the forest with inherited members (membership_id null)
"""

import asyncio
from uuid import uuid4


async def test_create_root_team(client, create_team):
    team = await create_team("Engineering", description="Builds things")
    assert team["name"] == "Engineering"
    assert team["parent_id"] is None
    assert team["path_text"] == "Engineering"
    assert team["description"] == "Builds things"


async def test_create_child_team_has_breadcrumb(client, create_team):
    eng = await create_team("Engineering")
    backend = await create_team("Backend", eng["id"])
    assert backend["parent_id"] == eng["id"]
    assert backend["path_text"] == "Engineering > Backend"


async def test_create_team_strips_name(client):
    res = await client.post("/api/v1/teams", json={"name": "  Ops  "})
    assert res.status_code == 201
    assert res.json()["name"] == "Ops"


async def test_create_team_blank_name_rejected(client):
    res = await client.post("/api/v1/teams", json={"name": "   "})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_team_unknown_parent_rejected(client):
    res = await client.post(
        "/api/v1/teams", json={"name": "Orphan", "parent_id": str(uuid4())},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_PARENT"


async def test_get_team(client, create_team):
    eng = await create_team("Engineering")
    backend = await create_team("Backend", eng["id"])
    res = await client.get(f"/api/v1/teams/{backend['id']}")
    assert res.status_code == 200
    assert res.json()["path_text"] == "Engineering > Backend"


async def test_get_unknown_team_404(client):
    res = await client.get(f"/api/v1/teams/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_update_fields_without_touching_parent(client, create_team):
    eng = await create_team("Engineering")
    backend = await create_team("Backend", eng["id"])
    res = await client.put(
        f"/api/v1/teams/{backend['id']}", json={"name": "Platform", "department": "R&D"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Platform"
    assert body["department"] == "R&D"
    assert body["parent_id"] == eng["id"]
    assert body["path_text"] == "Engineering > Platform"


async def test_reparent_to_other_branch(client, create_team):
    eng = await create_team("Engineering")
    sales = await create_team("Sales")
    backend = await create_team("Backend", eng["id"])
    res = await client.put(
        f"/api/v1/teams/{backend['id']}", json={"parent_id": sales["id"]},
    )
    assert res.status_code == 200
    assert res.json()["path_text"] == "Sales > Backend"


async def test_null_parent_makes_team_root(client, create_team):
    eng = await create_team("Engineering")
    backend = await create_team("Backend", eng["id"])
    res = await client.put(f"/api/v1/teams/{backend['id']}", json={"parent_id": None})
    assert res.status_code == 200
    assert res.json()["parent_id"] is None
    assert res.json()["path_text"] == "Backend"


async def test_reparent_under_descendant_rejected(client, create_team):
    eng = await create_team("Engineering")
    backend = await create_team("Backend", eng["id"])
    payments = await create_team("Payments", backend["id"])

    res = await client.put(
        f"/api/v1/teams/{eng['id']}", json={"parent_id": payments["id"]},
    )
    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "CIRCULAR_REFERENCE"
    assert "circular reference" in error["message"]

    unchanged = await client.get(f"/api/v1/teams/{eng['id']}")
    assert unchanged.json()["parent_id"] is None


async def test_self_parent_rejected(client, create_team):
    eng = await create_team("Engineering")
    res = await client.put(f"/api/v1/teams/{eng['id']}", json={"parent_id": eng["id"]})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CIRCULAR_REFERENCE"


async def test_reparent_unknown_parent_rejected(client, create_team):
    eng = await create_team("Engineering")
    res = await client.put(f"/api/v1/teams/{eng['id']}", json={"parent_id": str(uuid4())})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_PARENT"


async def test_valid_parents_exclude_self_and_descendants(client, create_team):
    eng = await create_team("Engineering")
    backend = await create_team("Backend", eng["id"])
    await create_team("Payments", backend["id"])
    sales = await create_team("Sales")

    res = await client.get(f"/api/v1/teams/{backend['id']}/valid-parents")
    assert res.status_code == 200
    assert [t["id"] for t in res.json()] == [eng["id"], sales["id"]]
    assert [t["path_text"] for t in res.json()] == ["Engineering", "Sales"]


async def test_valid_parents_unknown_team_404(client):
    res = await client.get(f"/api/v1/teams/{uuid4()}/valid-parents")
    assert res.status_code == 404


async def test_hierarchy_empty(client):
    res = await client.get("/api/v1/teams")
    assert res.status_code == 200
    assert res.json() == {"teams": []}


async def test_hierarchy_renders_forest_with_inherited_members(
    client, create_team, create_user, add_member,
):
    eng = await create_team("Engineering")
    backend = await create_team("Backend", eng["id"])
    await create_team("Frontend", eng["id"])
    alice = await create_user("Alice")
    direct = await add_member(backend["id"], alice["id"], role="lead")

    res = await client.get("/api/v1/teams")
    assert res.status_code == 200
    [root] = res.json()["teams"]
    assert root["name"] == "Engineering"
    assert root["path"] == ["Engineering"]
    assert [c["name"] for c in root["children"]] == ["Backend", "Frontend"]

    [inherited] = root["members"]
    assert inherited["membership_id"] is None
    assert inherited["origin_membership_id"] == direct["id"]
    assert inherited["origin_team_id"] == backend["id"]
    assert inherited["is_direct"] is False
    assert inherited["depth"] == 1
    assert inherited["role"] == "lead"
    assert inherited["user"]["name"] == "Alice"

    backend_node, frontend_node = root["children"]
    assert backend_node["path_text"] == "Engineering > Backend"
    assert backend_node["depth"] == 1
    [own] = backend_node["members"]
    assert own["membership_id"] == direct["id"]
    assert own["is_direct"] is True
    assert frontend_node["members"] == []


async def test_hierarchy_follows_reparent(client, create_team, create_user, add_member):
    eng = await create_team("Engineering")
    sales = await create_team("Sales")
    backend = await create_team("Backend", eng["id"])
    bob = await create_user("Bob")
    await add_member(backend["id"], bob["id"])

    await client.put(f"/api/v1/teams/{backend['id']}", json={"parent_id": sales["id"]})

    teams = {t["name"]: t for t in (await client.get("/api/v1/teams")).json()["teams"]}
    assert teams["Engineering"]["members"] == []
    assert [m["user"]["name"] for m in teams["Sales"]["members"]] == ["Bob"]


async def test_concurrent_cross_reparent_cannot_form_cycle(client, create_team):
    """A under B and B under A at the same time: exactly one wins."""
    a = await create_team("A")
    b = await create_team("B")

    results = await asyncio.gather(
        client.put(f"/api/v1/teams/{a['id']}", json={"parent_id": b["id"]}),
        client.put(f"/api/v1/teams/{b['id']}", json={"parent_id": a["id"]}),
    )
    assert sorted(r.status_code for r in results) == [200, 409]
    [rejected] = [r for r in results if r.status_code == 409]
    assert rejected.json()["error"]["code"] == "CIRCULAR_REFERENCE"

    res = await client.get("/api/v1/teams")
    assert res.status_code == 200
    [root] = res.json()["teams"]
    assert [c["name"] for c in root["children"]] == [
        "B" if root["name"] == "A" else "A",
    ]
