"""API 엔드포인트 테스트 — 팀/회원 생성, 검색, 페이지 조회, 통계.

API endpoint tests — team/member creation, member search, paged search,
per-team statistics and error status codes.
"""

import pytest
from httpx import AsyncClient

BASE = "/api/v1"


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestTeams:
    async def test_create_team(self, client: AsyncClient) -> None:
        resp = await client.post(f"{BASE}/teams", json={"team_name": "teamC"})
        assert resp.status_code == 201
        body = resp.json()
        assert body["team_name"] == "teamC"
        assert isinstance(body["id"], int)

    async def test_create_team_empty_name(self, client: AsyncClient) -> None:
        resp = await client.post(f"{BASE}/teams", json={"team_name": ""})
        assert resp.status_code == 422

    @pytest.mark.usefixtures("sample_data")
    async def test_duplicate_team(self, client: AsyncClient) -> None:
        resp = await client.post(f"{BASE}/teams", json={"team_name": "teamA"})
        assert resp.status_code == 409

    @pytest.mark.usefixtures("sample_data")
    async def test_list_teams(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/teams")
        assert resp.status_code == 200
        assert [t["team_name"] for t in resp.json()] == ["teamA", "teamB"]

    async def test_team_members(self, client: AsyncClient, sample_data: dict[str, int]) -> None:
        resp = await client.get(f"{BASE}/teams/{sample_data['teamB']}/members")
        assert resp.status_code == 200
        assert [m["username"] for m in resp.json()] == ["member3", "member4"]

    async def test_team_members_unknown_team(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/teams/999/members")
        assert resp.status_code == 404

    @pytest.mark.usefixtures("sample_data")
    async def test_team_stats(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/teams/stats")
        assert resp.status_code == 200
        assert resp.json() == [
            {"team_name": "teamA", "member_count": 2, "avg_age": 15.0, "min_age": 10, "max_age": 20},
            {"team_name": "teamB", "member_count": 2, "avg_age": 35.0, "min_age": 30, "max_age": 40},
        ]


class TestMembers:
    async def test_create_member(self, client: AsyncClient, sample_data: dict[str, int]) -> None:
        resp = await client.post(
            f"{BASE}/members",
            json={"username": "member5", "age": 50, "team_id": sample_data["teamA"]},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["username"] == "member5"
        assert body["team_id"] == sample_data["teamA"]

        found = await client.get(f"{BASE}/members/{body['id']}")
        assert found.status_code == 200
        assert found.json()["age"] == 50

    async def test_create_unaffiliated_member(self, client: AsyncClient) -> None:
        resp = await client.post(f"{BASE}/members", json={"username": "loner"})
        assert resp.status_code == 201
        assert resp.json()["team_id"] is None
        assert resp.json()["age"] == 0

    async def test_create_member_unknown_team(self, client: AsyncClient) -> None:
        resp = await client.post(f"{BASE}/members", json={"username": "member5", "team_id": 999})
        assert resp.status_code == 404

    async def test_create_member_negative_age(self, client: AsyncClient) -> None:
        resp = await client.post(f"{BASE}/members", json={"username": "member5", "age": -1})
        assert resp.status_code == 422

    async def test_get_unknown_member(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/members/999")
        assert resp.status_code == 404


@pytest.mark.usefixtures("sample_data")
class TestMemberSearch:
    async def test_search_all(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/members/search")
        assert resp.status_code == 200
        assert [m["username"] for m in resp.json()] == ["member1", "member2", "member3", "member4"]

    async def test_search_by_team(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/members/search", params={"team_name": "teamB"})
        assert [m["username"] for m in resp.json()] == ["member3", "member4"]

    async def test_search_by_age_range(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/members/search", params={"age_goe": 20, "age_loe": 30})
        assert [m["username"] for m in resp.json()] == ["member2", "member3"]

    async def test_search_combined(self, client: AsyncClient) -> None:
        resp = await client.get(
            f"{BASE}/members/search",
            params={"username": "member4", "team_name": "teamB", "age_goe": 35},
        )
        body = resp.json()
        assert len(body) == 1
        assert body[0]["username"] == "member4"
        assert body[0]["team_name"] == "teamB"

    async def test_search_includes_unaffiliated(self, client: AsyncClient) -> None:
        await client.post(f"{BASE}/members", json={"username": "loner", "age": 5})

        resp = await client.get(f"{BASE}/members/search", params={"age_loe": 5})
        body = resp.json()
        assert len(body) == 1
        assert body[0]["username"] == "loner"
        assert body[0]["team_id"] is None
        assert body[0]["team_name"] is None

    async def test_search_invalid_age_range(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/members/search", params={"age_goe": 30, "age_loe": 20})
        assert resp.status_code == 400

    async def test_search_page(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/members/search/page", params={"page": 2, "per_page": 3})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 4
        assert body["page"] == 2
        assert body["per_page"] == 3
        assert body["pages"] == 2
        assert [m["username"] for m in body["items"]] == ["member4"]

    async def test_search_page_filtered(self, client: AsyncClient) -> None:
        resp = await client.get(
            f"{BASE}/members/search/page",
            params={"team_name": "teamA", "page": 1, "per_page": 10},
        )
        body = resp.json()
        assert body["total"] == 2
        assert body["pages"] == 1
        assert [m["team_name"] for m in body["items"]] == ["teamA", "teamA"]

    async def test_search_page_invalid_params(self, client: AsyncClient) -> None:
        resp = await client.get(f"{BASE}/members/search/page", params={"page": 0})
        assert resp.status_code == 422
