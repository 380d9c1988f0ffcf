from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.utils import SeedData

NEW_ASSESSMENT = {
    "type": "quiz2",
    "title": "Collections Quiz",
    "description": "Lists, sets and maps.",
    "total_points": 15,
    "time_limit_minutes": 20,
}


async def test_list_assessments(async_client: AsyncClient, seed: SeedData) -> None:
    response = await async_client.get("/assessments", params={"sort": "type"})

    assert response.status_code == status.HTTP_200_OK
    assert [item["type"] for item in response.json()] == ["assignment", "capstone", "quiz1"]
    assert response.headers["X-Total-Count"] == "3"


async def test_list_assessments_by_type_ignores_case(
    async_client: AsyncClient, seed: SeedData
) -> None:
    response = await async_client.get("/assessments", params={"type": "CAPSTONE"})

    body = response.json()
    assert [item["id"] for item in body] == [seed.assessments["capstone"]]
    assert response.headers["X-Total-Count"] == "1"


async def test_type_filter_is_not_a_pattern(async_client: AsyncClient, seed: SeedData) -> None:
    response = await async_client.get("/assessments", params={"type": "quiz.*"})

    assert response.json() == []


async def test_type_filter_does_not_trim_whitespace(
    async_client: AsyncClient, seed: SeedData
) -> None:
    response = await async_client.get("/assessments", params={"type": " quiz1 "})

    assert response.json() == []


async def test_unknown_sort_field_with_type_filter(
    async_client: AsyncClient, seed: SeedData
) -> None:
    response = await async_client.get("/assessments", params={"type": "quiz1", "sort": "secret"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["title"] == "Invalid page request"


async def test_create_assessment(async_client: AsyncClient, seed: SeedData) -> None:
    response = await async_client.post("/assessments", json=NEW_ASSESSMENT)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["type"] == "quiz2"
    assert response.headers["Location"] == f"/assessments/{body['id']}"
    assert response.headers["X-catApp-alert"] == "catApp.assessment.created"

    # A new type becomes usable as a submission filter straight away
    listed = await async_client.get("/submissions", params={"type": "quiz2"})
    assert listed.status_code == status.HTTP_200_OK
    assert listed.json() == []


async def test_create_assessment_with_id(async_client: AsyncClient, seed: SeedData) -> None:
    response = await async_client.post("/assessments", json={**NEW_ASSESSMENT, "id": "x"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_key"] == "idexists"


async def test_create_assessment_validation(async_client: AsyncClient, seed: SeedData) -> None:
    response = await async_client.post("/assessments", json={**NEW_ASSESSMENT, "title": ""})

    assert response.status_code == 422


async def test_get_assessment(async_client: AsyncClient, seed: SeedData) -> None:
    assessment_id = seed.assessments["quiz1"]

    response = await async_client.get(f"/assessments/{assessment_id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Java Basics Quiz"


async def test_get_missing_assessment(async_client: AsyncClient, seed: SeedData) -> None:
    response = await async_client.get("/assessments/missing")

    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_update_assessment(async_client: AsyncClient, seed: SeedData) -> None:
    assessment_id = seed.assessments["capstone"]
    payload = {**NEW_ASSESSMENT, "id": assessment_id, "type": "Capstone"}

    response = await async_client.put(f"/assessments/{assessment_id}", json=payload)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["type"] == "Capstone"
    assert body["title"] == "Collections Quiz"
    assert response.headers["X-catApp-alert"] == "catApp.assessment.updated"


@pytest.mark.parametrize(
    ("path_id", "body_id", "error_key"),
    [
        ("capstone", None, "idnull"),
        ("capstone", "other", "idinvalid"),
        ("missing", "missing", "idnotfound"),
    ],
)
async def test_update_assessment_errors(
    async_client: AsyncClient, seed: SeedData, path_id: str, body_id: str | None, error_key: str
) -> None:
    path_id = seed.assessments.get(path_id, path_id)
    payload = {**NEW_ASSESSMENT, "id": body_id}

    response = await async_client.put(f"/assessments/{path_id}", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_key"] == error_key
    assert response.headers["X-catApp-error"] == f"error.{error_key}"


async def test_patch_assessment(async_client: AsyncClient, seed: SeedData) -> None:
    assessment_id = seed.assessments["quiz1"]

    response = await async_client.patch(
        f"/assessments/{assessment_id}",
        json={"id": assessment_id, "total_points": 12, "description": None},
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["total_points"] == 12
    assert body["description"] == "Variables, control flow and methods."
    assert body["type"] == "quiz1"


async def test_delete_assessment_removes_its_submissions(
    async_client: AsyncClient, seed: SeedData
) -> None:
    assessment_id = seed.assessments["quiz1"]

    response = await async_client.delete(f"/assessments/{assessment_id}")

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.headers["X-catApp-alert"] == "catApp.assessment.deleted"
    remaining = await async_client.get("/submissions")
    assert [item["id"] for item in remaining.json()] == [
        seed.submissions[("alice", "assignment")]
    ]
