import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.domain.catalog.seed import COMMON_MEDICATIONS, COMMON_SYMPTOMS
from epharmacy.services.deployment import prepare_for_deployment


@pytest.mark.integration
class TestDeploymentCheck:

    async def test_empty_database_reports_zero_counts(self, db: AsyncSession):
        report = await prepare_for_deployment(db)

        assert report["success"] is True
        assert report["stats"] == {"medications": 0, "symptoms": 0}

    async def test_seeded_database(self, client: AsyncClient, seeded_db: AsyncSession):
        response = await client.get("/api/v1/system/deployment-check")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Application is ready for deployment"
        assert data["stats"] == {
            "medications": len(COMMON_MEDICATIONS),
            "symptoms": len(COMMON_SYMPTOMS),
        }

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
