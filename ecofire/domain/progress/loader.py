"""
Progress data client - loads the engine's input collections over REST

Every collection endpoint answers {"success": bool, "data": [...]}. The
collections are independent reads, so they are fetched concurrently; the
engine only runs once all of them have arrived. Any failed fetch fails the
whole load - there are no retries and no partial results.
"""

import asyncio
import logging
from typing import Optional, Sequence

import httpx

from ... import config
from ...errors import ProgressDataError
from .engine import transform_for_chart
from .entities import (
    JobOutputLink,
    JobStatus,
    Outcome,
    OutcomeOutputLink,
    Output,
    ProgressSnapshot,
)

logger = logging.getLogger(__name__)

QBOS_PATH = "/qbos"
PIS_PATH = "/pis"
PI_QBO_MAPPINGS_PATH = "/pi-qbo-mappings"
JOBS_PATH = "/jobs"
PI_JOB_MAPPINGS_PATH = "/pi-job-mappings"


class ProgressDataClient:
    """Fetches outcomes, outputs, jobs and both mapping collections from the API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or config.PROGRESS_API_BASE_URL).rstrip("/")
        self.token = token
        self.timeout = timeout or config.PROGRESS_FETCH_TIMEOUT
        self._client = client

    def _headers(self) -> dict:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def fetch_collection(self, client: httpx.AsyncClient, path: str) -> list[dict]:
        """GET one collection and unwrap its data list"""
        collection = path.strip("/")
        try:
            response = await client.get(f"{self.base_url}{path}", headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Request for {collection} failed: {e}")
            raise ProgressDataError(collection, str(e)) from e

        if not response.is_success:
            logger.error(f"Fetching {collection} returned HTTP {response.status_code}")
            raise ProgressDataError(collection, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProgressDataError(collection, "invalid JSON response") from e

        if not payload.get("success"):
            raise ProgressDataError(collection, payload.get("error") or "unsuccessful response")

        data = payload.get("data") or []
        logger.debug(f"Retrieved {len(data)} {collection}")
        return data

    async def load_snapshot(self, outcomes: Optional[Sequence[Outcome]] = None) -> ProgressSnapshot:
        """
        Load every input collection concurrently.
        When outcomes are supplied by the caller they are not fetched again.
        """
        paths = [PIS_PATH, PI_QBO_MAPPINGS_PATH, JOBS_PATH, PI_JOB_MAPPINGS_PATH]
        if outcomes is None:
            paths.append(QBOS_PATH)

        if self._client is not None:
            results = await self._fetch_all(self._client, paths)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                results = await self._fetch_all(client, paths)

        pis, pi_qbo_mappings, jobs, pi_job_mappings = results[:4]
        if outcomes is None:
            outcomes = [Outcome.from_wire(item) for item in results[4]]

        all_jobs = [JobStatus.from_wire(item) for item in jobs]
        logger.info(
            f"Loaded progress inputs: {len(outcomes)} outcomes, {len(pis)} outputs, "
            f"{sum(1 for job in all_jobs if job.is_done)}/{len(all_jobs)} completed jobs"
        )
        return ProgressSnapshot(
            outcomes=list(outcomes),
            outputs=[Output.from_wire(item) for item in pis],
            outcome_output_links=[OutcomeOutputLink.from_wire(item) for item in pi_qbo_mappings],
            jobs=all_jobs,
            job_output_links=[JobOutputLink.from_wire(item) for item in pi_job_mappings],
        )

    async def _fetch_all(self, client: httpx.AsyncClient, paths: list[str]) -> list[list[dict]]:
        return list(await asyncio.gather(*(self.fetch_collection(client, path) for path in paths)))

    async def fetch_chart_data(self, outcomes: Optional[Sequence[Outcome]] = None) -> list[dict]:
        """Load all collections and return {name, achievedOutcome, expectedOutcome} rows"""
        snapshot = await self.load_snapshot(outcomes)
        return transform_for_chart(
            snapshot.outcomes,
            snapshot.outputs,
            snapshot.outcome_output_links,
            snapshot.jobs,
            snapshot.job_output_links,
        )
