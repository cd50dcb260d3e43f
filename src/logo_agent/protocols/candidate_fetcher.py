"""Candidate fetcher protocol."""

from typing import Protocol, runtime_checkable

from logo_agent.entities import FetchCandidate


@runtime_checkable
class CandidateFetcher(Protocol):
    """Protocol for retrieving logo candidates from a list of sources."""

    async def fetch(
        self,
        sources: list[str],
        per_source_timeout: float,
    ) -> list[FetchCandidate]:
        """Fetch every source concurrently and keep the valid payloads.

        Args:
            sources: Candidate URLs
            per_source_timeout: Seconds allowed for each individual source

        Returns:
            Valid candidates in no particular order

        Raises:
            AllSourcesFailed: If no source produced a valid candidate
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
