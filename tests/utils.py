from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SeedData:
    """Ids of the seeded rows, keyed by login / assessment type."""

    users: dict[str, str] = field(default_factory=dict)
    assessments: dict[str, str] = field(default_factory=dict)
    submissions: dict[tuple[str, str], str] = field(default_factory=dict)


def submission_payload(seed: SeedData, login: str, assessment_type: str, **extra: Any) -> dict[str, Any]:
    """JSON body for POST /submissions referencing seeded rows."""
    payload: dict[str, Any] = {
        "user_id": seed.users[login],
        "assessment_id": seed.assessments[assessment_type],
        "github_url": f"https://github.com/{login}/{assessment_type}-v2",
    }
    payload.update(extra)
    return payload


def link_rels(link_header: str) -> dict[str, str]:
    """Parse a ``Link`` header into ``{rel: url}``."""
    links: dict[str, str] = {}
    for part in link_header.split(","):
        url, _, rel = part.partition(";")
        links[rel.strip().removeprefix('rel="').removesuffix('"')] = url.strip()[1:-1]
    return links
