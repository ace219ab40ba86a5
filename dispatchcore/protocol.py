"""Response shapes for the read-only inspection API (health, topics, stats, subjects)."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List


# ---- Health ----

@dataclass
class HealthResponse:
    """Response for GET /health."""
    uptime_sec: float
    topics: int
    subscribers: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uptime_sec": int(self.uptime_sec),
            "topics": self.topics,
            "subscribers": self.subscribers,
        }


# ---- Topics ----

@dataclass
class TopicInfo:
    """One entry of GET /topics, also the body of GET /topics/{name}."""
    name: str
    subscribers: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def topics_list_response(topics: List[TopicInfo]) -> Dict[str, Any]:
    """Response for GET /topics."""
    return {"topics": [t.to_dict() for t in topics]}


def topic_not_found(name: str) -> Dict[str, Any]:
    return {"error": "topic not found", "topic": name}


def stats_response(topics_stats: Dict[str, Dict[str, int]]) -> Dict[str, Any]:
    """Response for GET /stats."""
    return {"topics": topics_stats}


# ---- Subjects ----

@dataclass
class SubjectInfo:
    name: str
    observers: int
    notifications: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def subjects_list_response(subjects: List[SubjectInfo]) -> Dict[str, Any]:
    """Response for GET /subjects."""
    return {"subjects": [s.to_dict() for s in subjects]}


# ---- Errors ----

ERROR_UNAUTHORIZED = "UNAUTHORIZED"


def unauthorized(message: str) -> Dict[str, Any]:
    return {"error": ERROR_UNAUTHORIZED, "message": message}
