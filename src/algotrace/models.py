# -----------------------------------------------------------------------------
# Persistence models (pydantic)
# Purpose: Entity and create/update schemas for users, projects, reference
# algorithms and saved visualizations. Ids and timestamps are server-assigned.
# -----------------------------------------------------------------------------

from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    # Wire format is camelCase (userId, isPublic); snake_case is accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class User(CamelModel):
    id: str = Field(default_factory=_new_id)
    username: str
    password_hash: str
    created_at: datetime = Field(default_factory=_now)


class ProjectCreate(CamelModel):
    user_id: Optional[str] = None
    name: str = Field(min_length=1)
    language: str = Field(min_length=1)
    code: str
    algorithm_type: Optional[str] = None
    is_public: bool = False

class ProjectUpdate(CamelModel):
    user_id: Optional[str] = None
    name: Optional[str] = Field(default=None, min_length=1)
    language: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = None
    algorithm_type: Optional[str] = None
    is_public: Optional[bool] = None

class Project(ProjectCreate):
    id: str = Field(default_factory=_new_id)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class AlgorithmCreate(CamelModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    time_complexity: str
    space_complexity: str
    description: str
    implementations: Dict[str, str] = Field(default_factory=dict)

class Algorithm(AlgorithmCreate):
    id: str = Field(default_factory=_new_id)
    created_at: datetime = Field(default_factory=_now)


class VisualizationCreate(CamelModel):
    project_id: Optional[str] = None
    algorithm_id: Optional[str] = None
    steps: List[Dict[str, Any]]
    duration: Optional[str] = None

class Visualization(VisualizationCreate):
    id: str = Field(default_factory=_new_id)
    created_at: datetime = Field(default_factory=_now)
