# -----------------------------------------------------------------------------
# Storage: users, projects, reference algorithms, saved visualizations
# Purpose:
#   In-memory entity store with optional JSON-file persistence (loaded on
#   start, rewritten after each write). Enforces referential integrity between
#   projects → users and visualizations → projects/algorithms.
# -----------------------------------------------------------------------------

from __future__ import annotations
import hashlib
import hmac
import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, TypeVar

from pydantic import BaseModel

from .catalog import Catalog
from .models import (
    Algorithm, AlgorithmCreate, Project, ProjectCreate, ProjectUpdate,
    User, UserCreate, Visualization, VisualizationCreate,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

PBKDF2_ROUNDS = 120_000

class StorageError(Exception): pass


def hash_password(password: str, salt: bytes | None = None) -> str:
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ROUNDS)
    return f"{salt.hex()}${digest.hex()}"

def verify_password(password: str, stored: str) -> bool:
    salt_hex, _, _ = stored.partition("$")
    return hmac.compare_digest(hash_password(password, bytes.fromhex(salt_hex)), stored)


class Storage:
    def __init__(self, path: str | None = None):
        self.path = Path(path) if path else None
        self._lock = threading.RLock()
        self.users: Dict[str, User] = {}
        self.projects: Dict[str, Project] = {}
        self.algorithms: Dict[str, Algorithm] = {}
        self.visualizations: Dict[str, Visualization] = {}
        if self.path and self.path.exists():
            self._load()

    # ---------------- persistence ----------------

    def _tables(self) -> Dict[str, tuple]:
        return {
            "users": (self.users, User),
            "projects": (self.projects, Project),
            "algorithms": (self.algorithms, Algorithm),
            "visualizations": (self.visualizations, Visualization),
        }

    def _load(self) -> None:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        for name, (table, model) in self._tables().items():
            for row in data.get(name, []):
                item = model.model_validate(row)
                table[item.id] = item
        logger.info("Loaded storage from %s (%d projects, %d algorithms)",
                    self.path, len(self.projects), len(self.algorithms))

    def _save(self) -> None:
        if not self.path:
            return
        data = {name: [item.model_dump(mode="json") for item in table.values()]
                for name, (table, _) in self._tables().items()}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)

    def _insert(self, table: Dict[str, M], item: M) -> M:
        with self._lock:
            table[item.id] = item
            self._save()
        return item

    # ---------------- users ----------------

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            if self.get_user_by_username(data.username):
                raise StorageError(f"Username already taken: {data.username}")
            return self._insert(self.users, User(username=data.username, password_hash=hash_password(data.password)))

    # ---------------- projects ----------------

    def _check_user(self, user_id: Optional[str]) -> None:
        if user_id is not None and user_id not in self.users:
            raise StorageError(f"Unknown user id: {user_id}")

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_projects_by_user(self, user_id: str) -> List[Project]:
        items = [p for p in self.projects.values() if p.user_id == user_id]
        return sorted(items, key=lambda p: p.updated_at, reverse=True)

    def get_public_projects(self) -> List[Project]:
        items = [p for p in self.projects.values() if p.is_public]
        return sorted(items, key=lambda p: p.created_at, reverse=True)

    def create_project(self, data: ProjectCreate) -> Project:
        with self._lock:
            self._check_user(data.user_id)
            return self._insert(self.projects, Project(**data.model_dump()))

    def update_project(self, project_id: str, data: ProjectUpdate) -> Optional[Project]:
        with self._lock:
            existing = self.projects.get(project_id)
            if existing is None:
                return None
            # Only the reference fields may be cleared with an explicit null
            changes = {k: v for k, v in data.model_dump(exclude_unset=True).items()
                       if v is not None or k in ("user_id", "algorithm_type")}
            if "user_id" in changes:
                self._check_user(changes["user_id"])
            changes["updated_at"] = datetime.now(timezone.utc)
            return self._insert(self.projects, existing.model_copy(update=changes))

    def delete_project(self, project_id: str) -> bool:
        with self._lock:
            if self.projects.pop(project_id, None) is None:
                return False
            # Saved visualizations lose their project reference
            for vid, vis in list(self.visualizations.items()):
                if vis.project_id == project_id:
                    self.visualizations[vid] = vis.model_copy(update={"project_id": None})
            self._save()
            return True

    # ---------------- algorithms ----------------

    def get_algorithm(self, algorithm_id: str) -> Optional[Algorithm]:
        return self.algorithms.get(algorithm_id)

    def get_algorithms_by_category(self, category: str) -> List[Algorithm]:
        return [a for a in self.get_all_algorithms() if a.category == category]

    def get_all_algorithms(self) -> List[Algorithm]:
        return sorted(self.algorithms.values(), key=lambda a: (a.category, a.name))

    def create_algorithm(self, data: AlgorithmCreate) -> Algorithm:
        return self._insert(self.algorithms, Algorithm(**data.model_dump()))

    def seed_algorithms(self, catalog: Catalog) -> int:
        """Insert the catalog's reference algorithms when none are stored yet."""
        with self._lock:
            if self.algorithms:
                return 0
            for spec in catalog.algorithms:
                item = Algorithm(
                    name=spec.name, category=spec.category.value,
                    time_complexity=spec.time_complexity, space_complexity=spec.space_complexity,
                    description=spec.description, implementations=dict(spec.implementations),
                )
                self.algorithms[item.id] = item
            self._save()
            return len(catalog.algorithms)

    # ---------------- visualizations ----------------

    def get_visualization(self, visualization_id: str) -> Optional[Visualization]:
        return self.visualizations.get(visualization_id)

    def get_visualizations_by_project(self, project_id: str) -> List[Visualization]:
        return [v for v in self.visualizations.values() if v.project_id == project_id]

    def create_visualization(self, data: VisualizationCreate) -> Visualization:
        with self._lock:
            if data.project_id is not None and data.project_id not in self.projects:
                raise StorageError(f"Unknown project id: {data.project_id}")
            if data.algorithm_id is not None and data.algorithm_id not in self.algorithms:
                raise StorageError(f"Unknown algorithm id: {data.algorithm_id}")
            return self._insert(self.visualizations, Visualization(**data.model_dump()))
