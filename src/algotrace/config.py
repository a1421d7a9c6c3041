# -----------------------------------------------------------------------------
# Runtime configuration
# Purpose: Read settings from the environment (optionally a .env file) with
# defaults suitable for local development.
# -----------------------------------------------------------------------------

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CATALOG_PATH = str(PROJECT_ROOT / "examples" / "catalog.yaml")

@dataclass(frozen=True)
class Settings:
    catalog_path: str = DEFAULT_CATALOG_PATH
    storage_path: str | None = None       # None → in-memory storage
    confidence_scale: float = 0.2         # classifier: confidence = min(score * scale, 1)
    generic_step_limit: int = 0           # 0 → one step per non-blank line
    max_graph_nodes: int = 200            # larger graph input falls back to the generic walk
    max_graph_edges: int = 1000
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "Settings":
        # Load .env for external configuration (catalog path, storage file, ...)
        load_dotenv()
        return Settings(
            catalog_path=os.getenv("CATALOG_PATH", DEFAULT_CATALOG_PATH),
            storage_path=os.getenv("STORAGE_PATH") or None,
            confidence_scale=float(os.getenv("CONFIDENCE_SCALE", "0.2")),
            generic_step_limit=int(os.getenv("GENERIC_STEP_LIMIT", "0")),
            max_graph_nodes=int(os.getenv("MAX_GRAPH_NODES", "200")),
            max_graph_edges=int(os.getenv("MAX_GRAPH_EDGES", "1000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
