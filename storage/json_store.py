"""File snapshot of the canonical graph: models.json, categories.json, vendors.json."""

from pathlib import Path
from typing import Any
import orjson
import structlog
from config.settings import settings
from pricing.models import ModelGraph

log = structlog.get_logger(__name__)

GRAPH_FILES = ("models", "categories", "vendors")


class JsonGraphStore:
    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir or settings.data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def exists(self) -> bool:
        return all(self.path_for(name).is_file() for name in GRAPH_FILES)

    def load_payload(self) -> dict[str, Any] | None:
        """The stored canonical payload, or None when no complete snapshot exists."""
        if not self.exists():
            return None
        payload = {}
        for name in GRAPH_FILES:
            payload[name] = orjson.loads(self.path_for(name).read_bytes())
        log.debug("json_snapshot_loaded", data_dir=str(self.data_dir),
                  models=len(payload["models"]))
        return payload

    def save(self, graph: ModelGraph) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for name, records in graph.to_dict().items():
            path = self.path_for(name)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_bytes(orjson.dumps(records, option=orjson.OPT_INDENT_2))
            tmp.replace(path)
        log.info("json_snapshot_saved", data_dir=str(self.data_dir), models=len(graph.models))
