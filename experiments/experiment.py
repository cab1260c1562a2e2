"""
Experiment utilities for running key collection searches on vault maps.

The ``Experiment`` class runs search configurations from ``key_vault``,
records metrics, and optionally saves visualization artefacts.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import uuid4

import pandas as pd

from key_vault import Grid, KeyCollector, SearchResult, build_graph, route_to_str
from key_vault.metrics import search_metrics
from key_vault.visualize import visualize

logger = logging.getLogger(__name__)


@dataclass
class SearchConfiguration:
    """Configuration that describes how a search run should be executed."""

    name: str
    prune: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RunResult:
    """Summary of a single search execution."""

    run_id: str
    config_name: str
    timestamp: str
    metrics: Dict[str, Any]
    metadata: Mapping[str, Any]
    route: Tuple[str, ...]
    metrics_path: Path
    image_path: Optional[Path]
    manifest_path: Path


class Experiment:
    """Orchestrates search experiments on one vault and manages outputs on disk."""

    def __init__(self, name: str, grid: Grid, output_dir: Path | str) -> None:
        self.name = name
        self.grid = grid
        self.graph = build_graph(grid)
        self.output_root = Path(output_dir).expanduser()
        self.experiment_dir = self.output_root / self.name
        self.metrics_dir = self.experiment_dir / "metrics"
        self.images_dir = self.experiment_dir / "images"
        self.vault_path = self.experiment_dir / "vault.txt"
        self.manifest_path = self.experiment_dir / "metrics_log.csv"
        self._ensure_directories()

        self._configurations: Dict[str, SearchConfiguration] = {}
        self.history: Dict[str, RunResult] = {}
        self._manifest_fieldnames: Optional[List[str]] = None
        self.vault_path.write_text(grid.to_text() + "\n", encoding="utf-8")

    def add_configuration(self, config: SearchConfiguration) -> None:
        """Register a search configuration by name."""
        if config.name in self._configurations:
            raise ValueError(f"Configuration {config.name!r} already exists.")
        self._configurations[config.name] = config
        logger.debug("Configuration %s registered.", config.name)

    def run_configuration(self, name: str, *, save_image: bool = False) -> RunResult:
        """Execute a single configuration."""
        config = self._configurations.get(name)
        if config is None:
            raise KeyError(f"Configuration {name!r} is not registered.")

        logger.info("Running configuration %s (prune=%s).", name, config.prune)
        result = KeyCollector(self.graph, prune=config.prune).solve()
        metrics = search_metrics(result)
        timestamp = self._timestamp()
        run_id = self._generate_run_id()
        metrics_path = self._write_metrics(config, result, metrics, timestamp, run_id)

        image_path: Optional[Path] = None
        if save_image:
            image_path = self.images_dir / f"{config.name}_{timestamp}_{run_id}.png"
            visualize(self.grid, result, show=False, save_path=str(image_path))

        self._append_manifest(config, run_id, timestamp, metrics, metrics_path, image_path)

        run = RunResult(
            run_id=run_id,
            config_name=config.name,
            timestamp=timestamp,
            metrics=metrics,
            metadata=config.metadata,
            route=result.route,
            metrics_path=metrics_path,
            image_path=image_path,
            manifest_path=self.manifest_path,
        )
        self.history[config.name] = run
        logger.info("Configuration %s completed.", name)
        return run

    def run_all(self, config_names: Iterable[str] | None = None, *, save_images: bool = False) -> List[RunResult]:
        """Execute multiple configurations, returning the collected results."""
        names = list(config_names) if config_names is not None else list(self._configurations.keys())
        return [self.run_configuration(name, save_image=save_images) for name in names]

    def _write_metrics(
        self,
        config: SearchConfiguration,
        result: SearchResult,
        metrics: Dict[str, Any],
        timestamp: str,
        run_id: str,
    ) -> Path:
        payload = {
            "experiment": self.name,
            "run_id": run_id,
            "name": config.name,
            "prune": config.prune,
            "metadata": config.metadata,
            "timestamp": timestamp,
            "route": route_to_str(result.route),
            "metrics": metrics,
        }
        path = self.metrics_dir / f"{config.name}_{timestamp}_{run_id}.json"
        with path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
        return path

    def _ensure_directories(self) -> None:
        for directory in (self.experiment_dir, self.metrics_dir, self.images_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def _append_manifest(
        self,
        config: SearchConfiguration,
        run_id: str,
        timestamp: str,
        metrics: Mapping[str, Any],
        metrics_path: Path,
        image_path: Optional[Path],
    ) -> None:
        fieldnames = self._manifest_fieldnames or self._build_manifest_fieldnames(metrics)
        if not self.manifest_path.exists():
            with self.manifest_path.open("w", newline="", encoding="utf-8") as fh:
                csv.DictWriter(fh, fieldnames=fieldnames).writeheader()
        row: Dict[str, Any] = {
            "experiment_name": self.name,
            "config_name": config.name,
            "run_id": run_id,
            "timestamp": timestamp,
            "prune": config.prune,
            "metrics_path": str(metrics_path),
            "image_path": str(image_path) if image_path else "",
        }
        row.update(metrics)
        with self.manifest_path.open("a", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=fieldnames, extrasaction="ignore")
            writer.writerow(row)

    def _build_manifest_fieldnames(self, metrics: Mapping[str, Any]) -> List[str]:
        base = [
            "experiment_name",
            "config_name",
            "run_id",
            "timestamp",
            "prune",
            "metrics_path",
            "image_path",
        ]
        self._manifest_fieldnames = base + sorted(metrics.keys())
        return self._manifest_fieldnames

    @staticmethod
    def _generate_run_id() -> str:
        return uuid4().hex[:12]

    @staticmethod
    def _timestamp() -> str:
        return datetime.now(UTC).strftime("%Y%m%d_%H%M%S")

    @staticmethod
    def load_all_metrics(root_dir: Path | str) -> pd.DataFrame:
        """Load metrics_log.csv from all experiments under a root directory."""
        root = Path(root_dir)
        frames = [pd.read_csv(csv_path) for csv_path in root.glob("*/metrics_log.csv")]
        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, ignore_index=True)
