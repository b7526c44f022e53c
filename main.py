"""
DG grid builder - mesh, connectivity and face-node maps from a config.

Usage:
    uv run python main.py
    uv run python main.py mesh=uniform1d N=4
    uv run python main.py mesh=gambit mesh.generator.path=data/meshes/square.neu N=3
    uv run python main.py -m mesh=rect N=1,2,4,8 mlflow.enabled=true
"""

import logging
import sys
from pathlib import Path

import hydra
import mlflow
from dotenv import load_dotenv
from hydra.utils import instantiate
from omegaconf import DictConfig, OmegaConf

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent / "src"))

from cli import grid_summary, header, ok  # noqa: E402
from connectivity import boundary_condition_maps, build_grid  # noqa: E402

log = logging.getLogger(__name__)


def setup_mlflow(cfg: DictConfig) -> str:
    """Point MLflow at the configured store and select the experiment (prefixed if set)."""
    mlflow.set_tracking_uri(cfg.mlflow.tracking_uri)

    prefix = cfg.mlflow.get("project_prefix", "")
    experiment_name = f"{prefix}/{cfg.experiment_name}" if prefix else cfg.experiment_name
    mlflow.set_experiment(experiment_name)
    return experiment_name


def load_mesh(cfg: DictConfig):
    """Instantiate the configured mesh; returns (mesh, boundary conditions or None)."""
    result = instantiate(cfg.mesh.generator)
    if isinstance(result, tuple):
        return result
    return result, None


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Main entry point."""
    log.info(f"Mesh: {cfg.mesh.name}, N={cfg.N}")
    mesh, bc = load_mesh(cfg)
    grid = build_grid(mesh, cfg.N)

    header(f"{cfg.mesh.name}: K={mesh.K}, N={cfg.N}")
    grid_summary("Grid", grid.metrics.to_mlflow())
    if bc is not None:
        for name, maps in boundary_condition_maps(grid, bc).items():
            ok(f"{name}: {maps.map.size} face nodes")

    if cfg.mlflow.enabled:
        log.info(f"MLflow experiment: {setup_mlflow(cfg)}")
        with mlflow.start_run(run_name=f"{cfg.mesh.name}_N{cfg.N}", tags={"mesh": cfg.mesh.name}):
            mlflow.log_params({"mesh": cfg.mesh.name, "N": cfg.N, "K": mesh.K, "n_faces": mesh.n_faces})
            mlflow.log_dict(OmegaConf.to_container(cfg), "config.yaml")
            mlflow.log_metrics(grid.metrics.to_mlflow())


if __name__ == "__main__":
    main()
