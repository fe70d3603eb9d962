"""
===============================================================================
LAUNCHPLAN - Vehicle and Body Catalog
===============================================================================
Read-only name -> record tables built from a YAML configuration file.

Expected layout::

    vehicles:
      - name: "SpaceX's Starship"
        wet_mass_kg: 5000000.0
        dry_mass_kg: 200000.0
        isp_s: 350.0
        payload_leo_kg: 150000.0
        staging_factor: 1.4
        refuel_dv_per_tanker_km_s: 5.5      # optional, default 0
        oberth_kick_capable: false          # optional
    bodies:
      - name: "Mars"
        dv_transfer_km_s: 3.80
        dv_capture_km_s: 2.10
        synodic_period_days: 780.0
        epoch: "2025-01-16"
        typical_transit_days: 210.0
        supports_gravity_assist: false      # optional
        oberth_kick_eligible: true          # optional

The catalog is loaded once and never mutated by the planner.
===============================================================================
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from launchplan.core.data_structures import Body, Vehicle

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CATALOG_PATH = _PROJECT_ROOT / "config" / "mission_catalog.yaml"


def _require(cfg: Mapping[str, Any], key: str, kind: str) -> Any:
    if key not in cfg:
        raise ValueError(f"{kind} entry {cfg.get('name', '<unnamed>')!r} is missing '{key}'")
    return cfg[key]


def vehicle_from_config(cfg: Mapping[str, Any]) -> Vehicle:
    """Build a Vehicle from one ``vehicles`` entry."""
    return Vehicle(
        name=str(_require(cfg, "name", "Vehicle")),
        wet_mass_kg=float(_require(cfg, "wet_mass_kg", "Vehicle")),
        dry_mass_kg=float(_require(cfg, "dry_mass_kg", "Vehicle")),
        isp_s=float(_require(cfg, "isp_s", "Vehicle")),
        payload_leo_kg=float(_require(cfg, "payload_leo_kg", "Vehicle")),
        staging_factor=float(cfg.get("staging_factor", 1.0)),
        refuel_dv_per_tanker=float(cfg.get("refuel_dv_per_tanker_km_s", 0.0)),
        oberth_kick_capable=bool(cfg.get("oberth_kick_capable", False)),
    )


def body_from_config(cfg: Mapping[str, Any]) -> Body:
    """Build a Body from one ``bodies`` entry."""
    epoch = _require(cfg, "epoch", "Body")
    return Body(
        name=str(_require(cfg, "name", "Body")),
        dv_transfer=float(_require(cfg, "dv_transfer_km_s", "Body")),
        dv_capture=float(_require(cfg, "dv_capture_km_s", "Body")),
        synodic_period_days=float(_require(cfg, "synodic_period_days", "Body")),
        # YAML turns unquoted dates into datetime.date already
        epoch=epoch,
        typical_transit_days=float(_require(cfg, "typical_transit_days", "Body")),
        supports_gravity_assist=bool(cfg.get("supports_gravity_assist", False)),
        oberth_kick_eligible=bool(cfg.get("oberth_kick_eligible", False)),
    )


class VehicleCatalog:
    """
    Immutable lookup tables of vehicles and bodies.

    Iteration order follows the configuration file. Lookups are
    case-insensitive on the display name.

    Args:
        vehicles: Vehicle records
        bodies:   Body records

    Raises:
        ValueError: If two records of the same kind share a name.
    """

    def __init__(self, vehicles: Iterable[Vehicle], bodies: Iterable[Body]) -> None:
        self._vehicles = MappingProxyType(self._index(vehicles, "vehicle"))
        self._bodies = MappingProxyType(self._index(bodies, "body"))

    @staticmethod
    def _index(records, kind: str) -> Dict[str, Any]:
        table: Dict[str, Any] = {}
        for rec in records:
            key = rec.name.lower()
            if key in table:
                raise ValueError(f"Duplicate {kind} name in catalog: {rec.name!r}")
            table[key] = rec
        return table

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "VehicleCatalog":
        """Build the catalog from an already-parsed configuration mapping."""
        vehicles = [vehicle_from_config(v) for v in config.get("vehicles") or []]
        bodies = [body_from_config(b) for b in config.get("bodies") or []]
        return cls(vehicles, bodies)

    @classmethod
    def from_yaml(cls, path: Optional[Union[str, Path]] = None) -> "VehicleCatalog":
        """
        Load the catalog from a YAML file.

        Args:
            path: Path to the YAML file. Defaults to config/mission_catalog.yaml

        Returns:
            VehicleCatalog
        """
        path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
        logger.info("Loading catalog from: %s", path)
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        catalog = cls.from_dict(config)
        logger.debug(
            "Catalog loaded: %d vehicles, %d bodies",
            len(catalog.vehicles), len(catalog.bodies),
        )
        return catalog

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def vehicles(self) -> List[Vehicle]:
        return list(self._vehicles.values())

    @property
    def bodies(self) -> List[Body]:
        return list(self._bodies.values())

    def vehicle(self, name: str) -> Vehicle:
        """Look up a vehicle by name. Raises KeyError listing valid names."""
        try:
            return self._vehicles[name.lower()]
        except KeyError:
            valid = [v.name for v in self._vehicles.values()]
            raise KeyError(f"Unknown vehicle: {name}. Valid: {valid}") from None

    def body(self, name: str) -> Body:
        """Look up a body by name. Raises KeyError listing valid names."""
        try:
            return self._bodies[name.lower()]
        except KeyError:
            valid = [b.name for b in self._bodies.values()]
            raise KeyError(f"Unknown body: {name}. Valid: {valid}") from None

    def __repr__(self) -> str:
        return (
            f"VehicleCatalog(vehicles={len(self._vehicles)}, "
            f"bodies={len(self._bodies)})"
        )
