"""
===============================================================================
LAUNCHPLAN - Integration Test Suite
===============================================================================
End-to-end tests over the shipped catalog: YAML loading, the MissionPlanner
facade, alternative-vehicle suggestions, batch comparison (serial and
multiprocess), the SQLite mission log, text reports, budget plots and the
command-line entry point.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import datetime as dt

import pandas as pd
import pytest
import yaml

from launchplan.core.catalog import DEFAULT_CATALOG_PATH, VehicleCatalog
from launchplan.core.data_structures import InvalidDateError, MissionRequest, Strategy
from launchplan.database.mission_db import MissionDatabase
from launchplan.database.report import format_report, report_filename, write_report
from launchplan.guidance.mission_planner import MissionPlanner
from launchplan.main import main
from launchplan.simulation.batch import COLUMNS, compare_vehicles
from launchplan.visualization.budget_plots import plot_budget

STARSHIP = "SpaceX's Starship"
SLS = "NASA's SLS"
NEW_GLENN = "Blue Origin's New Glenn"
PSLV = "ISRO's Mangalyaan 1 (PSLV)"
TITAN = "Titan (Saturn)"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="module")
def catalog():
    """The shipped catalog."""
    return VehicleCatalog.from_yaml()


@pytest.fixture
def planner(catalog):
    return MissionPlanner(catalog=catalog)


def make_request(catalog, vehicle, body, payload, start="2025-01-16"):
    return MissionRequest(catalog.vehicle(vehicle), catalog.body(body), payload, start)


@pytest.fixture
def refuel_plan(catalog, planner):
    """Starship to Mars with 50 t: short by ~0.76 km/s, one tanker."""
    return planner.plan(make_request(catalog, STARSHIP, "Mars", 50_000.0))


# =============================================================================
# Catalog
# =============================================================================

class TestCatalog:

    def test_default_catalog(self, catalog):
        assert DEFAULT_CATALOG_PATH.exists()
        assert [v.name for v in catalog.vehicles] == [STARSHIP, SLS, NEW_GLENN, PSLV]
        assert [b.name for b in catalog.bodies] == ["Moon", "Mars", TITAN]

    def test_flags_replace_name_matching(self, catalog):
        assert catalog.vehicle(STARSHIP).refuel_dv_per_tanker == 5.5
        assert catalog.vehicle(PSLV).oberth_kick_capable
        assert catalog.body(TITAN).supports_gravity_assist
        assert catalog.body("Mars").oberth_kick_eligible
        assert not catalog.body("Moon").supports_gravity_assist

    def test_case_insensitive_lookup(self, catalog):
        assert catalog.body("mars") is catalog.body("MARS")
        assert catalog.vehicle("nasa's sls").name == SLS

    def test_unknown_names(self, catalog):
        with pytest.raises(KeyError, match="Valid"):
            catalog.vehicle("Saturn V")
        with pytest.raises(KeyError):
            catalog.body("Pluto")

    def test_from_dict_with_yaml_dates(self):
        cfg = yaml.safe_load("""
vehicles:
  - {name: A, wet_mass_kg: 1000, dry_mass_kg: 100, isp_s: 300, payload_leo_kg: 50}
bodies:
  - {name: B, dv_transfer_km_s: 1, dv_capture_km_s: 1, synodic_period_days: 10,
     epoch: 2025-01-01, typical_transit_days: 5}
""")
        cat = VehicleCatalog.from_dict(cfg)
        assert cat.body("B").epoch == dt.date(2025, 1, 1)
        assert cat.vehicle("A").staging_factor == 1.0
        assert cat.vehicle("A").refuel_dv_per_tanker == 0.0

    def test_missing_key(self):
        with pytest.raises(ValueError, match="isp_s"):
            VehicleCatalog.from_dict({"vehicles": [
                {"name": "A", "wet_mass_kg": 10, "dry_mass_kg": 1, "payload_leo_kg": 1},
            ]})

    def test_duplicate_names(self):
        entry = {"name": "A", "wet_mass_kg": 10, "dry_mass_kg": 1,
                 "isp_s": 300, "payload_leo_kg": 1}
        with pytest.raises(ValueError, match="Duplicate"):
            VehicleCatalog.from_dict({"vehicles": [entry, dict(entry, name="a")]})

    def test_from_yaml_path(self, tmp_path):
        path = tmp_path / "cat.yaml"
        path.write_text(
            "vehicles: []\n"
            "bodies:\n"
            "  - name: C\n"
            "    dv_transfer_km_s: 1\n"
            "    dv_capture_km_s: 1\n"
            "    synodic_period_days: 10\n"
            "    epoch: '2025-02-30'\n"
            "    typical_transit_days: 5\n"
        )
        with pytest.raises(ValueError):
            VehicleCatalog.from_yaml(path)


# =============================================================================
# Mission planner facade
# =============================================================================

class TestMissionPlanner:

    def test_refuel_plan(self, refuel_plan):
        res = refuel_plan.result
        assert res.base_capability == pytest.approx(14.443, abs=1e-3)
        assert res.total_required == pytest.approx(15.20)
        assert res.strategy == Strategy.ORBITAL_REFUEL
        assert res.tankers == 1
        assert res.final_capability == pytest.approx(res.base_capability + 5.5)
        assert res.feasible
        assert "1 tanker(s)" in res.rationale
        assert res.base_margin < 0.0

    def test_budget_legs_exposed(self, refuel_plan):
        b = refuel_plan.budget
        assert (b.ascent, b.transfer, b.capture) == (9.30, 3.80, 2.10)

    def test_windows_and_chronology(self, refuel_plan):
        assert len(refuel_plan.windows) == 5
        assert refuel_plan.windows[0].launch_date == dt.date(2025, 1, 16)
        assert refuel_plan.windows[0].arrival_date == dt.date(2025, 8, 14)
        assert refuel_plan.chronology[3].regime == "Orbital Rendezvous"
        assert refuel_plan.alternatives == ()

    def test_direct(self, catalog, planner):
        plan = planner.plan(make_request(catalog, SLS, "Mars", 20_000.0))
        assert plan.result.strategy == Strategy.DIRECT
        assert plan.result.feasible
        assert plan.result.final_capability == plan.result.base_capability

    def test_gravity_assist_overrides_transit(self, catalog, planner):
        plan = planner.plan(make_request(catalog, SLS, TITAN, 5_000.0, start="2025-09-21"))
        assert plan.result.strategy == Strategy.GRAVITY_ASSIST
        assert plan.result.feasible
        assert all(w.transit_days == 2555 for w in plan.windows)

    def test_gravity_assist_priority_over_refuel(self, catalog, planner):
        """Starship can refuel, but Titan supports gravity assist first."""
        plan = planner.plan(make_request(catalog, STARSHIP, TITAN, 50_000.0))
        assert plan.result.strategy == Strategy.GRAVITY_ASSIST
        assert plan.result.tankers == 0
        assert not plan.result.feasible
        assert plan.chronology == ()

    def test_infeasible_with_alternatives(self, catalog, planner):
        plan = planner.plan(make_request(catalog, NEW_GLENN, "Mars", 20_000.0))
        assert plan.result.strategy == Strategy.INFEASIBLE
        assert not plan.result.feasible
        assert [a.name for a in plan.alternatives] == [SLS]
        assert plan.alternatives[0].capability >= plan.result.total_required
        # Windows are produced whatever the outcome
        assert len(plan.windows) == 5

    def test_payload_over_limit(self, catalog, planner):
        plan = planner.plan(make_request(catalog, PSLV, "Moon", 5_000.0))
        assert plan.result.base_capability == 0.0
        assert plan.result.strategy == Strategy.INFEASIBLE
        assert "No feasible profile" in plan.result.rationale

    def test_without_catalog_no_alternatives(self, catalog):
        plan = MissionPlanner().plan(make_request(catalog, NEW_GLENN, "Mars", 20_000.0))
        assert plan.alternatives == ()

    def test_far_future_start_rejected(self, catalog, planner):
        req = make_request(catalog, SLS, "Mars", 0.0, start="9995-01-01")
        with pytest.raises(InvalidDateError):
            planner.plan(req)
        # Feasibility alone needs no calendar arithmetic
        assert planner.evaluate(req).feasible

    def test_evaluate_matches_plan(self, catalog, planner):
        req = make_request(catalog, STARSHIP, "Moon", 100_000.0)
        assert planner.evaluate(req) == planner.plan(req).result

    def test_to_dict(self, refuel_plan):
        d = refuel_plan.to_dict()
        assert d["strategy"] == "orbital-refuel"
        assert d["tankers"] == 1
        assert d["start_date"] == "2025-01-16"
        assert d["windows"][0] == {"launch_date": "2025-01-16", "arrival_date": "2025-08-14"}
        assert len(d["chronology"]) == 8


# =============================================================================
# Batch comparison
# =============================================================================

class TestBatchComparison:

    def test_serial(self, catalog):
        df = compare_vehicles(catalog, "Mars", 20_000.0, "2025-01-16", num_workers=1)
        assert list(df.columns) == COLUMNS
        assert list(df["vehicle"]) == [STARSHIP, SLS, NEW_GLENN, PSLV]
        by_name = df.set_index("vehicle")
        assert by_name.loc[SLS, "strategy"] == "direct"
        assert by_name.loc[STARSHIP, "strategy"] == "orbital-refuel"
        assert by_name.loc[NEW_GLENN, "strategy"] == "infeasible"
        assert by_name.loc[PSLV, "base_capability"] == 0.0
        assert df["feasible"].tolist() == [True, True, False, False]
        assert by_name.loc[SLS, "first_launch"] == dt.date(2025, 1, 16)

    def test_parallel_matches_serial(self, catalog):
        serial = compare_vehicles(catalog, TITAN, 5_000.0, "2026-01-01", num_workers=1)
        parallel = compare_vehicles(catalog, TITAN, 5_000.0, "2026-01-01", num_workers=2)
        pd.testing.assert_frame_equal(serial, parallel)

    def test_subset_and_unknown(self, catalog):
        df = compare_vehicles(catalog, catalog.body("Moon"), 1000.0, "2025-01-01",
                              vehicles=[PSLV, SLS], num_workers=1)
        assert list(df["vehicle"]) == [PSLV, SLS]
        with pytest.raises(KeyError):
            compare_vehicles(catalog, "Moon", 1000.0, "2025-01-01", vehicles=["Nope"])


# =============================================================================
# Persistence and reports
# =============================================================================

class TestPersistence:

    def test_record_and_query(self, refuel_plan, catalog, planner, tmp_path):
        infeasible = planner.plan(make_request(catalog, NEW_GLENN, "Mars", 20_000.0))
        with MissionDatabase(tmp_path / "missions.db") as db:
            rid = db.record_plan(refuel_plan)
            db.record_plan(infeasible)

            df = db.query_results()
            assert len(df) == 2
            assert df.loc[0, "strategy"] == "orbital-refuel"
            assert df.loc[0, "tankers"] == 1
            assert df["feasible"].tolist() == [True, False]

            assert len(db.query_results(feasible=False)) == 1
            assert len(db.query_results(body="Moon")) == 0

            win = db.get_windows(rid)
            assert list(win["seq"]) == [1, 2, 3, 4, 5]
            assert win.loc[0, "launch_date"] == "2025-01-16"

            assert db.get_table_sizes() == {"mission_results": 2, "launch_windows": 10}
            exported = db.export_to_csv(tmp_path / "csv")
            assert set(exported) == {"mission_results", "launch_windows"}
            assert all(os.path.exists(p) for p in exported.values())

    def test_in_memory(self, refuel_plan):
        db = MissionDatabase(":memory:")
        db.record_plan(refuel_plan)
        assert len(db.query_results(body="Mars")) == 1
        db.close()

    def test_report_contents(self, refuel_plan):
        text = format_report(refuel_plan, now=dt.datetime(2025, 1, 2, 3, 4))
        assert "Rocket: SpaceX's Starship" in text
        assert "Earth ascent: 9.30" in text
        assert "Total req:    15.20" in text
        assert "Recommended tankers: 1" in text
        assert "ALTERNATE PROFILE FEASIBLE" in text
        assert " 1 | 2025-01-16      | 2025-08-14" in text

    def test_report_suggestions(self, catalog, planner):
        plan = planner.plan(make_request(catalog, NEW_GLENN, "Mars", 20_000.0))
        text = format_report(plan)
        assert "NOT FEASIBLE" in text
        assert f"Use {SLS}" in text

    def test_write_report(self, refuel_plan, tmp_path):
        now = dt.datetime(2025, 1, 2, 3, 4)
        path = write_report(refuel_plan, tmp_path / "reports", now=now)
        assert path.name == report_filename(now) == "mission_20250102_0304.txt"
        assert "Notes: LEO refueling" in path.read_text()

    def test_plot_budget(self, refuel_plan, tmp_path):
        out = tmp_path / "plots" / "budget.png"
        plot_budget(refuel_plan, str(out))
        assert out.exists() and out.stat().st_size > 0


# =============================================================================
# Command line
# =============================================================================

class TestCommandLine:

    def test_list(self, capsys):
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        assert "Available Rockets:" in out
        assert "Titan (Saturn)" in out

    def test_plan(self, capsys, tmp_path):
        rc = main([
            "plan", "--vehicle", SLS, "--body", "Mars", "--payload", "20000",
            "--start", "2025-01-16", "--save-report", str(tmp_path),
            "--db", str(tmp_path / "log.db"),
        ])
        assert rc == 0
        assert "DIRECT MISSION FEASIBLE" in capsys.readouterr().out
        assert len(list(tmp_path.glob("mission_*.txt"))) == 1
        with MissionDatabase(tmp_path / "log.db") as db:
            assert len(db.query_results()) == 1

    def test_compare_csv(self, capsys, tmp_path):
        csv_path = tmp_path / "cmp.csv"
        rc = main(["compare", "--body", "Mars", "--payload", "20000",
                   "--csv", str(csv_path)])
        assert rc == 0
        assert len(pd.read_csv(csv_path)) == 4

    def test_invalid_date(self):
        assert main(["plan", "--vehicle", SLS, "--body", "Mars",
                     "--payload", "1000", "--start", "2025-02-30"]) == 2

    def test_unknown_vehicle(self):
        assert main(["plan", "--vehicle", "Saturn V", "--body", "Mars",
                     "--payload", "1000"]) == 2

    def test_negative_payload(self):
        assert main(["plan", "--vehicle", SLS, "--body", "Mars",
                     "--payload", "-5"]) == 2

    def test_start_date_past_calendar_end(self):
        assert main(["plan", "--vehicle", SLS, "--body", "Mars",
                     "--payload", "1000", "--start", "9995-01-01"]) == 2

    def test_malformed_catalog(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("vehicles: [\n  - {name: A, wet_mass_kg: 1\n")
        assert main(["--config", str(path), "list"]) == 2

    def test_missing_catalog(self, tmp_path):
        assert main(["--config", str(tmp_path / "absent.yaml"), "list"]) == 2
