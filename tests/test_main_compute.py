"""
Tests for the lesson runner in main_compute.py.

Runs each step against a small in-memory gapminder table and against
temporary CSV/YAML files for the end-to-end path.
"""

import os
import sys
import tempfile

import pandas as pd
import pytest
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from data_loaders import return_default_config
from main_compute import run_lesson, save_results, main


GAPMINDER_CSV = (
    "country,year,pop,continent,lifeExp,gdpPercap\n"
    "Afghanistan,1952,8425333,Asia,28.801,779.4453145\n"
    "Afghanistan,2007,31889923,Asia,43.828,974.5803384\n"
    "Australia,1952,8691212,Oceania,69.12,10039.59564\n"
    "Australia,2007,20434176,Oceania,81.235,34435.36744\n"
    "New Zealand,1952,1994794,Oceania,69.39,10556.57566\n"
    "New Zealand,2007,4115771,Oceania,80.204,25185.00911\n"
)


@pytest.fixture
def tmp_project():
    with tempfile.TemporaryDirectory() as tmpdir:
        os.makedirs(os.path.join(tmpdir, "data"))
        with open(os.path.join(tmpdir, "data", "gapminder_data.csv"), "w") as fh:
            fh.write(GAPMINDER_CSV)
        yield tmpdir


def _paths(root):
    return {
        "data_dir": os.path.join(root, "data"),
        "results_dir": os.path.join(root, "results"),
        "gapminder_csv": os.path.join(root, "data", "gapminder_data.csv"),
    }


def _quiet_cfg(**filters):
    cfg = return_default_config()
    cfg["diagnostics"]["verbose"] = False
    cfg["filters"].update(filters)
    return cfg


class TestRunLesson:

    def test_returns_all_outputs(self, tmp_project):
        results = run_lesson(_quiet_cfg(), _paths(tmp_project))
        assert set(results) == {"gdp", "gdp_by_continent", "regression"}
        assert len(results["gdp"]) == 6
        assert "gdp" in results["gdp"].columns

    def test_grouped_totals(self, tmp_project):
        by = run_lesson(_quiet_cfg(), _paths(tmp_project))["gdp_by_continent"]
        assert list(by.columns) == ["year", "continent", "population", "gdp", "gdp_per_capita"]
        assert len(by) == 4
        oc_2007 = by[(by["year"] == 2007) & (by["continent"] == "Oceania")].iloc[0]
        assert oc_2007["population"] == 20434176 + 4115771

    def test_regression_on_year(self, tmp_project):
        reg = run_lesson(_quiet_cfg(), _paths(tmp_project))["regression"]
        assert reg.loc[0, "response"] == "life_exp"
        assert reg.loc[0, "predictor"] == "year"
        assert reg.loc[0, "slope"] > 0
        assert reg.loc[0, "n_obs"] == 6

    def test_filters_from_config(self, tmp_project):
        results = run_lesson(_quiet_cfg(country=["Australia"]), _paths(tmp_project))
        assert results["gdp"]["country"].unique().tolist() == ["Australia"]

    def test_single_year_skips_regression(self, tmp_project, capsys):
        results = run_lesson(_quiet_cfg(year=[2007]), _paths(tmp_project))
        assert results["regression"].empty
        assert "[regression] Skipped" in capsys.readouterr().out
        assert set(results["gdp_by_continent"]["year"]) == {2007}

    def test_uses_passed_data(self):
        data = pd.DataFrame({
            "country": ["A", "A", "B"],
            "year": [2000, 2001, 2000],
            "population": [10, 20, 30],
            "continent": ["X", "X", "Y"],
            "life_exp": [50.0, 51.0, 60.0],
            "gdp_per_capita": [1.0, 2.0, 3.0],
        })
        results = run_lesson(_quiet_cfg(), {"gapminder_csv": "/does/not/exist.csv"}, data=data)
        assert results["gdp"]["gdp"].tolist() == [10.0, 40.0, 90.0]
        assert "gdp" not in data.columns

    def test_missing_group_column_skips_grouping(self, capsys):
        data = pd.DataFrame({
            "country": ["A", "A"], "year": [2000, 2001], "population": [1, 2],
            "life_exp": [50.0, 51.0], "gdp_per_capita": [1.0, 1.0],
        })
        results = run_lesson(_quiet_cfg(), {}, data=data)
        assert results["gdp_by_continent"].empty
        assert "skipping grouped totals" in capsys.readouterr().out

    def test_missing_regression_column_skips_regression(self, capsys):
        data = pd.DataFrame({
            "country": ["A", "A", "B"], "year": [2000, 2001, 2000],
            "continent": ["X", "X", "Y"], "population": [10, 20, 30],
            "gdp_per_capita": [1.0, 2.0, 3.0],
        })
        results = run_lesson(_quiet_cfg(), {}, data=data)
        assert results["regression"].empty
        assert "[regression] Skipped life_exp ~ year" in capsys.readouterr().out
        assert len(results["gdp"]) == 3
        assert len(results["gdp_by_continent"]) == 3

    def test_text_regression_column_skips_regression(self, capsys):
        data = pd.DataFrame({
            "country": ["A", "A"], "year": [2000, 2001], "continent": ["X", "X"],
            "population": [10, 20], "life_exp": ["long", "short"],
            "gdp_per_capita": [1.0, 2.0],
        })
        results = run_lesson(_quiet_cfg(), {}, data=data)
        assert results["regression"].empty
        assert "[regression] Skipped" in capsys.readouterr().out

    def test_verbose_prints_summary(self, tmp_project, capsys):
        cfg = _quiet_cfg()
        cfg["diagnostics"]["verbose"] = True
        run_lesson(cfg, _paths(tmp_project))
        out = capsys.readouterr().out
        assert "[data] 6 rows x 6 columns" in out
        assert "[gdp] 6 of 6 rows kept (no filters)." in out


class TestSaveResults:

    def test_writes_csv(self):
        results = {"gdp": pd.DataFrame({"a": [1]}), "regression": pd.DataFrame({"b": [2]})}
        with tempfile.TemporaryDirectory() as tmpdir:
            out_dir = os.path.join(tmpdir, "nested", "results")
            written = save_results(results, out_dir)
            assert [os.path.basename(p) for p in written] == ["gdp.csv", "regression.csv"]
            assert pd.read_csv(written[0])["a"].tolist() == [1]

    def test_suffix(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            written = save_results({"gdp": pd.DataFrame({"a": [1]})}, tmpdir, suffix="_2007")
            assert os.path.basename(written[0]) == "gdp_2007.csv"


class TestMain:

    def test_end_to_end(self, tmp_project):
        config_path = os.path.join(tmp_project, "config.yaml")
        with open(config_path, "w") as fh:
            yaml.dump({
                "paths": {
                    "gapminder_csv": os.path.join(tmp_project, "data", "gapminder_data.csv"),
                    "results_dir": os.path.join(tmp_project, "results"),
                },
                "diagnostics": {"verbose": False},
            }, fh)

        assert main(["--config", config_path]) == 0
        files = sorted(os.listdir(os.path.join(tmp_project, "results")))
        assert files == ["gdp.csv", "gdp_by_continent.csv", "regression.csv"]

    def test_missing_source_returns_1(self, tmp_project, capsys):
        config_path = os.path.join(tmp_project, "config.yaml")
        with open(config_path, "w") as fh:
            yaml.dump({
                "paths": {
                    "gapminder_csv": os.path.join(tmp_project, "nope.csv"),
                    "results_dir": os.path.join(tmp_project, "results"),
                },
            }, fh)

        assert main(["--config", config_path]) == 1
        assert "[error]" in capsys.readouterr().out
        assert not os.path.exists(os.path.join(tmp_project, "results"))
