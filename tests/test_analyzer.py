import pytest

from buildburn.analyzer import (
    TOP_STEPS,
    StepTotal,
    WasteItem,
    analyze,
    failed_cache_waste,
    failed_job_waste,
    slow_deps_waste,
)
from buildburn.rates import DEFAULT_RATES, RateTable

from factories import make_job, make_step

LOW, HIGH = DEFAULT_RATES.low, DEFAULT_RATES.high


class TestWasteRules:

    def test_failed_job_wastes_full_cost(self):
        job = make_job("e2e", 600, conclusion="failure")
        assert failed_job_waste(job, LOW) == WasteItem("retry", "Failed: e2e", pytest.approx(10 * LOW))

    def test_successful_job_no_waste(self):
        assert failed_job_waste(make_job("e2e", 600), LOW) is None

    def test_failed_cache_step(self):
        step = make_step("Restore cache", 120, conclusion="failure")
        item = failed_cache_waste(step, LOW)
        assert item.type == "cache-miss"
        assert item.detail == "Restore cache"
        assert item.cost_impact == pytest.approx(2 * LOW)

    def test_successful_cache_step_ignored(self):
        assert failed_cache_waste(make_step("Restore cache", 120), LOW) is None

    def test_slow_deps(self):
        item = slow_deps_waste(make_step("npm ci", 240), LOW)
        assert item.type == "slow-deps"
        assert item.detail == "npm ci (4.0m)"
        assert item.cost_impact == pytest.approx(4 * LOW * 0.5)

    def test_deps_under_three_minutes_ignored(self):
        assert slow_deps_waste(make_step("pip install", 180), LOW) is None


class TestAnalyze:

    def test_totals(self):
        jobs = [
            make_job("build", 600, workflow="CI"),
            make_job("ios", 300, ["macos-latest"], workflow="Release"),
        ]
        report = analyze(jobs, 7)

        assert report.total_minutes == pytest.approx(15)
        assert report.total_cost == pytest.approx(10 * LOW + 5 * HIGH)
        assert report.cost_by_workflow == {
            "CI": pytest.approx(10 * LOW),
            "Release": pytest.approx(5 * HIGH),
        }
        assert report.monthly_estimate == pytest.approx(report.total_cost / 7 * 30)

    def test_monthly_estimate_zero_without_window(self):
        report = analyze([make_job("build", 600)], 0)
        assert report.total_cost > 0
        assert report.monthly_estimate == 0

    def test_non_positive_jobs_skipped(self):
        jobs = [make_job("broken", 0, conclusion="failure", steps=[make_step("npm install", 600)])]
        report = analyze(jobs, 7)
        assert report.total_cost == 0
        assert report.waste == []
        assert report.top_steps == []
        assert report.cost_by_workflow == {}

    def test_waste_order(self):
        job = make_job(
            "build",
            900,
            conclusion="failure",
            steps=[
                make_step("Restore cache", 30, conclusion="failure"),
                make_step("pip install", 400, offset=30),
            ],
        )
        report = analyze([job], 7)
        assert [w.type for w in report.waste] == ["retry", "cache-miss", "slow-deps"]

    def test_top_steps_accumulate_minutes(self):
        jobs = [
            make_job("a", 3600, steps=[make_step("test", 600), make_step("lint", 300)]),
            make_job("b", 3600, steps=[make_step("test", 600)]),
        ]
        report = analyze(jobs, 7)
        assert report.top_steps == [
            StepTotal("test", pytest.approx(20)),
            StepTotal("lint", pytest.approx(5)),
        ]

    def test_top_steps_limited_to_ten(self):
        steps = [make_step(f"s{i}", 60 * (i + 1)) for i in range(12)]
        report = analyze([make_job("j", 7200, steps=steps)], 7)
        assert len(report.top_steps) == TOP_STEPS
        assert report.top_steps[0].name == "s11"

    def test_suggestions(self):
        jobs = [
            make_job("ios", 3000, ["macos-14"], conclusion="failure", steps=[make_step("xcodebuild test", 2400)]),
        ]
        report = analyze(jobs, 7)
        assert len(report.suggestions) == 3
        assert report.suggestions[0] == f"Fix 1 issues to save ~${50 * HIGH:.2f}"
        assert "macOS" in report.suggestions[1]
        assert report.suggestions[2].startswith("'xcodebuild test' used 40m")

    def test_macos_suggestion_follows_runner_tier(self):
        rates = RateTable(low=0.008, mid=0.08, high=0.08)
        report = analyze([make_job("win", 600, ["windows-latest"])], 7, rates)
        assert report.suggestions == []

        report = analyze([make_job("mac", 600, ["macos-14"])], 7, RateTable(low=1.0, mid=2.0, high=1.0))
        assert report.suggestions == ["macOS runners cost 10x Linux, switch where possible"]

    def test_no_suggestions_for_clean_linux_run(self):
        report = analyze([make_job("build", 600, steps=[make_step("make", 300)])], 7)
        assert report.waste == []
        assert report.suggestions == []

    def test_to_dict_keys(self):
        data = analyze([make_job("build", 60)], 7).to_dict()
        assert set(data) == {
            "total_minutes",
            "total_cost",
            "monthly_estimate",
            "cost_by_workflow",
            "top_steps",
            "waste",
            "suggestions",
        }
