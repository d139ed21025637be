import json

import pytest

from core.config import ASSESSMENT_KEY, METRICS_KEY


def test_submit_assessment_parses_form_and_persists(roadmap, store):
    result = roadmap.submit_assessment({
        "revenueBand": "~5M plateau",
        "clientCount": "85",
        "avgMRR": "4200.7",
        "psa": "on",
        "sops": "on",
        "arAuto": "on",
    })

    assert result.phase == 4
    assert result.page_range == "11-13"
    assert result.red_flags == 2
    assert result.risk_label == "Medium Risk"
    assert result.client_count == 85
    assert result.avg_mrr == 4200

    stored = json.loads(store.get(ASSESSMENT_KEY))
    assert stored["phase"] == 4
    assert stored["risk"] == "Medium Risk"
    assert stored["systems"]["am_tbr"] is False


def test_new_assessment_replaces_previous(roadmap):
    roadmap.submit_assessment({"revenueBand": "<1M"})
    roadmap.submit_assessment({"revenueBand": "5–10M", "psa": True, "sops": True,
                               "arAuto": True, "amTbr": True, "finance": True})

    saved = roadmap.load_assessment()

    assert saved.phase == 5
    assert saved.risk_label == "Low Risk"


def test_unrecognized_band_is_saved_as_unclassified(roadmap):
    result = roadmap.submit_assessment({"revenueBand": ""})

    assert not result.is_classified
    assert roadmap.load_assessment().status == "unclassified"


def test_update_metrics_saves_snapshot(roadmap, store):
    snapshot = roadmap.update_metrics({
        "mrr": "100000", "mrrClients": "50", "serviceRevenue": "80000",
        "serviceCogs": "28000", "marketingSpend": "20000", "newClients": "10",
        "retentionMonths": "24", "arBalance": "150000", "revenue90d": "450000",
    })

    assert snapshot.results.ltv == pytest.approx(31200)
    stored = json.loads(store.get(METRICS_KEY))
    assert stored["results"]["dso"] == pytest.approx(30)
    assert stored["inputs"]["available_hours_per_fte"] == 40
    assert roadmap.load_metrics().results == snapshot.results


def test_load_saved_data_on_empty_store(roadmap):
    state = roadmap.load_saved_data()

    assert state.assessment is None
    assert state.metrics is None
    assert sorted(state.checklists) == [1, 2, 3, 4, 5]


@pytest.mark.parametrize("raw", [
    "not json",
    json.dumps({"phase": 3}),
    json.dumps({"revenue_band": "<1M", "risk": "Extreme Risk", "red_flags": 0, "systems": {}}),
    json.dumps({"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": "broken"}),
    '{"revenue_band": "<1M", "risk": "Low Risk", "red_flags": Infinity, "systems": {}}',
    '{"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {}, "client_count": Infinity}',
    '{"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {}, "avg_mrr": -Infinity}',
    json.dumps({"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {}, "phase": 9, "page_range": "x"}),
    json.dumps({"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {}, "phase": 2, "page_range": "5-6"}),
    json.dumps({"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {}, "phase": 0, "page_range": None}),
    json.dumps({"revenue_band": "<1M", "risk": "High Risk", "red_flags": 7, "systems": {}, "phase": 1, "page_range": "5-6"}),
    json.dumps({"revenue_band": "<1M", "risk": "High Risk", "red_flags": -1, "systems": {}, "phase": 1, "page_range": "5-6"}),
    json.dumps({"revenue_band": "<1M", "risk": "High Risk", "red_flags": True, "systems": {}, "phase": 1, "page_range": "5-6"}),
    json.dumps({"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {}, "phase": "1", "page_range": "5-6"}),
    json.dumps({"revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {}, "phase": None, "status": "classified"}),
])
def test_malformed_assessment_loads_as_none(roadmap, store, raw):
    store.set(ASSESSMENT_KEY, raw)

    assert roadmap.load_assessment() is None


@pytest.mark.parametrize("raw", [
    "{",
    json.dumps({"inputs": {}}),
    json.dumps({"inputs": "x", "results": {}}),
])
def test_malformed_metrics_load_as_none(roadmap, store, raw):
    store.set(METRICS_KEY, raw)

    assert roadmap.load_metrics() is None


def test_checklist_progress_is_part_of_saved_state(roadmap):
    roadmap.checklists.toggle_item(2, "crm")

    state = roadmap.load_saved_data()

    assert state.checklists[2].completed == 1


def test_stored_assessment_with_valid_phase_loads(roadmap, store):
    store.set(ASSESSMENT_KEY, json.dumps({
        "revenue_band": "1–3M", "risk": "Medium Risk", "red_flags": 2.0,
        "systems": {"psa": True, "sops": True, "ar_automation": True},
        "phase": 2, "page_range": "7-8", "client_count": 40,
    }))

    saved = roadmap.load_assessment()

    assert saved.phase == 2
    assert saved.red_flags == 2
    assert saved.client_count == 40


def test_out_of_range_assessment_is_logged_and_dropped(roadmap, store, caplog):
    store.set(ASSESSMENT_KEY, json.dumps({
        "revenue_band": "<1M", "risk": "Low Risk", "red_flags": 0, "systems": {},
        "phase": 9, "page_range": "x",
    }))

    assert roadmap.load_saved_data().assessment is None
    assert "could not be read" in caplog.text


def test_non_finite_metrics_are_zeroed(roadmap, store):
    store.set(METRICS_KEY, '{"inputs": {"mrr": Infinity}, "results": {"ltv": Infinity}}')

    snapshot = roadmap.load_metrics()

    assert snapshot.inputs.mrr == 0
    assert snapshot.results.ltv == 0
