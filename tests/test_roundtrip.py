import json
import random

import numpy as np
import pytest

from cipherforge.cipher.modes import Mode
from cipherforge.evaluation import (
    EvaluationReport,
    PropagationResult,
    RoundtripResult,
    SACResult,
    cbc_error_propagation,
    compute_sac,
    run_all_configurations,
    run_roundtrip_tests,
)
from cipherforge.utils.repro import read_json, save_evaluation, set_global_seed


# ---------------------------------------------------------------------------
# Roundtrip verification
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("mode", ["ECB", "CBC"])
@pytest.mark.parametrize("key_size", [8, 16, 24, 32])
def test_roundtrip_all_vectors_pass(mode, key_size):
    result = run_roundtrip_tests(mode, key_size, num_vectors=10, seed=42)
    assert result.mode == mode
    assert result.key_size_bytes == key_size
    assert result.total_vectors == 10
    assert result.passed == 10
    assert result.is_perfect
    assert result.success_rate == 1.0
    assert result.failures == []
    assert "[PASS]" in result.summary()


def test_roundtrip_result_serializes():
    result = run_roundtrip_tests(Mode.CBC, 16, num_vectors=3)
    d = result.to_dict()
    assert d["mode"] == "CBC"
    assert d["failed"] == 0
    json.dumps(d)


def test_failed_result_summary():
    r = RoundtripResult(mode="ECB", key_size_bytes=16, total_vectors=4, passed=3, failed=1)
    assert not r.is_perfect
    assert r.success_rate == 0.75
    assert "[FAIL]" in r.summary()
    assert RoundtripResult(mode="ECB", key_size_bytes=16, total_vectors=0, passed=0, failed=0).success_rate == 0.0


def test_run_all_configurations_order_and_progress():
    calls = []
    results = run_all_configurations(
        key_sizes=(16, 32),
        num_vectors=3,
        progress_callback=lambda label, i, n: calls.append((label, i, n)),
    )
    assert [(r.mode, r.key_size_bytes) for r in results] == [("ECB", 16), ("ECB", 32), ("CBC", 16), ("CBC", 32)]
    assert all(r.is_perfect for r in results)
    assert calls[0] == ("ECB/128", 0, 4)
    assert calls[-1] == ("CBC/256", 3, 4)


# ---------------------------------------------------------------------------
# Diffusion
# ---------------------------------------------------------------------------

def test_sac_plaintext():
    result = compute_sac(key_size_bytes=16, input_type="plaintext", trials=4, seed=7)
    assert isinstance(result, SACResult)
    assert result.num_input_bits == 128
    assert result.num_output_bits == 128
    assert len(result.per_input_bit_mean) == 128
    assert 0.45 <= result.global_mean <= 0.55
    assert result.passes_sac


def test_sac_key_bits():
    result = compute_sac(key_size_bytes=8, input_type="key", trials=4, seed=7)
    assert result.num_input_bits == 64
    assert result.passes_sac
    assert result.to_dict()["passes_sac"] is True


def test_sac_rejects_unknown_input_type():
    with pytest.raises(ValueError):
        compute_sac(input_type="iv", trials=1)


def test_cbc_error_propagation_holds():
    result = cbc_error_propagation(key_size_bytes=16, num_blocks=4, trials=8, seed=3)
    assert isinstance(result, PropagationResult)
    assert result.exact_next_block_flips == 8
    assert result.corrupted_current_blocks == 8
    assert result.untouched_other_blocks == 8
    assert result.holds
    assert result.mean_current_block_distance > 0


def test_cbc_error_propagation_needs_two_blocks():
    with pytest.raises(ValueError):
        cbc_error_propagation(num_blocks=1)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

def test_report_aggregates_and_writes(tmp_path):
    report = EvaluationReport(
        roundtrip_results=run_all_configurations(key_sizes=(16,), num_vectors=2),
        propagation_results=[cbc_error_propagation(trials=2)],
    )
    assert report.timestamp
    assert report.all_pass
    assert report.failing_configurations() == []

    d = report.to_dict()
    assert d["summary"]["configurations_tested"] == 2
    assert d["summary"]["cbc_propagation_holds"] is True
    assert "Roundtrip Tests: 2/2 configurations pass" in report.to_summary()

    paths = save_evaluation(tmp_path, run_config={"seed": 1337}, report=d,
                            summary=report.to_summary(), run_name="unit test/run")
    assert paths.run_dir.parent == tmp_path
    assert paths.run_dir.name.endswith("unit_test_run")
    assert read_json(paths.report_json)["summary"] == d["summary"]
    assert read_json(paths.run_config_json) == {"seed": 1337}
    assert paths.summary_txt.read_text(encoding="utf-8").startswith("Evaluation Report")


def test_report_lists_failing_configurations():
    bad = RoundtripResult(mode="CBC", key_size_bytes=24, total_vectors=1, passed=0, failed=1)
    report = EvaluationReport(roundtrip_results=[bad])
    assert report.failing_configurations() == ["CBC/192"]
    assert not report.all_pass


def test_global_seed_is_reproducible():
    set_global_seed(99)
    first = (random.random(), float(np.random.rand()))
    set_global_seed(99)
    assert (random.random(), float(np.random.rand())) == first
