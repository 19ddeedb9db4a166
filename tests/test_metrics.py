"""
Unit tests for metrics module.

Tests the closed-form HNSW and IVF estimates and their edge cases.
"""

import math

import pytest
from annviz.metrics import (
    HNSW_MAX_RECALL,
    IVF_MAX_RECALL,
    calculate_hnsw_metrics,
    calculate_ivf_metrics,
    get_build_speed_rating,
)


def hnsw(**overrides):
    params = dict(
        vector_count=100_000,
        dimensions=768,
        mrl_dimensions=768,
        M=16,
        ef_construction=200,
        ef_search=50,
    )
    params.update(overrides)
    return calculate_hnsw_metrics(**params)


class TestHNSWStorage:
    """Tests for HNSW storage estimates."""

    def test_vector_storage_exact(self):
        m = hnsw(vector_count=12_345, mrl_dimensions=512)
        assert m.vector_storage_bytes == 12_345 * 512 * 4

    def test_graph_storage_formula(self):
        N, M = 1000, 16
        m = hnsw(vector_count=N, M=M)

        expected = N * (2 * M * 4 + 4)
        for layer in range(1, 4):
            expected += N * math.exp(-layer * math.log(M)) * (M * 4 + 4)

        assert m.graph_storage_bytes == pytest.approx(expected)

    def test_total_and_ram(self):
        m = hnsw(vector_count=5000)
        assert m.total_storage_bytes == pytest.approx(
            m.vector_storage_bytes + m.graph_storage_bytes + 5000 * 16
        )
        assert m.ram_usage_bytes == pytest.approx(m.total_storage_bytes * 1.3)

    def test_truncation_reduces_storage(self):
        assert hnsw(mrl_dimensions=256).total_storage_bytes < hnsw().total_storage_bytes


class TestHNSWPerformance:
    """Tests for HNSW build time, QPS and latency."""

    @pytest.mark.parametrize("param,low,high", [
        ("vector_count", 10_000, 1_000_000),
        ("M", 8, 32),
        ("ef_construction", 100, 400),
        ("mrl_dimensions", 256, 768),
    ])
    def test_build_time_monotonic(self, param, low, high):
        assert hnsw(**{param: low}).build_time_seconds < hnsw(**{param: high}).build_time_seconds

    def test_qps_decreases_with_ef_search(self):
        qps = [hnsw(ef_search=ef).qps for ef in (1, 10, 20, 50, 100, 500)]
        assert all(a > b for a, b in zip(qps, qps[1:]))

    def test_latency_is_inverse_qps(self):
        m = hnsw(ef_search=200, mrl_dimensions=768)
        assert m.query_latency_ms == pytest.approx(1000 / max(m.qps, 1))

    def test_known_qps_value(self):
        m = hnsw(vector_count=100_000, mrl_dimensions=128, ef_search=10)
        assert m.qps == pytest.approx(10000)
        assert m.query_latency_ms == pytest.approx(0.1)


class TestHNSWRecall:
    """Tests for the recall model."""

    def test_non_decreasing_in_m(self):
        # ef_construction large enough that the construction factor stays at 1
        recalls = [hnsw(M=M, ef_construction=1000).recall for M in (2, 4, 8, 16, 32, 64)]
        assert all(a <= b for a, b in zip(recalls, recalls[1:]))

    def test_non_decreasing_in_ef_search(self):
        recalls = [hnsw(ef_search=ef).recall for ef in (1, 5, 10, 20, 50, 100, 400)]
        assert all(a <= b for a, b in zip(recalls, recalls[1:]))

    def test_capped(self):
        m = hnsw(M=64, ef_construction=2000, ef_search=1000)
        assert m.recall == HNSW_MAX_RECALL

    def test_truncation_degrades_recall(self):
        full = hnsw(dimensions=3072, mrl_dimensions=3072, M=8, ef_search=20)
        truncated = hnsw(dimensions=3072, mrl_dimensions=768, M=8, ef_search=20)

        assert truncated.recall < full.recall
        assert truncated.mrl_quality == pytest.approx(0.25 ** 0.25)

    def test_low_ef_construction_limits_recall(self):
        assert hnsw(ef_construction=20).recall < hnsw(ef_construction=200).recall


class TestHNSWEdgeCases:
    """Degenerate inputs stay finite; invalid inputs are rejected."""

    @pytest.mark.parametrize("overrides", [
        dict(vector_count=0),
        dict(vector_count=1),
        dict(mrl_dimensions=0),
        dict(dimensions=0, mrl_dimensions=0),
        dict(M=0),
        dict(M=1),
        dict(ef_search=0),
        dict(ef_construction=0),
        dict(vector_count=0, dimensions=0, mrl_dimensions=0, M=0,
             ef_construction=0, ef_search=0),
    ])
    def test_all_outputs_finite(self, overrides):
        m = hnsw(**overrides)
        for name, value in m.to_dict().items():
            assert math.isfinite(value), f"{name} is {value}"

    def test_zero_vectors_zero_storage(self):
        m = hnsw(vector_count=0)
        assert m.vector_storage_bytes == 0
        assert m.total_storage_bytes == 0
        assert m.build_time_seconds == 0

    def test_zero_dimensions_zero_recall(self):
        assert hnsw(mrl_dimensions=0).recall == 0

    @pytest.mark.parametrize("overrides", [
        dict(vector_count=-1),
        dict(M=-4),
        dict(ef_search=float("nan")),
        dict(dimensions=float("inf")),
    ])
    def test_invalid_inputs_rejected(self, overrides):
        with pytest.raises(ValueError):
            hnsw(**overrides)


class TestIVFMetrics:
    """Tests for IVF estimates."""

    def test_reference_scenario(self):
        m = calculate_ivf_metrics(100_000, 768, 100, 10)

        assert m.vector_storage_bytes == 307_200_000
        assert m.centroid_storage_bytes == 307_200
        assert m.inverted_lists_bytes == 800_000
        assert m.total_storage_bytes == 307_200_000 + 307_200 + 800_000

    def test_storage_exact(self):
        m = calculate_ivf_metrics(777, 96, 13, 2)
        assert m.centroid_storage_bytes == 13 * 96 * 4
        assert m.inverted_lists_bytes == 777 * 8

    def test_build_time_formula(self):
        m = calculate_ivf_metrics(1_000_000, 128, 1000, 10)
        assert m.build_time_seconds == pytest.approx(1_000_000 * 1000 * 10 * 128 / 1e9)

    def test_latency_proportional_to_probe_fraction(self):
        a = calculate_ivf_metrics(1_000_000, 768, 100, 10)
        b = calculate_ivf_metrics(1_000_000, 768, 100, 20)
        assert b.query_latency_ms == pytest.approx(2 * a.query_latency_ms)
        assert a.query_latency_ms == pytest.approx(0.1 * 1 * 768 * 0.001)

    def test_recall_non_decreasing_in_nprobe(self):
        recalls = [calculate_ivf_metrics(100_000, 768, 1024, p).recall
                   for p in (0, 1, 2, 8, 32, 128, 1024)]
        assert all(a <= b for a, b in zip(recalls, recalls[1:]))

    def test_recall_capped(self):
        assert calculate_ivf_metrics(100_000, 768, 100, 100).recall == IVF_MAX_RECALL

    def test_zero_nlist_is_finite(self):
        m = calculate_ivf_metrics(1000, 128, 0, 10)
        for name, value in m.to_dict().items():
            assert math.isfinite(value), f"{name} is {value}"
        assert m.recall == 0.0

    def test_invalid_inputs_rejected(self):
        with pytest.raises(ValueError):
            calculate_ivf_metrics(1000, 128, -1, 10)


@pytest.mark.parametrize("M,label", [(2, "Fast"), (16, "Med"), (40, "Slow"), (64, "Slow")])
def test_build_speed_rating(M, label):
    rating = get_build_speed_rating(M)
    assert rating.label == label
    assert rating.percent >= 5
