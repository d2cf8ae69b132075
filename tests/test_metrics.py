import numpy as np
import pandas as pd
import pytest

from statlearn import compute_classification_metrics, compute_regression_metrics, summarize_coefficients
from statlearn.metrics import majority_baseline, misclassification_count


def test_classification_metrics_perfect_scores():
    y = np.array([0, 0, 1, 1])
    metrics = compute_classification_metrics(y, np.array([0.1, 0.2, 0.8, 0.9]))

    assert metrics["accuracy"] == 1.0
    assert metrics["f1"] == 1.0
    assert metrics["roc_auc"] == 1.0
    assert metrics["misclassified"] == 0
    assert metrics["log_loss"] == pytest.approx(-np.mean(np.log([0.9, 0.8, 0.8, 0.9])))
    np.testing.assert_array_equal(metrics["confusion_matrix"], [[2, 0], [0, 2]])


def test_classification_metrics_threshold():
    y = np.array([0, 1, 1])
    metrics = compute_classification_metrics(y, np.array([0.3, 0.4, 0.9]), threshold=0.35)

    np.testing.assert_array_equal(metrics["confusion_matrix"], [[1, 0], [0, 2]])


def test_single_class_roc_is_nan():
    metrics = compute_classification_metrics(np.array([1, 1, 1]), np.array([0.6, 0.7, 0.4]))

    assert np.isnan(metrics["roc_auc"])
    assert metrics["misclassified"] == 1


def test_misclassification_count():
    assert misclassification_count(pd.Series([0, 1, 1, 0]), np.array([0, 0, 1, 1])) == 2


def test_majority_baseline():
    metrics = majority_baseline(pd.Series([1, 1, 1, 0]), pd.Series([1, 0]))

    assert metrics["accuracy"] == 0.5
    np.testing.assert_array_equal(metrics["confusion_matrix"], [[0, 1], [0, 1]])


def test_regression_metrics():
    summary = compute_regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 4.0], coef=np.array([0.0, 1.5, 0.0]))

    assert summary["mse"] == pytest.approx(1.0 / 3.0)
    assert summary["r2"] == pytest.approx(0.5)
    assert summary["n_nonzero"] == 1


def test_summarize_coefficients():
    top = summarize_coefficients(np.array([0.5, -2.0, 3.0, -0.1]), ["a", "b", "c", "d"], top_k=2)

    assert list(top["positive"].index) == ["c", "a"]
    assert list(top["negative"].index) == ["b", "d"]
