import pytest

import main


def _run(argv, capsys):
    args = main.build_arg_parser().parse_args(argv)
    main.main(args)
    return capsys.readouterr().out


@pytest.mark.filterwarnings("ignore::sklearn.exceptions.ConvergenceWarning")
def test_compare_experiment_reports_both_solvers(capsys, tmp_path):
    out = _run(["--experiment", "compare", "--plot-dir", str(tmp_path)], capsys)

    assert "Iris subset setosa vs versicolor: 100 samples" in out
    assert "[GD] Acc" in out
    assert "[IRLS] Acc" in out
    assert "[sklearn LogisticRegression] Acc" in out
    for name in ("decision_boundary.png", "loss_history.png", "roc.png"):
        assert (tmp_path / name).exists()


def test_irls_experiment_on_overlapping_classes(capsys):
    out = _run(
        ["--experiment", "irls", "--classes", "versicolor", "virginica", "--features", "sepal_length,sepal_width"],
        capsys,
    )

    assert "Positive class: virginica" in out
    assert "IRLS: " in out and "(converged)" in out
    assert "[GD]" not in out


@pytest.mark.filterwarnings("ignore::sklearn.exceptions.ConvergenceWarning")
def test_gd_experiment_on_a_small_subset(capsys):
    out = _run(["--experiment", "gd", "--n-per-class", "10", "--l2", "0.01"], capsys)

    assert "20 samples" in out
    assert "[GD] Acc" in out
    assert "[IRLS]" not in out


def test_lasso_experiment(capsys, tmp_path):
    out = _run(
        [
            "--experiment",
            "lasso",
            "--dataset",
            "sparse",
            "--alpha",
            "0.5",
            "--n-alphas",
            "15",
            "--bound",
            "20",
            "--plot-dir",
            str(tmp_path),
        ],
        capsys,
    )

    assert "Regression dataset 'sparse': 100 samples, 10 features" in out
    assert "[Lasso alpha=0.5]" in out
    assert "[sklearn Lasso alpha=0.5]" in out
    assert "Lasso path: 15 alphas" in out
    assert "Bound t=20.0" in out
    assert (tmp_path / "lasso_path.png").exists()
    assert (tmp_path / "lasso_path_alpha.png").exists()


def test_unknown_feature_alias_is_rejected():
    with pytest.raises(SystemExit):
        main.build_arg_parser().parse_args(["--features", "stem_length"])
