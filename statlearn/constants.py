"""
Shared names and default knobs for the Iris / lasso experiments.
"""

IRIS_CLASSES = ("setosa", "versicolor", "virginica")
IRIS_FEATURES = (
    "sepal length (cm)",
    "sepal width (cm)",
    "petal length (cm)",
    "petal width (cm)",
)

DEFAULT_CLASSES = ("setosa", "versicolor")
DEFAULT_FEATURES = ("sepal length (cm)", "sepal width (cm)")

REGRESSION_DATASETS = ("diabetes", "sparse")

# Optimizer defaults shared by main.py and docs/generate_plots.py
GD_LEARNING_RATE = 0.1
GD_MAX_ITER = 5000
IRLS_MAX_ITER = 50
TOLERANCE = 1e-6
IRLS_RIDGE = 1e-8
LASSO_ALPHA = 1.0
LASSO_N_ALPHAS = 50

# Short CLI spellings for the Iris columns
FEATURE_ALIASES = {
    "sepal_length": "sepal length (cm)",
    "sepal_width": "sepal width (cm)",
    "petal_length": "petal length (cm)",
    "petal_width": "petal width (cm)",
}
