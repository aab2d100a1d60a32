"""Quick demo of the isolation tree and forest on synthetic data."""

import numpy as np

from isoml.datasets import Dataset, Labeled
from isoml.isolation import IsolationForest, ITree
from isoml.reports import ClassificationReport
from isoml.utils import setup_logging


def generate_test_data(n_samples=1000, n_features=2, random_state=42):
    """Generate synthetic test data with anomalies."""
    rng = np.random.default_rng(random_state)

    # Normal samples
    normal = rng.normal(size=(int(n_samples * 0.9), n_features))

    # Anomalies (outliers)
    anomalies = rng.normal(size=(int(n_samples * 0.1), n_features)) * 3 + 5

    X = np.vstack([normal, anomalies])
    y = np.array([0] * len(normal) + [1] * len(anomalies))

    indices = rng.permutation(len(X))
    return Labeled(X[indices], y[indices])


def main():
    setup_logging("INFO")

    train = generate_test_data(n_samples=1000, random_state=42)
    test = generate_test_data(n_samples=200, random_state=43)

    print("Growing a single tree...")
    tree = ITree(max_leaf_size=5, random_state=0)
    tree.grow(train.unlabel())
    print(f"  Height: {tree.height()}")
    print(f"  Leaves: {len(list(tree.leaves()))}")
    print(f"  Leaf of first test sample: {tree.search(test.row(0))}")

    print("\nFitting IsolationForest...")
    forest = IsolationForest(ensemble_size=50, contamination=0.1, random_state=12345)
    forest.fit(train)
    predictions = forest.predict(test)

    report = ClassificationReport().generate(predictions.tolist(), test.labels().tolist())
    print(f"  F1 (anomaly class): {report['label'][1]['f1_score']:.3f}")
    print(f"  Average accuracy:   {report['overall']['average']['accuracy']:.3f}")

    tree.plot_partition_space_2D(Dataset(train.samples))


if __name__ == "__main__":
    main()
