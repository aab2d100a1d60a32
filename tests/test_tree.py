import math

import matplotlib.pyplot as plt
import numpy as np
import pytest

from isoml.datasets import ColumnType, Dataset
from isoml.exceptions import SchemaMismatchError, TreeAlreadyGrownError, TreeNotGrownError
from isoml.isolation import Cell, ITree, Isolator, SplitKind, calculate_c_factor, isolation_score


def _walk(node, depth=1):
    """Yield (isolator, depth) pairs for every internal node."""
    if isinstance(node, Isolator):
        yield node, depth
        yield from _walk(node.left, depth + 1)
        yield from _walk(node.right, depth + 1)


@pytest.mark.parametrize("n", [-3, 0, 1])
def test_c_factor_is_zero_for_at_most_one_sample(n):
    assert calculate_c_factor(n) == 0.0


@pytest.mark.parametrize("n", [2, 10, 256, 10_000])
def test_c_factor_matches_closed_form(n):
    expected = 2.0 * (math.log(n - 1) + 0.5772156649) - 2.0 * (n - 1) / n
    assert calculate_c_factor(n) == pytest.approx(expected)


def test_c_factor_is_strictly_increasing():
    values = [calculate_c_factor(n) for n in range(2, 500)]
    assert all(a < b for a, b in zip(values, values[1:]))


def test_score_is_degenerate_without_normalization():
    assert isolation_score(depth=3, n=4, c=0.0) == 1.0


@pytest.mark.parametrize("n", [0, 1, 5])
def test_score_in_unit_interval_and_decreasing_with_depth(n):
    c = calculate_c_factor(256)
    scores = [isolation_score(depth, n, c) for depth in range(1, 20)]

    assert all(0.0 < score <= 1.0 for score in scores)
    assert all(a > b for a, b in zip(scores, scores[1:]))


@pytest.mark.parametrize("kwargs", [{"max_depth": 0}, {"max_leaf_size": 0}])
def test_rejects_bad_configuration(kwargs):
    with pytest.raises(ValueError):
        ITree(**kwargs)


def test_bare_until_grown(blobs):
    tree = ITree(random_state=0)

    assert tree.bare()
    assert tree.root() is None
    assert tree.c is None

    tree.grow(blobs)

    assert not tree.bare()
    assert isinstance(tree.root(), Isolator)
    assert tree.c == pytest.approx(calculate_c_factor(200))


def test_grow_is_single_shot(blobs):
    tree = ITree(random_state=0)
    tree.grow(blobs)

    with pytest.raises(TreeAlreadyGrownError):
        tree.grow(blobs)


def test_grow_rejects_empty_dataset():
    with pytest.raises(ValueError):
        ITree().grow(Dataset([], types=[ColumnType.CONTINUOUS]))


def test_search_on_bare_tree_raises():
    with pytest.raises(TreeNotGrownError):
        ITree().search([1.0, 2.0])


def test_identical_rows_terminate_below_the_root():
    tree = ITree(max_leaf_size=5, random_state=0)
    tree.grow(Dataset([[1, 1]] * 5))

    root = tree.root()

    assert isinstance(root, Isolator)
    assert root.kind is SplitKind.LESS_THAN
    assert root.left == Cell(count=0, score=root.left.score, depth=1)
    assert root.right == Cell(count=5, score=root.right.score, depth=1)


def test_identical_rows_above_leaf_size_do_not_recurse_forever():
    tree = ITree(max_leaf_size=2, random_state=0)
    tree.grow(Dataset([[1.0, 1.0]] * 10))

    assert tree.height() == 1
    assert sorted(leaf.count for leaf in tree.leaves()) == [0, 10]


def test_two_distinct_rows_are_isolated_by_one_split():
    tree = ITree(max_depth=10, max_leaf_size=1, random_state=7)
    tree.grow(Dataset([["a", "x"], ["b", "y"]]))

    root = tree.root()

    assert isinstance(root, Isolator)
    assert root.kind is SplitKind.EQUALITY
    assert isinstance(root.left, Cell) and root.left.count == 1
    assert isinstance(root.right, Cell) and root.right.count == 1
    assert tree.height() == 1


@pytest.mark.parametrize("max_leaf_size", [1, 3, 5])
@pytest.mark.parametrize("max_depth", [3, 6, ITree().max_depth])
def test_every_leaf_respects_termination_condition(blobs, max_leaf_size, max_depth):
    tree = ITree(max_depth=max_depth, max_leaf_size=max_leaf_size, random_state=1)
    tree.grow(blobs)

    leaves = list(tree.leaves())

    assert sum(leaf.count for leaf in leaves) == blobs.num_rows()
    for leaf in leaves:
        assert leaf.count <= max_leaf_size or leaf.depth == max_depth
        assert leaf.depth <= max_depth


def test_max_depth_one_gives_a_single_split(blobs):
    tree = ITree(max_depth=1, random_state=3)
    tree.grow(blobs)

    root = tree.root()

    assert isinstance(root.left, Cell)
    assert isinstance(root.right, Cell)
    assert root.left.count + root.right.count == blobs.num_rows()


def test_leaf_depth_is_one_more_than_parent_split_depth(blobs):
    tree = ITree(max_leaf_size=1, random_state=5)
    tree.grow(blobs)

    for node, depth in _walk(tree.root()):
        for child in (node.left, node.right):
            if isinstance(child, Cell):
                assert child.depth == depth


def test_leaf_scores_use_tree_normalization(blobs):
    tree = ITree(max_leaf_size=4, random_state=2)
    tree.grow(blobs)

    for leaf in tree.leaves():
        assert leaf.score == pytest.approx(isolation_score(leaf.depth, leaf.count, tree.c))
        assert 0.0 < leaf.score <= 1.0


def test_single_sample_tree_scores_degenerate():
    tree = ITree(random_state=0)
    tree.grow(Dataset([[3.0, 4.0]]))

    assert tree.c == 0.0
    assert all(leaf.score == 1.0 for leaf in tree.leaves())
    assert tree.search([3.0, 4.0]).count == 1


def test_search_always_reaches_a_leaf(blobs, rng):
    tree = ITree(max_leaf_size=2, random_state=4)
    tree.grow(blobs)

    for sample in rng.normal(scale=3.0, size=(50, 2)):
        assert isinstance(tree.search(sample), Cell)


def test_training_rows_land_in_a_populated_leaf(blobs):
    tree = ITree(max_leaf_size=3, random_state=9)
    tree.grow(blobs)

    for sample in blobs:
        assert tree.search(sample).count >= 1


def test_growth_is_deterministic_for_a_seed(blobs):
    first = ITree(max_leaf_size=2, random_state=123)
    second = ITree(max_leaf_size=2, random_state=123)

    first.grow(blobs)
    second.grow(blobs)

    assert first.root() == second.root()
    for sample in blobs:
        assert first.search(sample) == second.search(sample)


def test_nodes_keep_no_training_data(mixed):
    tree = ITree(max_leaf_size=1, random_state=0)
    tree.grow(mixed)

    for node, _ in _walk(tree.root()):
        assert not any(isinstance(value, Dataset) for value in vars(node).values())


def test_split_kind_follows_column_type(mixed):
    tree = ITree(max_leaf_size=1, random_state=11)
    tree.grow(mixed)

    for node, _ in _walk(tree.root()):
        if node.index == 0:
            assert node.kind is SplitKind.EQUALITY
            assert isinstance(node.value, str)
        else:
            assert node.kind is SplitKind.LESS_THAN

    for sample in mixed:
        assert tree.search(sample).count >= 1


def test_isolator_predicates():
    equality = Isolator(0, "red", SplitKind.EQUALITY, Cell(1, 0.5, 1), Cell(2, 0.4, 1))
    less_than = Isolator(1, 2.5, SplitKind.LESS_THAN, Cell(1, 0.5, 1), Cell(2, 0.4, 1))

    assert equality.goes_left("red")
    assert not equality.goes_left("blue")
    assert less_than.goes_left(1.0)
    assert not less_than.goes_left(2.5)
    assert less_than.child(3.0) is less_than.right


@pytest.mark.parametrize(
    "sample",
    [
        ["red"],
        ["red", 1.0, 2.0],
        [1.0, 1.0],
        ["red", "x"],
        ["red", None],
    ],
)
def test_search_rejects_mismatched_samples(mixed, sample):
    tree = ITree(random_state=0)
    tree.grow(mixed)

    with pytest.raises(SchemaMismatchError):
        tree.search(sample)


def test_search_stops_on_missing_child():
    tree = ITree()
    tree._root = Isolator(0, 1.0, SplitKind.LESS_THAN, None, Cell(3, 0.5, 1))
    tree._types = [ColumnType.CONTINUOUS]
    tree._c = calculate_c_factor(3)

    assert tree.search([0.0]) is None
    assert tree.search([2.0]).count == 3


def test_height_of_bare_tree_is_zero():
    assert ITree().height() == 0
    assert list(ITree().leaves()) == []


def test_plot_partition_space(blobs):
    tree = ITree(max_leaf_size=10, random_state=0)
    tree.grow(blobs)

    plt.close("all")
    axes = tree.plot_partition_space_2D(blobs, show=False)

    assert axes.get_title() == "Space Partition Isolation Tree"
    # 4 border lines plus one line per split
    assert len(axes.lines) == 4 + len(list(_walk(tree.root())))

    plt.close("all")


def test_plot_requires_two_continuous_columns(mixed):
    tree = ITree(random_state=0)
    tree.grow(mixed)

    with pytest.raises(ValueError):
        tree.plot_partition_space_2D(mixed, show=False)


def test_samples_from_numpy_rows_are_accepted(blobs):
    tree = ITree(random_state=0)
    tree.grow(blobs)

    sample = np.array([0.1, -0.2])
    assert isinstance(tree.search(sample), Cell)


@pytest.mark.parametrize("seed", range(20))
def test_duplicates_reach_max_depth_when_it_is_finite(seed):
    tree = ITree(max_depth=4, max_leaf_size=2, random_state=seed)
    tree.grow(Dataset([[1.0, 1.0]] * 6 + [[5.0, 5.0]]))

    crowded = [leaf for leaf in tree.leaves() if leaf.count > 2]

    assert crowded
    for leaf in crowded:
        assert leaf.depth == 4
        assert leaf.score == pytest.approx(isolation_score(4, leaf.count, tree.c))
