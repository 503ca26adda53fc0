"""Tests for greedy displacement clustering."""

from clonedetect.cluster import Cluster, cluster_clone_pairs
from clonedetect.pairs import ClonePair


def make_pair(dx: int, dy: int, x: int = 0, y: int = 0) -> ClonePair:
    return ClonePair(source=(x, y), dest=(x + dx, y + dy))


def test_pairs_with_same_displacement_form_one_cluster():
    pairs = [make_pair(40, 40, x=i * 4) for i in range(5)]
    clusters = cluster_clone_pairs(pairs, min_cluster_size=3)
    assert len(clusters) == 1
    assert clusters[0].size == 5
    assert clusters[0].pairs == pairs


def test_tolerance_is_per_axis_not_euclidean():
    seed = make_pair(10, 10)
    diagonal = make_pair(15, 15, x=4)      # Euclidean 7.07 from the seed, per-axis 5
    off_axis = make_pair(16, 10, x=8)
    clusters = cluster_clone_pairs([seed, diagonal, off_axis], min_cluster_size=1,
                                   direction_tolerance=5.0)
    assert [c.pairs for c in clusters] == [[seed, diagonal], [off_axis]]


def test_members_are_compared_with_seed_not_each_other():
    a, b, c = make_pair(0, 30), make_pair(4, 30, x=4), make_pair(8, 30, x=8)
    clusters = cluster_clone_pairs([a, b, c], min_cluster_size=1, direction_tolerance=5.0)
    assert [cl.pairs for cl in clusters] == [[a, b], [c]]


def test_seed_choice_follows_input_order():
    a, b, c = make_pair(0, 30), make_pair(4, 30, x=4), make_pair(8, 30, x=8)
    clusters = cluster_clone_pairs([b, a, c], min_cluster_size=1, direction_tolerance=5.0)
    assert len(clusters) == 1
    assert clusters[0].seed == b
    assert clusters[0].pairs == [b, a, c]


def test_small_clusters_are_dropped_and_their_pairs_stay_consumed():
    a, b, c = make_pair(0, 30), make_pair(8, 30, x=4), make_pair(4, 30, x=8)
    clusters = cluster_clone_pairs([a, b, c], min_cluster_size=2, direction_tolerance=5.0)
    assert len(clusters) == 1
    assert clusters[0].pairs == [a, c]


def test_every_cluster_is_coherent_and_large_enough():
    pairs = [make_pair(dx, dy, x=i) for i, (dx, dy) in enumerate(
        [(30, 0), (31, 2), (60, 60), (29, -3), (62, 58), (0, 90), (61, 61), (35, 0)]
    )]
    tol = 3.0
    clusters = cluster_clone_pairs(pairs, min_cluster_size=2, direction_tolerance=tol)
    assert clusters
    for cluster in clusters:
        assert cluster.size >= 2
        rdx, rdy = cluster.reference_displacement
        for pair in cluster:
            dx, dy = pair.displacement
            assert abs(dx - rdx) <= tol and abs(dy - rdy) <= tol


def test_each_pair_belongs_to_at_most_one_cluster():
    pairs = [make_pair(20 + (i % 3), 20, x=i) for i in range(12)]
    clusters = cluster_clone_pairs(pairs, min_cluster_size=1, direction_tolerance=1.0)
    members = [p for c in clusters for p in c]
    assert len(members) == len(set(members)) == len(pairs)


def test_empty_input():
    assert cluster_clone_pairs([], min_cluster_size=1) == []


def test_cluster_bboxes_cover_member_blocks():
    cluster = Cluster(pairs=[
        ClonePair(source=(0, 0), dest=(40, 40)),
        ClonePair(source=(4, 8), dest=(44, 48)),
    ])
    assert cluster.source_bbox(16) == (0, 0, 20, 24)
    assert cluster.dest_bbox(16) == (40, 40, 20, 24)
    d = cluster.to_dict(16)
    assert d["size"] == 2
    assert d["displacement"] == [40, 40]
    assert d["dest_bbox"] == [40, 40, 20, 24]
