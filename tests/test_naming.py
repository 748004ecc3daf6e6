"""Tests for collision-free node display names."""

import random

import pytest

from code_clarity.depgraph import build_node_names


def test_unique_base_names_are_kept():
    names = build_node_names(["/repo/a/main.py", "/repo/b/util.py"])
    assert names == {"/repo/a/main.py": "main.py", "/repo/b/util.py": "util.py"}


def test_colliding_base_names_get_suffixes():
    paths = [
        "/repo/test/res.send.js",
        "/repo/test/support/utils.js",
        "/repo/lib/utils.js",
    ]
    names = build_node_names(paths)
    assert names["/repo/test/res.send.js"] == "res.send.js"
    assert names["/repo/test/support/utils.js"] == "support/utils.js"
    assert names["/repo/lib/utils.js"] == "lib/utils.js"


def test_group_shares_the_deepest_needed_depth():
    paths = [
        "/repo/a/x/index.ts",
        "/repo/b/x/index.ts",
        "/repo/c/y/index.ts",
    ]
    names = build_node_names(paths)
    assert names == {
        "/repo/a/x/index.ts": "a/x/index.ts",
        "/repo/b/x/index.ts": "b/x/index.ts",
        "/repo/c/y/index.ts": "c/y/index.ts",
    }


def test_depth_is_chosen_per_group():
    paths = ["/r/a/x/mod.rs", "/r/b/x/mod.rs", "/r/p/lib.rs", "/r/q/lib.rs"]
    names = build_node_names(paths)
    assert names["/r/p/lib.rs"] == "p/lib.rs"
    assert names["/r/a/x/mod.rs"] == "a/x/mod.rs"


def test_duplicate_inputs_terminate():
    names = build_node_names(["/r/a/x.py", "/r/a/x.py"])
    assert names == {"/r/a/x.py": "x.py"}


def test_names_are_pairwise_distinct():
    paths = [
        "/r/src/a/util.py", "/r/src/b/util.py", "/r/lib/a/util.py",
        "/r/util.py", "/r/src/main.py", "/r/tests/main.py",
    ]
    names = build_node_names(paths)
    assert len(set(names.values())) == len(paths)


@pytest.mark.parametrize("seed", range(25))
def test_random_colliding_paths_get_distinct_suffix_names(seed):
    rng = random.Random(seed)
    dirs = ["src", "lib", "a", "b", "x", "tests"]
    bases = ["util.py", "index.ts", "mod.rs", "main.go"]
    paths = set()
    while len(paths) < 15:
        parts = [rng.choice(dirs) for _ in range(rng.randint(0, 4))]
        paths.add("/repo/" + "/".join(parts + [rng.choice(bases)]))
    paths = sorted(paths)
    rng.shuffle(paths)

    names = build_node_names(paths)

    assert set(names) == set(paths)
    assert len(set(names.values())) == len(paths)
    for path, name in names.items():
        assert path.endswith("/" + name)
