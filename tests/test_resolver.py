from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from tokensync.loader import normalize
from tokensync.models import get_node
from tokensync.resolver import ReferenceResolver, ResolutionCache, is_reference, resolve_tree


def test_alias_resolves_to_target_value() -> None:
    tree = normalize(
        {
            "colors": {"black": "#000"},
            "borderRadius": {"md": "0.5rem", "lg": "{borderRadius.md}"},
        }
    )

    resolved = resolve_tree(tree)

    assert get_node(resolved, "borderRadius.lg").value == "0.5rem"
    assert get_node(tree, "borderRadius.lg").value == "{borderRadius.md}"


def test_unresolvable_reference_is_kept_with_one_warning() -> None:
    tree = normalize({"colors": {"ghost": "{nonexistent.path}"}})
    resolver = ReferenceResolver(tree)

    resolved = resolver.resolve_tree()

    assert get_node(resolved, "colors.ghost").value == "{nonexistent.path}"
    assert resolver.warnings == ["Token reference not found: {nonexistent.path}"]


def test_references_inside_composite_values() -> None:
    tree = normalize(
        {
            "colors": {"shadow": "rgba(0,0,0,0.2)"},
            "spacing": {"1": "4px"},
            "shadows": {"sm": "0 {spacing.1} 8px {colors.shadow}"},
        }
    )

    resolved = resolve_tree(tree)

    assert get_node(resolved, "shadows.sm").value == "0 4px 8px rgba(0,0,0,0.2)"


def test_short_reference_searches_categories() -> None:
    tree = normalize({"colors": {"blue": "#00f", "link": "{blue}"}})

    assert get_node(resolve_tree(tree), "colors.link").value == "#00f"


def test_token_set_prefix_is_ignored_in_lookup() -> None:
    tree = normalize(
        {
            "core": {"colors": {"blue": {"$value": "#00f"}}},
            "semantic": {"colors": {"accent": {"$value": "{core.colors.blue}"}}},
        }
    )

    assert get_node(resolve_tree(tree), "colors.accent").value == "#00f"


def test_circular_reference_is_reported() -> None:
    tree = normalize({"colors": {"a": "{colors.b}", "b": "{colors.a}"}})
    resolver = ReferenceResolver(tree)

    resolved = resolver.resolve_tree()

    assert "{" in get_node(resolved, "colors.a").value
    assert resolver.warnings
    assert all(warning.startswith("Circular token reference: ") for warning in resolver.warnings)
    assert "colors.a -> colors.b -> colors.a" in resolver.warnings[0]


def test_long_chain_stops_at_depth_limit() -> None:
    chain = {f"t{index}": f"{{chain.t{index + 1}}}" for index in range(15)}
    chain["t15"] = "1px"
    tree = normalize({"colors": {"black": "#000"}, "chain": chain})
    resolver = ReferenceResolver(tree, max_depth=10)

    value = resolver.resolve("{chain.t0}")

    assert value.startswith("{chain.t")
    assert any("Reference depth limit (10) exceeded" in warning for warning in resolver.warnings)


def test_resolution_is_idempotent() -> None:
    tree = normalize(
        {
            "colors": {"blue": "#00f", "primary": "{colors.blue}", "missing": "{colors.nope}"},
            "spacing": {"4": "1rem"},
        }
    )

    once = resolve_tree(tree)
    twice = resolve_tree(once)

    assert twice == once


def test_cache_is_dropped_when_fingerprint_changes() -> None:
    cache = ResolutionCache()
    first = normalize({"colors": {"blue": "#00f", "primary": "{colors.blue}"}})
    second = normalize({"colors": {"blue": "#0000ee", "primary": "{colors.blue}"}})

    assert get_node(ReferenceResolver(first, cache=cache).resolve_tree(), "colors.primary").value == "#00f"
    assert len(cache) == 1

    resolved = ReferenceResolver(second, cache=cache).resolve_tree()

    assert get_node(resolved, "colors.primary").value == "#0000ee"


def test_cache_hits_on_repeat_resolution() -> None:
    cache = ResolutionCache()
    tree = normalize({"colors": {"blue": "#00f", "primary": "{colors.blue}"}})

    ReferenceResolver(tree, cache=cache, fingerprint="abc").resolve_tree()
    ReferenceResolver(tree, cache=cache, fingerprint="abc").resolve_tree()

    assert cache.hits == 1
    cache.invalidate()
    assert len(cache) == 0


def test_is_reference_requires_whole_value() -> None:
    assert is_reference("{colors.blue}")
    assert not is_reference("0 {spacing.1} 2px")
    assert not is_reference("#00f")


def test_shared_cache_keeps_documents_apart() -> None:
    cache = ResolutionCache()
    first_tree = normalize({"colors": {"base": "#111111", "brand": "{colors.base}"}})
    second_tree = normalize({"colors": {"base": "#222222", "brand": "{colors.base}"}})

    first = ReferenceResolver(first_tree, cache=cache, fingerprint="project-a")
    second = ReferenceResolver(second_tree, cache=cache, fingerprint="project-b")
    first_resolved = first.resolve_tree()
    second_resolved = second.resolve_tree()

    assert get_node(first_resolved, "colors.brand").value == "#111111"
    assert get_node(second_resolved, "colors.brand").value == "#222222"
    assert "project-a" in cache and "project-b" in cache


def test_shared_cache_under_concurrent_resolution() -> None:
    cache = ResolutionCache()
    trees = {
        f"doc-{index}": normalize(
            {"colors": {"base": f"#{index:06x}", "brand": "{colors.base}", "accent": "{colors.brand}"}}
        )
        for index in range(8)
    }

    def _resolve(fingerprint: str) -> str:
        resolved = ReferenceResolver(trees[fingerprint], cache=cache, fingerprint=fingerprint).resolve_tree()
        return get_node(resolved, "colors.accent").value

    names = list(trees) * 5
    with ThreadPoolExecutor(max_workers=4) as pool:
        values = list(pool.map(_resolve, names))

    expected = {name: f"#{index:06x}" for index, name in enumerate(trees)}
    assert values == [expected[name] for name in names]


def test_cache_retains_only_recent_documents() -> None:
    cache = ResolutionCache(max_documents=2)
    tree = normalize({"colors": {"blue": "#00f", "primary": "{colors.blue}"}})

    for fingerprint in ("one", "two", "three"):
        ReferenceResolver(tree, cache=cache, fingerprint=fingerprint).resolve_tree()

    assert "one" not in cache
    assert len(cache) == 2
    cache.invalidate("two")
    assert len(cache) == 1
