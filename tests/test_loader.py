from __future__ import annotations

import json
from pathlib import Path

import pytest

from tokensync.loader import TokenStructureError, detect_shape, load_tokens, normalize
from tokensync.models import TokenDescriptor, get_node


def test_flat_document_normalizes_scalars_and_leaves() -> None:
    tree = normalize(
        {
            "colors": {"primary": {"500": {"value": "#3b82f6", "type": "color"}}, "white": "#fff"},
            "opacity": {"50": 0.5, "100": 1.0},
        }
    )

    assert tree["colors"]["primary"]["500"] == TokenDescriptor(value="#3b82f6", type="color")
    assert tree["colors"]["white"].value == "#fff"
    assert tree["opacity"]["50"].value == "0.5"
    assert tree["opacity"]["100"].value == "1"


def test_token_studio_sets_are_merged() -> None:
    document = {
        "core": {"colors": {"blue": {"$value": "#3b82f6", "$type": "color"}}},
        "semantic": {"colors": {"primary": {"$value": "{colors.blue}", "$type": "color"}}},
        "$themes": [],
    }

    assert detect_shape(document) == "token-studio"
    tree = normalize(document)

    assert tree["colors"]["blue"].value == "#3b82f6"
    assert tree["colors"]["primary"].value == "{colors.blue}"


def test_duplicate_paths_across_sets_are_reported() -> None:
    document = {
        "core": {"colors": {"blue": {"$value": "#00f"}}},
        "semantic": {"colors": {"blue": {"$value": "#00e"}}},
    }

    with pytest.raises(TokenStructureError) as excinfo:
        normalize(document)

    assert "Duplicate token path 'colors.blue' defined in 'core' and 'semantic'" in excinfo.value.messages


def test_all_structural_problems_are_collected() -> None:
    document = {
        "spacing": {"4": {"type": "spacing"}, "8": {"value": {"a": 1}}},
        "radius": "4px",
    }

    with pytest.raises(TokenStructureError) as excinfo:
        normalize(document)

    messages = excinfo.value.messages
    assert "Token 'spacing.4' is missing a value" in messages
    assert "Token 'spacing.8' has an unsupported composite value" in messages
    assert "Token category 'radius' must be an object" in messages
    assert "Missing required token category: colors" in messages


def test_shadow_objects_are_flattened_to_css() -> None:
    tree = normalize(
        {
            "colors": {"black": "#000"},
            "shadows": {"md": {"value": {"x": 0, "y": 4, "blur": 6, "spread": -1, "color": "rgba(0,0,0,0.1)"}}},
        }
    )

    assert get_node(tree, "shadows.md").value == "0 4px 6px -1px rgba(0,0,0,0.1)"


def test_load_tokens_reports_hash_and_source(tmp_path: Path) -> None:
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({"colors": {"black": "#000"}}), encoding="utf-8")

    loaded = load_tokens(path)

    assert loaded.shape == "flat"
    assert loaded.source == path
    assert len(loaded.content_hash) == 64


def test_load_tokens_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_tokens(tmp_path / "absent.json")


def test_malformed_json_is_structural_error(tmp_path: Path) -> None:
    path = tmp_path / "tokens.json"
    path.write_text('{"colors": ', encoding="utf-8")

    with pytest.raises(TokenStructureError) as excinfo:
        load_tokens(path)

    assert "Malformed JSON" in excinfo.value.messages[0]


def test_duplicate_json_keys_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tokens.json"
    path.write_text('{"colors": {"a": "#000", "a": "#fff"}}', encoding="utf-8")

    with pytest.raises(TokenStructureError):
        load_tokens(path)
