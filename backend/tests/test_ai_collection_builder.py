import json

import pytest
from core.ai_collection_builder import build_ai_collection, effective_skip_set
from core.dbml_parser import parse_dbml
from models.analysis import AnalysisResult

PROJECT = "proj-1234-5678"
BASE = "https://api.admin.u-code.io"


def _build(schema, analysis, selection=None):
    return build_ai_collection(schema, analysis, PROJECT, "env-1", "key", BASE, selection=selection).to_dict()


def _table_placements(data) -> dict[str, list[str]]:
    """table name -> top-level folders its CRUD folder/requests appear under."""
    placements: dict[str, list[str]] = {}
    for top in data["item"]:
        for child in top["item"]:
            if "item" in child:                      # table sub-folder
                table = child["name"].split(" ", 1)[1]
                placements.setdefault(table, []).append(top["name"])
            elif child["name"].startswith("List ") and "(with relations)" not in child["name"]:
                placements.setdefault(child["name"][5:], []).append(top["name"])
    return placements


@pytest.fixture
def shop_schema(shop_dbml):
    return parse_dbml(shop_dbml)


def test_structure(shop_schema, shop_analysis):
    data = _build(shop_schema, shop_analysis)
    assert [f["name"] for f in data["item"]] == [
        "🔐 Client Auth (users)",
        "📁 Files",
        "🛍️ Catalog",
        "💰 Sales",
        "📦 Other Tables",
    ]
    catalog = data["item"][2]
    assert [f["name"] for f in catalog["item"]] == ["⭐ products"]
    assert len(catalog["item"][0]["item"]) == 9
    assert data["info"]["name"].endswith("- AI Organized")
    assert "A small online shop." in data["info"]["description"]


def test_auth_folder_contents(shop_schema, shop_analysis):
    auth = _build(shop_schema, shop_analysis)["item"][0]
    names = [i["name"] for i in auth["item"]]
    assert names[:5] == [
        "Register (client)", "Login (client)", "Login with Options (client)",
        "Send OTP (client)", "Reset Password (client)",
    ]
    assert len(names) == 5 + 9
    login = json.loads(auth["item"][1]["request"]["body"]["raw"])
    assert login == {"login": "", "password": "", "project_id": PROJECT}
    register = json.loads(auth["item"][0]["request"]["body"]["raw"])
    assert register == {"login": "", "password": ""}


def test_skipped_table_absent_and_orphan_collected(shop_schema, shop_analysis):
    placements = _table_placements(_build(shop_schema, shop_analysis))
    assert "order_products" not in placements
    assert placements["audit_log"] == ["📦 Other Tables"]


def test_partition_every_table_placed_once(shop_schema, shop_analysis):
    placements = _table_placements(_build(shop_schema, shop_analysis))
    expected = set(shop_schema.table_names()) - set(shop_analysis.skip_tables)
    assert set(placements) == expected
    assert all(len(where) == 1 for where in placements.values())


def test_auth_wins_over_domain(shop_schema, shop_analysis):
    analysis = shop_analysis.model_copy(deep=True)
    analysis.domains[0].tables.append(analysis.domains[1].tables[0].model_copy(update={"name": "users"}))
    placements = _table_placements(_build(shop_schema, analysis))
    assert placements["users"] == ["🔐 Client Auth (users)"]


def test_duplicated_domain_coverage_is_emitted_once(shop_schema, shop_analysis):
    analysis = shop_analysis.model_copy(deep=True)
    analysis.domains[1].tables.append(analysis.domains[0].tables[0])    # products in both
    placements = _table_placements(_build(shop_schema, analysis))
    assert placements["products"] == ["🛍️ Catalog"]


def test_duplicated_auth_spec_is_emitted_once(shop_schema, shop_analysis):
    analysis = shop_analysis.model_copy(deep=True)
    analysis.auth_tables.append(analysis.auth_tables[0].model_copy(update={"auth_type": "admin"}))
    names = [f["name"] for f in _build(shop_schema, analysis)["item"]]
    assert names.count("🔐 Client Auth (users)") == 1
    assert "🔐 Admin Auth (users)" not in names


def test_empty_analysis_puts_everything_in_other_tables(shop_schema):
    data = _build(shop_schema, AnalysisResult())
    assert [f["name"] for f in data["item"]] == ["📁 Files", "📦 Other Tables"]
    assert [f["name"] for f in data["item"][1]["item"]] == [f"📋 {n}" for n in shop_schema.table_names()]


def test_domain_tables_missing_from_schema_are_ignored(shop_schema):
    analysis = AnalysisResult.model_validate({
        "domains": [{"name": "Ghosts", "icon": "👻", "tables": [{"name": "nope"}]}],
    })
    names = [f["name"] for f in _build(shop_schema, analysis)["item"]]
    assert "👻 Ghosts" not in names


def test_empty_domain_is_suppressed(shop_schema, shop_analysis):
    data = _build(shop_schema, shop_analysis, selection={"users", "orders"})
    names = [f["name"] for f in data["item"]]
    assert "🛍️ Catalog" not in names
    assert "💰 Sales" in names
    assert "📦 Other Tables" not in names


def test_selection_overrides_skip_list(shop_schema, shop_analysis):
    selection = set(shop_schema.table_names())          # re-select order_products
    placements = _table_placements(_build(shop_schema, shop_analysis, selection))
    assert placements["order_products"] == ["💰 Sales"]
    assert set(placements) == selection


def test_reselected_skip_table_without_domain_becomes_orphan(shop_schema):
    analysis = AnalysisResult(skip_tables=["audit_log"])
    placements = _table_placements(_build(shop_schema, analysis, set(shop_schema.table_names())))
    assert placements["audit_log"] == ["📦 Other Tables"]


def test_empty_selection_emits_no_tables(shop_schema, shop_analysis):
    data = _build(shop_schema, shop_analysis, selection=set())
    assert [f["name"] for f in data["item"]] == ["📁 Files"]


def test_deselected_auth_table_is_dropped(shop_schema, shop_analysis):
    selection = set(shop_schema.table_names()) - {"users"}
    data = _build(shop_schema, shop_analysis, selection)
    placements = _table_placements(data)
    assert "users" not in placements
    assert not any(f["name"].startswith("🔐") for f in data["item"])


def test_auth_table_kept_without_selection_even_if_skipped(shop_schema, shop_analysis):
    analysis = shop_analysis.model_copy(update={"skip_tables": ["users"]})
    names = [f["name"] for f in _build(shop_schema, analysis)["item"]]
    assert names[0] == "🔐 Client Auth (users)"


def test_auth_spec_without_schema_table_has_no_crud(shop_schema):
    analysis = AnalysisResult.model_validate({"auth_tables": [{"table_name": "admins", "auth_type": "admin"}]})
    auth = _build(shop_schema, analysis)["item"][0]
    assert auth["name"] == "🔐 Admin Auth (admins)"
    assert len(auth["item"]) == 5
    login = json.loads(auth["item"][1]["request"]["body"]["raw"])
    assert login == {"login": "", "password": "", "project_id": PROJECT}


def test_effective_skip_set(shop_schema, shop_analysis):
    assert effective_skip_set(shop_schema, shop_analysis, None) == {"order_products"}
    assert effective_skip_set(shop_schema, shop_analysis, {"users"}) == {
        "products", "orders", "order_products", "audit_log",
    }


def test_inputs_not_mutated(shop_schema, shop_analysis):
    before = (shop_schema.model_dump(), shop_analysis.model_dump())
    _build(shop_schema, shop_analysis, {"users"})
    assert (shop_schema.model_dump(), shop_analysis.model_dump()) == before
