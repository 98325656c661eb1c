import copy
from pathlib import Path

from spec_shaver.parser.base import DEFAULT_CORE_ENTITIES
from spec_shaver.parser.swagger import load_document
from spec_shaver.reducer.assembler import build_reduced_document
from spec_shaver.reducer.priority import prioritize_operations, select_endpoints, select_operations

FIXTURES = Path(__file__).parent / "fixtures"


def _top(doc: dict, n: int):
    return select_operations(prioritize_operations(doc, DEFAULT_CORE_ENTITIES), n)


class TestBuildReducedDocument:
    def test_copies_metadata(self):
        doc = load_document(FIXTURES / "crm.json")
        reduced = build_reduced_document(doc, _top(doc, 1))
        assert reduced["openapi"] == "3.0.3"
        assert reduced["info"] is doc["info"]
        assert reduced["servers"] is doc["servers"]
        assert reduced["security"] is doc["security"]
        assert reduced["tags"] is doc["tags"]

    def test_missing_metadata_not_added(self):
        doc = {"openapi": "3.0.3", "info": {"title": "t", "version": "1"}, "paths": {}}
        reduced = build_reduced_document(doc, [])
        assert "servers" not in reduced
        assert "security" not in reduced
        assert "tags" not in reduced
        assert reduced["paths"] == {}
        assert reduced["components"] == {"schemas": {}}

    def test_paths_hold_selected_operations(self):
        doc = load_document(FIXTURES / "crm.json")
        reduced = build_reduced_document(doc, _top(doc, 3))
        assert list(reduced["paths"]) == ["/users", "/accounts"]
        assert set(reduced["paths"]["/users"]) == {"get", "post"}
        assert reduced["paths"]["/users"]["get"] == doc["paths"]["/users"]["get"]

    def test_schemas_pruned_to_closure(self):
        doc = load_document(FIXTURES / "crm.json")
        reduced = build_reduced_document(doc, _top(doc, 3))
        # Error comes in through the copied NotFound response
        assert list(reduced["components"]["schemas"]) == ["User", "Address", "Account", "Owner", "Error"]

    def test_other_component_sections_copied_whole(self):
        doc = load_document(FIXTURES / "crm.json")
        reduced = build_reduced_document(doc, _top(doc, 1))
        components = reduced["components"]
        assert components["securitySchemes"] is doc["components"]["securitySchemes"]
        assert components["parameters"] is doc["components"]["parameters"]
        assert components["responses"] is doc["components"]["responses"]

    def test_path_level_parameters_travel_with_operations(self):
        doc = load_document(FIXTURES / "crm.json")
        reduced = build_reduced_document(doc, select_endpoints(doc, ["GET:/users/{userId}"]))
        path_item = reduced["paths"]["/users/{userId}"]
        assert path_item["parameters"] == doc["paths"]["/users/{userId}"]["parameters"]
        assert "delete" not in path_item

    def test_input_not_mutated(self):
        doc = load_document(FIXTURES / "crm.json")
        snapshot = copy.deepcopy(doc)
        build_reduced_document(doc, _top(doc, 5))
        assert doc == snapshot

    def test_dangling_ref_left_in_place(self):
        doc = {
            "openapi": "3.0.3",
            "info": {"title": "t", "version": "1"},
            "paths": {"/a": {"get": {"responses": {"200": {"$ref": "#/components/schemas/Ghost"}}}}},
            "components": {"schemas": {}},
        }
        reduced = build_reduced_document(doc, select_endpoints(doc, ["/a"]))
        assert reduced["components"]["schemas"] == {}
        assert reduced["paths"]["/a"]["get"]["responses"]["200"] == {"$ref": "#/components/schemas/Ghost"}

    def test_upper_case_method_normalized(self):
        doc = {"openapi": "3.0.3", "info": {"title": "t", "version": "1"}, "paths": {"/a": {"GET": {"responses": {}}}}}
        reduced = build_reduced_document(doc, select_endpoints(doc, ["/a"]))
        assert list(reduced["paths"]["/a"]) == ["get"]
