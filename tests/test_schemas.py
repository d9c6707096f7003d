"""Unit tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from protoforge.schemas.prototype import (
    FIELD_ALIASES,
    BomItem,
    BomList,
    CodeSnippet,
    PrototypeSpec,
    SchematicSource,
    TechStack,
)


class TestAliases:
    """Test synonym resolution."""

    def test_files_synonym(self):
        """Test that 'files' fills codeSnippets."""
        spec = PrototypeSpec.model_validate({"files": [{"name": "app.py", "content": "print(1)"}]})
        snippet = spec.snippets()[0]
        assert snippet.file_name == "app.py"
        assert snippet.code == "print(1)"

    def test_snippet_name_synonyms(self):
        """Test every accepted snippet name key."""
        for key in FIELD_ALIASES["CodeSnippet"]["file_name"]:
            snippet = CodeSnippet.model_validate({key: "main.c"})
            assert snippet.file_name == "main.c"

    def test_extension_synonym(self):
        """Test that 'extension' fills language."""
        assert CodeSnippet.model_validate({"extension": "ino"}).language == "ino"

    def test_canonical_key_wins(self):
        """Test that the canonical key is preferred and the synonym is kept as extra."""
        spec = PrototypeSpec.model_validate(
            {"codeSnippets": [{"fileName": "a.py"}], "files": [{"fileName": "b.py"}]}
        )
        assert spec.snippets()[0].file_name == "a.py"
        assert spec.model_extra["files"] == [{"fileName": "b.py"}]

    def test_tech_stack_synonyms(self):
        """Test hw and softwareStack collapse to canonical buckets."""
        stack = TechStack.model_validate({"hw": ["ESP32"], "softwareStack": ["Arduino"]})
        assert stack.hardware == ["ESP32"]
        assert stack.software == ["Arduino"]
        assert stack.categories()[0] == ("Hardware", ["ESP32"])

    def test_diagram_synonym(self):
        """Test top-level diagram object in place of schematic."""
        spec = PrototypeSpec.model_validate({"diagram": {"mermaid": "graph TD;A-->B;"}})
        assert isinstance(spec.schematic, SchematicSource)
        assert spec.diagram_source() == "graph TD;A-->B;"

    def test_schematic_string(self):
        """Test schematic given as raw diagram source."""
        spec = PrototypeSpec.model_validate({"schematic": "graph LR;X-->Y;"})
        assert spec.diagram_source() == "graph LR;X-->Y;"

    def test_schematic_diagram_field(self):
        """Test schematic object exposing a diagram field."""
        spec = PrototypeSpec.model_validate({"schematic": {"diagram": "flowchart TD"}})
        assert spec.diagram_source() == "flowchart TD"

    def test_diagram_fallback_when_schematic_is_empty(self):
        """Test that a top-level diagram is used when schematic has no source."""
        spec = PrototypeSpec.model_validate(
            {"schematic": {"notes": "see wiring"}, "diagram": {"mermaid": "graph TD;A-->B;"}}
        )
        assert spec.diagram_source() == "graph TD;A-->B;"

        spec = PrototypeSpec.model_validate({"schematic": "graph LR;X-->Y;", "diagram": "graph TD;A-->B;"})
        assert spec.diagram_source() == "graph LR;X-->Y;"

    def test_bill_of_materials_wrapper(self):
        """Test billOfMaterials with a components list."""
        spec = PrototypeSpec.model_validate(
            {"billOfMaterials": {"components": [{"name": "Resistor", "qty": 4}]}}
        )
        assert isinstance(spec.bom, BomList)
        items = spec.bom_items()
        assert items[0].description == "Resistor"
        assert items[0].quantity == 4

    def test_issue_synonym(self):
        """Test that 'issue' fills problem."""
        spec = PrototypeSpec.model_validate({"issuesAndFixes": [{"issue": "Brownout", "solution": "Cap"}]})
        assert spec.issues_and_fixes[0].problem == "Brownout"


class TestCoercion:
    """Test lenient coercions."""

    def test_numbers_become_strings(self):
        """Test numeric overview values and part numbers are stringified."""
        spec = PrototypeSpec.model_validate(
            {"overview": {"projectName": "X", "estimatedTime": 4}, "bom": [{"partNumber": 1234}]}
        )
        assert spec.overview.estimated_time == "4"
        assert spec.bom_items()[0].part_number == "1234"

    def test_single_string_becomes_list(self):
        """Test a single string for a list-of-strings field."""
        spec = PrototypeSpec.model_validate({"techStack": {"tools": "Soldering iron"}, "nextSteps": "Ship"})
        assert spec.tech_stack.tools == ["Soldering iron"]
        assert spec.next_steps == ["Ship"]

    def test_object_items_collapse_to_text(self):
        """Test list items given as objects with a name."""
        stack = TechStack.model_validate({"hardware": [{"name": "ESP32", "qty": 1}, "DHT22"]})
        assert stack.hardware == ["ESP32", "DHT22"]

    def test_snippet_mapping(self):
        """Test codeSnippets given as a mapping of file name to code."""
        spec = PrototypeSpec.model_validate(
            {"codeSnippets": {"main.py": "print(1)", "util.py": {"code": "x = 1", "language": "python"}}}
        )
        names = [s.file_name for s in spec.snippets()]
        assert names == ["main.py", "util.py"]
        assert spec.snippets()[1].language == "python"

    def test_code_lines_joined(self):
        """Test code given as a list of lines."""
        snippet = CodeSnippet.model_validate({"fileName": "a.py", "code": ["a = 1", "b = 2"]})
        assert snippet.code == "a = 1\nb = 2"

    def test_plain_string_issues(self):
        """Test issues given as plain strings."""
        spec = PrototypeSpec.model_validate({"issuesAndFixes": ["Sensor drift"]})
        assert spec.issues_and_fixes[0].problem == "Sensor drift"

    def test_quantity_types_preserved(self):
        """Test numeric and string quantities are kept as given."""
        assert BomItem.model_validate({"quantity": 2}).quantity == 2
        assert BomItem.model_validate({"quantity": "2 pcs"}).quantity == "2 pcs"
        assert BomItem.model_validate({"unitPrice": 1.5}).unit_price == 1.5

    def test_uncoercible_nested_value(self):
        """Test a nested object field holding a number."""
        with pytest.raises(PydanticValidationError):
            PrototypeSpec.model_validate({"overview": 5})


class TestSerialization:
    """Test JSON dumps of validated prototypes."""

    def test_unknown_keys_retained(self):
        """Test that unknown keys survive validation and dumping."""
        spec = PrototypeSpec.model_validate(
            {"overview": {"projectName": "X", "tagline": "hi"}, "extraTop": {"a": 1}}
        )
        dumped = spec.to_json_dict()
        assert dumped["overview"] == {"projectName": "X", "tagline": "hi"}
        assert dumped["extraTop"] == {"a": 1}

    def test_dump_uses_canonical_keys(self):
        """Test synonyms are written back under canonical names."""
        spec = PrototypeSpec.model_validate({"files": [{"filename": "a.py", "content": "x"}]})
        assert spec.to_json_dict() == {"codeSnippets": [{"fileName": "a.py", "code": "x"}]}

    def test_revalidating_dump_is_equal(self):
        """Test dump -> validate yields an equal model."""
        raw = {
            "overview": {"name": "Rover", "difficulty": "hard"},
            "techStack": {"hw": ["Pi"], "protocols": ["I2C"]},
            "bom": {"items": [{"sku": "A1", "price": 2.5, "url": "https://example.com"}]},
            "buildGuide": {"step1": "Assemble", "step2": ["a", "b"]},
            "threeDDescription": {"enclosure": "Box", "color": "red"},
            "custom": [1, 2, 3],
        }
        spec = PrototypeSpec.model_validate(raw)
        again = PrototypeSpec.model_validate(spec.to_json_dict())
        assert again == spec
        assert again.to_json_dict() == spec.to_json_dict()

    def test_python_field_names_accepted(self):
        """Test constructing with Python field names."""
        spec = PrototypeSpec(code_snippets=[CodeSnippet(file_name="a.py", code="x")])
        assert spec.to_json_dict() == {"codeSnippets": [{"fileName": "a.py", "code": "x"}]}
