import pytest

from src.application.dto.save_snippet_dto import SaveSnippetDTO
from src.domain.errors import SnippetValidationError


def test_valid_with_code():
    dto = SaveSnippetDTO(title="t", code="print(1)")
    assert dto.title == "t"


def test_valid_with_block_only():
    dto = SaveSnippetDTO.from_mapping({"title": "t", "snippets": [{"code": "ls -la"}]})
    assert dto.snippets == [{"code": "ls -la"}]


@pytest.mark.parametrize("title", ["", "   "])
def test_missing_title(title):
    with pytest.raises(SnippetValidationError):
        SaveSnippetDTO(title=title, code="x")


def test_missing_code_and_blocks():
    with pytest.raises(SnippetValidationError):
        SaveSnippetDTO.from_mapping({"title": "t", "snippets": [{"code": "  "}]})


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        SaveSnippetDTO(title="", code="")


def test_from_mapping_accepts_legacy_fields():
    dto = SaveSnippetDTO.from_mapping({"title": "t", "content": "echo", "category": "CMD"})
    assert dto.code == "echo"
    assert dto.categories == ["CMD"]
    assert dto.to_mapping()["categories"] == ["CMD"]


def test_non_mapping_rejected():
    with pytest.raises(SnippetValidationError):
        SaveSnippetDTO.from_mapping(["t"])
