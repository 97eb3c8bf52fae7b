"""Unit tests for contact name extraction from mailing metadata."""

from __future__ import annotations

from src.call_sync.sync.names import PLACEHOLDER_NAME, derive_name, extract_name, sanitize_name


class TestSanitizeName:
    def test_strips_tags_and_entities(self):
        assert sanitize_name("<span>João&nbsp;Silva</span>") == "João Silva"

    def test_decodes_entity_table(self):
        assert sanitize_name("Ana &amp; Bia &quot;Ltda&quot;") == 'Ana & Bia "Ltda'

    def test_trims_quotes_and_collapses_whitespace(self):
        assert sanitize_name('  "Carlos    Eduardo"  ') == "Carlos Eduardo"

    def test_dash_and_empty_are_absent(self):
        assert sanitize_name("-") is None
        assert sanitize_name("   ") is None
        assert sanitize_name("<b></b>") is None

    def test_structured_values_are_absent(self):
        assert sanitize_name({"first": "Ana"}) is None
        assert sanitize_name(["Ana"]) is None
        assert sanitize_name(None) is None


class TestExtractName:
    def test_wrapped_object(self):
        assert extract_name({"data": {"Nome": "Maria Souza"}}) == "Maria Souza"

    def test_wrapped_list_uses_first_row(self):
        metadata = {"data": [{"nome": "Primeiro"}, {"nome": "Segundo"}]}
        assert extract_name(metadata) == "Primeiro"

    def test_bare_list(self):
        assert extract_name([{"name": "Paulo"}]) == "Paulo"

    def test_priority_keys_before_scan(self):
        metadata = {"nome_cliente": "Scan Hit", "Nome": "Priority Hit"}
        assert extract_name(metadata) == "Priority Hit"

    def test_substring_scan_is_case_insensitive(self):
        assert extract_name({"NOME_DO_CLIENTE": "Fernanda"}) == "Fernanda"
        assert extract_name({"CustomerFullName": "Lucas"}) == "Lucas"

    def test_skips_blank_candidates(self):
        assert extract_name({"Nome": "-", "nome_completo": "Rita"}) == "Rita"

    def test_absent_metadata(self):
        assert extract_name(None) is None
        assert extract_name({"data": []}) is None
        assert extract_name({"telefone": "11999990000"}) is None


class TestDeriveName:
    def test_found_name_is_not_generic(self):
        name = derive_name({"Nome": "Maria"})
        assert name.value == "Maria"
        assert name.is_generic is False

    def test_missing_name_uses_placeholder(self):
        name = derive_name(None)
        assert name.value == PLACEHOLDER_NAME
        assert name.is_generic is True

    def test_custom_placeholder(self):
        assert derive_name({}, placeholder="Lead").value == "Lead"
