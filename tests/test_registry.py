"""Tests for the object-name registry and extraction context."""

from kairo.models import MetadataIndexes
from kairo.registry import ExtractionContext, ObjectRegistry


def test_seeded_with_standard_objects():
    registry = ObjectRegistry()
    for name in ("Account", "Contact", "Opportunity", "Case", "Lead"):
        assert name.lower() in registry
    assert len(registry) == 5


def test_resolve_is_case_insensitive_and_first_write_wins():
    registry = ObjectRegistry(seed=())
    assert registry.resolve("Account") == "Account"
    assert registry.resolve("account") == "Account"
    assert registry.resolve("ACCOUNT") == "Account"


def test_resolve_registers_unseen_names():
    registry = ObjectRegistry()
    assert "Invoice__c" not in registry
    assert registry.resolve("invoice__C") == "invoice__C"
    assert registry.resolve("Invoice__c") == "invoice__C"


def test_register_does_not_overwrite_seed():
    registry = ObjectRegistry()
    assert registry.register("ACCOUNT") == "Account"


def test_context_predicates():
    registry = ObjectRegistry()
    registry.register("Invoice__c")
    registry.register("Status__c")
    indexes = MetadataIndexes(
        field_names=frozenset({"Status__c"}),
        apex_class_names=frozenset({"InvoiceService"}),
    )
    context = ExtractionContext.from_indexes(registry, indexes)

    assert context.is_object_name("invoice__c")
    assert context.is_object_name("Account")
    assert not context.is_object_name("Status__c")
    assert not context.is_object_name("Nothing")
    assert context.is_apex_class("InvoiceService")
    assert not context.is_apex_class("invoiceservice")
    assert context.is_field_name("Status__c")
    assert context.resolve_name("INVOICE__C") == "Invoice__c"


def test_empty_context_resolves_identity():
    assert ExtractionContext().resolve_name("Whatever") == "Whatever"
