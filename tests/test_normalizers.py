"""
Tests for purchase payload normalizers.
"""

from paybot.normalizers import (
    EmbedFieldListParser,
    EmbedLabelBlockParser,
    NormalizerChain,
    NormalizerKind,
    StructuredInvoiceParser,
    embed_chain,
    parse_quantity,
)
from paybot.shared.models import PurchaseStatus


def field_list_payload(fields, title="New Purchase"):
    return {"embeds": [{"title": title, "fields": fields}]}


def label_block_payload(lines, title="New Sale"):
    return {"embeds": [{"title": title, "description": "\n".join(lines)}]}


def invoice_payload(**overrides):
    invoice = {
        "id": 4242,
        "status": "completed",
        "custom_fields": {"in_game_name": "Steve"},
        "items": [{"product_name": "Gold Pack", "quantity": 2}],
    }
    invoice.update(overrides)
    return invoice


class TestParseQuantity:
    def test_values(self):
        assert parse_quantity("3") == 3
        assert parse_quantity(" 12 ") == 12
        assert parse_quantity(4) == 4
        assert parse_quantity(2.0) == 2

    def test_invalid_values_default_to_one(self):
        for value in (None, "", "two", "0", "-1", 0, -3, 1.5, True, [2]):
            assert parse_quantity(value) == 1


class TestEmbedFieldListParser:
    """Tests for the name/value field layout."""

    def setup_method(self):
        self.parser = EmbedFieldListParser("in_game_name")

    def test_full_payload(self):
        payload = field_list_payload(
            [
                {"name": "Invoice", "value": "INV1"},
                {"name": "Product", "value": "Gold Pack"},
                {"name": "Quantity", "value": "2"},
                {"name": "In game name", "value": "Steve"},
            ]
        )

        [record] = self.parser.normalize(payload)

        assert record.invoice_id == "INV1"
        assert record.product_name == "Gold Pack"
        assert record.quantity == 2
        assert record.recipient_name == "Steve"
        assert record.status is PurchaseStatus.COMPLETED
        assert record.source == NormalizerKind.FIELD_LIST.value

    def test_quantity_defaults_to_one(self):
        payload = field_list_payload(
            [
                {"name": "Product", "value": "Gold Pack"},
                {"name": "in_game_name", "value": "Alex"},
            ]
        )

        [record] = self.parser.normalize(payload)

        assert record.quantity == 1
        assert record.recipient_name == "Alex"
        assert record.invoice_id == "unknown"

    def test_non_numeric_quantity_defaults_to_one(self):
        payload = field_list_payload(
            [{"name": "Qty", "value": "lots"}, {"name": "Player", "value": "Alex"}]
        )

        assert self.parser.normalize(payload)[0].quantity == 1

    def test_product_id_is_not_mistaken_for_product(self):
        payload = field_list_payload(
            [
                {"name": "Product ID", "value": "gold"},
                {"name": "Product", "value": "Gold Pack"},
                {"name": "Username", "value": "Steve"},
            ]
        )

        [record] = self.parser.normalize(payload)

        assert record.product_id == "gold"
        assert record.product_name == "Gold Pack"

    def test_first_match_wins_per_category(self):
        payload = field_list_payload(
            [
                {"name": "Product", "value": "Gold Pack"},
                {"name": "Product name", "value": "Silver Pack"},
                {"name": "In game name", "value": "Steve"},
            ]
        )

        assert self.parser.normalize(payload)[0].product_name == "Gold Pack"

    def test_blank_value_does_not_claim_category(self):
        payload = field_list_payload(
            [
                {"name": "In game name", "value": "  "},
                {"name": "Player", "value": "Steve"},
                {"name": "Quantity", "value": ""},
                {"name": "Qty", "value": "3"},
            ]
        )

        [record] = self.parser.normalize(payload)

        assert record.recipient_name == "Steve"
        assert record.quantity == 3

    def test_missing_recipient_still_yields_record(self):
        payload = field_list_payload([{"name": "Product", "value": "Gold Pack"}])

        [record] = self.parser.normalize(payload)

        assert record.recipient_name == ""

    def test_title_without_keyword_is_not_applicable(self):
        payload = field_list_payload([{"name": "Player", "value": "Steve"}], title="Ticket opened")

        assert self.parser.normalize(payload) is None

    def test_no_embeds_is_not_applicable(self):
        assert self.parser.normalize({"content": "hello"}) is None
        assert self.parser.normalize({"embeds": []}) is None
        assert self.parser.normalize(["not", "a", "dict"]) is None

    def test_description_only_embed_is_not_field_list(self):
        assert not self.parser.can_handle(label_block_payload(["In game name", "Steve"]))


class TestEmbedLabelBlockParser:
    """Tests for the label-line / value-line description layout."""

    def setup_method(self):
        self.parser = EmbedLabelBlockParser("in_game_name")

    def test_full_description(self):
        payload = label_block_payload(
            [
                "**Invoice ID**",
                "INV2",
                "**Product**",
                "Gold Pack",
                "**Price**",
                "3 x $0.15",
                "**In game name**",
                "Alex",
            ]
        )

        [record] = self.parser.normalize(payload)

        assert record.invoice_id == "INV2"
        assert record.product_name == "Gold Pack"
        assert record.quantity == 3
        assert record.price_text == "3 x $0.15"
        assert record.recipient_name == "Alex"
        assert record.source == NormalizerKind.LABEL_BLOCK.value

    def test_custom_field_label(self):
        payload = label_block_payload(["Product", "Gold Pack", "in_game_name", "Steve"])

        assert self.parser.normalize(payload)[0].recipient_name == "Steve"

    def test_unrecognised_lines_are_ignored(self):
        payload = label_block_payload(
            ["Thanks for your order!", "Email", "a@b.c", "In game name", "Steve"]
        )

        [record] = self.parser.normalize(payload)

        assert record.recipient_name == "Steve"
        assert record.product_name is None
        assert record.quantity == 1

    def test_price_without_quantity(self):
        payload = label_block_payload(["Price", "$0.15", "In game name", "Steve"])

        assert self.parser.normalize(payload)[0].quantity == 1

    def test_missing_recipient_is_not_applicable(self):
        payload = label_block_payload(["Invoice ID", "INV2", "Product", "Gold Pack"])

        assert self.parser.normalize(payload) is None

    def test_label_on_last_line_has_no_value(self):
        payload = label_block_payload(["Product", "Gold Pack", "In game name"])

        assert self.parser.normalize(payload) is None

    def test_labels_must_match_exactly(self):
        payload = label_block_payload(["Product:", "Gold Pack", "In game name", "Steve"])

        assert self.parser.normalize(payload)[0].product_name is None

    def test_embed_with_fields_is_not_label_block(self):
        payload = {
            "embeds": [
                {
                    "title": "New Sale",
                    "description": "In game name\nSteve",
                    "fields": [{"name": "Player", "value": "Steve"}],
                }
            ]
        }

        assert not self.parser.can_handle(payload)


class TestStructuredInvoiceParser:
    """Tests for JSON invoices."""

    def setup_method(self):
        self.parser = StructuredInvoiceParser("in_game_name")

    def test_single_item(self):
        [record] = self.parser.normalize(invoice_payload())

        assert record.invoice_id == "4242"
        assert record.product_name == "Gold Pack"
        assert record.quantity == 2
        assert record.recipient_name == "Steve"
        assert record.source == NormalizerKind.STRUCTURED_INVOICE.value

    def test_not_completed_yields_nothing(self):
        assert self.parser.normalize(invoice_payload(status="pending")) == []
        assert self.parser.normalize(invoice_payload(status=None)) == []

    def test_status_must_match_exactly(self):
        assert self.parser.normalize(invoice_payload(status="Completed")) == []
        assert self.parser.normalize(invoice_payload(status=" completed ")) == []

    def test_one_record_per_item(self):
        items = [
            {"product_name": "Gold Pack", "quantity": 1},
            {"name": "Silver Pack", "quantity": 4},
            {"product_name": "Gold Pack", "product_id": 77},
        ]

        records = self.parser.normalize(invoice_payload(items=items))

        assert len(records) == 3
        assert {r.invoice_id for r in records} == {"4242"}
        assert {r.recipient_name for r in records} == {"Steve"}
        assert [r.product_name for r in records] == ["Gold Pack", "Silver Pack", "Gold Pack"]
        assert [r.quantity for r in records] == [1, 4, 1]
        assert records[2].product_id == "77"

    def test_invoice_id_fallbacks(self):
        payload = invoice_payload()
        del payload["id"]
        assert self.parser.normalize(payload)[0].invoice_id == "unknown"

        payload["invoice_id"] = "abc-1"
        assert self.parser.normalize(payload)[0].invoice_id == "abc-1"

    def test_custom_field_values_list(self):
        payload = invoice_payload(
            custom_fields=None,
            custom_field_values=[
                {"name": "discord", "value": "steve#1"},
                {"name": "in_game_name", "value": "Steve"},
            ],
        )

        assert self.parser.normalize(payload)[0].recipient_name == "Steve"

    def test_custom_fields_map_without_key_falls_through_to_list(self):
        payload = invoice_payload(
            custom_fields={"discord": "steve#1"},
            custom_field_values=[{"name": "in_game_name", "value": "Alex"}],
        )

        assert self.parser.normalize(payload)[0].recipient_name == "Alex"

    def test_missing_recipient_rejects_invoice(self):
        assert self.parser.normalize(invoice_payload(custom_fields={})) == []

    def test_no_items(self):
        assert self.parser.normalize(invoice_payload(items=[])) == []
        assert self.parser.normalize(invoice_payload(items=None)) == []

    def test_not_invoice_shaped(self):
        assert self.parser.normalize({"embeds": []}) is None


class TestNormalizerChain:
    def test_detects_each_variant(self):
        chain = NormalizerChain(
            [
                EmbedFieldListParser("in_game_name"),
                EmbedLabelBlockParser("in_game_name"),
                StructuredInvoiceParser("in_game_name"),
            ]
        )

        fields = field_list_payload([{"name": "Player", "value": "Steve"}])
        block = label_block_payload(["In game name", "Steve"])

        assert chain.detect(fields).kind is NormalizerKind.FIELD_LIST
        assert chain.detect(block).kind is NormalizerKind.LABEL_BLOCK
        assert chain.detect(invoice_payload()).kind is NormalizerKind.STRUCTURED_INVOICE
        assert chain.detect({"hello": "world"}) is None

    def test_embed_chain_ignores_invoices(self):
        chain = embed_chain("in_game_name")

        assert chain.normalize(invoice_payload()) is None
