# ============================================================================
# Tests for BillingComposer and StockDeduction
# ============================================================================
"""Unit tests for pricing billing lines and deducting stock."""

from decimal import Decimal

import pytest

from app.domains.clinic.application.dto import MedicationLine, ServiceSelection
from app.domains.clinic.domain.entities import PrescriptionItem
from app.domains.clinic.domain.services import BillingComposer, StockDeduction
from app.domains.clinic.domain.value_objects import BillingItemKind, StockMovementType


@pytest.fixture
def composer() -> BillingComposer:
    return BillingComposer()


class TestBillingComposer:
    def test_services_and_medications(self, composer: BillingComposer) -> None:
        """Should price both kinds and total exactly."""
        composed = composer.compose(
            [ServiceSelection(service_id="svc-1", service_name="Massage", unit_price=Decimal("500"), quantity=2)],
            [MedicationLine(medication_id="med-1", medication_name="Paracetamol", quantity=3)],
            {"med-1": Decimal("12.50")},
        )

        assert [item.kind for item in composed.items] == [
            BillingItemKind.TREATMENT_SERVICE,
            BillingItemKind.MEDICATION,
        ]
        assert composed.items[0].total == Decimal("1000")
        assert composed.items[1].description == "ยา: Paracetamol"
        assert composed.items[1].total == Decimal("37.50")
        assert composed.subtotal == Decimal("1037.50")
        assert composed.total == composed.subtotal

    def test_zero_priced_service_dropped(self, composer: BillingComposer) -> None:
        composed = composer.compose(
            [ServiceSelection(service_id="svc-1", service_name="Free check", unit_price=Decimal("0"))],
            [],
            {},
        )
        assert composed.is_empty
        assert composed.total == Decimal("0")

    def test_medication_without_price_dropped(self, composer: BillingComposer) -> None:
        """Should treat an unknown catalog price as 0 and drop the line."""
        composed = composer.compose(
            [],
            [
                MedicationLine(medication_id="med-unknown", medication_name="Herbal"),
                MedicationLine(medication_id="med-free", medication_name="Sample"),
            ],
            {"med-free": Decimal("0")},
        )
        assert composed.items == []

    def test_unresolved_medication_ignored(self, composer: BillingComposer) -> None:
        composed = composer.compose([], [MedicationLine(medication_id=None, medication_name="Typed in")], {})
        assert composed.is_empty

    def test_no_float_drift(self, composer: BillingComposer) -> None:
        composed = composer.compose(
            [
                ServiceSelection(service_id="a", service_name="A", unit_price=Decimal("0.10")),
                ServiceSelection(service_id="b", service_name="B", unit_price=Decimal("0.20")),
            ],
            [],
            {},
        )
        assert composed.total == Decimal("0.30")


class TestStockDeduction:
    def test_deducts_quantity(self) -> None:
        item = PrescriptionItem(medication_id="med-1", medication_name="Paracetamol", quantity=3)

        movement = StockDeduction().deduct(item, current_stock=10, reference_id="rx-1", created_by="staff-1")

        assert movement.movement_type == StockMovementType.OUT
        assert movement.previous_stock == 10
        assert movement.new_stock == 7
        assert movement.delta == -3
        assert movement.reference_type == "prescription"
        assert movement.reference_id == "rx-1"
        assert movement.notes == "จ่ายยา Paracetamol จำนวน 3"

    def test_stock_never_negative(self) -> None:
        item = PrescriptionItem(medication_id="med-1", medication_name="Paracetamol", quantity=5)

        movement = StockDeduction().deduct(item, current_stock=2, reference_id="rx-1")

        assert movement.new_stock == 0
        assert movement.quantity == 5


class TestZeroPricedMedicationExcluded:
    def test_service_kept_medication_dropped(self, composer: BillingComposer) -> None:
        """Should keep one 1000 line when the medication resolves to price 0."""
        composed = composer.compose(
            [ServiceSelection(service_id="svc-1", service_name="Massage", unit_price=Decimal("500"), quantity=2)],
            [MedicationLine(medication_id="med-2", medication_name="Sample")],
            {"med-2": Decimal("0")},
        )

        assert len(composed.items) == 1
        assert composed.items[0].total == Decimal("1000")
        assert composed.subtotal == composed.total == Decimal("1000")
