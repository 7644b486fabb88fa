from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from tracker_client.core.errors import ValidationFailure
from tracker_client.services import patches
from tracker_client.services.patches import CLEAR, UNSET, Set, TicketPatch

NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def test_three_intents_are_distinguishable():
    patch = TicketPatch(completed=Set(True), invoice_number=CLEAR, note=UNSET)

    assert patch.build() == {"completed": 1, "invoice_number": None}
    assert "note" not in patch.build()


def test_empty_patch_builds_empty_payload():
    assert TicketPatch().build() == {}
    assert TicketPatch().is_empty()
    assert not TicketPatch(note=CLEAR).is_empty()


def test_set_values_are_encoded_for_the_wire():
    patch = TicketPatch(
        sent=Set(False),
        start_iso=Set(datetime(2024, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=-6)))),
        end_iso=Set("2024-01-01T10:00:00Z"),
        invoiced_total=Set(Decimal("125.50")),
        note=Set(""),
    )

    assert patch.build() == {
        "sent": 0,
        "start_iso": "2024-01-01T09:00:00.000Z",
        "end_iso": "2024-01-01T10:00:00.000Z",
        "invoiced_total": "125.50",
        "note": "",
    }


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-01-01T04:00:00-06:00", "2024-01-01T10:00:00.000Z"),
        ("2024-01-01T10:00:00.5Z", "2024-01-01T10:00:00.500Z"),
        ("2024-01-01T10:00:00", "2024-01-01T10:00:00.000Z"),
    ],
)
def test_timestamp_strings_are_reformatted(text, expected):
    assert TicketPatch(start_iso=Set(text)).build() == {"start_iso": expected}


@pytest.mark.parametrize("bad", ["yesterday", "", 1704103200])
def test_unreadable_timestamps_are_rejected(bad):
    with pytest.raises(ValidationFailure) as excinfo:
        TicketPatch(end_iso=Set(bad)).build()

    assert excinfo.value.field == "end_iso"


@pytest.mark.parametrize("field", ["hardware_quantity", "flat_rate_quantity"])
@pytest.mark.parametrize("bad", [0, -3, 1.5, "2", True])
def test_quantities_must_be_positive_integers(field, bad):
    patch = TicketPatch(**{field: Set(bad)})

    with pytest.raises(ValidationFailure) as excinfo:
        patch.build()

    assert excinfo.value.field == field


def test_quantity_can_be_cleared_or_set():
    assert TicketPatch(hardware_quantity=CLEAR, flat_rate_quantity=Set(3)).build() == {
        "hardware_quantity": None,
        "flat_rate_quantity": 3,
    }


def test_bare_values_are_rejected_instead_of_guessed():
    with pytest.raises(TypeError):
        TicketPatch(note="typed without Set").build()


def test_text_intent_clears_blank_input():
    assert patches.text_intent("   ") is CLEAR
    assert patches.text_intent(None) is CLEAR
    assert patches.text_intent("  INV-1009 ") == Set("INV-1009")


def test_quantity_intent_mirrors_form_rules():
    assert patches.quantity_intent("", "hardware_quantity") is CLEAR
    assert patches.quantity_intent(" 4 ", "hardware_quantity") == Set(4)

    with pytest.raises(ValidationFailure, match="Hardware quantity must be a positive integer."):
        patches.quantity_intent("0", "hardware_quantity")
    with pytest.raises(ValidationFailure, match="Flat rate quantity must be a positive integer."):
        patches.quantity_intent("two", "flat_rate_quantity")


def test_mark_completed_and_mark_sent_touch_only_their_flag():
    assert patches.mark_completed().build() == {"completed": 1}
    assert patches.mark_completed(False).build() == {"completed": 0}
    assert patches.mark_sent().build() == {"sent": 1}


def test_stop_now_sends_only_end_time():
    assert patches.stop_now(NOW).build() == {"end_iso": "2024-05-01T12:30:00.000Z"}


def test_stop_now_defaults_to_current_instant(monkeypatch):
    monkeypatch.setattr(patches, "utc_now", lambda: NOW)

    assert patches.stop_now().build() == {"end_iso": "2024-05-01T12:30:00.000Z"}


def test_start_new_builds_open_creation_payload():
    payload = patches.start_new("acme", "time", NOW).to_payload()

    assert payload == {
        "client_key": "acme",
        "entry_type": "time",
        "start_iso": "2024-05-01T12:30:00.000Z",
        "sent": 0,
        "completed": 0,
    }
    assert "end_iso" not in payload


def test_start_new_normalizes_entry_type():
    assert patches.start_new(" acme ", " Hardware ", NOW).entry_type == "hardware"


@pytest.mark.parametrize(
    "client_key, entry_type, field",
    [("", "time", "client_key"), ("   ", "time", "client_key"), ("acme", "lunch", "entry_type")],
)
def test_start_new_rejects_bad_input(client_key, entry_type, field):
    with pytest.raises(ValidationFailure) as excinfo:
        patches.start_new(client_key, entry_type, NOW)

    assert excinfo.value.field == field
