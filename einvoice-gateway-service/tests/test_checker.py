"""Tests for the well-formedness checker."""

import pytest

from einvoice_gateway.checker import check
from einvoice_gateway.errors import EmptyInput, MalformedMarkup

from .conftest import VALID_INVOICE


@pytest.mark.parametrize(
    "invoice",
    [
        VALID_INVOICE,
        VALID_INVOICE.decode("utf-8").split("\n", 1)[1],
        "<a/>",
        "<note><to>Tove</to><from>Jani</from></note>",
        "<Rechnung>Gesamtbetrag: 100,00 €</Rechnung>",
    ],
)
def test_well_formed_markup_passes(invoice) -> None:
    assert check(invoice) is None


@pytest.mark.parametrize("invoice", ["", b""])
def test_empty_input_rejected(invoice) -> None:
    with pytest.raises(EmptyInput):
        check(invoice)


@pytest.mark.parametrize(
    "invoice",
    [
        "<Invoice><ID>1</Invoice>",
        "<Invoice><ID>1</ID>",
        "<Invoice><ID>1</Id></Invoice>",
        "just some text",
        "   ",
        "<a></a><b></b>",
    ],
)
def test_malformed_markup_rejected(invoice) -> None:
    with pytest.raises(MalformedMarkup):
        check(invoice)


def test_errors_carry_stable_codes() -> None:
    with pytest.raises(MalformedMarkup) as excinfo:
        check("<Invoice>")
    assert excinfo.value.code == "MALFORMED_MARKUP"
    assert excinfo.value.status_code == 400
