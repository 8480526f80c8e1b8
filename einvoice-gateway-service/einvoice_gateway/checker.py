"""
Well-formedness gate run on every invoice before it is sent for validation.

This is a syntax-level parse only: any well-formed XML document passes,
whatever its vocabulary. Schema and business rules are the remote
validator's job.
"""

from __future__ import annotations

import xml.etree.ElementTree as ElementTree
from typing import Union

from .errors import EmptyInput, MalformedMarkup


def check(invoice: Union[str, bytes]) -> None:
    """
    Raise if the invoice is empty or not well-formed XML.

    Parameters
    ----------
    invoice:
        Raw invoice markup. Bytes are parsed as-is so an encoding named in
        the XML declaration is honoured.

    Raises
    ------
    EmptyInput
        The invoice has zero length.
    MalformedMarkup
        The invoice cannot be parsed as XML.
    """
    if len(invoice) == 0:
        raise EmptyInput("The provided file is empty.")
    try:
        ElementTree.fromstring(invoice)
    except (ElementTree.ParseError, ValueError) as exc:
        raise MalformedMarkup(f"Please check syntax of the xml file: {exc}") from exc
