"""Translation catalog and lookup.

Keys are dotted paths (``csv.date``, ``statuses.Approved``). Lookup falls
back to the key itself so a missing translation is visible but harmless.
Interpolation uses ``{{name}}`` placeholders; when a ``count`` option is
given and the entry is a ``{"one": ..., "other": ...}`` mapping, the plural
form is chosen first.
"""

from __future__ import annotations
import re
from typing import Any, Dict, Union

DEFAULT_LANGUAGE = "es"

Catalog = Dict[str, Any]

ES: Catalog = {
    "notifications": {
        "saveSuccess": "Informe guardado con éxito.",
        "saveError": "Error al guardar el informe.",
        "fileSizeError": "El archivo supera el tamaño máximo de 5MB.",
        "fileTypeError": "Formato no permitido. Use JPG, PNG o PDF.",
        "fileReadError": "Error al leer el archivo.",
        "genericError": "Ocurrió un error.",
    },
    "categories": {
        "Travel": "Viajes",
        "Meals": "Comidas",
        "Supplies": "Suministros",
        "Transport": "Transporte",
        "Lodging": "Alojamiento",
        "Other": "Otros",
    },
    "statuses": {
        "Pending": "Pendiente",
        "Approved": "Aprobado",
        "Rejected": "Rechazado",
    },
    "csv": {
        "date": "Fecha",
        "description": "Descripción",
        "category": "Categoría",
        "invoiceNumber": "Número de Factura",
        "amount": "Monto",
        "status": "Estado",
        "receiptAttached": "Factura Adjunta",
        "yes": "Sí",
        "no": "No",
    },
    "bulkActions": {
        "selected": {
            "one": "{{count}} gasto seleccionado",
            "other": "{{count}} gastos seleccionados",
        },
    },
    "projection": {
        "insufficientData": "Datos insuficientes para la proyección.",
        "increase": "Aumento",
        "decrease": "Disminución",
        "stable": "Estable",
    },
    "monthsShort": {
        "0": "Ene", "1": "Feb", "2": "Mar", "3": "Abr", "4": "May", "5": "Jun",
        "6": "Jul", "7": "Ago", "8": "Sep", "9": "Oct", "10": "Nov", "11": "Dic",
    },
}

EN: Catalog = {
    "notifications": {
        "saveSuccess": "Report saved successfully.",
        "saveError": "Error saving the report.",
        "fileSizeError": "File exceeds the 5MB size limit.",
        "fileTypeError": "Invalid format. Use JPG, PNG, or PDF.",
        "fileReadError": "Error reading the file.",
        "genericError": "Something went wrong.",
    },
    "categories": {
        "Travel": "Travel",
        "Meals": "Meals",
        "Supplies": "Supplies",
        "Transport": "Transport",
        "Lodging": "Lodging",
        "Other": "Other",
    },
    "statuses": {
        "Pending": "Pending",
        "Approved": "Approved",
        "Rejected": "Rejected",
    },
    "csv": {
        "date": "Date",
        "description": "Description",
        "category": "Category",
        "invoiceNumber": "Invoice Number",
        "amount": "Amount",
        "status": "Status",
        "receiptAttached": "Receipt Attached",
        "yes": "Yes",
        "no": "No",
    },
    "bulkActions": {
        "selected": {
            "one": "{{count}} expense selected",
            "other": "{{count}} expenses selected",
        },
    },
    "projection": {
        "insufficientData": "Insufficient data for projection.",
        "increase": "Increase",
        "decrease": "Decrease",
        "stable": "Stable",
    },
    "monthsShort": {
        "0": "Jan", "1": "Feb", "2": "Mar", "3": "Apr", "4": "May", "5": "Jun",
        "6": "Jul", "7": "Aug", "8": "Sep", "9": "Oct", "10": "Nov", "11": "Dec",
    },
}

TRANSLATIONS: Dict[str, Catalog] = {"es": ES, "en": EN}

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def _lookup(catalog: Catalog, key: str) -> Union[str, Dict[str, Any], None]:
    node: Any = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def translate(key: str, language: str = DEFAULT_LANGUAGE, **options: Any) -> str:
    catalog = TRANSLATIONS.get(language, TRANSLATIONS[DEFAULT_LANGUAGE])
    entry = _lookup(catalog, key)
    if isinstance(entry, dict):
        if "count" not in options:
            return key
        form = "one" if options["count"] == 1 and "one" in entry else "other"
        entry = entry.get(form)
    if not isinstance(entry, str):
        return key
    return _PLACEHOLDER.sub(
        lambda m: str(options[m.group(1)]) if m.group(1) in options else m.group(0),
        entry,
    )


def month_label(month: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Short label for a ``YYYY-MM`` key, e.g. ``Ene 2025``."""
    year, month_num = month.split("-")
    return f"{translate(f'monthsShort.{int(month_num) - 1}', language)} {year}"
