from expense_report.models import Expense, Receipt

PNG_RECEIPT = Receipt(
    name="Taxi-Receipt.png", type="image/png", data="data:image/png;base64,iVBORw0KGgo="
)


def make_expense(**fields) -> Expense:
    defaults = {
        "date": "2024-01-15",
        "description": "Taxi to airport",
        "amount": 100.0,
        "category": "Transport",
        "status": "Approved",
    }
    defaults.update(fields)
    return Expense(**defaults)
