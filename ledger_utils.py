from decimal import Decimal

NO_CLIENT_LABEL = '-'
UNKNOWN_CLIENT_LABEL = 'Unknown Client'

CSV_HEADER = ['Type', 'Date', 'Category', 'Description', 'Amount', 'Currency']


def client_label(client_id, client_map):
    """Display name for an income's client reference.

    A reference to a client that has since been deleted is kept on the
    income row and shown as ``Unknown Client``.
    """
    if client_id is None:
        return NO_CLIENT_LABEL
    return client_map.get(client_id, UNKNOWN_CLIENT_LABEL)


def build_transactions(incomes, expenses, client_map, currency):
    """Merge income and expense rows into one list, newest first."""
    transactions = []
    for row in incomes:
        transactions.append({
            'id': row['id'],
            'type': 'income',
            'date': row['date'],
            'category': client_label(row.get('client_id'), client_map),
            'description': row.get('description') or '',
            'amount': row['amount'],
            'currency': currency,
        })
    for row in expenses:
        transactions.append({
            'id': row['id'],
            'type': 'expense',
            'date': row['date'],
            'category': NO_CLIENT_LABEL,
            'description': row.get('description') or '',
            'amount': row['amount'],
            'currency': currency,
        })
    # stable sort keeps income ahead of expense on the same day
    transactions.sort(key=lambda t: t['date'], reverse=True)
    return transactions


def format_csv_amount(amount):
    """Shortest decimal form: 100.00 -> 100, 25.50 -> 25.5."""
    text = format(Decimal(str(amount)).normalize(), 'f')
    return '0' if text in ('-0', '') else text


def transactions_to_csv(transactions):
    # Fields are joined as-is; commas inside a description are not escaped.
    lines = [','.join(CSV_HEADER)]
    for t in transactions:
        date_value = t['date'].isoformat() if hasattr(t['date'], 'isoformat') else str(t['date'])
        lines.append(','.join([
            t['type'],
            date_value,
            str(t['category']),
            str(t['description']),
            format_csv_amount(t['amount']),
            t['currency'],
        ]))
    return '\n'.join(lines) + '\n'
