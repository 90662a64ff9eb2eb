"""
Unit tests for the helper modules: validation, month arithmetic,
summary aggregation and transaction/CSV building.
"""

import pytest
import os
import sys
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from form_utils import (
    parse_amount, parse_date, parse_client_id,
    validate_client_form, validate_income_form, validate_expense_form, validate_signup_form,
)
from summary_utils import (
    fetch_monthly_summary, format_month, month_bounds, parse_month, shift_month, zero_summary,
)
from ledger_utils import (
    build_transactions, client_label, format_csv_amount, transactions_to_csv,
)


class TestParsing:
    """Field parsers."""

    def test_parse_amount_valid(self):
        assert parse_amount('100') == Decimal('100.00')
        assert parse_amount(' 12.345 ') == Decimal('12.34')
        assert parse_amount('99999999.99') == Decimal('99999999.99')

    @pytest.mark.parametrize("raw", ['0', '-1', '0.00', 'abc', '', 'NaN', 'Infinity', '100000000'])
    def test_parse_amount_rejects(self, raw):
        with pytest.raises(ValueError):
            parse_amount(raw)

    def test_parse_date(self):
        assert parse_date('2024-02-29') == date(2024, 2, 29)
        assert parse_date(date(2024, 1, 1)) == date(2024, 1, 1)
        with pytest.raises(ValueError):
            parse_date('2023-02-29')
        with pytest.raises(ValueError):
            parse_date('')

    def test_parse_client_id(self):
        assert parse_client_id('') is None
        assert parse_client_id(None) is None
        assert parse_client_id('7') == 7
        for raw in ('abc', '0', '-3', '1.5'):
            with pytest.raises(ValueError):
                parse_client_id(raw)


class TestFormValidation:
    """Form-level validation."""

    def test_client_name_min_length(self):
        values, errors = validate_client_form({'name': ' Al '})
        assert values == {'name': 'Al'}
        assert errors == []
        _, errors = validate_client_form({'name': 'A'})
        assert errors == ["Client name must be at least 2 characters."]

    def test_income_description_optional(self):
        values, errors = validate_income_form({'amount': '10', 'date': '2024-01-01'})
        assert errors == []
        assert values == {'description': None, 'amount': Decimal('10.00'),
                          'date': date(2024, 1, 1), 'client_id': None}

    def test_income_collects_all_errors(self):
        _, errors = validate_income_form({'amount': '-1', 'date': 'x', 'client_id': 'y'})
        assert len(errors) == 3

    def test_expense_description_required(self):
        _, errors = validate_expense_form({'description': '', 'amount': '10', 'date': '2024-01-01'})
        assert errors == ["Description is required."]

    def test_signup_email_lowercased(self):
        values, errors = validate_signup_form(
            {'name': 'Sam', 'email': ' Sam@Example.COM ', 'password': 'longenough'}, 8)
        assert errors == []
        assert values['email'] == 'sam@example.com'


class TestMonthArithmetic:
    """Month cursor helpers."""

    @pytest.mark.parametrize("ref,first,last", [
        (date(2024, 1, 15), date(2024, 1, 1), date(2024, 1, 31)),
        (date(2024, 2, 10), date(2024, 2, 1), date(2024, 2, 29)),
        (date(2023, 2, 28), date(2023, 2, 1), date(2023, 2, 28)),
        (date(2024, 4, 30), date(2024, 4, 1), date(2024, 4, 30)),
        (date(2024, 12, 31), date(2024, 12, 1), date(2024, 12, 31)),
    ])
    def test_month_bounds(self, ref, first, last):
        assert month_bounds(ref) == (first, last)

    def test_shift_month_crosses_years(self):
        assert shift_month(date(2024, 1, 1), -1) == date(2023, 12, 1)
        assert shift_month(date(2024, 12, 1), 1) == date(2025, 1, 1)

    def test_shift_month_clamps_day(self):
        assert shift_month(date(2024, 1, 31), 1) == date(2024, 2, 29)

    @pytest.mark.parametrize("ref", [date(2024, 1, 1), date(2024, 12, 1), date(2023, 3, 1)])
    def test_forward_then_back_returns_to_month(self, ref):
        assert shift_month(shift_month(ref, 1), -1) == ref

    def test_forward_then_back_keeps_month_for_any_day(self):
        back = shift_month(shift_month(date(2024, 1, 31), 1), -1)
        assert (back.year, back.month) == (2024, 1)

    def test_parse_month(self):
        assert parse_month('2024-03') == date(2024, 3, 1)
        assert parse_month('bad', default=date(2022, 5, 17)) == date(2022, 5, 1)
        assert parse_month(None, default=date(2022, 5, 17)) == date(2022, 5, 1)
        assert format_month(date(2024, 3, 1)) == '2024-03'

    @pytest.mark.parametrize("value", ["0001-01", "9999-12"])
    def test_parse_month_edge_of_calendar_falls_back(self, value):
        month = parse_month(value, default=date(2022, 5, 17))
        assert month == date(2022, 5, 1)

    @pytest.mark.parametrize("value,expected", [
        ("0001-02", date(1, 2, 1)),
        ("9999-11", date(9999, 11, 1)),
    ])
    def test_months_next_to_the_edge_keep_both_neighbours(self, value, expected):
        month = parse_month(value)
        assert month == expected
        shift_month(month, -1)
        shift_month(month, 1)
        month_bounds(month)


class TestFetchMonthlySummary:
    """Aggregation over a cursor."""

    def test_net_is_income_minus_expenses(self):
        cur = MagicMock()
        cur.fetchone.side_effect = [{'total': Decimal('1000.50')}, {'total': Decimal('250.25')}]

        summary = fetch_monthly_summary(cur, 9, date(2024, 6, 18))

        assert summary == {'income': Decimal('1000.50'), 'expenses': Decimal('250.25'),
                           'net': Decimal('750.25')}
        for call in cur.execute.call_args_list:
            assert call.args[1] == (9, date(2024, 6, 1), date(2024, 6, 30))

    def test_empty_month_is_zero(self):
        cur = MagicMock()
        cur.fetchone.side_effect = [{'total': 0}, {'total': 0}]
        assert fetch_monthly_summary(cur, 1, date(2024, 6, 1)) == zero_summary()


class TestTransactions:
    """Building the transaction list and CSV."""

    def test_client_label(self):
        clients = {1: 'Client A'}
        assert client_label(1, clients) == 'Client A'
        assert client_label(None, clients) == '-'
        assert client_label(2, clients) == 'Unknown Client'

    def test_build_transactions_newest_first(self):
        incomes = [
            {'id': 1, 'description': 'Jan', 'amount': Decimal('10'), 'date': date(2024, 1, 1), 'client_id': 1},
            {'id': 2, 'description': None, 'amount': Decimal('20'), 'date': date(2024, 3, 1), 'client_id': 99},
        ]
        expenses = [
            {'id': 3, 'description': 'Feb', 'amount': Decimal('5'), 'date': date(2024, 2, 1)},
        ]

        transactions = build_transactions(incomes, expenses, {1: 'Client A'}, 'EUR')

        assert [t['id'] for t in transactions] == [2, 3, 1]
        assert transactions[0]['category'] == 'Unknown Client'
        assert transactions[0]['description'] == ''
        assert transactions[1]['type'] == 'expense'
        assert transactions[1]['category'] == '-'
        assert all(t['currency'] == 'EUR' for t in transactions)

    def test_format_csv_amount(self):
        assert format_csv_amount(Decimal('100.00')) == '100'
        assert format_csv_amount(Decimal('25.50')) == '25.5'
        assert format_csv_amount(Decimal('1200.00')) == '1200'
        assert format_csv_amount(Decimal('0.05')) == '0.05'
        assert format_csv_amount(7) == '7'

    def test_csv_empty_list_is_header_only(self):
        assert transactions_to_csv([]) == "Type,Date,Category,Description,Amount,Currency\n"

    def test_csv_rows_in_list_order(self):
        transactions = [
            {'type': 'income', 'date': date(2024, 1, 5), 'category': 'Client A',
             'description': 'Payment', 'amount': 100, 'currency': 'USD'},
            {'type': 'expense', 'date': date(2024, 1, 6), 'category': '-',
             'description': 'Supplies', 'amount': 25, 'currency': 'USD'},
        ]

        assert transactions_to_csv(transactions) == (
            "Type,Date,Category,Description,Amount,Currency\n"
            "income,2024-01-05,Client A,Payment,100,USD\n"
            "expense,2024-01-06,-,Supplies,25,USD\n"
        )

    def test_csv_does_not_escape_commas(self):
        transactions = [
            {'type': 'expense', 'date': date(2024, 1, 6), 'category': '-',
             'description': 'Pens, paper', 'amount': Decimal('3.20'), 'currency': 'GBP'},
        ]
        row = transactions_to_csv(transactions).splitlines()[1]
        assert row == "expense,2024-01-06,-,Pens, paper,3.2,GBP"


class TestMoneyFilter:
    """Jinja currency filter."""

    def test_money_formats(self):
        from app import money_filter
        assert money_filter(Decimal('1234.5')) == '$1,234.50'
        assert money_filter(Decimal('-150'), 'GBP') == '-£150.00'
        assert money_filter(None, 'EUR') == '€0.00'


class TestInitDb:
    """Schema bootstrap script."""

    def test_executes_each_statement(self, tmp_path):
        schema = tmp_path / 'schema.sql'
        schema.write_text("CREATE TABLE a (id INT);\n\nCREATE TABLE b (id INT);\n")
        conn = MagicMock()
        cursor = MagicMock()
        cursor.__enter__ = MagicMock(return_value=cursor)
        cursor.__exit__ = MagicMock(return_value=False)
        conn.cursor.return_value = cursor

        with patch('init_db.mysql.connector.connect', return_value=conn):
            from init_db import init_db
            applied = init_db(str(schema))

        assert applied == 2

        statements = [c.args[0].strip() for c in cursor.execute.call_args_list]
        assert statements == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]
        conn.commit.assert_called_once()
        conn.close.assert_called_once()

    def test_bundled_schema_has_all_tables(self):
        from init_db import SCHEMA_PATH
        with open(SCHEMA_PATH) as f:
            sql = f.read()
        for table in ('users', 'clients', 'income', 'expense'):
            assert f"CREATE TABLE IF NOT EXISTS {table} (" in sql

    def test_split_statements_skips_blank_tail(self):
        from init_db import split_statements
        assert len(split_statements("SELECT 1;\n  \nSELECT 2;\n\n")) == 2
