"""
Freelance Finance Tracker Test Suite

This package contains the tests for the finance tracker application:

- test_auth.py: Authentication tests (signup, login, logout, password reset)
- test_clients.py: Client CRUD tests
- test_income.py: Income CRUD tests with client references
- test_expenses.py: Expense CRUD tests
- test_dashboard.py: Monthly summary, month navigation and view tests
- test_export.py: CSV export tests
- test_utils.py: Validation, month arithmetic and transaction helper tests
- test_security.py: Security-focused tests (CSRF, headers, delete confirmation)

Run all tests:
    pytest tests/

Run specific test file:
    pytest tests/test_income.py

Run with verbose output:
    pytest tests/ -v
"""
