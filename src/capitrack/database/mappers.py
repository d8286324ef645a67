"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from capitrack.domain import entities as domain
from capitrack.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Investment as ORMInvestment,
    Project as ORMProject,
    RecurringRule as ORMRecurringRule,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=orm_account.type,
        currency_code=orm_account.currency_code,
        initial_balance=orm_account.initial_balance,
        current_balance=orm_account.current_balance,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        kind=orm_category.kind,
        is_system_generated=orm_category.is_system_generated,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        amount=orm_transaction.amount,
        currency_code=orm_transaction.currency_code,
        type=orm_transaction.type,
        date=orm_transaction.date,
        account_id=orm_transaction.account_id,
        transfer_to_account_id=orm_transaction.transfer_to_account_id,
        target_amount=orm_transaction.target_amount,
        category_id=orm_transaction.category_id,
        investment_id=orm_transaction.investment_id,
        project_id=orm_transaction.project_id,
        note=orm_transaction.note,
        merchant=orm_transaction.merchant,
        source=orm_transaction.source,
        created_at=orm_transaction.created_at,
    )


def investment_to_domain(orm_investment: ORMInvestment) -> domain.Investment:
    """Convert SQLAlchemy Investment model to domain Investment entity."""
    return domain.Investment(
        id=orm_investment.id,
        name=orm_investment.name,
        type=orm_investment.type,
        status=orm_investment.status,
        initial_amount=orm_investment.initial_amount,
        currency_code=orm_investment.currency_code,
        start_date=orm_investment.start_date,
        current_amount=orm_investment.current_amount,
        purchase_price=orm_investment.purchase_price,
        salvage_value=orm_investment.salvage_value,
        useful_life=orm_investment.useful_life,
        depreciation_type=orm_investment.depreciation_type,
        end_date=orm_investment.end_date,
        interest_rate=orm_investment.interest_rate,
        project_id=orm_investment.project_id,
        created_at=orm_investment.created_at,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        type=orm_project.type,
        status=orm_project.status,
        start_date=orm_project.start_date,
        end_date=orm_project.end_date,
        total_budget=orm_project.total_budget,
        currency_code=orm_project.currency_code,
        owner=orm_project.owner,
        description=orm_project.description,
        created_at=orm_project.created_at,
    )


def recurring_rule_to_domain(orm_rule: ORMRecurringRule) -> domain.RecurringRule:
    """Convert SQLAlchemy RecurringRule model to domain RecurringRule entity."""
    return domain.RecurringRule(
        id=orm_rule.id,
        name=orm_rule.name,
        amount=orm_rule.amount,
        currency_code=orm_rule.currency_code,
        frequency=orm_rule.frequency,
        start_date=orm_rule.start_date,
        interval=orm_rule.interval,
        end_date=orm_rule.end_date,
        is_active=orm_rule.is_active,
        category_id=orm_rule.category_id,
        account_id=orm_rule.account_id,
        project_id=orm_rule.project_id,
        created_at=orm_rule.created_at,
    )
