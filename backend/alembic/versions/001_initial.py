"""initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Creates users, businesses and transactions with all indexes and constraints.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = '001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""
    conn = op.get_bind()

    # Users table
    conn.execute(sa.text("""CREATE TABLE users
                            (
                                id              INTEGER PRIMARY KEY,
                                username        VARCHAR(50)  NOT NULL,
                                email           VARCHAR(255) NOT NULL,
                                hashed_password VARCHAR      NOT NULL,
                                is_active       BOOLEAN      NOT NULL,
                                created_at      DATETIME     NOT NULL,
                                updated_at      DATETIME     NOT NULL
                            )"""))
    conn.execute(sa.text("CREATE UNIQUE INDEX ix_users_username ON users (username)"))
    conn.execute(sa.text("CREATE UNIQUE INDEX ix_users_email ON users (email)"))

    # Businesses table (one per user)
    conn.execute(sa.text("""CREATE TABLE businesses
                            (
                                id               INTEGER PRIMARY KEY,
                                user_id          INTEGER        NOT NULL,
                                name             VARCHAR(100)   NOT NULL,
                                description      TEXT           NOT NULL,
                                industry         VARCHAR(100)   NOT NULL,
                                founded_date     DATE,
                                logo             TEXT           NOT NULL,
                                total_investment NUMERIC(18, 2) NOT NULL,
                                total_expenses   NUMERIC(18, 2) NOT NULL,
                                total_sales      NUMERIC(18, 2) NOT NULL,
                                created_at       DATETIME       NOT NULL,
                                updated_at       DATETIME       NOT NULL,
                                CONSTRAINT ck_business_total_investment_non_negative CHECK (total_investment >= 0),
                                CONSTRAINT ck_business_total_expenses_non_negative CHECK (total_expenses >= 0),
                                CONSTRAINT ck_business_total_sales_non_negative CHECK (total_sales >= 0),
                                UNIQUE (user_id),
                                FOREIGN KEY (user_id) REFERENCES users (id)
                            )"""))
    conn.execute(sa.text("CREATE INDEX idx_businesses_user_created ON businesses (user_id, created_at)"))

    # Transactions table (ledger)
    conn.execute(sa.text("""CREATE TABLE transactions
                            (
                                id          INTEGER PRIMARY KEY,
                                business_id INTEGER        NOT NULL,
                                type        VARCHAR(16)    NOT NULL,
                                amount      NUMERIC(18, 2) NOT NULL,
                                description TEXT           NOT NULL,
                                date        DATE           NOT NULL,
                                category    VARCHAR(100)   NOT NULL,
                                created_at  DATETIME       NOT NULL,
                                updated_at  DATETIME       NOT NULL,
                                CONSTRAINT ck_transaction_amount_positive CHECK (amount > 0),
                                FOREIGN KEY (business_id) REFERENCES businesses (id)
                            )"""))
    conn.execute(sa.text("CREATE INDEX ix_transactions_business_id ON transactions (business_id)"))
    conn.execute(sa.text("CREATE INDEX idx_transactions_business_date ON transactions (business_id, date)"))
    conn.execute(sa.text("CREATE INDEX idx_transactions_business_type ON transactions (business_id, type)"))
    conn.execute(sa.text("CREATE INDEX idx_transactions_business_category ON transactions (business_id, category)"))


def downgrade() -> None:
    """Drop all tables."""
    conn = op.get_bind()
    for table in ['transactions', 'businesses', 'users']:
        conn.execute(sa.text(f"DROP TABLE IF EXISTS {table}"))
