"""Initial schema: users (admin accounts), jelovnik (menu rows), lokacije (locations).

Revision ID: 001
Revises:
Create Date: 2026-10-18

Menu rows are addressed by external_id; the integer id is internal only.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE TYPE user_role_enum AS ENUM ('admin')")

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", postgresql.ENUM("admin", name="user_role_enum", create_type=False), nullable=False, server_default="admin"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "jelovnik",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(64), nullable=False),
        sa.Column("collection", sa.String(128), nullable=False),
        sa.Column("collection_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("product_name_en", sa.String(255), nullable=True),
        sa.Column("product_name_de", sa.String(255), nullable=True),
        sa.Column("product_name_tr", sa.String(255), nullable=True),
        sa.Column("description_hr", sa.Text(), nullable=True),
        sa.Column("description_en", sa.Text(), nullable=True),
        sa.Column("description_de", sa.Text(), nullable=True),
        sa.Column("description_tr", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("size", sa.String(64), nullable=True),
        sa.Column("image", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_jelovnik_external_id", "jelovnik", ["external_id"], unique=True)
    op.create_index("ix_jelovnik_collection", "jelovnik", ["collection"])

    op.create_table(
        "lokacije",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lokacija", sa.String(255), nullable=False),
        sa.Column("adresa", sa.String(255), nullable=False),
        sa.Column("aktivna", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("radno_vrijeme", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("lokacije")
    op.drop_index("ix_jelovnik_collection", table_name="jelovnik")
    op.drop_index("ix_jelovnik_external_id", table_name="jelovnik")
    op.drop_table("jelovnik")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.execute("DROP TYPE user_role_enum")
