"""Initial reconciliation store schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from docrecon.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column("hash", sa.String(128), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("path", sa.String(1024), nullable=False),
        sa.Column("document_type", sa.String(64), nullable=False),
        sa.Column("canonical_source", sa.String(128), nullable=False),
        sa.Column("last_modified", UTCDateTime(), nullable=False),
        sa.Column("version", sa.String(32), nullable=True),
        sa.Column("repository", sa.String(256), nullable=False),
        sa.Column("branch", sa.String(256), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("hash", name=op.f("pk_documents")),
    )
    op.create_index("ix_documents_document_type", "documents", ["document_type"])

    op.create_table(
        "edges",
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("from_hash", sa.String(256), nullable=False),
        sa.Column("to_hash", sa.String(128), nullable=False),
        sa.Column("edge_type", sa.String(32), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.Column("edge_metadata", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_edges")),
    )
    op.create_index("ix_edges_from_hash", "edges", ["from_hash"])
    op.create_index("ix_edges_to_hash", "edges", ["to_hash"])

    op.create_table(
        "conflicts",
        sa.Column("id", sa.String(256), nullable=False),
        sa.Column("conflict_type", sa.String(32), nullable=False),
        sa.Column("document_hashes", sa.JSON(), nullable=False),
        sa.Column("detected_at", UTCDateTime(), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.Column("suggested_strategy", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_conflicts")),
    )

    op.create_table(
        "resolutions",
        sa.Column("conflict_id", sa.String(256), nullable=False),
        sa.Column("strategy", sa.String(32), nullable=False),
        sa.Column("selected_hash", sa.String(128), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.Column("requires_approval", sa.Boolean(), nullable=False),
        sa.Column("reasoning", sa.Text(), nullable=False),
        sa.Column("timestamp", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("conflict_id", name=op.f("pk_resolutions")),
    )


def downgrade() -> None:
    op.drop_table("resolutions")
    op.drop_table("conflicts")
    op.drop_index("ix_edges_to_hash", table_name="edges")
    op.drop_index("ix_edges_from_hash", table_name="edges")
    op.drop_table("edges")
    op.drop_index("ix_documents_document_type", table_name="documents")
    op.drop_table("documents")
